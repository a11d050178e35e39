"""
Configuration for MockInterview Proctor.
"""

from mockinterview.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
