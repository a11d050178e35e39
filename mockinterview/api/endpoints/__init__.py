"""
API endpoint modules for MockInterview Proctor
"""

from mockinterview.api.endpoints import drafts, interview, sessions

__all__ = ["drafts", "interview", "sessions"]
