"""
Persistence for drafts and completed sessions.
"""

from mockinterview.storage.session_store import SessionStore

__all__ = ["SessionStore"]
