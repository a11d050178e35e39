"""
API layer for MockInterview Proctor

Contains FastAPI routers for:
- Interview setup and the live interview WebSocket
- Past sessions
- Drafts
"""

from mockinterview.api.router import api_router

__all__ = ["api_router"]
