"""
Main API router for MockInterview Proctor

Aggregates all API routes and provides the main application router.
"""

from fastapi import APIRouter

from mockinterview.api.endpoints import drafts, interview, sessions

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(
    interview.router,
    prefix="/interview",
    tags=["Interview"]
)

api_router.include_router(
    sessions.router,
    prefix="/sessions",
    tags=["Sessions"]
)

api_router.include_router(
    drafts.router,
    prefix="/drafts",
    tags=["Drafts"]
)
