"""
Past session API endpoints

Handles:
- Listing completed sessions
- Session retrieval
- Session deletion
"""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from mockinterview.api.dependencies import get_orchestrator
from mockinterview.models.session import InterviewSession

router = APIRouter()


# ============================================================================
# RESPONSE MODELS
# ============================================================================

class SessionSummaryResponse(BaseModel):
    """Condensed session for the history list."""
    session_id: str
    created_at: int
    role: str
    difficulty: str
    question_count: int
    overall_score: int | None = None
    has_malpractice: bool = False


# ============================================================================
# ENDPOINTS
# ============================================================================

@router.get("", response_model=list[SessionSummaryResponse])
async def list_sessions() -> list[SessionSummaryResponse]:
    """Completed sessions, newest first."""
    orchestrator = get_orchestrator()
    sessions = await orchestrator.list_sessions()

    return [
        SessionSummaryResponse(
            session_id=session.session_id,
            created_at=session.created_at,
            role=session.config.role,
            difficulty=session.config.difficulty,
            question_count=session.question_count,
            overall_score=session.evaluation.overall_score if session.evaluation else None,
            has_malpractice=session.has_visual_malpractice(),
        )
        for session in sessions
    ]


@router.get("/{session_id}", response_model=InterviewSession)
async def get_session(session_id: str) -> InterviewSession:
    """Full session with answers, evidence and evaluation."""
    orchestrator = get_orchestrator()
    session = await orchestrator.get_past_session(session_id)

    if not session:
        raise HTTPException(status_code=404, detail="Session not found")

    return session


@router.delete("/{session_id}")
async def delete_session(session_id: str) -> dict[str, str]:
    orchestrator = get_orchestrator()

    if not await orchestrator.delete_session(session_id):
        raise HTTPException(status_code=404, detail="Session not found")

    return {"status": "deleted", "session_id": session_id}
