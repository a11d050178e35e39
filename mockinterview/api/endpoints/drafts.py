"""
Draft API endpoints

Handles the single resumable draft:
- Inspecting it
- Resuming it
- Discarding it
"""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from mockinterview.api.dependencies import get_orchestrator

router = APIRouter()


# ============================================================================
# RESPONSE MODELS
# ============================================================================

class DraftResponse(BaseModel):
    """Summary of the stored draft."""
    session_id: str
    role: str
    difficulty: str
    current_question_index: int
    question_count: int
    answered: int
    saved_at: float


class ResumeResponse(BaseModel):
    """Response after resuming the draft."""
    session_id: str
    state: str
    current_question_index: int
    questions: list[str]
    current_transcript: str


# ============================================================================
# ENDPOINTS
# ============================================================================

@router.get("/current", response_model=DraftResponse)
async def get_draft() -> DraftResponse:
    orchestrator = get_orchestrator()
    draft = await orchestrator.load_draft()

    if not draft:
        raise HTTPException(status_code=404, detail="No draft saved")

    return DraftResponse(
        session_id=draft.session.session_id,
        role=draft.session.config.role,
        difficulty=draft.session.config.difficulty,
        current_question_index=draft.current_question_index,
        question_count=draft.session.question_count,
        answered=sum(1 for answer in draft.answers.values() if answer),
        saved_at=draft.saved_at,
    )


@router.post("/current/resume", response_model=ResumeResponse)
async def resume_draft() -> ResumeResponse:
    """
    Reinstate the draft as an active interview.

    Recording always restarts from idle at the saved question.
    """
    orchestrator = get_orchestrator()
    progress = await orchestrator.resume_draft()

    if not progress:
        raise HTTPException(status_code=404, detail="No draft saved")

    return ResumeResponse(
        session_id=progress.session.session_id,
        state="idle",
        current_question_index=progress.current_question_index,
        questions=progress.session.questions,
        current_transcript=progress.current_transcript,
    )


@router.delete("/current")
async def discard_draft() -> dict[str, bool]:
    orchestrator = get_orchestrator()
    discarded = await orchestrator.discard_draft()
    return {"discarded": discarded}
