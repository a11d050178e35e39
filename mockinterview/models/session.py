"""
Interview session models for MockInterview Proctor
"""

import time
from uuid import uuid4

from pydantic import BaseModel, Field

from mockinterview.models.evaluation import EvaluationResult
from mockinterview.models.monitoring import IncidentCategory, MalpracticeIncident


def _now_ms() -> int:
    return int(time.time() * 1000)


class InterviewConfig(BaseModel):
    """User's interview configuration."""

    role: str = Field(..., min_length=1, description="Target role, e.g. 'Backend Engineer'")
    difficulty: str = Field(default="Mid-Level", min_length=1, description="Seniority / difficulty")


class InterviewSession(BaseModel):
    """An interview session: questions, captured evidence, and evaluation."""

    # Identification
    session_id: str = Field(default_factory=lambda: f"session_{_now_ms()}_{uuid4().hex[:8]}")
    created_at: int = Field(default_factory=_now_ms, description="Epoch milliseconds")

    # Setup
    config: InterviewConfig
    questions: list[str] = Field(default_factory=list)

    # Filled in when the interview completes
    answers: list[str] = Field(default_factory=list)
    snapshots: dict[int, list[str]] = Field(default_factory=dict)
    malpractice_logs: dict[int, list[MalpracticeIncident]] = Field(default_factory=dict)

    evaluation: EvaluationResult | None = None

    @property
    def question_count(self) -> int:
        return len(self.questions)

    def has_visual_malpractice(self) -> bool:
        """Whether any visual incident was logged for this session."""
        return any(
            incident.category == IncidentCategory.VISUAL
            for incidents in self.malpractice_logs.values()
            for incident in incidents
        )
