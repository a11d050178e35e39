"""
Data models and schemas for MockInterview Proctor

Contains Pydantic models for:
- Interview sessions and configuration
- Recording state and malpractice incidents
- In-progress state, drafts and completion bundles
- Evaluation results
"""

from mockinterview.models.session import InterviewConfig, InterviewSession
from mockinterview.models.monitoring import (
    LOUD_NOISE_MESSAGE,
    FrameJudgment,
    IncidentCategory,
    MalpracticeIncident,
    RecordingState,
    TranscriptEvent,
)
from mockinterview.models.progress import Draft, InterviewBundle, InterviewProgress
from mockinterview.models.evaluation import (
    BodyLanguageAnalysis,
    EvaluationCriterion,
    EvaluationResult,
    MalpracticeReport,
    VerbalAnalysis,
)

__all__ = [
    # Session
    "InterviewConfig",
    "InterviewSession",
    # Monitoring
    "LOUD_NOISE_MESSAGE",
    "FrameJudgment",
    "IncidentCategory",
    "MalpracticeIncident",
    "RecordingState",
    "TranscriptEvent",
    # Progress
    "Draft",
    "InterviewBundle",
    "InterviewProgress",
    # Evaluation
    "BodyLanguageAnalysis",
    "EvaluationCriterion",
    "EvaluationResult",
    "MalpracticeReport",
    "VerbalAnalysis",
]
