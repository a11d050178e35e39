"""
In-progress interview state for MockInterview Proctor

InterviewProgress is the single owned store for one running interview.
Every component writes into it by reference; the autosave manager only
ever reads a deep copy through to_draft().
"""

import time

from pydantic import BaseModel, Field

from mockinterview.models.monitoring import IncidentCategory, MalpracticeIncident
from mockinterview.models.session import InterviewSession


class Draft(BaseModel):
    """Serializable, resumable snapshot of an in-progress interview."""

    session: InterviewSession
    current_question_index: int = Field(default=0, ge=0)
    answers: dict[int, str] = Field(default_factory=dict)
    snapshots: dict[int, list[str]] = Field(default_factory=dict)
    malpractice_logs: dict[int, list[MalpracticeIncident]] = Field(default_factory=dict)
    current_transcript: str = ""
    saved_at: float = Field(default_factory=time.time)


class InterviewBundle(BaseModel):
    """Everything handed to the evaluation service when an interview ends.

    Every question index has an entry: unanswered questions map to "" and
    questions without evidence map to an empty list.
    """

    session: InterviewSession
    answers: list[str]
    snapshots: dict[int, list[str]]
    malpractice_logs: dict[int, list[MalpracticeIncident]]

    def has_visual_malpractice(self) -> bool:
        return any(
            incident.category == IncidentCategory.VISUAL
            for incidents in self.malpractice_logs.values()
            for incident in incidents
        )

    def has_audio_issues(self) -> bool:
        return any(
            incident.category == IncidentCategory.AUDIO
            for incidents in self.malpractice_logs.values()
            for incident in incidents
        )

    def incidents(self) -> list[MalpracticeIncident]:
        return [
            incident
            for index in sorted(self.malpractice_logs)
            for incident in self.malpractice_logs[index]
        ]


class InterviewProgress(BaseModel):
    """Per-session keyed storage for answers, snapshots and incidents."""

    session: InterviewSession
    current_question_index: int = Field(default=0, ge=0)
    answers: dict[int, str] = Field(default_factory=dict)
    snapshots: dict[int, list[str]] = Field(default_factory=dict)
    malpractice_logs: dict[int, list[MalpracticeIncident]] = Field(default_factory=dict)
    current_transcript: str = ""

    # Bumped on every mutation
    version: int = 0

    @property
    def question_count(self) -> int:
        return self.session.question_count

    @property
    def current_question(self) -> str | None:
        if self.current_question_index < self.question_count:
            return self.session.questions[self.current_question_index]
        return None

    def is_last_question(self) -> bool:
        return self.current_question_index >= self.question_count - 1

    # =========================================================================
    # MUTATIONS
    # =========================================================================

    def set_answer(self, index: int, text: str) -> None:
        self.answers[index] = text
        self.version += 1

    def set_transcript(self, text: str) -> None:
        self.current_transcript = text
        self.version += 1

    def append_snapshot(self, index: int, image_b64: str) -> None:
        self.snapshots.setdefault(index, []).append(image_b64)
        self.version += 1

    def log_incident(self, index: int, incident: MalpracticeIncident) -> None:
        self.malpractice_logs.setdefault(index, []).append(incident)
        self.version += 1

    def clear_question(self, index: int) -> None:
        """Reset the answer and incident log of a question before re-recording."""
        self.answers[index] = ""
        self.malpractice_logs[index] = []
        self.current_transcript = ""
        self.version += 1

    def advance_question(self) -> None:
        if self.is_last_question():
            raise ValueError("Already at the last question")
        self.current_question_index += 1
        self.current_transcript = ""
        self.version += 1

    # =========================================================================
    # VIEWS
    # =========================================================================

    def to_draft(self) -> Draft:
        """Deep-copied snapshot; later mutations do not leak into it."""
        return Draft(
            session=self.session.model_copy(deep=True),
            current_question_index=self.current_question_index,
            answers=dict(self.answers),
            snapshots={index: list(images) for index, images in self.snapshots.items()},
            malpractice_logs={
                index: [incident.model_copy() for incident in incidents]
                for index, incidents in self.malpractice_logs.items()
            },
            current_transcript=self.current_transcript,
        )

    @classmethod
    def from_draft(cls, draft: Draft) -> "InterviewProgress":
        return cls(
            session=draft.session,
            current_question_index=draft.current_question_index,
            answers=dict(draft.answers),
            snapshots={index: list(images) for index, images in draft.snapshots.items()},
            malpractice_logs={
                index: list(incidents) for index, incidents in draft.malpractice_logs.items()
            },
            current_transcript=draft.current_transcript,
        )

    def to_bundle(self) -> InterviewBundle:
        indices = range(self.question_count)
        return InterviewBundle(
            session=self.session.model_copy(deep=True),
            answers=[self.answers.get(index) or "" for index in indices],
            snapshots={index: list(self.snapshots.get(index, [])) for index in indices},
            malpractice_logs={
                index: list(self.malpractice_logs.get(index, [])) for index in indices
            },
        )
