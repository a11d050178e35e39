"""
Monitoring models for MockInterview Proctor

Recording lifecycle, malpractice incidents, and the payloads produced by
the sensor adapters and the judgment service.
"""

import time
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


LOUD_NOISE_MESSAGE = "Loud background noise detected."


class RecordingState(str, Enum):
    """Recording lifecycle for the current question."""

    IDLE = "idle"
    RECORDING = "recording"
    PAUSED = "paused"


class IncidentCategory(str, Enum):
    """Kind of malpractice incident."""

    VISUAL = "visual"  # Other person, device, suspicious gaze
    AUDIO = "audio"    # Background noise


class MalpracticeIncident(BaseModel):
    """A single entry in a question's malpractice log."""

    category: IncidentCategory
    message: str
    recorded_at: float = Field(default_factory=time.time)

    @classmethod
    def loud_noise(cls) -> "MalpracticeIncident":
        """Incident logged when the microphone is too loud."""
        return cls(category=IncidentCategory.AUDIO, message=LOUD_NOISE_MESSAGE)

    @classmethod
    def visual(cls, reason: str) -> "MalpracticeIncident":
        """Incident logged when a visual alert is raised."""
        return cls(category=IncidentCategory.VISUAL, message=reason)


class FrameJudgment(BaseModel):
    """Verdict returned by the judgment service for one frame."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    malpractice_detected: bool = False
    reason: str | None = None
    other_person: bool = False
    device_detected: bool = False
    suspicious_gaze: bool = False
    delivery_feedback: str | None = None

    @property
    def is_unambiguous(self) -> bool:
        """Other people and devices trigger an alert on a single frame."""
        return self.other_person or self.device_detected

    @property
    def flags_malpractice(self) -> bool:
        return (
            self.malpractice_detected
            or self.other_person
            or self.device_detected
            or self.suspicious_gaze
        )

    def alert_reason(self) -> str:
        """Reason to log, falling back to a message derived from the flags."""
        if self.reason and self.reason.strip():
            return self.reason.strip()
        if self.other_person:
            return "Another person appears to be present."
        if self.device_detected:
            return "An unauthorized device appears to be in use."
        return "Gaze repeatedly directed away from the screen."


class TranscriptEvent(BaseModel):
    """One result event from the transcription service."""

    final_segments: list[str] = Field(default_factory=list)
    interim: str | None = None
