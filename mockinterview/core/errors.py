"""
Exception types raised by the interview core.
"""


class InterviewError(Exception):
    """Base class for interview core errors."""
    pass


class StateTransitionError(InterviewError):
    """Raised when an invalid state transition is attempted."""
    pass


class DevicePermissionError(InterviewError):
    """Camera or microphone access was denied or is unavailable."""
    pass


class TranscriptionError(InterviewError):
    """Error reported by the transcription service.

    ``code`` mirrors the speech engine's error identifiers
    (``no-speech``, ``network``, ``not-allowed`` ...).
    """

    # Transient codes that never interrupt a recording
    IGNORED_CODES = frozenset({"no-speech"})

    def __init__(self, code: str, message: str | None = None):
        self.code = code
        super().__init__(message or f"Transcription error: {code}")

    @property
    def is_transient(self) -> bool:
        return self.code in self.IGNORED_CODES

    def user_message(self) -> str:
        """Status line shown to the candidate."""
        if self.code == "network":
            return "Network issue with mic. Please try again."
        if self.code in ("not-allowed", "service-not-allowed"):
            return "Microphone access denied."
        return "Mic error. Please try again."


class QuestionGenerationError(InterviewError):
    """The language model did not return usable questions."""
    pass


class EvaluationError(InterviewError):
    """The evaluation service failed or returned a malformed response."""
    pass
