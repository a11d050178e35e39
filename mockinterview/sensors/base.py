"""
Sensor adapter interfaces.

The interview core never touches devices or speech engines directly; it
talks to these protocols so that browser-fed streams, local devices and
test fakes are interchangeable.
"""

from typing import TYPE_CHECKING, Awaitable, Callable, Protocol, runtime_checkable

from mockinterview.models.monitoring import FrameJudgment, TranscriptEvent

if TYPE_CHECKING:
    from mockinterview.core.errors import TranscriptionError


ResultHandler = Callable[[TranscriptEvent], Awaitable[None]]
EndHandler = Callable[[], Awaitable[None]]
ErrorHandler = Callable[["TranscriptionError"], Awaitable[None]]


@runtime_checkable
class TranscriptionService(Protocol):
    """Continuous speech-to-text.

    ``start`` begins a recognition stream; the service then reports results,
    the end of the stream (it may end on its own, e.g. after silence) and
    errors through the bound handlers. Stopping a stopped service is a no-op.
    """

    def bind(
        self,
        on_result: ResultHandler,
        on_end: EndHandler,
        on_error: ErrorHandler,
    ) -> None: ...

    async def start(self) -> None: ...

    async def stop(self) -> None: ...


@runtime_checkable
class MediaCapture(Protocol):
    """Camera and microphone pair, acquired once per interview.

    ``open`` raises DevicePermissionError when access is denied or no device
    is available. Frames are base64-encoded JPEGs; loudness is the mean of
    the analyser's byte-frequency bins (0-255).
    """

    async def open(self) -> None: ...

    async def close(self) -> None: ...

    async def capture_frame(self) -> str | None: ...

    async def sample_loudness(self) -> float | None: ...


@runtime_checkable
class FrameJudge(Protocol):
    """Judges a single frame for malpractice. Returns None on any failure."""

    async def analyze_frame(self, image_b64: str) -> FrameJudgment | None: ...
