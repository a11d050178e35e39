"""
Browser-fed sensor adapters.

The candidate's browser owns the camera, the microphone and the Web Speech
engine. It pushes frames, loudness readings and recognition results over
the interview WebSocket; these adapters turn that stream into the
MediaCapture and TranscriptionService interfaces the recorder expects.
"""

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Sequence

from mockinterview.core.errors import DevicePermissionError, TranscriptionError
from mockinterview.core.loudness import average_level
from mockinterview.models.monitoring import TranscriptEvent
from mockinterview.sensors.base import EndHandler, ErrorHandler, ResultHandler

logger = logging.getLogger(__name__)


SendFunc = Callable[[dict[str, Any]], Awaitable[None]]


class ClientMediaStream:
    """
    Readings reported by the browser, handed out the way a local device
    would be sampled.

    A loudness reading is consumed by the sample that reads it. A frame
    counts as the camera's current image only for ``max_frame_age``
    seconds after it arrives; after that the camera is treated as silent
    until the browser sends a new one.
    """

    def __init__(self, permission_timeout: float = 10.0, max_frame_age: float = 2.0):
        self.permission_timeout = permission_timeout
        self.max_frame_age = max_frame_age

        self._permission = asyncio.Event()
        self._granted = False
        self._denial_reason: str | None = None

        self.is_open = False
        self.close_count = 0
        self._latest_frame: str | None = None
        self._frame_received_at = 0.0
        self._pending_level: float | None = None

    def report_permission(self, granted: bool, reason: str | None = None) -> None:
        """Record the outcome of the browser's getUserMedia call."""
        self._granted = granted
        self._denial_reason = reason
        self._permission.set()

    async def open(self) -> None:
        try:
            await asyncio.wait_for(self._permission.wait(), timeout=self.permission_timeout)
        except asyncio.TimeoutError:
            raise DevicePermissionError("Camera and microphone were not made available in time")

        if not self._granted:
            raise DevicePermissionError(
                self._denial_reason or "Camera and microphone access denied"
            )
        self.is_open = True
        logger.info("Client media stream opened")

    async def close(self) -> None:
        if not self.is_open:
            return
        self.is_open = False
        self.close_count += 1
        self._latest_frame = None
        self._pending_level = None
        logger.info("Client media stream closed")

    def push_frame(self, image_b64: str) -> None:
        if self.is_open and image_b64:
            self._latest_frame = image_b64
            self._frame_received_at = time.monotonic()

    def push_audio_level(
        self,
        level: float | None = None,
        bins: Sequence[float] | None = None,
    ) -> None:
        """Accept either a precomputed level or the raw analyser bins."""
        if not self.is_open:
            return
        if bins is not None:
            level = average_level(bins)
        if level is not None:
            self._pending_level = float(level)

    async def capture_frame(self) -> str | None:
        if not self.is_open or self._latest_frame is None:
            return None
        if time.monotonic() - self._frame_received_at > self.max_frame_age:
            logger.debug("Latest client frame is stale")
            self._latest_frame = None
            return None
        return self._latest_frame

    async def sample_loudness(self) -> float | None:
        if not self.is_open:
            return None
        level, self._pending_level = self._pending_level, None
        return level


class ClientTranscriptionStream:
    """
    Relays start/stop commands to the browser's speech engine and feeds its
    results back into the bound handlers.

    Each recognition session gets a stream number that is sent with the
    start command; the browser may echo it back as ``stream`` on inbound
    messages. A stopped session keeps draining until the browser reports its
    end, because the engine finalizes pending words after being stopped.
    Results are dropped once a newer session has been started or the
    draining one has ended. Errors only count while a session is live.
    """

    def __init__(self, send: SendFunc):
        self._send = send
        self.is_active = False
        self.is_draining = False
        self.stream_id = 0
        self.starts = 0

        self._on_result: ResultHandler | None = None
        self._on_end: EndHandler | None = None
        self._on_error: ErrorHandler | None = None

    def bind(
        self,
        on_result: ResultHandler,
        on_end: EndHandler,
        on_error: ErrorHandler,
    ) -> None:
        self._on_result = on_result
        self._on_end = on_end
        self._on_error = on_error

    async def start(self) -> None:
        if self.is_active:
            return
        # Supersedes a session that is still draining
        self.is_draining = False
        self.stream_id += 1
        await self._send({"type": "transcription", "action": "start", "stream": self.stream_id})
        self.is_active = True
        self.starts += 1

    async def stop(self) -> None:
        if not self.is_active:
            return
        self.is_active = False
        self.is_draining = True
        await self._send({"type": "transcription", "action": "stop", "stream": self.stream_id})

    def _accepts(self, stream: int | None) -> bool:
        if stream is not None and stream != self.stream_id:
            return False
        return self.is_active or self.is_draining

    # =========================================================================
    # INBOUND (from the browser)
    # =========================================================================

    async def feed_result(
        self,
        final_segments: list[str],
        interim: str | None = None,
        stream: int | None = None,
    ) -> None:
        if not self._accepts(stream) or self._on_result is None:
            return
        await self._on_result(TranscriptEvent(final_segments=final_segments, interim=interim))

    async def feed_end(self, stream: int | None = None) -> None:
        if not self._accepts(stream):
            return
        # The browser's recognizer has stopped, either on its own or after a stop command
        self.is_active = False
        self.is_draining = False
        if self._on_end is not None:
            await self._on_end()

    async def feed_error(
        self,
        code: str,
        message: str | None = None,
        stream: int | None = None,
    ) -> None:
        if not self.is_active or not self._accepts(stream) or self._on_error is None:
            return
        await self._on_error(TranscriptionError(code, message))
