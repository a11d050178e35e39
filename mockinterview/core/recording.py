"""
Recording State Machine - conductor of the live interview.

Owns the idle/recording/paused lifecycle for the current question and
decides which sensors and periodic jobs run:

    idle ──start──▶ recording ──pause──▶ paused
      ▲               │    ▲               │
      │               │    └────resume─────┘
      └─────advance───┴────────────────────┘

While recording, the transcription stream, snapshot sampler, loudness
sampler, gaze analysis loop and answer timer are active. In every other
state all of them are stopped. The total timer and the draft autosave run
for the lifetime of the open interview.
"""

import logging
from typing import Any, Awaitable, Callable

from mockinterview.config.settings import Settings, get_settings
from mockinterview.core.autosave import DraftAutosaveManager
from mockinterview.core.errors import StateTransitionError, TranscriptionError
from mockinterview.core.feedback import EventEmitter, FeedbackDisplay
from mockinterview.core.gaze_policy import GazeAlertPolicy, PolicyAction
from mockinterview.core.loudness import LoudnessMonitor
from mockinterview.core.scheduler import PeriodicTask
from mockinterview.core.timers import SessionTimers
from mockinterview.core.transcript import TranscriptAccumulator
from mockinterview.models.monitoring import MalpracticeIncident, RecordingState, TranscriptEvent
from mockinterview.models.progress import InterviewBundle, InterviewProgress
from mockinterview.sensors.base import FrameJudge, MediaCapture, TranscriptionService
from mockinterview.storage.session_store import SessionStore

logger = logging.getLogger(__name__)


MIC_RESTART_FAILED_MESSAGE = "Mic failed to restart. Please try again."
MIC_START_FAILED_MESSAGE = "Mic error. Please try again."

CompletionCallback = Callable[[InterviewBundle], Awaitable[Any]]


async def _discard(event: dict[str, Any]) -> None:
    return None


class RecordingStateMachine:
    """
    Drives one interview from the first question to the completion bundle.

    All collaborators are injected. Periodic jobs consult ``state`` at fire
    time, so a wake-up that outlives the state it was scheduled for does
    nothing.
    """

    VALID_TRANSITIONS: dict[RecordingState, list[RecordingState]] = {
        RecordingState.IDLE: [RecordingState.RECORDING],
        RecordingState.RECORDING: [RecordingState.PAUSED, RecordingState.IDLE],
        RecordingState.PAUSED: [RecordingState.RECORDING, RecordingState.IDLE],
    }

    def __init__(
        self,
        progress: InterviewProgress,
        transcription: TranscriptionService,
        media: MediaCapture,
        judge: FrameJudge,
        store: SessionStore,
        settings: Settings | None = None,
        emit: EventEmitter | None = None,
        on_complete: CompletionCallback | None = None,
    ):
        settings = settings or get_settings()
        self.settings = settings
        self.progress = progress
        self.transcription = transcription
        self.media = media
        self.judge = judge

        self._emit = emit or _discard
        self._on_complete = on_complete

        self.state = RecordingState.IDLE
        self.status_message: str | None = None
        self.is_open = False
        self.is_closed = False
        self.is_complete = False

        self.transcript = TranscriptAccumulator()
        self.transcript.restore(progress.current_transcript)
        # Question the current (or still draining) recognition stream belongs to
        self._stream_index: int | None = None

        self.gaze_policy = GazeAlertPolicy(
            window_size=settings.gaze_window_size,
            alert_threshold=settings.gaze_alert_threshold,
        )
        self.loudness = LoudnessMonitor(threshold=settings.loud_noise_threshold)
        self.feedback = FeedbackDisplay(
            emit=self._send,
            alert_seconds=settings.alert_display_seconds,
            coaching_seconds=settings.coaching_display_seconds,
        )
        self.timers = SessionTimers(
            tick_seconds=settings.timer_tick_seconds,
            is_recording=lambda: self.is_recording,
        )
        self.autosave = DraftAutosaveManager(
            store,
            progress,
            get_state=lambda: self.state,
            interval=settings.autosave_interval_seconds,
        )

        self._snapshot_task = PeriodicTask(
            "snapshot",
            settings.snapshot_interval_seconds,
            self._capture_snapshot,
            is_active=lambda: self.is_recording,
        )
        self._loudness_task = PeriodicTask(
            "loudness",
            settings.loudness_interval_seconds,
            self._sample_loudness,
            is_active=lambda: self.is_recording,
        )
        self._gaze_task = PeriodicTask(
            "gaze",
            settings.gaze_interval_seconds,
            self._analyze_gaze,
            run_immediately=True,
            is_active=lambda: self.is_recording,
        )

        self.transcription.bind(
            self._on_transcript_result,
            self._on_transcript_end,
            self._on_transcript_error,
        )

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def is_recording(self) -> bool:
        return self.state == RecordingState.RECORDING

    @property
    def samplers(self) -> list[PeriodicTask]:
        return [self._snapshot_task, self._loudness_task, self._gaze_task]

    @property
    def sensors_active(self) -> bool:
        """Whether any recording-only job is currently scheduled."""
        return any(task.is_running for task in self.samplers) or self.timers.answer_running

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    async def open(self) -> None:
        """
        Acquire the camera and microphone and start interview-wide timers.

        Raises:
            DevicePermissionError: If the devices cannot be acquired. Nothing
                is started in that case.
        """
        if self.is_closed:
            raise StateTransitionError("Recorder has already been closed")
        if self.is_open:
            return

        await self.media.open()
        self.is_open = True

        self.timers.start_total()
        self.autosave.start()
        logger.info(
            f"Interview room opened for {self.progress.session.session_id} "
            f"at question {self.progress.current_question_index + 1}/{self.progress.question_count}"
        )
        await self._send_question()

    async def start(self) -> None:
        """Begin recording an answer to the current question from scratch."""
        self._require_open()
        self._validate_transition(RecordingState.RECORDING, allowed_from=RecordingState.IDLE)

        index = self.progress.current_question_index
        self.transcript.reset()
        self.progress.clear_question(index)
        self.timers.reset_answer()
        self.status_message = None

        await self._enter_recording(reset_answer_timer=True)

    async def pause(self) -> None:
        self._validate_transition(RecordingState.PAUSED, allowed_from=RecordingState.RECORDING)
        self._set_state(RecordingState.PAUSED)
        await self._stop_sensors()
        await self._send_state()

    async def resume(self) -> None:
        """Continue recording without clearing what was captured so far."""
        self._require_open()
        self._validate_transition(RecordingState.RECORDING, allowed_from=RecordingState.PAUSED)
        self.status_message = None
        await self._enter_recording(reset_answer_timer=False)

    async def advance(self) -> InterviewBundle | None:
        """
        Commit the current answer and move on.

        Allowed from any state. On the last question the completion bundle
        is built, handed to the completion callback and returned.

        Returns:
            The InterviewBundle on completion, otherwise None
        """
        if self.is_complete:
            raise StateTransitionError("Interview is already complete")

        self._set_state(RecordingState.IDLE)
        await self._stop_sensors()

        index = self.progress.current_question_index
        self.progress.set_answer(index, self.transcript.text)

        self.gaze_policy.reset()
        await self.feedback.clear_all()
        self.timers.reset_answer()
        self.status_message = None

        if self.progress.is_last_question():
            return await self._complete()

        self.progress.advance_question()
        self.transcript.reset()
        logger.info(
            f"Advanced to question {self.progress.current_question_index + 1}"
            f"/{self.progress.question_count}"
        )
        await self._send_state()
        await self._send_question()
        return None

    async def save_draft(self) -> bool:
        """Manual save. Not allowed while recording."""
        if self.is_recording:
            raise StateTransitionError("Pause recording before saving a draft")
        saved = await self.autosave.save()
        await self._send({"type": "draft_saved", "saved": saved})
        return saved

    async def close(self) -> None:
        """Stop everything and release devices. Idempotent."""
        if self.is_closed:
            return
        self.is_closed = True
        self._stream_index = None

        self._set_state(RecordingState.IDLE)
        await self._stop_sensors()
        self.timers.stop_all()
        self.autosave.stop()
        self.feedback.cancel_timers()

        if self.is_open:
            self.is_open = False
            try:
                await self.media.close()
            except Exception as e:
                logger.warning(f"Failed to release media devices: {e}")
        logger.info(f"Interview room closed for {self.progress.session.session_id}")

    def snapshot_status(self) -> dict[str, Any]:
        """Current room status for the API."""
        return {
            "session_id": self.progress.session.session_id,
            "state": self.state.value,
            "question_index": self.progress.current_question_index,
            "question_count": self.progress.question_count,
            "question": self.progress.current_question,
            "transcript": self.transcript.display_text,
            "total_seconds": self.timers.total_seconds,
            "answer_seconds": self.timers.answer_seconds,
            "total_time": SessionTimers.format(self.timers.total_seconds),
            "answer_time": SessionTimers.format(self.timers.answer_seconds),
            "alert": self.feedback.alert,
            "coaching": self.feedback.coaching,
            "status_message": self.status_message,
            "is_complete": self.is_complete,
        }

    # =========================================================================
    # STATE HELPERS
    # =========================================================================

    def _require_open(self) -> None:
        if not self.is_open:
            raise StateTransitionError("Devices are not open")

    def _validate_transition(self, target: RecordingState, allowed_from: RecordingState) -> None:
        if self.is_complete:
            raise StateTransitionError("Interview is already complete")
        if self.state != allowed_from or target not in self.VALID_TRANSITIONS[self.state]:
            raise StateTransitionError(
                f"Invalid transition from {self.state.value} to {target.value}"
            )

    def _set_state(self, new_state: RecordingState) -> None:
        if new_state != self.state:
            logger.info(f"Recording state: {self.state.value} → {new_state.value}")
        self.state = new_state

    async def _enter_recording(self, reset_answer_timer: bool) -> None:
        self._set_state(RecordingState.RECORDING)
        self._stream_index = self.progress.current_question_index
        try:
            await self.transcription.start()
        except Exception as e:
            logger.error(f"Failed to start transcription: {e}")
            self._stream_index = None
            await self._force_idle(MIC_START_FAILED_MESSAGE)
            raise TranscriptionError("start-failed", str(e)) from e

        for task in self.samplers:
            task.start()
        self.timers.start_answer(reset=reset_answer_timer)
        await self._send_state()

    async def _stop_sensors(self) -> None:
        """Stop every recording-only job. Stopping twice is a no-op."""
        for task in self.samplers:
            task.cancel()
        self.timers.stop_answer()
        self.transcript.end_of_stream()
        try:
            await self.transcription.stop()
        except Exception as e:
            logger.warning(f"Failed to stop transcription: {e}")

    async def _force_idle(self, message: str) -> None:
        """Abort the current recording and keep everything captured so far."""
        self._set_state(RecordingState.IDLE)
        await self._stop_sensors()
        self.status_message = message
        await self._send_state()

    async def _complete(self) -> InterviewBundle:
        self.is_complete = True
        self.timers.stop_all()
        self.autosave.stop()

        bundle = self.progress.to_bundle()
        logger.info(f"Interview complete: {self.progress.session.session_id}")
        await self._send_state()

        if self._on_complete is not None:
            await self._on_complete(bundle)
        return bundle

    # =========================================================================
    # TRANSCRIPTION HANDLERS
    # =========================================================================

    async def _on_transcript_result(self, event: TranscriptEvent) -> None:
        """
        Apply a recognition result to the question its stream was started for.

        Speech engines finalize pending words after being stopped, so results
        keep arriving while paused or after moving on until the stream ends.
        """
        index = self._stream_index
        if index is None or self.is_complete:
            return

        if index != self.progress.current_question_index:
            late = TranscriptAccumulator()
            late.restore(self.progress.answers.get(index, ""))
            self.progress.set_answer(index, late.consume(event))
            logger.debug(f"Applied late transcript result to question {index + 1}")
            return

        text = self.transcript.consume(event)
        if not self.is_recording:
            self.transcript.end_of_stream()
        self.progress.set_answer(index, text)
        self.progress.set_transcript(text)

        await self._send({
            "type": "transcript",
            "text": text,
            "interim": self.transcript.interim,
            "display": self.transcript.display_text,
        })

    async def _on_transcript_end(self) -> None:
        self.transcript.end_of_stream()
        if not self.is_recording:
            self._stream_index = None
            return

        # Speech engines end streams on their own after silence
        try:
            await self.transcription.start()
            logger.debug("Transcription stream restarted")
        except Exception as e:
            logger.error(f"Failed to restart transcription: {e}")
            await self._force_idle(MIC_RESTART_FAILED_MESSAGE)

    async def _on_transcript_error(self, error: TranscriptionError) -> None:
        if error.is_transient:
            logger.debug(f"Ignoring transcription error: {error.code}")
            return

        logger.warning(f"Transcription error: {error.code}")
        if self.state == RecordingState.IDLE:
            return
        await self._force_idle(error.user_message())

    # =========================================================================
    # PERIODIC JOBS
    # =========================================================================

    async def _capture_snapshot(self) -> None:
        frame = await self.media.capture_frame()
        if frame and self.is_recording:
            self.progress.append_snapshot(self.progress.current_question_index, frame)

    async def _sample_loudness(self) -> None:
        level = await self.media.sample_loudness()
        incident = self.loudness.check(level)
        if incident is not None and self.is_recording:
            self.progress.log_incident(self.progress.current_question_index, incident)

    async def _analyze_gaze(self) -> None:
        generation = self._gaze_task.generation
        index = self.progress.current_question_index

        frame = await self.media.capture_frame()
        if not frame:
            return

        try:
            judgment = await self.judge.analyze_frame(frame)
        except Exception as e:
            logger.warning(f"Frame judgment failed: {e}")
            judgment = None

        if (
            not self._gaze_task.is_current(generation)
            or index != self.progress.current_question_index
        ):
            logger.debug("Discarding stale frame judgment")
            return

        decision = self.gaze_policy.evaluate(judgment)
        if decision.action == PolicyAction.ALERT:
            self.progress.log_incident(index, MalpracticeIncident.visual(decision.message))
            await self.feedback.show_alert(decision.message)
        elif decision.action == PolicyAction.COACH:
            await self.feedback.show_coaching(decision.message)

    # =========================================================================
    # EVENTS
    # =========================================================================

    async def _send_state(self) -> None:
        await self._send({
            "type": "state_change",
            "state": self.state.value,
            "question_index": self.progress.current_question_index,
            "message": self.status_message,
        })

    async def _send_question(self) -> None:
        await self._send({
            "type": "question",
            "index": self.progress.current_question_index,
            "total": self.progress.question_count,
            "text": self.progress.current_question,
        })

    async def _send(self, event: dict[str, Any]) -> None:
        try:
            await self._emit(event)
        except Exception as e:
            logger.warning(f"Failed to deliver {event.get('type')} event: {e}")
