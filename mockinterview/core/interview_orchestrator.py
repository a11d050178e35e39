"""
Interview Orchestrator - session lifecycle around the recording room.

Coordinates everything that happens outside a single live recording:
creating sessions (question generation), resuming drafts, wiring a
RecordingStateMachine to a client's sensors, the completion flow
(evaluation, composite scoring, persistence) and past-session management.
"""

import logging
from typing import Any

from mockinterview.config.settings import Settings, get_settings
from mockinterview.core.errors import EvaluationError, QuestionGenerationError
from mockinterview.core.evaluation_engine import EvaluationEngine
from mockinterview.core.feedback import EventEmitter
from mockinterview.core.recording import RecordingStateMachine
from mockinterview.models.progress import Draft, InterviewBundle, InterviewProgress
from mockinterview.models.session import InterviewConfig, InterviewSession
from mockinterview.sensors.base import FrameJudge, MediaCapture, TranscriptionService
from mockinterview.storage.session_store import SessionStore

logger = logging.getLogger(__name__)


class InterviewOrchestrator:
    """
    Manages interviews from setup to the stored evaluation.

    The orchestrator coordinates between:
    - AI Reasoning Layer (questions, frame judgment, evaluation)
    - Evaluation Engine (composite score)
    - Session Store (draft and history)
    - One RecordingStateMachine per connected interview room
    """

    def __init__(
        self,
        ai_reasoning: Any = None,  # AIReasoningLayer
        evaluation_engine: EvaluationEngine | None = None,
        store: SessionStore | None = None,
        settings: Settings | None = None,
    ):
        """
        Initialize the orchestrator with component dependencies.

        Args:
            ai_reasoning: AI reasoning layer for questions, frames and evaluation
            evaluation_engine: Composite scoring (built from ai_reasoning if omitted)
            store: Persistence for drafts and completed sessions
            settings: Application settings
        """
        self.settings = settings or get_settings()
        self.ai_reasoning = ai_reasoning
        self.evaluation_engine = evaluation_engine or EvaluationEngine(
            ai_reasoning, penalty=self.settings.malpractice_penalty
        )
        self.store = store or SessionStore(self.settings.data_dir)

        # Interviews that have not completed yet, keyed by session id
        self._active: dict[str, InterviewProgress] = {}
        self._monitors: dict[str, RecordingStateMachine] = {}

    # =========================================================================
    # SESSION MANAGEMENT
    # =========================================================================

    async def create_session(self, config: InterviewConfig) -> InterviewSession:
        """
        Create a new interview session.

        Starting a new interview discards any existing draft.

        Raises:
            QuestionGenerationError: If no questions could be generated
        """
        if self.ai_reasoning is None:
            raise QuestionGenerationError("No AI reasoning layer configured")

        await self.store.clear_draft()

        questions = await self.ai_reasoning.generate_questions(
            config, self.settings.question_count
        )
        session = InterviewSession(config=config, questions=questions)
        self._active[session.session_id] = InterviewProgress(session=session)

        logger.info(f"Created interview session: {session.session_id}")
        return session

    async def resume_draft(self) -> InterviewProgress | None:
        """Reinstate the stored draft at its question, with recording idle."""
        draft = await self.store.load_draft()
        if draft is None:
            return None

        progress = InterviewProgress.from_draft(draft)
        session_id = progress.session.session_id
        if session_id in self._monitors:
            await self.detach_monitor(session_id)
        self._active[session_id] = progress

        logger.info(
            f"Resumed draft {session_id} at question "
            f"{progress.current_question_index + 1}/{progress.question_count}"
        )
        return progress

    def get_progress(self, session_id: str) -> InterviewProgress | None:
        """Get an in-progress interview by ID."""
        return self._active.get(session_id)

    def get_monitor(self, session_id: str) -> RecordingStateMachine | None:
        return self._monitors.get(session_id)

    # =========================================================================
    # INTERVIEW ROOM
    # =========================================================================

    def attach_monitor(
        self,
        session_id: str,
        transcription: TranscriptionService,
        media: MediaCapture,
        emit: EventEmitter | None = None,
        judge: FrameJudge | None = None,
    ) -> RecordingStateMachine:
        """
        Build the recording state machine for a connected client.

        Raises:
            KeyError: If the session is not active
        """
        progress = self._active.get(session_id)
        if progress is None:
            raise KeyError(f"Session not found: {session_id}")
        if session_id in self._monitors:
            raise ValueError(f"Session {session_id} already has a connected room")

        async def on_complete(bundle: InterviewBundle) -> None:
            session = await self.complete_interview(bundle)
            if emit is not None:
                await emit({
                    "type": "complete",
                    "session_id": session.session_id,
                    "overall_score": session.evaluation.overall_score if session.evaluation else None,
                })

        machine = RecordingStateMachine(
            progress=progress,
            transcription=transcription,
            media=media,
            judge=judge or self.ai_reasoning,
            store=self.store,
            settings=self.settings,
            emit=emit,
            on_complete=on_complete,
        )
        self._monitors[session_id] = machine
        logger.info(f"Attached interview room to {session_id}")
        return machine

    async def detach_monitor(self, session_id: str) -> None:
        machine = self._monitors.pop(session_id, None)
        if machine is not None:
            await machine.close()

    # =========================================================================
    # COMPLETION
    # =========================================================================

    async def complete_interview(self, bundle: InterviewBundle) -> InterviewSession:
        """
        Evaluate, score and persist a finished interview.

        Raises:
            EvaluationError: If the evaluation failed. The session is discarded
                and not persisted; the last autosaved draft is left in place.
        """
        session_id = bundle.session.session_id

        try:
            evaluation = await self.evaluation_engine.evaluate(bundle)
        except EvaluationError as e:
            logger.error(f"Evaluation failed for {session_id}: {e}")
            self._active.pop(session_id, None)
            raise

        session = bundle.session.model_copy(update={
            "answers": list(bundle.answers),
            "snapshots": bundle.snapshots,
            "malpractice_logs": bundle.malpractice_logs,
            "evaluation": evaluation,
        })

        await self.store.save_session(session)
        await self.store.clear_draft()
        self._active.pop(session_id, None)

        logger.info(f"Completed interview {session_id}: overall score {evaluation.overall_score}/10")
        return session

    # =========================================================================
    # PAST SESSIONS & DRAFTS
    # =========================================================================

    async def list_sessions(self) -> list[InterviewSession]:
        """Completed sessions, newest first."""
        return await self.store.load_sessions()

    async def get_past_session(self, session_id: str) -> InterviewSession | None:
        return await self.store.get_session(session_id)

    async def delete_session(self, session_id: str) -> bool:
        deleted = await self.store.delete_session(session_id)
        if deleted:
            logger.info(f"Deleted session {session_id}")
        return deleted

    async def load_draft(self) -> Draft | None:
        return await self.store.load_draft()

    async def discard_draft(self) -> bool:
        """Abandon the stored draft."""
        draft = await self.store.load_draft()
        if draft is not None:
            session_id = draft.session.session_id
            await self.detach_monitor(session_id)
            self._active.pop(session_id, None)
            logger.info(f"Discarded draft {session_id}")
        return await self.store.clear_draft()

    async def close(self) -> None:
        """Close every connected room."""
        for session_id in list(self._monitors):
            await self.detach_monitor(session_id)
