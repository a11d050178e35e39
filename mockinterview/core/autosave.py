"""
Draft autosave for in-progress interviews.
"""

import logging
import time
from typing import Callable

from mockinterview.core.scheduler import PeriodicTask
from mockinterview.models.monitoring import RecordingState
from mockinterview.models.progress import InterviewProgress
from mockinterview.storage.session_store import SessionStore

logger = logging.getLogger(__name__)


AUTOSAVE_STATES = (RecordingState.RECORDING, RecordingState.PAUSED)


class DraftAutosaveManager:
    """
    Periodically snapshots interview progress into the single draft slot.

    The manager never mutates progress; it serializes a deep copy. A failed
    save is logged and simply retried on the next scheduled tick.
    """

    def __init__(
        self,
        store: SessionStore,
        progress: InterviewProgress,
        get_state: Callable[[], RecordingState],
        interval: float = 60.0,
    ):
        self.store = store
        self._progress = progress
        self._get_state = get_state
        self._task = PeriodicTask("autosave", interval, self._tick)

        self.last_saved_at: float | None = None
        self.last_saved_version: int | None = None
        self.failed_saves = 0

    @property
    def is_running(self) -> bool:
        return self._task.is_running

    def start(self) -> None:
        self._task.start()

    def stop(self) -> None:
        self._task.cancel()

    async def _tick(self) -> None:
        if self._get_state() not in AUTOSAVE_STATES:
            return
        await self.save()

    async def save(self) -> bool:
        """Serialize and persist the current progress."""
        draft = self._progress.to_draft()
        try:
            saved = await self.store.save_draft(draft)
        except Exception as e:
            logger.error(f"Draft save raised: {e}")
            saved = False

        if saved:
            self.last_saved_at = time.time()
            self.last_saved_version = self._progress.version
            logger.info(
                f"Draft saved: session={draft.session.session_id}, "
                f"question={draft.current_question_index}"
            )
        else:
            self.failed_saves += 1
            logger.warning("Draft save failed; will retry on next autosave tick")
        return saved

    async def discard(self) -> bool:
        """Delete the draft (interview completed or abandoned)."""
        self.stop()
        try:
            return await self.store.clear_draft()
        except Exception as e:
            logger.error(f"Draft discard raised: {e}")
            return False
