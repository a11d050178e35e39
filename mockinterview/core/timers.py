"""
Elapsed-time counters for the interview room.
"""

from typing import Callable

from mockinterview.core.scheduler import PeriodicTask


class SessionTimers:
    """
    Total interview time and per-answer time, in whole ticks.

    The total timer runs for the lifetime of the open interview. The answer
    timer only runs while recording and is reset when a new answer starts.
    """

    def __init__(self, tick_seconds: float = 1.0, is_recording: Callable[[], bool] | None = None):
        self.total_seconds = 0
        self.answer_seconds = 0

        self._total_task = PeriodicTask("total_timer", tick_seconds, self._tick_total)
        self._answer_task = PeriodicTask(
            "answer_timer",
            tick_seconds,
            self._tick_answer,
            is_active=is_recording,
        )

    def _tick_total(self) -> None:
        self.total_seconds += 1

    def _tick_answer(self) -> None:
        self.answer_seconds += 1

    def start_total(self) -> None:
        self._total_task.start()

    def start_answer(self, reset: bool = False) -> None:
        if reset:
            self.answer_seconds = 0
        self._answer_task.start()

    def stop_answer(self) -> None:
        self._answer_task.cancel()

    def reset_answer(self) -> None:
        self._answer_task.cancel()
        self.answer_seconds = 0

    def stop_all(self) -> None:
        self._answer_task.cancel()
        self._total_task.cancel()

    @property
    def answer_running(self) -> bool:
        return self._answer_task.is_running

    @staticmethod
    def format(seconds: int) -> str:
        """Format as MM:SS."""
        minutes, remainder = divmod(seconds, 60)
        return f"{minutes:02d}:{remainder:02d}"
