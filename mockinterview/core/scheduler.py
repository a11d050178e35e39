"""
Cancelable repeating tasks.

Every periodic job in the interview runtime (samplers, gaze analysis,
timers, autosave) runs as a PeriodicTask. A generation counter is bumped
on every start/cancel so that a wake-up belonging to a superseded run
recognises it is stale and exits without firing.
"""

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable

logger = logging.getLogger(__name__)


TaskCallback = Callable[[], Awaitable[Any] | Any]


class PeriodicTask:
    """
    Runs ``callback`` every ``interval`` seconds until cancelled.

    The next run is only scheduled after the previous callback has
    completed, so a slow callback delays the schedule instead of piling up.
    ``is_active`` is consulted before every run; returning False ends the
    loop without firing.
    """

    def __init__(
        self,
        name: str,
        interval: float,
        callback: TaskCallback,
        *,
        run_immediately: bool = False,
        is_active: Callable[[], bool] | None = None,
    ):
        self.name = name
        self.interval = interval
        self._callback = callback
        self._run_immediately = run_immediately
        self._is_active = is_active or (lambda: True)

        self._task: asyncio.Task | None = None
        self._generation = 0
        self.runs = 0

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def generation(self) -> int:
        return self._generation

    def start(self) -> None:
        """Start the loop. Starting a running task is a no-op."""
        if self.is_running:
            return
        self._generation += 1
        self._task = asyncio.get_running_loop().create_task(
            self._run(self._generation),
            name=f"periodic:{self.name}",
        )
        logger.debug(f"Started periodic task {self.name} (generation {self._generation})")

    def cancel(self) -> None:
        """Stop the loop. Safe to call any number of times."""
        self._generation += 1
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            logger.debug(f"Cancelled periodic task {self.name}")

    def is_current(self, generation: int) -> bool:
        return generation == self._generation and self._is_active()

    async def _run(self, generation: int) -> None:
        if not self._run_immediately:
            await asyncio.sleep(self.interval)

        while self.is_current(generation):
            await self._fire()
            if not self.is_current(generation):
                break
            await asyncio.sleep(self.interval)

    async def _fire(self) -> None:
        try:
            result = self._callback()
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.error(f"Periodic task {self.name} failed: {e}")
        finally:
            self.runs += 1
