"""
Transient feedback shown to the candidate during recording.

There are two slots: malpractice alerts and delivery coaching. Both expire
on their own. Coaching is only shown when nothing else is on screen, and an
alert always replaces any coaching message.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable

logger = logging.getLogger(__name__)


EventEmitter = Callable[[dict[str, Any]], Awaitable[None]]


async def _discard(event: dict[str, Any]) -> None:
    return None


class FeedbackDisplay:
    """Auto-expiring alert and coaching slots."""

    def __init__(
        self,
        emit: EventEmitter | None = None,
        alert_seconds: float = 5.0,
        coaching_seconds: float = 4.0,
    ):
        self._emit = emit or _discard
        self.alert_seconds = alert_seconds
        self.coaching_seconds = coaching_seconds

        self.alert: str | None = None
        self.coaching: str | None = None

        self._alert_expiry: asyncio.Task | None = None
        self._coaching_expiry: asyncio.Task | None = None

    @property
    def is_showing(self) -> bool:
        return self.alert is not None or self.coaching is not None

    async def show_alert(self, reason: str) -> None:
        if self.coaching is not None:
            await self.clear_coaching()

        self._cancel(self._alert_expiry)
        self.alert = reason
        await self._send({"type": "alert", "message": reason})
        self._alert_expiry = asyncio.get_running_loop().create_task(
            self._expire_alert(self.alert_seconds)
        )

    async def show_coaching(self, tip: str) -> bool:
        """Show a coaching tip unless other feedback is on screen."""
        if self.is_showing:
            return False

        self.coaching = tip
        await self._send({"type": "coaching", "message": tip})
        self._coaching_expiry = asyncio.get_running_loop().create_task(
            self._expire_coaching(self.coaching_seconds)
        )
        return True

    async def clear_alert(self) -> None:
        self._cancel(self._alert_expiry)
        self._alert_expiry = None
        if self.alert is not None:
            self.alert = None
            await self._send({"type": "alert_cleared"})

    async def clear_coaching(self) -> None:
        self._cancel(self._coaching_expiry)
        self._coaching_expiry = None
        if self.coaching is not None:
            self.coaching = None
            await self._send({"type": "coaching_cleared"})

    async def clear_all(self) -> None:
        await self.clear_alert()
        await self.clear_coaching()

    def cancel_timers(self) -> None:
        """Drop pending expiries without notifying (teardown)."""
        self._cancel(self._alert_expiry)
        self._cancel(self._coaching_expiry)
        self._alert_expiry = None
        self._coaching_expiry = None

    # =========================================================================
    # HELPERS
    # =========================================================================

    async def _expire_alert(self, delay: float) -> None:
        await asyncio.sleep(delay)
        self._alert_expiry = None
        if self.alert is not None:
            self.alert = None
            await self._send({"type": "alert_cleared"})

    async def _expire_coaching(self, delay: float) -> None:
        await asyncio.sleep(delay)
        self._coaching_expiry = None
        if self.coaching is not None:
            self.coaching = None
            await self._send({"type": "coaching_cleared"})

    @staticmethod
    def _cancel(task: asyncio.Task | None) -> None:
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()

    async def _send(self, event: dict[str, Any]) -> None:
        try:
            await self._emit(event)
        except Exception as e:
            logger.warning(f"Failed to deliver feedback event {event.get('type')}: {e}")
