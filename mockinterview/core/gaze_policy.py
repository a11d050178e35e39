"""
Gaze debounce and alert policy.

Turns noisy per-frame verdicts from the judgment service into at most one
malpractice alert per question. Other people and devices are treated as
unambiguous and alert on a single frame. Suspicious gaze only alerts once a
full sliding window shows a sustained pattern, so that normal thinking
glances do not trigger false positives.
"""

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum

from mockinterview.models.monitoring import FrameJudgment

logger = logging.getLogger(__name__)


class PolicyAction(str, Enum):
    """Outcome of evaluating one judgment."""

    NONE = "none"
    ALERT = "alert"
    COACH = "coach"


@dataclass
class PolicyDecision:
    action: PolicyAction
    message: str | None = None


NO_ACTION = PolicyDecision(PolicyAction.NONE)


class GazeAlertPolicy:
    """Sliding-window debounce with one-shot suppression per question."""

    def __init__(self, window_size: int = 4, alert_threshold: int = 3):
        if alert_threshold > window_size:
            raise ValueError("alert_threshold cannot exceed window_size")
        self.window_size = window_size
        self.alert_threshold = alert_threshold
        self._history: deque[bool] = deque(maxlen=window_size)
        self.alert_shown = False

    @property
    def history(self) -> list[bool]:
        return list(self._history)

    @property
    def suspicious_count(self) -> int:
        return sum(self._history)

    def evaluate(self, judgment: FrameJudgment | None) -> PolicyDecision:
        """Decide what to do with one verdict.

        A missing verdict is no signal: it neither fills nor drains the
        window.
        """
        if judgment is None:
            return NO_ACTION

        # Once the question's alert is out, flagged frames are only a source of tips
        if judgment.flags_malpractice and not self.alert_shown:
            self._history.append(judgment.suspicious_gaze)

            if judgment.is_unambiguous:
                return self._raise(judgment)

            if (
                len(self._history) >= self.window_size
                and self.suspicious_count >= self.alert_threshold
            ):
                return self._raise(judgment)

            return NO_ACTION

        if not self.alert_shown:
            self._history.append(False)

        if judgment.delivery_feedback and judgment.delivery_feedback.strip():
            return PolicyDecision(PolicyAction.COACH, judgment.delivery_feedback.strip())

        return NO_ACTION

    def _raise(self, judgment: FrameJudgment) -> PolicyDecision:
        self.alert_shown = True
        reason = judgment.alert_reason()
        logger.info(
            f"Malpractice alert raised: {reason} "
            f"(gaze window {self.history})"
        )
        return PolicyDecision(PolicyAction.ALERT, reason)

    def reset(self) -> None:
        """Forget the window and re-arm the alert for a new question."""
        self._history.clear()
        self.alert_shown = False
