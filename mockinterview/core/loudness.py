"""
Background-noise detection from microphone loudness samples.
"""

import logging
from typing import Sequence

from mockinterview.models.monitoring import MalpracticeIncident

logger = logging.getLogger(__name__)


def average_level(frequency_bins: Sequence[float]) -> float:
    """Mean of an analyser's byte-frequency bins (0-255 each)."""
    if not frequency_bins:
        return 0.0
    return sum(frequency_bins) / len(frequency_bins)


class LoudnessMonitor:
    """
    Flags every sample whose energy is strictly above the threshold.

    There is no debounce: each loud sample produces its own incident and
    downstream scoring decides how much weight audio incidents carry.
    """

    def __init__(self, threshold: float = 85.0):
        self.threshold = threshold

    def is_loud(self, level: float) -> bool:
        return level > self.threshold

    def check(self, level: float | None) -> MalpracticeIncident | None:
        if level is None or not self.is_loud(level):
            return None
        logger.info(f"Loud background noise: level {level:.1f} > {self.threshold:.1f}")
        return MalpracticeIncident.loud_noise()
