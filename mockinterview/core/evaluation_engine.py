"""
Evaluation Engine for MockInterview Proctor

Derives the composite interview score from the per-criterion scores
returned by the evaluation service, applying the malpractice penalty.
"""

import logging
import math
from typing import Iterable

from mockinterview.models.evaluation import EvaluationCriterion, EvaluationResult
from mockinterview.models.monitoring import IncidentCategory, MalpracticeIncident
from mockinterview.models.progress import InterviewBundle

logger = logging.getLogger(__name__)


DEFAULT_MALPRACTICE_PENALTY = 0.8


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compute_overall_score(
    criteria: Iterable[EvaluationCriterion],
    incidents: Iterable[MalpracticeIncident] = (),
    penalty: float = DEFAULT_MALPRACTICE_PENALTY,
) -> int:
    """
    Composite 0-10 score.

    ``sum(score) / sum(max_score) * 10``, multiplied by ``penalty`` when any
    visual incident was logged, rounded half up. Audio incidents never
    trigger the penalty.
    """
    criteria = list(criteria)
    total = sum(c.score for c in criteria)
    max_total = sum(c.max_score for c in criteria)
    if max_total <= 0:
        return 0

    score = total / max_total * 10
    if any(incident.category == IncidentCategory.VISUAL for incident in incidents):
        score *= penalty

    return max(0, min(10, round_half_up(score)))


class EvaluationEngine:
    """
    Central scoring component for finished interviews.

    Responsibilities:
    - Request the evaluation from the AI reasoning layer
    - Calculate the composite score with the malpractice penalty
    """

    def __init__(self, ai_reasoning=None, penalty: float = DEFAULT_MALPRACTICE_PENALTY):
        """
        Initialize evaluation engine.

        Args:
            ai_reasoning: AI reasoning layer for the detailed evaluation
            penalty: Multiplier applied when visual malpractice was logged
        """
        self.ai_reasoning = ai_reasoning
        self.penalty = penalty

    async def evaluate(self, bundle: InterviewBundle) -> EvaluationResult:
        """
        Evaluate a finished interview and fill in the overall score.

        Raises:
            EvaluationError: Propagated from the AI reasoning layer
        """
        result = await self.ai_reasoning.evaluate_interview(bundle)
        return self.apply_score(result, bundle)

    def apply_score(self, result: EvaluationResult, bundle: InterviewBundle) -> EvaluationResult:
        result.overall_score = compute_overall_score(
            result.criteria,
            bundle.incidents(),
            penalty=self.penalty,
        )
        if bundle.has_visual_malpractice():
            logger.info(
                f"Malpractice penalty applied to {bundle.session.session_id}: "
                f"overall score {result.overall_score}"
            )
        return result
