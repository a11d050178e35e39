import pytest

from mockinterview.core.evaluation_engine import EvaluationEngine, compute_overall_score
from mockinterview.models.evaluation import EvaluationCriterion
from mockinterview.models.monitoring import MalpracticeIncident

from fakes import FakeAI, make_progress


def criteria(*pairs):
    return [
        EvaluationCriterion(name=f"c{i}", score=score, max_score=max_score)
        for i, (score, max_score) in enumerate(pairs)
    ]


def test_visual_malpractice_applies_penalty():
    incidents = [MalpracticeIncident.visual("Phone visible")]

    assert compute_overall_score(criteria((3, 5), (4, 5)), incidents) == 6
    assert compute_overall_score(criteria((3, 5), (4, 5))) == 7


def test_audio_incidents_never_penalize():
    incidents = [MalpracticeIncident.loud_noise(), MalpracticeIncident.loud_noise()]

    assert compute_overall_score(criteria((3, 5), (4, 5)), incidents) == 7


def test_score_rounds_half_up():
    assert compute_overall_score(criteria((1, 4))) == 3
    assert compute_overall_score(criteria((5, 5))) == 10


def test_no_criteria_scores_zero():
    assert compute_overall_score([]) == 0


@pytest.mark.asyncio
async def test_engine_fills_in_overall_score():
    progress = make_progress()
    progress.log_incident(1, MalpracticeIncident.visual("Second person"))
    engine = EvaluationEngine(FakeAI(criteria=[(3, 5), (4, 5)]), penalty=0.8)

    result = await engine.evaluate(progress.to_bundle())

    assert result.overall_score == 6
