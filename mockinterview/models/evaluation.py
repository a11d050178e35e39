"""
Evaluation models for MockInterview Proctor

Defines the structured result returned by the evaluation service.
Field aliases accept the camelCase keys the model emits.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _ModelResponse(BaseModel):
    """Base for models parsed from language-model JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EvaluationCriterion(_ModelResponse):
    """Score for one evaluation criterion."""

    name: str
    score: float = Field(..., ge=0)
    max_score: float = Field(default=5.0, gt=0)
    reasoning: str = ""


class BodyLanguageAnalysis(_ModelResponse):
    """Non-verbal cues observed in the snapshots."""

    posture: str = ""
    eye_contact: str = ""
    gestures: str = ""
    overall_summary: str = ""


class VerbalAnalysis(_ModelResponse):
    """Verbal delivery observed in the transcript."""

    clarity: str = ""
    conciseness: str = ""
    filler_words: str = ""
    overall_summary: str = ""


class MalpracticeReport(_ModelResponse):
    """Summary of visual malpractice incidents."""

    summary: str
    impact_on_score: str = ""


class EvaluationResult(_ModelResponse):
    """Complete evaluation of a finished interview."""

    # Composite score (0-10), derived locally from the criteria
    overall_score: int = Field(default=0, ge=0, le=10)

    criteria: list[EvaluationCriterion] = Field(default_factory=list)
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)
    improvements: list[str] = Field(default_factory=list)

    body_language_analysis: BodyLanguageAnalysis = Field(default_factory=BodyLanguageAnalysis)
    verbal_analysis: VerbalAnalysis = Field(default_factory=VerbalAnalysis)

    # Only present when visual malpractice was logged
    malpractice_report: MalpracticeReport | None = None
