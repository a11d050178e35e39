"""
AI prompt templates for MockInterview Proctor

Contains structured prompts for:
- Question generation
- Per-frame malpractice judgment
- Interview evaluation
"""

from mockinterview.prompts.interviewer import InterviewerPrompts
from mockinterview.prompts.proctor import ProctorPrompts
from mockinterview.prompts.evaluator import EvaluatorPrompts

__all__ = [
    "InterviewerPrompts",
    "ProctorPrompts",
    "EvaluatorPrompts",
]
