"""
Core business logic modules for MockInterview Proctor

Contains:
- Interview Orchestrator: session lifecycle and completion flow
- Recording State Machine: live interview room conductor
- AI Reasoning: question generation, frame judgment, evaluation
- Evaluation Engine: composite scoring
- Monitoring pieces: transcript, gaze policy, loudness, feedback, autosave, timers
"""

from mockinterview.core.interview_orchestrator import InterviewOrchestrator
from mockinterview.core.recording import RecordingStateMachine
from mockinterview.core.ai_reasoning import AIReasoningLayer
from mockinterview.core.evaluation_engine import EvaluationEngine, compute_overall_score

__all__ = [
    "InterviewOrchestrator",
    "RecordingStateMachine",
    "AIReasoningLayer",
    "EvaluationEngine",
    "compute_overall_score",
]
