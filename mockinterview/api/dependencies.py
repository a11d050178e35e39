"""
API Dependencies

Provides dependency injection for API endpoints.
Manages singleton instances of core components.
"""

import logging

from mockinterview.config.settings import get_settings
from mockinterview.core.ai_reasoning import AIReasoningLayer
from mockinterview.core.interview_orchestrator import InterviewOrchestrator
from mockinterview.storage.session_store import SessionStore

logger = logging.getLogger(__name__)


# ============================================================================
# SINGLETON INSTANCES
# ============================================================================

_orchestrator: InterviewOrchestrator | None = None


def get_orchestrator() -> InterviewOrchestrator:
    """
    Get the interview orchestrator singleton.

    Lazily initializes all required components.
    """
    global _orchestrator

    if _orchestrator is None:
        settings = get_settings()

        try:
            ai_reasoning = AIReasoningLayer(settings)
        except Exception as e:
            # The API stays up for past sessions and drafts without the model
            logger.warning(f"AI reasoning layer unavailable: {e}")
            ai_reasoning = None

        _orchestrator = InterviewOrchestrator(
            ai_reasoning=ai_reasoning,
            store=SessionStore(settings.data_dir),
            settings=settings,
        )

    return _orchestrator


async def cleanup():
    """Cleanup resources on shutdown."""
    global _orchestrator

    if _orchestrator:
        await _orchestrator.close()
        if _orchestrator.ai_reasoning:
            await _orchestrator.ai_reasoning.close()

    _orchestrator = None
