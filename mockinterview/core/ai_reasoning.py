"""
AI Reasoning Layer for MockInterview Proctor

Handles all AI-powered operations:
- Question generation
- Per-frame malpractice judgment
- End-of-interview evaluation

Uses Gemini Flash for low-latency calls (frames, questions) and Gemini Pro
for the evaluation, both served through the Databricks AI gateway.
"""

import json
import logging
from typing import Any

import httpx
from pydantic import ValidationError

from mockinterview.config.settings import Settings, get_settings
from mockinterview.core.errors import EvaluationError, QuestionGenerationError
from mockinterview.models.evaluation import EvaluationResult
from mockinterview.models.monitoring import FrameJudgment
from mockinterview.models.progress import InterviewBundle
from mockinterview.models.session import InterviewConfig
from mockinterview.prompts.evaluator import EvaluatorPrompts
from mockinterview.prompts.interviewer import InterviewerPrompts
from mockinterview.prompts.proctor import ProctorPrompts

logger = logging.getLogger(__name__)


class AIReasoningLayer:
    """
    Central AI component using Gemini models via Databricks.

    Model Selection:
    - Gemini Flash: question generation, frame judgment (low latency)
    - Gemini Pro: interview evaluation (deep reasoning over text and images)
    """

    def __init__(self, settings: Settings | None = None, client: httpx.AsyncClient | None = None):
        """Initialize AI reasoning layer with Databricks configuration."""
        self.settings = settings or get_settings()
        self.base_url = self.settings.databricks_host.rstrip("/")
        self.headers = {
            "Authorization": f"Bearer {self.settings.databricks_token}",
            "Content-Type": "application/json",
        }

        # HTTP client for API calls
        self.client = client or httpx.AsyncClient(
            base_url=self.base_url,
            headers=self.headers,
            timeout=self.settings.llm_timeout_seconds,
        )

        # Prompt templates
        self.interviewer_prompts = InterviewerPrompts()
        self.proctor_prompts = ProctorPrompts()
        self.evaluator_prompts = EvaluatorPrompts()

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    # =========================================================================
    # CORE AI OPERATIONS
    # =========================================================================

    def _extract_content(self, result: dict) -> str:
        """Extract text content from API response, handling list/dict formats."""
        if not isinstance(result, dict):
            return ""
        choices = result.get("choices") or [{}]
        choice = choices[0] if isinstance(choices[0], dict) else {}
        content = (choice.get("message") or {}).get("content") or ""

        # Handle case where content is a list (multi-part response)
        if isinstance(content, list):
            text_parts = []
            for part in content:
                if isinstance(part, str):
                    text_parts.append(part)
                elif isinstance(part, dict) and "text" in part:
                    text_parts.append(part["text"])
            content = "".join(text_parts)

        return content if isinstance(content, str) else str(content)

    def _extract_json(self, response: str) -> dict[str, Any] | None:
        """Pull the outermost JSON object out of a model response."""
        json_start = response.find("{")
        json_end = response.rfind("}") + 1
        if json_start < 0 or json_end <= json_start:
            return None
        data = json.loads(response[json_start:json_end])
        return data if isinstance(data, dict) else None

    @staticmethod
    def _image_part(image_b64: str) -> dict[str, Any]:
        return {
            "type": "image_url",
            "image_url": {"url": f"data:image/jpeg;base64,{image_b64}"},
        }

    async def _call_model(
        self,
        endpoint: str,
        messages: list[dict[str, Any]],
        max_tokens: int,
        temperature: float,
    ) -> str:
        payload = {
            "messages": messages,
            "max_tokens": max_tokens,
            "temperature": temperature,
        }
        response = await self.client.post(endpoint, json=payload)
        response.raise_for_status()
        return self._extract_content(response.json())

    async def _call_gemini_pro(
        self,
        messages: list[dict[str, Any]],
        max_tokens: int = 4096,
        temperature: float = 0.7,
    ) -> str:
        """
        Call Gemini Pro for deep reasoning tasks.

        Args:
            messages: Chat messages (text and image parts)
            max_tokens: Maximum tokens in response
            temperature: Sampling temperature

        Returns:
            Model response text
        """
        try:
            return await self._call_model(
                self.settings.gemini_pro_endpoint, messages, max_tokens, temperature
            )
        except httpx.HTTPError as e:
            logger.error(f"Gemini Pro API error: {e}")
            raise

    async def _call_gemini_flash(
        self,
        messages: list[dict[str, Any]],
        max_tokens: int = 512,
        temperature: float = 0.8,
    ) -> str:
        """
        Call Gemini Flash for fast responses.

        Args:
            messages: Chat messages (text and image parts)
            max_tokens: Maximum tokens in response
            temperature: Sampling temperature

        Returns:
            Model response text
        """
        try:
            return await self._call_model(
                self.settings.gemini_flash_endpoint, messages, max_tokens, temperature
            )
        except httpx.HTTPError as e:
            logger.error(f"Gemini Flash API error: {e}")
            raise

    # =========================================================================
    # QUESTION GENERATION
    # =========================================================================

    async def generate_questions(self, config: InterviewConfig, count: int | None = None) -> list[str]:
        """
        Generate the question set for a new interview.

        Args:
            config: Role and difficulty
            count: Number of questions (defaults to the configured count)

        Returns:
            Ordered list of question texts

        Raises:
            QuestionGenerationError: If the model fails or returns no questions
        """
        count = count or self.settings.question_count
        prompt = self.interviewer_prompts.generate_questions_prompt(config, count)

        try:
            response = await self._call_gemini_flash(
                [{"role": "user", "content": prompt}],
                max_tokens=1024,
            )
            data = self._extract_json(response) or {}
        except httpx.HTTPError as e:
            raise QuestionGenerationError(f"Failed to generate interview questions: {e}") from e
        except json.JSONDecodeError as e:
            logger.warning(f"Failed to parse questions JSON: {e}")
            data = {}

        raw_questions = data.get("questions") or []
        questions = [
            q.strip() for q in raw_questions
            if isinstance(q, str) and q.strip()
        ][:count]

        if not questions:
            raise QuestionGenerationError("Model returned no questions")

        logger.info(f"Generated {len(questions)} questions for {config.difficulty} {config.role}")
        return questions

    # =========================================================================
    # FRAME JUDGMENT
    # =========================================================================

    async def analyze_frame(self, image_b64: str) -> FrameJudgment | None:
        """
        Judge a single webcam frame for malpractice.

        Never raises: any transport or parsing failure yields None so the
        gaze loop treats it as "no signal".
        """
        messages = [
            {
                "role": "user",
                "content": [
                    self._image_part(image_b64),
                    {"type": "text", "text": self.proctor_prompts.frame_analysis_prompt()},
                ],
            }
        ]

        try:
            response = await self._call_gemini_flash(messages, max_tokens=256, temperature=0.2)
            data = self._extract_json(response)
            if data is None:
                logger.warning("Frame judgment returned no JSON")
                return None
            return FrameJudgment.model_validate(data)
        except (httpx.HTTPError, json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Frame judgment failed: {e}")
            return None

    # =========================================================================
    # EVALUATION
    # =========================================================================

    def _build_evaluation_messages(self, bundle: InterviewBundle) -> list[dict[str, Any]]:
        parts: list[dict[str, Any]] = [{"type": "text", "text": "Begin Evaluation:\n"}]

        for index, question in enumerate(bundle.session.questions):
            parts.append({
                "type": "text",
                "text": self.evaluator_prompts.answer_header(index, question, bundle.answers[index]),
            })
            images = bundle.snapshots.get(index, [])
            if images:
                parts.extend(self._image_part(image) for image in images)
            else:
                parts.append({"type": "text", "text": "(No snapshots available)\n"})

        return [
            {"role": "system", "content": self.evaluator_prompts.generate_system_prompt(bundle)},
            {"role": "user", "content": parts},
        ]

    async def evaluate_interview(self, bundle: InterviewBundle) -> EvaluationResult:
        """
        Evaluate a finished interview.

        The overall score is left at 0; the evaluation engine derives it
        from the criteria.

        Raises:
            EvaluationError: If the call fails or the response is malformed
        """
        session_id = bundle.session.session_id
        messages = self._build_evaluation_messages(bundle)

        try:
            response = await self._call_gemini_pro(messages)
        except httpx.HTTPError as e:
            raise EvaluationError(f"Failed to evaluate interview performance: {e}") from e

        try:
            data = self._extract_json(response)
            if data is None:
                raise EvaluationError("Evaluation response contained no JSON object")
            result = EvaluationResult.model_validate(data)
        except (json.JSONDecodeError, ValidationError) as e:
            logger.error(f"Malformed evaluation for {session_id}: {e}")
            raise EvaluationError(f"Malformed evaluation response: {e}") from e

        if not result.criteria:
            raise EvaluationError("Evaluation response contained no criteria")

        if not bundle.has_visual_malpractice():
            result.malpractice_report = None

        logger.info(f"Evaluated interview {session_id}: {len(result.criteria)} criteria")
        return result
