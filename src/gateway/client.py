"""
Generation Gateway client.

A single capability object for every LLM task StudySpark needs:
generate_quiz, summarize, extract_topics, score_quiz and chat.

GeminiGateway talks to Google Gemini through google-generativeai. Each call
is bounded by a timeout, never retried, and every structured result is
validated before it is returned.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping, Sequence
from typing import Any, Protocol

from google.api_core import exceptions as google_exceptions
from loguru import logger

from config import Settings, get_settings
from src.core.errors import GatewayError, GatewayTimeout, ValidationError
from src.quiz.models import QuizFeedback, QuizQuestion

from . import prompts
from .parsing import parse_feedback, parse_quiz, parse_topics


class GenerationGateway(Protocol):
    """Everything the service asks of the language model."""

    async def generate_quiz(self, notes: str) -> list[QuizQuestion]: ...

    async def summarize(self, text: str) -> str: ...

    async def extract_topics(self, text: str) -> list[str]: ...

    async def score_quiz(
        self, questions: Sequence[QuizQuestion], answers: Mapping[int, str]
    ) -> QuizFeedback: ...

    async def chat(self, message: str, system_instruction: str | None = None) -> str: ...


def _require_text(value: str | None, message: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(message)
    return value.strip()


class GeminiGateway:
    """Gemini-backed GenerationGateway."""

    def __init__(
        self,
        settings: Settings | None = None,
        model: Any | None = None,
    ):
        """
        Initialize the gateway.

        Args:
            settings: Settings to read key, model and limits from (cached settings if None)
            model: Pre-built model exposing generate_content_async (skips SDK setup)
        """
        self.settings = settings or get_settings()
        self.api_key = self.settings.gemini_api_key
        self.model_name = self.settings.ai_model
        self.timeout_seconds = self.settings.gateway_timeout_seconds
        self.question_count = self.settings.quiz_question_count
        self.default_system_instruction = self.settings.chatbot_system_instruction
        self.generation_config = {
            "temperature": self.settings.ai_temperature,
            "max_output_tokens": self.settings.ai_max_output_tokens,
        }
        self._model = model

    @property
    def model(self) -> Any:
        """Lazy-load the Gemini model."""
        if self._model is None:
            if not self.api_key:
                raise GatewayError("Gemini API key not configured. Set GEMINI_API_KEY.")
            import google.generativeai as genai

            genai.configure(api_key=self.api_key)
            self._model = genai.GenerativeModel(model_name=self.model_name)
        return self._model

    async def _complete(self, prompt: str, task: str) -> str:
        """Send one prompt and return the response text."""
        logger.debug(f"Gateway {task}: sending {len(prompt)} chars to {self.model_name}")
        try:
            response = await asyncio.wait_for(
                self.model.generate_content_async(
                    prompt,
                    generation_config=self.generation_config,
                ),
                timeout=self.timeout_seconds,
            )
        except (asyncio.TimeoutError, google_exceptions.DeadlineExceeded) as e:
            logger.error(f"Gateway {task} timed out after {self.timeout_seconds}s")
            raise GatewayTimeout(f"{task} timed out") from e
        except GatewayError:
            raise
        except Exception as e:  # Intentionally broad - SDK raises many unrelated types
            logger.error(f"Gemini API error during {task}: {e}")
            raise GatewayError(f"{task} failed: {e}") from e

        try:
            text = response.text
        except ValueError as e:
            # Blocked or candidate-less responses have no text accessor
            logger.error(f"Gemini returned no text for {task}: {e}")
            raise GatewayError(f"{task} returned no content") from e

        if not text or not text.strip():
            logger.warning(f"Empty response from Gemini for {task}")
            raise GatewayError(f"{task} returned no content")
        return text

    # ========================================
    # Tasks
    # ========================================

    async def generate_quiz(self, notes: str) -> list[QuizQuestion]:
        notes = _require_text(notes, "Notes content is required.")
        raw = await self._complete(prompts.quiz_prompt(notes, self.question_count), "generate-quiz")
        questions = parse_quiz(raw)
        logger.info(f"Generated quiz with {len(questions)} questions")
        return questions

    async def summarize(self, text: str) -> str:
        text = _require_text(text, "Text content is required for summary.")
        raw = await self._complete(prompts.summary_prompt(text), "summary")
        return raw.strip()

    async def extract_topics(self, text: str) -> list[str]:
        text = _require_text(text, "Text content is required to extract topics.")
        raw = await self._complete(prompts.topics_prompt(text), "list-topics")
        topics = parse_topics(raw)
        logger.info(f"Extracted {len(topics)} topics")
        return topics

    async def score_quiz(
        self, questions: Sequence[QuizQuestion], answers: Mapping[int, str]
    ) -> QuizFeedback:
        if not questions:
            raise ValidationError("Questions and answers required")
        payload = [q.model_dump() for q in questions]
        raw = await self._complete(prompts.feedback_prompt(payload, answers), "quiz-feedback")
        return parse_feedback(raw)

    async def chat(self, message: str, system_instruction: str | None = None) -> str:
        message = _require_text(message, "Message is required.")
        instruction = (system_instruction or "").strip() or self.default_system_instruction
        raw = await self._complete(prompts.chat_prompt(message, instruction), "chatbot")
        return raw.strip()
