"""
Validation of raw gateway text.

Every structured response goes sanitize -> json.loads -> pydantic model.
Anything that fails becomes MalformedResponse; the raw text is logged here
and never copied into the error message.
"""

from __future__ import annotations

import json
from typing import Any

import pydantic
from loguru import logger
from pydantic import BaseModel, Field

from src.core.errors import MalformedResponse
from src.core.sanitizer import sanitize
from src.quiz.models import QuizFeedback, QuizQuestion

# Raw text kept in logs is truncated to this many characters
RAW_LOG_LIMIT = 2000


class QuizPayload(BaseModel):
    questions: list[QuizQuestion] = Field(..., min_length=1)


class TopicsPayload(BaseModel):
    topics: list[str]


def _load_json(raw: str, what: str) -> Any:
    text = sanitize(raw)
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        logger.warning(f"Gateway returned invalid JSON for {what}: {e}\n{raw[:RAW_LOG_LIMIT]}")
        raise MalformedResponse(f"Invalid JSON in {what} response", raw_text=raw) from e


def _validate(model: type[BaseModel], data: Any, raw: str, what: str) -> Any:
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as e:
        logger.warning(
            f"Gateway {what} response failed validation ({e.error_count()} errors): "
            f"{e}\n{raw[:RAW_LOG_LIMIT]}"
        )
        raise MalformedResponse(f"Unexpected {what} response shape", raw_text=raw) from e


def parse_quiz(raw: str) -> list[QuizQuestion]:
    """Parse `{"questions": [...]}` into validated questions (at least one)."""
    data = _load_json(raw, "quiz")
    # Some models answer with the bare list
    if isinstance(data, list):
        data = {"questions": data}
    return _validate(QuizPayload, data, raw, "quiz").questions


def parse_topics(raw: str) -> list[str]:
    """Parse `{"topics": [...]}`; blank and duplicate topics are dropped."""
    data = _load_json(raw, "topics")
    if isinstance(data, list):
        data = {"topics": data}
    topics = _validate(TopicsPayload, data, raw, "topics").topics
    return list(dict.fromkeys(t.strip() for t in topics if t.strip()))


def parse_feedback(raw: str) -> QuizFeedback:
    """Parse the feedback payload (`feedback` list plus `score` block)."""
    data = _load_json(raw, "feedback")
    return _validate(QuizFeedback, data, raw, "feedback")
