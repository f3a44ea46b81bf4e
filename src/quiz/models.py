"""
Quiz domain models.

- QuizQuestion: one multiple-choice question with a fixed A-D option set
- QuestionResult / ScoreResult: derived, read-only scoring views
- FeedbackItem / FeedbackScore / QuizFeedback: shape of the gateway's feedback JSON

QuizQuestion is a pydantic model because every question set arrives as
untrusted model output and is schema-checked before it reaches a session.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

CHOICE_KEYS: tuple[str, ...] = ("A", "B", "C", "D")


def normalize_choice(value: Any) -> str:
    """Trim and upper-case a choice key ('b ' -> 'B')."""
    return str(value).strip().upper()


class QuizQuestion(BaseModel):
    """A single multiple-choice question with its answer key."""

    model_config = ConfigDict(frozen=True)

    topic: str = Field(..., min_length=1, description="Sub-topic the question covers")
    question: str = Field(..., min_length=1, description="Question text")
    options: dict[str, str] = Field(..., description="Choice key (A-D) to option text")
    correct_answer: str = Field(..., description="Key of the correct option")
    explanation: str = Field(..., description="Why the correct answer is correct")

    @field_validator("topic", "question", "explanation", mode="before")
    @classmethod
    def _strip_text(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("options", mode="before")
    @classmethod
    def _normalize_options(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            return value
        normalized = {normalize_choice(k): str(v).strip() for k, v in value.items()}
        if set(normalized) != set(CHOICE_KEYS) or len(value) != len(CHOICE_KEYS):
            raise ValueError(f"options must have exactly the keys {', '.join(CHOICE_KEYS)}")
        return {key: normalized[key] for key in CHOICE_KEYS}

    @field_validator("correct_answer", mode="before")
    @classmethod
    def _normalize_answer(cls, value: Any) -> Any:
        return normalize_choice(value) if isinstance(value, str) else value

    @model_validator(mode="after")
    def _answer_in_options(self) -> QuizQuestion:
        if self.correct_answer not in self.options:
            raise ValueError(f"correct_answer {self.correct_answer!r} is not an option key")
        return self


@dataclass(frozen=True)
class QuestionResult:
    """Scoring outcome for one question."""

    index: int
    topic: str
    question: str
    user_answer: str | None
    correct_answer: str
    is_correct: bool
    explanation: str

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the snake_case keys the feedback endpoint uses."""
        return {
            "topic": self.topic,
            "question": self.question,
            "user_answer": self.user_answer,
            "correct_answer": self.correct_answer,
            "is_correct": self.is_correct,
            "explanation": self.explanation,
        }


@dataclass(frozen=True)
class ScoreResult:
    """Aggregate score for a question set and an answer map."""

    correct: int
    total: int
    percentage: float
    per_question: tuple[QuestionResult, ...] = field(default_factory=tuple)

    @property
    def display_percentage(self) -> float:
        """Percentage rounded to one decimal place, for display only."""
        return round(self.percentage, 1)

    @property
    def topics(self) -> list[str]:
        """Distinct topics in question order."""
        return list(dict.fromkeys(r.topic for r in self.per_question))


# ========================================
# Gateway feedback payload
# ========================================


class FeedbackItem(BaseModel):
    """Per-question feedback as returned by the gateway."""

    model_config = ConfigDict(extra="ignore")

    topic: str = ""
    question: str = ""
    user_answer: str | None = None
    correct_answer: str = ""
    is_correct: bool
    explanation: str = ""

    @field_validator("user_answer", mode="before")
    @classmethod
    def _blank_is_absent(cls, value: Any) -> Any:
        if value is None:
            return None
        text = str(value).strip()
        return text or None


class FeedbackScore(BaseModel):
    """Aggregate score block of the gateway feedback."""

    model_config = ConfigDict(extra="ignore")

    correct: int = Field(..., ge=0)
    total: int = Field(..., ge=0)
    percentage: float = Field(..., ge=0, le=100)
    summary: str = ""


class QuizFeedback(BaseModel):
    """Complete feedback payload from the gateway."""

    model_config = ConfigDict(extra="ignore")

    feedback: list[FeedbackItem]
    score: FeedbackScore
