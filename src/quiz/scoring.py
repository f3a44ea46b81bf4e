"""
Scoring Engine.

score() is the authoritative, side-effect free computation. The gateway can
also produce feedback with its own numbers; reconcile_feedback() checks those
numbers against the local result and keeps the local ones.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from loguru import logger

from src.core.errors import ValidationError

from .models import QuestionResult, QuizFeedback, QuizQuestion, ScoreResult, normalize_choice

# The model rounds percentages for display (e.g. 85.7)
PERCENTAGE_TOLERANCE = 0.1


def score(questions: Sequence[QuizQuestion], selected_answers: Mapping[int, str]) -> ScoreResult:
    """
    Score a question set against a user's answers.

    Args:
        questions: Ordered questions (at least one)
        selected_answers: Question index -> choice key; missing indices are unanswered

    Returns:
        ScoreResult with full-precision percentage
    """
    if not questions:
        raise ValidationError("Cannot score an empty quiz.")

    results = []
    for index, question in enumerate(questions):
        raw = selected_answers.get(index)
        user_answer = normalize_choice(raw) if raw is not None else None
        results.append(
            QuestionResult(
                index=index,
                topic=question.topic,
                question=question.question,
                user_answer=user_answer,
                correct_answer=question.correct_answer,
                is_correct=user_answer == question.correct_answer,
                explanation=question.explanation,
            )
        )

    correct = sum(1 for r in results if r.is_correct)
    total = len(questions)
    return ScoreResult(
        correct=correct,
        total=total,
        percentage=100 * correct / total,
        per_question=tuple(results),
    )


@dataclass(frozen=True)
class ReconciledFeedback:
    """Local score enriched with the gateway's explanations and summary."""

    result: ScoreResult
    summary: str
    explanations: tuple[str, ...]
    mismatches: list[str] = field(default_factory=list)

    @property
    def verified(self) -> bool:
        return not self.mismatches

    def to_dict(self) -> dict:
        """Serialize to the /api/quiz-feedback response shape."""
        feedback = []
        for item, explanation in zip(self.result.per_question, self.explanations):
            entry = item.to_dict()
            entry["explanation"] = explanation
            feedback.append(entry)
        return {
            "feedback": feedback,
            "score": {
                "correct": self.result.correct,
                "total": self.result.total,
                "percentage": self.result.display_percentage,
                "summary": self.summary,
                "verified": self.verified,
            },
        }


def reconcile_feedback(result: ScoreResult, feedback: QuizFeedback) -> ReconciledFeedback:
    """
    Verify gateway feedback against the local score.

    Mismatches are logged and listed; the returned numbers and correctness
    flags are always the local ones.
    """
    mismatches: list[str] = []
    remote = feedback.score

    if remote.correct != result.correct:
        mismatches.append(f"correct: gateway={remote.correct} local={result.correct}")
    if remote.total != result.total:
        mismatches.append(f"total: gateway={remote.total} local={result.total}")
    if abs(remote.percentage - result.percentage) > PERCENTAGE_TOLERANCE:
        mismatches.append(
            f"percentage: gateway={remote.percentage} local={result.percentage:.1f}"
        )
    if len(feedback.feedback) != result.total:
        mismatches.append(
            f"feedback items: gateway={len(feedback.feedback)} local={result.total}"
        )

    explanations = []
    for local in result.per_question:
        item = feedback.feedback[local.index] if local.index < len(feedback.feedback) else None
        if item is not None and item.is_correct != local.is_correct:
            mismatches.append(
                f"question {local.index}: gateway is_correct={item.is_correct} "
                f"local={local.is_correct}"
            )
        explanations.append(item.explanation if item and item.explanation else local.explanation)

    for mismatch in mismatches:
        logger.warning(f"Gateway feedback disagrees with local score - {mismatch}")

    return ReconciledFeedback(
        result=result,
        summary=remote.summary,
        explanations=tuple(explanations),
        mismatches=mismatches,
    )
