"""
Quiz module: question model, session lifecycle and scoring.

This module provides:
- QuizQuestion: validated multiple-choice question (options A-D)
- QuizSession / QuizSessionManager: Idle -> InProgress -> Completed lifecycle
- score / reconcile_feedback: local scoring and gateway feedback verification
"""

from .models import (
    CHOICE_KEYS,
    FeedbackItem,
    FeedbackScore,
    QuestionResult,
    QuizFeedback,
    QuizQuestion,
    ScoreResult,
)
from .scoring import ReconciledFeedback, reconcile_feedback, score
from .session import QuizSession, QuizSessionManager, QuizState, RequestTicket

__all__ = [
    "CHOICE_KEYS",
    "FeedbackItem",
    "FeedbackScore",
    "QuestionResult",
    "QuizFeedback",
    "QuizQuestion",
    "ScoreResult",
    "ReconciledFeedback",
    "reconcile_feedback",
    "score",
    "QuizSession",
    "QuizSessionManager",
    "QuizState",
    "RequestTicket",
]
