"""
Quiz session lifecycle.

A QuizSession is one attempt at a generated question set:

    Idle --start()--> InProgress --advance() on last question--> Completed
      ^                                                              |
      +-------------------------- reset() ---------------------------+

QuizSessionManager owns at most one session and tags outstanding generation
requests so that a question set arriving after a reset (or after a newer
request) is dropped instead of replacing the current state.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from loguru import logger

from src.core.errors import QuizStateError, ValidationError

from .models import QuizQuestion, ScoreResult, normalize_choice
from .scoring import score


class QuizState(str, Enum):
    """Lifecycle states of the session manager."""

    IDLE = "idle"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class QuizSession:
    """A single quiz attempt: fixed questions, sparse answers, cursor, completion flag."""

    def __init__(self, questions: Sequence[QuizQuestion]):
        if not questions:
            raise ValidationError("A quiz needs at least one question.")
        self._questions: tuple[QuizQuestion, ...] = tuple(questions)
        self._selected: dict[int, str] = {}
        self._current_index = 0
        self._completed = False

    @property
    def questions(self) -> tuple[QuizQuestion, ...]:
        return self._questions

    @property
    def selected_answers(self) -> dict[int, str]:
        """Copy of the answers recorded so far (index -> choice key)."""
        return dict(self._selected)

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def completed(self) -> bool:
        return self._completed

    @property
    def current_question(self) -> QuizQuestion:
        return self._questions[self._current_index]

    @property
    def current_answer(self) -> str | None:
        return self._selected.get(self._current_index)

    @property
    def is_last_question(self) -> bool:
        return self._current_index == len(self._questions) - 1

    @property
    def answered_count(self) -> int:
        return len(self._selected)

    def select_answer(self, choice_key: str) -> None:
        """Record (or overwrite) the answer for the current question."""
        if self._completed:
            return
        key = normalize_choice(choice_key)
        if key not in self.current_question.options:
            raise ValidationError(f"Unknown choice {choice_key!r}.")
        self._selected[self._current_index] = key

    def advance(self) -> None:
        """Move to the next question, or complete the quiz on the last one."""
        if self._completed:
            return
        if self.is_last_question:
            self._completed = True
            logger.debug(
                f"Quiz completed: {self.answered_count}/{len(self._questions)} answered"
            )
        else:
            self._current_index += 1

    def retreat(self) -> None:
        """Move to the previous question; no-op at the first question or after completion."""
        if self._completed or self._current_index == 0:
            return
        self._current_index -= 1

    def score(self) -> ScoreResult:
        return score(self._questions, self._selected)


@dataclass(frozen=True)
class RequestTicket:
    """Identity of an outstanding generation request."""

    generation: int


class QuizSessionManager:
    """
    Drives the Idle / InProgress / Completed state machine.

    Navigation and selection are delegated to the active QuizSession. Whether
    "next" requires an answer first is left to the caller.
    """

    def __init__(self) -> None:
        self._session: QuizSession | None = None
        self._generation = 0

    @property
    def state(self) -> QuizState:
        if self._session is None:
            return QuizState.IDLE
        if self._session.completed:
            return QuizState.COMPLETED
        return QuizState.IN_PROGRESS

    @property
    def session(self) -> QuizSession:
        """The active session; raises QuizStateError when Idle."""
        if self._session is None:
            raise QuizStateError("No quiz in progress.")
        return self._session

    # ------------------------------------------------------------------
    # Request tagging
    # ------------------------------------------------------------------

    def begin_request(self) -> RequestTicket:
        """Tag a new generation request; any older ticket becomes stale."""
        self._generation += 1
        return RequestTicket(generation=self._generation)

    def is_current(self, ticket: RequestTicket) -> bool:
        return ticket.generation == self._generation

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self, questions: Sequence[QuizQuestion], ticket: RequestTicket | None = None) -> bool:
        """
        Start a session with a freshly generated question set.

        Args:
            questions: Validated questions (at least one)
            ticket: Ticket from begin_request(); stale tickets are dropped

        Returns:
            True if the session started, False if the response was stale

        Raises:
            QuizStateError: If a session is already active (reset() first)
            ValidationError: If questions is empty
        """
        if ticket is not None and not self.is_current(ticket):
            logger.info(
                f"Dropping stale quiz response (ticket {ticket.generation}, "
                f"current {self._generation})"
            )
            return False
        if self._session is not None:
            raise QuizStateError("A quiz is already active; reset it before starting another.")

        self._session = QuizSession(questions)
        logger.info(f"Quiz started with {len(questions)} questions")
        return True

    def select_answer(self, choice_key: str) -> None:
        self.session.select_answer(choice_key)

    def advance(self) -> QuizState:
        self.session.advance()
        return self.state

    def retreat(self) -> None:
        self.session.retreat()

    def reset(self) -> None:
        """Discard the session and invalidate outstanding requests."""
        if self._session is not None:
            logger.debug("Quiz session reset")
        self._session = None
        self._generation += 1

    def result(self) -> ScoreResult:
        """Score the active session."""
        return self.session.score()
