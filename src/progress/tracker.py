"""
Topic Coverage Tracker.

Keeps, per study document, the ordered set of topics seen so far and whether
each one is covered. State values are immutable; every operation returns a
new TopicCoverageState and only persist() writes to the store.

Completing a quiz marks its topics covered regardless of how the questions
were answered ("tested" and "mastered" are the same flag here).
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from loguru import logger

from src.core.errors import ValidationError
from src.quiz.models import QuizQuestion

from .store import StateStore


@dataclass(frozen=True)
class TopicCoverageState:
    """Ordered topics plus a covered flag per topic."""

    topics: tuple[str, ...] = ()
    covered: Mapping[str, bool] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self) -> None:
        unknown = [t for t in self.covered if t not in self.topics]
        if unknown:
            raise ValidationError(f"Coverage recorded for unknown topics: {unknown}")
        if not isinstance(self.covered, MappingProxyType):
            object.__setattr__(self, "covered", MappingProxyType(dict(self.covered)))

    @property
    def covered_count(self) -> int:
        return sum(1 for t in self.topics if self.covered.get(t, False))

    @property
    def percentage(self) -> int:
        """Whole-number share of covered topics (0 when there are none)."""
        if not self.topics:
            return 0
        return round(self.covered_count / len(self.topics) * 100)

    def is_covered(self, topic: str) -> bool:
        return self.covered.get(topic, False)

    def to_dict(self) -> dict[str, Any]:
        return {"topics": list(self.topics), "covered": dict(self.covered)}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TopicCoverageState:
        topics = tuple(dict.fromkeys(str(t) for t in data.get("topics") or []))
        covered = {
            str(t): bool(v) for t, v in (data.get("covered") or {}).items() if str(t) in topics
        }
        return cls(topics=topics, covered=covered)


def _clean_topics(topics: Iterable[str]) -> list[str]:
    """Strip whitespace, drop blanks and duplicates, keep first-seen order."""
    return list(dict.fromkeys(t.strip() for t in topics if t and t.strip()))


def merge_topics(state: TopicCoverageState, new_topics: Sequence[str]) -> TopicCoverageState:
    """Append unseen topics and mark every topic in new_topics as covered."""
    incoming = _clean_topics(new_topics)
    topics = list(state.topics) + [t for t in incoming if t not in state.topics]
    covered = dict(state.covered)
    for topic in incoming:
        covered[topic] = True
    return TopicCoverageState(topics=tuple(topics), covered=covered)


def register_topics(state: TopicCoverageState, new_topics: Sequence[str]) -> TopicCoverageState:
    """Append unseen topics as uncovered; existing flags are left alone."""
    incoming = _clean_topics(new_topics)
    added = [t for t in incoming if t not in state.topics]
    if not added:
        return state
    covered = dict(state.covered)
    for topic in added:
        covered[topic] = False
    return TopicCoverageState(topics=state.topics + tuple(added), covered=covered)


def toggle_covered(state: TopicCoverageState, topic: str) -> TopicCoverageState:
    """Flip the covered flag of one topic (manual override)."""
    if topic not in state.topics:
        raise ValidationError(f"Unknown topic: {topic!r}")
    covered = dict(state.covered)
    covered[topic] = not covered.get(topic, False)
    return TopicCoverageState(topics=state.topics, covered=covered)


class TopicCoverageTracker:
    """Loads and persists TopicCoverageState through an injected StateStore."""

    KEY_PREFIX = "topics:"

    def __init__(self, store: StateStore):
        self.store = store

    def _key(self, document: str) -> str:
        if not document or not document.strip():
            raise ValidationError("Document name is required.")
        return f"{self.KEY_PREFIX}{document.strip()}"

    def load_state(self, document: str) -> TopicCoverageState:
        """Persisted state for the document, or an empty state."""
        data = self.store.get(self._key(document))
        if data is None:
            return TopicCoverageState()
        return TopicCoverageState.from_dict(data)

    def persist(self, document: str, state: TopicCoverageState) -> None:
        """Write the full state, replacing any prior value."""
        self.store.put(self._key(document), state.to_dict())
        logger.debug(
            f"Persisted coverage for {document!r}: {state.covered_count}/{len(state.topics)}"
        )

    def reset(self, document: str) -> bool:
        """Forget all topics for the document."""
        return self.store.delete(self._key(document))

    def record_completed_quiz(
        self, document: str, questions: Sequence[QuizQuestion]
    ) -> TopicCoverageState:
        """Merge the topics of a completed quiz as covered and persist."""
        before = self.load_state(document)
        after = merge_topics(before, [q.topic for q in questions])
        self.persist(document, after)
        logger.info(
            f"Coverage for {document!r}: {after.covered_count}/{len(after.topics)} "
            f"topics ({after.percentage}%)"
        )
        return after
