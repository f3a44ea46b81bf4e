"""
Progress module: persisted topic coverage and cached study material.
"""

from .material_cache import StudyMaterial, StudyMaterialCache
from .store import (
    InMemoryStateStore,
    JsonFileStateStore,
    SqlStateStore,
    StateStore,
    build_state_store,
)
from .tracker import (
    TopicCoverageState,
    TopicCoverageTracker,
    merge_topics,
    register_topics,
    toggle_covered,
)

__all__ = [
    "StudyMaterial",
    "StudyMaterialCache",
    "InMemoryStateStore",
    "JsonFileStateStore",
    "SqlStateStore",
    "StateStore",
    "build_state_store",
    "TopicCoverageState",
    "TopicCoverageTracker",
    "merge_topics",
    "register_topics",
    "toggle_covered",
]
