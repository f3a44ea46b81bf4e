"""
FastAPI dependencies.

Tests replace these through ``app.dependency_overrides``.
"""

from __future__ import annotations

from functools import lru_cache

from fastapi import Depends

from src.gateway import GeminiGateway, GenerationGateway
from src.progress import StateStore, TopicCoverageTracker, build_state_store


@lru_cache(maxsize=1)
def get_gateway() -> GenerationGateway:
    """Process-wide Gemini gateway."""
    return GeminiGateway()


@lru_cache(maxsize=1)
def get_state_store() -> StateStore:
    """Process-wide state store selected by STATE_BACKEND."""
    return build_state_store()


def get_tracker(store: StateStore = Depends(get_state_store)) -> TopicCoverageTracker:
    return TopicCoverageTracker(store)
