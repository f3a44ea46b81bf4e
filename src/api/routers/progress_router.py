"""
Progress router for per-document topic coverage.

Endpoints for:
- Reading coverage for a study document
- Registering extracted topics (uncovered)
- Recording the topics of a completed quiz (covered)
- Manual covered/uncovered toggle
- Reset
"""
from __future__ import annotations

from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from src.api.dependencies import get_tracker
from src.core.errors import ValidationError
from src.progress import (
    TopicCoverageState,
    TopicCoverageTracker,
    merge_topics,
    register_topics,
    toggle_covered,
)

router = APIRouter()


class ProgressResponse(BaseModel):
    """Coverage state for one document."""

    document: str
    topics: List[str]
    covered: Dict[str, bool]
    covered_count: int
    percentage: int = Field(..., ge=0, le=100)


class TopicsRequest(BaseModel):
    topics: List[str] = Field(default_factory=list)


class ToggleRequest(BaseModel):
    topic: str


def _to_response(document: str, state: TopicCoverageState) -> ProgressResponse:
    return ProgressResponse(
        document=document,
        topics=list(state.topics),
        covered=dict(state.covered),
        covered_count=state.covered_count,
        percentage=state.percentage,
    )


@router.get("/{document}", response_model=ProgressResponse, summary="Get topic coverage")
def get_progress(
    document: str,
    tracker: TopicCoverageTracker = Depends(get_tracker),
) -> ProgressResponse:
    return _to_response(document, tracker.load_state(document))


@router.post("/{document}/topics", response_model=ProgressResponse, summary="Register topics")
def add_topics(
    document: str,
    request: TopicsRequest,
    tracker: TopicCoverageTracker = Depends(get_tracker),
) -> ProgressResponse:
    """Append newly extracted topics as not yet covered."""
    state = register_topics(tracker.load_state(document), request.topics)
    tracker.persist(document, state)
    return _to_response(document, state)


@router.post("/{document}/complete", response_model=ProgressResponse, summary="Record quiz topics")
def complete_topics(
    document: str,
    request: TopicsRequest,
    tracker: TopicCoverageTracker = Depends(get_tracker),
) -> ProgressResponse:
    """Mark the topics of a completed quiz as covered."""
    state = merge_topics(tracker.load_state(document), request.topics)
    tracker.persist(document, state)
    return _to_response(document, state)


@router.post("/{document}/toggle", response_model=ProgressResponse, summary="Toggle a topic")
def toggle_topic(
    document: str,
    request: ToggleRequest,
    tracker: TopicCoverageTracker = Depends(get_tracker),
) -> ProgressResponse:
    try:
        state = toggle_covered(tracker.load_state(document), request.topic)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    tracker.persist(document, state)
    return _to_response(document, state)


@router.delete("/{document}", summary="Reset topic coverage")
def reset_progress(
    document: str,
    tracker: TopicCoverageTracker = Depends(get_tracker),
) -> dict[str, object]:
    deleted = tracker.reset(document)
    return {"document": document, "reset": deleted}
