"""API routers for StudySpark."""

from src.api.routers import progress_router, study_router

__all__ = [
    "progress_router",
    "study_router",
]
