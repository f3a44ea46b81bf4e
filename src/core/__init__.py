"""
Core Module - Shared error types, response sanitizing and logging setup.

Components:
- errors: StudySparkError hierarchy (validation, quiz state, gateway)
- sanitizer: Strips markdown code fences from model output
- log_setup: loguru sink configuration
"""

from src.core.errors import (
    GatewayError,
    GatewayTimeout,
    MalformedResponse,
    QuizStateError,
    StudySparkError,
    ValidationError,
)
from src.core.sanitizer import sanitize

__all__ = [
    # Errors
    "StudySparkError",
    "ValidationError",
    "QuizStateError",
    "GatewayError",
    "GatewayTimeout",
    "MalformedResponse",
    # Sanitizer
    "sanitize",
]
