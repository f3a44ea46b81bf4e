"""
Typed errors shared by the gateway, quiz and progress layers.

Every failure surfaced to a caller is one of these kinds. The HTTP layer maps
them to status codes and the CLI to notices; nothing here retries.
"""

from __future__ import annotations


class StudySparkError(Exception):
    """Base class for all StudySpark errors."""


class ValidationError(StudySparkError):
    """Missing or empty required input."""


class QuizStateError(StudySparkError):
    """Operation not allowed in the current quiz lifecycle state."""


class GatewayError(StudySparkError):
    """The generation gateway failed or returned a non-success status."""


class GatewayTimeout(GatewayError):
    """The generation gateway did not answer in time."""


class MalformedResponse(GatewayError):
    """Gateway text was not valid JSON or lacked required fields.

    ``raw_text`` is kept for diagnostic logging only and must never be shown
    to an end user.
    """

    def __init__(self, message: str, raw_text: str = ""):
        super().__init__(message)
        self.raw_text = raw_text
