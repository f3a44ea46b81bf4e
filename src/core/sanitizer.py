"""
Strip markdown code fences from raw model output before JSON parsing.
"""

from __future__ import annotations

import re

_OPENING_FENCE = re.compile(r"^```[ \t]*(?:json)?[ \t]*\r?\n?", re.IGNORECASE)
_CLOSING_FENCE = re.compile(r"\r?\n?```[ \t]*$")


def sanitize(raw: str) -> str:
    """
    Remove a surrounding ```json fence and outer whitespace.

    Text without a leading fence is returned trimmed but otherwise unchanged.
    The result is not guaranteed to be valid JSON.
    """
    text = raw.strip()
    if not text.startswith("```"):
        return text

    text = _OPENING_FENCE.sub("", text, count=1)
    text = _CLOSING_FENCE.sub("", text, count=1)
    return text.strip()
