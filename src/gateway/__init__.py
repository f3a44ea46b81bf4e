"""
Generation Gateway: Gemini client, prompts and response validation.
"""

from .client import GeminiGateway, GenerationGateway
from .parsing import parse_feedback, parse_quiz, parse_topics

__all__ = [
    "GeminiGateway",
    "GenerationGateway",
    "parse_feedback",
    "parse_quiz",
    "parse_topics",
]
