"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import asyncio
import json
import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config import Settings  # noqa: E402
from src.quiz import QuizQuestion  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (API with a fake model)")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        # Mark based on test file location
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def question_dicts():
    """Three questions as the model returns them."""
    return [
        {
            "topic": "Photosynthesis",
            "question": "Where does the light-dependent reaction take place?",
            "options": {
                "A": "Stroma",
                "B": "Thylakoid membrane",
                "C": "Mitochondrial matrix",
                "D": "Cytoplasm",
            },
            "correct_answer": "B",
            "explanation": "Photosystems I and II sit in the thylakoid membrane.",
        },
        {
            "topic": "Calvin Cycle",
            "question": "Which enzyme fixes CO2 in the Calvin cycle?",
            "options": {
                "A": "RuBisCO",
                "B": "ATP synthase",
                "C": "Hexokinase",
                "D": "Amylase",
            },
            "correct_answer": "A",
            "explanation": "RuBisCO attaches CO2 to ribulose bisphosphate.",
        },
        {
            "topic": "Photosynthesis",
            "question": "What gas is released as a by-product of photolysis?",
            "options": {
                "A": "Carbon dioxide",
                "B": "Nitrogen",
                "C": "Oxygen",
                "D": "Hydrogen",
            },
            "correct_answer": "C",
            "explanation": "Splitting water releases O2.",
        },
    ]


@pytest.fixture
def sample_questions(question_dicts):
    """Validated QuizQuestion objects."""
    return [QuizQuestion.model_validate(q) for q in question_dicts]


@pytest.fixture
def test_settings(tmp_path):
    """Settings isolated from the developer's environment and home directory."""
    return Settings(
        _env_file=None,
        gemini_api_key="test-key",
        state_backend="memory",
        state_dir=tmp_path / "state",
        database_url=f"sqlite:///{tmp_path / 'state.db'}",
        log_file=None,
        gateway_timeout_seconds=5,
    )


class FakeResponse:
    """Stand-in for a google-generativeai response object."""

    def __init__(self, text):
        self._text = text

    @property
    def text(self):
        if isinstance(self._text, Exception):
            raise self._text
        return self._text


class FakeModel:
    """
    Stand-in for genai.GenerativeModel.

    Replies are consumed in order; an Exception reply is raised from the call
    and a float reply sleeps that many seconds (to trigger timeouts).
    """

    def __init__(self, *replies):
        self.replies = list(replies)
        self.prompts = []

    async def generate_content_async(self, prompt, generation_config=None):
        self.prompts.append(prompt)
        reply = self.replies.pop(0) if self.replies else ""
        if isinstance(reply, float):
            await asyncio.sleep(reply)
            return FakeResponse("")
        if isinstance(reply, BaseException) and not isinstance(reply, ValueError):
            raise reply
        return FakeResponse(reply)


@pytest.fixture
def fake_model():
    """Factory for FakeModel instances."""
    return FakeModel


@pytest.fixture
def fenced():
    """Wrap a payload the way Gemini usually does."""

    def _fenced(payload):
        return f"```json\n{json.dumps(payload)}\n```"

    return _fenced
