"""
Unit tests for the Gemini gateway client.

The google-generativeai model is replaced with FakeModel (see conftest), so
no network access or API key is needed.
"""

import pytest

from src.core.errors import GatewayError, GatewayTimeout, MalformedResponse, ValidationError
from src.gateway import GeminiGateway


@pytest.fixture
def make_gateway(test_settings, fake_model):
    """Build a gateway whose model returns the given replies in order."""

    def _make(*replies, **overrides):
        settings = test_settings.model_copy(update=overrides) if overrides else test_settings
        model = fake_model(*replies)
        return GeminiGateway(settings=settings, model=model), model

    return _make


class TestGenerateQuiz:
    """Tests for generate_quiz()."""

    @pytest.mark.asyncio
    async def test_returns_validated_questions(self, make_gateway, fenced, question_dicts):
        gateway, model = make_gateway(fenced({"questions": question_dicts}))

        questions = await gateway.generate_quiz("Photosynthesis notes")

        assert [q.topic for q in questions] == ["Photosynthesis", "Calvin Cycle", "Photosynthesis"]
        assert "Photosynthesis notes" in model.prompts[0]
        assert "7-question" in model.prompts[0]

    @pytest.mark.asyncio
    async def test_question_count_from_settings(self, make_gateway, fenced, question_dicts):
        gateway, model = make_gateway(fenced({"questions": question_dicts}), quiz_question_count=3)

        await gateway.generate_quiz("notes")

        assert "3-question" in model.prompts[0]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("notes", [None, "", "   \n"])
    async def test_empty_notes_rejected_without_calling_model(self, make_gateway, notes):
        gateway, model = make_gateway()

        with pytest.raises(ValidationError, match="Notes content is required."):
            await gateway.generate_quiz(notes)
        assert model.prompts == []

    @pytest.mark.asyncio
    async def test_malformed_reply(self, make_gateway):
        gateway, _ = make_gateway("I cannot make a quiz from this.")

        with pytest.raises(MalformedResponse):
            await gateway.generate_quiz("notes")


class TestGatewayFailures:
    """Tests for transport-level failures."""

    @pytest.mark.asyncio
    async def test_timeout(self, make_gateway):
        gateway, _ = make_gateway(1.0, gateway_timeout_seconds=0.05)

        with pytest.raises(GatewayTimeout):
            await gateway.summarize("notes")

    @pytest.mark.asyncio
    async def test_sdk_error_wrapped(self, make_gateway):
        gateway, _ = make_gateway(RuntimeError("quota exceeded"))

        with pytest.raises(GatewayError) as exc_info:
            await gateway.summarize("notes")
        assert not isinstance(exc_info.value, GatewayTimeout)

    @pytest.mark.asyncio
    async def test_blocked_response(self, make_gateway):
        gateway, _ = make_gateway(ValueError("response was blocked"))

        with pytest.raises(GatewayError):
            await gateway.chat("hello")

    @pytest.mark.asyncio
    async def test_empty_response(self, make_gateway):
        gateway, _ = make_gateway("   ")

        with pytest.raises(GatewayError):
            await gateway.summarize("notes")

    @pytest.mark.asyncio
    async def test_missing_api_key(self, test_settings):
        settings = test_settings.model_copy(update={"gemini_api_key": None})
        gateway = GeminiGateway(settings=settings)

        with pytest.raises(GatewayError, match="GEMINI_API_KEY"):
            await gateway.summarize("notes")


class TestTextTasks:
    """Tests for summarize(), extract_topics(), chat() and score_quiz()."""

    @pytest.mark.asyncio
    async def test_summarize(self, make_gateway):
        gateway, _ = make_gateway("## Main Topic\n- point\n")

        assert await gateway.summarize("notes") == "## Main Topic\n- point"

    @pytest.mark.asyncio
    async def test_summarize_requires_text(self, make_gateway):
        gateway, _ = make_gateway()

        with pytest.raises(ValidationError, match="Text content is required for summary."):
            await gateway.summarize(" ")

    @pytest.mark.asyncio
    async def test_extract_topics(self, make_gateway, fenced):
        gateway, _ = make_gateway(fenced({"topics": ["Cells", "Cells", "Energy"]}))

        assert await gateway.extract_topics("notes") == ["Cells", "Energy"]

    @pytest.mark.asyncio
    async def test_extract_topics_requires_text(self, make_gateway):
        gateway, _ = make_gateway()

        with pytest.raises(ValidationError, match="Text content is required to extract topics."):
            await gateway.extract_topics(None)

    @pytest.mark.asyncio
    async def test_chat_uses_default_instruction(self, make_gateway, test_settings):
        gateway, model = make_gateway("Mitochondria make ATP.")

        reply = await gateway.chat("What do mitochondria do?")

        assert reply == "Mitochondria make ATP."
        assert model.prompts[0].startswith(test_settings.chatbot_system_instruction)

    @pytest.mark.asyncio
    async def test_chat_custom_instruction(self, make_gateway):
        gateway, model = make_gateway("ok")

        await gateway.chat("hi", system_instruction="Answer in French.")

        assert model.prompts[0].startswith("Answer in French.")

    @pytest.mark.asyncio
    async def test_chat_requires_message(self, make_gateway):
        gateway, _ = make_gateway()

        with pytest.raises(ValidationError, match="Message is required."):
            await gateway.chat("")

    @pytest.mark.asyncio
    async def test_score_quiz(self, make_gateway, fenced, sample_questions):
        payload = {
            "feedback": [{"is_correct": True, "explanation": "Right"}] * 3,
            "score": {"correct": 3, "total": 3, "percentage": 100, "summary": "Perfect"},
        }
        gateway, model = make_gateway(fenced(payload))

        feedback = await gateway.score_quiz(sample_questions, {0: "B", 1: "A", 2: "C"})

        assert feedback.score.summary == "Perfect"
        assert "Thylakoid membrane" in model.prompts[0]

    @pytest.mark.asyncio
    async def test_score_quiz_requires_questions(self, make_gateway):
        gateway, _ = make_gateway()

        with pytest.raises(ValidationError, match="Questions and answers required"):
            await gateway.score_quiz([], {})
