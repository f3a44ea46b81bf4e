"""
Integration tests for the HTTP API.

The app runs in-process through FastAPI's TestClient with the gateway's
model replaced by FakeModel and an in-memory state store, so the full
request -> validation -> gateway -> response path is exercised offline.

Usage:
    pytest tests/integration/test_api_endpoints.py -v
"""

import pytest
from fastapi.testclient import TestClient

from src.api.dependencies import get_gateway, get_state_store
from src.api.main import app
from src.gateway import GeminiGateway
from src.progress import InMemoryStateStore


@pytest.fixture
def store():
    return InMemoryStateStore()


@pytest.fixture
def api(test_settings, fake_model, store):
    """
    Build a TestClient whose model answers with the given replies.

    Returns (client, model) so tests can inspect the prompts sent.
    """

    def _api(*replies):
        model = fake_model(*replies)
        gateway = GeminiGateway(settings=test_settings, model=model)
        app.dependency_overrides[get_gateway] = lambda: gateway
        app.dependency_overrides[get_state_store] = lambda: store
        return TestClient(app), model

    yield _api
    app.dependency_overrides.clear()


class TestHealth:
    """Service info endpoints."""

    def test_root(self, api):
        client, _ = api()
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["service"] == "studyspark"

    def test_health(self, api):
        client, _ = api()
        data = client.get("/health").json()

        assert data["status"] == "healthy"
        assert "ai" in data["components"]

    def test_config_hides_key(self, api):
        client, _ = api()
        data = client.get("/config").json()

        assert "gemini_api_key" not in str(data)
        assert data["quiz"]["question_count"] >= 1


class TestGenerateQuiz:
    """POST /api/generate-quiz"""

    def test_success(self, api, fenced, question_dicts):
        client, _ = api(fenced({"questions": question_dicts}))

        response = client.post("/api/generate-quiz", json={"notes": "Photosynthesis notes"})

        assert response.status_code == 200
        questions = response.json()["questions"]
        assert len(questions) == 3
        assert questions[0]["options"]["B"] == "Thylakoid membrane"

    @pytest.mark.parametrize("body", [{}, {"notes": ""}, {"notes": "   "}])
    def test_missing_notes(self, api, body):
        client, model = api()

        response = client.post("/api/generate-quiz", json=body)

        assert response.status_code == 400
        assert response.json() == {"error": "Notes content is required."}
        assert model.prompts == []

    @pytest.mark.parametrize("notes", [123, ["a"], {"text": "x"}, True])
    def test_non_string_notes(self, api, notes):
        client, model = api()

        response = client.post("/api/generate-quiz", json={"notes": notes})

        assert response.status_code == 400
        assert response.json() == {"error": "Notes content is required."}
        assert model.prompts == []

    def test_unparseable_reply(self, api):
        client, _ = api("Here are some questions, in prose.")

        response = client.post("/api/generate-quiz", json={"notes": "notes"})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to parse the generated quiz."}
        assert "prose" not in response.text

    def test_gateway_failure(self, api):
        client, _ = api(RuntimeError("quota exceeded"))

        response = client.post("/api/generate-quiz", json={"notes": "notes"})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to generate quiz."}

    def test_malformed_body(self, api):
        client, _ = api()

        response = client.post(
            "/api/generate-quiz",
            content="not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert "error" in response.json()


class TestSummaryAndTopics:
    """POST /api/summary and /api/list-topics"""

    def test_summary(self, api):
        client, _ = api("## Photosynthesis\n- Light reactions\n")

        response = client.post("/api/summary", json={"text": "notes"})

        assert response.status_code == 200
        assert response.json() == {"summary": "## Photosynthesis\n- Light reactions"}

    def test_summary_requires_text(self, api):
        client, _ = api()

        response = client.post("/api/summary", json={"text": ""})

        assert response.status_code == 400
        assert response.json() == {"error": "Text content is required for summary."}

    def test_summary_failure(self, api):
        client, _ = api("")

        response = client.post("/api/summary", json={"text": "notes"})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to generate summary."}

    def test_topics(self, api, fenced):
        client, _ = api(fenced({"topics": ["Light reactions", "Calvin cycle"]}))

        response = client.post("/api/list-topics", json={"text": "notes"})

        assert response.status_code == 200
        assert response.json() == {"topics": ["Light reactions", "Calvin cycle"]}

    def test_topics_requires_text(self, api):
        client, _ = api()

        response = client.post("/api/list-topics", json={})

        assert response.status_code == 400
        assert response.json() == {"error": "Text content is required to extract topics."}

    def test_non_string_text(self, api):
        client, _ = api()

        response = client.post("/api/summary", json={"text": 42})

        assert response.status_code == 400
        assert response.json() == {"error": "Text content is required for summary."}

    def test_topics_unparseable(self, api):
        client, _ = api("Topics: cells, energy")

        response = client.post("/api/list-topics", json={"text": "notes"})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to extract topics."}


class TestQuizFeedback:
    """POST /api/quiz-feedback"""

    @staticmethod
    def feedback_reply(fenced, correct, percentage, flags):
        return fenced(
            {
                "feedback": [
                    {"is_correct": flag, "explanation": f"Explanation {i}"}
                    for i, flag in enumerate(flags)
                ],
                "score": {
                    "correct": correct,
                    "total": len(flags),
                    "percentage": percentage,
                    "summary": "Review the Calvin cycle.",
                },
            }
        )

    def test_verified_feedback(self, api, fenced, question_dicts):
        client, model = api(self.feedback_reply(fenced, 2, 66.7, [True, False, True]))

        response = client.post(
            "/api/quiz-feedback",
            json={"questions": question_dicts, "userAnswers": {"0": "B", "1": "C", "2": "C"}},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["score"] == {
            "correct": 2,
            "total": 3,
            "percentage": 66.7,
            "summary": "Review the Calvin cycle.",
            "verified": True,
        }
        assert data["feedback"][1]["user_answer"] == "C"
        assert data["feedback"][1]["explanation"] == "Explanation 1"
        assert '"1": "C"' in model.prompts[0]

    def test_disagreeing_model_is_corrected(self, api, fenced, question_dicts):
        client, _ = api(self.feedback_reply(fenced, 3, 100, [True, True, True]))

        response = client.post(
            "/api/quiz-feedback",
            json={"questions": question_dicts, "userAnswers": {"0": "B"}},
        )

        assert response.status_code == 200
        score = response.json()["score"]
        assert score["correct"] == 1
        assert score["percentage"] == 33.3
        assert score["verified"] is False
        assert response.json()["feedback"][2]["is_correct"] is False

    @pytest.mark.parametrize(
        "body",
        [
            {},
            {"questions": [], "userAnswers": {}},
            {"userAnswers": {"0": "A"}},
        ],
    )
    def test_missing_input(self, api, body):
        client, _ = api()

        response = client.post("/api/quiz-feedback", json=body)

        assert response.status_code == 400
        assert response.json() == {"error": "Questions and answers required"}

    def test_missing_answers(self, api, question_dicts):
        client, _ = api()

        response = client.post("/api/quiz-feedback", json={"questions": question_dicts})

        assert response.status_code == 400
        assert response.json() == {"error": "Questions and answers required"}

    def test_answer_index_out_of_range(self, api, question_dicts):
        client, model = api()

        response = client.post(
            "/api/quiz-feedback",
            json={"questions": question_dicts, "userAnswers": {"9": "A"}},
        )

        assert response.status_code == 400
        assert model.prompts == []

    def test_gateway_failure(self, api, question_dicts):
        client, _ = api("not json")

        response = client.post(
            "/api/quiz-feedback",
            json={"questions": question_dicts, "userAnswers": {"0": "B"}},
        )

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to get feedback"}


class TestChatbot:
    """POST /api/chatbot"""

    def test_reply(self, api):
        client, model = api("**ATP** is the energy currency of the cell.")

        response = client.post(
            "/api/chatbot",
            json={"message": "What is ATP?", "systemInstruction": "Be brief."},
        )

        assert response.status_code == 200
        assert response.json() == {"reply": "**ATP** is the energy currency of the cell."}
        assert model.prompts[0].startswith("Be brief.")

    def test_requires_message(self, api):
        client, _ = api()

        response = client.post("/api/chatbot", json={"message": "  "})

        assert response.status_code == 400
        assert response.json() == {"error": "Message is required."}

    def test_non_string_message(self, api):
        client, _ = api()

        response = client.post("/api/chatbot", json={"message": 7})

        assert response.status_code == 400
        assert response.json() == {"error": "Message is required."}

    def test_failure(self, api):
        client, _ = api(ValueError("blocked"))

        response = client.post("/api/chatbot", json={"message": "hi"})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to get chatbot response."}


class TestProgress:
    """/api/progress/{document}"""

    def test_unknown_document_is_empty(self, api):
        client, _ = api()

        data = client.get("/api/progress/bio.txt").json()

        assert data == {
            "document": "bio.txt",
            "topics": [],
            "covered": {},
            "covered_count": 0,
            "percentage": 0,
        }

    def test_register_complete_toggle_reset(self, api, store):
        client, _ = api()

        data = client.post("/api/progress/bio.txt/topics", json={"topics": ["A", "B", "C"]}).json()
        assert data["covered_count"] == 0

        data = client.post("/api/progress/bio.txt/complete", json={"topics": ["A", "D"]}).json()
        assert data["topics"] == ["A", "B", "C", "D"]
        assert data["covered_count"] == 2
        assert data["percentage"] == 50

        data = client.post("/api/progress/bio.txt/toggle", json={"topic": "B"}).json()
        assert data["covered"]["B"] is True
        assert data["percentage"] == 75

        assert client.get("/api/progress/bio.txt").json() == data

        response = client.delete("/api/progress/bio.txt")
        assert response.json() == {"document": "bio.txt", "reset": True}
        assert client.get("/api/progress/bio.txt").json()["topics"] == []

    def test_toggle_unknown_topic(self, api):
        client, _ = api()

        response = client.post("/api/progress/bio.txt/toggle", json={"topic": "Nope"})

        assert response.status_code == 400
        assert "Unknown topic" in response.json()["error"]
