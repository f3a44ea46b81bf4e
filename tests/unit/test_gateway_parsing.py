"""
Unit tests for validating raw gateway text.
"""

import json

import pytest

from src.core.errors import MalformedResponse
from src.gateway import parse_feedback, parse_quiz, parse_topics


class TestParseQuiz:
    """Tests for quiz payload validation."""

    def test_fenced_payload(self, fenced, question_dicts):
        questions = parse_quiz(fenced({"questions": question_dicts}))

        assert len(questions) == 3
        assert questions[1].correct_answer == "A"

    def test_bare_list_accepted(self, question_dicts):
        assert len(parse_quiz(json.dumps(question_dicts))) == 3

    def test_invalid_json(self):
        with pytest.raises(MalformedResponse) as exc_info:
            parse_quiz("Sure! Here is your quiz: {questions: ...}")

        assert exc_info.value.raw_text.startswith("Sure!")
        assert "Sure!" not in str(exc_info.value)

    def test_empty_question_list(self, fenced):
        with pytest.raises(MalformedResponse):
            parse_quiz(fenced({"questions": []}))

    def test_one_bad_question_rejects_whole_set(self, fenced, question_dicts):
        question_dicts[2]["options"].pop("D")

        with pytest.raises(MalformedResponse):
            parse_quiz(fenced({"questions": question_dicts}))

    def test_missing_questions_key(self, fenced):
        with pytest.raises(MalformedResponse):
            parse_quiz(fenced({"quiz": []}))


class TestParseTopics:
    """Tests for topic list validation."""

    def test_topics(self, fenced):
        assert parse_topics(fenced({"topics": ["Cells", "Energy"]})) == ["Cells", "Energy"]

    def test_blank_and_duplicate_topics_dropped(self, fenced):
        raw = fenced({"topics": [" Cells ", "", "Cells", "Energy"]})
        assert parse_topics(raw) == ["Cells", "Energy"]

    def test_empty_list_is_valid(self, fenced):
        assert parse_topics(fenced({"topics": []})) == []

    def test_non_string_topic(self, fenced):
        with pytest.raises(MalformedResponse):
            parse_topics(fenced({"topics": [{"name": "Cells"}]}))


class TestParseFeedback:
    """Tests for feedback payload validation."""

    def test_feedback(self, fenced):
        raw = fenced(
            {
                "feedback": [{"topic": "T", "is_correct": True, "explanation": "Yes"}],
                "score": {"correct": 1, "total": 1, "percentage": 100, "summary": "Great"},
            }
        )
        feedback = parse_feedback(raw)

        assert feedback.score.summary == "Great"
        assert feedback.feedback[0].is_correct is True

    def test_missing_score(self, fenced):
        with pytest.raises(MalformedResponse):
            parse_feedback(fenced({"feedback": []}))
