"""
Unit tests for the response sanitizer.
"""

import json

import pytest

from src.core.sanitizer import sanitize


class TestSanitize:
    """Tests for stripping markdown fences from model output."""

    def test_strips_json_fence(self):
        raw = '```json\n{"topics": ["A"]}\n```'
        assert sanitize(raw) == '{"topics": ["A"]}'

    def test_strips_bare_fence(self):
        raw = '```\n{"a": 1}\n```'
        assert sanitize(raw) == '{"a": 1}'

    def test_fence_language_tag_is_case_insensitive(self):
        raw = '```JSON\n[1, 2]\n```'
        assert sanitize(raw) == "[1, 2]"

    def test_surrounding_whitespace_and_crlf(self):
        raw = '  \r\n```json\r\n{"a": 1}\r\n```  \n'
        assert json.loads(sanitize(raw)) == {"a": 1}

    def test_unfenced_text_only_trimmed(self):
        assert sanitize('  {"a": 1}\n') == '{"a": 1}'

    def test_fence_on_single_line(self):
        assert sanitize('```json {"a": 1}```') == '{"a": 1}'

    def test_inner_backticks_preserved(self):
        payload = '{"explanation": "use `print()`"}'
        assert sanitize(f"```json\n{payload}\n```") == payload

    @pytest.mark.parametrize("raw", ["", "   ", "```json\n```"])
    def test_empty_input_gives_empty_string(self, raw):
        assert sanitize(raw) == ""

    def test_does_not_guarantee_json(self):
        assert sanitize("```json\nnot json\n```") == "not json"
