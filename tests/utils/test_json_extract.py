"""
Tests for JSON extraction from model output.
"""

import pytest

from src.utils import extract_json_object


@pytest.mark.unit
class TestExtractJsonObject:
    """Tests for best-effort JSON object recovery."""

    def test_plain_object(self):
        assert extract_json_object('{"summary": "s", "tags": ["a"]}') == {
            "summary": "s",
            "tags": ["a"],
        }

    def test_json_fence(self):
        content = 'Here you go:\n```json\n{"answer": "yes"}\n```\nThanks'
        assert extract_json_object(content) == {"answer": "yes"}

    def test_bare_fence(self):
        assert extract_json_object('```\n{"answer": "yes"}\n```') == {"answer": "yes"}

    def test_object_embedded_in_prose(self):
        content = 'Sure! {"answer": "42", "sources": []} Hope that helps.'
        assert extract_json_object(content) == {"answer": "42", "sources": []}

    @pytest.mark.parametrize("content", [None, "", "   ", "not json", "[1, 2, 3]", "{broken"])
    def test_unrecoverable(self, content):
        """Test that anything without a JSON object yields None."""
        assert extract_json_object(content) is None
