"""
Tests for the Summarization Service.

Tests cover:
1. Local fallback (no model, model failure, unusable output)
2. Parsing model JSON output
"""

import json

import pytest
from conftest import FakeLLM

from src.services.summarizer import (
    SummarizationService,
    fallback_summary,
    fallback_tags,
)
from src.utils.exceptions import LLMError


@pytest.mark.unit
class TestFallbackHelpers:
    """Tests for the deterministic fallbacks."""

    def test_fallback_summary_joins_insights(self):
        assert fallback_summary("Body", ["one", "two"]) == "Body\none\ntwo"

    def test_fallback_summary_truncates(self):
        assert len(fallback_summary("x" * 500)) == 180

    def test_fallback_tags_from_title(self):
        assert fallback_tags("Rust Ownership: Borrowing & Lifetimes!") == [
            "rust",
            "ownership",
            "borrowing",
            "lifetimes",
        ]

    def test_fallback_tags_capped_at_five(self):
        assert fallback_tags("a b c d e f g") == ["a", "b", "c", "d", "e"]


@pytest.mark.unit
@pytest.mark.asyncio
class TestSummarizationService:
    """Tests for summarize()."""

    async def test_without_model_uses_fallback(self):
        service = SummarizationService(llm=None)

        result = await service.summarize("Rust Ownership", "Each value has one owner.", ["Moves"])

        assert result.from_fallback is True
        assert result.summary == "Each value has one owner.\nMoves"
        assert result.tags == ["rust", "ownership"]
        assert service.is_configured is False

    async def test_model_output_used(self):
        llm = FakeLLM(responses=[json.dumps({"summary": " Owners free values. ", "tags": ["rust", " memory ", ""]})])
        service = SummarizationService(llm=llm)

        result = await service.summarize("Rust Ownership", "Each value has one owner.")

        assert result.from_fallback is False
        assert result.summary == "Owners free values."
        assert result.tags == ["rust", "memory"]
        assert llm.calls[0]["json_mode"] is True
        assert "Rust Ownership" in llm.calls[0]["prompt"]

    async def test_fenced_json_accepted(self):
        llm = FakeLLM(responses=['```json\n{"summary": "S", "tags": ["t"]}\n```'])

        result = await SummarizationService(llm=llm).summarize("T", "C")

        assert result.summary == "S"
        assert result.tags == ["t"]

    async def test_model_failure_uses_fallback(self):
        """Test that a provider error never escapes summarize()."""
        service = SummarizationService(llm=FakeLLM(error=LLMError("timeout")))

        result = await service.summarize("Rust Ownership", "Body")

        assert result.from_fallback is True
        assert result.summary == "Body"
        assert result.tags == ["rust", "ownership"]

    async def test_non_json_uses_fallback(self):
        service = SummarizationService(llm=FakeLLM(responses=["Here is a summary of your note."]))

        result = await service.summarize("Title", "Body")

        assert result.from_fallback is True
        assert result.summary == "Body"

    async def test_blank_summary_replaced(self):
        llm = FakeLLM(responses=[json.dumps({"summary": "  ", "tags": ["kept"]})])

        result = await SummarizationService(llm=llm).summarize("Title", "Body", ["Insight"])

        assert result.summary == "Body\nInsight"
        assert result.tags == ["kept"]

    async def test_non_list_tags_become_empty(self):
        llm = FakeLLM(responses=[json.dumps({"summary": "S", "tags": "rust, memory"})])

        result = await SummarizationService(llm=llm).summarize("Title", "Body")

        assert result.summary == "S"
        assert result.tags == []
