"""
Tests for the Answer Service.

Tests cover:
1. Not-configured answers
2. Model answers and source parsing
3. Locally composed answers on model failure
"""

import json

import pytest
from conftest import FakeLLM

from src.models.ai import AnswerContext
from src.services.answer_service import (
    FALLBACK_ANSWER_CHARS,
    NOT_CONFIGURED_ANSWER,
    AnswerService,
    compose_fallback_answer,
)
from src.utils.exceptions import LLMError


@pytest.fixture
def contexts():
    return [
        AnswerContext(
            id="note_1",
            title="Rust Ownership",
            content="Each value has a single owner.",
            summary="- Values have one owner\n- Dropped when owner leaves scope",
        ),
        AnswerContext(id="note_2", title="Borrowing", content="References borrow values!"),
        AnswerContext(id="note_3", title="Lifetimes", content="Scopes bound references."),
        AnswerContext(id="note_4", title="Traits", content="Shared behaviour."),
    ]


@pytest.mark.unit
class TestComposeFallbackAnswer:
    """Tests for the locally composed answer."""

    def test_uses_summary_then_content(self, contexts):
        result = compose_fallback_answer("What is ownership?", contexts)

        assert result.from_fallback is True
        assert result.answer.startswith(
            'Based on your notes, here\'s what I found about "What is ownership?":\n\n'
        )
        assert (
            'From your note "Rust Ownership": Values have one owner. '
            "Dropped when owner leaves scope." in result.answer
        )
        assert 'From your note "Borrowing": References borrow values!' in result.answer
        assert "Traits" not in result.answer

    def test_sources_are_top_three(self, contexts):
        result = compose_fallback_answer("q", contexts)

        assert [source.id for source in result.sources] == ["note_1", "note_2", "note_3"]

    def test_stitched_text_is_capped(self):
        long_notes = [
            AnswerContext(id=f"note_{i}", title=f"N{i}", content="word " * 400) for i in range(3)
        ]

        result = compose_fallback_answer("q", long_notes)

        prefix = 'Based on your notes, here\'s what I found about "q":\n\n'
        assert len(result.answer) == len(prefix) + FALLBACK_ANSWER_CHARS

    def test_no_candidates(self):
        result = compose_fallback_answer("What is ownership?", [])

        assert result.answer == (
            'I couldn\'t find an answer to "What is ownership?" in your notes. '
            "Try adding more context."
        )
        assert result.sources == []


@pytest.mark.unit
@pytest.mark.asyncio
class TestAnswerService:
    """Tests for answer()."""

    async def test_not_configured(self, contexts):
        result = await AnswerService(llm=None).answer("What is ownership?", contexts)

        assert result.answer == NOT_CONFIGURED_ANSWER
        assert [source.id for source in result.sources] == ["note_1", "note_2", "note_3"]

    async def test_not_configured_without_candidates(self):
        result = await AnswerService(llm=None).answer("anything", [])

        assert result.answer == NOT_CONFIGURED_ANSWER
        assert result.sources == []

    async def test_model_answer_and_sources(self, contexts):
        llm = FakeLLM(
            responses=[
                json.dumps(
                    {
                        "answer": "Ownership means each value has one owner.",
                        "sources": [{"id": "note_1", "title": "Rust Ownership"}],
                    }
                )
            ]
        )

        result = await AnswerService(llm=llm).answer("What is ownership?", contexts)

        assert result.from_fallback is False
        assert result.answer == "Ownership means each value has one owner."
        assert [source.id for source in result.sources] == ["note_1"]
        call = llm.calls[0]
        assert call["json_mode"] is True
        assert call["system"]
        assert call["temperature"] == 0.7
        assert call["max_tokens"] == 2048
        assert "ID: note_4" in call["prompt"]

    async def test_malformed_sources_default_to_top_three(self, contexts):
        llm = FakeLLM(responses=[json.dumps({"answer": "A", "sources": "note_1"})])

        result = await AnswerService(llm=llm).answer("q", contexts)

        assert result.answer == "A"
        assert [source.id for source in result.sources] == ["note_1", "note_2", "note_3"]

    async def test_model_failure_composes_locally(self, contexts):
        service = AnswerService(llm=FakeLLM(error=LLMError("quota exceeded")))

        result = await service.answer("What is ownership?", contexts)

        assert result.from_fallback is True
        assert result.answer.startswith("Based on your notes")

    async def test_blank_answer_composes_locally(self, contexts):
        llm = FakeLLM(responses=[json.dumps({"answer": "   ", "sources": []})])

        result = await AnswerService(llm=llm).answer("What is ownership?", contexts)

        assert result.from_fallback is True
        assert "Rust Ownership" in result.answer

    async def test_non_json_composes_locally(self, contexts):
        llm = FakeLLM(responses=["Ownership is about memory."])

        result = await AnswerService(llm=llm).answer("q", contexts)

        assert result.from_fallback is True
