"""
Tests for Ollama LLM provider.
"""

from unittest.mock import AsyncMock, patch

import pytest

from src.core.llm.ollama import OllamaLLM
from src.utils.exceptions import LLMError, ValidationError


@pytest.fixture
def ollama_llm():
    """Create Ollama LLM for testing."""
    return OllamaLLM(host="http://localhost:11434", model="llama3.1:8b", timeout=120.0)


@pytest.mark.unit
@pytest.mark.asyncio
class TestOllamaLLM:
    """Test Ollama LLM provider."""

    async def test_initialization(self, ollama_llm):
        """Test provider initialization."""
        assert ollama_llm.host == "http://localhost:11434"
        assert ollama_llm.model == "llama3.1:8b"
        assert ollama_llm.timeout == 120.0
        assert ollama_llm.client is not None

    async def test_complete_simple(self, ollama_llm):
        """Test simple text completion."""
        with patch.object(ollama_llm.client, "chat", new_callable=AsyncMock) as mock_chat:
            mock_chat.return_value = {"message": {"content": "Ownership moves values"}}

            result = await ollama_llm.complete("What is ownership?", max_tokens=50)

            assert result == "Ownership moves values"
            mock_chat.assert_called_once()
            assert mock_chat.call_args.kwargs["format"] is None

    async def test_complete_with_temperature(self, ollama_llm):
        """Test completion with custom temperature."""
        with patch.object(ollama_llm.client, "chat", new_callable=AsyncMock) as mock_chat:
            mock_chat.return_value = {"message": {"content": "test"}}

            await ollama_llm.complete("test", temperature=0.7, max_tokens=100)

            call_args = mock_chat.call_args
            assert call_args.kwargs["options"]["temperature"] == 0.7
            assert call_args.kwargs["options"]["num_predict"] == 100

    async def test_complete_with_extra_options(self, ollama_llm):
        """Test completion with extra options."""
        with patch.object(ollama_llm.client, "chat", new_callable=AsyncMock) as mock_chat:
            mock_chat.return_value = {"message": {"content": "test"}}

            await ollama_llm.complete("test", options={"top_p": 0.9, "top_k": 40})

            call_args = mock_chat.call_args
            assert call_args.kwargs["options"]["top_p"] == 0.9
            assert call_args.kwargs["options"]["top_k"] == 40

    async def test_complete_json_mode_with_system(self, ollama_llm):
        """Test that JSON mode and the system prompt reach the server."""
        with patch.object(ollama_llm.client, "chat", new_callable=AsyncMock) as mock_chat:
            mock_chat.return_value = {"message": {"content": '{"summary": "s", "tags": []}'}}

            result = await ollama_llm.complete("summarize", system="be brief", json_mode=True)

            call_args = mock_chat.call_args
            assert call_args.kwargs["format"] == "json"
            assert call_args.kwargs["messages"] == [
                {"role": "system", "content": "be brief"},
                {"role": "user", "content": "summarize"},
            ]
            assert result == '{"summary": "s", "tags": []}'

    async def test_complete_empty_prompt_raises(self, ollama_llm):
        """Test that an empty prompt is rejected."""
        with pytest.raises(ValidationError):
            await ollama_llm.complete("")

    async def test_complete_error(self, ollama_llm):
        """Test that client errors are wrapped in LLMError."""
        with patch.object(ollama_llm.client, "chat", new_callable=AsyncMock) as mock_chat:
            mock_chat.side_effect = ConnectionError("connection refused")

            with pytest.raises(LLMError, match="connection refused"):
                await ollama_llm.complete("test")

    async def test_complete_empty_content(self, ollama_llm):
        """Test that an empty message is an error."""
        with patch.object(ollama_llm.client, "chat", new_callable=AsyncMock) as mock_chat:
            mock_chat.return_value = {"message": {"content": ""}}

            with pytest.raises(LLMError):
                await ollama_llm.complete("test")

    async def test_close(self, ollama_llm):
        """Test close is a no-op."""
        await ollama_llm.close()


@pytest.mark.integration
@pytest.mark.asyncio
class TestOllamaLLMIntegration:
    """Integration tests against a local Ollama server."""

    async def test_real_completion(self, ollama_llm):
        """Test a real completion (skipped when Ollama is not running)."""
        try:
            result = await ollama_llm.complete("Say hello.", max_tokens=10)
        except LLMError as e:
            pytest.skip(f"Ollama not available: {e}")
        assert result
