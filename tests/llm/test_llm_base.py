"""
Tests for LLM base class and the non-raising completion helper.
"""
import pytest
from conftest import FakeLLM

from src.core.llm.base import LLMProvider, try_complete
from src.utils.exceptions import LLMError


@pytest.mark.unit
@pytest.mark.asyncio
class TestLLMProviderBase:
    """Test base LLM provider functionality."""

    async def test_abstract_instantiation(self):
        """Test that abstract class cannot be instantiated."""
        with pytest.raises(TypeError, match="Can't instantiate abstract class"):
            LLMProvider()

    async def test_complete_interface(self):
        """Test complete method interface."""
        provider = FakeLLM(responses=["test response"])
        result = await provider.complete("test prompt", json_mode=True)
        assert result == "test response"
        assert provider.calls[0]["json_mode"] is True


@pytest.mark.unit
@pytest.mark.asyncio
class TestTryComplete:
    """Test folding provider failures into LLMResult."""

    async def test_success(self):
        result = await try_complete(FakeLLM(responses=["hello"]), "prompt")

        assert result.ok is True
        assert result.text == "hello"
        assert result.error is None

    async def test_not_configured(self):
        result = await try_complete(None, "prompt")

        assert result.ok is False
        assert result.error == "not configured"

    async def test_provider_error(self):
        """Test that provider exceptions never escape."""
        result = await try_complete(FakeLLM(error=LLMError("boom")), "prompt")

        assert result.ok is False
        assert result.error == "boom"

    async def test_unexpected_error(self):
        result = await try_complete(FakeLLM(error=TimeoutError()), "prompt")

        assert result.ok is False
        assert result.error == "TimeoutError"

    async def test_blank_response(self):
        result = await try_complete(FakeLLM(responses=["   "]), "prompt")

        assert result.ok is False
        assert result.error == "empty response"

    async def test_kwargs_forwarded(self):
        llm = FakeLLM(responses=["ok"])

        await try_complete(llm, "prompt", system="sys", temperature=0.7, max_tokens=2048)

        assert llm.calls[0]["system"] == "sys"
        assert llm.calls[0]["temperature"] == 0.7
        assert llm.calls[0]["max_tokens"] == 2048
