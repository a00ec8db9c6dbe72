"""
Abstract base class for LLM providers.
Handles plain text generation, optionally constrained to JSON output.
"""

from abc import ABC, abstractmethod

from src.models.ai import LLMResult
from src.utils.logger import get_logger

logger = get_logger(__name__)


class LLMProvider(ABC):
    """
    Abstract base for LLM text generation providers.

    Responsibilities:
    - Text completion/generation
    - JSON-mode output (parsed by callers)
    """

    model: str

    @abstractmethod
    async def complete(
        self,
        prompt: str,
        system: str | None = None,
        json_mode: bool = False,
        max_tokens: int = 1024,
        temperature: float = 0.2,
        **kwargs,
    ) -> str:
        """
        Generate completion from prompt.

        Args:
            prompt: The input prompt
            system: Optional system instruction
            json_mode: Ask the provider to emit a JSON object
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature (0.0 = deterministic, 1.0 = creative)
            **kwargs: Provider-specific parameters

        Returns:
            Generated text

        Raises:
            ValidationError: If the prompt is empty
            LLMError: Provider-specific errors
        """
        pass

    @abstractmethod
    async def close(self):
        """
        Close any open connections.
        Optional to override if provider needs cleanup.
        """


async def try_complete(
    llm: LLMProvider | None,
    prompt: str,
    **kwargs,
) -> LLMResult:
    """
    Call the provider and fold any failure into an LLMResult.

    Never raises: a missing provider or any provider error yields
    ok=False so callers can switch to their local fallback.
    """
    if llm is None:
        return LLMResult(ok=False, error="not configured")

    try:
        text = await llm.complete(prompt, **kwargs)
    except Exception as e:
        logger.bind(error_type=type(e).__name__).warning(
            f"Language model call failed, using fallback: {e}"
        )
        return LLMResult(ok=False, error=str(e) or type(e).__name__)

    if not text or not text.strip():
        return LLMResult(ok=False, error="empty response")

    return LLMResult(ok=True, text=text)
