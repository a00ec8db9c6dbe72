"""
OpenAI LLM provider using official SDK.
"""

from openai import AsyncOpenAI

from src.core.llm.base import LLMProvider
from src.utils.exceptions import LLMError, ValidationError
from src.utils.logger import get_logger

logger = get_logger(__name__)


class OpenAILLM(LLMProvider):
    """
    OpenAI LLM provider for text generation.

    Uses the chat completions API; JSON mode maps to
    response_format={"type": "json_object"}.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        organization: str | None = None,
        base_url: str | None = None,
        timeout: float = 60.0,
    ):
        """
        Initialize OpenAI LLM provider.

        Args:
            api_key: OpenAI API key
            model: Model name (e.g., "gpt-4o", "gpt-4o-mini")
            organization: Optional organization ID
            base_url: Optional custom base URL (OpenAI-compatible servers)
            timeout: Request timeout in seconds
        """
        self.model = model

        self.client = AsyncOpenAI(
            api_key=api_key, organization=organization, base_url=base_url, timeout=timeout
        )

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
        Generate completion using OpenAI.

        Raises:
            ValidationError: If the prompt is empty
            LLMError: If OpenAI API call fails or returns no content
        """
        if not prompt or not prompt.strip():
            raise ValidationError("Prompt cannot be empty")

        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        params = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
            **kwargs,
        }
        if json_mode:
            params["response_format"] = {"type": "json_object"}

        try:
            response = await self.client.chat.completions.create(**params)
            content = response.choices[0].message.content
        except Exception as e:
            logger.bind(model=self.model, error_type=type(e).__name__).error(
                f"OpenAI API error: {e}"
            )
            raise LLMError(f"OpenAI API error: {e}", context={"model": self.model}) from e

        if not content:
            raise LLMError("OpenAI returned empty content", context={"model": self.model})

        return content

    async def close(self):
        """Close OpenAI client."""
        await self.client.close()
