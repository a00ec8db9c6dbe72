"""
Ollama LLM provider using native ollama-python SDK.
"""

import ollama

from src.core.llm.base import LLMProvider
from src.utils.exceptions import LLMError, ValidationError
from src.utils.logger import get_logger

logger = get_logger(__name__)


class OllamaLLM(LLMProvider):
    """
    Ollama LLM provider for text generation.

    Uses native ollama-python SDK for chat completions
    with JSON mode for structured outputs.
    """

    def __init__(
        self,
        host: str = "http://localhost:11434",
        model: str = "llama3.1:8b",
        timeout: float = 60.0,
    ):
        """
        Initialize Ollama LLM provider.

        Args:
            host: Ollama server URL
            model: Model name for text generation (e.g., "llama3.1", "mistral")
            timeout: Request timeout in seconds
        """
        self.host = host
        self.model = model
        self.timeout = timeout

        self.client = ollama.AsyncClient(host=host, timeout=timeout)

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
        Generate completion using Ollama.

        Raises:
            ValidationError: If the prompt is empty
            LLMError: If the Ollama call fails or returns no content
        """
        if not prompt or not prompt.strip():
            raise ValidationError("Prompt cannot be empty")

        options = {
            "temperature": temperature,
            "num_predict": max_tokens,
            **kwargs.get("options", {}),
        }

        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        try:
            response = await self.client.chat(
                model=self.model,
                messages=messages,
                format="json" if json_mode else None,
                options=options,
                **{k: v for k, v in kwargs.items() if k != "options"},
            )
            content = response["message"]["content"]
        except Exception as e:
            logger.bind(model=self.model, host=self.host, error_type=type(e).__name__).error(
                f"Ollama error: {e}"
            )
            raise LLMError(f"Ollama error: {e}", context={"model": self.model}) from e

        if not content:
            raise LLMError("Ollama returned empty content", context={"model": self.model})

        return content

    async def close(self):
        """Close client (Ollama SDK handles cleanup internally)."""
        pass
