"""
Factory for creating LLM providers.
"""

from src.config import LLMConfig
from src.core.llm.base import LLMProvider
from src.core.llm.ollama import OllamaLLM
from src.core.llm.openai import OpenAILLM
from src.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_OLLAMA_URL = "http://localhost:11434"


class LLMFactory:
    """Factory for creating LLM providers from configuration."""

    @staticmethod
    def create(config: LLMConfig) -> LLMProvider:
        """
        Create LLM provider from configuration.

        Args:
            config: LLM configuration

        Returns:
            LLM provider instance

        Raises:
            ValueError: If provider is not supported
        """
        if config.provider == "ollama":
            return OllamaLLM(
                host=config.base_url or DEFAULT_OLLAMA_URL,
                model=config.model,
                timeout=config.timeout,
            )
        elif config.provider == "openai":
            if not config.api_key:
                raise ValueError("OpenAI API key is required")
            return OpenAILLM(
                api_key=config.api_key,
                model=config.model,
                base_url=config.base_url,
                timeout=config.timeout,
            )
        else:
            raise ValueError(f"Unsupported LLM provider: {config.provider}")

    @staticmethod
    def create_optional(config: LLMConfig) -> LLMProvider | None:
        """
        Create a provider only when one is configured.

        Returns None (fallback mode) for provider "none" or OpenAI without a key.
        """
        if not config.is_configured:
            logger.info(
                f"No language model configured (provider={config.provider}); "
                "using local fallbacks"
            )
            return None
        return LLMFactory.create(config)
