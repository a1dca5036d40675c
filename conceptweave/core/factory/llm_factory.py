"""
Factory for creating LLM providers.
"""

from conceptweave.config import LLMConfig
from conceptweave.core.llm.base import LLMProvider
from conceptweave.core.llm.ollama import OllamaLLM
from conceptweave.core.llm.openai import OpenAILLM
from conceptweave.utils.exceptions import ConfigurationError

OLLAMA_DEFAULT_HOST = "http://localhost:11434"


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
            ConfigurationError: If provider is not supported or misconfigured
        """
        if config.provider == "ollama":
            return OllamaLLM(
                host=config.base_url or OLLAMA_DEFAULT_HOST,
                model=config.model,
                timeout=config.timeout,
            )
        elif config.provider == "openai":
            if not config.api_key:
                raise ConfigurationError("OpenAI API key is required")
            return OpenAILLM(
                api_key=config.api_key,
                model=config.model,
                base_url=config.base_url,
                timeout=config.timeout,
            )
        else:
            raise ConfigurationError(f"Unsupported LLM provider: {config.provider}")
