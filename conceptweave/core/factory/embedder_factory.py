"""
Factory for creating embedder providers.
"""

from conceptweave.config import EmbedderConfig
from conceptweave.core.embeddings.base import Embedder
from conceptweave.core.embeddings.ollama import OllamaEmbedder
from conceptweave.core.embeddings.openai import OpenAIEmbedder
from conceptweave.core.factory.llm_factory import OLLAMA_DEFAULT_HOST
from conceptweave.utils.exceptions import ConfigurationError


class EmbedderFactory:
    """Factory for creating embedder providers from configuration."""

    @staticmethod
    def create(config: EmbedderConfig) -> Embedder:
        """
        Create embedder from configuration.

        Args:
            config: Embedder configuration

        Returns:
            Embedder instance

        Raises:
            ConfigurationError: If provider is not supported or misconfigured
        """
        if config.provider == "ollama":
            return OllamaEmbedder(
                host=config.base_url or OLLAMA_DEFAULT_HOST,
                model=config.model,
                timeout=config.timeout,
            )
        elif config.provider == "openai":
            if not config.api_key:
                raise ConfigurationError("OpenAI API key is required")
            return OpenAIEmbedder(
                api_key=config.api_key,
                model=config.model,
                base_url=config.base_url,
                timeout=config.timeout,
            )
        else:
            raise ConfigurationError(f"Unsupported embedder provider: {config.provider}")
