"""
Embedding service for captured content.

Every Content Item is embedded once on capture and again on each edit, from
its ``title + " " + body`` text. Providers only implement ``_embed``; input
checks and error translation live here so every provider fails the same way.
"""

from abc import ABC, abstractmethod

from conceptweave.utils.exceptions import EmbeddingError, ValidationError
from conceptweave.utils.logger import get_logger

logger = get_logger(__name__)


class Embedder(ABC):
    """Maps the text of a Content Item to a vector."""

    provider = "embedder"
    model: str = ""

    async def embed(self, text: str, **kwargs) -> list[float]:
        """
        Embed one piece of content text.

        Raises:
            ValidationError: If text is empty
            EmbeddingError: If the provider fails or returns no vector
        """
        if not text or not text.strip():
            raise ValidationError("Text to embed cannot be empty")

        try:
            vector = await self._embed(text, **kwargs)
        except EmbeddingError:
            raise
        except Exception as e:
            logger.error(
                f"{self.provider} embedding error: {e}",
                extra={"model": self.model, "error_type": type(e).__name__},
            )
            raise EmbeddingError(
                f"{self.provider} embedding error: {e}", {"model": self.model}
            ) from e

        if not vector:
            raise EmbeddingError(
                f"{self.provider} returned an empty vector", {"model": self.model}
            )
        return [float(value) for value in vector]

    @abstractmethod
    async def _embed(self, text: str, **kwargs) -> list[float]:
        """Call the provider. Any exception is reported as an EmbeddingError."""

    async def close(self):
        """Release the provider client. Optional to override."""
