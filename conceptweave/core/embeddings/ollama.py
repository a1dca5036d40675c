"""
Ollama embedder using native ollama-python SDK.
"""

import ollama

from conceptweave.core.embeddings.base import Embedder
from conceptweave.utils.exceptions import EmbeddingError


class OllamaEmbedder(Embedder):
    """
    Ollama embedder for generating text embeddings.

    Supports models like nomic-embed-text, mxbai-embed-large, etc.
    """

    provider = "Ollama"

    def __init__(
        self,
        host: str = "http://localhost:11434",
        model: str = "nomic-embed-text",
        timeout: float = 120.0,
    ):
        self.host = host
        self.model = model
        self.timeout = timeout

        self.client = ollama.AsyncClient(host=host, timeout=timeout)

    async def _embed(self, text: str, **kwargs) -> list[float]:
        response = await self.client.embeddings(model=self.model, prompt=text, **kwargs)

        if not response or "embedding" not in response:
            raise EmbeddingError("Ollama returned invalid embedding response", {"host": self.host})

        return list(response["embedding"])
