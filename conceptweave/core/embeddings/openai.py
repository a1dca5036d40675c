"""
OpenAI embedder using official SDK.
"""

from openai import AsyncOpenAI

from conceptweave.core.embeddings.base import Embedder


class OpenAIEmbedder(Embedder):
    """
    OpenAI embedder for generating text embeddings.

    Supports models like text-embedding-3-small, text-embedding-3-large, etc.
    """

    provider = "OpenAI"

    def __init__(
        self,
        api_key: str,
        model: str = "text-embedding-3-small",
        base_url: str | None = None,
        timeout: float = 120.0,
    ):
        """
        Initialize OpenAI embedder.

        Args:
            api_key: OpenAI API key
            model: Embedding model name (e.g., "text-embedding-3-small")
            base_url: Optional OpenAI-compatible endpoint
            timeout: Request timeout in seconds
        """
        self.model = model
        self.client = AsyncOpenAI(api_key=api_key, base_url=base_url, timeout=timeout)

    async def _embed(self, text: str, **kwargs) -> list[float]:
        response = await self.client.embeddings.create(model=self.model, input=text, **kwargs)
        return response.data[0].embedding if response.data else []

    async def close(self):
        await self.client.close()
