"""
Embedder abstraction layer for text embeddings.

Supported providers:
- Ollama (native SDK)
- OpenAI (official SDK)
"""
from conceptweave.core.embeddings.base import Embedder
from conceptweave.core.embeddings.ollama import OllamaEmbedder
from conceptweave.core.embeddings.openai import OpenAIEmbedder

__all__ = [
    "Embedder",
    "OllamaEmbedder",
    "OpenAIEmbedder",
]
