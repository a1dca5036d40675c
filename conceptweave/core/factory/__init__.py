"""
Factory modules for creating ConceptWeave components.

Provides modular factories for LLM, Embedder and Store.
"""

from conceptweave.core.factory.embedder_factory import EmbedderFactory
from conceptweave.core.factory.llm_factory import LLMFactory
from conceptweave.core.factory.store_factory import StoreFactory

__all__ = [
    "LLMFactory",
    "EmbedderFactory",
    "StoreFactory",
]
