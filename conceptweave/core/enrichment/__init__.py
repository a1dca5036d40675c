"""
AI enrichment collaborators: summarization, concept extraction and
connection suggestion.
"""

from conceptweave.core.enrichment.base import ConceptExtractor, ConnectionSuggester, Summarizer
from conceptweave.core.enrichment.llm import (
    LLMConceptExtractor,
    LLMConnectionSuggester,
    LLMSummarizer,
)

__all__ = [
    "Summarizer",
    "ConceptExtractor",
    "ConnectionSuggester",
    "LLMSummarizer",
    "LLMConceptExtractor",
    "LLMConnectionSuggester",
]
