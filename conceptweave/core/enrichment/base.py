"""
Contracts for the AI enrichment collaborators used by ingestion.

Each collaborator raises its own step-specific error so the pipeline can
report which derivation failed.
"""

from abc import ABC, abstractmethod

from conceptweave.models.graph import ConnectionSuggestion


class Summarizer(ABC):
    """Maps a text to a short natural-language summary."""

    @abstractmethod
    async def summarize(self, text: str) -> str:
        """
        Raises:
            SummarizationError: If the summary cannot be produced
        """
        pass


class ConceptExtractor(ABC):
    """Maps a text to an ordered list of short concept labels (possibly empty)."""

    @abstractmethod
    async def extract_concepts(self, text: str) -> list[str]:
        """
        Raises:
            ExtractionError: If extraction fails
        """
        pass


class ConnectionSuggester(ABC):
    """Suggests connections between new concepts and an existing vocabulary."""

    @abstractmethod
    async def suggest_connections(
        self, new_concepts: list[str], existing_concepts: list[str]
    ) -> list[ConnectionSuggestion]:
        """
        Args:
            new_concepts: Concepts extracted from the content being ingested
            existing_concepts: The user's de-duplicated concept vocabulary

        Returns:
            Candidate connections with strength and reason

        Raises:
            SuggestionError: If the suggestion call fails
        """
        pass
