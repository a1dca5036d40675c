"""
Base interfaces for the content, summary and concept graph stores.

All reads are scoped by owning user. Writes are per-row: there are no
multi-row transactions, so each committed step is immediately visible.
"""

from abc import ABC, abstractmethod

from conceptweave.models.content import ContentItem, EnrichmentStatus
from conceptweave.models.graph import ConceptNode, Connection
from conceptweave.models.summary import SummaryRecord


class ContentStore(ABC):
    """Durable record of captured Content Items."""

    async def initialize(self) -> None:
        """Create schema or open connections. Optional to override."""

    async def close(self) -> None:
        """Release resources. Optional to override."""

    @abstractmethod
    async def add_content(self, content: ContentItem) -> None:
        """Insert a new Content Item."""
        pass

    @abstractmethod
    async def get_content(self, content_id: str, user_id: str) -> ContentItem | None:
        """Get a Content Item owned by ``user_id``, or None."""
        pass

    @abstractmethod
    async def update_content(self, content: ContentItem) -> bool:
        """
        Overwrite title, body, tags and updated_at of an existing item.

        Returns:
            True if a row owned by the item's user was updated
        """
        pass

    @abstractmethod
    async def update_embedding(self, content_id: str, embedding: list[float]) -> None:
        """Persist the embedding vector of a Content Item."""
        pass

    @abstractmethod
    async def update_enrichment_status(
        self, content_id: str, status: EnrichmentStatus, failed_step: str | None = None
    ) -> None:
        """Record enrichment progress for a Content Item."""
        pass

    @abstractmethod
    async def delete_content(self, content_id: str, user_id: str) -> bool:
        """
        Delete a Content Item (its Summary Record cascades).

        Returns:
            True if a row was deleted
        """
        pass

    @abstractmethod
    async def list_contents(self, user_id: str, limit: int = 100) -> list[ContentItem]:
        """List a user's Content Items, newest first."""
        pass

    @abstractmethod
    async def count_contents(self, user_id: str) -> int:
        pass


class SummaryStore(ABC):
    """One Summary Record per Content Item."""

    async def initialize(self) -> None:
        """Create schema or open connections. Optional to override."""

    async def close(self) -> None:
        """Release resources. Optional to override."""

    @abstractmethod
    async def add_summary(self, summary: SummaryRecord) -> None:
        """
        Insert a new Summary Record.

        Raises:
            PersistenceError: If the content already has a Summary Record
        """
        pass

    @abstractmethod
    async def upsert_summary(self, summary: SummaryRecord) -> SummaryRecord:
        """Insert, or overwrite the fields of the existing record for the same content."""
        pass

    @abstractmethod
    async def update_summary(
        self, content_id: str, summary: str, key_concepts: list[str]
    ) -> SummaryRecord | None:
        """
        Overwrite summary and concepts of an existing record in place.

        Returns:
            The updated record, or None if the content has no Summary Record
        """
        pass

    @abstractmethod
    async def get_summary(self, content_id: str) -> SummaryRecord | None:
        pass

    @abstractmethod
    async def list_concept_lists(
        self, user_id: str, exclude_content_id: str | None = None
    ) -> list[list[str]]:
        """
        Concept lists of all of a user's Summary Records.

        Args:
            user_id: Owning user
            exclude_content_id: Content whose record is filtered out explicitly

        Returns:
            One concept list per Summary Record, oldest record first
        """
        pass

    @abstractmethod
    async def count_summaries(self, user_id: str) -> int:
        pass


class ConceptGraphStore(ABC):
    """Deduplicated concept nodes and appended connections."""

    async def initialize(self) -> None:
        """Create schema or open connections. Optional to override."""

    async def close(self) -> None:
        """Release resources. Optional to override."""

    @abstractmethod
    async def get_node(self, user_id: str, label_key: str) -> ConceptNode | None:
        pass

    @abstractmethod
    async def insert_node_if_absent(self, node: ConceptNode) -> tuple[ConceptNode, bool]:
        """
        Insert a node unless one already exists for (user, label key).

        Returns:
            Tuple of (stored node, True if this call created it)
        """
        pass

    @abstractmethod
    async def list_nodes(self, user_id: str) -> list[ConceptNode]:
        pass

    @abstractmethod
    async def count_nodes(self, user_id: str, label_key: str | None = None) -> int:
        pass

    @abstractmethod
    async def add_connection(self, connection: Connection) -> None:
        pass

    @abstractmethod
    async def list_connections(self, user_id: str) -> list[Connection]:
        pass

    @abstractmethod
    async def delete_connection(self, connection_id: str, user_id: str) -> bool:
        pass

    @abstractmethod
    async def count_connections(self, user_id: str) -> int:
        pass
