"""
Connection suggestion between newly extracted concepts and the user's
existing concept vocabulary.
"""

import asyncio

from conceptweave.core.enrichment.base import ConnectionSuggester
from conceptweave.core.stores.base import ConceptGraphStore, SummaryStore
from conceptweave.models.graph import Connection, ConnectionSuggestion
from conceptweave.utils.exceptions import SuggestionError
from conceptweave.utils.id_generator import generate_connection_id
from conceptweave.utils.logger import get_logger

logger = get_logger(__name__)


class ConnectionService:
    """
    Builds the concept vocabulary, asks for suggestions and stores them.

    Every suggestion is persisted as returned; there is no strength
    threshold and no deduplication against earlier connections.
    """

    def __init__(
        self,
        suggester: ConnectionSuggester,
        summary_store: SummaryStore,
        graph_store: ConceptGraphStore,
        timeout: float | None = None,
    ):
        self.suggester = suggester
        self.summary_store = summary_store
        self.graph_store = graph_store
        self.timeout = timeout

    async def build_vocabulary(self, user_id: str, exclude_content_id: str) -> list[str]:
        """
        Flatten the key concepts of the user's other Summary Records.

        Duplicates are removed keeping first-seen order.
        """
        concept_lists = await self.summary_store.list_concept_lists(
            user_id, exclude_content_id=exclude_content_id
        )
        return list(dict.fromkeys(concept for concepts in concept_lists for concept in concepts))

    async def suggest(
        self, new_concepts: list[str], vocabulary: list[str]
    ) -> list[ConnectionSuggestion]:
        """
        Ask the suggestion service, honouring the per-call timeout.

        Returns an empty list without calling the service when either
        side is empty.
        """
        if not new_concepts or not vocabulary:
            return []

        try:
            return await asyncio.wait_for(
                self.suggester.suggest_connections(new_concepts, vocabulary), self.timeout
            )
        except asyncio.TimeoutError as e:
            raise SuggestionError(
                f"Connection suggestion timed out after {self.timeout}s",
                {"timeout": self.timeout},
            ) from e

    async def suggest_and_store(
        self, user_id: str, content_id: str, new_concepts: list[str]
    ) -> list[Connection]:
        """
        Suggest connections for one content item and persist all of them.

        Raises:
            SuggestionError: If the suggestion call fails or times out
            PersistenceError: If reading the vocabulary or writing fails
        """
        if not new_concepts:
            return []

        vocabulary = await self.build_vocabulary(user_id, exclude_content_id=content_id)
        if not vocabulary:
            logger.debug(
                "No existing vocabulary, skipping connection suggestion",
                extra={"content_id": content_id},
            )
            return []

        suggestions = await self.suggest(new_concepts, vocabulary)
        return await self.store_suggestions(user_id, suggestions)

    async def store_suggestions(
        self, user_id: str, suggestions: list[ConnectionSuggestion]
    ) -> list[Connection]:
        stored = []
        for suggestion in suggestions:
            connection = Connection(
                id=generate_connection_id(),
                user_id=user_id,
                source_concept=suggestion.source,
                target_concept=suggestion.target,
                strength=suggestion.strength,
                reason=suggestion.reason,
            )
            await self.graph_store.add_connection(connection)
            stored.append(connection)

        logger.debug(f"Stored {len(stored)} connections", extra={"user_id": user_id})
        return stored
