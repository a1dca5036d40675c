"""
Concept graph maintenance.

Turns the concept labels of an ingestion into graph nodes, creating a
node only for labels the user has never had a node for.
"""

import asyncio
import random
import weakref

from conceptweave.config import IngestionConfig
from conceptweave.core.stores.base import ConceptGraphStore
from conceptweave.models.graph import ConceptNode, NodePosition, NodeType, label_key
from conceptweave.utils.id_generator import generate_node_id
from conceptweave.utils.logger import get_logger

logger = get_logger(__name__)


class ConceptGraphService:
    """
    Insert-if-absent node creation for a user's concept graph.

    Colour comes from the palette, indexed by the concept's position in
    the current ingestion's concept list. Position is uniform random on
    the configured canvas. Existing nodes are never modified.

    Uniqueness is enforced twice: a per-(user, label key) lock serializes
    concurrent ingestions in this process, and the store's unique
    constraint covers everything else.
    """

    def __init__(
        self,
        store: ConceptGraphStore,
        config: IngestionConfig | None = None,
        rng: random.Random | None = None,
    ):
        self.store = store
        self.config = config or IngestionConfig()
        self.rng = rng or random.Random()
        # Entries vanish once no ingestion holds or awaits the lock
        self._locks: weakref.WeakValueDictionary[tuple[str, str], asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    def color_for(self, index: int) -> str:
        palette = self.config.palette
        return palette[index % len(palette)]

    def random_position(self) -> NodePosition:
        x_min, x_max = self.config.canvas_x
        y_min, y_max = self.config.canvas_y
        return NodePosition(x=self.rng.uniform(x_min, x_max), y=self.rng.uniform(y_min, y_max))

    def key_for(self, label: str) -> str:
        return label_key(label, normalize=self.config.normalize_labels)

    def _lock_for(self, user_id: str, key: str) -> asyncio.Lock:
        lock = self._locks.get((user_id, key))
        if lock is None:
            lock = asyncio.Lock()
            self._locks[(user_id, key)] = lock
        return lock

    async def ensure_nodes(self, user_id: str, concepts: list[str]) -> list[ConceptNode]:
        """
        Make sure a node exists for every concept.

        Args:
            user_id: Owner of the graph
            concepts: Concept labels in extraction order

        Returns:
            Nodes created by this call (labels that already had a node are skipped)

        Raises:
            PersistenceError: If a node lookup or insert fails
        """
        created: list[ConceptNode] = []

        for index, concept in enumerate(concepts):
            key = self.key_for(concept)

            async with self._lock_for(user_id, key):
                if await self.store.get_node(user_id, key) is not None:
                    continue

                node = ConceptNode(
                    id=generate_node_id(),
                    user_id=user_id,
                    label=concept,
                    label_key=key,
                    type=NodeType.CONCEPT,
                    color=self.color_for(index),
                    position=self.random_position(),
                )
                node, was_created = await self.store.insert_node_if_absent(node)

            if was_created:
                created.append(node)

        if created:
            logger.debug(
                f"Created {len(created)} concept nodes",
                extra={"user_id": user_id, "labels": [node.label for node in created]},
            )

        return created
