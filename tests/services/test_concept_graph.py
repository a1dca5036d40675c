"""
Tests for ConceptGraphService.
"""

import asyncio
import gc
import random

import pytest

from conceptweave.config import IngestionConfig
from conceptweave.services.concept_graph import ConceptGraphService


@pytest.fixture
def graph_service(sqlite_store):
    return ConceptGraphService(sqlite_store, config=IngestionConfig(), rng=random.Random(7))


@pytest.mark.unit
@pytest.mark.asyncio
class TestConceptGraphService:
    """Test node creation and deduplication."""

    async def test_creates_node_per_concept(self, graph_service, sqlite_store):
        created = await graph_service.ensure_nodes("user_1", ["A", "B"])

        assert [node.label for node in created] == ["A", "B"]
        assert all(node.type.value == "concept" for node in created)
        assert len(await sqlite_store.list_nodes("user_1")) == 2

    async def test_existing_nodes_untouched(self, graph_service, sqlite_store):
        await graph_service.ensure_nodes("user_1", ["A"])
        before = await sqlite_store.get_node("user_1", "A")

        created = await graph_service.ensure_nodes("user_1", ["B", "A"])

        assert [node.label for node in created] == ["B"]
        assert await sqlite_store.get_node("user_1", "A") == before

    async def test_color_cycles_palette(self, graph_service):
        palette = graph_service.config.palette
        assert len(palette) == 5

        for index in range(12):
            assert graph_service.color_for(index) == palette[index % 5]

    async def test_color_uses_index_in_current_list(self, graph_service):
        await graph_service.ensure_nodes("user_1", ["A"])

        created = await graph_service.ensure_nodes("user_1", ["A", "B"])

        # B is second in this extraction, so it takes the second colour
        assert created[0].color == graph_service.config.palette[1]

    async def test_positions_within_canvas(self, graph_service):
        for _ in range(200):
            position = graph_service.random_position()
            assert 200 <= position.x <= 600
            assert 150 <= position.y <= 450

    async def test_positions_use_injected_rng(self, sqlite_store):
        first = ConceptGraphService(sqlite_store, rng=random.Random(3)).random_position()
        second = ConceptGraphService(sqlite_store, rng=random.Random(3)).random_position()

        assert first == second

    async def test_normalized_labels(self, sqlite_store):
        service = ConceptGraphService(sqlite_store, config=IngestionConfig(normalize_labels=True))

        created = await service.ensure_nodes("user_1", ["Machine Learning", " machine  learning"])

        assert len(created) == 1
        assert created[0].label == "Machine Learning"
        assert created[0].label_key == "machine learning"

    async def test_concurrent_ingestions_same_label(self, graph_service, sqlite_store):
        results = await asyncio.gather(
            *(graph_service.ensure_nodes("user_1", ["Shared", f"Own {i}"]) for i in range(4))
        )

        created_labels = [node.label for created in results for node in created]
        assert created_labels.count("Shared") == 1
        assert await sqlite_store.count_nodes("user_1", "Shared") == 1
        assert await sqlite_store.count_nodes("user_1") == 5

    async def test_empty_concepts(self, graph_service):
        assert await graph_service.ensure_nodes("user_1", []) == []

    async def test_locks_released_after_use(self, graph_service):
        await graph_service.ensure_nodes("user_1", [f"Label {i}" for i in range(200)])
        gc.collect()

        assert len(graph_service._locks) == 0

    async def test_waiting_ingestions_share_one_lock(self, graph_service):
        lock = graph_service._lock_for("user_1", "Shared")

        assert graph_service._lock_for("user_1", "Shared") is lock
        assert graph_service._lock_for("user_2", "Shared") is not lock
