"""
Tests for ConnectionService.
"""

import asyncio

import pytest

from conceptweave.models import ContentItem, SummaryRecord
from conceptweave.models.graph import ConnectionSuggestion
from conceptweave.services.connections import ConnectionService
from conceptweave.utils import generate_content_id, generate_summary_id
from conceptweave.utils.exceptions import SuggestionError


async def add_item(store, concepts: list[str], user_id: str = "user_1") -> str:
    content = ContentItem(id=generate_content_id(), user_id=user_id, title="T", body="B")
    await store.add_content(content)
    await store.add_summary(
        SummaryRecord(
            id=generate_summary_id(), content_id=content.id, summary="S", key_concepts=concepts
        )
    )
    return content.id


@pytest.fixture
def connection_service(sqlite_store, fake_suggester):
    return ConnectionService(fake_suggester, sqlite_store, sqlite_store, timeout=1.0)


@pytest.mark.unit
@pytest.mark.asyncio
class TestConnectionService:
    """Test vocabulary building and suggestion gating."""

    async def test_vocabulary_excludes_current_content(self, connection_service, sqlite_store):
        await add_item(sqlite_store, ["A", "B"])
        current = await add_item(sqlite_store, ["C"])

        vocabulary = await connection_service.build_vocabulary("user_1", current)

        assert vocabulary == ["A", "B"]

    async def test_vocabulary_first_seen_order(self, connection_service, sqlite_store):
        await add_item(sqlite_store, ["B", "A"])
        await add_item(sqlite_store, ["A", "C", "B"])

        vocabulary = await connection_service.build_vocabulary("user_1", "cnt_none")

        assert vocabulary == ["B", "A", "C"]

    async def test_no_call_without_new_concepts(
        self, connection_service, sqlite_store, fake_suggester
    ):
        await add_item(sqlite_store, ["A"])
        current = await add_item(sqlite_store, [])

        assert await connection_service.suggest_and_store("user_1", current, []) == []
        assert fake_suggester.calls == []

    async def test_no_call_without_vocabulary(
        self, connection_service, sqlite_store, fake_suggester
    ):
        current = await add_item(sqlite_store, ["A"])

        assert await connection_service.suggest_and_store("user_1", current, ["A"]) == []
        assert fake_suggester.calls == []

    async def test_stores_every_suggestion(self, connection_service, sqlite_store):
        await add_item(sqlite_store, ["Existing"])
        current = await add_item(sqlite_store, ["New", "Other"])

        stored = await connection_service.suggest_and_store("user_1", current, ["New", "Other"])

        assert [(c.source_concept, c.target_concept, c.strength) for c in stored] == [
            ("New", "Existing", 0.9),
            ("Other", "Existing", 0.05),
        ]
        assert await sqlite_store.list_connections("user_1") == stored

    async def test_suggestion_values_stored_unmodified(self, connection_service, sqlite_store):
        stored = await connection_service.store_suggestions(
            "user_1", [ConnectionSuggestion(source="A", target="B", strength=1.5, reason="")]
        )

        assert stored[0].reason == ""
        assert stored[0].strength == 1.5
        [persisted] = await sqlite_store.list_connections("user_1")
        assert persisted.reason == ""
        assert persisted.strength == 1.5

    async def test_timeout_is_suggestion_error(self, sqlite_store):
        class SlowSuggester:
            async def suggest_connections(self, new_concepts, existing_concepts):
                await asyncio.sleep(1.0)
                return []

        service = ConnectionService(SlowSuggester(), sqlite_store, sqlite_store, timeout=0.05)

        with pytest.raises(SuggestionError, match="timed out"):
            await service.suggest(["A"], ["B"])

    async def test_failure_propagates(self, connection_service, sqlite_store, fake_suggester):
        await add_item(sqlite_store, ["Existing"])
        current = await add_item(sqlite_store, ["New"])
        fake_suggester.fail = True

        with pytest.raises(SuggestionError):
            await connection_service.suggest_and_store("user_1", current, ["New"])

        assert await sqlite_store.count_connections("user_1") == 0
