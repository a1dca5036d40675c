"""
Shared fixtures for ConceptWeave tests.

AI collaborators are replaced with in-process fakes; storage uses a real
SQLite database under ``tmp_path``. Fixtures use function scope so every
test gets a fresh database and fresh fakes.
"""

import asyncio
import random
from collections.abc import AsyncGenerator

import pytest

from conceptweave.config import IngestionConfig, TokenizerConfig
from conceptweave.core.embeddings.base import Embedder
from conceptweave.core.enrichment.base import ConceptExtractor, ConnectionSuggester, Summarizer
from conceptweave.core.extractors.base import ExtractedContent, URLExtractor
from conceptweave.core.stores.sqlite_store import SQLiteStore
from conceptweave.core.tokenizer import Tokenizer
from conceptweave.models.graph import ConnectionSuggestion
from conceptweave.services.ingestion import IngestionOrchestrator
from conceptweave.utils.exceptions import (
    EmbeddingError,
    ExtractionError,
    SuggestionError,
    SummarizationError,
    URLExtractionError,
)

# Fakes


class FakeEmbedder(Embedder):
    """
    Deterministic 3-dimensional embeddings.

    Texts registered in ``vectors`` get that vector; anything else is
    embedded as ``[len(text), 0.5, 1.0]``.
    """

    provider = "fake"

    def __init__(self):
        self.calls: list[str] = []
        self.vectors: dict[str, list[float]] = {}
        self.fail = False
        self.delay = 0.0

    async def _embed(self, text: str, **kwargs) -> list[float]:
        self.calls.append(text)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise EmbeddingError("embedding service unavailable")
        return self.vectors.get(text, [float(len(text)), 0.5, 1.0])


class FakeSummarizer(Summarizer):
    def __init__(self):
        self.calls: list[str] = []
        self.fail = False
        self.delay = 0.0

    async def summarize(self, text: str) -> str:
        self.calls.append(text)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise SummarizationError("summarization service unavailable")
        return f"Summary: {text}"


class FakeConceptExtractor(ConceptExtractor):
    """Returns the concepts registered for a body, else an empty list."""

    def __init__(self):
        self.concepts_by_body: dict[str, list[str]] = {}
        self.calls: list[str] = []
        self.fail = False

    async def extract_concepts(self, text: str) -> list[str]:
        self.calls.append(text)
        if self.fail:
            raise ExtractionError("extraction service unavailable")
        return list(self.concepts_by_body.get(text, []))


class FakeConnectionSuggester(ConnectionSuggester):
    """Links every new concept to the first concept of the vocabulary."""

    def __init__(self):
        self.calls: list[tuple[list[str], list[str]]] = []
        self.fail = False

    async def suggest_connections(
        self, new_concepts: list[str], existing_concepts: list[str]
    ) -> list[ConnectionSuggestion]:
        self.calls.append((list(new_concepts), list(existing_concepts)))
        if self.fail:
            raise SuggestionError("suggestion service unavailable")
        return [
            ConnectionSuggestion(
                source=concept,
                target=existing_concepts[0],
                strength=0.05 if index else 0.9,
                reason="related",
            )
            for index, concept in enumerate(new_concepts)
        ]


class FakeURLExtractor(URLExtractor):
    def __init__(self):
        self.pages: dict[str, ExtractedContent] = {}
        self.closed = False

    async def extract(self, url: str) -> ExtractedContent:
        if url not in self.pages:
            raise URLExtractionError(f"Failed to fetch URL: {url}", {"url": url})
        return self.pages[url]

    async def close(self) -> None:
        self.closed = True


# Fixtures


@pytest.fixture
async def sqlite_store(tmp_path) -> AsyncGenerator[SQLiteStore, None]:
    """Initialized SQLite store on a temporary database file."""
    store = SQLiteStore(db_path=str(tmp_path / "test.db"))
    await store.initialize()
    yield store
    await store.close()


@pytest.fixture
def fake_embedder() -> FakeEmbedder:
    return FakeEmbedder()


@pytest.fixture
def fake_summarizer() -> FakeSummarizer:
    return FakeSummarizer()


@pytest.fixture
def fake_extractor() -> FakeConceptExtractor:
    return FakeConceptExtractor()


@pytest.fixture
def fake_suggester() -> FakeConnectionSuggester:
    return FakeConnectionSuggester()


@pytest.fixture
def fake_url_extractor() -> FakeURLExtractor:
    return FakeURLExtractor()


@pytest.fixture
def ingestion_config() -> IngestionConfig:
    return IngestionConfig(call_timeout=1.0)


@pytest.fixture
def orchestrator(
    sqlite_store,
    fake_embedder,
    fake_summarizer,
    fake_extractor,
    fake_suggester,
    fake_url_extractor,
    ingestion_config,
) -> IngestionOrchestrator:
    """Orchestrator wired to fakes and a real SQLite store."""
    return IngestionOrchestrator(
        embedder=fake_embedder,
        summarizer=fake_summarizer,
        concept_extractor=fake_extractor,
        connection_suggester=fake_suggester,
        content_store=sqlite_store,
        summary_store=sqlite_store,
        graph_store=sqlite_store,
        url_extractor=fake_url_extractor,
        tokenizer=Tokenizer(TokenizerConfig(provider="approximate")),
        config=ingestion_config,
        rng=random.Random(42),
    )
