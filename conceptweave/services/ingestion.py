"""
Ingestion Orchestrator - turns submitted content into stored, enriched
knowledge.

Pipeline per submission (strictly sequential):
1. Persist the Content Item (must succeed before anything else)
2. Embed title + body and store the vector
3. Summarize and extract concepts from the body, store the Summary Record
4. Build the user's existing concept vocabulary (excluding this item)
5. Suggest and store connections when both sides are non-empty
6. Create graph nodes for concepts the user has never seen

Each step commits on its own. A failing step marks the item as failed at
that step and propagates; earlier writes are kept.
"""

import asyncio
import random
from collections.abc import Awaitable
from datetime import datetime
from typing import TypeVar

from conceptweave.config import IngestionConfig
from conceptweave.core.embeddings.base import Embedder
from conceptweave.core.enrichment.base import ConceptExtractor, ConnectionSuggester, Summarizer
from conceptweave.core.extractors.base import URLExtractor
from conceptweave.core.stores.base import ConceptGraphStore, ContentStore, SummaryStore
from conceptweave.core.tokenizer.tokenizer import Tokenizer
from conceptweave.models.content import (
    ContentItem,
    ContentKind,
    ContentWithSummary,
    EnrichmentStatus,
)
from conceptweave.models.graph import ConceptNode, Connection
from conceptweave.models.results import (
    AnalysisResult,
    AnalysisType,
    RelatedContent,
    UserStatistics,
)
from conceptweave.models.summary import SummaryRecord
from conceptweave.services.concept_graph import ConceptGraphService
from conceptweave.services.connections import ConnectionService
from conceptweave.services.similarity import SimilarityService
from conceptweave.utils.exceptions import (
    AuthenticationError,
    ConceptWeaveError,
    EmbeddingError,
    EnrichmentError,
    ExtractionError,
    NotFoundError,
    PersistenceError,
    SummarizationError,
    ValidationError,
)
from conceptweave.utils.id_generator import generate_content_id, generate_summary_id
from conceptweave.utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class IngestionOrchestrator:
    """
    Sequences the AI collaborators and the three stores for every
    create, update, delete and re-analysis of a Content Item.

    All operations are scoped by ``user_id``; an empty user id is an
    authentication failure and is rejected before any write.
    """

    def __init__(
        self,
        embedder: Embedder,
        summarizer: Summarizer,
        concept_extractor: ConceptExtractor,
        connection_suggester: ConnectionSuggester,
        content_store: ContentStore,
        summary_store: SummaryStore,
        graph_store: ConceptGraphStore,
        url_extractor: URLExtractor | None = None,
        tokenizer: Tokenizer | None = None,
        config: IngestionConfig | None = None,
        rng: random.Random | None = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            embedder: Embedding service
            summarizer: Summarization service
            concept_extractor: Concept extraction service
            connection_suggester: Connection suggestion service
            content_store: Content Item persistence
            summary_store: Summary Record persistence
            graph_store: Concept graph node and connection persistence
            url_extractor: Required only for URL submissions
            tokenizer: Truncates collaborator inputs to ``max_input_tokens``
            config: Ingestion configuration
            rng: Random source for node positions
        """
        self.embedder = embedder
        self.summarizer = summarizer
        self.concept_extractor = concept_extractor
        self.content_store = content_store
        self.summary_store = summary_store
        self.graph_store = graph_store
        self.url_extractor = url_extractor
        self.tokenizer = tokenizer or Tokenizer()
        self.config = config or IngestionConfig()

        self.concept_graph = ConceptGraphService(graph_store, config=self.config, rng=rng)
        self.connection_service = ConnectionService(
            suggester=connection_suggester,
            summary_store=summary_store,
            graph_store=graph_store,
            timeout=self.config.call_timeout,
        )
        self.similarity = SimilarityService()

    def _stores(self) -> list:
        unique = []
        for store in (self.content_store, self.summary_store, self.graph_store):
            if all(store is not seen for seen in unique):
                unique.append(store)
        return unique

    async def initialize(self) -> None:
        """Initialize all stores."""
        logger.info("Initializing ingestion orchestrator")
        for store in self._stores():
            await store.initialize()
        logger.info("Ingestion orchestrator ready")

    # ═══════════════════════════════════════════════════════════
    # SUBMISSION
    # ═══════════════════════════════════════════════════════════

    async def submit_text_content(
        self,
        title: str,
        body: str,
        tags: list[str] | None,
        user_id: str,
        kind: ContentKind = ContentKind.TEXT,
        source_url: str | None = None,
    ) -> ContentItem:
        """
        Capture a piece of text and run the full enrichment pipeline.

        Args:
            title: Content title
            body: Content body
            tags: Free-form tags (None means no tags)
            user_id: Authenticated caller
            kind: Capture kind; text unless the body came from elsewhere
            source_url: Origin URL for URL-derived content

        Returns:
            The created Content Item as it stands after enrichment

        Raises:
            AuthenticationError: If no user is given
            ValidationError: If title or body is empty
            PersistenceError: If a store operation fails
            EmbeddingError: If embedding fails and embedding failures are fatal
            SummarizationError, ExtractionError, SuggestionError: From the collaborators
        """
        self._require_user(user_id)
        self._require_text(title=title, body=body)

        content = ContentItem(
            id=generate_content_id(),
            user_id=user_id,
            title=title,
            body=body,
            kind=kind,
            tags=list(tags or []),
            source_url=source_url,
        )

        await self.content_store.add_content(content)
        logger.info(
            f"Content captured: {content.id}",
            extra={"content_id": content.id, "user_id": user_id, "kind": kind.value},
        )

        await self._run_pipeline(content)

        stored = await self.content_store.get_content(content.id, user_id)
        return stored or content

    async def submit_url_content(self, url: str, user_id: str) -> ContentItem:
        """
        Capture the readable text behind a URL.

        The extracted title and body go through the same pipeline as text
        content; the item is URL-derived and tagged with the marker tag.

        Raises:
            AuthenticationError: If no user is given
            ValidationError: If the url is empty
            URLExtractionError: If the page cannot be fetched or read
        """
        self._require_user(user_id)
        if not url or not url.strip():
            raise ValidationError("URL is required")
        if self.url_extractor is None:
            raise ValidationError("URL submissions are not enabled")

        url = url.strip()
        logger.info(f"Extracting URL: {url}", extra={"user_id": user_id})
        extracted = await self.url_extractor.extract(url)

        return await self.submit_text_content(
            title=extracted.title,
            body=extracted.body,
            tags=[self.config.url_marker_tag],
            user_id=user_id,
            kind=ContentKind.URL,
            source_url=url,
        )

    async def submit_content(
        self,
        kind: ContentKind | str,
        user_id: str,
        title: str | None = None,
        body: str | None = None,
        url: str | None = None,
        tags: list[str] | None = None,
    ) -> ContentItem:
        """Dispatch a submission to the text or URL path by kind."""
        try:
            kind = ContentKind(kind)
        except ValueError as e:
            raise ValidationError(f"Unknown content kind: {kind}") from e

        if kind == ContentKind.URL:
            return await self.submit_url_content(url or "", user_id)
        return await self.submit_text_content(title or "", body or "", tags, user_id, kind=kind)

    async def _run_pipeline(self, content: ContentItem) -> None:
        """Steps 2-6 for a freshly captured item."""
        failed_step = await self._embed(content, status_on_success=EnrichmentStatus.EMBEDDED)

        summary_text, concepts = await self._summarize_and_extract(content)

        summary = SummaryRecord(
            id=generate_summary_id(),
            content_id=content.id,
            summary=summary_text,
            key_concepts=concepts,
        )
        await self.summary_store.add_summary(summary)
        await self.content_store.update_enrichment_status(
            content.id, EnrichmentStatus.SUMMARIZED, failed_step
        )

        connections = await self._guard(
            content,
            "suggestion",
            self.connection_service.suggest_and_store(content.user_id, content.id, concepts),
        )
        await self.content_store.update_enrichment_status(
            content.id, EnrichmentStatus.CONNECTED, failed_step
        )

        nodes = await self._guard(
            content, "graph", self.concept_graph.ensure_nodes(content.user_id, concepts)
        )
        await self.content_store.update_enrichment_status(
            content.id, EnrichmentStatus.DONE, failed_step
        )

        logger.info(
            f"Content enriched: {content.id}",
            extra={
                "content_id": content.id,
                "user_id": content.user_id,
                "concepts": len(concepts),
                "connections": len(connections),
                "nodes_created": len(nodes),
            },
        )

    # ═══════════════════════════════════════════════════════════
    # UPDATE / DELETE
    # ═══════════════════════════════════════════════════════════

    async def update_content(
        self,
        content_id: str,
        new_title: str,
        new_body: str,
        new_tags: list[str] | None,
        user_id: str,
    ) -> ContentItem:
        """
        Edit a Content Item and refresh its own derived fields.

        Title, body and tags are written first. The embedding is always
        recomputed and the existing Summary Record overwritten in place.
        Connections and graph nodes are not touched.

        Raises:
            AuthenticationError: If no user is given
            ValidationError: If the new title or body is empty
            NotFoundError: If the caller owns no such item
        """
        self._require_user(user_id)
        self._require_text(title=new_title, body=new_body)

        content = await self._get_owned(content_id, user_id)
        content = content.model_copy(
            update={
                "title": new_title,
                "body": new_body,
                "tags": list(new_tags or []),
                "updated_at": datetime.now(),
            }
        )

        if not await self.content_store.update_content(content):
            raise NotFoundError(f"Content not found: {content_id}", {"content_id": content_id})

        logger.info(
            f"Content updated: {content_id}", extra={"content_id": content_id, "user_id": user_id}
        )

        await self._embed(content, status_on_success=None)

        summary_text, concepts = await self._summarize_and_extract(content)

        updated = await self.summary_store.update_summary(content_id, summary_text, concepts)
        if updated is None:
            logger.warning(
                f"No summary to refresh for {content_id}",
                extra={"content_id": content_id, "user_id": user_id},
            )

        stored = await self.content_store.get_content(content_id, user_id)
        return stored or content

    async def delete_content(self, content_id: str, user_id: str) -> None:
        """
        Delete a Content Item; its Summary Record goes with it.

        Graph nodes and connections derived from it are kept.

        Raises:
            AuthenticationError: If no user is given
            NotFoundError: If the caller owns no such item
        """
        self._require_user(user_id)

        if not await self.content_store.delete_content(content_id, user_id):
            raise NotFoundError(f"Content not found: {content_id}", {"content_id": content_id})

        logger.info(
            f"Content deleted: {content_id}", extra={"content_id": content_id, "user_id": user_id}
        )

    async def delete_connection(self, connection_id: str, user_id: str) -> None:
        """Remove one connection at the user's request."""
        self._require_user(user_id)

        if not await self.graph_store.delete_connection(connection_id, user_id):
            raise NotFoundError(
                f"Connection not found: {connection_id}", {"connection_id": connection_id}
            )
        logger.info(f"Connection deleted: {connection_id}", extra={"user_id": user_id})

    # ═══════════════════════════════════════════════════════════
    # RE-ANALYSIS
    # ═══════════════════════════════════════════════════════════

    async def analyze_content(
        self,
        content_id: str,
        user_id: str,
        analysis: AnalysisType | str = AnalysisType.ALL,
    ) -> AnalysisResult:
        """
        Re-run enrichment for an existing item without creating a new one.

        Embeds the item if it has no embedding, regenerates the requested
        derivations and upserts the Summary Record. ``connections`` and
        ``all`` also suggest connections and create missing graph nodes.
        An item without a Summary Record always gets both summary and
        concepts generated.

        Raises:
            AuthenticationError: If no user is given
            ValidationError: If the analysis type is unknown
            NotFoundError: If the caller owns no such item
        """
        self._require_user(user_id)
        try:
            analysis = AnalysisType(analysis)
        except ValueError as e:
            raise ValidationError(f"Unknown analysis type: {analysis}") from e

        content = await self._get_owned(content_id, user_id)
        logger.info(
            f"Analyzing content: {content_id}",
            extra={"content_id": content_id, "user_id": user_id, "analysis": analysis.value},
        )

        failed_step = None
        if not content.has_embedding() or content.failed_step == "embedding":
            failed_step = await self._embed(content, status_on_success=EnrichmentStatus.EMBEDDED)

        existing = await self.summary_store.get_summary(content_id)

        if existing is None:
            summary_text, concepts = await self._summarize_and_extract(content)
        else:
            summary_text, concepts = existing.summary, existing.key_concepts
            if analysis in (AnalysisType.ALL, AnalysisType.SUMMARY):
                summary_text = await self._summarize(content)
            if analysis in (AnalysisType.ALL, AnalysisType.CONCEPTS):
                concepts = await self._extract(content)

        summary = await self.summary_store.upsert_summary(
            SummaryRecord(
                id=existing.id if existing else generate_summary_id(),
                content_id=content_id,
                summary=summary_text,
                key_concepts=concepts,
                created_at=existing.created_at if existing else datetime.now(),
            )
        )
        await self.content_store.update_enrichment_status(
            content_id, EnrichmentStatus.SUMMARIZED, failed_step
        )

        connections: list[Connection] = []
        nodes: list[ConceptNode] = []
        if analysis in (AnalysisType.ALL, AnalysisType.CONNECTIONS):
            connections = await self._guard(
                content,
                "suggestion",
                self.connection_service.suggest_and_store(user_id, content_id, concepts),
            )
            nodes = await self._guard(
                content, "graph", self.concept_graph.ensure_nodes(user_id, concepts)
            )

        await self.content_store.update_enrichment_status(
            content_id, EnrichmentStatus.DONE, failed_step
        )

        stored = await self.content_store.get_content(content_id, user_id)
        return AnalysisResult(
            content=stored or content,
            summary=summary,
            connections=connections,
            created_nodes=nodes,
        )

    # ═══════════════════════════════════════════════════════════
    # READ ACCESSORS
    # ═══════════════════════════════════════════════════════════

    async def get_content(
        self, content_id: str, user_id: str, include_summary: bool = True
    ) -> ContentWithSummary:
        """
        Get one Content Item, optionally joined with its Summary Record.

        Raises:
            NotFoundError: If the caller owns no such item
        """
        self._require_user(user_id)
        content = await self._get_owned(content_id, user_id)
        summary = await self.summary_store.get_summary(content_id) if include_summary else None
        return ContentWithSummary(content=content, summary=summary)

    async def list_contents(
        self, user_id: str, include_summary: bool = True, limit: int = 100
    ) -> list[ContentWithSummary]:
        """List the user's Content Items, newest first."""
        self._require_user(user_id)
        contents = await self.content_store.list_contents(user_id, limit=limit)

        results = []
        for content in contents:
            summary = await self.summary_store.get_summary(content.id) if include_summary else None
            results.append(ContentWithSummary(content=content, summary=summary))
        return results

    async def list_nodes(self, user_id: str) -> list[ConceptNode]:
        self._require_user(user_id)
        return await self.graph_store.list_nodes(user_id)

    async def list_connections(self, user_id: str) -> list[Connection]:
        self._require_user(user_id)
        return await self.graph_store.list_connections(user_id)

    async def related_contents(
        self, content_id: str, user_id: str, limit: int = 5, min_similarity: float = 0.3
    ) -> list[RelatedContent]:
        """
        Find the user's other Content Items closest to one item.

        Items are ranked by cosine similarity of their embeddings and those
        below ``min_similarity`` are dropped. If the item itself has no
        embedding (embedding failed or is still pending), or nothing is
        similar enough, the user's newest other items are returned instead
        with ``similarity`` left unset.

        Raises:
            AuthenticationError: If ``user_id`` is empty
            ValidationError: If ``limit`` is below 1
            NotFoundError: If the caller owns no such item
        """
        self._require_user(user_id)
        self._require_limit(limit)
        content = await self._get_owned(content_id, user_id)

        candidates = await self.content_store.list_contents(
            user_id, limit=self.config.similarity_scan_limit
        )
        others = [item for item in candidates if item.id != content.id]

        if content.has_embedding():
            related = self.similarity.rank(content.embedding, others, limit, min_similarity)
            if related:
                return related

        logger.debug("Nothing similar to {}, falling back to newest items", content.id)
        return [RelatedContent(content=item) for item in others[:limit]]

    async def search_contents(
        self, query: str, user_id: str, limit: int = 20, min_similarity: float = 0.5
    ) -> list[RelatedContent]:
        """
        Semantic search over the user's Content Items.

        The query is embedded with the same service as the items and
        compared against every stored embedding; items without one are
        not searchable.

        Raises:
            AuthenticationError: If ``user_id`` is empty
            ValidationError: If the query is empty or ``limit`` is below 1
            EmbeddingError: If the query cannot be embedded
        """
        self._require_user(user_id)
        self._require_text(query=query)
        self._require_limit(limit)

        query_embedding = await self._call(EmbeddingError, self.embedder.embed(query))
        candidates = await self.content_store.list_contents(
            user_id, limit=self.config.similarity_scan_limit
        )
        return self.similarity.rank(query_embedding, candidates, limit, min_similarity)

    async def get_statistics(self, user_id: str) -> UserStatistics:
        """Counts of items, summaries, nodes and connections for a user."""
        self._require_user(user_id)
        return UserStatistics(
            user_id=user_id,
            contents=await self.content_store.count_contents(user_id),
            summaries=await self.summary_store.count_summaries(user_id),
            nodes=await self.graph_store.count_nodes(user_id),
            connections=await self.graph_store.count_connections(user_id),
        )

    # ═══════════════════════════════════════════════════════════
    # PIPELINE STEPS
    # ═══════════════════════════════════════════════════════════

    async def _embed(
        self, content: ContentItem, status_on_success: EnrichmentStatus | None
    ) -> str | None:
        """
        Embed title + body and store the vector.

        Returns:
            "embedding" when a non-fatal failure was recorded, else None

        Raises:
            EmbeddingError: If embedding fails and failures are fatal
        """
        log = get_logger(__name__, content_id=content.id, user_id=content.user_id)
        text = self.tokenizer.truncate(content.embedding_text, self.config.max_input_tokens)

        try:
            embedding = await self._call(EmbeddingError, self.embedder.embed(text))
        except (EmbeddingError, ValidationError) as e:
            if self.config.embedding_failure_fatal:
                await self._mark_failed(content, "embedding", e)
                if isinstance(e, EmbeddingError):
                    raise
                raise EmbeddingError(f"Embedding failed: {e}") from e

            log.bind(step="embedding").warning("Embedding failed, continuing without it: {}", e)
            await self.content_store.update_enrichment_status(
                content.id, content.enrichment_status, "embedding"
            )
            return "embedding"

        await self.content_store.update_embedding(content.id, embedding)
        if status_on_success is not None:
            await self.content_store.update_enrichment_status(content.id, status_on_success)
        elif content.failed_step == "embedding":
            # an earlier embedding failure is resolved; the status itself stays
            await self.content_store.update_enrichment_status(
                content.id, content.enrichment_status
            )
        log.bind(step="embedding").debug("Embedded ({} dimensions)", len(embedding))
        return None

    async def _summarize(self, content: ContentItem) -> str:
        text = self.tokenizer.truncate(content.body, self.config.max_input_tokens)
        return await self._guard(
            content,
            "summarization",
            self._call(SummarizationError, self.summarizer.summarize(text)),
        )

    async def _extract(self, content: ContentItem) -> list[str]:
        text = self.tokenizer.truncate(content.body, self.config.max_input_tokens)
        return await self._guard(
            content,
            "extraction",
            self._call(ExtractionError, self.concept_extractor.extract_concepts(text)),
        )

    async def _summarize_and_extract(self, content: ContentItem) -> tuple[str, list[str]]:
        summary = await self._summarize(content)
        concepts = await self._extract(content)
        logger.debug(
            f"Summarized {content.id}",
            extra={"content_id": content.id, "step": "summarization", "concepts": concepts},
        )
        return summary, concepts

    async def _call(self, error_cls: type[EnrichmentError], awaitable: Awaitable[T]) -> T:
        """Await one collaborator call under the per-call timeout."""
        try:
            return await asyncio.wait_for(awaitable, self.config.call_timeout)
        except asyncio.TimeoutError as e:
            raise error_cls(
                f"{error_cls.step.capitalize()} timed out after {self.config.call_timeout}s",
                {"timeout": self.config.call_timeout},
            ) from e

    async def _guard(self, content: ContentItem, step: str, awaitable: Awaitable[T]) -> T:
        """Await a pipeline step; on failure mark the item failed at ``step`` and re-raise."""
        try:
            return await awaitable
        except ConceptWeaveError as e:
            await self._mark_failed(content, step, e)
            raise

    async def _mark_failed(self, content: ContentItem, step: str, error: Exception) -> None:
        log = get_logger(
            __name__,
            content_id=content.id,
            user_id=content.user_id,
            step=step,
            error_type=type(error).__name__,
        )
        log.error("Ingestion failed at {}: {}", step, error)
        try:
            await self.content_store.update_enrichment_status(
                content.id, EnrichmentStatus.FAILED, step
            )
        except PersistenceError as e:
            log.error("Could not record the failure: {}", e)

    # ═══════════════════════════════════════════════════════════
    # HELPERS
    # ═══════════════════════════════════════════════════════════

    async def _get_owned(self, content_id: str, user_id: str) -> ContentItem:
        content = await self.content_store.get_content(content_id, user_id)
        if content is None:
            raise NotFoundError(f"Content not found: {content_id}", {"content_id": content_id})
        return content

    @staticmethod
    def _require_user(user_id: str | None) -> None:
        if not user_id or not user_id.strip():
            raise AuthenticationError("An authenticated user is required")

    @staticmethod
    def _require_text(**fields: str | None) -> None:
        for name, value in fields.items():
            if not value or not value.strip():
                raise ValidationError(f"{name.capitalize()} is required", {"field": name})

    @staticmethod
    def _require_limit(limit: int) -> None:
        if limit < 1:
            raise ValidationError("Limit must be at least 1", {"limit": limit})

    async def close(self) -> None:
        """Close collaborators and stores."""
        logger.info("Closing ingestion orchestrator")
        await self.embedder.close()
        if self.url_extractor is not None:
            await self.url_extractor.close()
        for store in self._stores():
            await store.close()
