"""
ConceptWeave FastAPI Application

A REST API server for the ConceptWeave ingestion pipeline.
Provides endpoints for capturing, editing, deleting and re-analysing
content, and for reading the resulting concept graph.
"""

from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Header, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from conceptweave.config import Config
from conceptweave.core.enrichment import (
    LLMConceptExtractor,
    LLMConnectionSuggester,
    LLMSummarizer,
)
from conceptweave.core.extractors import HttpURLExtractor
from conceptweave.core.factory import EmbedderFactory, LLMFactory, StoreFactory
from conceptweave.core.llm.base import LLMProvider
from conceptweave.core.tokenizer import Tokenizer
from conceptweave.models import (
    AnalysisType,
    ConceptNode,
    Connection,
    ContentWithSummary,
    RelatedContent,
    UserStatistics,
)
from conceptweave.services.ingestion import IngestionOrchestrator
from conceptweave.utils.exceptions import (
    AuthenticationError,
    ConceptWeaveError,
    EnrichmentError,
    LLMError,
    NotFoundError,
    ValidationError,
)
from conceptweave.utils.logger import get_logger, setup_logging

# Global orchestrator instance
orchestrator: IngestionOrchestrator | None = None
logger = get_logger(__name__)


# Pydantic models for API
class SubmitTextRequest(BaseModel):
    """Request model for capturing text content."""

    title: str = Field(..., description="Content title")
    body: str = Field(..., description="Content body")
    tags: list[str] = Field(default_factory=list, description="Free-form tags")


class SubmitUrlRequest(BaseModel):
    """Request model for capturing a URL."""

    url: str = Field(..., description="Page to extract content from")


class UpdateContentRequest(BaseModel):
    """Request model for editing content."""

    title: str
    body: str
    tags: list[str] = Field(default_factory=list)


class AnalyzeRequest(BaseModel):
    """Request model for re-analysing content."""

    analysis: AnalysisType = Field(default=AnalysisType.ALL)


class SummaryResponse(BaseModel):
    id: str
    summary: str
    key_concepts: list[str]
    created_at: datetime
    updated_at: datetime


class ContentResponse(BaseModel):
    """Content Item joined with its Summary Record."""

    id: str
    title: str
    body: str
    kind: str
    tags: list[str]
    source_url: str | None
    has_embedding: bool
    enrichment_status: str
    failed_step: str | None
    created_at: datetime
    updated_at: datetime
    has_summary: bool
    summary: SummaryResponse | None = None


class RelatedContentResponse(BaseModel):
    """A related or matching item, ranked by similarity when one is known."""

    id: str
    title: str
    kind: str
    source_url: str | None
    created_at: datetime
    similarity: float | None = None


class AnalyzeResponse(BaseModel):
    content: ContentResponse
    connections: list[Connection]
    created_nodes: list[ConceptNode]


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    orchestrator_initialized: bool


def build_orchestrator(config: Config, llm: LLMProvider) -> IngestionOrchestrator:
    """Wire collaborators and stores from configuration."""
    store = StoreFactory.create(config.storage)

    return IngestionOrchestrator(
        embedder=EmbedderFactory.create(config.embedder),
        summarizer=LLMSummarizer(llm, temperature=config.llm.temperature),
        concept_extractor=LLMConceptExtractor(
            llm, max_concepts=config.ingestion.max_concepts, temperature=config.llm.temperature
        ),
        connection_suggester=LLMConnectionSuggester(
            llm,
            max_connections=config.ingestion.max_connections,
            temperature=config.llm.temperature,
        ),
        content_store=store,
        summary_store=store,
        graph_store=store,
        url_extractor=HttpURLExtractor(
            timeout=config.url_extractor.timeout,
            user_agent=config.url_extractor.user_agent,
            max_bytes=config.url_extractor.max_bytes,
        ),
        tokenizer=Tokenizer(config.tokenizer),
        config=config.ingestion,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown."""
    global orchestrator

    # Load configuration from environment or use defaults
    config = Config.from_env()

    # Initialize logging with config
    setup_logging(config.logging)

    logger.info("Starting ConceptWeave server")
    logger.info(
        f"Configuration: LLM={config.llm.provider}/{config.llm.model}, "
        f"Embedder={config.embedder.provider}/{config.embedder.model}, "
        f"Storage={config.storage.backend}"
    )

    logger.info("Creating LLM provider")
    llm = LLMFactory.create(config.llm)

    orchestrator = build_orchestrator(config, llm)
    await orchestrator.initialize()
    logger.info("ConceptWeave orchestrator initialized")

    yield

    # Cleanup
    logger.info("Shutting down ConceptWeave server")
    await orchestrator.close()
    await llm.close()
    orchestrator = None
    logger.info("Cleanup complete")


# Create FastAPI app
app = FastAPI(
    title="ConceptWeave API",
    description="Knowledge capture with summaries, concepts and a deduplicated concept graph",
    version="1.0.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _require_orchestrator() -> IngestionOrchestrator:
    if not orchestrator:
        raise HTTPException(status_code=503, detail="Orchestrator not initialized")
    return orchestrator


def _http_error(operation: str, error: Exception) -> HTTPException:
    """Map a pipeline error to a single generic HTTP error."""
    if isinstance(error, AuthenticationError):
        return HTTPException(status_code=401, detail="Authentication required")
    if isinstance(error, ValidationError):
        return HTTPException(status_code=422, detail=error.message)
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=404, detail=error.message)

    logger.error(f"Error in {operation}: {error}", extra={"error_type": type(error).__name__})
    if isinstance(error, (EnrichmentError, LLMError)):
        return HTTPException(status_code=502, detail=f"Failed to {operation}, please retry")
    return HTTPException(status_code=500, detail=f"Failed to {operation}")


def _content_response(item: ContentWithSummary) -> ContentResponse:
    content = item.content
    summary = item.summary
    return ContentResponse(
        id=content.id,
        title=content.title,
        body=content.body,
        kind=content.kind.value,
        tags=content.tags,
        source_url=content.source_url,
        has_embedding=content.has_embedding(),
        enrichment_status=content.enrichment_status.value,
        failed_step=content.failed_step,
        created_at=content.created_at,
        updated_at=content.updated_at,
        has_summary=item.has_summary,
        summary=SummaryResponse(
            id=summary.id,
            summary=summary.summary,
            key_concepts=summary.key_concepts,
            created_at=summary.created_at,
            updated_at=summary.updated_at,
        )
        if summary
        else None,
    )


def _related_response(item: RelatedContent) -> RelatedContentResponse:
    content = item.content
    return RelatedContentResponse(
        id=content.id,
        title=content.title,
        kind=content.kind.value,
        source_url=content.source_url,
        created_at=content.created_at,
        similarity=item.similarity,
    )


# Health check endpoint
@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(
        status="healthy" if orchestrator else "initializing",
        orchestrator_initialized=orchestrator is not None,
    )


# Content endpoints
@app.post("/contents/text", response_model=ContentResponse, status_code=201)
async def submit_text(request: SubmitTextRequest, x_user_id: str = Header(default="")):
    """
    Capture text content.

    The item is stored first, then embedded, summarized, linked to the
    user's existing concepts and folded into the concept graph.
    """
    engine = _require_orchestrator()
    try:
        content = await engine.submit_text_content(
            title=request.title, body=request.body, tags=request.tags, user_id=x_user_id
        )
        return _content_response(await engine.get_content(content.id, x_user_id))
    except ConceptWeaveError as e:
        raise _http_error("capture content", e) from e


@app.post("/contents/url", response_model=ContentResponse, status_code=201)
async def submit_url(request: SubmitUrlRequest, x_user_id: str = Header(default="")):
    """Capture the readable text of a web page."""
    engine = _require_orchestrator()
    try:
        content = await engine.submit_url_content(url=request.url, user_id=x_user_id)
        return _content_response(await engine.get_content(content.id, x_user_id))
    except ConceptWeaveError as e:
        raise _http_error("capture URL", e) from e


@app.get("/contents", response_model=list[ContentResponse])
async def list_contents(limit: int = 100, x_user_id: str = Header(default="")):
    """List the caller's content, newest first, with summaries."""
    engine = _require_orchestrator()
    try:
        items = await engine.list_contents(x_user_id, limit=limit)
        return [_content_response(item) for item in items]
    except ConceptWeaveError as e:
        raise _http_error("list content", e) from e


@app.get("/contents/{content_id}", response_model=ContentResponse)
async def get_content(content_id: str, x_user_id: str = Header(default="")):
    """Retrieve one content item with its summary (if enrichment finished)."""
    engine = _require_orchestrator()
    try:
        return _content_response(await engine.get_content(content_id, x_user_id))
    except ConceptWeaveError as e:
        raise _http_error("get content", e) from e


@app.get("/contents/{content_id}/related", response_model=list[RelatedContentResponse])
async def related_contents(
    content_id: str,
    limit: int = 5,
    min_similarity: float = 0.3,
    x_user_id: str = Header(default=""),
):
    """
    Other content closest to this item by embedding similarity.

    Falls back to the newest items (without scores) while the item has
    no embedding or nothing reaches ``min_similarity``.
    """
    engine = _require_orchestrator()
    try:
        items = await engine.related_contents(
            content_id, x_user_id, limit=limit, min_similarity=min_similarity
        )
        return [_related_response(item) for item in items]
    except ConceptWeaveError as e:
        raise _http_error("find related content", e) from e


@app.get("/search", response_model=list[RelatedContentResponse])
async def search_contents(
    q: str,
    limit: int = 20,
    min_similarity: float = 0.5,
    x_user_id: str = Header(default=""),
):
    """Semantic search over the caller's embedded content."""
    engine = _require_orchestrator()
    try:
        items = await engine.search_contents(
            q, x_user_id, limit=limit, min_similarity=min_similarity
        )
        return [_related_response(item) for item in items]
    except ConceptWeaveError as e:
        raise _http_error("search content", e) from e


@app.put("/contents/{content_id}", response_model=ContentResponse)
async def update_content(
    content_id: str, request: UpdateContentRequest, x_user_id: str = Header(default="")
):
    """
    Edit content.

    Refreshes the embedding and overwrites the summary in place; the
    concept graph and connections are left as they are.
    """
    engine = _require_orchestrator()
    try:
        await engine.update_content(
            content_id, request.title, request.body, request.tags, user_id=x_user_id
        )
        return _content_response(await engine.get_content(content_id, x_user_id))
    except ConceptWeaveError as e:
        raise _http_error("update content", e) from e


@app.delete("/contents/{content_id}")
async def delete_content(content_id: str, x_user_id: str = Header(default="")):
    """Delete content and its summary. Concept nodes and connections remain."""
    engine = _require_orchestrator()
    try:
        await engine.delete_content(content_id, x_user_id)
        return {"status": "deleted", "content_id": content_id}
    except ConceptWeaveError as e:
        raise _http_error("delete content", e) from e


@app.post("/contents/{content_id}/analyze", response_model=AnalyzeResponse)
async def analyze_content(
    content_id: str, request: AnalyzeRequest, x_user_id: str = Header(default="")
):
    """Re-run enrichment for an item, e.g. after a failed ingestion."""
    engine = _require_orchestrator()
    try:
        result = await engine.analyze_content(content_id, x_user_id, analysis=request.analysis)
        return AnalyzeResponse(
            content=_content_response(
                ContentWithSummary(content=result.content, summary=result.summary)
            ),
            connections=result.connections,
            created_nodes=result.created_nodes,
        )
    except ConceptWeaveError as e:
        raise _http_error("analyze content", e) from e


# Graph endpoints
@app.get("/graph/nodes", response_model=list[ConceptNode])
async def list_nodes(x_user_id: str = Header(default="")):
    engine = _require_orchestrator()
    try:
        return await engine.list_nodes(x_user_id)
    except ConceptWeaveError as e:
        raise _http_error("list nodes", e) from e


@app.get("/graph/connections", response_model=list[Connection])
async def list_connections(x_user_id: str = Header(default="")):
    engine = _require_orchestrator()
    try:
        return await engine.list_connections(x_user_id)
    except ConceptWeaveError as e:
        raise _http_error("list connections", e) from e


@app.delete("/graph/connections/{connection_id}")
async def delete_connection(connection_id: str, x_user_id: str = Header(default="")):
    engine = _require_orchestrator()
    try:
        await engine.delete_connection(connection_id, x_user_id)
        return {"status": "deleted", "connection_id": connection_id}
    except ConceptWeaveError as e:
        raise _http_error("delete connection", e) from e


@app.get("/stats", response_model=UserStatistics)
async def get_statistics(x_user_id: str = Header(default="")):
    """Counts of the caller's content, summaries, nodes and connections."""
    engine = _require_orchestrator()
    try:
        return await engine.get_statistics(x_user_id)
    except ConceptWeaveError as e:
        raise _http_error("get statistics", e) from e
