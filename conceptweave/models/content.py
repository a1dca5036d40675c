"""
Content Item model.

A Content Item is one captured unit of user knowledge. It is written
before any enrichment runs, so it exists even when enrichment fails.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from conceptweave.models.summary import SummaryRecord


class ContentKind(str, Enum):
    """How the content was captured."""

    TEXT = "text"
    URL = "url"
    FILE = "file"
    VOICE = "voice"


class EnrichmentStatus(str, Enum):
    """Progress of the enrichment pipeline for one Content Item."""

    PENDING = "pending"
    EMBEDDED = "embedded"
    SUMMARIZED = "summarized"
    CONNECTED = "connected"
    DONE = "done"
    FAILED = "failed"


class ContentItem(BaseModel):
    """
    One captured piece of knowledge owned by a single user.

    The embedding is absent until enrichment completes and is regenerated
    whenever the title or body is edited.
    """

    # Core identity
    id: str = Field(..., description="Unique content ID (cnt_xxx)")
    user_id: str = Field(..., description="Owning user ID")

    # Content
    title: str = Field(..., description="Content title")
    body: str = Field(..., description="Full body text")
    kind: ContentKind = Field(default=ContentKind.TEXT, description="Capture kind")
    tags: list[str] = Field(default_factory=list, description="Free-form tags")
    source_url: str | None = Field(default=None, description="Origin URL for URL-derived items")

    # Derived
    embedding: list[float] | None = Field(default=None, description="Semantic embedding vector")
    enrichment_status: EnrichmentStatus = Field(
        default=EnrichmentStatus.PENDING, description="Enrichment pipeline progress"
    )
    failed_step: str | None = Field(
        default=None, description="Pipeline step that last failed (embedding, summarization, ...)"
    )

    # Timestamps
    created_at: datetime = Field(default_factory=datetime.now, description="Creation timestamp")
    updated_at: datetime = Field(default_factory=datetime.now, description="Last update timestamp")

    @property
    def embedding_text(self) -> str:
        """Text sent to the embedding service: title and body joined by a space."""
        return f"{self.title} {self.body}"

    def has_embedding(self) -> bool:
        return bool(self.embedding)


class ContentWithSummary(BaseModel):
    """Read model: a Content Item joined with its Summary Record (if any)."""

    content: ContentItem
    summary: SummaryRecord | None = None

    @property
    def has_summary(self) -> bool:
        """False while enrichment is pending or after it failed."""
        return self.summary is not None
