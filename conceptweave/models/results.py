"""Result models returned by the ingestion orchestrator's read and analysis operations."""

from enum import Enum

from pydantic import BaseModel, Field

from conceptweave.models.content import ContentItem
from conceptweave.models.graph import ConceptNode, Connection
from conceptweave.models.summary import SummaryRecord


class AnalysisType(str, Enum):
    """Which derivations an on-demand re-analysis regenerates."""

    ALL = "all"
    SUMMARY = "summary"
    CONCEPTS = "concepts"
    CONNECTIONS = "connections"


class AnalysisResult(BaseModel):
    """Outcome of re-analysing an existing Content Item."""

    content: ContentItem
    summary: SummaryRecord
    connections: list[Connection] = Field(default_factory=list)
    created_nodes: list[ConceptNode] = Field(default_factory=list)


class UserStatistics(BaseModel):
    """Per-user counts across the three stores."""

    user_id: str
    contents: int = 0
    summaries: int = 0
    nodes: int = 0
    connections: int = 0


class RelatedContent(BaseModel):
    """A Content Item returned by a similarity lookup."""

    content: ContentItem
    # None when the lookup fell back to recency
    similarity: float | None = None
