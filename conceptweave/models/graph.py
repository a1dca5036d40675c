"""
Concept graph models.

Nodes are deduplicated per (user, label key); connections are suggested
relations between two concept labels and are appended, never merged.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class NodeType(str, Enum):
    """Types of nodes in the concept graph."""

    CONCEPT = "concept"


class NodePosition(BaseModel):
    """2-D layout position of a node on the graph canvas."""

    x: float
    y: float


class ConceptNode(BaseModel):
    """
    One node per distinct concept label owned by a user.

    Never updated after creation: colour and position are fixed by the
    ingestion that first introduced the label.
    """

    model_config = ConfigDict(json_encoders={datetime: lambda v: v.isoformat()})

    id: str = Field(..., description="Unique node ID (node_xxx)")
    user_id: str = Field(..., description="Owning user ID")
    label: str = Field(..., description="Concept label as first extracted")
    label_key: str = Field(..., description="Deduplication key for the label")
    type: NodeType = Field(default=NodeType.CONCEPT)
    color: str = Field(..., description="Display colour")
    position: NodePosition
    created_at: datetime = Field(default_factory=datetime.now)


class Connection(BaseModel):
    """Suggested relation between two concept labels for one user."""

    model_config = ConfigDict(json_encoders={datetime: lambda v: v.isoformat()})

    id: str = Field(..., description="Unique connection ID (conn_xxx)")
    user_id: str
    source_concept: str
    target_concept: str
    strength: float = Field(..., description="Opaque strength from the suggestion service")
    reason: str | None = None
    created_at: datetime = Field(default_factory=datetime.now)


class ConnectionSuggestion(BaseModel):
    """Single suggested connection (LLM structured output)."""

    model_config = {"extra": "ignore"}

    source: str = Field(..., description="Concept the connection starts from")
    target: str = Field(..., description="Concept the connection points to")
    strength: float = Field(..., description="Strength of the connection (0-1)")
    reason: str = Field(default="", description="Why the two concepts are related")


class ConnectionSuggestionBundle(BaseModel):
    """Complete set of suggestions returned for one ingestion (LLM structured output)."""

    model_config = {"extra": "ignore"}

    connections: list[ConnectionSuggestion] = Field(
        default_factory=list, description="Most relevant connections (or empty)"
    )


def label_key(label: str, normalize: bool = False) -> str:
    """
    Compute the deduplication key for a concept label.

    Exact-string identity unless ``normalize`` is set, in which case the
    label is trimmed, inner whitespace collapsed and case-folded.
    """
    if not normalize:
        return label
    return " ".join(label.split()).casefold()
