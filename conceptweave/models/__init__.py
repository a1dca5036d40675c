"""
Data models for ConceptWeave.

- ContentItem, ContentKind, EnrichmentStatus: captured content
- SummaryRecord: derived summary + key concepts (1:1 with content)
- ConceptNode, NodePosition, NodeType: deduplicated concept graph nodes
- Connection: suggested concept-to-concept relation
- ConnectionSuggestion, ConnectionSuggestionBundle: suggestion service output
- AnalysisResult, AnalysisType, UserStatistics, RelatedContent: orchestrator results
"""

from conceptweave.models.content import (
    ContentItem,
    ContentKind,
    ContentWithSummary,
    EnrichmentStatus,
)
from conceptweave.models.graph import (
    ConceptNode,
    Connection,
    ConnectionSuggestion,
    ConnectionSuggestionBundle,
    NodePosition,
    NodeType,
    label_key,
)
from conceptweave.models.results import (
    AnalysisResult,
    AnalysisType,
    RelatedContent,
    UserStatistics,
)
from conceptweave.models.summary import SummaryRecord

__all__ = [
    "ContentItem",
    "ContentKind",
    "ContentWithSummary",
    "EnrichmentStatus",
    "SummaryRecord",
    "ConceptNode",
    "Connection",
    "ConnectionSuggestion",
    "ConnectionSuggestionBundle",
    "NodePosition",
    "NodeType",
    "label_key",
    "AnalysisResult",
    "AnalysisType",
    "UserStatistics",
    "RelatedContent",
]
