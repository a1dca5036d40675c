"""
Services for ConceptWeave.

High-level business logic services:
- IngestionOrchestrator: create/update/delete/re-analyse content and read accessors
- ConceptGraphService: deduplicated concept node creation
- ConnectionService: concept vocabulary and connection suggestion
- SimilarityService: embedding similarity between Content Items
"""

from conceptweave.services.concept_graph import ConceptGraphService
from conceptweave.services.connections import ConnectionService
from conceptweave.services.ingestion import IngestionOrchestrator
from conceptweave.services.similarity import SimilarityService

__all__ = [
    "IngestionOrchestrator",
    "ConceptGraphService",
    "ConnectionService",
    "SimilarityService",
]
