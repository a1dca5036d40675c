"""Utility modules for ConceptWeave."""

from conceptweave.utils.exceptions import (
    AuthenticationError,
    ConceptWeaveError,
    ConfigurationError,
    EmbeddingError,
    EnrichmentError,
    ExtractionError,
    LLMError,
    NotFoundError,
    PersistenceError,
    SuggestionError,
    SummarizationError,
    URLExtractionError,
    ValidationError,
)
from conceptweave.utils.id_generator import (
    generate_connection_id,
    generate_content_id,
    generate_node_id,
    generate_summary_id,
)
from conceptweave.utils.logger import get_logger, setup_logging

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    # ID Generators
    "generate_content_id",
    "generate_summary_id",
    "generate_node_id",
    "generate_connection_id",
    # Exceptions
    "ConceptWeaveError",
    "AuthenticationError",
    "ValidationError",
    "NotFoundError",
    "ConfigurationError",
    "PersistenceError",
    "LLMError",
    "EnrichmentError",
    "EmbeddingError",
    "SummarizationError",
    "ExtractionError",
    "SuggestionError",
    "URLExtractionError",
]
