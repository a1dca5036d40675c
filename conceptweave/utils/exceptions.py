"""
Custom exception hierarchy for ConceptWeave.

Provides structured error types for the ingestion pipeline and its stores.
All exceptions inherit from ConceptWeaveError for easy catching.
"""


class ConceptWeaveError(Exception):
    """
    Base exception for all ConceptWeave errors.
    All custom exceptions should inherit from this class.
    """

    def __init__(self, message: str, context: dict | None = None):
        """
        Initialize ConceptWeave error.
        Args:
            message: Error message
            context: Optional context dictionary with additional error details
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}


class AuthenticationError(ConceptWeaveError):
    """
    Authentication errors.
    Raised when an operation is attempted without an authenticated user.
    """

    pass


class ValidationError(ConceptWeaveError):
    """
    Validation errors.
    Raised when input validation fails (missing title, body or url).
    """

    pass


class NotFoundError(ConceptWeaveError):
    """
    Resource not found errors.
    Raised when a content item or connection doesn't exist for the caller.
    """

    pass


class ConfigurationError(ConceptWeaveError):
    """
    Configuration errors.
    Raised when configuration is invalid or missing required values.
    """

    pass


class PersistenceError(ConceptWeaveError):
    """
    Store operation errors.
    Raised when a content, summary or concept graph store read/write fails.
    """

    pass


class LLMError(ConceptWeaveError):
    """
    LLM operation errors.
    Raised when LLM operations fail (API errors, timeouts, etc.).
    """

    pass


class EnrichmentError(ConceptWeaveError):
    """
    Base for failures of an external enrichment collaborator.
    The ``step`` attribute names the pipeline step that failed.
    """

    step = "enrichment"


class EmbeddingError(EnrichmentError):
    """Embedding generation errors."""

    step = "embedding"


class SummarizationError(EnrichmentError):
    """Summary generation errors."""

    step = "summarization"


class ExtractionError(EnrichmentError):
    """Concept extraction errors."""

    step = "extraction"


class SuggestionError(EnrichmentError):
    """Connection suggestion errors."""

    step = "suggestion"


class URLExtractionError(EnrichmentError):
    """
    URL content extraction errors.
    Raised when a URL cannot be fetched or yields no readable text.
    """

    step = "url_extraction"
