"""
Tests for the exception hierarchy.
"""

import pytest

from conceptweave.utils.exceptions import (
    AuthenticationError,
    ConceptWeaveError,
    EmbeddingError,
    EnrichmentError,
    ExtractionError,
    PersistenceError,
    SuggestionError,
    SummarizationError,
    URLExtractionError,
    ValidationError,
)


@pytest.mark.unit
class TestExceptions:
    def test_message_and_context(self):
        error = PersistenceError("write failed", {"table": "contents"})

        assert str(error) == "write failed"
        assert error.message == "write failed"
        assert error.context == {"table": "contents"}

    def test_context_defaults_to_empty(self):
        assert ValidationError("missing title").context == {}

    @pytest.mark.parametrize(
        ("error_cls", "step"),
        [
            (EmbeddingError, "embedding"),
            (SummarizationError, "summarization"),
            (ExtractionError, "extraction"),
            (SuggestionError, "suggestion"),
            (URLExtractionError, "url_extraction"),
        ],
    )
    def test_enrichment_steps(self, error_cls, step):
        assert issubclass(error_cls, EnrichmentError)
        assert error_cls.step == step

    def test_everything_is_concept_weave_error(self):
        for error_cls in (AuthenticationError, ValidationError, PersistenceError, EnrichmentError):
            assert issubclass(error_cls, ConceptWeaveError)
