"""
Tests for Tokenizer.

Tests use the approximate provider or stay on the fast path so no
encoding files need to be downloaded.
"""

import pytest

from conceptweave.config import TokenizerConfig
from conceptweave.core.tokenizer import Tokenizer


@pytest.fixture
def approximate():
    return Tokenizer(TokenizerConfig(provider="approximate", chars_per_token=4.0))


@pytest.mark.unit
class TestTokenCounting:
    def test_empty(self, approximate):
        assert approximate.count_tokens("") == 0
        assert approximate.estimate_tokens("") == 0

    def test_approximate_count(self, approximate):
        assert approximate.count_tokens("a" * 40) == 10

    def test_default_config(self):
        tokenizer = Tokenizer()
        assert tokenizer.config.provider == "tiktoken"
        assert tokenizer.config.model == "cl100k_base"


@pytest.mark.unit
class TestTruncate:
    def test_short_text_untouched(self, approximate):
        text = "Discuss AI roadmap and hiring plan"
        assert approximate.truncate(text, 8000) is text

    def test_fast_path_skips_encoder(self):
        tokenizer = Tokenizer()

        assert tokenizer.truncate("short text", 8000) == "short text"
        assert tokenizer._encoder is None

    def test_long_text_cut_to_budget(self, approximate):
        text = "x" * 1000

        truncated = approximate.truncate(text, 100)

        assert len(truncated) == 400
        assert text.startswith(truncated)

    def test_no_budget(self, approximate):
        assert approximate.truncate("text", 0) == "text"

    def test_empty(self, approximate):
        assert approximate.truncate("", 10) == ""
