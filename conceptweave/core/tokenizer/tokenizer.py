"""
Token counting and truncation for text sent to AI collaborators.

Uses tiktoken for accurate OpenAI-compatible token counting with
character-based approximation as a fast path.
"""

import tiktoken

from conceptweave.config import TokenizerConfig


class Tokenizer:
    """
    Token counter that keeps collaborator inputs within a token budget.

    Usage:
        tokenizer = Tokenizer()
        count = tokenizer.count_tokens("Hello world")
        text = tokenizer.truncate(long_body, max_tokens=8000)
    """

    def __init__(self, config: TokenizerConfig | None = None):
        """
        Initialize tokenizer with configuration.

        Args:
            config: Optional tokenizer configuration. Uses defaults if not provided.
        """
        self.config = config or TokenizerConfig()
        self._encoder: tiktoken.Encoding | None = None

    @property
    def encoder(self) -> tiktoken.Encoding:
        """Lazy-load tiktoken encoder."""
        if self._encoder is None:
            self._encoder = tiktoken.get_encoding(self.config.model)
        return self._encoder

    def count_tokens(self, text: str) -> int:
        """
        Count tokens using tiktoken (or the estimate in approximate mode).

        Args:
            text: Text to count tokens for

        Returns:
            Token count
        """
        if not text:
            return 0

        if self.config.provider == "approximate":
            return self.estimate_tokens(text)

        return len(self.encoder.encode(text))

    def estimate_tokens(self, text: str) -> int:
        """
        Fast approximate token count using the configured chars_per_token ratio.

        Args:
            text: Text to estimate tokens for

        Returns:
            Approximate token count
        """
        if not text:
            return 0
        return int(len(text) / self.config.chars_per_token)

    def truncate(self, text: str, max_tokens: int) -> str:
        """
        Cut text down to at most ``max_tokens`` tokens.

        Text whose estimate is well below the budget is returned untouched
        without loading the encoder.

        Args:
            text: Text to truncate
            max_tokens: Token budget

        Returns:
            The original text, or its longest prefix within the budget
        """
        if not text or max_tokens <= 0:
            return text

        if self.estimate_tokens(text) < max_tokens * 0.8:
            return text

        if self.config.provider == "approximate":
            max_chars = int(max_tokens * self.config.chars_per_token)
            return text[:max_chars]

        tokens = self.encoder.encode(text)
        if len(tokens) <= max_tokens:
            return text
        return self.encoder.decode(tokens[:max_tokens])
