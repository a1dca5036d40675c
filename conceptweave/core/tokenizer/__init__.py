"""
Tokenizer module for token counting and input truncation.

Keeps text sent to the embedding, summarization, extraction and
suggestion services inside the configured token budget.
"""

from conceptweave.config import TokenizerConfig
from conceptweave.core.tokenizer.tokenizer import Tokenizer

__all__ = ["Tokenizer", "TokenizerConfig"]
