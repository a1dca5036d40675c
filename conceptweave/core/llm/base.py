"""
LLM backend shared by the enrichment collaborators.

Summaries and concept lists are plain-text completions; connection
suggestions are structured completions validated against a pydantic model.
"""

from abc import ABC, abstractmethod

from pydantic import BaseModel

from conceptweave.utils.exceptions import LLMError, ValidationError
from conceptweave.utils.logger import get_logger

logger = get_logger(__name__)


class LLMProvider(ABC):
    """
    Text generation backend.

    ``complete`` builds the chat messages and turns every provider failure
    into LLMError; providers only implement ``_chat``.
    """

    provider = "llm"
    model: str = ""

    async def complete(
        self,
        prompt: str,
        response_format: type[BaseModel] | None = None,
        max_tokens: int = 2000,
        temperature: float = 0.0,
        system: str | None = None,
        **kwargs,
    ) -> BaseModel | str:
        """
        Generate a completion for one enrichment prompt.

        Args:
            prompt: The user prompt, including the content to analyse
            response_format: Pydantic model for structured output, if any
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature
            system: Optional system instruction sent ahead of the prompt
            **kwargs: Provider-specific parameters

        Returns:
            An instance of ``response_format`` if given, else the text

        Raises:
            ValidationError: If the prompt is empty
            LLMError: If the provider call fails or output cannot be parsed
        """
        if not prompt or not prompt.strip():
            raise ValidationError("Prompt cannot be empty")

        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        try:
            return await self._chat(messages, response_format, max_tokens, temperature, **kwargs)
        except LLMError:
            raise
        except Exception as e:
            logger.error(
                f"{self.provider} chat error: {e}",
                extra={"model": self.model, "error_type": type(e).__name__},
            )
            raise LLMError(f"{self.provider} chat error: {e}", {"model": self.model}) from e

    @abstractmethod
    async def _chat(
        self,
        messages: list[dict],
        response_format: type[BaseModel] | None,
        max_tokens: int,
        temperature: float,
        **kwargs,
    ) -> BaseModel | str:
        """Run one chat call. Any exception is reported as an LLMError."""

    async def close(self):
        """Release the provider client. Optional to override."""
