"""
LLM-backed enrichment collaborators.

Summaries, concept lists and connection suggestions all come from the
configured LLMProvider; provider failures are translated into the
step-specific enrichment errors.
"""

from conceptweave.core.enrichment.base import ConceptExtractor, ConnectionSuggester, Summarizer
from conceptweave.core.llm.base import LLMProvider
from conceptweave.models.graph import ConnectionSuggestion, ConnectionSuggestionBundle
from conceptweave.utils.exceptions import (
    ExtractionError,
    LLMError,
    SuggestionError,
    SummarizationError,
    ValidationError,
)
from conceptweave.utils.logger import get_logger

logger = get_logger(__name__)

SYSTEM_PROMPT = (
    "You help a person organise the notes, articles and ideas they capture. "
    "Answer only with what is asked for."
)


class LLMSummarizer(Summarizer):
    """Concise summary of the key points and main concepts of a text."""

    def __init__(self, llm: LLMProvider, max_tokens: int = 500, temperature: float = 0.0):
        self.llm = llm
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def summarize(self, text: str) -> str:
        if not text or not text.strip():
            raise SummarizationError("Cannot summarize empty text")

        prompt = f"""Analyze the following content and write a concise, clear summary.
The summary must capture the key points and main concepts.

{text}

Summary:"""

        try:
            summary = await self.llm.complete(
                prompt,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                system=SYSTEM_PROMPT,
            )
        except (LLMError, ValidationError) as e:
            logger.error(f"Summarization failed: {e}", extra={"error": str(e)})
            raise SummarizationError(f"Summarization failed: {e}") from e

        summary = str(summary).strip()
        if not summary:
            raise SummarizationError("LLM returned an empty summary")
        return summary


class LLMConceptExtractor(ConceptExtractor):
    """
    Extracts key concepts as a comma-separated list and parses it.

    Labels are trimmed, empty entries dropped and the list capped at
    ``max_concepts``; order is preserved.
    """

    def __init__(self, llm: LLMProvider, max_concepts: int = 10, temperature: float = 0.0):
        self.llm = llm
        self.max_concepts = max_concepts
        self.temperature = temperature

    async def extract_concepts(self, text: str) -> list[str]:
        if not text or not text.strip():
            return []

        prompt = f"""Extract the key concepts from the following content.
Return only a comma-separated list of concepts, without any additional explanation.

{text}

Concepts:"""

        try:
            response = await self.llm.complete(
                prompt, max_tokens=300, temperature=self.temperature, system=SYSTEM_PROMPT
            )
        except (LLMError, ValidationError) as e:
            logger.error(f"Concept extraction failed: {e}", extra={"error": str(e)})
            raise ExtractionError(f"Concept extraction failed: {e}") from e

        return self.parse_concepts(str(response))

    def parse_concepts(self, response: str) -> list[str]:
        concepts = [concept.strip() for concept in response.split(",")]
        return [concept for concept in concepts if concept][: self.max_concepts]


class LLMConnectionSuggester(ConnectionSuggester):
    """Asks the LLM for the most relevant concept-to-concept connections."""

    def __init__(self, llm: LLMProvider, max_connections: int = 5, temperature: float = 0.0):
        self.llm = llm
        self.max_connections = max_connections
        self.temperature = temperature

    async def suggest_connections(
        self, new_concepts: list[str], existing_concepts: list[str]
    ) -> list[ConnectionSuggestion]:
        prompt = f"""Analyze the following concepts and suggest logical connections between them.
Also consider the existing concepts to find relationships.

New concepts: {", ".join(new_concepts)}
Existing concepts: {", ".join(existing_concepts)}

For each connection provide:
- source: the origin concept
- target: the destination concept
- reason: why the two concepts are related
- strength: strength of the connection between 0 and 1

Return only the most relevant connections (at most {self.max_connections})."""

        try:
            bundle = await self.llm.complete(
                prompt,
                response_format=ConnectionSuggestionBundle,
                max_tokens=1500,
                temperature=self.temperature,
                system=SYSTEM_PROMPT,
            )
        except (LLMError, ValidationError) as e:
            logger.error(f"Connection suggestion failed: {e}", extra={"error": str(e)})
            raise SuggestionError(f"Connection suggestion failed: {e}") from e

        return list(bundle.connections)[: self.max_connections]
