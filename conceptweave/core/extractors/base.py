"""Contract for turning a URL into a title and readable body text."""

from abc import ABC, abstractmethod

from pydantic import BaseModel


class ExtractedContent(BaseModel):
    """Title and body extracted from a URL."""

    title: str
    body: str


class URLExtractor(ABC):
    """Fetches a URL and extracts its readable content."""

    @abstractmethod
    async def extract(self, url: str) -> ExtractedContent:
        """
        Raises:
            ValidationError: If the URL itself is malformed or unsupported
            URLExtractionError: If the URL cannot be fetched or has no readable text
        """
        pass

    async def close(self) -> None:
        pass
