"""
HTTP URL extractor using httpx and BeautifulSoup.
"""

import httpx
from bs4 import BeautifulSoup

from conceptweave.core.extractors.base import ExtractedContent, URLExtractor
from conceptweave.utils.exceptions import URLExtractionError, ValidationError
from conceptweave.utils.logger import get_logger

logger = get_logger(__name__)


def extract_html_text(html_content: str) -> tuple[str | None, str]:
    """
    Extract the title and readable text from HTML, removing scripts and styles.

    Args:
        html_content: Raw HTML string

    Returns:
        Tuple of (title or None, text with whitespace normalized)
    """
    soup = BeautifulSoup(html_content, "html.parser")

    title = None
    if soup.title and soup.title.string:
        title = soup.title.string.strip()
    if not title:
        heading = soup.find("h1")
        if heading:
            title = heading.get_text(strip=True) or None

    for element in soup(["script", "style", "noscript"]):
        element.decompose()

    text = soup.get_text()

    lines = (line.strip() for line in text.splitlines())
    chunks = (phrase.strip() for line in lines for phrase in line.split("  "))
    return title, "\n".join(chunk for chunk in chunks if chunk)


class HttpURLExtractor(URLExtractor):
    """
    Fetches http(s) URLs and extracts readable text.

    HTML is reduced to visible text; plain-text responses are used as-is.
    The body is streamed and abandoned as soon as it exceeds ``max_bytes``.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        user_agent: str = "ConceptWeave/1.0",
        max_bytes: int = 5_000_000,
        client: httpx.AsyncClient | None = None,
    ):
        self.timeout = timeout
        self.max_bytes = max_bytes
        self.client = client or httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=True,
            headers={"User-Agent": user_agent},
        )

    async def extract(self, url: str) -> ExtractedContent:
        """
        Fetch a page and return its title and readable text.

        Raises:
            ValidationError: If the URL is malformed or not http(s)
            URLExtractionError: If the page cannot be fetched, is too large,
                is not text, or has no readable text
        """
        target = self.parse_url(url)

        try:
            async with self.client.stream("GET", target) as response:
                response.raise_for_status()

                content_type = response.headers.get("content-type", "")
                is_html = "html" in content_type or not content_type
                if not is_html and not content_type.startswith("text/"):
                    raise URLExtractionError(
                        f"Unsupported content type: {content_type}", {"url": url}
                    )

                raw = await self._read_limited(response, url)
                text = raw.decode(response.encoding or "utf-8", errors="replace")
        except httpx.HTTPError as e:
            logger.bind(url=url).error("Failed to fetch URL: {}", e)
            raise URLExtractionError(f"Failed to fetch URL: {e}", {"url": url}) from e

        if is_html:
            title, body = extract_html_text(text)
        else:
            title, body = None, text.strip()

        if not body:
            raise URLExtractionError("No readable text found", {"url": url})

        return ExtractedContent(title=title or url, body=body)

    @staticmethod
    def parse_url(url: str) -> httpx.URL:
        try:
            parsed = httpx.URL(url)
        except httpx.InvalidURL as e:
            raise ValidationError(f"Invalid URL: {e}", {"url": url}) from e

        if parsed.scheme not in ("http", "https") or not parsed.host:
            raise ValidationError(f"Unsupported URL: {url}", {"url": url})
        return parsed

    async def _read_limited(self, response: httpx.Response, url: str) -> bytes:
        declared = response.headers.get("content-length", "")
        if declared.isdigit() and int(declared) > self.max_bytes:
            raise URLExtractionError(f"Response too large ({declared} bytes)", {"url": url})

        chunks: list[bytes] = []
        received = 0
        async for chunk in response.aiter_bytes():
            received += len(chunk)
            if received > self.max_bytes:
                raise URLExtractionError(
                    f"Response too large (over {self.max_bytes} bytes)", {"url": url}
                )
            chunks.append(chunk)
        return b"".join(chunks)

    async def close(self) -> None:
        await self.client.aclose()
