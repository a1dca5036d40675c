"""URL content extraction for URL-derived content items."""

from conceptweave.core.extractors.base import ExtractedContent, URLExtractor
from conceptweave.core.extractors.http import HttpURLExtractor, extract_html_text

__all__ = ["ExtractedContent", "URLExtractor", "HttpURLExtractor", "extract_html_text"]
