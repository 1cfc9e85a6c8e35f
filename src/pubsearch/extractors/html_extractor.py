"""HTML extractor producing the visible text of (X)HTML resources."""

from __future__ import annotations

from typing import Optional

from bs4 import BeautifulSoup  # type: ignore[import-untyped]

from .base_extractor import BaseExtractor, base_media_type

HTML_MEDIA_TYPES = {"text/html", "application/xhtml+xml"}

# Elements whose content is never rendered as text
_INVISIBLE = ["script", "style", "head", "template", "noscript"]


class HTMLExtractor(BaseExtractor):
    """Extractor for HTML content."""

    def can_extract(self, media_type: str) -> bool:
        return base_media_type(media_type) in HTML_MEDIA_TYPES

    def extract_text(self, data: bytes, media_type: str = "text/html") -> Optional[str]:
        return self.extract_html_content(self.decode(data, media_type))

    def extract_html_content(self, html: str) -> str:
        """Return the visible text of an HTML string.

        Adjacent text nodes are joined with single spaces so that block
        boundaries become word boundaries.
        """
        soup = BeautifulSoup(html, "html.parser")
        for tag in soup.find_all(_INVISIBLE):
            tag.decompose()
        return soup.get_text(" ", strip=True)
