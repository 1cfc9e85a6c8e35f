"""Markdown extractor.

Implementation note: we convert Markdown to HTML using the `markdown` library,
then reuse `HTMLExtractor` logic so both formats produce text the same way.
"""

from __future__ import annotations

from typing import Optional

import markdown as md  # type: ignore[import-untyped]

from .base_extractor import BaseExtractor, base_media_type
from .html_extractor import HTMLExtractor


class MarkdownExtractor(BaseExtractor):
    """Extractor for `text/markdown` resources."""

    def __init__(self) -> None:
        self._html = HTMLExtractor()
        self._extensions = ["tables", "fenced_code", "sane_lists"]

    def can_extract(self, media_type: str) -> bool:
        return base_media_type(media_type) in {"text/markdown", "text/x-markdown"}

    def extract_text(self, data: bytes, media_type: str = "text/markdown") -> Optional[str]:
        html = md.markdown(self.decode(data, media_type), extensions=self._extensions)
        return self._html.extract_html_content(html)
