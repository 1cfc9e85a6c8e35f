from __future__ import annotations

from typing import Optional

from .base_extractor import BaseExtractor, base_media_type


class PlainTextExtractor(BaseExtractor):
    """Passes `text/plain` resources through unchanged."""

    def can_extract(self, media_type: str) -> bool:
        return base_media_type(media_type) == "text/plain"

    def extract_text(self, data: bytes, media_type: str = "text/plain") -> Optional[str]:
        return self.decode(data, media_type)
