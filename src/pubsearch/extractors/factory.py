"""Selects the extractor matching a resource's media type."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from pubsearch.exceptions import ExtractionError

from .base_extractor import BaseExtractor
from .html_extractor import HTMLExtractor
from .markdown_extractor import MarkdownExtractor
from .text_extractor import PlainTextExtractor

logger = logging.getLogger(__name__)


class ExtractorFactory:
    """Holds an ordered list of extractors; the first one accepting a media type wins."""

    def __init__(self, extractors: Optional[Sequence[BaseExtractor]] = None) -> None:
        self.extractors: List[BaseExtractor] = list(
            extractors
            if extractors is not None
            else [HTMLExtractor(), MarkdownExtractor(), PlainTextExtractor()]
        )

    def extractor_for(self, media_type: str) -> Optional[BaseExtractor]:
        for extractor in self.extractors:
            if extractor.can_extract(media_type):
                return extractor
        return None

    def extract_text(self, data: bytes, media_type: str) -> Optional[str]:
        """Return the text of `data`, or None when no extractor handles `media_type`."""
        extractor = self.extractor_for(media_type)
        if extractor is None:
            logger.debug("No extractor for media type %s", media_type)
            return None
        try:
            return extractor.extract_text(data, media_type)
        except ExtractionError:
            raise
        except Exception as exc:
            raise ExtractionError(
                f"{type(extractor).__name__} failed on {media_type} content: {exc}"
            ) from exc
