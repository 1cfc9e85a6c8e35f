"""Abstract base class for resource content extractors.

Extractors turn the raw bytes of a resource into the plain text that is
searched. Returning None means the resource is not extractable, which is
distinct from a failure (an `ExtractionError`).

Concrete implementations should subclass `BaseExtractor` and implement
`can_extract()` and `extract_text()`.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from pubsearch.exceptions import ExtractionError


def base_media_type(media_type: str) -> str:
    """Strip parameters and normalise case: "Text/HTML; charset=utf-8" -> "text/html"."""
    return media_type.split(";", 1)[0].strip().lower()


def charset_of(media_type: str, default: str = "utf-8") -> str:
    for param in media_type.split(";")[1:]:
        key, _, value = param.partition("=")
        if key.strip().lower() == "charset" and value.strip():
            return value.strip().strip('"')
    return default


class BaseExtractor(ABC):
    """Abstract extractor interface."""

    @abstractmethod
    def can_extract(self, media_type: str) -> bool:
        """Return True if this extractor handles the given media type."""

    @abstractmethod
    def extract_text(self, data: bytes, media_type: str) -> Optional[str]:
        """Return the plain text of the resource, or None if it has none.

        Implementations should raise `pubsearch.exceptions.ExtractionError` on failure.
        """
        raise NotImplementedError

    def decode(self, data: bytes, media_type: str) -> str:
        encoding = charset_of(media_type)
        try:
            return data.decode(encoding)
        except (UnicodeDecodeError, LookupError) as exc:
            raise ExtractionError(f"Cannot decode resource as {encoding}: {exc}") from exc
