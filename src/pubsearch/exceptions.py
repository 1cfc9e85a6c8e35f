"""Custom exception hierarchy for pubsearch.

These exceptions allow callers to discriminate error categories
and handle them appropriately while preserving the original context.
"""

from __future__ import annotations

import asyncio
from typing import Optional

import httpx


class PubSearchError(Exception):
    """Base class for all pubsearch exceptions."""


class ConfigError(PubSearchError):
    """Raised when configuration loading or validation fails."""


class FetchError(PubSearchError):
    """Raised when a resource cannot be fetched.

    ``kind`` is one of "bad_request", "not_found", "forbidden", "unavailable",
    "cancelled" or "other".
    """

    def __init__(self, message: str, *, kind: str = "other", href: Optional[str] = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.href = href


class ExtractionError(PubSearchError):
    """Raised when an extractor fails to turn resource bytes into text."""


class SearchError(PubSearchError):
    """Base class for errors surfaced by a search session."""

    @staticmethod
    def wrap(exc: BaseException, *, href: Optional[str] = None) -> "SearchError":
        """Map any exception onto the search error taxonomy."""
        if isinstance(exc, SearchError):
            return exc
        if isinstance(exc, asyncio.CancelledError):
            return SearchCancelled("The search was cancelled")
        if isinstance(exc, FetchError):
            if exc.kind == "cancelled":
                return SearchCancelled("The search was cancelled")
            if isinstance(exc.__cause__, httpx.HTTPError):
                return NetworkError(str(exc), href=href or exc.href)
            return ResourceError(str(exc), href=href or exc.href)
        if isinstance(exc, ExtractionError):
            return ResourceError(str(exc), href=href)
        if isinstance(exc, httpx.HTTPError):
            return NetworkError(str(exc), href=href)
        return InternalError(f"Unexpected error: {exc!r}")


class PublicationNotSearchable(SearchError):
    """Raised when the publication has no content that can be searched."""


class BadQuery(SearchError):
    """Raised when the query cannot be handled (e.g. blank)."""


class ResourceError(SearchError):
    """Raised when one resource of the publication cannot be fetched or extracted."""

    def __init__(self, message: str, *, href: Optional[str] = None) -> None:
        super().__init__(message)
        self.href = href


class NetworkError(ResourceError):
    """Raised when an HTTP request for a resource fails."""


class SearchCancelled(SearchError):
    """Raised when an in-flight call was cancelled by the caller."""


class SessionClosed(SearchError):
    """Raised when a closed session is used."""


class SessionBusy(SearchError):
    """Raised when a session is advanced while another call is still in flight."""


class UnsupportedOption(SearchError):
    """Raised when a search option has a value that cannot be interpreted."""


class InternalError(SearchError):
    """Raised for any other unexpected failure during a search."""
