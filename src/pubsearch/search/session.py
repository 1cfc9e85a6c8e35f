"""Resumable search session scanning a publication one resource at a time.

Each call to `SearchSession.advance()` returns the matches of the next
resource containing at least one, or None once the reading order is
exhausted. Resources without text or without matches are skipped inside the
same call, so the number of pages is unrelated to the number of resources.

Only one call may be in flight per session. The cursor only moves once a
resource has been fully processed: a failed or cancelled call leaves it on
the previous resource so that retrying re-attempts the same one. A resource
the matcher itself fails on is skipped once the failing call returns.
"""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterator, Callable, List, Optional

from pubsearch.exceptions import (
    ExtractionError,
    FetchError,
    InternalError,
    SearchCancelled,
    SearchError,
    SessionBusy,
    SessionClosed,
)
from pubsearch.extractors.factory import ExtractorFactory
from pubsearch.publication.models import Link, Locations, Locator, LocatorCollection
from pubsearch.publication.publication import Publication

from .matchers import MatchFinder, MatchRange
from .options import SearchOptions
from .progress import map_total_progression
from .snippet import build_snippet

logger = logging.getLogger(__name__)


class SearchSession:
    def __init__(
        self,
        publication: Publication,
        query: str,
        options: SearchOptions,
        finder: MatchFinder,
        *,
        extractors: Optional[ExtractorFactory] = None,
        snippet_length: int = 200,
    ) -> None:
        self.publication = publication
        self.query = query
        self.options = options
        self.finder = finder
        self.extractors = extractors or ExtractorFactory()
        self.snippet_length = snippet_length
        self._links: List[Link] = publication.resource_list()
        # Index of the last resource searched in
        self._cursor = -1
        self._closed = False
        self._positions: Optional[List[List[Locator]]] = None
        self._positions_loaded = False
        self._lock = asyncio.Lock()

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def closed(self) -> bool:
        return self._closed

    async def advance(self) -> Optional[LocatorCollection]:
        """Return the next page of results, or None when there are no more results.

        Raises a `SearchError` subclass on failure; the session stays usable
        unless it was closed. Cancelling the task awaiting this call propagates
        `asyncio.CancelledError` as usual; a cancellation that does not come
        from the calling task surfaces as `SearchCancelled`.
        """
        if self._closed:
            raise SessionClosed("The search session is closed")
        if self._lock.locked():
            raise SessionBusy("Another advance() call is already in progress")
        async with self._lock:
            try:
                return await self._advance()
            except SearchError:
                raise
            except asyncio.CancelledError as exc:
                logger.info("Search cancelled while scanning resource %d", self._cursor + 1)
                task = asyncio.current_task()
                if task is not None and task.cancelling():
                    raise
                raise SearchCancelled("The search was cancelled") from exc
            except Exception as exc:
                logger.exception("Unexpected failure while searching for %r", self.query)
                raise SearchError.wrap(exc) from exc

    async def _advance(self) -> Optional[LocatorCollection]:
        while True:
            self._ensure_open()
            if self._cursor >= len(self._links) - 1:
                return None

            index = self._cursor + 1
            link = self._links[index]
            logger.debug("Searching resource %d/%d: %s", index + 1, len(self._links), link.href)

            text = await self._extract_text(link)
            self._ensure_open()
            if text is None:
                logger.warning("Cannot extract text from resource: %s", link.href)
                self._cursor = index
                continue

            try:
                ranges = await self._find_ranges(link, text) if text else []
            except InternalError:
                # A matcher failing on this text fails again on every retry
                self._cursor = index
                raise
            self._ensure_open()
            if not ranges:
                self._cursor = index
                continue

            locators = await self._create_locators(index, link, text, ranges)
            self._ensure_open()
            self._cursor = index
            return LocatorCollection(href=link.href, resource_index=index, locators=tuple(locators))

    def _ensure_open(self) -> None:
        if self._closed:
            raise SessionClosed("The search session is closed")

    async def _extract_text(self, link: Link) -> Optional[str]:
        try:
            data = await self.publication.get(link)
            return await asyncio.to_thread(self.extractors.extract_text, data, link.media_type)
        except (FetchError, ExtractionError) as exc:
            logger.warning("Failed to load resource %s: %s", link.href, exc)
            raise SearchError.wrap(exc, href=link.href) from exc

    async def _find_ranges(self, link: Link, text: str) -> List[MatchRange]:
        try:
            return await asyncio.to_thread(self.finder.find, text, self.query, self.options)
        except (ValueError, TypeError, UnicodeError) as exc:
            logger.warning("Matching failed in %s, skipping resource: %s", link.href, exc)
            return []
        except Exception as exc:
            logger.exception("Matcher %s failed in %s", self.finder.name, link.href)
            raise InternalError(f"Matching failed in {link.href}: {exc!r}") from exc

    async def _create_locators(
        self, index: int, link: Link, text: str, ranges: List[MatchRange]
    ) -> List[Locator]:
        positions = await self._get_positions()
        resource_locator = Locator.from_link(link, title=self.publication.title_for(link.href))
        locators: List[Locator] = []
        for match in ranges:
            progression = match.start / len(text)
            locators.append(
                resource_locator.copy_with(
                    locations=Locations(
                        progression=progression,
                        total_progression=map_total_progression(index, progression, positions),
                    ),
                    text=build_snippet(text, match, self.snippet_length),
                )
            )
        return locators

    async def _get_positions(self) -> Optional[List[List[Locator]]]:
        if not self._positions_loaded:
            try:
                positions = await self.publication.positions_by_reading_order()
            except Exception as exc:
                logger.warning("Positions unavailable, total progression disabled: %s", exc)
                positions = None
            # close() may have run meanwhile, do not cache anything past it
            self._ensure_open()
            self._positions = positions
            self._positions_loaded = True
        return self._positions

    async def close(self) -> None:
        """Release cached data; further `advance()` calls raise `SessionClosed`.

        An `advance()` still in flight stops at its next suspension point and
        raises `SessionClosed` instead of returning a page.
        """
        self._closed = True
        self._positions = None
        self._positions_loaded = False

    async def for_each(self, action: Callable[[LocatorCollection], None]) -> None:
        """Call `action` on every remaining page, stopping at the first error."""
        while True:
            page = await self.advance()
            if page is None:
                return
            action(page)

    async def __aenter__(self) -> "SearchSession":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def __aiter__(self) -> AsyncIterator[LocatorCollection]:
        while True:
            page = await self.advance()
            if page is None:
                return
            yield page
