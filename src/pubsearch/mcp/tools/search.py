"""Publication search tools for FastMCP.

A publication is described by its ordered list of resource HREFs. Sessions
are kept in the server state between calls so that clients can page through
results with `search_next` and stop whenever they want.
"""

from __future__ import annotations

import logging
import mimetypes
import uuid
from typing import Any, Callable, Dict, List, Optional

from fastmcp import FastMCP

from pubsearch.exceptions import SearchError
from pubsearch.fetchers import FileFetcher, HttpFetcher, Route, RoutingFetcher, is_remote
from pubsearch.publication.models import Link, Metadata
from pubsearch.publication.publication import Publication
from pubsearch.search.matchers import create_match_finder
from pubsearch.search.service import SearchService
from pubsearch.search.session import SearchSession

logger = logging.getLogger(__name__)

mimetypes.add_type("text/markdown", ".md")
mimetypes.add_type("application/xhtml+xml", ".xhtml")


def links_from_hrefs(hrefs: List[str]) -> List[Link]:
    links: List[Link] = []
    for href in hrefs:
        href = (href or "").strip()
        if not href:
            continue
        media_type, _ = mimetypes.guess_type(href.split("#", 1)[0])
        links.append(Link(href=href, media_type=media_type or "text/html"))
    return links


def register_search_tools(mcp: FastMCP, get_state: Callable[[], Any]) -> None:
    """Register publication search tools on the given FastMCP instance.

    Reads config from state.settings.search and state.settings.fetcher and
    stores open sessions in state.sessions.
    """

    def _make_publication(
        state_obj: Any,
        hrefs: List[str],
        base_url: Optional[str],
        root_dir: Optional[str],
        language: Optional[str],
    ) -> Publication:
        fcfg = state_obj.settings.fetcher
        routes = [
            Route(
                HttpFetcher(
                    base_url=base_url or fcfg.base_url,
                    timeout=fcfg.timeout,
                    verify_ssl=fcfg.verify_ssl,
                ),
                accepts=lambda link: is_remote(link) or bool(base_url or fcfg.base_url),
            )
        ]
        if root_dir or fcfg.root_dir:
            routes.append(Route(FileFetcher(root_dir or fcfg.root_dir)))
        links = links_from_hrefs(hrefs)
        if not links:
            raise ValueError("hrefs must contain at least one resource")
        return Publication(links, RoutingFetcher(routes), metadata=Metadata(language=language))

    def _session(state_obj: Any, session_id: str) -> SearchSession:
        session = state_obj.sessions.get(session_id)
        if session is None:
            raise ValueError(f"Unknown search session: {session_id}")
        return session

    async def _advance(session: SearchSession) -> Optional[Dict[str, Any]]:
        try:
            page = await session.advance()
        except SearchError as exc:
            raise RuntimeError(f"{type(exc).__name__}: {exc}") from exc
        return page.to_dict() if page is not None else None

    @mcp.tool
    def search_options() -> Dict[str, Any]:
        """Return the search options supported by the configured matcher, with defaults."""
        state = get_state()
        scfg = state.settings.search
        return dict(create_match_finder(scfg.strategy, scfg.locale).supported_options)

    async def _store(state_obj: Any, session: SearchSession) -> str:
        session_id = uuid.uuid4().hex
        state_obj.sessions[session_id] = session
        limit = state_obj.settings.search.max_sessions
        while len(state_obj.sessions) > limit:
            # dicts keep insertion order, the first key is the oldest session
            stale_id = next(iter(state_obj.sessions))
            stale = state_obj.sessions.pop(stale_id)
            logger.info("Closing search session %s, more than %d are open", stale_id, limit)
            await stale.close()
        return session_id

    @mcp.tool
    async def search_open(
        hrefs: List[str],
        query: str,
        *,
        options: Optional[Dict[str, Any]] = None,
        base_url: Optional[str] = None,
        root_dir: Optional[str] = None,
        language: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Open a search session over an ordered list of resources.

        Parameters
        ----------
        hrefs: list[str]
            Resources in reading order: absolute URLs, or paths relative to
            `base_url` / `root_dir`.
        query: str
            Text to search for.
        options: dict | None
            e.g. {"case-sensitive": false, "diacritic-sensitive": false, "whole-word": true}.
        base_url: str | None
            Base URL for relative HREFs (defaults to configuration).
        root_dir: str | None
            Local directory for relative HREFs (defaults to configuration).
        language: str | None
            Language of the publication, used for locale-aware matching.
        """
        state = get_state()
        publication = _make_publication(state, hrefs, base_url, root_dir, language)
        service = SearchService(publication, config=state.settings.search)
        try:
            session = service.open_session(query, options)
        except SearchError as exc:
            raise ValueError(f"{type(exc).__name__}: {exc}") from exc
        session_id = await _store(state, session)
        return {"session_id": session_id, "resources": len(publication.resource_list())}

    @mcp.tool
    async def search_next(session_id: str) -> Optional[Dict[str, Any]]:
        """Return the next page of results of a session, or null when exhausted."""
        state = get_state()
        return await _advance(_session(state, session_id))

    @mcp.tool
    async def search_close(session_id: str) -> str:
        """Close a search session and release its resources."""
        state = get_state()
        session = _session(state, session_id)
        del state.sessions[session_id]
        await session.close()
        return "closed"

    @mcp.tool
    async def search_all(
        hrefs: List[str],
        query: str,
        *,
        options: Optional[Dict[str, Any]] = None,
        base_url: Optional[str] = None,
        root_dir: Optional[str] = None,
        language: Optional[str] = None,
        max_pages: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """Search the whole publication at once and return every page of results.

        Stops after `max_pages` pages (default from configuration).
        """
        state = get_state()
        limit = max(1, int(max_pages or state.settings.search.max_pages))
        publication = _make_publication(state, hrefs, base_url, root_dir, language)
        service = SearchService(publication, config=state.settings.search)
        try:
            session = service.open_session(query, options)
        except SearchError as exc:
            raise ValueError(f"{type(exc).__name__}: {exc}") from exc
        pages: List[Dict[str, Any]] = []
        async with session:
            while len(pages) < limit:
                page = await _advance(session)
                if page is None:
                    break
                pages.append(page)
        return pages
