"""Entry point for searching a publication.

`SearchService` binds a match finder and snippet settings to a publication
and opens `SearchSession` objects for individual queries.

Options policy: keys the match finder does not support are ignored (and
logged); values that cannot be interpreted for a supported key raise
`UnsupportedOption` when the session is opened.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

from pubsearch.config import SearchConfig
from pubsearch.exceptions import BadQuery, PublicationNotSearchable
from pubsearch.extractors.factory import ExtractorFactory
from pubsearch.publication.publication import Publication

from .matchers import MatchFinder, create_match_finder
from .options import SearchOptions
from .session import SearchSession

logger = logging.getLogger(__name__)


class SearchService:
    """Opens search sessions over one publication."""

    def __init__(
        self,
        publication: Publication,
        *,
        finder: Optional[MatchFinder] = None,
        extractors: Optional[ExtractorFactory] = None,
        config: Optional[SearchConfig] = None,
    ) -> None:
        self.publication = publication
        self.config = config or SearchConfig()
        self.finder = finder or create_match_finder(
            self.config.strategy, self.config.locale or publication.locale_hint()
        )
        self.extractors = extractors or ExtractorFactory()

    @property
    def options(self) -> Dict[str, Any]:
        """Options available for this service, with their default values."""
        return dict(self.finder.supported_options)

    def open_session(
        self, query: str, options: Optional[Mapping[str, Any]] = None
    ) -> SearchSession:
        if not self.publication.resource_list():
            raise PublicationNotSearchable("The publication has no resource to search")
        if not query or not query.strip():
            raise BadQuery("The search query is empty")

        requested = SearchOptions.from_mapping(options)
        ignored = sorted(set(requested.keys()) - set(self.finder.supported_options))
        if ignored:
            logger.info("Ignoring options not supported by %s matching: %s", self.finder.name, ignored)
        effective = requested.restricted_to(self.finder.supported_options)
        effective.validate()

        return SearchSession(
            self.publication,
            query,
            effective,
            self.finder,
            extractors=self.extractors,
            snippet_length=self.config.snippet_length,
        )


def is_searchable(publication: Publication) -> bool:
    return bool(publication.resource_list())


def open_session(
    publication: Publication,
    query: str,
    options: Optional[Mapping[str, Any]] = None,
    *,
    config: Optional[SearchConfig] = None,
) -> SearchSession:
    """Shortcut for `SearchService(publication, config=config).open_session(query, options)`."""
    return SearchService(publication, config=config).open_session(query, options)
