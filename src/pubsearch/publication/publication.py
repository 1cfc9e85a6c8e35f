"""Publication: the ordered collection of resources searched by pubsearch."""

from __future__ import annotations

import locale
from typing import TYPE_CHECKING, Awaitable, Callable, List, Optional, Sequence
from urllib.parse import urldefrag

from pubsearch.publication.models import Link, Locator, Metadata, flatten_links
from pubsearch.publication.positions import compute_positions

if TYPE_CHECKING:
    from pubsearch.fetchers.base_fetcher import BaseFetcher

PositionsFactory = Callable[["Publication"], Awaitable[List[List[Locator]]]]


async def _default_positions(publication: "Publication") -> List[List[Locator]]:
    return await compute_positions(publication.reading_order, publication.fetcher)


def system_locale() -> str:
    """Return the runtime default locale as a BCP 47-ish tag, "en" if unknown."""
    name = locale.getlocale()[0]
    if not name or name in ("C", "POSIX"):
        return "en"
    return name.replace("_", "-")


class Publication:
    """Read-only view over a publication's reading order and metadata.

    The search core only references this object; it never mutates it.
    """

    def __init__(
        self,
        reading_order: Sequence[Link],
        fetcher: BaseFetcher,
        *,
        metadata: Optional[Metadata] = None,
        table_of_contents: Optional[Sequence[Link]] = None,
        positions_factory: Optional[PositionsFactory] = None,
    ) -> None:
        self._reading_order = tuple(reading_order)
        self.fetcher = fetcher
        self.metadata = metadata or Metadata()
        self._toc = tuple(table_of_contents or ())
        self._positions_factory = positions_factory or _default_positions

    @property
    def reading_order(self) -> List[Link]:
        return list(self._reading_order)

    @property
    def table_of_contents(self) -> List[Link]:
        return list(self._toc)

    def resource_list(self) -> List[Link]:
        return self.reading_order

    def locale_hint(self) -> Optional[str]:
        return self.metadata.language

    async def get(self, link: Link) -> bytes:
        return await self.fetcher.get(link)

    async def positions_by_reading_order(self) -> List[List[Locator]]:
        """Positions grouped by resource. Potentially expensive; callers should cache."""
        return await self._positions_factory(self)

    def title_for(self, href: str) -> Optional[str]:
        """Title of the first table-of-contents entry pointing at `href`, ignoring fragments."""
        for link in flatten_links(list(self._toc)):
            if urldefrag(link.href)[0] == href:
                return link.title
        return None
