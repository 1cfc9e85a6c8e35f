"""Fetcher delegating each request to the first matching route."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List

from pubsearch.exceptions import FetchError
from pubsearch.fetchers.base_fetcher import BaseFetcher
from pubsearch.publication.models import Link


def is_remote(link: Link) -> bool:
    return link.href.startswith(("http://", "https://"))


@dataclass
class Route:
    fetcher: BaseFetcher
    accepts: Callable[[Link], bool] = lambda _link: True


class RoutingFetcher(BaseFetcher):
    """Routes requests to child fetchers, e.g. remote HREFs to HTTP, the rest to disk."""

    def __init__(self, routes: List[Route]) -> None:
        self.routes = list(routes)

    async def get(self, link: Link) -> bytes:
        for route in self.routes:
            if route.accepts(link):
                return await route.fetcher.get(link)
        raise FetchError(f"No fetcher accepts {link.href}", kind="not_found", href=link.href)

    async def close(self) -> None:
        for route in self.routes:
            await route.fetcher.close()
