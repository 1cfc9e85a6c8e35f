"""Fetcher serving resources from a local directory."""

from __future__ import annotations

import asyncio
from pathlib import Path
from urllib.parse import unquote, urldefrag

from pubsearch.exceptions import FetchError
from pubsearch.fetchers.base_fetcher import BaseFetcher
from pubsearch.publication.models import Link


class FileFetcher(BaseFetcher):
    """Reads resources relative to a root directory.

    HREFs escaping the root directory are rejected as bad requests.
    """

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root).resolve()

    def _resolve(self, href: str) -> Path:
        path, _ = urldefrag(href)
        target = (self.root / unquote(path).lstrip("/")).resolve()
        if target != self.root and self.root not in target.parents:
            raise FetchError(f"HREF outside of root directory: {href}", kind="bad_request", href=href)
        return target

    async def get(self, link: Link) -> bytes:
        path = self._resolve(link.href)
        try:
            return await asyncio.to_thread(path.read_bytes)
        except FileNotFoundError as exc:
            raise FetchError(f"Resource not found: {link.href}", kind="not_found", href=link.href) from exc
        except PermissionError as exc:
            raise FetchError(f"Access denied: {link.href}", kind="forbidden", href=link.href) from exc
        except OSError as exc:
            raise FetchError(f"Cannot read {link.href}: {exc}", href=link.href) from exc
