"""Fetcher retrieving remote resources through HTTP.

Relative HREFs are resolved against `base_url`. Transport and status failures
are translated into `FetchError` kinds.
"""

from __future__ import annotations

from typing import Dict, Optional
from urllib.parse import urldefrag, urljoin, urlparse

import httpx

from pubsearch.exceptions import FetchError
from pubsearch.fetchers.base_fetcher import BaseFetcher
from pubsearch.publication.models import Link


def _kind_for_status(status: int) -> str:
    if status in (401, 403):
        return "forbidden"
    if status == 404:
        return "not_found"
    if status in (408, 429, 502, 503, 504):
        return "unavailable"
    if 400 <= status < 500:
        return "bad_request"
    return "other"


class HttpFetcher(BaseFetcher):
    def __init__(
        self,
        *,
        base_url: Optional[str] = None,
        timeout: float = 30.0,
        verify_ssl: bool = True,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self.verify_ssl = verify_ssl
        self.headers = {"User-Agent": "pubsearch/0.1", **(headers or {})}

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout,
            verify=self.verify_ssl,
            headers=self.headers,
            follow_redirects=True,
        )

    def url_for(self, link: Link) -> str:
        href, _ = urldefrag(link.href)
        url = urljoin(self.base_url, href) if self.base_url else href
        if urlparse(url).scheme not in ("http", "https"):
            raise FetchError(
                f"Invalid HREF: {link.href}, produced URL: {url}", kind="bad_request", href=link.href
            )
        return url

    async def get(self, link: Link) -> bytes:
        url = self.url_for(link)
        try:
            async with self._client() as client:
                resp = await client.get(url)
                resp.raise_for_status()
                return resp.content
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise FetchError(
                f"HTTP {status} for {url}", kind=_kind_for_status(status), href=link.href
            ) from exc
        except (httpx.TimeoutException, httpx.NetworkError) as exc:
            raise FetchError(f"Unavailable: {url} ({exc})", kind="unavailable", href=link.href) from exc
        except httpx.HTTPError as exc:
            raise FetchError(f"Request failed for {url}: {exc}", href=link.href) from exc
