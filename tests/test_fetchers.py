from pathlib import Path
from typing import Any

import httpx
import pytest

from pubsearch.exceptions import FetchError
from pubsearch.fetchers import FileFetcher, HttpFetcher, Route, RoutingFetcher, is_remote
from pubsearch.publication.models import Link
from pubsearch.publication.positions import compute_positions

# ---------- Helpers ----------


def patch_client_with_responder(fetcher: HttpFetcher, responder: Any) -> None:
    # Patch the private _client factory to return an AsyncClient with MockTransport
    def _client() -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(responder), follow_redirects=True)

    setattr(fetcher, "_client", _client)


def responder(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/book/ch1.xhtml":
        return httpx.Response(200, content=b"<p>chapter one</p>")
    if request.url.path == "/book/secret.xhtml":
        return httpx.Response(403)
    if request.url.path == "/book/busy.xhtml":
        return httpx.Response(503)
    return httpx.Response(404)


# ---------- FileFetcher ----------


@pytest.mark.asyncio
async def test_file_fetcher_reads_relative_to_root(tmp_path: Path) -> None:
    (tmp_path / "text").mkdir()
    (tmp_path / "text" / "ch1.txt").write_bytes(b"hello")
    fetcher = FileFetcher(tmp_path)
    assert await fetcher.get(Link("text/ch1.txt#para", "text/plain")) == b"hello"


@pytest.mark.asyncio
async def test_file_fetcher_errors(tmp_path: Path) -> None:
    fetcher = FileFetcher(tmp_path / "root")
    with pytest.raises(FetchError) as missing:
        await fetcher.get(Link("nope.txt"))
    assert missing.value.kind == "not_found"

    with pytest.raises(FetchError) as escaped:
        await fetcher.get(Link("../outside.txt"))
    assert escaped.value.kind == "bad_request"


# ---------- HttpFetcher ----------


@pytest.mark.asyncio
async def test_http_fetcher_resolves_relative_hrefs() -> None:
    fetcher = HttpFetcher(base_url="https://books.example.com/book/")
    patch_client_with_responder(fetcher, responder)
    assert fetcher.url_for(Link("ch1.xhtml#p3")) == "https://books.example.com/book/ch1.xhtml"
    assert await fetcher.get(Link("ch1.xhtml")) == b"<p>chapter one</p>"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "href,kind",
    [("secret.xhtml", "forbidden"), ("busy.xhtml", "unavailable"), ("gone.xhtml", "not_found")],
)
async def test_http_fetcher_maps_status_codes(href: str, kind: str) -> None:
    fetcher = HttpFetcher(base_url="https://books.example.com/book/")
    patch_client_with_responder(fetcher, responder)
    with pytest.raises(FetchError) as excinfo:
        await fetcher.get(Link(href))
    assert excinfo.value.kind == kind
    assert isinstance(excinfo.value.__cause__, httpx.HTTPStatusError)


@pytest.mark.asyncio
async def test_http_fetcher_rejects_non_http_hrefs() -> None:
    fetcher = HttpFetcher()
    with pytest.raises(FetchError) as excinfo:
        await fetcher.get(Link("relative/ch1.xhtml"))
    assert excinfo.value.kind == "bad_request"


@pytest.mark.asyncio
async def test_http_fetcher_transport_failure_is_unavailable() -> None:
    def failing(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    fetcher = HttpFetcher()
    patch_client_with_responder(fetcher, failing)
    with pytest.raises(FetchError) as excinfo:
        await fetcher.get(Link("https://books.example.com/book/ch1.xhtml"))
    assert excinfo.value.kind == "unavailable"


# ---------- RoutingFetcher / positions ----------


@pytest.mark.asyncio
async def test_routing_fetcher_dispatches_remote_and_local(tmp_path: Path) -> None:
    (tmp_path / "local.txt").write_bytes(b"local")
    http = HttpFetcher()
    patch_client_with_responder(http, responder)
    fetcher = RoutingFetcher([Route(http, accepts=is_remote), Route(FileFetcher(tmp_path))])

    assert await fetcher.get(Link("local.txt")) == b"local"
    assert await fetcher.get(Link("https://books.example.com/book/ch1.xhtml")) == b"<p>chapter one</p>"

    with pytest.raises(FetchError):
        await RoutingFetcher([]).get(Link("local.txt"))


@pytest.mark.asyncio
async def test_compute_positions(tmp_path: Path) -> None:
    (tmp_path / "a.txt").write_bytes(b"x" * 3000)
    (tmp_path / "b.txt").write_bytes(b"")
    links = [Link("a.txt", "text/plain"), Link("b.txt", "text/plain")]
    positions = await compute_positions(links, FileFetcher(tmp_path))

    assert [len(group) for group in positions] == [3, 1]
    flat = [loc.locations for group in positions for loc in group]
    assert [loc.position for loc in flat] == [1, 2, 3, 4]
    assert [loc.total_progression for loc in flat] == [0.0, 0.25, 0.5, 0.75]
    assert positions[1][0].href == "b.txt"
