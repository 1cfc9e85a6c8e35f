import json
from pathlib import Path
from typing import Any, Dict, List, Union

import pytest
from fastmcp import Client, FastMCP

from pubsearch.config import Settings
from pubsearch.mcp.tools.search import links_from_hrefs, register_search_tools
from pubsearch.search.session import SearchSession


class DummyState:
    def __init__(self) -> None:
        self.settings = Settings()
        self.settings.search.locale = "en"
        self.sessions: Dict[str, SearchSession] = {}


def _extract_json_payload(result: Any) -> Union[Dict[str, Any], List[Dict[str, Any]], str]:
    if isinstance(result, (dict, list, str)):
        return result
    content = getattr(result, "content", None)
    if isinstance(content, list) and content:
        for item in content:
            text = getattr(item, "text", None)
            if isinstance(text, str):
                try:
                    return json.loads(text)
                except json.JSONDecodeError:
                    return text
    raise AssertionError("Unable to extract JSON payload from tool result")


def write_book(root: Path) -> List[str]:
    (root / "ch1.xhtml").write_text("<html><body><p>The cat sat.</p></body></html>", encoding="utf-8")
    (root / "ch2.md").write_text("# Two\n\nNothing to see.", encoding="utf-8")
    (root / "ch3.txt").write_text("A Cat ran. Another cat!", encoding="utf-8")
    return ["ch1.xhtml", "ch2.md", "ch3.txt"]


def test_links_from_hrefs_guess_media_types() -> None:
    links = links_from_hrefs(["a.xhtml", "b.md#frag", "c.txt", "", "d"])
    assert [link.media_type for link in links] == [
        "application/xhtml+xml",
        "text/markdown",
        "text/plain",
        "text/html",
    ]


@pytest.mark.asyncio
async def test_search_session_tools_page_through_results(tmp_path: Path) -> None:
    mcp = FastMCP("test")
    state = DummyState()
    hrefs = write_book(tmp_path)
    register_search_tools(mcp, get_state=lambda: state)

    client = Client(mcp)
    async with client:
        opened = _extract_json_payload(
            await client.call_tool(
                "search_open",
                {"hrefs": hrefs, "query": "cat", "root_dir": str(tmp_path)},
            )
        )
        assert isinstance(opened, dict)
        session_id = opened["session_id"]
        assert opened["resources"] == 3
        assert session_id in state.sessions

        first = _extract_json_payload(await client.call_tool("search_next", {"session_id": session_id}))
        second = _extract_json_payload(await client.call_tool("search_next", {"session_id": session_id}))
        closed = _extract_json_payload(await client.call_tool("search_close", {"session_id": session_id}))

    assert isinstance(first, dict) and isinstance(second, dict)
    assert first["href"] == "ch1.xhtml"
    assert first["locators"][0]["text"]["highlight"] == "cat"
    assert first["locators"][0]["type"] == "application/xhtml+xml"
    assert second["href"] == "ch3.txt"
    assert [loc["text"]["highlight"] for loc in second["locators"]] == ["Cat", "cat"]
    assert closed == "closed"
    assert state.sessions == {}


@pytest.mark.asyncio
async def test_search_all_honours_options_and_page_cap(tmp_path: Path) -> None:
    mcp = FastMCP("test")
    state = DummyState()
    hrefs = write_book(tmp_path)
    register_search_tools(mcp, get_state=lambda: state)

    client = Client(mcp)
    async with client:
        sensitive = _extract_json_payload(
            await client.call_tool(
                "search_all",
                {
                    "hrefs": hrefs,
                    "query": "Cat",
                    "root_dir": str(tmp_path),
                    "options": {"case-sensitive": True, "diacritic-sensitive": True},
                },
            )
        )
        capped = _extract_json_payload(
            await client.call_tool(
                "search_all",
                {"hrefs": hrefs, "query": "cat", "root_dir": str(tmp_path), "max_pages": 1},
            )
        )
        options = _extract_json_payload(await client.call_tool("search_options", {}))

    assert isinstance(sensitive, list) and len(sensitive) == 1
    assert sensitive[0]["href"] == "ch3.txt"
    assert len(sensitive[0]["locators"]) == 1
    assert isinstance(capped, list) and len(capped) == 1
    assert options == {"case-sensitive": False, "diacritic-sensitive": False, "whole-word": False}
    assert state.sessions == {}


@pytest.mark.asyncio
async def test_search_tools_reject_bad_requests(tmp_path: Path) -> None:
    mcp = FastMCP("test")
    state = DummyState()
    hrefs = write_book(tmp_path)
    register_search_tools(mcp, get_state=lambda: state)

    client = Client(mcp)
    async with client:
        with pytest.raises(Exception):
            await client.call_tool("search_open", {"hrefs": hrefs, "query": "  ", "root_dir": str(tmp_path)})
        with pytest.raises(Exception):
            await client.call_tool("search_next", {"session_id": "unknown"})
        with pytest.raises(Exception):
            # Missing resource surfaces as a resource error
            await client.call_tool(
                "search_all", {"hrefs": ["missing.txt"], "query": "cat", "root_dir": str(tmp_path)}
            )


@pytest.mark.asyncio
async def test_oldest_session_is_closed_when_too_many_are_open(tmp_path: Path) -> None:
    mcp = FastMCP("test")
    state = DummyState()
    state.settings.search.max_sessions = 2
    hrefs = write_book(tmp_path)
    register_search_tools(mcp, get_state=lambda: state)

    client = Client(mcp)
    async with client:
        ids = []
        for _ in range(3):
            opened = _extract_json_payload(
                await client.call_tool(
                    "search_open", {"hrefs": hrefs, "query": "cat", "root_dir": str(tmp_path)}
                )
            )
            assert isinstance(opened, dict)
            ids.append(opened["session_id"])
            if len(ids) == 1:
                oldest_session = state.sessions[ids[0]]
        oldest = ids[0]

        assert list(state.sessions) == ids[1:]
        assert oldest_session.closed
        with pytest.raises(Exception):
            await client.call_tool("search_next", {"session_id": oldest})
        page = _extract_json_payload(await client.call_tool("search_next", {"session_id": ids[2]}))

    assert isinstance(page, dict) and page["href"] == "ch1.xhtml"
