"""pubsearch MCP server entrypoint using FastMCP.

Exposes publication search sessions as tools.
Run with:
  - pubsearch-mcp
  - or: python -m pubsearch.mcp.server (ensure PYTHONPATH includes ./src)
"""
from __future__ import annotations

import logging
from typing import Dict, Optional

from fastmcp import FastMCP

from pubsearch.config import Settings, load_settings
from pubsearch.logging_utils import configure_logging
from pubsearch.mcp.tools import register_search_tools
from pubsearch.search.session import SearchSession

logger = logging.getLogger(__name__)


class AppState:
    """Application state shared by MCP tools."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.sessions: Dict[str, SearchSession] = {}


# Global state and server instance
_state: Optional[AppState] = None
mcp = FastMCP("pubsearch MCP Server")


# ----- Tools -----

@mcp.tool
def health() -> str:
    """Simple health check tool."""
    return "ok"


# ----- Entrypoint -----

def main() -> None:
    """Initialize state and run the MCP server."""
    global _state
    settings = load_settings()
    configure_logging(settings.app.log_level)
    _state = AppState(settings)
    register_search_tools(mcp, get_state=lambda: _state)
    logger.info("Starting %s (transport=%s)", settings.app.name, settings.app.transport)
    # Choose transport based on configuration: stdio (default), http, or sse
    transport = settings.app.transport
    if transport in ("http", "sse"):
        mcp.run(transport=transport, host=settings.app.host, port=settings.app.port)
    else:
        mcp.run()


if __name__ == "__main__":  # pragma: no cover
    main()
