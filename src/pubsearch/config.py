from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from pubsearch.exceptions import ConfigError


class AppConfig(BaseModel):
    """Application-specific configuration values."""

    name: str = "pubsearch"
    log_level: str = "INFO"
    # Transport settings for FastMCP: "stdio" (default), "http", or "sse"
    transport: Literal["stdio", "http", "sse"] = "stdio"
    host: str = "127.0.0.1"
    port: int = 8000


class SearchConfig(BaseModel):
    """Search engine configuration values."""

    # Minimum number of context characters collected on each side of a match
    snippet_length: int = Field(default=200, ge=0)
    # "collated" honours case/diacritic/whole-word options, "exact" is a literal scan
    strategy: Literal["collated", "exact"] = "collated"
    # BCP 47 tag such as "fr-FR"; None uses the publication language, then the system locale
    locale: Optional[str] = None
    # Upper bound on pages returned by the one-shot search tool
    max_pages: int = Field(default=50, ge=1)
    # Open sessions kept by the MCP server; the least recently opened is closed first
    max_sessions: int = Field(default=32, ge=1)


class FetcherConfig(BaseModel):
    """Resource fetcher configuration values."""

    base_url: Optional[str] = None
    root_dir: Optional[str] = None
    timeout: float = 30.0
    verify_ssl: bool = True


class Settings(BaseSettings):
    """Top-level settings loaded from environment variables and .env only."""

    model_config = SettingsConfigDict(
        env_prefix="PUBSEARCH_",
        env_nested_delimiter="__",
        env_file=".env",
        extra="ignore",
    )

    app: AppConfig = AppConfig()
    search: SearchConfig = SearchConfig()
    fetcher: FetcherConfig = FetcherConfig()


def load_settings() -> Settings:
    """Load settings from environment variables and .env only."""
    try:
        return Settings()  # type: ignore[call-arg]
    except ValidationError as exc:
        raise ConfigError(f"Invalid pubsearch settings: {exc}") from exc
