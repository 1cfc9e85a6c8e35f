"""Fetchers giving access to the raw bytes of publication resources."""

from .base_fetcher import BaseFetcher
from .file_fetcher import FileFetcher
from .http_fetcher import HttpFetcher
from .routing_fetcher import Route, RoutingFetcher, is_remote

__all__ = ["BaseFetcher", "FileFetcher", "HttpFetcher", "Route", "RoutingFetcher", "is_remote"]
