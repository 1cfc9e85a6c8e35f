"""Extractors turning resource bytes into searchable plain text."""

from .base_extractor import BaseExtractor
from .factory import ExtractorFactory
from .html_extractor import HTMLExtractor
from .markdown_extractor import MarkdownExtractor
from .text_extractor import PlainTextExtractor

__all__ = [
    "BaseExtractor",
    "ExtractorFactory",
    "HTMLExtractor",
    "MarkdownExtractor",
    "PlainTextExtractor",
]
