import pytest

from pubsearch.exceptions import ExtractionError
from pubsearch.extractors import (
    ExtractorFactory,
    HTMLExtractor,
    MarkdownExtractor,
    PlainTextExtractor,
)


def test_html_extractor_keeps_visible_text_only() -> None:
    html = (
        "<html><head><title>Ignored</title><style>p {color: red}</style></head>"
        "<body><h1>Chapter 1</h1><p>It was a <em>dark</em> night.</p>"
        "<script>var x = 1;</script></body></html>"
    )
    text = HTMLExtractor().extract_text(html.encode("utf-8"), "application/xhtml+xml")
    assert text == "Chapter 1 It was a dark night."


def test_html_extractor_honours_charset() -> None:
    data = "<p>Café</p>".encode("latin-1")
    assert HTMLExtractor().extract_text(data, "text/html; charset=ISO-8859-1") == "Café"


def test_markdown_extractor_renders_then_strips_markup() -> None:
    text = MarkdownExtractor().extract_text(b"# Title\n\nSome *emphasised* text.", "text/markdown")
    assert text == "Title Some emphasised text."


def test_plain_text_passthrough() -> None:
    assert PlainTextExtractor().extract_text(b"  as is\n", "text/plain") == "  as is\n"


def test_undecodable_bytes_raise_extraction_error() -> None:
    with pytest.raises(ExtractionError):
        PlainTextExtractor().extract_text(b"\xff\xfe\xfa", "text/plain")


def test_factory_routes_by_media_type() -> None:
    factory = ExtractorFactory()
    assert isinstance(factory.extractor_for("text/html; charset=utf-8"), HTMLExtractor)
    assert isinstance(factory.extractor_for("TEXT/MARKDOWN"), MarkdownExtractor)
    assert isinstance(factory.extractor_for("text/plain"), PlainTextExtractor)
    assert factory.extractor_for("image/png") is None
    assert factory.extract_text(b"\x89PNG", "image/png") is None


def test_factory_wraps_extractor_failures() -> None:
    class Exploding(PlainTextExtractor):
        def extract_text(self, data: bytes, media_type: str = "text/plain"):
            raise RuntimeError("parser crashed")

    factory = ExtractorFactory([Exploding()])
    with pytest.raises(ExtractionError):
        factory.extract_text(b"text", "text/plain")
