"""Snippet extraction around a match, without cutting words at the edges."""

from __future__ import annotations

from typing import List

from pubsearch.publication.models import LocatorText

from .matchers import MatchRange


def _walk(text: str, index: int, step: int, length: int) -> str:
    """Collect chars from `index` in direction `step`.

    At least `length` chars are taken (bounded by the text), then the walk
    continues up to the next whitespace so the last word stays whole.
    """
    chars: List[str] = []
    while 0 <= index < len(text) and (len(chars) < length or not text[index].isspace()):
        chars.append(text[index])
        index += step
    if step < 0:
        chars.reverse()
    return "".join(chars)


def build_snippet(text: str, match: MatchRange, context_length: int) -> LocatorText:
    """Return the before/highlight/after triple for `match` in `text`."""
    return LocatorText(
        before=_walk(text, match.start - 1, -1, context_length),
        highlight=text[match.start : match.end],
        after=_walk(text, match.end, 1, context_length),
    )
