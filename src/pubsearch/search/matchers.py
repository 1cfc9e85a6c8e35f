"""Match finders locating query occurrences in a resource's text.

Two strategies share the `MatchFinder` contract:

- `ExactMatchFinder` performs a literal, case-sensitive substring scan and
  supports no option at all.
- `CollatedMatchFinder` compares text the way a collator of a given strength
  would: primary strength ignores case and diacritics, secondary ignores
  case only, tertiary ignores neither. Whole-word matching keeps only the
  occurrences whose both ends fall on word boundaries.

Returned ranges are half-open, sorted by start and never overlap.
"""

from __future__ import annotations

import enum
import unicodedata
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

from pubsearch.publication.publication import system_locale

from .options import CASE_SENSITIVE, DIACRITIC_SENSITIVE, WHOLE_WORD, SearchOptions


class MatchRange(NamedTuple):
    start: int
    end: int


class Strength(enum.Enum):
    PRIMARY = "primary"
    # Primary strength with the case level switched on. See `CollatedMatchFinder.strength_for`.
    PRIMARY_CASE_LEVEL = "primary+case"
    SECONDARY = "secondary"
    TERTIARY = "tertiary"


class MatchFinder(ABC):
    """Abstract match finder interface."""

    name: str = "base"

    @property
    @abstractmethod
    def supported_options(self) -> Dict[str, Any]:
        """Option keys understood by this finder, mapped to their default value."""

    @abstractmethod
    def find(self, text: str, query: str, options: SearchOptions) -> List[MatchRange]:
        """Return the ranges of `text` matching `query`."""
        raise NotImplementedError


class ExactMatchFinder(MatchFinder):
    """Literal substring search.

    There is no safe way to fold case for every language with plain string
    comparison, so this finder has no options. Use `CollatedMatchFinder`
    for case or diacritic insensitive searches.
    """

    name = "exact"

    @property
    def supported_options(self) -> Dict[str, Any]:
        return {}

    def find(self, text: str, query: str, options: SearchOptions) -> List[MatchRange]:
        ranges: List[MatchRange] = []
        if not query:
            return ranges
        index = text.find(query)
        while index >= 0:
            ranges.append(MatchRange(index, index + len(query)))
            index = text.find(query, index + len(query))
        return ranges


# Turkic languages map dotted/dotless I differently when folding case
_TURKIC_LANGUAGES = {"tr", "az"}
_TURKIC_CASE = {"I": "ı", "İ": "i"}

# Apostrophes joining two letters do not break a word ("don't")
_MID_LETTER = {"'", "’"}


@lru_cache(maxsize=8192)
def _fold_char(char: str, strength: Strength, turkic: bool) -> str:
    """Collation key of a single character for `strength`.

    Format characters (soft hyphens, zero-width joiners) are ignorable and
    fold to the empty string, as do diacritics at primary strength.
    """
    if unicodedata.category(char) == "Cf":
        return ""
    if turkic and strength in (Strength.PRIMARY, Strength.SECONDARY):
        char = _TURKIC_CASE.get(char, char)
    folded = unicodedata.normalize("NFD", char)
    if strength in (Strength.PRIMARY, Strength.SECONDARY):
        folded = unicodedata.normalize("NFD", folded.casefold())
    if strength is Strength.PRIMARY:
        folded = "".join(c for c in folded if unicodedata.category(c) != "Mn")
    return folded


def _is_mark(char: str) -> bool:
    return unicodedata.category(char).startswith("M")


def _is_word_char(char: str) -> bool:
    return char.isalnum() or char == "_" or _is_mark(char)


def is_word_boundary(text: str, index: int) -> bool:
    """True when `index` sits between two words (or at either end of `text`)."""
    if index <= 0 or index >= len(text):
        return True
    prev, nxt = text[index - 1], text[index]
    if _is_word_char(prev) and _is_word_char(nxt):
        return False
    if nxt in _MID_LETTER and prev.isalpha() and index + 1 < len(text) and text[index + 1].isalpha():
        return False
    if prev in _MID_LETTER and nxt.isalpha() and index >= 2 and text[index - 2].isalpha():
        return False
    return True


class CollatedMatchFinder(MatchFinder):
    """Locale-aware search driven by a collation strength derived from the options."""

    name = "collated"

    def __init__(self, locale: Optional[str] = None) -> None:
        self.locale = locale or system_locale()
        self._turkic = self.locale.replace("_", "-").split("-")[0].lower() in _TURKIC_LANGUAGES

    @property
    def supported_options(self) -> Dict[str, Any]:
        return {CASE_SENSITIVE: False, DIACRITIC_SENSITIVE: False, WHOLE_WORD: False}

    @staticmethod
    def strength_for(options: SearchOptions) -> Strength:
        """Map the case/diacritic toggles to a collation strength.

        Known limitation: case-sensitive but diacritic-insensitive searches
        use primary strength with the case level on, which does not ignore
        diacritics. Such searches behave like tertiary strength.
        """
        case_sensitive = options.case_sensitive
        if not options.diacritic_sensitive:
            return Strength.PRIMARY_CASE_LEVEL if case_sensitive else Strength.PRIMARY
        return Strength.TERTIARY if case_sensitive else Strength.SECONDARY

    def fold(self, text: str, strength: Strength) -> Tuple[str, List[int]]:
        """Return the folded `text` and, for each folded char, the index of its source char."""
        key = Strength.TERTIARY if strength is Strength.PRIMARY_CASE_LEVEL else strength
        parts: List[str] = []
        owners: List[int] = []
        for index, char in enumerate(text):
            folded = _fold_char(char, key, self._turkic)
            parts.append(folded)
            owners.extend([index] * len(folded))
        return "".join(parts), owners

    def find(self, text: str, query: str, options: SearchOptions) -> List[MatchRange]:
        strength = self.strength_for(options)
        haystack, owners = self.fold(text, strength)
        needle, _ = self.fold(query, strength)
        if not needle or not haystack:
            return []

        whole_word = options.whole_word
        ranges: List[MatchRange] = []
        pos = haystack.find(needle)
        while pos >= 0:
            match = self._to_source_range(text, owners, pos, pos + len(needle), strength)
            if match is not None and (
                not whole_word
                or (is_word_boundary(text, match.start) and is_word_boundary(text, match.end))
            ):
                ranges.append(match)
                pos = haystack.find(needle, pos + len(needle))
            else:
                pos = haystack.find(needle, pos + 1)
        return ranges

    def _to_source_range(
        self, text: str, owners: List[int], start: int, end: int, strength: Strength
    ) -> Optional[MatchRange]:
        # Both ends must fall between source characters, not inside an expansion ("ß" -> "ss")
        if start > 0 and owners[start - 1] == owners[start]:
            return None
        if end < len(owners) and owners[end] == owners[end - 1]:
            return None
        source_start = owners[start]
        source_end = owners[end - 1] + 1
        if _is_mark(text[source_start]):
            return None
        # Trailing marks ignored at this strength belong to the match, others split a grapheme
        while source_end < len(text) and _is_mark(text[source_end]):
            if _fold_char(text[source_end], strength, self._turkic):
                return None
            source_end += 1
        return MatchRange(source_start, source_end)


def create_match_finder(strategy: str = "collated", locale: Optional[str] = None) -> MatchFinder:
    """Build the match finder named by `strategy` ("collated" or "exact")."""
    if strategy == "exact":
        return ExactMatchFinder()
    if strategy == "collated":
        return CollatedMatchFinder(locale)
    raise ValueError(f"Unknown match strategy: {strategy!r}")
