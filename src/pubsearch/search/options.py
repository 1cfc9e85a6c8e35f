"""Search options recognised by match finders.

Options are plain key/value pairs. The well-known keys are boolean toggles;
any other key is a custom option that only some match finders understand.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from pubsearch.exceptions import UnsupportedOption

CASE_SENSITIVE = "case-sensitive"
DIACRITIC_SENSITIVE = "diacritic-sensitive"
WHOLE_WORD = "whole-word"

_TRUE = {"true", "1", "yes", "on"}
_FALSE = {"false", "0", "no", "off"}


def _normalize_key(key: str) -> str:
    # Accept python-style keys ("case_sensitive") as aliases
    return key.strip().lower().replace("_", "-")


def parse_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in _TRUE | _FALSE:
        return value.strip().lower() in _TRUE
    raise UnsupportedOption(f"Option '{key}' expects a boolean, got {value!r}")


@dataclass(frozen=True)
class SearchOptions:
    """Immutable set of option values for one search session."""

    values: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, raw: Optional[Mapping[str, Any]] = None) -> "SearchOptions":
        return cls({_normalize_key(k): v for k, v in (raw or {}).items()})

    def get(self, key: str, default: Any = None) -> Any:
        return self.values.get(_normalize_key(key), default)

    def flag(self, key: str, default: bool = False) -> bool:
        value = self.get(key)
        if value is None:
            return default
        return parse_bool(key, value)

    @property
    def case_sensitive(self) -> bool:
        return self.flag(CASE_SENSITIVE)

    @property
    def diacritic_sensitive(self) -> bool:
        return self.flag(DIACRITIC_SENSITIVE)

    @property
    def whole_word(self) -> bool:
        return self.flag(WHOLE_WORD)

    def validate(self) -> None:
        """Raise `UnsupportedOption` if a well-known toggle has a non-boolean value."""
        for key in (CASE_SENSITIVE, DIACRITIC_SENSITIVE, WHOLE_WORD):
            self.flag(key)

    def keys(self):
        return self.values.keys()

    def restricted_to(self, supported: Mapping[str, Any]) -> "SearchOptions":
        """Options limited to `supported` keys, missing ones filled with their defaults."""
        merged: Dict[str, Any] = dict(supported)
        for key, value in self.values.items():
            if key in supported:
                merged[key] = value
        return SearchOptions(merged)
