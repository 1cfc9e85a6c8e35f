"""Immutable data structures describing a publication and search results.

A publication is an ordered list of resources (its reading order). Search
results point back into those resources with `Locator` records.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True, slots=True)
class Link:
    """Reference to one resource of a publication.

    Attributes
    ----------
    href: str
        Resource path, relative to the publication root or absolute URL.
    media_type: str
        Content type of the resource, e.g. "application/xhtml+xml".
    title: str | None
        Optional human-readable title.
    children: tuple[Link, ...]
        Nested links, only used by table-of-contents entries.
    """

    href: str
    media_type: str = "text/html"
    title: Optional[str] = None
    children: Tuple["Link", ...] = ()


@dataclass(frozen=True, slots=True)
class Metadata:
    """Publication-level metadata consumed by the search engine."""

    title: Optional[str] = None
    # BCP 47 language tag, used as the locale hint for collated matching
    language: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Locations:
    progression: Optional[float] = None
    total_progression: Optional[float] = None
    position: Optional[int] = None


@dataclass(frozen=True, slots=True)
class LocatorText:
    before: str = ""
    highlight: str = ""
    after: str = ""


@dataclass(frozen=True, slots=True)
class Locator:
    """Resolvable pointer into one resource, plus contextual text."""

    href: str
    media_type: str
    title: Optional[str] = None
    locations: Locations = field(default_factory=Locations)
    text: LocatorText = field(default_factory=LocatorText)

    @classmethod
    def from_link(cls, link: Link, *, title: Optional[str] = None) -> "Locator":
        return cls(href=link.href, media_type=link.media_type, title=title or link.title)

    def copy_with(
        self,
        *,
        locations: Optional[Locations] = None,
        text: Optional[LocatorText] = None,
    ) -> "Locator":
        return replace(
            self,
            locations=locations if locations is not None else self.locations,
            text=text if text is not None else self.text,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "href": self.href,
            "type": self.media_type,
            "title": self.title,
            "locations": {
                "progression": self.locations.progression,
                "totalProgression": self.locations.total_progression,
                "position": self.locations.position,
            },
            "text": {
                "before": self.text.before,
                "highlight": self.text.highlight,
                "after": self.text.after,
            },
        }


@dataclass(frozen=True, slots=True)
class LocatorCollection:
    """Locators found in a single resource during one `advance()` call."""

    href: str
    resource_index: int
    locators: Tuple[Locator, ...] = ()

    def __len__(self) -> int:
        return len(self.locators)

    def __iter__(self):
        return iter(self.locators)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "href": self.href,
            "resource_index": self.resource_index,
            "locators": [loc.to_dict() for loc in self.locators],
        }


def flatten_links(links: List[Link]) -> List[Link]:
    """Return `links` and all their descendants in document order."""
    out: List[Link] = []
    for link in links:
        out.append(link)
        out.extend(flatten_links(list(link.children)))
    return out
