"""Publication model consumed by the search engine."""

from .models import Link, Locations, Locator, LocatorCollection, LocatorText, Metadata
from .publication import Publication

__all__ = [
    "Link",
    "Locations",
    "Locator",
    "LocatorCollection",
    "LocatorText",
    "Metadata",
    "Publication",
]
