"""Full-text search over the resources of a publication."""

from .matchers import CollatedMatchFinder, ExactMatchFinder, MatchFinder, MatchRange
from .options import SearchOptions
from .service import SearchService, is_searchable, open_session
from .session import SearchSession

__all__ = [
    "CollatedMatchFinder",
    "ExactMatchFinder",
    "MatchFinder",
    "MatchRange",
    "SearchOptions",
    "SearchService",
    "SearchSession",
    "is_searchable",
    "open_session",
]
