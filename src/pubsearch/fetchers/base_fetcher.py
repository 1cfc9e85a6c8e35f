"""Base interface for resource fetchers.

A fetcher gives access to the raw bytes of a publication's resources,
wherever they are stored (local directory, remote server, ...).
"""
from __future__ import annotations

from abc import ABC, abstractmethod

from pubsearch.publication.models import Link


class BaseFetcher(ABC):
    """Abstract fetcher interface.

    Implementations should be safe to construct without side effects and should
    not perform I/O until methods are invoked.
    """

    @abstractmethod
    async def get(self, link: Link) -> bytes:
        """Return the raw content of the resource referenced by `link`.

        Implementations should raise `pubsearch.exceptions.FetchError` on failure.
        """
        raise NotImplementedError

    async def close(self) -> None:
        """Release any resource held by the fetcher."""
        return None
