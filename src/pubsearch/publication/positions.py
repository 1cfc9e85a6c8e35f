"""Default positions list for a publication.

Each resource is split into positions of `POSITION_LENGTH` bytes (at least one
per resource). Every position carries its `total_progression` within the whole
publication, so the first position of a resource gives that resource's start.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, List, Sequence

from pubsearch.publication.models import Link, Locations, Locator

if TYPE_CHECKING:
    from pubsearch.fetchers.base_fetcher import BaseFetcher

POSITION_LENGTH = 1024


async def compute_positions(
    reading_order: Sequence[Link], fetcher: BaseFetcher, *, position_length: int = POSITION_LENGTH
) -> List[List[Locator]]:
    """Fetch every resource once and build the positions grouped by resource."""
    counts: List[int] = []
    for link in reading_order:
        data = await fetcher.get(link)
        counts.append(max(1, math.ceil(len(data) / position_length)))

    total = sum(counts)
    out: List[List[Locator]] = []
    position = 0
    for link, count in zip(reading_order, counts):
        group: List[Locator] = []
        for i in range(count):
            group.append(
                Locator.from_link(link).copy_with(
                    locations=Locations(
                        progression=i / count,
                        total_progression=position / total,
                        position=position + 1,
                    )
                )
            )
            position += 1
        out.append(group)
    return out
