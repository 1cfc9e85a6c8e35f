"""Conversion of an in-resource progression into a publication-wide one."""

from __future__ import annotations

from typing import List, Optional, Sequence

from pubsearch.publication.models import Locator


def _start_of(positions: Sequence[List[Locator]], index: int) -> Optional[float]:
    if index < 0 or index >= len(positions) or not positions[index]:
        return None
    return positions[index][0].locations.total_progression


def map_total_progression(
    resource_index: int,
    progression: float,
    positions: Optional[Sequence[List[Locator]]],
) -> Optional[float]:
    """Interpolate `progression` between the start of this resource and the next one.

    The last resource ends at 1.0. Returns None when the positions are unknown,
    which callers must treat as "unknown", never as zero.
    """
    if not positions:
        return None
    start = _start_of(positions, resource_index)
    if start is None:
        return None
    end = _start_of(positions, resource_index + 1)
    if end is None:
        end = 1.0
    return start + progression * (end - start)
