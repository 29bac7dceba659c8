"""
Legal translation range for dragging whole sub-channels in time.
"""

import logging
import math
from dataclasses import dataclass, replace
from typing import Iterable

from intervals import Interval, extent_of

logger = logging.getLogger(__name__)

Extent = tuple[float, float]


@dataclass(frozen=True)
class ShiftBounds:
    """Inclusive range of whole-minute deltas."""
    min: int
    max: int

    @property
    def is_empty(self) -> bool:
        return self.min > self.max

    def contains(self, delta: float) -> bool:
        return self.min <= delta <= self.max


@dataclass(frozen=True)
class ShiftTarget:
    """A selected channel: its interval extent and the head range containing it.

    Attributes:
        extent: (earliest start, latest end) of the channel, None if it has no intervals
        container: (start, end) of the containing head
    """
    extent: Extent | None
    container: Extent


def target_for(intervals: Iterable[Interval], container: Extent) -> ShiftTarget:
    """Build a ShiftTarget from a channel's intervals."""
    return ShiftTarget(extent=extent_of(intervals), container=container)


def channel_bounds(extent: Extent | None, container: Extent) -> ShiftBounds:
    """
    Deltas that keep one channel inside its container.

    The range is [container.min - extent.min, container.max - extent.max],
    narrowed to whole minutes. A channel without intervals may not move.
    """
    if extent is None:
        return ShiftBounds(0, 0)
    low = math.ceil(container[0] - extent[0])
    high = math.floor(container[1] - extent[1])
    return ShiftBounds(low, high)


def selection_bounds(selection: Iterable[ShiftTarget]) -> ShiftBounds | None:
    """
    Deltas legal for every selected channel at once.

    The joint range is the intersection of each channel's range. Returns None
    when that intersection is empty (or nothing is selected); callers must
    then leave every channel where it is rather than move some of them.
    """
    low = -math.inf
    high = math.inf
    for target in selection:
        bounds = channel_bounds(target.extent, target.container)
        low = max(low, bounds.min)
        high = min(high, bounds.max)

    if not (math.isfinite(low) and math.isfinite(high)) or low > high:
        logger.debug("No legal shift for selection (min=%s, max=%s)", low, high)
        return None
    return ShiftBounds(int(low), int(high))


def clamp_delta(delta: float, bounds: ShiftBounds | None) -> int | None:
    """Clamp a live drag delta into bounds; None means no move is possible."""
    if bounds is None or bounds.is_empty:
        return None
    return int(min(bounds.max, max(bounds.min, round(delta))))


def apply_shift(intervals: Iterable[Interval], delta: float) -> list[Interval]:
    """Translate every interval by `delta` minutes."""
    return [replace(i, start=i.start + delta, end=i.end + delta) for i in intervals]
