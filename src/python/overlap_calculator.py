"""
Overlap between channels: explains why joint Actual is below the sum of Net.
"""

import logging
from dataclasses import dataclass, field
from itertools import combinations
from typing import Iterable, Mapping

import numpy as np

from custom_types import MinuteArray
from intervals import Interval, merge_intervals, normalize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OverlapPair:
    """Minutes shared by two channels."""
    first: str
    second: str
    minutes: float


@dataclass(frozen=True)
class OverlapReport:
    """Pairwise overlaps (every unordered pair, in input order) and their total."""
    pairs: list[OverlapPair] = field(default_factory=list)
    total: float = 0.0

    def nonzero(self) -> list[OverlapPair]:
        """Pairs that actually overlap, for reporting."""
        return [p for p in self.pairs if p.minutes > 0]


def _bounds_arrays(intervals: Iterable[Interval]) -> tuple[MinuteArray, MinuteArray]:
    items = [normalize(i) for i in intervals]
    starts = np.array([i.start for i in items], dtype=np.float64)
    ends = np.array([i.end for i in items], dtype=np.float64)
    return starts, ends


def pairwise_overlap(a: Iterable[Interval], b: Iterable[Interval]) -> float:
    """
    Total minutes where intervals of `a` overlap intervals of `b`.

    Every pair (x in a, y in b) contributes
    max(0, min(x.end, y.end) - max(x.start, y.start)). Each set should be
    free of self-overlap (merge it first) or shared time is counted twice.
    """
    a_starts, a_ends = _bounds_arrays(a)
    b_starts, b_ends = _bounds_arrays(b)
    if a_starts.size == 0 or b_starts.size == 0:
        return 0.0

    shared = (
        np.minimum(a_ends[:, None], b_ends[None, :])
        - np.maximum(a_starts[:, None], b_starts[None, :])
    )
    return float(np.clip(shared, 0.0, None).sum())


def total_overlap(channels: Mapping[str, Iterable[Interval]]) -> OverlapReport:
    """
    Overlap for every unordered pair of channels plus the grand total.

    Each channel is merged on its own first, so the total equals
    sum(net) - joint actual as long as no minute is covered by three or
    more channels.
    """
    merged = {channel_id: merge_intervals(intervals) for channel_id, intervals in channels.items()}

    pairs: list[OverlapPair] = []
    for first, second in combinations(merged, 2):
        minutes = pairwise_overlap(merged[first], merged[second])
        pairs.append(OverlapPair(first=first, second=second, minutes=minutes))

    total = sum(p.minutes for p in pairs)
    logger.debug("Computed overlap for %d channel pairs: %.2f min", len(pairs), total)
    return OverlapReport(pairs=pairs, total=total)
