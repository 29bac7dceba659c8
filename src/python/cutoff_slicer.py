"""
Cutoff slicing: remove non-operational time from activity intervals.
"""

import logging
from dataclasses import replace
from typing import Iterable, Sequence

from intervals import CutoffRange, Interval, normalize

logger = logging.getLogger(__name__)


def _apply_cutoff(
    segments: list[tuple[float, float]], cutoff: CutoffRange
) -> list[tuple[float, float]]:
    """Refine the working segments by one cutoff."""
    remaining: list[tuple[float, float]] = []
    for seg_start, seg_end in segments:
        if cutoff.end <= seg_start or cutoff.start >= seg_end:
            remaining.append((seg_start, seg_end))
            continue
        # Partial or full cover: keep whatever sticks out on either side
        if cutoff.start > seg_start:
            remaining.append((seg_start, cutoff.start))
        if cutoff.end < seg_end:
            remaining.append((cutoff.end, seg_end))
    return remaining


def slice_interval(interval: Interval, cutoffs: Iterable[CutoffRange]) -> list[Interval]:
    """
    Return the parts of `interval` not covered by any cutoff.

    Each cutoff is applied to the current working set: untouched segments
    pass through, covered segments are dropped and partially covered ones
    are split into the pieces before and after the cutoff. The final set is
    the same whatever order the cutoffs arrive in; it is returned sorted by
    start.

    Args:
        interval: Activity interval (payload is copied onto every piece)
        cutoffs: Cutoff ranges, any order, may overlap each other

    Returns:
        Disjoint sub-intervals inside [interval.start, interval.end]
    """
    interval = normalize(interval)
    segments = [(interval.start, interval.end)]

    for cutoff in cutoffs:
        cutoff = normalize(cutoff)
        if cutoff.length == 0:
            continue
        segments = _apply_cutoff(segments, cutoff)
        if not segments:
            break

    segments.sort()
    return [replace(interval, start=start, end=end) for start, end in segments]


def slice_intervals(
    intervals: Iterable[Interval], cutoffs: Iterable[CutoffRange]
) -> list[Interval]:
    """Slice every interval and flatten the pieces in input order."""
    cutoff_list: Sequence[CutoffRange] = list(cutoffs)
    pieces: list[Interval] = []
    for interval in intervals:
        pieces.extend(slice_interval(interval, cutoff_list))
    logger.debug("Sliced intervals by %d cutoffs into %d segments", len(cutoff_list), len(pieces))
    return pieces
