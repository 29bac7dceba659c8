"""
Interval value types and union arithmetic.

Every range in the engine is a half-open span of minutes measured from an
arbitrary per-channel origin. Intervals carry an opaque payload (id, color,
category) that the algebra never looks at; cutoff ranges carry nothing.

Functions here never mutate their inputs. A range whose end precedes its
start is read as zero-length at its start, because editors can transiently
hold such values while the user is still typing.
"""

import logging
from dataclasses import dataclass, replace
from typing import Generic, Iterable, TypeVar

from custom_types import P

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Interval(Generic[P]):
    """An activity span in minutes plus a pass-through payload.

    Attributes:
        start: Start minute (inclusive)
        end: End minute (exclusive)
        payload: Opaque caller data, preserved verbatim
    """
    start: float
    end: float
    payload: P | None = None

    @property
    def length(self) -> float:
        return max(0.0, self.end - self.start)


@dataclass(frozen=True)
class CutoffRange:
    """Non-operational time that is deducted from sibling channels."""
    start: float
    end: float

    @property
    def length(self) -> float:
        return max(0.0, self.end - self.start)


R = TypeVar("R", Interval, CutoffRange)


def normalize(rng: R) -> R:
    """Return `rng` unchanged, or collapsed to zero length if end < start."""
    if rng.end < rng.start:
        logger.debug("Normalizing inverted range %s-%s to zero length", rng.start, rng.end)
        return replace(rng, end=rng.start)
    return rng


def overlap_length(a_start: float, a_end: float, b_start: float, b_end: float) -> float:
    """Minutes shared by [a_start, a_end) and [b_start, b_end)."""
    return max(0.0, min(a_end, b_end) - max(a_start, b_start))


def total_length(ranges: Iterable[R]) -> float:
    """Plain sum of lengths; double-counts overlaps."""
    return sum(normalize(r).length for r in ranges)


def merge_intervals(ranges: Iterable[R]) -> list[R]:
    """
    Union a set of ranges into sorted, non-overlapping, non-touching ranges.

    Ranges are sorted by start (stable, so ties keep input order) and scanned
    once; the next range is folded into the running one when it starts at or
    before the running end. A folded range keeps the payload of the first
    range in sort order.

    Args:
        ranges: Intervals or cutoff ranges, any order, may overlap

    Returns:
        New range values whose total length is the measure of the union
    """
    ordered = sorted((normalize(r) for r in ranges), key=lambda r: r.start)
    if not ordered:
        return []

    merged: list[R] = [ordered[0]]
    for rng in ordered[1:]:
        last = merged[-1]
        if rng.start <= last.end:
            if rng.end > last.end:
                merged[-1] = replace(last, end=rng.end)
        else:
            merged.append(rng)

    # Hand back fresh values even where nothing was combined
    return [replace(r) for r in merged]


def measure(ranges: Iterable[R]) -> float:
    """Length of the union of `ranges`."""
    return sum(r.length for r in merge_intervals(ranges))


def clamp_intervals(ranges: Iterable[R], lower: float, upper: float) -> list[R]:
    """
    Cut every range to [lower, upper].

    Ranges left with no positive length after clamping are dropped.
    """
    clamped: list[R] = []
    for rng in ranges:
        rng = normalize(rng)
        start = max(lower, rng.start)
        end = min(upper, rng.end)
        if start < end:
            clamped.append(replace(rng, start=start, end=end))
    return clamped


def extent_of(ranges: Iterable[R]) -> tuple[float, float] | None:
    """(earliest start, latest end) of `ranges`, or None when empty."""
    items = [normalize(r) for r in ranges]
    if not items:
        return None
    return min(r.start for r in items), max(r.end for r in items)
