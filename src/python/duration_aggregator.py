"""
Raw / Net / Actual duration totals for channels.

- Raw: sum of the unsliced interval lengths
- Net: sum of the lengths left after cutoff slicing
- Actual: length of the merged union of the sliced pieces

When a bounding range (usually the head's nominal extent) is given, every
value only counts time inside it. The order is always slice, then clamp,
then merge; clamping before slicing would misplace deductions made by
cutoffs that straddle the bound.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Sequence

from cutoff_slicer import slice_intervals
from intervals import (
    CutoffRange,
    Interval,
    clamp_intervals,
    extent_of,
    merge_intervals,
    total_length,
)

logger = logging.getLogger(__name__)

Bound = tuple[float, float]


@dataclass(frozen=True)
class DurationTriple:
    """Raw, net and actual minutes."""
    raw: float = 0.0
    net: float = 0.0
    actual: float = 0.0


@dataclass(frozen=True)
class ChannelDurations:
    """Totals for a single channel.

    Attributes:
        channel_id: Caller's identifier for the channel (may be None)
        durations: Raw/net/actual minutes
        segments: Sliced (and, with a bound, clamped) pieces, reusable for layout
        exceeds_bound: True when the channel overflows the bounding range
    """
    channel_id: str | None
    durations: DurationTriple
    segments: list[Interval] = field(default_factory=list)
    exceeds_bound: bool = False


@dataclass(frozen=True)
class JointDurations:
    """Totals for several channels considered together.

    `durations.actual` is the measure of the union across all channels, which
    is at most the sum of the per-channel net values.
    """
    channels: list[ChannelDurations]
    durations: DurationTriple
    merged: list[Interval] = field(default_factory=list)

    @property
    def overlap(self) -> float:
        """Net time counted more than once across channels."""
        return max(0.0, self.durations.net - self.durations.actual)


def _exceeds(intervals: Sequence[Interval], bound: Bound | None) -> bool:
    if bound is None:
        return False
    extent = extent_of(intervals)
    if extent is None:
        return False
    lower, upper = bound
    if extent[0] < lower or extent[1] > upper:
        return True
    return total_length(intervals) > max(0.0, upper - lower)


def aggregate_channel(
    intervals: Iterable[Interval],
    cutoffs: Iterable[CutoffRange] = (),
    bound: Bound | None = None,
    channel_id: str | None = None,
) -> ChannelDurations:
    """
    Compute raw/net/actual minutes for one channel.

    Args:
        intervals: The channel's activity intervals
        cutoffs: Cutoff ranges of the same head, flattened
        bound: Optional (lower, upper) range every value is clamped to
        channel_id: Identifier echoed back on the result

    Returns:
        ChannelDurations; an overflowing channel is flagged, never rejected
    """
    intervals = list(intervals)
    segments = slice_intervals(intervals, cutoffs)

    if bound is not None:
        lower, upper = bound
        raw = total_length(clamp_intervals(intervals, lower, upper))
        segments = clamp_intervals(segments, lower, upper)
    else:
        raw = total_length(intervals)

    net = total_length(segments)
    actual = sum(s.length for s in merge_intervals(segments))
    exceeds = _exceeds(intervals, bound)
    if exceeds:
        logger.debug("Channel %s overflows bound %s", channel_id, bound)

    return ChannelDurations(
        channel_id=channel_id,
        durations=DurationTriple(raw=raw, net=net, actual=actual),
        segments=segments,
        exceeds_bound=exceeds,
    )


def aggregate_channels(
    channels: Mapping[str, Iterable[Interval]],
    cutoffs: Iterable[CutoffRange] = (),
    bound: Bound | None = None,
) -> JointDurations:
    """
    Compute per-channel totals plus the joint actual across all channels.

    Args:
        channels: Channel id -> intervals, in display order
        cutoffs: Cutoff ranges shared by all channels of the head
        bound: Optional (lower, upper) clamp applied to every channel

    Returns:
        JointDurations with summed raw/net and the merged-union actual
    """
    cutoff_list = list(cutoffs)
    results = [
        aggregate_channel(intervals, cutoff_list, bound=bound, channel_id=channel_id)
        for channel_id, intervals in channels.items()
    ]

    all_segments = [seg for result in results for seg in result.segments]
    merged = merge_intervals(all_segments)

    return JointDurations(
        channels=results,
        durations=DurationTriple(
            raw=sum(r.durations.raw for r in results),
            net=sum(r.durations.net for r in results),
            actual=sum(s.length for s in merged),
        ),
        merged=merged,
    )
