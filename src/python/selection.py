"""
Moving a multi-selection of sub-channels together.

A drag starts by asking for the joint bounds of every selected sub-channel,
clamps live deltas into them and, on release, commits one shared delta.
When no shared delta exists the selection stays put.
"""

import logging
from typing import Iterable, Sequence

from intervals import Interval
from shift_bounds import ShiftBounds, ShiftTarget, apply_shift, clamp_delta, selection_bounds, target_for
from timeline_model import HeadChannel, TimelineInterval

logger = logging.getLogger(__name__)

SelectionKey = tuple[str, str]   # (head_id, sub_channel_id)


def selection_targets(heads: Sequence[HeadChannel], selection: Iterable[SelectionKey]) -> list[ShiftTarget]:
    """Resolve (head id, sub id) keys to shift targets; unknown keys are skipped."""
    by_id = {head.id: head for head in heads}
    targets: list[ShiftTarget] = []
    for head_id, sub_id in selection:
        head = by_id.get(head_id)
        sub = head.channel(sub_id) if head is not None else None
        if sub is None:
            logger.debug("Skipping unknown selection key %s/%s", head_id, sub_id)
            continue
        targets.append(target_for(sub.core_intervals(), head.bound))
    return targets


def bounds_for_selection(heads: Sequence[HeadChannel], selection: Iterable[SelectionKey]) -> ShiftBounds | None:
    """Joint legal delta range for the selection, None if it cannot move."""
    return selection_bounds(selection_targets(heads, selection))


def _shifted(intervals: list[TimelineInterval], delta: int) -> list[TimelineInterval]:
    moved: list[Interval[TimelineInterval]] = apply_shift([i.to_interval() for i in intervals], delta)
    return [
        iv.payload.model_copy(update={"start_min": iv.start, "end_min": iv.end})
        for iv in moved
    ]


def shift_selection(
    heads: Sequence[HeadChannel], selection: Sequence[SelectionKey], delta: float
) -> list[HeadChannel] | None:
    """
    Move every selected sub-channel by the same delta.

    The delta is clamped into the joint bounds. Returns new head objects, or
    None when the selection has no legal move (nothing is changed then).
    """
    bounds = bounds_for_selection(heads, selection)
    applied = clamp_delta(delta, bounds)
    if applied is None:
        logger.info("Selection of %d sub-channels has no legal shift", len(selection))
        return None

    chosen = set(selection)
    result: list[HeadChannel] = []
    for head in heads:
        subs = [
            sub.model_copy(update={"intervals": _shifted(sub.intervals, applied)})
            if (head.id, sub.id) in chosen else sub
            for sub in head.sub_channels
        ]
        result.append(head.model_copy(update={"sub_channels": subs}))

    logger.debug("Shifted %d sub-channels by %d min", len(chosen), applied)
    return result
