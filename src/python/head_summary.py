"""
Per-head report data.

Builds the numbers behind the summary tables of every editor variant from
the shared core: Raw/Net/Actual per sub-channel, the status column, cutoff
totals, merged actual segments and the overlap breakdown.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable

from custom_types import MinuteRange, SubChannelRow
from duration_aggregator import DurationTriple, aggregate_channels
from enums import ChannelStatus, InputMode
from intervals import clamp_intervals, measure
from overlap_calculator import OverlapReport, total_overlap
from timeline_model import HeadChannel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HeadSummary:
    """Report-ready totals for one head."""
    head_id: str
    name: str
    mode: InputMode
    range: MinuteRange
    head_minutes: float
    cutoff_minutes: float
    net_head_minutes: float
    rows: list[SubChannelRow] = field(default_factory=list)
    totals: DurationTriple = field(default_factory=DurationTriple)
    merged_actual: list[MinuteRange] = field(default_factory=list)
    overlap: OverlapReport = field(default_factory=OverlapReport)
    status: str | None = None

    @property
    def has_overflow(self) -> bool:
        return any(row["exceeds_bound"] for row in self.rows)


def _status(manual: str | None, exceeds: bool, durations: DurationTriple) -> str:
    if manual:
        return manual
    if exceeds:
        return ChannelStatus.OVERFLOW
    if durations.net < durations.raw:
        return ChannelStatus.CUT
    return ChannelStatus.FULL


def summarize_head(head: HeadChannel) -> HeadSummary:
    """Compute the summary of one head, clamped to the head's own range."""
    lower, upper = head.bound
    cutoffs = head.cutoff_ranges()
    cutoff_minutes = measure(clamp_intervals(cutoffs, lower, upper))

    joint = aggregate_channels(head.intervals_by_channel(), cutoffs, bound=head.bound)

    rows: list[SubChannelRow] = []
    for sub, result in zip(head.active_channels(), joint.channels):
        rows.append({
            "channel_id": sub.id,
            "name": sub.name,
            "count": len(sub.intervals),
            "raw": result.durations.raw,
            "net": result.durations.net,
            "actual": result.durations.actual,
            "raw_ranges": [(i.start_min, i.end_min) for i in sub.intervals],
            "actual_ranges": [(s.start, s.end) for s in result.segments],
            "status": str(_status(sub.status, result.exceeds_bound, result.durations)),
            "exceeds_bound": result.exceeds_bound,
        })

    overlap = total_overlap({r.channel_id: r.segments for r in joint.channels})
    if overlap.total > 0:
        logger.debug("Head %s: %.2f min of overlap between sub-channels", head.id, overlap.total)

    return HeadSummary(
        head_id=head.id,
        name=head.name,
        mode=head.mode,
        range=head.bound,
        head_minutes=head.total_minutes,
        cutoff_minutes=cutoff_minutes,
        net_head_minutes=max(0.0, head.total_minutes - cutoff_minutes),
        rows=rows,
        totals=joint.durations,
        merged_actual=[(s.start, s.end) for s in joint.merged],
        overlap=overlap,
        status=head.status,
    )


def summarize_heads(heads: Iterable[HeadChannel]) -> list[HeadSummary]:
    return [summarize_head(head) for head in heads]


def net_cycle_minutes(summaries: Iterable[HeadSummary]) -> float:
    """Actual cycle time: the heads' net durations (after cutoff) added up."""
    return sum(s.net_head_minutes for s in summaries)
