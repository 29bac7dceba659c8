"""
Timeline projection: place sliced segments on a percentage scale.

The projector is a pure function of the scale. Slicing happens first (or is
supplied by the caller through `project_segments`), so the same slice results
feed both duration totals and layout.
"""

import logging
import math
from dataclasses import dataclass
from typing import Generic, Iterable, Sequence

import numpy as np

from config_manager import config
from custom_types import MinuteArray, P, PercentArray
from cutoff_slicer import slice_interval
from intervals import CutoffRange, Interval, extent_of

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TimelineScale:
    """Visible window of a timeline: `offset` maps to 0%, `offset + total_duration` to 100%."""
    offset: float = 0.0
    total_duration: float = 1.0

    @property
    def is_valid(self) -> bool:
        return math.isfinite(self.total_duration) and self.total_duration > 0

    def to_percent(self, minute: float) -> float:
        """Position of an absolute minute as a percentage of the scale."""
        if not self.is_valid:
            return 0.0
        return (minute - self.offset) / self.total_duration * 100.0


@dataclass(frozen=True)
class Segment(Generic[P]):
    """A renderable piece of an interval.

    Attributes:
        left: Start position in percent (may be negative or above 100)
        width: Width in percent (never negative)
        start: Absolute start minute
        end: Absolute end minute
        payload: Source interval's payload
        index: Position of this piece among its interval's pieces
    """
    left: float
    width: float
    start: float
    end: float
    payload: P | None = None
    index: int = 0


@dataclass(frozen=True)
class TimeMarker:
    """An axis tick at `minutes` from the scale offset."""
    minutes: float
    position: float


def _check_scale(scale: TimelineScale, strict: bool | None) -> bool:
    if scale.is_valid:
        return True
    if strict is None:
        strict = config.is_strict()
    if strict:
        raise ValueError(f"Timeline scale duration must be positive, got {scale.total_duration}")
    logger.warning("Invalid timeline scale %s; emitting zero-width segments", scale)
    return False


def _to_segments(
    pieces: Sequence[tuple[Interval, int]], scale: TimelineScale, valid: bool
) -> list[Segment]:
    if not pieces:
        return []

    starts: MinuteArray = np.array([p.start for p, _ in pieces], dtype=np.float64)
    ends: MinuteArray = np.array([p.end for p, _ in pieces], dtype=np.float64)

    if valid:
        lefts: PercentArray = (starts - scale.offset) / scale.total_duration * 100.0
        widths: PercentArray = np.clip((ends - starts) / scale.total_duration * 100.0, 0.0, None)
    else:
        lefts = np.zeros_like(starts)
        widths = np.zeros_like(starts)

    return [
        Segment(
            left=float(left),
            width=float(width),
            start=piece.start,
            end=piece.end,
            payload=piece.payload,
            index=index,
        )
        for (piece, index), left, width in zip(pieces, lefts, widths)
    ]


def project(
    intervals: Iterable[Interval],
    cutoffs: Iterable[CutoffRange],
    scale: TimelineScale,
    strict: bool | None = None,
) -> list[Segment]:
    """
    Slice each interval by the cutoffs and position the pieces on `scale`.

    left = (start - offset) / total_duration * 100 and
    width = (end - start) / total_duration * 100. Zero-length pieces come
    back as zero-width segments so the caller decides whether to hide them.

    Args:
        intervals: Activity intervals
        cutoffs: Cutoff ranges to remove before projecting
        scale: Display window
        strict: Raise on an invalid scale (defaults to timeline.strictContracts)

    Returns:
        Segments in interval order, pieces of one interval sorted by start

    Raises:
        ValueError: Only in strict mode, when the scale duration is not positive
    """
    valid = _check_scale(scale, strict)
    cutoff_list = list(cutoffs)
    pieces: list[tuple[Interval, int]] = []
    for interval in intervals:
        for index, piece in enumerate(slice_interval(interval, cutoff_list)):
            pieces.append((piece, index))
    return _to_segments(pieces, scale, valid)


def project_segments(
    segments: Iterable[Interval], scale: TimelineScale, strict: bool | None = None
) -> list[Segment]:
    """Position already-sliced segments on `scale` without slicing again."""
    valid = _check_scale(scale, strict)
    pieces = [(segment, index) for index, segment in enumerate(segments)]
    return _to_segments(pieces, scale, valid)


def display_scale(
    head_start: float,
    head_end: float,
    channels: Iterable[Iterable[Interval]] = (),
    min_minutes: float | None = None,
) -> TimelineScale:
    """
    Scale that fits a head and every sub-channel interval.

    The offset is the head start. The duration is the head extent, widened
    when a sub-channel runs past the head end so overflowing channels stay
    visible.
    """
    if min_minutes is None:
        min_minutes = config.get_min_scale_minutes()

    duration = max(0.0, head_end - head_start)
    extent = extent_of(interval for intervals in channels for interval in intervals)
    if extent is not None:
        duration = max(duration, extent[1] - head_start)

    return TimelineScale(offset=head_start, total_duration=max(float(min_minutes), duration))


def _marker_step(total_duration: float) -> float:
    for rule in config.get_marker_steps():
        if total_duration > rule["above"]:
            return float(rule["step"])
    return 10.0


def time_markers(total_duration: float) -> list[TimeMarker]:
    """
    Axis ticks for a display duration.

    Steps come from timeline.markerSteps (30 min above 2h, 15 min above 1h,
    otherwise 10). A closing tick at 100% is added only when the tail after
    the last regular tick is longer than timeline.finalMarkerGap of a step.
    """
    if not math.isfinite(total_duration) or total_duration <= 0:
        return []

    step = _marker_step(total_duration)
    markers = [
        TimeMarker(minutes=m, position=m / total_duration * 100.0)
        for m in np.arange(0.0, total_duration + 1e-9, step).tolist()
    ]

    last_step = math.floor(total_duration / step) * step
    if total_duration - last_step > step * config.get_final_marker_gap():
        markers.append(TimeMarker(minutes=total_duration, position=100.0))
    return markers
