"""
Type definitions for the timeline engine.

This module defines common types, aliases, and TypedDict structures
used throughout the codebase.
"""

from typing import TypedDict, TypeVar

import numpy as np
import numpy.typing as npt

# NumPy array type aliases
MinuteArray = npt.NDArray[np.float64]    # Interval start/end minutes
PercentArray = npt.NDArray[np.float64]   # Projected left/width percentages

# Payload carried through the algebra untouched
P = TypeVar("P")


# Configuration TypedDict definitions
class MarkerStepConfig(TypedDict):
    """Axis marker spacing rule."""
    above: float
    step: float


class DowntimeCategoryInfo(TypedDict, total=False):
    """A downtime category as stored in configuration."""
    id: str
    name: str
    color: str


class TimelineConfig(TypedDict, total=False):
    """Timeline configuration section."""
    strictContracts: bool
    minScaleMinutes: float
    markerSteps: list[MarkerStepConfig]
    finalMarkerGap: float


class DowntimeConfig(TypedDict, total=False):
    """Downtime configuration section."""
    budgetMins: float
    categories: list[DowntimeCategoryInfo]


class SubChannelRow(TypedDict):
    """One sub-channel line of a head summary."""
    channel_id: str
    name: str
    count: int
    raw: float
    net: float
    actual: float
    raw_ranges: list[tuple[float, float]]
    actual_ranges: list[tuple[float, float]]
    status: str
    exceeds_bound: bool


# Type aliases for common function signatures
MinuteRange = tuple[float, float]   # (start_min, end_min)
ColorHex = str                      # Color in hex format like "#RRGGBB"

