"""
Clock and duration conversions used at the edges of the engine.

The engine itself only sees minute numbers; these helpers turn "HH:MM"
strings from the clock-based editor into minutes and back.
"""

import math

from enums import TimeUnit


def clock_to_minutes(value: str | float | int | None) -> float:
    """Convert "HH:MM" (or an already-numeric value) to minutes from midnight.

    Unparseable input yields 0, matching how the editors treat half-typed times.
    """
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else 0.0
    if not value or ':' not in value:
        return 0.0

    hours_raw, minutes_raw = value.split(':', 1)
    try:
        hours = float(hours_raw)
        minutes = float(minutes_raw)
    except ValueError:
        return 0.0
    if not (math.isfinite(hours) and math.isfinite(minutes)):
        return 0.0
    return hours * 60 + minutes


def minutes_to_clock(mins: float) -> str:
    """Convert minutes from midnight to "HH:MM", wrapping at 24h."""
    total = int(math.floor(mins))
    hours = (total // 60) % 24
    minutes = total % 60
    return f"{hours:02d}:{minutes:02d}"


def format_duration(mins: float, unit: TimeUnit = TimeUnit.MINUTES) -> str:
    """Format a duration for display in the given unit."""
    if unit == TimeUnit.SECONDS:
        return f"{round(mins * 60)}s"
    if unit == TimeUnit.HOURS:
        return f"{mins / 60:.2f}h"
    return f"{round(mins)}m"


def format_duration_mixed(mins: float) -> str:
    """Format as "1h 5m", "2h" or "45m"."""
    total = round(mins)
    hours, minutes = divmod(total, 60)
    if hours > 0 and minutes > 0:
        return f"{hours}h {minutes}m"
    if hours > 0:
        return f"{hours}h"
    return f"{minutes}m"
