"""
Enumerations for the timeline engine using Python 3.11+ StrEnum.

This module defines string-based enumerations for the constants shared by
the editor variants, the summary builder and the compact JSON loader.
"""

from enum import StrEnum


class InputMode(StrEnum):
    """How a head's intervals were entered.

    Attributes:
        DURATION: Minutes counted from the head's own start (0-based)
        OCLOCK: Wall-clock "HH:MM" times converted to minutes from midnight
        PRODUCTION: Multi-head production run with downtime items
    """
    DURATION = "duration"
    OCLOCK = "oclock"
    PRODUCTION = "production"


class ChannelStatus(StrEnum):
    """Summary status of a sub-channel within its head.

    Attributes:
        FULL: No cutoff time was deducted
        CUT: Some time was removed by cutoffs
        OVERFLOW: Intervals reach outside the head range
    """
    FULL = "Full"
    CUT = "Cut"
    OVERFLOW = "Overflow"


class TimeUnit(StrEnum):
    """Display unit for durations.

    Attributes:
        MINUTES: Whole minutes ("42m")
        HOURS: Decimal hours ("0.70h")
        SECONDS: Whole seconds ("2520s")
    """
    MINUTES = "minutes"
    HOURS = "hours"
    SECONDS = "seconds"


class TargetBasis(StrEnum):
    """What period a production target output is expressed per."""
    SHIFT = "shift"
    CYCLE = "cycle"
    HOUR = "hour"


class ActualBasis(StrEnum):
    """Which actual duration feeds KPI math.

    Attributes:
        NET: Head durations after cutoff time is removed
        RAW: Scheduled head durations including cutoffs
    """
    NET = "net"
    RAW = "raw"


class TimeContext(StrEnum):
    """Whether KPI time counts production only or production plus (capped) downtime."""
    PRODUCTION = "production"
    PRODUCTION_PLUS_DOWNTIME = "production_plus_downtime"
