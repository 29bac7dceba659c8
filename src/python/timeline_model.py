"""Head / sub-channel data model and the compact timeline JSON loader.

The import editors copy a bare list of heads to the clipboard:

    [{"n": "Head 1", "t": 60,
      "s": [{"n": "Sub 1", "c": 0, "i": [[0, 5], [10, 20]]},
            {"n": "Break", "cut": 1, "i": [[30, 40]]}]}]

Clock-based heads carry "st"/"et" ("HH:MM") and their intervals may be
clock strings too.

The production editor saves a versioned document instead:

    {"v": 2, "mode": "time" | "oclock",
     "sys": {"mhs": 5, "dbm": 60, "cats": [[id, name, color], ...], "ctx": [...]},
     "productions": [{"n": ..., "ct": 210, "uict": 0, "kpi": [...], "c": ...,
                      "h": [{"n", "sm", "em", "t", "st", "et", "c", "st2",
                             "sdg", "ict", "dt", "s"}]}]}

Its heads always carry "st"/"et" for display; only "mode" decides whether
minutes or clock strings are authoritative.
"""

import json
import logging
import math
import re
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from custom_types import DowntimeCategoryInfo
from enums import ActualBasis, InputMode, TargetBasis, TimeContext
from intervals import CutoffRange, Interval
from time_format import clock_to_minutes

logger = logging.getLogger(__name__)

DEFAULT_COLOR = "#10b981"
DEFAULT_CYCLE_TIME = 210.0
DEFAULT_CATEGORY_ID = "produc_isue"
CLOCK_MODE = "oclock"


class TimelineParseError(ValueError):
    """Raised when a compact timeline payload cannot be read."""


# --- Domain models ---

class TimelineInterval(BaseModel):
    """One activity (or cutoff) span. Used as the opaque payload of core intervals."""
    model_config = ConfigDict(frozen=True)

    id: str
    start_min: float
    end_min: float
    color: Optional[str] = None

    def to_interval(self) -> Interval["TimelineInterval"]:
        return Interval(self.start_min, self.end_min, self)

    def to_cutoff(self) -> CutoffRange:
        return CutoffRange(self.start_min, self.end_min)


class SubChannel(BaseModel):
    """A named activity stream nested under a head."""
    id: str
    name: str
    is_cutoff: bool = False
    color: str = DEFAULT_COLOR
    status: Optional[str] = Field(None, description="Manual status overriding the computed one")
    intervals: list[TimelineInterval] = Field(default_factory=list)

    def core_intervals(self) -> list[Interval[TimelineInterval]]:
        return [i.to_interval() for i in self.intervals]


class DowntimeItem(BaseModel):
    """A categorized downtime span inside a production head."""
    model_config = ConfigDict(frozen=True)

    id: str
    category_id: str
    start_min: float
    end_min: float

    def to_interval(self) -> Interval["DowntimeItem"]:
        return Interval(self.start_min, self.end_min, self)


class HeadChannel(BaseModel):
    """The outer time range bounding its sub-channels.

    Cutoff sub-channels subtract from every non-cutoff sibling in the same
    head and never from other heads.
    """
    id: str
    name: str
    mode: InputMode = InputMode.DURATION
    start_min: float = 0.0
    end_min: float = 60.0
    color: str = DEFAULT_COLOR
    cycle_time: Optional[float] = None
    status: Optional[str] = Field(None, description="Manual head status")
    sub_channels: list[SubChannel] = Field(default_factory=list)
    downtime_items: list[DowntimeItem] = Field(default_factory=list)

    @property
    def total_minutes(self) -> float:
        return max(0.0, self.end_min - self.start_min)

    @property
    def bound(self) -> tuple[float, float]:
        return (self.start_min, self.end_min)

    def cutoff_channels(self) -> list[SubChannel]:
        return [s for s in self.sub_channels if s.is_cutoff]

    def active_channels(self) -> list[SubChannel]:
        return [s for s in self.sub_channels if not s.is_cutoff]

    def cutoff_ranges(self) -> list[CutoffRange]:
        """All cutoff intervals of this head, flattened."""
        return [i.to_cutoff() for s in self.cutoff_channels() for i in s.intervals]

    def intervals_by_channel(self) -> dict[str, list[Interval[TimelineInterval]]]:
        """Active channel id -> core intervals, in display order."""
        return {s.id: s.core_intervals() for s in self.active_channels()}

    def channel(self, channel_id: str) -> SubChannel | None:
        for sub in self.sub_channels:
            if sub.id == channel_id:
                return sub
        return None


class KpiConfig(BaseModel):
    """Per-production KPI settings.

    Saved as the positional "kpi" tuple: [cycleTimePerUnit, unitsPerCycle,
    targetBasis, shiftMinutes, actualBasis, timeContext, targetEnabled,
    manualTargetOutput].
    """
    cycle_time_per_unit: float = DEFAULT_CYCLE_TIME
    units_per_cycle: float = 1.0
    target_basis: TargetBasis = TargetBasis.CYCLE
    shift_minutes: Optional[float] = None
    actual_basis: ActualBasis = ActualBasis.NET
    time_context: TimeContext = TimeContext.PRODUCTION
    target_enabled: bool = False
    manual_target_output: float = 0.0
    ideal_output_per_cycle: Optional[float] = Field(None, description="Defaults to units_per_cycle")
    good_output: Optional[float] = Field(None, description="Defaults to the actual output")


class Production(BaseModel):
    """A main production: heads run in parallel and share a cycle time."""
    id: str
    name: str = "Main Production"
    cycle_time: float = DEFAULT_CYCLE_TIME
    use_individual_cycle_times: bool = False
    color: str = DEFAULT_COLOR
    kpi: KpiConfig = Field(default_factory=KpiConfig)
    heads: list[HeadChannel] = Field(default_factory=list)

    def planned_cycle_minutes(self) -> float:
        """Ideal per-cycle time: the production's, or the head average when heads carry their own."""
        if not self.use_individual_cycle_times or not self.heads:
            return self.cycle_time
        return sum(h.cycle_time or self.cycle_time for h in self.heads) / len(self.heads)


class SystemSettings(BaseModel):
    """Editor-wide settings saved alongside the productions."""
    max_head_slots: int = 5
    downtime_budget_mins: float = 60.0
    downtime_categories: list[dict[str, str]] = Field(default_factory=list)


class TimelineDocument(BaseModel):
    """Everything a payload contained.

    Bare head lists load as a single production with no system settings.
    """
    mode: str = "time"
    settings: Optional[SystemSettings] = None
    productions: list[Production] = Field(default_factory=list)

    @property
    def heads(self) -> list[HeadChannel]:
        return [head for production in self.productions for head in production.heads]

    @property
    def is_clock(self) -> bool:
        return self.mode == CLOCK_MODE

    def downtime_budget(self) -> float | None:
        """Saved downtime budget, or None to fall back to configuration."""
        return self.settings.downtime_budget_mins if self.settings is not None else None

    def downtime_categories(self) -> list[DowntimeCategoryInfo] | None:
        """Saved downtime categories, or None to fall back to configuration."""
        if self.settings is None or not self.settings.downtime_categories:
            return None
        return self.settings.downtime_categories


# --- Compact payload models ---

class CompactSub(BaseModel):
    n: str = "Sub"
    c: int | str | None = None
    cut: int = 0
    st: Optional[str] = None
    i: list[list[Any]] = Field(default_factory=list)


class CompactHead(BaseModel):
    n: str = "Head"
    t: Optional[float] = None
    st: Optional[str] = None
    et: Optional[str] = None
    sm: Optional[float] = None
    em: Optional[float] = None
    c: Optional[str] = None
    st2: Optional[str] = None
    ict: Optional[float] = None
    dt: list[list[Any]] = Field(default_factory=list)
    s: list[CompactSub] = Field(default_factory=list)


class CompactProduction(BaseModel):
    n: Optional[str] = None
    ct: Optional[float] = None
    uict: int = 0
    kpi: Optional[list[Any]] = None
    c: Optional[str] = None
    h: list[CompactHead] = Field(default_factory=list)


class CompactSystem(BaseModel):
    mhs: Optional[int] = None
    dbm: Optional[float] = None
    cats: list[list[Any]] = Field(default_factory=list)


class CompactDocument(BaseModel):
    v: Optional[int] = None
    mode: Optional[str] = None
    sys: Optional[CompactSystem] = None
    productions: list[CompactProduction] = Field(default_factory=list)


_FENCE_RE = re.compile(r"^```(?:json)?|```$", re.IGNORECASE)


def extract_json_payload(text: str) -> str:
    """Strip code fences and surrounding chatter, keeping the outermost array or object."""
    stripped = _FENCE_RE.sub("", text.strip()).strip()
    if stripped.startswith('"'):
        # JSON serialized as a JSON string; decoded twice by the caller
        return stripped
    candidates = []
    for opener, closer in (("[", "]"), ("{", "}")):
        first, last = stripped.find(opener), stripped.rfind(closer)
        if first != -1 and last > first:
            candidates.append((first, last))
    if not candidates:
        return stripped
    # Whichever container opens first is the outermost one
    first, last = min(candidates)
    return stripped[first:last + 1]


def _point(value: Any, default: float) -> float:
    if value is None:
        return default
    if isinstance(value, str):
        return clock_to_minutes(value)
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _number_or(value: Any, default: float) -> float:
    """Numeric value, or `default` when missing, zero or not a number."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number) or number == 0:
        return default
    return number


def _choice(enum_cls, value: Any, default):
    try:
        return enum_cls(value) if value else default
    except ValueError:
        logger.warning("Unknown %s '%s'; using %s", enum_cls.__name__, value, default)
        return default


def _kpi_from_tuple(kpi: list[Any] | None, cycle_time: float) -> KpiConfig:
    values = list(kpi or []) + [None] * 8
    return KpiConfig(
        cycle_time_per_unit=_number_or(values[0], cycle_time),
        units_per_cycle=_number_or(values[1], 1.0),
        target_basis=_choice(TargetBasis, values[2], TargetBasis.CYCLE),
        shift_minutes=_number_or(values[3], 0.0) or None,
        actual_basis=_choice(ActualBasis, values[4], ActualBasis.NET),
        time_context=_choice(TimeContext, values[5], TimeContext.PRODUCTION),
        target_enabled=bool(values[6]),
        manual_target_output=_number_or(values[7], 0.0),
    )


def _build_head(
    index: int,
    raw: CompactHead,
    *,
    clock: bool | None = None,
    mode: InputMode | None = None,
    fallback_color: str = DEFAULT_COLOR,
    fallback_cycle: float | None = None,
    default_category: str = DEFAULT_CATEGORY_ID,
) -> HeadChannel:
    """
    Turn one compact head into a HeadChannel.

    `clock` is the document's mode when the payload states one. Bare head
    lists have none; such a head is clock-based when it has "st"/"et"
    strings and no minute range.
    """
    head_id = f"h{index}"
    has_minutes = raw.sm is not None or raw.em is not None
    if clock is None:
        clock = isinstance(raw.st, str) and isinstance(raw.et, str) and not has_minutes
    head_color = raw.c or fallback_color

    if clock:
        start_min = clock_to_minutes(raw.st or "08:00")
        end_min = clock_to_minutes(raw.et or "09:00")
    else:
        start_min = raw.sm if raw.sm is not None else 0.0
        if raw.em is not None:
            end_min = raw.em
        else:
            end_min = start_min + (raw.t if raw.t is not None else 60.0)

    if mode is None:
        if clock:
            mode = InputMode.OCLOCK
        else:
            mode = InputMode.PRODUCTION if raw.dt or has_minutes else InputMode.DURATION

    subs: list[SubChannel] = []
    for sub_index, raw_sub in enumerate(raw.s, start=1):
        sub_id = f"{head_id}-s{sub_index}"
        # "c" is a cutoff flag in the import editors and a color in production saves
        is_cutoff = raw_sub.cut == 1 or (isinstance(raw_sub.c, int) and raw_sub.c == 1)
        sub_color = raw_sub.c if isinstance(raw_sub.c, str) and raw_sub.c else head_color
        intervals = [
            TimelineInterval(
                id=f"{sub_id}-i{i}",
                start_min=_point(pair[0] if len(pair) > 0 else None, 0.0),
                end_min=_point(pair[1] if len(pair) > 1 else None, 0.0),
                color=pair[2] if len(pair) > 2 and isinstance(pair[2], str) and pair[2] else sub_color,
            )
            for i, pair in enumerate(raw_sub.i, start=1)
        ]
        subs.append(SubChannel(
            id=sub_id,
            name=raw_sub.n,
            is_cutoff=is_cutoff,
            color=sub_color,
            status=raw_sub.st or None,
            intervals=intervals,
        ))

    downtime = [
        DowntimeItem(
            id=f"{head_id}-d{i}",
            category_id=str(item[0]) if item and item[0] else default_category,
            start_min=_point(item[1] if len(item) > 1 else None, 0.0),
            end_min=_point(item[2] if len(item) > 2 else None, 10.0),
        )
        for i, item in enumerate(raw.dt, start=1)
    ]

    return HeadChannel(
        id=head_id,
        name=raw.n,
        mode=mode,
        start_min=start_min,
        end_min=end_min,
        color=head_color,
        cycle_time=raw.ict or fallback_cycle,
        status=raw.st2 or None,
        sub_channels=subs,
        downtime_items=downtime,
    )


def _settings(raw: CompactSystem) -> SystemSettings:
    categories = [
        {
            "id": str(c[0]),
            "name": str(c[1]) if len(c) > 1 and c[1] else str(c[0]),
            "color": str(c[2]) if len(c) > 2 and c[2] else DEFAULT_COLOR,
        }
        for c in raw.cats if c and c[0]
    ]
    return SystemSettings(
        max_head_slots=raw.mhs or 5,
        downtime_budget_mins=raw.dbm or 60.0,
        downtime_categories=categories,
    )


def _build_document(raw: CompactDocument) -> TimelineDocument:
    mode = raw.mode or "time"
    clock = mode == CLOCK_MODE
    settings = _settings(raw.sys) if raw.sys is not None else None
    default_category = DEFAULT_CATEGORY_ID
    if settings is not None and settings.downtime_categories:
        default_category = settings.downtime_categories[0]["id"]

    productions: list[Production] = []
    head_index = 0
    for p_index, raw_prod in enumerate(raw.productions, start=1):
        cycle_time = raw_prod.ct or DEFAULT_CYCLE_TIME
        color = raw_prod.c or DEFAULT_COLOR
        heads = []
        for raw_head in raw_prod.h:
            head_index += 1
            heads.append(_build_head(
                head_index,
                raw_head,
                clock=clock,
                mode=InputMode.PRODUCTION,
                fallback_color=color,
                fallback_cycle=cycle_time,
                default_category=default_category,
            ))
        productions.append(Production(
            id=f"p{p_index}",
            name=raw_prod.n or "Main Production",
            cycle_time=cycle_time,
            use_individual_cycle_times=raw_prod.uict == 1,
            color=color,
            kpi=_kpi_from_tuple(raw_prod.kpi, cycle_time),
            heads=heads,
        ))

    return TimelineDocument(mode=mode, settings=settings, productions=productions)


def parse_timeline_document(text: str) -> TimelineDocument:
    """
    Parse any compact timeline payload.

    Accepts the production editor's saved document, a bare list of heads
    from the import editors, fenced ```json blocks and JSON that was itself
    serialized as a string.

    Raises:
        TimelineParseError: If the payload is not valid JSON or has neither shape
    """
    try:
        data = json.loads(extract_json_payload(text))
        if isinstance(data, str):
            data = json.loads(data)
    except json.JSONDecodeError as e:
        raise TimelineParseError(f"Invalid timeline JSON: {e}") from e

    try:
        if isinstance(data, dict) and "productions" in data:
            document = _build_document(CompactDocument.model_validate(data))
        elif isinstance(data, list):
            raw_heads = [CompactHead.model_validate(h) for h in data]
            heads = [_build_head(index, raw) for index, raw in enumerate(raw_heads, start=1)]
            clock = bool(heads) and all(h.mode == InputMode.OCLOCK for h in heads)
            document = TimelineDocument(
                mode=CLOCK_MODE if clock else "time",
                productions=[Production(id="p1", heads=heads)],
            )
        else:
            raise TimelineParseError("Timeline payload must be a list of heads or a saved production document")
    except ValidationError as e:
        raise TimelineParseError(f"Invalid timeline payload: {e}") from e

    logger.info("Parsed %d productions with %d head channels", len(document.productions), len(document.heads))
    return document


def parse_timeline_json(text: str) -> list[HeadChannel]:
    """Parse a compact payload and return its head channels, in order."""
    return parse_timeline_document(text).heads
