"""
Downtime categorization for production heads.

Downtime items are categorized spans inside a head. Their minutes are
totalled per category and set against the head's net duration, the
downtime budget and the cycle time.
"""

import logging
from dataclasses import dataclass, field

from config_manager import config
from custom_types import ColorHex, DowntimeCategoryInfo
from intervals import total_length
from timeline_model import HeadChannel
from timeline_projector import Segment, TimelineScale, project

logger = logging.getLogger(__name__)

UNKNOWN_CATEGORY_COLOR: ColorHex = "#94a3b8"


@dataclass(frozen=True)
class CategoryTotal:
    """Downtime minutes of one category.

    Attributes:
        left: Start of this category's slice of the stacked budget bar (percent)
        width: Width of that slice, capped so the bar never passes 100%
    """
    category_id: str
    name: str
    color: ColorHex
    minutes: float
    pct_of_budget: float
    pct_of_total: float
    left: float = 0.0
    width: float = 0.0


@dataclass(frozen=True)
class DowntimeSummary:
    total_minutes: float
    budget_minutes: float
    pct_of_head: float
    pct_of_budget: float
    pct_of_cycle: float
    categories: list[CategoryTotal] = field(default_factory=list)
    segments: list[Segment] = field(default_factory=list)

    @property
    def over_budget(self) -> bool:
        return self.total_minutes > self.budget_minutes


def _pct(part: float, whole: float | None) -> float:
    if not whole or whole <= 0:
        return 0.0
    return part / whole * 100.0


def summarize_downtime(
    head: HeadChannel,
    net_head_minutes: float,
    budget_minutes: float | None = None,
    categories: list[DowntimeCategoryInfo] | None = None,
    cycle_time: float | None = None,
) -> DowntimeSummary:
    """
    Total a head's downtime per category.

    Args:
        head: Production head with downtime items
        net_head_minutes: Head duration after cutoffs; also the scale of the downtime timeline
        budget_minutes: Downtime budget (defaults to downtime.budgetMins)
        categories: Known categories in display order (defaults to configuration)
        cycle_time: Cycle time for the percent-of-cycle figure (defaults to the head's)

    Returns:
        DowntimeSummary; categories with no minutes are left out
    """
    if budget_minutes is None:
        budget_minutes = config.get_downtime_budget()
    if categories is None:
        categories = config.get_downtime_categories()
    if cycle_time is None:
        cycle_time = head.cycle_time

    items = [d.to_interval() for d in head.downtime_items]
    total = total_length(items)

    known = {c["id"]: c for c in categories}
    order = [c["id"] for c in categories]
    for item in head.downtime_items:
        if item.category_id not in known:
            logger.warning("Unknown downtime category '%s' in head %s", item.category_id, head.id)
            known[item.category_id] = {"id": item.category_id, "name": item.category_id, "color": UNKNOWN_CATEGORY_COLOR}
            order.append(item.category_id)

    totals: list[CategoryTotal] = []
    cumulative = 0.0
    for category_id in order:
        minutes = total_length(i for i in items if i.payload.category_id == category_id)
        if minutes <= 0:
            continue
        info = known[category_id]
        pct_budget = _pct(minutes, budget_minutes)
        totals.append(CategoryTotal(
            category_id=category_id,
            name=info.get("name", category_id),
            color=info.get("color", UNKNOWN_CATEGORY_COLOR),
            minutes=minutes,
            pct_of_budget=pct_budget,
            pct_of_total=_pct(minutes, total),
            left=cumulative,
            width=max(0.0, min(pct_budget, 100.0 - cumulative)),
        ))
        cumulative += pct_budget

    segments: list[Segment] = []
    if net_head_minutes > 0 and items:
        scale = TimelineScale(offset=head.start_min, total_duration=net_head_minutes)
        segments = project(items, (), scale)

    return DowntimeSummary(
        total_minutes=total,
        budget_minutes=budget_minutes,
        pct_of_head=_pct(total, net_head_minutes),
        pct_of_budget=_pct(total, budget_minutes),
        pct_of_cycle=_pct(total, cycle_time),
        categories=totals,
        segments=segments,
    )
