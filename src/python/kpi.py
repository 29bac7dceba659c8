"""
Production KPIs: output, productivity, availability, utilization and OEE.

Inputs are the per-production totals the engine already computes. Heads of
a production run in parallel, so durations are averaged per head while
downtime is the production total. Downtime only counts up to the budget.

Two OEE baselines are reported side by side:
- cycle base: one ideal cycle plus the downtime budget is the planned window;
  performance is taken as ideal, so OEE = availability * quality
- target base: the scheduled time plus the budget is the planned window and
  performance is actual output against the target output (capped at 100%)
"""

import logging
import math
from dataclasses import dataclass
from typing import Iterable

from config_manager import config
from enums import ActualBasis, TimeContext
from head_summary import HeadSummary, summarize_head
from intervals import total_length
from timeline_model import KpiConfig, Production

logger = logging.getLogger(__name__)

PERFORMANCE_RATE_CAP = 1.5


@dataclass(frozen=True)
class KpiInputs:
    """Totals a production's KPIs are computed from.

    Attributes:
        heads_count: Number of heads in the production
        planned_cycle_time_mins: Ideal per-cycle time
        planned_schedule_time_mins: Average scheduled head duration
        actual_raw_time_mins: Average head duration including cutoffs
        actual_net_time_mins: Average head duration after cutoffs
        downtime_mins: Total downtime of all heads (not averaged)
        downtime_budget_mins: Allowed downtime
    """
    heads_count: int
    planned_cycle_time_mins: float
    planned_schedule_time_mins: float
    actual_raw_time_mins: float
    actual_net_time_mins: float
    downtime_mins: float
    downtime_budget_mins: float


@dataclass(frozen=True)
class ProductionKpis:
    actual_time_mins: float
    actual_time_for_kpi_mins: float
    downtime_mins_capped: float
    planned_window_mins: float
    completed_cycles: float
    completed_cycles_for_kpi: float
    actual_output: float
    target_output: float
    target_output_from_plan: float
    output_gap: float
    gap_percentage: float
    per_head_output: float
    per_cycle_output: float
    completed_shifts: float
    productivity_ratio: float
    productivity_per_hour: float
    downtime_pct_base: float
    downtime_pct_target: float
    availability_base: float
    availability_target: float
    utilization_base: float
    utilization_target: float
    time_efficiency_base: float
    time_efficiency_target: float
    performance_rate: float
    performance_target_base: float
    quality_rate: float
    takt_time: float
    actual_cycle_time: float
    takt_adherence: float
    oee_cycle_base: float
    oee_target_base: float


def _finite(value: float | None, default: float = 0.0) -> float:
    if value is None or not math.isfinite(value):
        return default
    return float(value)


def _safe_div(a: float, b: float) -> float:
    if not b or not math.isfinite(b):
        return 0.0
    return a / b


def compute_kpis(kpi: KpiConfig, inputs: KpiInputs) -> ProductionKpis:
    """
    Compute every KPI for one production.

    Args:
        kpi: The production's KPI settings (basis, context, target)
        inputs: Duration and downtime totals

    Returns:
        ProductionKpis; ratios are fractions (1.0 == 100%), never NaN
    """
    cycle_time_per_unit = _finite(kpi.cycle_time_per_unit, inputs.planned_cycle_time_mins)
    units_per_cycle = _finite(kpi.units_per_cycle) or 1.0
    manual_target = _finite(kpi.manual_target_output)
    ideal_output_per_cycle = _finite(kpi.ideal_output_per_cycle, units_per_cycle)
    planned_cycle = inputs.planned_cycle_time_mins

    planned_time = inputs.planned_schedule_time_mins
    if kpi.actual_basis == ActualBasis.RAW:
        actual_time = inputs.actual_raw_time_mins
    else:
        actual_time = inputs.actual_net_time_mins

    budget = _finite(inputs.downtime_budget_mins)
    downtime_capped = max(0.0, min(inputs.downtime_mins, budget if budget > 0 else inputs.downtime_mins))
    plus_downtime = kpi.time_context == TimeContext.PRODUCTION_PLUS_DOWNTIME
    actual_for_kpi = actual_time + downtime_capped if plus_downtime else actual_time

    planned_window = planned_time + budget
    completed_cycles = _safe_div(actual_time, cycle_time_per_unit)
    cycles_for_kpi = _safe_div(actual_for_kpi, cycle_time_per_unit)
    actual_output = cycles_for_kpi * units_per_cycle
    target_from_plan = _safe_div(planned_time, cycle_time_per_unit) * units_per_cycle
    target_output = manual_target if kpi.target_enabled else target_from_plan
    good_output = _finite(kpi.good_output, actual_output)

    shift_minutes = _finite(kpi.shift_minutes)
    completed_shifts = _safe_div(actual_for_kpi, shift_minutes) if shift_minutes > 0 else 0.0

    window_base = cycle_time_per_unit + budget
    availability_base = max(0.0, window_base - downtime_capped) / window_base if window_base > 0 else 0.0
    if planned_window > 0:
        availability_target = max(0.0, planned_window - downtime_capped) / planned_window
    else:
        availability_target = availability_base

    running = max(0.0, actual_time)
    performance_time = actual_for_kpi if plus_downtime else running
    performance_cycles = _safe_div(performance_time, planned_cycle)
    theoretical_output = 0.0
    if performance_time > 0 and ideal_output_per_cycle > 0:
        theoretical_output = _safe_div(performance_time, planned_cycle) * ideal_output_per_cycle
    if theoretical_output > 0:
        performance_rate = min(_safe_div(actual_output, theoretical_output), PERFORMANCE_RATE_CAP)
    else:
        expected = performance_cycles * (ideal_output_per_cycle or 1.0) if performance_cycles > 0 else 1.0
        performance_rate = _safe_div(actual_output, expected)

    quality_rate = _safe_div(good_output, actual_output) if actual_output > 0 else 1.0
    performance_target = min(_safe_div(actual_output, target_output), 1.0) if target_output > 0 else 0.0

    takt_time = _safe_div(planned_time, target_output) if target_output > 0 else 0.0
    actual_cycle_time = _safe_div(actual_for_kpi, actual_output) if actual_output > 0 else 0.0
    takt_adherence = min(_safe_div(takt_time, actual_cycle_time) if takt_time > 0 else 0.0, 1.0)

    output_gap = actual_output - target_output

    return ProductionKpis(
        actual_time_mins=actual_time,
        actual_time_for_kpi_mins=actual_for_kpi,
        downtime_mins_capped=downtime_capped,
        planned_window_mins=planned_window,
        completed_cycles=completed_cycles,
        completed_cycles_for_kpi=cycles_for_kpi,
        actual_output=actual_output,
        target_output=target_output,
        target_output_from_plan=target_from_plan,
        output_gap=output_gap,
        gap_percentage=_safe_div(output_gap, target_output) * 100.0 if target_output > 0 else 0.0,
        per_head_output=actual_output / inputs.heads_count if inputs.heads_count > 0 else 0.0,
        per_cycle_output=actual_output / cycles_for_kpi if cycles_for_kpi > 0 else 0.0,
        completed_shifts=completed_shifts,
        productivity_ratio=_safe_div(actual_output, target_output),
        productivity_per_hour=_safe_div(actual_output, actual_for_kpi / 60.0),
        downtime_pct_base=_safe_div(downtime_capped, window_base),
        downtime_pct_target=_safe_div(downtime_capped, planned_window),
        availability_base=availability_base,
        availability_target=availability_target,
        utilization_base=min(_safe_div(running, cycle_time_per_unit + downtime_capped), 1.0),
        utilization_target=min(_safe_div(running, planned_time + downtime_capped), 1.0),
        time_efficiency_base=_safe_div(cycle_time_per_unit, actual_for_kpi),
        time_efficiency_target=_safe_div(planned_time, actual_for_kpi),
        performance_rate=performance_rate,
        performance_target_base=performance_target,
        quality_rate=quality_rate,
        takt_time=takt_time,
        actual_cycle_time=actual_cycle_time,
        takt_adherence=takt_adherence,
        oee_cycle_base=availability_base * quality_rate,
        oee_target_base=availability_target * performance_target * quality_rate,
    )


def production_inputs(
    production: Production,
    summaries: Iterable[HeadSummary] | None = None,
    downtime_budget_mins: float | None = None,
) -> KpiInputs:
    """
    Collect KPI inputs from a production's heads.

    Raw time is the scheduled head duration and net time is what is left
    after cutoffs; both are averaged over the heads. Downtime is summed.
    """
    if summaries is None:
        summaries = [summarize_head(head) for head in production.heads]
    summaries = list(summaries)
    if downtime_budget_mins is None:
        downtime_budget_mins = config.get_downtime_budget()

    heads_count = max(1, len(production.heads))
    raw = sum(s.head_minutes for s in summaries) / heads_count
    net = sum(s.net_head_minutes for s in summaries) / heads_count
    downtime = sum(total_length(d.to_interval() for d in head.downtime_items) for head in production.heads)

    return KpiInputs(
        heads_count=len(production.heads),
        planned_cycle_time_mins=production.planned_cycle_minutes(),
        planned_schedule_time_mins=raw,
        actual_raw_time_mins=raw,
        actual_net_time_mins=net,
        downtime_mins=downtime,
        downtime_budget_mins=downtime_budget_mins,
    )


def production_kpis(
    production: Production,
    summaries: Iterable[HeadSummary] | None = None,
    downtime_budget_mins: float | None = None,
) -> ProductionKpis:
    """KPIs of a production using its own KPI settings."""
    inputs = production_inputs(production, summaries, downtime_budget_mins)
    logger.debug("KPI inputs for %s: %s", production.id, inputs)
    return compute_kpis(production.kpi, inputs)


def oee_rating(value: float) -> str:
    """Conventional OEE band for a fraction."""
    if not math.isfinite(value):
        return "N/A"
    if value >= 0.85:
        return "World Class"
    if value >= 0.65:
        return "Typical"
    return "Needs Improvement"
