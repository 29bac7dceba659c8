"""
Tests for downtime category totals.
"""
import pytest

from downtime import UNKNOWN_CATEGORY_COLOR, summarize_downtime
from head_summary import summarize_head
from timeline_model import parse_timeline_document, parse_timeline_json

CATEGORIES = [
    {"id": "mech", "name": "Mechanical", "color": "#111111"},
    {"id": "idle", "name": "Idle", "color": "#333333"},
    {"id": "mat", "name": "Material", "color": "#222222"},
]


@pytest.fixture
def head(production_payload):
    return parse_timeline_json(production_payload)[0]


@pytest.fixture
def net_minutes(head):
    return summarize_head(head).net_head_minutes


def test_net_head_minutes(net_minutes):
    assert net_minutes == 110


def test_totals_and_percentages(head, net_minutes):
    summary = summarize_downtime(head, net_minutes, budget_minutes=60, categories=CATEGORIES)
    assert summary.total_minutes == 30
    assert summary.pct_of_budget == pytest.approx(50.0)
    assert summary.pct_of_head == pytest.approx(30 / 110 * 100)
    assert summary.pct_of_cycle == pytest.approx(12.5)
    assert not summary.over_budget


def test_categories_in_configured_order_without_empty_ones(head, net_minutes):
    summary = summarize_downtime(head, net_minutes, budget_minutes=60, categories=CATEGORIES)
    assert [c.category_id for c in summary.categories] == ["mech", "mat"]
    mech, mat = summary.categories
    assert mech.minutes == 20
    assert mech.color == "#111111"
    assert mech.pct_of_total == pytest.approx(200 / 3)
    assert (mech.left, mech.width) == pytest.approx((0.0, 100 / 3))
    assert (mat.left, mat.width) == pytest.approx((100 / 3, 50 / 3))


def test_stacked_bar_is_capped_at_full_width(head, net_minutes):
    summary = summarize_downtime(head, net_minutes, budget_minutes=25, categories=CATEGORIES)
    assert summary.over_budget
    mech, mat = summary.categories
    assert mech.width == pytest.approx(80.0)
    assert mat.width == pytest.approx(20.0)


def test_unknown_categories_are_reported(head, net_minutes, caplog):
    summary = summarize_downtime(head, net_minutes, budget_minutes=60, categories=[])
    assert [c.category_id for c in summary.categories] == ["mech", "mat"]
    assert all(c.color == UNKNOWN_CATEGORY_COLOR for c in summary.categories)
    assert "Unknown downtime category 'mech'" in caplog.text


def test_segments_on_net_head_scale(head, net_minutes):
    summary = summarize_downtime(head, net_minutes, budget_minutes=60, categories=CATEGORIES)
    assert len(summary.segments) == 3
    first = summary.segments[0]
    assert first.left == pytest.approx(10 / 110 * 100)
    assert first.width == pytest.approx(15 / 110 * 100)
    assert first.payload.category_id == "mech"


def test_head_without_downtime(duration_payload):
    head = parse_timeline_json(duration_payload)[0]
    summary = summarize_downtime(head, 80, budget_minutes=60, categories=CATEGORIES)
    assert summary.total_minutes == 0
    assert summary.categories == []
    assert summary.segments == []
    assert summary.pct_of_cycle == 0.0


def test_defaults_come_from_config(head, net_minutes):
    summary = summarize_downtime(head, net_minutes)
    assert summary.budget_minutes == 60


def test_saved_budget_and_categories_override_config(production_payload, head, net_minutes):
    document = parse_timeline_document(production_payload)
    summary = summarize_downtime(
        head,
        net_minutes,
        budget_minutes=document.downtime_budget(),
        categories=document.downtime_categories(),
    )
    assert summary.budget_minutes == 45
    assert summary.pct_of_budget == pytest.approx(30 / 45 * 100)
    assert [(c.category_id, c.color) for c in summary.categories] == [("mech", "#111111"), ("mat", "#222222")]


def test_clock_mode_downtime(production_clock_payload):
    document = parse_timeline_document(production_clock_payload)
    head = document.heads[0]
    summary = summarize_downtime(head, summarize_head(head).net_head_minutes,
                                 budget_minutes=document.downtime_budget())
    assert summary.total_minutes == 10
    assert summary.budget_minutes == 30
    assert [c.category_id for c in summary.categories] == ["produc_isue"]
    # Clock heads are projected from their own start
    assert summary.segments[0].left == pytest.approx(10 / 90 * 100)
