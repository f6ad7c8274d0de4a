from __future__ import annotations

from datetime import date, datetime

from factories import FIXED_NOW, make_fact
from fortune.services.forecast_builders import build_daily_report


def _report(**overrides):
    return build_daily_report(make_fact(**overrides), computed_at=FIXED_NOW)


def test_daily_report_spans_one_day():
    report = _report(date="2024-03-05")

    assert report.timeframe == "daily"
    assert report.start_date == report.end_date == date(2024, 3, 5)
    assert report.metadata.source_unit_count == 1
    assert report.metadata.computed_at == FIXED_NOW
    assert report.aggregation_metadata is None
    assert report.phase_analysis is None


def test_hourly_blocks_start_at_23_and_wrap():
    report = _report(date="2024-03-05")

    blocks = report.hourly_breakdown
    assert len(blocks) == 12
    assert blocks[0].start_time == datetime(2024, 3, 5, 23, 0)
    assert blocks[0].end_time == datetime(2024, 3, 6, 1, 0)
    assert blocks[1].start_time == datetime(2024, 3, 5, 1, 0)
    assert blocks[-1].start_time == datetime(2024, 3, 5, 21, 0)
    assert blocks[-1].end_time == datetime(2024, 3, 5, 23, 0)
    assert all(b.scores == report.scores for b in blocks)


def test_markers_carry_configured_details():
    report = _report(markers=["nobleman", "comet"])

    nobleman, comet = report.markers
    assert nobleman.label == "天乙贵人"
    assert nobleman.affected_categories == ["relationships", "career"]
    assert comet.label == "comet"
    assert comet.affected_categories == []
    assert report.has_marker("comet")


def test_symbols_and_factual_basis_come_from_the_fact():
    report = _report(
        favorable_elements=["water"],
        current_cycle={"tag": "Eating God", "element": "FIRE"},
        period_element="WOOD",
        natal_structure={"day_master": "GENG"},
    )

    assert report.symbols.numbers == [1, 6]
    assert report.symbols.directions == ["North"]
    basis = report.factual_basis
    assert basis.current_cycle.tag == "Eating God"
    assert basis.favorable_elements == ["WATER"]
    assert basis.period_element == "WOOD"
    assert basis.natal_structure == {"day_master": "GENG"}
    assert basis.cycle_transitions is None
