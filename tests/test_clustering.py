from __future__ import annotations

from datetime import date

from factories import daily_series, make_report
from fortune.services.clustering import (
    cluster_markers,
    detect_significant_periods,
    dominant_category,
    find_consecutive_runs,
    phase_for_index,
)


def test_single_run_in_the_middle():
    reports = daily_series("2024-05-01", 10)
    flagged = {reports[i].start_date for i in range(2, 7)}

    runs = find_consecutive_runs(reports, lambda r: r.start_date in flagged)

    assert len(runs) == 1
    run = runs[0]
    assert run.member_count == 5
    assert run.start == date(2024, 5, 3)
    assert run.end == date(2024, 5, 7)
    assert run.duration_days == 5


def test_runs_touching_both_ends_and_single_units():
    reports = daily_series("2024-05-01", 6)
    flags = [True, False, True, False, False, True]

    runs = find_consecutive_runs(reports, lambda r: flags[reports.index(r)])

    assert [(r.start_index, r.end_index) for r in runs] == [(0, 0), (2, 2), (5, 5)]
    assert all(r.member_count == 1 for r in runs)


def test_phase_for_index_thirds():
    assert [phase_for_index(i, 9) for i in (0, 2, 3, 5, 6, 8)] == ["Early", "Early", "Mid", "Mid", "Late", "Late"]


def test_marker_windows_keep_only_week_long_runs():
    reports = [
        make_report(f"2024-06-{day:02d}", markers=["nobleman"] if 2 <= day <= 9 else [])
        for day in range(1, 21)
    ]
    reports[14] = make_report("2024-06-15", markers=["sky_horse"])

    markers = cluster_markers(reports)

    assert [m.name for m in markers] == ["nobleman"]
    nobleman = markers[0]
    assert len(nobleman.active_periods) == 1
    window = nobleman.active_periods[0]
    assert window.start_date == date(2024, 6, 2)
    assert window.end_date == date(2024, 6, 9)
    assert window.duration_days == 8
    assert window.phase == "Early"
    assert nobleman.total_active_days == 8
    assert nobleman.active_percentage == 40
    assert nobleman.label == "天乙贵人"
    assert nobleman.affected_categories == ["relationships", "career"]


def test_marker_window_phase_follows_first_unit():
    reports = [
        make_report(f"2024-06-{day:02d}", markers=["intelligence"] if day >= 16 else [])
        for day in range(1, 23)
    ]

    markers = cluster_markers(reports)

    assert markers[0].active_periods[0].phase == "Late"


def test_single_day_spike_is_a_peak_window_when_single_units_allowed():
    reports = daily_series("2024-07-01", 14)
    reports[9] = make_report("2024-07-10", opp=85, chal=50)

    periods = detect_significant_periods(reports, min_units=1)

    assert len(periods) == 1
    period = periods[0]
    assert period.type == "peak"
    assert period.start_date == date(2024, 7, 10)
    assert period.end_date == date(2024, 7, 10)
    assert period.member_count == 1


def test_single_day_spike_is_ignored_by_default():
    reports = daily_series("2024-07-01", 14)
    reports[9] = make_report("2024-07-10", opp=85, chal=50)

    assert detect_significant_periods(reports) == []


def test_significant_window_types():
    reports = daily_series("2024-07-01", 12)
    reports[1] = make_report("2024-07-02", opp=50, chal=80)
    reports[2] = make_report("2024-07-03", opp=40, chal=90)
    reports[5] = make_report("2024-07-06", opp=80, chal=50)
    reports[6] = make_report("2024-07-07", opp=50, chal=80)
    reports[9] = make_report("2024-07-10", opp=80, chal=80)
    reports[10] = make_report("2024-07-11", opp=90, chal=60)

    periods = detect_significant_periods(reports)

    assert [p.type for p in periods] == ["challenging", "volatile", "volatile"]
    assert [p.member_count for p in periods] == [2, 2, 2]


def test_dominant_category_uses_average_net():
    window = [
        make_report("2024-07-01", opp=80, chal=40, categories={"wealth": (90, 30), "career": (85, 30)}),
        make_report("2024-07-02", opp=80, chal=40, categories={"wealth": (80, 50), "career": (85, 30)}),
    ]

    assert dominant_category(window) == "career"


def test_significant_period_reports_dominant_category_scores():
    reports = [
        make_report("2024-07-01"),
        make_report("2024-07-02", opp=80, chal=40, categories={"relationships": (95, 30)}),
        make_report("2024-07-03", opp=80, chal=40, categories={"relationships": (85, 40)}),
        make_report("2024-07-04"),
    ]

    periods = detect_significant_periods(reports)

    assert len(periods) == 1
    assert periods[0].category == "relationships"
    assert periods[0].opportunities == 90
    assert periods[0].challenges == 35
    assert periods[0].type == "peak"
