"""Consecutive-run clustering over ordered report series."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Callable, List, Optional, Sequence

from ..schemas.reports import MarkerSummary, MarkerWindow, Report, SignificantPeriod
from .constants import CATEGORIES, DEFAULT_TABLES, ScoringTables
from .scoring import round_half_up


@dataclass(frozen=True)
class ConsecutiveRun:
    start: date
    end: date
    member_count: int
    start_index: int
    end_index: int

    @property
    def duration_days(self) -> int:
        return units_between(self.start, self.end) + 1


def units_between(start: date, end: date) -> int:
    return (end - start).days


def phase_for_index(index: int, total: int) -> str:
    if index < total / 3:
        return "Early"
    if index < total * 2 / 3:
        return "Mid"
    return "Late"


def find_consecutive_runs(
    reports: Sequence[Report],
    predicate: Callable[[Report], bool],
) -> List[ConsecutiveRun]:
    """Maximal runs of consecutive reports for which ``predicate`` holds.

    Bounds are inclusive: a run starts at the first member's ``start_date``
    and ends at the last member's ``end_date``.
    """

    runs: List[ConsecutiveRun] = []
    run_start: Optional[int] = None
    for idx, report in enumerate(reports):
        if predicate(report):
            if run_start is None:
                run_start = idx
            continue
        if run_start is not None:
            runs.append(_make_run(reports, run_start, idx - 1))
            run_start = None
    if run_start is not None:
        runs.append(_make_run(reports, run_start, len(reports) - 1))
    return runs


def _make_run(reports: Sequence[Report], first: int, last: int) -> ConsecutiveRun:
    return ConsecutiveRun(
        start=reports[first].start_date,
        end=reports[last].end_date,
        member_count=last - first + 1,
        start_index=first,
        end_index=last,
    )


# ---------------------------------------------------------------------------
# Marker windows
# ---------------------------------------------------------------------------


def cluster_markers(
    reports: Sequence[Report],
    min_duration_days: int = 7,
    tables: ScoringTables = DEFAULT_TABLES,
) -> List[MarkerSummary]:
    """Activation windows per marker, keeping markers with at least one long run."""

    seen: List[MarkerSummary] = []
    names: List[str] = []
    for report in reports:
        for marker in report.markers:
            if marker.name not in names:
                names.append(marker.name)
                seen.append(marker)

    if not reports:
        return []
    span_days = units_between(reports[0].start_date, reports[-1].end_date) + 1
    total = len(reports)
    summaries: List[MarkerSummary] = []
    for template in seen:
        runs = [
            run
            for run in find_consecutive_runs(reports, lambda r, n=template.name: r.has_marker(n))
            if run.duration_days >= min_duration_days
        ]
        if not runs:
            continue
        windows = [
            MarkerWindow(
                start_date=run.start,
                end_date=run.end,
                duration_days=run.duration_days,
                member_count=run.member_count,
                phase=phase_for_index(run.start_index, total),
            )
            for run in runs
        ]
        active_days = sum(w.duration_days for w in windows)
        details = tables.marker_details.get(template.name, {})
        summaries.append(
            MarkerSummary(
                name=template.name,
                label=template.label or str(details.get("label", "")),
                description=template.description or str(details.get("description", "")),
                affected_categories=template.affected_categories or list(details.get("affected_categories", [])),
                active_periods=windows,
                total_active_days=active_days,
                active_percentage=round_half_up(active_days / span_days * 100),
            )
        )
    return summaries


# ---------------------------------------------------------------------------
# Significant-score windows
# ---------------------------------------------------------------------------


def _high_flags(report: Report, threshold: float) -> tuple[bool, bool]:
    overall = report.scores.overall
    return overall.opportunities > threshold, overall.challenges > threshold


def _window_type(window: Sequence[Report], threshold: float) -> str:
    flags = [_high_flags(r, threshold) for r in window]
    if all(opp and not chal for opp, chal in flags):
        return "peak"
    if all(chal and not opp for opp, chal in flags):
        return "challenging"
    return "volatile"


def dominant_category(window: Sequence[Report]) -> str:
    """Category with the highest average net across ``window``; ties go to the earlier category."""

    best = CATEGORIES[0]
    best_score = None
    for name in CATEGORIES:
        avg = sum(r.scores.get(name).net for r in window) / len(window)
        if best_score is None or avg > best_score:
            best, best_score = name, avg
    return best


def detect_significant_periods(
    reports: Sequence[Report],
    threshold: float = 75.0,
    min_units: int = 2,
) -> List[SignificantPeriod]:
    """Windows of consecutive units with high opportunities and/or challenges.

    Runs shorter than ``min_units`` are dropped. The default of 2 keeps only
    sustained runs, so a lone spike day (for example day 10 of a 14-day month
    at 90) yields no window. Pass ``min_units=1``, or set
    ``EngineConfig.significant_min_units`` to 1 for rollups, to report such a
    spike as a one-unit peak window.
    """

    periods: List[SignificantPeriod] = []

    def is_significant(report: Report) -> bool:
        opp, chal = _high_flags(report, threshold)
        return opp or chal

    for run in find_consecutive_runs(reports, is_significant):
        if run.member_count < min_units:
            continue
        window = reports[run.start_index : run.end_index + 1]
        category = dominant_category(window)
        periods.append(
            SignificantPeriod(
                start_date=run.start,
                end_date=run.end,
                member_count=run.member_count,
                category=category,
                type=_window_type(window, threshold),
                opportunities=round_half_up(sum(r.scores.get(category).opportunities for r in window) / len(window)),
                challenges=round_half_up(sum(r.scores.get(category).challenges for r in window) / len(window)),
            )
        )
    return periods
