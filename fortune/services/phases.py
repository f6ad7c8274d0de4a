"""Early / Mid / Late breakdown of a child series.

Each phase is summarised with per-unit normalised counts so that a longer
Late phase (it absorbs the remainder) is not over-weighted.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

import numpy as np

from ..schemas.reports import InteractionBreakdown, PhaseAnalysis, Report
from .scoring import average_scores
from .symbols import union_symbols

MIN_UNITS_FOR_PHASES = 3
SIGNIFICANT_SCORE = 75.0
LIFE_PHASE_TIERS = ("yearly", "chapter")


def split_phases(reports: Sequence[Report]):
    size = max(1, len(reports) // 3)
    return [
        ("Early", reports[:size]),
        ("Mid", reports[size : size * 2]),
        ("Late", reports[size * 2 :]),
    ]


def characterize_phase(reports: Sequence[Report], timeframe: str) -> str:
    """Label a phase from its averaged overall score and net-score variance.

    Checks run in priority order; the first match wins. The life-phase labels
    (emergence, growth, foundation) only apply to yearly and chapter parents.
    """

    avg = average_scores([r.scores for r in reports]).overall
    variance = float(np.var(np.asarray([r.scores.overall.net for r in reports], dtype=float)))

    if avg.opportunities > 70 and avg.challenges > 70:
        return "volatile"
    if variance > 200:
        return "volatile"
    if avg.net > 75:
        return "peak"
    if avg.net < 30:
        return "challenging"
    if variance < 50:
        return "stable"
    if timeframe in LIFE_PHASE_TIERS:
        if avg.net > 60:
            return "emergence"
        if avg.net > 50:
            return "growth"
        if avg.net < 40:
            return "foundation"
    return "moderate"


def _summarize(name: str, reports: Sequence[Report], timeframe: str) -> PhaseAnalysis:
    units = len(reports)
    total = favorable = unfavorable = neutral = 0
    for report in reports:
        for _area, interaction in report.interactions():
            total += 1
            if interaction.involves_favorable:
                favorable += 1
            if interaction.involves_unfavorable:
                unfavorable += 1
            if not interaction.involves_favorable and not interaction.involves_unfavorable:
                neutral += 1

    significant = sum(
        1
        for r in reports
        if r.scores.overall.opportunities > SIGNIFICANT_SCORE or r.scores.overall.challenges > SIGNIFICANT_SCORE
    )
    return PhaseAnalysis(
        phase=name,
        units=units,
        avg_scores=average_scores([r.scores for r in reports]),
        avg_interactions_per_unit=total / units,
        interaction_breakdown=InteractionBreakdown(
            favorable=favorable / units,
            unfavorable=unfavorable / units,
            neutral=neutral / units,
        ),
        significant_units=significant,
        significant_unit_ratio=significant / units,
        symbols=union_symbols(reports),
        characterization=characterize_phase(reports, timeframe),
    )


def analyze_phases(reports: Sequence[Report], timeframe: str) -> Optional[List[PhaseAnalysis]]:
    """Three phase summaries for ``reports`` rolled into a ``timeframe`` parent, or None below three units."""

    if len(reports) < MIN_UNITS_FOR_PHASES:
        return None
    return [_summarize(name, chunk, timeframe) for name, chunk in split_phases(reports)]
