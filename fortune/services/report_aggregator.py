"""Multi-tier rollups: daily -> monthly -> yearly -> chapter.

A rollup takes an ordered, non-empty list of same-tier child reports and
produces one parent report at a higher tier. Yearly and chapter parents have
their scores amplified away from the children's baseline so that exceptional
years and chapters stay visible after averaging.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from itertools import groupby
from typing import Callable, Dict, List, Optional, Sequence

import numpy as np

from ..schemas.facts import TimeUnitFact
from ..schemas.reports import (
    TIER_RANK,
    AggregationMetadata,
    CategoryScore,
    FortuneScores,
    MajorTheme,
    Report,
    ReportMetadata,
    SignificantYear,
)
from .clustering import cluster_markers, detect_significant_periods
from .config import EngineConfig
from .constants import DEFAULT_TABLES, SCORE_KEYS, ScoringTables
from .cycle_transitions import detect_cycle_transitions
from .forecast_builders import build_daily_report
from .heatmap import project_heatmap
from .phases import analyze_phases
from .scoring import ScoreCalculator, average_scores, clamp, round_half_up
from .symbols import aggregate_symbols
from .themes import detect_major_themes, detect_significant_years
from .trigger_patterns import mine_trigger_patterns
from .volatility import analyze_score_volatility, population_stddev

logger = logging.getLogger(__name__)

AMPLIFIED_TIERS = ("yearly", "chapter")


class RollupError(ValueError):
    """Raised when a list of child reports cannot be rolled into a parent."""


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Amplification
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Amplification:
    factor: float
    volatility_multiplier: float
    breakthrough: bool = False
    valley: bool = False


def plan_amplification(children: Sequence[Report], target: str, config: EngineConfig) -> Amplification:
    """Work out the amplification factor for a yearly or chapter parent.

    Breakthrough and valley compare the period's average overall
    opportunities with the children's mean plus or minus one population
    standard deviation. The period average is the children's mean, so with
    the current inputs neither flag is raised and only the tier factor and
    the volatility multiplier apply.
    """

    opportunities = [c.scores.overall.opportunities for c in children]
    average = float(np.mean(opportunities))
    child_mean = float(np.mean(opportunities))
    stddev = population_stddev(opportunities)

    factor = config.yearly_amplification if target == "yearly" else config.chapter_amplification
    breakthrough = average > child_mean + stddev
    valley = not breakthrough and average < child_mean - stddev
    if breakthrough:
        factor *= config.breakthrough_multiplier
    elif valley:
        factor *= config.valley_multiplier

    multiplier = 1.0 + min(stddev / config.volatility_divisor, config.volatility_cap)
    return Amplification(factor=factor, volatility_multiplier=multiplier, breakthrough=breakthrough, valley=valley)


def _amplify_value(values: Sequence[float], plan: Amplification) -> int:
    baseline = float(np.median(values))
    deviation = float(np.mean(values)) - baseline
    return round_half_up(baseline + deviation * plan.factor * plan.volatility_multiplier)


def amplified_scores(children: Sequence[Report], target: str, config: EngineConfig) -> FortuneScores:
    plan = plan_amplification(children, target, config)
    lower, upper = config.aggregate_clamp
    scores: Dict[str, CategoryScore] = {}
    for key in SCORE_KEYS:
        opportunities = _amplify_value([c.scores.get(key).opportunities for c in children], plan)
        challenges = _amplify_value([c.scores.get(key).challenges for c in children], plan)
        scores[key] = CategoryScore(
            opportunities=clamp(opportunities, lower, upper),
            challenges=clamp(challenges, lower, upper),
            net=opportunities - challenges,
        )
    logger.debug(
        "scores_amplified",
        extra={
            "target": target,
            "factor": plan.factor,
            "volatility_multiplier": plan.volatility_multiplier,
            "breakthrough": plan.breakthrough,
            "valley": plan.valley,
        },
    )
    return FortuneScores(**scores)


# ---------------------------------------------------------------------------
# Grouping helpers
# ---------------------------------------------------------------------------


def group_by_month(daily_reports: Sequence[Report]) -> List[List[Report]]:
    """Split an ordered daily series into calendar-month groups."""

    return [
        list(group)
        for _key, group in groupby(daily_reports, key=lambda r: (r.start_date.year, r.start_date.month))
    ]


def anniversary(start: date, years: int) -> date:
    try:
        return start.replace(year=start.year + years)
    except ValueError:
        # 29 February in a non-leap year.
        return start.replace(year=start.year + years, day=28)


# ---------------------------------------------------------------------------
# Aggregator
# ---------------------------------------------------------------------------


class ReportAggregator:
    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        calculator: Optional[ScoreCalculator] = None,
        tables: ScoringTables = DEFAULT_TABLES,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.config = config or EngineConfig()
        self.tables = tables
        self.calculator = calculator or ScoreCalculator(tables)
        self.clock = clock

    def daily(self, fact: TimeUnitFact) -> Report:
        return build_daily_report(fact, self.calculator, self.tables, computed_at=self.clock())

    def daily_series(self, facts: Sequence[TimeUnitFact]) -> List[Report]:
        return [self.daily(f) for f in sorted(facts, key=lambda f: f.date)]

    # ------------------------------------------------------------------
    # Rollup
    # ------------------------------------------------------------------

    def _validate(self, children: Sequence[Report], target: str) -> None:
        if not children:
            raise RollupError(f"Cannot roll up an empty list of reports into a {target} report")
        if target not in TIER_RANK:
            raise RollupError(f"Unknown timeframe '{target}'. Must be one of: {list(TIER_RANK)}")
        tiers = {c.timeframe for c in children}
        if len(tiers) > 1:
            raise RollupError(f"Child reports must share one timeframe, got {sorted(tiers)}")
        child_tier = children[0].timeframe
        if TIER_RANK[target] <= TIER_RANK[child_tier]:
            raise RollupError(f"Cannot roll {child_tier} reports up into a {target} report")

    def scores_for(self, children: Sequence[Report], target: str) -> FortuneScores:
        if target in AMPLIFIED_TIERS:
            return amplified_scores(children, target, self.config)
        return average_scores([c.scores for c in children])

    def rollup(
        self,
        children: Sequence[Report],
        target: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Report:
        """Roll ``children`` into one ``target`` report.

        ``start_date`` and ``end_date`` default to the first child's start and
        the last child's end. Raises :class:`RollupError` for an empty list,
        mixed child tiers, or a target that is not above the child tier.
        """

        self._validate(children, target)
        config = self.config

        patterns, filtering = mine_trigger_patterns(children, config.trigger_frequency_threshold)
        metadata = AggregationMetadata(
            volatility=analyze_score_volatility(children),
            trigger_patterns=patterns,
            filtering=filtering,
        )
        basis = children[0].factual_basis.model_copy(
            update={
                "cycle_transitions": detect_cycle_transitions(children, config.cycle_transition_min_units),
            }
        )

        report = Report(
            timeframe=target,
            start_date=start_date or children[0].start_date,
            end_date=end_date or children[-1].end_date,
            scores=self.scores_for(children, target),
            symbols=aggregate_symbols(children),
            markers=cluster_markers(children, config.marker_min_duration_days, self.tables),
            aggregation_metadata=metadata,
            phase_analysis=analyze_phases(children, target),
            significant_periods=detect_significant_periods(
                children,
                threshold=config.significant_threshold,
                min_units=config.significant_min_units,
            ),
            heatmap=project_heatmap(children),
            factual_basis=basis,
            metadata=ReportMetadata(
                computed_at=self.clock(),
                source_unit_count=sum(c.metadata.source_unit_count for c in children),
            ),
        )
        logger.info(
            "report_rollup_built",
            extra={
                "timeframe": target,
                "children": len(children),
                "start_date": report.start_date.isoformat(),
                "end_date": report.end_date.isoformat(),
            },
        )
        return report

    # ------------------------------------------------------------------
    # Tier shortcuts
    # ------------------------------------------------------------------

    def for_monthly(self, daily_reports: Sequence[Report]) -> Report:
        return self.rollup(daily_reports, "monthly")

    def for_yearly(self, monthly_reports: Sequence[Report]) -> Report:
        return self.rollup(monthly_reports, "yearly")

    def for_chapter(self, yearly_reports: Sequence[Report]) -> Report:
        return self.rollup(yearly_reports, "chapter")

    def yearly_sub_reports(
        self,
        daily_reports: Sequence[Report],
        start_date: date,
        years: Optional[int] = None,
    ) -> List[Report]:
        """One yearly report per calendar-year window anchored at ``start_date``.

        Window ``k`` runs from the ``k``-th anniversary of ``start_date`` to the
        day before the next one. Windows with no daily reports are skipped.
        """

        years = self.config.chapter_years if years is None else years
        yearly: List[Report] = []
        for offset in range(years):
            window_start = anniversary(start_date, offset)
            window_end = anniversary(start_date, offset + 1) - timedelta(days=1)
            window = [r for r in daily_reports if window_start <= r.start_date <= window_end]
            if not window:
                logger.warning(
                    "yearly_window_empty",
                    extra={"start_date": window_start.isoformat(), "end_date": window_end.isoformat()},
                )
                continue
            yearly.append(self.rollup(window, "yearly", start_date=window_start, end_date=window_end))
        return yearly

    def chapter_from_daily(self, daily_reports: Sequence[Report], start_date: date) -> Report:
        yearly = self.yearly_sub_reports(daily_reports, start_date)
        if not yearly:
            raise RollupError(f"No daily reports fall inside the chapter starting {start_date.isoformat()}")
        return self.for_chapter(yearly)

    # ------------------------------------------------------------------
    # Long-range patterns
    # ------------------------------------------------------------------

    def major_themes(self, daily_reports: Sequence[Report]) -> List[MajorTheme]:
        return detect_major_themes(daily_reports, self.config.theme_top_k)

    def significant_years(self, yearly_reports: Sequence[Report], birth_date: date) -> List[SignificantYear]:
        return detect_significant_years(yearly_reports, birth_date, self.config.theme_top_k)
