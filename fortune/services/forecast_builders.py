from datetime import datetime, time, timedelta, timezone
from typing import List, Optional

from ..schemas.facts import TimeUnitFact
from ..schemas.reports import (
    FactualBasis,
    FortuneScores,
    HourlyBlock,
    MarkerSummary,
    Report,
    ReportMetadata,
)
from .constants import DEFAULT_TABLES, ScoringTables
from .heatmap import hourly_heatmap
from .scoring import ScoreCalculator
from .symbols import unit_symbols

HOUR_BLOCKS = 12
BLOCK_HOURS = 2
FIRST_BLOCK_HOUR = 23


def _hourly_blocks(day, scores: FortuneScores) -> List[HourlyBlock]:
    blocks: List[HourlyBlock] = []
    for i in range(HOUR_BLOCKS):
        start_hour = (i * BLOCK_HOURS + FIRST_BLOCK_HOUR) % 24
        end_hour = (start_hour + BLOCK_HOURS) % 24
        start = datetime.combine(day, time(start_hour))
        end = datetime.combine(day, time(end_hour))
        if end_hour < start_hour:
            end += timedelta(days=1)
        # Hour pillars are not scored separately; every block carries the day's scores.
        blocks.append(HourlyBlock(start_time=start, end_time=end, scores=scores))
    return blocks


def _active_markers(fact: TimeUnitFact, tables: ScoringTables) -> List[MarkerSummary]:
    markers: List[MarkerSummary] = []
    for name in fact.markers:
        details = tables.marker_details.get(name, {})
        markers.append(
            MarkerSummary(
                name=name,
                label=str(details.get("label", name)),
                description=str(details.get("description", "")),
                affected_categories=list(details.get("affected_categories", [])),
            )
        )
    return markers


def factual_basis(fact: TimeUnitFact) -> FactualBasis:
    return FactualBasis(
        natal_structure=fact.natal_structure,
        chart_strength=fact.chart_strength,
        element_balance=fact.element_balance,
        temporal_elements=fact.temporal_elements,
        favorable_elements=fact.favorable_elements,
        unfavorable_elements=fact.unfavorable_elements,
        current_cycle=fact.current_cycle,
        period_element=fact.period_element,
        life_areas=dict(fact.life_areas),
    )


def build_daily_report(
    fact: TimeUnitFact,
    calculator: Optional[ScoreCalculator] = None,
    tables: ScoringTables = DEFAULT_TABLES,
    computed_at: Optional[datetime] = None,
) -> Report:
    """Leaf report for one day of facts."""

    calculator = calculator or ScoreCalculator(tables)
    scores = calculator.score_unit(fact)
    hourly = _hourly_blocks(fact.date, scores)
    return Report(
        timeframe="daily",
        start_date=fact.date,
        end_date=fact.date,
        scores=scores,
        symbols=unit_symbols(fact, tables),
        markers=_active_markers(fact, tables),
        heatmap=hourly_heatmap(hourly),
        hourly_breakdown=hourly,
        factual_basis=factual_basis(fact),
        metadata=ReportMetadata(
            computed_at=computed_at or datetime.now(timezone.utc),
            source_unit_count=1,
        ),
    )
