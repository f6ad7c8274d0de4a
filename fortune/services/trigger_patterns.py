from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Set, Tuple

from ..schemas.reports import FilteringStats, Report, TriggerPattern
from .clustering import phase_for_index
from .scoring import round_half_up

logger = logging.getLogger(__name__)

DEFAULT_FREQUENCY_THRESHOLD = 5.0


@dataclass
class _Tally:
    count: int = 0
    favorable: int = 0
    unfavorable: int = 0
    years: Set[int] = field(default_factory=set)
    phases: Set[str] = field(default_factory=set)


def _min_count(total: int, threshold_pct: float) -> int:
    # round() strips float noise such as 100 * 5 / 100 landing a hair above 5.
    return math.ceil(round(total * threshold_pct / 100, 9))


def _phase_label(phases: Set[str]) -> Optional[str]:
    if len(phases) == 3:
        return "All"
    if len(phases) == 1:
        return next(iter(phases))
    return None


def mine_trigger_patterns(
    reports: Sequence[Report],
    frequency_threshold: float = DEFAULT_FREQUENCY_THRESHOLD,
) -> Tuple[List[TriggerPattern], FilteringStats]:
    """Keep interaction types that recur in at least ``frequency_threshold`` percent of units.

    A type present in exactly the threshold share is kept. Returns the kept
    patterns, most frequent first, and the filtering statistics.
    """

    total = len(reports)
    tallies: Dict[str, _Tally] = {}
    for idx, report in enumerate(reports):
        phase = phase_for_index(idx, total)
        year = report.start_date.year
        for _area, interaction in report.interactions():
            tally = tallies.setdefault(interaction.type, _Tally())
            tally.count += 1
            if interaction.involves_favorable:
                tally.favorable += 1
            if interaction.involves_unfavorable:
                tally.unfavorable += 1
            tally.years.add(year)
            tally.phases.add(phase)

    minimum = _min_count(total, frequency_threshold)
    kept: List[TriggerPattern] = []
    for type_name, tally in tallies.items():
        if tally.count < minimum:
            continue
        polar = tally.favorable + tally.unfavorable
        kept.append(
            TriggerPattern(
                type=type_name,
                frequency=tally.count,
                percentage=round_half_up(tally.count / total * 100),
                favorable=tally.favorable,
                unfavorable=tally.unfavorable,
                favorable_ratio=0.5 if polar == 0 else tally.favorable / polar,
                year_spread=len(tally.years),
                phase=_phase_label(tally.phases),
            )
        )
    kept.sort(key=lambda p: -p.frequency)

    stats = FilteringStats(
        total_unique_types=len(tallies),
        kept=len(kept),
        dropped=len(tallies) - len(kept),
        frequency_threshold=frequency_threshold,
    )
    logger.debug(
        "trigger_patterns_filtered",
        extra={"units": total, "minimum": minimum, "kept": stats.kept, "dropped": stats.dropped},
    )
    return kept, stats
