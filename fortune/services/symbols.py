from __future__ import annotations

from collections import Counter
from typing import Any, Dict, Iterable, List, Sequence, Tuple

from ..schemas.facts import TimeUnitFact
from ..schemas.reports import Report, SymbolFrequency, SymbolSet
from .constants import DEFAULT_TABLES, ScoringTables
from .scoring import round_half_up

UNIT_CAPS = {"numbers": 5, "colors": 3, "directions": 2}
FREQUENCY_CAPS = {"numbers": 10, "colors": 5, "directions": 5}


def _dedupe(values: Iterable[Any]) -> List[Any]:
    return list(dict.fromkeys(values))


def unit_symbols(fact: TimeUnitFact, tables: ScoringTables = DEFAULT_TABLES) -> SymbolSet:
    """Lucky numbers, colors and directions for one unit's favourable elements."""

    numbers: List[int] = []
    colors: List[str] = []
    directions: List[str] = []
    for element in fact.favorable_elements:
        lookup = tables.element_symbols.get(element)
        if lookup is None:
            continue
        nums, cols, dirs = lookup
        numbers.extend(nums)
        colors.extend(cols)
        directions.extend(dirs)
    return SymbolSet(
        numbers=_dedupe(numbers)[: UNIT_CAPS["numbers"]],
        colors=_dedupe(colors)[: UNIT_CAPS["colors"]],
        directions=_dedupe(directions)[: UNIT_CAPS["directions"]],
    )


def rank_by_frequency(groups: Sequence[Sequence[Any]], total: int) -> List[SymbolFrequency]:
    """Count each value across ``groups`` and rank by count.

    Ties keep first-seen order; ``Counter`` preserves insertion order and
    ``sorted`` is stable.
    """

    counts: Counter = Counter()
    for group in groups:
        for value in group:
            counts[value] += 1
    ranked: List[Tuple[Any, int]] = sorted(counts.items(), key=lambda item: -item[1])
    return [
        SymbolFrequency(
            value=value,
            frequency=count,
            percentage=round_half_up(count / total * 100) if total else 0,
        )
        for value, count in ranked
    ]


def aggregate_symbols(reports: Sequence[Report]) -> SymbolSet:
    total = len(reports)
    ranked: Dict[str, List[SymbolFrequency]] = {
        "numbers": rank_by_frequency([r.symbols.numbers for r in reports], total),
        "colors": rank_by_frequency([r.symbols.colors for r in reports], total),
        "directions": rank_by_frequency([r.symbols.directions for r in reports], total),
    }
    return SymbolSet(
        numbers=[s.value for s in ranked["numbers"][: UNIT_CAPS["numbers"]]],
        colors=[s.value for s in ranked["colors"][: UNIT_CAPS["colors"]]],
        directions=[s.value for s in ranked["directions"][: UNIT_CAPS["directions"]]],
        numbers_with_frequency=ranked["numbers"][: FREQUENCY_CAPS["numbers"]],
        colors_with_frequency=ranked["colors"][: FREQUENCY_CAPS["colors"]],
        directions_with_frequency=ranked["directions"][: FREQUENCY_CAPS["directions"]],
    )


def union_symbols(reports: Sequence[Report]) -> SymbolSet:
    """Deduplicated union of every report's symbols, in first-seen order."""

    return SymbolSet(
        numbers=_dedupe(n for r in reports for n in r.symbols.numbers),
        colors=_dedupe(c for r in reports for c in r.symbols.colors),
        directions=_dedupe(d for r in reports for d in r.symbols.directions),
    )
