"""Detection of long-cycle changes across an ordered report series.

Each unit's cycle reading is classified into one of three states before the
series is segmented:

``ActiveCycle``
    the unit reports a cycle.
``NoActiveCycle``
    no cycle has been entered yet (the stretch before the first cycle).
``CycleDataGap``
    a missing reading after a cycle was already seen; the previous cycle is
    carried forward and the gap never opens a new segment.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Sequence, Union

from ..schemas.facts import CycleInfo
from ..schemas.reports import CycleTransition, Report

logger = logging.getLogger(__name__)

DEFAULT_MIN_UNITS = 180


@dataclass(frozen=True)
class ActiveCycle:
    cycle: CycleInfo


@dataclass(frozen=True)
class NoActiveCycle:
    pass


@dataclass(frozen=True)
class CycleDataGap:
    pass


CycleState = Union[ActiveCycle, NoActiveCycle, CycleDataGap]


def classify_cycle_states(reports: Sequence[Report]) -> List[CycleState]:
    states: List[CycleState] = []
    seen_cycle = False
    for report in reports:
        cycle = report.factual_basis.current_cycle
        if cycle is not None:
            seen_cycle = True
            states.append(ActiveCycle(cycle))
        elif seen_cycle:
            states.append(CycleDataGap())
        else:
            states.append(NoActiveCycle())
    return states


def _same_cycle(a: CycleInfo, b: CycleInfo) -> bool:
    return a.tag == b.tag and a.element == b.element


@dataclass
class _Segment:
    cycle: Optional[CycleInfo]
    start: date
    count: int = 0

    def close(self, end: date) -> CycleTransition:
        return CycleTransition(
            cycle=self.cycle,
            start_date=self.start,
            end_date=end,
            unit_count=self.count,
            is_pre_cycle=self.cycle is None,
        )


def segment_cycles(reports: Sequence[Report]) -> List[CycleTransition]:
    """Split ``reports`` into runs sharing one cycle, before any length filtering.

    A closed segment ends on the start date of the unit that opened the next
    one; the last segment ends on the final unit's end date.
    """

    if not reports:
        return []
    segments: List[CycleTransition] = []
    current = _Segment(cycle=reports[0].factual_basis.current_cycle, start=reports[0].start_date)
    for report, state in zip(reports, classify_cycle_states(reports)):
        if isinstance(state, CycleDataGap):
            current.count += 1
            continue
        if isinstance(state, ActiveCycle) and (current.cycle is None or not _same_cycle(current.cycle, state.cycle)):
            segments.append(current.close(report.start_date))
            current = _Segment(cycle=state.cycle, start=report.start_date, count=1)
            continue
        current.count += 1
    segments.append(current.close(reports[-1].end_date))
    return segments


def detect_cycle_transitions(
    reports: Sequence[Report],
    min_units: int = DEFAULT_MIN_UNITS,
) -> Optional[List[CycleTransition]]:
    """Cycle segments lasting at least ``min_units`` units, or None when fewer than two remain."""

    segments = segment_cycles(reports)
    kept = [s for s in segments if s.unit_count >= min_units]
    if len(segments) != len(kept):
        logger.debug(
            "cycle_transitions_filtered",
            extra={"segments": len(segments), "kept": len(kept), "min_units": min_units},
        )
    if len(kept) > 1:
        return kept
    return None
