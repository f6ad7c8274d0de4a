"""Per-unit scoring: one day's facts in, six category scores out.

Every category starts from a neutral 50/50 split and is nudged by four
independent contributions:

* element presence (diversity and dominance of the temporal elements);
* the current cycle tag matched against per-category favourable and
  unfavourable tag lists;
* interactions in each active life area, weighted by the category's pillar
  weights;
* special markers, with diminishing returns once three or more stack.

The calculator is a pure function of the fact and the injected tables.
"""

from __future__ import annotations

import math
from collections import Counter
from typing import Dict, Mapping, Optional, Sequence, Tuple

from ..schemas.facts import TimeUnitFact
from ..schemas.reports import CategoryScore, FortuneScores
from .constants import CATEGORIES, DEFAULT_TABLES, SCORE_KEYS, ScoringTables

BASELINE = 50.0
ELEMENT_DIVERSITY_POINTS = 3
ELEMENT_DOMINANCE_POINTS = 6
CYCLE_WEIGHT = 5
INTERACTION_WEIGHT = 8
MARKER_STACK_THRESHOLD = 3
MARKER_STACK_SCALE = 0.75


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def net_score(opportunities: float, challenges: float) -> int:
    """Balance opportunities against challenges around the neutral midpoint.

    80/20 gives 100 (clamped), 20/80 gives 0, and any equal pair gives 50
    regardless of intensity.
    """

    return round_half_up(clamp(opportunities - challenges + 50, 0, 100))


class ScoreCalculator:
    def __init__(self, tables: ScoringTables = DEFAULT_TABLES) -> None:
        self.tables = tables

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def score_unit(self, fact: TimeUnitFact) -> FortuneScores:
        categories = {name: self.score_category(fact, name) for name in CATEGORIES}
        avg_opp = sum(c.opportunities for c in categories.values()) / len(categories)
        avg_chal = sum(c.challenges for c in categories.values()) / len(categories)
        opportunities = round_half_up(avg_opp)
        challenges = round_half_up(avg_chal)
        overall = CategoryScore(
            opportunities=opportunities,
            challenges=challenges,
            net=net_score(opportunities, challenges),
        )
        return FortuneScores(overall=overall, **categories)

    def score_category(self, fact: TimeUnitFact, category: str) -> CategoryScore:
        if category not in CATEGORIES:
            raise ValueError(f"Unknown category '{category}'. Must be one of: {CATEGORIES}")

        opportunities = BASELINE
        challenges = BASELINE

        opportunities += self.element_bonus(fact)

        cycle_opp, cycle_chal = self.cycle_bonus(fact, category)
        opportunities += cycle_opp
        challenges += cycle_chal

        inter_opp, inter_chal = self.interaction_bonus(fact, self._weights_for(fact, category))
        opportunities += inter_opp
        challenges += inter_chal

        opportunities += self.marker_bonus(fact, category)

        opportunities = round_half_up(clamp(opportunities, 0, 100))
        challenges = round_half_up(clamp(challenges, 0, 100))
        return CategoryScore(
            opportunities=opportunities,
            challenges=challenges,
            net=net_score(opportunities, challenges),
        )

    # ------------------------------------------------------------------
    # Contributions
    # ------------------------------------------------------------------

    @staticmethod
    def element_bonus(fact: TimeUnitFact) -> int:
        elements = [e for e in fact.temporal_elements if e]
        if not elements:
            return 0
        counts = Counter(elements)
        diversity = min(len(counts), 3) * ELEMENT_DIVERSITY_POINTS
        dominance = ELEMENT_DOMINANCE_POINTS if max(counts.values()) >= 2 else 0
        return diversity + dominance

    def cycle_bonus(self, fact: TimeUnitFact, category: str) -> Tuple[float, float]:
        cycle = fact.current_cycle
        if cycle is None or not cycle.tag:
            return 0.0, 0.0
        tag = cycle.tag
        favorable = self.tables.favorable_cycle_tags.get(category, [])
        unfavorable = self.tables.unfavorable_cycle_tags.get(category, [])
        opp = CYCLE_WEIGHT if any(t in tag for t in favorable) else 0
        chal = CYCLE_WEIGHT if any(t in tag for t in unfavorable) else 0
        return float(opp), float(chal)

    @staticmethod
    def interaction_bonus(fact: TimeUnitFact, weights: Mapping[str, float]) -> Tuple[float, float]:
        opp = 0.0
        chal = 0.0
        for area_name, weight in weights.items():
            area = fact.life_areas.get(area_name)
            if area is None or not area.active:
                continue
            for interaction in area.interactions:
                if interaction.involves_favorable:
                    opp += INTERACTION_WEIGHT * weight
                if interaction.involves_unfavorable:
                    chal += INTERACTION_WEIGHT * weight
        return opp, chal

    def marker_bonus(self, fact: TimeUnitFact, category: str) -> int:
        bonus = 0.0
        present = 0
        for marker in fact.markers:
            table: Optional[Dict[str, int]] = self.tables.marker_bonuses.get(marker)
            if table is None:
                continue
            present += 1
            bonus += table.get(category, table.get("default", 0))
        if present >= MARKER_STACK_THRESHOLD:
            bonus *= MARKER_STACK_SCALE
        return round_half_up(bonus)

    def _weights_for(self, fact: TimeUnitFact, category: str) -> Mapping[str, float]:
        if fact.pillar_weights and category in fact.pillar_weights:
            return fact.pillar_weights[category]
        return self.tables.pillar_weights[category]


def average_scores(score_sets: Sequence[FortuneScores]) -> FortuneScores:
    """Plain per-category averages of opportunities, challenges and net, rounded half up."""

    if not score_sets:
        raise ValueError("Cannot average scores of an empty report list")
    count = len(score_sets)
    averaged: Dict[str, CategoryScore] = {}
    for key in SCORE_KEYS:
        averaged[key] = CategoryScore(
            opportunities=round_half_up(sum(s.get(key).opportunities for s in score_sets) / count),
            challenges=round_half_up(sum(s.get(key).challenges for s in score_sets) / count),
            net=round_half_up(sum(s.get(key).net for s in score_sets) / count),
        )
    return FortuneScores(**averaged)
