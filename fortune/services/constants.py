"""Domain lookup tables used by the scoring and symbol helpers.

These are configuration, not algorithm: :class:`ScoringTables` bundles them so
callers can inject alternative tables without touching the calculators.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

CATEGORIES: Tuple[str, ...] = ("career", "wealth", "relationships", "wellness", "personal_growth")
SCORE_KEYS: Tuple[str, ...] = ("overall",) + CATEGORIES
LIFE_AREAS: Tuple[str, ...] = ("social", "career", "personal", "innovation")

# Career leans on the month pillar, wellness on the day pillar, growth on the hour pillar.
CATEGORY_PILLAR_WEIGHTS: Dict[str, Dict[str, float]] = {
    "career": {"social": 0.2, "career": 0.5, "personal": 0.1, "innovation": 0.2},
    "wealth": {"social": 0.15, "career": 0.35, "personal": 0.35, "innovation": 0.15},
    "relationships": {"social": 0.4, "career": 0.1, "personal": 0.4, "innovation": 0.1},
    "wellness": {"social": 0.1, "career": 0.1, "personal": 0.7, "innovation": 0.1},
    "personal_growth": {"social": 0.1, "career": 0.2, "personal": 0.3, "innovation": 0.4},
}

FAVORABLE_CYCLE_TAGS: Dict[str, List[str]] = {
    "career": ["Direct Officer", "Zheng Guan", "正官", "偏官", "7 Killings"],
    "wealth": ["Direct Wealth", "Zheng Cai", "正財", "Indirect Wealth", "偏財"],
    "relationships": ["Direct Resource", "Zheng Yin", "正印", "Indirect Resource", "偏印"],
    "wellness": ["Rob Wealth", "Jie Cai", "劫財", "Friend", "比肩"],
    "personal_growth": ["Eating God", "Shi Shen", "食神", "Hurting Officer", "傷官"],
}

UNFAVORABLE_CYCLE_TAGS: Dict[str, List[str]] = {
    "career": ["Eating God", "Shi Shen", "食神", "Hurting Officer", "Shang Guan", "傷官"],
    "wealth": ["Rob Wealth", "Jie Cai", "劫財", "Friend", "比肩"],
    "relationships": ["Direct Officer", "Zheng Guan", "正官", "7 Killings", "Qi Sha", "七殺"],
    "wellness": ["Direct Wealth", "Zheng Cai", "正財", "Indirect Wealth", "Pian Cai", "偏財"],
    "personal_growth": ["Direct Resource", "Zheng Yin", "正印", "Indirect Resource", "Pian Yin", "偏印"],
}

# Per-marker opportunity bonus by category; "default" covers the remaining categories.
MARKER_BONUSES: Dict[str, Dict[str, int]] = {
    "nobleman": {"relationships": 4, "career": 3, "default": 1},
    "intelligence": {"personal_growth": 4, "career": 2, "default": 1},
    "sky_horse": {"career": 3, "personal_growth": 3, "default": 1},
    "peach_blossom": {"relationships": 4, "personal_growth": 2, "default": 1},
}

MARKER_DETAILS: Dict[str, Dict[str, object]] = {
    "nobleman": {
        "label": "天乙贵人",
        "description": "Helpers and supporters appear",
        "affected_categories": ["relationships", "career"],
    },
    "intelligence": {
        "label": "文昌星",
        "description": "Academic and learning success",
        "affected_categories": ["personal_growth", "career"],
    },
    "sky_horse": {
        "label": "驿马星",
        "description": "Movement, travel and change",
        "affected_categories": ["career", "personal_growth"],
    },
    "peach_blossom": {
        "label": "桃花星",
        "description": "Charisma and relationships",
        "affected_categories": ["relationships", "personal_growth"],
    },
}

# element -> (numbers, colors, directions)
ELEMENT_SYMBOLS: Dict[str, Tuple[Tuple[int, ...], Tuple[str, ...], Tuple[str, ...]]] = {
    "WOOD": ((3, 8), ("Green", "Blue"), ("East", "Southeast")),
    "FIRE": ((2, 7), ("Red", "Purple"), ("South",)),
    "EARTH": ((5, 0), ("Yellow", "Brown"), ("Center", "Southwest")),
    "METAL": ((4, 9), ("White", "Gold"), ("West", "Northwest")),
    "WATER": ((1, 6), ("Black", "Navy"), ("North",)),
}


@dataclass(frozen=True)
class ScoringTables:
    pillar_weights: Dict[str, Dict[str, float]] = field(default_factory=lambda: CATEGORY_PILLAR_WEIGHTS)
    favorable_cycle_tags: Dict[str, List[str]] = field(default_factory=lambda: FAVORABLE_CYCLE_TAGS)
    unfavorable_cycle_tags: Dict[str, List[str]] = field(default_factory=lambda: UNFAVORABLE_CYCLE_TAGS)
    marker_bonuses: Dict[str, Dict[str, int]] = field(default_factory=lambda: MARKER_BONUSES)
    marker_details: Dict[str, Dict[str, object]] = field(default_factory=lambda: MARKER_DETAILS)
    element_symbols: Dict[str, Tuple[Tuple[int, ...], Tuple[str, ...], Tuple[str, ...]]] = field(
        default_factory=lambda: ELEMENT_SYMBOLS
    )


DEFAULT_TABLES = ScoringTables()
