"""Long-range pattern mining over daily series and yearly reports."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional, Sequence, Tuple

from ..schemas.reports import CategoryIntensity, MajorTheme, Report, SignificantYear
from .constants import CATEGORIES

logger = logging.getLogger(__name__)

DEFAULT_TOP_K = 8
SHARE_THRESHOLD = 5.0
POLAR_SHARE_THRESHOLD = 3.0
CLUSTER_DENSITY = 10.0
CLUSTER_MIN_YEARS = 3
HIGH_SCORE = 70.0

_AREA_TITLES = {
    "social": "Social",
    "career": "Career",
    "personal": "Personal",
    "innovation": "Innovation",
}
_TONES = {
    "mixed": "complex",
    "favorable": "supportive",
    "unfavorable": "challenging",
    "neutral": "active",
}

ThemeKey = Tuple[Optional[str], str, str, str]


@dataclass
class _ThemeTally:
    count: int = 0
    years: List[int] = field(default_factory=list)


def _is_significant(key: ThemeKey, tally: _ThemeTally, percentage: float) -> bool:
    if percentage >= SHARE_THRESHOLD:
        return True
    spread = len(tally.years)
    if spread >= CLUSTER_MIN_YEARS and tally.count / spread > CLUSTER_DENSITY:
        return True
    favorability = key[3]
    return favorability in ("favorable", "unfavorable") and percentage >= POLAR_SHARE_THRESHOLD


def _significance(percentage: float) -> str:
    if percentage >= 10:
        return "very-high"
    if percentage >= 5:
        return "high"
    return "medium"


def theme_label(related_tag: Optional[str], interaction_type: str, life_area: str, favorability: str) -> str:
    parts: List[str] = []
    if related_tag:
        parts.append(related_tag)
    if interaction_type:
        parts.append(interaction_type)
    parts.append(f"{_AREA_TITLES.get(life_area, life_area)} ({_TONES[favorability]})")
    return " + ".join(parts)


def detect_major_themes(daily_reports: Sequence[Report], top_k: int = DEFAULT_TOP_K) -> List[MajorTheme]:
    """Recurring (tag, interaction type, life area, favorability) combinations.

    Patterns are kept when they cover at least 5% of days, when they cluster
    densely (more than 10 per year across 3+ years), or when they carry a clear
    favorable/unfavorable tone and cover at least 3% of days.
    """

    total = len(daily_reports)
    if total == 0:
        return []

    tallies: Dict[ThemeKey, _ThemeTally] = {}
    for report in daily_reports:
        year = report.start_date.year
        for area, interaction in report.interactions():
            tag = interaction.related_tags[0] if interaction.related_tags else None
            key = (tag, interaction.type, area, interaction.favorability)
            tally = tallies.setdefault(key, _ThemeTally())
            tally.count += 1
            if year not in tally.years:
                tally.years.append(year)

    candidates = []
    for key, tally in tallies.items():
        percentage = tally.count / total * 100
        if _is_significant(key, tally, percentage):
            candidates.append((key, tally, percentage))
    candidates.sort(key=lambda item: -item[1].count)

    themes: List[MajorTheme] = []
    for (tag, interaction_type, area, favorability), tally, percentage in candidates[:top_k]:
        themes.append(
            MajorTheme(
                related_tag=tag,
                interaction_type=interaction_type,
                life_area=area,
                favorability=favorability,
                frequency=tally.count,
                percentage=percentage,
                year_spread=len(tally.years),
                years=list(tally.years),
                significance=_significance(percentage),
                label=theme_label(tag, interaction_type, area, favorability),
            )
        )
    logger.debug(
        "major_themes_detected",
        extra={"days": total, "patterns": len(tallies), "significant": len(candidates), "kept": len(themes)},
    )
    return themes


# ---------------------------------------------------------------------------
# Significant years
# ---------------------------------------------------------------------------


def _year_type(opportunities: float, challenges: float) -> str:
    high_opp = opportunities > HIGH_SCORE
    high_chal = challenges > HIGH_SCORE
    if high_opp and high_chal:
        return "volatile"
    if high_opp:
        return "peak"
    return "challenging"


def detect_significant_years(
    yearly_reports: Sequence[Report],
    birth_date: date,
    limit: int = DEFAULT_TOP_K,
) -> List[SignificantYear]:
    """The ``limit`` most intense years, returned in chronological order."""

    analyses: List[SignificantYear] = []
    for report in yearly_reports:
        overall = report.scores.overall
        ranked = sorted(
            (
                CategoryIntensity(
                    name=name,
                    opportunities=report.scores.get(name).opportunities,
                    challenges=report.scores.get(name).challenges,
                    intensity=report.scores.get(name).opportunities + report.scores.get(name).challenges,
                )
                for name in CATEGORIES
            ),
            key=lambda c: -c.intensity,
        )
        year = report.start_date.year
        analyses.append(
            SignificantYear(
                year=year,
                age=year - birth_date.year,
                intensity=overall.opportunities + overall.challenges,
                type=_year_type(overall.opportunities, overall.challenges),
                top_categories=ranked[:2],
                scores=overall,
            )
        )
    analyses.sort(key=lambda y: -y.intensity)
    return sorted(analyses[:limit], key=lambda y: y.year)
