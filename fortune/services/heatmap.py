from __future__ import annotations

from typing import List, Sequence

from ..schemas.reports import HeatmapEntry, HourlyBlock, Report

_LABEL_FORMATS = {
    "daily": "%Y-%m-%d",
    "monthly": "%Y-%m",
    "yearly": "%Y",
    "chapter": "%Y",
}


def period_label(report: Report) -> str:
    return report.start_date.strftime(_LABEL_FORMATS[report.timeframe])


def project_heatmap(children: Sequence[Report]) -> List[HeatmapEntry]:
    """One entry per child, labelled at the child's own granularity."""

    return [
        HeatmapEntry(
            period_label=period_label(child),
            opportunities=child.scores.overall.opportunities,
            challenges=child.scores.overall.challenges,
        )
        for child in children
    ]


def hourly_heatmap(blocks: Sequence[HourlyBlock]) -> List[HeatmapEntry]:
    return [
        HeatmapEntry(
            period_label=block.start_time.strftime("%H:%M"),
            opportunities=block.scores.overall.opportunities,
            challenges=block.scores.overall.challenges,
        )
        for block in blocks
    ]
