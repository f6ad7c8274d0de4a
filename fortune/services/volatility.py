"""Dispersion and trend statistics for score series.

Plain averaging hides how eventful a period was; these numbers travel with
aggregate reports so the spread survives the rollup.
"""

from __future__ import annotations

import logging
import math
from typing import Sequence

import numpy as np

from ..schemas.reports import Report, VolatilityStats

logger = logging.getLogger(__name__)

VOLATILE_STDDEV = 20.0
TREND_DELTA = 10.0


def population_stddev(values: Sequence[float]) -> float:
    if len(values) == 0:
        return 0.0
    return float(np.std(np.asarray(values, dtype=float)))


def series_trend(values: Sequence[float], stddev: float) -> str:
    if stddev > VOLATILE_STDDEV:
        return "volatile"
    split = len(values) // 2
    first, second = values[:split], values[split:]
    if not first or not second:
        return "stable"
    diff = float(np.mean(second)) - float(np.mean(first))
    if diff >= TREND_DELTA:
        return "increasing"
    if diff <= -TREND_DELTA:
        return "decreasing"
    return "stable"


def analyze_series(values: Sequence[float]) -> VolatilityStats:
    if len(values) == 0:
        raise ValueError("analyze_series requires at least one value")
    data = [float(v) for v in values]
    ordered = sorted(data)
    n = len(ordered)
    stddev = population_stddev(data)
    return VolatilityStats(
        standard_deviation=round(stddev, 2),
        min=ordered[0],
        max=ordered[-1],
        trend=series_trend(data, stddev),
        q1=ordered[math.floor(n * 0.25)],
        q3=ordered[math.floor(n * 0.75)],
    )


def analyze_score_volatility(reports: Sequence[Report]) -> VolatilityStats:
    """Volatility of the overall net score across ``reports``."""

    stats = analyze_series([r.scores.overall.net for r in reports])
    logger.debug(
        "score_volatility_computed",
        extra={"units": len(reports), "stddev": stats.standard_deviation, "trend": stats.trend},
    )
    return stats
