"""Pytest configuration and fixtures."""

import pytest

from factories import fixed_clock
from fortune.services.config import EngineConfig
from fortune.services.report_aggregator import ReportAggregator


@pytest.fixture
def aggregator() -> ReportAggregator:
    """Aggregator with default thresholds and a frozen clock."""
    return ReportAggregator(clock=fixed_clock)


@pytest.fixture
def single_unit_aggregator() -> ReportAggregator:
    """Aggregator that keeps one-unit significant windows."""
    return ReportAggregator(EngineConfig(significant_min_units=1), clock=fixed_clock)
