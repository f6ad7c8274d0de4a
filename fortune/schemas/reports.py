from __future__ import annotations

from datetime import date as Date
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .facts import CycleInfo, LifeArea

Timeframe = Literal["daily", "monthly", "yearly", "chapter"]
Category = Literal["career", "wealth", "relationships", "wellness", "personal_growth"]
PhaseName = Literal["Early", "Mid", "Late"]
Trend = Literal["increasing", "decreasing", "stable", "volatile"]
PeriodType = Literal["peak", "challenging", "volatile"]
Characterization = Literal[
    "peak",
    "challenging",
    "volatile",
    "stable",
    "moderate",
    "foundation",
    "growth",
    "emergence",
]

TIER_RANK: Dict[str, int] = {"daily": 0, "monthly": 1, "yearly": 2, "chapter": 3}


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class CategoryScore(_Frozen):
    # Leaf reports keep all three in [0, 100]; aggregate tiers widen the range and leave net unclamped.
    opportunities: float
    challenges: float
    net: float


class FortuneScores(_Frozen):
    overall: CategoryScore
    career: CategoryScore
    wealth: CategoryScore
    relationships: CategoryScore
    wellness: CategoryScore
    personal_growth: CategoryScore

    def get(self, key: str) -> CategoryScore:
        return getattr(self, key)


class SymbolFrequency(_Frozen):
    value: Any
    frequency: int
    percentage: int


class SymbolSet(_Frozen):
    numbers: List[int] = Field(default_factory=list)
    colors: List[str] = Field(default_factory=list)
    directions: List[str] = Field(default_factory=list)
    numbers_with_frequency: Optional[List[SymbolFrequency]] = None
    colors_with_frequency: Optional[List[SymbolFrequency]] = None
    directions_with_frequency: Optional[List[SymbolFrequency]] = None


class MarkerWindow(_Frozen):
    start_date: Date
    end_date: Date
    duration_days: int
    member_count: int
    phase: PhaseName


class MarkerSummary(_Frozen):
    name: str
    label: str = ""
    description: str = ""
    affected_categories: List[Category] = Field(default_factory=list)
    active_periods: List[MarkerWindow] = Field(default_factory=list)
    total_active_days: int = 0
    active_percentage: int = 0


class VolatilityStats(_Frozen):
    standard_deviation: float
    min: float
    max: float
    trend: Trend
    q1: float
    q3: float


class TriggerPattern(_Frozen):
    type: str
    frequency: int
    percentage: int
    favorable: int
    unfavorable: int
    favorable_ratio: float
    year_spread: int
    phase: Optional[Literal["Early", "Mid", "Late", "All"]] = None


class FilteringStats(_Frozen):
    total_unique_types: int
    kept: int
    dropped: int
    frequency_threshold: float


class AggregationMetadata(_Frozen):
    volatility: VolatilityStats
    trigger_patterns: List[TriggerPattern] = Field(default_factory=list)
    filtering: FilteringStats


class InteractionBreakdown(_Frozen):
    favorable: float
    unfavorable: float
    neutral: float


class PhaseAnalysis(_Frozen):
    phase: PhaseName
    units: int
    avg_scores: FortuneScores
    avg_interactions_per_unit: float
    interaction_breakdown: InteractionBreakdown
    significant_units: int
    significant_unit_ratio: float
    symbols: SymbolSet
    characterization: Characterization


class SignificantPeriod(_Frozen):
    start_date: Date
    end_date: Date
    member_count: int
    category: Category
    type: PeriodType
    opportunities: float
    challenges: float


class HeatmapEntry(_Frozen):
    period_label: str
    opportunities: float
    challenges: float


class HourlyBlock(_Frozen):
    start_time: datetime
    end_time: datetime
    scores: FortuneScores


class CycleTransition(_Frozen):
    cycle: Optional[CycleInfo] = None
    start_date: Date
    end_date: Date
    unit_count: int
    is_pre_cycle: bool


class FactualBasis(_Frozen):
    natal_structure: Dict[str, Any] = Field(default_factory=dict)
    chart_strength: Optional[Dict[str, Any]] = None
    element_balance: Optional[Dict[str, int]] = None
    temporal_elements: List[str] = Field(default_factory=list)
    favorable_elements: List[str] = Field(default_factory=list)
    unfavorable_elements: List[str] = Field(default_factory=list)
    current_cycle: Optional[CycleInfo] = None
    cycle_transitions: Optional[List[CycleTransition]] = None
    period_element: Optional[str] = None
    life_areas: Dict[str, LifeArea] = Field(default_factory=dict)


class ReportMetadata(_Frozen):
    computed_at: datetime
    source_unit_count: int


class Report(_Frozen):
    timeframe: Timeframe
    start_date: Date
    end_date: Date
    scores: FortuneScores
    symbols: SymbolSet = Field(default_factory=SymbolSet)
    markers: List[MarkerSummary] = Field(default_factory=list)
    aggregation_metadata: Optional[AggregationMetadata] = None
    phase_analysis: Optional[List[PhaseAnalysis]] = None
    significant_periods: Optional[List[SignificantPeriod]] = None
    heatmap: List[HeatmapEntry] = Field(default_factory=list)
    hourly_breakdown: Optional[List[HourlyBlock]] = None
    factual_basis: FactualBasis = Field(default_factory=FactualBasis)
    metadata: ReportMetadata

    def interactions(self):
        """Active interactions recorded in the factual basis, with their life area."""

        for area_name, area in self.factual_basis.life_areas.items():
            if not area.active:
                continue
            for interaction in area.interactions:
                yield area_name, interaction

    def has_marker(self, name: str) -> bool:
        return any(m.name == name for m in self.markers)


class MajorTheme(_Frozen):
    related_tag: Optional[str] = None
    interaction_type: str
    life_area: str
    favorability: Literal["favorable", "unfavorable", "mixed", "neutral"]
    frequency: int
    percentage: float
    year_spread: int
    years: List[int] = Field(default_factory=list)
    significance: Literal["very-high", "high", "medium"]
    label: str


class CategoryIntensity(_Frozen):
    name: Category
    opportunities: float
    challenges: float
    intensity: float


class SignificantYear(_Frozen):
    year: int
    age: int
    intensity: float
    type: PeriodType
    top_categories: List[CategoryIntensity] = Field(default_factory=list)
    scores: CategoryScore
