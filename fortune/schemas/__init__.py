from .facts import CycleInfo, Interaction, LifeArea, TimeUnitFact

from .reports import (
    AggregationMetadata,
    CategoryScore,
    CycleTransition,
    FactualBasis,
    FilteringStats,
    FortuneScores,
    HeatmapEntry,
    HourlyBlock,
    MajorTheme,
    MarkerSummary,
    MarkerWindow,
    PhaseAnalysis,
    Report,
    ReportMetadata,
    SignificantPeriod,
    SignificantYear,
    SymbolFrequency,
    SymbolSet,
    TIER_RANK,
    TriggerPattern,
    VolatilityStats,
)
