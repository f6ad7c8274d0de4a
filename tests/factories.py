"""Builders for facts and reports shared by the test modules."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

from fortune.schemas import (
    CategoryScore,
    CycleInfo,
    FactualBasis,
    FortuneScores,
    Interaction,
    LifeArea,
    MarkerSummary,
    Report,
    ReportMetadata,
    SymbolSet,
    TimeUnitFact,
)

FIXED_NOW = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
CATEGORY_NAMES = ("career", "wealth", "relationships", "wellness", "personal_growth")


def fixed_clock() -> datetime:
    return FIXED_NOW


def make_fact(**overrides) -> TimeUnitFact:
    data = {"date": "2024-03-10"}
    data.update(overrides)
    return TimeUnitFact(**data)


def make_interaction(type_="Clash", favorable=False, unfavorable=False, tags=()):
    return Interaction(
        type=type_,
        involves_favorable=favorable,
        involves_unfavorable=unfavorable,
        related_tags=list(tags),
    )


def make_score(opp, chal, net=None) -> CategoryScore:
    if net is None:
        net = max(0, min(100, opp - chal + 50))
    return CategoryScore(opportunities=opp, challenges=chal, net=net)


def make_scores(opp=50, chal=50, net=None, categories=None) -> FortuneScores:
    """Every category mirrors the overall score unless ``categories`` overrides it."""

    overall = make_score(opp, chal, net)
    per_category = {name: overall for name in CATEGORY_NAMES}
    for name, values in (categories or {}).items():
        per_category[name] = make_score(*values)
    return FortuneScores(overall=overall, **per_category)


def make_report(
    day,
    opp=50,
    chal=50,
    net=None,
    timeframe="daily",
    end=None,
    categories=None,
    markers=(),
    interactions=(),
    cycle=None,
    numbers=(),
    colors=(),
    directions=(),
    source_unit_count=1,
) -> Report:
    """A report with hand-picked scores.

    ``interactions`` is a sequence of ``(area, Interaction)`` pairs; every
    area mentioned is marked active.
    """

    if isinstance(day, str):
        day = date.fromisoformat(day)
    areas = {}
    for area, interaction in interactions:
        current = areas.get(area, [])
        areas[area] = current + [interaction]
    return Report(
        timeframe=timeframe,
        start_date=day,
        end_date=end or day,
        scores=make_scores(opp, chal, net, categories),
        symbols=SymbolSet(numbers=list(numbers), colors=list(colors), directions=list(directions)),
        markers=[MarkerSummary(name=m) for m in markers],
        factual_basis=FactualBasis(
            current_cycle=CycleInfo(tag=cycle[0], element=cycle[1]) if cycle else None,
            life_areas={area: LifeArea(active=True, interactions=items) for area, items in areas.items()},
        ),
        metadata=ReportMetadata(computed_at=FIXED_NOW, source_unit_count=source_unit_count),
    )


def daily_series(start, count, **kwargs):
    if isinstance(start, str):
        start = date.fromisoformat(start)
    return [make_report(start + timedelta(days=i), **kwargs) for i in range(count)]


def yearly_report(year, opp=50, chal=50, **kwargs) -> Report:
    return make_report(
        date(year, 1, 1),
        opp,
        chal,
        timeframe="yearly",
        end=date(year, 12, 31),
        source_unit_count=365,
        **kwargs,
    )
