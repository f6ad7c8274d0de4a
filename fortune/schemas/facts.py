from __future__ import annotations

from datetime import date as Date
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

LifeAreaName = Literal["social", "career", "personal", "innovation"]
InteractionSource = Literal["Daily", "Monthly", "Annual"]

_CATEGORY_NAMES = {"career", "wealth", "relationships", "wellness", "personal_growth"}
_AREA_NAMES = {"social", "career", "personal", "innovation"}


class Interaction(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str
    source: InteractionSource = "Daily"
    description: str = ""
    involves_favorable: bool = False
    involves_unfavorable: bool = False
    related_tags: List[str] = Field(default_factory=list)

    @property
    def favorability(self) -> str:
        if self.involves_favorable and self.involves_unfavorable:
            return "mixed"
        if self.involves_favorable:
            return "favorable"
        if self.involves_unfavorable:
            return "unfavorable"
        return "neutral"


class LifeArea(BaseModel):
    model_config = ConfigDict(frozen=True)

    active: bool = False
    interactions: List[Interaction] = Field(default_factory=list)


class CycleInfo(BaseModel):
    """The slow-moving personal cycle a unit falls in."""

    model_config = ConfigDict(frozen=True)

    tag: Optional[str] = None
    element: Optional[str] = None


class TimeUnitFact(BaseModel):
    """Validated facts for one day, as produced by the extraction layer."""

    model_config = ConfigDict(frozen=True)

    date: Date
    life_areas: Dict[LifeAreaName, LifeArea] = Field(default_factory=dict)
    temporal_elements: List[str] = Field(default_factory=list, max_length=3)
    favorable_elements: List[str] = Field(default_factory=list)
    unfavorable_elements: List[str] = Field(default_factory=list)
    current_cycle: Optional[CycleInfo] = None
    markers: List[str] = Field(default_factory=list)
    pillar_weights: Optional[Dict[str, Dict[str, float]]] = None

    # Natal snapshot, passed through untouched.
    natal_structure: Dict[str, Any] = Field(default_factory=dict)
    chart_strength: Optional[Dict[str, Any]] = None
    element_balance: Optional[Dict[str, int]] = None
    period_element: Optional[str] = None

    @field_validator("temporal_elements", "favorable_elements", "unfavorable_elements")
    @classmethod
    def _upper_elements(cls, value: List[str]) -> List[str]:
        return [v.strip().upper() for v in value]

    @field_validator("markers")
    @classmethod
    def _dedupe_markers(cls, value: List[str]) -> List[str]:
        return list(dict.fromkeys(v.strip() for v in value if v and v.strip()))

    @field_validator("pillar_weights")
    @classmethod
    def _check_weights(cls, value: Optional[Dict[str, Dict[str, float]]]) -> Optional[Dict[str, Dict[str, float]]]:
        if value is None:
            return value
        unknown = set(value) - _CATEGORY_NAMES
        if unknown:
            raise ValueError(f"Unknown categories in pillar_weights: {sorted(unknown)}")
        for category, row in value.items():
            bad_areas = set(row) - _AREA_NAMES
            if bad_areas:
                raise ValueError(f"Unknown life areas for {category}: {sorted(bad_areas)}")
            total = sum(row.values())
            if abs(total - 1.0) > 1e-6:
                raise ValueError(f"pillar_weights[{category!r}] must sum to 1.0, got {total:.4f}")
        return value

    def active_interactions(self) -> List[Interaction]:
        found: List[Interaction] = []
        for area in self.life_areas.values():
            if area.active:
                found.extend(area.interactions)
        return found
