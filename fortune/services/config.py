"""Engine thresholds and environment loading."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields
from typing import Optional, Tuple

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

ENV_PREFIX = "FORTUNE_"


@dataclass(slots=True)
class EngineConfig:
    trigger_frequency_threshold: float = 5.0
    marker_min_duration_days: int = 7
    significant_threshold: float = 75.0
    significant_min_units: int = 2
    cycle_transition_min_units: int = 180
    yearly_amplification: float = 1.2
    chapter_amplification: float = 1.35
    breakthrough_multiplier: float = 1.5
    valley_multiplier: float = 0.7
    volatility_divisor: float = 25.0
    volatility_cap: float = 0.4
    aggregate_floor: float = 40.0
    aggregate_ceiling: float = 110.0
    chapter_years: int = 20
    theme_top_k: int = 8

    @property
    def aggregate_clamp(self) -> Tuple[float, float]:
        return self.aggregate_floor, self.aggregate_ceiling


def _coerce(raw: str, current: object) -> object:
    if isinstance(current, bool):
        return raw.strip().lower() in {"1", "true", "yes", "on"}
    if isinstance(current, int):
        return int(raw)
    if isinstance(current, float):
        return float(raw)
    return raw


def load_engine_config(env_file: Optional[str] = None) -> EngineConfig:
    """Build an :class:`EngineConfig` from defaults overridden by ``FORTUNE_*`` variables.

    ``FORTUNE_TRIGGER_FREQUENCY_THRESHOLD=3`` overrides
    ``trigger_frequency_threshold`` and so on. A ``.env`` file is read first
    when present; variables already set in the process win.
    """

    load_dotenv(env_file)
    config = EngineConfig()
    for f in fields(EngineConfig):
        raw = os.getenv(f"{ENV_PREFIX}{f.name.upper()}")
        if raw is None or raw.strip() == "":
            continue
        try:
            value = _coerce(raw, getattr(config, f.name))
        except ValueError as exc:
            raise ValueError(f"Invalid value for {ENV_PREFIX}{f.name.upper()}: {raw!r}") from exc
        setattr(config, f.name, value)
        logger.debug("engine_config_override", extra={"field": f.name, "value": value})
    if config.aggregate_floor > config.aggregate_ceiling:
        raise ValueError("FORTUNE_AGGREGATE_FLOOR must not exceed FORTUNE_AGGREGATE_CEILING")
    return config
