from __future__ import annotations

import pytest

from fortune.services.config import EngineConfig, load_engine_config


def test_defaults():
    config = EngineConfig()

    assert config.trigger_frequency_threshold == 5.0
    assert config.cycle_transition_min_units == 180
    assert config.aggregate_clamp == (40.0, 110.0)
    assert config.chapter_years == 20


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("FORTUNE_SIGNIFICANT_MIN_UNITS", "1")
    monkeypatch.setenv("FORTUNE_YEARLY_AMPLIFICATION", "1.1")

    config = load_engine_config()

    assert config.significant_min_units == 1
    assert config.yearly_amplification == 1.1
    assert config.chapter_amplification == 1.35


def test_dotenv_file_is_read(monkeypatch, tmp_path):
    monkeypatch.delenv("FORTUNE_THEME_TOP_K", raising=False)
    env_file = tmp_path / ".env"
    env_file.write_text("FORTUNE_THEME_TOP_K=3\n", encoding="utf-8")

    assert load_engine_config(str(env_file)).theme_top_k == 3


def test_invalid_value_is_rejected(monkeypatch):
    monkeypatch.setenv("FORTUNE_CHAPTER_YEARS", "twenty")

    with pytest.raises(ValueError):
        load_engine_config()


def test_inverted_clamp_is_rejected(monkeypatch):
    monkeypatch.setenv("FORTUNE_AGGREGATE_FLOOR", "120")

    with pytest.raises(ValueError):
        load_engine_config()
