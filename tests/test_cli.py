from __future__ import annotations

import json
import sys

import pytest

import cli


def _facts(days):
    return [{"date": f"2024-01-{d:02d}", "temporal_elements": ["WOOD"], "markers": ["nobleman"]} for d in days]


def _run(monkeypatch, tmp_path, payload, *extra):
    in_path = tmp_path / "facts.json"
    out_path = tmp_path / "report.json"
    in_path.write_text(json.dumps(payload), encoding="utf-8")
    monkeypatch.setattr(sys, "argv", ["cli.py", str(in_path), str(out_path), *extra])
    cli.main()
    return json.loads(out_path.read_text(encoding="utf-8"))


def test_monthly_report_is_written(monkeypatch, tmp_path):
    report = _run(monkeypatch, tmp_path, _facts(range(1, 11)))

    assert report["timeframe"] == "monthly"
    assert report["start_date"] == "2024-01-01"
    assert report["end_date"] == "2024-01-10"
    assert report["markers"][0]["name"] == "nobleman"
    assert len(report["heatmap"]) == 10


def test_daily_tier(monkeypatch, tmp_path):
    report = _run(monkeypatch, tmp_path, _facts([3]), "daily")

    assert report["timeframe"] == "daily"
    assert len(report["hourly_breakdown"]) == 12


def test_invalid_facts_exit_non_zero(monkeypatch, tmp_path, capsys):
    with pytest.raises(SystemExit) as exc:
        _run(monkeypatch, tmp_path, [{"date": "2024-02-30"}])

    assert exc.value.code == 1
    assert "Could not build" in capsys.readouterr().err


def test_unknown_tier_exits_non_zero(monkeypatch, tmp_path):
    with pytest.raises(SystemExit):
        _run(monkeypatch, tmp_path, _facts([1]), "weekly")
