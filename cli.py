import json
import logging
import sys
from pathlib import Path
from typing import List

from pydantic import TypeAdapter, ValidationError

from fortune.schemas import Report, TimeUnitFact
from fortune.services.config import load_engine_config
from fortune.services.report_aggregator import ReportAggregator, RollupError, group_by_month

TIERS = ("daily", "monthly", "yearly", "chapter")
_FACTS = TypeAdapter(List[TimeUnitFact])


def build_report(facts: List[TimeUnitFact], tier: str, aggregator: ReportAggregator) -> Report:
    daily = aggregator.daily_series(facts)
    if not daily:
        raise RollupError("Input contains no facts")
    if tier == "daily":
        return daily[0]
    if tier == "monthly":
        return aggregator.for_monthly(daily)
    if tier == "yearly":
        monthly = [aggregator.for_monthly(group) for group in group_by_month(daily)]
        return aggregator.for_yearly(monthly)
    return aggregator.chapter_from_daily(daily, daily[0].start_date)


def main() -> None:
    in_path = Path(sys.argv[1])
    out_path = Path(sys.argv[2])
    tier = sys.argv[3] if len(sys.argv) > 3 else "monthly"
    if tier not in TIERS:
        print(f"Unknown tier '{tier}'. Must be one of: {', '.join(TIERS)}", file=sys.stderr)
        sys.exit(1)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s %(message)s")
    try:
        facts = _FACTS.validate_json(in_path.read_text(encoding="utf-8"))
        report = build_report(facts, tier, ReportAggregator(load_engine_config()))
    except (ValidationError, RollupError) as exc:
        print(f"Could not build {tier} report: {exc}", file=sys.stderr)
        sys.exit(1)

    out_path.write_text(report.model_dump_json(indent=2), encoding="utf-8")
    print(f"Wrote {tier} report → {out_path}")


if __name__ == "__main__":
    if len(sys.argv) < 3:
        print("Usage: python cli.py input.json output.json [daily|monthly|yearly|chapter]")
        sys.exit(1)
    main()
