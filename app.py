"""
app.py
──────
SMT Reflow Energy Waste Monitor — command-line entry point.

  python app.py analyze export.csv             → waste summary report (JSON)
  python app.py analyze --simulate --intervals 60 --findings 20
  python app.py analyze export.csv --daily --hourly   → day rollup, idle profile
  python app.py simulate day.csv --rows 8640   → synthetic logger export

Startup sequence:
  1. Configure logging from LOG_LEVEL
  2. Load readings (CSV export or simulator), sorted by timestamp
  3. Run the analysis and print results to stdout
"""
from __future__ import annotations

import argparse
import logging
import sys

from config.settings import settings
from src.analytics.aggregation import hourly_profile, stats_to_frame, summarize_daily, summarize_intervals
from src.analytics.report import generate_waste_summary
from src.analytics.waste import rank_findings, scan_readings
from src.data.loader import load_csv
from src.data.parser import InvalidTimestamp
from src.data.simulator import generate_raw_rows, generate_readings, to_dataframe

logger = logging.getLogger("app")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="SMT reflow oven energy waste analysis")
    sub = parser.add_subparsers(dest="command", required=True)

    analyze = sub.add_parser("analyze", help="Analyze a data-logger export")
    analyze.add_argument("csv", nargs="?", help="Path to the logger CSV export")
    analyze.add_argument("--simulate", action="store_true", help="Analyze a simulated day instead of a CSV")
    analyze.add_argument("--period", default=settings.DEFAULT_PERIOD, help="Report period label")
    analyze.add_argument(
        "--intervals",
        type=int,
        nargs="?",
        const=settings.DEFAULT_INTERVAL_MINUTES,
        metavar="MINUTES",
        help="Also print per-interval statistics for buckets of this size",
    )
    analyze.add_argument("--findings", type=int, metavar="N", help="Also print the N most severe findings")
    analyze.add_argument("--daily", action="store_true", help="Also print the per-day energy rollup")
    analyze.add_argument("--hourly", action="store_true", help="Also print the hour-of-day idle profile")
    analyze.add_argument(
        "--strict",
        action="store_true",
        help="Abort on the first row with an invalid timestamp instead of skipping it",
    )

    simulate = sub.add_parser("simulate", help="Write a simulated logger export")
    simulate.add_argument("out", help="Output CSV path")
    simulate.add_argument("--rows", type=int, default=settings.SIMULATION_ROWS)
    simulate.add_argument("--seed", type=int, default=settings.SIMULATION_SEED)

    return parser


def cmd_analyze(args: argparse.Namespace) -> int:
    if args.simulate:
        readings = generate_readings()
    elif args.csv:
        try:
            readings = load_csv(args.csv, skip_invalid=not args.strict)
        except InvalidTimestamp as exc:
            logger.error(f"Aborting: {exc}")
            return 1
    else:
        logger.error("Provide a CSV path or --simulate")
        return 2

    report = generate_waste_summary(readings, period=args.period)
    print(report.model_dump_json(indent=2))

    if args.intervals:
        frame = stats_to_frame(summarize_intervals(readings, args.intervals))
        print(frame.to_string(index=False))

    if args.daily:
        print(summarize_daily(readings).to_string(index=False))

    if args.hourly:
        print(hourly_profile(readings).to_string(index=False))

    if args.findings:
        for finding in rank_findings(scan_readings(readings))[: args.findings]:
            print(f"[{finding.severity.value}] {finding.category.value}: {finding.message}")

    return 0


def cmd_simulate(args: argparse.Namespace) -> int:
    rows = generate_raw_rows(count=args.rows, seed=args.seed)
    to_dataframe(rows).to_csv(args.out, index=False)
    logger.info(f"Wrote {len(rows)} simulated rows to {args.out}")
    return 0


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    args = build_parser().parse_args(argv)
    if args.command == "simulate":
        return cmd_simulate(args)
    return cmd_analyze(args)


if __name__ == "__main__":
    sys.exit(main())
