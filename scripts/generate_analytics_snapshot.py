"""Compute and store an analytics snapshot from the command line (e.g. a nightly cron)."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from dotenv import load_dotenv

from crisis_alert.services.analytics_service import PERIOD_WINDOWS, AnalyticsService


logger = logging.getLogger("crisis_alert.scripts.generate_analytics_snapshot")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate incident, response-time and resource analytics")
    parser.add_argument(
        "--period",
        choices=sorted(PERIOD_WINDOWS),
        default="daily",
        help="Window of incidents to aggregate (default: daily)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the computed figures without storing them",
    )
    return parser.parse_args(argv)


def preview(period: str) -> dict:
    return {"period": period, **AnalyticsService().compute_snapshot(period)}


def generate(period: str, dry_run: bool) -> int:
    if dry_run:
        print(json.dumps(preview(period), indent=2, default=str))
        logger.info("Analytics dry run complete: period=%s", period)
        return 0

    snapshot = AnalyticsService().generate_snapshot(period)
    for entry in snapshot.entries:
        print(f"{entry.type}: stored {entry.id}")
    logger.info("Analytics snapshot stored: period=%s entries=%d", period, len(snapshot.entries))
    return 0


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    if not logging.getLogger().handlers:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    args = parse_args(argv)
    return generate(period=args.period, dry_run=args.dry_run)


if __name__ == "__main__":  # pragma: no cover - manual execution path
    sys.exit(main())
