"""Print RTP, workload and trend reports for users in a JSON file."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from rtp_engine.adapters import json_adapter
from rtp_engine.report import build_report
from rtp_engine.schema import Tier
from rtp_engine.trends import SCALES


def _parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the RTP engine over a JSON user file")
    parser.add_argument("--data", required=True, help="Path to JSON users file")
    parser.add_argument("--user", help="Only report on the user with this name")
    parser.add_argument("--now", help="ISO timestamp to evaluate at (default: current time)")
    parser.add_argument("--tier", choices=[tier.value for tier in Tier], help="Restrict RTP to one tier")
    parser.add_argument("--scale", choices=SCALES, default="month", help="Trend period size")
    parser.add_argument("--log-level", default="WARNING", help="Logging level for engine diagnostics")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stderr,
    )

    try:
        now = datetime.fromisoformat(args.now) if args.now else datetime.now()
        users = json_adapter.parse(args.data)
    except ValueError as exc:
        print(f"Input error: {exc}", file=sys.stderr)
        return 1

    if args.user:
        users = [user for user in users if user.name == args.user]
        if not users:
            print(f"Input error: no user named '{args.user}'", file=sys.stderr)
            return 1

    tier = Tier(args.tier) if args.tier else None
    reports = [build_report(user, now, filter_tier=tier, scale=args.scale) for user in users]
    print(json.dumps(reports, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
