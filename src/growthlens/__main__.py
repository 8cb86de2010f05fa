"""CLI entry-point: ``python -m growthlens trends`` / ``python -m growthlens summary``."""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import UTC, date, datetime
from pathlib import Path

from growthlens import config
from growthlens.api_client import MetricsAPIError
from growthlens.loader import RecordLoadError
from growthlens.models import PLATFORMS
from growthlens.periods import PERIODS
from growthlens.pipeline import (
    FORMATS,
    SourceUnavailable,
    run_summary,
    run_trends,
    setup_logging,
)

logger = logging.getLogger(__name__)

_SUFFIXES = {"json": "json", "markdown": "md", "html": "html"}


def _saved_path(stem: str, fmt: str) -> Path:
    """Timestamped file under the configured output dir."""
    stamp = datetime.now(UTC).strftime("%Y%m%d-%H%M%S")
    return config.OUTPUT_DIR / f"{stem}-{stamp}.{_SUFFIXES[fmt]}"


def _add_source_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--input",
        type=Path,
        help="CSV, JSON or YAML export of metric records. "
        "Without it the metrics API is used (GROWTHLENS_API_URL / _TOKEN).",
    )
    parser.add_argument("--platform", choices=PLATFORMS, help="Only this platform.")
    parser.add_argument("--start", type=date.fromisoformat, help="First day (YYYY-MM-DD).")
    parser.add_argument("--end", type=date.fromisoformat, help="Last day (YYYY-MM-DD).")
    parser.add_argument(
        "--format",
        dest="fmt",
        choices=FORMATS,
        default="json",
        help="Output format (default: json).",
    )
    out = parser.add_mutually_exclusive_group()
    out.add_argument("--out", type=Path, help="Write to this file instead of stdout.")
    out.add_argument(
        "--save",
        action="store_true",
        help="Write a timestamped file under GROWTHLENS_OUTPUT_DIR.",
    )


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="growthlens",
        description="Weekly/monthly growth trends from daily social-media metrics.",
    )
    sub = parser.add_subparsers(dest="command")

    # ── trends ─────────────────────────────────────────────────────────
    trends_parser = sub.add_parser("trends", help="Per-period trend report.")
    _add_source_args(trends_parser)
    trends_parser.add_argument(
        "--period",
        choices=PERIODS,
        default=config.DEFAULT_PERIOD,
        help=f"Bucket size (default: {config.DEFAULT_PERIOD}).",
    )
    trends_parser.add_argument(
        "--limit",
        default=str(config.DEFAULT_LIMIT),
        help=f"Most recent periods to keep (default: {config.DEFAULT_LIMIT}).",
    )

    # ── summary ────────────────────────────────────────────────────────
    summary_parser = sub.add_parser("summary", help="Totals and overall growth trend.")
    _add_source_args(summary_parser)

    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        sys.exit(1)

    setup_logging()
    out_path = _saved_path(args.command, args.fmt) if args.save else args.out
    common = dict(
        input_path=args.input,
        platform=args.platform,
        start=args.start,
        end=args.end,
        fmt=args.fmt,
        out_path=out_path,
    )

    try:
        if args.command == "trends":
            run_trends(period=args.period, limit=args.limit, **common)
        else:
            run_summary(**common)
    except (SourceUnavailable, RecordLoadError, MetricsAPIError) as exc:
        logger.error("%s", exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
