"""Pipeline orchestration — wires source → filter → aggregate → render → output."""

from __future__ import annotations

import logging
import sys
from datetime import date
from pathlib import Path

from growthlens import config
from growthlens.api_client import MetricsClient
from growthlens.loader import filter_records, load_records
from growthlens.models import MetricRecord
from growthlens.render import (
    markdown_to_html,
    summary_markdown,
    to_json,
    trends_markdown,
)
from growthlens.summary import summarize_metrics
from growthlens.trends import build_trends_payload

logger = logging.getLogger(__name__)

FORMATS = ("json", "markdown", "html")


class SourceUnavailable(Exception):
    """Raised when neither an input file nor a configured API is available."""


def setup_logging(level: str = config.LOG_LEVEL) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )


def fetch_records(
    input_path: Path | None = None,
    platform: str | None = None,
    start: date | None = None,
    end: date | None = None,
) -> list[MetricRecord]:
    """Load records from *input_path*, or from the metrics API when configured.

    Filters are applied locally in both cases so a file export and the API
    yield the same selection.
    """
    if input_path is not None:
        records = load_records(input_path)
    elif config.api_enabled():
        client = MetricsClient(
            base_url=config.API_URL,
            token=config.API_TOKEN,
            timeout=config.API_TIMEOUT,
        )
        records = client.fetch_metrics(platform=platform, start=start, end=end)
    else:
        raise SourceUnavailable(
            "No metrics source: pass --input or set GROWTHLENS_API_URL "
            "and GROWTHLENS_API_TOKEN."
        )
    return filter_records(records, platform=platform, start=start, end=end)


def _emit(text: str, out_path: Path | None) -> None:
    if out_path is None:
        sys.stdout.write(text)
        if not text.endswith("\n"):
            sys.stdout.write("\n")
        return
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(text, encoding="utf-8")
    logger.info("Wrote %s (%d chars)", out_path, len(text))


def run_trends(
    *,
    input_path: Path | None = None,
    period: str = config.DEFAULT_PERIOD,
    platform: str | None = None,
    limit: int | str | None = config.DEFAULT_LIMIT,
    start: date | None = None,
    end: date | None = None,
    fmt: str = "json",
    out_path: Path | None = None,
) -> str:
    """Build the trends payload for the selection and emit it in *fmt*."""
    logger.info(
        "=== trends [period=%s platform=%s limit=%s] ===",
        period, platform or "all", limit,
    )
    records = fetch_records(input_path, platform=platform, start=start, end=end)
    payload = build_trends_payload(records, period=period, platform=platform, limit=limit)
    logger.info(
        "%d records → %d periods; best=%s lowest=%s",
        len(records), len(payload.data),
        payload.summary.best_period, payload.summary.lowest_period,
    )

    if fmt == "json":
        text = to_json(payload)
    elif fmt == "markdown":
        text = trends_markdown(payload)
    else:
        text = markdown_to_html(trends_markdown(payload), title=f"{period} trends")
    _emit(text, out_path)
    return text


def run_summary(
    *,
    input_path: Path | None = None,
    platform: str | None = None,
    start: date | None = None,
    end: date | None = None,
    fmt: str = "json",
    out_path: Path | None = None,
) -> str:
    """Summarise every selected record and emit it in *fmt*."""
    logger.info("=== summary [platform=%s] ===", platform or "all")
    records = fetch_records(input_path, platform=platform, start=start, end=end)
    summary = summarize_metrics(records)
    logger.info(
        "%d records; growth %s (%.2f%%)",
        len(records), summary.growth_trend.direction, summary.growth_trend.percentage,
    )

    if fmt == "json":
        text = to_json(summary)
    elif fmt == "markdown":
        text = summary_markdown(summary)
    else:
        text = markdown_to_html(summary_markdown(summary), title="metrics summary")
    _emit(text, out_path)
    return text
