"""Load metric records from CSV, JSON or YAML exports and filter them."""

from __future__ import annotations

import csv
import json
import logging
from datetime import date
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from growthlens.models import MetricRecord

logger = logging.getLogger(__name__)


class RecordLoadError(Exception):
    """Raised when a metrics file cannot be parsed into records."""


def _read_csv(path: Path) -> list[dict[str, Any]]:
    # Spreadsheet exports often start with a BOM.
    with open(path, newline="", encoding="utf-8-sig") as fh:
        return list(csv.DictReader(fh))


def _read_json(path: Path) -> Any:
    with open(path, encoding="utf-8") as fh:
        return json.load(fh)


def _read_yaml(path: Path) -> Any:
    with open(path, encoding="utf-8") as fh:
        return yaml.safe_load(fh)


_READERS = {
    ".csv": _read_csv,
    ".json": _read_json,
    ".yml": _read_yaml,
    ".yaml": _read_yaml,
}


def _rows(raw: Any, path: Path) -> list[dict[str, Any]]:
    """Accept either a bare list or ``{"metrics": [...]}``."""
    if raw is None:
        return []
    if isinstance(raw, dict):
        raw = raw.get("metrics", [])
    if not isinstance(raw, list):
        raise RecordLoadError(f"{path}: expected a list of metric records")
    return raw


def parse_records(rows: list[dict[str, Any]], source: str = "<input>") -> list[MetricRecord]:
    """Validate raw dicts into :class:`MetricRecord` objects."""
    records: list[MetricRecord] = []
    for idx, row in enumerate(rows):
        try:
            records.append(MetricRecord.model_validate(row))
        except ValidationError as exc:
            raise RecordLoadError(f"{source}: invalid record #{idx}: {exc}") from exc
    return records


def load_records(path: str | Path) -> list[MetricRecord]:
    """Read metric records from *path*; the suffix picks the format.

    A missing file is logged and yields an empty list.
    """
    p = Path(path)
    if not p.exists():
        logger.warning("File not found, skipping: %s", p)
        return []

    reader = _READERS.get(p.suffix.lower())
    if reader is None:
        raise RecordLoadError(
            f"{p}: unsupported format {p.suffix!r} (use .csv, .json, .yml or .yaml)"
        )

    try:
        raw = reader(p)
    except (json.JSONDecodeError, yaml.YAMLError, csv.Error, UnicodeDecodeError) as exc:
        raise RecordLoadError(f"{p}: could not parse file: {exc}") from exc
    except OSError as exc:
        raise RecordLoadError(f"{p}: could not read file: {exc}") from exc

    records = parse_records(_rows(raw, p), source=str(p))
    logger.info("Loaded %d metric records from %s", len(records), p)
    return records


def filter_records(
    records: list[MetricRecord],
    platform: str | None = None,
    start: date | None = None,
    end: date | None = None,
) -> list[MetricRecord]:
    """Keep records on *platform* within ``[start, end]``, sorted by date."""
    kept = [
        r
        for r in records
        if (not platform or r.platform == platform)
        and (start is None or r.date >= start)
        and (end is None or r.date <= end)
    ]
    kept.sort(key=lambda r: r.date)
    logger.debug("Filter: %d total → %d kept", len(records), len(kept))
    return kept
