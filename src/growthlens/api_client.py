"""Minimal read-only client for the dashboard's metrics REST API."""

from __future__ import annotations

import logging
import time
from datetime import date
from typing import Any

import requests
from pydantic import ValidationError

from growthlens.models import MetricRecord

logger = logging.getLogger(__name__)

_METRICS_PATH = "/api/metrics"
_DEFAULT_RETRY_AFTER = 60


class MetricsAPIError(Exception):
    """Raised when the metrics API returns an unexpected response."""


def _retry_after(header: str | None) -> int:
    """Seconds to wait; HTTP-date or missing values fall back to the default."""
    if header and header.strip().isdigit():
        return int(header)
    return _DEFAULT_RETRY_AFTER


class MetricsClient:
    """Thin wrapper around ``GET /api/metrics``."""

    def __init__(self, base_url: str, token: str, timeout: int = 30) -> None:
        if not token:
            raise ValueError("GROWTHLENS_API_TOKEN is required but was empty.")
        self._url = base_url.rstrip("/") + _METRICS_PATH
        self._timeout = timeout
        self._session = requests.Session()
        self._session.headers.update({"Authorization": f"Bearer {token}"})

    # ── public ──────────────────────────────────────────────────────────
    def fetch_metrics(
        self,
        platform: str | None = None,
        start: date | None = None,
        end: date | None = None,
    ) -> list[MetricRecord]:
        """Fetch the caller's metric records, ordered by date by the server."""
        params: dict[str, Any] = {}
        if platform:
            params["platform"] = platform
        if start is not None:
            params["startDate"] = start.isoformat()
        if end is not None:
            params["endDate"] = end.isoformat()

        data = self._get(params)
        if not isinstance(data, list):
            raise MetricsAPIError(
                f"Expected a JSON list from {self._url}, got {type(data).__name__}"
            )

        records: list[MetricRecord] = []
        for idx, raw in enumerate(data):
            try:
                records.append(MetricRecord.model_validate(raw))
            except ValidationError as exc:
                raise MetricsAPIError(f"Invalid metric record #{idx}: {exc}") from exc

        logger.info("Fetched %d metric records from %s", len(records), self._url)
        return records

    # ── private ─────────────────────────────────────────────────────────
    def _send(self, params: dict[str, Any]) -> requests.Response:
        try:
            return self._session.get(self._url, params=params, timeout=self._timeout)
        except requests.RequestException as exc:
            raise MetricsAPIError(f"Request to {self._url} failed: {exc}") from exc

    def _get(self, params: dict[str, Any]) -> Any:
        resp = self._send(params)
        if resp.status_code == 429:
            retry_after = _retry_after(resp.headers.get("Retry-After"))
            logger.warning("Rate-limited; sleeping %ds", retry_after)
            time.sleep(retry_after)
            resp = self._send(params)
        if resp.status_code != 200:
            raise MetricsAPIError(
                f"Metrics API returned {resp.status_code}: {resp.text[:500]}"
            )
        try:
            return resp.json()
        except ValueError as exc:
            raise MetricsAPIError(
                f"Metrics API returned a non-JSON body: {resp.text[:200]}"
            ) from exc
