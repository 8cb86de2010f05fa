"""Bucket daily metric records into weekly/monthly periods for trend charts."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable, Sequence
from decimal import ROUND_HALF_UP, Decimal

from growthlens.models import (
    MetricRecord,
    PeriodBucket,
    TrendReport,
    TrendsPayload,
    TrendSummary,
)
from growthlens.periods import DEFAULT_LIMIT, check_period, normalize_limit, period_key

logger = logging.getLogger(__name__)


# ── Rounding ───────────────────────────────────────────────────────────────
def round_int(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(Decimal(value).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def round_2dp(value: float) -> float:
    """Round to two decimals, halves away from zero."""
    return round_int(value * 100) / 100


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


# ── Aggregation ────────────────────────────────────────────────────────────
def _aggregate(key: str, records: list[MetricRecord]) -> PeriodBucket:
    count = len(records)
    rates = [r.engagement_rate for r in records if r.engagement_rate is not None]
    return PeriodBucket(
        period_key=key,
        followers=round_int(sum(r.followers for r in records) / count),
        engagement_rate=round_2dp(_mean(rates)),
        reach=round_int(sum(r.reach or 0 for r in records) / count),
        impressions=round_int(sum(r.impressions or 0 for r in records) / count),
        likes=sum(r.likes or 0 for r in records),
        comments=sum(r.comments or 0 for r in records),
        shares=sum(r.shares or 0 for r in records),
    )


def change_percent(prev_followers: int, curr_followers: int) -> float:
    """Follower change vs the previous period, in percent to 2dp (0 if prev is 0)."""
    if prev_followers == 0:
        return 0.0
    ratio = (curr_followers - prev_followers) / prev_followers
    return round_int(ratio * 10000) / 100


def _summarize(buckets: list[PeriodBucket]) -> TrendSummary:
    if not buckets:
        return TrendSummary()

    best = lowest = buckets[0]
    for bucket in buckets[1:]:
        # Strict comparisons keep the earliest period on ties.
        if bucket.followers > best.followers:
            best = bucket
        if bucket.followers < lowest.followers:
            lowest = bucket

    return TrendSummary(
        avg_followers=round_int(_mean([b.followers for b in buckets])),
        avg_engagement=round_2dp(_mean([b.engagement_rate for b in buckets])),
        total_growth=buckets[-1].change_percent,
        best_period=best.period_key,
        lowest_period=lowest.period_key,
    )


def compute_trends(
    records: Iterable[MetricRecord],
    period: str = "weekly",
    limit: int | str | None = DEFAULT_LIMIT,
) -> TrendReport:
    """Aggregate *records* into the most recent *limit* periods.

    Steps:
    1. Key every record by ``YYYY-MM`` (monthly) or ``YYYY-Www`` (weekly).
    2. Sort keys ascending and keep the last *limit* of them; older periods
       are dropped, not merged.
    3. Average followers/reach/impressions and engagement (over measured
       records only), sum likes/comments/shares.
    4. Annotate each bucket with its follower change vs the previous kept
       bucket.  The first kept bucket is always 0, even when an older period
       was truncated away.

    Records are never mutated.
    """
    check_period(period)
    max_periods = normalize_limit(limit)

    grouped: dict[str, list[MetricRecord]] = defaultdict(list)
    for record in records:
        grouped[period_key(record.date, period)].append(record)

    if not grouped:
        logger.debug("No metric records; returning empty %s report", period)
        return TrendReport()

    kept_keys = sorted(grouped)[-max_periods:]
    buckets = [_aggregate(key, grouped[key]) for key in kept_keys]

    for prev, curr in zip(buckets, buckets[1:]):
        curr.change_percent = change_percent(prev.followers, curr.followers)

    logger.debug(
        "Bucketed into %d %s periods (%d available, limit=%d)",
        len(buckets), period, len(grouped), max_periods,
    )
    return TrendReport(buckets=buckets, summary=_summarize(buckets))


def build_trends_payload(
    records: Iterable[MetricRecord],
    period: str = "weekly",
    platform: str | None = None,
    limit: int | str | None = DEFAULT_LIMIT,
) -> TrendsPayload:
    """Filter by *platform* (exact match) and wrap the trend report for clients."""
    if platform:
        records = [r for r in records if r.platform == platform]
    report = compute_trends(records, period=period, limit=limit)
    return TrendsPayload(
        period=period,
        platform=platform or "all",
        data=report.buckets,
        summary=report.summary,
    )
