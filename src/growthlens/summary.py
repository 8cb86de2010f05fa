"""Whole-history totals and growth direction across every metric record."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable

from growthlens.models import GrowthTrend, MetricRecord, MetricsSummary
from growthlens.trends import round_2dp

logger = logging.getLogger(__name__)

RECENT_COUNT = 7
# Growth within ±0.5 % counts as flat.
_STABLE_BAND = 0.5


def growth_direction(percentage: float) -> str:
    if percentage > _STABLE_BAND:
        return "up"
    if percentage < -_STABLE_BAND:
        return "down"
    return "stable"


def growth_trend(oldest_followers: int, newest_followers: int) -> GrowthTrend:
    """Percent change from the oldest to the newest follower count."""
    if oldest_followers == 0:
        pct = 0.0
    else:
        pct = (newest_followers - oldest_followers) / oldest_followers * 100
    return GrowthTrend(direction=growth_direction(pct), percentage=round_2dp(pct))


def summarize_metrics(records: Iterable[MetricRecord]) -> MetricsSummary:
    """Totals, per-platform followers, mean engagement and overall growth.

    Records are ordered by date (stable, so same-day records keep their input
    order) before the recent window and growth endpoints are taken.
    """
    ordered = sorted(records, key=lambda r: r.date)
    if not ordered:
        return MetricsSummary()

    by_platform: dict[str, int] = defaultdict(int)
    for record in ordered:
        by_platform[record.platform] += record.followers

    rates = [r.engagement_rate for r in ordered if r.engagement_rate is not None]
    avg_engagement = sum(rates) / len(rates) if rates else 0.0

    summary = MetricsSummary(
        total_followers=sum(r.followers for r in ordered),
        total_followers_by_platform=dict(by_platform),
        average_engagement=round_2dp(avg_engagement),
        total_reach=sum(r.reach or 0 for r in ordered),
        total_impressions=sum(r.impressions or 0 for r in ordered),
        recent_metrics=ordered[-RECENT_COUNT:],
        growth_trend=growth_trend(ordered[0].followers, ordered[-1].followers),
    )
    logger.debug(
        "Summarised %d records across %d platforms; growth %s",
        len(ordered), len(by_platform), summary.growth_trend.direction,
    )
    return summary
