"""Domain models used across the package."""

from __future__ import annotations

from datetime import date as Date
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

PLATFORMS: tuple[str, ...] = (
    "instagram",
    "twitter",
    "tiktok",
    "linkedin",
    "youtube",
    "facebook",
    "threads",
    "bluesky",
)

Platform = Literal[
    "instagram", "twitter", "tiktok", "linkedin",
    "youtube", "facebook", "threads", "bluesky",
]
Period = Literal["weekly", "monthly"]


class MetricRecord(BaseModel):
    """One user/day/platform observation."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    date: Date
    platform: Platform
    followers: int = Field(ge=0)
    engagement_rate: float | None = Field(default=None, ge=0, le=100)
    reach: int | None = Field(default=None, ge=0)
    impressions: int | None = Field(default=None, ge=0)
    likes: int | None = Field(default=None, ge=0)
    comments: int | None = Field(default=None, ge=0)
    shares: int | None = Field(default=None, ge=0)

    @field_validator("date", mode="before")
    @classmethod
    def _strip_time(cls, value: Any) -> Any:
        # The API serialises date columns as full ISO timestamps.
        if isinstance(value, str) and "T" in value:
            return value.split("T", 1)[0]
        return value

    @field_validator(
        "engagement_rate", "reach", "impressions", "likes", "comments", "shares",
        mode="before",
    )
    @classmethod
    def _blank_is_absent(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class PeriodBucket(_WireModel):
    period_key: str = Field(alias="period")
    followers: int = 0
    engagement_rate: float = 0.0
    reach: int = 0
    impressions: int = 0
    likes: int = 0
    comments: int = 0
    shares: int = 0
    change_percent: float = Field(default=0.0, alias="changePercent")


class TrendSummary(_WireModel):
    avg_followers: int = Field(default=0, alias="avgFollowers")
    avg_engagement: float = Field(default=0.0, alias="avgEngagement")
    total_growth: float = Field(default=0.0, alias="totalGrowth")
    best_period: str | None = Field(default=None, alias="bestPeriod")
    lowest_period: str | None = Field(default=None, alias="lowestPeriod")


class TrendReport(_WireModel):
    buckets: list[PeriodBucket] = Field(default_factory=list)
    summary: TrendSummary = Field(default_factory=TrendSummary)


class TrendsPayload(_WireModel):
    """Response envelope served to chart clients."""

    period: Period
    platform: str = "all"
    data: list[PeriodBucket] = Field(default_factory=list)
    summary: TrendSummary = Field(default_factory=TrendSummary)


class GrowthTrend(_WireModel):
    direction: Literal["up", "down", "stable"] = "stable"
    percentage: float = 0.0


class MetricsSummary(_WireModel):
    total_followers: int = Field(default=0, alias="totalFollowers")
    total_followers_by_platform: dict[str, int] = Field(
        default_factory=dict, alias="totalFollowersByPlatform"
    )
    average_engagement: float = Field(default=0.0, alias="averageEngagement")
    total_reach: int = Field(default=0, alias="totalReach")
    total_impressions: int = Field(default=0, alias="totalImpressions")
    recent_metrics: list[MetricRecord] = Field(default_factory=list, alias="recentMetrics")
    growth_trend: GrowthTrend = Field(default_factory=GrowthTrend, alias="growthTrend")
