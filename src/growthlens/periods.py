"""Period keys and request-parameter normalisation for trend bucketing."""

from __future__ import annotations

import math
import re
from datetime import date

DEFAULT_LIMIT = 12
PERIODS: tuple[str, ...] = ("weekly", "monthly")

_LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)")


def month_key(day: date) -> str:
    """``YYYY-MM`` for the calendar month containing *day*."""
    return f"{day.year}-{day.month:02d}"


def week_number(day: date) -> int:
    """Week-of-year with Sunday-start weeks and January 1 always in week 1.

    ``ceil((day_of_year + jan1_weekday + 1) / 7)`` where ``day_of_year`` is
    0-based and ``jan1_weekday`` counts from Sunday = 0.  This is not
    ISO-8601: there is no cross-year week 1, so late-December dates can land
    in week 53 or 54.
    """
    jan1 = date(day.year, 1, 1)
    day_of_year = (day - jan1).days
    jan1_weekday = (jan1.weekday() + 1) % 7
    return -(-(day_of_year + jan1_weekday + 1) // 7)


def week_key(day: date) -> str:
    """``YYYY-Www`` using :func:`week_number`."""
    return f"{day.year}-W{week_number(day):02d}"


def check_period(period: str) -> None:
    if period not in PERIODS:
        raise ValueError(f"Unknown period {period!r}; expected one of {PERIODS}.")


def period_key(day: date, period: str) -> str:
    """Return the bucket label for *day* under *period* (weekly/monthly)."""
    check_period(period)
    if period == "monthly":
        return month_key(day)
    return week_key(day)


def normalize_limit(limit: int | str | None) -> int:
    """Coerce a user-supplied period limit to a positive int.

    Strings are read by their leading integer (``"5abc"`` -> 5).  Anything
    non-numeric, zero or negative falls back to :data:`DEFAULT_LIMIT`.
    """
    if limit is None or isinstance(limit, bool):
        return DEFAULT_LIMIT
    if isinstance(limit, (int, float)):
        if not math.isfinite(limit):
            return DEFAULT_LIMIT
        value = int(limit)
    else:
        match = _LEADING_INT_RE.match(str(limit))
        if not match:
            return DEFAULT_LIMIT
        value = int(match.group(1))
    return value if value > 0 else DEFAULT_LIMIT
