"""Estadísticas de tendencia sobre una serie ordenada por fecha."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import timedelta
from enum import Enum

import pandas as pd

from salud_trends.config import DEFAULT_CONFIG
from salud_trends.logging_setup import get_logger
from salud_trends.model import (
    DatedValue,
    Extremes,
    MonthSummary,
    Sample,
    ValueAccessor,
)

logger = get_logger(__name__)


class Trend(str, Enum):
    """Qualitative direction of the recent moving average."""

    UP = "up"
    DOWN = "down"
    STABLE = "stable"


def series(samples: Iterable[Sample], value: ValueAccessor) -> list[DatedValue]:
    """Chronological non-null values of one field.

    Ties on the same date keep the order of time, then input order.
    """
    rows = [(s.day, s.clock, value(s)) for s in samples]
    rows = [r for r in rows if r[2] is not None]
    rows.sort(key=lambda r: (r[0], r[1]))
    return [DatedValue(day=day, value=float(v)) for day, _, v in rows]


def moving_average(
    samples: Iterable[Sample],
    value: ValueAccessor,
    window: int = DEFAULT_CONFIG.ma_window,
) -> list[DatedValue]:
    """Trailing moving average, one point per sample.

    The first ``window - 1`` points average however many samples exist so
    far. Values are rounded to 1 decimal.
    """
    points = series(samples, value)
    if not points:
        return []
    s = pd.Series([p.value for p in points], dtype="float64")
    avg = s.rolling(window=window, min_periods=1).mean().round(1)
    return [
        DatedValue(day=p.day, value=float(a)) for p, a in zip(points, avg, strict=True)
    ]


def volatility(
    samples: Iterable[Sample],
    value: ValueAccessor,
    last_n: int = DEFAULT_CONFIG.volatility_window,
) -> float:
    """Population standard deviation of the last ``last_n`` samples.

    Returns 0.0 for an empty series.
    """
    points = series(samples, value)
    if not points:
        return 0.0
    s = pd.Series([p.value for p in points[-last_n:]], dtype="float64")
    return round(float(s.std(ddof=0)), 2)


def weekly_change(samples: Iterable[Sample], value: ValueAccessor) -> float | None:
    """Latest value minus the value closest to seven days earlier.

    The comparison point is the sample whose date is nearest to
    ``latest - 7 days``. Returns None with fewer than two samples or when the
    nearest sample falls on the latest date.
    """
    points = series(samples, value)
    if len(points) < 2:
        return None
    latest = points[-1]
    target = latest.day - timedelta(days=7)

    closest = points[0]
    closest_diff: int | None = None
    for p in points:
        diff = abs((p.day - target).days)
        if closest_diff is None or diff < closest_diff:
            closest, closest_diff = p, diff

    if closest.day == latest.day:
        logger.debug("weekly_change_no_reference", latest=str(latest.day))
        return None
    return round(latest.value - closest.value, 1)


def all_time_extremes(samples: Iterable[Sample], value: ValueAccessor) -> Extremes:
    """Lowest and highest value with their dates; first occurrence wins ties."""
    points = series(samples, value)
    if not points:
        return Extremes(min=None, max=None)
    lo = hi = points[0]
    for p in points[1:]:
        if p.value < lo.value:
            lo = p
        if p.value > hi.value:
            hi = p
    return Extremes(min=lo, max=hi)


def _month_values(
    samples: Iterable[Sample], value: ValueAccessor, year_month: str
) -> list[float]:
    return [
        p.value for p in series(samples, value) if p.day.isoformat().startswith(year_month)
    ]


def monthly_average(
    samples: Iterable[Sample], value: ValueAccessor, year_month: str
) -> float | None:
    """Mean of a ``YYYY-MM`` month rounded to 1 decimal, None if empty."""
    values = _month_values(samples, value, year_month)
    if not values:
        return None
    return round(sum(values) / len(values), 1)


def month_summary(
    samples: Iterable[Sample], value: ValueAccessor, year_month: str
) -> MonthSummary | None:
    """Mean/min/max/count of a ``YYYY-MM`` month, None if empty."""
    values = _month_values(samples, value, year_month)
    if not values:
        return None
    return MonthSummary(
        month=year_month,
        avg=round(sum(values) / len(values), 1),
        min=min(values),
        max=max(values),
        count=len(values),
    )


def classify_trend(
    averages: Sequence[float],
    threshold: float = DEFAULT_CONFIG.trend_threshold,
    lookback: int = DEFAULT_CONFIG.trend_lookback,
) -> Trend:
    """Classify the change across the last ``lookback`` moving-average points.

    Fewer points than ``lookback`` is reported as stable.
    """
    if len(averages) < lookback:
        return Trend.STABLE
    recent = averages[-lookback:]
    diff = recent[-1] - recent[0]
    if diff > threshold:
        return Trend.UP
    if diff < -threshold:
        return Trend.DOWN
    return Trend.STABLE


def trend_direction(
    samples: Iterable[Sample],
    value: ValueAccessor,
    window: int = DEFAULT_CONFIG.ma_window,
    threshold: float = DEFAULT_CONFIG.trend_threshold,
    lookback: int = DEFAULT_CONFIG.trend_lookback,
) -> Trend:
    """Direction of the moving average over its last few points."""
    averages = [p.value for p in moving_average(samples, value, window=window)]
    return classify_trend(averages, threshold=threshold, lookback=lookback)
