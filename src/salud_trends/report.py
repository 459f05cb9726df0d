"""Reporte de una métrica listo para el tablero (estructuras serializables)."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import pandas as pd

from salud_trends.aggregate import daily_averages, latest_value, months, week_trend
from salud_trends.config import DEFAULT_CONFIG, AnalyticsConfig
from salud_trends.forecast import forecast
from salud_trends.model import (
    DailyAverage,
    DatedValue,
    Extremes,
    Forecast,
    MonthSummary,
    RegressionPoint,
    Sample,
    ValueAccessor,
    field,
)
from salud_trends.regression import linear_regression
from salud_trends.trends import (
    Trend,
    all_time_extremes,
    month_summary,
    moving_average,
    trend_direction,
    volatility,
    weekly_change,
)


@dataclass(frozen=True)
class MetricReport:
    """All KPIs and chart series of one metric."""

    metric: str
    latest: float | None
    daily: tuple[DailyAverage, ...]
    moving_average: tuple[DatedValue, ...]
    volatility: float
    weekly_change: float | None
    week_trend: float | None
    extremes: Extremes
    trend: Trend
    regression: tuple[RegressionPoint, ...]
    forecast: Forecast
    months: tuple[MonthSummary, ...]

    def to_dict(self) -> dict[str, Any]:
        """Plain JSON-serializable representation."""
        return {
            "metric": self.metric,
            "latest": self.latest,
            "daily": [d.to_dict() for d in self.daily],
            "moving_average": [m.to_dict() for m in self.moving_average],
            "volatility": self.volatility,
            "weekly_change": self.weekly_change,
            "week_trend": self.week_trend,
            "extremes": self.extremes.to_dict(),
            "trend": self.trend.value,
            "regression": [r.to_dict() for r in self.regression],
            "forecast": self.forecast.to_dict(),
            "months": [m.to_dict() for m in self.months],
        }


def build_report(
    samples: Sequence[Sample],
    value: ValueAccessor,
    config: AnalyticsConfig = DEFAULT_CONFIG,
    metric: str = "value",
) -> MetricReport:
    """Compute every statistic of one metric from a unified timeline.

    Trend statistics, regression and forecast run over the daily averages,
    so several readings on one day count once.

    Args:
        samples: Unified samples of one user.
        value: Field accessor.
        config: Engine parameters.
        metric: Label stored in the report.

    Returns:
        The assembled report.
    """
    daily = daily_averages(samples, value, cutoff_hour=config.cutoff_hour)
    daily_samples = [
        Sample(day=d.day, time=None, values={"value": d.value}) for d in daily
    ]
    daily_value = field("value")

    summaries = (
        month_summary(daily_samples, daily_value, ym) for ym in months(daily_samples)
    )
    return MetricReport(
        metric=metric,
        latest=latest_value(samples, value),
        daily=tuple(daily),
        moving_average=tuple(
            moving_average(daily_samples, daily_value, window=config.ma_window)
        ),
        volatility=volatility(
            daily_samples, daily_value, last_n=config.volatility_window
        ),
        weekly_change=weekly_change(daily_samples, daily_value),
        week_trend=week_trend(samples, value),
        extremes=all_time_extremes(daily_samples, daily_value),
        trend=trend_direction(
            daily_samples,
            daily_value,
            window=config.ma_window,
            threshold=config.trend_threshold,
            lookback=config.trend_lookback,
        ),
        regression=tuple(linear_regression(daily_samples, daily_value)),
        forecast=forecast(daily_samples, daily_value, config=config),
        months=tuple(s for s in summaries if s is not None),
    )


def daily_frame(report: MetricReport) -> pd.DataFrame:
    """Daily chart series: average, moving average and regression per date."""
    columns = ["date", "average", "moving_average", "regression"]
    if not report.daily:
        return pd.DataFrame(columns=columns)
    ma = {m.day: m.value for m in report.moving_average}
    reg = {r.day: r.value for r in report.regression}
    out = pd.DataFrame(
        {
            "date": [d.day for d in report.daily],
            "average": [d.value for d in report.daily],
            "moving_average": [ma.get(d.day) for d in report.daily],
            "regression": [reg.get(d.day) for d in report.daily],
        }
    )
    return out[columns].sort_values("date").reset_index(drop=True)


def forecast_frame(report: MetricReport) -> pd.DataFrame:
    """Forecast table, one row per projected day."""
    columns = ["date", "predicted", "simulated", "lower", "upper"]
    rows = [
        {
            "date": p.day,
            "predicted": p.predicted,
            "simulated": p.simulated,
            "lower": p.lower,
            "upper": p.upper,
        }
        for p in report.forecast.points
    ]
    return pd.DataFrame(rows, columns=columns)
