"""Pronóstico con suavizado exponencial doble amortiguado (Holt amortiguado).

The model keeps a level and a trend:

    level_t = alpha * y_t + (1 - alpha) * (level_{t-1} + phi * trend_{t-1})
    trend_t = beta * (level_t - level_{t-1}) + (1 - beta) * phi * trend_{t-1}

and projects ``level + (phi + phi^2 + ... + phi^k) * trend`` for step ``k``.
The damped sum converges to ``phi / (1 - phi)``, so the projected trend
flattens out instead of extrapolating linearly.

On top of the point estimate a fixed waveform scaled by the historical
day-to-day swing gives a plausible daily wiggle, and a band of
``z * swing * sqrt(k)`` (capped) gives the uncertainty.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from datetime import timedelta

from salud_trends.config import DEFAULT_CONFIG, AnalyticsConfig
from salud_trends.logging_setup import get_logger
from salud_trends.model import Forecast, ForecastPoint, Sample, ValueAccessor
from salud_trends.trends import series

logger = get_logger(__name__)

MIN_HISTORY = 3
DEFAULT_SWING = 0.3
# Pasos usados para estimar la tendencia inicial
_TREND_SEED_STEPS = 6


def daily_swing(values: Sequence[float]) -> float:
    """Root mean square of consecutive differences.

    Falls back to 0.3 when there is no difference to measure.
    """
    deltas = [b - a for a, b in zip(values, values[1:])]
    if not deltas:
        return DEFAULT_SWING
    return math.sqrt(sum(d * d for d in deltas) / len(deltas))


def damped_trend_sum(phi: float, k: int) -> float:
    """Return ``phi + phi^2 + ... + phi^k``."""
    return sum(phi**i for i in range(1, k + 1))


def oscillation(swing: float, k: int) -> float:
    """Deterministic daily wiggle for forecast step ``k``."""
    return swing * math.sin(k * 1.3 + math.cos(k * 0.7))


def smooth(
    values: Sequence[float],
    alpha: float = DEFAULT_CONFIG.alpha,
    beta: float = DEFAULT_CONFIG.beta,
    phi: float = DEFAULT_CONFIG.phi,
) -> tuple[float, float]:
    """Run the damped Holt recurrence over the history.

    The level starts at the first value and the trend at the mean step of
    the first ``min(6, n - 1)`` steps.

    Args:
        values: Chronological values, at least two.
        alpha: Level smoothing weight.
        beta: Trend smoothing weight.
        phi: Damping factor.

    Returns:
        Final ``(level, trend)``.
    """
    seed = min(_TREND_SEED_STEPS, len(values) - 1)
    level = values[0]
    trend = (values[seed] - values[0]) / seed

    for y in values[1:]:
        prev_level = level
        level = alpha * y + (1 - alpha) * (level + phi * trend)
        trend = beta * (level - prev_level) + (1 - beta) * phi * trend
    return level, trend


def forecast(
    samples: Iterable[Sample],
    value: ValueAccessor,
    config: AnalyticsConfig = DEFAULT_CONFIG,
    days: int | None = None,
) -> Forecast:
    """Project one field forward day by day.

    Args:
        samples: Historical samples in any order.
        value: Field accessor.
        config: Smoothing constants and band parameters.
        days: Horizon; defaults to ``config.forecast_days``.

    Returns:
        Forecast points starting the day after the last sample, plus the
        daily swing rounded to 2 decimals. With fewer than three samples the
        forecast is empty and the swing 0.0.
    """
    horizon = config.forecast_days if days is None else days
    points = series(samples, value)
    if len(points) < MIN_HISTORY:
        logger.debug("forecast_insufficient_history", samples=len(points))
        return Forecast(points=(), daily_swing=0.0)

    values = [p.value for p in points]
    swing = daily_swing(values)
    level, trend = smooth(values, alpha=config.alpha, beta=config.beta, phi=config.phi)

    last_day = points[-1].day
    out: list[ForecastPoint] = []
    sum_phi = 0.0
    for k in range(1, horizon + 1):
        sum_phi += config.phi**k
        predicted = round(level + sum_phi * trend, 1)
        margin = min(config.band_z * swing * math.sqrt(k), config.band_cap)
        out.append(
            ForecastPoint(
                day=last_day + timedelta(days=k),
                predicted=predicted,
                simulated=round(predicted + oscillation(swing, k), 2),
                lower=round(predicted - margin, 2),
                upper=round(predicted + margin, 2),
            )
        )
    return Forecast(points=tuple(out), daily_swing=round(swing, 2))
