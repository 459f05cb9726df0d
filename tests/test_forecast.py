from __future__ import annotations

import math
from datetime import date, timedelta

import pytest

from salud_trends.config import AnalyticsConfig
from salud_trends.forecast import (
    DEFAULT_SWING,
    daily_swing,
    damped_trend_sum,
    forecast,
    oscillation,
    smooth,
)
from salud_trends.model import WEIGHT, Sample


def _daily(values: list[float], start: date = date(2024, 1, 1)) -> list[Sample]:
    return [
        Sample(day=start + timedelta(days=i), time=None, values={"weight_kg": v})
        for i, v in enumerate(values)
    ]


HISTORY = [80.0, 79.7, 79.9, 79.4, 79.2, 79.5, 79.0, 78.8, 79.1, 78.6]


def test_daily_swing_is_rms_of_deltas() -> None:
    assert daily_swing([1.0, 2.0, 0.0]) == pytest.approx(math.sqrt((1 + 4) / 2))
    assert daily_swing([5.0]) == DEFAULT_SWING
    assert daily_swing([]) == DEFAULT_SWING


def test_damped_trend_sum_converges() -> None:
    phi = 0.95
    sums = [damped_trend_sum(phi, k) for k in range(1, 400)]
    assert all(b >= a for a, b in zip(sums, sums[1:]))
    assert sums[0] == pytest.approx(0.95)
    assert sums[-1] == pytest.approx(phi / (1 - phi), rel=1e-6)
    assert all(s < phi / (1 - phi) for s in sums)


def test_smooth_seeds_trend_from_first_steps() -> None:
    level, trend = smooth([70.0, 70.2, 70.4])
    assert level == pytest.approx(70.385156)
    assert trend == pytest.approx(0.1832392)


def test_insufficient_history_returns_empty() -> None:
    for values in ([], [80.0], [80.0, 79.5]):
        fc = forecast(_daily(values), WEIGHT)
        assert fc.points == ()
        assert fc.daily_swing == 0.0


def test_three_samples_one_day() -> None:
    fc = forecast(_daily([70.0, 70.2, 70.4]), WEIGHT, days=1)
    assert len(fc.points) == 1
    p = fc.points[0]
    assert p.day == date(2024, 1, 4)
    assert p.predicted == pytest.approx(70.6)
    assert p.simulated == pytest.approx(round(70.6 + oscillation(0.2, 1), 2), abs=0.011)
    assert p.lower == pytest.approx(70.21)
    assert p.upper == pytest.approx(70.99)
    assert fc.daily_swing == pytest.approx(0.2)


def test_default_horizon_and_consecutive_dates() -> None:
    fc = forecast(_daily(HISTORY), WEIGHT)
    assert len(fc.points) == 14
    last = date(2024, 1, 1) + timedelta(days=len(HISTORY) - 1)
    assert [p.day for p in fc.points] == [
        last + timedelta(days=k) for k in range(1, 15)
    ]


def test_forecast_is_deterministic() -> None:
    a = forecast(_daily(HISTORY), WEIGHT)
    b = forecast(list(reversed(_daily(HISTORY))), WEIGHT)
    assert a == b
    assert a.to_dict() == b.to_dict()


def test_band_contains_prediction_and_is_capped() -> None:
    noisy = [70.0, 80.0] * 6
    for values in (HISTORY, noisy):
        fc = forecast(_daily(values), WEIGHT, days=30)
        for p in fc.points:
            assert p.lower <= p.predicted <= p.upper
            # Las bandas van redondeadas a 2 decimales; la resta en float no es exacta
            assert round(p.upper - p.predicted, 2) <= 2.0
            assert round(p.predicted - p.lower, 2) <= 2.0
    capped = forecast(_daily(noisy), WEIGHT, days=3)
    assert all(p.upper - p.predicted == pytest.approx(2.0) for p in capped.points)


def test_band_widens_with_horizon() -> None:
    fc = forecast(_daily(HISTORY), WEIGHT, days=5)
    widths = [p.upper - p.lower for p in fc.points]
    assert all(b >= a - 0.011 for a, b in zip(widths, widths[1:]))
    assert widths[-1] > widths[0]


def test_projection_flattens_for_long_horizons() -> None:
    rising = [70.0 + 0.3 * i for i in range(20)]
    fc = forecast(_daily(rising), WEIGHT, days=400)
    late = [p.predicted for p in fc.points[-100:]]
    assert max(late) - min(late) <= 0.1
    assert all(math.isfinite(p.predicted) for p in fc.points)


def test_appending_history_only_changes_future() -> None:
    base = _daily(HISTORY)
    extended = _daily([*HISTORY, 78.9])
    fc_base = forecast(base, WEIGHT, days=3)
    fc_ext = forecast(extended, WEIGHT, days=3)
    assert fc_ext.points[0].day == fc_base.points[0].day + timedelta(days=1)
    assert base == _daily(HISTORY)


def test_alternate_parameters() -> None:
    cfg = AnalyticsConfig(alpha=0.8, beta=0.5, phi=0.5, band_z=1.0, band_cap=0.5)
    fc = forecast(_daily(HISTORY), WEIGHT, config=cfg, days=4)
    assert len(fc.points) == 4
    assert all(p.upper - p.predicted <= 0.5 + 1e-9 for p in fc.points)
    assert fc != forecast(_daily(HISTORY), WEIGHT, days=4)


def test_null_values_are_ignored() -> None:
    samples = _daily(HISTORY) + [
        Sample(day=date(2024, 2, 1), time=None, values={"weight_kg": None})
    ]
    fc = forecast(samples, WEIGHT, days=2)
    assert fc == forecast(_daily(HISTORY), WEIGHT, days=2)
