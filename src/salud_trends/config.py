"""Configuración del motor de tendencias y pronóstico."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class AnalyticsConfig:
    """Tunable parameters of the analytics engine.

    Attributes:
        ma_window: Trailing window of the moving average (samples).
        volatility_window: Number of most recent samples used for volatility.
        forecast_days: Forecast horizon in days.
        alpha: Level smoothing weight.
        beta: Trend smoothing weight.
        phi: Trend damping factor.
        band_z: Multiplier of the confidence band half-width.
        band_cap: Absolute cap of the confidence band half-width.
        cutoff_hour: Hours before this are "morning", the rest "evening".
        trend_threshold: Moving-average change that counts as up/down.
        trend_lookback: Moving-average points compared by the trend direction.
    """

    ma_window: int = 7
    volatility_window: int = 14
    forecast_days: int = 14
    alpha: float = 0.4
    beta: float = 0.2
    phi: float = 0.95
    band_z: float = 1.96
    band_cap: float = 2.0
    cutoff_hour: int = 15
    trend_threshold: float = 0.3
    trend_lookback: int = 3

    def __post_init__(self) -> None:
        for name in ("ma_window", "volatility_window", "forecast_days"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be >= 1")
        if self.trend_lookback < 2:
            raise ValueError("trend_lookback must be >= 2")
        for name in ("alpha", "beta", "phi"):
            value = getattr(self, name)
            if not 0.0 < value <= 1.0:
                raise ValueError(f"{name} must be in (0, 1], got {value}")
        if self.band_z < 0 or self.band_cap < 0 or self.trend_threshold < 0:
            raise ValueError("band_z, band_cap and trend_threshold must be >= 0")
        if not 0 <= self.cutoff_hour <= 23:
            raise ValueError("cutoff_hour must be between 0 and 23")

    def replace(self, **changes: Any) -> AnalyticsConfig:
        """Return a validated copy with some fields changed."""
        return dataclasses.replace(self, **changes)

    def as_dict(self) -> dict[str, Any]:
        return dataclasses.asdict(self)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> AnalyticsConfig:
        """Build a config ignoring unknown keys."""
        names = {f.name for f in dataclasses.fields(cls)}
        known = {k: v for k, v in raw.items() if k in names}
        return cls(**known)


DEFAULT_CONFIG = AnalyticsConfig()
