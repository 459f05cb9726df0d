"""Recta de mínimos cuadrados sobre el índice de la serie."""

from __future__ import annotations

from collections.abc import Iterable

import numpy as np

from salud_trends.model import RegressionPoint, Sample, ValueAccessor
from salud_trends.trends import series


def linear_regression(
    samples: Iterable[Sample], value: ValueAccessor
) -> list[RegressionPoint]:
    """Fit value against sample index with ordinary least squares.

    The x axis is the position in the chronological series, not the date,
    so gaps between measurements do not weight the fit.

    Args:
        samples: Samples in any order.
        value: Field accessor.

    Returns:
        One fitted point per sample (2 decimals), or an empty list with
        fewer than two samples.
    """
    points = series(samples, value)
    if len(points) < 2:
        return []
    x = np.arange(len(points), dtype=float)
    y = np.array([p.value for p in points], dtype=float)
    slope, intercept = np.polyfit(x, y, deg=1)
    fitted = intercept + slope * x
    return [
        RegressionPoint(day=p.day, value=round(float(v), 2))
        for p, v in zip(points, fitted, strict=True)
    ]
