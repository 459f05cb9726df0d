"""Modelos tipados para muestras de métricas corporales y resultados del motor."""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field as dc_field
from datetime import date
from enum import Enum
from numbers import Real
from typing import Any

from dateutil import parser as date_parser

DEFAULT_TIME = "00:00"

# Claves que no son métricas en un registro externo
_RESERVED_KEYS = frozenset({"date", "time", "measured_at", "source"})


class Source(str, Enum):
    """Origin of a measurement. Only used to break ties when merging."""

    MANUAL = "manual"
    DEVICE = "device"


ValueAccessor = Callable[["Sample"], "float | None"]


def _check_value(name: str, raw: object) -> float | None:
    """Valida un valor numérico; None pasa tal cual."""
    if raw is None:
        return None
    if isinstance(raw, bool) or not isinstance(raw, Real):
        raise TypeError(f"Field {name!r} must be a number or None, got {raw!r}")
    value = float(raw)
    # NaN de pandas equivale a dato faltante
    return None if math.isnan(value) else value


@dataclass(frozen=True)
class Sample:
    """One measurement event from a manual entry or a device."""

    day: date
    time: str | None
    values: Mapping[str, float | None] = dc_field(default_factory=dict)
    source: Source = Source.MANUAL

    def __post_init__(self) -> None:
        if not isinstance(self.day, date):
            raise TypeError(f"day must be a date, got {self.day!r}")
        checked = {name: _check_value(name, raw) for name, raw in self.values.items()}
        object.__setattr__(self, "values", checked)
        object.__setattr__(self, "source", Source(self.source))

    def get(self, name: str) -> float | None:
        """Return the value of a field, None when missing."""
        return self.values.get(name)

    @property
    def clock(self) -> str:
        """Local time with the default applied."""
        return self.time if self.time else DEFAULT_TIME

    @classmethod
    def from_record(
        cls, record: Mapping[str, Any], source: Source | str | None = None
    ) -> Sample:
        """Build a sample from a plain record.

        Accepts either ``{"date": "YYYY-MM-DD", "time": "HH:MM", ...}`` or a
        device record with an ISO ``measured_at`` timestamp. Every other key
        is taken as a numeric field.

        Args:
            record: Mapping with the external-interface shape.
            source: Overrides the record's own ``source`` key.

        Returns:
            A validated sample.

        Raises:
            ValueError: If the record has neither ``date`` nor ``measured_at``.
            TypeError: If a field value is not numeric and not None.
        """
        measured_at = record.get("measured_at")
        if measured_at:
            ts = date_parser.isoparse(str(measured_at))
            day = ts.date()
            time: str | None = ts.strftime("%H:%M")
        elif record.get("date"):
            day = date.fromisoformat(str(record["date"])[:10])
            raw_time = record.get("time")
            time = str(raw_time) if raw_time else None
        else:
            raise ValueError("Record needs 'date' or 'measured_at'")

        values = {k: v for k, v in record.items() if k not in _RESERVED_KEYS}
        src = source if source is not None else record.get("source", Source.MANUAL)
        return cls(day=day, time=time, values=values, source=Source(src))


@dataclass(frozen=True)
class UnifiedSample(Sample):
    """Sample on the merged timeline; ``source`` is the winning source.

    ``time`` is never None here: the merge applies the ``00:00`` default.
    """

    @property
    def key(self) -> tuple[str, str]:
        return (self.day.isoformat(), self.clock)


def field(name: str) -> ValueAccessor:
    """Return an accessor that reads one numeric field of a sample."""

    def _accessor(sample: Sample) -> float | None:
        return sample.get(name)

    _accessor.__name__ = f"field_{name}"
    return _accessor


WEIGHT = field("weight_kg")


@dataclass(frozen=True)
class DatedValue:
    """A value tied to a calendar day."""

    day: date
    value: float

    def to_dict(self) -> dict[str, Any]:
        return {"date": self.day.isoformat(), "value": self.value}


@dataclass(frozen=True)
class DailyAverage(DatedValue):
    """Mean of one field over one calendar day."""


@dataclass(frozen=True)
class RegressionPoint(DatedValue):
    """Fitted value of the least-squares line at one sample."""


@dataclass(frozen=True)
class MonthSummary:
    """Mean/min/max/count of one field within a ``YYYY-MM`` month."""

    month: str
    avg: float
    min: float
    max: float
    count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "month": self.month,
            "avg": self.avg,
            "min": self.min,
            "max": self.max,
            "count": self.count,
        }


@dataclass(frozen=True)
class Extremes:
    """All-time minimum and maximum, each with its date."""

    min: DatedValue | None
    max: DatedValue | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "min": self.min.to_dict() if self.min else None,
            "max": self.max.to_dict() if self.max else None,
        }


@dataclass(frozen=True)
class SlotComparison:
    """Morning vs evening mean for one day."""

    morning: float | None
    evening: float | None

    def to_dict(self) -> dict[str, Any]:
        return {"morning": self.morning, "evening": self.evening}


@dataclass(frozen=True)
class ForecastPoint:
    """One projected day after the last historical date."""

    day: date
    predicted: float
    simulated: float
    lower: float
    upper: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.day.isoformat(),
            "predicted": self.predicted,
            "simulated": self.simulated,
            "lower": self.lower,
            "upper": self.upper,
        }


@dataclass(frozen=True)
class Forecast:
    """Forecast path plus the historical day-to-day swing it was sized with."""

    points: tuple[ForecastPoint, ...]
    daily_swing: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "points": [p.to_dict() for p in self.points],
            "daily_swing": self.daily_swing,
        }
