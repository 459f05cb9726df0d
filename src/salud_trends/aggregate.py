"""Agregación por día calendario y por franja horaria (mañana / tarde)."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date, timedelta
from enum import Enum

import pandas as pd

from salud_trends.logging_setup import get_logger
from salud_trends.model import DailyAverage, Sample, SlotComparison, ValueAccessor

logger = get_logger(__name__)

DEFAULT_CUTOFF_HOUR = 15


class TimeSlot(str, Enum):
    """Time-of-day filter applied before daily grouping."""

    MORNING = "morning"
    EVENING = "evening"
    ALL = "all"


def _parse_hour(clock: str) -> int | None:
    """Extrae la hora de "HH:MM"; None si no se puede interpretar."""
    head = clock.strip().split(":", 1)[0]
    try:
        hour = int(head)
    except ValueError:
        return None
    return hour if 0 <= hour <= 23 else None


def time_slot(sample: Sample, cutoff_hour: int = DEFAULT_CUTOFF_HOUR) -> TimeSlot:
    """Classify a sample as morning or evening.

    An unparseable time falls back to morning.
    """
    hour = _parse_hour(sample.clock)
    if hour is None:
        logger.debug("unparseable_time", time=sample.time, day=str(sample.day))
        return TimeSlot.MORNING
    return TimeSlot.MORNING if hour < cutoff_hour else TimeSlot.EVENING


def samples_to_frame(
    samples: Iterable[Sample],
    value: ValueAccessor,
    slot: TimeSlot = TimeSlot.ALL,
    cutoff_hour: int = DEFAULT_CUTOFF_HOUR,
) -> pd.DataFrame:
    """Convert samples to a ``date``/``time``/``value`` frame without nulls.

    Args:
        samples: Samples in any order.
        value: Field accessor.
        slot: Optional time-of-day filter.
        cutoff_hour: Morning/evening boundary.

    Returns:
        DataFrame sorted by date and time.
    """
    rows = [
        {"date": s.day, "time": s.clock, "value": value(s)}
        for s in samples
        if value(s) is not None
        and (slot is TimeSlot.ALL or time_slot(s, cutoff_hour) is slot)
    ]
    df = pd.DataFrame(rows, columns=["date", "time", "value"])
    if df.empty:
        return df
    return df.sort_values(["date", "time"], kind="stable").reset_index(drop=True)


def daily_averages(
    samples: Iterable[Sample],
    value: ValueAccessor,
    slot: TimeSlot = TimeSlot.ALL,
    cutoff_hour: int = DEFAULT_CUTOFF_HOUR,
) -> list[DailyAverage]:
    """Average one field per calendar day.

    Days without any non-null value are omitted.

    Args:
        samples: Samples in any order.
        value: Field accessor.
        slot: Optional time-of-day filter.
        cutoff_hour: Morning/evening boundary.

    Returns:
        One DailyAverage per day, rounded to 2 decimals, ascending by date.
    """
    df = samples_to_frame(samples, value, slot=slot, cutoff_hour=cutoff_hour)
    if df.empty:
        return []
    g = df.groupby("date", as_index=False).agg(avg=("value", "mean"))
    g["avg"] = g["avg"].round(2)
    g = g.sort_values("date").reset_index(drop=True)
    return [
        DailyAverage(day=row.date, value=float(row.avg))
        for row in g.itertuples(index=False)
    ]


def _slot_mean(values: Sequence[float]) -> float | None:
    if not values:
        return None
    return round(sum(values) / len(values), 2)


def morning_vs_evening(
    samples: Iterable[Sample],
    day: date,
    value: ValueAccessor,
    cutoff_hour: int = DEFAULT_CUTOFF_HOUR,
) -> SlotComparison:
    """Compare the morning and evening means of one day."""
    morning: list[float] = []
    evening: list[float] = []
    for s in samples:
        v = value(s)
        if s.day != day or v is None:
            continue
        if time_slot(s, cutoff_hour) is TimeSlot.MORNING:
            morning.append(v)
        else:
            evening.append(v)
    return SlotComparison(morning=_slot_mean(morning), evening=_slot_mean(evening))


def latest_value(samples: Iterable[Sample], value: ValueAccessor) -> float | None:
    """Return the most recent non-null value of a field."""
    ordered = sorted(samples, key=lambda s: (s.day, s.clock), reverse=True)
    for s in ordered:
        v = value(s)
        if v is not None:
            return v
    return None


def week_trend(samples: Iterable[Sample], value: ValueAccessor) -> float | None:
    """Change of the daily average against the day nearest to a week earlier.

    Works on daily averages and never compares the latest day with itself:
    the reference is the closest *other* day to ``latest - 7 days`` (the
    earliest wins on ties). Rounded to 2 decimals; None with fewer than two
    days of data.
    """
    avgs = daily_averages(samples, value)
    if len(avgs) < 2:
        return None
    latest = avgs[-1]
    target = latest.day - timedelta(days=7)
    closest = min(avgs[:-1], key=lambda a: abs((a.day - target).days))
    return round(latest.value - closest.value, 2)


def months(samples: Iterable[Sample]) -> list[str]:
    """Distinct ``YYYY-MM`` keys present in the samples, ascending."""
    return sorted({s.day.isoformat()[:7] for s in samples})
