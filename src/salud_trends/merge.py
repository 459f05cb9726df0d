"""Fusión de fuentes manuales y de dispositivo en una única línea de tiempo."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date

from salud_trends.logging_setup import get_logger
from salud_trends.model import (
    Sample,
    Source,
    UnifiedSample,
    ValueAccessor,
    field,
)

logger = get_logger(__name__)


def _unify(sample: Sample, source: Source) -> UnifiedSample:
    return UnifiedSample(
        day=sample.day,
        time=sample.clock,
        values=sample.values,
        source=source,
    )


def merge_sources(
    manual: Iterable[Sample],
    device: Iterable[Sample],
    value: ValueAccessor,
) -> list[UnifiedSample]:
    """Merge manual and device samples into one timeline.

    Samples are keyed by exact ``(date, time)``; a device sample overwrites a
    manual one at the same key. Samples recorded a few minutes apart stay as
    separate entries. Samples whose ``value`` is None are dropped.

    Args:
        manual: Manually entered samples.
        device: Device readings.
        value: Accessor of the primary field.

    Returns:
        Unified samples sorted by ``(date, time)``.
    """
    timeline: dict[tuple[str, str], UnifiedSample] = {}
    dropped = 0

    # Primero manual, luego dispositivo: el dispositivo pisa la clave
    for source, samples in ((Source.MANUAL, manual), (Source.DEVICE, device)):
        for sample in samples:
            if value(sample) is None:
                dropped += 1
                continue
            unified = _unify(sample, source)
            timeline[unified.key] = unified

    if dropped:
        logger.debug("merge_dropped_null_samples", dropped=dropped)
    return [timeline[key] for key in sorted(timeline)]


def merge_daily_sources(
    manual: Iterable[Sample],
    device: Iterable[Sample],
    name: str,
) -> list[UnifiedSample]:
    """Merge by calendar day, one entry per day.

    Device readings are averaged per day (2 decimals) and keep the time of
    the first reading of that day; the daily average replaces any manual
    entry of the same date.

    Args:
        manual: Manually entered samples.
        device: Device readings.
        name: Field to merge; the averaged device value is stored under it.

    Returns:
        Unified samples sorted by date.
    """
    value = field(name)
    by_day: dict[date, UnifiedSample] = {}
    for sample in manual:
        if value(sample) is None:
            continue
        by_day[sample.day] = _unify(sample, Source.MANUAL)

    sums: dict[date, list[float]] = {}
    first_time: dict[date, str] = {}
    for sample in device:
        reading = value(sample)
        if reading is None:
            continue
        sums.setdefault(sample.day, []).append(reading)
        first_time.setdefault(sample.day, sample.clock)

    for day, readings in sums.items():
        avg = round(sum(readings) / len(readings), 2)
        by_day[day] = UnifiedSample(
            day=day,
            time=first_time[day],
            values={name: avg},
            source=Source.DEVICE,
        )

    return [by_day[day] for day in sorted(by_day)]
