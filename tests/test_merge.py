from __future__ import annotations

from datetime import date

from salud_trends.merge import merge_daily_sources, merge_sources
from salud_trends.model import WEIGHT, Sample, Source


def _s(
    day: date, time: str | None, weight: float | None, source: Source = Source.MANUAL
) -> Sample:
    return Sample(day=day, time=time, values={"weight_kg": weight}, source=source)


def test_merge_empty_returns_empty() -> None:
    assert merge_sources([], [], WEIGHT) == []


def test_device_wins_on_same_key() -> None:
    manual = [_s(date(2024, 1, 1), "08:00", 80.0)]
    device = [_s(date(2024, 1, 1), "08:00", 79.8, Source.DEVICE)]
    out = merge_sources(manual, device, WEIGHT)
    assert len(out) == 1
    assert WEIGHT(out[0]) == 79.8
    assert out[0].source is Source.DEVICE


def test_every_shared_key_resolves_to_device() -> None:
    days = [date(2024, 1, d) for d in range(1, 6)]
    manual = [_s(d, "07:30", 80.0 + i) for i, d in enumerate(days)]
    device = [_s(d, "07:30", 70.0 + i, Source.DEVICE) for i, d in enumerate(days[::2])]
    out = merge_sources(manual, device, WEIGHT)
    by_key = {u.key: u for u in out}
    for dev in device:
        unified = by_key[(dev.day.isoformat(), dev.clock)]
        assert unified.source is Source.DEVICE
        assert WEIGHT(unified) == WEIGHT(dev)
    assert len(out) == len(days)


def test_near_miss_times_stay_separate() -> None:
    manual = [_s(date(2024, 1, 1), "08:00", 80.0)]
    device = [_s(date(2024, 1, 1), "08:03", 79.8, Source.DEVICE)]
    out = merge_sources(manual, device, WEIGHT)
    assert [(u.time, u.source) for u in out] == [
        ("08:00", Source.MANUAL),
        ("08:03", Source.DEVICE),
    ]


def test_missing_time_defaults_to_midnight_key() -> None:
    manual = [_s(date(2024, 1, 1), None, 80.0)]
    device = [_s(date(2024, 1, 1), "00:00", 79.5, Source.DEVICE)]
    out = merge_sources(manual, device, WEIGHT)
    assert len(out) == 1
    assert out[0].time == "00:00"
    assert WEIGHT(out[0]) == 79.5


def test_null_values_are_dropped_before_merge() -> None:
    manual = [_s(date(2024, 1, 1), "08:00", 80.0)]
    device = [_s(date(2024, 1, 1), "08:00", None, Source.DEVICE)]
    out = merge_sources(manual, device, WEIGHT)
    assert len(out) == 1
    assert out[0].source is Source.MANUAL
    assert WEIGHT(out[0]) == 80.0


def test_output_sorted_by_date_then_time() -> None:
    manual = [
        _s(date(2024, 1, 3), "08:00", 79.0),
        _s(date(2024, 1, 1), "20:00", 80.5),
    ]
    device = [
        _s(date(2024, 1, 1), "07:00", 80.0, Source.DEVICE),
        _s(date(2024, 1, 2), "07:00", 79.6, Source.DEVICE),
    ]
    out = merge_sources(manual, device, WEIGHT)
    assert [u.key for u in out] == [
        ("2024-01-01", "07:00"),
        ("2024-01-01", "20:00"),
        ("2024-01-02", "07:00"),
        ("2024-01-03", "08:00"),
    ]


def test_source_tag_is_assigned_by_stream() -> None:
    # el tag original del registro no decide: decide el flujo por el que entra
    manual = [_s(date(2024, 1, 1), "08:00", 80.0, Source.DEVICE)]
    out = merge_sources(manual, [], WEIGHT)
    assert out[0].source is Source.MANUAL


def test_merge_daily_averages_device_and_overrides_manual() -> None:
    manual = [
        _s(date(2024, 1, 1), "09:00", 81.0),
        _s(date(2024, 1, 2), "09:00", 80.7),
    ]
    device = [
        _s(date(2024, 1, 1), "07:10", 80.0, Source.DEVICE),
        _s(date(2024, 1, 1), "21:00", 80.5, Source.DEVICE),
        _s(date(2024, 1, 1), "22:00", None, Source.DEVICE),
    ]
    out = merge_daily_sources(manual, device, "weight_kg")
    assert [u.day for u in out] == [date(2024, 1, 1), date(2024, 1, 2)]
    assert WEIGHT(out[0]) == 80.25
    assert out[0].time == "07:10"
    assert out[0].source is Source.DEVICE
    assert WEIGHT(out[1]) == 80.7
    assert out[1].source is Source.MANUAL
