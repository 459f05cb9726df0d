"""Clasificación de valores aislados en zonas de salud."""

from __future__ import annotations

from enum import Enum


class VisceralFatZone(str, Enum):
    HEALTHY = "healthy"
    ELEVATED = "elevated"
    HIGH = "high"


class HeartRateZone(str, Enum):
    LOW = "low"
    NORMAL = "normal"
    ELEVATED = "elevated"


def visceral_fat_zone(rating: float) -> VisceralFatZone:
    """Map a visceral-fat rating: <=9 healthy, <=14 elevated, else high."""
    if rating <= 9:
        return VisceralFatZone.HEALTHY
    if rating <= 14:
        return VisceralFatZone.ELEVATED
    return VisceralFatZone.HIGH


def heart_rate_zone(bpm: float) -> HeartRateZone:
    """Map a resting heart rate: <60 low, <=100 normal, else elevated."""
    if bpm < 60:
        return HeartRateZone.LOW
    if bpm <= 100:
        return HeartRateZone.NORMAL
    return HeartRateZone.ELEVATED
