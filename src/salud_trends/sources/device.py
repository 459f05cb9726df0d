"""Lectura de lecturas de dispositivo (balanza, reloj) desde JSON canónico."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from salud_trends.logging_setup import get_logger
from salud_trends.model import Sample, Source
from salud_trends.sources.base import SampleSource, SourcePaths

logger = get_logger(__name__)


@dataclass(frozen=True)
class DeviceJsonPaths(SourcePaths):
    """Path to the device readings JSON."""

    # path: lista JSON de {"measured_at": "...", "weight_kg": ..., ...}


class DeviceJsonSource(SampleSource):
    """Device readings stored as a JSON list of records."""

    def load_samples(self) -> list[Sample]:
        """Parse the JSON list into device samples.

        Records without ``measured_at`` or ``date`` are skipped.

        Returns:
            Samples sorted by date and time.

        Raises:
            ValueError: If the JSON is not a list.
            TypeError: If a metric value is not numeric and not null.
        """
        raw = json.loads(self._paths.path.read_text(encoding="utf-8"))
        if not isinstance(raw, list):
            raise ValueError("Device JSON must be a list")

        out: list[Sample] = []
        skipped = 0
        for item in raw:
            sample = _item_to_sample(item)
            if sample is None:
                skipped += 1
                continue
            out.append(sample)
        if skipped:
            logger.info("device_records_skipped", skipped=skipped, path=str(self._paths.path))
        out.sort(key=lambda s: (s.day, s.clock))
        return out


def _item_to_sample(item: Any) -> Sample | None:
    """Convierte un ítem dict en Sample; None si no tiene fecha."""
    if not isinstance(item, dict):
        return None
    if not item.get("measured_at") and not item.get("date"):
        return None
    return Sample.from_record(item, source=Source.DEVICE)
