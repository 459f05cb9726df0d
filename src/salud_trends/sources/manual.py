"""Lectura de registros manuales desde CSV (date,time,<campos>...)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import pandas as pd

from salud_trends.logging_setup import get_logger
from salud_trends.model import Sample, Source
from salud_trends.sources.base import SampleSource, SourcePaths

logger = get_logger(__name__)


@dataclass(frozen=True)
class ManualCsvPaths(SourcePaths):
    """Path to the manual entries CSV."""

    # path: CSV con columnas date, time (opcional) y una por métrica


class ManualCsvSource(SampleSource):
    """Manual entries stored as CSV."""

    def load_samples(self) -> list[Sample]:
        """Parse the CSV into manual samples.

        Rows without a parseable date are skipped. Metric columns are
        coerced to numbers; empty cells become None.

        Returns:
            Samples sorted by date and time.

        Raises:
            ValueError: If the CSV has no ``date`` column.
            TypeError: If a dated row has a non-numeric metric cell.
        """
        df = pd.read_csv(self._paths.path, dtype={"time": "string"})
        df = df.rename(columns={c: c.strip() for c in df.columns})
        if "date" not in df.columns:
            raise ValueError(f"Missing 'date' column in {self._paths.path}")

        metric_cols = [c for c in df.columns if c not in ("date", "time", "source")]
        days = pd.to_datetime(df["date"], errors="coerce", format="ISO8601")
        for col in metric_cols:
            numeric = pd.to_numeric(df[col], errors="coerce")
            bad = numeric.isna() & df[col].notna() & days.notna()
            if bad.any():
                idx = bad.idxmax()
                # +2: cabecera y numeración desde 1
                raise TypeError(
                    f"Non-numeric value {df[col].loc[idx]!r} in column '{col}', "
                    f"row {idx + 2} of {self._paths.path}"
                )
            df[col] = numeric

        out: list[Sample] = []
        skipped = 0
        for idx, row in df.iterrows():
            day = days.loc[idx]
            if pd.isna(day):
                skipped += 1
                continue
            out.append(
                Sample(
                    day=day.date(),
                    time=_clean_time(row.get("time")),
                    values={col: _cell(row[col]) for col in metric_cols},
                    source=Source.MANUAL,
                )
            )
        if skipped:
            logger.info("manual_rows_skipped", skipped=skipped, path=str(self._paths.path))
        out.sort(key=lambda s: (s.day, s.clock))
        return out


def _clean_time(raw: Any) -> str | None:
    """Normaliza la hora; vacío o NA -> None."""
    if raw is None or pd.isna(raw):
        return None
    text = str(raw).strip()
    return text or None


def _cell(raw: Any) -> float | None:
    if pd.isna(raw):
        return None
    return float(raw)
