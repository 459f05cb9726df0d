"""Persistencia SQLite para configuración del motor y snapshots de pronóstico."""

from __future__ import annotations

import json
import sqlite3
from dataclasses import dataclass
from datetime import date, datetime
from hashlib import sha256
from pathlib import Path
from typing import Any

from salud_trends.config import AnalyticsConfig
from salud_trends.model import Forecast

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS app_config (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS forecast_snapshots (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    created_at TEXT NOT NULL,
    snapshot_date TEXT NOT NULL,
    metric TEXT NOT NULL,
    forecast_days INTEGER NOT NULL,
    daily_swing REAL NOT NULL,
    points TEXT NOT NULL,
    snapshot_hash TEXT NOT NULL
);

CREATE UNIQUE INDEX IF NOT EXISTS idx_forecast_snapshots_hash
ON forecast_snapshots(snapshot_hash);
"""


@dataclass(frozen=True)
class ForecastSnapshot:
    """A stored forecast, used later to compare predictions with reality."""

    id: int
    created_at: str
    snapshot_date: date
    metric: str
    forecast_days: int
    daily_swing: float
    points: list[dict[str, Any]]


class SQLiteStore:
    """Repositorio SQLite para la CLI."""

    def __init__(self, db_path: Path) -> None:
        """Create store and ensure schema exists."""
        self._db_path = db_path
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        with self._connect() as conn:
            conn.executescript(SCHEMA_SQL)
            conn.commit()

    def load_config(self) -> AnalyticsConfig:
        """Devuelve configuración guardada o defaults."""
        with self._connect() as conn:
            rows = conn.execute("SELECT key, value FROM app_config").fetchall()
        values: dict[str, Any] = {}
        for row in rows:
            try:
                values[row["key"]] = json.loads(row["value"])
            except json.JSONDecodeError:
                continue
        return AnalyticsConfig.from_dict(values)

    def save_config(self, config: AnalyticsConfig) -> None:
        """Guarda la configuración en tabla key/value."""
        payload = [(k, json.dumps(v)) for k, v in config.as_dict().items()]
        with self._connect() as conn:
            conn.executemany(
                """
                INSERT INTO app_config(key, value) VALUES(?, ?)
                ON CONFLICT(key) DO UPDATE SET value=excluded.value
                """,
                payload,
            )
            conn.commit()

    def save_forecast_snapshot(
        self,
        forecast: Forecast,
        *,
        snapshot_date: date,
        metric: str,
    ) -> int | None:
        """Guarda un snapshot. Devuelve su id o None si ya existía o está vacío."""
        if not forecast.points:
            return None
        points = forecast.to_dict()["points"]
        snapshot_hash = _snapshot_hash(
            (snapshot_date.isoformat(), metric, forecast.daily_swing, points)
        )
        created_at = datetime.now().isoformat(timespec="seconds")
        with self._connect() as conn:
            cur = conn.execute(
                """
                INSERT OR IGNORE INTO forecast_snapshots(
                    created_at, snapshot_date, metric, forecast_days,
                    daily_swing, points, snapshot_hash
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    created_at,
                    snapshot_date.isoformat(),
                    metric,
                    len(points),
                    forecast.daily_swing,
                    json.dumps(points),
                    snapshot_hash,
                ),
            )
            conn.commit()
            if cur.rowcount == 0:
                return None
            return int(cur.lastrowid)

    def list_forecast_snapshots(
        self,
        *,
        metric: str | None = None,
        forecast_days: int | None = None,
        limit: int = 10,
    ) -> list[ForecastSnapshot]:
        """Snapshots más recientes primero, opcionalmente filtrados."""
        query = "SELECT * FROM forecast_snapshots WHERE 1 = 1"
        params: list[object] = []
        if metric is not None:
            query += " AND metric = ?"
            params.append(metric)
        if forecast_days is not None:
            query += " AND forecast_days = ?"
            params.append(forecast_days)
        query += " ORDER BY snapshot_date DESC, id DESC LIMIT ?"
        params.append(limit)

        with self._connect() as conn:
            rows = conn.execute(query, tuple(params)).fetchall()
        return [
            ForecastSnapshot(
                id=int(row["id"]),
                created_at=row["created_at"],
                snapshot_date=date.fromisoformat(row["snapshot_date"]),
                metric=row["metric"],
                forecast_days=int(row["forecast_days"]),
                daily_swing=float(row["daily_swing"]),
                points=json.loads(row["points"]),
            )
            for row in rows
        ]


def _snapshot_hash(values: tuple[object, ...]) -> str:
    payload = json.dumps(values, ensure_ascii=True, sort_keys=True, default=str)
    return sha256(payload.encode("utf-8")).hexdigest()
