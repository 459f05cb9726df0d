"""CLI: fusiona registros manuales y de dispositivo, calcula tendencias y exporta."""

from __future__ import annotations

import argparse
from datetime import datetime
from pathlib import Path

from dateutil import tz

from salud_trends.excel_writer import ExcelLayout, write_report_xlsx
from salud_trends.logging_setup import get_logger, setup_logging
from salud_trends.merge import merge_sources
from salud_trends.model import Sample, field
from salud_trends.report import build_report
from salud_trends.sources.base import SampleSource
from salud_trends.sources.device import DeviceJsonPaths, DeviceJsonSource
from salud_trends.sources.manual import ManualCsvPaths, ManualCsvSource
from salud_trends.storage import SQLiteStore

_LOCAL_TZ = tz.gettz("America/Argentina/Buenos_Aires")

logger = get_logger(__name__)


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argparse namespace.
    """
    parser = argparse.ArgumentParser(
        description="Tendencias y pronóstico: registros manuales + dispositivo."
    )
    parser.add_argument("--manual", default=None, help="CSV de registros manuales.")
    parser.add_argument("--device", default=None, help="JSON de lecturas del dispositivo.")
    parser.add_argument(
        "--field",
        default="weight_kg",
        help="Métrica a analizar (default: weight_kg).",
    )
    parser.add_argument(
        "--days",
        type=int,
        default=None,
        help="Horizonte del pronóstico en días (default: configuración guardada).",
    )
    parser.add_argument(
        "--base-dir",
        default=str(Path.home() / "proyectos" / "salud"),
        help="Directorio base (default: ~/proyectos/salud).",
    )
    parser.add_argument("--verbose", action="store_true", help="Logging en DEBUG.")
    return parser.parse_args()


def _load(source: SampleSource | None) -> list[Sample]:
    if source is None:
        return []
    source.validate()
    return source.load_samples()


def main() -> int:
    """Run the trends CLI.

    Returns:
        Exit code (0 on success).
    """
    ns = parse_args()
    setup_logging(ns.verbose)
    base = Path(ns.base_dir).expanduser().resolve()

    manual_src = ManualCsvSource(ManualCsvPaths(path=Path(ns.manual))) if ns.manual else None
    device_src = DeviceJsonSource(DeviceJsonPaths(path=Path(ns.device))) if ns.device else None
    manual = _load(manual_src)
    device = _load(device_src)
    logger.info("samples_loaded", manual=len(manual), device=len(device))

    store = SQLiteStore(base / "salud_trends.sqlite3")
    config = store.load_config()
    if ns.days is not None:
        config = config.replace(forecast_days=ns.days)

    value = field(ns.field)
    timeline = merge_sources(manual, device, value)
    report = build_report(timeline, value, config=config, metric=ns.field)

    out_dir = base / "salidas"
    ts = datetime.now(tz=_LOCAL_TZ).strftime("%Y-%m-%d_%H-%M-%S")
    out_path = out_dir / f"tendencias_{ns.field}_{ts}.xlsx"
    write_report_xlsx(report, out_path, ExcelLayout())

    snapshot_id = None
    if report.daily:
        snapshot_id = store.save_forecast_snapshot(
            report.forecast,
            snapshot_date=report.daily[-1].day,
            metric=ns.field,
        )
    logger.info("report_built", entries=len(timeline), snapshot_id=snapshot_id)

    print(f"OK: Entradas unificadas: {len(timeline)}")
    print(f"OK: Último valor: {report.latest}")
    print(f"OK: Tendencia: {report.trend.value}")
    print(f"OK: Cambio semanal: {report.weekly_change}")
    print(f"OK: Tendencia 7 días (promedios diarios): {report.week_trend}")
    print(f"OK: Output: {out_path}")
    return 0
