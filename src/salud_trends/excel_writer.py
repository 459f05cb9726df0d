"""Exportación del reporte de una métrica a Excel formateado."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pandas as pd
from openpyxl.styles import Alignment, Border, Font, Side

from salud_trends.report import MetricReport, daily_frame, forecast_frame

_DIA_SEMANA: tuple[str, ...] = ("lun", "mar", "mie", "jue", "vie", "sab", "dom")

_HEADER_MAP: dict[str, str] = {
    "weekday": "Día",
    "date": "Fecha",
    "average": "Promedio",
    "moving_average": "Media\nmóvil",
    "regression": "Regresión",
    "predicted": "Pronóstico",
    "simulated": "Simulado",
    "lower": "Banda\ninferior",
    "upper": "Banda\nsuperior",
}

_COLUMN_WIDTHS: dict[str, int] = {
    "Día": 6,
    "Fecha": 12,
    "Promedio": 12,
    "Media\nmóvil": 12,
    "Regresión": 12,
    "Pronóstico": 12,
    "Simulado": 12,
    "Banda\ninferior": 10,
    "Banda\nsuperior": 10,
}

_NUMBER_FORMATS: dict[str, str] = {
    "Fecha": "dd/mm/yyyy",
    "Promedio": "0.00",
    "Media\nmóvil": "0.0",
    "Regresión": "0.00",
    "Pronóstico": "0.0",
    "Simulado": "0.00",
    "Banda\ninferior": "0.00",
    "Banda\nsuperior": "0.00",
}


@dataclass(frozen=True)
class ExcelLayout:
    """Sheet names of the report workbook."""

    daily_sheet: str = "Diario"
    forecast_sheet: str = "Pronóstico"


def _add_weekday_column(export_df: pd.DataFrame) -> pd.DataFrame:
    """Antepone la columna del día de la semana calculada desde ``date``."""
    if export_df.empty or "date" not in export_df.columns:
        return export_df
    days = pd.to_datetime(export_df["date"], errors="coerce")
    labels = [_DIA_SEMANA[d.weekday()] if pd.notna(d) else "" for d in days]
    out = export_df.assign(date=days)
    out.insert(0, "weekday", labels)
    return out


def _prepare(df: pd.DataFrame) -> pd.DataFrame:
    return _add_weekday_column(df).rename(columns=_HEADER_MAP)


def write_report_xlsx(report: MetricReport, out_path: Path, layout: ExcelLayout) -> None:
    """Write the daily series and the forecast to a formatted workbook.

    Args:
        report: Report of one metric.
        out_path: Output path for the XLSX file.
        layout: Sheet names.
    """
    out_path.parent.mkdir(parents=True, exist_ok=True)

    sheets = (
        (layout.daily_sheet, _prepare(daily_frame(report))),
        (layout.forecast_sheet, _prepare(forecast_frame(report))),
    )
    with pd.ExcelWriter(out_path, engine="openpyxl") as writer:
        for name, export_df in sheets:
            export_df.to_excel(writer, index=False, sheet_name=name)
            _format_sheet(writer.book[name])


def _format_sheet(ws: Any) -> None:
    """Apply borders, widths and number formats to a worksheet.

    The header row is bold and wraps text; every cell is centered and boxed.

    Args:
        ws: openpyxl worksheet.
    """
    thin = Side(style="thin")
    box = Border(left=thin, right=thin, top=thin, bottom=thin)
    bold = Font(bold=True)

    formats: dict[str, str] = {}
    for cell in ws[1]:
        header = str(cell.value)
        cell.font = bold
        cell.alignment = Alignment(horizontal="center", vertical="center", wrap_text=True)
        cell.border = box
        if header in _COLUMN_WIDTHS:
            ws.column_dimensions[cell.column_letter].width = _COLUMN_WIDTHS[header]
        if header in _NUMBER_FORMATS:
            formats[cell.column_letter] = _NUMBER_FORMATS[header]

    body = Alignment(horizontal="center", vertical="center")
    for row in ws.iter_rows(min_row=2):
        for cell in row:
            cell.alignment = body
            cell.border = box
            if cell.column_letter in formats:
                cell.number_format = formats[cell.column_letter]
