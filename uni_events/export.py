"""Click report export helpers (CSV, Excel, PDF)."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable, Mapping

import pandas as pd


REPORT_TITLE = "Event Click Report"
REPORT_COLUMNS = ["event_id", "event_name", "university", "city", "event_date", "clicks", "share_percent"]


def export_report_csv(rows: Iterable[Mapping], output_path: str | Path) -> Path:
    """Write the click report with a fixed header; an empty report is header-only."""
    out = Path(output_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    with out.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=REPORT_COLUMNS)
        writer.writeheader()
        for row in rows:
            writer.writerow({col: row.get(col, "") for col in REPORT_COLUMNS})
    return out


def export_report_excel(rows: Iterable[Mapping], output_path: str | Path) -> Path:
    out = Path(output_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    frame = pd.DataFrame([{col: row.get(col) for col in REPORT_COLUMNS} for row in rows], columns=REPORT_COLUMNS)
    frame.to_excel(out, index=False, sheet_name="clicks")
    return out


def export_report_pdf(rows: Iterable[Mapping], output_path: str | Path, title: str = REPORT_TITLE) -> Path:
    out = Path(output_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    rows_list = list(rows)

    try:
        from reportlab.lib.pagesizes import A4
        from reportlab.pdfgen import canvas
    except ImportError as exc:
        raise RuntimeError("PDF export requires reportlab. Install with: pip install reportlab") from exc

    c = canvas.Canvas(str(out), pagesize=A4)
    width, height = A4
    y = height - 40
    c.setFont("Helvetica-Bold", 12)
    c.drawString(40, y, title)
    y -= 24

    c.setFont("Helvetica", 9)
    if not rows_list:
        c.drawString(40, y, "No events listed")
    else:
        for row in rows_list:
            line = (
                f"{str(row.get('event_name', ''))[:40]} | {str(row.get('university', ''))[:30]} | "
                f"{row.get('event_date', '')} | clicks: {row.get('clicks', 0)} ({row.get('share_percent', 0)}%)"
            )
            c.drawString(40, y, line)
            y -= 14
            if y < 40:
                c.showPage()
                y = height - 40
                c.setFont("Helvetica", 9)

    c.save()
    return out
