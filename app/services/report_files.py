"""
Rendering of report rows to CSV and PDF files.

Files land in the public reports directory under
``{type}-{period}-{epoch_millis}.{ext}``. The writers are blocking and run
in the threadpool; each returns only after the file is flushed, synced and
closed.
"""

import csv
import json
import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence

from fastapi.concurrency import run_in_threadpool
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

from app.core.config import settings
from app.core.logging import logger

MAX_PDF_ROWS = 2000
PDF_TRUNCATED_MARKER = "... (truncated) ..."
PDF_MARGIN = 40


@dataclass(frozen=True)
class ReportStorage:
    """Where report files live on disk and where they are served from."""

    directory: Path
    url_path: str = "/reports"

    def path_for(self, name: str) -> Path:
        # Names are generated server-side; strip any directory part anyway
        return self.directory / Path(name).name

    def public_url(self, base_url: str, name: str) -> str:
        return f"{base_url.rstrip('/')}{self.url_path}/{name}"

    def ensure_directory(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)


def default_storage() -> ReportStorage:
    return ReportStorage(
        directory=Path(settings.reports.directory),
        url_path=settings.reports.url_path,
    )


def build_report_name(report_type: str, period: str, extension: str, epoch_millis: Optional[int] = None) -> str:
    """File name for a report generated now (or at ``epoch_millis``)."""
    if epoch_millis is None:
        epoch_millis = time.time_ns() // 1_000_000
    return f"{report_type}-{period}-{epoch_millis}.{extension}"


def resolve_field(row: Dict[str, Any], path: str) -> Any:
    """Look up a possibly dotted path (``a.b``) in nested mappings."""
    value: Any = row
    for part in path.split("."):
        if not isinstance(value, dict):
            return None
        value = value.get(part)
    return value


def format_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return json.dumps(value, default=str)
    return str(value)


def fields_for(rows: Sequence[Dict[str, Any]], fields: Optional[Sequence[str]]) -> List[str]:
    """Explicit field list, falling back to the first row's keys."""
    if fields:
        return list(fields)
    return list(rows[0].keys()) if rows else []


def _flush_to_disk(handle) -> None:
    handle.flush()
    os.fsync(handle.fileno())


def _write_csv(path: Path, rows: Iterable[Dict[str, Any]], fields: Sequence[str]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="") as handle:
        writer = csv.writer(handle, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
        writer.writerow(fields)
        for row in rows:
            writer.writerow([format_cell(resolve_field(row, name)) for name in fields])
        _flush_to_disk(handle)


def _write_pdf(
    path: Path,
    title: str,
    period_label: str,
    rows: Sequence[Dict[str, Any]],
    columns: Sequence[str],
) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    width, height = A4
    usable_width = width - 2 * PDF_MARGIN

    with open(path, "wb") as handle:
        pdf = canvas.Canvas(handle, pagesize=A4)
        pdf.setTitle(title)
        y = height - PDF_MARGIN

        def write_line(text: str, font: str, size: int, leading: float) -> None:
            nonlocal y
            for line in simpleSplit(text, font, size, usable_width) or [""]:
                if y - leading < PDF_MARGIN:
                    pdf.showPage()
                    y = height - PDF_MARGIN
                y -= leading
                pdf.setFont(font, size)
                pdf.drawString(PDF_MARGIN, y, line)

        write_line(title, "Helvetica-Bold", 18, 22)
        write_line(f"Period: {period_label}", "Helvetica", 10, 16)
        y -= 10
        write_line(" | ".join(columns), "Helvetica-Bold", 12, 16)
        y -= 4

        for count, row in enumerate(rows):
            if count >= MAX_PDF_ROWS:
                write_line(PDF_TRUNCATED_MARKER, "Helvetica-Oblique", 10, 13)
                break
            cells = [format_cell(resolve_field(row, column)) for column in columns]
            write_line(" | ".join(cells), "Helvetica", 10, 13)

        pdf.save()
        _flush_to_disk(handle)


async def write_csv_report(
    storage: ReportStorage,
    name: str,
    rows: Sequence[Dict[str, Any]],
    fields: Optional[Sequence[str]],
) -> Path:
    """
    Write rows as CSV.

    Args:
        storage: Target reports storage
        name: File name inside the storage directory
        rows: Rows to write
        fields: Column order; the first row's keys when empty

    Returns:
        Path of the written file
    """
    path = storage.path_for(name)
    columns = fields_for(rows, fields)
    await run_in_threadpool(_write_csv, path, rows, columns)
    logger.info(f"CSV report written: {path} ({len(rows)} rows)")
    return path


async def write_pdf_report(
    storage: ReportStorage,
    name: str,
    title: str,
    period_label: str,
    rows: Sequence[Dict[str, Any]],
    columns: Optional[Sequence[str]],
) -> Path:
    """
    Write rows as an A4 PDF, one pipe-joined line per row.

    At most ``MAX_PDF_ROWS`` rows are written; a truncation marker follows
    when there are more.

    Returns:
        Path of the written file
    """
    path = storage.path_for(name)
    columns = fields_for(rows, columns)
    await run_in_threadpool(_write_pdf, path, title, period_label, rows, columns)
    logger.info(f"PDF report written: {path} ({min(len(rows), MAX_PDF_ROWS)} rows)")
    return path
