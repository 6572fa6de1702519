"""
HTML previews of stored reports.

CSV reports are re-read and rebuilt as an HTML table; PDF reports are
embedded through an iframe pointing at their static URL.
"""

from html import escape
from pathlib import Path
from typing import Any, List

from app.models.report import Report
from app.utils.csv_parser import parse_csv

MAX_PREVIEW_ROWS = 500

_CSV_STYLE = """
    body { font-family: system-ui, -apple-system, "Segoe UI", Roboto, "Helvetica Neue", Arial; margin:10px; color:#111; }
    table { border-collapse: collapse; width: 100%; max-width:100%; }
    th, td { border: 1px solid #ddd; padding: 6px 8px; font-size: 13px; text-align: left; }
    thead th { background: #f3f4f6; position: sticky; top:0; z-index:2; }
    tbody tr:nth-child(even) { background: #fbfbfb; }
    .meta { margin-bottom: 12px; color: #444; }
    .truncated { margin-top:8px; color:#666; font-size:13px; }
"""

_PDF_STYLE = """
    html,body { height:100%; margin:0; }
    .container { height:100vh; display:flex; flex-direction:column; }
    iframe { flex:1; border:none; width:100%; height:100%; }
    .meta { padding:8px; background:#f5f7fb; font-family: system-ui, -apple-system, "Segoe UI", Roboto, Arial; }
"""


def _esc(value: Any) -> str:
    return "" if value is None else escape(str(value), quote=True)


def _page(title: str, style: str, body: str) -> str:
    return (
        "<!doctype html>\n"
        "<html>\n<head>\n"
        '<meta charset="utf-8" />\n'
        '<meta name="viewport" content="width=device-width,initial-scale=1" />\n'
        f"<title>{_esc(title)}</title>\n"
        f"<style>{style}</style>\n"
        "</head>\n<body>\n"
        f"{body}\n"
        "</body>\n</html>\n"
    )


def render_csv_table(report: Report, rows: List[List[str]]) -> str:
    """HTML table of parsed CSV rows; the first row becomes the header."""
    preview_rows = rows[:MAX_PREVIEW_ROWS]
    parts = [
        f'<div class="meta"><strong>{_esc(report.name)}</strong> - {_esc(report.period)} '
        f"- CSV preview (first {len(preview_rows)} rows)</div>",
        '<div style="overflow:auto; max-height:75vh;">',
        "<table>",
    ]

    if preview_rows:
        header, body = preview_rows[0], preview_rows[1:]
        parts.append("<thead><tr>" + "".join(f"<th>{_esc(h)}</th>" for h in header) + "</tr></thead>")
        parts.append("<tbody>")
        if body:
            for row in body:
                parts.append("<tr>" + "".join(f"<td>{_esc(cell)}</td>" for cell in row) + "</tr>")
        else:
            parts.append(f'<tr><td colspan="{max(len(header), 1)}"><em>No data</em></td></tr>')
        parts.append("</tbody>")
    else:
        parts.append("<tbody><tr><td><em>No data</em></td></tr></tbody>")

    parts.append("</table></div>")
    if len(rows) > len(preview_rows):
        parts.append(
            f'<div class="truncated">...preview truncated ({len(rows)} total rows). '
            "Download to view all.</div>"
        )
    return _page(f"CSV Preview - {report.name}", _CSV_STYLE, "\n".join(parts))


def render_pdf_frame(report: Report, static_url: str) -> str:
    body = (
        '<div class="container">\n'
        f'<div class="meta"><strong>{_esc(report.name)}</strong> - {_esc(report.period)}</div>\n'
        f'<iframe src="{_esc(static_url)}" title="pdf-preview"></iframe>\n'
        "</div>"
    )
    return _page(f"PDF Preview - {report.name}", _PDF_STYLE, body)


def render_download_fallback(report: Report) -> str:
    return (
        f'<p>Preview not available. <a href="{_esc(report.url)}" target="_blank">Download</a></p>'
    )


def render_preview(report: Report, path: Path, static_url: str) -> str:
    """
    Build the HTML preview for a report whose file exists at ``path``.

    Args:
        report: Report record
        path: Location of the rendered file
        static_url: Public URL the file is served from

    Returns:
        HTML document
    """
    if report.format == "csv":
        text = path.read_text(encoding="utf-8")
        return render_csv_table(report, parse_csv(text))
    if report.format == "pdf":
        return render_pdf_frame(report, static_url)
    return render_download_fallback(report)
