# Admin export of reflections as CSV, JSON or PDF; personal JSON export.
import io
import json
import logging
from datetime import datetime, timedelta

import pandas as pd
from matplotlib.backends.backend_pdf import PdfPages
from matplotlib.figure import Figure

import trends

log = logging.getLogger(__name__)

ALL_TIME_START = datetime(2020, 1, 1)
MIME_TYPES = {
    "csv": "text/csv",
    "json": "application/json",
    "pdf": "application/pdf",
}
CONTENT_FIELDS = (
    "overall_mood",
    "energy_level",
    "stress_level",
    "motivation",
    "daily_highlight",
    "challenges_faced",
    "learning_progress",
    "goals_tomorrow",
    "gratitude",
)
PDF_SAMPLE_SIZE = 10
PDF_HIGHLIGHT_CHARS = 100
PDF_PAGE_SIZE = (8.27, 11.69)
PDF_LINES_PER_PAGE = 48


def date_range(time_range: str, now: datetime | None = None) -> tuple[datetime, datetime]:
    end = now or datetime.now()
    if time_range == "all":
        return ALL_TIME_START, end
    try:
        days = int(time_range)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid time range: {time_range}")
    if days < 1:
        raise ValueError(f"Invalid time range: {time_range}")
    return end - timedelta(days=days), end


def _iso(ts_ms) -> str:
    return datetime.fromtimestamp(ts_ms / 1000.0).isoformat() if ts_ms else ""


def build_export_rows(reflections: list) -> list:
    rows = []
    for r in reflections:
        content = r.get("content") or {}
        row = {
            "id": r.get("id"),
            "user_name": r.get("user_name") or "Unknown",
            "user_email": r.get("user_email") or "Unknown",
            "type": r.get("type"),
            "title": r.get("title"),
            "mood_score": r.get("mood_score"),
            "sentiment_score": r.get("sentiment_score"),
            "keywords": ", ".join(r.get("keywords") or []),
        }
        for field in CONTENT_FIELDS:
            value = content.get(field)
            row[field] = "" if value is None else value
        row["created_at"] = _iso(r.get("created_at"))
        row["updated_at"] = _iso(r.get("updated_at"))
        rows.append(row)
    return rows


def to_csv(rows: list) -> bytes:
    return pd.DataFrame(rows).to_csv(index=False).encode("utf-8")


def to_json(rows: list) -> bytes:
    return json.dumps(rows, indent=2).encode("utf-8")


def _pdf_lines(rows: list, start: datetime, end: datetime) -> list:
    lines = [
        ("Bootcamp Reflections Export", 20),
        ("", 10),
        (f"Date Range: {start:%m/%d/%Y} - {end:%m/%d/%Y}", 12),
        (f"Total Records: {len(rows)}", 12),
        ("", 10),
        ("Summary Statistics", 14),
    ]
    n = len(rows)
    avg_mood = sum(r.get("mood_score") or 0 for r in rows) / n if n else 0
    avg_sentiment = sum(r.get("sentiment_score") or 0 for r in rows) / n if n else 0
    lines.append((f"Average Mood Score: {avg_mood:.2f}/10", 10))
    lines.append((f"Average Sentiment Score: {avg_sentiment:.2f}", 10))
    lines.append(("Reflection Types:", 10))
    for rtype, count in trends.type_distribution(rows).items():
        lines.append((f"    {rtype}: {count}", 10))
    lines += [("", 10), ("Recent Reflections (Sample)", 14)]
    for i, r in enumerate(rows[:PDF_SAMPLE_SIZE], start=1):
        lines.append((f"{i}. {r.get('title')}", 8))
        lines.append((f"    User: {r.get('user_name')} | Type: {r.get('type')} | Mood: {r.get('mood_score')}/10", 8))
        highlight = r.get("daily_highlight") or ""
        if highlight:
            cut = highlight[:PDF_HIGHLIGHT_CHARS] + ("..." if len(highlight) > PDF_HIGHLIGHT_CHARS else "")
            lines.append((f"    Highlight: {cut}", 8))
        lines.append(("", 8))
    return lines


def to_pdf(rows: list, start: datetime, end: datetime) -> bytes:
    lines = _pdf_lines(rows, start, end)
    buf = io.BytesIO()
    with PdfPages(buf) as pdf:
        for offset in range(0, len(lines), PDF_LINES_PER_PAGE):
            fig = Figure(figsize=PDF_PAGE_SIZE)
            y = 0.95
            for text, size in lines[offset:offset + PDF_LINES_PER_PAGE]:
                if text:
                    fig.text(0.08, y, text, fontsize=size, family="sans-serif", va="top")
                y -= 0.9 / PDF_LINES_PER_PAGE
            pdf.savefig(fig)
    return buf.getvalue()


def export_filename(fmt: str, prefix: str = "reflections", now: datetime | None = None) -> str:
    return f"{prefix}-{(now or datetime.now()):%Y-%m-%d}.{fmt}"


def export(rows: list, fmt: str, start: datetime, end: datetime) -> tuple[bytes, str, str]:
    """Serialize export rows; returns (data, mime type, download filename)."""
    if fmt == "csv":
        data = to_csv(rows)
    elif fmt == "json":
        data = to_json(rows)
    elif fmt == "pdf":
        data = to_pdf(rows, start, end)
    else:
        raise ValueError("Invalid format")
    log.info("Exported %d reflections as %s", len(rows), fmt)
    return data, MIME_TYPES[fmt], export_filename(fmt, now=end)


def personal_export(reflections: list, analytics: list, time_range: str, now: datetime | None = None) -> bytes:
    doc = {
        "reflections": reflections,
        "analytics": analytics,
        "timeRange": time_range,
        "exportDate": (now or datetime.now()).isoformat(),
    }
    return json.dumps(doc, indent=2).encode("utf-8")
