from __future__ import annotations

import csv
import io
import json
import re
from datetime import datetime, timezone
from typing import Optional, Sequence

from .exceptions import InvalidParameterError
from .models import ExportEnvelope, ExportPayload, HeadlineRecord

FORMATS = ("json", "csv")
CONTENT_TYPES = {
    "json": "application/json",
    "csv": "text/csv; charset=utf-8",
}
CSV_HEADER = ["Title", "Link", "Published_At", "Source", "Category"]

# Spreadsheet apps treat cells starting with these as formulas.
_FORMULA_PREFIXES = ("=", "+", "-", "@", "\t", "\r")
_UNSAFE_FILENAME_CHARS = re.compile(r"[^\w.-]+")


def _now() -> datetime:
    return datetime.now(timezone.utc)


def build_envelope(
    headlines: Sequence[HeadlineRecord],
    filter_applied: str = "",
    *,
    now: Optional[datetime] = None,
) -> ExportEnvelope:
    items = tuple(headlines)
    return ExportEnvelope(
        export_date=now or _now(),
        total_items=len(items),
        filter_applied=filter_applied or "",
        headlines=items,
    )


def to_json(envelope: ExportEnvelope) -> bytes:
    doc = {
        "export_date": envelope.export_date.isoformat(),
        "total_items": envelope.total_items,
        "filter_applied": envelope.filter_applied,
        "headlines": [h.to_dict() for h in envelope.headlines],
    }
    return json.dumps(doc, ensure_ascii=False, indent=2).encode("utf-8")


def sanitize_csv_field(value: str) -> str:
    if value and value.startswith(_FORMULA_PREFIXES):
        return "'" + value
    return value


def to_csv(envelope: ExportEnvelope) -> bytes:
    """
    Render the envelope's headlines as CSV.

    Every field is quoted; embedded quotes are doubled and newlines stay inside
    the quoted field, so any standard reader recovers the original text.
    """
    buf = io.StringIO(newline="")
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL)
    writer.writerow(CSV_HEADER)
    for h in envelope.headlines:
        writer.writerow([
            sanitize_csv_field(h.title),
            sanitize_csv_field(h.link),
            sanitize_csv_field(h.published_at.text),
            sanitize_csv_field(h.source),
            sanitize_csv_field(h.category or ""),
        ])
    return buf.getvalue().encode("utf-8")


def check_format(fmt: Optional[str]) -> str:
    if not fmt:
        raise InvalidParameterError("missing format parameter")
    fmt = fmt.lower()
    if fmt not in FORMATS:
        raise InvalidParameterError("invalid format parameter: must be 'json' or 'csv'")
    return fmt


def export_filename(fmt: str, filter_applied: str = "", *, now: Optional[datetime] = None) -> str:
    stamp = (now or _now()).strftime("%Y%m%d_%H%M%S")
    safe = _UNSAFE_FILENAME_CHARS.sub("_", filter_applied or "").strip("_.")
    if safe:
        return f"rss_export_{safe}_{stamp}.{fmt}"
    return f"rss_export_{stamp}.{fmt}"


def render(
    fmt: str,
    headlines: Sequence[HeadlineRecord],
    filter_applied: str = "",
    *,
    now: Optional[datetime] = None,
) -> ExportPayload:
    fmt = check_format(fmt)
    envelope = build_envelope(headlines, filter_applied, now=now)
    body = to_json(envelope) if fmt == "json" else to_csv(envelope)
    return ExportPayload(
        body=body,
        content_type=CONTENT_TYPES[fmt],
        filename=export_filename(fmt, envelope.filter_applied, now=envelope.export_date),
    )
