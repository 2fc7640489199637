from __future__ import annotations

import calendar
import io
import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

import feedparser

from .exceptions import ParseError
from .models import FetchBatch, HeadlineRecord, PublishedAt

logger = logging.getLogger(__name__)

# bozo reasons that still leave a well-formed document behind
_BENIGN_BOZO = (feedparser.CharacterEncodingOverride,)


def _read_published(entry: Dict[str, Any]) -> PublishedAt:
    """
    Read the item's publish date.

    feedparser fills `published_parsed` (UTC struct_time) when it understands the
    text; otherwise the raw string is kept as-is.
    """
    raw = (entry.get("published") or entry.get("updated") or "").strip()
    for key in ("published_parsed", "updated_parsed"):
        val = entry.get(key)
        if isinstance(val, time.struct_time):
            try:
                ts = calendar.timegm(val)
                return PublishedAt(raw=raw, value=datetime.fromtimestamp(ts, tz=timezone.utc))
            except (OverflowError, ValueError):
                continue
    if raw:
        logger.warning(f"Unparsable publish date kept as raw text: {raw!r}")
    return PublishedAt(raw=raw)


def _get_category(entry: Dict[str, Any]) -> Optional[str]:
    tags = entry.get("tags")
    if isinstance(tags, list) and tags:
        t0 = tags[0]
        if isinstance(t0, dict):
            term = t0.get("term")
            if isinstance(term, str) and term.strip():
                return term.strip()
    return None


def parse_entry(entry: Dict[str, Any], *, source: str) -> Optional[HeadlineRecord]:
    """
    Map a raw feedparser entry to a HeadlineRecord.

    Returns None when the title or link is missing; a bad date never drops the item.
    """
    title = (entry.get("title") or "").strip()
    link = (entry.get("link") or "").strip()
    if not title or not link:
        return None

    return HeadlineRecord(
        title=title,
        link=link,
        published_at=_read_published(entry),
        source=source,
        category=_get_category(entry),
    )


def parse_feed(data: Union[bytes, str], *, source: str, max_items: int) -> FetchBatch:
    """
    Decode an RSS document into at most `max_items` records, in document order.

    Raises ParseError for malformed XML, a non-feed document or a feed without
    usable items.
    """
    if max_items < 1:
        raise ValueError("max_items must be >= 1")
    if isinstance(data, str):
        data = data.encode("utf-8")
    if not data or not data.strip():
        raise ParseError("Empty feed document")

    # A file-like object keeps feedparser from treating the body as a path or URL.
    feed = feedparser.parse(io.BytesIO(data))

    if getattr(feed, "bozo", 0):
        exc = getattr(feed, "bozo_exception", None)
        if not isinstance(exc, _BENIGN_BOZO):
            msg = "Invalid RSS feed"
            if exc:
                msg += f" ({exc})"
            raise ParseError(msg)

    if not feed.get("version"):
        raise ParseError("Document is not an RSS feed (no channel found)")

    entries = getattr(feed, "entries", None)
    if not isinstance(entries, list) or not entries:
        raise ParseError("Feed has no items")

    records: List[HeadlineRecord] = []
    skipped = 0
    for e in entries:
        if len(records) >= max_items:
            break
        rec = parse_entry(e, source=source)
        if rec is None:
            skipped += 1
            continue
        records.append(rec)

    if skipped:
        logger.warning(f"Skipped {skipped} feed item(s) without title or link")
    if not records:
        raise ParseError("Feed has no items with both title and link")

    logger.debug(f"Parsed {len(records)} of {len(entries)} feed items")
    return tuple(records)
