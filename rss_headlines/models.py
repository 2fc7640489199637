from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class PublishedAt:
    """
    Outcome of reading an item's publish date.

    `value` is a timezone-aware datetime when the source text could be parsed,
    otherwise None and only `raw` is meaningful.
    """
    raw: str
    value: Optional[datetime] = None

    @property
    def parsed(self) -> bool:
        return self.value is not None

    @property
    def text(self) -> str:
        if self.value is not None:
            return self.value.isoformat()
        return self.raw


@dataclass(frozen=True)
class HeadlineRecord:
    """
    One news item as served to callers.

    WARNING: Do not change fields lightly. This is the library's contract.
    """
    title: str
    link: str
    published_at: PublishedAt
    source: str
    category: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        # category is CSV-only
        return {
            "title": self.title,
            "link": self.link,
            "publishedAt": self.published_at.text,
            "source": self.source,
        }


# Feed document order, never re-sorted.
FetchBatch = Tuple[HeadlineRecord, ...]


@dataclass(frozen=True)
class CacheEntry:
    headlines: FetchBatch
    captured_at: datetime


@dataclass(frozen=True)
class QueryResult:
    headlines: Tuple[HeadlineRecord, ...]
    total_matching: int


@dataclass(frozen=True)
class ExportEnvelope:
    export_date: datetime
    total_items: int
    filter_applied: str
    headlines: Tuple[HeadlineRecord, ...]


@dataclass(frozen=True)
class ExportPayload:
    body: bytes
    content_type: str
    filename: str
