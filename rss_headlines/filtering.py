from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from .exceptions import InvalidParameterError
from .models import HeadlineRecord, QueryResult


def matches(record: HeadlineRecord, keyword: str) -> bool:
    """Case-insensitive substring test on the title. An empty keyword matches everything."""
    if not keyword:
        return True
    return keyword.casefold() in record.title.casefold()


def filter_headlines(records: Iterable[HeadlineRecord], keyword: str) -> List[HeadlineRecord]:
    if not keyword:
        return list(records)
    needle = keyword.casefold()
    return [r for r in records if needle in r.title.casefold()]


def apply_filter_and_limit(batch: Sequence[HeadlineRecord], keyword: str, limit: int) -> QueryResult:
    """
    Filter the whole batch, then keep the first `limit` matches in feed order.

    `total_matching` counts matches across the entire batch, not only the ones returned.
    """
    if limit < 1:
        raise InvalidParameterError(f"limit must be >= 1 (got {limit})")

    matched = filter_headlines(batch, keyword or "")
    return QueryResult(headlines=tuple(matched[:limit]), total_matching=len(matched))


def validate_filter(keyword: Optional[str], max_length: int) -> str:
    keyword = keyword or ""
    if len(keyword) > max_length:
        raise InvalidParameterError(f"filter parameter too long (max {max_length} characters)")
    return keyword


def clamp_limit(limit: Optional[int], *, default: int, maximum: int) -> int:
    """
    Normalize a requested limit the way the query endpoint does.

    Missing or non-positive values fall back to `default`; large values are capped.
    """
    if limit is None or limit < 1:
        return default
    return min(limit, maximum)
