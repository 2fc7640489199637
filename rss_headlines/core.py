from __future__ import annotations

import logging
from typing import Optional

import requests

from . import exporter
from .cache import HeadlineCache
from .config import HeadlineSettings
from .exceptions import InvalidParameterError
from .fetcher import fetch_feed
from .filtering import apply_filter_and_limit, validate_filter
from .models import ExportPayload, FetchBatch, HeadlineRecord, QueryResult
from .parser import parse_feed

logger = logging.getLogger(__name__)


class HeadlineService:
    """
    High-level API: serve top-N headlines of one feed from an in-memory cache.

    Pipeline: cache → (miss: fetch → parse → populate) → filter full batch → limit → [export]

    Create one instance per process and hand it to the request handlers.
    """

    def __init__(
        self,
        settings: Optional[HeadlineSettings] = None,
        *,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.settings = settings or HeadlineSettings()
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.cache = HeadlineCache(self._load, ttl=self.settings.cache_ttl)

    def _load(self) -> FetchBatch:
        s = self.settings
        logger.info(f"Fetching feed {s.feed_url}")
        body = fetch_feed(s.feed_url, timeout=s.timeout, session=self.session)
        return parse_feed(body, source=s.source, max_items=s.fetch_size)

    def query(self, filter: str = "", limit: Optional[int] = None) -> QueryResult:
        """
        Return the first `limit` headlines whose title contains `filter`, in feed order.

        Raises FetchError/ParseError when the cache is empty and the feed cannot be
        loaded, InvalidParameterError for a non-positive limit or an oversized filter.
        """
        keyword = validate_filter(filter, self.settings.max_filter_length)
        if limit is None:
            limit = self.settings.default_limit
        if limit > self.settings.max_limit:
            raise InvalidParameterError(f"limit exceeds maximum allowed value of {self.settings.max_limit}")

        entry = self.cache.get()
        return apply_filter_and_limit(entry.headlines, keyword, limit)

    def latest(self) -> HeadlineRecord:
        return self.cache.get().headlines[0]

    def reset_cache(self) -> None:
        self.cache.reset()

    def export(self, fmt: str, filter: str = "", limit: Optional[int] = None) -> ExportPayload:
        fmt = exporter.check_format(fmt)
        keyword = validate_filter(filter, self.settings.max_filter_length)
        max_items = self.settings.max_export_items
        if limit is None:
            limit = max_items
        elif limit > max_items:
            raise InvalidParameterError(f"limit exceeds maximum allowed value of {max_items}")

        result = apply_filter_and_limit(self.cache.get().headlines, keyword, limit)
        payload = exporter.render(fmt, result.headlines, keyword)
        logger.info(f"Exported {len(result.headlines)} headlines as {fmt}")
        return payload

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "HeadlineService":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
