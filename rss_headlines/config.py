from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Optional

from dotenv import find_dotenv, load_dotenv


DEFAULT_FEED_URL = "https://www.spiegel.de/schlagzeilen/index.rss"
DEFAULT_SOURCE = "SPIEGEL"

# Fetch size must stay above the largest limit a query may ask for, otherwise
# a sparse filter would silently miss matches beyond the retained items.
DEFAULT_FETCH_SIZE = 250
DEFAULT_LIMIT = 5
MAX_LIMIT = 200
MAX_FILTER_LENGTH = 100
MAX_EXPORT_ITEMS = 1000
DEFAULT_TIMEOUT_SEC = 2.0


@dataclass(frozen=True)
class HeadlineSettings:
    feed_url: str = DEFAULT_FEED_URL
    source: str = DEFAULT_SOURCE
    timeout: float = DEFAULT_TIMEOUT_SEC
    fetch_size: int = DEFAULT_FETCH_SIZE
    default_limit: int = DEFAULT_LIMIT
    max_limit: int = MAX_LIMIT
    max_filter_length: int = MAX_FILTER_LENGTH
    max_export_items: int = MAX_EXPORT_ITEMS
    cache_ttl: Optional[float] = None  # seconds; None keeps an entry until reset

    def __post_init__(self) -> None:
        if not self.feed_url:
            raise ValueError("feed_url must not be empty")
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")
        for name in ("fetch_size", "default_limit", "max_limit", "max_filter_length", "max_export_items"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be >= 1")
        if self.default_limit > self.max_limit:
            raise ValueError("default_limit must not exceed max_limit")
        if self.fetch_size < self.max_limit:
            raise ValueError(
                f"fetch_size ({self.fetch_size}) must be >= max_limit ({self.max_limit})"
            )
        if self.cache_ttl is not None and self.cache_ttl <= 0:
            raise ValueError("cache_ttl must be positive or None")

    def with_overrides(self, **changes) -> "HeadlineSettings":
        return replace(self, **changes)

    @classmethod
    def from_env(cls, *, dotenv: bool = True) -> "HeadlineSettings":
        """
        Build settings from environment variables, optionally loading a .env file first.

        Recognized: RSS_FEED_URL (or SPIEGEL_RSS_URL), RSS_SOURCE, RSS_TIMEOUT,
        RSS_FETCH_SIZE, RSS_CACHE_TTL.
        """
        if dotenv:
            load_dotenv(find_dotenv(usecwd=True))

        url = os.getenv("RSS_FEED_URL") or os.getenv("SPIEGEL_RSS_URL") or DEFAULT_FEED_URL
        ttl = os.getenv("RSS_CACHE_TTL")
        return cls(
            feed_url=url,
            source=os.getenv("RSS_SOURCE") or DEFAULT_SOURCE,
            timeout=float(os.getenv("RSS_TIMEOUT") or DEFAULT_TIMEOUT_SEC),
            fetch_size=int(os.getenv("RSS_FETCH_SIZE") or DEFAULT_FETCH_SIZE),
            cache_ttl=float(ttl) if ttl else None,
        )
