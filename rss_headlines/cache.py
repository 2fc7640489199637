from __future__ import annotations

import logging
import threading
import time
from datetime import datetime, timezone
from typing import Callable, Optional, Sequence, Tuple

from .exceptions import ParseError
from .models import CacheEntry, HeadlineRecord

logger = logging.getLogger(__name__)


class HeadlineCache:
    """
    Holds the most recently loaded batch of headlines.

    Reads of a populated cache are a single attribute load of an immutable
    CacheEntry. Population on a miss is serialized: concurrent callers that miss
    at the same time wait for one loader call and all receive its result.
    """

    def __init__(
        self,
        loader: Callable[[], Sequence[HeadlineRecord]],
        *,
        ttl: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._loader = loader
        self._ttl = ttl
        self._clock = clock
        self._lock = threading.Lock()
        # (entry, monotonic capture time); replaced as a whole, never mutated
        self._slot: Optional[Tuple[CacheEntry, float]] = None

    def _fresh(self) -> Optional[CacheEntry]:
        slot = self._slot
        if slot is None:
            return None
        entry, stamp = slot
        if self._ttl is not None and self._clock() - stamp >= self._ttl:
            return None
        return entry

    def peek(self) -> Optional[CacheEntry]:
        """Return the live entry without loading."""
        return self._fresh()

    def get(self) -> CacheEntry:
        entry = self._fresh()
        if entry is not None:
            logger.debug("Headline cache hit")
            return entry

        with self._lock:
            # Another caller may have populated the cache while we waited.
            entry = self._fresh()
            if entry is not None:
                return entry

            logger.info("Headline cache miss, loading feed")
            headlines = tuple(self._loader())
            if not headlines:
                raise ParseError("Loader returned no headlines")

            entry = CacheEntry(headlines=headlines, captured_at=datetime.now(timezone.utc))
            self._slot = (entry, self._clock())
            logger.info(f"Cached {len(headlines)} headlines")
            return entry

    def reset(self) -> None:
        with self._lock:
            self._slot = None
        logger.debug("Headline cache reset")
