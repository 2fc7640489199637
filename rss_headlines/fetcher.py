from __future__ import annotations

import logging
import time
from typing import Optional

import requests

from .exceptions import FetchError

logger = logging.getLogger(__name__)

_HEADERS = {
    "Accept": "application/rss+xml, application/xml, text/xml",
    "User-Agent": "Mozilla/5.0 (compatible; rss-headlines/1.0)",
}
_CHUNK_SIZE = 8192


def _read_body(resp: requests.Response, *, url: str, timeout: float, deadline: float) -> bytes:
    # requests' timeout only bounds each socket read; the deadline bounds the whole body.
    chunks = []
    for chunk in resp.iter_content(chunk_size=_CHUNK_SIZE):
        if chunk:
            chunks.append(chunk)
        if time.monotonic() > deadline:
            raise FetchError(f"Request timeout after {timeout}s: {url}", url=url)
    return b"".join(chunks)


def fetch_feed(url: str, *, timeout: float, session: Optional[requests.Session] = None) -> bytes:
    """
    Fetch a single feed URL and return the raw response body.

    Exactly one request is made; retrying is left to the caller. `timeout` caps
    the whole request, including a body that trickles in slowly.
    Raises FetchError on timeout, transport failure or any status other than 200.
    """
    http = session or requests
    deadline = time.monotonic() + timeout
    try:
        resp = http.get(url, headers=_HEADERS, timeout=timeout, stream=True)
    except requests.Timeout as e:
        raise FetchError(f"Request timeout after {timeout}s: {url}", url=url) from e
    except requests.RequestException as e:
        raise FetchError(f"Failed to fetch feed: {url} ({e})", url=url) from e

    try:
        if resp.status_code != 200:
            raise FetchError(
                f"Feed fetch failed with status code {resp.status_code}: {url}",
                url=url,
                status_code=resp.status_code,
            )
        try:
            body = _read_body(resp, url=url, timeout=timeout, deadline=deadline)
        except requests.Timeout as e:
            raise FetchError(f"Request timeout after {timeout}s: {url}", url=url) from e
        except requests.RequestException as e:
            raise FetchError(f"Failed to read feed body: {url} ({e})", url=url) from e
    finally:
        resp.close()

    logger.debug(f"Fetched {len(body)} bytes from {url}")
    return body
