"""Tests for the single-shot feed fetcher."""

import time

import pytest
import requests

from rss_headlines.exceptions import FetchError
from rss_headlines.fetcher import fetch_feed

from conftest import FEED_URL, FakeResponse, FakeSession


def test_returns_body_on_200():
    session = FakeSession(b"<rss/>")
    assert fetch_feed(FEED_URL, timeout=2.0, session=session) == b"<rss/>"

    call = session.calls[0]
    assert call["url"] == FEED_URL
    assert call["timeout"] == 2.0
    assert "application/rss+xml" in call["headers"]["Accept"]


@pytest.mark.parametrize("status", [404, 500, 503])
def test_non_200_status_raises_with_code(status):
    session = FakeSession(FakeResponse(b"", status_code=status))
    with pytest.raises(FetchError) as exc_info:
        fetch_feed(FEED_URL, timeout=2.0, session=session)
    assert exc_info.value.status_code == status
    assert exc_info.value.url == FEED_URL


def test_timeout_is_terminal_and_not_retried():
    session = FakeSession(requests.Timeout("read timed out"))
    with pytest.raises(FetchError) as exc_info:
        fetch_feed(FEED_URL, timeout=0.5, session=session)
    assert "timeout" in str(exc_info.value).lower()
    assert exc_info.value.status_code is None
    assert isinstance(exc_info.value.__cause__, requests.Timeout)
    assert len(session.calls) == 1


def test_transport_error_is_wrapped():
    session = FakeSession(requests.ConnectionError("connection refused"))
    with pytest.raises(FetchError) as exc_info:
        fetch_feed(FEED_URL, timeout=2.0, session=session)
    assert isinstance(exc_info.value.__cause__, requests.ConnectionError)


def test_requests_streamed_body():
    session = FakeSession(b"<rss/>")
    fetch_feed(FEED_URL, timeout=2.0, session=session)
    assert session.calls[0]["stream"] is True


def test_slow_trickling_body_hits_overall_timeout():
    # Each chunk arrives well within the per-read timeout, the whole body does not.
    slow = FakeResponse(b"0123456789", chunk=1, delay=0.1)
    session = FakeSession(slow)

    started = time.monotonic()
    with pytest.raises(FetchError) as exc_info:
        fetch_feed(FEED_URL, timeout=0.3, session=session)
    elapsed = time.monotonic() - started

    assert "timeout" in str(exc_info.value).lower()
    assert elapsed < 0.8
    assert slow.closed


def test_body_read_error_is_wrapped_and_response_closed():
    class BrokenResponse(FakeResponse):
        def iter_content(self, chunk_size=1):
            yield b"<rss"
            raise requests.ConnectionError("connection reset")

    broken = BrokenResponse(b"")
    with pytest.raises(FetchError) as exc_info:
        fetch_feed(FEED_URL, timeout=2.0, session=FakeSession(broken))
    assert isinstance(exc_info.value.__cause__, requests.ConnectionError)
    assert broken.closed


def test_error_status_closes_response():
    resp = FakeResponse(b"", status_code=500)
    with pytest.raises(FetchError):
        fetch_feed(FEED_URL, timeout=2.0, session=FakeSession(resp))
    assert resp.closed
