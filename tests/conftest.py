"""Shared fixtures: synthetic RSS documents and a fake HTTP session."""

from __future__ import annotations

import time
from typing import List, Optional
from xml.sax.saxutils import escape

import pytest

from rss_headlines import HeadlineService, HeadlineSettings

FEED_URL = "https://feeds.example.test/schlagzeilen/index.rss"


def make_rss(
    count: int,
    *,
    keyword: Optional[str] = None,
    start: int = 0,
    end: int = -1,
    pub_date: Optional[str] = None,
) -> bytes:
    """Build an RSS 2.0 document with `count` items; items start..end carry `keyword`."""
    items = []
    for i in range(1, count + 1):
        if keyword and start <= i <= end:
            title = f"Article with {keyword} {i}"
        else:
            title = f"Regular Article {i}"
        date = pub_date if pub_date is not None else f"Mon, 25 Sep 2023 {i % 24:02d}:00:00 +0000"
        items.append(
            "    <item>\n"
            f"      <title><![CDATA[{title}]]></title>\n"
            f"      <link>https://www.spiegel.de/{i}</link>\n"
            f"      <pubDate>{escape(date)}</pubDate>\n"
            "      <category>Politik</category>\n"
            "    </item>\n"
        )
    doc = (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<rss version="2.0">\n'
        "  <channel>\n"
        "    <title>SPIEGEL ONLINE</title>\n"
        "    <link>https://www.spiegel.de</link>\n"
        "    <description>Schlagzeilen</description>\n"
        + "".join(items)
        + "  </channel>\n"
        "</rss>\n"
    )
    return doc.encode("utf-8")


class FakeResponse:
    """Minimal streamed response; `delay` sleeps before every `chunk`-sized piece."""

    def __init__(self, content: bytes, status_code: int = 200, *, chunk: int = 0, delay: float = 0.0) -> None:
        self.content = content
        self.status_code = status_code
        self.chunk = chunk
        self.delay = delay
        self.closed = False

    def iter_content(self, chunk_size=1):
        size = self.chunk or chunk_size
        for i in range(0, len(self.content), size):
            if self.delay:
                time.sleep(self.delay)
            yield self.content[i:i + size]

    def close(self) -> None:
        self.closed = True


class FakeSession:
    """Stands in for requests.Session; serves queued responses and records calls."""

    def __init__(self, *responses) -> None:
        self.responses: List = list(responses)
        self.calls: List[dict] = []
        self.closed = False

    def get(self, url, headers=None, timeout=None, **kwargs):
        self.calls.append({"url": url, "headers": headers, "timeout": timeout, "stream": kwargs.get("stream")})
        item = self.responses[0] if len(self.responses) == 1 else self.responses.pop(0)
        if isinstance(item, BaseException):
            raise item
        if isinstance(item, bytes):
            return FakeResponse(item)
        return item

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def settings() -> HeadlineSettings:
    return HeadlineSettings(feed_url=FEED_URL)


@pytest.fixture
def make_service(settings):
    created = []

    def _make(*responses, **overrides) -> HeadlineService:
        cfg = settings.with_overrides(**overrides) if overrides else settings
        session = FakeSession(*responses)
        svc = HeadlineService(cfg, session=session)
        created.append(svc)
        return svc

    yield _make
    for svc in created:
        svc.close()
