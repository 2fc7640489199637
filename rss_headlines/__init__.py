"""
rss_headlines

A small library that serves "top N headlines" from a single RSS feed.

Core ideas:
- Input: one RSS 2.0 feed URL (SPIEGEL by default)
- Process: fetch → parse → cache → filter (whole batch) → limit
- Output: QueryResult (headlines + total matching count), or a JSON/CSV export

Example
-------
from rss_headlines import HeadlineService, HeadlineSettings

service = HeadlineService(HeadlineSettings.from_env())

result = service.query(filter="politik", limit=5)
print(result.total_matching)
for item in result.headlines:
    print(item.published_at.text, item.source, item.title)

payload = service.export("csv", filter="politik")
with open(payload.filename, "wb") as fh:
    fh.write(payload.body)
"""
from .models import HeadlineRecord, PublishedAt, QueryResult, ExportPayload
from .config import HeadlineSettings
from .core import HeadlineService
from .exceptions import HeadlineError, FetchError, ParseError, InvalidParameterError

__all__ = [
    "HeadlineRecord",
    "PublishedAt",
    "QueryResult",
    "ExportPayload",
    "HeadlineSettings",
    "HeadlineService",
    "HeadlineError",
    "FetchError",
    "ParseError",
    "InvalidParameterError",
]
