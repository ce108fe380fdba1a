from __future__ import annotations

from datetime import datetime, timezone
import logging
from typing import Iterable, List, Mapping, Optional, Sequence
from urllib.parse import urlparse

import feedparser
import requests

from ..errors import UpstreamError
from ..models import NewsRecord
from .base import BaseProvider

logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0 (compatible; news-analytics/0.1)"


class RSSProvider(BaseProvider):
    """Fetches RSS/Atom feeds and maps their entries to ``NewsRecord``."""

    def __init__(self, feed_urls: Sequence[str], items_per_feed: int = 20, timeout: float = 10) -> None:
        self._feed_urls = list(feed_urls)
        self._items_per_feed = items_per_feed
        self._timeout = timeout
        self._session = requests.Session()
        self._session.headers.update({"User-Agent": USER_AGENT})

    def fetch(self, source: Optional[str] = None, limit: Optional[int] = None) -> Iterable[NewsRecord]:
        urls = [source] if source else self._feed_urls
        records: List[NewsRecord] = []
        errors: List[str] = []
        for url in urls:
            try:
                records.extend(self.fetch_feed(url))
            except (requests.RequestException, ValueError) as exc:
                logger.warning("RSS feed fetch failed for %s: %s", url, exc)
                errors.append(f"{url}: {exc}")
        if not records and errors:
            raise UpstreamError(f"No news could be fetched. Errors: {', '.join(errors)}")
        records.sort(key=lambda record: record.published_at, reverse=True)
        if limit:
            records = records[:limit]
        return records

    def fetch_feed(self, url: str) -> List[NewsRecord]:
        response = self._session.get(url, timeout=self._timeout)
        response.raise_for_status()
        feed = feedparser.parse(response.content)
        if feed.get("bozo") and not feed.entries:
            raise ValueError(f"unparseable feed: {feed.get('bozo_exception')}")
        source = urlparse(url).hostname or url
        entries = (feed.entries or [])[: self._items_per_feed]
        return [_to_record(entry, source) for entry in entries]


def _to_record(entry: Mapping[str, object], source: str) -> NewsRecord:
    content = _get_content(entry)
    summary = entry.get("summary")
    description = summary if isinstance(summary, str) and summary else content
    return NewsRecord.create(
        title=str(entry.get("title") or "Untitled"),
        link=str(entry.get("link") or ""),
        published_at=_parse_published(entry) or datetime.now(timezone.utc),
        source=source,
        description=description,
        content=content,
        category=_get_category(entry),
        image_url=_get_image(entry),
    )


def _get_content(entry: Mapping[str, object]) -> Optional[str]:
    contents = entry.get("content")
    if contents:
        parts: List[str] = []
        for part in contents:
            if isinstance(part, Mapping):
                value = part.get("value")
                if isinstance(value, str) and value.strip():
                    parts.append(value)
        if parts:
            return "\n\n".join(parts)
    return None


def _get_category(entry: Mapping[str, object]) -> Optional[str]:
    tags = entry.get("tags")
    if tags:
        first = tags[0]
        if isinstance(first, Mapping) and first.get("term"):
            return str(first["term"])
    return None


def _get_image(entry: Mapping[str, object]) -> Optional[str]:
    for enclosure in entry.get("enclosures") or []:
        if isinstance(enclosure, Mapping) and enclosure.get("href"):
            return str(enclosure["href"])
    for field_name in ("media_thumbnail", "media_content"):
        for media in entry.get(field_name) or []:
            if isinstance(media, Mapping) and media.get("url"):
                return str(media["url"])
    return None


def _parse_published(entry: Mapping[str, object]) -> Optional[datetime]:
    for field_name in ("published_parsed", "updated_parsed"):
        parsed = entry.get(field_name)
        if parsed:
            try:
                return datetime(*parsed[:6], tzinfo=timezone.utc)
            except (TypeError, ValueError):
                continue
    return None
