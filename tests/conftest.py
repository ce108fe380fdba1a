from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from news_analytics.models import NewsRecord
from news_analytics.store import RecordStore

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, start: float) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(NOW.timestamp())


@pytest.fixture
def store(tmp_path, clock) -> RecordStore:
    return RecordStore(
        default_ttl=3600,
        check_period=0,
        snapshot_path=tmp_path / "cache" / "persistent-cache.json",
        save_interval=0,
        clock=clock,
    )


def make_record(
    title: str,
    *,
    link: str | None = None,
    hours_ago: float = 0,
    content: str | None = None,
    description: str | None = None,
    category: str | None = None,
    source: str = "example.com",
) -> NewsRecord:
    return NewsRecord.create(
        title=title,
        link=link if link is not None else f"https://{source}/{title.lower().replace(' ', '-')}",
        published_at=NOW - timedelta(hours=hours_ago),
        source=source,
        description=description,
        content=content,
        category=category,
    )
