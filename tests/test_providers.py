from datetime import datetime, timezone
import hashlib

import pytest
import requests

from news_analytics.errors import UpstreamError
from news_analytics.providers.base import filter_by_category, search_records
from news_analytics.providers.mock_provider import MockProvider
from news_analytics.providers.rss_provider import RSSProvider, _get_content

from .conftest import NOW

RSS = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Ornek Haber</title>
    <link>https://haber.example.com</link>
    <description>Son dakika</description>
    <item>
      <title>Borsa haftaya rekorla basladi</title>
      <link>https://haber.example.com/ekonomi/borsa-rekor</link>
      <description>Endeks ilk islem gununde yukseldi.</description>
      <category>Ekonomi</category>
      <pubDate>Wed, 01 May 2024 10:00:00 GMT</pubDate>
      <enclosure url="https://haber.example.com/img/borsa.jpg" type="image/jpeg" length="1024"/>
    </item>
    <item>
      <title>Yagis uyarisi yapildi</title>
      <link>https://haber.example.com/gundem/yagis</link>
      <pubDate>Wed, 01 May 2024 11:00:00 GMT</pubDate>
    </item>
  </channel>
</rss>
"""


class FakeResponse:
    def __init__(self, content: bytes) -> None:
        self.content = content

    def raise_for_status(self) -> None:
        return None


class TestRSSProvider:
    def test_maps_entries_to_records(self, monkeypatch):
        provider = RSSProvider(["https://haber.example.com/rss"])
        monkeypatch.setattr(provider._session, "get", lambda url, timeout: FakeResponse(RSS))

        records = list(provider.fetch())
        assert [record.title for record in records] == ["Yagis uyarisi yapildi", "Borsa haftaya rekorla basladi"]

        borsa = records[1]
        assert borsa.id == hashlib.md5(b"https://haber.example.com/ekonomi/borsa-rekor").hexdigest()
        assert borsa.source == "haber.example.com"
        assert borsa.category == "Ekonomi"
        assert borsa.description == "Endeks ilk islem gununde yukseldi."
        assert borsa.image_url == "https://haber.example.com/img/borsa.jpg"
        assert borsa.published_at == datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)

    def test_ids_are_stable_across_fetches(self, monkeypatch):
        provider = RSSProvider(["https://haber.example.com/rss"])
        monkeypatch.setattr(provider._session, "get", lambda url, timeout: FakeResponse(RSS))
        first = [record.id for record in provider.fetch()]
        second = [record.id for record in provider.fetch()]
        assert first == second

    def test_items_per_feed_and_limit(self, monkeypatch):
        provider = RSSProvider(["https://haber.example.com/rss"], items_per_feed=1)
        monkeypatch.setattr(provider._session, "get", lambda url, timeout: FakeResponse(RSS))
        assert len(list(provider.fetch())) == 1

        provider = RSSProvider(["https://haber.example.com/rss"])
        monkeypatch.setattr(provider._session, "get", lambda url, timeout: FakeResponse(RSS))
        assert len(list(provider.fetch(limit=1))) == 1

    def test_failed_feed_is_skipped(self, monkeypatch):
        def fake_get(url, timeout):
            if "down" in url:
                raise requests.ConnectionError("unreachable")
            return FakeResponse(RSS)

        provider = RSSProvider(["https://down.example.com/rss", "https://haber.example.com/rss"])
        monkeypatch.setattr(provider._session, "get", fake_get)
        assert len(list(provider.fetch())) == 2

    def test_all_feeds_failing(self, monkeypatch):
        def fake_get(url, timeout):
            raise requests.ConnectionError("unreachable")

        provider = RSSProvider(["https://down.example.com/rss"])
        monkeypatch.setattr(provider._session, "get", fake_get)
        with pytest.raises(UpstreamError):
            provider.fetch()

    def test_blank_content_blocks_are_dropped(self):
        assert _get_content({"content": [{"value": ""}, {"value": "  \n"}]}) is None
        assert _get_content({"content": [{"value": ""}, {"value": "Metin"}]}) == "Metin"


class TestFilters:
    def test_filter_by_category(self):
        records = MockProvider(now=NOW).sample()
        assert len(filter_by_category(records, "EKONOMI")) == 2

    def test_search_records_checks_body(self):
        records = MockProvider(now=NOW).sample()
        assert [record.source for record in search_records(records, "hasar")] == ["example.com"]

    def test_mock_provider_source_filter(self):
        provider = MockProvider(now=NOW)
        assert {record.source for record in provider.fetch(source="example.net")} == {"example.net"}
