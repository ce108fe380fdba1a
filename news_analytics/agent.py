from __future__ import annotations

from datetime import datetime, timedelta, timezone
import time
from typing import Any, Callable, Dict, Iterable, List, Optional

from .config import AnalyticsConfig
from .errors import InvalidInputError, NotFoundError
from .lexicon import DEFAULT_LEXICON, Lexicon
from .models import (
    BatchSentiment,
    DuplicateGroup,
    DuplicateResult,
    NewsRecord,
    RecordSentiment,
    SentimentResult,
    SummaryResult,
)
from .providers.base import BaseProvider, filter_by_category, search_records
from .providers.rss_provider import RSSProvider
from .sentiment import SentimentScorer
from .similarity import SimilarityEngine
from .store import CacheStats, RecordStore
from .summarizer import Summarizer

QUERY_PREFIX = "news:query:"
SUMMARY_PREFIX = "summary:"
TREND_SENTENCES = 5


class NewsAgent:
    """Fetches, caches and analyzes news records."""

    def __init__(
        self,
        config: Optional[AnalyticsConfig] = None,
        provider: Optional[BaseProvider] = None,
        store: Optional[RecordStore] = None,
        lexicon: Optional[Lexicon] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.config = config or AnalyticsConfig.from_env()
        self.provider = provider or RSSProvider(self.config.feed_urls, items_per_feed=self.config.items_per_feed)
        self.store = store or RecordStore(
            default_ttl=self.config.cache_ttl,
            check_period=self.config.check_period,
            snapshot_path=self.config.snapshot_path,
            save_interval=self.config.save_interval,
            clock=clock,
        )
        self._clock = clock
        lexicon = lexicon or DEFAULT_LEXICON
        self.summarizer = Summarizer(lexicon)
        self.scorer = SentimentScorer(lexicon)
        self.similarity = SimilarityEngine(lexicon)

    def start(self) -> None:
        self.store.start()

    def close(self) -> None:
        self.store.stop()

    def _now(self) -> datetime:
        return datetime.fromtimestamp(self._clock(), tz=timezone.utc)

    def _threshold(self, threshold: Optional[float]) -> float:
        return self.config.duplicate_threshold if threshold is None else threshold

    # -- records ---------------------------------------------------------

    def fetch_news(
        self,
        source: Optional[str] = None,
        category: Optional[str] = None,
        keyword: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[NewsRecord]:
        limit = limit or self.config.default_limit
        if limit < 1:
            raise InvalidInputError("limit must be positive")
        cache_key = f"{QUERY_PREFIX}{source or 'all'}:{category or ''}:{keyword or ''}"
        cached = self.store.get(cache_key)
        if cached is not None:
            return [NewsRecord.from_dict(item) for item in cached[:limit]]

        records = list(self.provider.fetch(source=source))
        if category:
            records = filter_by_category(records, category)
        if keyword:
            records = search_records(records, keyword)

        self.store.set(cache_key, [record.to_dict() for record in records])
        for record in records:
            self.store.set_record(record)
        return records[:limit]

    def get_record(self, news_id: str) -> NewsRecord:
        if not news_id:
            raise InvalidInputError("news_id is required")
        record = self.store.get_record(news_id)
        if record is None:
            raise NotFoundError(f"News not found: {news_id}")
        return record

    # -- summaries -------------------------------------------------------

    def summarize_news(
        self,
        text: Optional[str] = None,
        news_id: Optional[str] = None,
        sentence_count: int = 3,
        extract_keywords: bool = True,
    ) -> SummaryResult:
        if news_id:
            cache_key = f"{SUMMARY_PREFIX}{news_id}:{sentence_count}:{int(extract_keywords)}"
            cached = self.store.get(cache_key)
            if cached is not None:
                return SummaryResult.from_dict(cached)
            record = self.get_record(news_id)
            body = record.content or record.description or record.title
            result = self.summarizer.summarize(body, sentence_count, extract_keywords=extract_keywords)
            self.store.set(cache_key, result.to_dict())
            return result
        if text:
            return self.summarizer.summarize(text, sentence_count, extract_keywords=extract_keywords)
        raise InvalidInputError("Either text or news_id is required")

    def analyze_trends(self, hours: float = 24, top_words: int = 10) -> Dict[str, Any]:
        if hours <= 0:
            raise InvalidInputError("hours must be positive")
        cutoff = self._now() - timedelta(hours=hours)
        recent = [record for record in self.store.all_records() if record.published_at > cutoff]
        if not recent:
            return {
                "period_hours": hours,
                "news_count": 0,
                "top_keywords": [],
                "summary": "",
                "sentiment": self.scorer.score_batch([]).aggregate.to_dict(),
                "most_recent": [],
            }

        texts = [f"{record.title} {record.description or ''}" for record in recent]
        analysis = self.summarizer.summarize_many(texts, TREND_SENTENCES)
        return {
            "period_hours": hours,
            "news_count": len(recent),
            "top_keywords": self.summarizer.keywords(" ".join(texts), top_words),
            "summary": analysis.summary,
            "sentiment": self.scorer.score_batch(record.title for record in recent).aggregate.to_dict(),
            "most_recent": [
                {
                    "id": record.id,
                    "title": record.title,
                    "source": record.source,
                    "published_at": record.published_at.isoformat(),
                }
                for record in recent[:5]
            ],
        }

    # -- sentiment -------------------------------------------------------

    def sentiment(self, text: Optional[str]) -> SentimentResult:
        return self.scorer.score(text)

    def sentiment_batch(self, texts: Iterable[Optional[str]]) -> BatchSentiment:
        return self.scorer.score_batch(texts)

    def news_sentiment(self, news_id: str) -> RecordSentiment:
        record = self.get_record(news_id)
        return self.scorer.score_record(record.title, record.content or record.description)

    # -- duplicates ------------------------------------------------------

    def find_duplicates(self, threshold: Optional[float] = None) -> DuplicateResult:
        return self.similarity.cluster_duplicates(self.store.all_records(), self._threshold(threshold))

    def dedupe_news(self, threshold: Optional[float] = None) -> List[NewsRecord]:
        return self.similarity.dedupe(self.store.all_records(), self._threshold(threshold))

    def similar_news(self, news_id: str, threshold: Optional[float] = None) -> DuplicateGroup:
        target = self.get_record(news_id)
        return self.similarity.find_similar_to(target, self.store.all_records(), self._threshold(threshold))

    # -- cache -----------------------------------------------------------

    def recent_news(self) -> List[NewsRecord]:
        """Every cached record, newest first."""
        return self.store.all_records()

    def sources(self) -> List[str]:
        return list(self.config.feed_urls)

    def cache_stats(self) -> CacheStats:
        return self.store.stats()

    def maintain(self) -> Dict[str, int]:
        return {
            "evicted_old": self.store.evict_older_than(self.config.days_to_keep),
            "evicted_capacity": self.store.enforce_capacity(self.config.max_cache_kb),
        }
