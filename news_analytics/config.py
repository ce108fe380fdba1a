from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

DEFAULT_FEEDS = [
    "https://feeds.bbci.co.uk/turkce/rss.xml",
    "https://www.ensonhaber.com/rss/ensonhaber.xml",
    "https://www.milliyet.com.tr/rss/rssnew/dunyarss.xml",
    "https://www.bloomberght.com/rss",
]


def _split_csv(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass(slots=True)
class AnalyticsConfig:
    """Runtime configuration for the news cache and analytics."""

    feed_urls: List[str] = field(default_factory=lambda: list(DEFAULT_FEEDS))
    cache_ttl: int = 3600
    check_period: int = 600
    save_interval: int = 60
    snapshot_path: Optional[str] = "cache/persistent-cache.json"
    max_cache_kb: int = 10240
    days_to_keep: int = 7
    default_limit: int = 10
    duplicate_threshold: float = 0.6
    items_per_feed: int = 20

    def __post_init__(self) -> None:
        if not 0.0 <= self.duplicate_threshold <= 1.0:
            raise ValueError("NEWS_ANALYTICS_DUPLICATE_THRESHOLD must be between 0 and 1")

    @classmethod
    def from_env(cls) -> "AnalyticsConfig":
        import os

        return cls(
            feed_urls=_split_csv(os.getenv("NEWS_ANALYTICS_FEEDS")) or list(DEFAULT_FEEDS),
            cache_ttl=_parse_int(os.getenv("NEWS_ANALYTICS_CACHE_TTL"), "NEWS_ANALYTICS_CACHE_TTL", 3600),
            check_period=_parse_int(os.getenv("NEWS_ANALYTICS_CHECK_PERIOD"), "NEWS_ANALYTICS_CHECK_PERIOD", 600),
            save_interval=_parse_int(os.getenv("NEWS_ANALYTICS_SAVE_INTERVAL"), "NEWS_ANALYTICS_SAVE_INTERVAL", 60),
            snapshot_path=os.getenv("NEWS_ANALYTICS_SNAPSHOT_PATH") or "cache/persistent-cache.json",
            max_cache_kb=_parse_int(os.getenv("NEWS_ANALYTICS_MAX_CACHE_KB"), "NEWS_ANALYTICS_MAX_CACHE_KB", 10240),
            days_to_keep=_parse_int(os.getenv("NEWS_ANALYTICS_DAYS_TO_KEEP"), "NEWS_ANALYTICS_DAYS_TO_KEEP", 7),
            default_limit=_parse_int(os.getenv("NEWS_ANALYTICS_DEFAULT_LIMIT"), "NEWS_ANALYTICS_DEFAULT_LIMIT", 10),
            duplicate_threshold=_parse_float(
                os.getenv("NEWS_ANALYTICS_DUPLICATE_THRESHOLD"), "NEWS_ANALYTICS_DUPLICATE_THRESHOLD", 0.6
            ),
            items_per_feed=_parse_int(os.getenv("NEWS_ANALYTICS_ITEMS_PER_FEED"), "NEWS_ANALYTICS_ITEMS_PER_FEED", 20),
        )


def _parse_int(value: Optional[str], name: str, default: int) -> int:
    if value is None or value.strip() == "":
        return default
    try:
        parsed = int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer if set") from None
    if parsed < 0:
        raise ValueError(f"{name} must not be negative")
    return parsed


def _parse_float(value: Optional[str], name: str, default: float) -> float:
    if value is None or value.strip() == "":
        return default
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"{name} must be a number if set") from None
