from .base import BaseProvider, ProviderList, filter_by_category, search_records
from .mock_provider import MockProvider
from .rss_provider import RSSProvider

__all__ = [
    "BaseProvider",
    "MockProvider",
    "ProviderList",
    "RSSProvider",
    "filter_by_category",
    "search_records",
]
