from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from ..models import NewsRecord


class BaseProvider(ABC):
    """Abstract base class for news record producers."""

    @abstractmethod
    def fetch(self, source: Optional[str] = None, limit: Optional[int] = None) -> Iterable[NewsRecord]:
        """Yield ``NewsRecord`` objects from one source, or from every source when ``source`` is None."""


ProviderList = List[BaseProvider]


def filter_by_category(records: Iterable[NewsRecord], category: str) -> List[NewsRecord]:
    needle = category.lower()
    return [record for record in records if record.category and needle in record.category.lower()]


def search_records(records: Iterable[NewsRecord], keyword: str) -> List[NewsRecord]:
    needle = keyword.lower()
    return [
        record
        for record in records
        if needle in record.title.lower()
        or needle in (record.description or "").lower()
        or needle in (record.content or "").lower()
    ]
