from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
import hashlib
from typing import Any, Dict, List, Mapping, Optional


def make_record_id(link: Optional[str], title: Optional[str]) -> str:
    """Stable id for a feed item: MD5 of its link, falling back to its title."""
    basis = link or title or ""
    return hashlib.md5(basis.encode("utf-8")).hexdigest()


def parse_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    else:
        raise ValueError(f"Unsupported datetime value: {value!r}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True, slots=True)
class NewsRecord:
    """Immutable news item as produced by the fetch layer."""

    id: str
    title: str
    link: str
    published_at: datetime
    source: str
    description: Optional[str] = None
    content: Optional[str] = None
    category: Optional[str] = None
    image_url: Optional[str] = None

    @classmethod
    def create(
        cls,
        *,
        title: str,
        link: str,
        published_at: datetime,
        source: str,
        description: Optional[str] = None,
        content: Optional[str] = None,
        category: Optional[str] = None,
        image_url: Optional[str] = None,
    ) -> "NewsRecord":
        return cls(
            id=make_record_id(link, title),
            title=title,
            link=link,
            published_at=parse_datetime(published_at),
            source=source,
            description=description,
            content=content,
            category=category,
            image_url=image_url,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "NewsRecord":
        # Unknown keys are ignored so newer snapshots stay readable.
        return cls(
            id=str(data["id"]),
            title=str(data.get("title") or ""),
            link=str(data.get("link") or ""),
            published_at=parse_datetime(data["published_at"]),
            source=str(data.get("source") or "unknown"),
            description=data.get("description"),
            content=data.get("content"),
            category=data.get("category"),
            image_url=data.get("image_url"),
        )

    @property
    def body(self) -> str:
        """Content if present, otherwise the description."""
        return self.content or self.description or ""

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["published_at"] = self.published_at.isoformat()
        return data


@dataclass(slots=True)
class SimilarityScore:
    overall: float
    title_similarity: float
    content_similarity: float
    method: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class DuplicateMatch:
    record: NewsRecord
    score: float
    title_similarity: float = 0.0
    content_similarity: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "record": self.record.to_dict(),
            "score": self.score,
            "title_similarity": self.title_similarity,
            "content_similarity": self.content_similarity,
        }


@dataclass(slots=True)
class DuplicateGroup:
    primary: NewsRecord
    members: List[DuplicateMatch] = field(default_factory=list)
    average_score: float = 0.0

    def records(self) -> List[NewsRecord]:
        return [self.primary] + [member.record for member in self.members]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "primary": self.primary.to_dict(),
            "members": [member.to_dict() for member in self.members],
            "average_score": self.average_score,
        }


@dataclass(slots=True)
class DuplicateResult:
    groups: List[DuplicateGroup]
    unique_records: List[NewsRecord]
    threshold: float
    total: int

    @property
    def group_count(self) -> int:
        return len(self.groups)

    @property
    def unique_count(self) -> int:
        return len(self.unique_records) + len(self.groups)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "unique_count": self.unique_count,
            "group_count": self.group_count,
            "threshold": self.threshold,
            "groups": [group.to_dict() for group in self.groups],
            "unique_records": [record.to_dict() for record in self.unique_records],
        }


@dataclass(slots=True)
class SentimentResult:
    score: float
    comparative: float
    label: str
    confidence: float
    positive_words: List[str] = field(default_factory=list)
    negative_words: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class RecordSentiment(SentimentResult):
    title_sentiment: Optional[SentimentResult] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class SentimentAggregate:
    average_score: float
    overall_label: str
    positive_count: int
    negative_count: int
    neutral_count: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class BatchSentiment:
    results: List[SentimentResult]
    aggregate: SentimentAggregate

    def to_dict(self) -> Dict[str, Any]:
        return {
            "results": [result.to_dict() for result in self.results],
            "aggregate": self.aggregate.to_dict(),
        }


@dataclass(slots=True)
class SummaryResult:
    original_text: str
    summary: str
    sentence_count: int
    reduction_ratio: float
    keywords: Optional[List[str]] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SummaryResult":
        return cls(
            original_text=data.get("original_text", ""),
            summary=data.get("summary", ""),
            sentence_count=int(data.get("sentence_count", 0)),
            reduction_ratio=float(data.get("reduction_ratio", 0.0)),
            keywords=data.get("keywords"),
        )
