from __future__ import annotations

from typing import List, Optional, Sequence

from .errors import require_threshold
from .lexicon import DEFAULT_LEXICON, Lexicon
from .models import DuplicateGroup, DuplicateMatch, DuplicateResult, NewsRecord, SimilarityScore
from .normalizer import TextNormalizer

TITLE_WEIGHT = 0.6
CONTENT_WEIGHT = 0.4
DEFAULT_THRESHOLD = 0.6


def jaccard(a: set[str], b: set[str]) -> float:
    if not a and not b:
        return 1.0
    if not a or not b:
        return 0.0
    return len(a & b) / len(a | b)


def _body_length(record: NewsRecord) -> int:
    return len(record.content or "") + len(record.description or "")


class SimilarityEngine:
    """Jaccard-based near-duplicate detection over news records."""

    def __init__(self, lexicon: Optional[Lexicon] = None) -> None:
        lexicon = lexicon or DEFAULT_LEXICON
        self._normalizer = TextNormalizer(lexicon.dedup_stop_words)

    def text_similarity(self, text_a: str, text_b: str) -> float:
        return jaccard(self._normalizer.token_set(text_a), self._normalizer.token_set(text_b))

    def similarity(self, a: NewsRecord, b: NewsRecord) -> SimilarityScore:
        title_similarity = self.text_similarity(a.title, b.title)
        body_a, body_b = a.body, b.body
        if body_a.strip() and body_b.strip():
            content_similarity = self.text_similarity(body_a, body_b)
            overall = title_similarity * TITLE_WEIGHT + content_similarity * CONTENT_WEIGHT
            method = "title+content"
        else:
            content_similarity = 0.0
            overall = title_similarity
            method = "title-only"
        return SimilarityScore(
            overall=round(overall, 2),
            title_similarity=round(title_similarity, 2),
            content_similarity=round(content_similarity, 2),
            method=method,
        )

    def is_duplicate(self, a: NewsRecord, b: NewsRecord, threshold: float = DEFAULT_THRESHOLD) -> bool:
        threshold = require_threshold(threshold)
        return self.similarity(a, b).overall >= threshold

    def cluster_duplicates(
        self, records: Sequence[NewsRecord], threshold: float = DEFAULT_THRESHOLD
    ) -> DuplicateResult:
        """Greedy single-link grouping in input order.

        Each unprocessed record claims every later unprocessed record within
        ``threshold``. Groups are not merged transitively afterwards.
        """
        threshold = require_threshold(threshold)
        records = list(records)
        processed = [False] * len(records)
        groups: List[DuplicateGroup] = []
        unique: List[NewsRecord] = []

        for i, record in enumerate(records):
            if processed[i]:
                continue
            group = DuplicateGroup(primary=record)
            for j in range(i + 1, len(records)):
                if processed[j]:
                    continue
                score = self.similarity(record, records[j])
                if score.overall >= threshold:
                    group.members.append(_match(records[j], score))
                    processed[j] = True
            processed[i] = True

            if group.members:
                group.average_score = _average(group.members)
                groups.append(group)
            else:
                unique.append(record)

        return DuplicateResult(groups=groups, unique_records=unique, threshold=threshold, total=len(records))

    def dedupe(self, records: Sequence[NewsRecord], threshold: float = DEFAULT_THRESHOLD) -> List[NewsRecord]:
        """Collapse each duplicate group to its most detailed record, newest first."""
        result = self.cluster_duplicates(records, threshold)
        kept = list(result.unique_records)
        for group in result.groups:
            best = group.primary
            for candidate in group.records()[1:]:
                if _body_length(candidate) > _body_length(best):
                    best = candidate
            kept.append(best)
        kept.sort(key=lambda record: record.published_at, reverse=True)
        return kept

    def find_similar_to(
        self,
        target: NewsRecord,
        candidates: Sequence[NewsRecord],
        threshold: float = DEFAULT_THRESHOLD,
    ) -> DuplicateGroup:
        threshold = require_threshold(threshold)
        group = DuplicateGroup(primary=target)
        for candidate in candidates:
            if candidate.id == target.id:
                continue
            score = self.similarity(target, candidate)
            if score.overall >= threshold:
                group.members.append(_match(candidate, score))
        if group.members:
            group.average_score = _average(group.members)
        group.members.sort(key=lambda member: member.score, reverse=True)
        return group


def _match(record: NewsRecord, score: SimilarityScore) -> DuplicateMatch:
    return DuplicateMatch(
        record=record,
        score=score.overall,
        title_similarity=score.title_similarity,
        content_similarity=score.content_similarity,
    )


def _average(members: Sequence[DuplicateMatch]) -> float:
    return round(sum(member.score for member in members) / len(members), 2)
