from __future__ import annotations

from collections import Counter
import math
import re
from typing import Iterable, List, Optional

from .errors import InvalidInputError
from .lexicon import DEFAULT_LEXICON, Lexicon
from .models import SummaryResult
from .normalizer import TextNormalizer

MIN_TEXT_LENGTH = 100
MIN_SENTENCE_LENGTH = 10
LEAD_BOOST = 1.2
CLOSING_BOOST = 1.1
DEFAULT_KEYWORD_COUNT = 5

# A sentence ends at . ! or ? when the next visible character is upper case.
_SENTENCE_BREAK_RE = re.compile(r"(?<=[.!?])\s*(?=[A-ZÀ-ÖØ-ÞÇĞİÖŞÜ])")


def split_sentences(text: str) -> List[str]:
    pieces = (piece.strip() for piece in _SENTENCE_BREAK_RE.split(text))
    return [piece for piece in pieces if len(piece) > MIN_SENTENCE_LENGTH]


class Summarizer:
    """Extractive summarizer ranking sentences by TF/ISF weight.

    Sentence statistics are rebuilt on every call; nothing is carried over
    between unrelated texts.
    """

    def __init__(self, lexicon: Optional[Lexicon] = None, keyword_count: int = DEFAULT_KEYWORD_COUNT) -> None:
        lexicon = lexicon or DEFAULT_LEXICON
        self._normalizer = TextNormalizer(lexicon.summary_stop_words)
        self._keyword_count = keyword_count

    def summarize(
        self,
        text: Optional[str],
        sentence_count: int = 3,
        *,
        extract_keywords: bool = False,
    ) -> SummaryResult:
        if sentence_count < 1:
            raise InvalidInputError("sentence_count must be at least 1")
        text = text or ""

        if len(text) < MIN_TEXT_LENGTH:
            return SummaryResult(
                original_text=text,
                summary=text,
                sentence_count=1 if text else 0,
                reduction_ratio=0.0,
                keywords=[] if extract_keywords else None,
            )

        sentences = split_sentences(text)
        keywords = self.keywords(text) if extract_keywords else None

        if len(sentences) <= sentence_count:
            return SummaryResult(
                original_text=text,
                summary=" ".join(sentences),
                sentence_count=len(sentences),
                reduction_ratio=0.0,
                keywords=keywords,
            )

        scores = self._score_sentences(sentences)
        ranked = sorted(range(len(sentences)), key=lambda idx: scores[idx], reverse=True)
        selected = sorted(ranked[:sentence_count])
        summary = " ".join(sentences[idx] for idx in selected)

        return SummaryResult(
            original_text=text,
            summary=summary,
            sentence_count=len(selected),
            reduction_ratio=(len(text) - len(summary)) / len(text) * 100,
            keywords=keywords,
        )

    def summarize_many(self, texts: Iterable[Optional[str]], total_sentences: int = 5) -> SummaryResult:
        combined = " ".join(text for text in texts if text)
        return self.summarize(combined, total_sentences, extract_keywords=True)

    def keywords(self, text: Optional[str], count: Optional[int] = None) -> List[str]:
        """Most frequent non-stop-word tokens, ties kept in first-seen order."""
        count = self._keyword_count if count is None else count
        if count <= 0:
            return []
        frequencies = Counter(self._normalizer.normalize(text))
        return [word for word, _ in frequencies.most_common(count)]

    def headline(self, text: Optional[str], max_length: int = 100) -> str:
        title = self.summarize(text, 1).summary
        if len(title) > max_length:
            title = title[: max_length - 3] + "..."
        return title

    def _score_sentences(self, sentences: List[str]) -> List[float]:
        tokenized = [self._normalizer.normalize(sentence) for sentence in sentences]
        term_counts = [Counter(tokens) for tokens in tokenized]
        sentence_total = len(sentences)
        document_frequency: Counter[str] = Counter()
        for counts in term_counts:
            document_frequency.update(counts.keys())

        def isf(term: str) -> float:
            return 1 + math.log(sentence_total / (1 + document_frequency[term]))

        scores: List[float] = []
        last = sentence_total - 1
        for idx, tokens in enumerate(tokenized):
            if not tokens:
                scores.append(0.0)
                continue
            counts = term_counts[idx]
            score = sum(counts[token] * isf(token) for token in tokens)
            if idx == 0:
                score *= LEAD_BOOST
            if idx == last:
                score *= CLOSING_BOOST
            scores.append(score / math.sqrt(len(tokens)))
        return scores
