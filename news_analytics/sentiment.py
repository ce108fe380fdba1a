from __future__ import annotations

from typing import Iterable, List, Optional

from .lexicon import DEFAULT_LEXICON, Lexicon
from .models import BatchSentiment, RecordSentiment, SentimentAggregate, SentimentResult
from .normalizer import tokenize

POSITIVE_THRESHOLD = 0.5
NEGATIVE_THRESHOLD = -0.5
TITLE_WEIGHT = 0.6
CONTENT_WEIGHT = 0.4
# Matches needed for full confidence.
CONFIDENCE_SATURATION = 5


def label_for(score: float) -> str:
    if score > POSITIVE_THRESHOLD:
        return "positive"
    if score < NEGATIVE_THRESHOLD:
        return "negative"
    return "neutral"


def _unique(words: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(words))


class SentimentScorer:
    """Lexicon sentiment with one-token intensifier and negation lookahead.

    A negator or intensifier applies to the next token only. The exception is
    a negator that directly follows a lexicon hit ("kriz değil"): it flips
    that hit instead and is not carried forward, so in "kötü değil kriz" the
    word "kriz" keeps its own polarity.
    """

    def __init__(self, lexicon: Optional[Lexicon] = None) -> None:
        self._lexicon = lexicon or DEFAULT_LEXICON

    def score(self, text: Optional[str]) -> SentimentResult:
        if not text or not text.strip():
            return SentimentResult(score=0.0, comparative=0.0, label="neutral", confidence=0.0)

        lexicon = self._lexicon
        positive_hits: List[str] = []
        negative_hits: List[str] = []
        total = 0.0
        matched = 0
        intensifier = 1.0
        negated = False
        # Contribution of the previous token if it was a lexicon hit.
        previous = 0.0

        for word in tokenize(text):
            if word in lexicon.intensifiers:
                intensifier = lexicon.intensifiers[word]
                previous = 0.0
                continue
            if word in lexicon.negators:
                if previous:
                    # Postposed negator ("kriz değil") flips the word before it.
                    moved = (positive_hits if previous > 0 else negative_hits).pop()
                    (negative_hits if previous > 0 else positive_hits).append(moved)
                    total -= 2 * previous
                    previous = 0.0
                else:
                    negated = True
                continue

            if word in lexicon.positive_words:
                base = 1.0
            elif word in lexicon.negative_words:
                base = -1.0
            else:
                base = 0.0

            previous = 0.0
            if base:
                contribution = base * intensifier
                if negated:
                    contribution = -contribution
                (positive_hits if contribution > 0 else negative_hits).append(word)
                total += contribution
                matched += 1
                previous = contribution

            intensifier = 1.0
            negated = False

        comparative = total / matched if matched else 0.0
        confidence = min(matched / CONFIDENCE_SATURATION, 1.0)
        total = round(total, 2)
        return SentimentResult(
            score=total,
            comparative=round(comparative, 2),
            label=label_for(total),
            confidence=round(confidence, 2),
            positive_words=_unique(positive_hits),
            negative_words=_unique(negative_hits),
        )

    def score_batch(self, texts: Iterable[Optional[str]]) -> BatchSentiment:
        results = [self.score(text) for text in texts]
        counts = {"positive": 0, "negative": 0, "neutral": 0}
        for result in results:
            counts[result.label] += 1
        average = round(sum(result.score for result in results) / len(results), 2) if results else 0.0
        return BatchSentiment(
            results=results,
            aggregate=SentimentAggregate(
                average_score=average,
                overall_label=label_for(average),
                positive_count=counts["positive"],
                negative_count=counts["negative"],
                neutral_count=counts["neutral"],
            ),
        )

    def score_record(self, title: Optional[str], content: Optional[str] = None) -> RecordSentiment:
        """Score a headline and body together, weighting the headline higher."""
        title_result = self.score(title)
        content_result = self.score(content) if content else None

        if content_result is not None:
            score = title_result.score * TITLE_WEIGHT + content_result.score * CONTENT_WEIGHT
            comparative = title_result.comparative * TITLE_WEIGHT + content_result.comparative * CONTENT_WEIGHT
            positive = title_result.positive_words + content_result.positive_words
            negative = title_result.negative_words + content_result.negative_words
        else:
            score = title_result.score
            comparative = title_result.comparative
            positive = list(title_result.positive_words)
            negative = list(title_result.negative_words)

        score = round(score, 2)
        return RecordSentiment(
            score=score,
            comparative=round(comparative, 2),
            label=label_for(score),
            confidence=title_result.confidence,
            positive_words=_unique(positive),
            negative_words=_unique(negative),
            title_sentiment=title_result,
        )
