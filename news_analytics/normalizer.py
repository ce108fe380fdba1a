from __future__ import annotations

import re
from typing import FrozenSet, Iterable, List, Optional

_WORD_RE = re.compile(r"\w+", re.UNICODE)


def fold_case(text: str) -> str:
    # str.lower() maps the dotted capital I to "i" plus a combining dot.
    return text.replace("İ", "i").lower()


def tokenize(text: Optional[str]) -> List[str]:
    """Case-folded word tokens with no filtering."""
    if not text:
        return []
    return [token for token in _WORD_RE.findall(fold_case(text)) if token.strip("_")]


class TextNormalizer:
    """Tokenizes text and drops short tokens and stop words."""

    def __init__(self, stop_words: Iterable[str], min_length: int = 3) -> None:
        self._stop_words: FrozenSet[str] = frozenset(stop_words)
        self._min_length = min_length

    @property
    def stop_words(self) -> FrozenSet[str]:
        return self._stop_words

    def normalize(self, text: Optional[str]) -> List[str]:
        return [
            token
            for token in tokenize(text)
            if len(token) >= self._min_length and token not in self._stop_words
        ]

    def token_set(self, text: Optional[str]) -> set[str]:
        return set(self.normalize(text))
