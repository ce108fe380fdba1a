"""Static word tables used by the text analytics.

Tables are frozen and bundled into a :class:`Lexicon` that each analyzer
receives at construction time, so two analyzers never share mutable state.
The default tables target Turkish-language news.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import FrozenSet, Mapping

# Stop words for similarity and sentiment preprocessing.
DEDUP_STOP_WORDS: FrozenSet[str] = frozenset(
    {
        "ve",
        "ile",
        "veya",
        "ama",
        "ancak",
        "için",
        "gibi",
        "kadar",
        "bir",
        "bu",
        "şu",
        "o",
        "ki",
        "de",
        "da",
        "olan",
        "olarak",
        "daha",
        "çok",
        "en",
        "her",
        "var",
        "yok",
        "ne",
        "nasıl",
        "neden",
        "nerede",
    }
)

# Wider list for summarization and keyword extraction.
SUMMARY_STOP_WORDS: FrozenSet[str] = DEDUP_STOP_WORDS | frozenset(
    {
        "fakat",
        "çünkü",
        "mi",
        "mı",
        "mu",
        "mü",
        "bazı",
        "hiç",
        "şey",
        "ben",
        "sen",
        "biz",
        "siz",
        "onlar",
        "bunu",
        "şunu",
        "onu",
        "evet",
        "hayır",
        "niçin",
        "hangi",
        "hangisi",
        "kim",
        "kimin",
        "şöyle",
        "böyle",
        "işte",
        "yani",
        "ya",
        "hem",
        "hep",
        "artık",
        "henüz",
        "sadece",
        "yalnız",
        "tüm",
        "bütün",
    }
)

POSITIVE_WORDS: FrozenSet[str] = frozenset(
    {
        "başarı",
        "başarılı",
        "güzel",
        "harika",
        "mükemmel",
        "olumlu",
        "artış",
        "yükseliş",
        "kazanç",
        "kar",
        "ilerleme",
        "büyüme",
        "rekor",
        "zafer",
        "mutlu",
        "sevindirici",
        "umut",
        "umutlu",
        "iyi",
        "iyileşme",
        "pozitif",
        "destek",
        "destekli",
        "avantaj",
        "fırsat",
        "yenilik",
        "yenilikçi",
        "verimli",
        "verimlilik",
        "kaliteli",
        "güçlü",
        "sağlam",
        "istikrar",
        "istikrarlı",
        "barış",
        "huzur",
        "refah",
        "zengin",
        "zenginlik",
        "övgü",
        "takdir",
        "ödül",
        "başarım",
        "kazanım",
        "atılım",
        "zirve",
        "lider",
        "liderlik",
        "çözüm",
        "anlaşma",
        "uzlaşma",
        "işbirliği",
        "dayanışma",
        "yardım",
    }
)

NEGATIVE_WORDS: FrozenSet[str] = frozenset(
    {
        "kötü",
        "olumsuz",
        "düşüş",
        "azalış",
        "kayıp",
        "zarar",
        "kriz",
        "sorun",
        "problem",
        "tehlike",
        "tehlikeli",
        "risk",
        "riskli",
        "endişe",
        "kaygı",
        "korku",
        "panik",
        "çöküş",
        "iflas",
        "başarısız",
        "başarısızlık",
        "felaket",
        "yıkım",
        "yıkıcı",
        "ölüm",
        "öldü",
        "saldırı",
        "savaş",
        "çatışma",
        "terör",
        "şiddet",
        "suç",
        "suçlu",
        "tutuklandı",
        "hapis",
        "ceza",
        "yasak",
        "yasaklandı",
        "iptal",
        "ertelendi",
        "durduruldu",
        "engel",
        "engellendi",
        "reddedildi",
        "protesto",
        "grev",
        "enflasyon",
        "işsizlik",
        "yoksulluk",
        "fakir",
        "hastalık",
        "salgın",
        "virüs",
        "deprem",
        "sel",
        "yangın",
        "kaza",
        "çarpışma",
        "patlama",
        "acı",
        "üzücü",
        "trajedi",
        "trajik",
        "vahşet",
        "cinayet",
        "taciz",
        "istismar",
        "yolsuzluk",
        "rüşvet",
        "skandal",
        "ihanet",
    }
)

INTENSIFIERS: Mapping[str, float] = MappingProxyType(
    {
        "çok": 1.5,
        "aşırı": 1.8,
        "oldukça": 1.3,
        "fazla": 1.4,
        "büyük": 1.3,
        "dev": 1.5,
        "devasa": 1.6,
        "muazzam": 1.7,
        "korkunç": 1.6,
        "inanılmaz": 1.5,
        "şiddetli": 1.5,
        "ağır": 1.4,
        "ciddi": 1.4,
        "kritik": 1.5,
    }
)

NEGATORS: FrozenSet[str] = frozenset(
    {"değil", "yok", "olmadan", "dışında", "hariç", "asla", "hiç", "hiçbir"}
)


@dataclass(frozen=True)
class Lexicon:
    """Immutable bundle of word tables handed to the analyzers."""

    dedup_stop_words: FrozenSet[str] = DEDUP_STOP_WORDS
    summary_stop_words: FrozenSet[str] = SUMMARY_STOP_WORDS
    positive_words: FrozenSet[str] = POSITIVE_WORDS
    negative_words: FrozenSet[str] = NEGATIVE_WORDS
    intensifiers: Mapping[str, float] = field(default_factory=lambda: INTENSIFIERS)
    negators: FrozenSet[str] = NEGATORS

    def __post_init__(self) -> None:
        # Accept plain sets/dicts from callers but store read-only views.
        object.__setattr__(self, "dedup_stop_words", frozenset(self.dedup_stop_words))
        object.__setattr__(self, "summary_stop_words", frozenset(self.summary_stop_words))
        object.__setattr__(self, "positive_words", frozenset(self.positive_words))
        object.__setattr__(self, "negative_words", frozenset(self.negative_words))
        object.__setattr__(self, "intensifiers", MappingProxyType(dict(self.intensifiers)))
        object.__setattr__(self, "negators", frozenset(self.negators))


DEFAULT_LEXICON = Lexicon()
