"""Cached news analytics: summaries, sentiment and near-duplicate detection."""

from .agent import NewsAgent
from .config import AnalyticsConfig
from .lexicon import DEFAULT_LEXICON, Lexicon
from .models import NewsRecord
from .sentiment import SentimentScorer
from .similarity import SimilarityEngine
from .store import RecordStore
from .summarizer import Summarizer

__all__ = [
    "AnalyticsConfig",
    "DEFAULT_LEXICON",
    "Lexicon",
    "NewsAgent",
    "NewsRecord",
    "RecordStore",
    "SentimentScorer",
    "SimilarityEngine",
    "Summarizer",
]
