"""Matching engine, strategies and similarity primitives."""

from .engine import MatchOutcome, ReconciliationEngine
from .normalize import normalize, normalize_reference
from .scoring import SimilarityScorer
from .strategies import (
    MatchingStrategy,
    ExactMatchStrategy,
    FuzzyScoreStrategy,
)

__all__ = [
    "MatchOutcome",
    "ReconciliationEngine",
    "normalize",
    "normalize_reference",
    "SimilarityScorer",
    "MatchingStrategy",
    "ExactMatchStrategy",
    "FuzzyScoreStrategy",
]
