"""Suggestions, risk assessment and dispute detection."""

from .disputes import (
    DisputeDetector,
    evidence_checklist,
    recommended_evidence,
    resolve_dispute,
)
from .risk import RiskAssessor
from .suggestions import SuggestionGenerator

__all__ = [
    "DisputeDetector",
    "evidence_checklist",
    "recommended_evidence",
    "resolve_dispute",
    "RiskAssessor",
    "SuggestionGenerator",
]
