"""Data models for reconciliation."""

from .transaction import (
    Account,
    BankTransaction,
    BookTransaction,
    ReconciliationStatus,
    TransactionType,
)
from .results import (
    DisputeCase,
    DisputeKind,
    DisputeOutcome,
    DisputeResolution,
    DisputeStatus,
    Match,
    MatchType,
    ReconciliationReport,
    RiskProfile,
    Suggestion,
    SuggestionKind,
)

__all__ = [
    "Account",
    "BankTransaction",
    "BookTransaction",
    "ReconciliationStatus",
    "TransactionType",
    "DisputeCase",
    "DisputeKind",
    "DisputeOutcome",
    "DisputeResolution",
    "DisputeStatus",
    "Match",
    "MatchType",
    "ReconciliationReport",
    "RiskProfile",
    "Suggestion",
    "SuggestionKind",
]
