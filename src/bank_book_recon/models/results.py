"""Data models for reconciliation results, risk profiles and disputes."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from .transaction import BankTransaction, BookTransaction


class MatchType(Enum):
    """How a bank/book pair was linked."""

    EXACT = "exact"
    FUZZY = "fuzzy"
    PARTIAL = "partial"
    MANUAL = "manual"


class SuggestionKind(Enum):
    MISSING_TRANSACTION = "missing_transaction"
    DUPLICATE_TRANSACTION = "duplicate_transaction"
    AMOUNT_VARIANCE = "amount_variance"
    TIMING_DIFFERENCE = "timing_difference"


class DisputeKind(Enum):
    UNAUTHORIZED_TRANSACTION = "unauthorized_transaction"
    INCORRECT_AMOUNT = "incorrect_amount"
    DUPLICATE_CHARGE = "duplicate_charge"
    SERVICE_DISPUTE = "service_dispute"


class DisputeStatus(Enum):
    OPEN = "open"
    INVESTIGATING = "investigating"
    RESOLVED = "resolved"
    CLOSED = "closed"


class DisputeOutcome(Enum):
    APPROVED = "approved"
    DENIED = "denied"


@dataclass
class Match:
    """A 1:1 link between a book transaction and a bank transaction."""

    book_transaction_id: str
    bank_transaction_id: str
    confidence_score: float  # 0.0 to 1.0
    match_type: MatchType
    explanation: str
    variance_amount: Optional[Decimal] = None


@dataclass
class Suggestion:
    """A human-actionable follow-up derived from unmatched transactions."""

    kind: SuggestionKind
    description: str
    action: str
    confidence: float
    impact_amount: Decimal
    related_bank: Optional[BankTransaction] = None
    related_book: Optional[BookTransaction] = None

    # Second bank transaction of a duplicate pair
    duplicate_of: Optional[BankTransaction] = None


@dataclass
class RiskProfile:
    """Aggregated fraud, pattern and compliance signals."""

    fraud_indicators: list[str] = field(default_factory=list)
    unusual_patterns: list[str] = field(default_factory=list)
    compliance_issues: list[str] = field(default_factory=list)
    overall_risk_score: float = 0.0
    total_variance: Decimal = Decimal("0")

    @property
    def indicator_count(self) -> int:
        return (
            len(self.fraud_indicators)
            + len(self.unusual_patterns)
            + len(self.compliance_issues)
        )


@dataclass
class DisputeCase:
    """An evidence-backed claim about a bank transaction needing follow-up."""

    id: str
    bank_transaction_id: str
    kind: DisputeKind
    amount: Decimal
    description: str
    evidence_checklist: list[str]
    created_date: date
    success_probability: float
    status: DisputeStatus = DisputeStatus.OPEN
    resolution_timeline: str = ""

    # Book-side amount for amount discrepancies
    expected_amount: Optional[Decimal] = None

    # Supporting material worth gathering beyond the required checklist
    recommended_evidence: list[str] = field(default_factory=list)


@dataclass
class DisputeResolution:
    """Outcome recorded for a dispute; persisting it is the caller's job."""

    dispute_id: str
    outcome: DisputeOutcome
    success: bool
    message: str
    next_steps: list[str]
    notes: str = ""


@dataclass
class ReconciliationReport:
    """Result of reconciling one account over one period."""

    account_id: str
    period_start: date
    period_end: date

    beginning_balance: Decimal
    ending_balance: Decimal
    book_balance: Decimal
    bank_balance: Decimal
    variance: Decimal

    matches: list[Match] = field(default_factory=list)
    unmatched_bank: list[BankTransaction] = field(default_factory=list)
    unmatched_book: list[BookTransaction] = field(default_factory=list)
    suggestions: list[Suggestion] = field(default_factory=list)
    risk_profile: RiskProfile = field(default_factory=RiskProfile)

    @property
    def eligible_bank_count(self) -> int:
        return len(self.matches) + len(self.unmatched_bank)

    @property
    def eligible_book_count(self) -> int:
        return len(self.matches) + len(self.unmatched_book)

    @property
    def match_rate(self) -> float:
        """
        Matches as a percentage of all outcomes (matches plus both
        unmatched lists).
        """
        total = len(self.matches) + len(self.unmatched_bank) + len(self.unmatched_book)
        if total == 0:
            return 0.0
        return (len(self.matches) / total) * 100

    @property
    def matches_by_type(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for match in self.matches:
            counts[match.match_type.value] = counts.get(match.match_type.value, 0) + 1
        return counts
