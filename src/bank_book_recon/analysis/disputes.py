"""
Dispute detection over recent bank activity.

Two signals are scanned for: transactions that look unauthorized (odd
amount or odd time, with nothing in the ledger to explain them) and
transactions whose amount disagrees with a matching ledger entry.
"""

from datetime import date, timedelta
from typing import Optional, Union
import logging

from ..config import ReconConfig
from ..matching.scoring import SimilarityScorer, amount_difference, days_between
from ..models.results import (
    DisputeCase,
    DisputeKind,
    DisputeOutcome,
    DisputeResolution,
)
from ..models.transaction import BankTransaction, BookTransaction
from ..utils.exceptions import DisputeResolutionError

logger = logging.getLogger(__name__)

EVIDENCE_CHECKLISTS: dict[DisputeKind, list[str]] = {
    DisputeKind.UNAUTHORIZED_TRANSACTION: [
        "Bank statement showing the transaction",
        "Internal authorization logs",
        "Employee access records",
        "Security camera footage if applicable",
    ],
    DisputeKind.INCORRECT_AMOUNT: [
        "Original invoice or receipt",
        "Authorization documentation",
        "Communication with vendor/customer",
    ],
    DisputeKind.DUPLICATE_CHARGE: [
        "Bank statement showing both transactions",
        "Original transaction authorization",
        "Vendor communication acknowledging error",
    ],
    DisputeKind.SERVICE_DISPUTE: [
        "Service agreement or contract",
        "Communication regarding service issues",
        "Documentation of service delivery problems",
        "Attempts to resolve with vendor",
    ],
}

RECOMMENDED_EVIDENCE: dict[DisputeKind, list[str]] = {
    DisputeKind.UNAUTHORIZED_TRANSACTION: [
        "Transaction logs and timestamps",
        "Employee access records",
        "Authorization documentation",
        "Video surveillance if applicable",
    ],
    DisputeKind.INCORRECT_AMOUNT: [
        "Original invoice or receipt",
        "Authorization documentation",
        "Communication with vendor/customer",
    ],
}

NEXT_STEPS: dict[DisputeOutcome, list[str]] = {
    DisputeOutcome.APPROVED: [
        "Bank credit will be processed within 5-10 business days",
        "Updated bank statement will reflect the adjustment",
        "Monitor account for successful resolution",
    ],
    DisputeOutcome.DENIED: [
        "Review additional evidence if available",
        "Consider escalation to bank management",
        "Document resolution for future reference",
    ],
}

SATURDAY = 5


def evidence_checklist(kind: DisputeKind) -> list[str]:
    """Return a fresh copy of the ordered evidence list for a dispute kind."""
    return list(EVIDENCE_CHECKLISTS.get(kind, []))


def recommended_evidence(kind: DisputeKind) -> list[str]:
    return list(RECOMMENDED_EVIDENCE.get(kind, []))


class DisputeDetector:
    """Scans a trailing window of bank activity for dispute candidates."""

    def __init__(
        self, config: Optional[ReconConfig] = None, scorer: Optional[SimilarityScorer] = None
    ):
        self.config = config or ReconConfig()
        self.settings = self.config.disputes
        self.scorer = scorer or SimilarityScorer(self.config.matching)

    def detect(
        self,
        bank_transactions: list[BankTransaction],
        book_transactions: list[BookTransaction],
        account_id: str,
        as_of: Optional[date] = None,
    ) -> list[DisputeCase]:
        """
        Detect dispute cases for one account.

        Args:
            bank_transactions: All known bank transactions
            book_transactions: All known book transactions
            account_id: Account to scan
            as_of: Last day of the trailing window (defaults to today); the
                window covers the ``window_days`` days ending on it

        Returns:
            Dispute cases ordered by descending amount
        """
        as_of = as_of or date.today()
        window_start = as_of - timedelta(days=self.settings.window_days)

        recent = [
            t
            for t in bank_transactions
            if t.account_id == account_id and window_start < t.date <= as_of
        ]
        ledger = [t for t in book_transactions if t.account_id == account_id]

        disputes: list[DisputeCase] = []

        for bank_txn in recent:
            if self.is_suspicious(bank_txn) and not self._has_book_entry(bank_txn, ledger):
                disputes.append(self._unauthorized_case(bank_txn, as_of))

        for bank_txn in recent:
            case = self._discrepancy_case(bank_txn, ledger, as_of)
            if case is not None:
                disputes.append(case)

        logger.info(
            f"Dispute scan for account {account_id}: {len(recent)} recent "
            f"transactions, {len(disputes)} disputes"
        )
        return sorted(disputes, key=lambda d: d.amount, reverse=True)

    def is_suspicious(self, bank_txn: BankTransaction) -> bool:
        """Unusual amount (large with cents) or unusual time."""
        magnitude = abs(bank_txn.amount)
        unusual_amount = (
            magnitude > self.settings.unusual_amount_threshold and magnitude % 1 != 0
        )
        return unusual_amount or self.is_unusual_time(bank_txn)

    def is_unusual_time(self, bank_txn: BankTransaction) -> bool:
        """
        Weekend activity, or a timestamp outside business hours.

        Transactions without a timestamp are judged on their date alone.
        """
        moment = bank_txn.posted_at or bank_txn.date
        if moment.weekday() >= SATURDAY:
            return True
        if bank_txn.posted_at is None:
            return False
        hour = bank_txn.posted_at.hour
        return hour < self.settings.business_hours_start or hour > self.settings.business_hours_end

    def _has_book_entry(
        self, bank_txn: BankTransaction, ledger: list[BookTransaction]
    ) -> bool:
        return any(
            amount_difference(bank_txn, book_txn) < self.settings.unauthorized_amount_tolerance
            and days_between(bank_txn.date, book_txn.date)
            < self.settings.unauthorized_book_window_days
            for book_txn in ledger
        )

    def _unauthorized_case(self, bank_txn: BankTransaction, as_of: date) -> DisputeCase:
        kind = DisputeKind.UNAUTHORIZED_TRANSACTION
        return DisputeCase(
            id=f"dispute_{bank_txn.id}",
            bank_transaction_id=bank_txn.id,
            kind=kind,
            amount=abs(bank_txn.amount),
            description=f"Potential unauthorized transaction: {bank_txn.description}",
            evidence_checklist=evidence_checklist(kind),
            created_date=as_of,
            success_probability=self.settings.unauthorized_success_probability,
            resolution_timeline=self.settings.unauthorized_resolution_timeline,
            recommended_evidence=recommended_evidence(kind),
        )

    def _discrepancy_case(
        self,
        bank_txn: BankTransaction,
        ledger: list[BookTransaction],
        as_of: date,
    ) -> Optional[DisputeCase]:
        """Compare against the first ledger entry that describes the same event."""
        related = next(
            (
                book_txn
                for book_txn in ledger
                if days_between(bank_txn.date, book_txn.date)
                < self.settings.discrepancy_window_days
                and self.scorer.description_similarity(
                    bank_txn.description, book_txn.description
                )
                > self.settings.discrepancy_similarity
            ),
            None,
        )
        if related is None:
            return None

        variance = amount_difference(bank_txn, related)
        if variance <= self.settings.discrepancy_amount_tolerance:
            return None

        expected = abs(related.amount)
        actual = abs(bank_txn.amount)
        kind = DisputeKind.INCORRECT_AMOUNT
        return DisputeCase(
            id=f"dispute_amount_{bank_txn.id}",
            bank_transaction_id=bank_txn.id,
            kind=kind,
            amount=variance,
            description=(
                f"Amount discrepancy detected: Expected ${expected:,.2f}, "
                f"but bank shows ${actual:,.2f}"
            ),
            evidence_checklist=evidence_checklist(kind),
            created_date=as_of,
            success_probability=self.settings.discrepancy_success_probability,
            resolution_timeline=self.settings.discrepancy_resolution_timeline,
            expected_amount=expected,
            recommended_evidence=recommended_evidence(kind),
        )


def resolve_dispute(
    dispute_id: str,
    outcome: Union[DisputeOutcome, str],
    notes: str = "",
) -> DisputeResolution:
    """
    Record the outcome of a dispute.

    Nothing is persisted here; the caller owns the dispute's lifecycle.

    Raises:
        DisputeResolutionError: If the outcome is not approved or denied
    """
    try:
        outcome = DisputeOutcome(outcome)
    except ValueError as e:
        raise DisputeResolutionError(
            f"Unknown dispute outcome {outcome!r}; expected 'approved' or 'denied'"
        ) from e

    logger.info(f"Dispute {dispute_id} marked {outcome.value}")
    return DisputeResolution(
        dispute_id=dispute_id,
        outcome=outcome,
        success=True,
        message=f"Dispute {dispute_id} has been {outcome.value}",
        next_steps=list(NEXT_STEPS[outcome]),
        notes=notes,
    )
