"""
Entry point for reconciling one account over one period.

``BankReconciliation`` holds the read-only input collections supplied by the
storage layer and wires the matcher, suggestion generator, risk assessor and
dispute detector together. Build one per request; it keeps no state between
calls.
"""

from datetime import date
from decimal import Decimal
from typing import Optional, Union
import logging

from .analysis.disputes import DisputeDetector, resolve_dispute
from .analysis.risk import RiskAssessor
from .analysis.suggestions import SuggestionGenerator
from .config import ReconConfig
from .matching.engine import ReconciliationEngine
from .matching.scoring import SimilarityScorer
from .models.results import (
    DisputeCase,
    DisputeOutcome,
    DisputeResolution,
    ReconciliationReport,
)
from .models.transaction import Account, BankTransaction, BookTransaction

logger = logging.getLogger(__name__)


class BankReconciliation:
    """Reconciles bank activity against the internal ledger."""

    def __init__(
        self,
        bank_transactions: list[BankTransaction],
        book_transactions: list[BookTransaction],
        accounts: Optional[list[Account]] = None,
        config: Optional[ReconConfig] = None,
    ):
        """
        Args:
            bank_transactions: Bank feed entries, already loaded
            book_transactions: Ledger entries, already loaded
            accounts: Known accounts, used for beginning balances
            config: Application configuration (defaults when omitted)
        """
        self.bank_transactions = list(bank_transactions)
        self.book_transactions = list(book_transactions)
        self.accounts = list(accounts or [])
        self.config = config or ReconConfig()

        scorer = SimilarityScorer(self.config.matching)
        self.engine = ReconciliationEngine(self.config, scorer)
        self.suggestion_generator = SuggestionGenerator(self.config, scorer)
        self.risk_assessor = RiskAssessor(self.config)
        self.dispute_detector = DisputeDetector(self.config, scorer)

    def reconcile(
        self, account_id: str, period_start: date, period_end: date
    ) -> ReconciliationReport:
        """
        Match, explain and risk-score one account's activity for a period.

        Args:
            account_id: Account to reconcile
            period_start: First day of the period (inclusive)
            period_end: Last day of the period (inclusive)

        Returns:
            The reconciliation report
        """
        logger.info(
            f"Reconciling account {account_id} for {period_start} to {period_end}"
        )

        bank_items = [
            t
            for t in self.bank_transactions
            if t.account_id == account_id
            and period_start <= t.date <= period_end
            and not t.reconciled
        ]
        book_items = [
            t
            for t in self.book_transactions
            if t.account_id == account_id
            and period_start <= t.date <= period_end
            and not t.is_reconciled
        ]

        outcome = self.engine.match(bank_items, book_items)
        suggestions = self.suggestion_generator.generate(
            outcome.unmatched_bank, outcome.unmatched_book
        )
        risk_profile = self.risk_assessor.assess(
            outcome.matches, outcome.unmatched_bank, outcome.unmatched_book
        )

        beginning_balance = self._beginning_balance(account_id)
        bank_balance = beginning_balance + sum(
            (t.signed_amount for t in bank_items), Decimal("0")
        )
        book_balance = beginning_balance + sum(
            (t.amount for t in book_items), Decimal("0")
        )

        report = ReconciliationReport(
            account_id=account_id,
            period_start=period_start,
            period_end=period_end,
            beginning_balance=beginning_balance,
            ending_balance=bank_balance,
            book_balance=book_balance,
            bank_balance=bank_balance,
            variance=bank_balance - book_balance,
            matches=outcome.matches,
            unmatched_bank=outcome.unmatched_bank,
            unmatched_book=outcome.unmatched_book,
            suggestions=suggestions,
            risk_profile=risk_profile,
        )

        logger.info(
            f"Account {account_id}: {len(report.matches)} matches, "
            f"variance {report.variance:,.2f}, "
            f"risk score {risk_profile.overall_risk_score:.2f}"
        )
        return report

    def detect_disputes(
        self, account_id: str, as_of: Optional[date] = None
    ) -> list[DisputeCase]:
        """Scan the trailing window of bank activity for dispute cases."""
        return self.dispute_detector.detect(
            self.bank_transactions, self.book_transactions, account_id, as_of
        )

    def resolve_dispute(
        self,
        dispute_id: str,
        outcome: Union[DisputeOutcome, str],
        notes: str = "",
    ) -> DisputeResolution:
        """Record a dispute outcome; see ``analysis.disputes.resolve_dispute``."""
        return resolve_dispute(dispute_id, outcome, notes)

    def _beginning_balance(self, account_id: str) -> Decimal:
        account = next((a for a in self.accounts if a.id == account_id), None)
        if account is None:
            logger.warning(f"No account record for {account_id}; starting balance is 0")
            return Decimal("0")
        return account.current_balance
