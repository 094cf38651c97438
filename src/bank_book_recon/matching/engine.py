"""
Two-pass matching engine for bank/book reconciliation.
Runs an exact pass then a fuzzy pass over shrinking residual sets.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional
import logging

from ..config import ReconConfig
from ..models.results import Match
from ..models.transaction import BankTransaction, BookTransaction
from .scoring import SimilarityScorer
from .strategies import ExactMatchStrategy, FuzzyScoreStrategy, MatchingStrategy

logger = logging.getLogger(__name__)


@dataclass
class MatchOutcome:
    """Matches plus whatever each side left unclaimed."""

    matches: list[Match] = field(default_factory=list)
    unmatched_bank: list[BankTransaction] = field(default_factory=list)
    unmatched_book: list[BookTransaction] = field(default_factory=list)


class ReconciliationEngine:
    """
    Orchestrates the matching passes.

    Each bank transaction is visited once per pass in input order and a
    claimed record is never released, so runs are deterministic and every
    record ends up in exactly one match or residual list.
    """

    def __init__(
        self, config: Optional[ReconConfig] = None, scorer: Optional[SimilarityScorer] = None
    ):
        """
        Initialize the reconciliation engine.

        Args:
            config: Application configuration
            scorer: Shared similarity scorer (built from config when omitted)
        """
        self.config = config or ReconConfig()
        self.scorer = scorer or SimilarityScorer(self.config.matching)
        self.strategies: list[tuple[str, MatchingStrategy]] = [
            ("exact", ExactMatchStrategy(self.scorer)),
            ("fuzzy", FuzzyScoreStrategy(self.scorer)),
        ]

    def match(
        self,
        bank_transactions: list[BankTransaction],
        book_transactions: list[BookTransaction],
    ) -> MatchOutcome:
        """
        Pair bank transactions with book transactions.

        Args:
            bank_transactions: Eligible bank transactions, in input order
            book_transactions: Eligible book transactions, in input order

        Returns:
            MatchOutcome with matches and both residual lists
        """
        start_time = datetime.now()
        logger.info(
            f"Starting matching: {len(bank_transactions)} bank txns, "
            f"{len(book_transactions)} book txns"
        )

        bank_residual = list(bank_transactions)
        book_residual = list(book_transactions)
        matches: list[Match] = []

        for pass_name, strategy in self.strategies:
            pass_matches = self._run_pass(strategy, bank_residual, book_residual)
            matches.extend(pass_matches)

            logger.debug(
                f"Pass {pass_name}: {len(pass_matches)} matches found, "
                f"{len(bank_residual)} bank and {len(book_residual)} book remaining"
            )

        elapsed = (datetime.now() - start_time).total_seconds()
        logger.info(
            f"Matching complete in {elapsed:.2f}s: {len(matches)} matches, "
            f"{len(bank_residual)} bank-only, {len(book_residual)} book-only"
        )

        return MatchOutcome(
            matches=matches,
            unmatched_bank=bank_residual,
            unmatched_book=book_residual,
        )

    def _run_pass(
        self,
        strategy: MatchingStrategy,
        bank_residual: list[BankTransaction],
        book_residual: list[BookTransaction],
    ) -> list[Match]:
        """
        Run one strategy over the residuals, removing what it claims.

        Both residual lists are mutated in place.
        """
        matches: list[Match] = []
        still_unmatched: list[BankTransaction] = []

        for bank_txn in bank_residual:
            book_txn = strategy.find_match(bank_txn, book_residual)
            if book_txn is None:
                still_unmatched.append(bank_txn)
                continue

            score, match_type, explanation = strategy.calculate_match_score(
                bank_txn, book_txn
            )

            variance: Optional[Decimal] = abs(bank_txn.amount) - abs(book_txn.amount)
            if variance == 0:
                variance = None

            matches.append(
                Match(
                    book_transaction_id=book_txn.id,
                    bank_transaction_id=bank_txn.id,
                    confidence_score=score,
                    match_type=match_type,
                    explanation=explanation,
                    variance_amount=variance,
                )
            )
            book_residual.remove(book_txn)

        bank_residual[:] = still_unmatched
        return matches
