"""Suggestions derived from transactions the matcher left unclaimed."""

from decimal import Decimal
from typing import Optional
import logging

from ..config import ReconConfig
from ..matching.scoring import SimilarityScorer, amount_difference, days_between
from ..models.results import Suggestion, SuggestionKind
from ..models.transaction import BankTransaction, BookTransaction

logger = logging.getLogger(__name__)

MISSING_FROM_BANK_ACTION = "Verify transaction was processed by bank or add to bank statement"
MISSING_FROM_BOOKS_ACTION = (
    "Create matching book entry or investigate if transaction should be recorded"
)
DUPLICATE_ACTION = "Review transactions to determine if one should be removed"


class SuggestionGenerator:
    """Turns unmatched residuals into actionable suggestions."""

    def __init__(
        self, config: Optional[ReconConfig] = None, scorer: Optional[SimilarityScorer] = None
    ):
        self.config = config or ReconConfig()
        self.settings = self.config.suggestions
        self.scorer = scorer or SimilarityScorer(self.config.matching)

    def generate(
        self,
        unmatched_bank: list[BankTransaction],
        unmatched_book: list[BookTransaction],
    ) -> list[Suggestion]:
        """
        Build suggestions for unmatched transactions.

        Args:
            unmatched_bank: Bank transactions with no book counterpart
            unmatched_book: Book transactions with no bank counterpart

        Returns:
            Suggestions ordered by descending impact
        """
        suggestions: list[Suggestion] = []
        threshold = self.settings.missing_amount_threshold

        for book_txn in unmatched_book:
            impact = abs(book_txn.amount)
            if impact > threshold:
                suggestions.append(
                    Suggestion(
                        kind=SuggestionKind.MISSING_TRANSACTION,
                        description=(
                            f"Book transaction {book_txn.description} "
                            f"(${impact:,.2f}) not found in bank statement"
                        ),
                        action=MISSING_FROM_BANK_ACTION,
                        confidence=self.settings.missing_book_confidence,
                        impact_amount=impact,
                        related_book=book_txn,
                    )
                )

        for bank_txn in unmatched_bank:
            impact = abs(bank_txn.amount)
            if impact > threshold:
                suggestions.append(
                    Suggestion(
                        kind=SuggestionKind.MISSING_TRANSACTION,
                        description=(
                            f"Bank transaction {bank_txn.description} "
                            f"(${impact:,.2f}) not recorded in books"
                        ),
                        action=MISSING_FROM_BOOKS_ACTION,
                        confidence=self.settings.missing_bank_confidence,
                        impact_amount=impact,
                        related_bank=bank_txn,
                    )
                )

        duplicates = self.find_potential_duplicates(unmatched_bank)
        for first, second, confidence in duplicates:
            suggestions.append(
                Suggestion(
                    kind=SuggestionKind.DUPLICATE_TRANSACTION,
                    description=(
                        f"Potential duplicate: {first.description} and {second.description}"
                    ),
                    action=DUPLICATE_ACTION,
                    confidence=confidence,
                    impact_amount=min(abs(first.amount), abs(second.amount)),
                    related_bank=first,
                    duplicate_of=second,
                )
            )

        logger.debug(
            f"Generated {len(suggestions)} suggestions "
            f"({len(duplicates)} potential duplicates)"
        )

        # sorted() is stable, so equal impacts keep generation order
        return sorted(suggestions, key=lambda s: s.impact_amount, reverse=True)

    def find_potential_duplicates(
        self, transactions: list[BankTransaction]
    ) -> list[tuple[BankTransaction, BankTransaction, float]]:
        """
        Find bank transaction pairs that look like the same charge twice.

        Each unordered pair is considered once, earlier transaction first.

        Returns:
            List of (first, second, confidence) tuples
        """
        duplicates: list[tuple[BankTransaction, BankTransaction, float]] = []

        for i, first in enumerate(transactions):
            for second in transactions[i + 1 :]:
                if amount_difference(first, second) >= self.settings.duplicate_amount_tolerance:
                    continue

                gap = days_between(first.date, second.date)
                similarity = self.scorer.description_similarity(
                    first.description, second.description
                )
                if not self._looks_duplicated(gap, similarity):
                    continue

                factor = 1.0 if gap == 0 else self.settings.duplicate_date_gap_factor
                confidence = min(self.settings.duplicate_confidence_cap, similarity * factor)
                duplicates.append((first, second, confidence))

        return duplicates

    def _looks_duplicated(self, gap: int, similarity: float) -> bool:
        s = self.settings
        near = gap <= s.duplicate_near_days and similarity > s.duplicate_near_similarity
        far = gap <= s.duplicate_far_days and similarity > s.duplicate_far_similarity
        return near or far


def total_impact(suggestions: list[Suggestion]) -> Decimal:
    """Sum of the impact amounts of a list of suggestions."""
    return sum((s.impact_amount for s in suggestions), Decimal("0"))
