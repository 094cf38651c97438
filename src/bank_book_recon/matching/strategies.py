"""
Matching strategies for transaction reconciliation.
Each strategy implements one pass of the matcher.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ..config import MatchingSettings
from ..models.results import MatchType
from ..models.transaction import BankTransaction, BookTransaction
from .normalize import normalize, normalize_reference
from .scoring import SimilarityScorer, amount_difference, days_between


class MatchingStrategy(ABC):
    """Abstract base class for matching strategies."""

    def __init__(self, scorer: SimilarityScorer):
        self.scorer = scorer

    @property
    def settings(self) -> MatchingSettings:
        return self.scorer.settings

    @abstractmethod
    def find_match(
        self,
        bank_txn: BankTransaction,
        book_candidates: list[BookTransaction],
    ) -> Optional[BookTransaction]:
        """
        Find the book transaction to pair with a bank transaction.

        Args:
            bank_txn: Bank transaction to match
            book_candidates: Unclaimed book transactions, in input order

        Returns:
            The chosen book transaction, or None
        """
        pass

    @abstractmethod
    def calculate_match_score(
        self,
        bank_txn: BankTransaction,
        book_txn: BookTransaction,
    ) -> tuple[float, MatchType, str]:
        """
        Calculate the confidence, match type and explanation for a pair.

        Returns:
            Tuple of (score 0.0-1.0, match type, explanation)
        """
        pass


class ExactMatchStrategy(MatchingStrategy):
    """
    Exact match strategy - same amount and date, plus an agreeing reference
    number or identical normalized description. Greedy first fit.
    """

    def find_match(
        self,
        bank_txn: BankTransaction,
        book_candidates: list[BookTransaction],
    ) -> Optional[BookTransaction]:
        bank_reference = normalize_reference(bank_txn.reference_number)
        bank_description = normalize(bank_txn.description)

        for book_txn in book_candidates:
            if amount_difference(bank_txn, book_txn) >= self.settings.exact_amount_tolerance:
                continue
            if bank_txn.date != book_txn.date:
                continue

            book_reference = normalize_reference(book_txn.reference_number)
            same_reference = bank_reference is not None and bank_reference == book_reference
            if same_reference or bank_description == normalize(book_txn.description):
                return book_txn

        return None

    def calculate_match_score(
        self,
        bank_txn: BankTransaction,
        book_txn: BookTransaction,
    ) -> tuple[float, MatchType, str]:
        """Exact matches carry a fixed confidence."""
        bank_reference = normalize_reference(bank_txn.reference_number)
        if bank_reference and bank_reference == normalize_reference(book_txn.reference_number):
            reason = "Exact match on amount, date, and reference number"
        else:
            reason = "Exact match on amount, date, and description"
        return self.settings.exact_confidence, MatchType.EXACT, reason


class FuzzyScoreStrategy(MatchingStrategy):
    """
    Weighted multi-factor matching. Picks the highest-scoring candidate above
    the acceptance threshold; ties go to the earliest candidate.
    """

    def find_match(
        self,
        bank_txn: BankTransaction,
        book_candidates: list[BookTransaction],
    ) -> Optional[BookTransaction]:
        best_match: Optional[BookTransaction] = None
        best_score = self.settings.fuzzy_acceptance_threshold

        for book_txn in book_candidates:
            score = self.scorer.combined_score(bank_txn, book_txn)
            if score is None:
                continue
            if score > best_score:
                best_match = book_txn
                best_score = score

        return best_match

    def calculate_match_score(
        self,
        bank_txn: BankTransaction,
        book_txn: BookTransaction,
    ) -> tuple[float, MatchType, str]:
        score = self.scorer.combined_score(bank_txn, book_txn) or 0.0
        if score > self.settings.fuzzy_type_threshold:
            match_type = MatchType.FUZZY
        else:
            match_type = MatchType.PARTIAL
        return score, match_type, self._explain(bank_txn, book_txn, score)

    def _explain(
        self, bank_txn: BankTransaction, book_txn: BookTransaction, score: float
    ) -> str:
        """Describe which factors contributed to a fuzzy score."""
        reasons: list[str] = []

        amount_diff = amount_difference(bank_txn, book_txn)
        if amount_diff < self.settings.exact_amount_tolerance:
            reasons.append("exact amount match")
        else:
            reasons.append(f"similar amount (${amount_diff:,.2f} difference)")

        gap = days_between(bank_txn.date, book_txn.date)
        if gap == 0:
            reasons.append("same date")
        else:
            reasons.append(f"close dates ({gap} day difference)")

        similarity = self.scorer.description_similarity(
            bank_txn.description, book_txn.description
        )
        if similarity > 0.8:
            reasons.append(f"very similar descriptions ({similarity:.0%} token overlap)")
        elif similarity > 0.5:
            reasons.append(f"similar descriptions ({similarity:.0%} token overlap)")
        elif similarity > 0:
            reasons.append(f"partial description overlap ({similarity:.0%})")

        return f"Match based on: {', '.join(reasons)} ({score:.0%} confidence)"
