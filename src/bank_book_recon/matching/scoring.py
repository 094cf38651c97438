"""
Similarity scoring between bank and book transactions.

Sub-scores are tiered; a hard reject is reported as ``None`` so that callers
drop the candidate entirely instead of ranking it low.
"""

from datetime import date
from decimal import Decimal
from typing import Optional, Union

from ..config import MatchingSettings
from ..models.transaction import BankTransaction, BookTransaction
from .normalize import normalize

Transaction = Union[BankTransaction, BookTransaction]


def amount_difference(first: Transaction, second: Transaction) -> Decimal:
    """Absolute difference between the two amounts' magnitudes."""
    return abs(abs(first.amount) - abs(second.amount))


def days_between(first: date, second: date) -> int:
    return abs((first - second).days)


class SimilarityScorer:
    """Computes amount, date and description closeness."""

    def __init__(self, settings: Optional[MatchingSettings] = None):
        self.settings = settings or MatchingSettings()

    def amount_score(self, a: Decimal, b: Decimal) -> Optional[float]:
        """
        Score the closeness of two amounts.

        Args:
            a: First amount
            b: Second amount

        Returns:
            Tier score, or None when the difference exceeds the hard reject
        """
        diff = abs(Decimal(a) - Decimal(b))
        if diff > self.settings.amount_hard_reject:
            return None
        for tier in self.settings.amount_tiers:
            if diff < tier.max_difference:
                return tier.score
        return 0.0

    def date_score(self, d1: date, d2: date) -> Optional[float]:
        """
        Score the closeness of two calendar dates.

        Returns:
            Tier score, or None when the gap exceeds the hard reject
        """
        gap = days_between(d1, d2)
        if gap > self.settings.date_hard_reject_days:
            return None
        for tier in self.settings.date_tiers:
            if gap <= tier.max_days:
                return tier.score
        return 0.0

    def description_similarity(self, s1: Optional[str], s2: Optional[str]) -> float:
        """
        Token-overlap similarity of two descriptions in [0, 1].

        Tokens shorter than the configured minimum are ignored. A token of
        the first description counts when it contains, or is contained in,
        some token of the second.
        """
        first = normalize(s1)
        second = normalize(s2)

        if first == second:
            return 1.0

        min_length = self.settings.min_token_length
        first_tokens = [w for w in first.split(" ") if len(w) > min_length]
        second_tokens = [w for w in second.split(" ") if len(w) > min_length]

        longest = max(len(first_tokens), len(second_tokens))
        if longest == 0:
            return 0.0

        matching = sum(
            1
            for word in first_tokens
            if any(other in word or word in other for other in second_tokens)
        )
        return min(1.0, matching / longest)

    def combined_score(
        self, bank_txn: BankTransaction, book_txn: BookTransaction
    ) -> Optional[float]:
        """
        Weighted fuzzy score for a bank/book candidate pair.

        Returns:
            Score clamped to [0, 1], or None when a hard reject applies
        """
        amount = self.amount_score(abs(bank_txn.amount), abs(book_txn.amount))
        if amount is None:
            return None

        date_part = self.date_score(bank_txn.date, book_txn.date)
        if date_part is None:
            return None

        similarity = self.description_similarity(
            bank_txn.description, book_txn.description
        )
        score = amount + date_part + similarity * self.settings.description_weight
        # Rounded so that 0.4 + 0.3 compares equal to 0.7
        return max(0.0, min(1.0, round(score, 6)))
