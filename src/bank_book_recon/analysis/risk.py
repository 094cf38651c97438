"""Heuristic fraud and compliance risk assessment for a matcher run."""

from decimal import Decimal
from typing import Optional
import logging

from ..config import ReconConfig
from ..models.results import Match, RiskProfile
from ..models.transaction import BankTransaction, BookTransaction

logger = logging.getLogger(__name__)


class RiskAssessor:
    """
    Aggregates simple heuristics over the matcher's output into a
    RiskProfile. Each triggered heuristic adds one indicator string; the
    overall score weights indicator counts by category plus the size of the
    unexplained variance.
    """

    def __init__(self, config: Optional[ReconConfig] = None):
        self.config = config or ReconConfig()
        self.settings = self.config.risk

    def assess(
        self,
        matches: list[Match],
        unmatched_bank: list[BankTransaction],
        unmatched_book: list[BookTransaction],
    ) -> RiskProfile:
        s = self.settings
        profile = RiskProfile()

        # Fraud
        high_value = [t for t in unmatched_bank if abs(t.amount) > s.high_value_threshold]
        if high_value:
            profile.fraud_indicators.append(
                f"{len(high_value)} high-value unmatched bank transactions"
            )

        round_amounts = [
            t
            for t in unmatched_bank
            if t.amount % s.round_number_unit == 0 and t.amount > s.round_number_minimum
        ]
        if len(round_amounts) >= s.round_number_count:
            profile.fraud_indicators.append(
                "Multiple round-number transactions may indicate fraud"
            )

        # Patterns
        if matches:
            low_confidence = [
                m for m in matches if m.confidence_score < s.low_confidence_threshold
            ]
            if len(low_confidence) / len(matches) > s.low_confidence_ratio:
                profile.unusual_patterns.append("High percentage of low-confidence matches")

        bank_total = sum((t.amount for t in unmatched_bank), Decimal("0"))
        book_total = sum((abs(t.amount) for t in unmatched_book), Decimal("0"))
        profile.total_variance = abs(bank_total - book_total)
        if profile.total_variance > s.variance_threshold:
            profile.unusual_patterns.append("Large reconciliation variance detected")

        # Compliance
        unmatched_count = len(unmatched_bank) + len(unmatched_book)
        if unmatched_count > len(matches) * s.unmatched_ratio:
            profile.compliance_issues.append("High percentage of unmatched transactions")

        score = (
            len(profile.fraud_indicators) * s.fraud_weight
            + len(profile.unusual_patterns) * s.pattern_weight
            + len(profile.compliance_issues) * s.compliance_weight
            + float(profile.total_variance / s.variance_normalizer) * s.variance_weight
        )
        profile.overall_risk_score = min(1.0, score)

        logger.debug(
            f"Risk assessment: {profile.indicator_count} indicators, "
            f"score {profile.overall_risk_score:.2f}"
        )
        return profile
