"""Data models for the bank feed, the internal ledger and accounts."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class TransactionType(Enum):
    """Transaction type (debit or credit from the bank's perspective)."""

    CREDIT = "credit"  # Money in
    DEBIT = "debit"  # Money out


class ReconciliationStatus(Enum):
    """Reconciliation state of a book transaction in the ledger."""

    UNRECONCILED = "unreconciled"
    PENDING = "pending"
    RECONCILED = "reconciled"


@dataclass(frozen=True)
class BankTransaction:
    """
    A line from the external account-activity feed.

    The amount is the magnitude printed on the statement; ``type`` carries
    the direction.
    """

    id: str
    account_id: str
    date: date
    description: str
    amount: Decimal
    type: TransactionType = TransactionType.DEBIT
    reference_number: Optional[str] = None
    reconciled: bool = False

    # Full timestamp when the feed provides one
    posted_at: Optional[datetime] = None

    category: Optional[str] = None
    statement_line: Optional[int] = None

    @property
    def signed_amount(self) -> Decimal:
        """Amount with credits positive and debits negative."""
        if self.type == TransactionType.CREDIT:
            return self.amount
        return -self.amount


@dataclass(frozen=True)
class BookTransaction:
    """
    An entry from the internal ledger.

    Amounts are signed, positive meaning debit.
    """

    id: str
    account_id: str
    date: date
    description: str
    amount: Decimal
    reconciliation_status: ReconciliationStatus = ReconciliationStatus.UNRECONCILED
    reference_number: Optional[str] = None

    @property
    def is_reconciled(self) -> bool:
        return self.reconciliation_status == ReconciliationStatus.RECONCILED


@dataclass(frozen=True)
class Account:
    """Bank account known to the ledger."""

    id: str
    name: str = ""
    current_balance: Decimal = Decimal("0")
