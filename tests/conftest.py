import logging
from datetime import date
from decimal import Decimal
from itertools import count

import pytest

from bank_book_recon.config import ReconConfig
from bank_book_recon.models.transaction import (
    BankTransaction,
    BookTransaction,
    ReconciliationStatus,
    TransactionType,
)

ACCOUNT = "acc-1"


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers installed by setup_logging so streams do not leak between tests."""
    yield
    logger = logging.getLogger("bank_book_recon")
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def config():
    return ReconConfig()


@pytest.fixture
def make_bank():
    """Factory for bank transactions with sequential ids."""
    ids = count(1)

    def _make(
        amount,
        on=date(2024, 1, 5),
        description="Bank item",
        txn_type=TransactionType.DEBIT,
        **kwargs,
    ):
        kwargs.setdefault("id", f"bank-{next(ids)}")
        kwargs.setdefault("account_id", ACCOUNT)
        return BankTransaction(
            date=on,
            description=description,
            amount=Decimal(str(amount)),
            type=txn_type,
            **kwargs,
        )

    return _make


@pytest.fixture
def make_book():
    """Factory for book transactions with sequential ids."""
    ids = count(1)

    def _make(
        amount,
        on=date(2024, 1, 5),
        description="Book item",
        status=ReconciliationStatus.UNRECONCILED,
        **kwargs,
    ):
        kwargs.setdefault("id", f"book-{next(ids)}")
        kwargs.setdefault("account_id", ACCOUNT)
        return BookTransaction(
            date=on,
            description=description,
            amount=Decimal(str(amount)),
            reconciliation_status=status,
            **kwargs,
        )

    return _make
