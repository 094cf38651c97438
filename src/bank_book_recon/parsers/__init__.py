"""CSV loaders for bank, ledger and account files."""

from .csv_loader import AccountLoader, BankTransactionLoader, BookTransactionLoader

__all__ = ["AccountLoader", "BankTransactionLoader", "BookTransactionLoader"]
