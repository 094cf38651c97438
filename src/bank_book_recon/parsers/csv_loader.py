"""
CSV loaders for bank feeds, ledger exports and account lists.
Rows are converted into the typed models the engine consumes.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Generic, Optional, TypeVar
import logging

import pandas as pd

from ..config import ReconConfig
from ..models.transaction import (
    Account,
    BankTransaction,
    BookTransaction,
    ReconciliationStatus,
    TransactionType,
)
from ..utils.exceptions import LoaderError

logger = logging.getLogger(__name__)

T = TypeVar("T")

TRUE_VALUES = {"true", "1", "yes", "y", "t"}


class CsvLoader(ABC, Generic[T]):
    """
    Base loader: reads a CSV with pandas and converts each row.

    Rows that cannot be converted are skipped with a warning; a file that
    cannot be read at all raises LoaderError.
    """

    kind = "record"

    def __init__(self, config: Optional[ReconConfig] = None):
        """
        Initialize the loader with configuration.

        Args:
            config: Application configuration object
        """
        self.config = config or ReconConfig()
        self.input_config = self.config.input
        self.column_mappings: dict[str, str] = self._columns()

    @abstractmethod
    def _columns(self) -> dict[str, str]:
        """Logical field name to CSV column name for this record kind."""
        pass

    def load_file(self, file_path: Path) -> list[T]:
        """
        Load a CSV file.

        Args:
            file_path: Path to the CSV file

        Returns:
            List of converted records

        Raises:
            LoaderError: If the file cannot be read
        """
        logger.info(f"Loading {self.kind} file: {file_path}")

        try:
            df = pd.read_csv(
                file_path,
                encoding=self.input_config.encoding,
                delimiter=self.input_config.delimiter,
                dtype=str,
            )
        except Exception as e:
            logger.error(f"Failed to read CSV file: {e}")
            raise LoaderError(f"Failed to read CSV file {file_path}: {e}") from e

        records = self._process_dataframe(df)
        logger.info(f"Loaded {len(records)} {self.kind} records from {file_path}")
        return records

    def _process_dataframe(self, df: pd.DataFrame) -> list[T]:
        records: list[T] = []

        for idx, row in df.iterrows():
            try:
                record = self._convert_row(row, int(idx))
            except (ValueError, InvalidOperation) as e:
                logger.warning(f"Failed to process row {idx}: {e}")
                continue
            if record is not None:
                records.append(record)

        return records

    @abstractmethod
    def _convert_row(self, row: pd.Series, idx: int) -> Optional[T]:
        """
        Convert one CSV row.

        Returns:
            The record, or None when the row should be skipped
        """
        pass

    def _value(self, row: pd.Series, field_name: str) -> Optional[str]:
        """Cell for a logical field, or None when missing or blank."""
        column = self.column_mappings.get(field_name, field_name)
        value = row.get(column)
        if value is None or pd.isna(value):
            return None
        value = str(value).strip()
        return value or None

    def _parse_date(self, date_value: Any) -> Optional[date]:
        """
        Parse a date value using the configured format.

        Falls back to pandas' parser for other layouts.
        """
        if date_value is None:
            return None

        try:
            return datetime.strptime(str(date_value), self.input_config.date_format).date()
        except ValueError:
            try:
                return pd.to_datetime(date_value).date()
            except (ValueError, TypeError):
                return None

    def _parse_timestamp(self, value: Any) -> Optional[datetime]:
        if value is None:
            return None
        try:
            return pd.to_datetime(value).to_pydatetime()
        except (ValueError, TypeError):
            return None

    def _parse_amount(self, amount_value: Any) -> Optional[Decimal]:
        """
        Parse an amount, tolerating currency symbols, thousands separators
        and accounting-style parentheses for negatives.
        """
        if amount_value is None:
            return None

        text = str(amount_value).replace("$", "").replace(",", "").strip()
        negative = text.startswith("(") and text.endswith(")")
        if negative:
            text = text[1:-1]

        try:
            amount = Decimal(text)
        except InvalidOperation:
            return None
        return -amount if negative else amount


class BankTransactionLoader(CsvLoader[BankTransaction]):
    """
    Loader for bank feed exports.

    Direction comes from the type column when present; otherwise the sign of
    the amount decides (negative means money out).
    """

    kind = "bank transaction"

    def _columns(self) -> dict[str, str]:
        return self.input_config.bank_columns

    def _convert_row(self, row: pd.Series, idx: int) -> Optional[BankTransaction]:
        txn_date = self._parse_date(self._value(row, "date"))
        if not txn_date:
            logger.warning(f"Row {idx}: Invalid date, skipping")
            return None

        amount = self._parse_amount(self._value(row, "amount"))
        if amount is None:
            logger.warning(f"Row {idx}: No valid amount found, skipping")
            return None

        type_value = (self._value(row, "type") or "").lower()
        if type_value in ("debit", "credit"):
            txn_type = TransactionType(type_value)
        else:
            txn_type = TransactionType.DEBIT if amount < 0 else TransactionType.CREDIT

        statement_line = self._value(row, "statement_line")

        return BankTransaction(
            id=self._value(row, "id") or f"BANK-{idx:05d}",
            account_id=self._value(row, "account_id") or "",
            date=txn_date,
            description=self._value(row, "description") or "",
            amount=abs(amount),
            type=txn_type,
            reference_number=self._value(row, "reference_number"),
            reconciled=(self._value(row, "reconciled") or "").lower() in TRUE_VALUES,
            posted_at=self._parse_timestamp(self._value(row, "posted_at")),
            category=self._value(row, "category"),
            statement_line=int(float(statement_line)) if statement_line else None,
        )


class BookTransactionLoader(CsvLoader[BookTransaction]):
    """Loader for internal ledger exports (signed amounts, debit positive)."""

    kind = "book transaction"

    def _columns(self) -> dict[str, str]:
        return self.input_config.book_columns

    def _convert_row(self, row: pd.Series, idx: int) -> Optional[BookTransaction]:
        txn_date = self._parse_date(self._value(row, "date"))
        if not txn_date:
            logger.warning(f"Row {idx}: Invalid date, skipping")
            return None

        amount = self._parse_amount(self._value(row, "amount"))
        if amount is None:
            logger.warning(f"Row {idx}: No valid amount found, skipping")
            return None

        status_value = (self._value(row, "reconciliation_status") or "unreconciled").lower()
        try:
            status = ReconciliationStatus(status_value)
        except ValueError:
            logger.warning(
                f"Row {idx}: Unknown reconciliation status {status_value!r}, "
                f"treating as unreconciled"
            )
            status = ReconciliationStatus.UNRECONCILED

        return BookTransaction(
            id=self._value(row, "id") or f"BOOK-{idx:05d}",
            account_id=self._value(row, "account_id") or "",
            date=txn_date,
            description=self._value(row, "description") or "",
            amount=amount,
            reconciliation_status=status,
            reference_number=self._value(row, "reference_number"),
        )


class AccountLoader(CsvLoader[Account]):
    """Loader for account lists with current balances."""

    kind = "account"

    def _columns(self) -> dict[str, str]:
        return self.input_config.account_columns

    def _convert_row(self, row: pd.Series, idx: int) -> Optional[Account]:
        account_id = self._value(row, "id")
        if not account_id:
            logger.warning(f"Row {idx}: Missing account id, skipping")
            return None

        balance = self._parse_amount(self._value(row, "current_balance"))
        return Account(
            id=account_id,
            name=self._value(row, "name") or "",
            current_balance=balance if balance is not None else Decimal("0"),
        )
