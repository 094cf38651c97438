from datetime import date, datetime
from decimal import Decimal

import pytest

from bank_book_recon.config import ReconConfig
from bank_book_recon.models.transaction import ReconciliationStatus, TransactionType
from bank_book_recon.parsers.csv_loader import (
    CsvLoader,
    AccountLoader,
    BankTransactionLoader,
    BookTransactionLoader,
)
from bank_book_recon.utils.exceptions import LoaderError


def write_csv(tmp_path, name, text):
    path = tmp_path / name
    path.write_text(text)
    return path


def test_bank_loader(tmp_path):
    path = write_csv(
        tmp_path,
        "bank.csv",
        "id,account_id,date,posted_at,description,amount,type,reference_number,reconciled\n"
        "b1,acc-1,2024-01-05,2024-01-05 09:15:00,ACH Vendor Payment,-150.00,,REF-1,\n"
        "b2,acc-1,2024-01-06,,Customer deposit,\"$2,500.00\",,,false\n"
        "b3,acc-1,2024-01-07,,Refund,25.00,debit,,TRUE\n",
    )

    transactions = BankTransactionLoader().load_file(path)

    assert [t.id for t in transactions] == ["b1", "b2", "b3"]
    first, second, third = transactions
    assert first.amount == Decimal("150.00")
    assert first.type == TransactionType.DEBIT
    assert first.posted_at == datetime(2024, 1, 5, 9, 15)
    assert first.reference_number == "REF-1"
    assert first.reconciled is False
    assert second.amount == Decimal("2500.00")
    assert second.type == TransactionType.CREDIT
    assert second.posted_at is None
    assert third.type == TransactionType.DEBIT
    assert third.reconciled is True


def test_bank_loader_skips_bad_rows(tmp_path):
    path = write_csv(
        tmp_path,
        "bank.csv",
        "id,account_id,date,description,amount\n"
        "b1,acc-1,not a date,Bad date,10.00\n"
        "b2,acc-1,2024-01-05,Bad amount,ten\n"
        "b3,acc-1,2024-01-05,Good,10.00\n",
    )

    transactions = BankTransactionLoader().load_file(path)

    assert [t.id for t in transactions] == ["b3"]


def test_bank_loader_generates_missing_ids(tmp_path):
    path = write_csv(
        tmp_path,
        "bank.csv",
        "account_id,date,description,amount\nacc-1,2024-01-05,Fee,-5.00\n",
    )

    transactions = BankTransactionLoader().load_file(path)

    assert transactions[0].id == "BANK-00000"


def test_book_loader(tmp_path):
    path = write_csv(
        tmp_path,
        "book.csv",
        "id,account_id,date,description,amount,reference,reconciliation_status\n"
        "k1,acc-1,2024-01-05,Vendor Payment,(75.00),INV-9,Reconciled\n"
        "k2,acc-1,2024-01-06,Deposit,500.00,,\n"
        "k3,acc-1,2024-01-07,Misc,1.00,,on hold\n",
    )

    transactions = BookTransactionLoader().load_file(path)

    first, second, third = transactions
    assert first.amount == Decimal("-75.00")
    assert first.reference_number == "INV-9"
    assert first.reconciliation_status == ReconciliationStatus.RECONCILED
    assert first.is_reconciled
    assert second.amount == Decimal("500.00")
    assert second.reconciliation_status == ReconciliationStatus.UNRECONCILED
    assert third.reconciliation_status == ReconciliationStatus.UNRECONCILED


def test_account_loader(tmp_path):
    path = write_csv(
        tmp_path,
        "accounts.csv",
        "id,name,current_balance\n"
        "acc-1,Operating,\"5,000.00\"\n"
        "acc-2,Payroll,\n",
    )

    accounts = AccountLoader().load_file(path)

    assert accounts[0].name == "Operating"
    assert accounts[0].current_balance == Decimal("5000.00")
    assert accounts[1].current_balance == Decimal("0")


def test_missing_file_raises(tmp_path):
    with pytest.raises(LoaderError):
        BankTransactionLoader().load_file(tmp_path / "missing.csv")


def test_custom_columns_and_date_format(tmp_path):
    config = ReconConfig()
    config.input.date_format = "%d/%m/%Y"
    config.input.bank_columns.update(
        {"id": "Txn ID", "account_id": "Account", "date": "Value Date", "amount": "Amount"}
    )
    path = write_csv(
        tmp_path,
        "bank.csv",
        "Txn ID,Account,Value Date,description,Amount\n"
        "x1,acc-9,31/01/2024,Wire,-1200.50\n",
    )

    transactions = BankTransactionLoader(config).load_file(path)

    assert transactions[0].id == "x1"
    assert transactions[0].account_id == "acc-9"
    assert transactions[0].date == date(2024, 1, 31)
    assert transactions[0].amount == Decimal("1200.50")


def test_base_loader_is_abstract():
    with pytest.raises(TypeError):
        CsvLoader()
