import pytest
import yaml
from click.testing import CliRunner

from bank_book_recon.cli import main

BANK_CSV = (
    "id,account_id,date,description,amount,type\n"
    "b1,acc-1,2024-01-05,ACH Vendor Payment,-150.00,debit\n"
    "b2,acc-1,2024-01-22,Wire out,-12000.00,debit\n"
    "b3,acc-1,2024-03-13,Transfer,-7500.25,debit\n"
)
BOOK_CSV = (
    "id,account_id,date,description,amount,reference,reconciliation_status\n"
    "k1,acc-1,2024-01-05,Vendor Payment - ACH,-150.00,,unreconciled\n"
)


@pytest.fixture
def files(tmp_path):
    bank = tmp_path / "bank.csv"
    book = tmp_path / "book.csv"
    bank.write_text(BANK_CSV)
    book.write_text(BOOK_CSV)
    return bank, book


def test_reconcile_dry_run(files):
    bank, book = files

    result = CliRunner().invoke(
        main,
        [
            "reconcile", str(bank), str(book),
            "--account", "acc-1", "--start", "2024-01-01", "--end", "2024-01-31",
            "--dry-run",
        ],
    )

    assert result.exit_code == 0, result.output
    assert "Reconciliation Summary" in result.output
    assert "Dry run - no report generated" in result.output


def test_reconcile_writes_report(files, tmp_path):
    bank, book = files
    output = tmp_path / "report.xlsx"

    result = CliRunner().invoke(
        main,
        [
            "reconcile", str(bank), str(book),
            "--account", "acc-1", "--start", "2024-01-01", "--end", "2024-01-31",
            "-o", str(output),
        ],
    )

    assert result.exit_code == 0, result.output
    assert output.exists()


def test_reconcile_bad_config_exits_nonzero(files, tmp_path):
    bank, book = files
    config = tmp_path / "config.yaml"
    config.write_text(yaml.safe_dump({"matching": {"min_token_length": "long"}}))

    result = CliRunner().invoke(
        main,
        [
            "reconcile", str(bank), str(book),
            "--account", "acc-1", "--start", "2024-01-01", "--end", "2024-01-31",
            "-c", str(config), "--dry-run",
        ],
    )

    assert result.exit_code == 1
    assert "Error:" in result.output


def test_reconcile_requires_account(files):
    bank, book = files

    result = CliRunner().invoke(
        main,
        ["reconcile", str(bank), str(book), "--start", "2024-01-01", "--end", "2024-01-31"],
    )

    assert result.exit_code == 2


def test_disputes_command(files):
    bank, book = files

    result = CliRunner().invoke(
        main,
        ["disputes", str(bank), str(book), "--account", "acc-1", "--as-of", "2024-03-15"],
    )

    assert result.exit_code == 0, result.output
    assert "dispute_b3" in result.output
    assert "Total disputes: 1" in result.output


def test_disputes_command_empty_window(files):
    bank, book = files

    result = CliRunner().invoke(
        main,
        ["disputes", str(bank), str(book), "--account", "acc-1", "--as-of", "2023-06-30"],
    )

    assert result.exit_code == 0, result.output
    assert "No disputes detected in the window ending 2023-06-30" in result.output


def test_init_config(tmp_path):
    output = tmp_path / "config.yaml"

    result = CliRunner().invoke(main, ["init-config", "-o", str(output)])

    assert result.exit_code == 0, result.output
    assert yaml.safe_load(output.read_text())["matching"]["exact_confidence"] == 0.98


def test_reconcile_log_file(files, tmp_path):
    bank, book = files
    log_file = tmp_path / "recon.log"

    result = CliRunner().invoke(
        main,
        [
            "reconcile", str(bank), str(book),
            "--account", "acc-1", "--start", "2024-01-01", "--end", "2024-01-31",
            "--dry-run", "--log-file", str(log_file),
        ],
    )

    assert result.exit_code == 0, result.output
    assert "Matching complete" in log_file.read_text()
