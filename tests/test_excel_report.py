from datetime import date
from decimal import Decimal

import pytest
from openpyxl import load_workbook

from bank_book_recon.config import ReconConfig
from bank_book_recon.reconciliation import BankReconciliation
from bank_book_recon.reports.excel_generator import ExcelReportGenerator
from bank_book_recon.utils.exceptions import ReportGenerationError


@pytest.fixture
def recon(make_bank, make_book):
    bank = [
        make_bank("150.00", description="ACH Vendor Payment"),
        make_bank("12000.00", on=date(2024, 1, 22), description="Wire out"),
        make_bank("7500.25", on=date(2024, 1, 24), description="Transfer"),
    ]
    book = [
        make_book("150.00", description="Vendor Payment - ACH"),
        make_book("640.00", on=date(2024, 1, 25), description="Consulting retainer"),
    ]
    return BankReconciliation(bank, book)


@pytest.fixture
def report(recon):
    return recon.reconcile("acc-1", date(2024, 1, 1), date(2024, 1, 31))


def test_all_sheets_written(tmp_path, recon, report):
    disputes = recon.detect_disputes("acc-1", as_of=date(2024, 1, 31))
    path = ExcelReportGenerator().generate_report(
        report, tmp_path / "out" / "report.xlsx", disputes
    )

    wb = load_workbook(path)
    assert wb.sheetnames == [
        "Summary",
        "Matches",
        "Unmatched Bank",
        "Unmatched Book",
        "Suggestions",
        "Risk Assessment",
        "Disputes",
    ]
    assert wb["Summary"]["A1"].value == "Bank Reconciliation Summary"

    matches = wb["Matches"]
    assert matches.cell(row=1, column=3).value == "Match Type"
    assert matches.cell(row=2, column=3).value == "fuzzy"
    assert matches.cell(row=2, column=1).value == report.matches[0].bank_transaction_id

    unmatched_bank = wb["Unmatched Bank"]
    assert [unmatched_bank.cell(row=r, column=4).value for r in (2, 3)] == [12000.0, 7500.25]

    disputes_sheet = wb["Disputes"]
    assert disputes_sheet.cell(row=2, column=1).value == disputes[0].id
    assert disputes_sheet.cell(row=1, column=9).value == "Recommended Evidence"
    assert disputes_sheet.cell(row=2, column=9).value.startswith(
        "Transaction logs and timestamps"
    )


def test_disputes_sheet_only_when_given(tmp_path, report):
    path = ExcelReportGenerator().generate_report(report, tmp_path / "report.xlsx")

    assert "Disputes" not in load_workbook(path).sheetnames


def test_disabled_sheet_is_omitted(tmp_path, report):
    config = ReconConfig()
    config.output.sheets.suggestions.enabled = False

    path = ExcelReportGenerator(config).generate_report(report, tmp_path / "report.xlsx")

    assert "Suggestions" not in load_workbook(path).sheetnames


def test_all_sheets_disabled_raises(tmp_path, report):
    config = ReconConfig()
    sheets = config.output.sheets
    for sheet in (
        sheets.summary,
        sheets.matches,
        sheets.unmatched_bank,
        sheets.unmatched_book,
        sheets.suggestions,
        sheets.risk,
        sheets.disputes,
    ):
        sheet.enabled = False

    with pytest.raises(ReportGenerationError):
        ExcelReportGenerator(config).generate_report(report, tmp_path / "report.xlsx")


def test_default_filename():
    name = ExcelReportGenerator().default_filename("acc-1")

    assert name.startswith("reconciliation_acc-1_")
    assert name.endswith(".xlsx")


def test_risk_sheet_lists_indicators(tmp_path, report):
    path = ExcelReportGenerator().generate_report(report, tmp_path / "report.xlsx")

    values = [
        cell.value for cell in load_workbook(path)["Risk Assessment"]["A"] if cell.value
    ]
    assert "1 high-value unmatched bank transactions" in values
    assert report.risk_profile.total_variance == Decimal("18860.25")
