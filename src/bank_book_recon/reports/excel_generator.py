"""
Excel report generator for reconciliation results.
Creates multi-sheet workbooks with formatted output.
"""

from datetime import datetime
from pathlib import Path
from typing import Any, Optional
import logging

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.worksheet.worksheet import Worksheet

from ..analysis.suggestions import total_impact
from ..config import ReconConfig, SheetConfig
from ..models.results import DisputeCase, MatchType, ReconciliationReport
from ..utils.exceptions import ReportGenerationError

logger = logging.getLogger(__name__)

# Style definitions
HEADER_FILL = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
HEADER_FONT = Font(color="FFFFFF", bold=True)
MATCH_FILL = PatternFill(start_color="C6EFCE", end_color="C6EFCE", fill_type="solid")
VARIANCE_FILL = PatternFill(start_color="FFEB9C", end_color="FFEB9C", fill_type="solid")
UNMATCHED_FILL = PatternFill(start_color="FFC7CE", end_color="FFC7CE", fill_type="solid")
THIN_BORDER = Border(
    left=Side(style="thin"),
    right=Side(style="thin"),
    top=Side(style="thin"),
    bottom=Side(style="thin"),
)


class ExcelReportGenerator:
    """Generates Excel reconciliation reports with multiple sheets."""

    def __init__(self, config: Optional[ReconConfig] = None):
        """
        Initialize the report generator.

        Args:
            config: Application configuration
        """
        self.config = config or ReconConfig()
        self.sheet_config = self.config.output.sheets

    def default_filename(self, account_id: str) -> str:
        """Build an output filename from the configured template."""
        now = datetime.now()
        return self.config.output.excel.filename_template.format(
            account=account_id,
            date=now.strftime("%Y%m%d"),
            time=now.strftime("%H%M%S"),
        )

    def generate_report(
        self,
        report: ReconciliationReport,
        output_path: Path,
        disputes: Optional[list[DisputeCase]] = None,
    ) -> Path:
        """
        Write the reconciliation report to an Excel workbook.

        Args:
            report: Reconciliation report to export
            output_path: Path for output file
            disputes: Dispute cases to include on their own sheet (optional)

        Returns:
            Path to generated report

        Raises:
            ReportGenerationError: If the workbook cannot be written
        """
        logger.info(f"Generating Excel report: {output_path}")

        wb = Workbook()

        # Remove default sheet
        if wb.active:
            wb.remove(wb.active)

        sheets = self.sheet_config
        if sheets.summary.enabled:
            self._create_summary_sheet(wb, sheets.summary, report)
        if sheets.matches.enabled:
            self._create_matches_sheet(wb, sheets.matches, report)
        if sheets.unmatched_bank.enabled:
            self._create_unmatched_bank_sheet(wb, sheets.unmatched_bank, report)
        if sheets.unmatched_book.enabled:
            self._create_unmatched_book_sheet(wb, sheets.unmatched_book, report)
        if sheets.suggestions.enabled:
            self._create_suggestions_sheet(wb, sheets.suggestions, report)
        if sheets.risk.enabled:
            self._create_risk_sheet(wb, sheets.risk, report)
        if disputes is not None and sheets.disputes.enabled:
            self._create_disputes_sheet(wb, sheets.disputes, disputes)

        if not wb.sheetnames:
            raise ReportGenerationError("All report sheets are disabled")

        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            wb.save(output_path)
        except OSError as e:
            logger.error(f"Failed to save report: {e}")
            raise ReportGenerationError(f"Failed to save report {output_path}: {e}") from e

        logger.info(f"Report saved: {output_path}")
        return output_path

    def _create_summary_sheet(
        self, wb: Workbook, sheet: SheetConfig, report: ReconciliationReport
    ) -> None:
        """Create the summary sheet with balances and counts."""
        ws = wb.create_sheet(sheet.name)

        ws["A1"] = "Bank Reconciliation Summary"
        ws["A1"].font = Font(size=16, bold=True)
        ws.merge_cells("A1:D1")

        sections: list[tuple[str, list[tuple[str, Any]]]] = [
            (
                "Period",
                [
                    ("Account:", report.account_id),
                    ("Period Start:", report.period_start.isoformat()),
                    ("Period End:", report.period_end.isoformat()),
                    ("Generated At:", datetime.now().strftime("%Y-%m-%d %H:%M:%S")),
                ],
            ),
            (
                "Balances",
                [
                    ("Beginning Balance:", f"${report.beginning_balance:,.2f}"),
                    ("Bank Balance:", f"${report.bank_balance:,.2f}"),
                    ("Book Balance:", f"${report.book_balance:,.2f}"),
                    ("Ending Balance:", f"${report.ending_balance:,.2f}"),
                    ("Variance:", f"${report.variance:,.2f}"),
                ],
            ),
            (
                "Transaction Counts",
                [
                    ("Eligible Bank Transactions:", report.eligible_bank_count),
                    ("Eligible Book Transactions:", report.eligible_book_count),
                    ("Matches:", len(report.matches)),
                    ("Unmatched Bank:", len(report.unmatched_bank)),
                    ("Unmatched Book:", len(report.unmatched_book)),
                    ("Match Rate:", f"{report.match_rate:.1f}%"),
                ],
            ),
            (
                "Matches by Type",
                [(f"{name}:", count) for name, count in report.matches_by_type.items()],
            ),
            (
                "Follow-up",
                [
                    ("Suggestions:", len(report.suggestions)),
                    ("Suggested Impact:", f"${total_impact(report.suggestions):,.2f}"),
                    (
                        "Overall Risk Score:",
                        f"{report.risk_profile.overall_risk_score:.2f}",
                    ),
                ],
            ),
        ]

        row = 3
        for title, items in sections:
            ws[f"A{row}"] = title
            ws[f"A{row}"].font = Font(bold=True)
            row += 1
            for label, value in items:
                ws[f"A{row}"] = label
                ws[f"B{row}"] = value
                row += 1
            row += 1

        ws.column_dimensions["A"].width = 30
        ws.column_dimensions["B"].width = 40

    def _create_matches_sheet(
        self, wb: Workbook, sheet: SheetConfig, report: ReconciliationReport
    ) -> None:
        ws = wb.create_sheet(sheet.name)
        self._write_headers(
            ws,
            [
                "Bank Transaction",
                "Book Transaction",
                "Match Type",
                "Confidence",
                "Amount Variance",
                "Explanation",
            ],
        )

        for row_num, match in enumerate(report.matches, start=2):
            row_data = [
                match.bank_transaction_id,
                match.book_transaction_id,
                match.match_type.value,
                round(match.confidence_score, 4),
                float(match.variance_amount) if match.variance_amount else "",
                match.explanation,
            ]
            if match.variance_amount:
                fill = VARIANCE_FILL
            elif match.match_type == MatchType.EXACT:
                fill = MATCH_FILL
            else:
                fill = None
            self._write_row(ws, row_num, row_data, fill)

        self._auto_fit_columns(ws)

    def _create_unmatched_bank_sheet(
        self, wb: Workbook, sheet: SheetConfig, report: ReconciliationReport
    ) -> None:
        ws = wb.create_sheet(sheet.name)
        self._write_headers(
            ws, ["ID", "Date", "Reference", "Amount", "Type", "Description"]
        )

        for row_num, txn in enumerate(report.unmatched_bank, start=2):
            row_data = [
                txn.id,
                txn.date,
                txn.reference_number or "",
                float(txn.amount),
                txn.type.value,
                txn.description,
            ]
            self._write_row(ws, row_num, row_data, UNMATCHED_FILL)

        self._auto_fit_columns(ws)

    def _create_unmatched_book_sheet(
        self, wb: Workbook, sheet: SheetConfig, report: ReconciliationReport
    ) -> None:
        ws = wb.create_sheet(sheet.name)
        self._write_headers(
            ws, ["ID", "Date", "Reference", "Amount", "Status", "Description"]
        )

        for row_num, txn in enumerate(report.unmatched_book, start=2):
            row_data = [
                txn.id,
                txn.date,
                txn.reference_number or "",
                float(txn.amount),
                txn.reconciliation_status.value,
                txn.description,
            ]
            self._write_row(ws, row_num, row_data, UNMATCHED_FILL)

        self._auto_fit_columns(ws)

    def _create_suggestions_sheet(
        self, wb: Workbook, sheet: SheetConfig, report: ReconciliationReport
    ) -> None:
        ws = wb.create_sheet(sheet.name)
        self._write_headers(
            ws,
            [
                "Kind",
                "Description",
                "Suggested Action",
                "Confidence",
                "Impact",
                "Bank Transaction",
                "Book Transaction",
            ],
        )

        for row_num, suggestion in enumerate(report.suggestions, start=2):
            related_bank = [
                t.id for t in (suggestion.related_bank, suggestion.duplicate_of) if t
            ]
            row_data = [
                suggestion.kind.value,
                suggestion.description,
                suggestion.action,
                round(suggestion.confidence, 4),
                float(suggestion.impact_amount),
                ", ".join(related_bank),
                suggestion.related_book.id if suggestion.related_book else "",
            ]
            self._write_row(ws, row_num, row_data)

        self._auto_fit_columns(ws)

    def _create_risk_sheet(
        self, wb: Workbook, sheet: SheetConfig, report: ReconciliationReport
    ) -> None:
        ws = wb.create_sheet(sheet.name)
        profile = report.risk_profile

        ws["A1"] = "Risk Assessment"
        ws["A1"].font = Font(size=14, bold=True)
        ws["A3"] = "Overall Risk Score:"
        ws["B3"] = round(profile.overall_risk_score, 4)
        ws["A4"] = "Unexplained Variance:"
        ws["B4"] = float(profile.total_variance)

        row = 6
        for title, indicators in (
            ("Fraud Indicators", profile.fraud_indicators),
            ("Unusual Patterns", profile.unusual_patterns),
            ("Compliance Issues", profile.compliance_issues),
        ):
            ws[f"A{row}"] = title
            ws[f"A{row}"].font = Font(bold=True)
            row += 1
            for indicator in indicators or ["None"]:
                ws[f"A{row}"] = indicator
                row += 1
            row += 1

        ws.column_dimensions["A"].width = 60
        ws.column_dimensions["B"].width = 20

    def _create_disputes_sheet(
        self, wb: Workbook, sheet: SheetConfig, disputes: list[DisputeCase]
    ) -> None:
        ws = wb.create_sheet(sheet.name)
        self._write_headers(
            ws,
            [
                "Dispute ID",
                "Bank Transaction",
                "Kind",
                "Amount",
                "Description",
                "Success Probability",
                "Timeline",
                "Evidence Checklist",
                "Recommended Evidence",
            ],
        )

        for row_num, case in enumerate(disputes, start=2):
            row_data = [
                case.id,
                case.bank_transaction_id,
                case.kind.value,
                float(case.amount),
                case.description,
                case.success_probability,
                case.resolution_timeline,
                "\n".join(case.evidence_checklist),
                "\n".join(case.recommended_evidence),
            ]
            self._write_row(ws, row_num, row_data)
            for column in (len(row_data) - 1, len(row_data)):
                ws.cell(row=row_num, column=column).alignment = Alignment(wrap_text=True)

        self._auto_fit_columns(ws)

    def _write_headers(self, ws: Worksheet, headers: list[str]) -> None:
        for col, header in enumerate(headers, start=1):
            cell = ws.cell(row=1, column=col, value=header)
            cell.fill = HEADER_FILL
            cell.font = HEADER_FONT
            cell.border = THIN_BORDER

    def _write_row(
        self,
        ws: Worksheet,
        row_num: int,
        values: list[Any],
        fill: Optional[PatternFill] = None,
    ) -> None:
        for col, value in enumerate(values, start=1):
            cell = ws.cell(row=row_num, column=col, value=value)
            cell.border = THIN_BORDER
            if fill is not None:
                cell.fill = fill

    def _auto_fit_columns(self, ws: Worksheet) -> None:
        """Auto-fit column widths based on content."""
        for column_cells in ws.columns:
            column = column_cells[0].column_letter
            max_length = max(
                (len(str(cell.value)) for cell in column_cells if cell.value is not None),
                default=0,
            )
            ws.column_dimensions[column].width = min(max_length + 2, 50)
