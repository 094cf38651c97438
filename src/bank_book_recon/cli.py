"""
Command-line interface for the bank/book reconciliation engine.
"""

from datetime import date, datetime
from pathlib import Path
from typing import Optional
import sys

import click
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from . import __version__
from .config import generate_default_config, load_config
from .models.results import DisputeCase, ReconciliationReport
from .parsers.csv_loader import AccountLoader, BankTransactionLoader, BookTransactionLoader
from .reconciliation import BankReconciliation
from .reports.excel_generator import ExcelReportGenerator
from .utils.exceptions import ReconciliationError
from .utils.logging_config import setup_logging

console = Console()


@click.group()
@click.version_option(version=__version__)
def main():
    """Bank statement to ledger reconciliation tool."""
    pass


@main.command()
@click.argument("bank_file", type=click.Path(exists=True, path_type=Path))
@click.argument("book_file", type=click.Path(exists=True, path_type=Path))
@click.option("--account", "account_id", required=True, help="Account to reconcile")
@click.option("--start", "period_start", required=True, type=click.DateTime(["%Y-%m-%d"]))
@click.option("--end", "period_end", required=True, type=click.DateTime(["%Y-%m-%d"]))
@click.option(
    "--accounts",
    "accounts_file",
    type=click.Path(exists=True, path_type=Path),
    help="CSV of accounts with current balances",
)
@click.option(
    "-c",
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file (YAML)",
)
@click.option("-o", "--output", type=click.Path(path_type=Path), help="Output Excel file path")
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    help="Also write DEBUG logs to this rotating file",
)
@click.option("--dry-run", is_flag=True, help="Show summary without generating report")
def reconcile(
    bank_file: Path,
    book_file: Path,
    account_id: str,
    period_start: datetime,
    period_end: datetime,
    accounts_file: Optional[Path],
    config: Optional[Path],
    output: Optional[Path],
    verbose: bool,
    log_file: Optional[Path],
    dry_run: bool,
):
    """
    Reconcile a bank feed against ledger entries for one account and period.

    BANK_FILE: CSV export of bank transactions
    BOOK_FILE: CSV export of ledger (book) transactions
    """
    try:
        recon_config = load_config(config)
        setup_logging(recon_config.logging, verbose, log_file)

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            task = progress.add_task("Loading transactions...", total=None)
            bank_transactions = BankTransactionLoader(recon_config).load_file(bank_file)
            book_transactions = BookTransactionLoader(recon_config).load_file(book_file)
            accounts = (
                AccountLoader(recon_config).load_file(accounts_file) if accounts_file else []
            )
            progress.update(task, completed=True)

            task = progress.add_task("Running reconciliation...", total=None)
            recon = BankReconciliation(
                bank_transactions, book_transactions, accounts, recon_config
            )
            report = recon.reconcile(account_id, period_start.date(), period_end.date())
            progress.update(task, completed=True)

        _display_summary(report)

        if dry_run:
            console.print("\n[yellow]Dry run - no report generated[/yellow]")
            return

        generator = ExcelReportGenerator(recon_config)
        if output is None:
            output = Path(generator.default_filename(account_id))
        report_path = generator.generate_report(report, output)

        console.print(f"\n[green]Report generated: {report_path}[/green]")

    except ReconciliationError as e:
        console.print(f"[red]Error: {e}[/red]")
        if verbose:
            console.print_exception()
        sys.exit(1)


@main.command()
@click.argument("bank_file", type=click.Path(exists=True, path_type=Path))
@click.argument("book_file", type=click.Path(exists=True, path_type=Path))
@click.option("--account", "account_id", required=True, help="Account to scan")
@click.option(
    "--as-of",
    type=click.DateTime(["%Y-%m-%d"]),
    default=None,
    help="Last day of the dispute window (defaults to today)",
)
@click.option("-c", "--config", type=click.Path(exists=True, path_type=Path))
def disputes(
    bank_file: Path,
    book_file: Path,
    account_id: str,
    as_of: Optional[datetime],
    config: Optional[Path],
):
    """
    Detect dispute candidates in recent bank activity.

    BANK_FILE: CSV export of bank transactions
    BOOK_FILE: CSV export of ledger (book) transactions
    """
    try:
        recon_config = load_config(config)
        setup_logging(recon_config.logging)
        bank_transactions = BankTransactionLoader(recon_config).load_file(bank_file)
        book_transactions = BookTransactionLoader(recon_config).load_file(book_file)

        recon = BankReconciliation(bank_transactions, book_transactions, config=recon_config)
        cases = recon.detect_disputes(account_id, as_of.date() if as_of else None)
    except ReconciliationError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    _display_disputes(cases, as_of.date() if as_of else date.today())


@main.command("init-config")
@click.option(
    "-o", "--output", type=click.Path(path_type=Path), default=Path("config.yaml")
)
def init_config(output: Path):
    """Generate a sample configuration file."""
    generate_default_config(output)
    console.print(f"[green]Configuration file generated: {output}[/green]")


def _display_summary(report: ReconciliationReport) -> None:
    """Display reconciliation summary in console."""
    table = Table(title=f"Reconciliation Summary: {report.account_id}")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Period", f"{report.period_start} to {report.period_end}")
    table.add_row("Beginning Balance", f"${report.beginning_balance:,.2f}")
    table.add_row("Bank Balance", f"${report.bank_balance:,.2f}")
    table.add_row("Book Balance", f"${report.book_balance:,.2f}")
    table.add_row("Variance", f"${report.variance:,.2f}")
    table.add_row("Matched", str(len(report.matches)))
    for match_type, count in report.matches_by_type.items():
        table.add_row(f"  {match_type}", str(count))
    table.add_row("Unmatched Bank", str(len(report.unmatched_bank)))
    table.add_row("Unmatched Book", str(len(report.unmatched_book)))
    table.add_row("Match Rate", f"{report.match_rate:.1f}%")
    table.add_row("Suggestions", str(len(report.suggestions)))
    table.add_row("Risk Score", f"{report.risk_profile.overall_risk_score:.2f}")

    console.print(table)

    profile = report.risk_profile
    for indicator in profile.fraud_indicators:
        console.print(f"[red]Fraud indicator:[/red] {indicator}")
    for pattern in profile.unusual_patterns:
        console.print(f"[yellow]Unusual pattern:[/yellow] {pattern}")
    for issue in profile.compliance_issues:
        console.print(f"[yellow]Compliance issue:[/yellow] {issue}")


def _display_disputes(cases: list[DisputeCase], as_of: date) -> None:
    if not cases:
        console.print(f"No disputes detected in the window ending {as_of}")
        return

    table = Table(title=f"Dispute Cases (as of {as_of})")
    table.add_column("ID", no_wrap=True)
    table.add_column("Kind")
    table.add_column("Amount", justify="right")
    table.add_column("Success", justify="right")
    table.add_column("Description")

    for case in cases:
        table.add_row(
            case.id,
            case.kind.value,
            f"${case.amount:,.2f}",
            f"{case.success_probability:.0%}",
            case.description[:60],
        )

    console.print(table)
    console.print(f"\nTotal disputes: {len(cases)}")


if __name__ == "__main__":
    main()
