from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from recordstore.domain.models import Account, AttendanceStatus
from recordstore.ledgers.attendance import AttendanceLedger
from recordstore.ledgers.bank import BankLedger
from recordstore.ledgers.payroll import PayrollLedger, PayrollStatistics, SalaryBreakdown
from recordstore.ledgers.voting import VotingLedger

_STATUS_STYLE = {
    AttendanceStatus.GOOD: "green",
    AttendanceStatus.LOW: "yellow",
    AttendanceStatus.CRITICAL: "red",
}


def money(value: Decimal) -> str:
    return f"{value:,.2f}"


def _console(console: Optional[Console]) -> Console:
    return console or Console()


def print_accounts(ledger: BankLedger, console: Optional[Console] = None) -> None:
    console = _console(console)
    if len(ledger.accounts) == 0:
        console.print("[yellow]No accounts registered.[/yellow]")
        return

    table = Table(title="Accounts", box=box.ROUNDED)
    table.add_column("Account", style="cyan", no_wrap=True)
    table.add_column("Holder")
    table.add_column("Balance", justify="right", style="bold green", no_wrap=True)
    table.add_column("Transactions", justify="right", style="magenta")
    for account in ledger.accounts:
        table.add_row(
            str(account.key), escape(account.holder) or "-", money(account.balance), str(len(account.history))
        )
    console.print(table)


def print_history(account: Account, console: Optional[Console] = None) -> None:
    console = _console(console)
    if not account.history:
        console.print(f"[yellow]No transactions for account {account.key}.[/yellow]")
        return

    table = Table(title=f"Account #{account.key} history", box=box.ROUNDED)
    table.add_column("#", justify="right", style="blue", no_wrap=True)
    table.add_column("Kind", style="cyan")
    table.add_column("Amount", justify="right", no_wrap=True)
    table.add_column("Balance", justify="right", style="bold green", no_wrap=True)
    for entry in account.history:
        table.add_row(str(entry.sequence), entry.kind.value, money(entry.amount), money(entry.resulting_balance))
    console.print(table)


def print_attendance_report(ledger: AttendanceLedger, console: Optional[Console] = None) -> None:
    """
    Render the attendance register with per-student status and a summary.
    """
    console = _console(console)
    if len(ledger.students) == 0:
        console.print("[yellow]No students registered yet.[/yellow]")
        return

    table = Table(
        title="Attendance Report",
        box=box.ROUNDED,
        caption=f"Total class days: {ledger.total_class_days} │ Students: {len(ledger.students)}",
    )
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Total", justify="right")
    table.add_column("Attended", justify="right")
    table.add_column("Percentage", justify="right", no_wrap=True)
    table.add_column("Status", no_wrap=True)
    for student in ledger.students:
        status = ledger.status(student.key)
        table.add_row(
            str(student.key),
            escape(student.name),
            str(student.total_classes),
            str(student.attended_classes),
            f"{student.attendance_percentage:.2f}%",
            f"[{_STATUS_STYLE[status]}]{status.value}[/{_STATUS_STYLE[status]}]",
        )
    console.print(table)

    settings = ledger.settings
    summary = ledger.summary()
    console.print(
        f"Good (≥{settings.attendance_good_threshold:g}%): {summary[AttendanceStatus.GOOD]}  "
        f"Low (≥{settings.attendance_low_threshold:g}%): {summary[AttendanceStatus.LOW]}  "
        f"Critical: {summary[AttendanceStatus.CRITICAL]}"
    )


def print_employees(ledger: PayrollLedger, console: Optional[Console] = None) -> None:
    console = _console(console)
    if len(ledger.employees) == 0:
        console.print("[yellow]No employees in the system.[/yellow]")
        return

    table = Table(title="Employees", box=box.ROUNDED)
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Basic", justify="right", no_wrap=True)
    table.add_column("Gross", justify="right", no_wrap=True)
    table.add_column("Net", justify="right", style="bold green", no_wrap=True)
    for employee in ledger.employees:
        table.add_row(
            str(employee.key),
            escape(employee.name),
            money(employee.basic_salary),
            money(employee.gross_salary),
            money(employee.net_salary),
        )
    console.print(table)


def print_statistics(stats: PayrollStatistics, console: Optional[Console] = None) -> None:
    console = _console(console)
    if stats.count == 0:
        console.print("[yellow]No employees for statistics.[/yellow]")
        return

    table = Table(title="Payroll Statistics", box=box.ROUNDED, show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right", no_wrap=True)
    table.add_row("Total employees", str(stats.count))
    table.add_row("Total basic salary", money(stats.total_basic))
    table.add_row("Total allowances", money(stats.total_allowances))
    table.add_row("Total deductions", money(stats.total_deductions))
    table.add_row("Total gross salary", money(stats.total_gross))
    table.add_row("Total net salary", money(stats.total_net))
    table.add_row("Average net salary", money(stats.average_net))
    if stats.highest_paid is not None:
        table.add_row("Highest paid", f"{escape(stats.highest_paid.name)} ({money(stats.highest_paid.net_salary)})")
    if stats.lowest_paid is not None:
        table.add_row("Lowest paid", f"{escape(stats.lowest_paid.name)} ({money(stats.lowest_paid.net_salary)})")
    console.print(table)


def print_payslip(breakdown: SalaryBreakdown, console: Optional[Console] = None) -> None:
    """
    Render one pay slip: earnings by allowance, deductions by item, net pay.
    """
    console = _console(console)
    employee = breakdown.employee
    table = Table(
        title=f"Pay Slip: {escape(employee.name)} (ID {employee.key})",
        box=box.ROUNDED,
        show_header=False,
    )
    table.add_column("Item")
    table.add_column("Amount", justify="right", no_wrap=True)
    table.add_row("[bold]Earnings[/bold]", "")
    table.add_row("  Basic salary", money(employee.basic_salary))
    for label, amount in breakdown.allowances.items():
        table.add_row(f"  {label.upper()}", money(amount))
    table.add_row("  Gross salary", money(employee.gross_salary))
    table.add_row("[bold]Deductions[/bold]", "")
    for label, amount in breakdown.deductions.items():
        table.add_row(f"  {label.upper()}", money(amount))
    table.add_row("  Total deductions", money(employee.deductions))
    table.add_row("[bold green]Net salary[/bold green]", f"[bold green]{money(employee.net_salary)}[/bold green]")
    console.print(table)


def print_candidates(ledger: VotingLedger, console: Optional[Console] = None) -> None:
    console = _console(console)
    if len(ledger.candidates) == 0:
        console.print("[yellow]No candidates registered yet.[/yellow]")
        return

    table = Table(title="Candidates", box=box.ROUNDED)
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Votes", justify="right", style="magenta")
    for candidate in ledger.candidates:
        table.add_row(str(candidate.key), escape(candidate.name), str(candidate.vote_count))
    console.print(table)
    console.print(f"Registered voters: {len(ledger.voters)}")


def print_results(ledger: VotingLedger, console: Optional[Console] = None) -> None:
    """
    Render election results sorted by votes, followed by the outcome.
    """
    console = _console(console)
    if len(ledger.candidates) == 0:
        console.print("[yellow]No candidates to display results![/yellow]")
        return
    if ledger.total_votes == 0:
        console.print("[yellow]No votes cast yet![/yellow]")
        return

    table = Table(
        title="Election Results",
        box=box.ROUNDED,
        caption=f"Total votes: {ledger.total_votes}",
    )
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Votes", justify="right", style="magenta")
    table.add_column("%", justify="right", no_wrap=True)
    for result in sorted(ledger.results(), key=lambda r: r.candidate.vote_count, reverse=True):
        table.add_row(
            str(result.candidate.key),
            escape(result.candidate.name),
            str(result.candidate.vote_count),
            f"{result.percentage:.1f}",
        )
    console.print(table)

    outcome = ledger.outcome()
    if outcome.is_tie:
        names = ", ".join(escape(c.name) for c in outcome.leaders)
        console.print(f"[bold yellow]TIE[/bold yellow] at {outcome.votes} votes: {names}")
    elif outcome.winner is not None:
        console.print(f"[bold green]WINNER[/bold green]: {escape(outcome.winner.name)} ({outcome.votes} votes)")


def _export(path: Path | str, render) -> Path:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8") as f:
        console = Console(file=f, width=100, no_color=True, highlight=False)
        console.print(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
        render(console)
    return target


def export_attendance_report(ledger: AttendanceLedger, path: Path | str) -> Path:
    return _export(path, lambda console: print_attendance_report(ledger, console))


def export_payslips(ledger: PayrollLedger, path: Path | str) -> Path:
    def _render(console: Console) -> None:
        if len(ledger.employees) == 0:
            console.print("No employees to export.")
            return
        for employee in ledger.employees:
            print_payslip(ledger.breakdown(employee.key), console)

    return _export(path, _render)


__all__ = [
    "export_attendance_report",
    "export_payslips",
    "money",
    "print_accounts",
    "print_attendance_report",
    "print_candidates",
    "print_employees",
    "print_history",
    "print_payslip",
    "print_results",
    "print_statistics",
]
