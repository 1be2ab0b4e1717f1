from __future__ import annotations

import contextlib
import sys
from pathlib import Path
from typing import Iterator, List, Optional, cast

import typer
from rich.console import Console

from recordstore import reporter
from recordstore.config import Settings, get_settings
from recordstore.errors import InvalidPin, RecordStoreError
from recordstore.ledgers.attendance import AttendanceLedger
from recordstore.ledgers.bank import BankLedger
from recordstore.ledgers.payroll import PayrollLedger
from recordstore.ledgers.voting import VotingLedger
from recordstore.storage import available_ledgers, ledger_path, ledger_session, load_ledger
from recordstore.utils.logging import configure_logging

app = typer.Typer(help="Record store CLI: bank, attendance, payroll and voting ledgers.")
bank_app = typer.Typer(help="ATM accounts: open, deposit, withdraw, balance, history.")
attendance_app = typer.Typer(help="Student attendance register.")
payroll_app = typer.Typer(help="Employee payroll and pay slips.")
voting_app = typer.Typer(help="Candidates, voters and ballots.")

app.add_typer(bank_app, name="bank")
app.add_typer(attendance_app, name="attendance")
app.add_typer(payroll_app, name="payroll")
app.add_typer(voting_app, name="voting")


def _settings() -> Settings:
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    return settings


@contextlib.contextmanager
def _reported_errors() -> Iterator[None]:
    """Turn domain errors into a message on stderr and exit code 1."""
    try:
        yield
    except RecordStoreError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)


@app.command()
def info() -> None:
    """
    Show effective configuration values and ledger files.
    """
    settings = get_settings()
    typer.echo(
        f"env={settings.app_env} | data_dir={settings.data_dir} | "
        f"bank: capacity={settings.bank_capacity} max_deposit={settings.bank_max_deposit} "
        f"max_withdrawal={settings.bank_max_withdrawal} atm_mode={settings.bank_atm_mode}"
    )
    for name in available_ledgers():
        typer.echo(f"{name}: {ledger_path(name, settings)}")


# --------------------------------------------------------------------- bank


def _authenticate(bank: BankLedger, key: int, pin: int) -> None:
    attempts = bank.settings.bank_max_pin_attempts
    for attempt in range(1, attempts + 1):
        try:
            bank.authenticate(key, pin)
            return
        except InvalidPin:
            if attempt == attempts:
                raise
            typer.echo(f"Invalid PIN. Attempts left: {attempts - attempt}", err=True)
            pin = typer.prompt("Enter PIN", hide_input=True, type=int)


@bank_app.command("open")
def bank_open(
    key: int = typer.Argument(..., help="Account number."),
    pin: int = typer.Option(..., "--pin", prompt=True, hide_input=True, help="Account PIN."),
    balance: Optional[str] = typer.Option(None, "--balance", "-b", help="Opening balance (default from settings)."),
    holder: str = typer.Option("", "--holder", help="Account holder name."),
) -> None:
    """Open a new account."""
    settings = _settings()
    with _reported_errors(), ledger_session("bank", settings) as ledger:
        bank = cast(BankLedger, ledger)
        account = bank.open_account(key, pin, balance, holder)
    typer.echo(f"Account #{account.key} opened with balance {reporter.money(account.balance)}")


@bank_app.command("deposit")
def bank_deposit(
    key: int = typer.Argument(..., help="Account number."),
    amount: str = typer.Argument(..., help="Amount to deposit."),
    pin: int = typer.Option(..., "--pin", prompt=True, hide_input=True, help="Account PIN."),
) -> None:
    """Deposit money into an account."""
    settings = _settings()
    with _reported_errors(), ledger_session("bank", settings) as ledger:
        bank = cast(BankLedger, ledger)
        _authenticate(bank, key, pin)
        entry = bank.deposit(key, amount)
    typer.echo(f"Deposit successful. New balance: {reporter.money(entry.resulting_balance)}")


@bank_app.command("withdraw")
def bank_withdraw(
    key: int = typer.Argument(..., help="Account number."),
    amount: str = typer.Argument(..., help="Amount to withdraw."),
    pin: int = typer.Option(..., "--pin", prompt=True, hide_input=True, help="Account PIN."),
) -> None:
    """Withdraw money from an account."""
    settings = _settings()
    with _reported_errors(), ledger_session("bank", settings) as ledger:
        bank = cast(BankLedger, ledger)
        _authenticate(bank, key, pin)
        entry = bank.withdraw(key, amount)
    typer.echo(f"Withdrawal successful. Remaining balance: {reporter.money(entry.resulting_balance)}")


@bank_app.command("balance")
def bank_balance(
    key: int = typer.Argument(..., help="Account number."),
    pin: int = typer.Option(..., "--pin", prompt=True, hide_input=True, help="Account PIN."),
) -> None:
    """Show the available balance."""
    settings = _settings()
    with _reported_errors():
        bank = cast(BankLedger, load_ledger("bank", settings))
        _authenticate(bank, key, pin)
        typer.echo(f"Account #{key} available balance: {reporter.money(bank.balance(key))}")


@bank_app.command("history")
def bank_history(
    key: int = typer.Argument(..., help="Account number."),
    pin: int = typer.Option(..., "--pin", prompt=True, hide_input=True, help="Account PIN."),
) -> None:
    """Show the transaction history of an account."""
    settings = _settings()
    with _reported_errors():
        bank = cast(BankLedger, load_ledger("bank", settings))
        _authenticate(bank, key, pin)
        reporter.print_history(bank.accounts.get(key), Console())


@bank_app.command("list")
def bank_list() -> None:
    """List all accounts."""
    settings = _settings()
    with _reported_errors():
        bank = cast(BankLedger, load_ledger("bank", settings))
        reporter.print_accounts(bank, Console())


# --------------------------------------------------------------- attendance


@attendance_app.command("register")
def attendance_register(
    key: int = typer.Argument(..., help="Student ID."),
    name: str = typer.Argument(..., help="Student name."),
) -> None:
    """Register a new student."""
    settings = _settings()
    with _reported_errors(), ledger_session("attendance", settings) as ledger:
        ledger = cast(AttendanceLedger, ledger)
        ledger.register_student(key, name)
    typer.echo(f"Student {key} registered.")


@attendance_app.command("mark")
def attendance_mark(
    key: int = typer.Argument(..., help="Student ID."),
    present: bool = typer.Option(True, "--present/--absent", help="Mark present or absent."),
) -> None:
    """Mark one class for one student."""
    settings = _settings()
    with _reported_errors(), ledger_session("attendance", settings) as ledger:
        ledger = cast(AttendanceLedger, ledger)
        student = ledger.mark_attendance(key, present)
    typer.echo(
        f"{student.name} (ID {student.key}): {student.attended_classes}/{student.total_classes} "
        f"({student.attendance_percentage:.2f}%)"
    )


@attendance_app.command("mark-class")
def attendance_mark_class(
    present: Optional[List[int]] = typer.Argument(None, help="IDs of students present; others are absent."),
) -> None:
    """Hold a class day for every registered student."""
    settings = _settings()
    with _reported_errors(), ledger_session("attendance", settings) as ledger:
        ledger = cast(AttendanceLedger, ledger)
        if len(ledger.students) == 0:
            typer.echo("No students registered yet!")
            return
        day = ledger.mark_class(present or [])
    typer.echo(f"Attendance marked for class day {day}.")


@attendance_app.command("status")
def attendance_status(key: int = typer.Argument(..., help="Student ID.")) -> None:
    """Show attendance percentage and status for one student."""
    settings = _settings()
    with _reported_errors():
        ledger = cast(AttendanceLedger, load_ledger("attendance", settings))
        student = ledger.students.get(key)
        typer.echo(
            f"{student.name} (ID {student.key}): total={student.total_classes} "
            f"attended={student.attended_classes} "
            f"percentage={student.attendance_percentage:.2f}% status={ledger.status(key).value}"
        )


@attendance_app.command("report")
def attendance_report(
    export: bool = typer.Option(False, "--export", help="Also write attendance_report.txt to the data dir."),
) -> None:
    """Print the attendance report."""
    settings = _settings()
    with _reported_errors():
        ledger = cast(AttendanceLedger, load_ledger("attendance", settings))
        reporter.print_attendance_report(ledger, Console())
        if export:
            path = reporter.export_attendance_report(ledger, Path(settings.data_dir) / "attendance_report.txt")
            typer.echo(f"Report saved to {path}")


# ------------------------------------------------------------------ payroll


@payroll_app.command("add")
def payroll_add(
    key: int = typer.Argument(..., help="Employee ID."),
    name: str = typer.Argument(..., help="Employee name."),
    basic_salary: str = typer.Argument(..., help="Basic salary."),
) -> None:
    """Add an employee; salary is calculated immediately."""
    settings = _settings()
    with _reported_errors(), ledger_session("payroll", settings) as ledger:
        ledger = cast(PayrollLedger, ledger)
        employee = ledger.add_employee(key, name, basic_salary)
        reporter.print_payslip(ledger.breakdown(employee.key), Console())


@payroll_app.command("calculate")
def payroll_calculate(
    key: Optional[int] = typer.Argument(None, help="Employee ID; omit to run payroll for everyone."),
) -> None:
    """Recalculate allowances and deductions from the rate table."""
    settings = _settings()
    with _reported_errors(), ledger_session("payroll", settings) as ledger:
        ledger = cast(PayrollLedger, ledger)
        if key is None:
            employees = ledger.calculate_all()
            typer.echo(f"Salaries calculated for {len(employees)} employee(s).")
        else:
            employee = ledger.calculate_salary(key)
            typer.echo(f"Net salary for {employee.name}: {reporter.money(employee.net_salary)}")


@payroll_app.command("payslip")
def payroll_payslip(key: int = typer.Argument(..., help="Employee ID.")) -> None:
    """Show the pay slip of one employee."""
    settings = _settings()
    with _reported_errors():
        ledger = cast(PayrollLedger, load_ledger("payroll", settings))
        reporter.print_payslip(ledger.breakdown(key), Console())


@payroll_app.command("list")
def payroll_list() -> None:
    """List employees with payroll statistics."""
    settings = _settings()
    with _reported_errors():
        ledger = cast(PayrollLedger, load_ledger("payroll", settings))
        console = Console()
        reporter.print_employees(ledger, console)
        if len(ledger.employees):
            reporter.print_statistics(ledger.statistics(), console)


@payroll_app.command("stats")
def payroll_stats() -> None:
    """Show payroll statistics."""
    settings = _settings()
    with _reported_errors():
        ledger = cast(PayrollLedger, load_ledger("payroll", settings))
        reporter.print_statistics(ledger.statistics(), Console())


@payroll_app.command("export")
def payroll_export(
    path: Optional[Path] = typer.Option(None, "--path", help="Output file (default: pay_slips.txt in the data dir)."),
) -> None:
    """Write every pay slip to a text file."""
    settings = _settings()
    with _reported_errors():
        ledger = cast(PayrollLedger, load_ledger("payroll", settings))
        target = reporter.export_payslips(ledger, path or Path(settings.data_dir) / "pay_slips.txt")
        typer.echo(f"Pay slips exported to {target}")


# ------------------------------------------------------------------- voting


@voting_app.command("add-candidate")
def voting_add_candidate(
    key: int = typer.Argument(..., help="Candidate ID."),
    name: str = typer.Argument(..., help="Candidate name."),
) -> None:
    """Register a candidate."""
    settings = _settings()
    with _reported_errors(), ledger_session("voting", settings) as ledger:
        ledger = cast(VotingLedger, ledger)
        ledger.register_candidate(key, name)
    typer.echo(f"Candidate '{name}' registered.")


@voting_app.command("add-voter")
def voting_add_voter(
    key: int = typer.Argument(..., help="Voter ID."),
    name: str = typer.Option("", "--name", help="Voter name."),
) -> None:
    """Register a voter."""
    settings = _settings()
    with _reported_errors(), ledger_session("voting", settings) as ledger:
        ledger = cast(VotingLedger, ledger)
        ledger.register_voter(key, name)
    typer.echo(f"Voter ID {key} registered.")


@voting_app.command("vote")
def voting_vote(
    voter: int = typer.Argument(..., help="Voter ID."),
    candidate: int = typer.Argument(..., help="Candidate ID."),
) -> None:
    """Cast a vote."""
    settings = _settings()
    with _reported_errors(), ledger_session("voting", settings) as ledger:
        ledger = cast(VotingLedger, ledger)
        chosen = ledger.cast_vote(voter, candidate)
        total = ledger.total_votes
    typer.echo(f"Vote cast for {chosen.name}. Total votes cast: {total}")


@voting_app.command("candidates")
def voting_candidates() -> None:
    """List candidates with their vote counts."""
    settings = _settings()
    with _reported_errors():
        ledger = cast(VotingLedger, load_ledger("voting", settings))
        reporter.print_candidates(ledger, Console())


@voting_app.command("results")
def voting_results() -> None:
    """Show election results and the outcome."""
    settings = _settings()
    with _reported_errors():
        ledger = cast(VotingLedger, load_ledger("voting", settings))
        reporter.print_results(ledger, Console())


@voting_app.command("reset")
def voting_reset(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt."),
) -> None:
    """Clear all candidates, voters and votes."""
    if not yes:
        typer.confirm("Clear all election data?", abort=True)
    settings = _settings()
    with _reported_errors(), ledger_session("voting", settings) as ledger:
        ledger = cast(VotingLedger, ledger)
        ledger.reset()
    typer.echo("All election data cleared.")


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
