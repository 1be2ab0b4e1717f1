from __future__ import annotations

from decimal import Decimal

import pytest

from recordstore import codec
from recordstore.config import Settings
from recordstore.errors import ParseError
from recordstore.ledgers import AttendanceLedger, BankLedger, PayrollLedger, VotingLedger


def _round_trip(ledger):
    return codec.decode(codec.encode(ledger), type(ledger)(ledger.settings))


def test_empty_ledgers_round_trip(test_settings: Settings) -> None:
    for cls in (BankLedger, AttendanceLedger, PayrollLedger, VotingLedger):
        ledger = cls(test_settings)
        assert _round_trip(ledger) == ledger


def test_bank_round_trip_keeps_history(bank: BankLedger) -> None:
    bank.open_account(1001, 1234, balance="1500.50", holder="Ana Silva")
    bank.open_account(1002, 42)
    bank.withdraw(1001, 1000)
    bank.deposit(1002, "12.34")

    text = codec.encode(bank)
    restored = _round_trip(bank)

    assert text.splitlines()[:4] == ["2 2", "1001", "Ana Silva", "1234 500.50 1"]
    assert text.splitlines()[4] == "withdraw 1000 1 500.50"
    assert restored == bank
    assert restored.counter == 2
    assert restored.history(1002)[0].resulting_balance == Decimal("1012.34")


def test_attendance_round_trip(attendance: AttendanceLedger) -> None:
    attendance.register_student(1, "Ana")
    attendance.register_student(2, "")
    attendance.mark_class([1])

    text = codec.encode(attendance)
    restored = _round_trip(attendance)

    assert text == "2 1\n1\nAna\n1 1\n2\n\n1 0\n"
    assert restored == attendance
    assert restored.total_class_days == 1


def test_payroll_round_trip(payroll: PayrollLedger) -> None:
    payroll.add_employee(7, "Ben Okafor", "30000")
    payroll.calculate_all()

    restored = _round_trip(payroll)

    assert restored == payroll
    assert restored.employees.get(7).net_salary == Decimal("38400")


def test_voting_round_trip(voting: VotingLedger) -> None:
    voting.register_candidate(1, "A")
    voting.register_candidate(2, "B")
    voting.register_voter(10, "V1")
    voting.register_voter(11)
    voting.cast_vote(10, 2)

    text = codec.encode(voting)
    restored = _round_trip(voting)

    assert text == "2 1\n1\nA\n0\n2\nB\n1\n2\n10\nV1\n1\n11\n\n0\n"
    assert restored == voting
    assert restored.voters.get(10).has_voted


def test_header_without_counter_is_accepted(test_settings: Settings) -> None:
    ledger = codec.decode("1\n5\nAna\n10000 5500 2700\n", PayrollLedger(test_settings))

    assert ledger.counter == 0
    assert ledger.employees.get(5).net_salary == Decimal("12800")


def test_blank_text_yields_empty_ledger(test_settings: Settings) -> None:
    ledger = codec.decode("  \n", AttendanceLedger(test_settings))

    assert ledger.is_empty()


def test_decode_requires_an_empty_ledger(attendance: AttendanceLedger) -> None:
    attendance.register_student(1, "Ana")

    with pytest.raises(ValueError):
        codec.decode("0 0\n", attendance)


@pytest.mark.parametrize(
    "text, line",
    [
        ("x 0\n", 1),
        ("1 0\n1\nAna\n", 4),
        ("1 0\n1\nAna\n3\n", 4),
        ("1 0\nabc\nAna\n1 1\n", 2),
        ("1 0\n1\nAna\n1 2\n", 4),
        ("1 0\n1\nAna\n-1 0\n", 4),
        ("2 0\n1\nAna\n0 0\n1\nBen\n0 0\n", 7),
        ("1 0\n1\nAna\n0 0\nextra\n", 5),
    ],
)
def test_malformed_attendance_reports_line(test_settings: Settings, text: str, line: int) -> None:
    with pytest.raises(ParseError) as excinfo:
        codec.decode(text, AttendanceLedger(test_settings))

    assert excinfo.value.line == line
    assert excinfo.value.kind == "ParseError"
    assert str(excinfo.value).startswith(f"line {line}: ")


def test_bank_history_beyond_counter_is_rejected(test_settings: Settings) -> None:
    text = "1 0\n1\n\n0 1100 1\ndeposit 100 1 1100\n"

    with pytest.raises(ParseError):
        codec.decode(text, BankLedger(test_settings))


def test_bank_unknown_transaction_kind(test_settings: Settings) -> None:
    text = "1 1\n1\n\n0 1100 1\ntransfer 100 1 1100\n"

    with pytest.raises(ParseError) as excinfo:
        codec.decode(text, BankLedger(test_settings))

    assert excinfo.value.line == 5


def test_voting_totals_must_match(test_settings: Settings) -> None:
    text = "1 3\n1\nA\n2\n0\n"

    with pytest.raises(ParseError):
        codec.decode(text, VotingLedger(test_settings))


def test_capacity_is_checked_while_decoding(tmp_path) -> None:
    settings = Settings(data_dir=tmp_path, voting_max_candidates=1)
    text = "2 0\n1\nA\n0\n2\nB\n0\n0\n"

    with pytest.raises(ParseError) as excinfo:
        codec.decode(text, VotingLedger(settings))

    assert "Maximum candidates reached (1)" in str(excinfo.value)
