from __future__ import annotations

from pathlib import Path

import pytest

from recordstore.config import Settings
from recordstore.errors import InsufficientFunds, ParseError
from recordstore.ledgers import BankLedger, VotingLedger
from recordstore.storage import (
    available_ledgers,
    create_ledger,
    flush_ledger,
    ledger_path,
    ledger_session,
    load_ledger,
)


def test_available_ledgers_are_sorted() -> None:
    names = available_ledgers()
    assert names == ["attendance", "bank", "payroll", "voting"]


def test_create_unknown_ledger_raises(test_settings: Settings) -> None:
    with pytest.raises(ValueError):
        create_ledger("lottery", test_settings)


def test_ledger_path_uses_well_known_names(test_settings: Settings, tmp_path: Path) -> None:
    assert ledger_path("bank", test_settings) == tmp_path / "bank_data.txt"
    assert ledger_path("attendance", test_settings) == tmp_path / "attendance_data.txt"
    assert ledger_path("payroll", test_settings) == tmp_path / "payroll_data.txt"
    assert ledger_path("voting", test_settings) == tmp_path / "voting_data.txt"


def test_missing_file_yields_empty_ledger(test_settings: Settings) -> None:
    ledger = load_ledger("voting", test_settings)

    assert isinstance(ledger, VotingLedger)
    assert ledger.is_empty()
    assert ledger.total_votes == 0


def test_flush_then_load(test_settings: Settings, tmp_path: Path) -> None:
    bank = BankLedger(test_settings)
    bank.open_account(1001, 1234, balance="1500.50")
    bank.withdraw(1001, 1000)

    path = flush_ledger(bank)
    restored = load_ledger("bank", test_settings)

    assert path == tmp_path / "bank_data.txt"
    assert restored == bank


def test_flush_creates_data_dir(tmp_path: Path) -> None:
    settings = Settings(data_dir=tmp_path / "nested" / "data")
    ledger = create_ledger("attendance", settings)

    path = flush_ledger(ledger)

    assert path.read_text(encoding="utf-8") == "0 0\n"


def test_malformed_file_raises_parse_error(test_settings: Settings, tmp_path: Path) -> None:
    (tmp_path / "attendance_data.txt").write_text("1 0\n1\nAna\n", encoding="utf-8")

    with pytest.raises(ParseError):
        load_ledger("attendance", test_settings)


def test_session_flushes_on_success(test_settings: Settings) -> None:
    with ledger_session("voting", test_settings) as ledger:
        assert isinstance(ledger, VotingLedger)
        ledger.register_candidate(1, "A")

    restored = load_ledger("voting", test_settings)
    assert restored.candidates.get(1).name == "A"


def test_session_does_not_flush_on_error(test_settings: Settings) -> None:
    with ledger_session("bank", test_settings) as ledger:
        assert isinstance(ledger, BankLedger)
        ledger.open_account(1, 1111, balance="100")

    with pytest.raises(InsufficientFunds):
        with ledger_session("bank", test_settings) as ledger:
            assert isinstance(ledger, BankLedger)
            ledger.deposit(1, 50)
            ledger.withdraw(1, 500)

    restored = load_ledger("bank", test_settings)
    assert isinstance(restored, BankLedger)
    assert restored.balance(1) == 100
    assert restored.history(1) == []


def test_explicit_path_overrides_data_dir(test_settings: Settings, tmp_path: Path) -> None:
    target = tmp_path / "elsewhere.txt"
    with ledger_session("payroll", test_settings, path=target) as ledger:
        ledger.add_employee(1, "Ana", "1000")  # type: ignore[attr-defined]

    assert target.exists()
    assert not (tmp_path / "payroll_data.txt").exists()
    restored = load_ledger("payroll", test_settings, path=target)
    assert restored.employees.get(1).name == "Ana"  # type: ignore[attr-defined]


def test_non_utf8_file_raises_parse_error(test_settings: Settings, tmp_path: Path) -> None:
    (tmp_path / "voting_data.txt").write_bytes(b"1 0\n1\n\xff\xfe\n0\n0\n")

    with pytest.raises(ParseError) as excinfo:
        load_ledger("voting", test_settings)

    assert "voting_data.txt is not valid UTF-8" in str(excinfo.value)
