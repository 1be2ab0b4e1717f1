"""
Flat-file codec for ledgers.

Layout, shared by every variant:

    <record_count> <global_counter>
    <key>
    <free-text name, one line>
    <remaining fields, space-separated>
    ... repeated per record ...

Variant specifics:

- bank: numeric line is `pin balance history_count`, followed by one
  `kind amount sequence resulting_balance` line per history entry; the
  counter is the last transaction sequence issued.
- attendance: `total_classes attended_classes`; counter is class days held.
- payroll: `basic_salary allowances deductions`; counter is payroll runs.
- voting: candidates carry `vote_count` and the counter is total votes; the
  candidate block is followed by `<voter_count>` and `key`/`name`/`0|1`
  triples for voters.

Decoding rebuilds ledgers through their stores, so key uniqueness, capacity
and non-negative fields are checked exactly as for live inserts; any
violation surfaces as ParseError with the line it was found on.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, List, Tuple, Type, TypeVar

from pydantic import ValidationError

from recordstore.domain.models import Transaction, TransactionKind
from recordstore.errors import ParseError, RecordStoreError
from recordstore.ledgers.abstract import AbstractLedger
from recordstore.ledgers.attendance import AttendanceLedger
from recordstore.ledgers.bank import BankLedger
from recordstore.ledgers.payroll import PayrollLedger
from recordstore.ledgers.voting import VotingLedger

L = TypeVar("L", bound=AbstractLedger)


class _LineReader:
    """Sequential access to lines with 1-based positions for error messages."""

    def __init__(self, text: str) -> None:
        self._lines = text.replace("\r\n", "\n").split("\n")
        self._pos = 0

    @property
    def line_no(self) -> int:
        return self._pos

    def line(self, what: str) -> str:
        if self._pos >= len(self._lines):
            raise ParseError(f"unexpected end of data, expected {what}", line=self._pos + 1)
        value = self._lines[self._pos]
        self._pos += 1
        return value

    def fields(self, what: str, count: int, optional: int = 0) -> List[str]:
        tokens = self.line(what).split()
        if not (count - optional) <= len(tokens) <= count:
            raise ParseError(
                f"expected {count} value(s) for {what}, got {len(tokens)}", line=self._pos
            )
        return tokens

    def key(self, what: str) -> int:
        (token,) = self.fields(f"{what} key", 1)
        return self.to_int(token, f"{what} key")

    def to_int(self, token: str, what: str) -> int:
        try:
            return int(token)
        except ValueError as exc:
            raise ParseError(f"{what} is not an integer: {token!r}", line=self._pos) from exc

    def to_decimal(self, token: str, what: str) -> Decimal:
        try:
            value = Decimal(token)
        except InvalidOperation as exc:
            raise ParseError(f"{what} is not a number: {token!r}", line=self._pos) from exc
        if not value.is_finite():
            raise ParseError(f"{what} is not a finite number: {token!r}", line=self._pos)
        return value

    def to_flag(self, token: str, what: str) -> bool:
        if token not in ("0", "1"):
            raise ParseError(f"{what} must be 0 or 1, got {token!r}", line=self._pos)
        return token == "1"

    def finish(self) -> None:
        for index in range(self._pos, len(self._lines)):
            if self._lines[index].strip():
                raise ParseError("unexpected trailing data", line=index + 1)


def _header(reader: _LineReader, what: str) -> Tuple[int, int]:
    tokens = reader.fields(f"{what} header", 2, optional=1)
    count = reader.to_int(tokens[0], "record count")
    counter = reader.to_int(tokens[1], "counter") if len(tokens) > 1 else 0
    if count < 0 or counter < 0:
        raise ParseError("header values must be >= 0", line=reader.line_no)
    return count, counter


def _insert(reader: _LineReader, action: Callable[[], Any]) -> Any:
    try:
        return action()
    except ParseError:
        raise
    except (RecordStoreError, ValidationError) as exc:
        raise ParseError(str(exc), line=reader.line_no) from exc


# --------------------------------------------------------------------- bank


def _encode_bank(ledger: BankLedger) -> List[str]:
    lines = [f"{len(ledger.accounts)} {ledger.counter}"]
    for account in ledger.accounts:
        lines += [
            str(account.key),
            account.holder,
            f"{account.pin} {account.balance} {len(account.history)}",
        ]
        lines += [
            f"{t.kind.value} {t.amount} {t.sequence} {t.resulting_balance}" for t in account.history
        ]
    return lines


def _decode_bank(reader: _LineReader, ledger: BankLedger) -> None:
    count, counter = _header(reader, "bank")
    ledger.counter = counter
    for _ in range(count):
        key = reader.key("account")
        holder = reader.line("account holder")
        pin_t, balance_t, size_t = reader.fields("account values", 3)
        pin = reader.to_int(pin_t, "pin")
        balance = reader.to_decimal(balance_t, "balance")
        size = reader.to_int(size_t, "history length")
        if size < 0:
            raise ParseError("history length must be >= 0", line=reader.line_no)
        history = [_decode_transaction(reader) for _ in range(size)]
        if any(t.sequence > counter for t in history):
            raise ParseError("transaction sequence exceeds ledger counter", line=reader.line_no)
        _insert(
            reader,
            lambda: ledger.accounts.insert(
                key, holder=holder, pin=pin, balance=balance, history=history
            ),
        )


def _decode_transaction(reader: _LineReader) -> Transaction:
    kind_t, amount_t, seq_t, result_t = reader.fields("transaction", 4)
    try:
        kind = TransactionKind(kind_t)
    except ValueError as exc:
        raise ParseError(f"unknown transaction kind {kind_t!r}", line=reader.line_no) from exc
    amount = reader.to_decimal(amount_t, "amount")
    sequence = reader.to_int(seq_t, "sequence")
    resulting = reader.to_decimal(result_t, "resulting balance")
    return _insert(
        reader,
        lambda: Transaction(
            kind=kind, amount=amount, sequence=sequence, resulting_balance=resulting
        ),
    )


# --------------------------------------------------------------- attendance


def _encode_attendance(ledger: AttendanceLedger) -> List[str]:
    lines = [f"{len(ledger.students)} {ledger.counter}"]
    for student in ledger.students:
        lines += [
            str(student.key),
            student.name,
            f"{student.total_classes} {student.attended_classes}",
        ]
    return lines


def _decode_attendance(reader: _LineReader, ledger: AttendanceLedger) -> None:
    count, counter = _header(reader, "attendance")
    ledger.counter = counter
    for _ in range(count):
        key = reader.key("student")
        name = reader.line("student name")
        total_t, attended_t = reader.fields("student values", 2)
        total = reader.to_int(total_t, "total classes")
        attended = reader.to_int(attended_t, "attended classes")
        _insert(
            reader,
            lambda: ledger.students.insert(
                key, name=name, total_classes=total, attended_classes=attended
            ),
        )


# ------------------------------------------------------------------ payroll


def _encode_payroll(ledger: PayrollLedger) -> List[str]:
    lines = [f"{len(ledger.employees)} {ledger.counter}"]
    for employee in ledger.employees:
        lines += [
            str(employee.key),
            employee.name,
            f"{employee.basic_salary} {employee.allowances} {employee.deductions}",
        ]
    return lines


def _decode_payroll(reader: _LineReader, ledger: PayrollLedger) -> None:
    count, counter = _header(reader, "payroll")
    ledger.counter = counter
    for _ in range(count):
        key = reader.key("employee")
        name = reader.line("employee name")
        basic_t, allow_t, deduct_t = reader.fields("employee values", 3)
        basic = reader.to_decimal(basic_t, "basic salary")
        allowances = reader.to_decimal(allow_t, "allowances")
        deductions = reader.to_decimal(deduct_t, "deductions")
        _insert(
            reader,
            lambda: ledger.employees.insert(
                key,
                name=name,
                basic_salary=basic,
                allowances=allowances,
                deductions=deductions,
            ),
        )


# ------------------------------------------------------------------- voting


def _encode_voting(ledger: VotingLedger) -> List[str]:
    lines = [f"{len(ledger.candidates)} {ledger.counter}"]
    for candidate in ledger.candidates:
        lines += [str(candidate.key), candidate.name, str(candidate.vote_count)]
    lines.append(str(len(ledger.voters)))
    for voter in ledger.voters:
        lines += [str(voter.key), voter.name, "1" if voter.has_voted else "0"]
    return lines


def _decode_voting(reader: _LineReader, ledger: VotingLedger) -> None:
    count, counter = _header(reader, "voting")
    ledger.counter = counter
    for _ in range(count):
        key = reader.key("candidate")
        name = reader.line("candidate name")
        (votes_t,) = reader.fields("candidate votes", 1)
        votes = reader.to_int(votes_t, "vote count")
        _insert(reader, lambda: ledger.candidates.insert(key, name=name, vote_count=votes))

    cast = sum(c.vote_count for c in ledger.candidates)
    if cast != counter:
        raise ParseError(
            f"candidate votes ({cast}) do not add up to total votes ({counter})",
            line=reader.line_no,
        )

    (voters_t,) = reader.fields("voter count", 1)
    voters = reader.to_int(voters_t, "voter count")
    if voters < 0:
        raise ParseError("voter count must be >= 0", line=reader.line_no)
    for _ in range(voters):
        key = reader.key("voter")
        name = reader.line("voter name")
        (flag_t,) = reader.fields("voter flag", 1)
        has_voted = reader.to_flag(flag_t, "has_voted")
        _insert(reader, lambda: ledger.voters.insert(key, name=name, has_voted=has_voted))


_Encoder = Callable[[Any], List[str]]
_Decoder = Callable[[_LineReader, Any], None]


def _codecs() -> Dict[Type[AbstractLedger], Tuple[_Encoder, _Decoder]]:
    """Line codecs per ledger type."""
    return {
        BankLedger: (_encode_bank, _decode_bank),
        AttendanceLedger: (_encode_attendance, _decode_attendance),
        PayrollLedger: (_encode_payroll, _decode_payroll),
        VotingLedger: (_encode_voting, _decode_voting),
    }


def _lookup(ledger: AbstractLedger) -> Tuple[_Encoder, _Decoder]:
    codecs = _codecs()
    if type(ledger) not in codecs:
        raise ValueError(f"No codec for ledger type {type(ledger).__name__}")
    return codecs[type(ledger)]


def encode(ledger: AbstractLedger) -> str:
    """Serialize a ledger to its flat text form (newline-terminated)."""
    encoder, _ = _lookup(ledger)
    return "\n".join(encoder(ledger)) + "\n"


def decode(text: str, ledger: L) -> L:
    """
    Fill an empty ledger from text produced by `encode` and return it.

    Empty or whitespace-only text leaves the ledger empty.
    """
    if not ledger.is_empty() or ledger.counter:
        raise ValueError("decode expects an empty ledger")
    _, decoder = _lookup(ledger)
    if not text.strip():
        return ledger
    reader = _LineReader(text)
    decoder(reader, ledger)
    reader.finish()
    return ledger


__all__ = ["decode", "encode"]
