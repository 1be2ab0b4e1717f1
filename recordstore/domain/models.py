"""
Domain models for the record store.

Each variant is a pydantic model keyed by an immutable integer. Models are
mutable so ledgers can apply transactions in place, but assignment is
validated: a numeric field can never be set below zero. Derived values are
computed fields, so they are recomputed on every read and never stored.
"""
from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator, model_validator


class TransactionKind(str, Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdraw"


class AttendanceStatus(str, Enum):
    GOOD = "Good"
    LOW = "Low"
    CRITICAL = "Critical"


class Record(BaseModel):
    """
    Common shape of every stored record.
    """

    key: int = Field(..., frozen=True, description="Identifier, unique within a store.")

    model_config = ConfigDict(validate_assignment=True, extra="forbid")


class _NamedRecord(Record):
    name: str = Field("", description="Free-text name, stored on its own line.")

    @field_validator("name")
    @classmethod
    def _single_line(cls, value: str) -> str:
        if "\n" in value or "\r" in value:
            raise ValueError("name must fit on a single line")
        return value


class Transaction(BaseModel):
    """
    One entry of an account's append-only history.
    """

    kind: TransactionKind
    amount: Decimal = Field(..., gt=0)
    sequence: int = Field(..., ge=1, description="Ledger-wide transaction counter.")
    resulting_balance: Decimal = Field(..., ge=0)

    model_config = ConfigDict(frozen=True)


class Account(Record):
    holder: str = Field("", description="Account holder name; may be empty.")
    pin: int = Field(..., ge=0)
    balance: Decimal = Field(Decimal("0"), ge=0)
    history: List[Transaction] = Field(default_factory=list)

    @field_validator("holder")
    @classmethod
    def _single_line(cls, value: str) -> str:
        if "\n" in value or "\r" in value:
            raise ValueError("holder must fit on a single line")
        return value


class Student(_NamedRecord):
    total_classes: int = Field(0, ge=0)
    attended_classes: int = Field(0, ge=0)

    @model_validator(mode="after")
    def _attended_within_total(self) -> "Student":
        if self.attended_classes > self.total_classes:
            raise ValueError("attended_classes cannot exceed total_classes")
        return self

    @computed_field  # type: ignore[prop-decorator]
    @property
    def attendance_percentage(self) -> float:
        if self.total_classes == 0:
            return 0.0
        return self.attended_classes / self.total_classes * 100.0


class Employee(_NamedRecord):
    basic_salary: Decimal = Field(Decimal("0"), ge=0)
    allowances: Decimal = Field(Decimal("0"), ge=0)
    deductions: Decimal = Field(Decimal("0"), ge=0)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def gross_salary(self) -> Decimal:
        return self.basic_salary + self.allowances

    @computed_field  # type: ignore[prop-decorator]
    @property
    def net_salary(self) -> Decimal:
        return self.gross_salary - self.deductions


class Candidate(_NamedRecord):
    vote_count: int = Field(0, ge=0)


class Voter(_NamedRecord):
    has_voted: bool = False


def classify_attendance(percentage: float, good: float, low: float) -> AttendanceStatus:
    """Map an attendance percentage onto Good / Low / Critical."""
    if percentage >= good:
        return AttendanceStatus.GOOD
    if percentage >= low:
        return AttendanceStatus.LOW
    return AttendanceStatus.CRITICAL


def vote_percentage(votes: int, total_votes: int) -> float:
    if total_votes == 0:
        return 0.0
    return votes * 100.0 / total_votes


__all__ = [
    "Account",
    "AttendanceStatus",
    "Candidate",
    "Employee",
    "Record",
    "Student",
    "Transaction",
    "TransactionKind",
    "Voter",
    "classify_attendance",
    "vote_percentage",
]
