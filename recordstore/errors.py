"""
Error taxonomy for the record store.

Every failure a ledger operation can report is a subclass of
RecordStoreError. Errors are recoverable: they are raised before any state is
touched, and the CLI renders them. `kind` mirrors the class name so callers
can dispatch on a plain string when that is more convenient.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional


class RecordStoreError(Exception):
    """Base exception for rejected store operations."""

    kind: str = "RecordStoreError"


class DuplicateKey(RecordStoreError):
    kind = "DuplicateKey"

    def __init__(self, entity: str, key: int) -> None:
        super().__init__(f"{entity.capitalize()} ID {key} already exists")
        self.entity = entity
        self.key = key


class NotFound(RecordStoreError):
    kind = "NotFound"

    def __init__(self, entity: str, key: int) -> None:
        super().__init__(f"{entity.capitalize()} ID {key} not found")
        self.entity = entity
        self.key = key


class CapacityExceeded(RecordStoreError):
    kind = "CapacityExceeded"

    def __init__(self, entity: str, capacity: int) -> None:
        super().__init__(f"Maximum {entity}s reached ({capacity})")
        self.entity = entity
        self.capacity = capacity


class InvalidRecord(RecordStoreError):
    """Raised when initial fields fail model validation (e.g. a negative salary)."""

    kind = "InvalidRecord"

    def __init__(self, entity: str, key: int, reason: str) -> None:
        super().__init__(f"Invalid {entity} {key}: {reason}")
        self.entity = entity
        self.key = key


class InvalidAmount(RecordStoreError):
    kind = "InvalidAmount"

    def __init__(self, amount: Decimal) -> None:
        super().__init__(f"Invalid amount: {amount}")
        self.amount = amount


class InsufficientFunds(RecordStoreError):
    kind = "InsufficientFunds"

    def __init__(self, amount: Decimal, balance: Decimal) -> None:
        super().__init__(f"Insufficient funds: requested {amount}, available {balance}")
        self.amount = amount
        self.balance = balance


class LimitExceeded(RecordStoreError):
    kind = "LimitExceeded"

    def __init__(self, operation: str, amount: Decimal, limit: Decimal) -> None:
        super().__init__(f"Maximum {operation} limit is {limit} (requested {amount})")
        self.operation = operation
        self.amount = amount
        self.limit = limit


class NotMultipleOfTen(RecordStoreError):
    kind = "NotMultipleOfTen"

    def __init__(self, amount: Decimal) -> None:
        super().__init__(f"Amount must be in multiples of 10 (requested {amount})")
        self.amount = amount


class AlreadyVoted(RecordStoreError):
    kind = "AlreadyVoted"

    def __init__(self, voter_key: int) -> None:
        super().__init__(f"Voter ID {voter_key} has already voted")
        self.voter_key = voter_key


class InvalidPin(RecordStoreError):
    kind = "InvalidPin"

    def __init__(self, key: int) -> None:
        super().__init__(f"Invalid PIN for account {key}")
        self.key = key


class ParseError(RecordStoreError):
    """Raised when persisted text does not match the expected layout."""

    kind = "ParseError"

    def __init__(self, message: str, line: Optional[int] = None) -> None:
        text = f"line {line}: {message}" if line is not None else message
        super().__init__(text)
        self.line = line


__all__ = [
    "RecordStoreError",
    "DuplicateKey",
    "NotFound",
    "CapacityExceeded",
    "InvalidRecord",
    "InvalidAmount",
    "InsufficientFunds",
    "LimitExceeded",
    "NotMultipleOfTen",
    "AlreadyVoted",
    "InvalidPin",
    "ParseError",
]
