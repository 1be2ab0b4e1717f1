"""
Abstract ledger interfaces for the record store.

A ledger groups the record store(s) of one domain variant, a ledger-wide
counter, and the named transaction operations for that variant. Concrete
ledgers (bank, attendance, payroll, voting) implement AbstractLedger so that
the codec, storage layer and CLI can treat them uniformly.
"""

from __future__ import annotations

import abc
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional, Protocol, Union, runtime_checkable

from recordstore.config import Settings, get_settings
from recordstore.errors import InvalidAmount
from recordstore.store import RecordStore

AmountLike = Union[Decimal, int, float, str]


def to_amount(value: AmountLike) -> Decimal:
    """
    Coerce user input into a Decimal amount.

    Floats go through `str` so 1500.5 becomes Decimal("1500.5") rather than
    its binary expansion. Unparseable input raises InvalidAmount.
    """
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as exc:
        raise InvalidAmount(value) from exc  # type: ignore[arg-type]


def is_positive(amount: Decimal) -> bool:
    return amount.is_finite() and amount > 0


@runtime_checkable
class Ledger(Protocol):
    """
    Common interface every ledger exposes.

    Attributes
    ----------
    name : str
        A short machine-friendly identifier, also the CLI group name.
    description : str
        A human-friendly summary of the variant.
    filename : str
        Well-known persistence file name for the variant.
    """

    name: str
    description: str
    filename: str

    @property
    def counter(self) -> int:
        """Ledger-wide counter persisted in the file header."""
        ...

    def stores(self) -> Dict[str, RecordStore[Any]]:
        """Record stores owned by the ledger, in serialization order."""
        ...


class AbstractLedger(abc.ABC):
    """
    ABC helper for class-based ledgers.

    Subclasses set `name`, `description` and `filename`, build their stores in
    `__init__`, and implement `counter` and `stores`.
    """

    name: str
    description: str
    filename: str

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings or get_settings()

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    @abc.abstractmethod
    def counter(self) -> int:  # pragma: no cover - interface only
        raise NotImplementedError

    @counter.setter
    @abc.abstractmethod
    def counter(self, value: int) -> None:  # pragma: no cover - interface only
        raise NotImplementedError

    @abc.abstractmethod
    def stores(self) -> Dict[str, RecordStore[Any]]:  # pragma: no cover - interface only
        raise NotImplementedError

    def is_empty(self) -> bool:
        return all(len(store) == 0 for store in self.stores().values())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AbstractLedger) or type(other) is not type(self):
            return NotImplemented
        if self.counter != other.counter:
            return False
        mine, theirs = self.stores(), other.stores()
        return mine.keys() == theirs.keys() and all(
            mine[label].all() == theirs[label].all() for label in mine
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        sizes = ", ".join(f"{label}={len(store)}" for label, store in self.stores().items())
        return f"{type(self).__name__}({sizes}, counter={self.counter})"


__all__ = [
    "AbstractLedger",
    "AmountLike",
    "Ledger",
    "is_positive",
    "to_amount",
]
