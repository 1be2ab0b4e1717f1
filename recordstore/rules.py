"""
Ordered guard tables.

A guard pairs a predicate with the error raised when the predicate fails.
Ledgers declare one table per operation; `enforce` walks the table in order
and raises the first failure, before the operation touches any record.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, Sequence, TypeVar

from recordstore.errors import RecordStoreError

C = TypeVar("C")


@dataclass(frozen=True)
class Guard(Generic[C]):
    name: str
    check: Callable[[C], bool]
    error: Callable[[C], RecordStoreError]


def enforce(guards: Sequence[Guard[C]], context: C) -> None:
    """Raise the error of the first guard whose check fails."""
    for guard in guards:
        if not guard.check(context):
            raise guard.error(context)


__all__ = ["Guard", "enforce"]
