"""
Generic bounded record store.

A RecordStore owns an ordered list of records of one model type. Keys are
unique, insertion order is preserved, and an optional capacity bounds the
number of records. Lookups are linear: stores hold a handful of records.
"""

from __future__ import annotations

from typing import Any, Generic, Iterator, List, Optional, Type, TypeVar

from pydantic import ValidationError

from recordstore.domain.models import Record
from recordstore.errors import CapacityExceeded, DuplicateKey, InvalidRecord, NotFound

R = TypeVar("R", bound=Record)


class RecordStore(Generic[R]):
    """
    Ordered, uniquely keyed collection of records.

    Parameters
    ----------
    model : type
        Record model used to build new entries from their initial fields.
    entity : str
        Human-friendly record name used in error messages ("account", "voter").
    capacity : int | None
        Maximum number of records. None means unbounded.
    """

    def __init__(self, model: Type[R], entity: str, capacity: Optional[int] = None) -> None:
        if capacity is not None and capacity < 0:
            raise ValueError("capacity must be >= 0")
        self._model = model
        self._entity = entity
        self._capacity = capacity
        self._records: List[R] = []

    @property
    def entity(self) -> str:
        return self._entity

    @property
    def capacity(self) -> Optional[int]:
        return self._capacity

    @property
    def is_full(self) -> bool:
        return self._capacity is not None and len(self._records) >= self._capacity

    def insert(self, key: int, **initial_fields: Any) -> R:
        """
        Build and append a record.

        Raises DuplicateKey when the key is taken, CapacityExceeded when the
        store is full and InvalidRecord when the fields fail validation. The
        store is unchanged whenever an error is raised.
        """
        if self.find(key) is not None:
            raise DuplicateKey(self._entity, key)
        if self.is_full:
            raise CapacityExceeded(self._entity, self._capacity or 0)
        try:
            record = self._model(key=key, **initial_fields)
        except ValidationError as exc:
            reason = "; ".join(err["msg"] for err in exc.errors())
            raise InvalidRecord(self._entity, key, reason) from exc
        self._records.append(record)
        return record

    def find(self, key: int) -> Optional[R]:
        for record in self._records:
            if record.key == key:
                return record
        return None

    def get(self, key: int) -> R:
        record = self.find(key)
        if record is None:
            raise NotFound(self._entity, key)
        return record

    def all(self) -> List[R]:
        """Records in insertion order (a copy; mutate records, not the list)."""
        return list(self._records)

    def clear(self) -> None:
        self._records.clear()

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[R]:
        return iter(list(self._records))

    def __contains__(self, key: object) -> bool:
        return isinstance(key, int) and self.find(key) is not None

    def __repr__(self) -> str:
        return f"RecordStore(entity={self._entity!r}, size={len(self)}, capacity={self._capacity})"


__all__ = ["RecordStore"]
