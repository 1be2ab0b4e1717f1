from __future__ import annotations

import pytest
from pydantic import ValidationError

from recordstore.domain.models import Candidate, Voter
from recordstore.errors import CapacityExceeded, DuplicateKey, InvalidRecord, NotFound
from recordstore.store import RecordStore

STORE_CAPACITY = 3


def _voters(capacity=STORE_CAPACITY) -> RecordStore[Voter]:
    return RecordStore(Voter, "voter", capacity=capacity)


def test_insert_keeps_insertion_order() -> None:
    store = _voters()
    for key in (30, 10, 20):
        store.insert(key, name=f"v{key}")

    assert [v.key for v in store.all()] == [30, 10, 20]
    assert [v.key for v in store] == [30, 10, 20]
    assert len(store) == STORE_CAPACITY


def test_find_returns_record_or_none() -> None:
    store = _voters()
    inserted = store.insert(7, name="Ana")

    assert store.find(7) is inserted
    assert store.find(8) is None
    assert 7 in store
    assert 8 not in store


def test_duplicate_key_is_rejected_without_mutation() -> None:
    store = _voters()
    store.insert(1, name="first")

    with pytest.raises(DuplicateKey) as excinfo:
        store.insert(1, name="second")

    assert excinfo.value.kind == "DuplicateKey"
    assert str(excinfo.value) == "Voter ID 1 already exists"
    assert len(store) == 1
    assert store.get(1).name == "first"


def test_capacity_is_enforced() -> None:
    store = _voters(capacity=1)
    store.insert(1)

    assert store.is_full
    with pytest.raises(CapacityExceeded) as excinfo:
        store.insert(2)

    assert excinfo.value.capacity == 1
    assert str(excinfo.value) == "Maximum voters reached (1)"
    assert [v.key for v in store] == [1]


def test_duplicate_is_reported_before_capacity() -> None:
    store = _voters(capacity=1)
    store.insert(1)

    with pytest.raises(DuplicateKey):
        store.insert(1)


def test_unbounded_store_never_fills() -> None:
    store = _voters(capacity=None)
    for key in range(50):
        store.insert(key)

    assert store.capacity is None
    assert not store.is_full
    assert len(store) == 50


def test_negative_capacity_is_a_programming_error() -> None:
    with pytest.raises(ValueError):
        RecordStore(Voter, "voter", capacity=-1)


def test_get_missing_key_raises_not_found() -> None:
    store = _voters()

    with pytest.raises(NotFound) as excinfo:
        store.get(9)

    assert excinfo.value.kind == "NotFound"
    assert str(excinfo.value) == "Voter ID 9 not found"


def test_invalid_initial_fields_raise_invalid_record() -> None:
    store: RecordStore[Candidate] = RecordStore(Candidate, "candidate")

    with pytest.raises(InvalidRecord):
        store.insert(1, name="A", vote_count=-1)
    with pytest.raises(InvalidRecord):
        store.insert(2, name="two\nlines")

    assert len(store) == 0


def test_all_returns_a_copy() -> None:
    store = _voters()
    store.insert(1)

    snapshot = store.all()
    snapshot.clear()

    assert len(store) == 1


def test_records_reject_key_change_and_negative_values() -> None:
    store: RecordStore[Candidate] = RecordStore(Candidate, "candidate")
    candidate = store.insert(1, name="A")

    with pytest.raises(ValidationError):
        candidate.key = 2
    with pytest.raises(ValidationError):
        candidate.vote_count = -1

    assert candidate.key == 1
    assert candidate.vote_count == 0


def test_clear_empties_the_store() -> None:
    store = _voters()
    store.insert(1)
    store.insert(2)

    store.clear()

    assert len(store) == 0
    assert store.find(1) is None
