"""
Ledger registry and flat-file persistence.

Usage (example from the CLI):
    from recordstore.storage import ledger_session

    with ledger_session("bank") as bank:
        bank.deposit(1001, "200")

Files live under `Settings.data_dir` with one well-known name per ledger
(`bank_data.txt`, `attendance_data.txt`, `payroll_data.txt`,
`voting_data.txt`). A missing file is a normal outcome and yields an empty
ledger. Nothing is written implicitly: callers flush explicitly, or use
`ledger_session`, which flushes only when its body completes.
"""

from __future__ import annotations

import contextlib
from pathlib import Path
from typing import Callable, Dict, Generator, List, Optional

from recordstore import codec
from recordstore.config import Settings, get_settings
from recordstore.errors import ParseError
from recordstore.ledgers.abstract import AbstractLedger
from recordstore.ledgers.attendance import AttendanceLedger
from recordstore.ledgers.bank import BankLedger
from recordstore.ledgers.payroll import PayrollLedger
from recordstore.ledgers.voting import VotingLedger
from recordstore.utils.logging import get_logger

log = get_logger(__name__)


def _ledger_factories() -> Dict[str, Callable[[Optional[Settings]], AbstractLedger]]:
    """Registry of available ledgers."""
    return {
        "bank": lambda settings: BankLedger(settings),
        "attendance": lambda settings: AttendanceLedger(settings),
        "payroll": lambda settings: PayrollLedger(settings),
        "voting": lambda settings: VotingLedger(settings),
    }


def available_ledgers() -> List[str]:
    """List available ledger names."""
    return sorted(_ledger_factories().keys())


def create_ledger(name: str, settings: Optional[Settings] = None) -> AbstractLedger:
    factories = _ledger_factories()
    if name not in factories:
        raise ValueError(f"Unknown ledger '{name}'. Available: {', '.join(factories)}")
    return factories[name](settings)


def ledger_path(name: str, settings: Optional[Settings] = None) -> Path:
    settings = settings or get_settings()
    return Path(settings.data_dir) / create_ledger(name, settings).filename


def load_ledger(
    name: str,
    settings: Optional[Settings] = None,
    path: Path | str | None = None,
) -> AbstractLedger:
    """
    Load a ledger from its file, or return an empty one when the file is absent.

    Raises ParseError when the file exists but is malformed.
    """
    settings = settings or get_settings()
    target = Path(path) if path is not None else ledger_path(name, settings)
    if not target.exists():
        log.info(f"[LOAD] no previous data found for {name}", extra={"path": str(target)})
        return create_ledger(name, settings)

    try:
        with target.open("r", encoding="utf-8") as f:
            text = f.read()
    except UnicodeDecodeError as exc:
        raise ParseError(f"{target.name} is not valid UTF-8") from exc
    ledger = codec.decode(text, create_ledger(name, settings))
    log.info(f"[LOAD] {name} loaded", extra={"path": str(target), "ledger": repr(ledger)})
    return ledger


def flush_ledger(ledger: AbstractLedger, path: Path | str | None = None) -> Path:
    """
    Write a ledger to its file, creating the data directory if needed.

    The text is encoded before the file is opened, so an encoding failure
    never truncates existing data.
    """
    target = Path(path) if path is not None else Path(ledger.settings.data_dir) / ledger.filename
    text = codec.encode(ledger)
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8") as f:
        f.write(text)
    log.info(f"[FLUSH] {ledger.name} saved", extra={"path": str(target)})
    return target


@contextlib.contextmanager
def ledger_session(
    name: str,
    settings: Optional[Settings] = None,
    path: Path | str | None = None,
) -> Generator[AbstractLedger, None, None]:
    """
    Load a ledger, yield it, and flush it if the body raised nothing.
    """
    settings = settings or get_settings()
    target = Path(path) if path is not None else ledger_path(name, settings)
    ledger = load_ledger(name, settings, target)
    yield ledger
    flush_ledger(ledger, target)


__all__ = [
    "available_ledgers",
    "create_ledger",
    "flush_ledger",
    "ledger_path",
    "ledger_session",
    "load_ledger",
]
