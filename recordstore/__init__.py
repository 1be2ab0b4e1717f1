"""
Record Store - keyed, bounded record ledgers with flat-file persistence.

This package provides one small record-keeping engine and four ledgers built
on it:

- Bank / ATM accounts with PIN check, limits and transaction history
- Student attendance with percentages and Good / Low / Critical status
- Employee payroll driven by a configurable rate table
- Voting with single-vote enforcement and winner or tie reporting

Each ledger persists to its own text file under the configured data directory
and is driven from the `recordstore` command line.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from recordstore.config import PayrollRates, Settings, get_settings
from recordstore.errors import RecordStoreError
from recordstore.ledgers import (
    AbstractLedger,
    AttendanceLedger,
    BankLedger,
    Ledger,
    PayrollLedger,
    VotingLedger,
)
from recordstore.storage import (
    available_ledgers,
    create_ledger,
    flush_ledger,
    ledger_session,
    load_ledger,
)
from recordstore.store import RecordStore
from recordstore.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "PayrollRates",
    "Settings",
    "get_settings",
    # Errors
    "RecordStoreError",
    # Storage
    "RecordStore",
    "available_ledgers",
    "create_ledger",
    "flush_ledger",
    "ledger_session",
    "load_ledger",
    # Ledgers
    "AbstractLedger",
    "Ledger",
    "AttendanceLedger",
    "BankLedger",
    "PayrollLedger",
    "VotingLedger",
    # Logging
    "configure_logging",
    "get_logger",
]
