"""
Ledgers package for the record store.

This module re-exports the abstract interfaces and the concrete ledger classes
so downstream code can import from `recordstore.ledgers` directly.
"""

from recordstore.ledgers.abstract import AbstractLedger, Ledger, to_amount
from recordstore.ledgers.attendance import AttendanceLedger
from recordstore.ledgers.bank import BankLedger
from recordstore.ledgers.payroll import PayrollLedger
from recordstore.ledgers.voting import VotingLedger

__all__ = [
    # Abstracts
    "AbstractLedger",
    "Ledger",
    "to_amount",
    # Concrete ledgers
    "AttendanceLedger",
    "BankLedger",
    "PayrollLedger",
    "VotingLedger",
]
