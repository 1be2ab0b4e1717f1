"""
Domain package for the record store.

Record variants, history entries and the pure helpers that derive
attendance status and vote percentages from them.
"""

from recordstore.domain.models import (
    Account,
    AttendanceStatus,
    Candidate,
    Employee,
    Record,
    Student,
    Transaction,
    TransactionKind,
    Voter,
    classify_attendance,
    vote_percentage,
)

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
