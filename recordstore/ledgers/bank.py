"""
Bank ledger: ATM-style accounts with deposits, withdrawals and history.

Every movement is validated against an ordered guard table before the balance
changes; accepted movements are appended to the account history with a
ledger-wide sequence number.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence

from recordstore.config import Settings
from recordstore.domain.models import Account, Transaction, TransactionKind
from recordstore.errors import (
    InsufficientFunds,
    InvalidAmount,
    InvalidPin,
    LimitExceeded,
    NotMultipleOfTen,
    RecordStoreError,
)
from recordstore.ledgers.abstract import AbstractLedger, AmountLike, is_positive, to_amount
from recordstore.rules import Guard, enforce
from recordstore.store import RecordStore
from recordstore.utils.logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class _Movement:
    account: Account
    amount: Decimal
    limit: Decimal


_POSITIVE: Guard[_Movement] = Guard(
    "positive", lambda m: is_positive(m.amount), lambda m: InvalidAmount(m.amount)
)

DEPOSIT_GUARDS = (
    _POSITIVE,
    Guard(
        "within_limit",
        lambda m: m.amount <= m.limit,
        lambda m: LimitExceeded("deposit", m.amount, m.limit),
    ),
)

WITHDRAWAL_GUARDS = (
    _POSITIVE,
    Guard(
        "covered",
        lambda m: m.amount <= m.account.balance,
        lambda m: InsufficientFunds(m.amount, m.account.balance),
    ),
    Guard(
        "within_limit",
        lambda m: m.amount <= m.limit,
        lambda m: LimitExceeded("withdrawal", m.amount, m.limit),
    ),
)

ATM_WITHDRAWAL_GUARDS = WITHDRAWAL_GUARDS + (
    Guard(
        "multiple_of_ten",
        lambda m: m.amount % 10 == 0,
        lambda m: NotMultipleOfTen(m.amount),
    ),
)


class BankLedger(AbstractLedger):
    """
    Accounts keyed by account number.

    In ATM mode (the default) withdrawals must also be multiples of 10, the
    way a cash machine only dispenses notes.
    """

    name: str = "bank"
    description: str = "ATM accounts with PIN check, deposits, withdrawals and history."
    filename: str = "bank_data.txt"

    def __init__(self, settings: Optional[Settings] = None) -> None:
        super().__init__(settings)
        self.accounts: RecordStore[Account] = RecordStore(
            Account, "account", capacity=self.settings.bank_capacity
        )
        self._sequence = 0

    @property
    def counter(self) -> int:
        return self._sequence

    @counter.setter
    def counter(self, value: int) -> None:
        self._sequence = int(value)

    def stores(self) -> Dict[str, RecordStore[Any]]:
        return {"accounts": self.accounts}

    def open_account(
        self,
        key: int,
        pin: int,
        balance: Optional[AmountLike] = None,
        holder: str = "",
    ) -> Account:
        """Create an account; the opening balance is not a history entry."""
        opening = self.settings.bank_initial_balance if balance is None else to_amount(balance)
        if not opening.is_finite() or opening < 0:
            raise InvalidAmount(opening)
        account = self.accounts.insert(key, pin=pin, balance=opening, holder=holder)
        log.info(f"[ACCOUNT OPENED] {key}", extra={"key": key, "balance": str(opening)})
        return account

    def authenticate(self, key: int, pin: int) -> Account:
        account = self.accounts.get(key)
        if account.pin != pin:
            log.warning(f"[PIN REJECTED] {key}", extra={"key": key})
            raise InvalidPin(key)
        return account

    def balance(self, key: int) -> Decimal:
        return self.accounts.get(key).balance

    def history(self, key: int) -> List[Transaction]:
        return list(self.accounts.get(key).history)

    def deposit(self, key: int, amount: AmountLike) -> Transaction:
        account = self.accounts.get(key)
        value = to_amount(amount)
        self._check(
            DEPOSIT_GUARDS,
            _Movement(account, value, self.settings.bank_max_deposit),
            TransactionKind.DEPOSIT,
        )
        account.balance = account.balance + value
        return self._append(account, TransactionKind.DEPOSIT, value)

    def withdraw(self, key: int, amount: AmountLike) -> Transaction:
        account = self.accounts.get(key)
        value = to_amount(amount)
        guards = ATM_WITHDRAWAL_GUARDS if self.settings.bank_atm_mode else WITHDRAWAL_GUARDS
        self._check(
            guards,
            _Movement(account, value, self.settings.bank_max_withdrawal),
            TransactionKind.WITHDRAWAL,
        )
        account.balance = account.balance - value
        return self._append(account, TransactionKind.WITHDRAWAL, value)

    def _check(
        self, guards: Sequence[Guard[_Movement]], movement: _Movement, kind: TransactionKind
    ) -> None:
        try:
            enforce(guards, movement)
        except RecordStoreError as exc:
            log.warning(
                f"[{kind.name} REJECTED] {movement.account.key}: {exc}",
                extra={"key": movement.account.key, "kind": exc.kind, "amount": str(movement.amount)},
            )
            raise

    def _append(self, account: Account, kind: TransactionKind, amount: Decimal) -> Transaction:
        self._sequence += 1
        entry = Transaction(
            kind=kind,
            amount=amount,
            sequence=self._sequence,
            resulting_balance=account.balance,
        )
        account.history.append(entry)
        log.info(
            f"[{kind.name}] {account.key}",
            extra={
                "key": account.key,
                "amount": str(amount),
                "sequence": entry.sequence,
                "balance": str(account.balance),
            },
        )
        return entry


__all__ = [
    "ATM_WITHDRAWAL_GUARDS",
    "BankLedger",
    "DEPOSIT_GUARDS",
    "WITHDRAWAL_GUARDS",
]
