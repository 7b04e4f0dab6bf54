from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from amount import Amount
from errors import (
    AccountLockedError,
    InsufficientFundsError,
    InvalidAmountError,
    InvalidIdentifierError,
    PaymentsError,
)

MAX_CLIENT_ID = 2 ** 16 - 1
MAX_TRANSACTION_ID = 2 ** 32 - 1


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"

    @property
    def carries_amount(self) -> bool:
        return self in (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL)


class DisputeState(Enum):
    NORMAL = "normal"
    DISPUTED = "disputed"
    CHARGED_BACK = "charged_back"


class ProcessingResult(Enum):
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class Transaction:
    """
    One validated input event.

    Deposits and withdrawals carry a positive amount and a fresh tx id.
    Disputes, resolves and chargebacks carry no amount and reference the tx
    id of an earlier deposit or withdrawal.
    """

    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Optional[Amount] = None

    def __post_init__(self):
        if not 0 <= self.client_id <= MAX_CLIENT_ID:
            raise InvalidIdentifierError(f"client id {self.client_id} out of range 0..{MAX_CLIENT_ID}")
        if not 0 <= self.transaction_id <= MAX_TRANSACTION_ID:
            raise InvalidIdentifierError(f"tx id {self.transaction_id} out of range 0..{MAX_TRANSACTION_ID}")

        kind = self.transaction_type.value
        if self.transaction_type.carries_amount:
            if self.amount is None:
                raise InvalidAmountError(f"{kind} tx {self.transaction_id}: amount is required")
            if not self.amount.is_positive:
                raise InvalidAmountError(f"{kind} tx {self.transaction_id}: amount must be positive, got {self.amount}")
        elif self.amount is not None:
            raise InvalidAmountError(f"{kind} tx {self.transaction_id}: amount is not allowed")

    def __repr__(self) -> str:
        return f"Transaction({self.transaction_type.value}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass(frozen=True)
class AccountSnapshot:
    client: int
    available: Amount
    held: Amount
    total: Amount
    locked: bool


@dataclass
class ClientAccount:
    """
    Balance state of one client.

    Every mutator either applies completely or raises and leaves the account
    untouched. ``total`` is derived, so total == available + held always.
    """

    client_id: int
    available: Amount = field(default_factory=Amount.zero)
    held: Amount = field(default_factory=Amount.zero)
    locked: bool = False

    @property
    def total(self) -> Amount:
        return self.available + self.held

    def _ensure_unlocked(self) -> None:
        if self.locked:
            raise AccountLockedError(self.client_id)

    def deposit(self, amount: Amount) -> None:
        self._ensure_unlocked()
        self.available += amount

    def withdraw(self, amount: Amount) -> None:
        self._ensure_unlocked()
        if self.available < amount:
            raise InsufficientFundsError(self.client_id, amount, self.available)
        self.available -= amount

    def hold(self, amount: Amount) -> None:
        """Move funds from available to held for an open dispute."""
        self._ensure_unlocked()
        if self.available < amount:
            raise InsufficientFundsError(self.client_id, amount, self.available)
        self.available -= amount
        self.held += amount

    def release(self, amount: Amount) -> None:
        """Move disputed funds back from held to available."""
        self._ensure_unlocked()
        if self.held < amount:
            raise InsufficientFundsError(self.client_id, amount, self.held)
        self.held -= amount
        self.available += amount

    def chargeback(self, amount: Amount) -> None:
        """Remove disputed funds entirely and freeze the account."""
        self._ensure_unlocked()
        if self.held < amount:
            raise InsufficientFundsError(self.client_id, amount, self.held)
        self.held -= amount
        self.locked = True

    def snapshot(self) -> AccountSnapshot:
        return AccountSnapshot(
            client=self.client_id,
            available=self.available,
            held=self.held,
            total=self.total,
            locked=self.locked,
        )


@dataclass
class LedgerEntry:
    client_id: int
    transaction_id: int
    transaction_type: TransactionType
    amount: Amount
    dispute_state: DisputeState = DisputeState.NORMAL

    @property
    def disputed(self) -> bool:
        return self.dispute_state is DisputeState.DISPUTED

    @property
    def charged_back(self) -> bool:
        return self.dispute_state is DisputeState.CHARGED_BACK

    @classmethod
    def from_transaction(cls, transaction: Transaction) -> "LedgerEntry":
        return cls(
            client_id=transaction.client_id,
            transaction_id=transaction.transaction_id,
            transaction_type=transaction.transaction_type,
            amount=transaction.amount,
        )


@dataclass
class TransactionFailure:
    """A rejected record, kept for the end-of-run report."""

    error: PaymentsError
    transaction: Optional[Transaction] = None
    line: Optional[int] = None

    @property
    def code(self) -> str:
        return self.error.code

    def __str__(self) -> str:
        where = f"line {self.line}: " if self.line is not None else ""
        return f"{where}{self.error.code}: {self.error.message}"


class ProcessingStats:
    """Counters for tracking processing statistics."""

    def __init__(self):
        self.processed = 0
        self.failed = 0
        self.failures_by_code: Counter = Counter()

    def record_success(self):
        self.processed += 1

    def record_failure(self, code: str):
        self.failed += 1
        self.failures_by_code[code] += 1
