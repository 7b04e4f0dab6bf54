import logging

from errors import (
    AlreadyDisputedError,
    ClientMismatchError,
    DuplicateTransactionError,
    InvalidDisputeError,
    NotDisputedError,
    TransactionFinalizedError,
    UnknownTransactionError,
)
from models import LedgerEntry, Transaction, TransactionType
from state import StateManager

logger = logging.getLogger(__name__)


class TransactionProcessor:
    """
    Applies transactions against state, one at a time, in arrival order.

    A rejected transaction raises a PaymentsError subclass and leaves every
    account and ledger entry exactly as it was.

    Dispute lifecycle of a deposit:
        NORMAL -> DISPUTED -> NORMAL (resolve, may be disputed again)
                           -> CHARGED_BACK (terminal, account locked)
    """

    def __init__(self, state: StateManager):
        self._state = state

    def process_transaction(self, transaction: Transaction) -> None:
        match transaction.transaction_type:
            case TransactionType.DEPOSIT:
                self._handle_deposit(transaction)
            case TransactionType.WITHDRAWAL:
                self._handle_withdrawal(transaction)
            case TransactionType.DISPUTE:
                self._handle_dispute(transaction)
            case TransactionType.RESOLVE:
                self._handle_resolve(transaction)
            case TransactionType.CHARGEBACK:
                self._handle_chargeback(transaction)

        logger.debug(f"Applied {transaction!r}")

    def _handle_deposit(self, transaction: Transaction) -> None:
        self._ensure_new_transaction_id(transaction)
        account = self._state.get_or_create_account(transaction.client_id)
        account.deposit(transaction.amount)
        self._state.ledger.record(LedgerEntry.from_transaction(transaction))

    def _handle_withdrawal(self, transaction: Transaction) -> None:
        self._ensure_new_transaction_id(transaction)
        account = self._state.get_or_create_account(transaction.client_id)
        account.withdraw(transaction.amount)
        # Recorded so later references resolve to it; disputes against it are rejected.
        self._state.ledger.record(LedgerEntry.from_transaction(transaction))

    def _handle_dispute(self, transaction: Transaction) -> None:
        original = self._lookup(transaction)

        if original.charged_back:
            raise TransactionFinalizedError(original.transaction_id, transaction.client_id)

        # TODO: withdrawal disputes need a product decision on how held funds are sourced
        if original.transaction_type is not TransactionType.DEPOSIT:
            raise InvalidDisputeError(original.transaction_id, transaction.client_id)

        if original.disputed:
            raise AlreadyDisputedError(original.transaction_id, transaction.client_id)

        account = self._state.get_or_create_account(original.client_id)
        account.hold(original.amount)
        self._state.ledger.mark_disputed(original.transaction_id)

    def _handle_resolve(self, transaction: Transaction) -> None:
        original = self._lookup(transaction)

        if not original.disputed:
            raise NotDisputedError(original.transaction_id, transaction.client_id)

        account = self._state.get_or_create_account(original.client_id)
        account.release(original.amount)
        self._state.ledger.mark_resolved(original.transaction_id)

    def _handle_chargeback(self, transaction: Transaction) -> None:
        original = self._lookup(transaction)

        if not original.disputed:
            raise NotDisputedError(original.transaction_id, transaction.client_id)

        account = self._state.get_or_create_account(original.client_id)
        account.chargeback(original.amount)
        self._state.ledger.mark_charged_back(original.transaction_id)

    def _ensure_new_transaction_id(self, transaction: Transaction) -> None:
        if transaction.transaction_id in self._state.ledger:
            raise DuplicateTransactionError(transaction.transaction_id, transaction.client_id)

    def _lookup(self, transaction: Transaction) -> LedgerEntry:
        """Find the deposit or withdrawal a dispute-family record points at."""
        original = self._state.ledger.get(transaction.transaction_id)
        if original is None:
            raise UnknownTransactionError(transaction.transaction_id, transaction.client_id)
        if original.client_id != transaction.client_id:
            raise ClientMismatchError(transaction.transaction_id, transaction.client_id, original.client_id)
        return original
