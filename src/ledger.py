import logging
from typing import Dict, Iterator, Optional

from errors import DuplicateTransactionError, UnknownTransactionError
from models import DisputeState, LedgerEntry

logger = logging.getLogger(__name__)


class TransactionLedger:
    """
    History of applied deposits and withdrawals, keyed by tx id.

    Disputes, resolves and chargebacks look their target up here. Entries
    are never removed; only their dispute state changes.
    """

    def __init__(self):
        self._entries: Dict[int, LedgerEntry] = {}

    def record(self, entry: LedgerEntry) -> None:
        """Store an entry for future dispute lookups."""
        if entry.transaction_id in self._entries:
            raise DuplicateTransactionError(entry.transaction_id, entry.client_id)
        self._entries[entry.transaction_id] = entry

    def get(self, transaction_id: int) -> Optional[LedgerEntry]:
        return self._entries.get(transaction_id)

    def mark_disputed(self, transaction_id: int) -> None:
        self._set_state(transaction_id, DisputeState.DISPUTED)

    def mark_resolved(self, transaction_id: int) -> None:
        self._set_state(transaction_id, DisputeState.NORMAL)

    def mark_charged_back(self, transaction_id: int) -> None:
        self._set_state(transaction_id, DisputeState.CHARGED_BACK)

    def _set_state(self, transaction_id: int, state: DisputeState) -> None:
        entry = self._entries.get(transaction_id)
        if entry is None:
            raise UnknownTransactionError(transaction_id)
        logger.debug(f"tx {transaction_id}: {entry.dispute_state.value} -> {state.value}")
        entry.dispute_state = state

    def __contains__(self, transaction_id: int) -> bool:
        return transaction_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[LedgerEntry]:
        return iter(self._entries.values())
