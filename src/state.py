from typing import Dict, Optional

from ledger import TransactionLedger
from models import ClientAccount


class StateManager:
    """
    Run-scoped state: client accounts and transaction history.
    Owned by a single engine; nothing here is shared between runs.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}
        self._ledger = TransactionLedger()

    @property
    def ledger(self) -> TransactionLedger:
        return self._ledger

    def get_or_create_account(self, client_id: int) -> ClientAccount:
        """Get existing account or create new one."""
        if client_id not in self._accounts:
            self._accounts[client_id] = ClientAccount(client_id=client_id)
        return self._accounts[client_id]

    def get_account(self, client_id: int) -> Optional[ClientAccount]:
        return self._accounts.get(client_id)

    def get_all_accounts(self) -> Dict[int, ClientAccount]:
        """Return all accounts in creation order (for final output)."""
        return dict(self._accounts)
