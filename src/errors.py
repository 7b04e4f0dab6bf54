"""
Typed per-record errors.

Every rejection the engine can produce has its own class and a stable
``code`` so callers can count and filter failures without matching on
message text. None of these are fatal: the engine records them and moves on
to the next record.

    PaymentsError
    +-- ParseError
    +-- InvalidAmountError
    +-- InvalidIdentifierError
    +-- TransactionError
    |   +-- UnknownTransactionError
    |   +-- ClientMismatchError
    |   +-- DuplicateTransactionError
    |   +-- AlreadyDisputedError
    |   +-- NotDisputedError
    |   +-- TransactionFinalizedError
    |   +-- InvalidDisputeError
    +-- AccountError
        +-- InsufficientFundsError
        +-- AccountLockedError
"""

from typing import Optional


class PaymentsError(Exception):
    code: str = "PAYMENTS_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ParseError(PaymentsError):
    """Input field could not be converted (bad amount, id or type)."""

    code = "PARSE_ERROR"


class InvalidAmountError(PaymentsError):
    """Amount missing, non-positive, or given where none is allowed."""

    code = "INVALID_AMOUNT"


class InvalidIdentifierError(PaymentsError):
    """Client or transaction id outside its unsigned range."""

    code = "INVALID_IDENTIFIER"


class TransactionError(PaymentsError):
    code = "TRANSACTION_ERROR"

    def __init__(self, transaction_id: int, message: str, client_id: Optional[int] = None):
        self.transaction_id = transaction_id
        self.client_id = client_id
        super().__init__(message)


class UnknownTransactionError(TransactionError):
    code = "UNKNOWN_TRANSACTION"

    def __init__(self, transaction_id: int, client_id: Optional[int] = None):
        super().__init__(transaction_id, f"tx {transaction_id} not found", client_id)


class ClientMismatchError(TransactionError):
    code = "CLIENT_MISMATCH"

    def __init__(self, transaction_id: int, client_id: int, owner_client_id: int):
        self.owner_client_id = owner_client_id
        super().__init__(
            transaction_id,
            f"tx {transaction_id} belongs to client {owner_client_id}, not client {client_id}",
            client_id,
        )


class DuplicateTransactionError(TransactionError):
    code = "DUPLICATE_TRANSACTION"

    def __init__(self, transaction_id: int, client_id: Optional[int] = None):
        super().__init__(transaction_id, f"tx {transaction_id} already on record", client_id)


class AlreadyDisputedError(TransactionError):
    code = "ALREADY_DISPUTED"

    def __init__(self, transaction_id: int, client_id: Optional[int] = None):
        super().__init__(transaction_id, f"tx {transaction_id} is already disputed", client_id)


class NotDisputedError(TransactionError):
    code = "NOT_DISPUTED"

    def __init__(self, transaction_id: int, client_id: Optional[int] = None):
        super().__init__(transaction_id, f"tx {transaction_id} is not disputed", client_id)


class TransactionFinalizedError(TransactionError):
    """The tx was charged back and can never be disputed again."""

    code = "TRANSACTION_FINALIZED"

    def __init__(self, transaction_id: int, client_id: Optional[int] = None):
        super().__init__(transaction_id, f"tx {transaction_id} is charged back", client_id)


class InvalidDisputeError(TransactionError):
    """Only deposits can be disputed."""

    code = "INVALID_DISPUTE"

    def __init__(self, transaction_id: int, client_id: Optional[int] = None):
        super().__init__(transaction_id, f"tx {transaction_id} is not a deposit", client_id)


class AccountError(PaymentsError):
    code = "ACCOUNT_ERROR"

    def __init__(self, client_id: int, message: str):
        self.client_id = client_id
        super().__init__(message)


class InsufficientFundsError(AccountError):
    code = "INSUFFICIENT_FUNDS"

    def __init__(self, client_id: int, requested, balance):
        self.requested = requested
        self.balance = balance
        super().__init__(client_id, f"client {client_id}: insufficient funds ({requested} requested, {balance} present)")


class AccountLockedError(AccountError):
    code = "ACCOUNT_LOCKED"

    def __init__(self, client_id: int):
        super().__init__(client_id, f"client {client_id}: account is locked")
