import logging
import re
from typing import Dict, Optional

from amount import Amount
from errors import ParseError
from models import Transaction, TransactionType

logger = logging.getLogger(__name__)

_INTEGER = re.compile(r"[+-]?[0-9]+")


def _parse_int(field_name: str, value: Optional[str]) -> int:
    if value is None or not value.strip():
        raise ParseError(f"missing {field_name}")
    stripped = value.strip()
    if not _INTEGER.fullmatch(stripped):
        raise ParseError(f"invalid {field_name} {value!r}")
    return int(stripped)


def parse_row(row: Dict[str, Optional[str]]) -> Transaction:
    """
    Parse a csv.DictReader row into a Transaction.

    Header names and values may be padded with whitespace and the type is
    case-insensitive. Rows with a missing or malformed field raise ParseError;
    rows that parse but violate record rules (e.g. a negative deposit) raise
    the validation error from Transaction.
    """
    normalized = {
        (k or "").strip().lower(): (v.strip() if isinstance(v, str) else v)
        for k, v in row.items()
    }

    type_str = normalized.get("type")
    if not type_str:
        raise ParseError("missing type")
    try:
        transaction_type = TransactionType(type_str.lower())
    except ValueError as e:
        raise ParseError(f"unknown transaction type {type_str!r}") from e

    client_id = _parse_int("client", normalized.get("client"))
    transaction_id = _parse_int("tx", normalized.get("tx"))

    amount = None
    amount_str = normalized.get("amount") or ""
    if transaction_type.carries_amount:
        if amount_str:
            amount = Amount.parse(amount_str)
    elif amount_str:
        logger.debug(f"Ignoring amount {amount_str!r} on {transaction_type.value} tx {transaction_id}")

    return Transaction(
        transaction_type=transaction_type,
        client_id=client_id,
        transaction_id=transaction_id,
        amount=amount,
    )
