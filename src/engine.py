import csv
import logging
from typing import Iterable, List, Optional

from errors import ParseError, PaymentsError
from ledger import TransactionLedger
from models import AccountSnapshot, ProcessingResult, ProcessingStats, Transaction, TransactionFailure
from parsing import parse_row
from processor import TransactionProcessor
from state import StateManager

logger = logging.getLogger(__name__)


class PaymentsEngine:
    """
    Replays an ordered stream of transactions and reports final balances.

    Records are applied strictly one after another. A record that fails to
    parse or is rejected by the processor is logged, kept in ``failures`` and
    skipped; it never stops the run.
    """

    def __init__(self):
        self._state = StateManager()
        self._processor = TransactionProcessor(self._state)
        self._stats = ProcessingStats()
        self._failures: List[TransactionFailure] = []

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    @property
    def failures(self) -> List[TransactionFailure]:
        return list(self._failures)

    @property
    def ledger(self) -> TransactionLedger:
        return self._state.ledger

    def process_file(self, filepath: str) -> List[AccountSnapshot]:
        """Process CSV file and return final account states."""
        logger.info(f"Processing {filepath}")

        # Undecodable bytes become U+FFFD so the row fails in parse_row instead of aborting the read.
        with open(filepath, "r", newline="", encoding="utf-8-sig", errors="replace") as f:
            reader = csv.DictReader(f)
            while True:
                try:
                    row = next(reader)
                except StopIteration:
                    break
                except csv.Error as e:
                    self._record_failure(ParseError(f"malformed csv row: {e}"), line=reader.line_num)
                    continue

                try:
                    transaction = parse_row(row)
                except PaymentsError as e:
                    self._record_failure(e, line=reader.line_num)
                    continue
                self.process_transaction(transaction, line=reader.line_num)

        logger.info(f"Finished {filepath}: {self._stats.processed} processed, {self._stats.failed} failed")
        return self.snapshot()

    def process(self, transactions: Iterable[Transaction]) -> List[AccountSnapshot]:
        for transaction in transactions:
            self.process_transaction(transaction)
        return self.snapshot()

    def process_transaction(self, transaction: Transaction, line: Optional[int] = None) -> ProcessingResult:
        try:
            self._processor.process_transaction(transaction)
        except PaymentsError as e:
            self._record_failure(e, transaction=transaction, line=line)
            return ProcessingResult.FAILED

        self._stats.record_success()
        return ProcessingResult.SUCCESS

    def snapshot(self) -> List[AccountSnapshot]:
        """One row per account, in the order accounts were created."""
        return [account.snapshot() for account in self._state.get_all_accounts().values()]

    def _record_failure(
        self,
        error: PaymentsError,
        transaction: Optional[Transaction] = None,
        line: Optional[int] = None,
    ) -> None:
        failure = TransactionFailure(error=error, transaction=transaction, line=line)
        self._failures.append(failure)
        self._stats.record_failure(error.code)
        if transaction is not None:
            logger.warning(f"Rejected {transaction}: {failure}")
        else:
            logger.warning(f"Skipped row: {failure}")
