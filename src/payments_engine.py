import logging
from typing import Dict, Iterable

from errors import FileOpenError, TransactionError
from models import ClientAccount, ProcessingStats, Transaction
from state_manager import StateManager
from transaction_processor import TransactionProcessor
from transaction_reader import read_transactions

logger = logging.getLogger(__name__)


class PaymentsEngine:
    """
    Feeds a transaction stream through the processor, one record at a time in stream order.
    Rejected transactions are counted and skipped; stream errors propagate and abort the run.
    One engine per run: state starts empty and is discarded with the engine.
    """

    def __init__(self, verbose: bool = False):
        self._verbose = verbose
        self._state = StateManager()
        self._processor = TransactionProcessor(self._state)
        self._stats = ProcessingStats()

    @property
    def accounts(self) -> Dict[int, ClientAccount]:
        """Accounts accumulated so far, also valid after a stream error."""
        return self._state.get_all_accounts()

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def process_file(self, filepath: str) -> Dict[int, ClientAccount]:
        """Process CSV file and return final account states."""
        try:
            f = open(filepath, "r", encoding="utf-8", newline="")
        except OSError as e:
            raise FileOpenError(filepath, e) from e

        with f:
            return self.process_transactions(read_transactions(f))

    def process_transactions(self, transactions: Iterable[Transaction]) -> Dict[int, ClientAccount]:
        """Apply every transaction of a (possibly lazy) stream and return final account states."""
        for transaction in transactions:
            self._apply_transaction(transaction)

        logger.info(self._stats.summary())
        return self.accounts

    def _apply_transaction(self, transaction: Transaction) -> None:
        try:
            self._processor.process_transaction(transaction)
        except TransactionError as e:
            self._stats.record_failure(e)
            if self._verbose:
                logger.warning(f"Rejected {transaction}: {e}")
            else:
                logger.debug(f"Rejected {transaction}: {e}")
            return

        self._stats.record_success()
