import logging

from errors import BalanceInsufficientError
from models import LedgerTransaction, Transaction, TransactionStatus, TransactionType
from state_manager import StateManager
from validation import (
    check_client_id,
    check_not_duplicate,
    check_not_locked,
    check_positive,
    check_sufficient_balance,
    find_referenced_deposit,
    require_account,
    require_amount,
)

logger = logging.getLogger(__name__)


class TransactionProcessor:
    """
    Applies transactions to ledger state.
    Every handler runs all of its checks before the first mutation, so a transaction
    either applies completely or raises a TransactionError leaving state untouched.
    """

    def __init__(self, state: StateManager):
        self._state = state

    def process_transaction(self, transaction: Transaction) -> None:
        """
        Process a single transaction.

        Raises:
            TransactionError: the transaction was rejected, state is unchanged
        """
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

    def _handle_deposit(self, transaction: Transaction) -> None:
        check_not_duplicate(transaction, self._state)
        amount = require_amount(transaction, transaction.amount)
        check_positive(transaction, amount)

        # Deposits are the only way an account comes into existence
        account = self._state.get_or_create_account(transaction.client_id)
        check_not_locked(transaction, account)

        account.credit(amount)
        self._state.store_transaction(LedgerTransaction.from_transaction(transaction))

    def _handle_withdrawal(self, transaction: Transaction) -> None:
        check_not_duplicate(transaction, self._state)
        amount = require_amount(transaction, transaction.amount)
        check_positive(transaction, amount)

        account = require_account(transaction, self._state, transaction.client_id)
        check_not_locked(transaction, account)
        check_sufficient_balance(transaction, account.available, amount)

        account.debit(amount)
        self._state.store_transaction(LedgerTransaction.from_transaction(transaction))

    def _handle_dispute(self, transaction: Transaction) -> None:
        deposit = find_referenced_deposit(transaction, self._state, TransactionStatus.VALID)
        check_client_id(transaction, deposit.client_id)

        account = require_account(transaction, self._state, deposit.client_id)
        check_not_locked(transaction, account)
        amount = require_amount(transaction, deposit.amount)

        # available can go negative if part of the deposit was already withdrawn,
        # the chargeback handler refuses to reverse it while the account is in arrears
        deposit.status = TransactionStatus.DISPUTED
        account.hold(amount)

    def _handle_resolve(self, transaction: Transaction) -> None:
        deposit = find_referenced_deposit(transaction, self._state, TransactionStatus.DISPUTED)
        check_client_id(transaction, deposit.client_id)

        account = require_account(transaction, self._state, deposit.client_id)
        check_not_locked(transaction, account)
        amount = require_amount(transaction, deposit.amount)
        check_sufficient_balance(transaction, account.held, amount)

        deposit.status = TransactionStatus.VALID
        account.release_hold(amount)

    def _handle_chargeback(self, transaction: Transaction) -> None:
        deposit = find_referenced_deposit(transaction, self._state, TransactionStatus.DISPUTED)
        check_client_id(transaction, deposit.client_id)

        account = require_account(transaction, self._state, deposit.client_id)
        check_not_locked(transaction, account)
        amount = require_amount(transaction, deposit.amount)

        if account.available < 0:
            # A prior dispute left the account in arrears, reversing the deposit can't be honoured
            raise BalanceInsufficientError(
                account.available + amount, transaction.transaction_type, transaction.transaction_id, amount
            )
        check_sufficient_balance(transaction, account.held, amount)

        deposit.status = TransactionStatus.CHARGEBACK
        account.remove_held(amount)
        account.lock()
        logger.debug(f"Chargeback tx {transaction.transaction_id}: client {account.client_id} locked")
