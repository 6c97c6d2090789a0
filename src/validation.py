"""
Checks shared by the transaction handlers.
Each one either returns quietly (or returns the value it looked up) or raises a TransactionError.
None of them mutate state, so handlers run all of them before touching any balance.
"""

from decimal import Decimal
from typing import Optional

from errors import (
    AccountLockedError,
    AccountNotFoundError,
    BalanceInsufficientError,
    ClientIdMismatchError,
    DuplicateTransactionError,
    IncorrectStateError,
    MissingAmountError,
    MustBePositiveError,
    NotFoundError,
)
from models import ClientAccount, LedgerTransaction, Transaction, TransactionStatus, TransactionType
from state_manager import StateManager


def check_positive(transaction: Transaction, amount: Decimal) -> None:
    # Zero is accepted, only strictly negative amounts are rejected
    if amount < 0:
        raise MustBePositiveError(transaction.transaction_type, transaction.transaction_id, amount)


def check_sufficient_balance(transaction: Transaction, balance: Decimal, amount: Decimal) -> None:
    """Used against `available` for withdrawals and against `held` for resolves and chargebacks."""
    if balance < amount:
        raise BalanceInsufficientError(balance, transaction.transaction_type, transaction.transaction_id, amount)


def check_client_id(transaction: Transaction, expected_client_id: int) -> None:
    if transaction.client_id != expected_client_id:
        raise ClientIdMismatchError(expected=expected_client_id, actual=transaction.client_id)


def check_not_duplicate(transaction: Transaction, state: StateManager) -> None:
    # Transaction ids are unique across all clients
    if state.has_transaction(transaction.transaction_id):
        raise DuplicateTransactionError(transaction.transaction_id)


def check_not_locked(transaction: Transaction, account: ClientAccount) -> None:
    if account.locked:
        raise AccountLockedError(transaction.client_id)


def require_amount(transaction: Transaction, amount: Optional[Decimal]) -> Decimal:
    if amount is None:
        raise MissingAmountError(transaction.transaction_type, transaction.transaction_id)
    return amount


def require_account(transaction: Transaction, state: StateManager, client_id: int) -> ClientAccount:
    account = state.get_account(client_id)
    if account is None:
        raise AccountNotFoundError(client_id)
    return account


def find_referenced_deposit(
    transaction: Transaction, state: StateManager, expected_status: TransactionStatus
) -> LedgerTransaction:
    """
    Look up the deposit a dispute, resolve or chargeback refers to.

    Raises:
        NotFoundError: no stored transaction with that id, or it is a withdrawal
        IncorrectStateError: the deposit is not in expected_status
    """
    referenced = state.get_transaction(transaction.transaction_id)

    if referenced is None or referenced.transaction_type != TransactionType.DEPOSIT:
        raise NotFoundError(transaction.transaction_type, transaction.transaction_id)

    if referenced.status != expected_status:
        raise IncorrectStateError(transaction.transaction_type, referenced.status, referenced.transaction_id)

    return referenced
