from decimal import Decimal
from typing import List, Optional

from models import TransactionStatus, TransactionType


class PaymentsError(Exception):
    """Base class for everything the payments engine raises."""


class StreamError(PaymentsError):
    """
    The transaction stream itself failed.
    Fatal: the run stops at the failing record.
    """


class FileOpenError(StreamError):
    def __init__(self, filename: str, reason: Optional[Exception] = None):
        self.filename = filename
        message = f"Couldn't open file for reading: {filename!r}"
        if reason is not None:
            message = f"{message} ({reason})"
        super().__init__(message)


class ReadRecordError(StreamError):
    def __init__(self, line_number: int, reason: Optional[Exception] = None):
        self.line_number = line_number
        super().__init__(f"Couldn't read record from CSV at line {line_number}: {reason}")


class NoRecordsError(StreamError):
    def __init__(self):
        super().__init__("Couldn't find data in the CSV: input is empty")


class DeserializeError(StreamError):
    def __init__(self, record: List[str], line_number: int, reason: str):
        self.record = record
        self.line_number = line_number
        self.reason = reason
        super().__init__(f"Couldn't deserialize row in CSV at line {line_number}: {record!r} ({reason})")


class TransactionError(PaymentsError):
    """
    A single transaction was rejected.
    Recoverable: ledger state is untouched and processing moves on to the next record.
    """


class MustBePositiveError(TransactionError):
    def __init__(self, transaction_type: TransactionType, transaction_id: int, amount: Decimal):
        self.transaction_type = transaction_type
        self.transaction_id = transaction_id
        self.amount = amount
        super().__init__(
            f"Transaction must be positive: tx {transaction_id}, {transaction_type.value} amount {amount}"
        )


class BalanceInsufficientError(TransactionError):
    def __init__(self, available: Decimal, transaction_type: TransactionType, transaction_id: int, amount: Decimal):
        self.available = available
        self.transaction_type = transaction_type
        self.transaction_id = transaction_id
        self.amount = amount
        super().__init__(
            f"Balance insufficient: available {available}, {transaction_type.value} amount {amount}, tx {transaction_id}"
        )


class AccountLockedError(TransactionError):
    def __init__(self, client_id: int):
        self.client_id = client_id
        super().__init__(f"Account locked: client {client_id}")


class NotFoundError(TransactionError):
    def __init__(self, transaction_type: TransactionType, transaction_id: int):
        self.transaction_type = transaction_type
        self.transaction_id = transaction_id
        super().__init__(
            f"Transaction not found or not a deposit for {transaction_type.value}: tx {transaction_id}"
        )


class AccountNotFoundError(TransactionError):
    def __init__(self, client_id: int):
        self.client_id = client_id
        super().__init__(f"Account not found: client {client_id}")


class ClientIdMismatchError(TransactionError):
    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Client id mismatch: expected {expected}, got {actual}")


class DuplicateTransactionError(TransactionError):
    def __init__(self, transaction_id: int):
        self.transaction_id = transaction_id
        super().__init__(f"Duplicate transaction: tx {transaction_id}")


class MissingAmountError(TransactionError):
    def __init__(self, transaction_type: TransactionType, transaction_id: int):
        self.transaction_type = transaction_type
        self.transaction_id = transaction_id
        super().__init__(f"Missing amount for {transaction_type.value}: tx {transaction_id}")


class IncorrectStateError(TransactionError):
    def __init__(self, transaction_type: TransactionType, status: TransactionStatus, transaction_id: int):
        self.transaction_type = transaction_type
        self.status = status
        self.transaction_id = transaction_id
        super().__init__(
            f"Transaction in incorrect state {status.value} for {transaction_type.value}: tx {transaction_id}"
        )
