from collections import Counter
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"


class TransactionStatus(Enum):
    """
    Dispute lifecycle of a stored deposit or withdrawal.

    VALID -> DISPUTED (dispute), DISPUTED -> VALID (resolve),
    DISPUTED -> CHARGEBACK (chargeback, terminal).
    """

    VALID = "valid"
    DISPUTED = "disputed"
    CHARGEBACK = "chargeback"


@dataclass
class Transaction:
    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Optional[Decimal] = None

    def __repr__(self) -> str:
        return f"Transaction({self.transaction_type.value}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass
class LedgerTransaction:
    """A deposit or withdrawal kept for later dispute lookups. Only status changes once stored."""

    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Optional[Decimal] = None
    status: TransactionStatus = TransactionStatus.VALID

    @classmethod
    def from_transaction(cls, transaction: Transaction) -> "LedgerTransaction":
        return cls(
            transaction_type=transaction.transaction_type,
            client_id=transaction.client_id,
            transaction_id=transaction.transaction_id,
            amount=transaction.amount,
        )


@dataclass
class ClientAccount:
    client_id: int
    available: Decimal = Decimal("0")
    held: Decimal = Decimal("0")
    locked: bool = False

    @property
    def total(self) -> Decimal:
        return self.available + self.held

    def credit(self, amount: Decimal) -> None:
        self.available += amount

    def debit(self, amount: Decimal) -> None:
        self.available -= amount

    def hold(self, amount: Decimal) -> None:
        self.available -= amount
        self.held += amount

    def release_hold(self, amount: Decimal) -> None:
        self.held -= amount
        self.available += amount

    def remove_held(self, amount: Decimal) -> None:
        self.held -= amount

    def lock(self) -> None:
        self.locked = True


class ProcessingStats:
    """Counters for applied and rejected transactions over a single run."""

    def __init__(self):
        self.processed = 0
        self.failed = 0
        self.failures_by_reason: Counter = Counter()

    def record_success(self):
        self.processed += 1

    def record_failure(self, error: Exception):
        self.failed += 1
        self.failures_by_reason[type(error).__name__] += 1

    def summary(self) -> str:
        reasons = ", ".join(f"{name}={count}" for name, count in sorted(self.failures_by_reason.items()))
        if reasons:
            return f"Processed: {self.processed}, Failed: {self.failed} ({reasons})"
        return f"Processed: {self.processed}, Failed: {self.failed}"
