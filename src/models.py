from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from amount import Amount


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"

    @property
    def carries_amount(self) -> bool:
        return self in (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL)


class ProcessingResult(Enum):
    SUCCESS = "success"
    ACCOUNT_LOCKED = "account_locked"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    DUPLICATE_TRANSACTION = "duplicate_transaction"
    TRANSACTION_NOT_FOUND = "transaction_not_found"
    CLIENT_MISMATCH = "client_mismatch"
    INVALID_DISPUTE_STATE = "invalid_dispute_state"

    @property
    def is_success(self) -> bool:
        return self is ProcessingResult.SUCCESS

    @property
    def description(self) -> str:
        return _RESULT_DESCRIPTIONS[self]


_RESULT_DESCRIPTIONS = {
    ProcessingResult.SUCCESS: "processed",
    ProcessingResult.ACCOUNT_LOCKED: "the account is locked",
    ProcessingResult.INSUFFICIENT_FUNDS: "the account does not hold enough funds",
    ProcessingResult.DUPLICATE_TRANSACTION: "a transaction with the same id was already processed",
    ProcessingResult.TRANSACTION_NOT_FOUND: "the referenced transaction was not found",
    ProcessingResult.CLIENT_MISMATCH: "the referenced transaction belongs to another client",
    ProcessingResult.INVALID_DISPUTE_STATE: "the referenced transaction is not in a state that allows this operation",
}


@dataclass(frozen=True)
class TransactionRecord:
    """
    One requested operation. Deposits and withdrawals carry a positive amount;
    disputes, resolves and chargebacks reference an earlier transaction_id and
    carry none.
    """

    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Optional[Amount] = None

    def __post_init__(self):
        if not isinstance(self.transaction_type, TransactionType):
            raise ValueError(f"Unknown transaction type: {self.transaction_type!r}")
        if self.client_id < 0 or self.transaction_id < 0:
            raise ValueError(f"Ids must be unsigned (client={self.client_id}, tx={self.transaction_id})")

        if self.transaction_type.carries_amount:
            if self.amount is None:
                raise ValueError(f"{self.transaction_type.value} tx {self.transaction_id} requires an amount")
            if self.amount.is_zero():
                raise ValueError(f"{self.transaction_type.value} tx {self.transaction_id} amount must be positive")
        elif self.amount is not None:
            raise ValueError(f"{self.transaction_type.value} tx {self.transaction_id} must not carry an amount")

    def __repr__(self) -> str:
        return f"TransactionRecord({self.transaction_type.value}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass(frozen=True)
class AccountView:
    client_id: int
    available: Amount
    held: Amount
    total: Amount
    locked: bool


@dataclass
class ClientAccount:
    """
    Balance state for one client.

    Mutators return a ProcessingResult and leave the account untouched on
    failure. Once locked (by a chargeback) every mutator is rejected.
    """

    client_id: int
    available: Amount = Amount.ZERO
    held: Amount = Amount.ZERO
    locked: bool = False

    @property
    def total(self) -> Amount:
        return self.available.checked_add(self.held)

    def deposit(self, amount: Amount) -> ProcessingResult:
        if self.locked:
            return ProcessingResult.ACCOUNT_LOCKED
        # Total must stay representable; hold/release only move funds within it.
        self.total.checked_add(amount)
        self.available = self.available.checked_add(amount)
        return ProcessingResult.SUCCESS

    def withdraw(self, amount: Amount) -> ProcessingResult:
        if self.locked:
            return ProcessingResult.ACCOUNT_LOCKED
        if amount > self.available:
            return ProcessingResult.INSUFFICIENT_FUNDS
        self.available = self.available.checked_sub(amount)
        return ProcessingResult.SUCCESS

    def hold(self, amount: Amount) -> ProcessingResult:
        """Move funds from available to held when a dispute opens."""
        if self.locked:
            return ProcessingResult.ACCOUNT_LOCKED
        if amount > self.available:
            return ProcessingResult.INSUFFICIENT_FUNDS
        held = self.held.checked_add(amount)
        self.available = self.available.checked_sub(amount)
        self.held = held
        return ProcessingResult.SUCCESS

    def release(self, amount: Amount) -> ProcessingResult:
        """Move held funds back to available when a dispute is resolved."""
        if self.locked:
            return ProcessingResult.ACCOUNT_LOCKED
        if amount > self.held:
            return ProcessingResult.INSUFFICIENT_FUNDS
        available = self.available.checked_add(amount)
        self.held = self.held.checked_sub(amount)
        self.available = available
        return ProcessingResult.SUCCESS

    def chargeback(self, amount: Amount) -> ProcessingResult:
        """Remove held funds from the account and lock it."""
        if self.locked:
            return ProcessingResult.ACCOUNT_LOCKED
        if amount > self.held:
            return ProcessingResult.INSUFFICIENT_FUNDS
        self.held = self.held.checked_sub(amount)
        self.locked = True
        return ProcessingResult.SUCCESS

    def view(self) -> AccountView:
        return AccountView(
            client_id=self.client_id,
            available=self.available,
            held=self.held,
            total=self.total,
            locked=self.locked,
        )


@dataclass
class ProcessingStats:
    """Counters for the processing report."""

    processed: int = 0
    failed: int = 0
    skipped_rows: int = 0
    failures: Counter = field(default_factory=Counter)

    def record(self, result: ProcessingResult) -> None:
        if result.is_success:
            self.processed += 1
        else:
            self.failed += 1
            self.failures[result] += 1

    def record_skipped_row(self) -> None:
        self.skipped_rows += 1

    def report(self) -> str:
        line = f"Processed: {self.processed}, Failed: {self.failed}, Skipped rows: {self.skipped_rows}"
        if self.failures:
            breakdown = ", ".join(f"{result.value}={count}" for result, count in sorted(
                self.failures.items(), key=lambda item: item[0].value))
            line += f" ({breakdown})"
        return line
