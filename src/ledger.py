import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from amount import Amount
from models import TransactionType, ProcessingResult

logger = logging.getLogger(__name__)


class DisputeState(Enum):
    NORMAL = "normal"
    DISPUTED = "disputed"
    CHARGED_BACK = "charged_back"


@dataclass
class LedgerEntry:
    transaction_id: int
    client_id: int
    amount: Amount
    transaction_type: TransactionType
    dispute_state: DisputeState = DisputeState.NORMAL


class TransactionLedger:
    """
    Processed deposits and withdrawals keyed by transaction id, kept so later
    disputes can find the amount and owner. Entries are never removed.

    Dispute lifecycle per entry:
        NORMAL --dispute--> DISPUTED --resolve--> NORMAL
        DISPUTED --chargeback--> CHARGED_BACK (terminal)
    """

    def __init__(self):
        self._entries: Dict[int, LedgerEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def contains(self, transaction_id: int) -> bool:
        return transaction_id in self._entries

    def record_processed(self, entry: LedgerEntry) -> ProcessingResult:
        """Store a processed deposit/withdrawal for future dispute lookups."""
        if entry.transaction_id in self._entries:
            return ProcessingResult.DUPLICATE_TRANSACTION
        self._entries[entry.transaction_id] = entry
        return ProcessingResult.SUCCESS

    def lookup(self, transaction_id: int) -> Optional[LedgerEntry]:
        return self._entries.get(transaction_id)

    def mark_disputed(self, transaction_id: int) -> ProcessingResult:
        return self._transition(transaction_id, DisputeState.DISPUTED)

    def mark_resolved(self, transaction_id: int) -> ProcessingResult:
        return self._transition(transaction_id, DisputeState.NORMAL)

    def mark_chargedback(self, transaction_id: int) -> ProcessingResult:
        return self._transition(transaction_id, DisputeState.CHARGED_BACK)

    def check_transition(self, transaction_id: int, target: DisputeState) -> ProcessingResult:
        """Whether the entry may move to target, without changing it."""
        entry = self._entries.get(transaction_id)
        if entry is None:
            return ProcessingResult.TRANSACTION_NOT_FOUND

        if entry.dispute_state is not _REQUIRED_STATE[target]:
            logger.debug(f"Tx {transaction_id}: cannot move from {entry.dispute_state.value} to {target.value}")
            return ProcessingResult.INVALID_DISPUTE_STATE

        return ProcessingResult.SUCCESS

    def _transition(self, transaction_id: int, target: DisputeState) -> ProcessingResult:
        result = self.check_transition(transaction_id, target)
        if result.is_success:
            self._entries[transaction_id].dispute_state = target
        return result


# State an entry must be in to move to the key state.
_REQUIRED_STATE = {
    DisputeState.DISPUTED: DisputeState.NORMAL,
    DisputeState.NORMAL: DisputeState.DISPUTED,
    DisputeState.CHARGED_BACK: DisputeState.DISPUTED,
}
