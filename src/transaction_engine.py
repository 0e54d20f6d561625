import logging
from typing import Dict, List, Optional, Tuple

from ledger import DisputeState, LedgerEntry, TransactionLedger
from models import AccountView, ClientAccount, ProcessingResult, TransactionRecord, TransactionType

logger = logging.getLogger(__name__)


class TransactionEngine:
    """
    Applies transaction records to client accounts, one at a time.

    Every failure is returned as a ProcessingResult and leaves accounts and
    ledger unchanged. Only AmountOverflowError is raised.

    Disputes may reference withdrawals as well as deposits. A disputed
    withdrawal is handled exactly like a disputed deposit: its amount is held
    from available funds, and a chargeback removes it from held funds.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}
        self._ledger = TransactionLedger()

    def get_or_create_account(self, client_id: int) -> ClientAccount:
        if client_id not in self._accounts:
            self._accounts[client_id] = ClientAccount(client_id=client_id)
        return self._accounts[client_id]

    def get_account(self, client_id: int) -> Optional[ClientAccount]:
        return self._accounts.get(client_id)

    def apply(self, record: TransactionRecord) -> ProcessingResult:
        account = self.get_or_create_account(record.client_id)

        match record.transaction_type:
            case TransactionType.DEPOSIT:
                result = self._handle_deposit(account, record)
            case TransactionType.WITHDRAWAL:
                result = self._handle_withdrawal(account, record)
            case TransactionType.DISPUTE:
                result = self._handle_dispute(account, record)
            case TransactionType.RESOLVE:
                result = self._handle_resolve(account, record)
            case TransactionType.CHARGEBACK:
                result = self._handle_chargeback(account, record)

        if not result.is_success:
            logger.debug(f"Rejected {record}: {result.description}")
        return result

    def snapshot(self) -> List[AccountView]:
        """Current balances of every known account, ordered by client id."""
        return [self._accounts[client_id].view() for client_id in sorted(self._accounts)]

    def _handle_deposit(self, account: ClientAccount, record: TransactionRecord) -> ProcessingResult:
        if self._ledger.contains(record.transaction_id):
            return ProcessingResult.DUPLICATE_TRANSACTION

        result = account.deposit(record.amount)
        if not result.is_success:
            return result
        return self._record(record)

    def _handle_withdrawal(self, account: ClientAccount, record: TransactionRecord) -> ProcessingResult:
        if self._ledger.contains(record.transaction_id):
            return ProcessingResult.DUPLICATE_TRANSACTION

        result = account.withdraw(record.amount)
        if not result.is_success:
            return result
        return self._record(record)

    def _handle_dispute(self, account: ClientAccount, record: TransactionRecord) -> ProcessingResult:
        entry, result = self._find_entry(record, DisputeState.DISPUTED)
        if entry is None:
            return result

        result = account.hold(entry.amount)
        if not result.is_success:
            return result
        return self._ledger.mark_disputed(entry.transaction_id)

    def _handle_resolve(self, account: ClientAccount, record: TransactionRecord) -> ProcessingResult:
        entry, result = self._find_entry(record, DisputeState.NORMAL)
        if entry is None:
            return result

        result = account.release(entry.amount)
        if not result.is_success:
            return result
        return self._ledger.mark_resolved(entry.transaction_id)

    def _handle_chargeback(self, account: ClientAccount, record: TransactionRecord) -> ProcessingResult:
        entry, result = self._find_entry(record, DisputeState.CHARGED_BACK)
        if entry is None:
            return result

        result = account.chargeback(entry.amount)
        if not result.is_success:
            return result
        logger.info(f"Client {account.client_id} locked after chargeback of tx {entry.transaction_id}")
        return self._ledger.mark_chargedback(entry.transaction_id)

    def _find_entry(self, record: TransactionRecord,
                    target_state: DisputeState) -> Tuple[Optional[LedgerEntry], ProcessingResult]:
        """
        Look up the entry a dispute-class record refers to and ask the ledger
        whether it may move to target_state.

        Returns (entry, SUCCESS) or (None, failure).
        """
        entry = self._ledger.lookup(record.transaction_id)
        if entry is None:
            return None, ProcessingResult.TRANSACTION_NOT_FOUND

        if entry.client_id != record.client_id:
            logger.info(f"{record.transaction_type.value.capitalize()} for tx {record.transaction_id}: "
                        f"client mismatch (expected {entry.client_id}, got {record.client_id})")
            return None, ProcessingResult.CLIENT_MISMATCH

        result = self._ledger.check_transition(entry.transaction_id, target_state)
        if not result.is_success:
            return None, result

        return entry, ProcessingResult.SUCCESS

    def _record(self, record: TransactionRecord) -> ProcessingResult:
        return self._ledger.record_processed(LedgerEntry(
            transaction_id=record.transaction_id,
            client_id=record.client_id,
            amount=record.amount,
            transaction_type=record.transaction_type,
        ))
