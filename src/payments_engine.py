import csv
import logging
import sys
from typing import Dict, Iterable, List, Optional

from amount import Amount
from models import AccountView, ProcessingStats, TransactionRecord, TransactionType
from transaction_engine import TransactionEngine

logger = logging.getLogger(__name__)


class PaymentsEngine:
    """
    Feeds CSV transaction records into a TransactionEngine.
    Rejected rows and records are logged and skipped; processing always continues.
    """

    def __init__(self, engine: Optional[TransactionEngine] = None):
        self._engine = engine if engine is not None else TransactionEngine()
        self._stats = ProcessingStats()

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def process_file(self, filepath: str) -> List[AccountView]:
        """Process CSV file and return final account states."""
        logger.info(f"Processing {filepath}")

        with open(filepath, "r", newline="") as f:
            self.process_records(self._read_records(f))

        print(self._stats.report(), file=sys.stderr)

        return self._engine.snapshot()

    def process_records(self, records: Iterable[TransactionRecord]) -> List[AccountView]:
        for record in records:
            result = self._engine.apply(record)
            self._stats.record(result)
            if not result.is_success:
                logger.warning(f"Rejected {record}: {result.description}")

        return self._engine.snapshot()

    def _read_records(self, f) -> Iterable[TransactionRecord]:
        reader = csv.DictReader(f)
        for row in reader:
            record = self._parse_csv_row(row)
            if record is None:
                self._stats.record_skipped_row()
            else:
                yield record

    def _parse_csv_row(self, row: Dict[str, str]) -> Optional[TransactionRecord]:
        """Parse CSV row into TransactionRecord."""
        try:
            normalized = {
                k.strip(): (v or "").strip()
                for k, v in row.items()
                if k is not None
            }

            transaction_type = TransactionType(normalized["type"].lower())
            client_id = int(normalized["client"])
            transaction_id = int(normalized["tx"])

            amount = None
            amount_str = normalized.get("amount", "")
            if amount_str:
                amount = Amount.parse(amount_str)

            return TransactionRecord(
                transaction_type=transaction_type,
                client_id=client_id,
                transaction_id=transaction_id,
                amount=amount,
            )
        except (KeyError, ValueError) as e:
            logger.warning(f"Failed to parse row {row}: {e}")
            return None
