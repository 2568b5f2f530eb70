import csv
import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterable, Mapping, Optional

from models import Transaction, TransactionType, ClientAccount, ProcessingStats
from rejections import TransactionRejected
from state import Ledger, TransactionHistory
from transaction_processor import TransactionProcessor

logger = logging.getLogger(__name__)

MAX_CLIENT_ID = 2**16 - 1
MAX_TRANSACTION_ID = 2**32 - 1


class TransactionParseError(ValueError):
    """Raised when a CSV row cannot be turned into a Transaction."""


class PaymentsEngine:
    """
    Reads transactions from CSV and applies them in input order.
    Rows that cannot be parsed are skipped; rejected transactions are logged
    and do not stop the run.
    """

    def __init__(self):
        self._ledger = Ledger()
        self._history = TransactionHistory()
        self._processor = TransactionProcessor(self._ledger, self._history)
        self._stats = ProcessingStats()

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def process_file(self, filepath: str) -> Dict[int, ClientAccount]:
        """Process CSV file and return final account states."""
        logger.info(f"Processing transactions from {filepath}")

        # Undecodable bytes are read as U+FFFD; such rows then fail to parse.
        with open(filepath, "r", newline="", encoding="utf-8", errors="replace") as f:
            self.process_rows(csv.DictReader(f))

        logger.info(
            f"Processed: {self._stats.processed}, "
            f"Failed: {self._stats.failed}, "
            f"Skipped: {self._stats.skipped}"
        )
        return self.snapshot()

    def process_rows(self, rows: Iterable[Mapping[str, Optional[str]]]) -> None:
        """Parse and apply each row in order."""
        iterator = iter(rows)
        row_number = 0
        while True:
            row_number += 1
            try:
                row = next(iterator)
            except StopIteration:
                break
            except csv.Error as e:
                logger.warning(f"Failed to read row {row_number}: {e}")
                self._stats.record_skipped()
                continue

            transaction = self.parse_csv_row(row)
            if transaction is None:
                self._stats.record_skipped()
                continue
            self.process(transaction)

    def process(self, transaction: Transaction) -> bool:
        """Apply one transaction. Returns False if it was rejected."""
        try:
            self._processor.process_transaction(transaction)
        except TransactionRejected as e:
            logger.warning(f"Rejected {transaction}: {e.reason}: {e}")
            self._stats.record_failure(e.reason)
            return False

        self._stats.record_success()
        return True

    def snapshot(self) -> Dict[int, ClientAccount]:
        """Independent copy of current account states."""
        return self._ledger.snapshot()

    def parse_csv_row(self, row: Mapping[str, Optional[str]]) -> Optional[Transaction]:
        """Parse CSV row into Transaction, or None if the row is malformed."""
        try:
            return parse_transaction(row)
        except TransactionParseError as e:
            logger.warning(f"Failed to parse row {dict(row)}: {e}")
            return None


def parse_transaction(row: Mapping[str, Optional[str]]) -> Transaction:
    """
    Build a Transaction from a CSV row with type, client, tx and amount columns.
    Header names and values may carry surrounding whitespace.
    """
    # DictReader puts surplus values under a None key and fills missing ones with None.
    normalized = {k.strip(): (v or "").strip() for k, v in row.items() if isinstance(k, str)}

    try:
        transaction_type = TransactionType(normalized["type"].lower())
    except KeyError:
        raise TransactionParseError("missing type column")
    except ValueError:
        raise TransactionParseError(f"unknown transaction type {normalized['type']!r}")

    client_id = _parse_id(normalized, "client", MAX_CLIENT_ID)
    transaction_id = _parse_id(normalized, "tx", MAX_TRANSACTION_ID)

    amount = None
    if transaction_type.has_amount:
        amount = _parse_amount(normalized.get("amount", ""), transaction_type)

    return Transaction(
        transaction_type=transaction_type,
        client_id=client_id,
        transaction_id=transaction_id,
        amount=amount,
    )


def _parse_id(normalized: Dict[str, str], column: str, maximum: int) -> int:
    try:
        raw = normalized[column]
    except KeyError:
        raise TransactionParseError(f"missing {column} column")

    # Plain ASCII digits only: no sign, underscores or other scripts.
    if not (raw.isascii() and raw.isdigit()):
        raise TransactionParseError(f"{column} is not an unsigned integer: {raw!r}")

    value = int(raw)

    if value > maximum:
        raise TransactionParseError(f"{column} {value} out of range 0..{maximum}")
    return value


def _parse_amount(amount_str: str, transaction_type: TransactionType) -> Decimal:
    if not amount_str:
        raise TransactionParseError(f"missing amount for {transaction_type.value}")

    if not amount_str.isascii() or "_" in amount_str:
        raise TransactionParseError(f"invalid amount {amount_str!r}")

    try:
        amount = Decimal(amount_str)
    except InvalidOperation:
        raise TransactionParseError(f"invalid amount {amount_str!r}")

    if not amount.is_finite():
        raise TransactionParseError(f"amount must be finite, got {amount_str!r}")
    return amount
