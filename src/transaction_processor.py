import logging
from typing import Optional, Tuple

from models import Transaction, TransactionType, ClientAccount
from rejections import (
    AccountLocked,
    DisputedTransactionDoesNotExist,
    DuplicateTransactionId,
    InsufficientFunds,
    NegativeAmountNotAllowed,
    TransactionAlreadyDisputed,
    TransactionNotDisputed,
)
from state import Ledger, TransactionHistory

logger = logging.getLogger(__name__)

# Only deposits can be disputed: a withdrawal's funds have already left the account.
DISPUTABLE_TYPES = frozenset({TransactionType.DEPOSIT})


class TransactionProcessor:
    """
    Applies transactions to a ledger, one at a time, in input order.

    A successful call returns None. A rejected call raises a
    TransactionRejected subclass and leaves the ledger and history as they were.
    The processor is the only writer of both structures.
    """

    def __init__(self, ledger: Ledger, history: TransactionHistory):
        self._ledger = ledger
        self._history = history

    def process_transaction(self, transaction: Transaction) -> None:
        """
        Process a single transaction.

        Checks run in this order and stop at the first failure:
        duplicate id, negative amount, locked account, then the
        type-specific rules.

        Raises:
            DuplicateTransactionId: deposit/withdrawal id already applied
            NegativeAmountNotAllowed: deposit/withdrawal amount below zero
            AccountLocked: the client's account has been charged back
            InsufficientFunds: withdrawal larger than available funds
            DisputedTransactionDoesNotExist: no disputable deposit for this client
            TransactionAlreadyDisputed: dispute on a transaction already held
            TransactionNotDisputed: resolve/chargeback without an open dispute
        """
        logger.debug(f"Processing {transaction}")

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
            case _:
                raise ValueError(f"Unknown transaction type: {transaction.transaction_type!r}")

    def _open_account(self, transaction: Transaction) -> ClientAccount:
        """Validate a deposit/withdrawal and return its (possibly new) account."""
        if transaction.transaction_id in self._history:
            raise DuplicateTransactionId(transaction.transaction_id)

        if transaction.amount < 0:
            raise NegativeAmountNotAllowed(transaction.transaction_id, transaction.amount)

        account = self._ledger.get_or_create_account(transaction.client_id)
        self._check_unlocked(account)
        return account

    def _check_unlocked(self, account: Optional[ClientAccount]) -> None:
        if account is not None and account.locked:
            raise AccountLocked(account.client_id)

    def _handle_deposit(self, transaction: Transaction) -> None:
        account = self._open_account(transaction)

        account.credit(transaction.amount)
        self._history.store_transaction(transaction)

    def _handle_withdrawal(self, transaction: Transaction) -> None:
        account = self._open_account(transaction)

        shortfall = transaction.amount - account.available
        if shortfall > 0:
            logger.info(f"Withdrawal tx {transaction.transaction_id}: available {account.available}, requested {transaction.amount}")
            raise InsufficientFunds(shortfall)

        account.debit(transaction.amount)
        self._history.store_transaction(transaction)

    def _find_disputed_deposit(self, transaction: Transaction) -> Transaction:
        """Look up the deposit a dispute, resolve or chargeback refers to."""
        original = self._history.get_transaction(transaction.transaction_id)

        if original is None:
            logger.info(f"{transaction.transaction_type.value} for tx {transaction.transaction_id}: transaction not found")
            raise DisputedTransactionDoesNotExist(transaction.transaction_id)

        if original.transaction_type not in DISPUTABLE_TYPES:
            logger.info(f"{transaction.transaction_type.value} for tx {transaction.transaction_id}: only deposits can be disputed (got {original.transaction_type.value})")
            raise DisputedTransactionDoesNotExist(transaction.transaction_id)

        if original.client_id != transaction.client_id:
            logger.info(f"{transaction.transaction_type.value} for tx {transaction.transaction_id}: client mismatch (expected {original.client_id}, got {transaction.client_id})")
            raise DisputedTransactionDoesNotExist(transaction.transaction_id)

        return original

    def _open_dispute_account(self, transaction: Transaction) -> Tuple[ClientAccount, Transaction]:
        account = self._ledger.get_account(transaction.client_id)
        self._check_unlocked(account)

        original = self._find_disputed_deposit(transaction)
        # A deposit for this client exists, so its account does too.
        return self._ledger.get_or_create_account(original.client_id), original

    def _handle_dispute(self, transaction: Transaction) -> None:
        account, original = self._open_dispute_account(transaction)

        if transaction.transaction_id in account.disputed:
            raise TransactionAlreadyDisputed(transaction.transaction_id)

        account.hold(original.amount)
        account.disputed.add(transaction.transaction_id)

    def _handle_resolve(self, transaction: Transaction) -> None:
        account, original = self._open_dispute_account(transaction)

        if transaction.transaction_id not in account.disputed:
            raise TransactionNotDisputed(transaction.transaction_id)

        account.release_hold(original.amount)
        account.disputed.discard(transaction.transaction_id)

    def _handle_chargeback(self, transaction: Transaction) -> None:
        account, original = self._open_dispute_account(transaction)

        if transaction.transaction_id not in account.disputed:
            raise TransactionNotDisputed(transaction.transaction_id)

        account.remove_held(original.amount)
        account.disputed.discard(transaction.transaction_id)
        account.locked = True
