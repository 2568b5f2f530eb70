import copy
from typing import Dict, Iterator, Optional

from models import Transaction, ClientAccount


class Ledger:
    """
    Client accounts keyed by client id.
    Accounts are created on first use and never removed.
    Owned by a single processor; no locking is done here.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}

    def get_account(self, client_id: int) -> Optional[ClientAccount]:
        """Return the account for a client, or None if it was never created."""
        return self._accounts.get(client_id)

    def get_or_create_account(self, client_id: int) -> ClientAccount:
        """Get existing account or create new one."""
        if client_id not in self._accounts:
            self._accounts[client_id] = ClientAccount(client_id=client_id)
        return self._accounts[client_id]

    def snapshot(self) -> Dict[int, ClientAccount]:
        """Return an independent copy of every account (for final output)."""
        return copy.deepcopy(self._accounts)

    def __contains__(self, client_id: int) -> bool:
        return client_id in self._accounts

    def __len__(self) -> int:
        return len(self._accounts)

    def __iter__(self) -> Iterator[int]:
        return iter(self._accounts)


class TransactionHistory:
    """
    Applied deposits and withdrawals keyed by transaction id.
    Used to reject duplicate ids and to look up the amount a dispute refers to.
    """

    def __init__(self):
        self._transactions: Dict[int, Transaction] = {}

    def store_transaction(self, transaction: Transaction) -> None:
        """Store transaction for future dispute lookups."""
        self._transactions[transaction.transaction_id] = transaction

    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Retrieve stored transaction by ID."""
        return self._transactions.get(transaction_id)

    def __contains__(self, transaction_id: int) -> bool:
        return transaction_id in self._transactions

    def __len__(self) -> int:
        return len(self._transactions)
