"""
Processor-level rejections.

Every rejection is a permanent verdict on a single transaction. The processor
raises one of these and leaves account state untouched; the caller logs it
and moves on to the next transaction.
"""
from decimal import Decimal


class TransactionRejected(Exception):
    """Base class for a transaction the processor refused to apply."""

    def __eq__(self, other) -> bool:
        return type(self) is type(other) and self.args == other.args

    def __hash__(self) -> int:
        return hash((type(self), self.args))

    @property
    def reason(self) -> str:
        return type(self).__name__


class DuplicateTransactionId(TransactionRejected):
    def __init__(self, transaction_id: int):
        super().__init__(transaction_id)
        self.transaction_id = transaction_id

    def __str__(self) -> str:
        return f"transaction id {self.transaction_id} has already been processed"


class NegativeAmountNotAllowed(TransactionRejected):
    def __init__(self, transaction_id: int, amount: Decimal):
        super().__init__(transaction_id, amount)
        self.transaction_id = transaction_id
        self.amount = amount

    def __str__(self) -> str:
        return f"transaction {self.transaction_id} has negative amount {self.amount}"


class AccountLocked(TransactionRejected):
    def __init__(self, client_id: int):
        super().__init__(client_id)
        self.client_id = client_id

    def __str__(self) -> str:
        return f"account {self.client_id} is locked"


class InsufficientFunds(TransactionRejected):
    def __init__(self, shortfall: Decimal):
        super().__init__(shortfall)
        self.shortfall = shortfall

    def __str__(self) -> str:
        return f"insufficient available funds, short by {self.shortfall}"


class DisputedTransactionDoesNotExist(TransactionRejected):
    """The referenced transaction is unknown, is not a deposit, or belongs to another client."""

    def __init__(self, transaction_id: int):
        super().__init__(transaction_id)
        self.transaction_id = transaction_id

    def __str__(self) -> str:
        return f"no disputable deposit with transaction id {self.transaction_id}"


class TransactionAlreadyDisputed(TransactionRejected):
    def __init__(self, transaction_id: int):
        super().__init__(transaction_id)
        self.transaction_id = transaction_id

    def __str__(self) -> str:
        return f"transaction {self.transaction_id} is already under dispute"


class TransactionNotDisputed(TransactionRejected):
    def __init__(self, transaction_id: int):
        super().__init__(transaction_id)
        self.transaction_id = transaction_id

    def __str__(self) -> str:
        return f"transaction {self.transaction_id} is not under dispute"
