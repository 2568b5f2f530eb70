import sys
import os
from dataclasses import FrozenInstanceError
from decimal import Decimal

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from models import Transaction, TransactionType, ClientAccount, ProcessingStats


class TestTransaction:
    def test_create_deposit(self):
        transaction = Transaction(
            transaction_type=TransactionType.DEPOSIT,
            client_id=1,
            transaction_id=1,
            amount=Decimal("100.0"),
        )
        assert transaction.transaction_type == TransactionType.DEPOSIT
        assert transaction.client_id == 1
        assert transaction.transaction_id == 1
        assert transaction.amount == Decimal("100.0")

    def test_create_dispute_no_amount(self):
        transaction = Transaction(
            transaction_type=TransactionType.DISPUTE,
            client_id=1,
            transaction_id=1,
        )
        assert transaction.amount is None

    def test_is_immutable(self):
        transaction = Transaction(TransactionType.DEPOSIT, client_id=1, transaction_id=1, amount=Decimal("1"))
        with pytest.raises(FrozenInstanceError):
            transaction.amount = Decimal("2")

    @pytest.mark.parametrize("transaction_type", [TransactionType.DEPOSIT, TransactionType.WITHDRAWAL])
    def test_amount_required_for_deposit_and_withdrawal(self, transaction_type):
        with pytest.raises(ValueError):
            Transaction(transaction_type, client_id=1, transaction_id=1)

    def test_has_amount(self):
        assert TransactionType.DEPOSIT.has_amount
        assert TransactionType.WITHDRAWAL.has_amount
        assert not TransactionType.DISPUTE.has_amount
        assert not TransactionType.RESOLVE.has_amount
        assert not TransactionType.CHARGEBACK.has_amount


class TestClientAccount:
    def test_default_values(self):
        account = ClientAccount(client_id=1)
        assert account.available == Decimal("0")
        assert account.held == Decimal("0")
        assert account.total == Decimal("0")
        assert account.locked is False
        assert account.disputed == set()

    def test_total_property(self):
        account = ClientAccount(
            client_id=1,
            available=Decimal("100"),
            held=Decimal("50"),
        )
        assert account.total == Decimal("150")

    def test_hold_and_release_keep_total(self):
        account = ClientAccount(client_id=1, available=Decimal("10.5"))
        account.hold(Decimal("4.25"))
        assert account.available == Decimal("6.25")
        assert account.held == Decimal("4.25")
        assert account.total == Decimal("10.5")

        account.release_hold(Decimal("4.25"))
        assert account.available == Decimal("10.5")
        assert account.held == Decimal("0")

    def test_remove_held_reduces_total(self):
        account = ClientAccount(client_id=1, held=Decimal("3"))
        account.remove_held(Decimal("3"))
        assert account.total == Decimal("0")

    def test_equality_ignores_disputed_set(self):
        first = ClientAccount(client_id=1, available=Decimal("1"), disputed={7})
        second = ClientAccount(client_id=1, available=Decimal("1.0"))
        assert first == second


class TestProcessingStats:
    def test_counters(self):
        stats = ProcessingStats()
        stats.record_success()
        stats.record_failure("AccountLocked")
        stats.record_failure("AccountLocked")
        stats.record_skipped()

        assert stats.processed == 1
        assert stats.failed == 2
        assert stats.skipped == 1
        assert stats.rejections["AccountLocked"] == 2
