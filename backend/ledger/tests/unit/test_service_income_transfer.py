# ledger/tests/unit/test_service_income_transfer.py

from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError

from ledger.exceptions import UnauthorizedError
from ledger.models import Income, Transaction, Transfer
from ledger.services.balance_service import BalanceService
from ledger.services.ledger_service import LedgerService


@pytest.mark.django_db
class TestIncome:
    def test_create_credits_account(self, test_user, bank_account, now):
        income = LedgerService.create_income(
            test_user.id, bank_account.id, Decimal("250.00"), now, Income.SOURCE_SALARY
        )

        assert income.source == "Salary"
        assert BalanceService.current_balance(bank_account.id) == Decimal("1250.00")
        posting = Transaction.objects.filter(account=bank_account).last()
        assert posting.credit == Decimal("250.00")
        assert posting.description == f"New Income - Salary to account {bank_account.id}"

    def test_delete_restores_balance(self, test_user, bank_account, now):
        income = LedgerService.create_income(
            test_user.id, bank_account.id, Decimal("250.00"), now, Income.SOURCE_INTEREST
        )

        assert LedgerService.delete_income(test_user.id, income.id) is True

        assert BalanceService.current_balance(bank_account.id) == Decimal("1000.00")
        posting = Transaction.objects.filter(account=bank_account).last()
        assert posting.debit == Decimal("250.00")
        assert posting.description == f"Delete Income - Interest to account {bank_account.id}"
        assert not Income.objects.filter(pk=income.pk).exists()

    def test_delete_missing_returns_false(self, test_user):
        assert LedgerService.delete_income(test_user.id, 4040) is False

    def test_non_owner(self, test_user, test_user2, bank_account, now):
        before = Transaction.objects.count()
        with pytest.raises(UnauthorizedError):
            LedgerService.create_income(
                test_user2.id, bank_account.id, Decimal("1.00"), now, Income.SOURCE_OTHER
            )
        assert Transaction.objects.count() == before

        income = LedgerService.create_income(
            test_user.id, bank_account.id, Decimal("1.00"), now, Income.SOURCE_OTHER
        )
        before = Transaction.objects.count()
        with pytest.raises(UnauthorizedError):
            LedgerService.delete_income(test_user2.id, income.id)
        assert Transaction.objects.count() == before

    def test_invalid_source(self, test_user, bank_account, now):
        with pytest.raises(ValidationError):
            LedgerService.create_income(test_user.id, bank_account.id, Decimal("1.00"), now, "Lottery")

    def test_amount_must_be_positive(self, test_user, bank_account, now):
        with pytest.raises(ValidationError):
            LedgerService.create_income(
                test_user.id, bank_account.id, Decimal("0.00"), now, Income.SOURCE_OTHER
            )


@pytest.mark.django_db
class TestTransfer:
    def test_create_moves_money(self, test_user, bank_account, cash_account, now):
        transfer = LedgerService.create_transfer(
            test_user.id, bank_account.id, cash_account.id, Decimal("300.00"), now
        )

        assert Transfer.objects.filter(pk=transfer.pk).exists()
        assert BalanceService.current_balance(bank_account.id) == Decimal("700.00")
        assert BalanceService.current_balance(cash_account.id) == Decimal("500.00")

        out_posting = Transaction.objects.filter(account=bank_account).last()
        in_posting = Transaction.objects.filter(account=cash_account).last()
        assert out_posting.debit == Decimal("300.00")
        assert out_posting.description == f"New Transfer - Transaction from account {bank_account.id}"
        assert in_posting.credit == Decimal("300.00")
        assert in_posting.description == f"New Transfer - Transaction to account {cash_account.id}"
        assert out_posting.id < in_posting.id

    def test_delete_restores_both(self, test_user, bank_account, cash_account, now):
        transfer = LedgerService.create_transfer(
            test_user.id, bank_account.id, cash_account.id, Decimal("300.00"), now
        )

        assert LedgerService.delete_transfer(transfer.id, user_id=test_user.id) is True

        assert BalanceService.current_balance(bank_account.id) == Decimal("1000.00")
        assert BalanceService.current_balance(cash_account.id) == Decimal("200.00")
        assert (
            Transaction.objects.filter(account=bank_account).last().description
            == f"Delete Transfer - Transaction from account {bank_account.id}"
        )
        assert (
            Transaction.objects.filter(account=cash_account).last().description
            == f"Delete Transfer - Transaction to account {cash_account.id}"
        )

    def test_same_account_rejected(self, test_user, bank_account, now):
        with pytest.raises(ValidationError):
            LedgerService.create_transfer(
                test_user.id, bank_account.id, bank_account.id, Decimal("1.00"), now
            )
        assert Transfer.objects.count() == 0

    def test_foreign_target_rejected(self, test_user, bank_account, foreign_account, now):
        before = Transaction.objects.count()
        with pytest.raises(UnauthorizedError):
            LedgerService.create_transfer(
                test_user.id, bank_account.id, foreign_account.id, Decimal("1.00"), now
            )
        assert Transaction.objects.count() == before
        assert BalanceService.current_balance(foreign_account.id) == Decimal("500.00")

    def test_delete_missing_returns_false(self, test_user):
        assert LedgerService.delete_transfer(5150, user_id=test_user.id) is False

    def test_delete_requires_ownership_by_default(
        self, test_user, test_user2, bank_account, cash_account, now
    ):
        transfer = LedgerService.create_transfer(
            test_user.id, bank_account.id, cash_account.id, Decimal("10.00"), now
        )
        before = Transaction.objects.count()

        with pytest.raises(UnauthorizedError):
            LedgerService.delete_transfer(transfer.id, user_id=test_user2.id)
        with pytest.raises(UnauthorizedError):
            LedgerService.delete_transfer(transfer.id)

        assert Transaction.objects.count() == before
        assert Transfer.objects.filter(pk=transfer.pk).exists()

    def test_delete_without_ownership_check(
        self, settings, test_user, bank_account, cash_account, now
    ):
        settings.LEDGER = {"TRANSFER_DELETE_REQUIRES_OWNERSHIP": False}
        transfer = LedgerService.create_transfer(
            test_user.id, bank_account.id, cash_account.id, Decimal("10.00"), now
        )

        assert LedgerService.delete_transfer(transfer.id) is True
        assert BalanceService.current_balance(bank_account.id) == Decimal("1000.00")
        assert BalanceService.current_balance(cash_account.id) == Decimal("200.00")


@pytest.mark.django_db
def test_mixed_operations_keep_ledger_consistent(test_user, bank_account, cash_account, category_tree, now):
    expense = LedgerService.create_expense(
        test_user.id, bank_account.id, category_tree["leaf"].id, Decimal("12.34"), now
    )
    income = LedgerService.create_income(
        test_user.id, cash_account.id, Decimal("99.99"), now, Income.SOURCE_PROFIT
    )
    transfer = LedgerService.create_transfer(
        test_user.id, cash_account.id, bank_account.id, Decimal("50.00"), now
    )
    LedgerService.update_expense(
        test_user.id, expense.id, category_tree["other"].id, cash_account.id, Decimal("7.00"), now
    )
    LedgerService.delete_income(test_user.id, income.id)
    LedgerService.delete_transfer(transfer.id, user_id=test_user.id)

    assert BalanceService.verify_all() == {}
    assert BalanceService.current_balance(bank_account.id) == Decimal("1000.00")
    assert BalanceService.current_balance(cash_account.id) == Decimal("193.00")
