# ledger/tests/unit/test_service_account.py

from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError

from ledger.exceptions import EntityNotFoundError, UnauthorizedError
from ledger.models import Account, Transaction
from ledger.services.account_service import AccountService
from ledger.services.balance_service import BalanceService


@pytest.mark.django_db
class TestCreateAccount:
    def test_initial_amount_is_posted(self, test_user):
        account = AccountService.create_account(test_user.id, "Savings", "Bank", Decimal("1500.00"))

        assert account.state == Account.STATE_ACTIVE
        assert account.current_balance == Decimal("1500.00")
        posting = Transaction.objects.get(account=account)
        assert posting.credit == Decimal("1500.00")
        assert posting.debit == Decimal("0")
        assert posting.description == "Account Creation"

    def test_negative_initial_amount(self, test_user):
        account = AccountService.create_account(
            test_user.id, "Card", "CreditCard", Decimal("-250.00")
        )
        assert account.current_balance == Decimal("-250.00")

    def test_invalid_type(self, test_user):
        with pytest.raises(ValidationError):
            AccountService.create_account(test_user.id, "Odd", "Crypto", Decimal("1.00"))
        assert Account.objects.count() == 0
        assert Transaction.objects.count() == 0

    def test_blank_name(self, test_user):
        with pytest.raises(ValidationError):
            AccountService.create_account(test_user.id, "   ", "Cash", Decimal("1.00"))


@pytest.mark.django_db
class TestUpdateAccount:
    def test_changed_initial_amount_reposts(self, test_user, bank_account):
        before = Transaction.objects.count()

        account = AccountService.update_account(
            test_user.id,
            bank_account.id,
            name="Main",
            account_type="Bank",
            account_state="Inactive",
            initial_amount=Decimal("1200.00"),
        )

        assert Transaction.objects.count() == before + 2
        debit_posting, credit_posting = list(Transaction.objects.filter(account=bank_account).order_by("-id")[:2])[::-1]
        assert debit_posting.debit == Decimal("1000.00")
        assert debit_posting.balance == Decimal("0.00")
        assert credit_posting.credit == Decimal("1200.00")
        assert {debit_posting.description, credit_posting.description} == {"Account Update"}

        assert account.current_balance == Decimal("1200.00")
        assert account.name == "Main"
        assert account.state == "Inactive"
        assert account.initial_amount == Decimal("1200.00")

    def test_delta_keeps_other_activity(self, test_user, bank_account):
        BalanceService.append_posting(bank_account.id, debit=Decimal("100.00"), description="spend")

        account = AccountService.update_account(
            test_user.id, bank_account.id, initial_amount=Decimal("1100.00")
        )

        assert account.current_balance == Decimal("1000.00")

    def test_same_initial_amount_no_postings(self, test_user, bank_account):
        before = Transaction.objects.count()

        account = AccountService.update_account(
            test_user.id, bank_account.id, name="Renamed", initial_amount=Decimal("1000.00")
        )

        assert Transaction.objects.count() == before
        assert account.name == "Renamed"

    def test_missing_account(self, test_user):
        with pytest.raises(EntityNotFoundError):
            AccountService.update_account(test_user.id, 8080, name="x")

    def test_other_users_account(self, test_user2, bank_account):
        before = Transaction.objects.count()
        with pytest.raises(UnauthorizedError):
            AccountService.update_account(
                test_user2.id, bank_account.id, initial_amount=Decimal("1.00")
            )
        assert Transaction.objects.count() == before


@pytest.mark.django_db
class TestAccountReads:
    def test_get_accounts_scoped_to_user(self, test_user, bank_account, cash_account, foreign_account):
        accounts = list(AccountService.get_accounts(test_user.id))

        assert [a.id for a in accounts] == [bank_account.id, cash_account.id]
        assert [a.current_balance for a in accounts] == [Decimal("1000.00"), Decimal("200.00")]

    def test_get_account(self, test_user, bank_account, foreign_account):
        assert AccountService.get_account(test_user.id, bank_account.id).id == bank_account.id
        assert AccountService.get_account(test_user.id, foreign_account.id) is None

    def test_account_without_postings_has_zero_balance(self, test_user):
        account = Account.objects.create(user=test_user, name="Bare", type="Cash")
        assert AccountService.get_account(test_user.id, account.id).current_balance == Decimal("0")

    def test_get_user_for_account(self, test_user, bank_account):
        assert AccountService.get_user_for_account(bank_account.id) == test_user
        assert AccountService.get_user_for_account(999) is None
