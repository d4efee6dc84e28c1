# ledger/tests/unit/test_models.py

from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.db.models import ProtectedError

from ledger.models import Account, ExpenseCategory, Transaction, Transfer

from ..factories import AccountFactory, ExpenseCategoryFactory, TransactionFactory, TransferFactory


@pytest.mark.django_db
class TestAccountModel:
    def test_str(self):
        account = AccountFactory(name="Daily", type=Account.TYPE_CASH)
        assert str(account) == "Daily (Cash)"

    def test_blank_name_invalid(self):
        account = AccountFactory.build(name=" ", user=AccountFactory().user)
        with pytest.raises(ValidationError):
            account.clean()

    def test_user_delete_cascades_to_postings(self):
        posting = TransactionFactory()
        posting.account.user.delete()
        assert not Transaction.objects.filter(pk=posting.pk).exists()


@pytest.mark.django_db
class TestExpenseCategoryModel:
    def test_is_root(self):
        root = ExpenseCategoryFactory()
        child = ExpenseCategoryFactory(parent=root)
        assert root.is_root
        assert not child.is_root

    def test_short_name_invalid(self):
        with pytest.raises(ValidationError):
            ExpenseCategory(name="a").clean()

    def test_own_parent_invalid(self):
        category = ExpenseCategoryFactory()
        category.parent_id = category.id
        with pytest.raises(ValidationError):
            category.clean()

    def test_parent_with_children_is_protected(self):
        root = ExpenseCategoryFactory()
        ExpenseCategoryFactory(parent=root)
        with pytest.raises(ProtectedError):
            root.delete()


@pytest.mark.django_db
class TestTransferModel:
    def test_accounts_must_differ(self):
        transfer = TransferFactory()
        with pytest.raises(IntegrityError):
            with transaction.atomic():
                Transfer.objects.filter(pk=transfer.pk).update(to_account=transfer.from_account)

    def test_factory_accounts_share_owner(self):
        transfer = TransferFactory()
        assert transfer.from_account.user_id == transfer.to_account.user_id


@pytest.mark.django_db
def test_transaction_default_ordering_is_insertion():
    account = AccountFactory()
    first = TransactionFactory(account=account, balance=Decimal("10.00"))
    second = TransactionFactory(account=account, balance=Decimal("20.00"))
    assert list(Transaction.objects.filter(account=account)) == [first, second]
