"""
Owner-scoped read queries over ledger entities.

Every query filters on the owner of the account involved, so entities of
other users are simply invisible: single-entity getters return None for them.
"""

import logging

from ..models import Expense, Income, Transaction, Transfer
from .account_service import AccountService
from .category_service import CategoryService

logger = logging.getLogger(__name__)


class LedgerQueryService:
    """
    Read access to incomes, expenses, transfers and postings of a user.
    """

    # Incomes

    @staticmethod
    def get_incomes(user_id):
        return Income.objects.filter(account__user_id=user_id).select_related("account")

    @staticmethod
    def get_income(user_id, income_id):
        return LedgerQueryService.get_incomes(user_id).filter(pk=income_id).first()

    @staticmethod
    def get_account_for_income(user_id, income_id):
        income = LedgerQueryService.get_income(user_id, income_id)
        if income is None:
            return None
        return AccountService.get_account(user_id, income.account_id)

    # Expenses

    @staticmethod
    def get_expenses(user_id):
        return Expense.objects.filter(account__user_id=user_id).select_related(
            "account", "category"
        )

    @staticmethod
    def get_expense(user_id, expense_id):
        return LedgerQueryService.get_expenses(user_id).filter(pk=expense_id).first()

    @staticmethod
    def get_account_for_expense(user_id, expense_id):
        expense = LedgerQueryService.get_expense(user_id, expense_id)
        if expense is None:
            return None
        return AccountService.get_account(user_id, expense.account_id)

    @staticmethod
    def get_category_for_expense(user_id, expense_id):
        expense = LedgerQueryService.get_expense(user_id, expense_id)
        if expense is None:
            return None
        return CategoryService.get_category(expense.category_id)

    # Transfers

    @staticmethod
    def get_transfers(user_id):
        """Transfers leaving one of the user's accounts."""
        return Transfer.objects.filter(from_account__user_id=user_id).select_related(
            "from_account", "to_account"
        )

    @staticmethod
    def get_transfer(user_id, transfer_id):
        return LedgerQueryService.get_transfers(user_id).filter(pk=transfer_id).first()

    @staticmethod
    def get_from_account_for_transfer(user_id, transfer_id):
        transfer = LedgerQueryService.get_transfer(user_id, transfer_id)
        if transfer is None:
            return None
        return AccountService.get_account(user_id, transfer.from_account_id)

    @staticmethod
    def get_to_account_for_transfer(user_id, transfer_id):
        transfer = LedgerQueryService.get_transfer(user_id, transfer_id)
        if transfer is None:
            return None
        return AccountService.get_account(user_id, transfer.to_account_id)

    # Postings

    @staticmethod
    def get_transactions(user_id, account_id=None):
        """
        Postings on the user's accounts in insertion order.

        Args:
            user_id: Owner of the accounts
            account_id: Restrict to one account when given
        """
        postings = Transaction.objects.filter(account__user_id=user_id)
        if account_id is not None:
            postings = postings.filter(account_id=account_id)

        logger.debug(
            "Postings queried",
            extra={
                "user_id": user_id,
                "account_id": account_id,
                "action": "postings_queried",
                "component": "LedgerQueryService",
            },
        )
        return postings.order_by("id")

    @staticmethod
    def get_transaction(user_id, transaction_id):
        return LedgerQueryService.get_transactions(user_id).filter(pk=transaction_id).first()

    @staticmethod
    def get_account_for_transaction(user_id, transaction_id):
        posting = LedgerQueryService.get_transaction(user_id, transaction_id)
        if posting is None:
            return None
        return AccountService.get_account(user_id, posting.account_id)
