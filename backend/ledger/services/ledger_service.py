"""
Service for balance-affecting ledger mutations.

Every operation runs in one atomic block: the ownership check comes first
and raises before any write, then the entity row is changed and the postings
moving the account balance(s) are appended through BalanceService. Postings
are never edited; updates and deletes append compensating postings.
"""

import logging

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction as db_transaction

from ..exceptions import EntityNotFoundError, UnauthorizedError
from ..models import Account, Expense, ExpenseCategory, Income, Transfer
from .balance_service import ZERO, BalanceService, to_amount
from .category_service import CategoryService

# Get structured logger for this module
logger = logging.getLogger(__name__)


def transfer_delete_requires_ownership():
    return getattr(settings, "LEDGER", {}).get("TRANSFER_DELETE_REQUIRES_OWNERSHIP", True)


class LedgerService:
    """
    Expense, income and transfer mutations with their postings.
    """

    @staticmethod
    def _require_owned(user_id, *account_ids, operation=""):
        """
        Raise UnauthorizedError unless `user_id` owns every given account.

        Missing accounts count as not owned.
        """
        wanted = set(account_ids)
        owned = set(
            Account.objects.filter(pk__in=wanted, user_id=user_id).values_list("id", flat=True)
        )
        if user_id is None or owned != wanted:
            logger.warning(
                "Ledger operation denied - account not owned by user",
                extra={
                    "user_id": user_id,
                    "account_ids": sorted(wanted, key=str),
                    "operation": operation,
                    "action": "ledger_unauthorized",
                    "component": "LedgerService",
                    "severity": "high",
                },
            )
            raise UnauthorizedError(user_id=user_id, account_ids=sorted(wanted, key=str))

    @staticmethod
    def _positive_amount(amount):
        amount = to_amount(amount)
        if amount <= ZERO:
            raise ValidationError("Amount must be positive")
        return amount

    @staticmethod
    def _require_category(category_id):
        if not ExpenseCategory.objects.filter(pk=category_id).exists():
            raise ValidationError(f"Expense category {category_id} does not exist")

    # -------------------------------------------------------------------
    # EXPENSES
    # -------------------------------------------------------------------

    @staticmethod
    @db_transaction.atomic
    def create_expense(user_id, account_id, category_id, amount, date):
        """
        Record an expense and debit its account.

        Args:
            user_id: Acting user
            account_id: Account the money leaves
            category_id: Expense category
            amount: Positive amount
            date: Date of the expense

        Returns:
            Expense: The created expense

        Raises:
            UnauthorizedError: If the user does not own the account
            ValidationError: If the amount is not positive or the category is missing
        """
        LedgerService._require_owned(user_id, account_id, operation="create_expense")
        amount = LedgerService._positive_amount(amount)
        LedgerService._require_category(category_id)

        expense = Expense.objects.create(
            account_id=account_id, category_id=category_id, amount=amount, date=date
        )
        BalanceService.append_posting(
            account_id,
            debit=amount,
            credit=ZERO,
            description=f"New Expense - {CategoryService.path_name(category_id)}",
        )

        logger.info(
            "Expense created",
            extra={
                "user_id": user_id,
                "expense_id": expense.id,
                "account_id": account_id,
                "category_id": category_id,
                "amount": str(amount),
                "action": "expense_created",
                "component": "LedgerService",
            },
        )
        return expense

    @staticmethod
    @db_transaction.atomic
    def update_expense(user_id, expense_id, category_id, account_id, amount, date):
        """
        Change an expense, reversing its old posting and appending a new one.

        The reversal credits the old account, then the new amount is debited
        from the (possibly different) new account. Both postings are appended
        in that order, each reading the balance the previous one left.

        Returns:
            Expense: The updated expense

        Raises:
            EntityNotFoundError: If the expense does not exist
            UnauthorizedError: If the user does not own both the current and the target account
            ValidationError: If the amount is not positive or the category is missing
        """
        expense = Expense.objects.select_for_update().filter(pk=expense_id).first()
        if expense is None:
            raise EntityNotFoundError("Expense", expense_id)

        LedgerService._require_owned(
            user_id, expense.account_id, account_id, operation="update_expense"
        )
        amount = LedgerService._positive_amount(amount)
        LedgerService._require_category(category_id)
        BalanceService.lock_accounts(expense.account_id, account_id)

        old_account_id = expense.account_id
        old_amount = expense.amount
        arena = CategoryService.load_arena()

        BalanceService.append_posting(
            old_account_id,
            debit=ZERO,
            credit=old_amount,
            description=f"Delete Expense - {CategoryService.path_name(expense.category_id, arena)}",
        )
        BalanceService.append_posting(
            account_id,
            debit=amount,
            credit=ZERO,
            description=f"New Expense - {CategoryService.path_name(category_id, arena)}",
        )

        expense.account_id = account_id
        expense.category_id = category_id
        expense.amount = amount
        expense.date = date
        expense.save(update_fields=["account", "category", "amount", "date"])

        logger.info(
            "Expense updated",
            extra={
                "user_id": user_id,
                "expense_id": expense.id,
                "old_account_id": old_account_id,
                "account_id": account_id,
                "old_amount": str(old_amount),
                "amount": str(amount),
                "action": "expense_updated",
                "component": "LedgerService",
            },
        )
        return expense

    @staticmethod
    @db_transaction.atomic
    def delete_expense(user_id, expense_id, account_id=None):
        """
        Delete an expense and credit its amount back.

        Args:
            user_id: Acting user
            expense_id: Expense to delete
            account_id: When given, the expense must live on this account

        Returns:
            bool: False when no matching expense exists, True once deleted

        Raises:
            UnauthorizedError: If the user does not own the account involved
        """
        if account_id is not None:
            LedgerService._require_owned(user_id, account_id, operation="delete_expense")

        expenses = Expense.objects.select_for_update().filter(pk=expense_id)
        if account_id is not None:
            expenses = expenses.filter(account_id=account_id)
        expense = expenses.first()
        if expense is None:
            logger.info(
                "Expense delete skipped - not found",
                extra={
                    "user_id": user_id,
                    "expense_id": expense_id,
                    "account_id": account_id,
                    "action": "expense_delete_not_found",
                    "component": "LedgerService",
                },
            )
            return False

        LedgerService._require_owned(user_id, expense.account_id, operation="delete_expense")

        description = f"Deleted Expense - {CategoryService.path_name(expense.category_id)}"
        expense_account_id = expense.account_id
        amount = expense.amount
        expense.delete()
        BalanceService.append_posting(
            expense_account_id, debit=ZERO, credit=amount, description=description
        )

        logger.info(
            "Expense deleted",
            extra={
                "user_id": user_id,
                "expense_id": expense_id,
                "account_id": expense_account_id,
                "amount": str(amount),
                "action": "expense_deleted",
                "component": "LedgerService",
            },
        )
        return True

    # -------------------------------------------------------------------
    # INCOMES
    # -------------------------------------------------------------------

    @staticmethod
    @db_transaction.atomic
    def create_income(user_id, account_id, amount, date, source):
        """
        Record an income and credit its account.

        Raises:
            UnauthorizedError: If the user does not own the account
            ValidationError: If the amount is not positive or the source is unknown
        """
        LedgerService._require_owned(user_id, account_id, operation="create_income")
        amount = LedgerService._positive_amount(amount)
        valid_sources = [choice for choice, _label in Income.SOURCE_CHOICES]
        if source not in valid_sources:
            raise ValidationError(f"Source must be one of: {', '.join(valid_sources)}")

        income = Income.objects.create(
            account_id=account_id, amount=amount, date=date, source=source
        )
        BalanceService.append_posting(
            account_id,
            debit=ZERO,
            credit=amount,
            description=f"New Income - {source} to account {account_id}",
        )

        logger.info(
            "Income created",
            extra={
                "user_id": user_id,
                "income_id": income.id,
                "account_id": account_id,
                "amount": str(amount),
                "source": source,
                "action": "income_created",
                "component": "LedgerService",
            },
        )
        return income

    @staticmethod
    @db_transaction.atomic
    def delete_income(user_id, income_id):
        """
        Delete an income and debit its amount back.

        Returns:
            bool: False when the income does not exist, True once deleted

        Raises:
            UnauthorizedError: If the income's account is not owned by the user
        """
        income = Income.objects.select_for_update().filter(pk=income_id).first()
        if income is None:
            logger.info(
                "Income delete skipped - not found",
                extra={
                    "user_id": user_id,
                    "income_id": income_id,
                    "action": "income_delete_not_found",
                    "component": "LedgerService",
                },
            )
            return False

        LedgerService._require_owned(user_id, income.account_id, operation="delete_income")

        account_id = income.account_id
        amount = income.amount
        source = income.source
        income.delete()
        BalanceService.append_posting(
            account_id,
            debit=amount,
            credit=ZERO,
            description=f"Delete Income - {source} to account {account_id}",
        )

        logger.info(
            "Income deleted",
            extra={
                "user_id": user_id,
                "income_id": income_id,
                "account_id": account_id,
                "amount": str(amount),
                "action": "income_deleted",
                "component": "LedgerService",
            },
        )
        return True

    # -------------------------------------------------------------------
    # TRANSFERS
    # -------------------------------------------------------------------

    @staticmethod
    @db_transaction.atomic
    def create_transfer(user_id, from_account_id, to_account_id, amount, date):
        """
        Move money between two accounts of the same user.

        Appends a debit posting on the from-account, then a credit posting on
        the to-account.

        Raises:
            ValidationError: If both accounts are the same or the amount is not positive
            UnauthorizedError: If the user does not own both accounts
        """
        if from_account_id == to_account_id:
            raise ValidationError("Transfer accounts must differ")
        LedgerService._require_owned(
            user_id, from_account_id, to_account_id, operation="create_transfer"
        )
        amount = LedgerService._positive_amount(amount)
        BalanceService.lock_accounts(from_account_id, to_account_id)

        transfer = Transfer.objects.create(
            from_account_id=from_account_id,
            to_account_id=to_account_id,
            amount=amount,
            date=date,
        )
        BalanceService.append_posting(
            from_account_id,
            debit=amount,
            credit=ZERO,
            description=f"New Transfer - Transaction from account {from_account_id}",
        )
        BalanceService.append_posting(
            to_account_id,
            debit=ZERO,
            credit=amount,
            description=f"New Transfer - Transaction to account {to_account_id}",
        )

        logger.info(
            "Transfer created",
            extra={
                "user_id": user_id,
                "transfer_id": transfer.id,
                "from_account_id": from_account_id,
                "to_account_id": to_account_id,
                "amount": str(amount),
                "action": "transfer_created",
                "component": "LedgerService",
            },
        )
        return transfer

    @staticmethod
    @db_transaction.atomic
    def delete_transfer(transfer_id, user_id=None):
        """
        Delete a transfer and reverse both of its postings.

        Ownership of both accounts is required unless
        LEDGER["TRANSFER_DELETE_REQUIRES_OWNERSHIP"] is False.

        Returns:
            bool: False when the transfer does not exist, True once deleted

        Raises:
            UnauthorizedError: If ownership is required and missing
        """
        transfer = Transfer.objects.select_for_update().filter(pk=transfer_id).first()
        if transfer is None:
            logger.info(
                "Transfer delete skipped - not found",
                extra={
                    "user_id": user_id,
                    "transfer_id": transfer_id,
                    "action": "transfer_delete_not_found",
                    "component": "LedgerService",
                },
            )
            return False

        if transfer_delete_requires_ownership():
            LedgerService._require_owned(
                user_id,
                transfer.from_account_id,
                transfer.to_account_id,
                operation="delete_transfer",
            )
        BalanceService.lock_accounts(transfer.from_account_id, transfer.to_account_id)

        from_account_id = transfer.from_account_id
        to_account_id = transfer.to_account_id
        amount = transfer.amount
        transfer.delete()
        BalanceService.append_posting(
            from_account_id,
            debit=ZERO,
            credit=amount,
            description=f"Delete Transfer - Transaction from account {from_account_id}",
        )
        BalanceService.append_posting(
            to_account_id,
            debit=amount,
            credit=ZERO,
            description=f"Delete Transfer - Transaction to account {to_account_id}",
        )

        logger.info(
            "Transfer deleted",
            extra={
                "user_id": user_id,
                "transfer_id": transfer_id,
                "from_account_id": from_account_id,
                "to_account_id": to_account_id,
                "amount": str(amount),
                "action": "transfer_deleted",
                "component": "LedgerService",
            },
        )
        return True
