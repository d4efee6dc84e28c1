"""
Service for account management.

Account reads carry a `current_balance` annotation taken from the newest
posting of the account. Opening an account and changing its initial amount
are the only account operations that append postings.
"""

import logging
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.db import transaction as db_transaction
from django.db.models import DecimalField, OuterRef, Subquery, Value
from django.db.models.functions import Coalesce

from ..exceptions import EntityNotFoundError, UnauthorizedError
from ..models import MONEY_DECIMALS, MONEY_DIGITS, Account, Transaction
from .balance_service import ZERO, BalanceService, to_amount

# Get structured logger for this module
logger = logging.getLogger(__name__)

ACCOUNT_CREATION = "Account Creation"
ACCOUNT_UPDATE = "Account Update"


class AccountService:
    """
    Creates, updates and reads user accounts.
    """

    @staticmethod
    def with_balance(queryset=None):
        """Annotate accounts with the balance of their newest posting."""
        if queryset is None:
            queryset = Account.objects.all()
        latest_balance = (
            Transaction.objects.filter(account=OuterRef("pk"))
            .order_by("-id")
            .values("balance")[:1]
        )
        return queryset.annotate(
            current_balance=Coalesce(
                Subquery(latest_balance),
                Value(Decimal("0")),
                output_field=DecimalField(
                    max_digits=MONEY_DIGITS, decimal_places=MONEY_DECIMALS
                ),
            )
        )

    @staticmethod
    @db_transaction.atomic
    def create_account(user_id, name, account_type, initial_amount=ZERO):
        """
        Open an account and post its initial amount.

        Args:
            user_id: Owner of the new account
            name: Display name
            account_type: One of Account.TYPE_CHOICES
            initial_amount: Signed opening amount

        Returns:
            Account: The new account annotated with `current_balance`

        Raises:
            ValidationError: If the name, type or amount is invalid
        """
        initial_amount = to_amount(initial_amount)
        account = Account(
            user_id=user_id,
            name=(name or "").strip(),
            type=account_type,
            state=Account.STATE_ACTIVE,
            initial_amount=initial_amount,
        )
        account.full_clean()
        account.save()

        BalanceService.append_posting(
            account.id, debit=ZERO, credit=initial_amount, description=ACCOUNT_CREATION
        )

        logger.info(
            "Account created",
            extra={
                "user_id": user_id,
                "account_id": account.id,
                "account_type": account_type,
                "initial_amount": str(initial_amount),
                "action": "account_created",
                "component": "AccountService",
            },
        )
        return AccountService.with_balance().get(pk=account.pk)

    @staticmethod
    @db_transaction.atomic
    def update_account(
        user_id,
        account_id,
        name=None,
        account_type=None,
        account_state=None,
        initial_amount=None,
    ):
        """
        Update an account; `None` keeps the current value of a field.

        A changed initial amount is re-posted as a debit of the old amount
        followed by a credit of the new one.

        Returns:
            Account: The updated account annotated with `current_balance`

        Raises:
            EntityNotFoundError: If the account does not exist
            UnauthorizedError: If the account belongs to another user
            ValidationError: If the new values are invalid
        """
        account = Account.objects.select_for_update().filter(pk=account_id).first()
        if account is None:
            raise EntityNotFoundError("Account", account_id)

        if account.user_id != user_id:
            logger.warning(
                "Account update denied - account not owned by user",
                extra={
                    "user_id": user_id,
                    "account_id": account_id,
                    "action": "account_update_unauthorized",
                    "component": "AccountService",
                    "severity": "high",
                },
            )
            raise UnauthorizedError(user_id=user_id, account_ids=[account_id])

        old_initial_amount = account.initial_amount
        if name is not None:
            account.name = name.strip()
        if account_type is not None:
            account.type = account_type
        if account_state is not None:
            account.state = account_state
        if initial_amount is not None:
            account.initial_amount = to_amount(initial_amount)
        account.full_clean()

        if account.initial_amount != old_initial_amount:
            BalanceService.append_posting(
                account.id, debit=old_initial_amount, credit=ZERO, description=ACCOUNT_UPDATE
            )
            BalanceService.append_posting(
                account.id,
                debit=ZERO,
                credit=account.initial_amount,
                description=ACCOUNT_UPDATE,
            )

        account.save(update_fields=["name", "type", "state", "initial_amount"])

        logger.info(
            "Account updated",
            extra={
                "user_id": user_id,
                "account_id": account.id,
                "old_initial_amount": str(old_initial_amount),
                "initial_amount": str(account.initial_amount),
                "reposted": account.initial_amount != old_initial_amount,
                "action": "account_updated",
                "component": "AccountService",
            },
        )
        return AccountService.with_balance().get(pk=account.pk)

    @staticmethod
    def get_accounts(user_id):
        return AccountService.with_balance(Account.objects.filter(user_id=user_id)).order_by("id")

    @staticmethod
    def get_account(user_id, account_id):
        """Account owned by the user, or None."""
        return AccountService.with_balance(
            Account.objects.filter(pk=account_id, user_id=user_id)
        ).first()

    @staticmethod
    def get_user_for_account(account_id):
        return get_user_model().objects.filter(accounts__id=account_id).first()

