"""
Database models for the personal ledger.

Accounts belong to users and carry a running balance that is never stored on
the account itself: it is the `balance` of the newest Transaction (posting)
of the account. Incomes, expenses and transfers are the business entities;
every change to them appends postings through the ledger services.
"""

import logging

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

# Get structured logger for this module
logger = logging.getLogger(__name__)

MONEY_DIGITS = 20
MONEY_DECIMALS = 2


def money_field(**kwargs):
    return models.DecimalField(
        max_digits=MONEY_DIGITS, decimal_places=MONEY_DECIMALS, **kwargs
    )


# -------------------------------------------------------------------
# ACCOUNTS
# -------------------------------------------------------------------


class Account(models.Model):
    """
    A user's bank account, cash wallet or credit card.

    `initial_amount` is the signed amount the account was opened with; its
    changes are the only account updates that produce postings.
    """

    TYPE_BANK = "Bank"
    TYPE_CASH = "Cash"
    TYPE_CREDIT_CARD = "CreditCard"
    TYPE_CHOICES = [
        (TYPE_BANK, "Bank"),
        (TYPE_CASH, "Cash"),
        (TYPE_CREDIT_CARD, "Credit card"),
    ]

    STATE_ACTIVE = "Active"
    STATE_INACTIVE = "Inactive"
    STATE_CLOSED = "Closed"
    STATE_CHOICES = [
        (STATE_ACTIVE, "Active"),
        (STATE_INACTIVE, "Inactive"),
        (STATE_CLOSED, "Closed"),
    ]

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="accounts"
    )
    name = models.CharField(max_length=100)
    type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    state = models.CharField(max_length=20, choices=STATE_CHOICES, default=STATE_ACTIVE)
    initial_amount = money_field(default=0)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["id"]
        indexes = [
            models.Index(fields=["user", "state"], name="idx_account_user_state"),
        ]

    def __str__(self):
        """String representation of Account."""
        return f"{self.name} ({self.type})"

    def clean(self):
        """Validate account data."""
        super().clean()

        if not self.name or not self.name.strip():
            raise ValidationError("Account name cannot be empty.")

        logger.debug(
            "Account validation completed",
            extra={
                "account_id": self.id if self.id else "new",
                "account_type": self.type,
                "action": "account_validation",
                "component": "Account",
            },
        )


# -------------------------------------------------------------------
# EXPENSE CATEGORIES
# -------------------------------------------------------------------


class ExpenseCategory(models.Model):
    """
    Node of the shared expense category tree.

    Each category points at most at one parent; roots have no parent.
    """

    name = models.CharField(max_length=50)
    parent = models.ForeignKey(
        "self",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="children",
    )

    class Meta:
        verbose_name_plural = "Expense categories"
        ordering = ["id"]

    @property
    def is_root(self):
        """Check if category is a root node (has no parent)."""
        return self.parent_id is None

    def clean(self):
        """Validate category name and parent link."""
        super().clean()

        if not self.name or len(self.name.strip()) < 2:
            raise ValidationError("Category name must be at least 2 characters long")

        if self.pk and self.parent_id == self.pk:
            raise ValidationError("Cannot set category as its own parent")

    def __str__(self):
        """String representation of ExpenseCategory."""
        return self.name


# -------------------------------------------------------------------
# INCOMES, EXPENSES, TRANSFERS
# -------------------------------------------------------------------


class Income(models.Model):
    """Money received on an account."""

    SOURCE_SALARY = "Salary"
    SOURCE_INTEREST = "Interest"
    SOURCE_PROFIT = "Profit"
    SOURCE_OTHER = "Other"
    SOURCE_CHOICES = [
        (SOURCE_SALARY, "Salary"),
        (SOURCE_INTEREST, "Interest"),
        (SOURCE_PROFIT, "Profit"),
        (SOURCE_OTHER, "Other"),
    ]

    account = models.ForeignKey(Account, on_delete=models.CASCADE, related_name="incomes")
    amount = money_field()
    date = models.DateTimeField()
    source = models.CharField(max_length=20, choices=SOURCE_CHOICES)

    class Meta:
        ordering = ["-date", "-id"]

    def __str__(self):
        return f"Income {self.amount} ({self.source})"


class Expense(models.Model):
    """Money spent from an account, classified by category."""

    account = models.ForeignKey(Account, on_delete=models.CASCADE, related_name="expenses")
    category = models.ForeignKey(
        ExpenseCategory, on_delete=models.PROTECT, related_name="expenses"
    )
    amount = money_field()
    date = models.DateTimeField()

    class Meta:
        ordering = ["-date", "-id"]

    def __str__(self):
        return f"Expense {self.amount} ({self.category_id})"


class Transfer(models.Model):
    """Money moved between two accounts of the same user."""

    from_account = models.ForeignKey(
        Account, on_delete=models.CASCADE, related_name="outgoing_transfers"
    )
    to_account = models.ForeignKey(
        Account, on_delete=models.CASCADE, related_name="incoming_transfers"
    )
    amount = money_field()
    date = models.DateTimeField()

    class Meta:
        ordering = ["-date", "-id"]
        constraints = [
            models.CheckConstraint(
                condition=~models.Q(from_account=models.F("to_account")),
                name="transfer_accounts_differ",
            ),
        ]

    def __str__(self):
        return f"Transfer {self.amount} ({self.from_account_id} -> {self.to_account_id})"


# -------------------------------------------------------------------
# TRANSACTIONS (POSTINGS)
# -------------------------------------------------------------------


class Transaction(models.Model):
    """
    Append-only ledger posting.

    `balance` is the running balance of the account after this posting.
    Postings are ordered by id; the newest one holds the current balance.
    Rows are written only by BalanceService.append_posting.
    """

    account = models.ForeignKey(
        Account, on_delete=models.CASCADE, related_name="transactions"
    )
    debit = money_field(default=0)
    credit = money_field(default=0)
    balance = money_field()
    description = models.TextField(blank=True)
    date = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["id"]
        indexes = [
            models.Index(fields=["account", "-id"], name="idx_posting_account_latest"),
        ]

    def __str__(self):
        return f"{self.account_id} | -{self.debit} +{self.credit} = {self.balance}"
