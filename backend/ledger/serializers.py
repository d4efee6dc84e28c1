"""
Serializers for the ledger API.

Read serializers render model instances returned by the services. Write
serializers only validate request payloads; the views pass the validated
data to the services, which own every database write.
"""

import logging
from decimal import Decimal

from rest_framework import serializers

from .models import (MONEY_DECIMALS, MONEY_DIGITS, Account, Expense,
                     ExpenseCategory, Income, Transaction, Transfer)
from .services.category_service import CategoryService

logger = logging.getLogger(__name__)

MIN_AMOUNT = Decimal("0.01")


def money(**kwargs):
    return serializers.DecimalField(
        max_digits=MONEY_DIGITS, decimal_places=MONEY_DECIMALS, **kwargs
    )


# -------------------------------------------------------------------
# ACCOUNTS
# -------------------------------------------------------------------


class AccountSerializer(serializers.ModelSerializer):
    """Account with the balance of its newest posting."""

    current_balance = money(read_only=True)

    class Meta:
        model = Account
        fields = [
            "id",
            "user",
            "name",
            "type",
            "state",
            "initial_amount",
            "current_balance",
            "created_at",
        ]
        read_only_fields = fields


class AccountCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    type = serializers.ChoiceField(choices=Account.TYPE_CHOICES)
    initial_amount = money(default=Decimal("0"))


class AccountUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100, required=False)
    type = serializers.ChoiceField(choices=Account.TYPE_CHOICES, required=False)
    state = serializers.ChoiceField(choices=Account.STATE_CHOICES, required=False)
    initial_amount = money(required=False)


# -------------------------------------------------------------------
# EXPENSE CATEGORIES
# -------------------------------------------------------------------


class ExpenseCategorySerializer(serializers.ModelSerializer):
    """
    Category with its full path name.

    Pass `category_arena` in the serializer context to resolve the paths of a
    whole list from one query.
    """

    path_name = serializers.SerializerMethodField()

    class Meta:
        model = ExpenseCategory
        fields = ["id", "name", "parent", "path_name"]
        read_only_fields = fields

    def get_path_name(self, obj):
        return CategoryService.path_name(obj.id, self.context.get("category_arena"))


class ExpenseCategoryCreateSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=2, max_length=50)
    parent = serializers.IntegerField(required=False, allow_null=True, default=None)


class ExpenseCategoryMoveSerializer(serializers.Serializer):
    parent = serializers.IntegerField(allow_null=True)


# -------------------------------------------------------------------
# EXPENSES
# -------------------------------------------------------------------


class ExpenseSerializer(serializers.ModelSerializer):
    category_path = serializers.SerializerMethodField()

    class Meta:
        model = Expense
        fields = ["id", "account", "category", "category_path", "amount", "date"]
        read_only_fields = fields

    def get_category_path(self, obj):
        return CategoryService.path_name(obj.category_id, self.context.get("category_arena"))


class ExpenseWriteSerializer(serializers.Serializer):
    account = serializers.IntegerField()
    category = serializers.IntegerField()
    amount = money(min_value=MIN_AMOUNT)
    date = serializers.DateTimeField()


# -------------------------------------------------------------------
# INCOMES
# -------------------------------------------------------------------


class IncomeSerializer(serializers.ModelSerializer):
    class Meta:
        model = Income
        fields = ["id", "account", "amount", "date", "source"]
        read_only_fields = fields


class IncomeWriteSerializer(serializers.Serializer):
    account = serializers.IntegerField()
    amount = money(min_value=MIN_AMOUNT)
    date = serializers.DateTimeField()
    source = serializers.ChoiceField(choices=Income.SOURCE_CHOICES)


# -------------------------------------------------------------------
# TRANSFERS
# -------------------------------------------------------------------


class TransferSerializer(serializers.ModelSerializer):
    class Meta:
        model = Transfer
        fields = ["id", "from_account", "to_account", "amount", "date"]
        read_only_fields = fields


class TransferWriteSerializer(serializers.Serializer):
    from_account = serializers.IntegerField()
    to_account = serializers.IntegerField()
    amount = money(min_value=MIN_AMOUNT)
    date = serializers.DateTimeField()

    def validate(self, attrs):
        if attrs["from_account"] == attrs["to_account"]:
            logger.warning(
                "Transfer rejected - same source and target account",
                extra={
                    "account_id": attrs["from_account"],
                    "action": "transfer_validation_failed",
                    "component": "TransferWriteSerializer",
                    "severity": "low",
                },
            )
            raise serializers.ValidationError("Transfer accounts must differ")
        return attrs


# -------------------------------------------------------------------
# TRANSACTIONS (POSTINGS)
# -------------------------------------------------------------------


class TransactionSerializer(serializers.ModelSerializer):
    class Meta:
        model = Transaction
        fields = ["id", "account", "debit", "credit", "balance", "description", "date"]
        read_only_fields = fields


class LedgerMismatchSerializer(serializers.Serializer):
    transaction_id = serializers.IntegerField()
    expected_balance = money()
    stored_balance = money()
