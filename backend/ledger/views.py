"""
API views for the personal ledger.

Thin viewsets: payloads are validated by serializers, every read and write
goes through the ledger services, and service exceptions are translated by
ServiceExceptionHandlerMixin.
"""

import logging

from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound, ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from .mixins.service_exception_handler import ServiceExceptionHandlerMixin
from .permissions import IsAdminRoleOrReadOnly
from .serializers import (AccountCreateSerializer, AccountSerializer,
                          AccountUpdateSerializer,
                          ExpenseCategoryCreateSerializer,
                          ExpenseCategoryMoveSerializer,
                          ExpenseCategorySerializer, ExpenseSerializer,
                          ExpenseWriteSerializer, IncomeSerializer,
                          IncomeWriteSerializer, LedgerMismatchSerializer,
                          TransactionSerializer, TransferSerializer,
                          TransferWriteSerializer)
from .services.account_service import AccountService
from .services.balance_service import BalanceService
from .services.category_service import CategoryService
from .services.ledger_service import LedgerService
from .services.query_service import LedgerQueryService

# Get structured logger for this module
logger = logging.getLogger(__name__)


class LedgerViewSet(ServiceExceptionHandlerMixin, viewsets.GenericViewSet):
    """
    Base viewset for owner-scoped ledger resources.
    """

    permission_classes = [IsAuthenticated]
    lookup_value_regex = r"\d+"

    def get_object_id(self):
        return int(self.kwargs[self.lookup_url_kwarg or self.lookup_field])

    def get_serializer_context(self):
        context = super().get_serializer_context()
        if self.action == "list":
            context["category_arena"] = CategoryService.load_arena()
        return context

    def get_visible(self, getter):
        """Fetch one entity through a query service getter or raise 404."""
        instance = getter(self.request.user.id, self.get_object_id())
        if instance is None:
            raise NotFound()
        return instance

    def query_param_id(self, name):
        value = self.request.query_params.get(name)
        if value in (None, ""):
            return None
        try:
            return int(value)
        except ValueError:
            raise ValidationError({name: "Must be an integer id."})


# -------------------------------------------------------------------
# ACCOUNTS
# -------------------------------------------------------------------


class AccountViewSet(LedgerViewSet):
    serializer_class = AccountSerializer

    def get_queryset(self):
        return AccountService.get_accounts(self.request.user.id)

    def list(self, request):
        accounts = self.get_queryset()
        return Response(self.get_serializer(accounts, many=True).data)

    def retrieve(self, request, pk=None):
        account = self.get_visible(AccountService.get_account)
        return Response(self.get_serializer(account).data)

    def create(self, request):
        payload = AccountCreateSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        data = payload.validated_data

        account = self.handle_service_call(
            AccountService.create_account,
            request.user.id,
            data["name"],
            data["type"],
            data["initial_amount"],
        )
        return Response(self.get_serializer(account).data, status=status.HTTP_201_CREATED)

    def update(self, request, pk=None, partial=False):
        payload = AccountUpdateSerializer(data=request.data, partial=partial)
        payload.is_valid(raise_exception=True)
        data = payload.validated_data

        account = self.handle_service_call(
            AccountService.update_account,
            request.user.id,
            self.get_object_id(),
            name=data.get("name"),
            account_type=data.get("type"),
            account_state=data.get("state"),
            initial_amount=data.get("initial_amount"),
        )
        return Response(self.get_serializer(account).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk, partial=True)

    @action(detail=True, methods=["get"])
    def verify(self, request, pk=None):
        """Replay the postings of an owned account."""
        account = self.get_visible(AccountService.get_account)
        mismatches = self.handle_service_call(BalanceService.replay, account.id)
        return Response(
            {
                "account": account.id,
                "consistent": not mismatches,
                "mismatches": LedgerMismatchSerializer(mismatches, many=True).data,
            }
        )


# -------------------------------------------------------------------
# EXPENSES
# -------------------------------------------------------------------


class ExpenseViewSet(LedgerViewSet):
    serializer_class = ExpenseSerializer

    def get_queryset(self):
        expenses = LedgerQueryService.get_expenses(self.request.user.id)
        account_id = self.query_param_id("account")
        if account_id is not None:
            expenses = expenses.filter(account_id=account_id)
        return expenses

    def list(self, request):
        return Response(self.get_serializer(self.get_queryset(), many=True).data)

    def retrieve(self, request, pk=None):
        expense = self.get_visible(LedgerQueryService.get_expense)
        return Response(self.get_serializer(expense).data)

    def create(self, request):
        payload = ExpenseWriteSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        data = payload.validated_data

        expense = self.handle_service_call(
            LedgerService.create_expense,
            request.user.id,
            data["account"],
            data["category"],
            data["amount"],
            data["date"],
        )
        return Response(self.get_serializer(expense).data, status=status.HTTP_201_CREATED)

    def update(self, request, pk=None):
        payload = ExpenseWriteSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        data = payload.validated_data

        expense = self.handle_service_call(
            LedgerService.update_expense,
            request.user.id,
            self.get_object_id(),
            data["category"],
            data["account"],
            data["amount"],
            data["date"],
        )
        return Response(self.get_serializer(expense).data)

    def destroy(self, request, pk=None):
        deleted = self.handle_service_call(
            LedgerService.delete_expense,
            request.user.id,
            self.get_object_id(),
            account_id=self.query_param_id("account"),
        )
        return Response({"success": deleted})

    @action(detail=True, methods=["get"])
    def account(self, request, pk=None):
        account = self.get_visible(LedgerQueryService.get_account_for_expense)
        return Response(AccountSerializer(account).data)

    @action(detail=True, methods=["get"])
    def category(self, request, pk=None):
        category = self.get_visible(LedgerQueryService.get_category_for_expense)
        return Response(ExpenseCategorySerializer(category).data)


# -------------------------------------------------------------------
# INCOMES
# -------------------------------------------------------------------


class IncomeViewSet(LedgerViewSet):
    serializer_class = IncomeSerializer

    def get_queryset(self):
        incomes = LedgerQueryService.get_incomes(self.request.user.id)
        account_id = self.query_param_id("account")
        if account_id is not None:
            incomes = incomes.filter(account_id=account_id)
        return incomes

    def list(self, request):
        return Response(self.get_serializer(self.get_queryset(), many=True).data)

    def retrieve(self, request, pk=None):
        income = self.get_visible(LedgerQueryService.get_income)
        return Response(self.get_serializer(income).data)

    def create(self, request):
        payload = IncomeWriteSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        data = payload.validated_data

        income = self.handle_service_call(
            LedgerService.create_income,
            request.user.id,
            data["account"],
            data["amount"],
            data["date"],
            data["source"],
        )
        return Response(self.get_serializer(income).data, status=status.HTTP_201_CREATED)

    def destroy(self, request, pk=None):
        deleted = self.handle_service_call(
            LedgerService.delete_income, request.user.id, self.get_object_id()
        )
        return Response({"success": deleted})

    @action(detail=True, methods=["get"])
    def account(self, request, pk=None):
        account = self.get_visible(LedgerQueryService.get_account_for_income)
        return Response(AccountSerializer(account).data)


# -------------------------------------------------------------------
# TRANSFERS
# -------------------------------------------------------------------


class TransferViewSet(LedgerViewSet):
    serializer_class = TransferSerializer

    def get_queryset(self):
        return LedgerQueryService.get_transfers(self.request.user.id)

    def list(self, request):
        return Response(self.get_serializer(self.get_queryset(), many=True).data)

    def retrieve(self, request, pk=None):
        transfer = self.get_visible(LedgerQueryService.get_transfer)
        return Response(self.get_serializer(transfer).data)

    def create(self, request):
        payload = TransferWriteSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        data = payload.validated_data

        transfer = self.handle_service_call(
            LedgerService.create_transfer,
            request.user.id,
            data["from_account"],
            data["to_account"],
            data["amount"],
            data["date"],
        )
        return Response(self.get_serializer(transfer).data, status=status.HTTP_201_CREATED)

    def destroy(self, request, pk=None):
        deleted = self.handle_service_call(
            LedgerService.delete_transfer, self.get_object_id(), user_id=request.user.id
        )
        return Response({"success": deleted})

    @action(detail=True, methods=["get"])
    def accounts(self, request, pk=None):
        """Both ends of a transfer."""
        from_account = self.get_visible(LedgerQueryService.get_from_account_for_transfer)
        to_account = LedgerQueryService.get_to_account_for_transfer(
            request.user.id, self.get_object_id()
        )
        return Response(
            {
                "from_account": AccountSerializer(from_account).data,
                "to_account": AccountSerializer(to_account).data if to_account else None,
            }
        )


# -------------------------------------------------------------------
# TRANSACTIONS (POSTINGS)
# -------------------------------------------------------------------


class TransactionViewSet(LedgerViewSet):
    """Read-only access to the postings of the user's accounts."""

    serializer_class = TransactionSerializer

    def get_queryset(self):
        return LedgerQueryService.get_transactions(
            self.request.user.id, account_id=self.query_param_id("account")
        )

    def list(self, request):
        return Response(self.get_serializer(self.get_queryset(), many=True).data)

    def retrieve(self, request, pk=None):
        posting = self.get_visible(LedgerQueryService.get_transaction)
        return Response(self.get_serializer(posting).data)

    @action(detail=True, methods=["get"])
    def account(self, request, pk=None):
        account = self.get_visible(LedgerQueryService.get_account_for_transaction)
        return Response(AccountSerializer(account).data)


# -------------------------------------------------------------------
# EXPENSE CATEGORIES
# -------------------------------------------------------------------


class ExpenseCategoryViewSet(mixins.ListModelMixin, LedgerViewSet):
    """
    Shared category tree: readable by everyone, writable by the Admin role.
    """

    serializer_class = ExpenseCategorySerializer
    permission_classes = [IsAdminRoleOrReadOnly]

    def get_queryset(self):
        return CategoryService.get_categories()

    def retrieve(self, request, pk=None):
        category = CategoryService.get_category(self.get_object_id())
        if category is None:
            raise NotFound()
        return Response(self.get_serializer(category).data)

    def create(self, request):
        payload = ExpenseCategoryCreateSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        data = payload.validated_data

        category = self.handle_service_call(
            CategoryService.create_category, data["name"], parent_id=data["parent"]
        )
        return Response(self.get_serializer(category).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"])
    def move(self, request, pk=None):
        payload = ExpenseCategoryMoveSerializer(data=request.data)
        payload.is_valid(raise_exception=True)

        category = self.handle_service_call(
            CategoryService.move_category,
            self.get_object_id(),
            payload.validated_data["parent"],
        )
        return Response(self.get_serializer(category).data)

    @action(detail=True, methods=["get"])
    def parent(self, request, pk=None):
        category_id = self.get_object_id()
        if CategoryService.get_category(category_id) is None:
            raise NotFound()
        parent = CategoryService.get_parent(category_id)
        if parent is None:
            raise NotFound("Root categories have no parent.")
        return Response(self.get_serializer(parent).data)
