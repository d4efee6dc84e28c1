"""
URL configuration for the ledger API.

Every resource is a router-registered viewset mounted under /api/ledger/.
"""

import logging

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from . import views

# Get structured logger for this module
logger = logging.getLogger(__name__)

app_name = "ledger"

router = DefaultRouter()

# Accounts with computed current balance
router.register(r"accounts", views.AccountViewSet, basename="account")

# Balance-affecting entities
router.register(r"expenses", views.ExpenseViewSet, basename="expense")
router.register(r"incomes", views.IncomeViewSet, basename="income")
router.register(r"transfers", views.TransferViewSet, basename="transfer")

# Postings (read-only)
router.register(r"transactions", views.TransactionViewSet, basename="transaction")

# Shared category tree
router.register(
    r"expense-categories", views.ExpenseCategoryViewSet, basename="expensecategory"
)

urlpatterns = [
    path("", include(router.urls)),
]

logger.debug(
    "Ledger API URLs configured",
    extra={
        "registered_viewsets": [prefix for prefix, _viewset, _basename in router.registry],
        "action": "url_configuration_loaded",
        "component": "urls",
    },
)
