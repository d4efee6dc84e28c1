# ledger/tests/conftest.py
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.utils import timezone
from rest_framework.test import APIClient

from ledger.models import ExpenseCategory
from ledger.services.account_service import AccountService

User = get_user_model()

# =============================================================================
# USER FIXTURES
# =============================================================================


@pytest.fixture
def test_user(db):
    """Basic user owning the test accounts"""
    return User.objects.create_user(email="test@example.com", password="testpass123")


@pytest.fixture
def test_user2(db):
    """Second Basic user, never owns the test accounts"""
    return User.objects.create_user(email="test2@example.com", password="testpass123")


@pytest.fixture
def admin_user(db):
    """User with the Admin application role"""
    return User.objects.create_user(
        email="admin@example.com", password="adminpass123", role=User.ROLE_ADMIN
    )


# =============================================================================
# ACCOUNT FIXTURES
# =============================================================================


@pytest.fixture
def bank_account(db, test_user):
    """Bank account opened with 1000.00 through AccountService"""
    return AccountService.create_account(
        test_user.id, "Main bank", "Bank", Decimal("1000.00")
    )


@pytest.fixture
def cash_account(db, test_user):
    """Cash wallet opened with 200.00 through AccountService"""
    return AccountService.create_account(
        test_user.id, "Wallet", "Cash", Decimal("200.00")
    )


@pytest.fixture
def foreign_account(db, test_user2):
    """Account of the second user"""
    return AccountService.create_account(
        test_user2.id, "Foreign bank", "Bank", Decimal("500.00")
    )


# =============================================================================
# CATEGORY FIXTURES
# =============================================================================


@pytest.fixture
def category_tree(db):
    """Root -> Mid -> Leaf chain plus a second root"""
    root = ExpenseCategory.objects.create(name="Home")
    mid = ExpenseCategory.objects.create(name="Utilities", parent=root)
    leaf = ExpenseCategory.objects.create(name="Water", parent=mid)
    other = ExpenseCategory.objects.create(name="Food")
    return {"root": root, "mid": mid, "leaf": leaf, "other": other}


# =============================================================================
# MISC FIXTURES
# =============================================================================


@pytest.fixture
def now():
    return timezone.now()


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def authenticated_client(api_client, test_user):
    api_client.force_authenticate(user=test_user)
    return api_client
