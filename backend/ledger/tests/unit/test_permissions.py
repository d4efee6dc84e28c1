# ledger/tests/unit/test_permissions.py

from unittest.mock import Mock, patch

import pytest
from django.contrib.auth.models import AnonymousUser
from rest_framework.test import APIRequestFactory

from ledger.permissions import IsAdminRoleOrReadOnly


@pytest.fixture
def factory():
    return APIRequestFactory()


@pytest.mark.django_db
class TestIsAdminRoleOrReadOnly:
    def setup_method(self, method):
        self.permission = IsAdminRoleOrReadOnly()
        self.view = Mock()

    def _request(self, factory, method, user):
        request = getattr(factory, method)("/api/ledger/expense-categories/")
        request.user = user
        return request

    def test_anonymous_denied(self, factory):
        assert not self.permission.has_permission(
            self._request(factory, "get", AnonymousUser()), self.view
        )

    def test_basic_user_can_read(self, factory, test_user):
        assert self.permission.has_permission(self._request(factory, "get", test_user), self.view)

    @patch("ledger.permissions.logger")
    def test_basic_user_cannot_write(self, mock_logger, factory, test_user):
        assert not self.permission.has_permission(
            self._request(factory, "post", test_user), self.view
        )
        extra = mock_logger.warning.call_args[1]["extra"]
        assert extra["action"] == "admin_role_access_denied"
        assert extra["user_id"] == test_user.id

    def test_admin_can_write(self, factory, admin_user):
        assert self.permission.has_permission(self._request(factory, "post", admin_user), self.view)
