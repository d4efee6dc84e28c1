# users/tests/test_views.py

from unittest.mock import patch

import pytest
from django.contrib.auth import get_user_model
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase
from rest_framework_simplejwt.tokens import RefreshToken

from ledger.tests.factories import UserFactory
from users.services import UserAlreadyExistsError, UserService

User = get_user_model()


class BaseUserAPITestCase(APITestCase):
    """Base test case for user-related API tests."""

    def setUp(self):
        super().setUp()
        self.user = UserFactory(email="test@example.com", first_name="Ada", last_name="Lovelace")
        self._authenticate_user(self.user)

    def _authenticate_user(self, user):
        """Authenticate user and return access token."""
        refresh = RefreshToken.for_user(user)
        access_token = str(refresh.access_token)
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {access_token}")
        return access_token


class CurrentUserViewTests(BaseUserAPITestCase):
    def test_returns_authenticated_user(self):
        response = self.client.get(reverse("users:me"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["id"], self.user.id)
        self.assertEqual(response.data["email"], "test@example.com")
        self.assertEqual(response.data["first_name"], "Ada")
        self.assertEqual(response.data["role"], "Basic")

    def test_requires_authentication(self):
        self.client.credentials()
        response = self.client.get(reverse("users:me"))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class RegisterViewTests(BaseUserAPITestCase):
    def test_registration_works_with_stale_credentials(self):
        self.client.credentials(HTTP_AUTHORIZATION="Bearer not-a-token")
        response = self.client.post(
            reverse("users:register"),
            {"email": "fresh@example.com", "password": "freshpass123"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)


class LogoutViewTests(BaseUserAPITestCase):
    @patch("users.views.logger")
    def test_logout_invalid_token_logged(self, mock_logger):
        response = self.client.post(reverse("users:logout"), {"refresh": "a.b.c"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        mock_logger.warning.assert_called_once()


@pytest.mark.django_db
class TestUserService:
    def test_register_creates_basic_user(self):
        user = UserService.register_user("Someone@Example.COM", "pw123456", "Some", "One")

        assert user.role == User.ROLE_BASIC
        assert user.email == "Someone@example.com"
        assert user.check_password("pw123456")

    def test_duplicate_email_case_insensitive(self):
        UserService.register_user("dup@example.com", "pw123456")
        with pytest.raises(UserAlreadyExistsError):
            UserService.register_user("DUP@example.com", "pw123456")

    @patch("users.services.logger")
    def test_registration_is_logged(self, mock_logger):
        user = UserService.register_user("log@example.com", "pw123456")

        extra = mock_logger.info.call_args[1]["extra"]
        assert extra["action"] == "user_registered"
        assert extra["user_id"] == user.id
