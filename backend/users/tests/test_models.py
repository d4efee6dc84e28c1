# users/tests/test_models.py

import pytest
from django.contrib.auth import get_user_model
from django.db import IntegrityError

User = get_user_model()


@pytest.mark.django_db
class TestCustomUserManager:
    def test_create_user_defaults(self):
        user = User.objects.create_user(email="plain@example.com", password="pw")

        assert user.role == User.ROLE_BASIC
        assert not user.is_staff
        assert not user.is_superuser
        assert not user.is_admin_role
        assert user.username is None

    def test_create_user_requires_email(self):
        with pytest.raises(ValueError):
            User.objects.create_user(email="", password="pw")

    def test_create_superuser_is_admin_role(self):
        user = User.objects.create_superuser(email="root@example.com", password="pw")

        assert user.is_staff
        assert user.is_superuser
        assert user.is_admin_role

    def test_create_superuser_rejects_non_staff(self):
        with pytest.raises(ValueError):
            User.objects.create_superuser(email="x@example.com", password="pw", is_staff=False)

    def test_email_unique(self):
        User.objects.create_user(email="same@example.com", password="pw")
        with pytest.raises(IntegrityError):
            User.objects.create_user(email="same@example.com", password="pw")


@pytest.mark.django_db
def test_str_prefers_username():
    named = User.objects.create_user(email="named@example.com", password="pw", username="named")
    anonymous = User.objects.create_user(email="anon@example.com", password="pw")

    assert str(named) == "named"
    assert str(anonymous) == f"User {anonymous.id} (anon@example.com)"
