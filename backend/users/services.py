"""
Service for user registration.

Registration always creates `Basic` users; the Admin role is assigned through
the Django admin or `createsuperuser`.
"""

import logging

from django.db import IntegrityError, transaction

from .models import CustomUser

logger = logging.getLogger(__name__)


class UserAlreadyExistsError(Exception):
    """Raised when registering an email that already belongs to a user."""


class UserService:
    """
    Service for user lifecycle operations.
    """

    @staticmethod
    @transaction.atomic
    def register_user(email, password, first_name="", last_name=""):
        """
        Create a Basic user.

        Args:
            email: Login email, normalized by the manager
            password: Raw password, hashed by Django's configured hasher
            first_name: Optional first name
            last_name: Optional last name

        Returns:
            CustomUser: The created user

        Raises:
            UserAlreadyExistsError: If the email is already registered
        """
        email = CustomUser.objects.normalize_email(email)

        if CustomUser.objects.filter(email__iexact=email).exists():
            logger.warning(
                "Registration rejected - email already registered",
                extra={
                    "email": email,
                    "action": "user_registration_duplicate",
                    "component": "UserService",
                    "severity": "low",
                },
            )
            raise UserAlreadyExistsError("User already exists!")

        try:
            user = CustomUser.objects.create_user(
                email=email,
                password=password,
                first_name=first_name,
                last_name=last_name,
                role=CustomUser.ROLE_BASIC,
            )
        except IntegrityError as e:
            # Lost a race against a concurrent registration of the same email
            raise UserAlreadyExistsError("User already exists!") from e

        logger.info(
            "User registered",
            extra={
                "user_id": user.id,
                "role": user.role,
                "action": "user_registered",
                "component": "UserService",
            },
        )
        return user
