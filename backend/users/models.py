"""
User models for the Personal Ledger application.

This module defines the CustomUser model which extends Django's AbstractUser
with an application role and email-based login.
"""

from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.db import models


class CustomUserManager(BaseUserManager):
    """
    Manager creating users identified by email instead of username.
    """

    use_in_migrations = True

    def _create_user(self, email, password, **extra_fields):
        if not email:
            raise ValueError("Users must have an email address")
        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, email, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        extra_fields.setdefault("role", CustomUser.ROLE_BASIC)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("role", CustomUser.ROLE_ADMIN)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")

        return self._create_user(email, password, **extra_fields)


class CustomUser(AbstractUser):
    """
    Custom user model extending Django's AbstractUser.

    Users log in with their email address. Every user carries a role:
    `Admin` users may manage the shared expense category tree, `Basic`
    users only their own accounts and ledger entries.
    """

    ROLE_ADMIN = "Admin"
    ROLE_BASIC = "Basic"
    ROLE_CHOICES = [
        (ROLE_ADMIN, "Admin"),
        (ROLE_BASIC, "Basic"),
    ]

    # Email field - unique and required for all users
    email = models.EmailField(
        unique=True,
        blank=False,
        help_text="User's unique email address, used to log in",
    )

    # Username is kept optional; email is the login identifier
    username = models.CharField(
        max_length=150,
        unique=True,
        null=True,
        blank=True,
        help_text="Optional display username",
    )

    role = models.CharField(
        max_length=10,
        choices=ROLE_CHOICES,
        default=ROLE_BASIC,
        help_text="Application role: Admin or Basic",
    )

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    objects = CustomUserManager()

    @property
    def is_admin_role(self):
        """True when the user holds the Admin application role."""
        return self.role == self.ROLE_ADMIN

    def __str__(self):
        """
        String representation of the user model.

        Returns:
            str: The username if available, otherwise a default representation
        """
        return self.username or f"User {self.id} ({self.email})"
