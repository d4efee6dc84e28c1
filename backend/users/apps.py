"""
Django AppConfig for the users application.

Registers the custom user model app within the Personal Ledger project.
"""

from django.apps import AppConfig


class UsersConfig(AppConfig):
    """
    Configuration class for the users application.
    """

    # Use BigAutoField as default for primary keys
    default_auto_field = "django.db.models.BigAutoField"

    # Application name (Python path)
    name = "users"
    verbose_name = "Users"
