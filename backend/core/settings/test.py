# flake8: noqa
"""
Test settings for the Personal Ledger backend.

Uses an in-memory SQLite database and a fast password hasher so the
pytest-django suite runs without external services.
"""

from .base import *

ENVIRONMENT = "test"

DEBUG = False
SECRET_KEY = "django-insecure-test-key"
ALLOWED_HOSTS = ["testserver", "localhost"]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]
AUTH_PASSWORD_VALIDATORS = []

LEDGER = {
    "TRANSFER_DELETE_REQUIRES_OWNERSHIP": True,
    "UNKNOWN_CATEGORY_LABEL": "Unknown",
}

# Keep test output quiet; assertions on log calls patch the module loggers
for logger_name in ["django", "users", "ledger"]:
    LOGGING["loggers"][logger_name]["level"] = "WARNING"
