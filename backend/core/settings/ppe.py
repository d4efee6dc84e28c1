# flake8: noqa
"""
Pre-production environment settings for the Personal Ledger backend.

This configuration extends base settings with pre-production values:
stricter security, a managed PostgreSQL instance and JSON file logging.
"""

import logging

from .base import *
from .utils import load_environment_config

# Load environment configuration
config = load_environment_config("pre-production")

# Environment identification
ENVIRONMENT = "pre-production"

# Security settings for pre-production
DEBUG = False
SECRET_KEY = config("SECRET_KEY")
ALLOWED_HOSTS = [
    "ppe.personal-ledger.com",
    "api.ppe.personal-ledger.com",
    "localhost",  # For local testing
]

# CORS settings for pre-production
CORS_ALLOWED_ORIGINS = [
    "https://ppe.personal-ledger.com",
]
CORS_ALLOW_ALL_ORIGINS = False

# Database configuration for pre-production
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": config("POSTGRES_DB"),
        "USER": config("POSTGRES_USER"),
        "PASSWORD": config("POSTGRES_PASSWORD"),
        "HOST": config("DB_HOST"),
        "PORT": "5432",
    }
}

LEDGER["TRANSFER_DELETE_REQUIRES_OWNERSHIP"] = config(
    "LEDGER_TRANSFER_DELETE_REQUIRES_OWNERSHIP", default=True, cast=bool
)

# Structured logging for pre-production with JSON format
LOGGING["handlers"]["ppe_file"] = {
    "level": "INFO",
    "class": "logging.handlers.RotatingFileHandler",
    "filename": "/var/log/django/ppe.log",
    "maxBytes": 1024 * 1024 * 50,  # 50MB for PPE
    "backupCount": 10,
    "formatter": "json",
    "encoding": "utf-8",
}

LOGGING["handlers"]["ppe_errors"] = {
    "level": "ERROR",
    "class": "logging.handlers.RotatingFileHandler",
    "filename": "/var/log/django/ppe_errors.log",
    "maxBytes": 1024 * 1024 * 20,  # 20MB
    "backupCount": 10,
    "formatter": "json",
    "encoding": "utf-8",
}

for logger_name in ["django", "users", "ledger"]:
    if logger_name in LOGGING["loggers"]:
        LOGGING["loggers"][logger_name]["handlers"] = [
            "console",
            "ppe_file",
            "ppe_errors",
        ]
        LOGGING["loggers"][logger_name]["level"] = "INFO"

LOGGING["loggers"]["django.db.backends"]["level"] = "WARNING"

# Ensure log directory exists (for local PPE testing)
os.makedirs("/var/log/django", exist_ok=True)

logger = logging.getLogger(__name__)
logger.info(
    "Pre-production environment initialized",
    extra={
        "environment": ENVIRONMENT,
        "debug_mode": DEBUG,
        "allowed_hosts": ALLOWED_HOSTS,
        "action": "environment_startup",
        "component": "settings",
    },
)
# Static files for the admin
MIDDLEWARE.insert(1, "whitenoise.middleware.WhiteNoiseMiddleware")

print(f"=== Running in {ENVIRONMENT} mode ===")
