#!/usr/bin/env python
"""
Command-line entry point for the Personal Ledger backend.

Runs Django management commands such as `migrate`, `runserver` and
`verify_ledger`. Settings default to development unless
DJANGO_SETTINGS_MODULE is set (core.settings.ppe, core.settings.production).
"""

import os
import sys


def main():
    """Run administrative tasks."""
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "core.settings.dev")

    try:
        from django.core.management import execute_from_command_line
    except ImportError as exc:
        raise ImportError(
            "Couldn't import Django. Are you sure it's installed and "
            "available on your PYTHONPATH environment variable? Did you "
            "forget to activate a virtual environment?"
        ) from exc

    execute_from_command_line(sys.argv)


if __name__ == "__main__":
    main()
