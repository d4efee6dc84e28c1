"""
Exceptions raised by the ledger services.

`UnauthorizedError` subclasses PermissionError so the service exception
handler maps it to an HTTP 403 alongside other permission failures.
"""


class LedgerError(Exception):
    """Base class for ledger failures."""


class UnauthorizedError(LedgerError, PermissionError):
    """The acting user does not own the account(s) an operation touches."""

    def __init__(self, message="Unauthorized", user_id=None, account_ids=None):
        super().__init__(message)
        self.user_id = user_id
        self.account_ids = list(account_ids or [])


class EntityNotFoundError(LedgerError):
    """A referenced entity does not exist."""

    def __init__(self, entity, entity_id):
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id
