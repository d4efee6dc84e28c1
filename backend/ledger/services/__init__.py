from .account_service import AccountService
from .balance_service import BalanceService, LedgerMismatch
from .category_service import CategoryService
from .ledger_service import LedgerService
from .query_service import LedgerQueryService

__all__ = [
    "AccountService",
    "BalanceService",
    "CategoryService",
    "LedgerMismatch",
    "LedgerQueryService",
    "LedgerService",
]
