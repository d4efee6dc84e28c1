"""
Service for account running balances.

The current balance of an account is the `balance` of its newest posting.
`append_posting` is the only code path that writes postings: it locks the
account row, reads the current balance and inserts the next posting inside
one atomic block, so postings on the same account are applied strictly in
order.
"""

import collections
import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django.core.exceptions import ValidationError
from django.db import transaction as db_transaction

from ..exceptions import EntityNotFoundError
from ..models import MONEY_DECIMALS, Account, Transaction

# Get structured logger for this module
logger = logging.getLogger(__name__)

ZERO = Decimal("0")
CENT = Decimal(1).scaleb(-MONEY_DECIMALS)

LedgerMismatch = collections.namedtuple(
    "LedgerMismatch", ["transaction_id", "expected_balance", "stored_balance"]
)


def to_amount(value):
    """
    Coerce a number to a Decimal rounded to the money precision.

    Raises:
        ValidationError: If the value is not a finite number
    """
    if isinstance(value, float):
        value = str(value)
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError("Amount must be a valid number")
    if not amount.is_finite():
        raise ValidationError("Amount must be a valid number")
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


class BalanceService:
    """
    Reads and appends account postings.
    """

    @staticmethod
    def current_balance(account_id):
        """
        Balance left by the newest posting of the account.

        Ordering is by posting id (insertion order), never by date.

        Returns:
            Decimal: The running balance, 0 when the account has no postings
        """
        balance = (
            Transaction.objects.filter(account_id=account_id)
            .order_by("-id")
            .values_list("balance", flat=True)
            .first()
        )
        return balance if balance is not None else ZERO

    @staticmethod
    def lock_accounts(*account_ids):
        """
        Lock several account rows in ascending id order.

        Must run inside an atomic block. Operations posting to more than one
        account call this before their first posting.

        Returns:
            list[int]: Ids of the locked accounts, ascending
        """
        locked = list(
            Account.objects.select_for_update()
            .filter(pk__in=set(account_ids))
            .order_by("id")
            .values_list("id", flat=True)
        )
        logger.debug(
            "Accounts locked",
            extra={
                "account_ids": locked,
                "action": "accounts_locked",
                "component": "BalanceService",
            },
        )
        return locked

    @staticmethod
    @db_transaction.atomic
    def append_posting(account_id, debit=ZERO, credit=ZERO, description=""):
        """
        Append a posting moving the account balance by `credit - debit`.

        Args:
            account_id: Account receiving the posting
            debit: Amount decreasing the balance
            credit: Amount increasing the balance
            description: Human readable reason for the posting

        Returns:
            Transaction: The inserted posting

        Raises:
            EntityNotFoundError: If the account does not exist
        """
        debit = to_amount(debit)
        credit = to_amount(credit)

        # Serialize writers of the same account until the outer transaction ends
        locked = list(
            Account.objects.select_for_update().filter(pk=account_id).only("id")
        )
        if not locked:
            raise EntityNotFoundError("Account", account_id)

        previous_balance = BalanceService.current_balance(account_id)
        posting = Transaction.objects.create(
            account_id=account_id,
            debit=debit,
            credit=credit,
            balance=previous_balance + credit - debit,
            description=description,
        )

        logger.debug(
            "Posting appended",
            extra={
                "account_id": account_id,
                "transaction_id": posting.id,
                "debit": str(debit),
                "credit": str(credit),
                "previous_balance": str(previous_balance),
                "balance": str(posting.balance),
                "action": "posting_appended",
                "component": "BalanceService",
            },
        )
        return posting

    @staticmethod
    def replay(account_id):
        """
        Fold the postings of an account and report inconsistent rows.

        Each posting must satisfy
        `balance == previous balance + credit - debit`, the first posting
        folding from 0.

        Returns:
            list[LedgerMismatch]: Empty when the ledger is consistent
        """
        mismatches = []
        previous_balance = ZERO

        postings = (
            Transaction.objects.filter(account_id=account_id)
            .order_by("id")
            .only("id", "debit", "credit", "balance")
        )
        for posting in postings.iterator(chunk_size=2000):
            expected = previous_balance + posting.credit - posting.debit
            if expected != posting.balance:
                mismatches.append(
                    LedgerMismatch(posting.id, expected, posting.balance)
                )
            previous_balance = posting.balance

        if mismatches:
            logger.error(
                "Ledger replay found inconsistent postings",
                extra={
                    "account_id": account_id,
                    "mismatch_count": len(mismatches),
                    "first_transaction_id": mismatches[0].transaction_id,
                    "action": "ledger_replay_mismatch",
                    "component": "BalanceService",
                    "severity": "critical",
                },
            )
        return mismatches

    @staticmethod
    def verify_all(account_ids=None):
        """
        Replay every account (or the given ones).

        Returns:
            dict: account id -> list of mismatches, only for broken accounts
        """
        if account_ids is None:
            account_ids = Account.objects.order_by("id").values_list("id", flat=True)

        broken = {}
        checked = 0
        for account_id in account_ids:
            checked += 1
            mismatches = BalanceService.replay(account_id)
            if mismatches:
                broken[account_id] = mismatches

        logger.info(
            "Ledger verification completed",
            extra={
                "accounts_checked": checked,
                "accounts_broken": len(broken),
                "action": "ledger_verification_completed",
                "component": "BalanceService",
            },
        )
        return broken
