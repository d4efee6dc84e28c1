# ledger/tests/unit/test_command_verify_ledger.py

from decimal import Decimal
from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from ledger.models import Transaction
from ledger.services.balance_service import BalanceService


@pytest.mark.django_db
class TestVerifyLedgerCommand:
    def test_consistent_ledgers(self, bank_account, cash_account):
        out = StringIO()
        call_command("verify_ledger", stdout=out)

        output = out.getvalue()
        assert "Verifying 2 account(s)" in output
        assert "All ledgers are consistent" in output

    def test_mismatch_fails(self, bank_account, cash_account):
        posting = BalanceService.append_posting(bank_account.id, debit=Decimal("10.00"))
        Transaction.objects.filter(pk=posting.pk).update(balance=Decimal("1.00"))
        out = StringIO()

        with pytest.raises(CommandError, match="1 account"):
            call_command("verify_ledger", stdout=out)

        output = out.getvalue()
        assert f"Account {bank_account.id}: 1 inconsistent posting(s)" in output
        assert "owner: test@example.com" in output
        assert f"transaction {posting.id}: expected 990.00, stored 1.00" in output

    def test_single_account_option(self, bank_account, cash_account):
        posting = BalanceService.append_posting(bank_account.id, debit=Decimal("10.00"))
        Transaction.objects.filter(pk=posting.pk).update(balance=Decimal("1.00"))
        out = StringIO()

        call_command("verify_ledger", "--account", str(cash_account.id), stdout=out)

        assert "Verifying 1 account(s)" in out.getvalue()

    def test_unknown_account(self, db):
        with pytest.raises(CommandError, match="Unknown account"):
            call_command("verify_ledger", "--account", "4711", stdout=StringIO())
