from django.core.management.base import BaseCommand, CommandError

from ledger.models import Account
from ledger.services.account_service import AccountService
from ledger.services.balance_service import BalanceService


class Command(BaseCommand):
    help = "Replay account postings and report balances that do not add up"

    def add_arguments(self, parser):
        parser.add_argument(
            "--account",
            type=int,
            action="append",
            dest="accounts",
            help="Account id to verify (repeatable, defaults to every account)",
        )

    def handle(self, *args, **options):
        account_ids = options.get("accounts")

        if account_ids:
            existing = set(
                Account.objects.filter(pk__in=account_ids).values_list("id", flat=True)
            )
            missing = [account_id for account_id in account_ids if account_id not in existing]
            if missing:
                raise CommandError(
                    f"Unknown account id(s): {', '.join(str(account_id) for account_id in missing)}"
                )
            checked = len(account_ids)
        else:
            checked = Account.objects.count()

        self.stdout.write(f"Verifying {checked} account(s)")

        broken = BalanceService.verify_all(account_ids)

        for account_id, mismatches in broken.items():
            self.stdout.write(
                self.style.ERROR(f"Account {account_id}: {len(mismatches)} inconsistent posting(s)")
            )
            owner = AccountService.get_user_for_account(account_id)
            if owner is not None:
                self.stdout.write(f"   owner: {owner.email}")
            for mismatch in mismatches:
                self.stdout.write(
                    f"   transaction {mismatch.transaction_id}: "
                    f"expected {mismatch.expected_balance}, stored {mismatch.stored_balance}"
                )

        self.stdout.write("=" * 50)
        if broken:
            raise CommandError(f"Found inconsistent ledgers on {len(broken)} account(s)")

        self.stdout.write(self.style.SUCCESS("All ledgers are consistent"))
