from django.contrib import admin

from .models import Account, Expense, ExpenseCategory, Income, Transaction, Transfer


@admin.register(Account)
class AccountAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "type", "state", "user", "initial_amount", "created_at")
    list_filter = ("type", "state")
    search_fields = ("name", "user__email")
    # Changes to the initial amount must go through AccountService to be posted
    readonly_fields = ("initial_amount",)


@admin.register(ExpenseCategory)
class ExpenseCategoryAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "parent")
    search_fields = ("name",)


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    """Postings are append-only."""

    list_display = ("id", "account", "debit", "credit", "balance", "description", "date")
    list_filter = ("account",)
    ordering = ("-id",)

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


class ReadOnlyLedgerEntityAdmin(admin.ModelAdmin):
    """Incomes, expenses and transfers are changed through the ledger API only."""

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Income)
class IncomeAdmin(ReadOnlyLedgerEntityAdmin):
    list_display = ("id", "account", "amount", "source", "date")


@admin.register(Expense)
class ExpenseAdmin(ReadOnlyLedgerEntityAdmin):
    list_display = ("id", "account", "category", "amount", "date")


@admin.register(Transfer)
class TransferAdmin(ReadOnlyLedgerEntityAdmin):
    list_display = ("id", "from_account", "to_account", "amount", "date")
