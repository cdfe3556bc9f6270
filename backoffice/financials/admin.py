from django.contrib import admin
from .models import (
    AccountType, AccountCategory, GLAccount, AccountingPeriod, NumberingSeries,
    JournalEntry, JournalEntryLine, BankAccount
)


@admin.register(AccountType)
class AccountTypeAdmin(admin.ModelAdmin):
    list_display = ['name', 'default_normal_balance']


@admin.register(AccountCategory)
class AccountCategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'code', 'account_type', 'business_unit']
    list_filter = ['business_unit', 'account_type']
    search_fields = ['name', 'code']


@admin.register(GLAccount)
class GLAccountAdmin(admin.ModelAdmin):
    list_display = ['account_code', 'name', 'account_type', 'normal_balance', 'balance', 'is_active', 'business_unit']
    list_filter = ['business_unit', 'account_type', 'is_active', 'is_control_account']
    search_fields = ['account_code', 'name']
    ordering = ['business_unit', 'account_code']
    readonly_fields = ['balance', 'created_at', 'updated_at']


@admin.register(AccountingPeriod)
class AccountingPeriodAdmin(admin.ModelAdmin):
    list_display = ['name', 'fiscal_year', 'period_number', 'start_date', 'end_date', 'status', 'business_unit']
    list_filter = ['business_unit', 'fiscal_year', 'status']
    ordering = ['business_unit', 'start_date']


@admin.register(NumberingSeries)
class NumberingSeriesAdmin(admin.ModelAdmin):
    list_display = ['name', 'document_type', 'prefix', 'next_number', 'business_unit']
    list_filter = ['business_unit', 'document_type']


class JournalEntryLineInline(admin.TabularInline):
    model = JournalEntryLine
    extra = 0
    readonly_fields = ['gl_account', 'debit', 'credit', 'description']


@admin.register(JournalEntry)
class JournalEntryAdmin(admin.ModelAdmin):
    list_display = ['doc_num', 'posting_date', 'approval_workflow_status', 'is_posted', 'author', 'business_unit']
    list_filter = ['business_unit', 'approval_workflow_status', 'is_posted', 'posting_date']
    search_fields = ['doc_num', 'memo', 'reference_number']
    ordering = ['-posting_date']
    date_hierarchy = 'posting_date'
    inlines = [JournalEntryLineInline]
    readonly_fields = ['is_posted', 'posted_at', 'posted_by', 'created_at', 'updated_at']


@admin.register(BankAccount)
class BankAccountAdmin(admin.ModelAdmin):
    list_display = ['name', 'bank_name', 'account_number', 'gl_account', 'currency', 'business_unit']
    list_filter = ['business_unit', 'currency']
    search_fields = ['name', 'bank_name', 'account_number']
