from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models

from backoffice.core.models import BusinessUnit

DEBIT = 'DEBIT'
CREDIT = 'CREDIT'
NORMAL_BALANCE_CHOICES = [
    (DEBIT, 'Debit'),
    (CREDIT, 'Credit'),
]


class AccountType(models.Model):
    """Top-level classification of GL accounts, shared by all business units"""
    ASSET = 'ASSET'
    LIABILITY = 'LIABILITY'
    EQUITY = 'EQUITY'
    REVENUE = 'REVENUE'
    EXPENSE = 'EXPENSE'

    NAME_CHOICES = [
        (ASSET, 'Asset'),
        (LIABILITY, 'Liability'),
        (EQUITY, 'Equity'),
        (REVENUE, 'Revenue'),
        (EXPENSE, 'Expense'),
    ]

    DEFAULT_NORMAL_BALANCES = {
        ASSET: DEBIT,
        LIABILITY: CREDIT,
        EQUITY: CREDIT,
        REVENUE: CREDIT,
        EXPENSE: DEBIT,
    }

    name = models.CharField(max_length=20, choices=NAME_CHOICES, unique=True)
    default_normal_balance = models.CharField(max_length=6, choices=NORMAL_BALANCE_CHOICES)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'account_types'
        ordering = ['id']


class AccountCategory(models.Model):
    business_unit = models.ForeignKey(BusinessUnit, on_delete=models.CASCADE, related_name='account_categories')
    name = models.CharField(max_length=100)
    code = models.CharField(max_length=20, blank=True)
    account_type = models.ForeignKey(AccountType, on_delete=models.PROTECT, related_name='categories')
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'account_categories'
        ordering = ['code', 'name']
        unique_together = ['business_unit', 'name']
        verbose_name_plural = 'Account categories'


class GLAccount(models.Model):
    """General ledger account"""
    business_unit = models.ForeignKey(BusinessUnit, on_delete=models.CASCADE, related_name='gl_accounts')
    account_code = models.CharField(max_length=20)
    name = models.CharField(max_length=200)
    account_type = models.ForeignKey(AccountType, on_delete=models.PROTECT, related_name='accounts')
    category = models.ForeignKey(AccountCategory, on_delete=models.SET_NULL, null=True, blank=True, related_name='accounts')
    normal_balance = models.CharField(max_length=6, choices=NORMAL_BALANCE_CHOICES)
    balance = models.DecimalField(max_digits=18, decimal_places=2, default=Decimal('0.00'))
    description = models.TextField(blank=True)
    is_control_account = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.account_code} - {self.name}"

    def save(self, *args, **kwargs):
        if not self.normal_balance and self.account_type_id:
            self.normal_balance = AccountType.DEFAULT_NORMAL_BALANCES.get(self.account_type.name, DEBIT)
        super().save(*args, **kwargs)

    def apply_amounts(self, debit, credit):
        """Move the running balance in the direction of the normal balance"""
        if self.normal_balance == DEBIT:
            self.balance += debit - credit
        else:
            self.balance += credit - debit

    class Meta:
        db_table = 'gl_accounts'
        ordering = ['account_code']
        unique_together = ['business_unit', 'account_code']


class AccountingPeriod(models.Model):
    MONTHLY = 'MONTHLY'
    QUARTERLY = 'QUARTERLY'
    YEARLY = 'YEARLY'
    TYPE_CHOICES = [
        (MONTHLY, 'Monthly'),
        (QUARTERLY, 'Quarterly'),
        (YEARLY, 'Yearly'),
    ]

    OPEN = 'OPEN'
    CLOSED = 'CLOSED'
    LOCKED = 'LOCKED'
    STATUS_CHOICES = [
        (OPEN, 'Open'),
        (CLOSED, 'Closed'),
        (LOCKED, 'Locked'),
    ]

    business_unit = models.ForeignKey(BusinessUnit, on_delete=models.CASCADE, related_name='accounting_periods')
    name = models.CharField(max_length=100)
    start_date = models.DateField()
    end_date = models.DateField()
    fiscal_year = models.IntegerField()
    period_number = models.IntegerField(validators=[MinValueValidator(1), MaxValueValidator(13)])
    type = models.CharField(max_length=10, choices=TYPE_CHOICES, default=MONTHLY)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=OPEN)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'accounting_periods'
        ordering = ['-fiscal_year', 'period_number']
        unique_together = ['business_unit', 'fiscal_year', 'period_number']


class NumberingSeries(models.Model):
    """Document number generator per business unit and document type"""
    PURCHASE_REQUEST = 'PURCHASE_REQUEST'
    PURCHASE_ORDER = 'PURCHASE_ORDER'
    GOODS_RECEIPT_PO = 'GOODS_RECEIPT_PO'
    AP_INVOICE = 'AP_INVOICE'
    OUTGOING_PAYMENT = 'OUTGOING_PAYMENT'
    SALES_QUOTATION = 'SALES_QUOTATION'
    AR_INVOICE = 'AR_INVOICE'
    INCOMING_PAYMENT = 'INCOMING_PAYMENT'
    JOURNAL_ENTRY = 'JOURNAL_ENTRY'
    STOCK_REQUISITION = 'STOCK_REQUISITION'

    DOCUMENT_TYPE_CHOICES = [
        (PURCHASE_REQUEST, 'Purchase Request'),
        (PURCHASE_ORDER, 'Purchase Order'),
        (GOODS_RECEIPT_PO, 'Goods Receipt PO'),
        (AP_INVOICE, 'A/P Invoice'),
        (OUTGOING_PAYMENT, 'Outgoing Payment'),
        (SALES_QUOTATION, 'Sales Quotation'),
        (AR_INVOICE, 'A/R Invoice'),
        (INCOMING_PAYMENT, 'Incoming Payment'),
        (JOURNAL_ENTRY, 'Journal Entry'),
        (STOCK_REQUISITION, 'Stock Requisition'),
    ]

    DEFAULT_PREFIXES = {
        PURCHASE_REQUEST: 'PR-',
        PURCHASE_ORDER: 'PO-',
        GOODS_RECEIPT_PO: 'GRPO-',
        AP_INVOICE: 'APINV-',
        OUTGOING_PAYMENT: 'OP-',
        SALES_QUOTATION: 'SQ-',
        AR_INVOICE: 'ARINV-',
        INCOMING_PAYMENT: 'IP-',
        JOURNAL_ENTRY: 'JE-',
        STOCK_REQUISITION: 'REQ-',
    }

    business_unit = models.ForeignKey(BusinessUnit, on_delete=models.CASCADE, related_name='numbering_series')
    name = models.CharField(max_length=100)
    prefix = models.CharField(max_length=20)
    next_number = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    document_type = models.CharField(max_length=30, choices=DOCUMENT_TYPE_CHOICES)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.name} ({self.prefix})"

    class Meta:
        db_table = 'numbering_series'
        ordering = ['document_type']
        unique_together = ['business_unit', 'document_type']
        verbose_name_plural = 'Numbering series'


class JournalEntry(models.Model):
    DRAFT = 'DRAFT'
    SUBMITTED = 'SUBMITTED'
    APPROVED = 'APPROVED'
    REJECTED = 'REJECTED'
    WORKFLOW_STATUS_CHOICES = [
        (DRAFT, 'Draft'),
        (SUBMITTED, 'Submitted'),
        (APPROVED, 'Approved'),
        (REJECTED, 'Rejected'),
    ]

    business_unit = models.ForeignKey(BusinessUnit, on_delete=models.CASCADE, related_name='journal_entries')
    doc_num = models.CharField(max_length=50)
    posting_date = models.DateField()
    document_date = models.DateField(null=True, blank=True)
    memo = models.TextField(blank=True)
    reference_number = models.CharField(max_length=100, blank=True)
    accounting_period = models.ForeignKey(AccountingPeriod, on_delete=models.PROTECT, related_name='journal_entries')
    approval_workflow_status = models.CharField(max_length=10, choices=WORKFLOW_STATUS_CHOICES, default=DRAFT)
    is_posted = models.BooleanField(default=False)
    posted_at = models.DateTimeField(null=True, blank=True)
    posted_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='posted_journal_entries')
    author = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='journal_entries')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.doc_num

    def get_total_debit(self):
        return sum((line.debit for line in self.lines.all()), Decimal('0'))

    def get_total_credit(self):
        return sum((line.credit for line in self.lines.all()), Decimal('0'))

    def is_balanced(self):
        return abs(self.get_total_debit() - self.get_total_credit()) < Decimal('0.01')

    class Meta:
        db_table = 'journal_entries'
        ordering = ['-posting_date', '-id']
        unique_together = ['business_unit', 'doc_num']
        verbose_name_plural = 'Journal entries'


class JournalEntryLine(models.Model):
    journal_entry = models.ForeignKey(JournalEntry, on_delete=models.CASCADE, related_name='lines')
    gl_account = models.ForeignKey(GLAccount, on_delete=models.PROTECT, related_name='journal_lines')
    debit = models.DecimalField(max_digits=18, decimal_places=2, default=Decimal('0.00'))
    credit = models.DecimalField(max_digits=18, decimal_places=2, default=Decimal('0.00'))
    description = models.CharField(max_length=255, blank=True)

    def __str__(self):
        return f"{self.gl_account.account_code} Dr {self.debit} Cr {self.credit}"

    class Meta:
        db_table = 'journal_entry_lines'
        ordering = ['id']


class BankAccount(models.Model):
    business_unit = models.ForeignKey(BusinessUnit, on_delete=models.CASCADE, related_name='bank_accounts')
    name = models.CharField(max_length=100)
    bank_name = models.CharField(max_length=100)
    account_number = models.CharField(max_length=50)
    gl_account = models.ForeignKey(GLAccount, on_delete=models.PROTECT, related_name='bank_accounts')
    currency = models.CharField(max_length=3, default='PHP')
    iban = models.CharField(max_length=34, blank=True)
    swift_code = models.CharField(max_length=11, blank=True)
    branch = models.CharField(max_length=100, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.name} ({self.bank_name})"

    class Meta:
        db_table = 'bank_accounts'
        ordering = ['name']
        unique_together = ['business_unit', 'account_number', 'bank_name']


# Settlement of receivable/payable documents
SETTLEMENT_OPEN = 'OPEN'
SETTLEMENT_PARTIAL = 'PARTIALLY_SETTLED'
SETTLEMENT_SETTLED = 'SETTLED'
SETTLEMENT_STATUS_CHOICES = [
    (SETTLEMENT_OPEN, 'Open'),
    (SETTLEMENT_PARTIAL, 'Partially Settled'),
    (SETTLEMENT_SETTLED, 'Settled'),
]


def settlement_status_for(total_amount, amount_paid):
    if amount_paid >= total_amount:
        return SETTLEMENT_SETTLED
    if amount_paid > 0:
        return SETTLEMENT_PARTIAL
    return SETTLEMENT_OPEN
