from decimal import Decimal

from django.conf import settings
from django.db import models

from backoffice.catalog.models import MenuItem, PaymentMethod
from backoffice.core.models import BusinessUnit
from backoffice.financials.models import (
    BankAccount, GLAccount, SETTLEMENT_OPEN, SETTLEMENT_STATUS_CHOICES
)
from backoffice.parties.models import BusinessPartner

OPEN = 'OPEN'
CLOSED = 'CLOSED'
CANCELLED = 'CANCELLED'
DOCUMENT_STATUS_CHOICES = [
    (OPEN, 'Open'),
    (CLOSED, 'Closed'),
    (CANCELLED, 'Cancelled'),
]


class SalesQuotation(models.Model):
    business_unit = models.ForeignKey(BusinessUnit, on_delete=models.CASCADE, related_name='sales_quotations')
    doc_num = models.CharField(max_length=50)
    business_partner = models.ForeignKey(BusinessPartner, on_delete=models.PROTECT, related_name='sales_quotations')
    document_date = models.DateField()
    posting_date = models.DateField()
    valid_until = models.DateField()
    remarks = models.TextField(blank=True)
    status = models.CharField(max_length=10, choices=DOCUMENT_STATUS_CHOICES, default=OPEN)
    owner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='sales_quotations')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.doc_num

    def get_total_amount(self):
        return sum((item.quantity * item.unit_price for item in self.items.all()), Decimal('0'))

    class Meta:
        db_table = 'sales_quotations'
        ordering = ['-created_at', '-doc_num']
        unique_together = ['business_unit', 'doc_num']


class SalesQuotationItem(models.Model):
    sales_quotation = models.ForeignKey(SalesQuotation, on_delete=models.CASCADE, related_name='items')
    menu_item = models.ForeignKey(MenuItem, on_delete=models.PROTECT, related_name='quotation_items')
    description = models.CharField(max_length=255)
    quantity = models.DecimalField(max_digits=14, decimal_places=4)
    unit_price = models.DecimalField(max_digits=15, decimal_places=4)
    line_total = models.DecimalField(max_digits=18, decimal_places=2)

    class Meta:
        db_table = 'sales_quotation_items'
        ordering = ['id']


class ARInvoice(models.Model):
    business_unit = models.ForeignKey(BusinessUnit, on_delete=models.CASCADE, related_name='ar_invoices')
    doc_num = models.CharField(max_length=50)
    business_partner = models.ForeignKey(BusinessPartner, on_delete=models.PROTECT, related_name='ar_invoices')
    base_quotation = models.ForeignKey(SalesQuotation, on_delete=models.SET_NULL, null=True, blank=True, related_name='ar_invoices')
    posting_date = models.DateField()
    due_date = models.DateField()
    document_date = models.DateField()
    remarks = models.TextField(blank=True)
    subtotal = models.DecimalField(max_digits=18, decimal_places=2, default=Decimal('0.00'))
    tax_amount = models.DecimalField(max_digits=18, decimal_places=2, default=Decimal('0.00'))
    total_amount = models.DecimalField(max_digits=18, decimal_places=2, default=Decimal('0.00'))
    amount_paid = models.DecimalField(max_digits=18, decimal_places=2, default=Decimal('0.00'))
    status = models.CharField(max_length=10, choices=DOCUMENT_STATUS_CHOICES, default=OPEN)
    settlement_status = models.CharField(max_length=20, choices=SETTLEMENT_STATUS_CHOICES, default=SETTLEMENT_OPEN)
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='ar_invoices')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.doc_num

    @property
    def outstanding_amount(self):
        return self.total_amount - self.amount_paid

    class Meta:
        db_table = 'ar_invoices'
        ordering = ['-posting_date', '-doc_num']
        unique_together = ['business_unit', 'doc_num']


class ARInvoiceItem(models.Model):
    ar_invoice = models.ForeignKey(ARInvoice, on_delete=models.CASCADE, related_name='items')
    menu_item = models.ForeignKey(MenuItem, on_delete=models.SET_NULL, null=True, blank=True, related_name='ar_invoice_items')
    description = models.CharField(max_length=255)
    quantity = models.DecimalField(max_digits=14, decimal_places=4)
    unit_price = models.DecimalField(max_digits=15, decimal_places=4)
    discount = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal('0.00'))
    line_total = models.DecimalField(max_digits=18, decimal_places=2)
    gl_account = models.ForeignKey(GLAccount, on_delete=models.PROTECT, related_name='ar_invoice_items')

    class Meta:
        db_table = 'ar_invoice_items'
        ordering = ['id']


class IncomingPayment(models.Model):
    business_unit = models.ForeignKey(BusinessUnit, on_delete=models.CASCADE, related_name='incoming_payments')
    doc_num = models.CharField(max_length=50)
    business_partner = models.ForeignKey(BusinessPartner, on_delete=models.PROTECT, related_name='incoming_payments')
    payment_date = models.DateField()
    payment_method = models.ForeignKey(PaymentMethod, on_delete=models.PROTECT, null=True, blank=True, related_name='incoming_payments')
    bank_account = models.ForeignKey(BankAccount, on_delete=models.PROTECT, null=True, blank=True, related_name='incoming_payments')
    reference_number = models.CharField(max_length=100, blank=True)
    amount = models.DecimalField(max_digits=18, decimal_places=2)
    remarks = models.TextField(blank=True)
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='incoming_payments')
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.doc_num

    class Meta:
        db_table = 'incoming_payments'
        ordering = ['-payment_date', '-doc_num']
        unique_together = ['business_unit', 'doc_num']


class IncomingPaymentApplication(models.Model):
    incoming_payment = models.ForeignKey(IncomingPayment, on_delete=models.CASCADE, related_name='applications')
    ar_invoice = models.ForeignKey(ARInvoice, on_delete=models.PROTECT, related_name='payment_applications')
    amount_applied = models.DecimalField(max_digits=18, decimal_places=2)

    class Meta:
        db_table = 'incoming_payment_applications'
        ordering = ['id']
