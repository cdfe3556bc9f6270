from decimal import Decimal

from django.conf import settings
from django.db import models

from backoffice.catalog.models import InventoryItem, UoM
from backoffice.core.models import BusinessUnit
from backoffice.financials.models import (
    BankAccount, GLAccount, SETTLEMENT_OPEN, SETTLEMENT_STATUS_CHOICES
)
from backoffice.inventory.models import InventoryLocation
from backoffice.parties.models import BusinessPartner


class PurchaseRequest(models.Model):
    PENDING = 'PENDING'
    APPROVED = 'APPROVED'
    REJECTED = 'REJECTED'
    CLOSED = 'CLOSED'
    STATUS_CHOICES = [
        (PENDING, 'Pending'),
        (APPROVED, 'Approved'),
        (REJECTED, 'Rejected'),
        (CLOSED, 'Closed'),
    ]

    business_unit = models.ForeignKey(BusinessUnit, on_delete=models.CASCADE, related_name='purchase_requests')
    pr_number = models.CharField(max_length=50)
    requestor = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='purchase_requests')
    request_date = models.DateField()
    required_date = models.DateField(null=True, blank=True)
    notes = models.TextField(blank=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=PENDING)
    approver = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='approved_purchase_requests')
    approval_date = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.pr_number

    class Meta:
        db_table = 'purchase_requests'
        ordering = ['-created_at', '-id']
        unique_together = ['business_unit', 'pr_number']


class PurchaseRequestItem(models.Model):
    purchase_request = models.ForeignKey(PurchaseRequest, on_delete=models.CASCADE, related_name='items')
    description = models.CharField(max_length=255)
    requested_quantity = models.DecimalField(max_digits=14, decimal_places=4)
    uom = models.ForeignKey(UoM, on_delete=models.PROTECT, null=True, blank=True, related_name='purchase_request_items')
    notes = models.CharField(max_length=255, blank=True)

    def __str__(self):
        return f"{self.description} x {self.requested_quantity}"

    class Meta:
        db_table = 'purchase_request_items'
        ordering = ['id']


class PurchaseOrder(models.Model):
    OPEN = 'OPEN'
    CLOSED = 'CLOSED'
    CANCELLED = 'CANCELLED'
    STATUS_CHOICES = [
        (OPEN, 'Open'),
        (CLOSED, 'Closed'),
        (CANCELLED, 'Cancelled'),
    ]

    business_unit = models.ForeignKey(BusinessUnit, on_delete=models.CASCADE, related_name='purchase_orders')
    po_number = models.CharField(max_length=50)
    business_partner = models.ForeignKey(BusinessPartner, on_delete=models.PROTECT, related_name='purchase_orders')
    purchase_request = models.ForeignKey(PurchaseRequest, on_delete=models.PROTECT, null=True, blank=True, related_name='purchase_orders')
    document_date = models.DateField()
    posting_date = models.DateField()
    delivery_date = models.DateField()
    remarks = models.TextField(blank=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=OPEN)
    total_amount = models.DecimalField(max_digits=18, decimal_places=2, default=Decimal('0.00'))
    owner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='purchase_orders')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.po_number

    def get_amount_received(self):
        return sum(
            ((item.quantity - item.open_quantity) * item.unit_price for item in self.items.all()),
            Decimal('0')
        )

    def has_open_items(self):
        return any(item.open_quantity > 0 for item in self.items.all())

    class Meta:
        db_table = 'purchase_orders'
        ordering = ['-created_at', '-id']
        unique_together = ['business_unit', 'po_number']


class PurchaseOrderItem(models.Model):
    business_unit_lookup = 'purchase_order__business_unit'

    purchase_order = models.ForeignKey(PurchaseOrder, on_delete=models.CASCADE, related_name='items')
    inventory_item = models.ForeignKey(InventoryItem, on_delete=models.PROTECT, null=True, blank=True, related_name='purchase_order_items')
    description = models.CharField(max_length=255)
    uom = models.ForeignKey(UoM, on_delete=models.PROTECT, null=True, blank=True, related_name='purchase_order_items')
    quantity = models.DecimalField(max_digits=14, decimal_places=4)
    unit_price = models.DecimalField(max_digits=15, decimal_places=4)
    line_total = models.DecimalField(max_digits=18, decimal_places=2)
    open_quantity = models.DecimalField(max_digits=14, decimal_places=4)
    gl_account = models.ForeignKey(GLAccount, on_delete=models.PROTECT, null=True, blank=True, related_name='purchase_order_items')

    def __str__(self):
        return f"{self.description} x {self.quantity}"

    class Meta:
        db_table = 'purchase_order_items'
        ordering = ['id']


class GoodsReceipt(models.Model):
    business_unit = models.ForeignKey(BusinessUnit, on_delete=models.CASCADE, related_name='goods_receipts')
    doc_num = models.CharField(max_length=50)
    purchase_order = models.ForeignKey(PurchaseOrder, on_delete=models.PROTECT, related_name='receipts')
    business_partner = models.ForeignKey(BusinessPartner, on_delete=models.PROTECT, related_name='goods_receipts')
    document_date = models.DateField()
    posting_date = models.DateField()
    remarks = models.TextField(blank=True)
    received_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='goods_receipts')
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.doc_num

    class Meta:
        db_table = 'goods_receipts'
        ordering = ['-created_at', '-id']
        unique_together = ['business_unit', 'doc_num']


class GoodsReceiptItem(models.Model):
    goods_receipt = models.ForeignKey(GoodsReceipt, on_delete=models.CASCADE, related_name='items')
    purchase_order_item = models.ForeignKey(PurchaseOrderItem, on_delete=models.PROTECT, related_name='receipt_items')
    inventory_item = models.ForeignKey(InventoryItem, on_delete=models.PROTECT, related_name='receipt_items')
    location = models.ForeignKey(InventoryLocation, on_delete=models.PROTECT, related_name='receipt_items')
    quantity = models.DecimalField(max_digits=14, decimal_places=4)
    batch_number = models.CharField(max_length=100, blank=True)
    expiry_date = models.DateField(null=True, blank=True)
    notes = models.CharField(max_length=255, blank=True)

    def __str__(self):
        return f"{self.inventory_item.name} x {self.quantity}"

    class Meta:
        db_table = 'goods_receipt_items'
        ordering = ['id']


class APInvoice(models.Model):
    OPEN = 'OPEN'
    CLOSED = 'CLOSED'
    CANCELLED = 'CANCELLED'
    STATUS_CHOICES = [
        (OPEN, 'Open'),
        (CLOSED, 'Closed'),
        (CANCELLED, 'Cancelled'),
    ]

    business_unit = models.ForeignKey(BusinessUnit, on_delete=models.CASCADE, related_name='ap_invoices')
    doc_num = models.CharField(max_length=50)
    business_partner = models.ForeignKey(BusinessPartner, on_delete=models.PROTECT, related_name='ap_invoices')
    base_purchase_order = models.ForeignKey(PurchaseOrder, on_delete=models.SET_NULL, null=True, blank=True, related_name='ap_invoices')
    posting_date = models.DateField()
    due_date = models.DateField()
    document_date = models.DateField()
    remarks = models.TextField(blank=True)
    total_amount = models.DecimalField(max_digits=18, decimal_places=2, default=Decimal('0.00'))
    amount_paid = models.DecimalField(max_digits=18, decimal_places=2, default=Decimal('0.00'))
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=OPEN)
    settlement_status = models.CharField(max_length=20, choices=SETTLEMENT_STATUS_CHOICES, default=SETTLEMENT_OPEN)
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='ap_invoices')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.doc_num

    @property
    def outstanding_amount(self):
        return self.total_amount - self.amount_paid

    class Meta:
        db_table = 'ap_invoices'
        ordering = ['-posting_date', '-doc_num']
        unique_together = ['business_unit', 'doc_num']


class APInvoiceItem(models.Model):
    ap_invoice = models.ForeignKey(APInvoice, on_delete=models.CASCADE, related_name='items')
    description = models.CharField(max_length=255)
    quantity = models.DecimalField(max_digits=14, decimal_places=4)
    unit_price = models.DecimalField(max_digits=15, decimal_places=4)
    line_total = models.DecimalField(max_digits=18, decimal_places=2)
    gl_account = models.ForeignKey(GLAccount, on_delete=models.PROTECT, related_name='ap_invoice_items')

    class Meta:
        db_table = 'ap_invoice_items'
        ordering = ['id']


class OutgoingPayment(models.Model):
    business_unit = models.ForeignKey(BusinessUnit, on_delete=models.CASCADE, related_name='outgoing_payments')
    doc_num = models.CharField(max_length=50)
    business_partner = models.ForeignKey(BusinessPartner, on_delete=models.PROTECT, related_name='outgoing_payments')
    bank_account = models.ForeignKey(BankAccount, on_delete=models.PROTECT, null=True, blank=True, related_name='outgoing_payments')
    payment_date = models.DateField()
    reference_number = models.CharField(max_length=100, blank=True)
    amount = models.DecimalField(max_digits=18, decimal_places=2)
    remarks = models.TextField(blank=True)
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='outgoing_payments')
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.doc_num

    class Meta:
        db_table = 'outgoing_payments'
        ordering = ['-payment_date', '-doc_num']
        unique_together = ['business_unit', 'doc_num']


class OutgoingPaymentApplication(models.Model):
    outgoing_payment = models.ForeignKey(OutgoingPayment, on_delete=models.CASCADE, related_name='applications')
    ap_invoice = models.ForeignKey(APInvoice, on_delete=models.PROTECT, related_name='payment_applications')
    amount_applied = models.DecimalField(max_digits=18, decimal_places=2)

    class Meta:
        db_table = 'outgoing_payment_applications'
        ordering = ['id']
