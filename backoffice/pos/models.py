from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models

from backoffice.catalog.models import MenuItem, PaymentMethod
from backoffice.core.models import BusinessUnit
from backoffice.financials.models import GLAccount, JournalEntry, NumberingSeries
from backoffice.parties.models import BusinessPartner
from backoffice.sales.models import ARInvoice


class POSConfiguration(models.Model):
    """GL posting configuration of the point of sale, one per business unit"""
    business_unit = models.OneToOneField(BusinessUnit, on_delete=models.CASCADE, related_name='pos_configuration')
    auto_post_to_gl = models.BooleanField(default=False)
    auto_create_ar_invoice = models.BooleanField(default=False)
    sales_revenue_account = models.ForeignKey(GLAccount, on_delete=models.SET_NULL, null=True, blank=True, related_name='+')
    sales_tax_account = models.ForeignKey(GLAccount, on_delete=models.SET_NULL, null=True, blank=True, related_name='+')
    cash_account = models.ForeignKey(GLAccount, on_delete=models.SET_NULL, null=True, blank=True, related_name='+')
    discount_account = models.ForeignKey(GLAccount, on_delete=models.SET_NULL, null=True, blank=True, related_name='+')
    service_charge_account = models.ForeignKey(GLAccount, on_delete=models.SET_NULL, null=True, blank=True, related_name='+')
    default_customer_bp_code = models.CharField(max_length=50)
    require_customer_selection = models.BooleanField(default=False)
    enable_discounts = models.BooleanField(default=True)
    enable_service_charge = models.BooleanField(default=False)
    service_charge_rate = models.DecimalField(
        max_digits=5, decimal_places=2, default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('100'))]
    )
    ar_invoice_series = models.ForeignKey(NumberingSeries, on_delete=models.SET_NULL, null=True, blank=True, related_name='+')
    journal_entry_series = models.ForeignKey(NumberingSeries, on_delete=models.SET_NULL, null=True, blank=True, related_name='+')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"POS configuration for {self.business_unit}"

    class Meta:
        db_table = 'pos_configurations'


class MenuItemGLMapping(models.Model):
    business_unit = models.ForeignKey(BusinessUnit, on_delete=models.CASCADE, related_name='menu_item_gl_mappings')
    menu_item = models.ForeignKey(MenuItem, on_delete=models.CASCADE, related_name='gl_mappings')
    sales_account = models.ForeignKey(GLAccount, on_delete=models.PROTECT, related_name='+')
    cogs_account = models.ForeignKey(GLAccount, on_delete=models.PROTECT, null=True, blank=True, related_name='+')
    inventory_account = models.ForeignKey(GLAccount, on_delete=models.PROTECT, null=True, blank=True, related_name='+')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'menu_item_gl_mappings'
        unique_together = ['business_unit', 'menu_item']


class PaymentMethodGLMapping(models.Model):
    business_unit = models.ForeignKey(BusinessUnit, on_delete=models.CASCADE, related_name='payment_method_gl_mappings')
    payment_method = models.ForeignKey(PaymentMethod, on_delete=models.CASCADE, related_name='gl_mappings')
    gl_account = models.ForeignKey(GLAccount, on_delete=models.PROTECT, related_name='+')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'payment_method_gl_mappings'
        unique_together = ['business_unit', 'payment_method']


class Table(models.Model):
    AVAILABLE = 'AVAILABLE'
    OCCUPIED = 'OCCUPIED'
    RESERVED = 'RESERVED'
    CLEANING = 'CLEANING'
    STATUS_CHOICES = [
        (AVAILABLE, 'Available'),
        (OCCUPIED, 'Occupied'),
        (RESERVED, 'Reserved'),
        (CLEANING, 'Cleaning'),
    ]

    business_unit = models.ForeignKey(BusinessUnit, on_delete=models.CASCADE, related_name='tables')
    table_number = models.CharField(max_length=20)
    capacity = models.PositiveIntegerField(default=4)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=AVAILABLE)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Table {self.table_number}"

    class Meta:
        db_table = 'pos_tables'
        ordering = ['table_number']
        unique_together = ['business_unit', 'table_number']


class Discount(models.Model):
    PERCENTAGE = 'PERCENTAGE'
    FIXED = 'FIXED'
    TYPE_CHOICES = [
        (PERCENTAGE, 'Percentage'),
        (FIXED, 'Fixed Amount'),
    ]

    business_unit = models.ForeignKey(BusinessUnit, on_delete=models.CASCADE, related_name='discounts')
    name = models.CharField(max_length=100)
    type = models.CharField(max_length=10, choices=TYPE_CHOICES)
    value = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(Decimal('0'))])
    is_active = models.BooleanField(default=True)
    gl_account = models.ForeignKey(GLAccount, on_delete=models.SET_NULL, null=True, blank=True, related_name='+')
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.name

    def amount_for(self, subtotal):
        if self.type == self.PERCENTAGE:
            return subtotal * self.value / Decimal('100')
        return min(self.value, subtotal)

    class Meta:
        db_table = 'pos_discounts'
        ordering = ['name']


class Order(models.Model):
    OPEN = 'OPEN'
    PREPARING = 'PREPARING'
    SERVED = 'SERVED'
    PAID = 'PAID'
    CANCELLED = 'CANCELLED'
    STATUS_CHOICES = [
        (OPEN, 'Open'),
        (PREPARING, 'Preparing'),
        (SERVED, 'Served'),
        (PAID, 'Paid'),
        (CANCELLED, 'Cancelled'),
    ]
    CLOSED_STATUSES = (PAID, CANCELLED)

    DINE_IN = 'DINE_IN'
    TAKEOUT = 'TAKEOUT'
    DELIVERY = 'DELIVERY'
    ORDER_TYPE_CHOICES = [
        (DINE_IN, 'Dine In'),
        (TAKEOUT, 'Takeout'),
        (DELIVERY, 'Delivery'),
    ]

    business_unit = models.ForeignKey(BusinessUnit, on_delete=models.CASCADE, related_name='pos_orders')
    table = models.ForeignKey(Table, on_delete=models.SET_NULL, null=True, blank=True, related_name='orders')
    waiter = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='served_orders')
    customer = models.ForeignKey(BusinessPartner, on_delete=models.SET_NULL, null=True, blank=True, related_name='pos_orders')
    discount = models.ForeignKey(Discount, on_delete=models.SET_NULL, null=True, blank=True, related_name='orders')
    order_type = models.CharField(max_length=10, choices=ORDER_TYPE_CHOICES, default=DINE_IN)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=OPEN)
    subtotal = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal('0.00'))
    discount_value = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal('0.00'))
    tax_amount = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal('0.00'))
    total_amount = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal('0.00'))
    amount_paid = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal('0.00'))
    notes = models.TextField(blank=True)
    is_posted = models.BooleanField(default=False)
    ar_invoice = models.ForeignKey(ARInvoice, on_delete=models.SET_NULL, null=True, blank=True, related_name='pos_orders')
    journal_entry = models.ForeignKey(JournalEntry, on_delete=models.SET_NULL, null=True, blank=True, related_name='pos_orders')
    posted_at = models.DateTimeField(null=True, blank=True)
    posted_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='posted_pos_orders')
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='created_pos_orders')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Order #{self.pk}"

    class Meta:
        db_table = 'pos_orders'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['business_unit', 'status'], name='idx_pos_order_bu_status'),
        ]


class OrderItem(models.Model):
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='items')
    menu_item = models.ForeignKey(MenuItem, on_delete=models.PROTECT, related_name='order_items')
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    price_at_sale = models.DecimalField(max_digits=12, decimal_places=2)
    notes = models.CharField(max_length=255, blank=True)

    def get_unit_price(self):
        """Sale price including modifier price changes"""
        return self.price_at_sale + sum((m.price_change for m in self.modifiers.all()), Decimal('0'))

    def get_line_total(self):
        return self.get_unit_price() * self.quantity

    class Meta:
        db_table = 'pos_order_items'
        ordering = ['id']


class OrderItemModifier(models.Model):
    order_item = models.ForeignKey(OrderItem, on_delete=models.CASCADE, related_name='modifiers')
    name = models.CharField(max_length=100)
    price_change = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))

    class Meta:
        db_table = 'pos_order_item_modifiers'
        ordering = ['id']


class Payment(models.Model):
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='payments')
    payment_method = models.ForeignKey(PaymentMethod, on_delete=models.PROTECT, related_name='pos_payments')
    amount = models.DecimalField(max_digits=15, decimal_places=2)
    change = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal('0.00'))
    reference_number = models.CharField(max_length=100, blank=True)
    cashier = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='pos_payments')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'pos_payments'
        ordering = ['id']
