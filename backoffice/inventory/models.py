from decimal import Decimal

from django.conf import settings
from django.db import models

from backoffice.catalog.models import InventoryItem
from backoffice.core.models import BusinessUnit


class InventoryLocation(models.Model):
    """Storage location (store room, kitchen, bar...)"""
    business_unit = models.ForeignKey(BusinessUnit, on_delete=models.CASCADE, related_name='inventory_locations')
    name = models.CharField(max_length=100)
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'inventory_locations'
        ordering = ['name']
        unique_together = ['business_unit', 'name']


class InventoryStock(models.Model):
    """On-hand quantity of an item at a location"""
    business_unit_lookup = 'location__business_unit'

    inventory_item = models.ForeignKey(InventoryItem, on_delete=models.CASCADE, related_name='stocks')
    location = models.ForeignKey(InventoryLocation, on_delete=models.CASCADE, related_name='stocks')
    quantity_on_hand = models.DecimalField(max_digits=14, decimal_places=4, default=Decimal('0'))
    reorder_point = models.DecimalField(max_digits=14, decimal_places=4, default=Decimal('0'))
    par_level = models.DecimalField(max_digits=14, decimal_places=4, default=Decimal('0'))
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.inventory_item.name} @ {self.location.name}: {self.quantity_on_hand}"

    @property
    def is_low_stock(self):
        return self.quantity_on_hand <= self.reorder_point

    class Meta:
        db_table = 'inventory_stocks'
        unique_together = ['inventory_item', 'location']
        indexes = [
            models.Index(fields=['location'], name='idx_inventory_stock_location'),
        ]


class InventoryMovement(models.Model):
    """Signed change applied to a stock record"""
    RECEIVING = 'RECEIVING'
    ADJUSTMENT = 'ADJUSTMENT'
    TRANSFER_IN = 'TRANSFER_IN'
    TRANSFER_OUT = 'TRANSFER_OUT'
    SALE_DEPLETION = 'SALE_DEPLETION'
    TYPE_CHOICES = [
        (RECEIVING, 'Receiving'),
        (ADJUSTMENT, 'Adjustment'),
        (TRANSFER_IN, 'Transfer In'),
        (TRANSFER_OUT, 'Transfer Out'),
        (SALE_DEPLETION, 'Sale Depletion'),
    ]

    inventory_stock = models.ForeignKey(InventoryStock, on_delete=models.CASCADE, related_name='movements')
    type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    quantity = models.DecimalField(max_digits=14, decimal_places=4)
    reason = models.CharField(max_length=255, blank=True)
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='inventory_movements')
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.type} {self.quantity}"

    class Meta:
        db_table = 'inventory_movements'
        ordering = ['-created_at', '-id']


class StockRequisition(models.Model):
    """Request to move stock between two locations"""
    PENDING = 'PENDING'
    APPROVED = 'APPROVED'
    FULFILLED = 'FULFILLED'
    REJECTED = 'REJECTED'
    STATUS_CHOICES = [
        (PENDING, 'Pending'),
        (APPROVED, 'Approved'),
        (FULFILLED, 'Fulfilled'),
        (REJECTED, 'Rejected'),
    ]

    business_unit = models.ForeignKey(BusinessUnit, on_delete=models.CASCADE, related_name='stock_requisitions')
    requisition_number = models.CharField(max_length=50)
    from_location = models.ForeignKey(InventoryLocation, on_delete=models.PROTECT, related_name='outgoing_requisitions')
    to_location = models.ForeignKey(InventoryLocation, on_delete=models.PROTECT, related_name='incoming_requisitions')
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=PENDING)
    notes = models.TextField(blank=True)
    requester = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='stock_requisitions')
    fulfilled_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.requisition_number

    class Meta:
        db_table = 'stock_requisitions'
        ordering = ['-created_at', '-id']
        unique_together = ['business_unit', 'requisition_number']


class StockRequisitionItem(models.Model):
    requisition = models.ForeignKey(StockRequisition, on_delete=models.CASCADE, related_name='items')
    inventory_item = models.ForeignKey(InventoryItem, on_delete=models.PROTECT, related_name='requisition_items')
    requested_quantity = models.DecimalField(max_digits=14, decimal_places=4)
    fulfilled_quantity = models.DecimalField(max_digits=14, decimal_places=4, default=Decimal('0'))
    notes = models.CharField(max_length=255, blank=True)

    def __str__(self):
        return f"{self.inventory_item.name} x {self.requested_quantity}"

    class Meta:
        db_table = 'stock_requisition_items'
        ordering = ['id']
