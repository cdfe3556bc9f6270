from django.contrib import admin
from .models import InventoryLocation, InventoryStock, InventoryMovement, StockRequisition, StockRequisitionItem


@admin.register(InventoryLocation)
class InventoryLocationAdmin(admin.ModelAdmin):
    list_display = ['name', 'business_unit', 'created_at']
    list_filter = ['business_unit']
    search_fields = ['name']


@admin.register(InventoryStock)
class InventoryStockAdmin(admin.ModelAdmin):
    list_display = ['inventory_item', 'location', 'quantity_on_hand', 'reorder_point', 'par_level', 'updated_at']
    list_filter = ['location']
    search_fields = ['inventory_item__name', 'location__name']
    readonly_fields = ['quantity_on_hand', 'updated_at']


@admin.register(InventoryMovement)
class InventoryMovementAdmin(admin.ModelAdmin):
    list_display = ['inventory_stock', 'type', 'quantity', 'reason', 'created_by', 'created_at']
    list_filter = ['type', 'created_at']
    search_fields = ['inventory_stock__inventory_item__name', 'reason']
    ordering = ['-created_at']
    readonly_fields = ['inventory_stock', 'type', 'quantity', 'reason', 'created_by', 'created_at']


class StockRequisitionItemInline(admin.TabularInline):
    model = StockRequisitionItem
    extra = 0


@admin.register(StockRequisition)
class StockRequisitionAdmin(admin.ModelAdmin):
    list_display = ['requisition_number', 'from_location', 'to_location', 'status', 'requester', 'created_at']
    list_filter = ['business_unit', 'status']
    search_fields = ['requisition_number']
    ordering = ['-created_at']
    inlines = [StockRequisitionItemInline]
