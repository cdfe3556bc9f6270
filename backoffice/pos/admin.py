from django.contrib import admin
from .models import (
    POSConfiguration, MenuItemGLMapping, PaymentMethodGLMapping, Table, Discount,
    Order, OrderItem, Payment
)


@admin.register(POSConfiguration)
class POSConfigurationAdmin(admin.ModelAdmin):
    list_display = ['business_unit', 'auto_post_to_gl', 'auto_create_ar_invoice', 'enable_discounts', 'enable_service_charge', 'updated_at']


@admin.register(MenuItemGLMapping)
class MenuItemGLMappingAdmin(admin.ModelAdmin):
    list_display = ['menu_item', 'sales_account', 'cogs_account', 'inventory_account', 'business_unit']
    list_filter = ['business_unit']
    search_fields = ['menu_item__name']


@admin.register(PaymentMethodGLMapping)
class PaymentMethodGLMappingAdmin(admin.ModelAdmin):
    list_display = ['payment_method', 'gl_account', 'business_unit']
    list_filter = ['business_unit']


@admin.register(Table)
class TableAdmin(admin.ModelAdmin):
    list_display = ['table_number', 'capacity', 'status', 'business_unit']
    list_filter = ['business_unit', 'status']
    search_fields = ['table_number']


@admin.register(Discount)
class DiscountAdmin(admin.ModelAdmin):
    list_display = ['name', 'type', 'value', 'is_active', 'business_unit']
    list_filter = ['business_unit', 'type', 'is_active']
    search_fields = ['name']


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ['menu_item', 'quantity', 'price_at_sale', 'notes']


class PaymentInline(admin.TabularInline):
    model = Payment
    extra = 0
    readonly_fields = ['payment_method', 'amount', 'change', 'reference_number', 'cashier', 'created_at']


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ['id', 'table', 'order_type', 'status', 'total_amount', 'amount_paid', 'is_posted', 'waiter', 'created_at']
    list_filter = ['business_unit', 'status', 'order_type', 'is_posted', 'created_at']
    search_fields = ['id', 'table__table_number', 'notes']
    ordering = ['-created_at']
    inlines = [OrderItemInline, PaymentInline]
    readonly_fields = [
        'subtotal', 'discount_value', 'tax_amount', 'total_amount', 'amount_paid',
        'is_posted', 'ar_invoice', 'journal_entry', 'posted_at', 'posted_by', 'created_at', 'updated_at'
    ]
