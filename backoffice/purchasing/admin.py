from django.contrib import admin
from .models import (
    PurchaseRequest, PurchaseRequestItem, PurchaseOrder, PurchaseOrderItem,
    GoodsReceipt, GoodsReceiptItem, APInvoice, APInvoiceItem,
    OutgoingPayment, OutgoingPaymentApplication
)


class PurchaseRequestItemInline(admin.TabularInline):
    model = PurchaseRequestItem
    extra = 0


@admin.register(PurchaseRequest)
class PurchaseRequestAdmin(admin.ModelAdmin):
    list_display = ['pr_number', 'requestor', 'request_date', 'status', 'approver', 'business_unit']
    list_filter = ['business_unit', 'status', 'request_date']
    search_fields = ['pr_number', 'notes']
    ordering = ['-created_at']
    inlines = [PurchaseRequestItemInline]


class PurchaseOrderItemInline(admin.TabularInline):
    model = PurchaseOrderItem
    extra = 0
    readonly_fields = ['line_total', 'open_quantity']


@admin.register(PurchaseOrder)
class PurchaseOrderAdmin(admin.ModelAdmin):
    list_display = ['po_number', 'business_partner', 'posting_date', 'delivery_date', 'status', 'total_amount', 'business_unit']
    list_filter = ['business_unit', 'status', 'posting_date']
    search_fields = ['po_number', 'business_partner__name']
    ordering = ['-created_at']
    inlines = [PurchaseOrderItemInline]


class GoodsReceiptItemInline(admin.TabularInline):
    model = GoodsReceiptItem
    extra = 0
    readonly_fields = ['purchase_order_item', 'inventory_item', 'location', 'quantity']


@admin.register(GoodsReceipt)
class GoodsReceiptAdmin(admin.ModelAdmin):
    list_display = ['doc_num', 'purchase_order', 'business_partner', 'posting_date', 'received_by']
    list_filter = ['business_unit', 'posting_date']
    search_fields = ['doc_num', 'purchase_order__po_number']
    ordering = ['-created_at']
    inlines = [GoodsReceiptItemInline]


class APInvoiceItemInline(admin.TabularInline):
    model = APInvoiceItem
    extra = 0


@admin.register(APInvoice)
class APInvoiceAdmin(admin.ModelAdmin):
    list_display = ['doc_num', 'business_partner', 'posting_date', 'due_date', 'total_amount', 'amount_paid', 'status', 'settlement_status']
    list_filter = ['business_unit', 'status', 'settlement_status']
    search_fields = ['doc_num', 'business_partner__name']
    ordering = ['-posting_date']
    inlines = [APInvoiceItemInline]


class OutgoingPaymentApplicationInline(admin.TabularInline):
    model = OutgoingPaymentApplication
    extra = 0


@admin.register(OutgoingPayment)
class OutgoingPaymentAdmin(admin.ModelAdmin):
    list_display = ['doc_num', 'business_partner', 'payment_date', 'amount', 'bank_account', 'created_by']
    list_filter = ['business_unit', 'payment_date']
    search_fields = ['doc_num', 'reference_number', 'business_partner__name']
    ordering = ['-payment_date']
    inlines = [OutgoingPaymentApplicationInline]
