from django.contrib import admin
from .models import (
    SalesQuotation, SalesQuotationItem, ARInvoice, ARInvoiceItem,
    IncomingPayment, IncomingPaymentApplication
)


class SalesQuotationItemInline(admin.TabularInline):
    model = SalesQuotationItem
    extra = 0


@admin.register(SalesQuotation)
class SalesQuotationAdmin(admin.ModelAdmin):
    list_display = ['doc_num', 'business_partner', 'document_date', 'valid_until', 'status', 'owner']
    list_filter = ['business_unit', 'status']
    search_fields = ['doc_num', 'business_partner__name']
    ordering = ['-created_at']
    inlines = [SalesQuotationItemInline]


class ARInvoiceItemInline(admin.TabularInline):
    model = ARInvoiceItem
    extra = 0


@admin.register(ARInvoice)
class ARInvoiceAdmin(admin.ModelAdmin):
    list_display = ['doc_num', 'business_partner', 'posting_date', 'due_date', 'total_amount', 'amount_paid', 'status', 'settlement_status']
    list_filter = ['business_unit', 'status', 'settlement_status']
    search_fields = ['doc_num', 'business_partner__name']
    ordering = ['-posting_date']
    inlines = [ARInvoiceItemInline]


class IncomingPaymentApplicationInline(admin.TabularInline):
    model = IncomingPaymentApplication
    extra = 0


@admin.register(IncomingPayment)
class IncomingPaymentAdmin(admin.ModelAdmin):
    list_display = ['doc_num', 'business_partner', 'payment_date', 'amount', 'payment_method', 'created_by']
    list_filter = ['business_unit', 'payment_date']
    search_fields = ['doc_num', 'reference_number', 'business_partner__name']
    ordering = ['-payment_date']
    inlines = [IncomingPaymentApplicationInline]
