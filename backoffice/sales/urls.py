from django.urls import path
from .views import (
    quotation_list_create, quotation_detail,
    ar_invoice_list_create, ar_invoice_detail,
    incoming_payment_list_create, incoming_payment_detail
)

urlpatterns = [
    path('sales-quotations/', quotation_list_create, name='sales-quotation-list-create'),
    path('sales-quotations/<int:pk>/', quotation_detail, name='sales-quotation-detail'),

    path('ar-invoices/', ar_invoice_list_create, name='ar-invoice-list-create'),
    path('ar-invoices/<int:pk>/', ar_invoice_detail, name='ar-invoice-detail'),

    path('incoming-payments/', incoming_payment_list_create, name='incoming-payment-list-create'),
    path('incoming-payments/<int:pk>/', incoming_payment_detail, name='incoming-payment-detail'),
]
