from django.urls import path
from .views import (
    purchase_request_list_create, purchase_request_detail, purchase_request_approve, purchase_request_reject,
    purchase_order_list_create, purchase_order_detail, purchase_order_close,
    goods_receipt_list_create, goods_receipt_detail,
    ap_invoice_list_create, ap_invoice_detail,
    outgoing_payment_list_create, outgoing_payment_detail
)

urlpatterns = [
    path('purchase-requests/', purchase_request_list_create, name='purchase-request-list-create'),
    path('purchase-requests/<int:pk>/', purchase_request_detail, name='purchase-request-detail'),
    path('purchase-requests/<int:pk>/approve/', purchase_request_approve, name='purchase-request-approve'),
    path('purchase-requests/<int:pk>/reject/', purchase_request_reject, name='purchase-request-reject'),

    path('purchase-orders/', purchase_order_list_create, name='purchase-order-list-create'),
    path('purchase-orders/<int:pk>/', purchase_order_detail, name='purchase-order-detail'),
    path('purchase-orders/<int:pk>/close/', purchase_order_close, name='purchase-order-close'),

    path('goods-receipts/', goods_receipt_list_create, name='goods-receipt-list-create'),
    path('goods-receipts/<int:pk>/', goods_receipt_detail, name='goods-receipt-detail'),

    path('ap-invoices/', ap_invoice_list_create, name='ap-invoice-list-create'),
    path('ap-invoices/<int:pk>/', ap_invoice_detail, name='ap-invoice-detail'),

    path('outgoing-payments/', outgoing_payment_list_create, name='outgoing-payment-list-create'),
    path('outgoing-payments/<int:pk>/', outgoing_payment_detail, name='outgoing-payment-detail'),
]
