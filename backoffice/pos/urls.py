from django.urls import path
from .views import (
    configuration, validate_configuration,
    menu_items_with_mappings, payment_methods_with_mappings, menu_item_gl_mappings, payment_method_gl_mappings,
    table_list_create, table_detail, discount_list_create, discount_detail,
    order_list_create, order_detail, order_add_items, order_cancel, order_send_to_kitchen,
    settlement, order_post_to_gl, order_accounting_summary
)

urlpatterns = [
    # Configuration and GL mappings
    path('pos/configuration/', configuration, name='pos-configuration'),
    path('pos/validate-configuration/', validate_configuration, name='pos-validate-configuration'),
    path('pos/menu-items-with-mappings/', menu_items_with_mappings, name='pos-menu-items-with-mappings'),
    path('pos/payment-methods-with-mappings/', payment_methods_with_mappings, name='pos-payment-methods-with-mappings'),
    path('pos/menu-item-gl-mappings/', menu_item_gl_mappings, name='pos-menu-item-gl-mappings'),
    path('pos/payment-method-gl-mappings/', payment_method_gl_mappings, name='pos-payment-method-gl-mappings'),

    # Floor
    path('pos/tables/', table_list_create, name='pos-table-list-create'),
    path('pos/tables/<int:pk>/', table_detail, name='pos-table-detail'),
    path('pos/discounts/', discount_list_create, name='pos-discount-list-create'),
    path('pos/discounts/<int:pk>/', discount_detail, name='pos-discount-detail'),

    # Orders
    path('pos/orders/', order_list_create, name='pos-order-list-create'),
    path('pos/orders/<int:pk>/', order_detail, name='pos-order-detail'),
    path('pos/orders/<int:pk>/add-items/', order_add_items, name='pos-order-add-items'),
    path('pos/orders/<int:pk>/cancel/', order_cancel, name='pos-order-cancel'),
    path('pos/orders/<int:pk>/send-to-kitchen/', order_send_to_kitchen, name='pos-order-send-to-kitchen'),
    path('pos/orders/<int:pk>/post-to-gl/', order_post_to_gl, name='pos-order-post-to-gl'),
    path('pos/orders/<int:pk>/accounting-summary/', order_accounting_summary, name='pos-order-accounting-summary'),
    path('pos/settlements/', settlement, name='pos-settlement'),
]
