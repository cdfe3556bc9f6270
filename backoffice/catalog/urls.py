from django.urls import path
from .views import (
    uom_list_create, uom_detail,
    tax_code_list_create, tax_code_detail,
    payment_method_list_create, payment_method_detail,
    inventory_category_list_create, inventory_category_detail,
    inventory_item_list_create, inventory_item_detail,
    menu_category_list_create, menu_category_detail,
    menu_item_list_create, menu_item_detail, menu_item_recipe
)

urlpatterns = [
    # Reference data
    path('uoms/', uom_list_create, name='uom-list-create'),
    path('uoms/<int:pk>/', uom_detail, name='uom-detail'),
    path('tax-codes/', tax_code_list_create, name='tax-code-list-create'),
    path('tax-codes/<int:pk>/', tax_code_detail, name='tax-code-detail'),
    path('payment-methods/', payment_method_list_create, name='payment-method-list-create'),
    path('payment-methods/<int:pk>/', payment_method_detail, name='payment-method-detail'),

    # Inventory master data
    path('inventory-categories/', inventory_category_list_create, name='inventory-category-list-create'),
    path('inventory-categories/<int:pk>/', inventory_category_detail, name='inventory-category-detail'),
    path('inventory-items/', inventory_item_list_create, name='inventory-item-list-create'),
    path('inventory-items/<int:pk>/', inventory_item_detail, name='inventory-item-detail'),

    # Menu
    path('menu-categories/', menu_category_list_create, name='menu-category-list-create'),
    path('menu-categories/<int:pk>/', menu_category_detail, name='menu-category-detail'),
    path('menu-items/', menu_item_list_create, name='menu-item-list-create'),
    path('menu-items/<int:pk>/', menu_item_detail, name='menu-item-detail'),
    path('menu-items/<int:pk>/recipe/', menu_item_recipe, name='menu-item-recipe'),
]
