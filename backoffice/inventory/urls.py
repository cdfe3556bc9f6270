from django.urls import path
from .views import (
    location_list_create, location_detail,
    stock_list_create, stock_detail, stock_movements, stock_adjust,
    requisition_list_create, requisition_detail, requisition_fulfill
)

urlpatterns = [
    path('inventory-locations/', location_list_create, name='inventory-location-list-create'),
    path('inventory-locations/<int:pk>/', location_detail, name='inventory-location-detail'),

    # Stock endpoints
    path('inventory-stocks/', stock_list_create, name='inventory-stock-list-create'),
    path('inventory-stocks/adjust/', stock_adjust, name='inventory-stock-adjust'),
    path('inventory-stocks/<int:pk>/', stock_detail, name='inventory-stock-detail'),
    path('inventory-stocks/<int:pk>/movements/', stock_movements, name='inventory-stock-movements'),

    # Requisition endpoints
    path('stock-requisitions/', requisition_list_create, name='stock-requisition-list-create'),
    path('stock-requisitions/<int:pk>/', requisition_detail, name='stock-requisition-detail'),
    path('stock-requisitions/<int:pk>/fulfill/', requisition_fulfill, name='stock-requisition-fulfill'),
]
