from django.urls import path
from . import views

urlpatterns = [
    path('reports/trial-balance/', views.trial_balance, name='report-trial-balance'),
    path('reports/balance-sheet/', views.balance_sheet, name='report-balance-sheet'),
    path('reports/profit-loss/', views.profit_loss, name='report-profit-loss'),
    path('reports/cash-flow/', views.cash_flow, name='report-cash-flow'),
    path('reports/gl-balances/', views.gl_balances, name='report-gl-balances'),
    path('reports/ar-aging/', views.ar_aging, name='report-ar-aging'),
    path('reports/ap-aging/', views.ap_aging, name='report-ap-aging'),
    path('reports/inventory-valuation/', views.inventory_valuation, name='report-inventory-valuation'),
    path('dashboard/', views.dashboard, name='dashboard'),
]
