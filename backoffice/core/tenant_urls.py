from django.urls import path
from .views import (
    role_list, user_list_create, user_detail, user_change_password, user_toggle_status,
    user_servers, verify_supervisor, global_search, audit_log_list, audit_log_detail
)

urlpatterns = [
    path('roles/', role_list, name='role-list'),

    # User endpoints
    path('users/', user_list_create, name='user-list-create'),
    path('users/servers/', user_servers, name='user-servers'),
    path('users/<int:pk>/', user_detail, name='user-detail'),
    path('users/<int:pk>/password/', user_change_password, name='user-change-password'),
    path('users/<int:pk>/status/', user_toggle_status, name='user-toggle-status'),

    path('verify-supervisor/', verify_supervisor, name='verify-supervisor'),

    # AuditLog endpoints
    path('audit-logs/', audit_log_list, name='audit-log-list'),
    path('audit-logs/<int:pk>/', audit_log_detail, name='audit-log-detail'),

    # Global search endpoint
    path('search/', global_search, name='global-search'),
]
