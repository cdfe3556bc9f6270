"""
URL configuration for the back-office API.

Global endpoints (auth, business units) live under ``api/v1/``. Everything
else is scoped to a business unit under ``api/v1/<business_unit_id>/``.
"""
from django.contrib import admin
from django.urls import path, include

admin.site.site_header = "Back-Office Admin Panel"
admin.site.site_title = "Back-Office Admin Portal"
admin.site.index_title = "Business unit administration"

TENANT_PREFIX = 'api/v1/<int:business_unit_id>/'

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/v1/', include('backoffice.core.urls')),
    path('api/v1/', include('backoffice.cms.urls')),
    path(TENANT_PREFIX, include('backoffice.core.tenant_urls')),
    path(TENANT_PREFIX, include('backoffice.catalog.urls')),
    path(TENANT_PREFIX, include('backoffice.financials.urls')),
    path(TENANT_PREFIX, include('backoffice.parties.urls')),
    path(TENANT_PREFIX, include('backoffice.inventory.urls')),
    path(TENANT_PREFIX, include('backoffice.purchasing.urls')),
    path(TENANT_PREFIX, include('backoffice.sales.urls')),
    path(TENANT_PREFIX, include('backoffice.pos.urls')),
    path(TENANT_PREFIX, include('backoffice.reports.urls')),
]
