from django.contrib import admin
from .models import BusinessPartner


@admin.register(BusinessPartner)
class BusinessPartnerAdmin(admin.ModelAdmin):
    list_display = ['bp_code', 'name', 'type', 'phone', 'email', 'credit_limit', 'business_unit', 'created_at']
    list_filter = ['business_unit', 'type', 'created_at']
    search_fields = ['bp_code', 'name', 'phone', 'email', 'tin_id']
    ordering = ['bp_code']
