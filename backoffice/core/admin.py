from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from .models import User, BusinessUnit, Role, UserBusinessUnit, AuditLog


class UserBusinessUnitInline(admin.TabularInline):
    model = UserBusinessUnit
    extra = 0
    fk_name = 'user'


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ['username', 'name', 'email', 'is_active', 'is_staff', 'date_joined']
    list_filter = ['is_active', 'is_staff', 'is_superuser', 'date_joined']
    search_fields = ['username', 'name', 'email']
    ordering = ['username']
    inlines = [UserBusinessUnitInline]
    fieldsets = BaseUserAdmin.fieldsets + (
        ('Additional Info', {'fields': ('name',)}),
    )
    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        ('Additional Info', {'fields': ('name',)}),
    )


@admin.register(BusinessUnit)
class BusinessUnitAdmin(admin.ModelAdmin):
    list_display = ['code', 'name', 'is_active', 'created_at']
    list_filter = ['is_active']
    search_fields = ['code', 'name']
    ordering = ['code']


@admin.register(Role)
class RoleAdmin(admin.ModelAdmin):
    list_display = ['name', 'description']
    search_fields = ['name']


@admin.register(UserBusinessUnit)
class UserBusinessUnitAdmin(admin.ModelAdmin):
    list_display = ['user', 'business_unit', 'role', 'created_at']
    list_filter = ['business_unit', 'role']
    search_fields = ['user__username', 'business_unit__code']


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ['user', 'business_unit', 'action', 'model_name', 'object_id', 'object_name', 'ip_address', 'created_at']
    list_filter = ['action', 'model_name', 'business_unit', 'created_at']
    search_fields = ['user__username', 'model_name', 'object_id', 'object_name', 'object_reference']
    ordering = ['-created_at']
    readonly_fields = [
        'user', 'business_unit', 'action', 'model_name', 'object_id', 'object_name',
        'object_reference', 'changes', 'ip_address', 'created_at'
    ]
