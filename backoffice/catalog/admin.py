from django.contrib import admin
from .models import UoM, TaxCode, PaymentMethod, InventoryCategory, InventoryItem, MenuCategory, MenuItem, Recipe, RecipeItem


@admin.register(UoM)
class UoMAdmin(admin.ModelAdmin):
    list_display = ['name', 'symbol', 'business_unit']
    list_filter = ['business_unit']
    search_fields = ['name', 'symbol']


@admin.register(TaxCode)
class TaxCodeAdmin(admin.ModelAdmin):
    list_display = ['code', 'description', 'rate', 'business_unit']
    list_filter = ['business_unit']
    search_fields = ['code', 'description']


@admin.register(PaymentMethod)
class PaymentMethodAdmin(admin.ModelAdmin):
    list_display = ['name', 'business_unit', 'is_active']
    list_filter = ['business_unit', 'is_active']
    search_fields = ['name']


@admin.register(InventoryCategory)
class InventoryCategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'business_unit', 'created_at']
    list_filter = ['business_unit']
    search_fields = ['name']


@admin.register(InventoryItem)
class InventoryItemAdmin(admin.ModelAdmin):
    list_display = ['name', 'category', 'uom', 'standard_cost', 'is_active', 'business_unit']
    list_filter = ['business_unit', 'category', 'is_active']
    search_fields = ['name', 'description']
    ordering = ['name']


@admin.register(MenuCategory)
class MenuCategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'sort_order', 'business_unit']
    list_filter = ['business_unit']
    search_fields = ['name']


@admin.register(MenuItem)
class MenuItemAdmin(admin.ModelAdmin):
    list_display = ['name', 'category', 'price', 'is_active', 'business_unit']
    list_filter = ['business_unit', 'category', 'is_active']
    search_fields = ['name', 'description']
    ordering = ['name']


class RecipeItemInline(admin.TabularInline):
    model = RecipeItem
    extra = 0


@admin.register(Recipe)
class RecipeAdmin(admin.ModelAdmin):
    list_display = ['menu_item', 'name', 'updated_at']
    search_fields = ['menu_item__name', 'name']
    inlines = [RecipeItemInline]
