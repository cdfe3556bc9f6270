from rest_framework import serializers

from backoffice.core.serializers import BusinessUnitScopedMixin
from .models import (
    UoM, TaxCode, PaymentMethod, InventoryCategory, InventoryItem,
    MenuCategory, MenuItem, Recipe, RecipeItem
)


class UoMSerializer(BusinessUnitScopedMixin, serializers.ModelSerializer):
    class Meta:
        model = UoM
        fields = ['id', 'name', 'symbol', 'created_at', 'updated_at']


class TaxCodeSerializer(BusinessUnitScopedMixin, serializers.ModelSerializer):
    class Meta:
        model = TaxCode
        fields = ['id', 'code', 'description', 'rate', 'created_at', 'updated_at']


class PaymentMethodSerializer(BusinessUnitScopedMixin, serializers.ModelSerializer):
    class Meta:
        model = PaymentMethod
        fields = ['id', 'name', 'is_active', 'created_at', 'updated_at']


class InventoryCategorySerializer(BusinessUnitScopedMixin, serializers.ModelSerializer):
    class Meta:
        model = InventoryCategory
        fields = ['id', 'name', 'description', 'created_at', 'updated_at']


class InventoryItemSerializer(BusinessUnitScopedMixin, serializers.ModelSerializer):
    category_name = serializers.CharField(source='category.name', read_only=True, default=None)
    uom_name = serializers.CharField(source='uom.name', read_only=True)
    uom_symbol = serializers.CharField(source='uom.symbol', read_only=True)

    class Meta:
        model = InventoryItem
        fields = ['id', 'name', 'description', 'category', 'category_name', 'uom', 'uom_name', 'uom_symbol',
                  'standard_cost', 'is_active', 'created_at', 'updated_at']


class MenuCategorySerializer(BusinessUnitScopedMixin, serializers.ModelSerializer):
    class Meta:
        model = MenuCategory
        fields = ['id', 'name', 'description', 'sort_order', 'created_at', 'updated_at']


class MenuItemSerializer(BusinessUnitScopedMixin, serializers.ModelSerializer):
    category_name = serializers.CharField(source='category.name', read_only=True)
    has_recipe = serializers.SerializerMethodField()

    class Meta:
        model = MenuItem
        fields = ['id', 'name', 'description', 'price', 'category', 'category_name', 'image_url',
                  'is_active', 'has_recipe', 'created_at', 'updated_at']

    def get_has_recipe(self, obj):
        return hasattr(obj, 'recipe')


class RecipeItemSerializer(BusinessUnitScopedMixin, serializers.ModelSerializer):
    inventory_item_name = serializers.CharField(source='inventory_item.name', read_only=True)
    standard_cost = serializers.DecimalField(source='inventory_item.standard_cost', max_digits=15, decimal_places=4, read_only=True)
    uom_symbol = serializers.CharField(source='uom.symbol', read_only=True, default=None)

    class Meta:
        model = RecipeItem
        fields = ['id', 'inventory_item', 'inventory_item_name', 'standard_cost', 'quantity_used', 'uom', 'uom_symbol']

    def validate_quantity_used(self, value):
        if value <= 0:
            raise serializers.ValidationError("Quantity used must be greater than zero")
        return value


class RecipeSerializer(serializers.ModelSerializer):
    items = RecipeItemSerializer(many=True, read_only=True)
    menu_item_name = serializers.CharField(source='menu_item.name', read_only=True)

    class Meta:
        model = Recipe
        fields = ['id', 'menu_item', 'menu_item_name', 'name', 'items', 'created_at', 'updated_at']
        read_only_fields = ['menu_item']


class RecipeWriteSerializer(serializers.Serializer):
    """Replace a recipe: name plus the full item list"""
    name = serializers.CharField(max_length=200, required=False, allow_blank=True)
    items = RecipeItemSerializer(many=True)

    def validate_items(self, value):
        seen = set()
        for item in value:
            if item['inventory_item'].pk in seen:
                raise serializers.ValidationError(
                    f"Inventory item {item['inventory_item'].name} is listed more than once"
                )
            seen.add(item['inventory_item'].pk)
        return value
