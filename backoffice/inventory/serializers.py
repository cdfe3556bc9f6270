from decimal import Decimal

from rest_framework import serializers

from backoffice.core.serializers import BusinessUnitScopedMixin
from .models import InventoryLocation, InventoryStock, InventoryMovement, StockRequisition, StockRequisitionItem


class InventoryLocationSerializer(serializers.ModelSerializer):
    class Meta:
        model = InventoryLocation
        fields = ['id', 'name', 'description', 'created_at', 'updated_at']


class InventoryMovementSerializer(serializers.ModelSerializer):
    created_by_name = serializers.CharField(source='created_by.get_display_name', read_only=True, default=None)

    class Meta:
        model = InventoryMovement
        fields = ['id', 'inventory_stock', 'type', 'quantity', 'reason', 'created_by', 'created_by_name', 'created_at']


class InventoryStockSerializer(BusinessUnitScopedMixin, serializers.ModelSerializer):
    item_name = serializers.CharField(source='inventory_item.name', read_only=True)
    uom_symbol = serializers.CharField(source='inventory_item.uom.symbol', read_only=True)
    category_name = serializers.CharField(source='inventory_item.category.name', read_only=True, default=None)
    standard_cost = serializers.DecimalField(source='inventory_item.standard_cost', max_digits=15, decimal_places=4, read_only=True)
    location_name = serializers.CharField(source='location.name', read_only=True)
    is_low_stock = serializers.BooleanField(read_only=True)
    latest_movement = serializers.SerializerMethodField()

    class Meta:
        model = InventoryStock
        fields = ['id', 'inventory_item', 'item_name', 'uom_symbol', 'category_name', 'standard_cost',
                  'location', 'location_name', 'quantity_on_hand', 'reorder_point', 'par_level',
                  'is_low_stock', 'latest_movement', 'updated_at']
        read_only_fields = ['quantity_on_hand']
        validators = []

    def get_latest_movement(self, obj):
        movements = list(obj.movements.all()[:1])
        return InventoryMovementSerializer(movements[0]).data if movements else None

    def validate(self, attrs):
        for field in ('reorder_point', 'par_level'):
            if attrs.get(field, Decimal('0')) < 0:
                raise serializers.ValidationError({field: 'Must not be negative'})
        return attrs


class StockAdjustmentSerializer(BusinessUnitScopedMixin, serializers.Serializer):
    INCREASE = 'INCREASE'
    DECREASE = 'DECREASE'

    inventory_stock = serializers.PrimaryKeyRelatedField(queryset=InventoryStock.objects.all())
    adjustment_type = serializers.ChoiceField(choices=[INCREASE, DECREASE])
    quantity = serializers.DecimalField(max_digits=14, decimal_places=4)
    reason = serializers.CharField(max_length=150)
    notes = serializers.CharField(required=False, allow_blank=True)

    def validate_quantity(self, value):
        if value <= 0:
            raise serializers.ValidationError('Quantity must be greater than zero')
        return value


class StockRequisitionItemSerializer(BusinessUnitScopedMixin, serializers.ModelSerializer):
    item_name = serializers.CharField(source='inventory_item.name', read_only=True)

    class Meta:
        model = StockRequisitionItem
        fields = ['id', 'inventory_item', 'item_name', 'requested_quantity', 'fulfilled_quantity', 'notes']
        read_only_fields = ['fulfilled_quantity']

    def validate_requested_quantity(self, value):
        if value <= 0:
            raise serializers.ValidationError('Requested quantity must be greater than zero')
        return value


class StockRequisitionSerializer(BusinessUnitScopedMixin, serializers.ModelSerializer):
    items = StockRequisitionItemSerializer(many=True)
    from_location_name = serializers.CharField(source='from_location.name', read_only=True)
    to_location_name = serializers.CharField(source='to_location.name', read_only=True)
    requester_name = serializers.CharField(source='requester.get_display_name', read_only=True)

    class Meta:
        model = StockRequisition
        fields = ['id', 'requisition_number', 'from_location', 'from_location_name', 'to_location',
                  'to_location_name', 'status', 'notes', 'requester', 'requester_name', 'items',
                  'fulfilled_at', 'created_at', 'updated_at']
        read_only_fields = ['requisition_number', 'status', 'requester', 'fulfilled_at']

    def validate_items(self, value):
        if not value:
            raise serializers.ValidationError('At least one item is required')
        return value

    def validate(self, attrs):
        if attrs['from_location'] == attrs['to_location']:
            raise serializers.ValidationError({'to_location': 'Source and destination locations must differ'})
        return attrs
