from decimal import Decimal

from rest_framework import serializers

from backoffice.core.serializers import BusinessUnitScopedMixin
from backoffice.catalog.models import PaymentMethod
from backoffice.catalog.serializers import MenuItemSerializer, PaymentMethodSerializer
from backoffice.financials.models import NumberingSeries
from backoffice.inventory.models import InventoryLocation
from .models import (
    POSConfiguration, MenuItemGLMapping, PaymentMethodGLMapping, Table, Discount,
    Order, OrderItem, OrderItemModifier, Payment
)


class POSConfigurationSerializer(BusinessUnitScopedMixin, serializers.ModelSerializer):
    sales_revenue_account_code = serializers.CharField(source='sales_revenue_account.account_code', read_only=True, default=None)
    sales_tax_account_code = serializers.CharField(source='sales_tax_account.account_code', read_only=True, default=None)
    cash_account_code = serializers.CharField(source='cash_account.account_code', read_only=True, default=None)

    class Meta:
        model = POSConfiguration
        fields = ['id', 'auto_post_to_gl', 'auto_create_ar_invoice',
                  'sales_revenue_account', 'sales_revenue_account_code',
                  'sales_tax_account', 'sales_tax_account_code',
                  'cash_account', 'cash_account_code', 'discount_account', 'service_charge_account',
                  'default_customer_bp_code', 'require_customer_selection', 'enable_discounts',
                  'enable_service_charge', 'service_charge_rate', 'ar_invoice_series', 'journal_entry_series',
                  'created_at', 'updated_at']

    def validate_service_charge_rate(self, value):
        if value < 0 or value > 100:
            raise serializers.ValidationError('Service charge rate must be between 0 and 100')
        return value

    def validate_ar_invoice_series(self, value):
        if value is not None and value.document_type != NumberingSeries.AR_INVOICE:
            raise serializers.ValidationError('Series must be an A/R invoice series')
        return value

    def validate_journal_entry_series(self, value):
        if value is not None and value.document_type != NumberingSeries.JOURNAL_ENTRY:
            raise serializers.ValidationError('Series must be a journal entry series')
        return value


class MenuItemGLMappingSerializer(BusinessUnitScopedMixin, serializers.ModelSerializer):
    menu_item_name = serializers.CharField(source='menu_item.name', read_only=True)
    sales_account_code = serializers.CharField(source='sales_account.account_code', read_only=True)
    cogs_account_code = serializers.CharField(source='cogs_account.account_code', read_only=True, default=None)
    inventory_account_code = serializers.CharField(source='inventory_account.account_code', read_only=True, default=None)

    class Meta:
        model = MenuItemGLMapping
        fields = ['id', 'menu_item', 'menu_item_name', 'sales_account', 'sales_account_code', 'cogs_account',
                  'cogs_account_code', 'inventory_account', 'inventory_account_code', 'updated_at']
        validators = []


class PaymentMethodGLMappingSerializer(BusinessUnitScopedMixin, serializers.ModelSerializer):
    payment_method_name = serializers.CharField(source='payment_method.name', read_only=True)
    gl_account_code = serializers.CharField(source='gl_account.account_code', read_only=True)
    gl_account_name = serializers.CharField(source='gl_account.name', read_only=True)

    class Meta:
        model = PaymentMethodGLMapping
        fields = ['id', 'payment_method', 'payment_method_name', 'gl_account', 'gl_account_code',
                  'gl_account_name', 'updated_at']
        validators = []


class MenuItemWithMappingSerializer(MenuItemSerializer):
    gl_mapping = serializers.SerializerMethodField()

    class Meta(MenuItemSerializer.Meta):
        fields = MenuItemSerializer.Meta.fields + ['gl_mapping']

    def get_gl_mapping(self, obj):
        mapping = next(iter(obj.gl_mappings.all()), None)
        return MenuItemGLMappingSerializer(mapping).data if mapping else None


class PaymentMethodWithMappingSerializer(PaymentMethodSerializer):
    gl_mapping = serializers.SerializerMethodField()

    class Meta(PaymentMethodSerializer.Meta):
        fields = PaymentMethodSerializer.Meta.fields + ['gl_mapping']

    def get_gl_mapping(self, obj):
        mapping = next(iter(obj.gl_mappings.all()), None)
        return PaymentMethodGLMappingSerializer(mapping).data if mapping else None


class TableSerializer(serializers.ModelSerializer):
    class Meta:
        model = Table
        fields = ['id', 'table_number', 'capacity', 'status', 'created_at', 'updated_at']


class DiscountSerializer(BusinessUnitScopedMixin, serializers.ModelSerializer):
    class Meta:
        model = Discount
        fields = ['id', 'name', 'type', 'value', 'is_active', 'gl_account', 'created_at']

    def validate(self, attrs):
        discount_type = attrs.get('type', getattr(self.instance, 'type', None))
        value = attrs.get('value', getattr(self.instance, 'value', Decimal('0')))
        if discount_type == Discount.PERCENTAGE and value > 100:
            raise serializers.ValidationError({'value': 'Percentage discount cannot exceed 100'})
        return attrs


# Orders
class OrderItemModifierSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderItemModifier
        fields = ['id', 'name', 'price_change']


class OrderItemSerializer(BusinessUnitScopedMixin, serializers.ModelSerializer):
    menu_item_name = serializers.CharField(source='menu_item.name', read_only=True)
    modifiers = OrderItemModifierSerializer(many=True, required=False)
    line_total = serializers.SerializerMethodField()

    class Meta:
        model = OrderItem
        fields = ['id', 'menu_item', 'menu_item_name', 'quantity', 'price_at_sale', 'notes', 'modifiers', 'line_total']
        read_only_fields = ['price_at_sale']

    def get_line_total(self, obj):
        return str(obj.get_line_total())

    def validate_menu_item(self, value):
        if not value.is_active:
            raise serializers.ValidationError(f'Menu item {value.name} is not active')
        return value


class PaymentSerializer(serializers.ModelSerializer):
    payment_method_name = serializers.CharField(source='payment_method.name', read_only=True)
    cashier_name = serializers.CharField(source='cashier.get_display_name', read_only=True)

    class Meta:
        model = Payment
        fields = ['id', 'payment_method', 'payment_method_name', 'amount', 'change', 'reference_number',
                  'cashier', 'cashier_name', 'created_at']


class OrderSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)
    payments = PaymentSerializer(many=True, read_only=True)
    table_number = serializers.CharField(source='table.table_number', read_only=True, default=None)
    waiter_name = serializers.CharField(source='waiter.get_display_name', read_only=True, default=None)
    customer_name = serializers.CharField(source='customer.name', read_only=True, default=None)
    discount_name = serializers.CharField(source='discount.name', read_only=True, default=None)
    ar_invoice_doc_num = serializers.CharField(source='ar_invoice.doc_num', read_only=True, default=None)
    journal_entry_doc_num = serializers.CharField(source='journal_entry.doc_num', read_only=True, default=None)

    class Meta:
        model = Order
        fields = ['id', 'table', 'table_number', 'waiter', 'waiter_name', 'customer', 'customer_name',
                  'discount', 'discount_name', 'order_type', 'status', 'subtotal', 'discount_value',
                  'tax_amount', 'total_amount', 'amount_paid', 'notes', 'is_posted', 'ar_invoice',
                  'ar_invoice_doc_num', 'journal_entry', 'journal_entry_doc_num', 'posted_at', 'items',
                  'payments', 'created_by', 'created_at', 'updated_at']


class OrderCreateSerializer(BusinessUnitScopedMixin, serializers.ModelSerializer):
    items = OrderItemSerializer(many=True)
    send_to_kitchen = serializers.BooleanField(default=False)

    class Meta:
        model = Order
        fields = ['table', 'waiter', 'customer', 'discount', 'order_type', 'notes', 'items', 'send_to_kitchen']

    def validate_items(self, value):
        if not value:
            raise serializers.ValidationError('At least one item is required')
        return value


class OrderAddItemsSerializer(BusinessUnitScopedMixin, serializers.Serializer):
    items = OrderItemSerializer(many=True)

    def validate_items(self, value):
        if not value:
            raise serializers.ValidationError('At least one item is required')
        return value


class SettlementSerializer(BusinessUnitScopedMixin, serializers.Serializer):
    order = serializers.PrimaryKeyRelatedField(queryset=Order.objects.all())
    payment_method = serializers.PrimaryKeyRelatedField(queryset=PaymentMethod.objects.all())
    amount_received = serializers.DecimalField(max_digits=15, decimal_places=2)
    reference_number = serializers.CharField(max_length=100, required=False, allow_blank=True)
    discount = serializers.PrimaryKeyRelatedField(queryset=Discount.objects.all(), required=False, allow_null=True)
    location = serializers.PrimaryKeyRelatedField(queryset=InventoryLocation.objects.all(), required=False, allow_null=True)

    def validate_payment_method(self, value):
        if not value.is_active:
            raise serializers.ValidationError(f'Payment method {value.name} is not active')
        return value

    def validate_discount(self, value):
        if value is not None and not value.is_active:
            raise serializers.ValidationError(f'Discount {value.name} is not active')
        return value

    def validate_amount_received(self, value):
        if value < 0:
            raise serializers.ValidationError('Amount received cannot be negative')
        return value
