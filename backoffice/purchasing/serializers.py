from decimal import Decimal

from django.utils import timezone
from rest_framework import serializers

from backoffice.core.serializers import BusinessUnitScopedMixin
from backoffice.parties.models import BusinessPartner
from .models import (
    PurchaseRequest, PurchaseRequestItem, PurchaseOrder, PurchaseOrderItem,
    GoodsReceipt, GoodsReceiptItem, APInvoice, APInvoiceItem, OutgoingPayment, OutgoingPaymentApplication
)


def positive(value, label='Quantity'):
    if value <= 0:
        raise serializers.ValidationError(f'{label} must be greater than zero')
    return value


# Purchase requests
class PurchaseRequestItemSerializer(BusinessUnitScopedMixin, serializers.ModelSerializer):
    uom_symbol = serializers.CharField(source='uom.symbol', read_only=True, default=None)

    class Meta:
        model = PurchaseRequestItem
        fields = ['id', 'description', 'requested_quantity', 'uom', 'uom_symbol', 'notes']

    def validate_requested_quantity(self, value):
        return positive(value, 'Requested quantity')


class PurchaseRequestSerializer(serializers.ModelSerializer):
    items = PurchaseRequestItemSerializer(many=True)
    requestor_name = serializers.CharField(source='requestor.get_display_name', read_only=True)
    approver_name = serializers.CharField(source='approver.get_display_name', read_only=True, default=None)
    request_date = serializers.DateField(required=False)

    class Meta:
        model = PurchaseRequest
        fields = ['id', 'pr_number', 'requestor', 'requestor_name', 'request_date', 'required_date', 'notes',
                  'status', 'approver', 'approver_name', 'approval_date', 'items', 'created_at', 'updated_at']
        read_only_fields = ['pr_number', 'requestor', 'status', 'approver', 'approval_date']

    def validate_items(self, value):
        if not value:
            raise serializers.ValidationError('At least one item is required')
        return value

    def validate(self, attrs):
        request_date = attrs.setdefault('request_date', timezone.localdate())
        required_date = attrs.get('required_date')
        if required_date and required_date < request_date:
            raise serializers.ValidationError({'required_date': 'Required date cannot be before the request date'})
        return attrs


# Purchase orders
class PurchaseOrderItemSerializer(BusinessUnitScopedMixin, serializers.ModelSerializer):
    inventory_item_name = serializers.CharField(source='inventory_item.name', read_only=True, default=None)
    uom_symbol = serializers.CharField(source='uom.symbol', read_only=True, default=None)
    gl_account_code = serializers.CharField(source='gl_account.account_code', read_only=True, default=None)

    class Meta:
        model = PurchaseOrderItem
        fields = ['id', 'inventory_item', 'inventory_item_name', 'description', 'uom', 'uom_symbol', 'quantity',
                  'unit_price', 'line_total', 'open_quantity', 'gl_account', 'gl_account_code']
        read_only_fields = ['line_total', 'open_quantity']

    def validate_quantity(self, value):
        return positive(value)

    def validate_unit_price(self, value):
        if value < 0:
            raise serializers.ValidationError('Unit price cannot be negative')
        return value


class PurchaseOrderSerializer(BusinessUnitScopedMixin, serializers.ModelSerializer):
    items = PurchaseOrderItemSerializer(many=True)
    bp_code = serializers.CharField(write_only=True)
    vendor_code = serializers.CharField(source='business_partner.bp_code', read_only=True)
    vendor_name = serializers.CharField(source='business_partner.name', read_only=True)
    pr_number = serializers.CharField(source='purchase_request.pr_number', read_only=True, default=None)
    owner_name = serializers.CharField(source='owner.get_display_name', read_only=True)
    amount_received = serializers.SerializerMethodField()
    has_open_items = serializers.SerializerMethodField()

    class Meta:
        model = PurchaseOrder
        fields = ['id', 'po_number', 'bp_code', 'business_partner', 'vendor_code', 'vendor_name',
                  'purchase_request', 'pr_number', 'document_date', 'posting_date', 'delivery_date', 'remarks',
                  'status', 'total_amount', 'amount_received', 'has_open_items', 'owner', 'owner_name', 'items',
                  'created_at', 'updated_at']
        read_only_fields = ['po_number', 'business_partner', 'status', 'total_amount', 'owner']
        extra_kwargs = {'purchase_request': {'required': True, 'allow_null': False}}

    def get_amount_received(self, obj):
        return str(obj.get_amount_received())

    def get_has_open_items(self, obj):
        return obj.has_open_items()

    def validate_items(self, value):
        if not value:
            raise serializers.ValidationError('At least one item is required')
        return value

    def validate(self, attrs):
        business_unit = self.context['business_unit']
        vendor = BusinessPartner.objects.filter(
            business_unit=business_unit, bp_code=attrs.pop('bp_code'), type=BusinessPartner.VENDOR
        ).first()
        if vendor is None:
            raise serializers.ValidationError({'bp_code': 'Vendor not found'})
        attrs['business_partner'] = vendor
        if attrs['purchase_request'].status != PurchaseRequest.APPROVED:
            raise serializers.ValidationError({'purchase_request': 'Purchase request must be approved'})
        return attrs


# Goods receipts
class GoodsReceiptItemSerializer(BusinessUnitScopedMixin, serializers.ModelSerializer):
    description = serializers.CharField(source='purchase_order_item.description', read_only=True)
    inventory_item_name = serializers.CharField(source='inventory_item.name', read_only=True)
    location_name = serializers.CharField(source='location.name', read_only=True)
    unit_price = serializers.DecimalField(source='purchase_order_item.unit_price', max_digits=15, decimal_places=4, read_only=True)

    class Meta:
        model = GoodsReceiptItem
        fields = ['id', 'purchase_order_item', 'description', 'inventory_item', 'inventory_item_name', 'location',
                  'location_name', 'quantity', 'unit_price', 'batch_number', 'expiry_date', 'notes']
        read_only_fields = ['inventory_item']

    def validate_quantity(self, value):
        return positive(value, 'Received quantity')


class GoodsReceiptSerializer(BusinessUnitScopedMixin, serializers.ModelSerializer):
    items = GoodsReceiptItemSerializer(many=True)
    po_number = serializers.CharField(source='purchase_order.po_number', read_only=True)
    vendor_name = serializers.CharField(source='business_partner.name', read_only=True)
    received_by_name = serializers.CharField(source='received_by.get_display_name', read_only=True)
    total_quantity = serializers.SerializerMethodField()
    total_value = serializers.SerializerMethodField()
    document_date = serializers.DateField(required=False)
    posting_date = serializers.DateField(required=False)

    class Meta:
        model = GoodsReceipt
        fields = ['id', 'doc_num', 'purchase_order', 'po_number', 'business_partner', 'vendor_name',
                  'document_date', 'posting_date', 'remarks', 'received_by', 'received_by_name', 'items',
                  'total_quantity', 'total_value', 'created_at']
        read_only_fields = ['doc_num', 'business_partner', 'received_by']

    def get_total_quantity(self, obj):
        return str(sum((item.quantity for item in obj.items.all()), Decimal('0')))

    def get_total_value(self, obj):
        return str(sum(
            (item.quantity * item.purchase_order_item.unit_price for item in obj.items.all()), Decimal('0')
        ))

    def validate_items(self, value):
        if not value:
            raise serializers.ValidationError('At least one item is required')
        return value

    def validate(self, attrs):
        today = timezone.localdate()
        attrs.setdefault('document_date', today)
        attrs.setdefault('posting_date', today)
        return attrs


# A/P invoices
class APInvoiceItemSerializer(BusinessUnitScopedMixin, serializers.ModelSerializer):
    gl_account_code = serializers.CharField(source='gl_account.account_code', read_only=True)

    class Meta:
        model = APInvoiceItem
        fields = ['id', 'description', 'quantity', 'unit_price', 'line_total', 'gl_account', 'gl_account_code']
        read_only_fields = ['line_total']

    def validate_quantity(self, value):
        return positive(value)


class APInvoiceSerializer(BusinessUnitScopedMixin, serializers.ModelSerializer):
    items = APInvoiceItemSerializer(many=True)
    vendor_name = serializers.CharField(source='business_partner.name', read_only=True)
    outstanding_amount = serializers.DecimalField(max_digits=18, decimal_places=2, read_only=True)
    base_po_number = serializers.CharField(source='base_purchase_order.po_number', read_only=True, default=None)
    document_date = serializers.DateField(required=False)

    class Meta:
        model = APInvoice
        fields = ['id', 'doc_num', 'business_partner', 'vendor_name', 'base_purchase_order', 'base_po_number',
                  'posting_date', 'due_date', 'document_date', 'remarks', 'total_amount', 'amount_paid',
                  'outstanding_amount', 'status', 'settlement_status', 'created_by', 'items',
                  'created_at', 'updated_at']
        read_only_fields = ['doc_num', 'total_amount', 'amount_paid', 'status', 'settlement_status', 'created_by']

    def validate_business_partner(self, value):
        if value.type != BusinessPartner.VENDOR:
            raise serializers.ValidationError('Business partner must be a vendor')
        return value

    def validate_items(self, value):
        if not value:
            raise serializers.ValidationError('At least one item is required')
        return value

    def validate(self, attrs):
        attrs.setdefault('document_date', attrs['posting_date'])
        if attrs['due_date'] < attrs['posting_date']:
            raise serializers.ValidationError({'due_date': 'Due date cannot be before the posting date'})
        base_order = attrs.get('base_purchase_order')
        if base_order and base_order.business_partner_id != attrs['business_partner'].id:
            raise serializers.ValidationError({'base_purchase_order': 'Purchase order belongs to another vendor'})
        return attrs


# Outgoing payments
class OutgoingPaymentApplicationSerializer(BusinessUnitScopedMixin, serializers.ModelSerializer):
    ap_invoice_doc_num = serializers.CharField(source='ap_invoice.doc_num', read_only=True)

    class Meta:
        model = OutgoingPaymentApplication
        fields = ['id', 'ap_invoice', 'ap_invoice_doc_num', 'amount_applied']

    def validate_amount_applied(self, value):
        return positive(value, 'Amount applied')


class OutgoingPaymentSerializer(BusinessUnitScopedMixin, serializers.ModelSerializer):
    applications = OutgoingPaymentApplicationSerializer(many=True)
    vendor_name = serializers.CharField(source='business_partner.name', read_only=True)

    class Meta:
        model = OutgoingPayment
        fields = ['id', 'doc_num', 'business_partner', 'vendor_name', 'bank_account', 'payment_date',
                  'reference_number', 'amount', 'remarks', 'applications', 'created_by', 'created_at']
        read_only_fields = ['doc_num', 'amount', 'created_by']

    def validate_business_partner(self, value):
        if value.type != BusinessPartner.VENDOR:
            raise serializers.ValidationError('Business partner must be a vendor')
        return value

    def validate_applications(self, value):
        if not value:
            raise serializers.ValidationError('At least one invoice application is required')
        return value

    def validate(self, attrs):
        for application in attrs['applications']:
            if application['ap_invoice'].business_partner_id != attrs['business_partner'].id:
                raise serializers.ValidationError(
                    {'applications': f"Invoice {application['ap_invoice'].doc_num} belongs to another vendor"}
                )
        return attrs
