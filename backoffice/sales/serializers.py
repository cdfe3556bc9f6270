from django.utils import timezone
from rest_framework import serializers

from backoffice.core.serializers import BusinessUnitScopedMixin
from backoffice.parties.models import BusinessPartner
from .models import (
    OPEN, SalesQuotation, SalesQuotationItem, ARInvoice, ARInvoiceItem, IncomingPayment, IncomingPaymentApplication
)


def validate_customer(value):
    if value.type != BusinessPartner.CUSTOMER:
        raise serializers.ValidationError('Business partner must be a customer')
    return value


def validate_lines(value, label='item'):
    if not value:
        raise serializers.ValidationError(f'At least one {label} is required')
    return value


class SalesQuotationItemSerializer(BusinessUnitScopedMixin, serializers.ModelSerializer):
    menu_item_name = serializers.CharField(source='menu_item.name', read_only=True)
    description = serializers.CharField(max_length=255, required=False, allow_blank=True)

    class Meta:
        model = SalesQuotationItem
        fields = ['id', 'menu_item', 'menu_item_name', 'description', 'quantity', 'unit_price', 'line_total']
        read_only_fields = ['line_total']

    def validate_quantity(self, value):
        if value <= 0:
            raise serializers.ValidationError('Quantity must be greater than zero')
        return value

    def validate(self, attrs):
        if not attrs.get('description'):
            attrs['description'] = attrs['menu_item'].name
        return attrs


class SalesQuotationSerializer(BusinessUnitScopedMixin, serializers.ModelSerializer):
    items = SalesQuotationItemSerializer(many=True)
    customer_name = serializers.CharField(source='business_partner.name', read_only=True)
    owner_name = serializers.CharField(source='owner.get_display_name', read_only=True)
    total_amount = serializers.SerializerMethodField()
    document_date = serializers.DateField(required=False)
    posting_date = serializers.DateField(required=False)

    class Meta:
        model = SalesQuotation
        fields = ['id', 'doc_num', 'business_partner', 'customer_name', 'document_date', 'posting_date',
                  'valid_until', 'remarks', 'status', 'owner', 'owner_name', 'items', 'total_amount',
                  'created_at', 'updated_at']
        read_only_fields = ['doc_num', 'status', 'owner']

    def get_total_amount(self, obj):
        return str(obj.get_total_amount())

    def validate_business_partner(self, value):
        return validate_customer(value)

    def validate_items(self, value):
        return validate_lines(value)

    def validate(self, attrs):
        if self.instance is None:
            today = timezone.localdate()
            attrs.setdefault('document_date', today)
            attrs.setdefault('posting_date', today)
        document_date = attrs.get('document_date', getattr(self.instance, 'document_date', None))
        valid_until = attrs.get('valid_until', getattr(self.instance, 'valid_until', None))
        if document_date and valid_until and valid_until < document_date:
            raise serializers.ValidationError({'valid_until': 'Valid until cannot be before the document date'})
        return attrs


class ARInvoiceItemSerializer(BusinessUnitScopedMixin, serializers.ModelSerializer):
    gl_account_code = serializers.CharField(source='gl_account.account_code', read_only=True)
    description = serializers.CharField(max_length=255, required=False, allow_blank=True)

    class Meta:
        model = ARInvoiceItem
        fields = ['id', 'menu_item', 'description', 'quantity', 'unit_price', 'discount', 'line_total',
                  'gl_account', 'gl_account_code']
        read_only_fields = ['line_total']

    def validate_quantity(self, value):
        if value <= 0:
            raise serializers.ValidationError('Quantity must be greater than zero')
        return value

    def validate_discount(self, value):
        if value < 0:
            raise serializers.ValidationError('Discount cannot be negative')
        return value

    def validate(self, attrs):
        if not attrs.get('description'):
            if attrs.get('menu_item') is None:
                raise serializers.ValidationError({'description': 'Description is required without a menu item'})
            attrs['description'] = attrs['menu_item'].name
        return attrs


class ARInvoiceSerializer(BusinessUnitScopedMixin, serializers.ModelSerializer):
    items = ARInvoiceItemSerializer(many=True)
    customer_name = serializers.CharField(source='business_partner.name', read_only=True)
    base_quotation_doc_num = serializers.CharField(source='base_quotation.doc_num', read_only=True, default=None)
    outstanding_amount = serializers.DecimalField(max_digits=18, decimal_places=2, read_only=True)
    document_date = serializers.DateField(required=False)

    class Meta:
        model = ARInvoice
        fields = ['id', 'doc_num', 'business_partner', 'customer_name', 'base_quotation', 'base_quotation_doc_num',
                  'posting_date', 'due_date', 'document_date', 'remarks', 'subtotal', 'tax_amount',
                  'total_amount', 'amount_paid', 'outstanding_amount', 'status', 'settlement_status',
                  'created_by', 'items', 'created_at', 'updated_at']
        read_only_fields = ['doc_num', 'subtotal', 'tax_amount', 'total_amount', 'amount_paid', 'status',
                            'settlement_status', 'created_by']

    def validate_business_partner(self, value):
        return validate_customer(value)

    def validate_items(self, value):
        return validate_lines(value)

    def validate(self, attrs):
        attrs.setdefault('document_date', attrs['posting_date'])
        if attrs['due_date'] < attrs['posting_date']:
            raise serializers.ValidationError({'due_date': 'Due date cannot be before the posting date'})
        quotation = attrs.get('base_quotation')
        if quotation is not None:
            if quotation.business_partner_id != attrs['business_partner'].id:
                raise serializers.ValidationError({'base_quotation': 'Quotation belongs to another customer'})
            if quotation.status != OPEN:
                raise serializers.ValidationError({'base_quotation': 'Quotation is not open'})
        return attrs


class IncomingPaymentApplicationSerializer(BusinessUnitScopedMixin, serializers.ModelSerializer):
    ar_invoice_doc_num = serializers.CharField(source='ar_invoice.doc_num', read_only=True)

    class Meta:
        model = IncomingPaymentApplication
        fields = ['id', 'ar_invoice', 'ar_invoice_doc_num', 'amount_applied']


class IncomingPaymentSerializer(BusinessUnitScopedMixin, serializers.ModelSerializer):
    applications = IncomingPaymentApplicationSerializer(many=True)
    customer_name = serializers.CharField(source='business_partner.name', read_only=True)
    payment_method_name = serializers.CharField(source='payment_method.name', read_only=True, default=None)
    bank_account_name = serializers.CharField(source='bank_account.name', read_only=True, default=None)

    class Meta:
        model = IncomingPayment
        fields = ['id', 'doc_num', 'business_partner', 'customer_name', 'payment_date', 'payment_method',
                  'payment_method_name', 'bank_account', 'bank_account_name', 'reference_number', 'amount',
                  'remarks', 'applications', 'created_by', 'created_at']
        read_only_fields = ['doc_num', 'amount', 'created_by']

    def validate_business_partner(self, value):
        return validate_customer(value)

    def validate_applications(self, value):
        return validate_lines(value, 'invoice application')

    def validate(self, attrs):
        for application in attrs['applications']:
            if application['ar_invoice'].business_partner_id != attrs['business_partner'].id:
                raise serializers.ValidationError(
                    {'applications': f"Invoice {application['ar_invoice'].doc_num} belongs to another customer"}
                )
        return attrs
