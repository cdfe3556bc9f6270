import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db import transaction
from django.shortcuts import get_object_or_404

from backoffice.core.crud import serializer_context
from backoffice.core.tenancy import business_unit_view
from backoffice.core.utils import create_audit_log
from .models import SalesQuotation, ARInvoice, IncomingPayment
from .serializers import SalesQuotationSerializer, ARInvoiceSerializer, IncomingPaymentSerializer
from . import services

logger = logging.getLogger('backoffice.sales')


# Sales quotation views
def quotations_queryset(business_unit):
    return SalesQuotation.objects.filter(business_unit=business_unit).select_related(
        'business_partner', 'owner'
    ).prefetch_related('items__menu_item')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
@business_unit_view
def quotation_list_create(request, business_unit):
    """List sales quotations (``status`` filter) or create one"""
    context = serializer_context(request, business_unit)
    if request.method == 'GET':
        queryset = quotations_queryset(business_unit)
        status_filter = request.query_params.get('status')
        if status_filter:
            queryset = queryset.filter(status=status_filter.upper())
        return Response(SalesQuotationSerializer(queryset, many=True, context=context).data)

    serializer = SalesQuotationSerializer(data=request.data, context=context)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    with transaction.atomic():
        quotation = services.create_quotation(business_unit, request.user, serializer.validated_data)

    create_audit_log(
        request=request, action='create', model_name='SalesQuotation', object_id=quotation.id,
        object_reference=quotation.doc_num,
    )
    quotation = quotations_queryset(business_unit).get(pk=quotation.pk)
    return Response(SalesQuotationSerializer(quotation).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
@business_unit_view
def quotation_detail(request, business_unit, pk):
    quotation = get_object_or_404(quotations_queryset(business_unit), pk=pk)
    context = serializer_context(request, business_unit)

    if request.method == 'GET':
        return Response(SalesQuotationSerializer(quotation, context=context).data)

    if request.method == 'DELETE':
        doc_num = quotation.doc_num
        quotation.delete()
        create_audit_log(
            request=request, action='delete', model_name='SalesQuotation', object_id=pk, object_reference=doc_num,
        )
        return Response(status=status.HTTP_204_NO_CONTENT)

    serializer = SalesQuotationSerializer(
        quotation, data=request.data, partial=request.method == 'PATCH', context=context
    )
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    with transaction.atomic():
        quotation = SalesQuotation.objects.select_for_update().get(pk=quotation.pk)
        services.update_quotation(quotation, serializer.validated_data)

    create_audit_log(
        request=request, action='update', model_name='SalesQuotation', object_id=quotation.id,
        object_reference=quotation.doc_num,
        changes={key: str(value) for key, value in request.data.items() if key != 'items'},
    )
    quotation = quotations_queryset(business_unit).get(pk=quotation.pk)
    return Response(SalesQuotationSerializer(quotation).data)


# A/R invoice views
def ar_invoices_queryset(business_unit):
    return ARInvoice.objects.filter(business_unit=business_unit).select_related(
        'business_partner', 'base_quotation'
    ).prefetch_related('items__gl_account')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
@business_unit_view
def ar_invoice_list_create(request, business_unit):
    """List A/R invoices (``status``, ``settlement_status``, ``customer`` filters) or create one"""
    context = serializer_context(request, business_unit)
    if request.method == 'GET':
        queryset = ar_invoices_queryset(business_unit)
        for param, field in (('status', 'status'), ('settlement_status', 'settlement_status')):
            value = request.query_params.get(param)
            if value:
                queryset = queryset.filter(**{field: value.upper()})
        customer = request.query_params.get('customer')
        if customer:
            queryset = queryset.filter(business_partner_id=customer)
        return Response(ARInvoiceSerializer(queryset, many=True, context=context).data)

    serializer = ARInvoiceSerializer(data=request.data, context=context)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    with transaction.atomic():
        invoice = services.create_ar_invoice(business_unit, request.user, serializer.validated_data)

    create_audit_log(
        request=request, action='create', model_name='ARInvoice', object_id=invoice.id,
        object_reference=invoice.doc_num,
        changes={'subtotal': str(invoice.subtotal), 'tax_amount': str(invoice.tax_amount),
                 'total_amount': str(invoice.total_amount)},
    )
    invoice = ar_invoices_queryset(business_unit).get(pk=invoice.pk)
    return Response(ARInvoiceSerializer(invoice).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@business_unit_view
def ar_invoice_detail(request, business_unit, pk):
    invoice = get_object_or_404(ar_invoices_queryset(business_unit), pk=pk)
    return Response(ARInvoiceSerializer(invoice).data)


# Incoming payment views
def incoming_payments_queryset(business_unit):
    return IncomingPayment.objects.filter(business_unit=business_unit).select_related(
        'business_partner', 'payment_method', 'bank_account'
    ).prefetch_related('applications__ar_invoice')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
@business_unit_view
def incoming_payment_list_create(request, business_unit):
    """List incoming payments or receive one against open A/R invoices"""
    context = serializer_context(request, business_unit)
    if request.method == 'GET':
        queryset = incoming_payments_queryset(business_unit)
        return Response(IncomingPaymentSerializer(queryset, many=True, context=context).data)

    serializer = IncomingPaymentSerializer(data=request.data, context=context)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    with transaction.atomic():
        payment = services.create_incoming_payment(business_unit, request.user, serializer.validated_data)

    create_audit_log(
        request=request, action='create', model_name='IncomingPayment', object_id=payment.id,
        object_reference=payment.doc_num,
        changes={'amount': str(payment.amount), 'invoices': [
            application['ar_invoice'].doc_num for application in serializer.validated_data['applications']
        ]},
    )
    payment = incoming_payments_queryset(business_unit).get(pk=payment.pk)
    return Response(IncomingPaymentSerializer(payment).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@business_unit_view
def incoming_payment_detail(request, business_unit, pk):
    payment = get_object_or_404(incoming_payments_queryset(business_unit), pk=pk)
    return Response(IncomingPaymentSerializer(payment).data)
