import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db import transaction
from django.db.models import Exists, OuterRef
from django.shortcuts import get_object_or_404

from backoffice.core.crud import serializer_context
from backoffice.core.tenancy import business_unit_view, is_admin, admin_required_response, query_flag
from backoffice.core.utils import create_audit_log
from .models import PurchaseRequest, PurchaseOrder, PurchaseOrderItem, GoodsReceipt, APInvoice, OutgoingPayment
from .serializers import (
    PurchaseRequestSerializer, PurchaseOrderSerializer, GoodsReceiptSerializer,
    APInvoiceSerializer, OutgoingPaymentSerializer
)
from . import services

logger = logging.getLogger('backoffice.purchasing')


def filter_status(request, queryset):
    status_filter = request.query_params.get('status')
    if status_filter:
        queryset = queryset.filter(status=status_filter.upper())
    return queryset


# Purchase request views
def purchase_requests_queryset(business_unit):
    return PurchaseRequest.objects.filter(business_unit=business_unit).select_related(
        'requestor', 'approver'
    ).prefetch_related('items__uom')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
@business_unit_view
def purchase_request_list_create(request, business_unit):
    """List purchase requests (``status`` filter) or create one"""
    context = serializer_context(request, business_unit)
    if request.method == 'GET':
        queryset = filter_status(request, purchase_requests_queryset(business_unit))
        return Response(PurchaseRequestSerializer(queryset, many=True, context=context).data)

    serializer = PurchaseRequestSerializer(data=request.data, context=context)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    with transaction.atomic():
        purchase_request = services.create_purchase_request(business_unit, request.user, serializer.validated_data)

    create_audit_log(
        request=request, action='create', model_name='PurchaseRequest', object_id=purchase_request.id,
        object_reference=purchase_request.pr_number, changes={'items': len(serializer.validated_data['items'])},
    )
    purchase_request = purchase_requests_queryset(business_unit).get(pk=purchase_request.pk)
    return Response(PurchaseRequestSerializer(purchase_request).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@business_unit_view
def purchase_request_detail(request, business_unit, pk):
    purchase_request = get_object_or_404(purchase_requests_queryset(business_unit), pk=pk)
    return Response(PurchaseRequestSerializer(purchase_request).data)


def decide_purchase_request(request, business_unit, pk, target, action):
    if not is_admin(request):
        return admin_required_response()
    with transaction.atomic():
        purchase_request = get_object_or_404(
            PurchaseRequest.objects.select_for_update(), pk=pk, business_unit=business_unit
        )
        services.decide_purchase_request(purchase_request, request.user, target)

    create_audit_log(
        request=request, action=action, model_name='PurchaseRequest', object_id=purchase_request.id,
        object_reference=purchase_request.pr_number, changes={'status': target},
    )
    logger.info(f"Purchase request {purchase_request.pr_number} {target.lower()} by {request.user.username}")
    purchase_request = purchase_requests_queryset(business_unit).get(pk=purchase_request.pk)
    return Response(PurchaseRequestSerializer(purchase_request).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@business_unit_view
def purchase_request_approve(request, business_unit, pk):
    """Approve a pending purchase request (Admin only)"""
    return decide_purchase_request(request, business_unit, pk, PurchaseRequest.APPROVED, 'approve')


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@business_unit_view
def purchase_request_reject(request, business_unit, pk):
    return decide_purchase_request(request, business_unit, pk, PurchaseRequest.REJECTED, 'reject')


# Purchase order views
def purchase_orders_queryset(business_unit):
    return PurchaseOrder.objects.filter(business_unit=business_unit).select_related(
        'business_partner', 'purchase_request', 'owner'
    ).prefetch_related('items__inventory_item', 'items__uom', 'items__gl_account')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
@business_unit_view
def purchase_order_list_create(request, business_unit):
    """List purchase orders (``status``, ``has_open_items`` filters) or create one from an approved request"""
    context = serializer_context(request, business_unit)
    if request.method == 'GET':
        queryset = filter_status(request, purchase_orders_queryset(business_unit))
        if query_flag(request, 'has_open_items'):
            open_lines = PurchaseOrderItem.objects.filter(purchase_order=OuterRef('pk'), open_quantity__gt=0)
            queryset = queryset.filter(Exists(open_lines))
        return Response(PurchaseOrderSerializer(queryset, many=True, context=context).data)

    serializer = PurchaseOrderSerializer(data=request.data, context=context)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    with transaction.atomic():
        order = services.create_purchase_order(business_unit, request.user, serializer.validated_data)

    create_audit_log(
        request=request, action='create', model_name='PurchaseOrder', object_id=order.id,
        object_reference=order.po_number,
        changes={'vendor': order.business_partner.bp_code, 'total_amount': str(order.total_amount)},
    )
    order = purchase_orders_queryset(business_unit).get(pk=order.pk)
    return Response(PurchaseOrderSerializer(order).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@business_unit_view
def purchase_order_detail(request, business_unit, pk):
    order = get_object_or_404(purchase_orders_queryset(business_unit), pk=pk)
    return Response(PurchaseOrderSerializer(order).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@business_unit_view
def purchase_order_close(request, business_unit, pk):
    with transaction.atomic():
        order = get_object_or_404(PurchaseOrder.objects.select_for_update(), pk=pk, business_unit=business_unit)
        services.close_purchase_order(order)

    create_audit_log(
        request=request, action='close', model_name='PurchaseOrder', object_id=order.id,
        object_reference=order.po_number, changes={'status': order.status},
    )
    order = purchase_orders_queryset(business_unit).get(pk=order.pk)
    return Response(PurchaseOrderSerializer(order).data)


# Goods receipt views
def goods_receipts_queryset(business_unit):
    return GoodsReceipt.objects.filter(business_unit=business_unit).select_related(
        'purchase_order', 'business_partner', 'received_by'
    ).prefetch_related('items__purchase_order_item', 'items__inventory_item', 'items__location')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
@business_unit_view
def goods_receipt_list_create(request, business_unit):
    """List goods receipts or receive goods against an open purchase order"""
    context = serializer_context(request, business_unit)
    if request.method == 'GET':
        queryset = goods_receipts_queryset(business_unit)
        purchase_order = request.query_params.get('purchase_order')
        if purchase_order:
            queryset = queryset.filter(purchase_order_id=purchase_order)
        return Response(GoodsReceiptSerializer(queryset, many=True, context=context).data)

    serializer = GoodsReceiptSerializer(data=request.data, context=context)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    with transaction.atomic():
        receipt = services.receive_goods(business_unit, request.user, serializer.validated_data)

    create_audit_log(
        request=request, action='receive', model_name='GoodsReceipt', object_id=receipt.id,
        object_reference=receipt.doc_num,
        changes={'purchase_order': receipt.purchase_order.po_number, 'items': len(serializer.validated_data['items'])},
    )
    receipt = goods_receipts_queryset(business_unit).get(pk=receipt.pk)
    return Response(GoodsReceiptSerializer(receipt).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@business_unit_view
def goods_receipt_detail(request, business_unit, pk):
    receipt = get_object_or_404(goods_receipts_queryset(business_unit), pk=pk)
    return Response(GoodsReceiptSerializer(receipt).data)


# A/P invoice views
def ap_invoices_queryset(business_unit):
    return APInvoice.objects.filter(business_unit=business_unit).select_related(
        'business_partner', 'base_purchase_order'
    ).prefetch_related('items__gl_account')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
@business_unit_view
def ap_invoice_list_create(request, business_unit):
    """List A/P invoices (``status``, ``vendor`` filters) or create one"""
    context = serializer_context(request, business_unit)
    if request.method == 'GET':
        queryset = filter_status(request, ap_invoices_queryset(business_unit))
        vendor = request.query_params.get('vendor')
        if vendor:
            queryset = queryset.filter(business_partner_id=vendor)
        return Response(APInvoiceSerializer(queryset, many=True, context=context).data)

    serializer = APInvoiceSerializer(data=request.data, context=context)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    with transaction.atomic():
        invoice = services.create_ap_invoice(business_unit, request.user, serializer.validated_data)

    create_audit_log(
        request=request, action='create', model_name='APInvoice', object_id=invoice.id,
        object_reference=invoice.doc_num, changes={'total_amount': str(invoice.total_amount)},
    )
    invoice = ap_invoices_queryset(business_unit).get(pk=invoice.pk)
    return Response(APInvoiceSerializer(invoice).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@business_unit_view
def ap_invoice_detail(request, business_unit, pk):
    invoice = get_object_or_404(ap_invoices_queryset(business_unit), pk=pk)
    return Response(APInvoiceSerializer(invoice).data)


# Outgoing payment views
def outgoing_payments_queryset(business_unit):
    return OutgoingPayment.objects.filter(business_unit=business_unit).select_related(
        'business_partner', 'bank_account'
    ).prefetch_related('applications__ap_invoice')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
@business_unit_view
def outgoing_payment_list_create(request, business_unit):
    context = serializer_context(request, business_unit)
    if request.method == 'GET':
        queryset = outgoing_payments_queryset(business_unit)
        return Response(OutgoingPaymentSerializer(queryset, many=True, context=context).data)

    serializer = OutgoingPaymentSerializer(data=request.data, context=context)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    with transaction.atomic():
        payment = services.create_outgoing_payment(business_unit, request.user, serializer.validated_data)

    create_audit_log(
        request=request, action='create', model_name='OutgoingPayment', object_id=payment.id,
        object_reference=payment.doc_num,
        changes={'amount': str(payment.amount), 'invoices': [
            application['ap_invoice'].doc_num for application in serializer.validated_data['applications']
        ]},
    )
    payment = outgoing_payments_queryset(business_unit).get(pk=payment.pk)
    return Response(OutgoingPaymentSerializer(payment).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@business_unit_view
def outgoing_payment_detail(request, business_unit, pk):
    payment = get_object_or_404(outgoing_payments_queryset(business_unit), pk=pk)
    return Response(OutgoingPaymentSerializer(payment).data)
