import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db import transaction
from django.db.models import F
from django.shortcuts import get_object_or_404

from backoffice.core.crud import handle_list_create, handle_detail, dependents_message, serializer_context
from backoffice.core.tenancy import business_unit_view, is_admin, admin_required_response
from backoffice.core.utils import create_audit_log
from .models import InventoryLocation, InventoryStock, InventoryMovement, StockRequisition, StockRequisitionItem
from .serializers import (
    InventoryLocationSerializer, InventoryStockSerializer, InventoryMovementSerializer,
    StockAdjustmentSerializer, StockRequisitionSerializer
)
from . import services

logger = logging.getLogger('backoffice.inventory')


# Location views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
@business_unit_view
def location_list_create(request, business_unit):
    return handle_list_create(
        request, business_unit, InventoryLocation.objects.filter(business_unit=business_unit),
        InventoryLocationSerializer, unique_fields=['name'],
    )


def location_dependents(location):
    return dependents_message(f"location {location.name}", {
        'stock records with quantity': location.stocks.exclude(quantity_on_hand=0).count(),
        'requisitions': location.outgoing_requisitions.count() + location.incoming_requisitions.count(),
    })


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
@business_unit_view
def location_detail(request, business_unit, pk):
    location = get_object_or_404(InventoryLocation, pk=pk, business_unit=business_unit)
    return handle_detail(
        request, business_unit, location, InventoryLocationSerializer,
        unique_fields=['name'], delete_check=location_dependents,
    )


# Stock views
def stocks_queryset(business_unit):
    return InventoryStock.objects.filter(location__business_unit=business_unit).select_related(
        'inventory_item__uom', 'inventory_item__category', 'location'
    ).prefetch_related('movements__created_by').order_by('inventory_item__name', 'location__name')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
@business_unit_view
def stock_list_create(request, business_unit):
    """List stock records (``location``, ``item``, ``low_stock`` filters) or create one"""
    context = serializer_context(request, business_unit)
    if request.method == 'GET':
        queryset = stocks_queryset(business_unit)
        location = request.query_params.get('location')
        if location:
            queryset = queryset.filter(location_id=location)
        item = request.query_params.get('item')
        if item:
            queryset = queryset.filter(inventory_item_id=item)
        if request.query_params.get('low_stock') == 'true':
            queryset = queryset.filter(quantity_on_hand__lte=F('reorder_point'))
        return Response(InventoryStockSerializer(queryset, many=True, context=context).data)

    serializer = InventoryStockSerializer(data=request.data, context=context)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data
    if InventoryStock.objects.filter(inventory_item=data['inventory_item'], location=data['location']).exists():
        return Response(
            {'error': f"Stock record for {data['inventory_item'].name} at {data['location'].name} already exists"},
            status=status.HTTP_409_CONFLICT
        )
    stock = serializer.save()
    create_audit_log(
        request=request, action='create', model_name='InventoryStock', object_id=stock.id, object_name=str(stock),
    )
    stock = stocks_queryset(business_unit).get(pk=stock.pk)
    return Response(InventoryStockSerializer(stock, context=context).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PATCH'])
@permission_classes([IsAuthenticated])
@business_unit_view
def stock_detail(request, business_unit, pk):
    """Retrieve a stock record or update its reorder point and par level"""
    stock = get_object_or_404(stocks_queryset(business_unit), pk=pk)
    context = serializer_context(request, business_unit)
    if request.method == 'GET':
        return Response(InventoryStockSerializer(stock, context=context).data)

    data = {key: request.data[key] for key in ('reorder_point', 'par_level') if key in request.data}
    serializer = InventoryStockSerializer(stock, data=data, partial=True, context=context)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    serializer.save()
    create_audit_log(
        request=request, action='update', model_name='InventoryStock', object_id=stock.id,
        object_name=str(stock), changes={key: str(value) for key, value in data.items()},
    )
    return Response(serializer.data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@business_unit_view
def stock_movements(request, business_unit, pk):
    stock = get_object_or_404(InventoryStock, pk=pk, location__business_unit=business_unit)
    movements = stock.movements.select_related('created_by')[:100]
    return Response(InventoryMovementSerializer(movements, many=True).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@business_unit_view
def stock_adjust(request, business_unit):
    """Increase or decrease on-hand quantity with a reason"""
    serializer = StockAdjustmentSerializer(data=request.data, context=serializer_context(request, business_unit))
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data

    change = data['quantity'] if data['adjustment_type'] == StockAdjustmentSerializer.INCREASE else -data['quantity']
    reason = data['reason']
    if data.get('notes'):
        reason = f"{reason} - {data['notes']}"

    with transaction.atomic():
        stock = InventoryStock.objects.select_for_update().get(pk=data['inventory_stock'].pk)
        old_quantity = stock.quantity_on_hand
        movement = services.record_movement(stock, InventoryMovement.ADJUSTMENT, change, reason, request.user)

    create_audit_log(
        request=request, action='stock_adjust', model_name='InventoryStock', object_id=stock.id,
        object_name=str(stock.inventory_item),
        changes={
            'old_quantity': str(old_quantity),
            'new_quantity': str(stock.quantity_on_hand),
            'change': str(change),
            'reason': reason,
        },
    )
    logger.info(f"Stock {stock.id} adjusted by {change} ({reason})")
    stock = stocks_queryset(business_unit).get(pk=stock.pk)
    return Response({
        'stock': InventoryStockSerializer(stock).data,
        'movement': InventoryMovementSerializer(movement).data,
    })


# Requisition views
def requisitions_queryset(business_unit):
    return StockRequisition.objects.filter(business_unit=business_unit).select_related(
        'from_location', 'to_location', 'requester'
    ).prefetch_related('items__inventory_item')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
@business_unit_view
def requisition_list_create(request, business_unit):
    """List stock requisitions (``status`` filter) or create one"""
    context = serializer_context(request, business_unit)
    if request.method == 'GET':
        queryset = requisitions_queryset(business_unit)
        status_filter = request.query_params.get('status')
        if status_filter:
            queryset = queryset.filter(status=status_filter.upper())
        return Response(StockRequisitionSerializer(queryset, many=True, context=context).data)

    serializer = StockRequisitionSerializer(data=request.data, context=context)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data

    with transaction.atomic():
        requisition = StockRequisition.objects.create(
            business_unit=business_unit,
            requisition_number=services.next_requisition_number(business_unit),
            from_location=data['from_location'],
            to_location=data['to_location'],
            notes=data.get('notes', ''),
            requester=request.user,
        )
        StockRequisitionItem.objects.bulk_create([
            StockRequisitionItem(requisition=requisition, **item) for item in data['items']
        ])

    create_audit_log(
        request=request, action='create', model_name='StockRequisition', object_id=requisition.id,
        object_reference=requisition.requisition_number, changes={'items': len(data['items'])},
    )
    requisition = requisitions_queryset(business_unit).get(pk=requisition.pk)
    return Response(StockRequisitionSerializer(requisition, context=context).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@business_unit_view
def requisition_detail(request, business_unit, pk):
    requisition = get_object_or_404(requisitions_queryset(business_unit), pk=pk)
    return Response(StockRequisitionSerializer(requisition).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@business_unit_view
def requisition_fulfill(request, business_unit, pk):
    """Transfer the requested stock (Admin only)"""
    if not is_admin(request):
        return admin_required_response()
    with transaction.atomic():
        requisition = get_object_or_404(
            StockRequisition.objects.select_for_update().select_related('from_location', 'to_location'),
            pk=pk, business_unit=business_unit
        )
        services.fulfill_requisition(requisition, request.user)

    create_audit_log(
        request=request, action='stock_transfer', model_name='StockRequisition', object_id=requisition.id,
        object_reference=requisition.requisition_number,
        changes={'from': requisition.from_location.name, 'to': requisition.to_location.name},
    )
    requisition = requisitions_queryset(business_unit).get(pk=requisition.pk)
    return Response(StockRequisitionSerializer(requisition).data)
