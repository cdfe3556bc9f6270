import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db import transaction
from django.db.models import Prefetch
from django.shortcuts import get_object_or_404

from backoffice.catalog.models import MenuItem, PaymentMethod
from backoffice.core.crud import handle_list_create, handle_detail, serializer_context
from backoffice.core.exceptions import BusinessRuleError
from backoffice.core.tenancy import (
    business_unit_view, is_admin, has_role, forbidden, admin_required_response, paginate, query_flag,
    SETTLEMENT_ROLES
)
from backoffice.core.utils import create_audit_log
from .filters import OrderFilter
from .models import MenuItemGLMapping, PaymentMethodGLMapping, Table, Discount, Order
from .serializers import (
    POSConfigurationSerializer, MenuItemGLMappingSerializer, PaymentMethodGLMappingSerializer,
    MenuItemWithMappingSerializer, PaymentMethodWithMappingSerializer, TableSerializer, DiscountSerializer,
    OrderSerializer, OrderCreateSerializer, OrderAddItemsSerializer, PaymentSerializer, SettlementSerializer
)
from . import services

logger = logging.getLogger('backoffice.pos')


# Configuration views
@api_view(['GET', 'POST', 'PATCH'])
@permission_classes([IsAuthenticated])
@business_unit_view
def configuration(request, business_unit):
    """Get, create or update the unit's POS configuration (Admin only)"""
    if not is_admin(request):
        return admin_required_response()
    context = serializer_context(request, business_unit)
    instance = services.get_configuration(business_unit)

    if request.method == 'GET':
        return Response(POSConfigurationSerializer(instance, context=context).data if instance else None)

    if request.method == 'POST':
        if instance is not None:
            return Response(
                {'error': 'POS configuration already exists for this business unit'},
                status=status.HTTP_409_CONFLICT
            )
        serializer = POSConfigurationSerializer(data=request.data, context=context)
    else:
        if instance is None:
            return Response({'error': 'POS configuration not found'}, status=status.HTTP_404_NOT_FOUND)
        serializer = POSConfigurationSerializer(instance, data=request.data, partial=True, context=context)

    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    saved = serializer.save(business_unit=business_unit)
    create_audit_log(
        request=request, action='create' if instance is None else 'update', model_name='POSConfiguration',
        object_id=saved.id, object_name=str(saved),
        changes={key: str(getattr(value, 'pk', value)) for key, value in serializer.validated_data.items()},
    )
    logger.info(f"POS configuration {'created' if instance is None else 'updated'} for business unit {business_unit.code}")
    return Response(
        POSConfigurationSerializer(saved, context=context).data,
        status=status.HTTP_201_CREATED if instance is None else status.HTTP_200_OK
    )


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@business_unit_view
def validate_configuration(request, business_unit):
    return Response(services.validate_configuration(business_unit))


# GL mapping views
@api_view(['GET'])
@permission_classes([IsAuthenticated])
@business_unit_view
def menu_items_with_mappings(request, business_unit):
    mappings = MenuItemGLMapping.objects.filter(business_unit=business_unit).select_related(
        'menu_item', 'sales_account', 'cogs_account', 'inventory_account'
    )
    items = MenuItem.objects.filter(business_unit=business_unit).select_related('category').prefetch_related(
        Prefetch('gl_mappings', queryset=mappings)
    )
    return Response(MenuItemWithMappingSerializer(items, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@business_unit_view
def payment_methods_with_mappings(request, business_unit):
    mappings = PaymentMethodGLMapping.objects.filter(business_unit=business_unit).select_related(
        'payment_method', 'gl_account'
    )
    methods = PaymentMethod.objects.filter(business_unit=business_unit).prefetch_related(Prefetch('gl_mappings', queryset=mappings))
    return Response(PaymentMethodWithMappingSerializer(methods, many=True).data)


def upsert_mapping(request, business_unit, model, serializer_class, key_field):
    """List mappings, or create/replace the mapping for ``key_field`` (Admin only)"""
    context = serializer_context(request, business_unit)
    queryset = model.objects.filter(business_unit=business_unit)
    if request.method == 'GET':
        return Response(serializer_class(queryset, many=True, context=context).data)

    if not is_admin(request):
        return admin_required_response()
    serializer = serializer_class(data=request.data, context=context)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = dict(serializer.validated_data)
    key = data.pop(key_field)
    mapping, created = model.objects.update_or_create(
        business_unit=business_unit, **{key_field: key}, defaults=data
    )
    create_audit_log(
        request=request, action='create' if created else 'update', model_name=model.__name__,
        object_id=mapping.id, object_name=str(key),
        changes={field: str(getattr(value, 'pk', value)) for field, value in data.items()},
    )
    return Response(
        serializer_class(mapping, context=context).data,
        status=status.HTTP_201_CREATED if created else status.HTTP_200_OK
    )


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
@business_unit_view
def menu_item_gl_mappings(request, business_unit):
    return upsert_mapping(request, business_unit, MenuItemGLMapping, MenuItemGLMappingSerializer, 'menu_item')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
@business_unit_view
def payment_method_gl_mappings(request, business_unit):
    return upsert_mapping(
        request, business_unit, PaymentMethodGLMapping, PaymentMethodGLMappingSerializer, 'payment_method'
    )


# Table views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
@business_unit_view
def table_list_create(request, business_unit):
    queryset = Table.objects.filter(business_unit=business_unit)
    status_filter = request.query_params.get('status')
    if status_filter:
        queryset = queryset.filter(status=status_filter.upper())
    return handle_list_create(request, business_unit, queryset, TableSerializer, unique_fields=['table_number'])


def table_dependents(table):
    active_orders = table.orders.exclude(status__in=Order.CLOSED_STATUSES).count()
    if active_orders:
        return f"Cannot delete table {table.table_number}: it has {active_orders} active orders"
    return None


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
@business_unit_view
def table_detail(request, business_unit, pk):
    table = get_object_or_404(Table, pk=pk, business_unit=business_unit)
    return handle_detail(
        request, business_unit, table, TableSerializer,
        unique_fields=['table_number'], delete_check=table_dependents,
    )


# Discount views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
@business_unit_view
def discount_list_create(request, business_unit):
    queryset = Discount.objects.filter(business_unit=business_unit)
    active = query_flag(request, 'active')
    if active is not None:
        queryset = queryset.filter(is_active=active)
    return handle_list_create(request, business_unit, queryset, DiscountSerializer, unique_fields=['name'])


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
@business_unit_view
def discount_detail(request, business_unit, pk):
    discount = get_object_or_404(Discount, pk=pk, business_unit=business_unit)
    return handle_detail(request, business_unit, discount, DiscountSerializer, unique_fields=['name'])


# Order views
def orders_queryset(business_unit):
    return Order.objects.filter(business_unit=business_unit).select_related(
        'table', 'waiter', 'customer', 'discount', 'ar_invoice', 'journal_entry'
    ).prefetch_related('items__menu_item', 'items__modifiers', 'payments__payment_method', 'payments__cashier')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
@business_unit_view
def order_list_create(request, business_unit):
    """Paginated order list (``status``, ``table``, ``is_posted`` filters) or create an order"""
    context = serializer_context(request, business_unit)
    if request.method == 'GET':
        queryset = OrderFilter(request.query_params, queryset=orders_queryset(business_unit)).qs
        return paginate(request, queryset, OrderSerializer, context=context)

    serializer = OrderCreateSerializer(data=request.data, context=context)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    with transaction.atomic():
        order = services.create_order(business_unit, request.user, serializer.validated_data)

    create_audit_log(
        request=request, action='create', model_name='Order', object_id=order.id, object_name=str(order),
        changes={'items': len(serializer.validated_data['items']), 'total_amount': str(order.total_amount)},
    )
    order = orders_queryset(business_unit).get(pk=order.pk)
    return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@business_unit_view
def order_detail(request, business_unit, pk):
    order = get_object_or_404(orders_queryset(business_unit), pk=pk)
    return Response(OrderSerializer(order).data)


def lock_order(business_unit, pk):
    return get_object_or_404(Order.objects.select_for_update(), pk=pk, business_unit=business_unit)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@business_unit_view
def order_add_items(request, business_unit, pk):
    serializer = OrderAddItemsSerializer(data=request.data, context=serializer_context(request, business_unit))
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    with transaction.atomic():
        order = lock_order(business_unit, pk)
        services.require_editable(order)
        services.add_order_items(order, serializer.validated_data['items'])

    create_audit_log(
        request=request, action='update', model_name='Order', object_id=order.id, object_name=str(order),
        changes={'items_added': len(serializer.validated_data['items']), 'total_amount': str(order.total_amount)},
    )
    order = orders_queryset(business_unit).get(pk=order.pk)
    return Response(OrderSerializer(order).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@business_unit_view
def order_cancel(request, business_unit, pk):
    with transaction.atomic():
        order = lock_order(business_unit, pk)
        services.cancel_order(order)

    create_audit_log(
        request=request, action='update', model_name='Order', object_id=order.id, object_name=str(order),
        changes={'status': Order.CANCELLED},
    )
    logger.info(f"POS order {order.id} cancelled by {request.user.username}")
    order = orders_queryset(business_unit).get(pk=order.pk)
    return Response(OrderSerializer(order).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@business_unit_view
def order_send_to_kitchen(request, business_unit, pk):
    with transaction.atomic():
        order = lock_order(business_unit, pk)
        services.send_to_kitchen(order)
    order = orders_queryset(business_unit).get(pk=order.pk)
    return Response(OrderSerializer(order).data)


def post_to_gl(request, order_id):
    with transaction.atomic():
        order = Order.objects.select_for_update().get(pk=order_id)
        ar_invoice, entry = services.post_order_to_gl(order, request.user)
    create_audit_log(
        request=request, action='post', model_name='Order', object_id=order.id, object_name=str(order),
        object_reference=entry.doc_num,
        changes={'journal_entry': entry.doc_num, 'ar_invoice': ar_invoice.doc_num if ar_invoice else None},
    )
    return order


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@business_unit_view
def settlement(request, business_unit):
    """Settle an order (Admin or Cashier); auto-posts to the GL when configured"""
    if not has_role(request, SETTLEMENT_ROLES):
        return forbidden('Only administrators and cashiers can settle orders')
    serializer = SettlementSerializer(data=request.data, context=serializer_context(request, business_unit))
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    with transaction.atomic():
        order, payment = services.settle_order(business_unit, request.user, serializer.validated_data)

    create_audit_log(
        request=request, action='settle', model_name='Order', object_id=order.id, object_name=str(order),
        changes={'total_amount': str(order.total_amount), 'discount_value': str(order.discount_value),
                 'tax_amount': str(order.tax_amount)},
    )
    create_audit_log(
        request=request, action='payment_add', model_name='Payment', object_id=payment.id,
        object_reference=str(order),
        changes={'amount': str(payment.amount), 'change': str(payment.change),
                 'payment_method': payment.payment_method.name},
    )

    gl_posting_error = None
    configuration = services.get_configuration(business_unit)
    if configuration and configuration.auto_post_to_gl:
        try:
            post_to_gl(request, order.id)
        except BusinessRuleError as exc:
            gl_posting_error = exc.message
            logger.warning(f"GL posting rejected for POS order {order.id}: {exc.message}")
        except Exception:
            gl_posting_error = 'GL posting failed unexpectedly; post the order manually'
            logger.error(f"GL posting failed for POS order {order.id}", exc_info=True)

    order = orders_queryset(business_unit).get(pk=order.pk)
    return Response({
        'order': OrderSerializer(order).data,
        'payment': PaymentSerializer(payment).data,
        'change': str(payment.change),
        'gl_posting_error': gl_posting_error,
    }, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@business_unit_view
def order_post_to_gl(request, business_unit, pk):
    if not has_role(request, SETTLEMENT_ROLES):
        return forbidden('Only administrators and cashiers can post orders to the GL')
    order = get_object_or_404(Order, pk=pk, business_unit=business_unit)
    post_to_gl(request, order.id)
    order = orders_queryset(business_unit).get(pk=order.pk)
    return Response(services.accounting_summary(order))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@business_unit_view
def order_accounting_summary(request, business_unit, pk):
    order = get_object_or_404(Order.objects.select_related('ar_invoice', 'journal_entry'), pk=pk, business_unit=business_unit)
    return Response(services.accounting_summary(order))
