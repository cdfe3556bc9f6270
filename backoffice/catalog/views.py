import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db import transaction
from django.shortcuts import get_object_or_404

from backoffice.core.crud import handle_list_create, handle_detail, dependents_message
from backoffice.core.tenancy import business_unit_view, is_admin, admin_required_response, query_flag
from backoffice.core.utils import create_audit_log
from .models import (
    UoM, TaxCode, PaymentMethod, InventoryCategory, InventoryItem,
    MenuCategory, MenuItem, Recipe, RecipeItem
)
from .serializers import (
    UoMSerializer, TaxCodeSerializer, PaymentMethodSerializer, InventoryCategorySerializer,
    InventoryItemSerializer, MenuCategorySerializer, MenuItemSerializer,
    RecipeSerializer, RecipeWriteSerializer
)

logger = logging.getLogger('backoffice.catalog')


# UoM views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
@business_unit_view
def uom_list_create(request, business_unit):
    return handle_list_create(
        request, business_unit, UoM.objects.filter(business_unit=business_unit), UoMSerializer,
        unique_fields=['name'], cache_kind=UoM.reference_cache_kind,
    )


def uom_dependents(uom):
    return dependents_message(f"UoM {uom.name}", {
        'inventory items': uom.inventory_items.count(),
        'recipe items': uom.recipe_items.count(),
        'purchase order lines': uom.purchase_order_items.count(),
        'purchase request lines': uom.purchase_request_items.count(),
    })


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
@business_unit_view
def uom_detail(request, business_unit, pk):
    uom = get_object_or_404(UoM, pk=pk, business_unit=business_unit)
    return handle_detail(request, business_unit, uom, UoMSerializer, unique_fields=['name'], delete_check=uom_dependents)


# Tax code views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
@business_unit_view
def tax_code_list_create(request, business_unit):
    return handle_list_create(
        request, business_unit, TaxCode.objects.filter(business_unit=business_unit), TaxCodeSerializer,
        unique_fields=['code'], cache_kind=TaxCode.reference_cache_kind,
    )


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
@business_unit_view
def tax_code_detail(request, business_unit, pk):
    tax_code = get_object_or_404(TaxCode, pk=pk, business_unit=business_unit)
    return handle_detail(
        request, business_unit, tax_code, TaxCodeSerializer, unique_fields=['code']
    )


# Payment method views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
@business_unit_view
def payment_method_list_create(request, business_unit):
    """List payment methods (``?active=true`` for active only) or create one"""
    queryset = PaymentMethod.objects.filter(business_unit=business_unit)
    active = query_flag(request, 'active')
    if active is not None:
        queryset = queryset.filter(is_active=active)
    return handle_list_create(
        request, business_unit, queryset, PaymentMethodSerializer,
        unique_fields=['name'], cache_kind=PaymentMethod.reference_cache_kind, cache_filters={'active': active},
    )


def payment_method_dependents(payment_method):
    return dependents_message(f"payment method {payment_method.name}", {
        'POS payments': payment_method.pos_payments.count(),
        'incoming payments': payment_method.incoming_payments.count(),
    })


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
@business_unit_view
def payment_method_detail(request, business_unit, pk):
    payment_method = get_object_or_404(PaymentMethod, pk=pk, business_unit=business_unit)
    return handle_detail(
        request, business_unit, payment_method, PaymentMethodSerializer,
        unique_fields=['name'], delete_check=payment_method_dependents,
    )


# Inventory category views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
@business_unit_view
def inventory_category_list_create(request, business_unit):
    return handle_list_create(
        request, business_unit, InventoryCategory.objects.filter(business_unit=business_unit),
        InventoryCategorySerializer, unique_fields=['name'],
    )


def inventory_category_dependents(category):
    return dependents_message(f"category {category.name}", {'inventory items': category.items.count()})


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
@business_unit_view
def inventory_category_detail(request, business_unit, pk):
    category = get_object_or_404(InventoryCategory, pk=pk, business_unit=business_unit)
    return handle_detail(
        request, business_unit, category, InventoryCategorySerializer,
        unique_fields=['name'], delete_check=inventory_category_dependents,
    )


# Inventory item views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
@business_unit_view
def inventory_item_list_create(request, business_unit):
    """List inventory items with optional ``category``, ``active`` and ``search`` filters"""
    queryset = InventoryItem.objects.filter(business_unit=business_unit).select_related('category', 'uom')
    category = request.query_params.get('category')
    if category:
        queryset = queryset.filter(category_id=category)
    active = query_flag(request, 'active')
    if active is not None:
        queryset = queryset.filter(is_active=active)
    search = request.query_params.get('search')
    if search:
        queryset = queryset.filter(name__icontains=search)
    return handle_list_create(request, business_unit, queryset, InventoryItemSerializer, unique_fields=['name'])


def inventory_item_dependents(item):
    return dependents_message(f"inventory item {item.name}", {
        'stock records': item.stocks.count(),
        'recipe items': item.recipe_items.count(),
        'purchase order lines': item.purchase_order_items.count(),
    })


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
@business_unit_view
def inventory_item_detail(request, business_unit, pk):
    item = get_object_or_404(InventoryItem.objects.select_related('category', 'uom'), pk=pk, business_unit=business_unit)
    return handle_detail(
        request, business_unit, item, InventoryItemSerializer,
        unique_fields=['name'], delete_check=inventory_item_dependents,
    )


# Menu views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
@business_unit_view
def menu_category_list_create(request, business_unit):
    return handle_list_create(
        request, business_unit, MenuCategory.objects.filter(business_unit=business_unit),
        MenuCategorySerializer, unique_fields=['name'],
    )


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
@business_unit_view
def menu_category_detail(request, business_unit, pk):
    category = get_object_or_404(MenuCategory, pk=pk, business_unit=business_unit)
    return handle_detail(
        request, business_unit, category, MenuCategorySerializer, unique_fields=['name'],
        delete_check=lambda c: dependents_message(f"menu category {c.name}", {'menu items': c.items.count()}),
    )


def menu_items_queryset(business_unit):
    return MenuItem.objects.filter(business_unit=business_unit).select_related('category', 'recipe')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
@business_unit_view
def menu_item_list_create(request, business_unit):
    """List menu items (``category`` and ``active`` filters) or create one"""
    queryset = menu_items_queryset(business_unit)
    category = request.query_params.get('category')
    if category:
        queryset = queryset.filter(category_id=category)
    active = query_flag(request, 'active')
    if active is not None:
        queryset = queryset.filter(is_active=active)
    return handle_list_create(request, business_unit, queryset, MenuItemSerializer)


def menu_item_dependents(menu_item):
    return dependents_message(f"menu item {menu_item.name}", {
        'order items': menu_item.order_items.count(),
        'quotation lines': menu_item.quotation_items.count(),
    })


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
@business_unit_view
def menu_item_detail(request, business_unit, pk):
    menu_item = get_object_or_404(menu_items_queryset(business_unit), pk=pk)
    return handle_detail(request, business_unit, menu_item, MenuItemSerializer, delete_check=menu_item_dependents)


@api_view(['GET', 'PUT'])
@permission_classes([IsAuthenticated])
@business_unit_view
def menu_item_recipe(request, business_unit, pk):
    """Get or replace the recipe of a menu item"""
    menu_item = get_object_or_404(MenuItem, pk=pk, business_unit=business_unit)

    if request.method == 'GET':
        recipe = Recipe.objects.filter(menu_item=menu_item).prefetch_related(
            'items__inventory_item', 'items__uom'
        ).first()
        return Response(RecipeSerializer(recipe).data if recipe else None)

    if not is_admin(request):
        return admin_required_response()
    serializer = RecipeWriteSerializer(data=request.data, context={'request': request, 'business_unit': business_unit})
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    with transaction.atomic():
        recipe, created = Recipe.objects.get_or_create(menu_item=menu_item, defaults={'name': data.get('name', '')})
        if not created and 'name' in data:
            recipe.name = data['name']
            recipe.save(update_fields=['name', 'updated_at'])
        recipe.items.all().delete()
        RecipeItem.objects.bulk_create([RecipeItem(recipe=recipe, **item) for item in data['items']])

    create_audit_log(
        request=request, action='create' if created else 'update', model_name='Recipe',
        object_id=recipe.id, object_name=str(recipe), changes={'items': len(data['items'])},
    )
    logger.info(f"Recipe for menu item {menu_item.id} saved with {len(data['items'])} items")
    recipe = Recipe.objects.prefetch_related('items__inventory_item', 'items__uom').get(pk=recipe.pk)
    return Response(RecipeSerializer(recipe).data, status=status.HTTP_201_CREATED if created else status.HTTP_200_OK)
