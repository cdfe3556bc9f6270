from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from django.db.models import Q
from django.shortcuts import get_object_or_404

from backoffice.core.crud import handle_list_create, handle_detail, dependents_message
from backoffice.core.tenancy import business_unit_view
from .models import BusinessPartner
from .serializers import BusinessPartnerSerializer


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
@business_unit_view
def business_partner_list_create(request, business_unit):
    """List business partners (``type`` and ``search`` filters) or create one"""
    queryset = BusinessPartner.objects.filter(business_unit=business_unit)
    partner_type = request.query_params.get('type')
    if partner_type:
        queryset = queryset.filter(type=partner_type.upper())
    search = request.query_params.get('search')
    if search:
        queryset = queryset.filter(
            Q(name__icontains=search) |
            Q(bp_code__icontains=search) |
            Q(email__icontains=search) |
            Q(phone__icontains=search)
        )
    return handle_list_create(
        request, business_unit, queryset, BusinessPartnerSerializer, unique_fields=['bp_code'], admin_only=False
    )


def business_partner_dependents(partner):
    return dependents_message(f"business partner {partner.bp_code}", {
        'purchase orders': partner.purchase_orders.count(),
        'goods receipts': partner.goods_receipts.count(),
        'A/P invoices': partner.ap_invoices.count(),
        'outgoing payments': partner.outgoing_payments.count(),
        'sales quotations': partner.sales_quotations.count(),
        'A/R invoices': partner.ar_invoices.count(),
        'incoming payments': partner.incoming_payments.count(),
        'POS orders': partner.pos_orders.count(),
    })


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
@business_unit_view
def business_partner_detail(request, business_unit, pk):
    partner = get_object_or_404(BusinessPartner, pk=pk, business_unit=business_unit)
    return handle_detail(
        request, business_unit, partner, BusinessPartnerSerializer,
        unique_fields=['bp_code'], admin_only=False, delete_check=business_partner_dependents,
    )
