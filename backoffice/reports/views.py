import logging
from datetime import datetime, date

from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.utils import timezone

from backoffice.core.exceptions import BusinessRuleError
from backoffice.core.tenancy import business_unit_view, query_flag
from . import services

logger = logging.getLogger('backoffice.reports')


def date_param(request, name, default):
    value = request.query_params.get(name)
    if not value:
        return default
    try:
        return datetime.strptime(value, '%Y-%m-%d').date()
    except ValueError:
        raise BusinessRuleError(f"Invalid {name}, expected YYYY-MM-DD")


def period_params(request):
    """``start_date`` (default: January 1st of this year) and ``end_date`` (default: today)"""
    today = timezone.localdate()
    start_date = date_param(request, 'start_date', date(today.year, 1, 1))
    end_date = date_param(request, 'end_date', today)
    if start_date > end_date:
        raise BusinessRuleError("start_date must be on or before end_date")
    return start_date, end_date


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@business_unit_view
def trial_balance(request, business_unit):
    end_date = date_param(request, 'end_date', timezone.localdate())
    include_zero_balances = bool(query_flag(request, 'include_zero_balances'))
    logger.info(f"User {request.user.username} requested trial balance for {business_unit.code} as of {end_date}")
    return Response(services.trial_balance(business_unit, end_date, include_zero_balances))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@business_unit_view
def balance_sheet(request, business_unit):
    as_of_date = date_param(request, 'as_of_date', timezone.localdate())
    return Response(services.balance_sheet(business_unit, as_of_date))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@business_unit_view
def profit_loss(request, business_unit):
    start_date, end_date = period_params(request)
    return Response(services.profit_and_loss(business_unit, start_date, end_date))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@business_unit_view
def cash_flow(request, business_unit):
    start_date, end_date = period_params(request)
    return Response(services.cash_flow(business_unit, start_date, end_date))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@business_unit_view
def gl_balances(request, business_unit):
    as_of_date = date_param(request, 'as_of_date', timezone.localdate())
    account_type = request.query_params.get('account_type')
    return Response(services.gl_balances(business_unit, as_of_date, account_type))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@business_unit_view
def ar_aging(request, business_unit):
    as_of_date = date_param(request, 'as_of_date', timezone.localdate())
    return Response(services.ar_aging(business_unit, as_of_date))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@business_unit_view
def ap_aging(request, business_unit):
    as_of_date = date_param(request, 'as_of_date', timezone.localdate())
    return Response(services.ap_aging(business_unit, as_of_date))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@business_unit_view
def inventory_valuation(request, business_unit):
    location = request.query_params.get('location')
    if location and not location.isdigit():
        raise BusinessRuleError("location must be a numeric id")
    return Response(services.inventory_valuation(business_unit, int(location) if location else None))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@business_unit_view
def dashboard(request, business_unit):
    """Summary figures for the business unit's landing page"""
    time_range = request.query_params.get('time_range', '30d')
    if time_range not in services.TIME_RANGES:
        raise BusinessRuleError(f"time_range must be one of {', '.join(services.TIME_RANGES)}")
    return Response(services.dashboard(business_unit, time_range))
