"""
Business unit scoping for API views.

Tenant-scoped URLs carry the business unit id as ``business_unit_id``. The
``business_unit_view`` decorator resolves it, checks the caller's assignment,
and hands the view a ``BusinessUnit`` instance. The resolved role name is kept
on ``request.role_name``.
"""
import logging
from functools import wraps

from django.core.exceptions import PermissionDenied
from django.core.paginator import Paginator
from django.http import Http404
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response

from .exceptions import BusinessRuleError
from .models import BusinessUnit, Role, UserBusinessUnit

logger = logging.getLogger('backoffice.core')

BUSINESS_UNIT_HEADER = 'HTTP_X_BUSINESS_UNIT_ID'

SETTLEMENT_ROLES = (Role.ADMIN, Role.CASHIER)
SUPERVISOR_ROLES = (Role.ADMIN, Role.MANAGER, Role.SUPERVISOR)


def get_role_name(user, business_unit):
    """Role name of the user in the business unit, or None when unassigned"""
    if not user or not user.is_authenticated:
        return None
    assignment = UserBusinessUnit.objects.select_related('role').filter(
        user=user, business_unit=business_unit
    ).first()
    if assignment:
        return assignment.role.name
    if user.is_superuser:
        return Role.ADMIN
    return None


def is_admin(request):
    return request.user.is_superuser or getattr(request, 'role_name', None) == Role.ADMIN


def has_role(request, role_names):
    return request.user.is_superuser or getattr(request, 'role_name', None) in role_names


def forbidden(message='Forbidden'):
    return Response({'error': message}, status=status.HTTP_403_FORBIDDEN)


def admin_required_response():
    return forbidden('Only administrators can perform this action')


def error_response(exc):
    """Translate a BusinessRuleError into an API response"""
    return Response({'error': exc.message}, status=exc.status_code)


def business_unit_view(view_func):
    """
    Resolve ``business_unit_id`` from the URL and enforce membership.

    Must be applied below ``@api_view`` so authentication has already run.
    """
    @wraps(view_func)
    def wrapper(request, business_unit_id, *args, **kwargs):
        header_value = request.META.get(BUSINESS_UNIT_HEADER)
        if header_value and header_value.strip() != str(business_unit_id):
            return Response(
                {'error': 'Business unit header does not match URL'},
                status=status.HTTP_400_BAD_REQUEST
            )

        business_unit = get_object_or_404(BusinessUnit, pk=business_unit_id)
        role_name = get_role_name(request.user, business_unit)
        if role_name is None:
            logger.warning(f"User {request.user.username} denied access to business unit {business_unit_id}")
            return forbidden()

        request.business_unit = business_unit
        request.role_name = role_name
        try:
            return view_func(request, business_unit, *args, **kwargs)
        except BusinessRuleError as exc:
            logger.warning(f"Business rule rejected {request.method} {request.path}: {exc.message}")
            return error_response(exc)
        except (Http404, PermissionDenied, APIException):
            raise
        except Exception:
            logger.error(f"Unexpected error in {request.method} {request.path}", exc_info=True)
            return Response({'error': 'Internal error'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
    return wrapper


def paginate(request, queryset, serializer_class, default_limit=20, context=None):
    """Paginated response in the shape used by all list endpoints"""
    try:
        page = int(request.query_params.get('page', 1))
        limit = int(request.query_params.get('limit', default_limit))
    except (TypeError, ValueError):
        page, limit = 1, default_limit
    limit = max(1, min(limit, 200))

    paginator = Paginator(queryset, limit)
    page_obj = paginator.get_page(page)
    serializer = serializer_class(page_obj, many=True, context=context or {'request': request})
    return Response({
        'results': serializer.data,
        'count': paginator.count,
        'next': page_obj.next_page_number() if page_obj.has_next() else None,
        'previous': page_obj.previous_page_number() if page_obj.has_previous() else None,
        'page': page_obj.number,
        'page_size': limit,
        'total_pages': paginator.num_pages,
    })


def query_flag(request, name):
    """Boolean query parameter, None when absent"""
    value = request.query_params.get(name)
    if value is None or value == '':
        return None
    return value.lower() in ('1', 'true', 'yes')
