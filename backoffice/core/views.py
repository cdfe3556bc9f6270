import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer, TokenRefreshSerializer
from rest_framework_simplejwt.exceptions import AuthenticationFailed, InvalidToken, TokenError
from django.contrib.auth import authenticate
from django.core.exceptions import ObjectDoesNotExist
from django.db import transaction
from django.db.models import Q
from django.shortcuts import get_object_or_404

from .models import User, BusinessUnit, Role, UserBusinessUnit, AuditLog
from .serializers import (
    BusinessUnitSerializer, RoleSerializer, UserWithAssignmentsSerializer,
    UnitUserSerializer, UnitUserCreateSerializer, UnitUserUpdateSerializer,
    PasswordChangeSerializer, AuditLogSerializer
)
from .tenancy import (
    business_unit_view, is_admin, admin_required_response, forbidden, paginate,
    SUPERVISOR_ROLES
)
from .utils import create_audit_log

logger = logging.getLogger('backoffice.core')

SERVER_ROLES = (Role.CASHIER, Role.STAFF, Role.MANAGER)
SEARCH_LIMIT = 5


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    def validate(self, attrs):
        data = super().validate(attrs)
        if not self.user.is_active:
            raise AuthenticationFailed('User account is disabled.')
        data['user'] = UserWithAssignmentsSerializer(self.user).data
        return data

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['username'] = user.username
        token['name'] = user.get_display_name()
        return token


class CustomTokenObtainPairView(TokenObtainPairView):
    serializer_class = CustomTokenObtainPairSerializer


class CustomTokenRefreshSerializer(TokenRefreshSerializer):
    """Token refresh that reports deleted users as an invalid token"""
    def validate(self, attrs):
        try:
            return super().validate(attrs)
        except (InvalidToken, TokenError):
            raise InvalidToken('Token is invalid or expired.')
        except ObjectDoesNotExist:
            raise InvalidToken('Token is invalid. User no longer exists.')


class CustomTokenRefreshView(TokenRefreshView):
    serializer_class = CustomTokenRefreshSerializer


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def user_me(request):
    """Current user with business unit assignments"""
    user = User.objects.prefetch_related('assignments__business_unit', 'assignments__role').get(pk=request.user.pk)
    return Response(UserWithAssignmentsSerializer(user).data)


# Business units (global)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def business_unit_list_create(request):
    """List the caller's business units or create one (superuser only)"""
    if request.method == 'GET':
        queryset = BusinessUnit.objects.all()
        if not request.user.is_superuser:
            queryset = queryset.filter(assignments__user=request.user).distinct()
        return Response(BusinessUnitSerializer(queryset, many=True).data)

    if not request.user.is_superuser:
        return forbidden('Only superusers can manage business units')
    serializer = BusinessUnitSerializer(data=request.data)
    if serializer.is_valid():
        business_unit = serializer.save()
        create_audit_log(
            request=request, action='create', model_name='BusinessUnit',
            object_id=business_unit.id, object_name=business_unit.name,
            object_reference=business_unit.code, business_unit=business_unit,
        )
        logger.info(f"Business unit {business_unit.code} created by {request.user.username}")
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def business_unit_detail(request, pk):
    """Retrieve, update or delete a business unit"""
    queryset = BusinessUnit.objects.all()
    if not request.user.is_superuser:
        queryset = queryset.filter(assignments__user=request.user)
    business_unit = get_object_or_404(queryset.distinct(), pk=pk)

    if request.method == 'GET':
        return Response(BusinessUnitSerializer(business_unit).data)

    if not request.user.is_superuser:
        return forbidden('Only superusers can manage business units')

    if request.method == 'DELETE':
        if business_unit.assignments.exists():
            return Response(
                {'error': 'Cannot delete a business unit that still has user assignments'},
                status=status.HTTP_400_BAD_REQUEST
            )
        create_audit_log(
            request=request, action='delete', model_name='BusinessUnit',
            object_id=business_unit.id, object_name=business_unit.name, object_reference=business_unit.code,
        )
        business_unit.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)

    serializer = BusinessUnitSerializer(business_unit, data=request.data, partial=request.method == 'PATCH')
    if serializer.is_valid():
        serializer.save()
        create_audit_log(
            request=request, action='update', model_name='BusinessUnit', object_id=business_unit.id,
            object_name=business_unit.name,
            changes={key: str(value) for key, value in serializer.validated_data.items()},
        )
        return Response(serializer.data)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@business_unit_view
def role_list(request, business_unit):
    return Response(RoleSerializer(Role.objects.all(), many=True).data)


# Users of a business unit
def unit_users(business_unit):
    return User.objects.filter(assignments__business_unit=business_unit).prefetch_related(
        'assignments__role'
    ).distinct().order_by('username')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
@business_unit_view
def user_list_create(request, business_unit):
    """List users assigned to the business unit or create one (Admin only)"""
    context = {'business_unit': business_unit}
    if request.method == 'GET':
        return Response(UnitUserSerializer(unit_users(business_unit), many=True, context=context).data)

    if not is_admin(request):
        return admin_required_response()
    serializer = UnitUserCreateSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    if User.objects.filter(username=data['username']).exists():
        return Response({'error': f"Username {data['username']} already exists"}, status=status.HTTP_409_CONFLICT)

    with transaction.atomic():
        user = User.objects.create_user(
            username=data['username'],
            email=data.get('email', ''),
            password=data['password'],
            name=data['name'],
        )
        UserBusinessUnit.objects.create(user=user, business_unit=business_unit, role=data['role'])

    create_audit_log(
        request=request, action='create', model_name='User', object_id=user.id,
        object_name=user.get_display_name(), changes={'role': data['role'].name},
    )
    logger.info(f"User {user.username} created in business unit {business_unit.code} as {data['role'].name}")
    user = unit_users(business_unit).get(pk=user.pk)
    return Response(UnitUserSerializer(user, context=context).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
@business_unit_view
def user_detail(request, business_unit, pk):
    """Retrieve, update or remove a user from the business unit"""
    user = get_object_or_404(unit_users(business_unit), pk=pk)
    context = {'business_unit': business_unit}

    if request.method == 'GET':
        return Response(UnitUserSerializer(user, context=context).data)

    if not is_admin(request) and user.pk != request.user.pk:
        return admin_required_response()

    if request.method == 'DELETE':
        if not is_admin(request):
            return admin_required_response()
        with transaction.atomic():
            UserBusinessUnit.objects.filter(user=user, business_unit=business_unit).delete()
            if not user.assignments.exists():
                user.is_active = False
                user.save(update_fields=['is_active', 'updated_at'])
        create_audit_log(
            request=request, action='delete', model_name='User', object_id=user.id,
            object_name=user.get_display_name(), changes={'business_unit': business_unit.code},
        )
        return Response(status=status.HTTP_204_NO_CONTENT)

    serializer = UnitUserUpdateSerializer(data=request.data, partial=request.method == 'PATCH')
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data

    username = data.get('username')
    if username and username != user.username and User.objects.filter(username=username).exists():
        return Response({'error': f"Username {username} already exists"}, status=status.HTTP_409_CONFLICT)
    if 'role' in data and not is_admin(request):
        return admin_required_response()

    with transaction.atomic():
        for field in ('username', 'name', 'email'):
            if field in data:
                setattr(user, field, data[field])
        user.save()
        if 'role' in data:
            UserBusinessUnit.objects.filter(user=user, business_unit=business_unit).update(role=data['role'])

    create_audit_log(
        request=request, action='update', model_name='User', object_id=user.id,
        object_name=user.get_display_name(),
        changes={key: (value.name if isinstance(value, Role) else value) for key, value in data.items()},
    )
    user = unit_users(business_unit).get(pk=user.pk)
    return Response(UnitUserSerializer(user, context=context).data)


@api_view(['PATCH'])
@permission_classes([IsAuthenticated])
@business_unit_view
def user_change_password(request, business_unit, pk):
    """Change a password: own account, or any account of the unit for Admins"""
    user = get_object_or_404(unit_users(business_unit), pk=pk)
    if user.pk != request.user.pk and not is_admin(request):
        return admin_required_response()

    serializer = PasswordChangeSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    user.set_password(serializer.validated_data['new_password'])
    user.save(update_fields=['password', 'updated_at'])
    create_audit_log(
        request=request, action='password_change', model_name='User', object_id=user.id,
        object_name=user.get_display_name(),
    )
    logger.info(f"Password changed for {user.username} by {request.user.username}")
    return Response({'message': 'Password updated successfully'})


@api_view(['PATCH'])
@permission_classes([IsAuthenticated])
@business_unit_view
def user_toggle_status(request, business_unit, pk):
    """Activate or deactivate a user (Admin only)"""
    if not is_admin(request):
        return admin_required_response()
    user = get_object_or_404(unit_users(business_unit), pk=pk)

    new_status = request.data.get('is_active')
    if new_status is None:
        new_status = not user.is_active
    elif isinstance(new_status, str):
        new_status = new_status.lower() in ('1', 'true', 'yes')
    else:
        new_status = bool(new_status)

    if user.pk == request.user.pk and not new_status:
        return Response({'error': 'You cannot deactivate your own account'}, status=status.HTTP_400_BAD_REQUEST)

    user.is_active = new_status
    user.save(update_fields=['is_active', 'updated_at'])
    create_audit_log(
        request=request, action='update', model_name='User', object_id=user.id,
        object_name=user.get_display_name(), changes={'is_active': new_status},
    )
    return Response(UnitUserSerializer(user, context={'business_unit': business_unit}).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@business_unit_view
def user_servers(request, business_unit):
    """Active users who can serve tables"""
    users = unit_users(business_unit).filter(
        is_active=True,
        assignments__business_unit=business_unit,
        assignments__role__name__in=SERVER_ROLES,
    )
    return Response(UnitUserSerializer(users, many=True, context={'business_unit': business_unit}).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@business_unit_view
def verify_supervisor(request, business_unit):
    """Check supervisor credentials for an override"""
    username = request.data.get('username')
    password = request.data.get('password')
    if not username or not password:
        return Response({'error': 'Username and password are required'}, status=status.HTTP_400_BAD_REQUEST)

    user = authenticate(request, username=username, password=password)
    assignment = None
    if user is not None:
        assignment = UserBusinessUnit.objects.select_related('role').filter(
            user=user, business_unit=business_unit
        ).first()
    if user is None or (assignment is None and not user.is_superuser):
        logger.warning(f"Supervisor verification failed for {username} in business unit {business_unit.code}")
        return Response({'error': 'Invalid credentials'}, status=status.HTTP_401_UNAUTHORIZED)

    role_name = assignment.role.name if assignment else Role.ADMIN
    if role_name not in SUPERVISOR_ROLES:
        return forbidden('User is not authorized to approve this action')

    return Response({
        'success': True,
        'supervisor': {
            'id': user.id,
            'name': user.get_display_name(),
            'username': user.username,
            'role': role_name,
        }
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@business_unit_view
def global_search(request, business_unit):
    """Search documents and master data of the business unit"""
    query = request.query_params.get('q', '').strip()
    if len(query) < 2:
        return Response({'results': []})

    from backoffice.catalog.models import InventoryItem, MenuItem
    from backoffice.financials.models import GLAccount, JournalEntry
    from backoffice.parties.models import BusinessPartner
    from backoffice.purchasing.models import PurchaseOrder, PurchaseRequest

    results = []

    partners = BusinessPartner.objects.filter(business_unit=business_unit).filter(
        Q(name__icontains=query) | Q(bp_code__icontains=query) | Q(email__icontains=query)
    )[:SEARCH_LIMIT]
    results += [
        {'id': bp.id, 'type': 'business_partner', 'title': bp.name, 'subtitle': f"{bp.bp_code} · {bp.type}"}
        for bp in partners
    ]

    accounts = GLAccount.objects.filter(business_unit=business_unit).filter(
        Q(name__icontains=query) | Q(account_code__icontains=query)
    )[:SEARCH_LIMIT]
    results += [
        {'id': a.id, 'type': 'gl_account', 'title': a.name, 'subtitle': a.account_code}
        for a in accounts
    ]

    items = InventoryItem.objects.filter(business_unit=business_unit).filter(
        Q(name__icontains=query) | Q(description__icontains=query)
    ).select_related('category')[:SEARCH_LIMIT]
    results += [
        {'id': i.id, 'type': 'inventory_item', 'title': i.name,
         'subtitle': i.category.name if i.category else ''}
        for i in items
    ]

    menu_items = MenuItem.objects.filter(business_unit=business_unit, name__icontains=query)[:SEARCH_LIMIT]
    results += [
        {'id': m.id, 'type': 'menu_item', 'title': m.name, 'subtitle': str(m.price)}
        for m in menu_items
    ]

    orders = PurchaseOrder.objects.filter(business_unit=business_unit).filter(
        Q(po_number__icontains=query) | Q(business_partner__name__icontains=query)
    ).select_related('business_partner')[:SEARCH_LIMIT]
    results += [
        {'id': po.id, 'type': 'purchase_order', 'title': po.po_number, 'subtitle': po.business_partner.name}
        for po in orders
    ]

    requests_ = PurchaseRequest.objects.filter(business_unit=business_unit).filter(
        Q(pr_number__icontains=query) | Q(notes__icontains=query)
    )[:SEARCH_LIMIT]
    results += [
        {'id': pr.id, 'type': 'purchase_request', 'title': pr.pr_number, 'subtitle': pr.status}
        for pr in requests_
    ]

    entries = JournalEntry.objects.filter(business_unit=business_unit).filter(
        Q(doc_num__icontains=query) | Q(memo__icontains=query) | Q(reference_number__icontains=query)
    )[:SEARCH_LIMIT]
    results += [
        {'id': je.id, 'type': 'journal_entry', 'title': je.doc_num, 'subtitle': je.memo[:80]}
        for je in entries
    ]

    return Response({'results': results})


# AuditLog views (read-only)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
@business_unit_view
def audit_log_list(request, business_unit):
    """List audit logs of the business unit with filtering (Admin only)"""
    if not is_admin(request):
        return admin_required_response()
    queryset = AuditLog.objects.filter(business_unit=business_unit).select_related('user')

    action_filter = request.query_params.get('action')
    if action_filter:
        queryset = queryset.filter(action=action_filter)
    model_filter = request.query_params.get('model')
    if model_filter:
        queryset = queryset.filter(model_name=model_filter)
    date_from = request.query_params.get('date_from')
    date_to = request.query_params.get('date_to')
    if date_from:
        queryset = queryset.filter(created_at__date__gte=date_from)
    if date_to:
        queryset = queryset.filter(created_at__date__lte=date_to)

    return paginate(request, queryset.order_by('-created_at'), AuditLogSerializer, default_limit=50)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@business_unit_view
def audit_log_detail(request, business_unit, pk):
    if not is_admin(request):
        return admin_required_response()
    audit_log = get_object_or_404(AuditLog, pk=pk, business_unit=business_unit)
    return Response(AuditLogSerializer(audit_log).data)
