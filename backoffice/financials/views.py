import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db import transaction
from django.db.models import Q
from django.shortcuts import get_object_or_404

from backoffice.core.crud import handle_list_create, handle_detail, dependents_message, serializer_context
from backoffice.core.tenancy import business_unit_view, is_admin, admin_required_response, paginate, query_flag
from backoffice.core.utils import create_audit_log
from .models import AccountType, AccountCategory, GLAccount, AccountingPeriod, NumberingSeries, JournalEntry, BankAccount
from .serializers import (
    AccountTypeSerializer, AccountCategorySerializer, GLAccountSerializer, AccountingPeriodSerializer,
    NumberingSeriesSerializer, JournalEntrySerializer, JournalEntryCreateSerializer, BankAccountSerializer,
    FinancialSetupSerializer
)
from . import services

logger = logging.getLogger('backoffice.financials')


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@business_unit_view
def account_type_list(request, business_unit):
    return Response(AccountTypeSerializer(AccountType.objects.all(), many=True).data)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
@business_unit_view
def account_category_list_create(request, business_unit):
    queryset = AccountCategory.objects.filter(business_unit=business_unit).select_related('account_type')
    return handle_list_create(request, business_unit, queryset, AccountCategorySerializer, unique_fields=['name'])


# GL account views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
@business_unit_view
def gl_account_list_create(request, business_unit):
    """List GL accounts (``type``, ``search``, ``active`` filters) or create one (Admin only)"""
    queryset = GLAccount.objects.filter(business_unit=business_unit).select_related('account_type', 'category')
    account_type = request.query_params.get('type')
    if account_type:
        queryset = queryset.filter(account_type__name=account_type.upper())
    search = request.query_params.get('search')
    if search:
        queryset = queryset.filter(Q(account_code__icontains=search) | Q(name__icontains=search))
    active = query_flag(request, 'active')
    if active is not None:
        queryset = queryset.filter(is_active=active)
    return handle_list_create(request, business_unit, queryset, GLAccountSerializer, unique_fields=['account_code'])


def gl_account_dependents(account):
    return dependents_message(f"GL account {account.account_code}", {
        'journal entry lines': account.journal_lines.count(),
        'bank accounts': account.bank_accounts.count(),
    })


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
@business_unit_view
def gl_account_detail(request, business_unit, pk):
    account = get_object_or_404(
        GLAccount.objects.select_related('account_type', 'category'), pk=pk, business_unit=business_unit
    )
    return handle_detail(
        request, business_unit, account, GLAccountSerializer,
        unique_fields=['account_code'], delete_check=gl_account_dependents,
    )


# Accounting period views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
@business_unit_view
def accounting_period_list_create(request, business_unit):
    queryset = AccountingPeriod.objects.filter(business_unit=business_unit).order_by('-fiscal_year', 'period_number')
    status_filter = request.query_params.get('status')
    if status_filter:
        queryset = queryset.filter(status=status_filter)
    return handle_list_create(
        request, business_unit, queryset, AccountingPeriodSerializer,
        unique_fields=[('fiscal_year', 'period_number')],
    )


def accounting_period_dependents(period):
    return dependents_message(f"accounting period {period.name}", {'journal entries': period.journal_entries.count()})


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
@business_unit_view
def accounting_period_detail(request, business_unit, pk):
    period = get_object_or_404(AccountingPeriod, pk=pk, business_unit=business_unit)
    return handle_detail(
        request, business_unit, period, AccountingPeriodSerializer,
        unique_fields=[('fiscal_year', 'period_number')], delete_check=accounting_period_dependents,
    )


# Numbering series views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
@business_unit_view
def numbering_series_list_create(request, business_unit):
    return handle_list_create(
        request, business_unit, NumberingSeries.objects.filter(business_unit=business_unit),
        NumberingSeriesSerializer, unique_fields=['document_type'],
    )


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
@business_unit_view
def numbering_series_detail(request, business_unit, pk):
    series = get_object_or_404(NumberingSeries, pk=pk, business_unit=business_unit)
    return handle_detail(request, business_unit, series, NumberingSeriesSerializer, unique_fields=['document_type'])


# Journal entry views
def journal_entries_queryset(business_unit):
    return JournalEntry.objects.filter(business_unit=business_unit).select_related(
        'author', 'posted_by', 'accounting_period'
    ).prefetch_related('lines__gl_account')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
@business_unit_view
def journal_entry_list_create(request, business_unit):
    """List journal entries (paginated; ``status`` and ``is_posted`` filters) or create a draft"""
    if request.method == 'GET':
        queryset = journal_entries_queryset(business_unit)
        status_filter = request.query_params.get('status')
        if status_filter:
            queryset = queryset.filter(approval_workflow_status=status_filter.upper())
        is_posted = query_flag(request, 'is_posted')
        if is_posted is not None:
            queryset = queryset.filter(is_posted=is_posted)
        date_from = request.query_params.get('date_from')
        date_to = request.query_params.get('date_to')
        if date_from:
            queryset = queryset.filter(posting_date__gte=date_from)
        if date_to:
            queryset = queryset.filter(posting_date__lte=date_to)
        return paginate(request, queryset, JournalEntrySerializer)

    serializer = JournalEntryCreateSerializer(data=request.data, context=serializer_context(request, business_unit))
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    with transaction.atomic():
        entry = services.create_journal_entry(
            business_unit=business_unit,
            author=request.user,
            posting_date=data['posting_date'],
            document_date=data.get('document_date'),
            memo=data.get('memo', ''),
            reference_number=data.get('reference_number', ''),
            lines=data['lines'],
        )
    create_audit_log(
        request=request, action='create', model_name='JournalEntry', object_id=entry.id,
        object_name=entry.memo[:255] or entry.doc_num, object_reference=entry.doc_num,
    )
    entry = journal_entries_queryset(business_unit).get(pk=entry.pk)
    return Response(JournalEntrySerializer(entry).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@business_unit_view
def journal_entry_detail(request, business_unit, pk):
    entry = get_object_or_404(journal_entries_queryset(business_unit), pk=pk)
    return Response(JournalEntrySerializer(entry).data)


def _workflow_action(request, business_unit, pk, target_status, action, admin_only):
    if admin_only and not is_admin(request):
        return admin_required_response()
    with transaction.atomic():
        entry = get_object_or_404(
            JournalEntry.objects.select_for_update(), pk=pk, business_unit=business_unit
        )
        previous = entry.approval_workflow_status
        services.transition_workflow(entry, target_status)
    create_audit_log(
        request=request, action=action, model_name='JournalEntry', object_id=entry.id,
        object_reference=entry.doc_num, changes={'from': previous, 'to': target_status},
    )
    logger.info(f"Journal entry {entry.doc_num} moved from {previous} to {target_status} by {request.user.username}")
    entry = journal_entries_queryset(business_unit).get(pk=entry.pk)
    return Response(JournalEntrySerializer(entry).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@business_unit_view
def journal_entry_submit(request, business_unit, pk):
    return _workflow_action(request, business_unit, pk, JournalEntry.SUBMITTED, 'update', admin_only=False)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@business_unit_view
def journal_entry_approve(request, business_unit, pk):
    return _workflow_action(request, business_unit, pk, JournalEntry.APPROVED, 'approve', admin_only=True)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@business_unit_view
def journal_entry_reject(request, business_unit, pk):
    return _workflow_action(request, business_unit, pk, JournalEntry.REJECTED, 'reject', admin_only=True)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@business_unit_view
def journal_entry_post(request, business_unit, pk):
    """Post an approved journal entry and update account balances"""
    with transaction.atomic():
        entry = get_object_or_404(JournalEntry.objects.select_for_update(), pk=pk, business_unit=business_unit)
        services.post_journal_entry(entry, request.user)
    create_audit_log(
        request=request, action='post', model_name='JournalEntry', object_id=entry.id,
        object_reference=entry.doc_num,
        changes={'total_debit': str(entry.get_total_debit()), 'total_credit': str(entry.get_total_credit())},
    )
    entry = journal_entries_queryset(business_unit).get(pk=entry.pk)
    return Response(JournalEntrySerializer(entry).data)


# Bank account views
def bank_accounts_queryset(business_unit):
    return BankAccount.objects.filter(business_unit=business_unit).select_related('gl_account')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
@business_unit_view
def bank_account_list_create(request, business_unit):
    return handle_list_create(
        request, business_unit, bank_accounts_queryset(business_unit), BankAccountSerializer,
        unique_fields=[('account_number', 'bank_name')], admin_only=False,
    )


def bank_account_dependents(bank_account):
    return dependents_message(f"bank account {bank_account.name}", {
        'incoming payments': bank_account.incoming_payments.count(),
        'outgoing payments': bank_account.outgoing_payments.count(),
    })


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
@business_unit_view
def bank_account_detail(request, business_unit, pk):
    bank_account = get_object_or_404(bank_accounts_queryset(business_unit), pk=pk)
    return handle_detail(
        request, business_unit, bank_account, BankAccountSerializer,
        unique_fields=[('account_number', 'bank_name')], admin_only=False,
        delete_check=bank_account_dependents,
    )


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@business_unit_view
def financial_setup(request, business_unit):
    """Create categories, accounts, periods, series and bank accounts in one transaction (Admin only)"""
    if not is_admin(request):
        return admin_required_response()
    serializer = FinancialSetupSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    with transaction.atomic():
        counts = services.run_financial_setup(business_unit, serializer.validated_data)
    create_audit_log(
        request=request, action='create', model_name='FinancialSetup', object_id=business_unit.id,
        object_name=business_unit.name, changes=counts,
    )
    return Response({'message': 'Financial setup completed', 'created': counts}, status=status.HTTP_201_CREATED)
