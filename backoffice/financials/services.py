"""
General ledger services: document numbering, journal entries and posting.

All functions that write expect to run inside the caller's ``transaction.atomic()``
block so a failed rule rolls back every row touched.
"""
import logging
from decimal import Decimal, ROUND_HALF_UP

from django.utils import timezone

from backoffice.core.exceptions import BusinessRuleError
from .models import (
    AccountingPeriod, AccountCategory, AccountType, BankAccount, GLAccount,
    JournalEntry, JournalEntryLine, NumberingSeries, settlement_status_for
)

logger = logging.getLogger('backoffice.financials')

BALANCE_TOLERANCE = Decimal('0.01')
CENT = Decimal('0.01')


def money(value):
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def format_document_number(prefix, number):
    return f"{prefix}{str(number).zfill(5)}"


def next_document_number(business_unit, document_type):
    """Reserve the next number of the business unit's series for a document type"""
    series = NumberingSeries.objects.select_for_update().filter(
        business_unit=business_unit, document_type=document_type
    ).first()
    if series is None:
        raise BusinessRuleError(f"No numbering series found for {document_type}")
    return take_number(series)


def take_number(series):
    """Format the series' next number and advance it; the row must be locked by the caller"""
    doc_num = format_document_number(series.prefix, series.next_number)
    series.next_number += 1
    series.save(update_fields=['next_number', 'updated_at'])
    return doc_num


def find_open_period(business_unit, posting_date):
    return AccountingPeriod.objects.filter(
        business_unit=business_unit,
        status=AccountingPeriod.OPEN,
        start_date__lte=posting_date,
        end_date__gte=posting_date,
    ).order_by('start_date').first()


def require_open_period(business_unit, posting_date):
    period = find_open_period(business_unit, posting_date)
    if period is None:
        raise BusinessRuleError(f"No open accounting period found for posting date {posting_date}")
    return period


def check_balanced(lines):
    """lines: iterable of dicts with 'debit' and 'credit' Decimals"""
    total_debit = sum((line['debit'] for line in lines), Decimal('0'))
    total_credit = sum((line['credit'] for line in lines), Decimal('0'))
    if abs(total_debit - total_credit) >= BALANCE_TOLERANCE:
        raise BusinessRuleError(
            f"Journal entry is not balanced. Debits: {money(total_debit)}, Credits: {money(total_credit)}"
        )
    return total_debit, total_credit


def create_journal_entry(business_unit, author, posting_date, lines, memo='', reference_number='',
                         document_date=None, doc_num=None, status=JournalEntry.DRAFT):
    """
    Create a journal entry with its lines.

    ``lines`` is a list of dicts: gl_account (GLAccount), debit, credit, description.
    The number is drawn from the JOURNAL_ENTRY series unless ``doc_num`` is given.
    """
    if len(lines) < 2:
        raise BusinessRuleError("Journal entry requires at least 2 lines")
    check_balanced(lines)
    period = require_open_period(business_unit, posting_date)
    if doc_num is None:
        doc_num = next_document_number(business_unit, NumberingSeries.JOURNAL_ENTRY)

    entry = JournalEntry.objects.create(
        business_unit=business_unit,
        doc_num=doc_num,
        posting_date=posting_date,
        document_date=document_date or posting_date,
        memo=memo or '',
        reference_number=reference_number or '',
        accounting_period=period,
        approval_workflow_status=status,
        author=author,
    )
    JournalEntryLine.objects.bulk_create([
        JournalEntryLine(
            journal_entry=entry,
            gl_account=line['gl_account'],
            debit=money(line['debit']),
            credit=money(line['credit']),
            description=line.get('description', '') or '',
        )
        for line in lines
    ])
    logger.info(f"Journal entry {doc_num} created with {len(lines)} lines")
    return entry


def apply_to_balances(entry):
    """Apply posted lines to the running balances of their accounts"""
    totals = {}
    for line in entry.lines.all():
        debit, credit = totals.get(line.gl_account_id, (Decimal('0'), Decimal('0')))
        totals[line.gl_account_id] = (debit + line.debit, credit + line.credit)

    for account in GLAccount.objects.select_for_update().filter(pk__in=totals.keys()):
        debit, credit = totals[account.pk]
        account.apply_amounts(debit, credit)
        account.save(update_fields=['balance', 'updated_at'])


def post_journal_entry(entry, user):
    """Post an approved, balanced journal entry"""
    if entry.is_posted:
        raise BusinessRuleError("Journal entry is already posted")
    if entry.approval_workflow_status != JournalEntry.APPROVED:
        raise BusinessRuleError("Journal entry must be approved before posting")
    if not entry.is_balanced():
        raise BusinessRuleError(
            f"Journal entry is not balanced. Debits: {money(entry.get_total_debit())}, "
            f"Credits: {money(entry.get_total_credit())}"
        )

    entry.is_posted = True
    entry.posted_at = timezone.now()
    entry.posted_by = user
    entry.save(update_fields=['is_posted', 'posted_at', 'posted_by', 'updated_at'])
    apply_to_balances(entry)
    logger.info(f"Journal entry {entry.doc_num} posted by {user.username}")
    return entry


def transition_workflow(entry, target_status):
    allowed = {
        JournalEntry.SUBMITTED: (JournalEntry.DRAFT,),
        JournalEntry.APPROVED: (JournalEntry.DRAFT, JournalEntry.SUBMITTED),
        JournalEntry.REJECTED: (JournalEntry.SUBMITTED,),
    }
    if entry.is_posted:
        raise BusinessRuleError("Posted journal entries cannot change status")
    if entry.approval_workflow_status not in allowed[target_status]:
        raise BusinessRuleError(
            f"Cannot change journal entry from {entry.approval_workflow_status} to {target_status}"
        )
    entry.approval_workflow_status = target_status
    entry.save(update_fields=['approval_workflow_status', 'updated_at'])
    return entry


def run_financial_setup(business_unit, data):
    """
    Create the chart of accounts and related setup in one pass.

    ``data`` is validated input from FinancialSetupSerializer. GL accounts refer
    to categories by name and bank accounts refer to GL accounts by name.
    """
    account_types = {t.name: t for t in AccountType.objects.all()}

    categories = {}
    for item in data.get('account_categories', []):
        account_type = account_types.get(item['account_type'])
        if account_type is None:
            raise BusinessRuleError(f"Unknown account type {item['account_type']}")
        if AccountCategory.objects.filter(business_unit=business_unit, name=item['name']).exists():
            raise BusinessRuleError(f"Account category '{item['name']}' already exists", status_code=409)
        category = AccountCategory.objects.create(
            business_unit=business_unit,
            name=item['name'],
            code=item.get('code', ''),
            account_type=account_type,
            description=item.get('description', ''),
        )
        categories[category.name] = category

    gl_accounts = {}
    for item in data.get('gl_accounts', []):
        category = None
        category_name = item.get('category_name')
        if category_name:
            category = categories.get(category_name) or AccountCategory.objects.filter(
                business_unit=business_unit, name=category_name
            ).first()
            if category is None:
                raise BusinessRuleError(f"Account category '{category_name}' not found")
        account_type = account_types.get(item['account_type'])
        if account_type is None:
            raise BusinessRuleError(f"Unknown account type {item['account_type']}")
        if GLAccount.objects.filter(business_unit=business_unit, account_code=item['account_code']).exists():
            raise BusinessRuleError(f"GL account code {item['account_code']} already exists", status_code=409)
        account = GLAccount.objects.create(
            business_unit=business_unit,
            account_code=item['account_code'],
            name=item['name'],
            account_type=account_type,
            category=category,
            normal_balance=item.get('normal_balance') or account_type.default_normal_balance,
            description=item.get('description', ''),
            is_control_account=item.get('is_control_account', False),
        )
        gl_accounts[account.name] = account

    periods = []
    for item in data.get('accounting_periods', []):
        if AccountingPeriod.objects.filter(
            business_unit=business_unit, fiscal_year=item['fiscal_year'], period_number=item['period_number']
        ).exists():
            raise BusinessRuleError(
                f"Accounting period {item['fiscal_year']}/{item['period_number']} already exists", status_code=409
            )
        periods.append(AccountingPeriod.objects.create(business_unit=business_unit, **item))

    series = []
    for item in data.get('numbering_series', []):
        if NumberingSeries.objects.filter(business_unit=business_unit, document_type=item['document_type']).exists():
            raise BusinessRuleError(
                f"Numbering series for {item['document_type']} already exists", status_code=409
            )
        series.append(NumberingSeries.objects.create(business_unit=business_unit, **item))

    bank_accounts = []
    for item in data.get('bank_accounts', []):
        item = dict(item)
        gl_account_name = item.pop('gl_account_name')
        gl_account = gl_accounts.get(gl_account_name) or GLAccount.objects.filter(
            business_unit=business_unit, name=gl_account_name
        ).first()
        if gl_account is None:
            raise BusinessRuleError(f"GL account '{gl_account_name}' not found for bank account {item['name']}")
        if BankAccount.objects.filter(
            business_unit=business_unit, account_number=item['account_number'], bank_name=item['bank_name']
        ).exists():
            raise BusinessRuleError(
                f"Bank account {item['bank_name']} {item['account_number']} already exists", status_code=409
            )
        bank_accounts.append(BankAccount.objects.create(business_unit=business_unit, gl_account=gl_account, **item))

    logger.info(
        f"Financial setup for business unit {business_unit.pk}: {len(categories)} categories, "
        f"{len(gl_accounts)} accounts, {len(periods)} periods, {len(series)} series, {len(bank_accounts)} bank accounts"
    )
    return {
        'account_categories': len(categories),
        'gl_accounts': len(gl_accounts),
        'accounting_periods': len(periods),
        'numbering_series': len(series),
        'bank_accounts': len(bank_accounts),
    }


def apply_payment_to_invoice(invoice, amount_applied):
    """
    Record ``amount_applied`` against an A/R or A/P invoice row locked by the caller.

    Both invoice models share total_amount, amount_paid, status and settlement_status.
    """
    if invoice.status == 'CANCELLED':
        raise BusinessRuleError(f"Invoice {invoice.doc_num} is cancelled")
    if amount_applied <= 0:
        raise BusinessRuleError(f"Amount applied to invoice {invoice.doc_num} must be greater than zero")
    if amount_applied > invoice.total_amount - invoice.amount_paid:
        raise BusinessRuleError(f"Amount applied exceeds outstanding balance for invoice {invoice.doc_num}")

    invoice.amount_paid += amount_applied
    invoice.settlement_status = settlement_status_for(invoice.total_amount, invoice.amount_paid)
    invoice.save(update_fields=['amount_paid', 'settlement_status', 'updated_at'])
    return invoice
