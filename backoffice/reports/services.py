"""
Financial statements and operational reports.

Only lines of posted journal entries count towards balances. Every amount
returned is a ``Decimal`` quantized to cents.
"""
import logging
from datetime import timedelta
from decimal import Decimal

from django.db.models import F, Q, Sum
from django.utils import timezone

from backoffice.catalog.models import MenuItem
from backoffice.financials.models import (
    AccountType, BankAccount, GLAccount, JournalEntry, JournalEntryLine, DEBIT, SETTLEMENT_SETTLED
)
from backoffice.financials.services import money, BALANCE_TOLERANCE
from backoffice.inventory.models import InventoryStock
from backoffice.parties.models import BusinessPartner
from backoffice.purchasing.models import APInvoice, PurchaseOrder, PurchaseRequest
from backoffice.sales.models import ARInvoice, CANCELLED

logger = logging.getLogger('backoffice.reports')

ZERO = Decimal('0.00')

AGING_BUCKETS = ['current', 'days_1_30', 'days_31_60', 'days_61_90', 'over_90']

TIME_RANGES = {
    '7d': 7,
    '30d': 30,
    '90d': 90,
    '1y': 365,
}


def account_totals(business_unit, start_date=None, end_date=None, before=None):
    """Posted debit and credit totals keyed by GL account id"""
    lines = JournalEntryLine.objects.filter(
        journal_entry__business_unit=business_unit,
        journal_entry__is_posted=True,
    )
    if start_date:
        lines = lines.filter(journal_entry__posting_date__gte=start_date)
    if end_date:
        lines = lines.filter(journal_entry__posting_date__lte=end_date)
    if before:
        lines = lines.filter(journal_entry__posting_date__lt=before)

    rows = lines.values('gl_account').annotate(total_debit=Sum('debit'), total_credit=Sum('credit'))
    return {
        row['gl_account']: (row['total_debit'] or ZERO, row['total_credit'] or ZERO)
        for row in rows
    }


def accounts_of(business_unit, active_only=False):
    accounts = GLAccount.objects.filter(business_unit=business_unit).select_related('account_type', 'category')
    if active_only:
        accounts = accounts.filter(is_active=True)
    return accounts.order_by('account_code')


def normal_balance_of(account, debit, credit):
    if account.normal_balance == DEBIT:
        return debit - credit
    return credit - debit


def code_number(code):
    digits = ''
    for char in code:
        if not char.isdigit():
            break
        digits += char
    return int(digits) if digits else None


def is_current_asset(account):
    number = code_number(account.account_code)
    return account.account_code.startswith('1') and number is not None and number < 1500


def is_current_liability(account):
    number = code_number(account.account_code)
    return account.account_code.startswith('2') and number is not None and number < 2500


def is_cost_of_sales(account):
    return account.account_code.startswith('5') or 'cost' in account.name.lower()


def account_row(account, amount):
    return {
        'id': account.id,
        'account_code': account.account_code,
        'name': account.name,
        'account_type': account.account_type.name,
        'category': account.category.name if account.category else None,
        'balance': money(amount),
    }


def total_of(rows, key='balance'):
    return money(sum((row[key] for row in rows), ZERO))


def percentage(part, whole):
    if not whole:
        return ZERO
    return money(part / whole * 100)


def net_income_of(accounts, totals):
    """Revenue minus expenses for the given account totals"""
    revenue = expenses = ZERO
    for account in accounts:
        debit, credit = totals.get(account.id, (ZERO, ZERO))
        if account.account_type.name == AccountType.REVENUE:
            revenue += credit - debit
        elif account.account_type.name == AccountType.EXPENSE:
            expenses += debit - credit
    return money(revenue), money(expenses)


def trial_balance(business_unit, end_date, include_zero_balances=False):
    totals = account_totals(business_unit, end_date=end_date)
    rows = []
    for account in accounts_of(business_unit, active_only=True):
        debit, credit = totals.get(account.id, (ZERO, ZERO))
        balance = normal_balance_of(account, debit, credit)

        # Normal-side balance goes in its own column, a negative one flips over
        debit_balance = credit_balance = ZERO
        on_debit_side = (account.normal_balance == DEBIT) == (balance >= 0)
        if on_debit_side:
            debit_balance = abs(balance)
        else:
            credit_balance = abs(balance)

        if not include_zero_balances and not debit_balance and not credit_balance:
            continue
        rows.append({
            'id': account.id,
            'account_code': account.account_code,
            'account_name': account.name,
            'account_type': account.account_type.name,
            'normal_balance': account.normal_balance,
            'debit_balance': money(debit_balance),
            'credit_balance': money(credit_balance),
        })

    total_debits = total_of(rows, 'debit_balance')
    total_credits = total_of(rows, 'credit_balance')
    return {
        'as_of_date': end_date,
        'accounts': rows,
        'totals': {
            'total_debits': total_debits,
            'total_credits': total_credits,
            'is_balanced': abs(total_debits - total_credits) < BALANCE_TOLERANCE,
        },
    }


def balance_sheet(business_unit, as_of_date):
    totals = account_totals(business_unit, end_date=as_of_date)
    accounts = list(accounts_of(business_unit))

    current_assets, non_current_assets = [], []
    current_liabilities, non_current_liabilities = [], []
    equity = []
    for account in accounts:
        debit, credit = totals.get(account.id, (ZERO, ZERO))
        row = account_row(account, normal_balance_of(account, debit, credit))
        type_name = account.account_type.name
        if type_name == AccountType.ASSET:
            (current_assets if is_current_asset(account) else non_current_assets).append(row)
        elif type_name == AccountType.LIABILITY:
            (current_liabilities if is_current_liability(account) else non_current_liabilities).append(row)
        elif type_name == AccountType.EQUITY:
            equity.append(row)

    revenue, expenses = net_income_of(accounts, totals)
    net_income = money(revenue - expenses)

    total_assets = money(total_of(current_assets) + total_of(non_current_assets))
    total_liabilities = money(total_of(current_liabilities) + total_of(non_current_liabilities))
    total_equity = money(total_of(equity) + net_income)
    total_liabilities_and_equity = money(total_liabilities + total_equity)

    return {
        'as_of_date': as_of_date,
        'assets': {
            'current_assets': current_assets,
            'total_current_assets': total_of(current_assets),
            'non_current_assets': non_current_assets,
            'total_non_current_assets': total_of(non_current_assets),
            'total_assets': total_assets,
        },
        'liabilities': {
            'current_liabilities': current_liabilities,
            'total_current_liabilities': total_of(current_liabilities),
            'non_current_liabilities': non_current_liabilities,
            'total_non_current_liabilities': total_of(non_current_liabilities),
            'total_liabilities': total_liabilities,
        },
        'equity': {
            'accounts': equity,
            'net_income': net_income,
            'total_equity': total_equity,
        },
        'total_liabilities_and_equity': total_liabilities_and_equity,
        'is_balanced': abs(total_assets - total_liabilities_and_equity) < BALANCE_TOLERANCE,
    }


def profit_and_loss(business_unit, start_date, end_date):
    totals = account_totals(business_unit, start_date=start_date, end_date=end_date)

    revenue, cost_of_sales, operating_expenses = [], [], []
    for account in accounts_of(business_unit):
        debit, credit = totals.get(account.id, (ZERO, ZERO))
        type_name = account.account_type.name
        if type_name == AccountType.REVENUE:
            revenue.append(account_row(account, credit - debit))
        elif type_name == AccountType.EXPENSE:
            row = account_row(account, debit - credit)
            (cost_of_sales if is_cost_of_sales(account) else operating_expenses).append(row)

    total_revenue = total_of(revenue)
    total_cost_of_sales = total_of(cost_of_sales)
    total_operating_expenses = total_of(operating_expenses)
    gross_profit = money(total_revenue - total_cost_of_sales)
    operating_income = money(gross_profit - total_operating_expenses)
    net_income = operating_income

    return {
        'start_date': start_date,
        'end_date': end_date,
        'revenue': {
            'accounts': revenue,
            'total_revenue': total_revenue,
        },
        'cost_of_sales': {
            'accounts': cost_of_sales,
            'total_cost_of_sales': total_cost_of_sales,
        },
        'operating_expenses': {
            'accounts': operating_expenses,
            'total_operating_expenses': total_operating_expenses,
        },
        'total_expenses': money(total_cost_of_sales + total_operating_expenses),
        'gross_profit': gross_profit,
        'operating_income': operating_income,
        'net_income': net_income,
        'gross_margin': percentage(gross_profit, total_revenue),
        'net_margin': percentage(net_income, total_revenue),
    }


def cash_accounts(business_unit):
    return GLAccount.objects.filter(
        business_unit=business_unit, account_type__name=AccountType.ASSET,
    ).filter(
        Q(name__icontains='cash') | Q(name__icontains='bank') |
        Q(id__in=BankAccount.objects.filter(business_unit=business_unit).values('gl_account'))
    )


def cash_flow(business_unit, start_date, end_date):
    """
    Indirect-method cash flow for a period.

    Working capital changes are the period movement of non-cash current
    assets and current liabilities. Non-current assets are reported as
    investing and non-current liabilities plus equity as financing.
    """
    cash_ids = set(cash_accounts(business_unit).values_list('id', flat=True))
    accounts = list(accounts_of(business_unit))

    before_totals = account_totals(business_unit, before=start_date)
    ending_totals = account_totals(business_unit, end_date=end_date)
    period_totals = account_totals(business_unit, start_date=start_date, end_date=end_date)

    def cash_balance(totals):
        return money(sum((debit - credit for account_id, (debit, credit) in totals.items()
                          if account_id in cash_ids), ZERO))

    beginning_cash = cash_balance(before_totals)
    ending_cash = cash_balance(ending_totals)

    revenue, expenses = net_income_of(accounts, period_totals)
    net_income = money(revenue - expenses)

    working_capital, investing, financing = [], [], []
    for account in accounts:
        if account.id in cash_ids or account.id not in period_totals:
            continue
        debit, credit = period_totals[account.id]
        # Cash effect: assets growing consume cash, liabilities and equity growing provide it
        effect = money(credit - debit)
        if not effect:
            continue
        item = {'account_code': account.account_code, 'description': account.name, 'amount': effect}
        type_name = account.account_type.name
        if type_name == AccountType.ASSET:
            (working_capital if is_current_asset(account) else investing).append(item)
        elif type_name == AccountType.LIABILITY:
            (working_capital if is_current_liability(account) else financing).append(item)
        elif type_name == AccountType.EQUITY:
            financing.append(item)

    net_cash_from_operating = money(net_income + total_of(working_capital, 'amount'))
    return {
        'start_date': start_date,
        'end_date': end_date,
        'operating_activities': {
            'net_income': net_income,
            'working_capital_changes': working_capital,
            'net_cash_from_operating': net_cash_from_operating,
        },
        'investing_activities': {
            'items': investing,
            'net_cash_from_investing': total_of(investing, 'amount'),
        },
        'financing_activities': {
            'items': financing,
            'net_cash_from_financing': total_of(financing, 'amount'),
        },
        'beginning_cash': beginning_cash,
        'ending_cash': ending_cash,
        'net_change_in_cash': money(ending_cash - beginning_cash),
    }


def gl_balances(business_unit, as_of_date, account_type=None):
    totals = account_totals(business_unit, end_date=as_of_date)
    accounts = accounts_of(business_unit)
    if account_type:
        accounts = accounts.filter(account_type__name=account_type.upper())

    rows = []
    for account in accounts:
        debit, credit = totals.get(account.id, (ZERO, ZERO))
        rows.append({
            'id': account.id,
            'account_code': account.account_code,
            'account_name': account.name,
            'account_type': account.account_type.name,
            'category': account.category.name if account.category else None,
            'normal_balance': account.normal_balance,
            'is_control_account': account.is_control_account,
            'total_debits': money(debit),
            'total_credits': money(credit),
            'balance': money(normal_balance_of(account, debit, credit)),
        })
    return {
        'as_of_date': as_of_date,
        'accounts': rows,
        'summary': {
            'total_debits': total_of(rows, 'total_debits'),
            'total_credits': total_of(rows, 'total_credits'),
            'account_count': len(rows),
        },
    }


def aging_bucket(days_past_due):
    if days_past_due <= 0:
        return 'current'
    if days_past_due <= 30:
        return 'days_1_30'
    if days_past_due <= 60:
        return 'days_31_60'
    if days_past_due <= 90:
        return 'days_61_90'
    return 'over_90'


def aging(invoices, as_of_date):
    """Outstanding amounts of unsettled invoices bucketed by days past due, per partner"""
    partners = {}
    invoices = invoices.filter(
        posting_date__lte=as_of_date
    ).exclude(
        settlement_status=SETTLEMENT_SETTLED
    ).exclude(
        status=CANCELLED
    ).select_related('business_partner').order_by('due_date', 'id')

    for invoice in invoices:
        outstanding = money(invoice.total_amount - invoice.amount_paid)
        if outstanding <= 0:
            continue
        days_past_due = (as_of_date - invoice.due_date).days
        bucket = aging_bucket(days_past_due)

        partner = invoice.business_partner
        entry = partners.get(partner.id)
        if entry is None:
            entry = {
                'business_partner': partner.id,
                'bp_code': partner.bp_code,
                'name': partner.name,
                'invoices': [],
                'total_balance': ZERO,
            }
            entry.update({key: ZERO for key in AGING_BUCKETS})
            partners[partner.id] = entry

        entry[bucket] += outstanding
        entry['total_balance'] += outstanding
        entry['invoices'].append({
            'id': invoice.id,
            'doc_num': invoice.doc_num,
            'posting_date': invoice.posting_date,
            'due_date': invoice.due_date,
            'days_past_due': max(days_past_due, 0),
            'bucket': bucket,
            'outstanding': outstanding,
        })

    rows = sorted(partners.values(), key=lambda row: row['total_balance'], reverse=True)
    summary = {key: total_of(rows, key) for key in AGING_BUCKETS}
    summary['total_outstanding'] = total_of(rows, 'total_balance')
    return {
        'as_of_date': as_of_date,
        'partners': rows,
        'summary': summary,
    }


def ar_aging(business_unit, as_of_date):
    return aging(ARInvoice.objects.filter(business_unit=business_unit), as_of_date)


def ap_aging(business_unit, as_of_date):
    return aging(APInvoice.objects.filter(business_unit=business_unit), as_of_date)


def inventory_valuation(business_unit, location_id=None):
    stocks = InventoryStock.objects.filter(
        location__business_unit=business_unit
    ).select_related('inventory_item__category', 'inventory_item__uom', 'location').order_by(
        'inventory_item__name', 'location__name'
    )
    if location_id:
        stocks = stocks.filter(location_id=location_id)

    rows = []
    categories = {}
    for stock in stocks:
        item = stock.inventory_item
        category = item.category.name if item.category else 'Uncategorized'
        value = money(stock.quantity_on_hand * item.standard_cost)
        rows.append({
            'inventory_stock': stock.id,
            'inventory_item': item.id,
            'item_name': item.name,
            'category': category,
            'uom': item.uom.symbol,
            'location': stock.location.name,
            'quantity_on_hand': stock.quantity_on_hand,
            'standard_cost': item.standard_cost,
            'total_value': value,
        })
        categories[category] = categories.get(category, ZERO) + value

    return {
        'items': rows,
        'categories': [
            {'category': name, 'total_value': money(total)} for name, total in sorted(categories.items())
        ],
        'total_value': total_of(rows, 'total_value'),
        'item_count': len(rows),
    }


def journal_entry_amount(entry):
    return money(entry.total_debit or ZERO)


def recent_transactions(business_unit, since, limit=10):
    entries = JournalEntry.objects.filter(
        business_unit=business_unit, created_at__gte=since
    ).annotate(total_debit=Sum('lines__debit')).order_by('-created_at')[:limit]
    orders = PurchaseOrder.objects.filter(
        business_unit=business_unit, created_at__gte=since
    ).select_related('business_partner').order_by('-created_at')[:limit]
    invoices = APInvoice.objects.filter(
        business_unit=business_unit, created_at__gte=since
    ).select_related('business_partner').order_by('-created_at')[:limit]

    transactions = [{
        'id': entry.id,
        'type': 'JOURNAL_ENTRY',
        'doc_num': entry.doc_num,
        'amount': journal_entry_amount(entry),
        'business_partner': 'Internal',
        'date': entry.created_at,
        'status': 'POSTED' if entry.is_posted else entry.approval_workflow_status,
    } for entry in entries]
    transactions += [{
        'id': order.id,
        'type': 'PURCHASE_ORDER',
        'doc_num': order.po_number,
        'amount': order.total_amount,
        'business_partner': order.business_partner.name,
        'date': order.created_at,
        'status': order.status,
    } for order in orders]
    transactions += [{
        'id': invoice.id,
        'type': 'AP_INVOICE',
        'doc_num': invoice.doc_num,
        'amount': invoice.total_amount,
        'business_partner': invoice.business_partner.name,
        'date': invoice.created_at,
        'status': invoice.status,
    } for invoice in invoices]
    transactions.sort(key=lambda row: row['date'], reverse=True)
    return transactions[:limit]


def pending_approvals(business_unit, limit=10):
    requests = PurchaseRequest.objects.filter(
        business_unit=business_unit, status=PurchaseRequest.PENDING
    ).select_related('requestor').order_by('-created_at')[:5]
    entries = JournalEntry.objects.filter(
        business_unit=business_unit, approval_workflow_status=JournalEntry.SUBMITTED
    ).select_related('author').annotate(total_debit=Sum('lines__debit')).order_by('-created_at')[:5]

    approvals = [{
        'id': pr.id,
        'type': 'PURCHASE_REQUEST',
        'doc_num': pr.pr_number,
        'amount': ZERO,
        'requestor': pr.requestor.username,
        'date': pr.created_at,
    } for pr in requests]
    approvals += [{
        'id': entry.id,
        'type': 'JOURNAL_ENTRY',
        'doc_num': entry.doc_num,
        'amount': journal_entry_amount(entry),
        'requestor': entry.author.username,
        'date': entry.created_at,
    } for entry in entries]
    return approvals[:limit]


def dashboard(business_unit, time_range='30d'):
    now = timezone.now()
    today = timezone.localdate()
    days = TIME_RANGES[time_range]
    since = now - timedelta(days=days)

    stocks = InventoryStock.objects.filter(
        location__business_unit=business_unit
    ).select_related('inventory_item', 'location')
    inventory_value = money(sum(
        (stock.quantity_on_hand * stock.inventory_item.standard_cost for stock in stocks), ZERO
    ))
    low_stock = stocks.filter(quantity_on_hand__lte=F('reorder_point')).order_by('inventory_item__name', 'location__name')
    inventory_alerts = [{
        'inventory_stock': stock.id,
        'item_name': stock.inventory_item.name,
        'current_stock': stock.quantity_on_hand,
        'reorder_point': stock.reorder_point,
        'location': stock.location.name,
    } for stock in low_stock[:10]]

    totals = account_totals(business_unit, start_date=since.date(), end_date=today)
    revenue, expenses = net_income_of(
        GLAccount.objects.filter(business_unit=business_unit).select_related('account_type'), totals
    )
    net_profit = money(revenue - expenses)

    partners = BusinessPartner.objects.filter(business_unit=business_unit)
    summary = {
        'total_revenue': revenue,
        'total_expenses': expenses,
        'net_profit': net_profit,
        'profit_margin': percentage(net_profit, revenue),
        'total_customers': partners.filter(type=BusinessPartner.CUSTOMER).count(),
        'total_vendors': partners.filter(type=BusinessPartner.VENDOR).count(),
        'total_inventory_value': inventory_value,
        'low_stock_items': low_stock.count(),
        'pending_purchase_requests': PurchaseRequest.objects.filter(
            business_unit=business_unit, status=PurchaseRequest.PENDING
        ).count(),
        'pending_journal_entries': JournalEntry.objects.filter(
            business_unit=business_unit, approval_workflow_status=JournalEntry.SUBMITTED
        ).count(),
        'open_purchase_orders': PurchaseOrder.objects.filter(
            business_unit=business_unit, status=PurchaseOrder.OPEN
        ).count(),
        'overdue_invoices': APInvoice.objects.filter(
            business_unit=business_unit, due_date__lt=today
        ).exclude(settlement_status=SETTLEMENT_SETTLED).exclude(status=CANCELLED).count(),
    }
    logger.debug(f"Dashboard for business unit {business_unit.id} over {time_range}")

    return {
        'time_range': time_range,
        'summary': summary,
        'quick_stats': {
            'total_gl_accounts': GLAccount.objects.filter(business_unit=business_unit).count(),
            'total_bank_accounts': BankAccount.objects.filter(business_unit=business_unit).count(),
            'total_menu_items': MenuItem.objects.filter(business_unit=business_unit).count(),
        },
        'recent_transactions': recent_transactions(business_unit, since),
        'pending_approvals': pending_approvals(business_unit),
        'inventory_alerts': inventory_alerts,
    }
