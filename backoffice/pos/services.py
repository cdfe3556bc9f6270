"""
Point of sale: order lifecycle, settlement and posting to the general ledger.

Writers expect the caller's ``transaction.atomic()`` block; the order, its table
and every stock row or number series they change are locked first.
"""
import logging
from decimal import Decimal

from django.utils import timezone

from backoffice.catalog.models import MenuItem, PaymentMethod
from backoffice.core.exceptions import BusinessRuleError
from backoffice.financials.models import JournalEntry, NumberingSeries, SETTLEMENT_SETTLED
from backoffice.financials.services import (
    money, take_number, find_open_period, create_journal_entry, post_journal_entry
)
from backoffice.inventory.models import InventoryMovement, InventoryStock
from backoffice.inventory.services import lock_stock, record_movement
from backoffice.parties.models import BusinessPartner
from backoffice.sales.models import CLOSED, ARInvoice, ARInvoiceItem
from backoffice.sales.services import AR_TAX_RATE as SALES_TAX_RATE
from .models import (
    POSConfiguration, MenuItemGLMapping, PaymentMethodGLMapping, Table, Order, OrderItem, OrderItemModifier, Payment
)

logger = logging.getLogger('backoffice.pos')

EDITABLE_ORDER_STATUSES = (Order.OPEN, Order.PREPARING, Order.SERVED)


def get_configuration(business_unit):
    return POSConfiguration.objects.filter(business_unit=business_unit).first()


# Orders
def add_order_items(order, items):
    for item in items:
        order_item = OrderItem.objects.create(
            order=order,
            menu_item=item['menu_item'],
            quantity=item['quantity'],
            price_at_sale=item['menu_item'].price,
            notes=item.get('notes', ''),
        )
        OrderItemModifier.objects.bulk_create([
            OrderItemModifier(order_item=order_item, **modifier) for modifier in item.get('modifiers', [])
        ])
    refresh_order_totals(order)


def order_subtotal(order):
    items = OrderItem.objects.filter(order=order).prefetch_related('modifiers')
    return sum((item.get_line_total() for item in items), Decimal('0'))


def refresh_order_totals(order):
    """Open orders carry the undiscounted, untaxed item total until settlement"""
    order.subtotal = money(order_subtotal(order))
    order.total_amount = order.subtotal
    order.save(update_fields=['subtotal', 'total_amount', 'updated_at'])


def create_order(business_unit, user, data):
    data = dict(data)
    items = data.pop('items')
    send_to_kitchen = data.pop('send_to_kitchen', False)

    configuration = get_configuration(business_unit)
    if configuration and configuration.require_customer_selection and not data.get('customer'):
        raise BusinessRuleError("A customer must be selected for this order")

    table = data.get('table')
    if table is not None:
        table = Table.objects.select_for_update().get(pk=table.pk)
        if table.status != Table.AVAILABLE:
            raise BusinessRuleError("Table is not available")
        table.status = Table.OCCUPIED
        table.save(update_fields=['status', 'updated_at'])
        data['table'] = table

    data.setdefault('waiter', user)
    order = Order.objects.create(
        business_unit=business_unit,
        status=Order.PREPARING if send_to_kitchen else Order.OPEN,
        created_by=user,
        **data
    )
    add_order_items(order, items)
    logger.info(f"POS order {order.id} created with {len(items)} items, total {order.total_amount}")
    return order


def require_editable(order):
    if order.status not in EDITABLE_ORDER_STATUSES:
        raise BusinessRuleError(f"Order #{order.id} is {order.status} and cannot be changed")


def free_table(order):
    if order.table_id is None:
        return
    table = Table.objects.select_for_update().get(pk=order.table_id)
    table.status = Table.AVAILABLE
    table.save(update_fields=['status', 'updated_at'])


def cancel_order(order):
    if order.status == Order.PAID:
        raise BusinessRuleError("Paid orders cannot be cancelled")
    if order.status == Order.CANCELLED:
        raise BusinessRuleError(f"Order #{order.id} is already cancelled")
    order.status = Order.CANCELLED
    order.save(update_fields=['status', 'updated_at'])
    free_table(order)
    return order


def send_to_kitchen(order):
    if order.status != Order.OPEN:
        raise BusinessRuleError(f"Only OPEN orders can be sent to the kitchen, order #{order.id} is {order.status}")
    order.status = Order.PREPARING
    order.save(update_fields=['status', 'updated_at'])
    return order


# Settlement
def compute_settlement_totals(subtotal, discount):
    """(subtotal, discount_value, tax, total) with 12% tax on the discounted subtotal"""
    discount_value = money(discount.amount_for(subtotal)) if discount else Decimal('0.00')
    taxable = subtotal - discount_value
    tax = money(taxable * SALES_TAX_RATE)
    return money(subtotal), discount_value, tax, money(taxable + tax)


def deplete_inventory(order, user, location=None):
    """Consume recipe ingredients for every order item; stock may go negative"""
    reason = f"POS order #{order.id}"
    items = order.items.select_related('menu_item__recipe').prefetch_related('menu_item__recipe__items__inventory_item')
    for item in items:
        recipe = getattr(item.menu_item, 'recipe', None)
        if recipe is None:
            continue
        for recipe_item in recipe.items.all():
            if location is not None:
                stock = lock_stock(recipe_item.inventory_item, location)
            else:
                stock = InventoryStock.objects.select_for_update().filter(
                    inventory_item=recipe_item.inventory_item
                ).order_by('id').first()
            if stock is None:
                logger.warning(f"No stock record for {recipe_item.inventory_item.name}, depletion skipped for {reason}")
                continue
            quantity = recipe_item.quantity_used * item.quantity
            record_movement(stock, InventoryMovement.SALE_DEPLETION, -quantity, reason, user, allow_negative=True)


def settle_order(business_unit, user, data):
    """Take payment for an order, close it, free its table and deplete its recipes"""
    order = Order.objects.select_for_update().get(pk=data['order'].pk)
    if order.status in Order.CLOSED_STATUSES:
        raise BusinessRuleError(f"Order #{order.id} is already {order.status}")

    discount = data.get('discount') or order.discount
    configuration = get_configuration(business_unit)
    if discount and configuration and not configuration.enable_discounts:
        raise BusinessRuleError("Discounts are disabled for this business unit")

    subtotal, discount_value, tax, total = compute_settlement_totals(order_subtotal(order), discount)
    received = data['amount_received']
    if received < total:
        raise BusinessRuleError(
            f"Insufficient payment amount. Required: {total:.2f}, Received: {received:.2f}"
        )

    payment = Payment.objects.create(
        order=order,
        payment_method=data['payment_method'],
        amount=received,
        change=received - total,
        reference_number=data.get('reference_number', ''),
        cashier=user,
    )
    order.discount = discount
    order.subtotal = subtotal
    order.discount_value = discount_value
    order.tax_amount = tax
    order.total_amount = total
    order.amount_paid = total
    order.status = Order.PAID
    order.save(update_fields=[
        'discount', 'subtotal', 'discount_value', 'tax_amount', 'total_amount', 'amount_paid', 'status', 'updated_at'
    ])
    free_table(order)
    deplete_inventory(order, user, data.get('location'))
    logger.info(f"POS order {order.id} settled: total {total}, received {received}, change {payment.change}")
    return order, payment


# GL posting
def lock_series(series):
    return NumberingSeries.objects.select_for_update().get(pk=series.pk)


def journal_line(account, debit=Decimal('0'), credit=Decimal('0'), description=''):
    return {'gl_account': account, 'debit': money(debit), 'credit': money(credit), 'description': description}


def sales_account_for(item, mappings, configuration):
    mapping = mappings.get(item.menu_item_id)
    account = mapping.sales_account if mapping else configuration.sales_revenue_account
    if account is None:
        raise BusinessRuleError(f"Sales account not found for menu item: {item.menu_item.name}")
    return account


def create_pos_ar_invoice(order, configuration, mappings, user, posting_date):
    customer = order.customer or BusinessPartner.objects.filter(
        business_unit=order.business_unit, bp_code=configuration.default_customer_bp_code,
        type=BusinessPartner.CUSTOMER,
    ).first()
    if customer is None:
        raise BusinessRuleError(f"Default customer {configuration.default_customer_bp_code} not found")

    invoice = ARInvoice.objects.create(
        business_unit=order.business_unit,
        doc_num=take_number(lock_series(configuration.ar_invoice_series)),
        business_partner=customer,
        posting_date=posting_date,
        due_date=posting_date,
        document_date=timezone.localdate(order.created_at),
        remarks=f"A/R invoice for POS order #{order.id}",
        subtotal=order.subtotal - order.discount_value,
        tax_amount=order.tax_amount,
        total_amount=order.total_amount,
        amount_paid=order.amount_paid,
        status=CLOSED,
        settlement_status=SETTLEMENT_SETTLED,
        created_by=user,
    )
    for item in order.items.all():
        ARInvoiceItem.objects.create(
            ar_invoice=invoice,
            menu_item=item.menu_item,
            description=item.menu_item.name,
            quantity=item.quantity,
            unit_price=item.get_unit_price(),
            line_total=money(item.get_line_total()),
            gl_account=sales_account_for(item, mappings, configuration),
        )
    return invoice


def build_sales_lines(order, configuration, mappings):
    lines = []
    for payment in order.payments.select_related('payment_method'):
        mapping = PaymentMethodGLMapping.objects.filter(
            business_unit=order.business_unit, payment_method=payment.payment_method
        ).select_related('gl_account').first()
        account = mapping.gl_account if mapping else configuration.cash_account
        if account is None:
            raise BusinessRuleError(f"GL account mapping not found for payment method: {payment.payment_method.name}")
        lines.append(journal_line(
            account, debit=payment.amount - payment.change, description=f"POS payment - {payment.payment_method.name}"
        ))
    if not lines:
        raise BusinessRuleError(f"Order #{order.id} has no payments to post")

    if order.discount_value > 0:
        account = (order.discount.gl_account if order.discount else None) or configuration.discount_account
        if account is None:
            raise BusinessRuleError("Discount GL account is not configured")
        lines.append(journal_line(account, debit=order.discount_value, description="Sales discount"))

    for item in order.items.all():
        lines.append(journal_line(
            sales_account_for(item, mappings, configuration),
            credit=item.get_line_total(),
            description=f"Sales - {item.menu_item.name}",
        ))
    if order.tax_amount > 0:
        lines.append(journal_line(configuration.sales_tax_account, credit=order.tax_amount, description="Sales tax"))

    total_debit = sum((line['debit'] for line in lines), Decimal('0'))
    total_credit = sum((line['credit'] for line in lines), Decimal('0'))
    if total_debit != total_credit:
        lines[0]['debit'] += total_credit - total_debit
    return lines


def build_cogs_lines(order, mappings):
    lines = []
    for item in order.items.all():
        mapping = mappings.get(item.menu_item_id)
        recipe = getattr(item.menu_item, 'recipe', None)
        if recipe is None or mapping is None or not (mapping.cogs_account and mapping.inventory_account):
            continue
        cost = sum(
            (recipe_item.quantity_used * recipe_item.inventory_item.standard_cost for recipe_item in recipe.items.all()),
            Decimal('0')
        ) * item.quantity
        if money(cost) <= 0:
            continue
        lines.append(journal_line(mapping.cogs_account, debit=cost, description=f"COGS - {item.menu_item.name}"))
        lines.append(journal_line(
            mapping.inventory_account, credit=cost, description=f"Inventory depletion - {item.menu_item.name}"
        ))
    return lines


def post_order_to_gl(order, user):
    """
    Post a paid order: optional closed A/R invoice, then an approved and posted journal entry
    with payment, discount, sales, tax and COGS lines.
    """
    if order.is_posted:
        raise BusinessRuleError("This order has already been posted to the GL")
    if order.status != Order.PAID:
        raise BusinessRuleError("Only paid orders can be posted to the GL")

    configuration = get_configuration(order.business_unit)
    if configuration is None or not configuration.auto_post_to_gl:
        raise BusinessRuleError("Automatic GL posting is not enabled for this business unit")
    if not (configuration.ar_invoice_series and configuration.journal_entry_series and configuration.sales_tax_account):
        raise BusinessRuleError("Essential configuration (A/R series, journal entry series, sales tax account) is missing")

    posting_date = timezone.localdate(order.created_at)
    menu_item_ids = order.items.values_list('menu_item_id', flat=True)
    mappings = {
        mapping.menu_item_id: mapping
        for mapping in MenuItemGLMapping.objects.filter(
            business_unit=order.business_unit, menu_item_id__in=menu_item_ids
        ).select_related('sales_account', 'cogs_account', 'inventory_account')
    }

    ar_invoice = None
    if configuration.auto_create_ar_invoice:
        ar_invoice = create_pos_ar_invoice(order, configuration, mappings, user, posting_date)

    lines = build_sales_lines(order, configuration, mappings) + build_cogs_lines(order, mappings)
    entry = create_journal_entry(
        order.business_unit, user, posting_date, lines,
        memo=f"Journal entry for POS order #{order.id}",
        reference_number=ar_invoice.doc_num if ar_invoice else f"POS-{order.id}",
        doc_num=take_number(lock_series(configuration.journal_entry_series)),
        status=JournalEntry.APPROVED,
    )
    post_journal_entry(entry, user)

    order.is_posted = True
    order.ar_invoice = ar_invoice
    order.journal_entry = entry
    order.posted_at = timezone.now()
    order.posted_by = user
    order.save(update_fields=['is_posted', 'ar_invoice', 'journal_entry', 'posted_at', 'posted_by', 'updated_at'])
    logger.info(f"POS order {order.id} posted to GL as {entry.doc_num}")
    return ar_invoice, entry


def validate_configuration(business_unit):
    """Readiness report for GL posting: blocking issues and non-blocking warnings"""
    issues = []
    warnings = []
    configuration = get_configuration(business_unit)
    if configuration is None:
        return {'is_valid': False, 'issues': ['POS configuration not found'], 'warnings': warnings}

    if configuration.sales_revenue_account is None:
        issues.append('Sales revenue account is not configured')
    if configuration.sales_tax_account is None:
        issues.append('Sales tax account is not configured')
    if configuration.auto_post_to_gl:
        if configuration.ar_invoice_series is None:
            issues.append('A/R invoice numbering series is not configured')
        if configuration.journal_entry_series is None:
            issues.append('Journal entry numbering series is not configured')

    unmapped_items = MenuItem.objects.filter(business_unit=business_unit, is_active=True).exclude(
        gl_mappings__business_unit=business_unit
    ).count()
    if unmapped_items:
        if configuration.sales_revenue_account is None:
            issues.append(f'{unmapped_items} active menu items have no GL mapping and no default revenue account exists')
        else:
            warnings.append(f'{unmapped_items} active menu items will use the default sales revenue account')

    unmapped_methods = PaymentMethod.objects.filter(business_unit=business_unit, is_active=True).exclude(
        gl_mappings__business_unit=business_unit
    ).count()
    if unmapped_methods:
        if configuration.cash_account is None:
            issues.append(f'{unmapped_methods} active payment methods have no GL mapping and no cash account exists')
        else:
            warnings.append(f'{unmapped_methods} active payment methods will use the default cash account')

    if find_open_period(business_unit, timezone.localdate()) is None:
        issues.append('No open accounting period covers today')

    if not BusinessPartner.objects.filter(
        business_unit=business_unit, bp_code=configuration.default_customer_bp_code, type=BusinessPartner.CUSTOMER
    ).exists():
        issues.append(f'Default customer {configuration.default_customer_bp_code} does not exist as a customer')

    return {'is_valid': not issues, 'issues': issues, 'warnings': warnings}


def accounting_summary(order):
    def account_line(line):
        return {
            'id': line.id,
            'account_code': line.gl_account.account_code,
            'account_name': line.gl_account.name,
            'debit': str(line.debit),
            'credit': str(line.credit),
            'description': line.description,
        }

    journal_entry = None
    if order.journal_entry_id:
        entry = order.journal_entry
        journal_entry = {
            'id': entry.id,
            'doc_num': entry.doc_num,
            'posting_date': entry.posting_date,
            'is_posted': entry.is_posted,
            'lines': [account_line(line) for line in entry.lines.select_related('gl_account')],
        }
    ar_invoice = None
    if order.ar_invoice_id:
        ar_invoice = {
            'id': order.ar_invoice.id,
            'doc_num': order.ar_invoice.doc_num,
            'total_amount': str(order.ar_invoice.total_amount),
            'settlement_status': order.ar_invoice.settlement_status,
        }
    return {
        'order_id': order.id,
        'is_posted': order.is_posted,
        'ar_invoice': ar_invoice,
        'journal_entry': journal_entry,
        'totals': {
            'subtotal': str(order.subtotal),
            'discount': str(order.discount_value),
            'tax': str(order.tax_amount),
            'total': str(order.total_amount),
            'amount_paid': str(order.amount_paid),
        },
    }
