"""Quotations, A/R invoices and incoming payments."""
import logging
from decimal import Decimal

from backoffice.core.exceptions import BusinessRuleError
from backoffice.financials.models import NumberingSeries
from backoffice.financials.services import money, next_document_number, apply_payment_to_invoice
from .models import (
    OPEN, CLOSED, SalesQuotation, SalesQuotationItem, ARInvoice, ARInvoiceItem,
    IncomingPayment, IncomingPaymentApplication
)

logger = logging.getLogger('backoffice.sales')

AR_TAX_RATE = Decimal('0.12')


def replace_quotation_items(quotation, items):
    quotation.items.all().delete()
    SalesQuotationItem.objects.bulk_create([
        SalesQuotationItem(
            sales_quotation=quotation, line_total=money(item['quantity'] * item['unit_price']), **item
        )
        for item in items
    ])


def create_quotation(business_unit, user, data):
    data = dict(data)
    items = data.pop('items')
    quotation = SalesQuotation.objects.create(
        business_unit=business_unit,
        doc_num=next_document_number(business_unit, NumberingSeries.SALES_QUOTATION),
        owner=user,
        **data
    )
    replace_quotation_items(quotation, items)
    logger.info(f"Sales quotation {quotation.doc_num} created for {quotation.business_partner.bp_code}")
    return quotation


def update_quotation(quotation, data):
    """Update header fields and, when given, replace the lines of an OPEN quotation"""
    if quotation.status != OPEN:
        raise BusinessRuleError(f"Sales quotation {quotation.doc_num} is {quotation.status} and cannot be modified")
    data = dict(data)
    items = data.pop('items', None)
    for field, value in data.items():
        setattr(quotation, field, value)
    quotation.save()
    if items is not None:
        replace_quotation_items(quotation, items)
    return quotation


def create_ar_invoice(business_unit, user, data):
    """Create an A/R invoice with 12% tax on the discounted subtotal and close its base quotation"""
    invoice = ARInvoice.objects.create(
        business_unit=business_unit,
        doc_num=next_document_number(business_unit, NumberingSeries.AR_INVOICE),
        business_partner=data['business_partner'],
        base_quotation=data.get('base_quotation'),
        posting_date=data['posting_date'],
        due_date=data['due_date'],
        document_date=data['document_date'],
        remarks=data.get('remarks', ''),
        created_by=user,
    )
    subtotal = Decimal('0')
    for item in data['items']:
        line_total = money(item['quantity'] * item['unit_price'] - item.get('discount', Decimal('0')))
        if line_total < 0:
            raise BusinessRuleError(f"Discount for {item['description']} exceeds the line amount")
        ARInvoiceItem.objects.create(ar_invoice=invoice, line_total=line_total, **item)
        subtotal += line_total

    invoice.subtotal = money(subtotal)
    invoice.tax_amount = money(subtotal * AR_TAX_RATE)
    invoice.total_amount = invoice.subtotal + invoice.tax_amount
    invoice.save(update_fields=['subtotal', 'tax_amount', 'total_amount'])

    quotation = data.get('base_quotation')
    if quotation is not None:
        quotation = SalesQuotation.objects.select_for_update().get(pk=quotation.pk)
        if quotation.status != OPEN:
            raise BusinessRuleError(f"Sales quotation {quotation.doc_num} is {quotation.status}")
        quotation.status = CLOSED
        quotation.save(update_fields=['status', 'updated_at'])

    logger.info(f"A/R invoice {invoice.doc_num} created, total {invoice.total_amount}")
    return invoice


def create_incoming_payment(business_unit, user, data):
    """Receive a customer payment applied to one or more A/R invoices"""
    payment = IncomingPayment.objects.create(
        business_unit=business_unit,
        doc_num=next_document_number(business_unit, NumberingSeries.INCOMING_PAYMENT),
        business_partner=data['business_partner'],
        payment_date=data['payment_date'],
        payment_method=data.get('payment_method'),
        bank_account=data.get('bank_account'),
        reference_number=data.get('reference_number', ''),
        amount=Decimal('0'),
        remarks=data.get('remarks', ''),
        created_by=user,
    )
    total = Decimal('0')
    for application in data['applications']:
        invoice = ARInvoice.objects.select_for_update().get(pk=application['ar_invoice'].pk)
        apply_payment_to_invoice(invoice, application['amount_applied'])
        IncomingPaymentApplication.objects.create(
            incoming_payment=payment, ar_invoice=invoice, amount_applied=application['amount_applied']
        )
        total += application['amount_applied']
    payment.amount = total
    payment.save(update_fields=['amount'])
    logger.info(f"Incoming payment {payment.doc_num} of {total} from {payment.business_partner.bp_code}")
    return payment
