"""Procurement flow: purchase request, purchase order, goods receipt, A/P invoice and payment."""
import logging
from decimal import Decimal

from django.utils import timezone

from backoffice.core.exceptions import BusinessRuleError
from backoffice.financials.models import NumberingSeries
from backoffice.financials.services import money, next_document_number, apply_payment_to_invoice
from backoffice.inventory.models import InventoryMovement
from backoffice.inventory.services import lock_stock, record_movement
from .models import (
    PurchaseRequest, PurchaseRequestItem, PurchaseOrder, PurchaseOrderItem, GoodsReceipt, GoodsReceiptItem,
    APInvoice, APInvoiceItem, OutgoingPayment, OutgoingPaymentApplication
)

logger = logging.getLogger('backoffice.purchasing')


def create_purchase_request(business_unit, user, data):
    purchase_request = PurchaseRequest.objects.create(
        business_unit=business_unit,
        pr_number=next_document_number(business_unit, NumberingSeries.PURCHASE_REQUEST),
        requestor=user,
        request_date=data['request_date'],
        required_date=data.get('required_date'),
        notes=data.get('notes', ''),
    )
    PurchaseRequestItem.objects.bulk_create([
        PurchaseRequestItem(purchase_request=purchase_request, **item) for item in data['items']
    ])
    logger.info(f"Purchase request {purchase_request.pr_number} created by {user.username}")
    return purchase_request


def decide_purchase_request(purchase_request, user, target):
    """Move a pending request to APPROVED or REJECTED"""
    if purchase_request.status != PurchaseRequest.PENDING:
        raise BusinessRuleError(
            f"Purchase request {purchase_request.pr_number} is {purchase_request.status}, only PENDING requests can be "
            f"{'approved' if target == PurchaseRequest.APPROVED else 'rejected'}"
        )
    purchase_request.status = target
    purchase_request.approver = user
    purchase_request.approval_date = timezone.now()
    purchase_request.save(update_fields=['status', 'approver', 'approval_date', 'updated_at'])
    return purchase_request


def create_purchase_order(business_unit, user, data):
    purchase_request = PurchaseRequest.objects.select_for_update().get(pk=data['purchase_request'].pk)
    if purchase_request.status != PurchaseRequest.APPROVED:
        raise BusinessRuleError(f"Purchase request {purchase_request.pr_number} is not approved")

    order = PurchaseOrder.objects.create(
        business_unit=business_unit,
        po_number=next_document_number(business_unit, NumberingSeries.PURCHASE_ORDER),
        business_partner=data['business_partner'],
        purchase_request=purchase_request,
        document_date=data['document_date'],
        posting_date=data['posting_date'],
        delivery_date=data['delivery_date'],
        remarks=data.get('remarks', ''),
        owner=user,
    )
    total = Decimal('0')
    for item in data['items']:
        line_total = money(item['quantity'] * item['unit_price'])
        PurchaseOrderItem.objects.create(
            purchase_order=order, line_total=line_total, open_quantity=item['quantity'], **item
        )
        total += line_total
    order.total_amount = total
    order.save(update_fields=['total_amount'])

    purchase_request.status = PurchaseRequest.CLOSED
    purchase_request.save(update_fields=['status', 'updated_at'])
    logger.info(f"Purchase order {order.po_number} created from {purchase_request.pr_number}, total {total}")
    return order


def close_purchase_order(order):
    if order.status != PurchaseOrder.OPEN:
        raise BusinessRuleError(f"Purchase order {order.po_number} is {order.status}, only OPEN orders can be closed")
    order.status = PurchaseOrder.CLOSED
    order.save(update_fields=['status', 'updated_at'])
    return order


def receive_goods(business_unit, user, data):
    """Create a goods receipt, reduce open quantities and put the goods into stock"""
    order = PurchaseOrder.objects.select_for_update().get(pk=data['purchase_order'].pk)
    if order.status != PurchaseOrder.OPEN:
        raise BusinessRuleError(f"Purchase order {order.po_number} is {order.status}, goods can only be received on OPEN orders")

    lines = []
    for item in data['items']:
        po_item = PurchaseOrderItem.objects.select_for_update().get(pk=item['purchase_order_item'].pk)
        if po_item.purchase_order_id != order.id:
            raise BusinessRuleError(f"Line {po_item.description} does not belong to purchase order {order.po_number}")
        if po_item.inventory_item_id is None:
            raise BusinessRuleError(f"Line {po_item.description} has no inventory item and cannot be received into stock")
        if item['quantity'] > po_item.open_quantity:
            raise BusinessRuleError(f"Received quantity for {po_item.description} exceeds open quantity")
        po_item.open_quantity -= item['quantity']
        po_item.save(update_fields=['open_quantity'])
        lines.append((po_item, item))

    receipt = GoodsReceipt.objects.create(
        business_unit=business_unit,
        doc_num=next_document_number(business_unit, NumberingSeries.GOODS_RECEIPT_PO),
        purchase_order=order,
        business_partner=order.business_partner,
        document_date=data['document_date'],
        posting_date=data['posting_date'],
        remarks=data.get('remarks', ''),
        received_by=user,
    )
    reason = f"Goods receipt {receipt.doc_num}"
    for po_item, item in lines:
        GoodsReceiptItem.objects.create(
            goods_receipt=receipt,
            purchase_order_item=po_item,
            inventory_item=po_item.inventory_item,
            location=item['location'],
            quantity=item['quantity'],
            batch_number=item.get('batch_number', ''),
            expiry_date=item.get('expiry_date'),
            notes=item.get('notes', ''),
        )
        stock = lock_stock(po_item.inventory_item, item['location'])
        record_movement(stock, InventoryMovement.RECEIVING, item['quantity'], reason, user)

    logger.info(f"Goods receipt {receipt.doc_num} posted against {order.po_number} ({len(lines)} lines)")
    return receipt


def create_ap_invoice(business_unit, user, data):
    invoice = APInvoice.objects.create(
        business_unit=business_unit,
        doc_num=next_document_number(business_unit, NumberingSeries.AP_INVOICE),
        business_partner=data['business_partner'],
        base_purchase_order=data.get('base_purchase_order'),
        posting_date=data['posting_date'],
        due_date=data['due_date'],
        document_date=data['document_date'],
        remarks=data.get('remarks', ''),
        created_by=user,
    )
    total = Decimal('0')
    for item in data['items']:
        line_total = money(item['quantity'] * item['unit_price'])
        APInvoiceItem.objects.create(ap_invoice=invoice, line_total=line_total, **item)
        total += line_total
    invoice.total_amount = total
    invoice.save(update_fields=['total_amount'])
    logger.info(f"A/P invoice {invoice.doc_num} created for {invoice.business_partner.bp_code}, total {total}")
    return invoice


def create_outgoing_payment(business_unit, user, data):
    """Pay one or more A/P invoices of a vendor"""
    payment = OutgoingPayment.objects.create(
        business_unit=business_unit,
        doc_num=next_document_number(business_unit, NumberingSeries.OUTGOING_PAYMENT),
        business_partner=data['business_partner'],
        bank_account=data.get('bank_account'),
        payment_date=data['payment_date'],
        reference_number=data.get('reference_number', ''),
        amount=Decimal('0'),
        remarks=data.get('remarks', ''),
        created_by=user,
    )
    total = Decimal('0')
    for application in data['applications']:
        invoice = APInvoice.objects.select_for_update().get(pk=application['ap_invoice'].pk)
        apply_payment_to_invoice(invoice, application['amount_applied'])
        OutgoingPaymentApplication.objects.create(
            outgoing_payment=payment, ap_invoice=invoice, amount_applied=application['amount_applied']
        )
        total += application['amount_applied']
    payment.amount = total
    payment.save(update_fields=['amount'])
    logger.info(f"Outgoing payment {payment.doc_num} of {total} applied to {len(data['applications'])} invoices")
    return payment
