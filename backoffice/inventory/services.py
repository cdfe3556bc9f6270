"""Stock movements. Callers hold a transaction; stock rows are locked before they change."""
import logging
import uuid
from decimal import Decimal

from django.utils import timezone

from backoffice.core.exceptions import BusinessRuleError
from backoffice.financials.models import NumberingSeries
from backoffice.financials.services import next_document_number
from .models import InventoryStock, InventoryMovement, StockRequisition

logger = logging.getLogger('backoffice.inventory')


def lock_stock(inventory_item, location):
    """Locked stock row for (item, location), created at zero when missing"""
    stock, created = InventoryStock.objects.get_or_create(inventory_item=inventory_item, location=location)
    if created:
        logger.info(f"Stock record created for {inventory_item.name} at {location.name}")
    return InventoryStock.objects.select_for_update().get(pk=stock.pk)


def record_movement(stock, movement_type, quantity, reason, user=None, allow_negative=False):
    """Apply a signed quantity to a locked stock row and log the movement"""
    quantity = Decimal(quantity)
    new_quantity = stock.quantity_on_hand + quantity
    if new_quantity < 0 and not allow_negative:
        raise BusinessRuleError("Cannot decrease stock below zero")
    stock.quantity_on_hand = new_quantity
    stock.save(update_fields=['quantity_on_hand', 'updated_at'])
    return InventoryMovement.objects.create(
        inventory_stock=stock,
        type=movement_type,
        quantity=quantity,
        reason=reason[:255],
        created_by=user,
    )


def next_requisition_number(business_unit):
    if NumberingSeries.objects.filter(
        business_unit=business_unit, document_type=NumberingSeries.STOCK_REQUISITION
    ).exists():
        return next_document_number(business_unit, NumberingSeries.STOCK_REQUISITION)
    return f"REQ-{timezone.now():%Y%m%d}-{uuid.uuid4().hex[:6].upper()}"


def fulfill_requisition(requisition, user):
    """Move every requested quantity from the source to the destination location"""
    if requisition.status not in (StockRequisition.PENDING, StockRequisition.APPROVED):
        raise BusinessRuleError(f"Requisition {requisition.requisition_number} is {requisition.status}")

    reason = f"Requisition {requisition.requisition_number}"
    for item in requisition.items.select_related('inventory_item'):
        source = InventoryStock.objects.select_for_update().filter(
            inventory_item=item.inventory_item, location=requisition.from_location
        ).first()
        if source is None or source.quantity_on_hand < item.requested_quantity:
            available = source.quantity_on_hand if source else Decimal('0')
            raise BusinessRuleError(
                f"Insufficient stock for {item.inventory_item.name} at {requisition.from_location.name}. "
                f"Available: {available}, Requested: {item.requested_quantity}"
            )
        destination = lock_stock(item.inventory_item, requisition.to_location)
        record_movement(source, InventoryMovement.TRANSFER_OUT, -item.requested_quantity, reason, user)
        record_movement(destination, InventoryMovement.TRANSFER_IN, item.requested_quantity, reason, user)
        item.fulfilled_quantity = item.requested_quantity
        item.save(update_fields=['fulfilled_quantity'])

    requisition.status = StockRequisition.FULFILLED
    requisition.fulfilled_at = timezone.now()
    requisition.save(update_fields=['status', 'fulfilled_at', 'updated_at'])
    logger.info(f"Requisition {requisition.requisition_number} fulfilled by {user.username}")
    return requisition
