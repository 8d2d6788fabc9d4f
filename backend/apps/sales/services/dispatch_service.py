from __future__ import annotations

import logging

from django.db import transaction
from django.utils import timezone

from apps.inventory.models import Reference
from apps.inventory.services.stock_service import StockLedger
from shared.event_bus import event_bus
from shared.exceptions import InvalidArgument, InvalidState

from ..models import DispatchedItem, SalesOrder
from .lookups import get_skus

logger = logging.getLogger(__name__)


class DispatchService:
    """Ships a ``pending_dispatch`` order out of stock."""

    @staticmethod
    @transaction.atomic
    def dispatch(order: SalesOrder, dispatched_items, *, user=None) -> SalesOrder:
        """
        Consume stock for every dispatched line and mark the order dispatched.

        All lines succeed or none do. Each line is charged at the unit price of
        the order item with the same SKU, or 0 when the order has no such item.
        ``dispatch_status`` is set to completed even when fewer units than
        ordered are shipped.

        Raises:
            InvalidState: the order is not ``pending_dispatch``.
            NotFound: a dispatched SKU does not exist.
            InsufficientStock: a line exceeds the SKU's current stock.
        """
        order = SalesOrder.objects.select_for_update().get(pk=order.pk)
        if order.status != SalesOrder.Status.PENDING_DISPATCH:
            raise InvalidState("Order is not ready for dispatch")
        if not dispatched_items:
            raise InvalidArgument("At least one dispatched item is required")

        get_skus([line["sku"] for line in dispatched_items])
        prices = {item.sku_id: item.unit_price for item in order.items.all()}
        reference = Reference.of(order)
        dispatched_at = timezone.now()

        for line in dispatched_items:
            StockLedger.consume(
                line["sku"],
                line["quantity"],
                reference=reference,
                unit_price=prices.get(line["sku"], 0),
                user=user,
                notes=f"Dispatched from Sales Order {order.order_number}",
            )

        order.dispatched_items.all().delete()
        DispatchedItem.objects.bulk_create([
            DispatchedItem(order=order, sku_id=line["sku"], quantity=line["quantity"], dispatched_at=dispatched_at)
            for line in dispatched_items
        ])
        order.status = SalesOrder.Status.DISPATCHED
        order.dispatch_status = SalesOrder.DispatchStatus.COMPLETED
        order.save(update_fields=["status", "dispatch_status", "updated_at"])

        logger.info(f"Sales order {order.order_number} dispatched ({len(dispatched_items)} lines)")
        event_bus.publish("sales_order.dispatched", order_id=order.pk, user_id=getattr(user, "pk", None))
        return order
