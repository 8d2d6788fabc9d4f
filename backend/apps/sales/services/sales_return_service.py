from __future__ import annotations

import logging

from django.db import transaction
from django.utils import timezone

from apps.inventory.models import Reference
from apps.inventory.services.stock_service import StockLedger
from shared.event_bus import event_bus
from shared.exceptions import InvalidArgument

from ..models import SalesReturn, SalesReturnItem
from .lookups import get_customer, get_sales_order
from .totals import ZERO, line_total

logger = logging.getLogger(__name__)


class SalesReturnService:
    @staticmethod
    @transaction.atomic
    def create_return(
        *,
        sales_order,
        reason,
        action_required,
        items,
        user=None,
        customer=None,
        return_date=None,
        notes="",
    ) -> SalesReturn:
        """
        Record goods coming back against an order.

        Every returned SKU must appear on the order and may not exceed the
        ordered quantity. Lines without a unit price take the order's price.
        """
        order = get_sales_order(sales_order)
        if not items:
            raise InvalidArgument("At least one item is required")
        ordered = {item.sku_id: item for item in order.items.all()}

        lines = []
        for item in items:
            order_item = ordered.get(item["sku"])
            if order_item is None:
                raise InvalidArgument("Item not found in original order")
            if item["quantity"] > order_item.quantity:
                raise InvalidArgument(f"Return quantity exceeds ordered quantity for SKU {item['sku']}")
            unit_price = item.get("unit_price")
            if unit_price is None:
                unit_price = order_item.unit_price
            lines.append({
                "sku_id": item["sku"],
                "quantity": item["quantity"],
                "unit_price": unit_price,
                "total_amount": line_total(item["quantity"], unit_price),
            })

        sales_return = SalesReturn(
            sales_order=order,
            customer=get_customer(customer) if customer else order.customer,
            reason=reason,
            action_required=action_required,
            total_amount=sum((line["total_amount"] for line in lines), ZERO),
            notes=notes or "",
            created_by=user,
        )
        if return_date:
            sales_return.return_date = return_date
        sales_return.save()
        SalesReturnItem.objects.bulk_create([SalesReturnItem(sales_return=sales_return, **line) for line in lines])

        logger.info(f"Sales return {sales_return.return_number} created against {order.order_number}")
        event_bus.publish("sales_return.created", return_id=sales_return.pk, user_id=getattr(user, "pk", None))
        return sales_return

    @staticmethod
    @transaction.atomic
    def process_return(sales_return: SalesReturn, new_status: str, *, user=None) -> SalesReturn:
        """
        Move a return to approved, rejected or processed.

        Approval credits every returned line back to stock. Raises
        ``InvalidState`` for any move outside the return's transition table,
        which also stops a second approval from crediting stock twice.
        """
        sales_return = SalesReturn.objects.select_for_update().get(pk=sales_return.pk)
        sales_return.ensure_can_transition(new_status)

        if new_status == SalesReturn.Status.APPROVED:
            reference = Reference.of(sales_return)
            for item in sales_return.items.all():
                StockLedger.credit(
                    item.sku_id,
                    item.quantity,
                    reference=reference,
                    unit_price=item.unit_price,
                    user=user,
                    notes=f"Returned from Sales Return {sales_return.return_number}",
                )

        previous = sales_return.status
        sales_return.status = new_status
        sales_return.processed_by = user
        sales_return.processed_at = timezone.now()
        sales_return.save()

        logger.info(f"Sales return {sales_return.return_number}: {previous} -> {new_status}")
        event_bus.publish(
            "sales_return.processed",
            return_id=sales_return.pk,
            new_status=new_status,
            user_id=getattr(user, "pk", None),
        )
        return sales_return
