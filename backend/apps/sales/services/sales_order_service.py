from __future__ import annotations

import logging
from decimal import Decimal

from django.db import transaction
from django.db.models import Count, Sum
from django.utils import timezone

from apps.inventory.models import Reference
from apps.inventory.services.stock_service import StockLedger
from shared.event_bus import event_bus
from shared.exceptions import InsufficientStock, InvalidArgument, InvalidState

from ..models import SalesOrder, SalesOrderItem, StockAllocation
from .lookups import get_customer, get_skus
from .totals import ZERO, line_total, summarise

logger = logging.getLogger(__name__)


def build_priced_lines(items, *, check_stock: bool) -> list[dict]:
    """
    Resolve the SKUs of incoming order/invoice lines and compute each line total.

    With ``check_stock`` every quantity must fit in the SKU's current stock.
    Reservations are not taken into account.
    """
    if not items:
        raise InvalidArgument("At least one item is required")
    skus = get_skus([item["sku"] for item in items])
    lines = []
    for item in items:
        sku = skus[item["sku"]]
        quantity = item["quantity"]
        if check_stock and quantity > sku.current_stock:
            raise InsufficientStock(
                f"Insufficient stock for {sku.name}. Available: {sku.current_stock}, Required: {quantity}"
            )
        discount = item.get("discount") or ZERO
        tax = item.get("tax") or ZERO
        lines.append({
            "sku": sku,
            "quantity": quantity,
            "unit_price": item["unit_price"],
            "discount": discount,
            "tax": tax,
            "total_amount": line_total(quantity, item["unit_price"], discount, tax),
        })
    return lines


class SalesOrderService:
    INITIAL_STATUSES = {SalesOrder.Status.DRAFT, SalesOrder.Status.PENDING_DISPATCH}

    @staticmethod
    def _replace_items(order: SalesOrder, lines: list[dict]):
        order.items.all().delete()
        SalesOrderItem.objects.bulk_create([SalesOrderItem(order=order, **line) for line in lines])
        for field, value in summarise(lines).as_fields().items():
            setattr(order, field, value)

    @staticmethod
    @transaction.atomic
    def create_order(*, customer, items, user=None, expected_delivery_date=None, notes="", status=None) -> SalesOrder:
        """
        Create an order with server-side totals.

        Raises:
            NotFound: customer or one of the SKUs does not exist.
            InsufficientStock: a line asks for more than the SKU's current stock.
            InvalidArgument: ``status`` is not an allowed initial status.
        """
        status = status or SalesOrder.Status.PENDING_DISPATCH
        if status not in SalesOrderService.INITIAL_STATUSES:
            raise InvalidArgument(f"A new sales order cannot start as {status}")

        customer = get_customer(customer)
        lines = build_priced_lines(items, check_stock=True)
        order = SalesOrder.objects.create(
            customer=customer,
            expected_delivery_date=expected_delivery_date,
            notes=notes or "",
            status=status,
            created_by=user,
            **summarise(lines).as_fields(),
        )
        SalesOrderItem.objects.bulk_create([SalesOrderItem(order=order, **line) for line in lines])
        logger.info(f"Sales order {order.order_number} created for customer {customer.pk} ({order.total_amount})")
        event_bus.publish("sales_order.created", order_id=order.pk, user_id=getattr(user, "pk", None))
        return order

    @staticmethod
    @transaction.atomic
    def update_order(order: SalesOrder, *, changes: dict, user=None) -> SalesOrder:
        """
        Edit a draft order. ``changes`` holds only the fields the caller sent;
        a ``status`` among them goes through the order's transition table.
        """
        order = SalesOrder.objects.select_for_update().get(pk=order.pk)
        if order.status != SalesOrder.Status.DRAFT:
            raise InvalidState(f"Sales order {order.order_number} is {order.status}; only draft orders can be edited")

        if "customer" in changes:
            order.customer = get_customer(changes["customer"])
        if "items" in changes:
            SalesOrderService._replace_items(order, build_priced_lines(changes["items"], check_stock=True))
        if "expected_delivery_date" in changes:
            order.expected_delivery_date = changes["expected_delivery_date"]
        if "notes" in changes:
            order.notes = changes["notes"] or ""
        order.save()

        new_status = changes.get("status")
        if new_status and new_status != order.status:
            SalesOrderService._apply_status(order, new_status, user=user)
        return order

    @staticmethod
    @transaction.atomic
    def change_status(order: SalesOrder, new_status: str, *, user=None) -> SalesOrder:
        order = SalesOrder.objects.select_for_update().get(pk=order.pk)
        SalesOrderService._apply_status(order, new_status, user=user)
        return order

    @staticmethod
    def _apply_status(order: SalesOrder, new_status: str, *, user=None):
        order.ensure_can_transition(new_status)
        previous = order.status
        if previous == SalesOrder.Status.DRAFT and new_status == SalesOrder.Status.CONFIRMED:
            SalesOrderService._confirm(order, user=user)
        elif previous == SalesOrder.Status.CONFIRMED and new_status == SalesOrder.Status.CANCELLED:
            SalesOrderService._release(order, user=user)
        order.status = new_status
        order.save()
        logger.info(f"Sales order {order.order_number}: {previous} -> {new_status}")
        event_bus.publish(
            "sales_order.status_changed",
            order_id=order.pk,
            previous_status=previous,
            new_status=new_status,
            user_id=getattr(user, "pk", None),
        )

    @staticmethod
    def _confirm(order: SalesOrder, *, user=None):
        reference = Reference.of(order)
        for item in order.items.all():
            StockLedger.reserve(item.sku_id, item.quantity, reference=reference, user=user)
            StockAllocation.objects.create(order=order, sku_id=item.sku_id, quantity=item.quantity)
        order.approved_by = user
        order.approved_at = timezone.now()
        event_bus.publish("sales_order.confirmed", order_id=order.pk, user_id=getattr(user, "pk", None))

    @staticmethod
    def _release(order: SalesOrder, *, user=None):
        reference = Reference.of(order)
        for allocation in order.allocated_stock.all():
            StockLedger.release(allocation.sku_id, allocation.quantity, reference=reference, user=user)
        order.allocated_stock.all().delete()

    @staticmethod
    @transaction.atomic
    def delete_order(order: SalesOrder):
        order = SalesOrder.objects.select_for_update().get(pk=order.pk)
        if order.status != SalesOrder.Status.DRAFT:
            raise InvalidState("Cannot delete confirmed sales order")
        logger.info(f"Deleting draft sales order {order.order_number}")
        order.delete()

    @staticmethod
    def stats() -> dict:
        breakdown = (
            SalesOrder.objects.order_by()
            .values("status")
            .annotate(count=Count("id"), total=Sum("total_amount"))
            .order_by("status")
        )
        revenue = SalesOrder.objects.filter(status=SalesOrder.Status.DELIVERED).aggregate(total=Sum("total_amount"))["total"]
        return {
            "statusBreakdown": [
                {"_id": row["status"], "count": row["count"], "totalAmount": row["total"] or ZERO}
                for row in breakdown
            ],
            "totalOrders": SalesOrder.objects.count(),
            "totalRevenue": revenue or Decimal("0"),
        }
