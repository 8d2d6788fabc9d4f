from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone

from core.doc_numbers import get_next_doc_no
from shared.exceptions import InvalidState
from shared.models import TimeStampedModel

from .customer import Customer
from .lines import PricedLine


class SalesOrder(TimeStampedModel):
    """
    A customer order moving through
    draft -> confirmed -> pending_dispatch -> dispatched -> delivered,
    with cancelled and returned as side exits.

    New orders start in ``pending_dispatch`` unless the caller asks for
    ``draft``; they can then be dispatched without ever being confirmed.
    """

    class Status(models.TextChoices):
        DRAFT = "draft", "Draft"
        CONFIRMED = "confirmed", "Confirmed"
        PENDING_DISPATCH = "pending_dispatch", "Pending Dispatch"
        DISPATCHED = "dispatched", "Dispatched"
        DELIVERED = "delivered", "Delivered"
        CANCELLED = "cancelled", "Cancelled"
        RETURNED = "returned", "Returned"

    class DispatchStatus(models.TextChoices):
        PENDING = "pending", "Pending"
        PARTIAL = "partial", "Partial"
        COMPLETED = "completed", "Completed"

    # pending_dispatch -> dispatched is only reachable through DispatchService.
    TRANSITIONS = {
        Status.DRAFT: {Status.CONFIRMED, Status.CANCELLED},
        Status.CONFIRMED: {Status.PENDING_DISPATCH, Status.CANCELLED},
        Status.DISPATCHED: {Status.DELIVERED, Status.RETURNED},
        Status.DELIVERED: {Status.RETURNED},
    }

    order_number = models.CharField(max_length=20, unique=True, editable=False)
    customer = models.ForeignKey(Customer, on_delete=models.PROTECT, related_name="sales_orders")
    order_date = models.DateTimeField(default=timezone.now)
    expected_delivery_date = models.DateField(null=True, blank=True)
    subtotal = models.DecimalField(max_digits=16, decimal_places=2, default=Decimal("0.00"))
    total_discount = models.DecimalField(max_digits=16, decimal_places=2, default=Decimal("0.00"))
    total_tax = models.DecimalField(max_digits=16, decimal_places=2, default=Decimal("0.00"))
    total_amount = models.DecimalField(max_digits=16, decimal_places=2, default=Decimal("0.00"))
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING_DISPATCH)
    dispatch_status = models.CharField(max_length=20, choices=DispatchStatus.choices, default=DispatchStatus.PENDING)
    notes = models.TextField(blank=True)
    approved_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name="+")
    approved_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["status", "order_date"], name="so_status_date_idx"),
            models.Index(fields=["customer", "status"], name="so_customer_status_idx"),
        ]

    def __str__(self):
        return self.order_number or f"SalesOrder #{self.pk}"

    def save(self, *args, **kwargs):
        if self._state.adding and not self.order_number:
            self.order_number = get_next_doc_no(doc_type="SO")
        super().save(*args, **kwargs)

    def can_transition_to(self, new_status) -> bool:
        return new_status in self.TRANSITIONS.get(self.status, set())

    def ensure_can_transition(self, new_status):
        if not self.can_transition_to(new_status):
            raise InvalidState(f"Cannot change sales order {self.order_number} from {self.status} to {new_status}")


class SalesOrderItem(PricedLine):
    order = models.ForeignKey(SalesOrder, on_delete=models.CASCADE, related_name="items")

    def __str__(self):
        return f"{self.order_id}: {self.quantity} x {self.sku_id}"


class DispatchedItem(models.Model):
    order = models.ForeignKey(SalesOrder, on_delete=models.CASCADE, related_name="dispatched_items")
    sku = models.ForeignKey("inventory.SKU", on_delete=models.PROTECT, related_name="+")
    quantity = models.PositiveIntegerField()
    dispatched_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["id"]


class StockAllocation(models.Model):
    """Quantity reserved for an order line when the order was confirmed."""

    order = models.ForeignKey(SalesOrder, on_delete=models.CASCADE, related_name="allocated_stock")
    sku = models.ForeignKey("inventory.SKU", on_delete=models.PROTECT, related_name="+")
    quantity = models.PositiveIntegerField()

    class Meta:
        ordering = ["id"]
