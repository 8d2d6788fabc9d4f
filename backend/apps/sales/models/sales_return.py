from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone

from core.doc_numbers import get_next_doc_no
from shared.exceptions import InvalidState
from shared.models import TimeStampedModel

from .customer import Customer
from .sales_order import SalesOrder


class SalesReturn(TimeStampedModel):
    class Reason(models.TextChoices):
        DAMAGED = "damaged", "Damaged"
        DEFECTIVE = "defective", "Defective"
        WRONG_ITEM = "wrong_item", "Wrong Item"
        CUSTOMER_REQUEST = "customer_request", "Customer Request"
        QUALITY_ISSUE = "quality_issue", "Quality Issue"
        OTHER = "other", "Other"

    class ActionRequired(models.TextChoices):
        REFUND = "refund", "Refund"
        EXCHANGE = "exchange", "Exchange"
        REPAIR = "repair", "Repair"
        CREDIT_NOTE = "credit_note", "Credit Note"

    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        APPROVED = "approved", "Approved"
        PROCESSED = "processed", "Processed"
        REJECTED = "rejected", "Rejected"

    # Approval credits stock, so a return can be approved at most once.
    TRANSITIONS = {
        Status.PENDING: {Status.APPROVED, Status.REJECTED, Status.PROCESSED},
        Status.APPROVED: {Status.PROCESSED},
    }

    return_number = models.CharField(max_length=20, unique=True, editable=False)
    sales_order = models.ForeignKey(SalesOrder, on_delete=models.PROTECT, related_name="returns")
    customer = models.ForeignKey(Customer, on_delete=models.PROTECT, related_name="sales_returns")
    return_date = models.DateTimeField(default=timezone.now)
    reason = models.CharField(max_length=20, choices=Reason.choices)
    action_required = models.CharField(max_length=20, choices=ActionRequired.choices)
    total_amount = models.DecimalField(max_digits=16, decimal_places=2, default=Decimal("0.00"))
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    notes = models.TextField(blank=True)
    processed_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name="+")
    processed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return self.return_number or f"SalesReturn #{self.pk}"

    def save(self, *args, **kwargs):
        if self._state.adding and not self.return_number:
            self.return_number = get_next_doc_no(doc_type="SR")
        super().save(*args, **kwargs)

    def ensure_can_transition(self, new_status):
        if new_status not in self.TRANSITIONS.get(self.status, set()):
            raise InvalidState(f"Cannot move sales return {self.return_number} from {self.status} to {new_status}")


class SalesReturnItem(models.Model):
    sales_return = models.ForeignKey(SalesReturn, on_delete=models.CASCADE, related_name="items")
    sku = models.ForeignKey("inventory.SKU", on_delete=models.PROTECT, related_name="+")
    quantity = models.PositiveIntegerField()
    unit_price = models.DecimalField(max_digits=14, decimal_places=2)
    total_amount = models.DecimalField(max_digits=16, decimal_places=2)

    class Meta:
        ordering = ["id"]
