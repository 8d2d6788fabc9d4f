from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.db import models

from core.doc_numbers import get_next_value
from shared.exceptions import InvalidState
from shared.models import TimeStampedModel


class Supplier(TimeStampedModel):
    class Status(models.TextChoices):
        ACTIVE = "active", "Active"
        INACTIVE = "inactive", "Inactive"

    name = models.CharField(max_length=255)
    contact_person = models.CharField(max_length=255)
    email = models.EmailField()
    phone = models.CharField(max_length=32)
    alternate_phone = models.CharField(max_length=32, blank=True)
    street = models.CharField(max_length=255)
    city = models.CharField(max_length=100)
    state = models.CharField(max_length=100)
    pincode = models.CharField(max_length=20)
    tax_id = models.CharField(max_length=50, blank=True, default="")
    payment_terms = models.CharField(max_length=50, default="Net 30")
    notes = models.TextField(blank=True, default="")
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.ACTIVE)
    categories = models.JSONField(default=list, blank=True)
    lead_time = models.PositiveIntegerField(default=7, help_text="Lead time in days")

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class PurchaseIndent(TimeStampedModel):
    """An internal request to buy SKUs. ``indent_id`` is a plain running number from 1."""

    class Status(models.TextChoices):
        PENDING = "Pending", "Pending"
        APPROVED = "Approved", "Approved"
        PO_PENDING = "PO Pending", "PO Pending"
        PO_CREATED = "PO Created", "PO Created"
        DELETED = "Deleted", "Deleted"

    indent_id = models.PositiveIntegerField(unique=True, editable=False)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    approved_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name="+")

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:
        return f"Indent {self.indent_id} ({self.status})"

    def save(self, *args, **kwargs):
        if self._state.adding and not self.indent_id:
            self.indent_id = get_next_value(doc_type="INDENT", start=1)
        super().save(*args, **kwargs)

    def ensure_pending(self, action: str):
        if self.status != self.Status.PENDING:
            raise InvalidState(f"Indent {self.indent_id} is {self.status}; only pending indents can be {action}")


class PurchaseIndentItem(models.Model):
    indent = models.ForeignKey(PurchaseIndent, on_delete=models.CASCADE, related_name="items")
    sku = models.ForeignKey("inventory.SKU", on_delete=models.PROTECT, related_name="+")
    quantity = models.PositiveIntegerField()
    vendor = models.ForeignKey(Supplier, on_delete=models.SET_NULL, null=True, blank=True, related_name="+")

    class Meta:
        ordering = ["id"]


class PurchaseIndentApproval(models.Model):
    """
    Snapshot of an indent's items as approved, possibly with quantities or
    vendors changed. Purchase orders are raised against these, not against
    the indent itself.
    """

    class Status(models.TextChoices):
        PO_PENDING = "PO Pending", "PO Pending"
        PO_CREATED = "PO Created", "PO Created"
        CANCELLED = "Cancelled", "Cancelled"

    indent = models.ForeignKey(PurchaseIndent, on_delete=models.CASCADE, related_name="approvals")
    indent_number = models.PositiveIntegerField(help_text="indent_id of the approved indent")
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PO_PENDING)
    approved_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, related_name="+")
    approval_remarks = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:
        return f"Approval of indent {self.indent_number} ({self.status})"


class PurchaseIndentApprovalItem(models.Model):
    approval = models.ForeignKey(PurchaseIndentApproval, on_delete=models.CASCADE, related_name="items")
    sku = models.ForeignKey("inventory.SKU", on_delete=models.PROTECT, related_name="+")
    quantity = models.PositiveIntegerField()
    vendor = models.ForeignKey(Supplier, on_delete=models.SET_NULL, null=True, blank=True, related_name="+")

    class Meta:
        ordering = ["id"]


class PurchaseOrder(TimeStampedModel):
    """Order placed with one vendor. ``po_number`` runs from 1001."""

    class Status(models.TextChoices):
        ISSUED = "Issued", "Issued"
        PARTIALLY_RECEIVED = "Partially Received", "Partially Received"
        RECEIVED = "Received", "Received"
        CANCELLED = "Cancelled", "Cancelled"

    class StockInStatus(models.TextChoices):
        PENDING = "Pending to be Stock In", "Pending to be Stock In"
        STOCKED_IN = "Stocked In", "Stocked In"

    po_number = models.PositiveIntegerField(unique=True, editable=False)
    vendor = models.ForeignKey(Supplier, on_delete=models.PROTECT, related_name="purchase_orders")
    indent_approvals = models.ManyToManyField(PurchaseIndentApproval, related_name="purchase_orders", blank=True)
    delivery_due_date = models.DateField(null=True, blank=True)
    payment_days = models.CharField(max_length=50, blank=True, default="")
    freight = models.CharField(max_length=100, blank=True, default="")
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.ISSUED)
    stock_in_status = models.CharField(max_length=30, choices=StockInStatus.choices, default=StockInStatus.PENDING)
    stocked_in_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:
        return f"PO {self.po_number}"

    def save(self, *args, **kwargs):
        if self._state.adding and not self.po_number:
            self.po_number = get_next_value(doc_type="PO", start=1001)
        super().save(*args, **kwargs)


class PurchaseOrderItem(models.Model):
    purchase_order = models.ForeignKey(PurchaseOrder, on_delete=models.CASCADE, related_name="items")
    sku = models.ForeignKey("inventory.SKU", on_delete=models.PROTECT, related_name="+")
    quantity = models.PositiveIntegerField()
    unit_price = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        null=True,
        blank=True,
        help_text="Defaults to the SKU purchase price when stocking in",
    )

    class Meta:
        ordering = ["id"]

    @property
    def effective_unit_price(self) -> Decimal:
        if self.unit_price is not None:
            return self.unit_price
        return self.sku.purchase_price
