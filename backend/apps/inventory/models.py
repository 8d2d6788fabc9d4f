from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from shared.models import TimeStampedModel


class SKU(TimeStampedModel):
    """
    A stock keeping unit.

    ``current_stock`` and ``reserved_stock`` are owned by
    ``StockLedger``; nothing else should write them. ``reserved_stock`` is
    signed: dispatching an order that was never confirmed consumes a
    reservation that was never made and drives it below zero.
    """

    code = models.CharField(max_length=50, unique=True)
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    purchase_price = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"), validators=[MinValueValidator(0)])
    selling_price = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"), validators=[MinValueValidator(0)])
    min_stock = models.PositiveIntegerField(default=0, help_text="Reorder threshold")
    current_stock = models.IntegerField(default=0)
    reserved_stock = models.IntegerField(default=0)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ["name"]
        verbose_name = "SKU"
        verbose_name_plural = "SKUs"

    def __str__(self):
        return f"{self.code} - {self.name}"

    @property
    def available_stock(self) -> int:
        return self.current_stock - self.reserved_stock

    @property
    def is_below_minimum(self) -> bool:
        return self.current_stock <= self.min_stock


class Warehouse(TimeStampedModel):
    code = models.CharField(max_length=20, unique=True)
    name = models.CharField(max_length=255)
    address = models.TextField(blank=True)
    capacity = models.PositiveIntegerField(null=True, blank=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ["code"]

    def __str__(self):
        return f"{self.code} - {self.name}"


@dataclass(frozen=True)
class Reference:
    """The document a ledger entry was written for, e.g. ``Reference("Invoice", 12)``."""

    kind: str
    id: int

    @classmethod
    def of(cls, document) -> "Reference":
        return cls(kind=document.__class__.__name__, id=document.pk)

    def __str__(self):
        return f"{self.kind}:{self.id}"


class StockTransaction(models.Model):
    """
    Append-only stock ledger entry.

    Only ``status`` ever changes after insert (pending sales entries are
    settled when their invoice is paid).
    """

    class Type(models.TextChoices):
        INBOUND = "inbound", "Inbound"
        OUTBOUND = "outbound", "Outbound"
        SALES = "sales", "Sales"
        RESERVED = "reserved", "Reserved"
        RELEASED = "released", "Released"

    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        COMPLETED = "completed", "Completed"

    class ReferenceKind(models.TextChoices):
        SALES_ORDER = "SalesOrder", "Sales Order"
        INVOICE = "Invoice", "Invoice"
        SALES_RETURN = "SalesReturn", "Sales Return"
        PURCHASE_ORDER = "PurchaseOrder", "Purchase Order"

    type = models.CharField(max_length=10, choices=Type.choices)
    sku = models.ForeignKey(SKU, on_delete=models.PROTECT, related_name="transactions")
    quantity = models.PositiveIntegerField()
    unit_price = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    total_amount = models.DecimalField(max_digits=16, decimal_places=2, default=Decimal("0.00"))
    reference_type = models.CharField(max_length=20, choices=ReferenceKind.choices)
    reference_id = models.PositiveBigIntegerField()
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.COMPLETED)
    notes = models.TextField(blank=True)
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name="+")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["reference_type", "reference_id"], name="stocktx_reference_idx"),
            models.Index(fields=["sku", "type"], name="stocktx_sku_type_idx"),
        ]

    def __str__(self):
        return f"{self.type} {self.quantity} x {self.sku_id} ({self.reference})"

    @property
    def reference(self) -> Reference:
        return Reference(kind=self.reference_type, id=self.reference_id)
