from decimal import Decimal

from django.db import models
from django.utils import timezone

from core.doc_numbers import get_next_doc_no
from shared.models import TimeStampedModel

from .customer import Customer
from .lines import PricedLine
from .sales_order import SalesOrder


class Invoice(TimeStampedModel):
    class Status(models.TextChoices):
        DRAFT = "draft", "Draft"
        SENT = "sent", "Sent"
        PAID = "paid", "Paid"
        PARTIALLY_PAID = "partially_paid", "Partially Paid"
        OVERDUE = "overdue", "Overdue"
        CANCELLED = "cancelled", "Cancelled"

    LOCKED_STATUSES = {Status.PAID, Status.PARTIALLY_PAID}
    OUTSTANDING_STATUSES = {Status.SENT, Status.PARTIALLY_PAID}

    invoice_number = models.CharField(max_length=20, unique=True, editable=False)
    sales_order = models.ForeignKey(SalesOrder, on_delete=models.SET_NULL, null=True, blank=True, related_name="invoices")
    customer = models.ForeignKey(Customer, on_delete=models.PROTECT, related_name="invoices")
    invoice_date = models.DateTimeField(default=timezone.now)
    due_date = models.DateField()
    subtotal = models.DecimalField(max_digits=16, decimal_places=2, default=Decimal("0.00"))
    total_discount = models.DecimalField(max_digits=16, decimal_places=2, default=Decimal("0.00"))
    total_tax = models.DecimalField(max_digits=16, decimal_places=2, default=Decimal("0.00"))
    total_amount = models.DecimalField(max_digits=16, decimal_places=2, default=Decimal("0.00"))
    paid_amount = models.DecimalField(max_digits=16, decimal_places=2, default=Decimal("0.00"))
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.DRAFT)
    payment_terms = models.CharField(max_length=50, default="Net 30")
    notes = models.TextField(blank=True)
    paid_at = models.DateTimeField(null=True, blank=True, help_text="First time the invoice reached paid")

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["status", "due_date"], name="invoice_status_due_idx"),
        ]

    def __str__(self):
        return self.invoice_number or f"Invoice #{self.pk}"

    def save(self, *args, **kwargs):
        if self._state.adding and not self.invoice_number:
            self.invoice_number = get_next_doc_no(doc_type="INV")
        super().save(*args, **kwargs)

    @property
    def is_overdue(self) -> bool:
        return self.status in self.OUTSTANDING_STATUSES and self.due_date < timezone.localdate()


class InvoiceItem(PricedLine):
    invoice = models.ForeignKey(Invoice, on_delete=models.CASCADE, related_name="items")
