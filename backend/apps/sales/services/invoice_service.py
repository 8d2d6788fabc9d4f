from __future__ import annotations

import logging
from decimal import Decimal

from django.db import transaction
from django.db.models import Count, Q, Sum
from django.utils import timezone

from apps.inventory.models import Reference
from apps.inventory.services.stock_service import StockLedger
from shared.config import invoice_payment_deducts_stock
from shared.event_bus import event_bus
from shared.exceptions import InvalidState

from ..models import Invoice, InvoiceItem
from .lookups import get_customer, get_sales_order
from .sales_order_service import build_priced_lines
from .totals import ZERO, summarise

logger = logging.getLogger(__name__)


class InvoiceService:
    @staticmethod
    @transaction.atomic
    def create_invoice(
        *,
        customer,
        due_date,
        items,
        user=None,
        sales_order=None,
        payment_terms=None,
        notes="",
    ) -> Invoice:
        """Create an invoice and one pending ``sales`` ledger entry per line."""
        customer = get_customer(customer)
        order = get_sales_order(sales_order) if sales_order else None
        lines = build_priced_lines(items, check_stock=False)

        invoice = Invoice.objects.create(
            customer=customer,
            sales_order=order,
            due_date=due_date,
            payment_terms=payment_terms or "Net 30",
            notes=notes or "",
            created_by=user,
            **summarise(lines).as_fields(),
        )
        InvoiceItem.objects.bulk_create([InvoiceItem(invoice=invoice, **line) for line in lines])

        reference = Reference.of(invoice)
        for line in lines:
            StockLedger.record_sale(
                line["sku"],
                line["quantity"],
                reference=reference,
                unit_price=line["unit_price"],
                total_amount=line["total_amount"],
                user=user,
                notes=f"Invoice {invoice.invoice_number}",
            )
        logger.info(f"Invoice {invoice.invoice_number} created for customer {customer.pk} ({invoice.total_amount})")
        event_bus.publish("invoice.created", invoice_id=invoice.pk, user_id=getattr(user, "pk", None))
        return invoice

    @staticmethod
    @transaction.atomic
    def update_invoice(invoice: Invoice, *, status=None, paid_amount=None, user=None) -> Invoice:
        """
        Apply a status and/or payment.

        ``status`` is taken as given. ``paid_amount`` then derives the status:
        paid when it covers the total, partially_paid when positive.

        Only an explicit ``status="paid"`` settles the invoice: its sales
        entries are completed and, when ``INVOICE_PAYMENT_DEDUCTS_STOCK`` is
        on, its quantities are consumed. This happens once, stamped by
        ``paid_at``. A payment recorded through ``paid_amount`` alone moves
        the status only.
        """
        invoice = Invoice.objects.select_for_update().get(pk=invoice.pk)
        if status:
            invoice.status = status
        if paid_amount is not None:
            invoice.paid_amount = paid_amount
            if paid_amount >= invoice.total_amount:
                invoice.status = Invoice.Status.PAID
            elif paid_amount > 0:
                invoice.status = Invoice.Status.PARTIALLY_PAID

        if status == Invoice.Status.PAID and invoice.paid_at is None:
            InvoiceService._settle(invoice, user=user)
            invoice.paid_at = timezone.now()
        invoice.save()
        return invoice

    @staticmethod
    def _settle(invoice: Invoice, *, user=None):
        reference = Reference.of(invoice)
        StockLedger.settle_sales(reference)
        if invoice_payment_deducts_stock():
            for item in invoice.items.all():
                StockLedger.consume(
                    item.sku_id,
                    item.quantity,
                    reference=reference,
                    unit_price=item.unit_price,
                    user=user,
                    notes=f"Stock deducted on payment of invoice {invoice.invoice_number}",
                )
        logger.info(f"Invoice {invoice.invoice_number} paid")
        event_bus.publish("invoice.paid", invoice_id=invoice.pk, user_id=getattr(user, "pk", None))

    @staticmethod
    @transaction.atomic
    def delete_invoice(invoice: Invoice):
        invoice = Invoice.objects.select_for_update().get(pk=invoice.pk)
        if invoice.status in Invoice.LOCKED_STATUSES:
            raise InvalidState("Cannot delete paid or partially paid invoice")
        StockLedger.discard_pending(Reference.of(invoice))
        invoice_id = invoice.pk
        invoice.delete()
        event_bus.publish("invoice.deleted", invoice_id=invoice_id)

    @staticmethod
    def stats() -> dict:
        breakdown = (
            Invoice.objects.order_by()
            .values("status")
            .annotate(count=Count("id"), total=Sum("total_amount"), paid=Sum("paid_amount"))
            .order_by("status")
        )
        totals = Invoice.objects.aggregate(
            revenue=Sum("paid_amount"),
            overdue=Count(
                "id",
                filter=Q(due_date__lt=timezone.localdate(), status__in=list(Invoice.OUTSTANDING_STATUSES)),
            ),
        )
        return {
            "statusBreakdown": [
                {
                    "_id": row["status"],
                    "count": row["count"],
                    "totalAmount": row["total"] or ZERO,
                    "totalPaid": row["paid"] or ZERO,
                }
                for row in breakdown
            ],
            "totalInvoices": Invoice.objects.count(),
            "totalRevenue": totals["revenue"] or Decimal("0"),
            "overdueInvoices": totals["overdue"],
        }
