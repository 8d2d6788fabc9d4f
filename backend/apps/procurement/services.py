from __future__ import annotations

import logging

from django.db import transaction
from django.utils import timezone

from apps.inventory.models import SKU, Reference
from apps.inventory.services.stock_service import StockLedger
from shared.event_bus import event_bus
from shared.exceptions import InvalidArgument, InvalidState, NotFound

from .models import (
    PurchaseIndent,
    PurchaseIndentApproval,
    PurchaseIndentApprovalItem,
    PurchaseIndentItem,
    PurchaseOrder,
    PurchaseOrderItem,
    Supplier,
)

logger = logging.getLogger(__name__)


def _resolve_lines(items, *, with_vendor: bool = True) -> list[dict]:
    """Check that every SKU (and vendor, when given) of the incoming lines exists."""
    if not items:
        raise InvalidArgument("At least one item is required")
    skus = SKU.objects.in_bulk({item["sku"] for item in items})
    vendor_ids = {item["vendor"] for item in items if with_vendor and item.get("vendor")}
    vendors = Supplier.objects.in_bulk(vendor_ids)
    lines = []
    for item in items:
        if item["sku"] not in skus:
            raise NotFound(f"SKU {item['sku']} not found")
        line = {"sku": skus[item["sku"]], "quantity": item["quantity"]}
        if with_vendor:
            vendor_id = item.get("vendor")
            if vendor_id and vendor_id not in vendors:
                raise NotFound(f"Supplier {vendor_id} not found")
            line["vendor"] = vendors.get(vendor_id) if vendor_id else None
        lines.append(line)
    return lines


class ProcurementService:
    """Indent -> approval -> purchase order -> stock in."""

    @staticmethod
    @transaction.atomic
    def create_indent(*, items, user=None) -> PurchaseIndent:
        lines = _resolve_lines(items)
        indent = PurchaseIndent.objects.create(created_by=user)
        PurchaseIndentItem.objects.bulk_create([PurchaseIndentItem(indent=indent, **line) for line in lines])
        logger.info(f"Indent {indent.indent_id} raised with {len(lines)} items")
        return indent

    @staticmethod
    @transaction.atomic
    def update_indent(indent: PurchaseIndent, *, items, user=None) -> PurchaseIndent:
        indent = PurchaseIndent.objects.select_for_update().get(pk=indent.pk)
        indent.ensure_pending("edited")
        lines = _resolve_lines(items)
        indent.items.all().delete()
        PurchaseIndentItem.objects.bulk_create([PurchaseIndentItem(indent=indent, **line) for line in lines])
        indent.save(update_fields=["updated_at"])
        return indent

    @staticmethod
    @transaction.atomic
    def delete_indent(indent: PurchaseIndent) -> PurchaseIndent:
        """Soft delete: the indent stays on record with status Deleted."""
        indent = PurchaseIndent.objects.select_for_update().get(pk=indent.pk)
        if indent.status == PurchaseIndent.Status.PO_CREATED:
            raise InvalidState(f"Indent {indent.indent_id} already has a purchase order")
        indent.status = PurchaseIndent.Status.DELETED
        indent.save(update_fields=["status", "updated_at"])
        logger.info(f"Indent {indent.indent_id} deleted")
        return indent

    @staticmethod
    @transaction.atomic
    def approve_indent(indent: PurchaseIndent, *, user=None, items=None, approval_remarks: str = ""):
        """
        Approve a pending indent and snapshot the approved lines.

        ``items`` overrides the indent's own lines (quantities or vendors may
        be changed at approval); the indent's lines are left untouched.

        Returns:
            (indent, approval)
        """
        indent = PurchaseIndent.objects.select_for_update().get(pk=indent.pk)
        indent.ensure_pending("approved")

        if items:
            lines = _resolve_lines(items)
        else:
            lines = [
                {"sku": item.sku, "quantity": item.quantity, "vendor": item.vendor}
                for item in indent.items.select_related("sku", "vendor")
            ]

        indent.status = PurchaseIndent.Status.APPROVED
        indent.approved_by = user
        indent.save(update_fields=["status", "approved_by", "updated_at"])

        approval = PurchaseIndentApproval.objects.create(
            indent=indent,
            indent_number=indent.indent_id,
            approved_by=user,
            approval_remarks=approval_remarks or "",
        )
        PurchaseIndentApprovalItem.objects.bulk_create(
            [PurchaseIndentApprovalItem(approval=approval, **line) for line in lines]
        )
        logger.info(f"Indent {indent.indent_id} approved")
        event_bus.publish("purchase_indent.approved", indent_id=indent.pk, approval_id=approval.pk)
        return indent, approval

    @staticmethod
    def approved_items_by_vendor(vendor_id) -> list[dict]:
        """Approved lines still waiting for a PO whose vendor is ``vendor_id``."""
        items = (
            PurchaseIndentApprovalItem.objects.filter(
                vendor_id=vendor_id,
                approval__status=PurchaseIndentApproval.Status.PO_PENDING,
            )
            .select_related("sku", "approval")
            .order_by("approval_id", "id")
        )
        result = [
            {
                "item": item,
                "indent_id": item.approval.indent_number,
                "indent_approval_id": item.approval_id,
            }
            for item in items
        ]
        if not result:
            raise NotFound("No approved items pending PO found for this vendor.")
        return result

    @staticmethod
    @transaction.atomic
    def create_purchase_order(
        *,
        vendor,
        items,
        indent_approval_ids,
        user=None,
        delivery_due_date=None,
        payment_days="",
        freight="",
    ) -> PurchaseOrder:
        """
        Raise a PO against one or more approvals. The approvals and their
        indents move to ``PO Created``.
        """
        if not vendor or not items or not indent_approval_ids:
            raise InvalidArgument("Missing required fields: vendor, items, indentApprovalIds")
        try:
            supplier = Supplier.objects.get(pk=vendor)
        except Supplier.DoesNotExist:
            raise NotFound("Supplier not found")

        approval_ids = set(indent_approval_ids)
        approvals = list(PurchaseIndentApproval.objects.select_for_update().filter(pk__in=approval_ids))
        missing = approval_ids - {approval.pk for approval in approvals}
        if missing:
            raise NotFound(f"Indent approval(s) not found: {sorted(missing)}")
        closed = sorted(a.pk for a in approvals if a.status != PurchaseIndentApproval.Status.PO_PENDING)
        if closed:
            raise InvalidState(f"Indent approval(s) no longer pending a PO: {closed}")

        lines = _resolve_lines(items, with_vendor=False)
        prices = {item["sku"]: item.get("unit_price") for item in items}

        purchase_order = PurchaseOrder.objects.create(
            vendor=supplier,
            delivery_due_date=delivery_due_date,
            payment_days=payment_days or "",
            freight=freight or "",
            created_by=user,
        )
        PurchaseOrderItem.objects.bulk_create([
            PurchaseOrderItem(purchase_order=purchase_order, unit_price=prices.get(line["sku"].pk), **line)
            for line in lines
        ])
        purchase_order.indent_approvals.set(approvals)

        PurchaseIndentApproval.objects.filter(pk__in=approval_ids).update(status=PurchaseIndentApproval.Status.PO_CREATED)
        PurchaseIndent.objects.filter(approvals__pk__in=approval_ids).update(status=PurchaseIndent.Status.PO_CREATED)

        logger.info(f"PO {purchase_order.po_number} created for supplier {supplier.pk}")
        event_bus.publish("purchase_order.created", purchase_order_id=purchase_order.pk, user_id=getattr(user, "pk", None))
        return purchase_order

    @staticmethod
    @transaction.atomic
    def stock_in(purchase_order: PurchaseOrder, *, user=None) -> PurchaseOrder:
        """Receive every PO line into stock through the ledger. Can only happen once."""
        purchase_order = PurchaseOrder.objects.select_for_update().get(pk=purchase_order.pk)
        if purchase_order.stock_in_status == PurchaseOrder.StockInStatus.STOCKED_IN:
            raise InvalidState(f"PO {purchase_order.po_number} is already stocked in")
        if purchase_order.status == PurchaseOrder.Status.CANCELLED:
            raise InvalidState(f"PO {purchase_order.po_number} is cancelled")

        reference = Reference.of(purchase_order)
        for item in purchase_order.items.select_related("sku"):
            StockLedger.credit(
                item.sku_id,
                item.quantity,
                reference=reference,
                unit_price=item.effective_unit_price,
                user=user,
                notes=f"Stocked in from PO {purchase_order.po_number}",
            )

        purchase_order.stock_in_status = PurchaseOrder.StockInStatus.STOCKED_IN
        purchase_order.status = PurchaseOrder.Status.RECEIVED
        purchase_order.stocked_in_at = timezone.now()
        purchase_order.save(update_fields=["stock_in_status", "status", "stocked_in_at", "updated_at"])

        logger.info(f"PO {purchase_order.po_number} stocked in")
        event_bus.publish("purchase_order.stocked_in", purchase_order_id=purchase_order.pk, user_id=getattr(user, "pk", None))
        return purchase_order
