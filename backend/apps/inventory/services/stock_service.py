from __future__ import annotations

import logging
from decimal import Decimal

from django.db import transaction
from django.db.models import F

from shared.event_bus import event_bus
from shared.exceptions import InsufficientStock, InvalidArgument, NotFound

from ..models import SKU, Reference, StockTransaction

logger = logging.getLogger(__name__)


class StockLedger:
    """
    Single owner of the SKU stock counters and the ``StockTransaction`` log.

    Every counter change is one conditional ``UPDATE ... SET col = col +/- n``
    so two requests never read-modify-write the same row. Each counter
    operation appends exactly one ledger entry in the same transaction:
    ``reserved``/``released`` for reservations, ``outbound``/``inbound`` for
    goods that leave or come back.
    """

    @staticmethod
    def _sku_id(sku) -> int:
        return sku.pk if isinstance(sku, SKU) else int(sku)

    @staticmethod
    def _check_quantity(quantity) -> int:
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise InvalidArgument(f"Quantity must be a positive integer, got {quantity!r}")
        return quantity

    @staticmethod
    def _refresh(sku_id: int) -> SKU:
        try:
            return SKU.objects.get(pk=sku_id)
        except SKU.DoesNotExist:
            raise NotFound(f"SKU {sku_id} not found")

    @staticmethod
    def _reservation_entry(kind, sku_id: int, quantity: int, reference: Reference, user) -> StockTransaction:
        return StockTransaction.objects.create(
            type=kind,
            sku_id=sku_id,
            quantity=quantity,
            reference_type=reference.kind,
            reference_id=reference.id,
            status=StockTransaction.Status.COMPLETED,
            created_by=user,
        )

    @staticmethod
    @transaction.atomic
    def reserve(sku, quantity: int, *, reference: Reference, user=None) -> SKU:
        """Earmark ``quantity`` units for ``reference`` and write a ``reserved`` entry."""
        quantity = StockLedger._check_quantity(quantity)
        sku_id = StockLedger._sku_id(sku)
        updated = SKU.objects.filter(pk=sku_id).update(reserved_stock=F("reserved_stock") + quantity)
        if not updated:
            raise NotFound(f"SKU {sku_id} not found")
        entry = StockLedger._reservation_entry(StockTransaction.Type.RESERVED, sku_id, quantity, reference, user)
        logger.info(f"Reserved {quantity} of SKU {sku_id} for {reference}")
        event_bus.publish("stock.reserved", sku_id=sku_id, quantity=quantity, reference=reference, transaction_id=entry.pk)
        return StockLedger._refresh(sku_id)

    @staticmethod
    @transaction.atomic
    def release(sku, quantity: int, *, reference: Reference, user=None) -> SKU:
        """Give back a reservation made by ``reserve`` and write a ``released`` entry."""
        quantity = StockLedger._check_quantity(quantity)
        sku_id = StockLedger._sku_id(sku)
        updated = SKU.objects.filter(pk=sku_id).update(reserved_stock=F("reserved_stock") - quantity)
        if not updated:
            raise NotFound(f"SKU {sku_id} not found")
        entry = StockLedger._reservation_entry(StockTransaction.Type.RELEASED, sku_id, quantity, reference, user)
        logger.info(f"Released {quantity} of SKU {sku_id} for {reference}")
        event_bus.publish("stock.released", sku_id=sku_id, quantity=quantity, reference=reference, transaction_id=entry.pk)
        return StockLedger._refresh(sku_id)

    @staticmethod
    @transaction.atomic
    def consume(
        sku,
        quantity: int,
        *,
        reference: Reference,
        unit_price=Decimal("0.00"),
        user=None,
        notes: str = "",
    ) -> StockTransaction:
        """
        Take ``quantity`` units out of stock (current and reserved both drop)
        and write an outbound ledger entry.

        Raises:
            NotFound: the SKU does not exist.
            InsufficientStock: ``current_stock`` is lower than ``quantity``.
        """
        quantity = StockLedger._check_quantity(quantity)
        sku_id = StockLedger._sku_id(sku)
        updated = SKU.objects.filter(pk=sku_id, current_stock__gte=quantity).update(
            current_stock=F("current_stock") - quantity,
            reserved_stock=F("reserved_stock") - quantity,
        )
        if not updated:
            current = StockLedger._refresh(sku_id)
            raise InsufficientStock(
                f"Insufficient stock for SKU {current.code}: requested {quantity}, available {current.current_stock}"
            )

        unit_price = Decimal(unit_price or 0)
        entry = StockTransaction.objects.create(
            type=StockTransaction.Type.OUTBOUND,
            sku_id=sku_id,
            quantity=quantity,
            unit_price=unit_price,
            total_amount=unit_price * quantity,
            reference_type=reference.kind,
            reference_id=reference.id,
            status=StockTransaction.Status.COMPLETED,
            notes=notes,
            created_by=user,
        )
        logger.info(f"Consumed {quantity} of SKU {sku_id} for {reference}")
        event_bus.publish("stock.consumed", sku_id=sku_id, quantity=quantity, reference=reference, transaction_id=entry.pk)
        return entry

    @staticmethod
    @transaction.atomic
    def credit(
        sku,
        quantity: int,
        *,
        reference: Reference,
        unit_price=Decimal("0.00"),
        user=None,
        notes: str = "",
    ) -> StockTransaction:
        """Put ``quantity`` units back on hand and write an inbound ledger entry."""
        quantity = StockLedger._check_quantity(quantity)
        sku_id = StockLedger._sku_id(sku)
        updated = SKU.objects.filter(pk=sku_id).update(current_stock=F("current_stock") + quantity)
        if not updated:
            raise NotFound(f"SKU {sku_id} not found")

        unit_price = Decimal(unit_price or 0)
        entry = StockTransaction.objects.create(
            type=StockTransaction.Type.INBOUND,
            sku_id=sku_id,
            quantity=quantity,
            unit_price=unit_price,
            total_amount=unit_price * quantity,
            reference_type=reference.kind,
            reference_id=reference.id,
            status=StockTransaction.Status.COMPLETED,
            notes=notes,
            created_by=user,
        )
        logger.info(f"Credited {quantity} of SKU {sku_id} for {reference}")
        event_bus.publish("stock.credited", sku_id=sku_id, quantity=quantity, reference=reference, transaction_id=entry.pk)
        return entry

    @staticmethod
    @transaction.atomic
    def record_sale(
        sku,
        quantity: int,
        *,
        reference: Reference,
        unit_price,
        total_amount,
        user=None,
        notes: str = "",
    ) -> StockTransaction:
        """Write a pending ``sales`` entry for an invoice line. Counters are untouched."""
        quantity = StockLedger._check_quantity(quantity)
        entry = StockTransaction.objects.create(
            type=StockTransaction.Type.SALES,
            sku_id=StockLedger._sku_id(sku),
            quantity=quantity,
            unit_price=unit_price,
            total_amount=total_amount,
            reference_type=reference.kind,
            reference_id=reference.id,
            status=StockTransaction.Status.PENDING,
            notes=notes,
            created_by=user,
        )
        event_bus.publish("stock.sale_recorded", sku_id=entry.sku_id, quantity=quantity, reference=reference, transaction_id=entry.pk)
        return entry

    @staticmethod
    @transaction.atomic
    def settle_sales(reference: Reference) -> int:
        """Mark every pending ``sales`` entry of ``reference`` completed. Returns the count."""
        settled = StockTransaction.objects.filter(
            type=StockTransaction.Type.SALES,
            status=StockTransaction.Status.PENDING,
            reference_type=reference.kind,
            reference_id=reference.id,
        ).update(status=StockTransaction.Status.COMPLETED)
        logger.info(f"Settled {settled} sales entries for {reference}")
        event_bus.publish("stock.sales_settled", reference=reference, count=settled)
        return settled

    @staticmethod
    @transaction.atomic
    def discard_pending(reference: Reference) -> int:
        """Drop pending ``sales`` entries of a document that is being deleted."""
        deleted, _ = StockTransaction.objects.filter(
            type=StockTransaction.Type.SALES,
            status=StockTransaction.Status.PENDING,
            reference_type=reference.kind,
            reference_id=reference.id,
        ).delete()
        if deleted:
            logger.info(f"Discarded {deleted} pending sales entries for {reference}")
        return deleted
