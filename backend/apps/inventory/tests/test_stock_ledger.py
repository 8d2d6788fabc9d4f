from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase

from apps.inventory.models import SKU, Reference, StockTransaction
from apps.inventory.services.stock_service import StockLedger
from shared.event_bus import event_bus
from shared.exceptions import InsufficientStock, InvalidArgument, NotFound


class StockLedgerTests(TestCase):
    def setUp(self):
        self.user = get_user_model().objects.create_user(username="clerk", password="pass123")
        self.sku = SKU.objects.create(code="WID-1", name="Widget", current_stock=100, selling_price=Decimal("5.00"))
        self.reference = Reference("SalesOrder", 1)

    def test_reserve_and_release_move_reservation_and_log_entries(self):
        StockLedger.reserve(self.sku, 30, reference=self.reference, user=self.user)
        self.sku.refresh_from_db()
        self.assertEqual((self.sku.current_stock, self.sku.reserved_stock), (100, 30))
        self.assertEqual(self.sku.available_stock, 70)

        StockLedger.release(self.sku, 10, reference=self.reference)
        self.sku.refresh_from_db()
        self.assertEqual((self.sku.current_stock, self.sku.reserved_stock), (100, 20))

        entries = StockTransaction.objects.filter(reference_type="SalesOrder", reference_id=1).order_by("id")
        self.assertEqual(
            list(entries.values_list("type", "quantity", "total_amount")),
            [(StockTransaction.Type.RESERVED, 30, Decimal("0.00")), (StockTransaction.Type.RELEASED, 10, Decimal("0.00"))],
        )
        self.assertEqual(entries.first().created_by, self.user)

    def test_consume_decrements_both_counters_and_writes_outbound_entry(self):
        StockLedger.reserve(self.sku, 10, reference=self.reference)
        entry = StockLedger.consume(self.sku, 10, reference=self.reference, unit_price=Decimal("5.00"), user=self.user)

        self.sku.refresh_from_db()
        self.assertEqual((self.sku.current_stock, self.sku.reserved_stock), (90, 0))
        self.assertEqual(entry.type, StockTransaction.Type.OUTBOUND)
        self.assertEqual(entry.total_amount, Decimal("50.00"))
        self.assertEqual(entry.reference, self.reference)
        self.assertEqual(entry.created_by, self.user)

    def test_consume_without_reservation_drives_reserved_negative(self):
        StockLedger.consume(self.sku.pk, 10, reference=self.reference)
        self.sku.refresh_from_db()
        self.assertEqual(self.sku.current_stock, 90)
        self.assertEqual(self.sku.reserved_stock, -10)

    def test_consume_more_than_on_hand_fails_without_side_effects(self):
        with self.assertRaises(InsufficientStock):
            StockLedger.consume(self.sku, 101, reference=self.reference)
        self.sku.refresh_from_db()
        self.assertEqual(self.sku.current_stock, 100)
        self.assertFalse(StockTransaction.objects.exists())

    def test_credit_increments_current_only(self):
        StockLedger.reserve(self.sku, 5, reference=self.reference)
        entry = StockLedger.credit(self.sku, 7, reference=Reference("SalesReturn", 3), unit_price=Decimal("2.50"))
        self.sku.refresh_from_db()
        self.assertEqual((self.sku.current_stock, self.sku.reserved_stock), (107, 5))
        self.assertEqual(entry.type, StockTransaction.Type.INBOUND)
        self.assertEqual(entry.total_amount, Decimal("17.50"))

    def test_unknown_sku_is_not_found(self):
        with self.assertRaises(NotFound):
            StockLedger.reserve(999999, 1, reference=self.reference)
        with self.assertRaises(NotFound):
            StockLedger.credit(999999, 1, reference=self.reference)
        with self.assertRaises(NotFound):
            StockLedger.consume(999999, 1, reference=self.reference)

    def test_quantity_must_be_positive_integer(self):
        for bad in (0, -3, 1.5, True):
            with self.assertRaises(InvalidArgument):
                StockLedger.reserve(self.sku, bad, reference=self.reference)

    def test_record_and_settle_sales(self):
        invoice_ref = Reference("Invoice", 42)
        StockLedger.record_sale(self.sku, 2, reference=invoice_ref, unit_price=Decimal("5.00"), total_amount=Decimal("10.00"))
        StockLedger.record_sale(self.sku, 3, reference=invoice_ref, unit_price=Decimal("5.00"), total_amount=Decimal("15.00"))
        self.sku.refresh_from_db()
        self.assertEqual(self.sku.current_stock, 100)

        self.assertEqual(StockLedger.settle_sales(invoice_ref), 2)
        statuses = set(StockTransaction.objects.filter(reference_id=42).values_list("status", flat=True))
        self.assertEqual(statuses, {StockTransaction.Status.COMPLETED})
        self.assertEqual(StockLedger.settle_sales(invoice_ref), 0)

    def test_discard_pending_removes_only_pending_sales(self):
        invoice_ref = Reference("Invoice", 7)
        StockLedger.record_sale(self.sku, 2, reference=invoice_ref, unit_price=1, total_amount=2)
        StockLedger.consume(self.sku, 2, reference=invoice_ref)
        self.assertEqual(StockLedger.discard_pending(invoice_ref), 1)
        self.assertEqual(StockTransaction.objects.filter(reference_id=7).count(), 1)

    def test_consume_publishes_event(self):
        received = []

        def handler(sender, **kwargs):
            received.append(kwargs)

        event_bus.subscribe("stock.consumed", handler)
        try:
            StockLedger.consume(self.sku, 4, reference=self.reference)
        finally:
            event_bus.unsubscribe("stock.consumed", handler)

        self.assertEqual(len(received), 1)
        self.assertEqual(received[0]["sku_id"], self.sku.pk)
        self.assertEqual(received[0]["quantity"], 4)
        self.assertEqual(received[0]["reference"], self.reference)

    def test_low_stock_warning_is_logged(self):
        self.sku.min_stock = 95
        self.sku.save()
        with self.assertLogs("apps.inventory.handlers", level="WARNING") as logs:
            StockLedger.consume(self.sku, 10, reference=self.reference)
        self.assertIn("WID-1", logs.output[0])
