from decimal import Decimal

from django.test import TestCase

from apps.inventory.models import SKU, StockTransaction
from apps.sales.models import SalesOrder
from apps.sales.services.dispatch_service import DispatchService
from apps.sales.services.sales_order_service import SalesOrderService
from shared.exceptions import InsufficientStock, InvalidArgument, InvalidState, NotFound

from .fixtures import SalesFixtureMixin


class SalesOrderServiceTests(SalesFixtureMixin, TestCase):
    def create(self, *lines, **kwargs):
        return SalesOrderService.create_order(
            customer=self.customer.pk,
            items=list(lines) or [self.line(self.widget, 10)],
            user=self.user,
            **kwargs,
        )

    def test_create_defaults_to_pending_dispatch_with_totals(self):
        order = self.create(
            self.line(self.widget, 10, "5.00", discount="5.00", tax="2.00"),
            self.line(self.gadget, 2, "12.50"),
        )
        self.assertEqual(order.status, SalesOrder.Status.PENDING_DISPATCH)
        self.assertEqual(order.subtotal, Decimal("75.00"))
        self.assertEqual(order.total_discount, Decimal("5.00"))
        self.assertEqual(order.total_tax, Decimal("2.00"))
        self.assertEqual(order.total_amount, Decimal("72.00"))
        self.assertEqual(order.items.count(), 2)
        self.assertEqual(order.created_by, self.user)
        self.widget.refresh_from_db()
        self.assertEqual(self.widget.reserved_stock, 0)

    def test_order_numbers_increase(self):
        numbers = [self.create().order_number for _ in range(3)]
        self.assertEqual(numbers, ["SO-000001", "SO-000002", "SO-000003"])

    def test_create_rejects_quantity_above_current_stock(self):
        with self.assertRaises(InsufficientStock):
            self.create(self.line(self.gadget, 21))
        self.assertFalse(SalesOrder.objects.exists())

    def test_stock_check_ignores_reservations(self):
        SKU.objects.filter(pk=self.gadget.pk).update(reserved_stock=20)
        order = self.create(self.line(self.gadget, 20))
        self.assertEqual(order.items.get().quantity, 20)

    def test_create_with_unknown_references(self):
        with self.assertRaises(NotFound):
            SalesOrderService.create_order(customer=999999, items=[self.line(self.widget, 1)], user=self.user)
        with self.assertRaises(NotFound):
            self.create({"sku": 999999, "quantity": 1, "unit_price": Decimal("1.00")})

    def test_create_rejects_non_initial_status(self):
        with self.assertRaises(InvalidArgument):
            self.create(status=SalesOrder.Status.DISPATCHED)

    def test_confirming_a_draft_reserves_stock(self):
        order = self.create(self.line(self.widget, 10), self.line(self.gadget, 4), status=SalesOrder.Status.DRAFT)
        order = SalesOrderService.update_order(order, changes={"status": "confirmed"}, user=self.manager)

        self.assertEqual(order.status, SalesOrder.Status.CONFIRMED)
        self.assertEqual(order.approved_by, self.manager)
        self.assertIsNotNone(order.approved_at)
        self.assertEqual(
            sorted(order.allocated_stock.values_list("sku_id", "quantity")),
            sorted([(self.widget.pk, 10), (self.gadget.pk, 4)]),
        )
        self.widget.refresh_from_db()
        self.gadget.refresh_from_db()
        self.assertEqual((self.widget.current_stock, self.widget.reserved_stock), (100, 10))
        self.assertEqual((self.gadget.current_stock, self.gadget.reserved_stock), (20, 4))
        entries = StockTransaction.objects.filter(reference_type="SalesOrder", reference_id=order.pk)
        self.assertEqual(
            sorted(entries.values_list("type", "sku_id", "quantity")),
            sorted([("reserved", self.widget.pk, 10), ("reserved", self.gadget.pk, 4)]),
        )

    def test_update_recomputes_totals_for_drafts(self):
        order = self.create(status=SalesOrder.Status.DRAFT)
        order = SalesOrderService.update_order(
            order, changes={"items": [self.line(self.gadget, 3, "12.50")], "notes": "rush"}, user=self.user
        )
        self.assertEqual(order.total_amount, Decimal("37.50"))
        self.assertEqual(order.notes, "rush")
        self.assertEqual(list(order.items.values_list("sku_id", flat=True)), [self.gadget.pk])

    def test_update_rejected_outside_draft(self):
        order = self.create()
        with self.assertRaises(InvalidState):
            SalesOrderService.update_order(order, changes={"notes": "late"}, user=self.user)

    def test_full_lifecycle_through_status_changes(self):
        order = self.create(self.line(self.widget, 10), status=SalesOrder.Status.DRAFT)
        order = SalesOrderService.change_status(order, "confirmed", user=self.manager)
        order = SalesOrderService.change_status(order, "pending_dispatch", user=self.manager)
        order = DispatchService.dispatch(order, [{"sku": self.widget.pk, "quantity": 10}], user=self.user)
        order = SalesOrderService.change_status(order, "delivered", user=self.user)

        self.assertEqual(order.status, SalesOrder.Status.DELIVERED)
        self.widget.refresh_from_db()
        self.assertEqual((self.widget.current_stock, self.widget.reserved_stock), (90, 0))

    def test_cancelling_a_confirmed_order_releases_reservation(self):
        order = self.create(self.line(self.widget, 10), status=SalesOrder.Status.DRAFT)
        order = SalesOrderService.change_status(order, "confirmed", user=self.manager)
        order = SalesOrderService.change_status(order, "cancelled", user=self.manager)

        self.widget.refresh_from_db()
        self.assertEqual(self.widget.reserved_stock, 0)
        self.assertFalse(order.allocated_stock.exists())
        self.assertEqual(
            list(StockTransaction.objects.filter(reference_id=order.pk).order_by("id").values_list("type", flat=True)),
            ["reserved", "released"],
        )

    def test_disallowed_transitions(self):
        order = self.create()
        for target in ("dispatched", "delivered", "draft", "pending_dispatch"):
            with self.assertRaises(InvalidState):
                SalesOrderService.change_status(order, target, user=self.user)

    def test_delete_only_drafts(self):
        draft = self.create(status=SalesOrder.Status.DRAFT)
        SalesOrderService.delete_order(draft)
        self.assertFalse(SalesOrder.objects.filter(pk=draft.pk).exists())

        confirmed = SalesOrderService.change_status(self.create(status=SalesOrder.Status.DRAFT), "confirmed", user=self.user)
        with self.assertRaises(InvalidState):
            SalesOrderService.delete_order(confirmed)
        self.assertTrue(SalesOrder.objects.filter(pk=confirmed.pk).exists())

    def test_delete_rereads_the_order(self):
        stale = self.create(status=SalesOrder.Status.DRAFT)
        SalesOrderService.change_status(SalesOrder.objects.get(pk=stale.pk), "confirmed", user=self.user)
        self.assertEqual(stale.status, SalesOrder.Status.DRAFT)
        with self.assertRaises(InvalidState):
            SalesOrderService.delete_order(stale)
        self.assertTrue(SalesOrder.objects.filter(pk=stale.pk).exists())

    def test_stats(self):
        self.create(self.line(self.widget, 2, "5.00"))
        delivered = self.create(self.line(self.widget, 4, "5.00"))
        SalesOrder.objects.filter(pk=delivered.pk).update(status=SalesOrder.Status.DELIVERED)

        stats = SalesOrderService.stats()
        self.assertEqual(stats["totalOrders"], 2)
        self.assertEqual(stats["totalRevenue"], Decimal("20.00"))
        breakdown = {row["_id"]: row for row in stats["statusBreakdown"]}
        self.assertEqual(breakdown["pending_dispatch"]["count"], 1)
        self.assertEqual(breakdown["pending_dispatch"]["totalAmount"], Decimal("10.00"))
