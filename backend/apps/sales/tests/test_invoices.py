from datetime import timedelta
from decimal import Decimal

from django.test import TestCase, override_settings
from django.utils import timezone

from apps.inventory.models import StockTransaction
from apps.sales.models import Invoice
from apps.sales.services.dispatch_service import DispatchService
from apps.sales.services.invoice_service import InvoiceService
from apps.sales.services.sales_order_service import SalesOrderService
from shared.exceptions import InsufficientStock, InvalidState, NotFound

from .fixtures import SalesFixtureMixin


class InvoiceServiceTests(SalesFixtureMixin, TestCase):
    def create(self, **kwargs):
        params = {
            "customer": self.customer.pk,
            "due_date": timezone.localdate() + timedelta(days=30),
            "items": [self.line(self.widget, 10, "5.00", tax="5.00"), self.line(self.gadget, 2, "12.50")],
            "user": self.user,
        }
        params.update(kwargs)
        return InvoiceService.create_invoice(**params)

    def sales_entries(self, invoice):
        return StockTransaction.objects.filter(
            type=StockTransaction.Type.SALES, reference_type="Invoice", reference_id=invoice.pk
        )

    def test_create_writes_pending_sales_entries(self):
        invoice = self.create()
        self.assertEqual(invoice.invoice_number, "INV-000001")
        self.assertEqual(invoice.status, Invoice.Status.DRAFT)
        self.assertEqual(invoice.payment_terms, "Net 30")
        self.assertEqual(invoice.total_amount, Decimal("80.00"))
        self.assertEqual(self.sales_entries(invoice).count(), 2)
        self.assertEqual(set(self.sales_entries(invoice).values_list("status", flat=True)), {"pending"})
        self.widget.refresh_from_db()
        self.assertEqual(self.widget.current_stock, 100)

    def test_create_validates_references(self):
        with self.assertRaises(NotFound):
            self.create(customer=999999)
        with self.assertRaises(NotFound):
            self.create(sales_order=999999)

    def test_paid_amount_derives_status(self):
        invoice = self.create()
        invoice = InvoiceService.update_invoice(invoice, paid_amount=Decimal("30.00"), user=self.user)
        self.assertEqual(invoice.status, Invoice.Status.PARTIALLY_PAID)
        self.assertEqual(set(self.sales_entries(invoice).values_list("status", flat=True)), {"pending"})

        invoice = InvoiceService.update_invoice(invoice, paid_amount=Decimal("80.00"), user=self.user)
        self.assertEqual(invoice.status, Invoice.Status.PAID)
        self.assertIsNone(invoice.paid_at)
        self.assertEqual(set(self.sales_entries(invoice).values_list("status", flat=True)), {"pending"})
        self.widget.refresh_from_db()
        self.assertEqual(self.widget.current_stock, 100)

    def test_full_payment_after_full_dispatch_leaves_stock(self):
        order = SalesOrderService.create_order(
            customer=self.customer.pk, items=[self.line(self.gadget, 20, "12.50")], user=self.user
        )
        DispatchService.dispatch(order, [{"sku": self.gadget.pk, "quantity": 20}], user=self.user)
        invoice = self.create(sales_order=order.pk, items=[self.line(self.gadget, 20, "12.50")])

        invoice = InvoiceService.update_invoice(invoice, paid_amount=Decimal("250.00"), user=self.user)

        self.assertEqual(invoice.status, Invoice.Status.PAID)
        self.gadget.refresh_from_db()
        self.assertEqual(self.gadget.current_stock, 0)
        self.assertFalse(
            StockTransaction.objects.filter(type="outbound", reference_type="Invoice", reference_id=invoice.pk).exists()
        )

    def test_zero_payment_leaves_status(self):
        invoice = self.create()
        invoice = InvoiceService.update_invoice(invoice, status="sent", user=self.user)
        invoice = InvoiceService.update_invoice(invoice, paid_amount=Decimal("0"), user=self.user)
        self.assertEqual(invoice.status, Invoice.Status.SENT)

    def test_paying_settles_entries_and_deducts_stock(self):
        invoice = self.create()
        InvoiceService.update_invoice(invoice, status="paid", user=self.user)

        self.assertEqual(set(self.sales_entries(invoice).values_list("status", flat=True)), {"completed"})
        self.widget.refresh_from_db()
        self.assertEqual((self.widget.current_stock, self.widget.reserved_stock), (90, -10))
        outbound = StockTransaction.objects.filter(type="outbound", reference_type="Invoice", reference_id=invoice.pk)
        self.assertEqual(outbound.count(), 2)

    def test_payment_deducts_only_once(self):
        invoice = self.create()
        InvoiceService.update_invoice(invoice, status="paid", user=self.user)
        InvoiceService.update_invoice(invoice, status="sent", user=self.user)
        InvoiceService.update_invoice(invoice, status="paid", user=self.user)
        InvoiceService.update_invoice(invoice, paid_amount=Decimal("80.00"), user=self.user)
        self.widget.refresh_from_db()
        self.assertEqual(self.widget.current_stock, 90)

    @override_settings(STOCKLINE={"INVOICE_PAYMENT_DEDUCTS_STOCK": False})
    def test_payment_deduction_can_be_switched_off(self):
        invoice = self.create()
        InvoiceService.update_invoice(invoice, status="paid", user=self.user)
        self.widget.refresh_from_db()
        self.assertEqual(self.widget.current_stock, 100)
        self.assertEqual(set(self.sales_entries(invoice).values_list("status", flat=True)), {"completed"})

    def test_payment_fails_when_stock_is_gone(self):
        invoice = self.create(items=[self.line(self.gadget, 20, "12.50")])
        self.gadget.current_stock = 5
        self.gadget.save()
        with self.assertRaises(InsufficientStock):
            InvoiceService.update_invoice(invoice, status="paid", user=self.user)
        invoice.refresh_from_db()
        self.assertEqual(invoice.status, Invoice.Status.DRAFT)
        self.assertEqual(set(self.sales_entries(invoice).values_list("status", flat=True)), {"pending"})

    def test_delete(self):
        invoice = self.create()
        InvoiceService.delete_invoice(invoice)
        self.assertFalse(Invoice.objects.exists())
        self.assertFalse(StockTransaction.objects.exists())

    def test_delete_forbidden_once_money_received(self):
        invoice = self.create()
        InvoiceService.update_invoice(invoice, paid_amount=Decimal("10.00"), user=self.user)
        self.assertEqual(invoice.status, Invoice.Status.DRAFT)
        with self.assertRaises(InvalidState):
            InvoiceService.delete_invoice(invoice)
        self.assertTrue(Invoice.objects.filter(pk=invoice.pk).exists())

    def test_stats(self):
        paid = self.create()
        InvoiceService.update_invoice(paid, paid_amount=Decimal("80.00"), user=self.user)
        overdue = self.create(due_date=timezone.localdate() - timedelta(days=1))
        InvoiceService.update_invoice(overdue, status="sent", user=self.user)

        stats = InvoiceService.stats()
        self.assertEqual(stats["totalInvoices"], 2)
        self.assertEqual(stats["totalRevenue"], Decimal("80.00"))
        self.assertEqual(stats["overdueInvoices"], 1)
        breakdown = {row["_id"]: row for row in stats["statusBreakdown"]}
        self.assertEqual(breakdown["paid"]["totalPaid"], Decimal("80.00"))
        self.assertEqual(breakdown["sent"]["count"], 1)
