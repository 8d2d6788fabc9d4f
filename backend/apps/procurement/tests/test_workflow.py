from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase

from apps.inventory.models import SKU, Reference, StockTransaction
from apps.procurement.models import PurchaseIndent, PurchaseIndentApproval, PurchaseOrder, Supplier
from apps.procurement.services import ProcurementService
from shared.exceptions import InvalidArgument, InvalidState, NotFound


def make_supplier(name="Bolt Supplies"):
    return Supplier.objects.create(
        name=name,
        contact_person="Rita",
        email="rita@bolt.test",
        phone="555-0200",
        street="1 Dock Rd",
        city="Pune",
        state="MH",
        pincode="411001",
    )


class ProcurementWorkflowTests(TestCase):
    def setUp(self):
        self.user = get_user_model().objects.create_user(username="buyer", password="pass123")
        self.supplier = make_supplier()
        self.bolt = SKU.objects.create(code="BLT-1", name="Bolt", current_stock=5, purchase_price=Decimal("0.40"))
        self.nut = SKU.objects.create(code="NUT-1", name="Nut", current_stock=0, purchase_price=Decimal("0.10"))

    def raise_indent(self):
        return ProcurementService.create_indent(
            items=[
                {"sku": self.bolt.pk, "quantity": 100, "vendor": self.supplier.pk},
                {"sku": self.nut.pk, "quantity": 200, "vendor": self.supplier.pk},
            ],
            user=self.user,
        )

    def approved(self):
        _, approval = ProcurementService.approve_indent(self.raise_indent(), user=self.user)
        return approval

    def test_indent_numbers_run_from_one(self):
        first = self.raise_indent()
        second = self.raise_indent()
        self.assertEqual((first.indent_id, second.indent_id), (1, 2))
        self.assertEqual(first.status, PurchaseIndent.Status.PENDING)
        self.assertEqual(first.items.count(), 2)

    def test_indent_with_unknown_sku_or_vendor(self):
        with self.assertRaises(NotFound):
            ProcurementService.create_indent(items=[{"sku": 999999, "quantity": 1}])
        with self.assertRaises(NotFound):
            ProcurementService.create_indent(items=[{"sku": self.bolt.pk, "quantity": 1, "vendor": 999999}])
        with self.assertRaises(InvalidArgument):
            ProcurementService.create_indent(items=[])
        self.assertFalse(PurchaseIndent.objects.exists())

    def test_update_replaces_items_while_pending(self):
        indent = self.raise_indent()
        ProcurementService.update_indent(indent, items=[{"sku": self.bolt.pk, "quantity": 7}])
        self.assertEqual(list(indent.items.values_list("quantity", flat=True)), [7])

        ProcurementService.approve_indent(indent, user=self.user)
        with self.assertRaises(InvalidState):
            ProcurementService.update_indent(indent, items=[{"sku": self.bolt.pk, "quantity": 1}])

    def test_approval_copies_items_by_default(self):
        indent = self.raise_indent()
        indent, approval = ProcurementService.approve_indent(indent, user=self.user, approval_remarks="ok")

        self.assertEqual(indent.status, PurchaseIndent.Status.APPROVED)
        self.assertEqual(indent.approved_by, self.user)
        self.assertEqual(approval.status, PurchaseIndentApproval.Status.PO_PENDING)
        self.assertEqual(approval.indent_number, indent.indent_id)
        self.assertEqual(approval.approval_remarks, "ok")
        self.assertEqual(
            sorted(approval.items.values_list("sku_id", "quantity")),
            sorted([(self.bolt.pk, 100), (self.nut.pk, 200)]),
        )

    def test_approval_with_edited_items_leaves_indent_lines(self):
        indent = self.raise_indent()
        _, approval = ProcurementService.approve_indent(
            indent, user=self.user, items=[{"sku": self.bolt.pk, "quantity": 60, "vendor": self.supplier.pk}]
        )
        self.assertEqual(list(approval.items.values_list("quantity", flat=True)), [60])
        self.assertEqual(indent.items.count(), 2)

    def test_only_pending_indents_can_be_approved(self):
        indent = self.raise_indent()
        ProcurementService.approve_indent(indent, user=self.user)
        with self.assertRaises(InvalidState):
            ProcurementService.approve_indent(indent, user=self.user)
        self.assertEqual(PurchaseIndentApproval.objects.count(), 1)

    def test_soft_delete(self):
        indent = self.raise_indent()
        ProcurementService.delete_indent(indent)
        indent.refresh_from_db()
        self.assertEqual(indent.status, PurchaseIndent.Status.DELETED)

    def test_purchase_order_closes_approvals_and_indents(self):
        approval = self.approved()
        po = ProcurementService.create_purchase_order(
            vendor=self.supplier.pk,
            items=[{"sku": self.bolt.pk, "quantity": 100}, {"sku": self.nut.pk, "quantity": 200, "unit_price": Decimal("0.12")}],
            indent_approval_ids=[approval.pk],
            user=self.user,
        )

        self.assertEqual(po.po_number, 1001)
        self.assertEqual(po.status, PurchaseOrder.Status.ISSUED)
        self.assertEqual(po.stock_in_status, PurchaseOrder.StockInStatus.PENDING)
        self.assertEqual(list(po.indent_approvals.all()), [approval])
        approval.refresh_from_db()
        self.assertEqual(approval.status, PurchaseIndentApproval.Status.PO_CREATED)
        self.assertEqual(approval.indent.status, PurchaseIndent.Status.PO_CREATED)

        with self.assertRaises(InvalidState):
            ProcurementService.delete_indent(approval.indent)

    def test_delete_rereads_the_indent(self):
        approval = self.approved()
        stale = PurchaseIndent.objects.get(pk=approval.indent_id)
        ProcurementService.create_purchase_order(
            vendor=self.supplier.pk, items=[{"sku": self.bolt.pk, "quantity": 100}], indent_approval_ids=[approval.pk]
        )
        with self.assertRaises(InvalidState):
            ProcurementService.delete_indent(stale)
        stale.refresh_from_db()
        self.assertEqual(stale.status, PurchaseIndent.Status.PO_CREATED)

    def test_approval_cannot_back_two_purchase_orders(self):
        approval = self.approved()
        params = {
            "vendor": self.supplier.pk,
            "items": [{"sku": self.bolt.pk, "quantity": 100}],
            "indent_approval_ids": [approval.pk],
        }
        ProcurementService.create_purchase_order(**params)
        with self.assertRaises(InvalidState):
            ProcurementService.create_purchase_order(**params)
        self.assertEqual(PurchaseOrder.objects.count(), 1)

    def test_purchase_order_requires_fields_and_known_approvals(self):
        with self.assertRaises(InvalidArgument):
            ProcurementService.create_purchase_order(vendor=self.supplier.pk, items=[], indent_approval_ids=[1])
        with self.assertRaises(NotFound):
            ProcurementService.create_purchase_order(
                vendor=self.supplier.pk,
                items=[{"sku": self.bolt.pk, "quantity": 1}],
                indent_approval_ids=[999999],
            )
        self.assertFalse(PurchaseOrder.objects.exists())

    def test_approved_items_by_vendor(self):
        approval = self.approved()
        rows = ProcurementService.approved_items_by_vendor(self.supplier.pk)
        self.assertEqual(len(rows), 2)
        self.assertEqual({row["indent_approval_id"] for row in rows}, {approval.pk})
        self.assertEqual({row["indent_id"] for row in rows}, {approval.indent_number})

        with self.assertRaises(NotFound):
            ProcurementService.approved_items_by_vendor(make_supplier("Other").pk)

    def test_stock_in_credits_each_line_once(self):
        approval = self.approved()
        po = ProcurementService.create_purchase_order(
            vendor=self.supplier.pk,
            items=[{"sku": self.bolt.pk, "quantity": 100}, {"sku": self.nut.pk, "quantity": 200, "unit_price": Decimal("0.12")}],
            indent_approval_ids=[approval.pk],
        )
        po = ProcurementService.stock_in(po, user=self.user)

        self.assertEqual(po.stock_in_status, PurchaseOrder.StockInStatus.STOCKED_IN)
        self.assertEqual(po.status, PurchaseOrder.Status.RECEIVED)
        self.assertIsNotNone(po.stocked_in_at)
        self.bolt.refresh_from_db()
        self.nut.refresh_from_db()
        self.assertEqual((self.bolt.current_stock, self.nut.current_stock), (105, 200))

        entries = StockTransaction.objects.filter(reference_type="PurchaseOrder", reference_id=po.pk)
        self.assertEqual(entries.count(), 2)
        self.assertTrue(all(entry.type == StockTransaction.Type.INBOUND for entry in entries))
        self.assertEqual(entries.get(sku=self.bolt).unit_price, Decimal("0.40"))
        self.assertEqual(entries.get(sku=self.nut).total_amount, Decimal("24.00"))
        self.assertEqual(entries.first().reference, Reference.of(po))

        with self.assertRaises(InvalidState):
            ProcurementService.stock_in(po)
        self.bolt.refresh_from_db()
        self.assertEqual(self.bolt.current_stock, 105)
