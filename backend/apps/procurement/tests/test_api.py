from decimal import Decimal

from django.contrib.auth import get_user_model
from rest_framework import status
from rest_framework.test import APITestCase

from apps.audit.models import AuditLog
from apps.inventory.models import SKU
from apps.procurement.models import PurchaseIndent, Supplier

from .test_workflow import make_supplier


class ProcurementAPITests(APITestCase):
    def setUp(self):
        self.user = get_user_model().objects.create_user(username="buyer", password="pass123")
        self.client.force_authenticate(user=self.user)
        self.supplier = make_supplier()
        self.bolt = SKU.objects.create(code="BLT-1", name="Bolt", current_stock=5, purchase_price=Decimal("0.40"))

    def create_indent(self, quantity=100):
        response = self.client.post(
            "/api/purchase-indents",
            {"items": [{"sku": self.bolt.pk, "quantity": quantity, "vendor": self.supplier.pk}]},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        return response.data

    def approve(self, indent_pk, **payload):
        response = self.client.post(f"/api/purchase-indents/{indent_pk}/approve", payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        return response.data

    def create_po(self, approval_pk):
        response = self.client.post(
            "/api/purchase-orders",
            {
                "vendor": self.supplier.pk,
                "items": [{"sku": self.bolt.pk, "quantity": 100}],
                "indentApprovalIds": [approval_pk],
                "paymentDays": "30",
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        return response.data

    def test_requires_authentication(self):
        self.client.force_authenticate(user=None)
        response = self.client.get("/api/purchase-indents")
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_indent_create_and_list(self):
        data = self.create_indent()
        self.assertEqual(data["indentId"], 1)
        self.assertEqual(data["status"], "Pending")
        self.assertEqual(data["items"][0]["sku"], {"_id": self.bolt.pk, "name": "Bolt", "sku": "BLT-1"})
        self.assertEqual(data["items"][0]["vendor"], {"_id": self.supplier.pk, "name": "Bolt Supplies"})

        response = self.client.get("/api/purchase-indents")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsInstance(response.data, list)
        self.assertEqual(len(response.data), 1)
        self.assertTrue(AuditLog.objects.filter(action="INDENT_CREATED", entity_id=str(data["_id"])).exists())

    def test_indent_update_and_soft_delete(self):
        data = self.create_indent()
        response = self.client.put(
            f"/api/purchase-indents/{data['_id']}",
            {"items": [{"sku": self.bolt.pk, "quantity": 3}]},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["items"][0]["quantity"], 3)
        self.assertIsNone(response.data["items"][0]["vendor"])

        response = self.client.delete(f"/api/purchase-indents/{data['_id']}")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {"message": "Indent deleted"})
        self.assertEqual(PurchaseIndent.objects.get(pk=data["_id"]).status, "Deleted")

    def test_approve_and_approval_listings(self):
        pending = self.create_indent()
        other = self.create_indent(quantity=5)

        data = self.approve(pending["_id"], approvalRemarks="urgent")
        self.assertEqual(data["message"], "Indent approved and approval record created.")
        self.assertEqual(data["approvedIndent"]["status"], "Approved")
        self.assertEqual(data["approvedIndent"]["approvedBy"]["_id"], self.user.pk)
        self.assertEqual(data["approvalRecord"]["status"], "PO Pending")
        self.assertEqual(data["approvalRecord"]["indentId"], pending["indentId"])
        self.assertEqual(data["approvalRecord"]["approvalRemarks"], "urgent")

        response = self.client.get("/api/purchase-indents/pending-for-approval")
        self.assertEqual([row["_id"] for row in response.data], [other["_id"]])

        response = self.client.get("/api/purchase-indents/approved-indents")
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]["indent"]["indentId"], pending["indentId"])

        response = self.client.post(f"/api/purchase-indents/{pending['_id']}/approve", {}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "InvalidState")

        response = self.client.put(
            f"/api/purchase-indents/{pending['_id']}",
            {"items": [{"sku": self.bolt.pk, "quantity": 1}]},
            format="json",
        )
        self.assertEqual(response.data["error"], "InvalidState")

    def test_purchase_order_flow(self):
        approval = self.approve(self.create_indent()["_id"])["approvalRecord"]

        response = self.client.get(f"/api/purchase-orders/approved-items-by-vendor/{self.supplier.pk}")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data[0]["indentApprovalId"], approval["_id"])
        self.assertEqual(response.data[0]["quantity"], 100)

        data = self.create_po(approval["_id"])
        self.assertEqual(data["message"], "Purchase Order created successfully")
        po = data["purchaseOrder"]
        self.assertEqual(po["poNumber"], 1001)
        self.assertEqual(po["vendor"]["name"], "Bolt Supplies")
        self.assertEqual(po["indentApprovals"], [approval["_id"]])
        self.assertEqual(po["stockInStatus"], "Pending to be Stock In")

        response = self.client.get(f"/api/purchase-orders/approved-items-by-vendor/{self.supplier.pk}")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

        response = self.client.put(f"/api/purchase-orders/{po['_id']}/stock-in")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["message"], "Purchase Order marked as Stocked In.")
        self.assertEqual(response.data["purchaseOrder"]["stockInStatus"], "Stocked In")
        self.assertEqual(response.data["purchaseOrder"]["status"], "Received")
        self.bolt.refresh_from_db()
        self.assertEqual(self.bolt.current_stock, 105)

        response = self.client.put(f"/api/purchase-orders/{po['_id']}/stock-in")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "InvalidState")

        response = self.client.get("/api/purchase-orders")
        self.assertEqual(len(response.data), 1)

        response = self.client.get("/api/purchase-orders", {"stockInStatus": "Stocked In", "vendor": self.supplier.pk})
        self.assertEqual(len(response.data), 1)
        response = self.client.get("/api/purchase-orders", {"vendor": "acme"})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_purchase_order_validation(self):
        response = self.client.post("/api/purchase-orders", {"vendor": self.supplier.pk}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "InvalidArgument")

        response = self.client.post(
            "/api/purchase-orders",
            {"vendor": self.supplier.pk, "items": [{"sku": self.bolt.pk, "quantity": 1}], "indentApprovalIds": [424242]},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_supplier_crud(self):
        payload = {
            "name": "Hex Fasteners",
            "contactPerson": "Omar",
            "email": "omar@hex.test",
            "phone": "555-0300",
            "street": "9 Mill Lane",
            "city": "Surat",
            "state": "GJ",
            "pincode": "395003",
            "categories": ["fasteners"],
        }
        response = self.client.post("/api/suppliers", payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["paymentTerms"], "Net 30")
        self.assertEqual(response.data["leadTime"], 7)
        supplier_id = response.data["_id"]
        self.assertEqual(Supplier.objects.get(pk=supplier_id).created_by, self.user)

        response = self.client.get("/api/suppliers", {"search": "hex"})
        self.assertEqual(response.data["totalSuppliers"], 1)

        response = self.client.patch(f"/api/suppliers/{supplier_id}", {"status": "inactive"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertTrue(AuditLog.objects.filter(action="SUPPLIER_UPDATED", entity_id=str(supplier_id)).exists())

        response = self.client.delete(f"/api/suppliers/{supplier_id}")
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
