from __future__ import annotations

from rest_framework import serializers

from apps.inventory.serializers import SKUSummarySerializer
from shared.serializers import DocumentSerializer, UserSummarySerializer

from .models import (
    PurchaseIndent,
    PurchaseIndentApproval,
    PurchaseOrder,
    Supplier,
)


class SupplierSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Supplier
        fields = ["name"]

    def to_representation(self, instance):
        data = super().to_representation(instance)
        return {"_id": instance.pk, **data}


class SupplierSerializer(DocumentSerializer):
    contactPerson = serializers.CharField(source="contact_person")
    alternatePhone = serializers.CharField(source="alternate_phone", required=False, allow_blank=True)
    taxId = serializers.CharField(source="tax_id", required=False, allow_blank=True)
    paymentTerms = serializers.CharField(source="payment_terms", required=False)
    categories = serializers.ListField(child=serializers.CharField(), required=False)
    leadTime = serializers.IntegerField(source="lead_time", min_value=0, required=False)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Supplier
        fields = [
            "name", "contactPerson", "email", "phone", "alternatePhone", "street", "city", "state",
            "pincode", "taxId", "paymentTerms", "notes", "status", "categories", "leadTime",
            "createdAt", "updatedAt",
        ]


# Input


class IndentLineInputSerializer(serializers.Serializer):
    sku = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1)
    vendor = serializers.IntegerField(required=False, allow_null=True)


class PurchaseIndentWriteSerializer(serializers.Serializer):
    items = IndentLineInputSerializer(many=True, allow_empty=False)


class IndentApproveSerializer(serializers.Serializer):
    items = IndentLineInputSerializer(many=True, required=False, allow_empty=False)
    approvalRemarks = serializers.CharField(source="approval_remarks", required=False, allow_blank=True, default="")


class PurchaseOrderLineInputSerializer(serializers.Serializer):
    sku = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1)
    unitPrice = serializers.DecimalField(
        source="unit_price", max_digits=14, decimal_places=2, min_value=0, required=False, allow_null=True
    )


class PurchaseOrderCreateSerializer(serializers.Serializer):
    """Required fields are checked by the service so the error names all of them at once."""

    vendor = serializers.IntegerField(required=False, allow_null=True, default=None)
    items = PurchaseOrderLineInputSerializer(many=True, required=False, default=list)
    indentApprovalIds = serializers.ListField(
        source="indent_approval_ids", child=serializers.IntegerField(), required=False, default=list
    )
    deliveryDueDate = serializers.DateField(source="delivery_due_date", required=False, allow_null=True)
    paymentDays = serializers.CharField(source="payment_days", required=False, allow_blank=True, default="")
    freight = serializers.CharField(required=False, allow_blank=True, default="")


# Output


class IndentLineSerializer(serializers.Serializer):
    sku = SKUSummarySerializer(read_only=True)
    quantity = serializers.IntegerField(read_only=True)
    vendor = SupplierSummarySerializer(read_only=True)

    def to_representation(self, instance):
        data = super().to_representation(instance)
        return {"_id": instance.pk, **data}


class PurchaseIndentSerializer(DocumentSerializer):
    indentId = serializers.IntegerField(source="indent_id", read_only=True)
    items = IndentLineSerializer(many=True, read_only=True)
    createdBy = UserSummarySerializer(source="created_by", read_only=True)
    approvedBy = UserSummarySerializer(source="approved_by", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = PurchaseIndent
        fields = ["indentId", "items", "status", "createdBy", "approvedBy", "createdAt", "updatedAt"]
        read_only_fields = fields


class IndentSummarySerializer(serializers.Serializer):
    indentId = serializers.IntegerField(source="indent_id", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    def to_representation(self, instance):
        data = super().to_representation(instance)
        return {"_id": instance.pk, **data}


class PurchaseIndentApprovalSerializer(DocumentSerializer):
    indent = IndentSummarySerializer(read_only=True)
    indentId = serializers.IntegerField(source="indent_number", read_only=True)
    items = IndentLineSerializer(many=True, read_only=True)
    approvedBy = UserSummarySerializer(source="approved_by", read_only=True)
    approvalRemarks = serializers.CharField(source="approval_remarks", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = PurchaseIndentApproval
        fields = ["indent", "indentId", "items", "status", "approvedBy", "approvalRemarks", "createdAt", "updatedAt"]
        read_only_fields = fields


class PurchaseOrderLineSerializer(serializers.Serializer):
    sku = SKUSummarySerializer(read_only=True)
    quantity = serializers.IntegerField(read_only=True)
    unitPrice = serializers.DecimalField(
        source="unit_price", max_digits=14, decimal_places=2, read_only=True, allow_null=True
    )

    def to_representation(self, instance):
        data = super().to_representation(instance)
        return {"_id": instance.pk, **data}


class PurchaseOrderSerializer(DocumentSerializer):
    poNumber = serializers.IntegerField(source="po_number", read_only=True)
    vendor = SupplierSummarySerializer(read_only=True)
    items = PurchaseOrderLineSerializer(many=True, read_only=True)
    indentApprovals = serializers.PrimaryKeyRelatedField(source="indent_approvals", many=True, read_only=True)
    deliveryDueDate = serializers.DateField(source="delivery_due_date", read_only=True)
    paymentDays = serializers.CharField(source="payment_days", read_only=True)
    stockInStatus = serializers.CharField(source="stock_in_status", read_only=True)
    stockedInAt = serializers.DateTimeField(source="stocked_in_at", read_only=True)
    createdBy = UserSummarySerializer(source="created_by", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = PurchaseOrder
        fields = [
            "poNumber", "vendor", "items", "indentApprovals", "deliveryDueDate", "paymentDays", "freight",
            "status", "stockInStatus", "stockedInAt", "createdBy", "createdAt", "updatedAt",
        ]
        read_only_fields = fields


class ApprovedVendorItemSerializer(serializers.Serializer):
    """Rows of ``ProcurementService.approved_items_by_vendor``."""

    def to_representation(self, instance):
        item = instance["item"]
        return {
            "_id": item.pk,
            "sku": SKUSummarySerializer(item.sku).data,
            "quantity": item.quantity,
            "indentId": instance["indent_id"],
            "indentApprovalId": instance["indent_approval_id"],
        }


class PurchaseOrderFilterSerializer(serializers.Serializer):
    vendor = serializers.IntegerField(required=False)
    stockInStatus = serializers.ChoiceField(
        source="stock_in_status", choices=PurchaseOrder.StockInStatus.choices, required=False
    )
