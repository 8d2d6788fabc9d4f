from rest_framework import serializers

from apps.inventory.serializers import SKUSummarySerializer
from shared.serializers import DocumentSerializer, UserSummarySerializer

from ..models import SalesReturn
from .customer_serializers import CustomerSummarySerializer
from .invoice_serializers import SalesOrderSummarySerializer


class SalesReturnItemInputSerializer(serializers.Serializer):
    sku = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1)
    unitPrice = serializers.DecimalField(source="unit_price", max_digits=14, decimal_places=2, min_value=0, required=False)


class SalesReturnCreateSerializer(serializers.Serializer):
    salesOrder = serializers.IntegerField(source="sales_order")
    customer = serializers.IntegerField(required=False, allow_null=True)
    returnDate = serializers.DateTimeField(source="return_date", required=False, allow_null=True)
    reason = serializers.ChoiceField(choices=SalesReturn.Reason.choices)
    actionRequired = serializers.ChoiceField(source="action_required", choices=SalesReturn.ActionRequired.choices)
    items = SalesReturnItemInputSerializer(many=True, allow_empty=False)
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class SalesReturnProcessSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=SalesReturn.Status.choices)


class SalesReturnItemSerializer(serializers.Serializer):
    sku = SKUSummarySerializer(read_only=True)
    quantity = serializers.IntegerField(read_only=True)
    unitPrice = serializers.DecimalField(source="unit_price", max_digits=14, decimal_places=2, read_only=True)
    totalAmount = serializers.DecimalField(source="total_amount", max_digits=16, decimal_places=2, read_only=True)


class SalesReturnSerializer(DocumentSerializer):
    returnNumber = serializers.CharField(source="return_number", read_only=True)
    salesOrder = SalesOrderSummarySerializer(source="sales_order", read_only=True)
    customer = CustomerSummarySerializer(read_only=True)
    returnDate = serializers.DateTimeField(source="return_date", read_only=True)
    actionRequired = serializers.CharField(source="action_required", read_only=True)
    items = SalesReturnItemSerializer(many=True, read_only=True)
    totalAmount = serializers.DecimalField(source="total_amount", max_digits=16, decimal_places=2, read_only=True)
    createdBy = UserSummarySerializer(source="created_by", read_only=True)
    processedBy = UserSummarySerializer(source="processed_by", read_only=True)
    processedAt = serializers.DateTimeField(source="processed_at", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = SalesReturn
        fields = [
            "returnNumber", "salesOrder", "customer", "returnDate", "reason", "actionRequired",
            "items", "totalAmount", "status", "notes", "createdBy", "processedBy", "processedAt",
            "createdAt", "updatedAt",
        ]
        read_only_fields = fields
