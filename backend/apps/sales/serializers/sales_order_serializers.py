from rest_framework import serializers

from apps.inventory.serializers import SKUSummarySerializer
from shared.serializers import DocumentSerializer, UserSummarySerializer

from ..models import SalesOrder
from .customer_serializers import CustomerSummarySerializer
from .line_serializers import PricedLineInputSerializer, PricedLineSerializer, SkuQuantitySerializer


class SalesOrderCreateSerializer(serializers.Serializer):
    customer = serializers.IntegerField()
    expectedDeliveryDate = serializers.DateField(source="expected_delivery_date", required=False, allow_null=True)
    items = PricedLineInputSerializer(many=True, allow_empty=False)
    notes = serializers.CharField(required=False, allow_blank=True, default="")
    status = serializers.ChoiceField(
        choices=[SalesOrder.Status.DRAFT, SalesOrder.Status.PENDING_DISPATCH],
        required=False,
    )


class SalesOrderUpdateSerializer(serializers.Serializer):
    customer = serializers.IntegerField(required=False)
    expectedDeliveryDate = serializers.DateField(source="expected_delivery_date", required=False, allow_null=True)
    items = PricedLineInputSerializer(many=True, required=False, allow_empty=False)
    notes = serializers.CharField(required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=SalesOrder.Status.choices, required=False)


class SalesOrderStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=SalesOrder.Status.choices)


class DispatchSerializer(serializers.Serializer):
    dispatchedItems = SkuQuantitySerializer(source="dispatched_items", many=True, allow_empty=False)


class DispatchedItemSerializer(serializers.Serializer):
    sku = SKUSummarySerializer(read_only=True)
    quantity = serializers.IntegerField(read_only=True)
    dispatchedAt = serializers.DateTimeField(source="dispatched_at", read_only=True)


class StockAllocationSerializer(serializers.Serializer):
    sku = serializers.IntegerField(source="sku_id", read_only=True)
    quantity = serializers.IntegerField(read_only=True)


class SalesOrderSerializer(DocumentSerializer):
    orderNumber = serializers.CharField(source="order_number", read_only=True)
    customer = CustomerSummarySerializer(read_only=True)
    orderDate = serializers.DateTimeField(source="order_date", read_only=True)
    expectedDeliveryDate = serializers.DateField(source="expected_delivery_date", read_only=True)
    items = PricedLineSerializer(many=True, read_only=True)
    totalDiscount = serializers.DecimalField(source="total_discount", max_digits=16, decimal_places=2, read_only=True)
    totalTax = serializers.DecimalField(source="total_tax", max_digits=16, decimal_places=2, read_only=True)
    totalAmount = serializers.DecimalField(source="total_amount", max_digits=16, decimal_places=2, read_only=True)
    dispatchStatus = serializers.CharField(source="dispatch_status", read_only=True)
    dispatchedItems = DispatchedItemSerializer(source="dispatched_items", many=True, read_only=True)
    allocatedStock = StockAllocationSerializer(source="allocated_stock", many=True, read_only=True)
    createdBy = UserSummarySerializer(source="created_by", read_only=True)
    approvedBy = UserSummarySerializer(source="approved_by", read_only=True)
    approvedAt = serializers.DateTimeField(source="approved_at", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = SalesOrder
        fields = [
            "orderNumber", "customer", "orderDate", "expectedDeliveryDate", "items",
            "subtotal", "totalDiscount", "totalTax", "totalAmount", "status", "dispatchStatus",
            "dispatchedItems", "allocatedStock", "notes", "createdBy", "approvedBy", "approvedAt",
            "createdAt", "updatedAt",
        ]
        read_only_fields = fields


class SalesOrderFilterSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=SalesOrder.Status.choices, required=False)
    customer = serializers.IntegerField(required=False)
    startDate = serializers.DateField(source="start_date", required=False)
    endDate = serializers.DateField(source="end_date", required=False)
