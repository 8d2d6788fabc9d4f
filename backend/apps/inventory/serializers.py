from rest_framework import serializers

from shared.serializers import DocumentSerializer, UserSummarySerializer

from .models import SKU, StockTransaction, Warehouse


class SKUSummarySerializer(serializers.ModelSerializer):
    """Populated form of a SKU reference inside order, invoice and PO lines."""

    sku = serializers.CharField(source="code", read_only=True)

    class Meta:
        model = SKU
        fields = ["name", "sku"]

    def to_representation(self, instance):
        data = super().to_representation(instance)
        return {"_id": instance.pk, **data}


class SKUSerializer(DocumentSerializer):
    purchasePrice = serializers.DecimalField(source="purchase_price", max_digits=14, decimal_places=2, min_value=0, required=False)
    sellingPrice = serializers.DecimalField(source="selling_price", max_digits=14, decimal_places=2, min_value=0, required=False)
    minStock = serializers.IntegerField(source="min_stock", min_value=0, required=False)
    currentStock = serializers.IntegerField(source="current_stock", read_only=True)
    reservedStock = serializers.IntegerField(source="reserved_stock", read_only=True)
    availableStock = serializers.IntegerField(source="available_stock", read_only=True)
    isActive = serializers.BooleanField(source="is_active", required=False)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = SKU
        fields = [
            "code", "name", "description", "purchasePrice", "sellingPrice", "minStock",
            "currentStock", "reservedStock", "availableStock", "isActive", "createdAt", "updatedAt",
        ]


class WarehouseSerializer(DocumentSerializer):
    isActive = serializers.BooleanField(source="is_active", required=False)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Warehouse
        fields = ["code", "name", "address", "capacity", "isActive", "createdAt", "updatedAt"]


class StockTransactionSerializer(DocumentSerializer):
    sku = SKUSummarySerializer(read_only=True)
    unitPrice = serializers.DecimalField(source="unit_price", max_digits=14, decimal_places=2, read_only=True)
    totalAmount = serializers.DecimalField(source="total_amount", max_digits=16, decimal_places=2, read_only=True)
    referenceType = serializers.CharField(source="reference_type", read_only=True)
    referenceId = serializers.IntegerField(source="reference_id", read_only=True)
    createdBy = UserSummarySerializer(source="created_by", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = StockTransaction
        fields = [
            "type", "sku", "quantity", "unitPrice", "totalAmount", "referenceType", "referenceId",
            "status", "notes", "createdBy", "createdAt",
        ]
        read_only_fields = fields
