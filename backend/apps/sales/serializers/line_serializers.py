from rest_framework import serializers

from apps.inventory.serializers import SKUSummarySerializer


class PricedLineInputSerializer(serializers.Serializer):
    sku = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1)
    unitPrice = serializers.DecimalField(source="unit_price", max_digits=14, decimal_places=2, min_value=0)
    discount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0, required=False, default=0)
    tax = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0, required=False, default=0)


class PricedLineSerializer(serializers.Serializer):
    """Read shape of order and invoice lines."""

    sku = SKUSummarySerializer(read_only=True)
    quantity = serializers.IntegerField(read_only=True)
    unitPrice = serializers.DecimalField(source="unit_price", max_digits=14, decimal_places=2, read_only=True)
    discount = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)
    tax = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)
    totalAmount = serializers.DecimalField(source="total_amount", max_digits=16, decimal_places=2, read_only=True)

    def to_representation(self, instance):
        data = super().to_representation(instance)
        return {"_id": instance.pk, **data}


class SkuQuantitySerializer(serializers.Serializer):
    sku = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1)
