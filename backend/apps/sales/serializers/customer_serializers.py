from rest_framework import serializers

from shared.serializers import DocumentSerializer

from ..models import Customer


class CustomerSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Customer
        fields = ["name", "email", "phone"]

    def to_representation(self, instance):
        data = super().to_representation(instance)
        return {"_id": instance.pk, **data}


class CustomerSerializer(DocumentSerializer):
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Customer
        fields = ["name", "email", "phone", "address", "createdAt", "updatedAt"]
