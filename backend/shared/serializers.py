from rest_framework import serializers


class DocumentSerializer(serializers.ModelSerializer):
    """ModelSerializer that also exposes the primary key as ``_id``."""

    def to_representation(self, instance):
        data = super().to_representation(instance)
        return {"_id": instance.pk, **data}


class UserSummarySerializer(serializers.Serializer):
    name = serializers.SerializerMethodField()
    email = serializers.EmailField(read_only=True)

    def get_name(self, obj) -> str:
        return obj.get_full_name() or obj.get_username()

    def to_representation(self, instance):
        data = super().to_representation(instance)
        return {"_id": instance.pk, **data}
