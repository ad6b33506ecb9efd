from dataclasses import asdict, is_dataclass

from rest_framework import serializers


class ProductReadSerializer(serializers.Serializer):
    # Mirrors ProductDTO
    id = serializers.IntegerField()
    title = serializers.CharField()
    description = serializers.CharField(allow_blank=True)
    price = serializers.CharField()
    quantity = serializers.IntegerField()
    image = serializers.CharField(allow_blank=True)
    seller_id = serializers.IntegerField(allow_null=True)
    seller_name = serializers.CharField(allow_null=True)

    def to_representation(self, instance):
        if instance is None:
            return None
        if is_dataclass(instance):
            return asdict(instance)
        return super().to_representation(instance)
