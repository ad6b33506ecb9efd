import decimal
from collections.abc import Mapping
from dataclasses import is_dataclass

from rest_framework import serializers

from apps.api.schemas import CommonApiResponseSerializer
from apps.catalog.serializers import ProductReadSerializer


class CartLineSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    user_id = serializers.IntegerField()
    product = ProductReadSerializer()
    quantity = serializers.IntegerField()
    added_time = serializers.CharField(allow_null=True)

    def to_representation(self, instance):
        if instance is None:
            return None
        if is_dataclass(instance):
            return {
                "id": instance.id,
                "user_id": instance.user_id,
                "product": ProductReadSerializer(instance.product).data,
                "quantity": instance.quantity,
                "added_time": instance.added_time,
            }
        # Lines supplied as plain mappings are emitted untouched.
        if isinstance(instance, Mapping):
            return dict(instance)
        return super().to_representation(instance)


class AmountField(serializers.DecimalField):
    """
    Read-only money field rendered with two fraction digits.

    Precision follows the value, so large totals are never cut to the
    default 28-digit context. Non-finite amounts are rejected.
    """

    def __init__(self, **kwargs):
        kwargs.setdefault("max_digits", None)
        kwargs.setdefault("decimal_places", 2)
        kwargs.setdefault("coerce_to_string", True)
        kwargs.setdefault("read_only", True)
        super().__init__(**kwargs)

    def quantize(self, value):
        if not value.is_finite():
            raise ValueError(f"Amount must be finite, got {value}")
        context = decimal.getcontext().copy()
        context.prec = max(context.prec, value.adjusted() + self.decimal_places + 2)
        return value.quantize(
            decimal.Decimal(".1") ** self.decimal_places,
            rounding=self.rounding,
            context=context,
        )


class CartResponseSerializer(CommonApiResponseSerializer):
    carts = CartLineSerializer(source="items", many=True)
    totalCartAmount = AmountField(source="total_amount")
