from rest_framework import serializers

from core_backend.base import BaseModelSerializer
from orders.models import OrderItem


class CartItemSerializer(serializers.Serializer):
    """One ``{dish_id, quantity}`` line of checkout input."""

    dish_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)


class OrderItemSerializer(BaseModelSerializer):
    line_total_cents = serializers.IntegerField(read_only=True)

    class Meta:
        model = OrderItem
        fields = ["id", "dish", "dish_name", "quantity", "price_at_purchase_cents", "line_total_cents"]
        read_only_fields = fields
