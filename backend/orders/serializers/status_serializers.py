from rest_framework import serializers

from orders.models import Order


class OrderTransitionSerializer(serializers.Serializer):
    """
    Target status for a lifecycle transition. Whether the move is legal is
    decided by the state machine, not here.
    """

    order_status = serializers.ChoiceField(choices=Order.OrderStatus.choices)


class PaymentStatusSerializer(serializers.Serializer):
    payment_status = serializers.ChoiceField(choices=Order.PaymentStatus.choices)
    payment_reference = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")


class OrderSummarySerializer(serializers.Serializer):
    total_orders = serializers.IntegerField()
    total_sales_cents = serializers.IntegerField()
    average_order_value_cents = serializers.IntegerField()
    orders_by_status = serializers.DictField(child=serializers.IntegerField())
