from rest_framework import serializers

from business.models import BusinessSettings
from core_backend.base import TimestampedSerializer
from orders.models import Order
from .order_item_serializers import CartItemSerializer, OrderItemSerializer

# "none" is a business setting meaning "not taking orders", never a customer choice.
CUSTOMER_PAYMENT_METHODS = [
    (value, label)
    for value, label in BusinessSettings.PaymentMethod.choices
    if value != BusinessSettings.PaymentMethod.NONE
]


class OrderSerializer(TimestampedSerializer):
    """A committed order with its frozen line items."""

    items = OrderItemSerializer(many=True, read_only=True)
    coupon_code = serializers.CharField(source="coupon.code", read_only=True, default=None)

    class Meta:
        model = Order
        fields = [
            "id", "order_number", "business", "menu",
            "customer_name", "customer_phone", "customer_email",
            "delivery_type", "delivery_address", "delivery_distance_km", "notes",
            "currency", "subtotal_cents", "discount_cents", "delivery_fee_cents", "total_cents",
            "coupon_code", "payment_method", "payment_status", "payment_reference",
            "order_status", "items",
            "created_at", "updated_at", "fulfilled_at", "cancelled_at",
        ]
        read_only_fields = fields


class OrderCreateSerializer(serializers.Serializer):
    """
    Checkout input. Shape checks only; availability, pricing and coupon
    rules run in the placement service.
    """

    menu_id = serializers.UUIDField()
    items = CartItemSerializer(many=True, allow_empty=True)
    customer_name = serializers.CharField(max_length=255)
    customer_phone = serializers.CharField(max_length=50)
    customer_email = serializers.EmailField(required=False, allow_blank=True, default="")
    delivery_type = serializers.ChoiceField(choices=Order.DeliveryType.choices)
    delivery_address = serializers.CharField(required=False, allow_blank=True, default="")
    delivery_distance_km = serializers.DecimalField(
        max_digits=7, decimal_places=2, min_value=0, required=False, allow_null=True, default=None
    )
    payment_method = serializers.ChoiceField(choices=CUSTOMER_PAYMENT_METHODS, required=False)
    coupon_code = serializers.CharField(max_length=50, required=False, allow_blank=True, default="")
    notes = serializers.CharField(required=False, allow_blank=True, default="")

    def validate_customer_phone(self, value):
        value = value.strip()
        if not any(ch.isdigit() for ch in value):
            raise serializers.ValidationError("Enter a valid phone number.")
        return value

    def validate(self, data):
        data = super().validate(data)
        if data["delivery_type"] == Order.DeliveryType.DELIVERY and not data.get("delivery_address", "").strip():
            raise serializers.ValidationError({"delivery_address": "A delivery address is required for delivery orders."})
        return data
