"""
Orders serializers package.
"""

from .order_item_serializers import CartItemSerializer, OrderItemSerializer
from .order_serializers import OrderCreateSerializer, OrderSerializer
from .status_serializers import (
    OrderSummarySerializer,
    OrderTransitionSerializer,
    PaymentStatusSerializer,
)

__all__ = [
    "CartItemSerializer",
    "OrderItemSerializer",
    "OrderCreateSerializer",
    "OrderSerializer",
    "OrderSummarySerializer",
    "OrderTransitionSerializer",
    "PaymentStatusSerializer",
]
