"""
Order placement and lifecycle failures.

Menu and cart failures live in ``menus.exceptions``; coupon failures in
``coupons.exceptions``. Everything derives from OrderingError and is rendered
by the project exception handler.
"""
from rest_framework import status

from core_backend.exceptions import OrderingError


class SettingsNotFound(OrderingError):
    """The business has no settings row: a tenant setup fault, not a client error."""

    code = "SETTINGS_NOT_FOUND"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Business settings not found"


class OrdersNotAccepted(OrderingError):
    code = "ORDERS_NOT_ACCEPTED"
    default_message = "This business is not currently accepting orders"


class DeliveryNotEnabled(OrderingError):
    code = "DELIVERY_NOT_ENABLED"
    default_message = "This business does not offer delivery"


class DeliveryDistanceRequired(OrderingError):
    code = "DELIVERY_DISTANCE_REQUIRED"
    default_message = "Delivery distance is required to calculate the delivery fee"


class MinimumOrderNotMet(OrderingError):
    code = "MIN_ORDER_NOT_MET"

    def __init__(self, min_amount_cents, current_amount_cents, message=None):
        self.min_amount_cents = min_amount_cents
        self.current_amount_cents = current_amount_cents
        super().__init__(
            message or "Order subtotal is below the minimum order value",
            details={
                "min_amount_cents": min_amount_cents,
                "current_amount_cents": current_amount_cents,
            },
        )


class OrderNotFound(OrderingError):
    code = "ORDER_NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Order not found"


class InvalidTransition(OrderingError):
    code = "INVALID_TRANSITION"
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, current_status, target_status, message=None):
        super().__init__(
            message or f"Cannot move an order from '{current_status}' to '{target_status}'",
            details={"current_status": current_status, "target_status": target_status},
        )


class OrderAlreadyTerminal(OrderingError):
    code = "ORDER_ALREADY_TERMINAL"
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, current_status, message=None):
        super().__init__(
            message or f"Order is already {current_status} and cannot change status",
            details={"current_status": current_status},
        )
