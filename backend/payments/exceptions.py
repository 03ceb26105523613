from rest_framework import status

from core_backend.exceptions import OrderingError


class PaymentGatewayUnavailable(OrderingError):
    code = "PAYMENT_GATEWAY_UNAVAILABLE"
    default_message = "No payment gateway is configured for this payment method"


class PaymentNotCollectable(OrderingError):
    """Collection only starts from an unpaid order or after a failed attempt."""

    code = "PAYMENT_NOT_COLLECTABLE"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Payment for this order has already been collected or is in progress"
