"""
Coupon failures that abort an order.

Validation itself never raises: it returns a CouponValidationResult. These
exceptions exist for the places where a failed coupon must roll back the
surrounding order transaction.
"""
from rest_framework import status

from core_backend.exceptions import OrderingError


class CouponError(OrderingError):
    code = "COUPON_INVALID"
    default_message = "Coupon is not valid"


class CouponUsageLimitReached(CouponError):
    """The conditional counter update matched no row: someone took the last slot."""

    default_message = "Coupon usage limit reached"


class CouponNotFound(OrderingError):
    code = "COUPON_NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Coupon not found"


class PromotionNotFound(OrderingError):
    code = "PROMOTION_NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Promotion not found"
