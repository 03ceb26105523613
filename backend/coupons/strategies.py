from abc import ABC, abstractmethod
import logging

from payments.money import percentage_of
from .models import Coupon

logger = logging.getLogger(__name__)


class CouponDiscountStrategy(ABC):
    """The interface for computing a coupon's discount on a cart subtotal."""

    def apply(self, coupon: Coupon, subtotal_cents: int) -> int:
        """Discount in minor units, never more than the subtotal."""
        if subtotal_cents <= 0:
            return 0
        return min(self.calculate(coupon, subtotal_cents), subtotal_cents)

    @abstractmethod
    def calculate(self, coupon: Coupon, subtotal_cents: int) -> int:
        pass


class FixedAmountStrategy(CouponDiscountStrategy):
    """A flat amount off the subtotal."""

    def calculate(self, coupon: Coupon, subtotal_cents: int) -> int:
        return coupon.discount_value


class PercentageStrategy(CouponDiscountStrategy):
    """A percentage of the subtotal, rounded half up and optionally capped."""

    def calculate(self, coupon: Coupon, subtotal_cents: int) -> int:
        discount_cents = percentage_of(subtotal_cents, coupon.discount_value)

        if coupon.max_discount_cents is not None and discount_cents > coupon.max_discount_cents:
            logger.debug(
                f"Coupon {coupon.code}: {discount_cents} capped at {coupon.max_discount_cents}"
            )
            discount_cents = coupon.max_discount_cents

        return discount_cents
