from .models import Coupon
from .strategies import CouponDiscountStrategy, FixedAmountStrategy, PercentageStrategy


class CouponStrategyFactory:
    """
    Factory for picking the discount strategy of a coupon.
    """

    _strategies = {
        Coupon.DiscountType.FIXED: FixedAmountStrategy,
        Coupon.DiscountType.PERCENTAGE: PercentageStrategy,
    }

    @staticmethod
    def get_strategy(coupon: Coupon) -> CouponDiscountStrategy:
        strategy_class = CouponStrategyFactory._strategies.get(coupon.discount_type)

        if strategy_class:
            return strategy_class()

        raise NotImplementedError(
            f"No strategy implemented for discount type '{coupon.discount_type}'"
        )
