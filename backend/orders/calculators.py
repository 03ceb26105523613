"""
Order pricing.

Turns a resolved cart plus the business's delivery policy into the amounts
stored on an order. Pure computation: no queries, no writes, and integer
minor units throughout. The only Decimal is the delivery distance, which is
rounded to whole kilometres before it touches money.

Usage:
    from orders.calculators import PricingCalculator

    calculator = PricingCalculator(business_settings)
    subtotal = calculator.calculate_subtotal(lines, snapshot)
    calculator.enforce_minimum_order(subtotal)
    breakdown = calculator.calculate(lines, snapshot, "delivery", Decimal("3.4"), discount_cents=200)
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_CEILING, ROUND_FLOOR, ROUND_HALF_UP, InvalidOperation
from typing import Mapping, Optional, Sequence

from business.models import BusinessSettings
from menus.services import CartLine, DishSnapshot
from payments.money import format_money, sum_minor
from .exceptions import DeliveryDistanceRequired, DeliveryNotEnabled, MinimumOrderNotMet
from .models import Order

DISTANCE_ROUNDING = {
    BusinessSettings.DistanceRounding.ROUND: ROUND_HALF_UP,
    BusinessSettings.DistanceRounding.CEIL: ROUND_CEILING,
    BusinessSettings.DistanceRounding.FLOOR: ROUND_FLOOR,
}


@dataclass(frozen=True)
class PricingBreakdown:
    subtotal_cents: int
    discount_cents: int
    delivery_fee_cents: int
    total_cents: int


class PricingCalculator:
    """
    Computes subtotal, delivery fee, discount and total for one business.

    ``total = max(0, subtotal - discount) + delivery_fee``; the discount is
    clamped to the subtotal and never reduces the delivery fee.
    """

    def __init__(self, settings: BusinessSettings):
        self.settings = settings

    def calculate_subtotal(self, lines: Sequence[CartLine], snapshot: Mapping) -> int:
        return sum_minor(snapshot[line.dish_id].price_cents * line.quantity for line in lines)

    def enforce_minimum_order(self, subtotal_cents: int) -> None:
        """Checked on the pre-discount subtotal so coupons cannot dodge it."""
        minimum = self.settings.min_order_value_cents
        if minimum and subtotal_cents < minimum:
            raise MinimumOrderNotMet(
                minimum,
                subtotal_cents,
                message=f"Minimum order amount is {format_money(self.settings.currency, minimum)}",
            )

    @staticmethod
    def round_distance(distance_km: Decimal, rounding: str) -> int:
        try:
            distance = Decimal(distance_km)
        except (InvalidOperation, TypeError, ValueError):
            raise DeliveryDistanceRequired("Delivery distance must be a number of kilometres")
        if distance < 0:
            raise DeliveryDistanceRequired("Delivery distance cannot be negative")
        return int(distance.quantize(Decimal(1), rounding=DISTANCE_ROUNDING[rounding]))

    def calculate_delivery_fee(
        self,
        delivery_type: str,
        subtotal_cents: int,
        distance_km: Optional[Decimal] = None,
    ) -> int:
        if delivery_type == Order.DeliveryType.PICKUP:
            return 0

        settings = self.settings
        policy = settings.delivery_type

        if policy == BusinessSettings.DeliveryType.DISABLED:
            raise DeliveryNotEnabled()

        if settings.min_order_free_delivery_cents and subtotal_cents >= settings.min_order_free_delivery_cents:
            return 0

        if policy == BusinessSettings.DeliveryType.FREE:
            return 0

        if policy == BusinessSettings.DeliveryType.FLAT:
            return settings.delivery_fee_cents

        if policy == BusinessSettings.DeliveryType.PER_KM:
            if distance_km is None:
                raise DeliveryDistanceRequired()
            kilometres = self.round_distance(distance_km, settings.distance_rounding)
            return settings.delivery_base_fee_cents + settings.delivery_per_km_cents * kilometres

        raise NotImplementedError(f"No delivery fee rule for delivery type '{policy}'")

    def calculate(
        self,
        lines: Sequence[CartLine],
        snapshot: Mapping[object, DishSnapshot],
        delivery_type: str,
        distance_km: Optional[Decimal] = None,
        discount_cents: int = 0,
    ) -> PricingBreakdown:
        subtotal_cents = self.calculate_subtotal(lines, snapshot)
        self.enforce_minimum_order(subtotal_cents)

        delivery_fee_cents = self.calculate_delivery_fee(delivery_type, subtotal_cents, distance_km)
        discount_cents = max(0, min(discount_cents, subtotal_cents))
        total_cents = max(0, subtotal_cents - discount_cents) + delivery_fee_cents

        return PricingBreakdown(
            subtotal_cents=subtotal_cents,
            discount_cents=discount_cents,
            delivery_fee_cents=delivery_fee_cents,
            total_cents=total_cents,
        )
