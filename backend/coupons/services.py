from dataclasses import dataclass
from typing import Iterable, Optional
import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Count, F, Q, Sum
from django.utils import timezone

from core_backend.utils.time_windows import WindowState, check_window, month_bounds
from payments.money import format_money
from .exceptions import CouponNotFound, CouponUsageLimitReached, PromotionNotFound
from .factories import CouponStrategyFactory
from .models import AutomaticPromotion, Coupon, CouponUsage

logger = logging.getLogger(__name__)


def customer_identifier_for(user=None, phone: str = "") -> str:
    """
    Key used to count a customer's redemptions.

    Signed-in customers are identified by user id; guests by the digits of
    their phone number, so formatting differences do not reset limits.
    """
    if user is not None and getattr(user, "is_authenticated", False):
        return f"user:{user.pk}"
    digits = "".join(ch for ch in (phone or "") if ch.isdigit())
    return f"phone:{digits}"


@dataclass
class CouponValidationResult:
    valid: bool
    discount_cents: int = 0
    coupon: Optional[Coupon] = None
    error: Optional[str] = None

    @classmethod
    def rejected(cls, error: str, coupon: Optional[Coupon] = None) -> "CouponValidationResult":
        return cls(valid=False, discount_cents=0, coupon=coupon, error=error)

    def as_dict(self) -> dict:
        if not self.valid:
            return {"valid": False, "error": self.error}
        return {
            "valid": True,
            "discount_cents": self.discount_cents,
            "coupon": {
                "id": str(self.coupon.id),
                "code": self.coupon.code,
                "name": self.coupon.name,
                "discount_type": self.coupon.discount_type,
                "discount_value": self.coupon.discount_value,
            },
        }


class CouponValidationService:
    """
    Decides whether a coupon applies to a cart and how much it takes off.

    Checks run in a fixed order and stop at the first failure; a failure is
    an expected outcome of checkout, so it is returned, not raised.
    """

    @staticmethod
    def validate(
        code: str,
        customer_identifier: str,
        business,
        order_subtotal_cents: int,
        dish_ids: Iterable,
        currency: str = "INR",
        lock: bool = False,
        now=None,
    ) -> CouponValidationResult:
        """
        Validate ``code`` for ``business`` against a cart.

        With ``lock=True`` the coupon row is read ``FOR UPDATE``; callers in
        the order transaction use it so concurrent redemptions of the same
        coupon are serialized.
        """
        normalized = Coupon.normalize_code(code)
        queryset = Coupon.objects.for_business(business)
        if lock:
            queryset = queryset.select_for_update()

        coupon = queryset.filter(code=normalized).first() if normalized else None
        if coupon is None:
            return CouponValidationResult.rejected("Coupon not found")

        if coupon.status != Coupon.Status.ACTIVE:
            return CouponValidationResult.rejected("Coupon is not active", coupon)

        window = check_window(coupon.valid_from, coupon.valid_until, now)
        if window == WindowState.NOT_STARTED:
            return CouponValidationResult.rejected("Coupon is not yet valid", coupon)
        if window == WindowState.ENDED:
            return CouponValidationResult.rejected("Coupon has expired", coupon)

        if order_subtotal_cents < coupon.min_order_value_cents:
            minimum = format_money(currency, coupon.min_order_value_cents)
            return CouponValidationResult.rejected(f"Minimum order value of {minimum} required", coupon)

        if coupon.applicable_to == Coupon.ApplicableTo.SPECIFIC_DISHES:
            cart_dish_ids = {str(dish_id) for dish_id in dish_ids}
            coupon_dish_ids = {str(dish_id) for dish_id in coupon.dishes.values_list("id", flat=True)}
            if not cart_dish_ids & coupon_dish_ids:
                return CouponValidationResult.rejected("Coupon not applicable to items in cart", coupon)

        usage_error = CouponValidationService.check_usage_limits(coupon, customer_identifier, now)
        if usage_error:
            return CouponValidationResult.rejected(usage_error, coupon)

        discount_cents = CouponStrategyFactory.get_strategy(coupon).apply(coupon, order_subtotal_cents)
        return CouponValidationResult(valid=True, discount_cents=discount_cents, coupon=coupon)

    @staticmethod
    def check_usage_limits(coupon: Coupon, customer_identifier: str, now=None) -> Optional[str]:
        """Returns the rejection message, or None when the customer may redeem."""
        limit_type = coupon.usage_limit_type

        if limit_type == Coupon.UsageLimitType.UNLIMITED:
            return None

        if limit_type == Coupon.UsageLimitType.TOTAL_LIMIT:
            if coupon.total_usage_count >= (coupon.total_usage_limit or 0):
                return "Coupon usage limit reached"
            return None

        if limit_type == Coupon.UsageLimitType.PER_CUSTOMER:
            used = CouponUsage.objects.filter(
                coupon=coupon, customer_identifier=customer_identifier
            ).count()
            if used >= (coupon.usage_limit_per_customer or 0):
                return "You have already used this coupon"
            return None

        if limit_type == Coupon.UsageLimitType.PER_MONTH:
            month_start, month_end = month_bounds(now)
            used = CouponUsage.objects.filter(
                coupon=coupon,
                customer_identifier=customer_identifier,
                created_at__gte=month_start,
                created_at__lt=month_end,
            ).count()
            if used >= (coupon.usage_limit_per_month or 0):
                return "Monthly usage limit for this coupon reached"
            return None

        raise NotImplementedError(f"Unknown usage limit type '{limit_type}'")


class CouponUsageRecorder:
    """Writes the redemption ledger row and bumps the coupon counters."""

    @staticmethod
    def record(
        coupon: Coupon,
        order,
        customer_identifier: str,
        discount_cents: int,
    ) -> CouponUsage:
        """
        Must run inside the order transaction.

        The counter update is conditional for total-limit coupons; when it
        matches no row the last slot is gone and CouponUsageLimitReached
        rolls the order back.
        """
        revenue_cents = order.subtotal_cents - discount_cents
        counters = Coupon.objects.filter(pk=coupon.pk)
        if coupon.usage_limit_type == Coupon.UsageLimitType.TOTAL_LIMIT:
            counters = counters.filter(total_usage_count__lt=F("total_usage_limit"))

        updated = counters.update(
            total_usage_count=F("total_usage_count") + 1,
            total_discount_given_cents=F("total_discount_given_cents") + discount_cents,
            total_revenue_generated_cents=F("total_revenue_generated_cents") + revenue_cents,
            updated_at=timezone.now(),
        )
        if updated == 0:
            logger.warning(f"Coupon {coupon.code} ran out of redemptions while placing order {order.order_number}")
            raise CouponUsageLimitReached()

        usage = CouponUsage.objects.create(
            coupon=coupon,
            order=order,
            business_id=order.business_id,
            customer_identifier=customer_identifier,
            coupon_code=coupon.code,
            discount_type=coupon.discount_type,
            discount_value=coupon.discount_value,
            discount_amount_cents=discount_cents,
            order_subtotal_cents=order.subtotal_cents,
            order_total_cents=order.total_cents,
        )
        logger.info(f"Coupon {coupon.code} redeemed on order {order.order_number} for {discount_cents}")
        return usage


class CouponService:
    """Coupon management for business owners, plus reporting."""

    UPDATABLE_FIELDS = (
        "name",
        "description",
        "min_order_value_cents",
        "valid_until",
        "is_public",
        "status",
    )

    @staticmethod
    @transaction.atomic
    def create_coupon(business, data: dict) -> Coupon:
        data = dict(data)
        dishes = data.pop("dishes", None) or []
        code = Coupon.normalize_code(data.pop("code", ""))

        if Coupon.objects.filter(code=code).exists():
            raise ValidationError({"code": "Coupon code already exists"})

        coupon = Coupon(business=business, code=code, **data)
        coupon.full_clean(exclude=["dishes"])
        coupon.save()

        if dishes:
            foreign = [dish for dish in dishes if dish.business_id != business.id]
            if foreign:
                raise ValidationError({"dishes": "Coupons can only target dishes of the same business."})
            coupon.dishes.set(dishes)

        logger.info(f"Created coupon {coupon.code} for business {business.id}")
        return coupon

    @staticmethod
    @transaction.atomic
    def update_coupon(coupon: Coupon, data: dict) -> Coupon:
        for field in CouponService.UPDATABLE_FIELDS:
            if field in data:
                setattr(coupon, field, data[field])

        coupon.full_clean(exclude=["dishes", "code"])
        coupon.save()
        return coupon

    @staticmethod
    def archive_coupon(coupon: Coupon) -> Coupon:
        return CouponService.update_coupon(coupon, {"status": Coupon.Status.ARCHIVED})

    @staticmethod
    def expire_coupons(now=None) -> int:
        """Marks active coupons past ``valid_until`` as expired. Returns how many."""
        now = now or timezone.now()
        expired = Coupon.objects.filter(
            status=Coupon.Status.ACTIVE,
            valid_until__lt=now,
        ).update(status=Coupon.Status.EXPIRED, updated_at=now)
        if expired:
            logger.info(f"Expired {expired} coupon(s)")
        return expired

    @staticmethod
    def get_public_coupons(business):
        return Coupon.objects.for_business(business).filter(
            is_public=True,
            status=Coupon.Status.ACTIVE,
        ).order_by("-created_at")

    @staticmethod
    def get_coupon_analytics(coupon: Coupon) -> dict:
        """
        Redemption figures for one coupon.

        Money stays in minor units; redemption rate is a percentage with one
        decimal, only meaningful for total-limit coupons.
        """
        redemption_rate = 0.0
        if coupon.usage_limit_type == Coupon.UsageLimitType.TOTAL_LIMIT and coupon.total_usage_limit:
            redemption_rate = round(coupon.total_usage_count * 100 / coupon.total_usage_limit, 1)

        avg_order_value_cents = 0
        if coupon.total_usage_count:
            avg_order_value_cents = coupon.total_revenue_generated_cents // coupon.total_usage_count

        return {
            "coupon": coupon,
            "total_usages": coupon.total_usage_count,
            "total_discount_given_cents": coupon.total_discount_given_cents,
            "total_revenue_generated_cents": coupon.total_revenue_generated_cents,
            "redemption_rate": redemption_rate,
            "avg_order_value_cents": avg_order_value_cents,
            "recent_usages": list(coupon.usages.order_by("-created_at")[:10]),
        }

    @staticmethod
    def get_business_coupon_stats(business) -> dict:
        totals = Coupon.objects.for_business(business).aggregate(
            total_coupons=Count("id"),
            active_coupons=Count("id", filter=Q(status=Coupon.Status.ACTIVE)),
            total_redemptions=Sum("total_usage_count"),
            total_discount_given_cents=Sum("total_discount_given_cents"),
            total_revenue_generated_cents=Sum("total_revenue_generated_cents"),
        )
        return {key: value or 0 for key, value in totals.items()}

    @staticmethod
    def get_coupon(business, coupon_id) -> Coupon:
        try:
            return Coupon.objects.for_business(business).get(id=coupon_id)
        except (Coupon.DoesNotExist, ValidationError, ValueError):
            raise CouponNotFound()


class PromotionService:
    """
    Automatic promotions: offers that need no code.

    Checking a cart returns the promotions it qualifies for so the storefront
    can show them; checkout pricing only applies coupons.
    """

    CREATABLE_FIELDS = (
        "name",
        "description",
        "promotion_type",
        "min_order_value_cents",
        "discount_type",
        "discount_value",
        "free_dish",
        "valid_from",
        "valid_until",
        "is_public",
    )
    UPDATABLE_FIELDS = (
        "name",
        "description",
        "min_order_value_cents",
        "valid_until",
        "is_active",
        "is_public",
    )

    @staticmethod
    @transaction.atomic
    def create_promotion(business, data: dict) -> AutomaticPromotion:
        values = {field: data[field] for field in PromotionService.CREATABLE_FIELDS if field in data}
        promotion = AutomaticPromotion(business=business, is_active=True, **values)
        promotion.full_clean()
        promotion.save()

        logger.info(f"Created {promotion.promotion_type} promotion {promotion.id} for business {business.id}")
        return promotion

    @staticmethod
    @transaction.atomic
    def update_promotion(promotion: AutomaticPromotion, data: dict) -> AutomaticPromotion:
        for field in PromotionService.UPDATABLE_FIELDS:
            if field in data:
                setattr(promotion, field, data[field])

        promotion.full_clean()
        promotion.save()
        return promotion

    @staticmethod
    def get_active_promotions(business):
        return AutomaticPromotion.objects.for_business(business).filter(is_active=True).order_by("-created_at")

    @staticmethod
    def check_promotions(business, order_value_cents: int, now=None) -> list:
        """Active promotions whose window is open and whose threshold ``order_value_cents`` meets."""
        applicable = []
        for promotion in PromotionService.get_active_promotions(business):
            if check_window(promotion.valid_from, promotion.valid_until, now) != WindowState.OPEN:
                continue
            if promotion.min_order_value_cents and order_value_cents < promotion.min_order_value_cents:
                continue
            applicable.append(promotion)
        return applicable

    @staticmethod
    def get_promotion(business, promotion_id) -> AutomaticPromotion:
        try:
            return AutomaticPromotion.objects.for_business(business).get(id=promotion_id)
        except (AutomaticPromotion.DoesNotExist, ValidationError, ValueError):
            raise PromotionNotFound()
