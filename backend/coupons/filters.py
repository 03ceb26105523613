import django_filters

from core_backend.base import BaseFilterSet
from .models import AutomaticPromotion, Coupon


class CouponFilter(BaseFilterSet):
    business = django_filters.UUIDFilter(field_name="business_id")

    class Meta:
        model = Coupon
        fields = {
            "status": ["exact"],
            "discount_type": ["exact"],
            "is_public": ["exact"],
        }


class PromotionFilter(BaseFilterSet):
    business = django_filters.UUIDFilter(field_name="business_id")

    class Meta:
        model = AutomaticPromotion
        fields = {
            "promotion_type": ["exact"],
            "is_active": ["exact"],
            "is_public": ["exact"],
        }
