from rest_framework import serializers

from business.models import Business
from core_backend.base import BaseModelSerializer, TimestampedSerializer
from menus.models import Dish
from .models import AutomaticPromotion, Coupon, CouponUsage


class CouponSerializer(TimestampedSerializer):
    """Full representation for the owner's coupon screens."""

    dish_ids = serializers.PrimaryKeyRelatedField(source="dishes", many=True, read_only=True)

    class Meta:
        model = Coupon
        fields = [
            'id', 'business', 'code', 'name', 'description',
            'discount_type', 'discount_value', 'max_discount_cents', 'min_order_value_cents',
            'valid_from', 'valid_until',
            'usage_limit_type', 'usage_limit_per_customer', 'usage_limit_per_month', 'total_usage_limit',
            'applicable_to', 'dish_ids', 'status', 'is_public',
            'total_usage_count', 'total_discount_given_cents', 'total_revenue_generated_cents',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields


class PublicCouponSerializer(BaseModelSerializer):
    """What a customer browsing the menu may see."""

    class Meta:
        model = Coupon
        fields = [
            'code', 'name', 'description', 'discount_type', 'discount_value',
            'max_discount_cents', 'min_order_value_cents', 'valid_until',
        ]
        read_only_fields = fields


class CouponCreateSerializer(BaseModelSerializer):
    business = serializers.PrimaryKeyRelatedField(queryset=Business.objects.all())
    dishes = serializers.PrimaryKeyRelatedField(queryset=Dish.objects.all(), many=True, required=False)

    class Meta:
        model = Coupon
        fields = [
            'business', 'code', 'name', 'description',
            'discount_type', 'discount_value', 'max_discount_cents', 'min_order_value_cents',
            'valid_from', 'valid_until',
            'usage_limit_type', 'usage_limit_per_customer', 'usage_limit_per_month', 'total_usage_limit',
            'applicable_to', 'dishes', 'is_public',
        ]
        extra_kwargs = {
            # Uniqueness is checked after normalizing the code.
            'code': {'validators': []},
        }

    def validate(self, data):
        data = super().validate(data)
        if data.get('applicable_to') == Coupon.ApplicableTo.SPECIFIC_DISHES and not data.get('dishes'):
            raise serializers.ValidationError({'dishes': 'Select at least one dish for a dish-specific coupon.'})
        return data


class CouponUpdateSerializer(BaseModelSerializer):
    class Meta:
        model = Coupon
        fields = ['name', 'description', 'min_order_value_cents', 'valid_until', 'is_public', 'status']


class CouponUsageSerializer(BaseModelSerializer):
    class Meta:
        model = CouponUsage
        fields = [
            'id', 'order', 'customer_identifier', 'coupon_code', 'discount_type', 'discount_value',
            'discount_amount_cents', 'order_subtotal_cents', 'order_total_cents', 'created_at',
        ]
        read_only_fields = fields


class CouponAnalyticsSerializer(serializers.Serializer):
    coupon = CouponSerializer(read_only=True)
    total_usages = serializers.IntegerField()
    total_discount_given_cents = serializers.IntegerField()
    total_revenue_generated_cents = serializers.IntegerField()
    redemption_rate = serializers.FloatField()
    avg_order_value_cents = serializers.IntegerField()
    recent_usages = CouponUsageSerializer(many=True, read_only=True)


class CouponValidateSerializer(serializers.Serializer):
    """Input for previewing a coupon against a cart before checkout."""

    business = serializers.UUIDField()
    code = serializers.CharField(max_length=50)
    order_subtotal_cents = serializers.IntegerField(min_value=0)
    dish_ids = serializers.ListField(child=serializers.UUIDField(), required=False, default=list)
    customer_phone = serializers.CharField(max_length=50, required=False, allow_blank=True)


class PromotionSerializer(TimestampedSerializer):
    class Meta:
        model = AutomaticPromotion
        fields = [
            'id', 'business', 'name', 'description', 'promotion_type',
            'min_order_value_cents', 'discount_type', 'discount_value', 'free_dish',
            'valid_from', 'valid_until', 'is_active', 'is_public',
            'total_applications', 'total_discount_given_cents',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields


class PublicPromotionSerializer(BaseModelSerializer):
    class Meta:
        model = AutomaticPromotion
        fields = [
            'id', 'name', 'description', 'promotion_type', 'min_order_value_cents',
            'discount_type', 'discount_value', 'free_dish', 'valid_until',
        ]
        read_only_fields = fields


class PromotionCreateSerializer(BaseModelSerializer):
    business = serializers.PrimaryKeyRelatedField(queryset=Business.objects.all())
    free_dish = serializers.PrimaryKeyRelatedField(queryset=Dish.objects.all(), required=False, allow_null=True)

    class Meta:
        model = AutomaticPromotion
        fields = [
            'business', 'name', 'description', 'promotion_type',
            'min_order_value_cents', 'discount_type', 'discount_value', 'free_dish',
            'valid_from', 'valid_until', 'is_public',
        ]


class PromotionUpdateSerializer(BaseModelSerializer):
    class Meta:
        model = AutomaticPromotion
        fields = ['name', 'description', 'min_order_value_cents', 'valid_until', 'is_active', 'is_public']


class PromotionCheckSerializer(serializers.Serializer):
    business = serializers.UUIDField()
    order_value_cents = serializers.IntegerField(min_value=0)
