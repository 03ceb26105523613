from django.contrib import admin

from .models import AutomaticPromotion, Coupon, CouponUsage


@admin.register(Coupon)
class CouponAdmin(admin.ModelAdmin):
    list_display = [
        'code', 'business', 'discount_type', 'discount_value', 'usage_limit_type',
        'total_usage_count', 'status', 'valid_from', 'valid_until',
    ]
    list_filter = ['status', 'discount_type', 'usage_limit_type', 'is_public']
    search_fields = ['code', 'name', 'business__name']
    filter_horizontal = ['dishes']
    readonly_fields = [
        'id', 'total_usage_count', 'total_discount_given_cents',
        'total_revenue_generated_cents', 'created_at', 'updated_at',
    ]


@admin.register(CouponUsage)
class CouponUsageAdmin(admin.ModelAdmin):
    list_display = ['coupon_code', 'order', 'customer_identifier', 'discount_amount_cents', 'created_at']
    search_fields = ['coupon_code', 'customer_identifier']
    list_filter = ['business']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(AutomaticPromotion)
class AutomaticPromotionAdmin(admin.ModelAdmin):
    list_display = ['name', 'business', 'promotion_type', 'min_order_value_cents', 'is_active', 'valid_until']
    list_filter = ['promotion_type', 'is_active', 'is_public']
    search_fields = ['name', 'business__name']
    readonly_fields = ['id', 'total_applications', 'total_discount_given_cents', 'created_at', 'updated_at']
