import uuid

from django.core.exceptions import ValidationError
from django.db import models

from business.managers import BusinessScopedManager


class Coupon(models.Model):
    class DiscountType(models.TextChoices):
        FIXED = "fixed", "Fixed amount"
        PERCENTAGE = "percentage", "Percentage"

    class UsageLimitType(models.TextChoices):
        UNLIMITED = "unlimited", "Unlimited"
        PER_CUSTOMER = "per_customer", "Per customer"
        PER_MONTH = "per_month", "Per customer per month"
        TOTAL_LIMIT = "total_limit", "Total redemptions"

    class ApplicableTo(models.TextChoices):
        ALL_DISHES = "all_dishes", "All dishes"
        SPECIFIC_DISHES = "specific_dishes", "Specific dishes"

    class Status(models.TextChoices):
        ACTIVE = "active", "Active"
        EXPIRED = "expired", "Expired"
        ARCHIVED = "archived", "Archived"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    business = models.ForeignKey('business.Business', on_delete=models.CASCADE, related_name='coupons')

    # Codes are stored upper-cased; every lookup normalizes the same way.
    code = models.CharField(max_length=50, unique=True)
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)

    discount_type = models.CharField(max_length=20, choices=DiscountType.choices)
    discount_value = models.PositiveIntegerField(
        help_text="Minor units for fixed coupons, whole percent (1-100) for percentage coupons",
    )
    max_discount_cents = models.PositiveIntegerField(
        null=True,
        blank=True,
        help_text="Cap for percentage coupons",
    )
    min_order_value_cents = models.PositiveIntegerField(default=0)

    valid_from = models.DateTimeField()
    valid_until = models.DateTimeField()

    usage_limit_type = models.CharField(
        max_length=20,
        choices=UsageLimitType.choices,
        default=UsageLimitType.UNLIMITED,
    )
    usage_limit_per_customer = models.PositiveIntegerField(null=True, blank=True)
    usage_limit_per_month = models.PositiveIntegerField(null=True, blank=True)
    total_usage_limit = models.PositiveIntegerField(null=True, blank=True)

    applicable_to = models.CharField(
        max_length=20,
        choices=ApplicableTo.choices,
        default=ApplicableTo.ALL_DISHES,
    )
    dishes = models.ManyToManyField('menus.Dish', blank=True, related_name='coupons')

    status = models.CharField(max_length=20, choices=Status.choices, default=Status.ACTIVE)
    is_public = models.BooleanField(default=False, help_text="Shown on the public menu page")

    # Running counters, only ever incremented alongside a CouponUsage row.
    total_usage_count = models.PositiveIntegerField(default=0)
    total_discount_given_cents = models.PositiveBigIntegerField(default=0)
    total_revenue_generated_cents = models.PositiveBigIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = BusinessScopedManager()

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["business", "status"], name="coupon_business_status_idx"),
            models.Index(fields=["status", "valid_until"], name="coupon_status_until_idx"),
        ]

    def __str__(self):
        return f"{self.code} ({self.get_discount_type_display()})"

    @staticmethod
    def normalize_code(code) -> str:
        return (code or "").strip().upper()

    def save(self, *args, **kwargs):
        self.code = self.normalize_code(self.code)
        super().save(*args, **kwargs)

    def clean(self):
        super().clean()
        errors = {}

        if self.valid_from and self.valid_until and self.valid_from >= self.valid_until:
            errors["valid_until"] = "Valid from date must be before valid until date"

        if self.discount_type == self.DiscountType.PERCENTAGE and not 1 <= (self.discount_value or 0) <= 100:
            errors["discount_value"] = "Percentage discount must be between 1 and 100."
        if self.discount_type == self.DiscountType.FIXED and not self.discount_value:
            errors["discount_value"] = "Fixed discount must be greater than zero."

        required_limit = {
            self.UsageLimitType.PER_CUSTOMER: "usage_limit_per_customer",
            self.UsageLimitType.PER_MONTH: "usage_limit_per_month",
            self.UsageLimitType.TOTAL_LIMIT: "total_usage_limit",
        }.get(self.usage_limit_type)
        if required_limit and not getattr(self, required_limit):
            errors[required_limit] = "This limit is required for the selected usage limit type."

        if errors:
            raise ValidationError(errors)


class CouponUsage(models.Model):
    """
    Append-only ledger of coupon redemptions, one row per order.

    Rows are written by the order transaction and never changed afterwards;
    the discount and order amounts are recorded as they were at redemption.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    coupon = models.ForeignKey(Coupon, on_delete=models.PROTECT, related_name='usages')
    order = models.OneToOneField('orders.Order', on_delete=models.PROTECT, related_name='coupon_usage')
    business = models.ForeignKey('business.Business', on_delete=models.CASCADE, related_name='coupon_usages')
    customer_identifier = models.CharField(
        max_length=255,
        help_text="User id for signed-in customers, phone number otherwise",
    )

    coupon_code = models.CharField(max_length=50)
    discount_type = models.CharField(max_length=20, choices=Coupon.DiscountType.choices)
    discount_value = models.PositiveIntegerField()
    discount_amount_cents = models.PositiveIntegerField()
    order_subtotal_cents = models.PositiveIntegerField()
    order_total_cents = models.PositiveIntegerField()

    created_at = models.DateTimeField(auto_now_add=True)

    objects = BusinessScopedManager()

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["coupon", "customer_identifier"], name="usage_coupon_customer_idx"),
            models.Index(fields=["coupon", "customer_identifier", "created_at"], name="usage_coupon_cust_date_idx"),
        ]

    def __str__(self):
        return f"{self.coupon_code} on order {self.order_id}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("Coupon usage records are append-only and cannot be modified.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("Coupon usage records are append-only and cannot be deleted.")


class AutomaticPromotion(models.Model):
    """
    A promotion that applies without a code once the order value reaches a
    threshold, such as free delivery above a minimum.
    """

    class PromotionType(models.TextChoices):
        FREE_DELIVERY = "free_delivery", "Free delivery"
        DISCOUNT = "discount", "Discount"
        FREE_ITEM = "free_item", "Free item"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    business = models.ForeignKey('business.Business', on_delete=models.CASCADE, related_name='promotions')

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    promotion_type = models.CharField(max_length=20, choices=PromotionType.choices)

    min_order_value_cents = models.PositiveIntegerField(null=True, blank=True)
    discount_type = models.CharField(max_length=20, choices=Coupon.DiscountType.choices, blank=True)
    discount_value = models.PositiveIntegerField(null=True, blank=True)
    free_dish = models.ForeignKey(
        'menus.Dish',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='promotions',
    )

    valid_from = models.DateTimeField()
    valid_until = models.DateTimeField()
    is_active = models.BooleanField(default=True)
    is_public = models.BooleanField(default=True, help_text="Shown on the public menu page")

    total_applications = models.PositiveIntegerField(default=0)
    total_discount_given_cents = models.PositiveBigIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = BusinessScopedManager()

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["business", "is_active"], name="promo_business_active_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.get_promotion_type_display()})"

    def clean(self):
        super().clean()
        errors = {}

        if self.valid_from and self.valid_until and self.valid_from >= self.valid_until:
            errors["valid_until"] = "Valid from date must be before valid until date"

        if self.promotion_type == self.PromotionType.DISCOUNT:
            if not self.discount_type:
                errors["discount_type"] = "Discount promotions need a discount type."
            elif self.discount_type == Coupon.DiscountType.PERCENTAGE and not 1 <= (self.discount_value or 0) <= 100:
                errors["discount_value"] = "Percentage discount must be between 1 and 100."
            elif not self.discount_value:
                errors["discount_value"] = "Fixed discount must be greater than zero."

        if self.promotion_type == self.PromotionType.FREE_ITEM:
            if self.free_dish_id is None:
                errors["free_dish"] = "Free item promotions need a dish."
            elif self.free_dish.business_id != self.business_id:
                errors["free_dish"] = "The free dish must belong to the same business."

        if errors:
            raise ValidationError(errors)
