import uuid

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

from .managers import BusinessManager


class Business(models.Model):
    """
    Root entity for multi-tenancy.

    Every menu, dish, coupon and order belongs to exactly one business, and
    the business owner is the only actor allowed to manage them.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    slug = models.SlugField(unique=True, help_text="URL-safe identifier for the public menu page")
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="businesses",
    )

    contact_email = models.EmailField(blank=True)
    contact_phone = models.CharField(max_length=50, blank=True)

    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = BusinessManager()

    class Meta:
        ordering = ["name"]
        verbose_name_plural = "businesses"
        indexes = [
            models.Index(fields=["slug"], name="business_slug_idx"),
            models.Index(fields=["owner"], name="business_owner_idx"),
        ]

    def __str__(self):
        return self.name

    def is_owned_by(self, user) -> bool:
        return bool(user and user.is_authenticated and self.owner_id == user.id)


class BusinessSettings(models.Model):
    """
    Ordering policy for one business: delivery fees, minimum order, payment
    method and currency. All amounts are integer minor units.
    """

    class DeliveryType(models.TextChoices):
        FLAT = "flat", "Flat fee"
        FREE = "free", "Free delivery"
        PER_KM = "per_km", "Distance based"
        DISABLED = "disabled", "No delivery"

    class DistanceRounding(models.TextChoices):
        ROUND = "round", "Round half up"
        CEIL = "ceil", "Round up"
        FLOOR = "floor", "Round down"

    class PaymentMethod(models.TextChoices):
        CASH = "cash", "Cash"
        BANK_TRANSFER = "bank_transfer", "Bank transfer"
        UPI = "upi", "UPI"
        CARD = "card", "Card"
        OTHER = "other", "Other"
        NONE = "none", "Not accepting orders"

    business = models.OneToOneField(
        Business,
        on_delete=models.CASCADE,
        related_name="settings",
    )

    # Delivery policy
    delivery_type = models.CharField(
        max_length=20,
        choices=DeliveryType.choices,
        default=DeliveryType.DISABLED,
    )
    delivery_fee_cents = models.PositiveIntegerField(default=0, help_text="Flat delivery fee")
    delivery_base_fee_cents = models.PositiveIntegerField(default=0, help_text="Per-km delivery: base fee")
    delivery_per_km_cents = models.PositiveIntegerField(default=0, help_text="Per-km delivery: fee per km")
    distance_rounding = models.CharField(
        max_length=10,
        choices=DistanceRounding.choices,
        default=DistanceRounding.ROUND,
    )
    min_order_free_delivery_cents = models.PositiveIntegerField(
        null=True,
        blank=True,
        help_text="Delivery is free when the subtotal reaches this amount",
    )

    # Order policy
    min_order_value_cents = models.PositiveIntegerField(default=0)
    auto_confirm_orders = models.BooleanField(default=False)

    # Payment
    payment_method = models.CharField(
        max_length=20,
        choices=PaymentMethod.choices,
        default=PaymentMethod.CASH,
    )
    payment_instructions = models.TextField(blank=True)
    currency = models.CharField(max_length=3, default="INR")

    # Notification preferences
    notify_seller_new_order = models.BooleanField(default=True)
    notify_customer_status = models.BooleanField(default=True)

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "business settings"
        verbose_name_plural = "business settings"

    def __str__(self):
        return f"Settings for {self.business}"

    @property
    def accepts_orders(self) -> bool:
        return self.payment_method != self.PaymentMethod.NONE

    @property
    def delivery_enabled(self) -> bool:
        return self.delivery_type != self.DeliveryType.DISABLED

    def clean(self):
        super().clean()
        if len(self.currency) != 3 or not self.currency.isalpha():
            raise ValidationError({"currency": "Currency must be a 3-letter ISO 4217 code."})
        self.currency = self.currency.upper()
