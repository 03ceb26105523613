import re
import uuid

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import IntegrityError, models, transaction
from django.db.models.functions import Length
from django.utils.translation import gettext_lazy as _

from business.managers import BusinessScopedManager
from business.models import BusinessSettings


class Order(models.Model):
    """
    A customer's order against one business's published menu.

    Amounts are computed once when the order is placed and never recomputed;
    after creation only the lifecycle fields change (status, payment status
    and their timestamps).
    """

    class OrderStatus(models.TextChoices):
        PENDING = "pending", _("Pending")
        CONFIRMED = "confirmed", _("Confirmed")
        PREPARING = "preparing", _("Preparing")
        READY = "ready", _("Ready")
        OUT_FOR_DELIVERY = "out_for_delivery", _("Out for delivery")
        FULFILLED = "fulfilled", _("Fulfilled")
        CANCELLED = "cancelled", _("Cancelled")

    class PaymentStatus(models.TextChoices):
        UNPAID = "unpaid", _("Unpaid")
        PENDING = "pending", _("Pending")
        PAID = "paid", _("Paid")
        FAILED = "failed", _("Failed")
        REFUNDED = "refunded", _("Refunded")

    class DeliveryType(models.TextChoices):
        PICKUP = "pickup", _("Pickup")
        DELIVERY = "delivery", _("Delivery")

    TERMINAL_STATUSES = (OrderStatus.FULFILLED, OrderStatus.CANCELLED)

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order_number = models.CharField(max_length=20, blank=True)
    business = models.ForeignKey('business.Business', on_delete=models.PROTECT, related_name='orders')
    menu = models.ForeignKey('menus.Menu', on_delete=models.PROTECT, related_name='orders')

    # --- Customer ---
    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
    )
    customer_name = models.CharField(max_length=255)
    customer_phone = models.CharField(max_length=50)
    customer_email = models.EmailField(blank=True)

    # --- Fulfilment ---
    delivery_type = models.CharField(max_length=10, choices=DeliveryType.choices)
    delivery_address = models.TextField(blank=True)
    delivery_distance_km = models.DecimalField(max_digits=7, decimal_places=2, null=True, blank=True)
    notes = models.TextField(blank=True)

    # --- Amounts (minor units) ---
    currency = models.CharField(max_length=3, default="INR")
    subtotal_cents = models.PositiveIntegerField()
    discount_cents = models.PositiveIntegerField(default=0)
    delivery_fee_cents = models.PositiveIntegerField(default=0)
    total_cents = models.PositiveIntegerField()
    coupon = models.ForeignKey(
        'coupons.Coupon',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='orders',
    )

    # --- Payment ---
    payment_method = models.CharField(max_length=20, choices=BusinessSettings.PaymentMethod.choices)
    payment_status = models.CharField(
        max_length=20, choices=PaymentStatus.choices, default=PaymentStatus.UNPAID
    )
    payment_reference = models.CharField(max_length=255, blank=True)

    # --- Lifecycle ---
    order_status = models.CharField(
        max_length=20, choices=OrderStatus.choices, default=OrderStatus.PENDING
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    fulfilled_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    anonymized_at = models.DateTimeField(null=True, blank=True)

    objects = BusinessScopedManager()

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["business", "order_status"], name="order_business_status_idx"),
            models.Index(fields=["business", "created_at"], name="order_business_created_idx"),
            models.Index(fields=["customer_phone"], name="order_customer_phone_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["business", "order_number"],
                name="unique_order_number_per_business",
            ),
        ]

    def __str__(self):
        return f"Order {self.order_number or self.pk} - {self.order_status}"

    @property
    def is_terminal(self) -> bool:
        return self.order_status in self.TERMINAL_STATUSES

    @property
    def items_total_cents(self) -> int:
        return sum(item.line_total_cents for item in self.items.all())

    def save(self, *args, **kwargs):
        if self._state.adding and not self.order_number:
            self._save_with_order_number(*args, **kwargs)
            return
        super().save(*args, **kwargs)

    def _save_with_order_number(self, *args, **kwargs):
        max_retries = 5
        for _attempt in range(max_retries):
            self.order_number = self._generate_sequential_order_number()
            try:
                # Savepoint so a lost numbering race does not poison the
                # surrounding order transaction.
                with transaction.atomic():
                    super().save(*args, **kwargs)
                return
            except IntegrityError as exc:
                if "order_number" not in str(exc) and "unique_order_number_per_business" not in str(exc):
                    raise
        raise IntegrityError("Failed to generate a unique order number after multiple retries.")

    def _generate_sequential_order_number(self):
        """
        Next sequential number for this business: ORD-00001, ORD-00002, ...

        Each business numbers its orders independently.
        """
        prefix = f"{getattr(settings, 'ORDER_NUMBER_PREFIX', 'ORD')}-"
        last_order = (
            Order.objects.filter(business_id=self.business_id, order_number__startswith=prefix)
            # Numbers are zero-padded, so the longest then greatest string is the highest number.
            .annotate(number_length=Length("order_number"))
            .order_by("-number_length", "-order_number")
            .first()
        )

        next_number = 1
        if last_order:
            match = re.match(rf"^{re.escape(prefix)}(\d+)$", last_order.order_number)
            if match:
                next_number = int(match.group(1)) + 1

        return f"{prefix}{next_number:05d}"


class OrderItem(models.Model):
    """
    One cart line. ``price_at_purchase_cents`` is the dish price frozen when
    the order was placed; later catalog edits never touch it.
    """

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")
    dish = models.ForeignKey('menus.Dish', on_delete=models.PROTECT, related_name="order_items")
    dish_name = models.CharField(max_length=255)
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    price_at_purchase_cents = models.PositiveIntegerField()

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return f"{self.quantity} x {self.dish_name} in Order {self.order.order_number}"

    @property
    def line_total_cents(self) -> int:
        return self.price_at_purchase_cents * self.quantity

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("Order items are immutable once the order is placed.")
        super().save(*args, **kwargs)


class OrderDailyStats(models.Model):
    """Per-business, per-day order counters, bumped after each order commits."""

    business = models.ForeignKey('business.Business', on_delete=models.CASCADE, related_name='daily_order_stats')
    date = models.DateField()
    order_count = models.PositiveIntegerField(default=0)
    gross_cents = models.PositiveBigIntegerField(default=0)
    updated_at = models.DateTimeField(auto_now=True)

    objects = BusinessScopedManager()

    class Meta:
        ordering = ["-date"]
        constraints = [
            models.UniqueConstraint(fields=["business", "date"], name="unique_daily_stats_per_business"),
        ]

    def __str__(self):
        return f"{self.business_id} {self.date}: {self.order_count} orders"
