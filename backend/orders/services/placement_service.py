from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Optional
import logging
import uuid

from django.db import transaction
from django.utils import timezone

from business.models import BusinessSettings
from coupons.exceptions import CouponError
from coupons.models import Coupon
from coupons.services import (
    CouponUsageRecorder,
    CouponValidationService,
    customer_identifier_for,
)
from menus.models import Menu
from menus.services import (
    CartLine,
    DishAvailabilityValidator,
    DishSnapshot,
    MenuAvailabilityGate,
)
from orders.calculators import PricingBreakdown, PricingCalculator
from orders.exceptions import OrdersNotAccepted, SettingsNotFound
from orders.models import Order, OrderItem
from orders.signals import order_placed

logger = logging.getLogger(__name__)


@dataclass
class OrderPlacementContext:
    """
    Everything resolved while placing one order.

    Built step by step inside the order transaction and handed from one
    step to the next; nothing here outlives the transaction.
    """

    data: dict
    customer: Optional[object] = None
    now: Optional[object] = None
    menu: Optional[Menu] = None
    settings: Optional[BusinessSettings] = None
    lines: List[CartLine] = field(default_factory=list)
    snapshot: Dict[uuid.UUID, DishSnapshot] = field(default_factory=dict)
    coupon: Optional[Coupon] = None
    customer_identifier: str = ""
    discount_cents: int = 0
    pricing: Optional[PricingBreakdown] = None

    @property
    def business(self):
        return self.menu.business


class OrderPlacementService:
    """
    The only way an order gets written.

    Menu, cart, coupon and pricing checks run inside one transaction; the
    order, its items and the coupon redemption are written together or not
    at all. Notifications and analytics are handed off after commit.
    """

    @staticmethod
    @transaction.atomic
    def place_order(data: dict, customer=None, now=None) -> Order:
        """
        Places an order from validated checkout input.

        Args:
            data: ``menu_id``, ``items`` ([{dish_id, quantity}]), customer
                fields, ``delivery_type`` and optional ``delivery_address``,
                ``delivery_distance_km``, ``payment_method``, ``coupon_code``,
                ``notes``.
            customer: Authenticated user placing the order, if any.
            now: Clock override for availability windows.

        Raises:
            OrderingError subclasses for every menu, cart, coupon and policy
            failure. Nothing is written when any of them is raised.
        """
        ctx = OrderPlacementContext(data=data, customer=customer, now=now or timezone.now())

        OrderPlacementService._resolve_menu(ctx)
        OrderPlacementService._load_settings(ctx)
        OrderPlacementService._resolve_cart(ctx)
        OrderPlacementService._apply_coupon(ctx)
        OrderPlacementService._price(ctx)
        OrderPlacementService._revalidate(ctx)
        order = OrderPlacementService._persist(ctx)

        OrderPlacementService._emit_after_commit(order)
        return order

    # --- steps ---

    @staticmethod
    def _resolve_menu(ctx: OrderPlacementContext) -> None:
        ctx.menu = MenuAvailabilityGate.resolve(ctx.data["menu_id"], now=ctx.now)

    @staticmethod
    def _load_settings(ctx: OrderPlacementContext) -> None:
        settings = BusinessSettings.objects.filter(business=ctx.business).first()
        if settings is None:
            logger.error(f"Business {ctx.business.id} has no settings; rejecting order")
            raise SettingsNotFound()
        if not settings.accepts_orders:
            raise OrdersNotAccepted()
        ctx.settings = settings

    @staticmethod
    def _resolve_cart(ctx: OrderPlacementContext) -> None:
        ctx.lines = DishAvailabilityValidator.normalize_cart(ctx.data.get("items"))
        ctx.snapshot = DishAvailabilityValidator.resolve(ctx.business, ctx.lines)

    @staticmethod
    def _apply_coupon(ctx: OrderPlacementContext) -> None:
        code = (ctx.data.get("coupon_code") or "").strip()
        if not code:
            return

        ctx.customer_identifier = customer_identifier_for(ctx.customer, ctx.data.get("customer_phone", ""))
        subtotal_cents = PricingCalculator(ctx.settings).calculate_subtotal(ctx.lines, ctx.snapshot)

        # Locks the coupon row until commit so concurrent redemptions queue up.
        result = CouponValidationService.validate(
            code=code,
            customer_identifier=ctx.customer_identifier,
            business=ctx.business,
            order_subtotal_cents=subtotal_cents,
            dish_ids=[line.dish_id for line in ctx.lines],
            currency=ctx.settings.currency,
            lock=True,
            now=ctx.now,
        )
        if not result.valid:
            logger.info(f"Coupon {code} rejected for business {ctx.business.id}: {result.error}")
            raise CouponError(result.error, details={"coupon_code": Coupon.normalize_code(code)})

        ctx.coupon = result.coupon
        ctx.discount_cents = result.discount_cents

    @staticmethod
    def _price(ctx: OrderPlacementContext) -> None:
        distance = ctx.data.get("delivery_distance_km")
        ctx.pricing = PricingCalculator(ctx.settings).calculate(
            ctx.lines,
            ctx.snapshot,
            ctx.data["delivery_type"],
            distance_km=Decimal(distance) if distance is not None else None,
            discount_cents=ctx.discount_cents,
        )

    @staticmethod
    def _revalidate(ctx: OrderPlacementContext) -> None:
        """Re-check menu and dishes under row locks right before writing."""
        MenuAvailabilityGate.resolve(ctx.menu.id, business=ctx.business, lock=True, now=ctx.now)
        DishAvailabilityValidator.revalidate(ctx.business, ctx.snapshot)

    @staticmethod
    def _initial_status(settings: BusinessSettings) -> str:
        if settings.auto_confirm_orders:
            return Order.OrderStatus.CONFIRMED
        return Order.OrderStatus.PENDING

    @staticmethod
    def _persist(ctx: OrderPlacementContext) -> Order:
        data = ctx.data
        pricing = ctx.pricing

        order = Order.objects.create(
            business=ctx.business,
            menu=ctx.menu,
            customer=ctx.customer if getattr(ctx.customer, "is_authenticated", False) else None,
            customer_name=data["customer_name"],
            customer_phone=data["customer_phone"],
            customer_email=data.get("customer_email") or "",
            delivery_type=data["delivery_type"],
            delivery_address=data.get("delivery_address") or "",
            delivery_distance_km=data.get("delivery_distance_km"),
            notes=data.get("notes") or "",
            currency=ctx.settings.currency,
            subtotal_cents=pricing.subtotal_cents,
            discount_cents=pricing.discount_cents,
            delivery_fee_cents=pricing.delivery_fee_cents,
            total_cents=pricing.total_cents,
            coupon=ctx.coupon,
            payment_method=data.get("payment_method") or ctx.settings.payment_method,
            payment_status=Order.PaymentStatus.UNPAID,
            order_status=OrderPlacementService._initial_status(ctx.settings),
        )

        OrderItem.objects.bulk_create([
            OrderItem(
                order=order,
                dish_id=line.dish_id,
                dish_name=ctx.snapshot[line.dish_id].name,
                quantity=line.quantity,
                price_at_purchase_cents=ctx.snapshot[line.dish_id].price_cents,
            )
            for line in ctx.lines
        ])

        if ctx.coupon is not None:
            CouponUsageRecorder.record(
                coupon=ctx.coupon,
                order=order,
                customer_identifier=ctx.customer_identifier,
                discount_cents=pricing.discount_cents,
            )

        logger.info(
            f"Order {order.order_number} placed for business {order.business_id}: "
            f"subtotal={pricing.subtotal_cents} discount={pricing.discount_cents} "
            f"delivery={pricing.delivery_fee_cents} total={pricing.total_cents}"
        )
        return order

    @staticmethod
    def _emit_after_commit(order: Order) -> None:
        def emit_order_placed():
            """Deferred signal emission - runs after transaction commits"""
            responses = order_placed.send_robust(sender=OrderPlacementService, order=order)
            for handler, response in responses:
                if isinstance(response, Exception):
                    # The order is committed; side effects retry on their own.
                    logger.error(
                        f"Side effect {getattr(handler, '__name__', handler)} failed for order {order.order_number}: {response}",
                        exc_info=response,
                    )

        transaction.on_commit(emit_order_placed)
