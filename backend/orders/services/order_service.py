from typing import Optional
import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Count, Sum

from business.services import BusinessAccessService
from core_backend.exceptions import Forbidden
from orders.exceptions import OrderNotFound
from orders.models import Order

logger = logging.getLogger(__name__)


class OrderService:
    """Order lookups, owner reporting and payment status bookkeeping."""

    @staticmethod
    def get_order(order_id) -> Order:
        try:
            return (
                Order.objects.select_related("business", "menu", "coupon")
                .prefetch_related("items")
                .get(id=order_id)
            )
        except (Order.DoesNotExist, ValidationError, ValueError):
            raise OrderNotFound()

    @staticmethod
    def get_business_orders(user, business_id, status: Optional[str] = None, start_date=None, end_date=None):
        """
        Orders of one business, newest first. Only the owner may list them.
        """
        business = BusinessAccessService.get_owned_business(user, business_id)

        queryset = Order.objects.for_business(business).prefetch_related("items")
        if status:
            queryset = queryset.filter(order_status=status)
        if start_date:
            queryset = queryset.filter(created_at__gte=start_date)
        if end_date:
            queryset = queryset.filter(created_at__lte=end_date)
        return queryset.order_by("-created_at")

    @staticmethod
    def get_order_summary(business) -> dict:
        """
        Totals across a business's orders.

        Cancelled orders count towards ``orders_by_status`` but not towards
        sales. Average order value is integer minor units, rounded down.
        """
        orders = Order.objects.for_business(business)

        by_status = {status: 0 for status in Order.OrderStatus.values}
        for row in orders.values("order_status").annotate(count=Count("id")):
            by_status[row["order_status"]] = row["count"]

        sales = orders.exclude(order_status=Order.OrderStatus.CANCELLED).aggregate(
            count=Count("id"),
            total=Sum("total_cents"),
        )
        sales_count = sales["count"] or 0
        total_sales_cents = sales["total"] or 0

        return {
            "total_orders": sum(by_status.values()),
            "total_sales_cents": total_sales_cents,
            "average_order_value_cents": total_sales_cents // sales_count if sales_count else 0,
            "orders_by_status": by_status,
        }

    @staticmethod
    @transaction.atomic
    def update_payment_status(order: Order, payment_status: str, actor, payment_reference: str = "") -> Order:
        """
        Records what the payment collaborator reported for an order.

        Amounts are never touched; only ``payment_status`` and the optional
        gateway reference change.
        """
        locked = Order.objects.select_for_update(of=("self",)).select_related("business").get(pk=order.pk)
        if not locked.business.is_owned_by(actor):
            raise Forbidden("You do not have permission to update this order")

        if payment_status not in Order.PaymentStatus.values:
            raise ValueError(f"'{payment_status}' is not a valid payment status.")

        previous = locked.payment_status
        locked.payment_status = payment_status
        update_fields = ["payment_status", "updated_at"]
        if payment_reference:
            locked.payment_reference = payment_reference
            update_fields.append("payment_reference")

        locked.save(update_fields=update_fields)
        logger.info(f"Order {locked.order_number} payment status {previous} -> {payment_status}")
        return locked
