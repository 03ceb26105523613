from celery import shared_task
from django.db import IntegrityError, transaction
from django.db.models import F
import logging

logger = logging.getLogger(__name__)


@shared_task(bind=True, max_retries=5)
def record_order_analytics(self, order_id):
    """
    Adds a committed order to its business's daily counters.

    Cancelled orders are still counted; the counters describe what was
    placed, not what was fulfilled.

    Args:
        order_id: UUID of the committed order

    Returns:
        dict: Status and the day that was bumped
    """
    from .models import Order, OrderDailyStats

    try:
        order = Order.objects.get(id=order_id)
    except Order.DoesNotExist:
        logger.error(f"Order {order_id} not found for analytics")
        return {"status": "failed", "error": "Order not found", "order_id": str(order_id)}

    day = order.created_at.date()
    try:
        with transaction.atomic():
            updated = OrderDailyStats.objects.filter(business_id=order.business_id, date=day).update(
                order_count=F("order_count") + 1,
                gross_cents=F("gross_cents") + order.total_cents,
            )
            if not updated:
                # First order of the day; a concurrent first insert lands in IntegrityError and retries.
                OrderDailyStats.objects.create(
                    business_id=order.business_id,
                    date=day,
                    order_count=1,
                    gross_cents=order.total_cents,
                )
    except IntegrityError as exc:
        logger.warning(f"Daily stats row for {order.business_id} on {day} raced, retrying")
        raise self.retry(exc=exc, countdown=1)
    except Exception as exc:
        logger.error(f"Failed to record analytics for order {order_id}: {exc}")
        raise self.retry(exc=exc, countdown=60 * (2 ** self.request.retries))

    logger.info(f"Recorded analytics for order {order.order_number} on {day}")
    return {"status": "completed", "order_id": str(order_id), "date": day.isoformat()}
