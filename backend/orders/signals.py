from django.dispatch import Signal, receiver
import logging

logger = logging.getLogger(__name__)

# Sent after an order transaction commits. kwargs: order
order_placed = Signal()

# Sent after a status transition commits. kwargs: order, previous_status, status
order_status_changed = Signal()


@receiver(order_placed)
def queue_order_analytics(sender, order, **kwargs):
    """
    Queues the daily analytics increment for a freshly committed order.

    Queueing failures are logged only; the order is already committed.
    """
    try:
        from .tasks import record_order_analytics

        record_order_analytics.delay(str(order.id))
        logger.debug(f"Queued analytics for order {order.order_number}")
    except Exception as e:
        logger.error(f"Failed to queue analytics task for order {order.id}: {e}", exc_info=True)
