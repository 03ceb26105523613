from celery import shared_task
import logging

from .services import OrderNotificationService

logger = logging.getLogger(__name__)


def _load_order(order_id):
    from orders.models import Order

    return Order.objects.select_related("business", "business__owner", "business__settings").get(id=order_id)


@shared_task(bind=True, max_retries=5)
def notify_seller_new_order(self, order_id):
    """
    Emails the seller about a newly committed order.

    Retries with exponential backoff while the mail backend is failing.
    """
    from orders.models import Order

    try:
        order = _load_order(order_id)
        sent = OrderNotificationService().notify_seller_new_order(order)
        return {"status": "sent" if sent else "skipped", "order_id": str(order_id)}
    except Order.DoesNotExist:
        logger.error(f"Order {order_id} not found for seller notification")
        return {"status": "failed", "error": "Order not found", "order_id": str(order_id)}
    except Exception as exc:
        logger.error(f"Failed to notify seller for order {order_id}: {exc}")
        raise self.retry(exc=exc, countdown=60 * (2 ** self.request.retries))


@shared_task(bind=True, max_retries=5)
def notify_customer_order_status(self, order_id, status):
    """Emails the customer that their order moved to ``status``."""
    from orders.models import Order

    try:
        order = _load_order(order_id)
        sent = OrderNotificationService().notify_customer_order_status(order, status)
        return {"status": "sent" if sent else "skipped", "order_id": str(order_id), "order_status": status}
    except Order.DoesNotExist:
        logger.error(f"Order {order_id} not found for customer notification")
        return {"status": "failed", "error": "Order not found", "order_id": str(order_id)}
    except Exception as exc:
        logger.error(f"Failed to notify customer for order {order_id}: {exc}")
        raise self.retry(exc=exc, countdown=60 * (2 ** self.request.retries))
