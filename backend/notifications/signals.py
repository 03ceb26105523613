from django.dispatch import receiver
import logging

from orders.signals import order_placed, order_status_changed

logger = logging.getLogger(__name__)


def _business_settings(order):
    from business.models import BusinessSettings

    return BusinessSettings.objects.filter(business_id=order.business_id).first()


@receiver(order_placed)
def handle_order_placed(sender, order, **kwargs):
    """
    Queues the seller's new-order email, plus a confirmation to the customer
    when the order was auto-confirmed at placement.
    """
    from .tasks import notify_customer_order_status, notify_seller_new_order

    try:
        settings = _business_settings(order)
        if settings is None:
            return

        if settings.notify_seller_new_order:
            notify_seller_new_order.delay(str(order.id))
        if settings.notify_customer_status and order.order_status == order.OrderStatus.CONFIRMED:
            notify_customer_order_status.delay(str(order.id), order.order_status)
    except Exception as e:
        logger.error(f"Failed to queue notifications for order {order.order_number}: {e}", exc_info=True)


@receiver(order_status_changed)
def handle_order_status_changed(sender, order, status, **kwargs):
    from .tasks import notify_customer_order_status

    try:
        settings = _business_settings(order)
        if settings is None or not settings.notify_customer_status:
            return

        notify_customer_order_status.delay(str(order.id), status)
    except Exception as e:
        logger.error(
            f"Failed to queue status notification for order {order.order_number}: {e}", exc_info=True
        )
