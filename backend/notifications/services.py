from django.conf import settings
from django.core.mail import send_mail
from django.template.loader import render_to_string
import logging

from payments.money import format_money

logger = logging.getLogger(__name__)


class EmailService:
    def __init__(self):
        from_email_address = getattr(settings, "DEFAULT_FROM_EMAIL", "orders@localhost")
        self.default_from_email = from_email_address

    def send_email(self, recipient_list, subject, template_name, context):
        """
        Sends a plain-text email rendered from a Django template.

        Delivery errors propagate so the calling task can retry.

        Args:
            recipient_list (list): A list of recipient email addresses.
            subject (str): The subject of the email.
            template_name (str): Template path, e.g. 'notifications/seller_new_order.txt'.
            context (dict): Data to render in the template.
        """
        message = render_to_string(template_name, context)
        send_mail(
            subject,
            message,
            self.default_from_email,
            recipient_list,
            fail_silently=False,
        )


class OrderNotificationService(EmailService):
    """
    Order emails to the seller and to the customer.

    Both methods return False when there is nobody to send to, True once the
    mail backend accepted the message.
    """

    def notify_seller_new_order(self, order) -> bool:
        business = order.business
        recipient = business.contact_email or getattr(business.owner, "email", "")
        if not recipient:
            logger.warning(f"No seller email for business {business.id}; skipping new order {order.order_number}")
            return False

        self.send_email(
            [recipient],
            f"New order {order.order_number}",
            "notifications/seller_new_order.txt",
            self._order_context(order),
        )
        logger.info(f"Seller notified of new order {order.order_number}")
        return True

    def notify_customer_order_status(self, order, status) -> bool:
        if not order.customer_email:
            logger.info(f"Order {order.order_number} has no customer email; status {status} not sent")
            return False

        context = self._order_context(order)
        context["status"] = status
        context["status_label"] = order.OrderStatus(status).label.lower()

        business_settings = getattr(order.business, "settings", None)
        context["payment_instructions"] = (
            business_settings.payment_instructions
            if business_settings is not None and status == order.OrderStatus.CONFIRMED
            else ""
        )

        self.send_email(
            [order.customer_email],
            f"Your order {order.order_number} is {context['status_label']}",
            "notifications/customer_order_status.txt",
            context,
        )
        logger.info(f"Customer notified: order {order.order_number} is {status}")
        return True

    @staticmethod
    def _order_context(order) -> dict:
        currency = order.currency
        return {
            "order": order,
            "business": order.business,
            "items": [
                {
                    "name": item.dish_name,
                    "quantity": item.quantity,
                    "price": format_money(currency, item.price_at_purchase_cents),
                    "total": format_money(currency, item.line_total_cents),
                }
                for item in order.items.all()
            ],
            "subtotal": format_money(currency, order.subtotal_cents),
            "discount": format_money(currency, order.discount_cents),
            "delivery_fee": format_money(currency, order.delivery_fee_cents),
            "total": format_money(currency, order.total_cents),
        }
