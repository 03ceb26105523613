import logging

from business.services import BusinessAccessService
from .exceptions import PaymentNotCollectable
from .factories import PaymentGatewayFactory
from .strategies import ChargeResult

logger = logging.getLogger(__name__)


class PaymentService:
    """
    Hands an order's total to its payment gateway and records the outcome.

    Amounts are never recomputed here; the gateway is charged exactly the
    ``total_cents`` stored when the order was placed.
    """

    COLLECTABLE_STATUSES = ("unpaid", "failed")

    @staticmethod
    def collect(order, actor) -> ChargeResult:
        from orders.services import OrderService

        BusinessAccessService.ensure_owner(actor, order.business)

        if order.payment_status not in PaymentService.COLLECTABLE_STATUSES:
            raise PaymentNotCollectable(details={"payment_status": order.payment_status})

        gateway = PaymentGatewayFactory.get_gateway(order.payment_method)
        result = gateway.charge(order.total_cents, order.payment_method)

        OrderService.update_payment_status(
            order,
            result.status,
            actor,
            payment_reference=result.reference,
        )
        logger.info(f"Collected payment for order {order.order_number}: {result.status}")
        return result
