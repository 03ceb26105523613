from typing import Tuple
import logging

from django.db import transaction
from django.utils import timezone

from core_backend.exceptions import Forbidden
from orders.exceptions import InvalidTransition, OrderAlreadyTerminal, OrderNotFound
from orders.models import Order
from orders.signals import order_status_changed

logger = logging.getLogger(__name__)

Status = Order.OrderStatus


class OrderStatusService:
    """
    Order lifecycle state machine.

    pending -> confirmed -> preparing -> ready -> out_for_delivery -> fulfilled

    Pickup orders go straight from ready to fulfilled. Any non-terminal
    order may be cancelled. fulfilled and cancelled are terminal.
    """

    # Valid forward transition for each non-terminal status
    NEXT_STATUS = {
        Status.PENDING: Status.CONFIRMED,
        Status.CONFIRMED: Status.PREPARING,
        Status.PREPARING: Status.READY,
        Status.READY: Status.OUT_FOR_DELIVERY,
        Status.OUT_FOR_DELIVERY: Status.FULFILLED,
    }

    @staticmethod
    def allowed_targets(order: Order) -> Tuple[str, ...]:
        if order.is_terminal:
            return ()

        forward = OrderStatusService.NEXT_STATUS[order.order_status]
        if (
            order.order_status == Status.READY
            and order.delivery_type == Order.DeliveryType.PICKUP
        ):
            forward = Status.FULFILLED
        return (forward, Status.CANCELLED)

    @staticmethod
    @transaction.atomic
    def transition(order: Order, target_status: str, actor) -> Order:
        """
        Moves ``order`` to ``target_status`` on behalf of ``actor``.

        The order row is locked for the duration; timestamps for fulfilled
        and cancelled are stamped in the same write. The customer
        notification hook fires after commit and cannot undo the change.

        Raises:
            Forbidden: ``actor`` does not own the order's business.
            OrderAlreadyTerminal: the order is fulfilled or cancelled.
            InvalidTransition: ``target_status`` is not a direct successor.
        """
        try:
            locked = Order.objects.select_for_update(of=("self",)).select_related("business").get(pk=order.pk)
        except Order.DoesNotExist:
            raise OrderNotFound()

        if not locked.business.is_owned_by(actor):
            logger.warning(
                f"User {getattr(actor, 'id', None)} tried to move order {locked.order_number} to {target_status}"
            )
            raise Forbidden("You do not have permission to update this order")

        if locked.is_terminal:
            raise OrderAlreadyTerminal(locked.order_status)

        if target_status not in OrderStatusService.allowed_targets(locked):
            raise InvalidTransition(locked.order_status, target_status)

        previous_status = locked.order_status
        locked.order_status = target_status
        update_fields = ["order_status", "updated_at"]

        now = timezone.now()
        if target_status == Status.FULFILLED:
            locked.fulfilled_at = now
            update_fields.append("fulfilled_at")
        elif target_status == Status.CANCELLED:
            locked.cancelled_at = now
            update_fields.append("cancelled_at")

        locked.save(update_fields=update_fields)
        logger.info(
            f"Order {locked.order_number} moved {previous_status} -> {target_status} by user {actor.id}"
        )

        def emit_status_changed():
            """Deferred signal emission - runs after transaction commits"""
            responses = order_status_changed.send_robust(
                sender=OrderStatusService,
                order=locked,
                previous_status=previous_status,
                status=target_status,
            )
            for handler, response in responses:
                if isinstance(response, Exception):
                    logger.error(
                        f"Status side effect {getattr(handler, '__name__', handler)} failed for order {locked.order_number}: {response}",
                        exc_info=response,
                    )

        transaction.on_commit(emit_status_changed)
        return locked
