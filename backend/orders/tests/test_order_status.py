"""
Order Lifecycle Tests

Tests for the order state machine: the forward chain, the pickup shortcut,
cancellation, terminal states and owner-only access.
"""
import pytest

from core_backend.exceptions import Forbidden
from orders.exceptions import InvalidTransition, OrderAlreadyTerminal
from orders.models import Order
from orders.services import OrderStatusService

Status = Order.OrderStatus


def advance(order, owner, *statuses):
    for status in statuses:
        order = OrderStatusService.transition(order, status, owner)
    return order


@pytest.mark.django_db
class TestForwardTransitions:
    def test_delivery_order_full_chain(self, delivery_order, owner):
        """
        CRITICAL: A delivery order walks every status in order.

        Expected: pending -> confirmed -> preparing -> ready ->
        out_for_delivery -> fulfilled, with fulfilled_at stamped at the end
        """
        order = advance(
            delivery_order, owner,
            Status.CONFIRMED, Status.PREPARING, Status.READY, Status.OUT_FOR_DELIVERY, Status.FULFILLED,
        )

        order.refresh_from_db()
        assert order.order_status == Status.FULFILLED
        assert order.fulfilled_at is not None
        assert order.cancelled_at is None

    def test_pickup_goes_from_ready_to_fulfilled(self, pickup_order, owner):
        order = advance(pickup_order, owner, Status.CONFIRMED, Status.PREPARING, Status.READY)

        assert OrderStatusService.allowed_targets(order) == (Status.FULFILLED, Status.CANCELLED)
        order = OrderStatusService.transition(order, Status.FULFILLED, owner)
        assert order.order_status == Status.FULFILLED

    def test_pickup_cannot_go_out_for_delivery(self, pickup_order, owner):
        order = advance(pickup_order, owner, Status.CONFIRMED, Status.PREPARING, Status.READY)

        with pytest.raises(InvalidTransition):
            OrderStatusService.transition(order, Status.OUT_FOR_DELIVERY, owner)

    def test_delivery_cannot_skip_out_for_delivery(self, delivery_order, owner):
        order = advance(delivery_order, owner, Status.CONFIRMED, Status.PREPARING, Status.READY)

        with pytest.raises(InvalidTransition):
            OrderStatusService.transition(order, Status.FULFILLED, owner)

    def test_skipping_a_step_is_rejected(self, pickup_order, owner):
        """
        Scenario:
        - Order is pending
        - Owner jumps straight to preparing
        - Expected: INVALID_TRANSITION, status unchanged
        """
        with pytest.raises(InvalidTransition) as exc_info:
            OrderStatusService.transition(pickup_order, Status.PREPARING, owner)

        assert exc_info.value.code == 'INVALID_TRANSITION'
        assert exc_info.value.details == {'current_status': 'pending', 'target_status': 'preparing'}
        pickup_order.refresh_from_db()
        assert pickup_order.order_status == Status.PENDING

    def test_moving_backwards_is_rejected(self, pickup_order, owner):
        order = advance(pickup_order, owner, Status.CONFIRMED, Status.PREPARING)

        with pytest.raises(InvalidTransition):
            OrderStatusService.transition(order, Status.CONFIRMED, owner)


@pytest.mark.django_db
class TestCancellation:
    @pytest.mark.parametrize('steps', [
        (),
        (Status.CONFIRMED,),
        (Status.CONFIRMED, Status.PREPARING),
        (Status.CONFIRMED, Status.PREPARING, Status.READY),
    ])
    def test_any_open_order_can_be_cancelled(self, pickup_order, owner, steps):
        order = advance(pickup_order, owner, *steps)

        order = OrderStatusService.transition(order, Status.CANCELLED, owner)

        order.refresh_from_db()
        assert order.order_status == Status.CANCELLED
        assert order.cancelled_at is not None

    def test_cancelled_is_terminal(self, pickup_order, owner):
        order = OrderStatusService.transition(pickup_order, Status.CANCELLED, owner)

        with pytest.raises(OrderAlreadyTerminal) as exc_info:
            OrderStatusService.transition(order, Status.CONFIRMED, owner)
        assert exc_info.value.code == 'ORDER_ALREADY_TERMINAL'

    def test_fulfilled_cannot_be_cancelled(self, pickup_order, owner):
        order = advance(pickup_order, owner, Status.CONFIRMED, Status.PREPARING, Status.READY, Status.FULFILLED)

        with pytest.raises(OrderAlreadyTerminal):
            OrderStatusService.transition(order, Status.CANCELLED, owner)
        assert OrderStatusService.allowed_targets(order) == ()


@pytest.mark.django_db
class TestTransitionAccess:
    def test_other_owner_is_forbidden(self, pickup_order, other_owner):
        with pytest.raises(Forbidden):
            OrderStatusService.transition(pickup_order, Status.CONFIRMED, other_owner)

        pickup_order.refresh_from_db()
        assert pickup_order.order_status == Status.PENDING

    def test_amounts_do_not_change(self, pickup_order, owner):
        order = advance(pickup_order, owner, Status.CONFIRMED, Status.PREPARING)

        order.refresh_from_db()
        assert order.total_cents == pickup_order.total_cents
        assert order.subtotal_cents == pickup_order.subtotal_cents
