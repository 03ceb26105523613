from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
import logging

from orders.serializers import OrderSerializer, OrderTransitionSerializer
from orders.services import OrderService, OrderStatusService

logger = logging.getLogger(__name__)


class StatusActionsMixin:
    """
    Mixin for order status transition actions

    This mixin provides action methods for OrderViewSet.
    """

    @action(detail=True, methods=["post"])
    def transition(self, request: Request, pk=None) -> Response:
        """
        Moves the order one step along its lifecycle, or cancels it.

        Illegal moves come back as 409 from the exception handler; a caller
        who does not own the business gets 403.
        """
        serializer = OrderTransitionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order = OrderService.get_order(pk)
        order = OrderStatusService.transition(order, serializer.validated_data["order_status"], request.user)
        return Response(OrderSerializer(OrderService.get_order(order.pk)).data)
