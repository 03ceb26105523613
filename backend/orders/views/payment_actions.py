from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response

from orders.serializers import OrderSerializer, PaymentStatusSerializer
from orders.services import OrderService
from payments.services import PaymentService


class PaymentActionsMixin:
    """
    Mixin for payment bookkeeping actions on OrderViewSet.
    """

    @action(detail=True, methods=["post"], url_path="payment-status")
    def payment_status(self, request: Request, pk=None) -> Response:
        serializer = PaymentStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order = OrderService.update_payment_status(
            OrderService.get_order(pk),
            serializer.validated_data["payment_status"],
            request.user,
            payment_reference=serializer.validated_data["payment_reference"],
        )
        return Response(OrderSerializer(OrderService.get_order(order.pk)).data)

    @action(detail=True, methods=["post"], url_path="collect-payment")
    def collect_payment(self, request: Request, pk=None) -> Response:
        """Charges the stored order total through the order's payment method."""
        order = OrderService.get_order(pk)
        PaymentService.collect(order, request.user)
        return Response(OrderSerializer(OrderService.get_order(order.pk)).data)
