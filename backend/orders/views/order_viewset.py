from rest_framework import status
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.request import Request
from rest_framework.response import Response
import logging

from business.services import BusinessAccessService
from core_backend.base import BaseViewSet
from orders.filters import OrderFilter
from orders.models import Order
from orders.permissions import PublicCheckoutOrOwner
from orders.serializers import (
    OrderCreateSerializer,
    OrderSerializer,
    OrderSummarySerializer,
)
from orders.services import OrderPlacementService, OrderService
from .payment_actions import PaymentActionsMixin
from .status_actions import StatusActionsMixin

logger = logging.getLogger(__name__)


class OrderViewSet(
    StatusActionsMixin,
    PaymentActionsMixin,
    BaseViewSet,
):
    """
    Public checkout plus the owner's order desk.

    Placing an order and looking one up by id are open to anyone; listing,
    transitions, payment bookkeeping and the summary need the business owner.
    Orders are never edited or deleted through the API.
    """

    queryset = Order.objects.all()
    serializer_class = OrderSerializer
    filterset_class = OrderFilter
    permission_classes = [PublicCheckoutOrOwner]
    search_fields = ["order_number", "customer_name", "customer_phone"]
    ordering_fields = ["created_at", "total_cents", "order_number"]
    http_method_names = ["get", "post", "head", "options"]

    def get_business_queryset(self):
        if self.action == "list":
            business_id = self.request.query_params.get("business")
            if not business_id:
                raise ValidationError({"business": "This query parameter is required."})
            return OrderService.get_business_orders(self.request.user, business_id)
        return Order.objects.select_related("business", "coupon").prefetch_related("items")

    def get_serializer_class(self):
        if self.action == "create":
            return OrderCreateSerializer
        return OrderSerializer

    def create(self, request: Request, *args, **kwargs) -> Response:
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        customer = request.user if request.user.is_authenticated else None
        order = OrderPlacementService.place_order(serializer.validated_data, customer=customer)

        return Response(
            OrderSerializer(OrderService.get_order(order.pk)).data,
            status=status.HTTP_201_CREATED,
        )

    def retrieve(self, request: Request, *args, **kwargs) -> Response:
        order = OrderService.get_order(kwargs.get(self.lookup_field))
        return Response(OrderSerializer(order).data)

    @action(detail=False, methods=["get"])
    def summary(self, request: Request) -> Response:
        business = BusinessAccessService.get_owned_business(
            request.user, request.query_params.get("business")
        )
        summary = OrderService.get_order_summary(business)
        return Response(OrderSummarySerializer(summary).data)
