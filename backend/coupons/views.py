import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound, ValidationError
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response

from business.models import Business
from business.services import BusinessAccessService
from core_backend.base import BaseViewSet, IsBusinessOwner
from .filters import CouponFilter, PromotionFilter
from .models import AutomaticPromotion, Coupon
from .serializers import (
    CouponAnalyticsSerializer,
    CouponCreateSerializer,
    CouponSerializer,
    CouponUpdateSerializer,
    CouponValidateSerializer,
    PromotionCheckSerializer,
    PromotionCreateSerializer,
    PromotionSerializer,
    PromotionUpdateSerializer,
    PublicCouponSerializer,
    PublicPromotionSerializer,
)
from .services import CouponService, CouponValidationService, PromotionService, customer_identifier_for

logger = logging.getLogger(__name__)


def get_public_business(business_id) -> Business:
    try:
        return Business.objects.active().get(id=business_id)
    except (Business.DoesNotExist, DjangoValidationError, ValueError):
        raise NotFound("Business not found.")


class CouponViewSet(BaseViewSet):
    """
    Coupon management for business owners.

    Coupons are never deleted; owners archive them so the redemption ledger
    keeps pointing at a real row.
    """

    queryset = Coupon.objects.all()
    serializer_class = CouponSerializer
    filterset_class = CouponFilter
    search_fields = ['code', 'name']
    ordering_fields = ['created_at', 'valid_until', 'total_usage_count']
    permission_classes = [IsBusinessOwner]
    http_method_names = ['get', 'post', 'patch', 'head', 'options']

    PUBLIC_ACTIONS = ('public', 'validate_code')

    def get_permissions(self):
        if self.action in self.PUBLIC_ACTIONS:
            return [AllowAny()]
        return super().get_permissions()

    def get_business_queryset(self):
        return Coupon.objects.owned_by(self.request.user).prefetch_related('dishes')

    def get_serializer_class(self):
        if self.action == 'create':
            return CouponCreateSerializer
        if self.action == 'partial_update':
            return CouponUpdateSerializer
        return CouponSerializer

    def create(self, request: Request, *args, **kwargs) -> Response:
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = dict(serializer.validated_data)
        business = BusinessAccessService.ensure_owner(request.user, data.pop('business'))
        coupon = CouponService.create_coupon(business, data)

        return Response(CouponSerializer(coupon).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request: Request, *args, **kwargs) -> Response:
        coupon = self.get_object()
        serializer = self.get_serializer(coupon, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        coupon = CouponService.update_coupon(coupon, serializer.validated_data)
        return Response(CouponSerializer(coupon).data)

    @action(detail=True, methods=['post'])
    def archive(self, request: Request, pk=None) -> Response:
        coupon = CouponService.archive_coupon(self.get_object())
        logger.info(f"Coupon {coupon.code} archived by user {request.user.id}")
        return Response(CouponSerializer(coupon).data)

    @action(detail=True, methods=['get'])
    def analytics(self, request: Request, pk=None) -> Response:
        analytics = CouponService.get_coupon_analytics(self.get_object())
        return Response(CouponAnalyticsSerializer(analytics).data)

    @action(detail=False, methods=['get'])
    def stats(self, request: Request) -> Response:
        business = BusinessAccessService.get_owned_business(
            request.user, request.query_params.get('business')
        )
        return Response(CouponService.get_business_coupon_stats(business))

    @action(detail=False, methods=['get'])
    def public(self, request: Request) -> Response:
        """Active public coupons of a business, for its menu page."""
        business = get_public_business(request.query_params.get('business'))
        coupons = CouponService.get_public_coupons(business)
        return Response(PublicCouponSerializer(coupons, many=True).data)

    @action(detail=False, methods=['post'], url_path='validate')
    def validate_code(self, request: Request) -> Response:
        """
        Preview a coupon against a cart.

        Returns 200 with ``valid: false`` for an unusable coupon; that is a
        normal checkout outcome, not a request error.
        """
        serializer = CouponValidateSerializer(data=request.data)
        if not serializer.is_valid():
            raise ValidationError(serializer.errors)
        data = serializer.validated_data

        business = get_public_business(data['business'])
        currency = getattr(getattr(business, 'settings', None), 'currency', 'INR')
        result = CouponValidationService.validate(
            code=data['code'],
            customer_identifier=customer_identifier_for(request.user, data.get('customer_phone', '')),
            business=business,
            order_subtotal_cents=data['order_subtotal_cents'],
            dish_ids=data['dish_ids'],
            currency=currency,
        )
        return Response(result.as_dict())


class PromotionViewSet(BaseViewSet):
    """
    Automatic promotions for business owners, plus the public listing and
    cart check used by the storefront.

    Promotions are switched off with ``is_active`` rather than deleted.
    """

    queryset = AutomaticPromotion.objects.all()
    serializer_class = PromotionSerializer
    filterset_class = PromotionFilter
    search_fields = ['name']
    ordering_fields = ['created_at', 'valid_until']
    permission_classes = [IsBusinessOwner]
    http_method_names = ['get', 'post', 'patch', 'head', 'options']

    PUBLIC_ACTIONS = ('public', 'check')

    def get_permissions(self):
        if self.action in self.PUBLIC_ACTIONS:
            return [AllowAny()]
        return super().get_permissions()

    def get_business_queryset(self):
        return AutomaticPromotion.objects.owned_by(self.request.user)

    def get_serializer_class(self):
        if self.action == 'create':
            return PromotionCreateSerializer
        if self.action == 'partial_update':
            return PromotionUpdateSerializer
        return PromotionSerializer

    def create(self, request: Request, *args, **kwargs) -> Response:
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = dict(serializer.validated_data)
        business = BusinessAccessService.ensure_owner(request.user, data.pop('business'))
        promotion = PromotionService.create_promotion(business, data)

        return Response(PromotionSerializer(promotion).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request: Request, *args, **kwargs) -> Response:
        promotion = self.get_object()
        serializer = self.get_serializer(promotion, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        promotion = PromotionService.update_promotion(promotion, serializer.validated_data)
        return Response(PromotionSerializer(promotion).data)

    @action(detail=False, methods=['get'])
    def public(self, request: Request) -> Response:
        business = get_public_business(request.query_params.get('business'))
        promotions = PromotionService.get_active_promotions(business).filter(is_public=True)
        return Response(PublicPromotionSerializer(promotions, many=True).data)

    @action(detail=False, methods=['post'])
    def check(self, request: Request) -> Response:
        """Promotions a cart of ``order_value_cents`` qualifies for right now."""
        serializer = PromotionCheckSerializer(data=request.data)
        if not serializer.is_valid():
            raise ValidationError(serializer.errors)
        data = serializer.validated_data

        business = get_public_business(data['business'])
        promotions = PromotionService.check_promotions(business, data['order_value_cents'])
        return Response(PublicPromotionSerializer(promotions, many=True).data)
