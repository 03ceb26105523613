from rest_framework import viewsets, filters
from django_filters.rest_framework import DjangoFilterBackend

from core_backend.pagination import StandardPagination


class BaseViewSet(viewsets.ModelViewSet):
    """
    Base ViewSet that provides standard configuration for all ModelViewSets.

    Features:
    - Standard pagination, filtering, search and ordering
    - Business scoping through ``get_business_queryset``

    Usage:
        class CouponViewSet(BaseViewSet):
            serializer_class = CouponSerializer

            def get_business_queryset(self):
                return Coupon.objects.owned_by(self.request.user)
    """

    pagination_class = StandardPagination

    filter_backends = [
        DjangoFilterBackend,
        filters.SearchFilter,
        filters.OrderingFilter,
    ]

    ordering = ['-created_at']

    def get_business_queryset(self):
        """Child classes narrow the queryset to the businesses the caller may see."""
        return self.queryset.all()

    def get_queryset(self):
        # Re-evaluated per request so ownership scoping uses the current user.
        return self.get_business_queryset()

