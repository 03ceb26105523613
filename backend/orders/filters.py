import django_filters

from core_backend.base.filters import BaseFilterSet, FlexibleDateTimeFilter
from .models import Order


class OrderFilter(BaseFilterSet):
    """
    Owner-side order listing filters.

    ``created_at__lte=2025-11-11`` includes the whole of that day.
    """

    order_status = django_filters.MultipleChoiceFilter(choices=Order.OrderStatus.choices)
    created_at__gte = FlexibleDateTimeFilter(field_name='created_at', lookup_expr='gte')
    created_at__lte = FlexibleDateTimeFilter(field_name='created_at', lookup_expr='lte')

    class Meta:
        model = Order
        fields = {
            'payment_status': ['exact'],
            'delivery_type': ['exact'],
        }
