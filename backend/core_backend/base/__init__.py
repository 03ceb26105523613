"""
Core backend base components.

Foundational classes shared by every app so list endpoints, filtering and
ownership checks behave the same way everywhere.
"""

from .viewsets import BaseViewSet
from .serializers import BaseModelSerializer, TimestampedSerializer
from .filters import BaseFilterSet, FlexibleDateTimeFilter
from .permissions import IsBusinessOwner

__all__ = [
    # ViewSets
    'BaseViewSet',

    # Serializers
    'BaseModelSerializer',
    'TimestampedSerializer',

    # Filters
    'BaseFilterSet',
    'FlexibleDateTimeFilter',

    # Permissions
    'IsBusinessOwner',
]
