"""
Orders services package.

- OrderPlacementService: the transactional checkout pipeline
- OrderStatusService: the order lifecycle state machine
- OrderService: lookups, owner reporting and payment status bookkeeping
"""

from .order_service import OrderService
from .placement_service import OrderPlacementContext, OrderPlacementService
from .status_service import OrderStatusService

__all__ = [
    'OrderService',
    'OrderPlacementContext',
    'OrderPlacementService',
    'OrderStatusService',
]
