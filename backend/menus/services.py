from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping
import logging
import uuid

from django.core.exceptions import ValidationError
from django.db import transaction

from core_backend.utils.time_windows import WindowState, check_window
from .exceptions import (
    DishNotFound,
    DishesUnavailable,
    EmptyCart,
    InvalidQuantity,
    MenuExpired,
    MenuNotAvailable,
    MenuNotFound,
    MenuNotYetAvailable,
    PriceChanged,
)
from .models import Dish, Menu

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DishSnapshot:
    """Price and name of a dish as read during checkout."""

    dish_id: uuid.UUID
    name: str
    price_cents: int


@dataclass(frozen=True)
class CartLine:
    dish_id: uuid.UUID
    quantity: int


class MenuAvailabilityGate:
    """Decides whether a menu can take orders right now. Read-only."""

    @staticmethod
    def check(menu: Menu, now=None) -> Menu:
        if menu.status != Menu.Status.PUBLISHED:
            raise MenuNotAvailable()

        window = check_window(menu.start_date, menu.end_date, now)
        if window == WindowState.NOT_STARTED:
            raise MenuNotYetAvailable()
        if window == WindowState.ENDED:
            raise MenuExpired()
        return menu

    @staticmethod
    def resolve(menu_id, business=None, lock: bool = False, now=None) -> Menu:
        """
        Load the menu and run every availability check on it.

        With ``lock=True`` the menu row is read ``FOR UPDATE`` so a concurrent
        unpublish waits until the calling transaction commits.
        """
        queryset = Menu.objects.select_related("business")
        if business is not None:
            queryset = queryset.for_business(business)
        if lock:
            queryset = queryset.select_for_update(of=("self",))

        try:
            menu = queryset.get(id=menu_id)
        except (Menu.DoesNotExist, ValidationError, ValueError):
            raise MenuNotFound()

        return MenuAvailabilityGate.check(menu, now)


class DishAvailabilityValidator:
    """
    Resolves a cart against the business catalog.

    Every requested dish must exist in the business and be available;
    anything else fails the whole cart.
    """

    @staticmethod
    def normalize_cart(items: Iterable[Mapping]) -> List[CartLine]:
        """
        Turn raw ``{dish_id, quantity}`` pairs into cart lines.

        Lines for the same dish are merged, keeping the order of first
        appearance.
        """
        merged: Dict[uuid.UUID, int] = {}
        for item in items or []:
            quantity = item.get("quantity")
            # bool is an int subclass and never a valid quantity.
            if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
                raise InvalidQuantity(details={"dish_id": str(item.get("dish_id")), "quantity": quantity})

            try:
                dish_id = item["dish_id"] if isinstance(item["dish_id"], uuid.UUID) else uuid.UUID(str(item["dish_id"]))
            except (KeyError, ValueError, TypeError):
                raise DishNotFound([item.get("dish_id")])

            merged[dish_id] = merged.get(dish_id, 0) + quantity

        if not merged:
            raise EmptyCart()

        return [CartLine(dish_id=dish_id, quantity=quantity) for dish_id, quantity in merged.items()]

    @staticmethod
    def resolve(business, lines: List[CartLine]) -> Dict[uuid.UUID, DishSnapshot]:
        """Bulk-load the cart's dishes in one query and snapshot their prices."""
        dish_ids = [line.dish_id for line in lines]
        dishes = {dish.id: dish for dish in Dish.objects.for_business(business).filter(id__in=dish_ids)}

        missing = [dish_id for dish_id in dish_ids if dish_id not in dishes]
        if missing:
            logger.warning(f"Cart for business {business.id} references unknown dishes: {missing}")
            raise DishNotFound(missing)

        unavailable = [dishes[dish_id] for dish_id in dish_ids if not dishes[dish_id].is_available]
        if unavailable:
            raise DishesUnavailable(unavailable)

        return {
            dish_id: DishSnapshot(dish_id=dish_id, name=dish.name, price_cents=dish.price_cents)
            for dish_id, dish in dishes.items()
        }

    @staticmethod
    def revalidate(business, snapshot: Mapping[uuid.UUID, DishSnapshot]) -> None:
        """
        Re-read the snapshotted dishes right before the order is written.

        Fails if a dish vanished, became unavailable, or changed price since
        the snapshot was taken.
        """
        # Row locks hold availability steady until the order commits.
        current = {
            dish.id: dish
            for dish in Dish.objects.for_business(business)
            .filter(id__in=list(snapshot.keys()))
            .select_for_update()
        }

        missing = [dish_id for dish_id in snapshot if dish_id not in current]
        if missing:
            raise DishNotFound(missing)

        unavailable = [dish for dish in current.values() if not dish.is_available]
        if unavailable:
            raise DishesUnavailable(unavailable)

        changes = [
            {
                "id": str(dish_id),
                "name": current[dish_id].name,
                "old_price_cents": snap.price_cents,
                "new_price_cents": current[dish_id].price_cents,
            }
            for dish_id, snap in snapshot.items()
            if current[dish_id].price_cents != snap.price_cents
        ]
        if changes:
            raise PriceChanged(changes)


class MenuPublishingService:
    """Keeps at most one published menu per business."""

    @staticmethod
    @transaction.atomic
    def publish(menu: Menu) -> Menu:
        archived = (
            Menu.objects.for_business(menu.business)
            .filter(status=Menu.Status.PUBLISHED)
            .exclude(id=menu.id)
            .update(status=Menu.Status.ARCHIVED)
        )
        if archived:
            logger.info(f"Archived {archived} previously published menu(s) for business {menu.business_id}")

        menu.status = Menu.Status.PUBLISHED
        menu.save(update_fields=["status", "updated_at"])
        logger.info(f"Published menu {menu.id} (v{menu.version}) for business {menu.business_id}")
        return menu
