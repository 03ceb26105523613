"""
Menu and cart failures raised while checking what a customer may order.
"""
from rest_framework import status

from core_backend.exceptions import OrderingError


class MenuNotFound(OrderingError):
    code = "MENU_NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Menu not found"


class MenuNotAvailable(OrderingError):
    code = "MENU_NOT_AVAILABLE"
    default_message = "This menu is not currently available for ordering"


class MenuNotYetAvailable(OrderingError):
    code = "MENU_NOT_YET_AVAILABLE"
    default_message = "This menu is not yet available"


class MenuExpired(OrderingError):
    code = "MENU_EXPIRED"
    default_message = "This menu is no longer available"


class EmptyCart(OrderingError):
    code = "EMPTY_CART"
    default_message = "Add at least one dish to place an order"


class InvalidQuantity(OrderingError):
    code = "INVALID_QUANTITY"
    default_message = "Quantity must be a positive whole number"


class DishNotFound(OrderingError):
    code = "DISH_NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "One or more dishes not found"

    def __init__(self, missing_ids, message=None):
        self.missing_ids = [str(dish_id) for dish_id in missing_ids]
        super().__init__(message, details={"missing_dish_ids": self.missing_ids})


class DishesUnavailable(OrderingError):
    code = "DISHES_UNAVAILABLE"

    def __init__(self, dishes, message=None):
        self.dish_ids = [str(dish.id) for dish in dishes]
        if message is None:
            names = ", ".join(dish.name for dish in dishes)
            message = f"The following dishes are currently unavailable: {names}"
        super().__init__(
            message,
            details={
                "unavailable_dishes": [
                    {"id": str(dish.id), "name": dish.name} for dish in dishes
                ]
            },
        )


class PriceChanged(OrderingError):
    code = "PRICE_CHANGED"
    default_message = "Prices changed while you were checking out. Please review your cart."

    def __init__(self, changes, message=None):
        super().__init__(message, details={"changed_dishes": changes})
