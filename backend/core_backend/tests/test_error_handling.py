"""
Error Handling Tests

Tests for the project exception handler: domain errors become a structured
``{"error": {...}}`` body with the right status code, and everything else
keeps DRF's default behaviour.
"""
import pytest
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework.exceptions import NotAuthenticated

from core_backend.exceptions import Forbidden, OrderingError, api_exception_handler
from menus.exceptions import DishNotFound, MenuNotFound
from orders.exceptions import InvalidTransition, MinimumOrderNotMet, SettingsNotFound


class TestOrderingErrorEnvelope:
    """Domain errors render as {"error": {code, message, details}}."""

    def test_default_message_and_status(self):
        response = api_exception_handler(MenuNotFound(), {})

        assert response.status_code == 404
        assert response.data == {
            "error": {"code": "MENU_NOT_FOUND", "message": "Menu not found", "details": {}}
        }

    def test_details_are_carried(self):
        response = api_exception_handler(MinimumOrderNotMet(50000, 30000), {})

        assert response.status_code == 400
        assert response.data["error"]["code"] == "MIN_ORDER_NOT_MET"
        assert response.data["error"]["details"] == {
            "min_amount_cents": 50000,
            "current_amount_cents": 30000,
        }

    def test_workflow_errors_are_conflicts(self):
        response = api_exception_handler(InvalidTransition("pending", "ready"), {})
        assert response.status_code == 409
        assert response.data["error"]["details"] == {"current_status": "pending", "target_status": "ready"}

    def test_settings_missing_is_server_error(self):
        response = api_exception_handler(SettingsNotFound(), {})
        assert response.status_code == 500
        assert response.data["error"]["code"] == "SETTINGS_NOT_FOUND"

    def test_forbidden(self):
        response = api_exception_handler(Forbidden(), {})
        assert response.status_code == 403

    def test_missing_dish_ids_are_listed(self):
        response = api_exception_handler(DishNotFound(["abc"]), {})
        assert response.status_code == 404
        assert response.data["error"]["details"]["missing_dish_ids"] == ["abc"]

    def test_code_override(self):
        exc = OrderingError("Custom failure", code="CUSTOM")
        assert exc.as_dict() == {"code": "CUSTOM", "message": "Custom failure", "details": {}}


class TestFallbackHandling:
    def test_django_validation_error_becomes_400(self):
        response = api_exception_handler(DjangoValidationError({"code": "Coupon code already exists"}), {})

        assert response.status_code == 400
        assert response.data == {"code": ["Coupon code already exists"]}

    def test_drf_exceptions_keep_default_handling(self):
        response = api_exception_handler(NotAuthenticated(), {})
        assert response.status_code == 401


@pytest.mark.django_db
class TestHealthCheck:
    def test_health_endpoint_is_public(self, api_client):
        response = api_client.get('/api/health/')

        assert response.status_code == 200
        assert response.json()["status"] == "ok"
