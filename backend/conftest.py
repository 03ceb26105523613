"""
Root conftest.py for all backend tests.

This file makes fixtures available to all test files across all apps.
"""
import pytest


# ============================================================================
# AUTO-USE FIXTURES (Run automatically for every test)
# ============================================================================

@pytest.fixture(autouse=True)
def celery_eager():
    """
    Run Celery tasks inline.

    Post-commit side effects queue tasks with .delay(); without a broker in
    tests they execute synchronously instead. Task failures are kept on the
    result rather than raised into the caller, as a real worker would.
    """
    from core_backend.celery import app

    # Settings are loaded with the CELERY namespace, so the prefixed keys win.
    keys = ("CELERY_TASK_ALWAYS_EAGER", "CELERY_TASK_EAGER_PROPAGATES")
    previous = {key: app.conf.get(key) for key in keys}
    app.conf.update(CELERY_TASK_ALWAYS_EAGER=True, CELERY_TASK_EAGER_PROPAGATES=False)
    yield app
    app.conf.update(previous)


# ============================================================================
# API CLIENT FIXTURES
# ============================================================================

@pytest.fixture
def api_client():
    """
    Provide DRF API client for API tests.

    Usage:
        def test_my_api(api_client):
            response = api_client.get('/api/health/')
            assert response.status_code == 200
    """
    from rest_framework.test import APIClient
    return APIClient()


def _jwt_client(user):
    from rest_framework.test import APIClient
    from rest_framework_simplejwt.tokens import RefreshToken

    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def owner_client(owner):
    """
    Provide an API client authenticated as the main business owner.

    Usage:
        def test_protected_endpoint(owner_client, business):
            response = owner_client.get(f'/api/orders/?business={business.id}')
            assert response.status_code == 200
    """
    return _jwt_client(owner)


@pytest.fixture
def other_owner_client(other_owner):
    """API client for the owner of the second business."""
    return _jwt_client(other_owner)


@pytest.fixture
def customer_client(customer_user):
    """API client for a signed-in customer who owns no business."""
    return _jwt_client(customer_user)


# Import shared fixtures
from core_backend.tests.fixtures import *  # noqa: E402,F401,F403
