"""
Shared test fixtures for all backend tests.

This module provides reusable pytest fixtures for common test objects
like businesses, owners, menus, dishes and coupons.
"""
import pytest
from datetime import timedelta
from django.contrib.auth import get_user_model
from django.utils import timezone

from business.models import Business, BusinessSettings
from coupons.models import Coupon
from menus.models import Dish, Menu


# ============================================================================
# USER FIXTURES
# ============================================================================

@pytest.fixture
def owner(db):
    """Owner of the main test business"""
    return get_user_model().objects.create_user(
        username='owner_spice',
        email='owner@spicekitchen.test',
        password='password123',
    )


@pytest.fixture
def other_owner(db):
    """Owner of a second, unrelated business"""
    return get_user_model().objects.create_user(
        username='owner_tiffin',
        email='owner@tiffinbox.test',
        password='password123',
    )


@pytest.fixture
def customer_user(db):
    """A signed-in customer who owns no business"""
    return get_user_model().objects.create_user(
        username='customer_asha',
        email='asha@example.test',
        password='password123',
    )


# ============================================================================
# BUSINESS FIXTURES
# ============================================================================

@pytest.fixture
def business(owner):
    """Main test business (Spice Kitchen)"""
    return Business.objects.create(
        name='Spice Kitchen',
        slug='spice-kitchen',
        owner=owner,
        contact_email='orders@spicekitchen.test',
        contact_phone='+91 98765 43210',
    )


@pytest.fixture
def other_business(other_owner):
    """Second business (Tiffin Box)"""
    return Business.objects.create(
        name='Tiffin Box',
        slug='tiffin-box',
        owner=other_owner,
    )


@pytest.fixture
def business_settings(business):
    """
    Settings for the main business.

    Flat delivery fee of 500, no minimum order, cash payments, INR.
    """
    return BusinessSettings.objects.create(
        business=business,
        delivery_type=BusinessSettings.DeliveryType.FLAT,
        delivery_fee_cents=500,
        min_order_value_cents=0,
        payment_method=BusinessSettings.PaymentMethod.CASH,
        payment_instructions='Pay cash at the counter.',
        currency='INR',
    )


@pytest.fixture
def other_business_settings(other_business):
    return BusinessSettings.objects.create(business=other_business, currency='INR')


# ============================================================================
# MENU & DISH FIXTURES
# ============================================================================

@pytest.fixture
def published_menu(business):
    """Published menu open from yesterday until next week"""
    now = timezone.now()
    return Menu.objects.create(
        business=business,
        title='Weekday Lunch',
        status=Menu.Status.PUBLISHED,
        start_date=now - timedelta(days=1),
        end_date=now + timedelta(days=7),
    )


@pytest.fixture
def draft_menu(business):
    return Menu.objects.create(business=business, title='Draft Dinner', status=Menu.Status.DRAFT)


@pytest.fixture
def future_menu(business):
    """Published menu that only opens tomorrow"""
    now = timezone.now()
    return Menu.objects.create(
        business=business,
        title='Weekend Brunch',
        status=Menu.Status.PUBLISHED,
        start_date=now + timedelta(days=1),
        end_date=now + timedelta(days=3),
    )


@pytest.fixture
def expired_menu(business):
    """Published menu whose window closed yesterday"""
    now = timezone.now()
    return Menu.objects.create(
        business=business,
        title='Festival Special',
        status=Menu.Status.PUBLISHED,
        start_date=now - timedelta(days=10),
        end_date=now - timedelta(days=1),
    )


@pytest.fixture
def dish(business):
    """Paneer Tikka at 1500"""
    return Dish.objects.create(business=business, name='Paneer Tikka', price_cents=1500, category='Starters')


@pytest.fixture
def second_dish(business):
    """Masala Chai at 500"""
    return Dish.objects.create(business=business, name='Masala Chai', price_cents=500, category='Drinks')


@pytest.fixture
def unavailable_dish(business):
    return Dish.objects.create(
        business=business, name='Mango Lassi', price_cents=800, category='Drinks', is_available=False
    )


@pytest.fixture
def foreign_dish(other_business):
    """A dish that belongs to another business"""
    return Dish.objects.create(business=other_business, name='Idli Sambar', price_cents=900)


# ============================================================================
# COUPON FIXTURES
# ============================================================================

@pytest.fixture
def make_coupon(business):
    """
    Factory for coupons on the main business.

    Usage:
        def test_something(make_coupon):
            coupon = make_coupon(code='SAVE20', discount_value=20)
    """
    def _make_coupon(**overrides):
        now = timezone.now()
        dishes = overrides.pop('dishes', None)
        values = {
            'business': business,
            'code': 'SAVE20',
            'name': '20% off',
            'discount_type': Coupon.DiscountType.PERCENTAGE,
            'discount_value': 20,
            'valid_from': now - timedelta(days=1),
            'valid_until': now + timedelta(days=30),
        }
        values.update(overrides)
        coupon = Coupon.objects.create(**values)
        if dishes:
            coupon.dishes.set(dishes)
        return coupon

    return _make_coupon


# ============================================================================
# ORDER INPUT FIXTURES
# ============================================================================

@pytest.fixture
def order_payload(published_menu, dish):
    """
    Factory for checkout input: two Paneer Tikka for pickup by default.

    Usage:
        data = order_payload(delivery_type='delivery', delivery_address='12 MG Road')
    """
    def _order_payload(**overrides):
        data = {
            'menu_id': published_menu.id,
            'items': [{'dish_id': dish.id, 'quantity': 2}],
            'customer_name': 'Asha Rao',
            'customer_phone': '+91 99887 76655',
            'customer_email': 'asha@example.test',
            'delivery_type': 'pickup',
            'delivery_address': '',
            'delivery_distance_km': None,
            'coupon_code': '',
            'notes': '',
        }
        data.update(overrides)
        return data

    return _order_payload


# ============================================================================
# ORDER FIXTURES
# ============================================================================

@pytest.fixture
def place_order(business_settings, order_payload):
    """
    Factory that places an order through the real checkout pipeline.

    Post-commit side effects do not run unless the test captures them with
    ``django_capture_on_commit_callbacks``.
    """
    from orders.services import OrderPlacementService

    def _place_order(customer=None, **overrides):
        return OrderPlacementService.place_order(order_payload(**overrides), customer=customer)

    return _place_order


@pytest.fixture
def pickup_order(place_order):
    return place_order()


@pytest.fixture
def delivery_order(place_order):
    return place_order(delivery_type='delivery', delivery_address='12 MG Road, Bengaluru')
