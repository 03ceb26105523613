"""
Automatic Promotion Tests

Tests for promotion rules, the cart check against thresholds and validity
windows, and the owner and public promotion endpoints.
"""
import pytest
from datetime import timedelta
from django.core.exceptions import ValidationError
from django.utils import timezone

from coupons.exceptions import PromotionNotFound
from coupons.models import AutomaticPromotion
from coupons.services import PromotionService


@pytest.fixture
def make_promotion(business):
    def _make_promotion(**overrides):
        now = timezone.now()
        values = {
            'business': business,
            'name': 'Free delivery over Rs. 500',
            'promotion_type': AutomaticPromotion.PromotionType.FREE_DELIVERY,
            'min_order_value_cents': 50000,
            'valid_from': now - timedelta(days=1),
            'valid_until': now + timedelta(days=30),
        }
        values.update(overrides)
        return AutomaticPromotion.objects.create(**values)

    return _make_promotion


def promotion_data(**overrides):
    now = timezone.now()
    data = {
        'name': 'Weekend 10%',
        'promotion_type': AutomaticPromotion.PromotionType.DISCOUNT,
        'discount_type': 'percentage',
        'discount_value': 10,
        'valid_from': now - timedelta(hours=1),
        'valid_until': now + timedelta(days=2),
    }
    data.update(overrides)
    return data


@pytest.mark.django_db
class TestPromotionCreation:
    def test_created_active(self, business):
        promotion = PromotionService.create_promotion(business, promotion_data())

        assert promotion.is_active is True
        assert promotion.is_public is True
        assert promotion.business == business

    def test_dates_must_be_ordered(self, business):
        now = timezone.now()
        with pytest.raises(ValidationError) as exc_info:
            PromotionService.create_promotion(business, promotion_data(valid_from=now, valid_until=now))
        assert 'valid_until' in exc_info.value.message_dict

    def test_discount_needs_type(self, business):
        with pytest.raises(ValidationError) as exc_info:
            PromotionService.create_promotion(business, promotion_data(discount_type=''))
        assert 'discount_type' in exc_info.value.message_dict

    def test_percentage_over_100_rejected(self, business):
        with pytest.raises(ValidationError):
            PromotionService.create_promotion(business, promotion_data(discount_value=150))

    def test_free_item_needs_own_dish(self, business, dish, foreign_dish):
        data = promotion_data(promotion_type=AutomaticPromotion.PromotionType.FREE_ITEM)

        with pytest.raises(ValidationError) as missing:
            PromotionService.create_promotion(business, data)
        with pytest.raises(ValidationError) as foreign:
            PromotionService.create_promotion(business, {**data, 'free_dish': foreign_dish})

        assert 'free_dish' in missing.value.message_dict
        assert 'free_dish' in foreign.value.message_dict
        assert PromotionService.create_promotion(business, {**data, 'free_dish': dish}).free_dish == dish

    def test_update_only_touches_editable_fields(self, make_promotion):
        promotion = make_promotion()

        PromotionService.update_promotion(promotion, {
            'name': 'Free delivery over Rs. 300',
            'min_order_value_cents': 30000,
            'is_active': False,
            'promotion_type': AutomaticPromotion.PromotionType.FREE_ITEM,
        })

        promotion.refresh_from_db()
        assert promotion.min_order_value_cents == 30000
        assert promotion.is_active is False
        assert promotion.promotion_type == AutomaticPromotion.PromotionType.FREE_DELIVERY


@pytest.mark.django_db
class TestPromotionCheck:
    def test_threshold(self, business, make_promotion):
        """
        Scenario:
        - Free delivery from Rs. 500
        - Expected: a 499.99 cart does not qualify, a 500.00 cart does
        """
        promotion = make_promotion()

        assert PromotionService.check_promotions(business, 49999) == []
        assert PromotionService.check_promotions(business, 50000) == [promotion]

    def test_no_threshold_always_applies(self, business, make_promotion):
        promotion = make_promotion(min_order_value_cents=None)
        assert PromotionService.check_promotions(business, 0) == [promotion]

    def test_window_and_active_flag(self, business, make_promotion):
        now = timezone.now()
        make_promotion(name='Later', valid_from=now + timedelta(days=1), valid_until=now + timedelta(days=2))
        make_promotion(name='Over', valid_from=now - timedelta(days=2), valid_until=now - timedelta(days=1))
        make_promotion(name='Off', is_active=False)
        live = make_promotion(name='Live')

        assert PromotionService.check_promotions(business, 100000) == [live]

    def test_other_business_promotions_ignored(self, other_business, make_promotion):
        make_promotion(min_order_value_cents=None)
        assert PromotionService.check_promotions(other_business, 100000) == []

    def test_get_promotion_scoped_to_business(self, other_business, make_promotion):
        promotion = make_promotion()
        with pytest.raises(PromotionNotFound):
            PromotionService.get_promotion(other_business, promotion.id)


@pytest.mark.django_db
class TestPromotionAPI:
    def test_owner_creates_promotion(self, owner_client, business):
        now = timezone.now()
        response = owner_client.post('/api/promotions/', {
            'business': str(business.id),
            'name': 'Free delivery over Rs. 500',
            'promotion_type': 'free_delivery',
            'min_order_value_cents': 50000,
            'valid_from': now.isoformat(),
            'valid_until': (now + timedelta(days=7)).isoformat(),
        }, format='json')

        assert response.status_code == 201, response.content
        assert response.data['is_active'] is True
        assert response.data['total_applications'] == 0

    def test_create_for_foreign_business_forbidden(self, owner_client, other_business):
        now = timezone.now()
        response = owner_client.post('/api/promotions/', {
            'business': str(other_business.id),
            'name': 'Not mine',
            'promotion_type': 'free_delivery',
            'valid_from': now.isoformat(),
            'valid_until': (now + timedelta(days=1)).isoformat(),
        }, format='json')

        assert response.status_code == 403
        assert AutomaticPromotion.objects.count() == 0

    def test_invalid_rules_are_400(self, owner_client, business):
        now = timezone.now()
        response = owner_client.post('/api/promotions/', {
            'business': str(business.id),
            'name': 'Broken',
            'promotion_type': 'discount',
            'valid_from': now.isoformat(),
            'valid_until': (now + timedelta(days=1)).isoformat(),
        }, format='json')

        assert response.status_code == 400

    def test_owner_deactivates_promotion(self, owner_client, make_promotion):
        promotion = make_promotion()

        response = owner_client.patch(f'/api/promotions/{promotion.id}/', {'is_active': False}, format='json')

        assert response.status_code == 200
        assert response.data['is_active'] is False

    def test_other_owner_cannot_see_promotion(self, other_owner_client, make_promotion):
        promotion = make_promotion()
        assert other_owner_client.get(f'/api/promotions/{promotion.id}/').status_code == 404

    def test_delete_is_not_allowed(self, owner_client, make_promotion):
        promotion = make_promotion()
        assert owner_client.delete(f'/api/promotions/{promotion.id}/').status_code == 405

    def test_public_listing(self, api_client, business, make_promotion):
        make_promotion(name='Shown')
        make_promotion(name='Hidden', is_public=False)
        make_promotion(name='Off', is_active=False)

        response = api_client.get(f'/api/promotions/public/?business={business.id}')

        assert response.status_code == 200
        assert [row['name'] for row in response.data] == ['Shown']
        assert 'total_applications' not in response.data[0]

    def test_check(self, api_client, business, make_promotion):
        make_promotion()

        below = api_client.post('/api/promotions/check/', {
            'business': str(business.id),
            'order_value_cents': 30000,
        }, format='json')
        above = api_client.post('/api/promotions/check/', {
            'business': str(business.id),
            'order_value_cents': 60000,
        }, format='json')

        assert below.status_code == 200
        assert below.data == []
        assert [row['promotion_type'] for row in above.data] == ['free_delivery']

    def test_check_unknown_business(self, api_client, db):
        response = api_client.post('/api/promotions/check/', {
            'business': '00000000-0000-0000-0000-000000000000',
            'order_value_cents': 100,
        }, format='json')
        assert response.status_code == 404
