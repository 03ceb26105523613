"""
Coupon Validation Tests

Tests for the coupon engine: the ordered eligibility checks, the exact
rejection messages customers see, the discount strategies and every usage
limit type.
"""
import pytest
from datetime import datetime, timedelta, timezone as dt_timezone
from django.utils import timezone

from coupons.models import Coupon, CouponUsage
from coupons.services import CouponValidationService, customer_identifier_for
from coupons.strategies import FixedAmountStrategy, PercentageStrategy


def validate(business, code, subtotal=2000, dish_ids=(), customer='phone:919988776655', now=None):
    return CouponValidationService.validate(
        code=code,
        customer_identifier=customer,
        business=business,
        order_subtotal_cents=subtotal,
        dish_ids=list(dish_ids),
        now=now,
    )


@pytest.mark.django_db
class TestDiscountCalculation:
    """Discounts are integer minor units and never exceed the subtotal."""

    def test_percentage_discount(self, business, make_coupon):
        """
        CRITICAL: 20% of 2000 is exactly 400.
        """
        make_coupon(code='SAVE20', discount_value=20)

        result = validate(business, 'SAVE20', subtotal=2000)

        assert result.valid
        assert result.discount_cents == 400

    def test_percentage_discount_is_capped(self, business, make_coupon):
        """
        Scenario:
        - 20% of 2000 would be 400
        - Coupon caps the discount at 300
        - Expected: 300
        """
        make_coupon(code='SAVE20CAP', discount_value=20, max_discount_cents=300)

        result = validate(business, 'SAVE20CAP', subtotal=2000)

        assert result.discount_cents == 300

    def test_percentage_rounds_half_up(self, business, make_coupon):
        make_coupon(code='FIFTEEN', discount_value=15)
        # 15% of 1990 = 298.5
        assert validate(business, 'FIFTEEN', subtotal=1990).discount_cents == 299

    def test_fixed_discount(self, business, make_coupon):
        make_coupon(code='FLAT100', discount_type=Coupon.DiscountType.FIXED, discount_value=10000)
        assert validate(business, 'FLAT100', subtotal=50000).discount_cents == 10000

    def test_fixed_discount_clamped_to_subtotal(self, business, make_coupon):
        make_coupon(code='FLAT100', discount_type=Coupon.DiscountType.FIXED, discount_value=10000)
        assert validate(business, 'FLAT100', subtotal=2500).discount_cents == 2500

    def test_strategies_directly(self, business, make_coupon):
        percentage = make_coupon(code='P10', discount_value=10)
        fixed = make_coupon(code='F50', discount_type=Coupon.DiscountType.FIXED, discount_value=50)

        assert PercentageStrategy().apply(percentage, 1000) == 100
        assert FixedAmountStrategy().apply(fixed, 30) == 30


@pytest.mark.django_db
class TestEligibilityMessages:
    """Each failed check returns its own message and no discount."""

    def test_unknown_code(self, business):
        result = validate(business, 'NOPE')
        assert not result.valid
        assert result.error == 'Coupon not found'
        assert result.discount_cents == 0

    def test_blank_code(self, business):
        assert validate(business, '   ').error == 'Coupon not found'

    def test_code_is_case_insensitive(self, business, make_coupon):
        make_coupon(code='save20')
        assert validate(business, ' Save20 ').valid

    def test_code_of_another_business(self, other_business, make_coupon):
        make_coupon(code='SAVE20')
        assert validate(other_business, 'SAVE20').error == 'Coupon not found'

    def test_inactive_coupon(self, business, make_coupon):
        make_coupon(code='OLD', status=Coupon.Status.ARCHIVED)
        assert validate(business, 'OLD').error == 'Coupon is not active'

    def test_not_yet_valid(self, business, make_coupon):
        now = timezone.now()
        make_coupon(code='SOON', valid_from=now + timedelta(days=1), valid_until=now + timedelta(days=2))
        assert validate(business, 'SOON').error == 'Coupon is not yet valid'

    def test_expired(self, business, make_coupon):
        now = timezone.now()
        make_coupon(code='GONE', valid_from=now - timedelta(days=5), valid_until=now - timedelta(days=1))
        assert validate(business, 'GONE').error == 'Coupon has expired'

    def test_minimum_order_value(self, business, make_coupon):
        make_coupon(code='BIGSPEND', min_order_value_cents=50000)

        result = validate(business, 'BIGSPEND', subtotal=30000)

        assert result.error == 'Minimum order value of Rs. 500.00 required'

    def test_minimum_order_value_met_exactly(self, business, make_coupon):
        make_coupon(code='BIGSPEND', min_order_value_cents=50000)
        assert validate(business, 'BIGSPEND', subtotal=50000).valid

    def test_status_checked_before_dates(self, business, make_coupon):
        """
        Scenario:
        - Coupon is both archived and expired
        - Expected: the status message, since checks stop at the first failure
        """
        now = timezone.now()
        make_coupon(
            code='BOTH',
            status=Coupon.Status.ARCHIVED,
            valid_from=now - timedelta(days=5),
            valid_until=now - timedelta(days=1),
        )
        assert validate(business, 'BOTH').error == 'Coupon is not active'


@pytest.mark.django_db
class TestDishApplicability:
    def test_specific_dish_in_cart(self, business, make_coupon, dish, second_dish):
        make_coupon(code='TIKKA', applicable_to=Coupon.ApplicableTo.SPECIFIC_DISHES, dishes=[dish])

        result = validate(business, 'TIKKA', dish_ids=[dish.id, second_dish.id])

        assert result.valid

    def test_specific_dish_missing_from_cart(self, business, make_coupon, dish, second_dish):
        make_coupon(code='TIKKA', applicable_to=Coupon.ApplicableTo.SPECIFIC_DISHES, dishes=[dish])

        result = validate(business, 'TIKKA', dish_ids=[second_dish.id])

        assert result.error == 'Coupon not applicable to items in cart'


def _record_usage(coupon, order, customer):
    return CouponUsage.objects.create(
        coupon=coupon,
        order=order,
        business=coupon.business,
        customer_identifier=customer,
        coupon_code=coupon.code,
        discount_type=coupon.discount_type,
        discount_value=coupon.discount_value,
        discount_amount_cents=100,
        order_subtotal_cents=1000,
        order_total_cents=900,
    )


@pytest.fixture
def make_order(business, published_menu):
    from orders.models import Order

    def _make_order(**overrides):
        values = {
            'business': business,
            'menu': published_menu,
            'customer_name': 'Asha Rao',
            'customer_phone': '9988776655',
            'delivery_type': Order.DeliveryType.PICKUP,
            'subtotal_cents': 1000,
            'discount_cents': 100,
            'total_cents': 900,
            'payment_method': 'cash',
        }
        values.update(overrides)
        return Order.objects.create(**values)

    return _make_order


@pytest.mark.django_db
class TestUsageLimits:
    """Usage limits are counted from the redemption ledger and counters."""

    def test_total_limit_reached(self, business, make_coupon):
        """
        CRITICAL: A total-limit coupon at 100/100 is rejected.
        """
        make_coupon(
            code='FIRST100',
            usage_limit_type=Coupon.UsageLimitType.TOTAL_LIMIT,
            total_usage_limit=100,
            total_usage_count=100,
        )

        result = validate(business, 'FIRST100')

        assert not result.valid
        assert result.error == 'Coupon usage limit reached'

    def test_total_limit_with_slot_left(self, business, make_coupon):
        make_coupon(
            code='FIRST100',
            usage_limit_type=Coupon.UsageLimitType.TOTAL_LIMIT,
            total_usage_limit=100,
            total_usage_count=99,
        )
        assert validate(business, 'FIRST100').valid

    def test_per_customer_limit(self, business, make_coupon, make_order):
        coupon = make_coupon(
            code='ONCE',
            usage_limit_type=Coupon.UsageLimitType.PER_CUSTOMER,
            usage_limit_per_customer=1,
        )
        _record_usage(coupon, make_order(), 'phone:919988776655')

        assert validate(business, 'ONCE', customer='phone:919988776655').error == 'You have already used this coupon'
        assert validate(business, 'ONCE', customer='phone:910000000000').valid

    def test_per_month_limit_counts_current_month_only(self, business, make_coupon, make_order):
        """
        Scenario:
        - Limit of 1 per month
        - One redemption last month, none this month
        - Expected: valid; after a redemption this month, rejected
        """
        now = datetime(2025, 3, 15, 12, 0, tzinfo=dt_timezone.utc)
        coupon = make_coupon(
            code='MONTHLY',
            usage_limit_type=Coupon.UsageLimitType.PER_MONTH,
            usage_limit_per_month=1,
            valid_from=now - timedelta(days=90),
            valid_until=now + timedelta(days=90),
        )
        customer = 'user:42'

        last_month = _record_usage(coupon, make_order(), customer)
        CouponUsage.objects.filter(pk=last_month.pk).update(created_at=datetime(2025, 2, 28, 23, 0, tzinfo=dt_timezone.utc))

        assert validate(business, 'MONTHLY', customer=customer, now=now).valid

        this_month = _record_usage(coupon, make_order(), customer)
        CouponUsage.objects.filter(pk=this_month.pk).update(created_at=datetime(2025, 3, 1, 0, 0, tzinfo=dt_timezone.utc))

        result = validate(business, 'MONTHLY', customer=customer, now=now)
        assert result.error == 'Monthly usage limit for this coupon reached'


class TestCustomerIdentifier:
    def test_guest_identified_by_phone_digits(self):
        assert customer_identifier_for(None, '+91 99887-76655') == 'phone:919988776655'

    def test_signed_in_user_identified_by_id(self):
        class User:
            pk = 7
            is_authenticated = True

        assert customer_identifier_for(User(), '+91 99887 76655') == 'user:7'
