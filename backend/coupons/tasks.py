from celery import shared_task
import logging

from .services import CouponService

logger = logging.getLogger(__name__)


@shared_task
def expire_coupons():
    """
    Daily sweep marking active coupons past their ``valid_until`` as expired.

    Validation already rejects such coupons by date; the sweep keeps the
    stored status honest for owner dashboards and public listings.
    """
    expired = CouponService.expire_coupons()
    logger.info(f"Coupon expiry sweep finished: {expired} coupon(s) expired")
    return {"status": "completed", "expired": expired}
