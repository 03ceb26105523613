import logging

from django.core.exceptions import ValidationError

from core_backend.exceptions import Forbidden
from .models import Business

logger = logging.getLogger(__name__)


class BusinessAccessService:
    """Resolves a business for an actor that claims to manage it."""

    @staticmethod
    def get_owned_business(user, business_id) -> Business:
        """
        Returns the business when ``user`` owns it.

        Unknown ids and foreign businesses fail the same way, so callers
        cannot discover which businesses exist.
        """
        try:
            business = Business.objects.get(id=business_id)
        except (Business.DoesNotExist, ValidationError, ValueError):
            business = None

        if business is None or not business.is_owned_by(user):
            logger.warning(f"User {getattr(user, 'id', None)} denied access to business {business_id}")
            raise Forbidden("You do not have permission to manage this business")
        return business

    @staticmethod
    def ensure_owner(user, business: Business) -> Business:
        if not business.is_owned_by(user):
            raise Forbidden("You do not have permission to manage this business")
        return business
