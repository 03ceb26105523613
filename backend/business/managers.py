from django.db import models


class BusinessScopedQuerySet(models.QuerySet):
    """
    QuerySet for rows that belong to a single business.

    Scoping is explicit: callers pass the business (or the owner) they act
    for instead of relying on ambient request state.

    Usage:
        class Dish(models.Model):
            business = models.ForeignKey('business.Business', on_delete=models.CASCADE)

            objects = BusinessScopedManager()

        Dish.objects.for_business(business).filter(is_available=True)
        Coupon.objects.owned_by(request.user)
    """

    def for_business(self, business):
        if business is None:
            # Fail closed: no business means no rows.
            return self.none()
        return self.filter(business=business)

    def owned_by(self, user):
        if user is None or not user.is_authenticated:
            return self.none()
        return self.filter(business__owner=user)


class BusinessScopedManager(models.Manager.from_queryset(BusinessScopedQuerySet)):
    pass


class BusinessQuerySet(models.QuerySet):
    def active(self):
        return self.filter(is_active=True)

    def owned_by(self, user):
        if user is None or not user.is_authenticated:
            return self.none()
        return self.filter(owner=user)


class BusinessManager(models.Manager.from_queryset(BusinessQuerySet)):
    pass
