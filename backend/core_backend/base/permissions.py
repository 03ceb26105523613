"""
Ownership permissions shared across apps.

Every business-scoped object exposes the business it belongs to either as
``obj.business`` or, for the business itself, as the object.
"""

from rest_framework.permissions import BasePermission


class IsBusinessOwner(BasePermission):
    """
    Allows access only to the owner of the business an object belongs to.

    List endpoints are narrowed by the viewset; this class guards detail
    routes and actions.
    """

    message = "You do not own this business."

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated)

    def has_object_permission(self, request, view, obj):
        business = getattr(obj, "business", obj)
        return business.owner_id == request.user.id
