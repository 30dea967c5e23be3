"""Reviews API permissions.

Request-level gate for writing reviews and object-level gates for reading or
changing a single review.
"""

from rest_framework.permissions import BasePermission

from profiles.roles import ROLE_CUSTOMER, profile_type


class IsCustomerReviewer(BasePermission):
    """Only customers write reviews; tailors and profile-less users get 403."""

    message = "Only users with a 'customer' profile can create reviews."

    def has_permission(self, request, view):
        return profile_type(request.user) == ROLE_CUSTOMER


class IsReviewOwner(BasePermission):
    """Allow modifications or deletion only by the customer who wrote the review."""

    message = "Only the review owner may modify this review."

    def has_object_permission(self, request, view, obj):
        return obj.customer_id == request.user.id


class IsOrderReviewParty(BasePermission):
    """An order's review is visible to that order's customer and tailor only."""

    message = "Not authorized."

    def has_object_permission(self, request, view, obj):
        return request.user.id in (obj.customer_id, obj.tailor_id)
