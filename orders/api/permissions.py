"""Orders API permissions.

Request-level gates for the orders endpoints. Standing on a single order
(customer, tailor, neither) is decided by ``orders.services``; these classes
only keep obviously wrong roles away from role-bound endpoints.
"""

from rest_framework.permissions import BasePermission

from profiles.roles import ROLE_CUSTOMER, profile_type


class IsCustomerUser(BasePermission):
    """Allows access only to authenticated users with profile.type == 'customer'.

    Intended for POST /api/orders/ to ensure only customers can place orders.
    """

    message = "Only users with type 'customer' can create orders."

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return profile_type(user) == ROLE_CUSTOMER
