"""Profiles API permissions."""

from rest_framework.permissions import BasePermission, SAFE_METHODS


class IsProfileOwner(BasePermission):
    """
    Write access to `/api/profile/{pk}/` only for the user whose id is `pk`.

    Checked on the request, before any lookup, so a foreign or unknown `pk`
    yields 403 and never reveals whether that profile exists. Staff accounts
    get no exception.
    """

    message = "You are only allowed to update your own profile."

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return True
        return str(request.user.id) == str(view.kwargs.get("pk"))

    def has_object_permission(self, request, view, obj):
        if request.method in SAFE_METHODS:
            return True
        return obj.user_id == request.user.id
