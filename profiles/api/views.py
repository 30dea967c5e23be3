"""Profiles API views.

Provides endpoints to retrieve a single profile (by user id) and to update the
owner's own profile. Also exposes list endpoints for tailor and customer
profiles. Authentication is required for all endpoints; write access is limited
to the profile owner. Tailor profiles carry their reputation and badges.
"""

import logging

from django.shortcuts import get_object_or_404
from rest_framework import generics
from rest_framework.permissions import IsAuthenticated

from ..models import Profile
from .serializers import (
    ProfileDetailSerializer,
    ProfilePatchSerializer,
    TailorProfileListSerializer,
    CustomerProfileListSerializer,
)
from .permissions import IsProfileOwner

logger = logging.getLogger(__name__)


class ProfileView(generics.RetrieveUpdateAPIView):
    """
    API endpoint for retrieving or partially updating a single profile.

    - GET `/api/profile/{pk}/` returns the profile for the given user id (`pk`).
    - PATCH `/api/profile/{pk}/` updates only the fields provided and is restricted
      to the owner of the profile (the authenticated user with id `pk`).

    Notes:
    - On PATCH, if the profile does not exist for the owner yet, a new profile is
      lazily created for that user.
    - Reputation fields and badges are never writable through this endpoint.
    """

    queryset = Profile.objects.select_related("user").prefetch_related("badges")
    serializer_class = ProfileDetailSerializer
    permission_classes = [IsAuthenticated]
    http_method_names = ["get", "patch", "head", "options"]

    def get_permissions(self):
        """Require ownership for PATCH; otherwise authentication only."""
        if self.request.method == "PATCH":
            return [IsAuthenticated(), IsProfileOwner()]
        return [IsAuthenticated()]

    def get_serializer_class(self):
        """Use the patch serializer for PATCH; the detail serializer otherwise."""
        if self.request.method == "PATCH":
            return ProfilePatchSerializer
        return ProfileDetailSerializer

    def get_object(self):
        """
        Return the profile by user id.

        PATCH has already passed `IsProfileOwner`, so a missing profile belongs
        to the caller and is created on the fly. GET returns 404 instead.
        """
        user_id = self.kwargs["pk"]

        if self.request.method == "PATCH":
            obj, created = Profile.objects.get_or_create(user=self.request.user)
            if created:
                logger.info("Created empty profile for user %s on first update", user_id)
            self.check_object_permissions(self.request, obj)
            return obj

        return get_object_or_404(self.queryset, user_id=user_id)


class TailorProfileListView(generics.ListAPIView):
    """
    API endpoint for listing all tailor profiles.

    - GET `/api/profiles/tailor/` returns profiles with `type="tailor"` of
      active accounts, best rated first.
    - Authentication is required.
    """

    serializer_class = TailorProfileListSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        """Return tailor profiles only (prefetching user and badges)."""
        return (
            Profile.objects.select_related("user")
            .prefetch_related("badges")
            .filter(type=Profile.TYPE_TAILOR, user__is_active=True)
            .order_by("-rating", "-completed_orders", "id")
        )


class CustomerProfileListView(generics.ListAPIView):
    """
    API endpoint for listing all customer profiles.

    - GET `/api/profiles/customer/` returns profiles with `type="customer"`.
    - Authentication is required.
    """

    serializer_class = CustomerProfileListSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        """Return customer profiles only (prefetching user for efficiency)."""
        return Profile.objects.select_related("user").filter(type=Profile.TYPE_CUSTOMER)
