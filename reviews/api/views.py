"""Reviews API views.

List and create reviews on the same endpoint (auth required). Supports filtering
by tailor_id and customer_id and ordering by updated_at or rating.
Retrieve/patch/delete a single review with owner-only modifications.
Read-only views list a tailor's received reviews and fetch the review of an
order for its two parties.

Every write refreshes the reviewed tailor's rating statistics and badges in the
same transaction.
"""

from django.db import transaction
from rest_framework import generics, status
from rest_framework.exceptions import NotFound, ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from profiles.models import Profile
from profiles.services import reputation
from reviews.models import Review
from .permissions import IsCustomerReviewer, IsOrderReviewParty, IsReviewOwner
from .serializers import (
    ReviewCreateSerializer,
    ReviewOutputSerializer,
    ReviewPatchSerializer,
)

PATCHABLE_FIELDS = {"rating", "comment", "quality", "communication", "value_for_money"}


# ----------------------------- helpers (module-level) -----------------------------

def _apply_filters_and_ordering(qs, params):
    """Filter by ids and apply ordering; raises ValidationError on bad input."""
    for param, lookup in (("tailor_id", "tailor_id"), ("customer_id", "customer_id")):
        v = params.get(param)
        if v:
            if not v.isdigit():
                raise ValidationError({param: "Must be an integer."})
            qs = qs.filter(**{lookup: int(v)})

    ordering = params.get("ordering")
    if ordering:
        allowed = {"updated_at", "-updated_at", "rating", "-rating"}
        if ordering not in allowed:
            raise ValidationError(
                {"ordering": "Allowed values: updated_at, -updated_at, rating, -rating."}
            )
        qs = qs.order_by(ordering)
    else:
        qs = qs.order_by("-updated_at", "-id")

    return qs


def _validate_patch_fields(data: dict):
    """Allow only rating/comment/sub-ratings; return Response(400) if extra fields present."""
    extra = set(data.keys()) - PATCHABLE_FIELDS
    if extra:
        return Response(
            {
                "detail": (
                    f"Only {', '.join(sorted(PATCHABLE_FIELDS))} may be updated. "
                    f"Invalid: {', '.join(sorted(extra))}."
                )
            },
            status=status.HTTP_400_BAD_REQUEST,
        )
    return None


def _refresh_tailor(tailor_id):
    """Recompute the tailor's review stats and award any newly earned badges."""
    reputation.refresh_review_stats(tailor_id)
    reputation.award_badges(tailor_id)


# --------------------------------------- views ---------------------------------------

class ReviewListCreateAPIView(generics.ListCreateAPIView):
    """GET: list reviews (filter/order). POST: create review (customer-only)."""

    queryset = Review.objects.all().select_related("tailor", "customer")

    def get_permissions(self):
        """Customer-only for POST; otherwise authenticated read."""
        if self.request.method == "POST":
            return [IsAuthenticated(), IsCustomerReviewer()]
        return [IsAuthenticated()]

    def get_serializer_class(self):
        """Use output serializer for GET and create serializer for POST."""
        return ReviewOutputSerializer if self.request.method == "GET" else ReviewCreateSerializer

    # --- GET ---
    def get_queryset(self):
        """Apply optional filters and ordering from query parameters."""
        return _apply_filters_and_ordering(super().get_queryset(), self.request.query_params)

    # --- POST ---
    def create(self, request, *args, **kwargs):
        """Validate and create a review; return the created representation."""
        ser = self.get_serializer(data=request.data)
        ser.is_valid(raise_exception=True)
        with transaction.atomic():
            review = ser.save()
            _refresh_tailor(review.tailor_id)
        return Response(ReviewOutputSerializer(review).data, status=status.HTTP_201_CREATED)


class ReviewDetailUpdateDeleteAPIView(generics.RetrieveUpdateDestroyAPIView):
    """PATCH: owner-only update of rating/comment/sub-ratings. DELETE: owner-only delete."""

    queryset = Review.objects.all().select_related("tailor", "customer")
    permission_classes = [IsAuthenticated, IsReviewOwner]

    def get_serializer_class(self):
        """Use patch serializer for PATCH; output serializer otherwise."""
        return ReviewPatchSerializer if self.request.method == "PATCH" else ReviewOutputSerializer

    def partial_update(self, request, *args, **kwargs):
        """Allow updating only the patchable fields; return full review."""
        bad = _validate_patch_fields(request.data)
        if bad is not None:
            return bad
        instance = self.get_object()
        ser = self.get_serializer(instance, data=request.data, partial=True)
        ser.is_valid(raise_exception=True)
        with transaction.atomic():
            self.perform_update(ser)
            _refresh_tailor(instance.tailor_id)
        return Response(ReviewOutputSerializer(instance).data, status=status.HTTP_200_OK)

    def update(self, request, *args, **kwargs):
        """Force partial updates via PATCH semantics."""
        kwargs["partial"] = True
        return self.partial_update(request, *args, **kwargs)

    def destroy(self, request, *args, **kwargs):
        """Delete the review (owner-only) and return 204 No Content."""
        instance = self.get_object()
        tailor_id = instance.tailor_id
        with transaction.atomic():
            self.perform_destroy(instance)
            _refresh_tailor(tailor_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class TailorReviewListAPIView(generics.ListAPIView):
    """GET: reviews received by one tailor, newest first. 404 for unknown tailors."""

    serializer_class = ReviewOutputSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        tailor_id = self.kwargs["tailor_id"]
        if not Profile.objects.filter(user_id=tailor_id, type=Profile.TYPE_TAILOR).exists():
            raise NotFound("Tailor not found.")
        return (
            Review.objects.filter(tailor_id=tailor_id)
            .select_related("tailor", "customer", "order")
            .order_by("-created_at", "-id")
        )


class OrderReviewAPIView(generics.RetrieveAPIView):
    """GET: the review left for an order; visible to the order's customer and tailor."""

    serializer_class = ReviewOutputSerializer
    permission_classes = [IsAuthenticated, IsOrderReviewParty]

    def get_object(self):
        review = (
            Review.objects.select_related("order")
            .filter(order_id=self.kwargs["order_id"])
            .first()
        )
        if review is None:
            raise NotFound("Review not found.")
        self.check_object_permissions(self.request, review)
        return review
