"""Reviews API serializers.

Provide serializers for creating a review, returning review data, and
partially updating rating/comment/sub-ratings. Enforces one review per order
(or one order-less review per tailor and customer) and validates that the
target is an active tailor and the referenced order is the reviewer's own
completed order.
"""

from django.contrib.auth import get_user_model
from rest_framework import serializers

from orders.models import Order
from profiles.roles import is_active_tailor
from reviews.models import Review

User = get_user_model()

SCORE = {"min_value": 1, "max_value": 5}


class ReviewCreateSerializer(serializers.Serializer):
    """Input serializer for creating a new review."""

    tailor = serializers.IntegerField(required=True)
    order = serializers.IntegerField(required=False, allow_null=True)
    rating = serializers.IntegerField(required=True, **SCORE)
    comment = serializers.CharField(
        max_length=1000, allow_blank=True, required=False, default=""
    )
    photos = serializers.ListField(
        child=serializers.CharField(max_length=500), required=False, default=list
    )
    quality = serializers.IntegerField(required=False, allow_null=True, **SCORE)
    communication = serializers.IntegerField(required=False, allow_null=True, **SCORE)
    value_for_money = serializers.IntegerField(required=False, allow_null=True, **SCORE)
    response_time = serializers.DecimalField(
        max_digits=7, decimal_places=2, min_value=0, required=False, allow_null=True
    )

    def validate_tailor(self, value):
        """Ensure the target user exists and is an active tailor."""
        user = User.objects.select_related("profile").filter(id=value).first()
        if user is None:
            raise serializers.ValidationError("Tailor not found.")
        if not is_active_tailor(user):
            raise serializers.ValidationError("Target user is not an active tailor.")
        self.context["tailor_obj"] = user
        return value

    def validate_order(self, value):
        if value is None:
            return value
        order = Order.objects.filter(id=value).first()
        if order is None:
            raise serializers.ValidationError("Order not found.")
        self.context["order_obj"] = order
        return value

    def validate(self, attrs):
        """Check the order belongs to reviewer and tailor, and reject duplicates."""
        request = self.context.get("request")
        if not request or not request.user.is_authenticated:
            # Fallback; IsAuthenticated on the view is the primary guard.
            raise serializers.ValidationError("Authentication required.")

        tailor = self.context["tailor_obj"]
        customer = request.user
        order = self.context.get("order_obj") if attrs.get("order") else None

        if tailor.id == customer.id:
            raise serializers.ValidationError({"tailor": "You cannot review yourself."})

        if order is not None:
            if order.customer_id != customer.id or order.tailor_id != tailor.id:
                raise serializers.ValidationError(
                    {"order": "You can only review your own orders with this tailor."}
                )
            if order.status != Order.Status.COMPLETED:
                raise serializers.ValidationError(
                    {"order": "Only completed orders can be reviewed."}
                )
            if Review.objects.filter(order=order).exists():
                raise serializers.ValidationError(
                    {"non_field_errors": ["This order has already been reviewed."]}
                )
        elif Review.objects.filter(tailor=tailor, customer=customer, order__isnull=True).exists():
            raise serializers.ValidationError(
                {"non_field_errors": ["You have already reviewed this tailor."]}
            )
        return attrs

    def create(self, validated_data):
        """Create and return the review instance."""
        validated_data.pop("tailor")
        validated_data.pop("order", None)
        return Review.objects.create(
            tailor=self.context["tailor_obj"],
            customer=self.context["request"].user,
            order=self.context.get("order_obj"),
            **validated_data,
        )


class ReviewOutputSerializer(serializers.ModelSerializer):
    """Read serializer for returning a review."""

    class Meta:
        model = Review
        fields = [
            "id",
            "tailor",
            "customer",
            "order",
            "rating",
            "comment",
            "photos",
            "quality",
            "communication",
            "value_for_money",
            "response_time",
            "created_at",
            "updated_at",
        ]


class ReviewPatchSerializer(serializers.ModelSerializer):
    """Patch serializer for updating rating, comment and sub-ratings only."""

    class Meta:
        model = Review
        fields = ["rating", "comment", "quality", "communication", "value_for_money"]
