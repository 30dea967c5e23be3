"""Profiles app models.

Defines the Profile model that extends the base user with additional metadata
and role information (customer/tailor). Tailor profiles additionally carry the
reputation ledger (order counters, completion rate, rating) and own a set of
earned badges. String fields intentionally default to empty strings to avoid
nulls in API responses.
"""

from decimal import Decimal

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class Profile(models.Model):
    """
    Profile for a single user.

    Stores general information for both customer and tailor user types.
    A profile is created at most once per user (OneToOne relationship).

    The reputation fields are written exclusively by
    ``profiles.services.reputation``; API serializers expose them read-only.
    """

    TYPE_CUSTOMER = "customer"
    TYPE_TAILOR = "tailor"
    USER_TYPES = ((TYPE_CUSTOMER, "customer"), (TYPE_TAILOR, "tailor"))

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="profile",
    )
    file = models.CharField(max_length=255, blank=True, default="")
    location = models.CharField(max_length=255, blank=True, default="")
    tel = models.CharField(max_length=50, blank=True, default="")
    description = models.TextField(blank=True, default="")
    working_hours = models.CharField(max_length=50, blank=True, default="")
    shop_name = models.CharField(max_length=120, blank=True, default="")
    type = models.CharField(
        max_length=20,
        choices=USER_TYPES,
        blank=True,
        default="",
    )

    # --- reputation ledger (tailors only) ---
    rating = models.DecimalField(
        max_digits=3,
        decimal_places=2,
        default=Decimal("0"),
        validators=[MinValueValidator(0), MaxValueValidator(5)],
    )
    total_reviews = models.PositiveIntegerField(default=0)
    total_orders = models.PositiveIntegerField(default=0)
    completed_orders = models.PositiveIntegerField(default=0)
    completion_rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("0"),
        validators=[MinValueValidator(0), MaxValueValidator(100)],
    )
    # hours; null while no review reported a response time
    average_response_time = models.DecimalField(
        max_digits=7, decimal_places=2, null=True, blank=True
    )

    created_at = models.DateTimeField(auto_now_add=True)

    @property
    def is_tailor(self) -> bool:
        return self.type == self.TYPE_TAILOR

    def __str__(self):
        """Readable representation for admin and debugging."""
        return f"Profile<{self.user_id}:{self.user.username}>"


class TailorBadge(models.Model):
    """A reputation marker earned by a tailor. Badges are never revoked."""

    class BadgeType(models.TextChoices):
        MASTER_TAILOR = "Master Tailor", "Master Tailor"
        SPEED_STITCHING = "Speed Stitching", "Speed Stitching"
        QUALITY_EXPERT = "Quality Expert", "Quality Expert"
        CUSTOMER_FAVORITE = "Customer Favorite", "Customer Favorite"

    profile = models.ForeignKey(
        Profile,
        on_delete=models.CASCADE,
        related_name="badges",
    )
    badge_type = models.CharField(max_length=40, choices=BadgeType.choices)
    name = models.CharField(max_length=80)
    earned_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["profile", "badge_type"],
                name="unique_badge_type_per_profile",
            )
        ]
        ordering = ("earned_at", "id")

    def __str__(self) -> str:
        return f"TailorBadge<{self.profile_id} {self.badge_type}>"
