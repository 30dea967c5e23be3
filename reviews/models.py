"""Reviews app models.

Defines the Review model. A customer reviews a tailor, optionally for one of
their completed orders. Each order can be reviewed once; without an order a
customer can leave at most one review per tailor. Ratings and sub-ratings are
constrained between 1 and 5.

Reviews feed the tailor's reputation ledger (rating, review count, average
response time) and the badge evaluator (quality sub-ratings).
"""

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import Q


def _score_field(**kwargs):
    return models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(5)], **kwargs
    )


class Review(models.Model):
    """Represents a review written by a customer for a tailor."""

    tailor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="reviews_received",
    )
    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="reviews_written",
    )
    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.PROTECT,
        related_name="reviews",
        null=True,
        blank=True,
    )

    rating = _score_field()
    comment = models.TextField(max_length=1000, blank=True, default="")
    photos = models.JSONField(default=list, blank=True)

    # sub-ratings, all optional
    quality = _score_field(null=True, blank=True)
    communication = _score_field(null=True, blank=True)
    value_for_money = _score_field(null=True, blank=True)
    # hours the tailor took to respond, as experienced by the customer
    response_time = models.DecimalField(
        max_digits=7,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(0)],
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["order"],
                condition=Q(order__isnull=False),
                name="unique_review_per_order",
            ),
            models.UniqueConstraint(
                fields=["tailor", "customer"],
                condition=Q(order__isnull=True),
                name="unique_orderless_review_per_tailor_and_customer",
            ),
        ]
        ordering = ("-created_at", "-id")

    def __str__(self) -> str:
        """Readable representation for admin and debugging."""
        return (
            f"Review<{self.id} {self.customer_id}->{self.tailor_id} "
            f"{self.rating}>"
        )
