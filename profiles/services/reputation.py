"""
TAILOR REPUTATION LEDGER

The only writer of the reputation fields on a tailor Profile and of the
TailorBadge rows. Callers are the order lifecycle engine (order creation and
completion) and the reviews API (review submission, edit and deletion).

Every function locks the tailor's profile row and is expected to run inside
the caller's transaction, so the order write and the ledger write commit
together.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal

from django.db import transaction
from django.db.models import Avg, Count
from django.utils import timezone

from profiles.models import Profile, TailorBadge
from profiles.services.badges import evaluate_badges
from reviews.models import Review

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")


def _locked_profile(tailor):
    return (
        Profile.objects.select_for_update()
        .filter(user_id=getattr(tailor, "pk", tailor), type=Profile.TYPE_TAILOR)
        .first()
    )


def compute_completion_rate(completed_orders: int, total_orders: int) -> Decimal:
    """completed / total × 100, rounded to two places and capped at 100."""
    if not total_orders:
        return Decimal("0.00")
    rate = Decimal(completed_orders) * 100 / Decimal(total_orders)
    return min(rate, Decimal("100")).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


@transaction.atomic
def record_new_order(tailor):
    """Count a newly placed order against the tailor."""
    profile = _locked_profile(tailor)
    if profile is None:
        logger.warning("No tailor profile for user %s; order not counted", tailor)
        return None
    profile.total_orders += 1
    profile.completion_rate = compute_completion_rate(
        profile.completed_orders, profile.total_orders
    )
    profile.save(update_fields=["total_orders", "completion_rate"])
    return profile


@transaction.atomic
def record_completion(order):
    """
    Book a completed order into the tailor's ledger.

    Idempotent: an order whose completion was already booked
    (``reputation_recorded_at`` set) is ignored and None is returned.
    """
    if order.reputation_recorded_at is not None:
        logger.info("Completion of order %s already booked", order.order_number)
        return None

    profile = _locked_profile(order.tailor_id)
    if profile is None:
        logger.warning(
            "No tailor profile for order %s; completion not booked",
            order.order_number,
        )
        return None

    profile.completed_orders += 1
    profile.completion_rate = compute_completion_rate(
        profile.completed_orders, profile.total_orders
    )
    profile.save(update_fields=["completed_orders", "completion_rate"])

    order.reputation_recorded_at = timezone.now()
    order.save(update_fields=["reputation_recorded_at"])

    logger.info(
        "Booked completion of order %s for tailor %s (%s/%s, rate=%s)",
        order.order_number,
        order.tailor_id,
        profile.completed_orders,
        profile.total_orders,
        profile.completion_rate,
    )
    return profile


@transaction.atomic
def refresh_review_stats(tailor):
    """Recompute rating, review count and average response time from reviews."""
    profile = _locked_profile(tailor)
    if profile is None:
        return None

    agg = Review.objects.filter(tailor_id=profile.user_id).aggregate(
        avg_rating=Avg("rating"),
        count=Count("id"),
        avg_response=Avg("response_time"),
    )
    avg_rating = agg["avg_rating"]
    avg_response = agg["avg_response"]

    profile.rating = (
        Decimal(str(avg_rating)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
        if avg_rating is not None
        else Decimal("0")
    )
    profile.total_reviews = agg["count"] or 0
    profile.average_response_time = (
        Decimal(str(avg_response)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
        if avg_response is not None
        else None
    )
    profile.save(update_fields=["rating", "total_reviews", "average_response_time"])
    return profile


@transaction.atomic
def award_badges(tailor) -> set:
    """
    Evaluate badge eligibility and persist newly earned badges.

    Existing badges are kept as they are; only missing types are added.
    Returns the set of newly earned badge types.
    """
    profile = _locked_profile(tailor)
    if profile is None:
        return set()

    reviews = Review.objects.filter(tailor_id=profile.user_id).only("quality")
    eligible = evaluate_badges(profile, reviews)
    existing = set(profile.badges.values_list("badge_type", flat=True))
    new_types = eligible - existing

    for badge_type in sorted(new_types):
        TailorBadge.objects.create(profile=profile, badge_type=badge_type, name=badge_type)

    if new_types:
        logger.info(
            "Tailor %s earned badges: %s", profile.user_id, ", ".join(sorted(new_types))
        )
    return new_types
