"""Badge eligibility rules.

``evaluate_badges`` is a pure function: it reads a tailor snapshot (any object
exposing ``rating``, ``completed_orders``, ``completion_rate``,
``average_response_time`` and ``total_reviews``) plus the tailor's reviews
and returns every badge type the tailor currently qualifies for. Persisting
the result is the ledger's job (see ``reputation.award_badges``).
"""

from decimal import Decimal

from profiles.models import TailorBadge

BadgeType = TailorBadge.BadgeType

MASTER_TAILOR_MIN_RATING = Decimal("4.5")
MASTER_TAILOR_MIN_COMPLETED = 50

SPEED_STITCHING_MAX_RESPONSE_HOURS = Decimal("24")
SPEED_STITCHING_MIN_COMPLETION_RATE = Decimal("90")
SPEED_STITCHING_MIN_COMPLETED = 20

QUALITY_EXPERT_MIN_REVIEWS = 10
QUALITY_EXPERT_MIN_QUALITY = Decimal("4.5")

CUSTOMER_FAVORITE_MIN_REVIEWS = 25
CUSTOMER_FAVORITE_MIN_RATING = Decimal("4.0")


def _dec(value) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value or 0))


def average_quality(reviews):
    """Mean of the given ``quality`` sub-ratings, or None if none were given."""
    scores = [r.quality for r in reviews if getattr(r, "quality", None)]
    if not scores:
        return None
    return Decimal(sum(scores)) / Decimal(len(scores))


def evaluate_badges(snapshot, reviews) -> set:
    """Return the set of badge types ``snapshot`` qualifies for."""
    reviews = list(reviews)
    rating = _dec(snapshot.rating)
    completed = snapshot.completed_orders or 0
    earned = set()

    if rating >= MASTER_TAILOR_MIN_RATING and completed >= MASTER_TAILOR_MIN_COMPLETED:
        earned.add(BadgeType.MASTER_TAILOR.value)

    response = snapshot.average_response_time
    if (
        response is not None
        and _dec(response) <= SPEED_STITCHING_MAX_RESPONSE_HOURS
        and _dec(snapshot.completion_rate) >= SPEED_STITCHING_MIN_COMPLETION_RATE
        and completed >= SPEED_STITCHING_MIN_COMPLETED
    ):
        earned.add(BadgeType.SPEED_STITCHING.value)

    if len(reviews) >= QUALITY_EXPERT_MIN_REVIEWS:
        avg = average_quality(reviews)
        if avg is not None and avg >= QUALITY_EXPERT_MIN_QUALITY:
            earned.add(BadgeType.QUALITY_EXPERT.value)

    if (
        (snapshot.total_reviews or 0) >= CUSTOMER_FAVORITE_MIN_REVIEWS
        and rating >= CUSTOMER_FAVORITE_MIN_RATING
    ):
        earned.add(BadgeType.CUSTOMER_FAVORITE.value)

    return earned
