"""
ORDER ALTERATIONS

Alteration requests are small follow-up jobs on a garment (take in a seam,
shorten a hem). The customer files them; the tailor moves them through
pending -> approved -> in_progress -> completed (or rejects them) and may
quote a cost and a duration on the way. Alterations never change the order
status and are not part of the revision workflow.
"""

import logging

from django.db import transaction
from django.utils import timezone

from orders.exceptions import NotFoundError, ValidationError
from orders.models import OrderAlteration
from orders.services.lifecycle import lock_order, parse_money, require_customer, require_tailor

logger = logging.getLogger(__name__)


@transaction.atomic
def request_alteration(*, order_id, actor, description, urgency=None) -> OrderAlteration:
    order = lock_order(order_id)
    require_customer(order, actor, "request alterations")

    description = (description or "").strip()
    if not description:
        raise ValidationError("Description is required.")
    urgency = urgency or OrderAlteration.Urgency.MEDIUM
    if urgency not in OrderAlteration.Urgency.values:
        raise ValidationError(f"Unknown urgency '{urgency}'.")

    alteration = OrderAlteration.objects.create(
        order=order,
        requested_by=actor,
        description=description,
        urgency=urgency,
    )
    logger.info(
        "Order %s: alteration %s requested by user %s (%s)",
        order.order_number,
        alteration.pk,
        actor.pk,
        urgency,
    )
    return alteration


@transaction.atomic
def update_alteration_status(
    *, order_id, alteration_id, actor, status, estimated_cost=None, estimated_days=None
) -> OrderAlteration:
    """
    Tailor sets the alteration status and, optionally, the quote.

    Reaching ``completed`` stamps ``completed_at`` once.
    """
    order = lock_order(order_id)
    require_tailor(order, actor, "update alteration status")

    if status not in OrderAlteration.Status.values:
        raise ValidationError(f"Unknown alteration status '{status}'.")

    alteration = order.alterations.filter(pk=alteration_id).first()
    if alteration is None:
        raise NotFoundError("Alteration request not found.")

    alteration.status = status
    if estimated_cost is not None:
        alteration.estimated_cost = parse_money(estimated_cost, "estimated_cost")
    if estimated_days is not None:
        if estimated_days < 0:
            raise ValidationError("estimated_days must not be negative.")
        alteration.estimated_days = estimated_days
    if status == OrderAlteration.Status.COMPLETED and alteration.completed_at is None:
        alteration.completed_at = timezone.now()
    alteration.save()

    logger.info(
        "Order %s: alteration %s -> %s (by user %s)",
        order.order_number,
        alteration.pk,
        status,
        actor.pk,
    )
    return alteration
