"""
ORDER DISPUTES

Either party of an order can raise a dispute. It is settled (resolved or
rejected) by the party who did not raise it, or by an admin. A settled dispute
is closed for good; the order status itself is never touched here.
"""

import logging

from django.db import transaction
from django.utils import timezone

from orders.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from orders.models import OrderDispute
from orders.services.lifecycle import lock_order, require_party
from profiles.roles import ROLE_ADMIN, resolve_role

logger = logging.getLogger(__name__)


@transaction.atomic
def raise_dispute(*, order_id, actor, reason, description, attachments=None) -> OrderDispute:
    order = lock_order(order_id)
    require_party(order, actor)

    if reason not in OrderDispute.Reason.values:
        raise ValidationError(f"Unknown dispute reason '{reason}'.")
    description = (description or "").strip()
    if not description:
        raise ValidationError("Reason and description are required.")

    dispute = OrderDispute.objects.create(
        order=order,
        raised_by=actor,
        reason=reason,
        description=description,
        attachments=list(attachments or []),
    )
    logger.info(
        "Order %s: dispute %s (%s) raised by user %s",
        order.order_number,
        dispute.pk,
        reason,
        actor.pk,
    )
    return dispute


@transaction.atomic
def resolve_dispute(*, order_id, dispute_id, actor, status, resolution=None) -> OrderDispute:
    """
    Settle a dispute as ``resolved`` or ``rejected``.

    The raiser cannot settle their own dispute; strangers get the same refusal.
    """
    if status not in OrderDispute.CLOSING_STATUSES:
        raise ValidationError("Valid status (resolved or rejected) is required.")

    order = lock_order(order_id)
    dispute = order.disputes.filter(pk=dispute_id).first()
    if dispute is None:
        raise NotFoundError("Dispute not found.")

    is_opposite_party = order.is_party(actor) and dispute.raised_by_id != actor.pk
    if not is_opposite_party and resolve_role(actor) != ROLE_ADMIN:
        logger.warning(
            "User %s refused on order %s: may not resolve dispute %s",
            actor.pk,
            order.order_number,
            dispute.pk,
        )
        raise AuthorizationError("Not authorized to resolve this dispute.")

    if dispute.status in OrderDispute.CLOSING_STATUSES:
        raise ConflictError(f"Dispute is already {dispute.status}.")

    dispute.status = status
    if resolution:
        dispute.resolution = resolution
    dispute.resolved_by = actor
    dispute.resolved_at = timezone.now()
    dispute.save(update_fields=["status", "resolution", "resolved_by", "resolved_at"])

    logger.info(
        "Order %s: dispute %s %s by user %s",
        order.order_number,
        dispute.pk,
        status,
        actor.pk,
    )
    return dispute
