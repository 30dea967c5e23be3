"""
REVISION WORKFLOW

Operations on the revisions nested inside an order. Each one locks the order,
checks the actor, validates the revision transition and then derives the
order status from the whole revision list.

Revisions are addressed by their per-order ``revision_number``.
"""

import logging

from django.db import transaction
from django.utils import timezone

from orders.exceptions import NotFoundError
from orders.models import Order, OrderRevision
from orders.services.lifecycle import (
    complete_order,
    lock_order,
    require_customer,
    require_open,
    require_tailor,
    set_status,
)
from orders.services.revision_lifecycle import (
    all_production_done,
    all_resolved,
    validate_transition,
)

logger = logging.getLogger(__name__)

RS = OrderRevision.Status

DEFAULT_RESPIN_DESCRIPTION = "Previous revision was not satisfactory"


# ----------------------------- helpers (module-level) -----------------------------

def _get_revision(order: Order, revision_number) -> OrderRevision:
    revision = (
        order.revisions.select_for_update()
        .filter(revision_number=revision_number)
        .first()
    )
    if revision is None:
        raise NotFoundError("Revision not found.")
    return revision


def _open_revision(order: Order, *, actor, description: str, images=None,
                   spawned_from=None) -> OrderRevision:
    """Append a pending revision under the next revision number."""
    number = order.issue_revision_number()
    revision = OrderRevision.objects.create(
        order=order,
        revision_number=number,
        requested_by=OrderRevision.RequestedBy.CUSTOMER,
        description=description,
        images=list(images or []),
        status=RS.PENDING,
        spawned_from=spawned_from,
    )
    logger.info(
        "Order %s: revision %s opened by user %s",
        order.order_number,
        number,
        getattr(actor, "pk", None),
    )
    return revision


def _log_transition(order, revision, actor):
    logger.info(
        "Order %s: revision %s -> %s (by user %s)",
        order.order_number,
        revision.revision_number,
        revision.status,
        getattr(actor, "pk", None),
    )


# ----------------------------- operations -----------------------------

@transaction.atomic
def add_revision(*, order_id, actor, description="", images=None) -> OrderRevision:
    """Customer requests a change; the order moves to revision_requested."""
    order = lock_order(order_id)
    require_customer(order, actor, "request revisions")
    require_open(order, "request revisions")

    revision = _open_revision(order, actor=actor, description=description or "", images=images)
    set_status(
        order,
        Order.Status.REVISION_REQUESTED,
        actor=actor,
        description=f"Revision {revision.revision_number} requested",
    )
    order.save()
    return revision


@transaction.atomic
def approve_revision(*, order_id, revision_number, actor, notes=None) -> OrderRevision:
    order = lock_order(order_id)
    require_tailor(order, actor, "approve revisions")
    revision = _get_revision(order, revision_number)
    validate_transition(revision=revision, target_status=RS.APPROVED.value)

    revision.status = RS.APPROVED
    revision.approved_at = timezone.now()
    revision.approved_by = actor
    if notes:
        revision.notes = notes
    revision.save()
    _log_transition(order, revision, actor)

    set_status(
        order,
        Order.Status.IN_PROGRESS,
        actor=actor,
        description=f"Revision {revision.revision_number} approved",
    )
    order.save()
    return revision


@transaction.atomic
def reject_revision(*, order_id, revision_number, actor, reason=None) -> OrderRevision:
    """
    Tailor declines a pending revision.

    Once no other revision is pending, an order still waiting in
    revision_requested goes back to in_progress.
    """
    order = lock_order(order_id)
    require_tailor(order, actor, "reject revisions")
    revision = _get_revision(order, revision_number)
    validate_transition(revision=revision, target_status=RS.REJECTED.value)

    revision.status = RS.REJECTED
    revision.rejected_at = timezone.now()
    revision.rejected_by = actor
    revision.rejection_reason = reason or ""
    revision.save()
    _log_transition(order, revision, actor)

    still_pending = order.revisions.filter(status=RS.PENDING).exists()
    if not still_pending and order.status == Order.Status.REVISION_REQUESTED:
        set_status(
            order,
            Order.Status.IN_PROGRESS,
            actor=actor,
            description=f"Revision {revision.revision_number} rejected",
        )
    order.save()
    return revision


@transaction.atomic
def start_revision(*, order_id, revision_number, actor) -> OrderRevision:
    order = lock_order(order_id)
    require_tailor(order, actor, "start revisions")
    revision = _get_revision(order, revision_number)
    validate_transition(revision=revision, target_status=RS.IN_PROGRESS.value)

    revision.status = RS.IN_PROGRESS
    revision.started_at = timezone.now()
    revision.save()
    _log_transition(order, revision, actor)

    set_status(
        order,
        Order.Status.IN_PROGRESS,
        actor=actor,
        description=f"Work on revision {revision.revision_number} started",
    )
    order.save()
    return revision


@transaction.atomic
def complete_revision(*, order_id, revision_number, actor, images=None, notes=None) -> OrderRevision:
    """Tailor finishes a revision; the order goes to quality_check once nothing is left."""
    order = lock_order(order_id)
    require_tailor(order, actor, "complete revisions")
    revision = _get_revision(order, revision_number)
    validate_transition(revision=revision, target_status=RS.COMPLETED.value)

    revision.status = RS.COMPLETED
    revision.completed_at = timezone.now()
    if images:
        revision.images = list(revision.images or []) + list(images)
    if notes:
        revision.notes = notes
    revision.save()
    _log_transition(order, revision, actor)

    if all_production_done(order.revisions.all()):
        set_status(
            order,
            Order.Status.QUALITY_CHECK,
            actor=actor,
            description="All revisions completed; ready for quality check",
        )
    order.save()
    return revision


@transaction.atomic
def customer_approve_revision(*, order_id, revision_number, actor) -> OrderRevision:
    """
    Customer accepts a completed revision.

    When this resolves the last open revision of an order in quality_check,
    the quality gate is recorded and the order is completed.
    """
    order = lock_order(order_id)
    require_customer(order, actor, "approve completed revisions")
    revision = _get_revision(order, revision_number)
    validate_transition(revision=revision, target_status=RS.CUSTOMER_APPROVED.value)

    revision.status = RS.CUSTOMER_APPROVED
    revision.customer_approved_at = timezone.now()
    revision.save()
    _log_transition(order, revision, actor)

    if all_resolved(order.revisions.all()) and order.status == Order.Status.QUALITY_CHECK:
        order.quality_check_passed = True
        order.quality_checked_by = actor
        order.quality_checked_at = timezone.now()
        order.quality_check_notes = "All revisions approved by customer"
        complete_order(order, actor=actor, description="All revisions approved; order completed")
    else:
        order.save()
    return revision


@transaction.atomic
def customer_reject_revision(*, order_id, revision_number, actor, reason=None) -> OrderRevision:
    """
    Customer refuses a completed revision.

    The rejected revision is frozen and a new pending one is spawned from it;
    returns the spawned revision.
    """
    order = lock_order(order_id)
    require_customer(order, actor, "reject completed revisions")
    revision = _get_revision(order, revision_number)
    validate_transition(revision=revision, target_status=RS.CUSTOMER_REJECTED.value)

    revision.status = RS.CUSTOMER_REJECTED
    revision.customer_rejected_at = timezone.now()
    revision.customer_rejection_reason = reason or ""
    revision.save()
    _log_transition(order, revision, actor)

    successor = _open_revision(
        order,
        actor=actor,
        description=reason or DEFAULT_RESPIN_DESCRIPTION,
        spawned_from=revision,
    )
    set_status(
        order,
        Order.Status.REVISION_REQUESTED,
        actor=actor,
        description=(
            f"Revision {revision.revision_number} rejected by customer; "
            f"revision {successor.revision_number} opened"
        ),
    )
    order.save()
    return successor
