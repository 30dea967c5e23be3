"""
REVISION LIFECYCLE RULES

The only allowed transitions of an OrderRevision, plus the aggregate
predicates the order engine derives its own status from.

No database writes, no side effects.
"""

from orders.exceptions import ConflictError, ValidationError
from orders.models import OrderRevision

S = OrderRevision.Status

ALLOWED_TRANSITIONS = {
    S.PENDING.value: {S.APPROVED.value, S.REJECTED.value},
    S.APPROVED.value: {S.IN_PROGRESS.value},
    S.IN_PROGRESS.value: {S.COMPLETED.value},
    S.COMPLETED.value: {S.CUSTOMER_APPROVED.value, S.CUSTOMER_REJECTED.value},
}

TERMINAL_STATES = frozenset({S.REJECTED.value, S.CUSTOMER_APPROVED.value})

# customer_rejected never changes again; its successor carries the work on
CLOSED_STATES = TERMINAL_STATES | {S.CUSTOMER_REJECTED.value}

# revisions that no longer block the quality check; closed ones count as done
PRODUCTION_DONE_STATES = CLOSED_STATES | {S.COMPLETED.value}

# the source states an operation expects, used for error messages
_REQUIRED_SOURCE = {
    S.APPROVED.value: "pending",
    S.REJECTED.value: "pending",
    S.IN_PROGRESS.value: "approved",
    S.COMPLETED.value: "in progress",
    S.CUSTOMER_APPROVED.value: "completed",
    S.CUSTOMER_REJECTED.value: "completed",
}


def can_transition(*, from_status: str, to_status: str) -> bool:
    if from_status in CLOSED_STATES:
        return False
    return to_status in ALLOWED_TRANSITIONS.get(from_status, set())


def validate_transition(*, revision: OrderRevision, target_status: str):
    """
    Raise unless ``revision`` may move to ``target_status``.

    A revision already in the target status raises ConflictError (repeated
    approval, repeated rejection); any other illegal source raises
    ValidationError.
    """
    if revision.status == target_status:
        raise ConflictError(
            f"Revision {revision.revision_number} is already {target_status}."
        )
    if not can_transition(from_status=revision.status, to_status=target_status):
        raise ValidationError(
            f"Revision {revision.revision_number} must be "
            f"{_REQUIRED_SOURCE.get(target_status, 'in a compatible state')} "
            f"(current status: {revision.status})."
        )


def all_production_done(revisions) -> bool:
    """Every revision is completed, rejected or already closed by the customer."""
    return all(r.status in PRODUCTION_DONE_STATES for r in revisions)


def all_resolved(revisions) -> bool:
    """Every revision is customer_approved, rejected or customer_rejected."""
    return all(r.status in CLOSED_STATES for r in revisions)


def unresolved(revisions):
    """Revisions that still block completion of the order."""
    return [r for r in revisions if r.status not in CLOSED_STATES]
