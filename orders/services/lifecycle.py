"""
ORDER LIFECYCLE ENGINE

Owns the top-level status of an Order and every operation that changes it,
except the revision sub-workflow (``orders.services.revisions``), the
message log (``orders.services.messages``) and the dispute and alteration
rows (``orders.services.disputes``, ``orders.services.alterations``), which
reuse the helpers below.

GUARANTEES:
- Every operation runs in one transaction and holds a row lock on the order,
  so concurrent requests against the same order are serialized.
- Authorization is decided here from the actor's standing on the order
  (customer, tailor, neither); callers only need to authenticate.
- Every status change appends exactly one timeline entry.
- Completion books the order into the tailor's reputation ledger and runs
  the badge evaluator inside the same transaction.
"""

import logging
from decimal import Decimal, InvalidOperation

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Q
from django.utils import timezone

from orders.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from orders.models import Order, OrderTimelineEntry
from orders.services.revision_lifecycle import unresolved
from profiles.roles import ROLE_ADMIN, is_active_tailor, resolve_role
from profiles.services import reputation

logger = logging.getLogger(__name__)

User = get_user_model()


# ============================================================
# HELPERS (shared with revisions/messages)
# ============================================================

def lock_order(order_id) -> Order:
    """Load the order with a row lock or raise NotFoundError."""
    try:
        return Order.objects.select_for_update().get(pk=order_id)
    except (Order.DoesNotExist, ValueError, TypeError):
        raise NotFoundError("Order not found.")


def require_party(order: Order, actor):
    if not order.is_party(actor):
        logger.warning(
            "User %s refused on order %s: not a party",
            getattr(actor, "pk", None),
            order.order_number,
        )
        raise AuthorizationError("Not authorized.")


def require_tailor(order: Order, actor, action: str):
    if getattr(actor, "pk", None) != order.tailor_id:
        logger.warning(
            "User %s refused on order %s: only the tailor can %s",
            getattr(actor, "pk", None),
            order.order_number,
            action,
        )
        raise AuthorizationError(f"Only the tailor can {action}.")


def require_customer(order: Order, actor, action: str):
    if getattr(actor, "pk", None) != order.customer_id:
        logger.warning(
            "User %s refused on order %s: only the customer can %s",
            getattr(actor, "pk", None),
            order.order_number,
            action,
        )
        raise AuthorizationError(f"Only the customer can {action}.")


def require_open(order: Order, action: str):
    if order.is_terminal:
        raise ValidationError(f"Order is {order.status}; cannot {action}.")


def add_timeline_entry(order: Order, *, actor, description: str, status=None):
    return OrderTimelineEntry.objects.create(
        order=order,
        status=status or order.status,
        description=description[:1000],
        updated_by=actor,
    )


def set_status(order: Order, status: str, *, actor, description: str = "") -> bool:
    """
    Move ``order`` to ``status`` and record it on the timeline.

    Returns False (and records nothing) if the order already has that status.
    The caller saves the order.
    """
    previous = order.status
    if previous == status:
        return False
    order.status = status
    add_timeline_entry(
        order,
        actor=actor,
        description=description or f"Order status changed to {status}",
    )
    logger.info(
        "Order %s: %s -> %s (by user %s)",
        order.order_number,
        previous,
        status,
        getattr(actor, "pk", None),
    )
    return True


def complete_order(order: Order, *, actor, description: str = "") -> Order:
    """
    The completion transition.

    Sets the completion date once, saves the order, books the completion into
    the tailor's ledger and awards any newly earned badges.
    """
    if order.actual_completion_date is None:
        order.actual_completion_date = timezone.now()
    set_status(order, Order.Status.COMPLETED, actor=actor, description=description)
    order.save()

    reputation.record_completion(order)
    reputation.award_badges(order.tailor_id)
    return order


def parse_money(value, field: str) -> Decimal:
    if value in (None, ""):
        return Decimal("0")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field} must be a number.")
    if amount < 0:
        raise ValidationError(f"{field} must not be negative.")
    return amount


def compute_total_price(*, base_price, quantity=1, fabric_cost=None,
                        additional_charges=None, discount=None) -> Decimal:
    """base × quantity + fabric cost + additional charges − discount."""
    total = (
        parse_money(base_price, "base_price") * (quantity or 1)
        + parse_money(fabric_cost, "fabric_cost")
        + parse_money(additional_charges, "additional_charges")
        - parse_money(discount, "discount")
    )
    if total < 0:
        raise ValidationError("Discount exceeds the order total.")
    return total


# ============================================================
# QUERIES
# ============================================================

def orders_for_actor(actor, status=None):
    """Orders where ``actor`` is customer or tailor (admins see all)."""
    qs = Order.objects.select_related("customer", "tailor")
    if resolve_role(actor) != ROLE_ADMIN:
        qs = qs.filter(Q(customer=actor) | Q(tailor=actor))
    if status:
        if status not in Order.Status.values:
            raise ValidationError(f"Unknown order status '{status}'.")
        qs = qs.filter(status=status)
    return qs.order_by("-created_at", "-id")


def get_order_for_actor(order_id, actor) -> Order:
    """Return one order for one of its parties or an admin."""
    order = (
        Order.objects.select_related("customer", "tailor", "fabric_supplier")
        .prefetch_related("revisions", "timeline", "messages", "disputes", "alterations")
        .filter(pk=order_id)
        .first()
    )
    if order is None:
        raise NotFoundError("Order not found.")
    if resolve_role(actor) != ROLE_ADMIN:
        require_party(order, actor)
    return order


# ============================================================
# OPERATIONS
# ============================================================

@transaction.atomic
def create_order(
    *,
    customer,
    tailor_id,
    service_type,
    garment_type,
    base_price,
    quantity=None,
    description="",
    measurement_id=None,
    design_reference=None,
    consultation_date=None,
    fabric_cost=None,
    additional_charges=None,
    discount=None,
    total_price=None,
    estimated_completion_date=None,
) -> Order:
    """
    Place a new order with ``tailor_id`` on behalf of ``customer``.

    ``total_price`` is computed from the components only when not supplied.
    The tailor's order counter is incremented in the same transaction.
    """
    if not tailor_id or not service_type or not garment_type or base_price in (None, ""):
        raise ValidationError(
            "Please provide tailor, service type, garment type, and base price."
        )
    if service_type not in Order.ServiceType.values:
        raise ValidationError(f"Unknown service type '{service_type}'.")

    tailor = User.objects.select_related("profile").filter(pk=tailor_id).first()
    if tailor is None or not is_active_tailor(tailor):
        raise ValidationError("Invalid tailor.")
    if tailor.pk == customer.pk:
        raise ValidationError("You cannot place an order with yourself.")

    if quantity is None:
        quantity = 1
    if quantity < 1:
        raise ValidationError("quantity must be at least 1.")

    if total_price in (None, ""):
        total_price = compute_total_price(
            base_price=base_price,
            quantity=quantity,
            fabric_cost=fabric_cost,
            additional_charges=additional_charges,
            discount=discount,
        )

    order = Order.objects.create(
        customer=customer,
        tailor=tailor,
        service_type=service_type,
        garment_type=garment_type,
        description=description or "",
        measurement_id=measurement_id,
        design_reference=design_reference or [],
        consultation_date=consultation_date,
        quantity=quantity,
        base_price=parse_money(base_price, "base_price"),
        fabric_cost=parse_money(fabric_cost, "fabric_cost"),
        additional_charges=parse_money(additional_charges, "additional_charges"),
        discount=parse_money(discount, "discount"),
        total_price=parse_money(total_price, "total_price"),
        estimated_completion_date=estimated_completion_date,
        status=Order.Status.PENDING,
    )
    add_timeline_entry(order, actor=customer, description="Order created")
    reputation.record_new_order(tailor)

    logger.info(
        "Order %s created by customer %s for tailor %s (total=%s)",
        order.order_number,
        customer.pk,
        tailor.pk,
        order.total_price,
    )
    return order


@transaction.atomic
def schedule_consultation(
    *,
    order_id,
    actor,
    consultation_date,
    consultation_type=None,
    consultation_link=None,
    consultation_duration=None,
    notes=None,
) -> Order:
    """Either party schedules the consultation; pending orders advance."""
    if not consultation_date:
        raise ValidationError("Consultation date is required.")

    order = lock_order(order_id)
    require_party(order, actor)

    consultation_type = consultation_type or Order.ConsultationType.VIDEO
    if consultation_type not in Order.ConsultationType.values:
        raise ValidationError(f"Unknown consultation type '{consultation_type}'.")

    order.consultation_date = consultation_date
    order.consultation_type = consultation_type
    order.consultation_link = consultation_link or ""
    order.consultation_duration = consultation_duration or 30
    order.consultation_notes = notes or order.consultation_notes or ""
    order.consultation_status = Order.ConsultationStatus.SCHEDULED
    order.consultation_requested_by = actor
    order.consultation_requested_at = timezone.now()

    if order.status == Order.Status.PENDING:
        set_status(
            order,
            Order.Status.CONSULTATION_SCHEDULED,
            actor=actor,
            description="Consultation scheduled",
        )
    order.save()
    return order


@transaction.atomic
def reschedule_consultation(
    *, order_id, actor, consultation_date, consultation_link=None, notes=None
) -> Order:
    """Move the consultation to a new date; the order status is untouched."""
    if not consultation_date:
        raise ValidationError("New consultation date is required.")

    order = lock_order(order_id)
    require_party(order, actor)

    order.consultation_date = consultation_date
    if consultation_link:
        order.consultation_link = consultation_link
    if notes:
        order.consultation_notes = notes
    order.consultation_status = Order.ConsultationStatus.RESCHEDULED
    order.save()
    return order


@transaction.atomic
def update_consultation_status(*, order_id, actor, status, notes=None) -> Order:
    """Record the consultation outcome; a completed consultation advances the order."""
    if not status:
        raise ValidationError("Status is required.")
    if status not in Order.ConsultationStatus.values:
        raise ValidationError(f"Unknown consultation status '{status}'.")

    order = lock_order(order_id)
    require_party(order, actor)

    order.consultation_status = status
    if notes:
        order.consultation_notes = notes

    if (
        status == Order.ConsultationStatus.COMPLETED
        and order.status == Order.Status.CONSULTATION_SCHEDULED
    ):
        set_status(
            order,
            Order.Status.CONSULTATION_COMPLETED,
            actor=actor,
            description="Consultation completed",
        )
    order.save()
    return order


@transaction.atomic
def update_fabric(
    *, order_id, actor, fabric_type=None, color=None, quantity=None, supplier_id=None
) -> Order:
    """
    Tailor records the fabric selection.

    The order moves to fabric_selected from any non-terminal status.
    """
    order = lock_order(order_id)
    require_tailor(order, actor, "update fabric selection")
    require_open(order, "update fabric selection")

    supplier = None
    if supplier_id:
        supplier = User.objects.filter(pk=supplier_id).first()
        if supplier is None:
            raise ValidationError("Invalid supplier.")

    order.fabric_type = fabric_type or ""
    order.fabric_color = color or ""
    order.fabric_quantity = quantity
    order.fabric_supplier = supplier
    order.fabric_selected = True
    set_status(order, Order.Status.FABRIC_SELECTED, actor=actor, description="Fabric selected")
    order.save()
    return order


# address key -> Order field
DELIVERY_ADDRESS_FIELDS = {
    "street": "delivery_street",
    "city": "delivery_city",
    "province": "delivery_province",
    "postal_code": "delivery_postal_code",
    "country": "delivery_country",
    "phone": "delivery_phone",
}


@transaction.atomic
def update_delivery(
    *,
    order_id,
    actor,
    method=None,
    address=None,
    special_instructions=None,
    tracking_number=None,
    provider=None,
    estimated_delivery_date=None,
) -> Order:
    """
    Either party edits the delivery details.

    Only the values supplied are written; the order status is left alone.
    """
    order = lock_order(order_id)
    require_party(order, actor)

    if method:
        if method not in Order.DeliveryMethod.values:
            raise ValidationError(f"Unknown delivery method '{method}'.")
        order.delivery_method = method
    for key, value in (address or {}).items():
        if key not in DELIVERY_ADDRESS_FIELDS:
            raise ValidationError(f"Unknown address field '{key}'.")
        setattr(order, DELIVERY_ADDRESS_FIELDS[key], value or "")
    if special_instructions is not None:
        order.delivery_instructions = special_instructions
    if tracking_number is not None:
        order.delivery_tracking_number = tracking_number
    if provider is not None:
        order.delivery_provider = provider
    if estimated_delivery_date is not None:
        order.estimated_delivery_date = estimated_delivery_date
    order.save()

    logger.info(
        "Order %s: delivery details updated by user %s (method=%s)",
        order.order_number,
        actor.pk,
        order.delivery_method,
    )
    return order


@transaction.atomic
def update_pricing(
    *, order_id, actor, fabric_cost=None, additional_charges=None, discount=None, total_price=None
) -> Order:
    """
    Tailor edits cost components.

    ``total_price`` is NOT recomputed from the components; it only changes
    when a new total is supplied explicitly.
    """
    order = lock_order(order_id)
    require_tailor(order, actor, "update pricing")

    if fabric_cost is not None:
        order.fabric_cost = parse_money(fabric_cost, "fabric_cost")
    if additional_charges is not None:
        order.additional_charges = parse_money(additional_charges, "additional_charges")
    if discount is not None:
        order.discount = parse_money(discount, "discount")
    if total_price is not None:
        order.total_price = parse_money(total_price, "total_price")
    order.save()
    return order


@transaction.atomic
def update_order_status(*, order_id, actor, status, notes=None) -> Order:
    """
    Either party sets the order status directly.

    No transition table applies, with three exceptions: a completed or
    cancelled order keeps its status, and an order with unresolved revisions
    cannot be completed. Completing through this path has the same
    reputation side effects as completing through the revision workflow.
    """
    if status not in Order.Status.values:
        raise ValidationError(f"Unknown order status '{status}'.")

    order = lock_order(order_id)
    require_party(order, actor)

    if order.is_terminal:
        if status == order.status:
            raise ConflictError(f"Order is already {status}.")
        raise ValidationError(f"Order is {order.status} and can no longer change status.")

    if status == Order.Status.COMPLETED:
        open_revisions = unresolved(order.revisions.all())
        if open_revisions:
            numbers = ", ".join(str(r.revision_number) for r in open_revisions)
            raise ValidationError(
                f"Order cannot be completed while revisions are open ({numbers})."
            )
        return complete_order(order, actor=actor, description=notes or "")

    changed = set_status(order, status, actor=actor, description=notes or "")
    if not changed and notes:
        add_timeline_entry(order, actor=actor, description=notes)
    order.save()
    return order
