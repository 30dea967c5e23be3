"""Orders app models.

Defines the Order aggregate and the rows it owns exclusively:

- ``OrderRevision``: a change request with its own approve/reject/complete
  sub-lifecycle, addressed by its per-order ``revision_number``.
- ``OrderMessage``: the append-only message log between customer and tailor.
- ``OrderTimelineEntry``: the append-only audit trail of status changes.
- ``OrderDispute``: a complaint raised by one party and settled by the other
  party or an admin.
- ``OrderAlteration``: a customer's alteration request, priced and tracked by
  the tailor.

Delivery details live on the order itself.

Orders are never deleted; ``cancelled`` is a terminal status. State changes go
through ``orders.services``; the model only guards its own counters.
"""

import time
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models


class Order(models.Model):
    """Represents one customer-tailor engagement for a custom garment."""

    class Status(models.TextChoices):
        PENDING = "pending", "pending"
        CONSULTATION_SCHEDULED = "consultation_scheduled", "consultation_scheduled"
        CONSULTATION_COMPLETED = "consultation_completed", "consultation_completed"
        FABRIC_SELECTED = "fabric_selected", "fabric_selected"
        IN_PROGRESS = "in_progress", "in_progress"
        REVISION_REQUESTED = "revision_requested", "revision_requested"
        QUALITY_CHECK = "quality_check", "quality_check"
        COMPLETED = "completed", "completed"
        CANCELLED = "cancelled", "cancelled"

    class ServiceType(models.TextChoices):
        BASIC = "basic", "basic"
        PREMIUM = "premium", "premium"
        LUXURY = "luxury", "luxury"
        BULK = "bulk", "bulk"

    class ConsultationType(models.TextChoices):
        IN_PERSON = "in_person", "in_person"
        VIDEO = "video", "video"
        PHONE = "phone", "phone"

    class ConsultationStatus(models.TextChoices):
        PENDING = "pending", "pending"
        SCHEDULED = "scheduled", "scheduled"
        COMPLETED = "completed", "completed"
        CANCELLED = "cancelled", "cancelled"
        RESCHEDULED = "rescheduled", "rescheduled"

    class DeliveryMethod(models.TextChoices):
        PICKUP = "pickup", "pickup"
        HOME_DELIVERY = "home_delivery", "home_delivery"
        COURIER = "courier", "courier"

    TERMINAL_STATUSES = frozenset({Status.COMPLETED.value, Status.CANCELLED.value})

    order_number = models.CharField(max_length=40, unique=True, editable=False)

    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="orders_placed",
    )
    tailor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="orders_received",
    )
    status = models.CharField(
        max_length=30, choices=Status.choices, default=Status.PENDING
    )

    # --- service details ---
    service_type = models.CharField(max_length=20, choices=ServiceType.choices)
    garment_type = models.CharField(max_length=100)
    description = models.TextField(max_length=2000, blank=True, default="")
    measurement_id = models.PositiveIntegerField(null=True, blank=True)
    design_reference = models.JSONField(default=list, blank=True)

    # --- pricing ---
    quantity = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    base_price = models.DecimalField(
        max_digits=12, decimal_places=2, validators=[MinValueValidator(0)]
    )
    fabric_cost = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0"), validators=[MinValueValidator(0)]
    )
    additional_charges = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0"), validators=[MinValueValidator(0)]
    )
    discount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0"), validators=[MinValueValidator(0)]
    )
    total_price = models.DecimalField(
        max_digits=12, decimal_places=2, validators=[MinValueValidator(0)]
    )

    # --- fabric selection ---
    fabric_selected = models.BooleanField(default=False)
    fabric_type = models.CharField(max_length=100, blank=True, default="")
    fabric_color = models.CharField(max_length=50, blank=True, default="")
    fabric_quantity = models.DecimalField(
        max_digits=8, decimal_places=2, null=True, blank=True, validators=[MinValueValidator(0)]
    )
    fabric_supplier = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="fabric_supplies",
        null=True,
        blank=True,
    )

    # --- consultation ---
    consultation_date = models.DateTimeField(null=True, blank=True)
    consultation_type = models.CharField(
        max_length=20, choices=ConsultationType.choices, default=ConsultationType.IN_PERSON
    )
    consultation_status = models.CharField(
        max_length=20, choices=ConsultationStatus.choices, default=ConsultationStatus.PENDING
    )
    consultation_link = models.CharField(max_length=500, blank=True, default="")
    consultation_notes = models.TextField(max_length=1000, blank=True, default="")
    consultation_duration = models.PositiveIntegerField(default=30)
    consultation_requested_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="+",
        null=True,
        blank=True,
    )
    consultation_requested_at = models.DateTimeField(null=True, blank=True)

    # --- revisions ---
    current_revision = models.PositiveIntegerField(default=0, editable=False)

    # --- quality gate ---
    quality_check_passed = models.BooleanField(default=False)
    quality_checked_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="+",
        null=True,
        blank=True,
    )
    quality_checked_at = models.DateTimeField(null=True, blank=True)
    quality_check_notes = models.TextField(blank=True, default="")

    # --- delivery ---
    delivery_method = models.CharField(
        max_length=20, choices=DeliveryMethod.choices, default=DeliveryMethod.PICKUP
    )
    delivery_street = models.CharField(max_length=200, blank=True, default="")
    delivery_city = models.CharField(max_length=100, blank=True, default="")
    delivery_province = models.CharField(max_length=100, blank=True, default="")
    delivery_postal_code = models.CharField(max_length=20, blank=True, default="")
    delivery_country = models.CharField(max_length=100, blank=True, default="Pakistan")
    delivery_phone = models.CharField(max_length=30, blank=True, default="")
    delivery_instructions = models.TextField(max_length=500, blank=True, default="")
    delivery_tracking_number = models.CharField(max_length=100, blank=True, default="")
    delivery_provider = models.CharField(max_length=100, blank=True, default="")
    estimated_delivery_date = models.DateField(null=True, blank=True)

    # --- dates ---
    estimated_completion_date = models.DateField(null=True, blank=True)
    actual_completion_date = models.DateTimeField(null=True, blank=True)
    reputation_recorded_at = models.DateTimeField(null=True, blank=True, editable=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("-created_at", "-id")

    def __str__(self) -> str:
        """Readable representation for admin and debugging."""
        return f"Order<{self.order_number} {self.status}>"

    def save(self, *args, **kwargs):
        if not self.order_number:
            self.order_number = self._generate_order_number()
        super().save(*args, **kwargs)

    @classmethod
    def _generate_order_number(cls) -> str:
        """STC-<epoch millis>-<running count>, e.g. STC-1760850000000-0042."""
        count = cls.objects.count()
        return f"STC-{int(time.time() * 1000)}-{count + 1:04d}"

    @property
    def is_terminal(self) -> bool:
        return self.status in self.TERMINAL_STATUSES

    def is_party(self, user) -> bool:
        """True if ``user`` is the customer or the tailor of this order."""
        user_id = getattr(user, "pk", None)
        return user_id is not None and user_id in (self.customer_id, self.tailor_id)

    def issue_revision_number(self) -> int:
        """Reserve the next revision number; the counter never goes back."""
        self.current_revision += 1
        return self.current_revision


class OrderRevision(models.Model):
    """A change request nested inside an order."""

    class Status(models.TextChoices):
        PENDING = "pending", "pending"
        APPROVED = "approved", "approved"
        REJECTED = "rejected", "rejected"
        IN_PROGRESS = "in_progress", "in_progress"
        COMPLETED = "completed", "completed"
        CUSTOMER_APPROVED = "customer_approved", "customer_approved"
        CUSTOMER_REJECTED = "customer_rejected", "customer_rejected"

    class RequestedBy(models.TextChoices):
        CUSTOMER = "customer", "customer"
        TAILOR = "tailor", "tailor"

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="revisions")
    revision_number = models.PositiveIntegerField(editable=False)
    requested_by = models.CharField(
        max_length=10, choices=RequestedBy.choices, default=RequestedBy.CUSTOMER
    )
    description = models.TextField(blank=True, default="")
    images = models.JSONField(default=list, blank=True)
    notes = models.TextField(blank=True, default="")
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    spawned_from = models.OneToOneField(
        "self",
        on_delete=models.PROTECT,
        related_name="superseded_by",
        null=True,
        blank=True,
    )

    requested_at = models.DateTimeField(auto_now_add=True)
    approved_at = models.DateTimeField(null=True, blank=True)
    approved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, related_name="+", null=True, blank=True
    )
    rejected_at = models.DateTimeField(null=True, blank=True)
    rejected_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, related_name="+", null=True, blank=True
    )
    rejection_reason = models.TextField(blank=True, default="")
    started_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    customer_approved_at = models.DateTimeField(null=True, blank=True)
    customer_rejected_at = models.DateTimeField(null=True, blank=True)
    customer_rejection_reason = models.TextField(blank=True, default="")

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["order", "revision_number"],
                name="unique_revision_number_per_order",
            )
        ]
        ordering = ("revision_number",)

    def __str__(self) -> str:
        return f"OrderRevision<{self.order_id}#{self.revision_number} {self.status}>"


class OrderMessage(models.Model):
    """A message posted by one party of an order."""

    ATTACHMENT_TYPES = ("image", "document", "video", "audio", "other")

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="messages")
    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="order_messages"
    )
    text = models.TextField(blank=True, default="")
    attachments = models.JSONField(default=list, blank=True)
    read = models.BooleanField(default=False)
    read_at = models.DateTimeField(null=True, blank=True)
    sent_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("sent_at", "id")

    def __str__(self) -> str:
        return f"OrderMessage<{self.id} order={self.order_id} from={self.sender_id}>"


class OrderTimelineEntry(models.Model):
    """One audit entry: a status change, the creation or a status note."""

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="timeline")
    status = models.CharField(max_length=30, choices=Order.Status.choices)
    description = models.CharField(max_length=1000, blank=True, default="")
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, related_name="+", null=True, blank=True
    )
    updated_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("updated_at", "id")
        verbose_name_plural = "order timeline entries"

    def __str__(self) -> str:
        return f"OrderTimelineEntry<{self.order_id} {self.status}>"


class OrderDispute(models.Model):
    """A complaint raised by one party; the other party or an admin settles it."""

    class Reason(models.TextChoices):
        QUALITY_ISSUE = "quality_issue", "quality_issue"
        DELIVERY_DELAY = "delivery_delay", "delivery_delay"
        WRONG_ITEM = "wrong_item", "wrong_item"
        DAMAGE = "damage", "damage"
        OTHER = "other", "other"

    class Status(models.TextChoices):
        OPEN = "open", "open"
        UNDER_REVIEW = "under_review", "under_review"
        RESOLVED = "resolved", "resolved"
        REJECTED = "rejected", "rejected"

    CLOSING_STATUSES = frozenset({Status.RESOLVED.value, Status.REJECTED.value})

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="disputes")
    raised_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="order_disputes"
    )
    reason = models.CharField(max_length=20, choices=Reason.choices)
    description = models.TextField(max_length=2000)
    attachments = models.JSONField(default=list, blank=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.OPEN)
    resolution = models.TextField(blank=True, default="")
    resolved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, related_name="+", null=True, blank=True
    )
    resolved_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("created_at", "id")

    def __str__(self) -> str:
        return f"OrderDispute<{self.id} order={self.order_id} {self.status}>"


class OrderAlteration(models.Model):
    """A post-delivery alteration requested by the customer and handled by the tailor."""

    class Urgency(models.TextChoices):
        LOW = "low", "low"
        MEDIUM = "medium", "medium"
        HIGH = "high", "high"

    class Status(models.TextChoices):
        PENDING = "pending", "pending"
        APPROVED = "approved", "approved"
        IN_PROGRESS = "in_progress", "in_progress"
        COMPLETED = "completed", "completed"
        REJECTED = "rejected", "rejected"

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="alterations")
    requested_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="order_alterations"
    )
    description = models.TextField(max_length=1000)
    urgency = models.CharField(max_length=10, choices=Urgency.choices, default=Urgency.MEDIUM)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    estimated_cost = models.DecimalField(
        max_digits=12, decimal_places=2, null=True, blank=True, validators=[MinValueValidator(0)]
    )
    estimated_days = models.PositiveIntegerField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("created_at", "id")

    def __str__(self) -> str:
        return f"OrderAlteration<{self.id} order={self.order_id} {self.status}>"
