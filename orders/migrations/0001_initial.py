from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models

ORDER_STATUS_CHOICES = [
    ("pending", "pending"),
    ("consultation_scheduled", "consultation_scheduled"),
    ("consultation_completed", "consultation_completed"),
    ("fabric_selected", "fabric_selected"),
    ("in_progress", "in_progress"),
    ("revision_requested", "revision_requested"),
    ("quality_check", "quality_check"),
    ("completed", "completed"),
    ("cancelled", "cancelled"),
]


def money(**kwargs):
    return models.DecimalField(
        decimal_places=2,
        max_digits=12,
        validators=[django.core.validators.MinValueValidator(0)],
        **kwargs,
    )


def user_fk(related_name, on_delete=django.db.models.deletion.SET_NULL, nullable=True):
    extra = {"blank": True, "null": True} if nullable else {}
    return models.ForeignKey(
        on_delete=on_delete, related_name=related_name, to=settings.AUTH_USER_MODEL, **extra
    )


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Order",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("order_number", models.CharField(editable=False, max_length=40, unique=True)),
                ("status", models.CharField(choices=ORDER_STATUS_CHOICES, default="pending", max_length=30)),
                (
                    "service_type",
                    models.CharField(
                        choices=[("basic", "basic"), ("premium", "premium"), ("luxury", "luxury"), ("bulk", "bulk")],
                        max_length=20,
                    ),
                ),
                ("garment_type", models.CharField(max_length=100)),
                ("description", models.TextField(blank=True, default="", max_length=2000)),
                ("measurement_id", models.PositiveIntegerField(blank=True, null=True)),
                ("design_reference", models.JSONField(blank=True, default=list)),
                (
                    "quantity",
                    models.PositiveIntegerField(
                        default=1, validators=[django.core.validators.MinValueValidator(1)]
                    ),
                ),
                ("base_price", money()),
                ("fabric_cost", money(default=Decimal("0"))),
                ("additional_charges", money(default=Decimal("0"))),
                ("discount", money(default=Decimal("0"))),
                ("total_price", money()),
                ("fabric_selected", models.BooleanField(default=False)),
                ("fabric_type", models.CharField(blank=True, default="", max_length=100)),
                ("fabric_color", models.CharField(blank=True, default="", max_length=50)),
                (
                    "fabric_quantity",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        max_digits=8,
                        null=True,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                ("consultation_date", models.DateTimeField(blank=True, null=True)),
                (
                    "consultation_type",
                    models.CharField(
                        choices=[("in_person", "in_person"), ("video", "video"), ("phone", "phone")],
                        default="in_person",
                        max_length=20,
                    ),
                ),
                (
                    "consultation_status",
                    models.CharField(
                        choices=[
                            ("pending", "pending"),
                            ("scheduled", "scheduled"),
                            ("completed", "completed"),
                            ("cancelled", "cancelled"),
                            ("rescheduled", "rescheduled"),
                        ],
                        default="pending",
                        max_length=20,
                    ),
                ),
                ("consultation_link", models.CharField(blank=True, default="", max_length=500)),
                ("consultation_notes", models.TextField(blank=True, default="", max_length=1000)),
                ("consultation_duration", models.PositiveIntegerField(default=30)),
                ("consultation_requested_at", models.DateTimeField(blank=True, null=True)),
                ("current_revision", models.PositiveIntegerField(default=0, editable=False)),
                ("quality_check_passed", models.BooleanField(default=False)),
                ("quality_checked_at", models.DateTimeField(blank=True, null=True)),
                ("quality_check_notes", models.TextField(blank=True, default="")),
                ("estimated_completion_date", models.DateField(blank=True, null=True)),
                ("actual_completion_date", models.DateTimeField(blank=True, null=True)),
                ("reputation_recorded_at", models.DateTimeField(blank=True, editable=False, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("customer", user_fk("orders_placed", django.db.models.deletion.PROTECT, nullable=False)),
                ("tailor", user_fk("orders_received", django.db.models.deletion.PROTECT, nullable=False)),
                ("fabric_supplier", user_fk("fabric_supplies")),
                ("consultation_requested_by", user_fk("+")),
                ("quality_checked_by", user_fk("+")),
            ],
            options={
                "ordering": ("-created_at", "-id"),
            },
        ),
        migrations.CreateModel(
            name="OrderRevision",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("revision_number", models.PositiveIntegerField(editable=False)),
                (
                    "requested_by",
                    models.CharField(
                        choices=[("customer", "customer"), ("tailor", "tailor")],
                        default="customer",
                        max_length=10,
                    ),
                ),
                ("description", models.TextField(blank=True, default="")),
                ("images", models.JSONField(blank=True, default=list)),
                ("notes", models.TextField(blank=True, default="")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "pending"),
                            ("approved", "approved"),
                            ("rejected", "rejected"),
                            ("in_progress", "in_progress"),
                            ("completed", "completed"),
                            ("customer_approved", "customer_approved"),
                            ("customer_rejected", "customer_rejected"),
                        ],
                        default="pending",
                        max_length=20,
                    ),
                ),
                ("requested_at", models.DateTimeField(auto_now_add=True)),
                ("approved_at", models.DateTimeField(blank=True, null=True)),
                ("rejected_at", models.DateTimeField(blank=True, null=True)),
                ("rejection_reason", models.TextField(blank=True, default="")),
                ("started_at", models.DateTimeField(blank=True, null=True)),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                ("customer_approved_at", models.DateTimeField(blank=True, null=True)),
                ("customer_rejected_at", models.DateTimeField(blank=True, null=True)),
                ("customer_rejection_reason", models.TextField(blank=True, default="")),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="revisions",
                        to="orders.order",
                    ),
                ),
                (
                    "spawned_from",
                    models.OneToOneField(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="superseded_by",
                        to="orders.orderrevision",
                    ),
                ),
                ("approved_by", user_fk("+")),
                ("rejected_by", user_fk("+")),
            ],
            options={
                "ordering": ("revision_number",),
            },
        ),
        migrations.AddConstraint(
            model_name="orderrevision",
            constraint=models.UniqueConstraint(
                fields=("order", "revision_number"), name="unique_revision_number_per_order"
            ),
        ),
        migrations.CreateModel(
            name="OrderMessage",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("text", models.TextField(blank=True, default="")),
                ("attachments", models.JSONField(blank=True, default=list)),
                ("read", models.BooleanField(default=False)),
                ("read_at", models.DateTimeField(blank=True, null=True)),
                ("sent_at", models.DateTimeField(auto_now_add=True)),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="messages",
                        to="orders.order",
                    ),
                ),
                ("sender", user_fk("order_messages", django.db.models.deletion.PROTECT, nullable=False)),
            ],
            options={
                "ordering": ("sent_at", "id"),
            },
        ),
        migrations.CreateModel(
            name="OrderTimelineEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("status", models.CharField(choices=ORDER_STATUS_CHOICES, max_length=30)),
                ("description", models.CharField(blank=True, default="", max_length=1000)),
                ("updated_at", models.DateTimeField(auto_now_add=True)),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="timeline",
                        to="orders.order",
                    ),
                ),
                ("updated_by", user_fk("+")),
            ],
            options={
                "ordering": ("updated_at", "id"),
                "verbose_name_plural": "order timeline entries",
            },
        ),
    ]
