import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


def text(max_length=None, **kwargs):
    if max_length is None:
        return models.TextField(blank=True, default="", **kwargs)
    return models.CharField(blank=True, default="", max_length=max_length, **kwargs)


class Migration(migrations.Migration):

    dependencies = [
        ("orders", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.AddField(
            model_name="order",
            name="delivery_method",
            field=models.CharField(
                choices=[("pickup", "pickup"), ("home_delivery", "home_delivery"), ("courier", "courier")],
                default="pickup",
                max_length=20,
            ),
        ),
        migrations.AddField(model_name="order", name="delivery_street", field=text(200)),
        migrations.AddField(model_name="order", name="delivery_city", field=text(100)),
        migrations.AddField(model_name="order", name="delivery_province", field=text(100)),
        migrations.AddField(model_name="order", name="delivery_postal_code", field=text(20)),
        migrations.AddField(
            model_name="order",
            name="delivery_country",
            field=models.CharField(blank=True, default="Pakistan", max_length=100),
        ),
        migrations.AddField(model_name="order", name="delivery_phone", field=text(30)),
        migrations.AddField(
            model_name="order",
            name="delivery_instructions",
            field=models.TextField(blank=True, default="", max_length=500),
        ),
        migrations.AddField(model_name="order", name="delivery_tracking_number", field=text(100)),
        migrations.AddField(model_name="order", name="delivery_provider", field=text(100)),
        migrations.AddField(
            model_name="order",
            name="estimated_delivery_date",
            field=models.DateField(blank=True, null=True),
        ),
        migrations.CreateModel(
            name="OrderDispute",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "reason",
                    models.CharField(
                        choices=[
                            ("quality_issue", "quality_issue"),
                            ("delivery_delay", "delivery_delay"),
                            ("wrong_item", "wrong_item"),
                            ("damage", "damage"),
                            ("other", "other"),
                        ],
                        max_length=20,
                    ),
                ),
                ("description", models.TextField(max_length=2000)),
                ("attachments", models.JSONField(blank=True, default=list)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("open", "open"),
                            ("under_review", "under_review"),
                            ("resolved", "resolved"),
                            ("rejected", "rejected"),
                        ],
                        default="open",
                        max_length=20,
                    ),
                ),
                ("resolution", text()),
                ("resolved_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="disputes", to="orders.order"
                    ),
                ),
                (
                    "raised_by",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="order_disputes",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "resolved_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ("created_at", "id"),
            },
        ),
        migrations.CreateModel(
            name="OrderAlteration",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("description", models.TextField(max_length=1000)),
                (
                    "urgency",
                    models.CharField(
                        choices=[("low", "low"), ("medium", "medium"), ("high", "high")],
                        default="medium",
                        max_length=10,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "pending"),
                            ("approved", "approved"),
                            ("in_progress", "in_progress"),
                            ("completed", "completed"),
                            ("rejected", "rejected"),
                        ],
                        default="pending",
                        max_length=20,
                    ),
                ),
                (
                    "estimated_cost",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        max_digits=12,
                        null=True,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                ("estimated_days", models.PositiveIntegerField(blank=True, null=True)),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="alterations", to="orders.order"
                    ),
                ),
                (
                    "requested_by",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="order_alterations",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ("created_at", "id"),
            },
        ),
    ]
