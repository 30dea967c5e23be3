from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Profile",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("file", models.CharField(blank=True, default="", max_length=255)),
                ("location", models.CharField(blank=True, default="", max_length=255)),
                ("tel", models.CharField(blank=True, default="", max_length=50)),
                ("description", models.TextField(blank=True, default="")),
                ("working_hours", models.CharField(blank=True, default="", max_length=50)),
                ("shop_name", models.CharField(blank=True, default="", max_length=120)),
                (
                    "type",
                    models.CharField(
                        blank=True,
                        choices=[("customer", "customer"), ("tailor", "tailor")],
                        default="",
                        max_length=20,
                    ),
                ),
                (
                    "rating",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0"),
                        max_digits=3,
                        validators=[
                            django.core.validators.MinValueValidator(0),
                            django.core.validators.MaxValueValidator(5),
                        ],
                    ),
                ),
                ("total_reviews", models.PositiveIntegerField(default=0)),
                ("total_orders", models.PositiveIntegerField(default=0)),
                ("completed_orders", models.PositiveIntegerField(default=0)),
                (
                    "completion_rate",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0"),
                        max_digits=5,
                        validators=[
                            django.core.validators.MinValueValidator(0),
                            django.core.validators.MaxValueValidator(100),
                        ],
                    ),
                ),
                ("average_response_time", models.DecimalField(blank=True, decimal_places=2, max_digits=7, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "user",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="profile",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
        ),
        migrations.CreateModel(
            name="TailorBadge",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "badge_type",
                    models.CharField(
                        choices=[
                            ("Master Tailor", "Master Tailor"),
                            ("Speed Stitching", "Speed Stitching"),
                            ("Quality Expert", "Quality Expert"),
                            ("Customer Favorite", "Customer Favorite"),
                        ],
                        max_length=40,
                    ),
                ),
                ("name", models.CharField(max_length=80)),
                ("earned_at", models.DateTimeField(auto_now_add=True)),
                (
                    "profile",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="badges",
                        to="profiles.profile",
                    ),
                ),
            ],
            options={
                "ordering": ("earned_at", "id"),
            },
        ),
        migrations.AddConstraint(
            model_name="tailorbadge",
            constraint=models.UniqueConstraint(
                fields=("profile", "badge_type"), name="unique_badge_type_per_profile"
            ),
        ),
    ]
