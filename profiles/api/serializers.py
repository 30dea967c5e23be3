"""Profile serializers for customers and tailors.

A profile is shown in three shapes: the full card of one account (tailor
cards carry the reputation ledger and earned badges, customer cards do not),
the tailor directory entry, and the slimmer customer directory entry. The
owner edits their own card through ``ProfilePatchSerializer``; the account
type and every ledger figure stay read-only there because only the order
services and the review hooks may move them.

Text fields of a card render as ``""`` when unset, never as ``null``.
"""

from rest_framework import serializers
from ..models import Profile, TailorBadge

# Ledger figures maintained by profiles.services.reputation.
REPUTATION_FIELDS = [
    "rating",
    "total_reviews",
    "total_orders",
    "completed_orders",
    "completion_rate",
    "average_response_time",
]

# Contact and shop details the owner may edit.
CARD_FIELDS = ["file", "location", "tel", "description", "working_hours", "shop_name"]


def _save_account(user, values: dict):
    """Copy name/email edits onto the auth user; ``None`` clears the value."""
    if not values:
        return
    for attr, val in values.items():
        setattr(user, attr, "" if val is None else val)
    user.save(update_fields=list(values))


class BlankNotNullMixin:
    """Render the names in ``blank_fields`` as ``""`` instead of ``None``."""

    blank_fields = ()

    def to_representation(self, instance):
        data = super().to_representation(instance)
        for key in self.blank_fields:
            if data.get(key) is None:
                data[key] = ""
        return data


class AccountNameMixin(serializers.Serializer):
    """Read-only username and real name taken from the auth user."""

    username = serializers.CharField(source="user.username", read_only=True)
    first_name = serializers.CharField(source="user.first_name", read_only=True, allow_blank=True)
    last_name = serializers.CharField(source="user.last_name", read_only=True, allow_blank=True)


class TailorBadgeSerializer(serializers.ModelSerializer):
    class Meta:
        model = TailorBadge
        fields = ["badge_type", "name", "earned_at"]
        read_only_fields = fields


class ProfilePatchSerializer(BlankNotNullMixin, serializers.ModelSerializer):
    """Owner edits of their own card; ``file`` holds the avatar URL."""

    username = serializers.CharField(source="user.username", read_only=True)
    first_name = serializers.CharField(
        source="user.first_name", required=False, allow_blank=True, allow_null=True
    )
    last_name = serializers.CharField(
        source="user.last_name", required=False, allow_blank=True, allow_null=True
    )
    email = serializers.EmailField(
        source="user.email", required=False, allow_blank=True, allow_null=True
    )

    blank_fields = ("first_name", "last_name", *CARD_FIELDS)

    class Meta:
        model = Profile
        fields = ["user", "username", "first_name", "last_name", *CARD_FIELDS, "type", "email", "created_at"]
        read_only_fields = ["user", "username", "type", "created_at"]
        extra_kwargs = {
            name: {"required": False, "allow_blank": True, "allow_null": True} for name in CARD_FIELDS
        }

    def update(self, instance: Profile, validated_data):
        _save_account(instance.user, validated_data.pop("user", {}))
        for attr, val in validated_data.items():
            setattr(instance, attr, "" if val is None else val)
        instance.save()
        return instance


class ProfileDetailSerializer(BlankNotNullMixin, AccountNameMixin, serializers.ModelSerializer):
    """One account's card. Ledger figures and badges appear on tailor cards only."""

    email = serializers.EmailField(source="user.email", read_only=True)
    badges = TailorBadgeSerializer(many=True, read_only=True)

    blank_fields = ("first_name", "last_name", "location", "tel", "description", "working_hours")

    class Meta:
        model = Profile
        fields = [
            "user",
            "username",
            "first_name",
            "last_name",
            *CARD_FIELDS,
            "type",
            "email",
            *REPUTATION_FIELDS,
            "badges",
            "created_at",
        ]
        read_only_fields = fields

    def to_representation(self, instance: Profile):
        data = super().to_representation(instance)
        if not instance.is_tailor:
            for key in (*REPUTATION_FIELDS, "badges"):
                data.pop(key, None)
        return data


class TailorProfileListSerializer(BlankNotNullMixin, AccountNameMixin, serializers.ModelSerializer):
    """Tailor directory entry: the card plus headline ledger figures and badge slugs."""

    badges = serializers.SlugRelatedField(many=True, read_only=True, slug_field="badge_type")

    blank_fields = ("first_name", "last_name", "location", "tel", "description", "working_hours")

    class Meta:
        model = Profile
        fields = [
            "user",
            "username",
            "first_name",
            "last_name",
            *CARD_FIELDS,
            "type",
            "rating",
            "completed_orders",
            "completion_rate",
            "badges",
        ]


class CustomerProfileListSerializer(BlankNotNullMixin, AccountNameMixin, serializers.ModelSerializer):
    # uploaded_at is the profile's creation time, second precision
    uploaded_at = serializers.DateTimeField(
        source="created_at", read_only=True, format="%Y-%m-%dT%H:%M:%S"
    )

    blank_fields = ("first_name", "last_name", "type")

    class Meta:
        model = Profile
        fields = ["user", "username", "first_name", "last_name", "file", "uploaded_at", "type"]
