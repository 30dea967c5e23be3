"""Orders API serializers.

Input serializers validate the shape of a request before it reaches
``orders.services``; output serializers represent orders, their revisions,
messages and timeline to clients. No serializer here writes to the database:
every state change goes through the service layer.
"""

from rest_framework import serializers

from orders.models import (
    Order,
    OrderAlteration,
    OrderDispute,
    OrderMessage,
    OrderRevision,
    OrderTimelineEntry,
)
from orders.services.messages import unread_count


def _money_field(**kwargs):
    return serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, **kwargs)


# ------------------------------ input ------------------------------

class OrderCreateSerializer(serializers.Serializer):
    """Input serializer for placing an order with a tailor."""

    tailor_id = serializers.IntegerField()
    service_type = serializers.ChoiceField(choices=Order.ServiceType.choices)
    garment_type = serializers.CharField(max_length=100)
    description = serializers.CharField(
        max_length=2000, required=False, allow_blank=True, default=""
    )
    measurement_id = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    design_reference = serializers.ListField(
        child=serializers.CharField(max_length=500), required=False, default=list
    )
    consultation_date = serializers.DateTimeField(required=False, allow_null=True)
    quantity = serializers.IntegerField(required=False, min_value=1, default=1)
    base_price = _money_field()
    fabric_cost = _money_field(required=False)
    additional_charges = _money_field(required=False)
    discount = _money_field(required=False)
    total_price = _money_field(required=False)
    estimated_completion_date = serializers.DateField(required=False, allow_null=True)


class OrderPricingPatchSerializer(serializers.Serializer):
    """PATCH /orders/<pk>/: cost components and, optionally, a new total."""

    fabric_cost = _money_field(required=False)
    additional_charges = _money_field(required=False)
    discount = _money_field(required=False)
    total_price = _money_field(required=False)


class OrderStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Order.Status.choices)
    notes = serializers.CharField(max_length=1000, required=False, allow_blank=True)


class ConsultationScheduleSerializer(serializers.Serializer):
    consultation_date = serializers.DateTimeField()
    consultation_type = serializers.ChoiceField(
        choices=Order.ConsultationType.choices, required=False
    )
    consultation_link = serializers.CharField(max_length=500, required=False, allow_blank=True)
    consultation_duration = serializers.IntegerField(required=False, min_value=1)
    notes = serializers.CharField(max_length=1000, required=False, allow_blank=True)


class ConsultationRescheduleSerializer(serializers.Serializer):
    consultation_date = serializers.DateTimeField()
    consultation_link = serializers.CharField(max_length=500, required=False, allow_blank=True)
    notes = serializers.CharField(max_length=1000, required=False, allow_blank=True)


class ConsultationStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Order.ConsultationStatus.choices)
    notes = serializers.CharField(max_length=1000, required=False, allow_blank=True)


class FabricSerializer(serializers.Serializer):
    fabric_type = serializers.CharField(max_length=100, required=False, allow_blank=True)
    color = serializers.CharField(max_length=50, required=False, allow_blank=True)
    quantity = serializers.DecimalField(
        max_digits=8, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    supplier_id = serializers.IntegerField(required=False, allow_null=True)


class RevisionCreateSerializer(serializers.Serializer):
    description = serializers.CharField(required=False, allow_blank=True, default="")
    images = serializers.ListField(
        child=serializers.CharField(max_length=500), required=False, default=list
    )


class RevisionActionSerializer(serializers.Serializer):
    """Optional payload of a revision action (which keys apply depends on the action)."""

    notes = serializers.CharField(required=False, allow_blank=True)
    reason = serializers.CharField(required=False, allow_blank=True)
    images = serializers.ListField(
        child=serializers.CharField(max_length=500), required=False
    )


class AttachmentSerializer(serializers.Serializer):
    type = serializers.ChoiceField(
        choices=[(t, t) for t in OrderMessage.ATTACHMENT_TYPES], required=False, default="image"
    )
    url = serializers.CharField(max_length=500)
    name = serializers.CharField(max_length=200, required=False, allow_blank=True, default="")


class MessageCreateSerializer(serializers.Serializer):
    text = serializers.CharField(max_length=5000, required=False, allow_blank=True, default="")
    attachments = AttachmentSerializer(many=True, required=False, default=list)


class DeliveryAddressSerializer(serializers.Serializer):
    street = serializers.CharField(max_length=200, required=False, allow_blank=True)
    city = serializers.CharField(max_length=100, required=False, allow_blank=True)
    province = serializers.CharField(max_length=100, required=False, allow_blank=True)
    postal_code = serializers.CharField(max_length=20, required=False, allow_blank=True)
    country = serializers.CharField(max_length=100, required=False, allow_blank=True)
    phone = serializers.CharField(max_length=30, required=False, allow_blank=True)


class DeliveryUpdateSerializer(serializers.Serializer):
    """PATCH /orders/<pk>/delivery/: any subset of the delivery details."""

    method = serializers.ChoiceField(choices=Order.DeliveryMethod.choices, required=False)
    address = DeliveryAddressSerializer(required=False)
    special_instructions = serializers.CharField(max_length=500, required=False, allow_blank=True)
    tracking_number = serializers.CharField(max_length=100, required=False, allow_blank=True)
    provider = serializers.CharField(max_length=100, required=False, allow_blank=True)
    estimated_delivery_date = serializers.DateField(required=False)


class DisputeCreateSerializer(serializers.Serializer):
    reason = serializers.ChoiceField(choices=OrderDispute.Reason.choices)
    description = serializers.CharField(max_length=2000)
    attachments = serializers.ListField(
        child=serializers.CharField(max_length=500), required=False, default=list
    )


class DisputeResolveSerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=[(s, s) for s in sorted(OrderDispute.CLOSING_STATUSES)]
    )
    resolution = serializers.CharField(max_length=2000, required=False, allow_blank=True)


class AlterationCreateSerializer(serializers.Serializer):
    description = serializers.CharField(max_length=1000)
    urgency = serializers.ChoiceField(choices=OrderAlteration.Urgency.choices, required=False)


class AlterationStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderAlteration.Status.choices)
    estimated_cost = _money_field(required=False)
    estimated_days = serializers.IntegerField(required=False, min_value=0)


# ------------------------------ output ------------------------------

class OrderRevisionSerializer(serializers.ModelSerializer):
    spawned_from = serializers.SerializerMethodField()

    class Meta:
        model = OrderRevision
        fields = [
            "revision_number",
            "requested_by",
            "description",
            "images",
            "notes",
            "status",
            "spawned_from",
            "requested_at",
            "approved_at",
            "approved_by",
            "rejected_at",
            "rejected_by",
            "rejection_reason",
            "started_at",
            "completed_at",
            "customer_approved_at",
            "customer_rejected_at",
            "customer_rejection_reason",
        ]
        read_only_fields = fields

    def get_spawned_from(self, obj):
        """Revision number this revision replaces, if any."""
        return obj.spawned_from.revision_number if obj.spawned_from_id else None


class OrderMessageSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderMessage
        fields = ["id", "sender", "text", "attachments", "read", "read_at", "sent_at"]
        read_only_fields = fields


class OrderDisputeSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderDispute
        fields = [
            "id",
            "raised_by",
            "reason",
            "description",
            "attachments",
            "status",
            "resolution",
            "resolved_by",
            "resolved_at",
            "created_at",
        ]
        read_only_fields = fields


class OrderAlterationSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderAlteration
        fields = [
            "id",
            "requested_by",
            "description",
            "urgency",
            "status",
            "estimated_cost",
            "estimated_days",
            "completed_at",
            "created_at",
        ]
        read_only_fields = fields


class OrderTimelineEntrySerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderTimelineEntry
        fields = ["status", "description", "updated_by", "updated_at"]
        read_only_fields = fields


class OrderListSerializer(serializers.ModelSerializer):
    """Compact order representation for list responses."""

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "customer",
            "tailor",
            "status",
            "service_type",
            "garment_type",
            "quantity",
            "total_price",
            "current_revision",
            "estimated_completion_date",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class OrderDetailSerializer(serializers.ModelSerializer):
    """Full order with its delivery details and nested child rows."""

    fabric = serializers.SerializerMethodField()
    consultation = serializers.SerializerMethodField()
    quality_check = serializers.SerializerMethodField()
    revisions = OrderRevisionSerializer(many=True, read_only=True)
    messages = OrderMessageSerializer(many=True, read_only=True)
    disputes = OrderDisputeSerializer(many=True, read_only=True)
    alterations = OrderAlterationSerializer(many=True, read_only=True)
    delivery = serializers.SerializerMethodField()
    timeline = OrderTimelineEntrySerializer(many=True, read_only=True)
    unread_messages = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "customer",
            "tailor",
            "status",
            "service_type",
            "garment_type",
            "description",
            "measurement_id",
            "design_reference",
            "quantity",
            "base_price",
            "fabric_cost",
            "additional_charges",
            "discount",
            "total_price",
            "fabric",
            "consultation",
            "current_revision",
            "revisions",
            "quality_check",
            "estimated_completion_date",
            "actual_completion_date",
            "delivery",
            "messages",
            "unread_messages",
            "disputes",
            "alterations",
            "timeline",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_fabric(self, obj):
        return {
            "selected": obj.fabric_selected,
            "type": obj.fabric_type,
            "color": obj.fabric_color,
            "quantity": str(obj.fabric_quantity) if obj.fabric_quantity is not None else None,
            "supplier": obj.fabric_supplier_id,
        }

    def get_consultation(self, obj):
        return {
            "date": obj.consultation_date,
            "type": obj.consultation_type,
            "status": obj.consultation_status,
            "link": obj.consultation_link,
            "notes": obj.consultation_notes,
            "duration": obj.consultation_duration,
            "requested_by": obj.consultation_requested_by_id,
            "requested_at": obj.consultation_requested_at,
        }

    def get_quality_check(self, obj):
        return {
            "passed": obj.quality_check_passed,
            "checked_by": obj.quality_checked_by_id,
            "checked_at": obj.quality_checked_at,
            "notes": obj.quality_check_notes,
        }

    def get_delivery(self, obj):
        return {
            "method": obj.delivery_method,
            "address": {
                "street": obj.delivery_street,
                "city": obj.delivery_city,
                "province": obj.delivery_province,
                "postal_code": obj.delivery_postal_code,
                "country": obj.delivery_country,
                "phone": obj.delivery_phone,
            },
            "special_instructions": obj.delivery_instructions,
            "tracking_number": obj.delivery_tracking_number,
            "provider": obj.delivery_provider,
            "estimated_delivery_date": obj.estimated_delivery_date,
        }

    def get_unread_messages(self, obj):
        """Unread messages addressed to the requesting user."""
        request = self.context.get("request")
        if not request or not request.user.is_authenticated:
            return 0
        return unread_count(obj, request.user)
