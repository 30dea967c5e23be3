from django.contrib import admin
from django.utils.html import format_html
from .models import (
    Order,
    OrderAlteration,
    OrderDispute,
    OrderMessage,
    OrderRevision,
    OrderTimelineEntry,
)


class OrderRevisionInline(admin.TabularInline):
    model = OrderRevision
    fk_name = "order"
    extra = 0
    can_delete = False
    fields = ("revision_number", "status", "requested_by", "description", "requested_at", "completed_at")
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


class OrderTimelineInline(admin.TabularInline):
    model = OrderTimelineEntry
    extra = 0
    can_delete = False
    fields = ("status", "description", "updated_by", "updated_at")
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


class OrderDisputeInline(admin.TabularInline):
    model = OrderDispute
    fk_name = "order"
    extra = 0
    can_delete = False
    fields = ("reason", "status", "raised_by", "resolved_by", "created_at", "resolved_at")
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


class OrderAlterationInline(admin.TabularInline):
    model = OrderAlteration
    extra = 0
    can_delete = False
    fields = ("description", "urgency", "status", "estimated_cost", "estimated_days", "completed_at")
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """
    Order-Verwaltung (nur lesend):
    - Liste: Nummer, Status (Badge), Customer, Tailor, Service, Gesamtpreis, Created
    - Filter: Status, Service-Typ, Created (Date-Hierarchy)
    - Suche: Auftragsnummer, Customer-Username, Tailor-Username
    - Statuswechsel laufen ausschließlich über die Services (Timeline + Reputation)
    - Streitfälle und Änderungswünsche nur als Inline-Ansicht
    """
    list_display = (
        "order_number",
        "status_badge",
        "customer_username",
        "tailor_username",
        "service_type",
        "garment_type",
        "total_price",
        "current_revision",
        "created_at",
    )
    list_select_related = ("customer", "tailor")
    list_filter = ("status", "service_type", "created_at")
    date_hierarchy = "created_at"
    ordering = ("-created_at", "-id")
    search_fields = ("order_number", "customer__username", "tailor__username")
    inlines = (OrderRevisionInline, OrderDisputeInline, OrderAlterationInline, OrderTimelineInline)

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    # Badges & Shortcuts
    def status_badge(self, obj):
        color = {
            "pending": "#9ca3af",
            "consultation_scheduled": "#a78bfa",
            "consultation_completed": "#8b5cf6",
            "fabric_selected": "#f59e0b",
            "in_progress": "#0ea5e9",
            "revision_requested": "#f97316",
            "quality_check": "#14b8a6",
            "completed": "#22c55e",
            "cancelled": "#ef4444",
        }.get(obj.status, "#9ca3af")
        return format_html(
            '<span style="display:inline-block;padding:2px 8px;border-radius:999px;'
            'font-size:12px;font-weight:600;color:#fff;background:{};">{}</span>',
            color,
            obj.status,
        )
    status_badge.short_description = "status"
    status_badge.admin_order_field = "status"

    def customer_username(self, obj):
        return obj.customer.username if obj.customer_id else ""
    customer_username.short_description = "customer"

    def tailor_username(self, obj):
        return obj.tailor.username if obj.tailor_id else ""
    tailor_username.short_description = "tailor"


@admin.register(OrderMessage)
class OrderMessageAdmin(admin.ModelAdmin):
    """Nachrichten je Auftrag; Inhalt bleibt unverändert (append-only)."""
    list_display = ("id", "order", "sender", "read", "sent_at")
    list_select_related = ("order", "sender")
    list_filter = ("read", "sent_at")
    search_fields = ("order__order_number", "sender__username", "text")
    readonly_fields = ("order", "sender", "text", "attachments", "read", "read_at", "sent_at")


@admin.register(OrderDispute)
class OrderDisputeAdmin(admin.ModelAdmin):
    """Streitfälle je Auftrag; Klärung erfolgt über die API (Gegenpartei oder Admin)."""
    list_display = ("id", "order", "reason", "status", "raised_by", "resolved_by", "created_at")
    list_select_related = ("order", "raised_by", "resolved_by")
    list_filter = ("status", "reason", "created_at")
    search_fields = ("order__order_number", "raised_by__username", "description")
    readonly_fields = (
        "order", "raised_by", "reason", "description", "attachments",
        "status", "resolution", "resolved_by", "resolved_at", "created_at",
    )
