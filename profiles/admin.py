from django.contrib import admin
from .models import Profile, TailorBadge


class TailorBadgeInline(admin.TabularInline):
    model = TailorBadge
    extra = 0
    can_delete = False
    readonly_fields = ("badge_type", "name", "earned_at")

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    """
    Profile-Liste mit eigener ID + zugehöriger User-ID.
    Reputation (Zähler, Rate, Rating) wird nur vom Ledger geschrieben -> readonly.
    """
    list_display = (
        "id",
        "user_id_display",
        "user",
        "type",
        "rating",
        "completed_orders",
        "total_orders",
        "completion_rate",
        "created_at",
    )
    list_select_related = ("user",)
    search_fields = ("user__username", "user__email", "type", "shop_name")
    list_filter = ("type", "created_at")
    ordering = ("-created_at", "-id")
    autocomplete_fields = ("user",)
    readonly_fields = (
        "rating",
        "total_reviews",
        "total_orders",
        "completed_orders",
        "completion_rate",
        "average_response_time",
        "created_at",
    )
    inlines = (TailorBadgeInline,)

    def user_id_display(self, obj):
        return obj.user_id
    user_id_display.short_description = "user id"
    user_id_display.admin_order_field = "user__id"
