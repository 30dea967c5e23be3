from django.contrib import admin
from django.contrib.auth import get_user_model
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin

User = get_user_model()

# Standard-UserAdmin ersetzen (idempotent).
if admin.site.is_registered(User):
    admin.site.unregister(User)


def _profile(obj):
    return getattr(obj, "profile", None)


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    """
    Benutzerliste mit Rolle (Customer/Tailor), Shop-Name und, bei Tailors,
    den wichtigsten Kennzahlen aus dem Reputations-Ledger.
    """
    list_display = (
        "id",
        "username",
        "email",
        "role",
        "shop",
        "rating",
        "completed",
        "is_staff",
        "is_active",
    )
    list_select_related = ("profile",)
    ordering = ("-date_joined", "-id")
    search_fields = ("username", "email", "profile__shop_name")
    list_filter = ("profile__type", "is_active", "is_staff")

    @admin.display(description="role", ordering="profile__type")
    def role(self, obj):
        prof = _profile(obj)
        return prof.type if prof and prof.type else "-"

    @admin.display(description="shop")
    def shop(self, obj):
        prof = _profile(obj)
        return prof.shop_name if prof and prof.is_tailor else ""

    @admin.display(description="rating", ordering="profile__rating")
    def rating(self, obj):
        prof = _profile(obj)
        return prof.rating if prof and prof.is_tailor else None

    @admin.display(description="completed / total")
    def completed(self, obj):
        prof = _profile(obj)
        if not prof or not prof.is_tailor:
            return None
        return f"{prof.completed_orders} / {prof.total_orders}"
