"""Actor role resolution.

The role of a caller is derived from its profile type; staff users act as
admins regardless of their profile.
"""

from profiles.models import Profile

ROLE_CUSTOMER = Profile.TYPE_CUSTOMER
ROLE_TAILOR = Profile.TYPE_TAILOR
ROLE_ADMIN = "admin"


def profile_type(user) -> str:
    """Return the profile type of ``user`` or an empty string."""
    if not user or not getattr(user, "is_authenticated", False):
        return ""
    prof = getattr(user, "profile", None)
    return getattr(prof, "type", "") if prof else ""


def resolve_role(user) -> str:
    """Map a user onto one of customer/tailor/admin ('' if none applies)."""
    if user and getattr(user, "is_authenticated", False) and user.is_staff:
        return ROLE_ADMIN
    return profile_type(user)


def is_active_tailor(user) -> bool:
    """True if ``user`` is an active account with a tailor profile."""
    return bool(user and user.is_active and profile_type(user) == ROLE_TAILOR)
