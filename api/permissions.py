"""
API permissions.

Reads need a session; writes need the ``admin`` role.
"""

from rest_framework.permissions import SAFE_METHODS, BasePermission

from core.domain.value_objects import UserRole


def user_role(user):
    """Role stored on the user's profile, or None."""
    if user is None or not user.is_authenticated:
        return None
    profile = getattr(user, "profile", None)
    return getattr(profile, "role", None)


class IsAdminOrReadOnly(BasePermission):
    """Safe methods for any signed-in user, writes only for admins."""

    message = "Administrator role required"

    def has_permission(self, request, view):
        user = getattr(request, "user", None)
        if user is None or not user.is_authenticated:
            return False
        if request.method in SAFE_METHODS:
            return True
        return user_role(user) == UserRole.ADMIN.value


class IsSignedIn(BasePermission):
    """Any signed-in user, for the current user's own data."""

    def has_permission(self, request, view):
        user = getattr(request, "user", None)
        return user is not None and user.is_authenticated
