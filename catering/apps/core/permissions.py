from rest_framework.permissions import BasePermission

from .models import UserRole


def get_user_role(user):
    """Return ``admin``, ``staff`` or None for the given user."""
    if not user or not user.is_authenticated:
        return None
    roles = set(user.roles.values_list("role", flat=True))
    if UserRole.ADMIN in roles:
        return UserRole.ADMIN
    if UserRole.STAFF in roles:
        return UserRole.STAFF
    return None


class IsStaffMember(BasePermission):
    message = "Keine Berechtigung"

    def has_permission(self, request, view):
        return get_user_role(request.user) in (UserRole.ADMIN, UserRole.STAFF)


class IsAdminRole(BasePermission):
    message = "Keine Berechtigung"

    def has_permission(self, request, view):
        return get_user_role(request.user) == UserRole.ADMIN
