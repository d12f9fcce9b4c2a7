from rest_framework.permissions import BasePermission

from .enums import UserRole


class IsRole(BasePermission):
    """Authenticated and holding one of ``required_roles``."""
    required_roles: frozenset = frozenset()

    def has_permission(self, request, view):
        u = request.user
        return bool(u and u.is_authenticated and u.role in self.required_roles)


class IsAdmin(IsRole):
    required_roles = frozenset({UserRole.ADMIN})


class IsStaff(IsRole):
    """Intake coordinators, doctors and admins."""
    required_roles = frozenset(UserRole.staff_roles())


class IsReviewer(IsRole):
    """May review, close, or discard AI output."""
    required_roles = frozenset(UserRole.reviewer_roles())
