from rest_framework.permissions import BasePermission

from accounts.enums import UserRole


class IsSelfOrStaff(BasePermission):
    """
    Allow:
    - a patient to view/edit their own Patient record
    - intake, doctor and admin users to access any patient
    """
    def has_object_permission(self, request, view, obj):
        u = request.user
        if not u or not u.is_authenticated:
            return False
        if obj.user_id == getattr(u, "id", None):
            return True
        return u.role in UserRole.staff_roles()
