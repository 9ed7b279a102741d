"""
Role based permission classes.
"""
from rest_framework.permissions import BasePermission, SAFE_METHODS

DOCTOR_ROLES = {"doctor", "admin"}


class IsDoctorOrAdmin(BasePermission):
    """Any authenticated user may read; writes need a doctor or admin."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, "user", None)
        if not (user and user.is_authenticated):
            return False
        if request.method in SAFE_METHODS:
            return True
        return getattr(user, "role", None) in DOCTOR_ROLES
