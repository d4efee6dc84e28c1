# permissions.py
import logging

from rest_framework import permissions

logger = logging.getLogger(__name__)


class IsAdminRoleOrReadOnly(permissions.BasePermission):
    """
    Read access for any authenticated user, writes for the Admin role only.

    Used for the shared expense category tree.
    """

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False

        if request.method in permissions.SAFE_METHODS:
            return True

        is_admin = getattr(user, "is_admin_role", False)
        if not is_admin:
            logger.warning(
                "Admin role required for write access",
                extra={
                    "user_id": user.id,
                    "method": request.method,
                    "view": view.__class__.__name__,
                    "action": "admin_role_access_denied",
                    "component": "IsAdminRoleOrReadOnly",
                    "severity": "medium",
                },
            )
        return is_admin
