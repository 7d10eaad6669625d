# app/auth/permissions.py
# Permission names follow the "<resource>.<action>" convention stored on roles

from typing import Iterable, Optional
from app.core.exceptions import ForbiddenError
import logging

logger = logging.getLogger(__name__)


class PermissionChecker:
    """
    Check permissions granted to a user through their role
    """

    def __init__(self, user_permissions: Optional[Iterable[str]] = None, is_superadmin: bool = False):
        self.permissions = [p for p in (user_permissions or []) if isinstance(p, str)]
        self.is_superadmin = is_superadmin
        self._permission_map = set(self.permissions)

        logger.debug(f"PermissionChecker initialized with {len(self.permissions)} permissions")

    def can(self, permission_name: str) -> bool:
        """
        Check if user holds a permission

        Examples:
            can("inventory.manage")
        """
        if self.is_superadmin:
            return True

        if permission_name in self._permission_map:
            return True

        # Admin permission on the same resource
        resource, _ = parse_permission_name(permission_name)
        admin_key = format_permission_name(resource, "admin")
        if admin_key in self._permission_map:
            logger.debug(f"Permission granted: {permission_name} (via {admin_key})")
            return True

        # System admin (full access)
        if "system.admin" in self._permission_map:
            logger.debug(f"Permission granted: {permission_name} (via system.admin)")
            return True

        logger.debug(f"Permission denied: {permission_name}")
        return False

    def cannot(self, permission_name: str) -> bool:
        return not self.can(permission_name)

    def require(self, permission_name: str, custom_message: Optional[str] = None):
        """
        Require permission or raise ForbiddenError
        """
        if self.cannot(permission_name):
            message = custom_message or f"No tienes permisos para realizar esta acción: {permission_name}"
            logger.warning(f"Permission check failed: {permission_name}")
            raise ForbiddenError(message)


def parse_permission_name(permission_name: str) -> tuple:
    """
    Parse permission name into resource and action
    """
    if "." not in permission_name:
        raise ValueError(f"Invalid permission format: {permission_name}. Expected 'resource.action'")

    resource, action = permission_name.rsplit(".", 1)
    return resource, action


def format_permission_name(resource: str, action: str) -> str:
    return f"{resource}.{action}"
