from typing import Optional
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.config import settings
from app.core.database import get_async_session
from app.core.exceptions import UnauthorizedError
from app.auth.jwt_handler import decode_access_token
from app.models.auth.user import User
from app.services.auth.user_service import UserService
from app.auth.permissions import PermissionChecker
import logging

security = HTTPBearer(auto_error=False)
logger = logging.getLogger(__name__)

async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    session: AsyncSession = Depends(get_async_session)
) -> User:
    """Get current authenticated user"""
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("Token no proporcionado")

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise UnauthorizedError("Token inválido o expirado")

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise UnauthorizedError("Token inválido o expirado")

    user_service = UserService(session)
    user = await user_service.get_user(user_id)

    if user is None or not user.is_active:
        raise UnauthorizedError("Usuario no encontrado o inactivo")

    # Add request info to context
    request.state.current_user = user
    request.state.user_permissions = user.permission_names

    return user

def get_permission_checker(user: User) -> PermissionChecker:
    """Build the permission checker for a user and their role"""
    is_superadmin = bool(user.is_superuser) or user.role_id in settings.SUPERADMIN_ROLE_IDS
    return PermissionChecker(user.permission_names, is_superadmin=is_superadmin)

def require_permission(permission_name: str):
    """
    Dependency to require specific permission for an endpoint

    Examples:
        require_permission("inventory.manage")
    """
    async def permission_dependency(
        current_user: User = Depends(get_current_user)
    ) -> User:
        checker = get_permission_checker(current_user)
        checker.require(permission_name)
        return current_user

    return permission_dependency
