"""
Authentication dependencies for admin routes
"""
import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from directory_api.core.database import get_db
from directory_api.database.models import AdminRole, AdminUser
from directory_api.services.auth_service import auth_service

logger = logging.getLogger(__name__)

# HTTP Bearer token scheme
security = HTTPBearer(auto_error=False)

ADMIN_ROLES = (AdminRole.ADMIN.value, AdminRole.SUPER_ADMIN.value)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> AdminUser:
    """
    Resolve the bearer token to an active admin account.
    Raises 401 for a missing, invalid or expired token, or an unknown/inactive account.
    """
    if not credentials:
        raise _unauthorized("Not authenticated")

    payload = auth_service.decode_token(credentials.credentials)
    if not payload:
        raise _unauthorized("Invalid or expired token")

    # Subject is the admin id, encoded as a string
    subject = str(payload.get("sub") or "")
    if not subject.isdigit():
        raise _unauthorized("Invalid token payload")

    admin = await auth_service.get_admin_by_id(db, int(subject))
    if not admin or not admin.is_active:
        logger.warning(f"Rejected token for missing or inactive admin id={subject}")
        raise _unauthorized("Admin not found or inactive")

    return admin


async def require_admin(current_admin: AdminUser = Depends(get_current_admin)) -> AdminUser:
    """Raises 403 unless the account holds an admin role"""
    if current_admin.role not in ADMIN_ROLES:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required",
        )
    return current_admin
