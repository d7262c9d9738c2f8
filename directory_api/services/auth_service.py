"""
Authentication service for admin accounts and JWT tokens
"""
import logging
from datetime import datetime, timedelta
from typing import Optional

import bcrypt
from jose import JWTError, jwt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from directory_api.core.config import settings
from directory_api.database.models import AdminRole, AdminUser

logger = logging.getLogger(__name__)


class AuthService:
    """Service for authentication operations"""

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """Verify a password against its hash"""
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))

    def hash_password(self, password: str) -> str:
        """Hash a password using bcrypt"""
        return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")

    def create_access_token(self, data: dict, expires_delta: Optional[timedelta] = None) -> str:
        """Create a JWT access token"""
        to_encode = data.copy()
        if expires_delta:
            expire = datetime.utcnow() + expires_delta
        else:
            expire = datetime.utcnow() + timedelta(minutes=settings.access_token_expire_minutes)
        to_encode.update({"exp": expire})
        return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)

    def decode_token(self, token: str) -> Optional[dict]:
        """Decode and validate a JWT token"""
        try:
            return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
        except JWTError as e:
            logger.warning(f"JWT decode error: {e}")
            return None

    async def get_admin_by_username(self, db: AsyncSession, username: str) -> Optional[AdminUser]:
        result = await db.execute(select(AdminUser).where(AdminUser.username == username))
        return result.scalar_one_or_none()

    async def get_admin_by_id(self, db: AsyncSession, admin_id: int) -> Optional[AdminUser]:
        result = await db.execute(select(AdminUser).where(AdminUser.id == admin_id))
        return result.scalar_one_or_none()

    async def authenticate(self, db: AsyncSession, username: str, password: str) -> Optional[AdminUser]:
        """Return the active admin matching the credentials, or None"""
        admin = await self.get_admin_by_username(db, username)
        if not admin or not admin.is_active:
            return None
        if not self.verify_password(password, admin.hashed_password):
            logger.warning(f"Failed admin login for '{username}'")
            return None
        return admin

    async def create_admin(
        self,
        db: AsyncSession,
        username: str,
        password: str,
        role: AdminRole = AdminRole.ADMIN,
    ) -> AdminUser:
        """Create a new admin account"""
        admin = AdminUser(
            username=username,
            hashed_password=self.hash_password(password),
            role=role.value,
        )
        db.add(admin)
        await db.commit()
        await db.refresh(admin)

        logger.info(f"Created admin user '{username}' with role {role.value}")
        return admin


# Global auth service instance
auth_service = AuthService()
