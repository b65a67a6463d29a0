# core/security.py
import logging
from datetime import datetime, timedelta
from typing import Any, Dict, Optional, Tuple

from fastapi import HTTPException, status
from jose import JWTError, jwt

from gallery.core.config import settings
from gallery.models.user import User

logger = logging.getLogger(__name__)


class JWTManager:
    """JWT token management for authentication"""

    def __init__(self):
        self.secret_key = settings.jwt_secret
        self.algorithm = settings.jwt_algorithm
        self.user_token_expire = timedelta(days=settings.jwt_user_expiration)
        self.refresh_token_expire = timedelta(days=settings.jwt_refresh_expiration)
        self.admin_token_expire = timedelta(days=settings.jwt_admin_expiration)
        self.issuer = settings.jwt_issuer

    def create_access_token(
        self,
        user: User,
        custom_expiration: Optional[timedelta] = None,
        login_time: Optional[datetime] = None,
    ) -> str:
        """
        Create JWT access token for user

        Args:
            user: User model instance
            custom_expiration: Override default expiration
            login_time: Issue time; defaults to now

        Returns:
            JWT access token string
        """
        try:
            current_time = datetime.utcnow()
            if custom_expiration:
                expire = current_time + custom_expiration
            elif user.is_admin:
                expire = current_time + self.admin_token_expire
            else:
                expire = current_time + self.user_token_expire

            issued_at = login_time if login_time else current_time

            payload = {
                "sub": str(user.id),
                "user_id": user.id,
                "role": user.role,
                "email": user.email,
                "exp": int(expire.timestamp()),
                "iat": int(issued_at.timestamp()),
                "iss": self.issuer,
                "type": "access",
            }

            token = jwt.encode(payload, self.secret_key, algorithm=self.algorithm)
            logger.info(f"Access token created for user: {user.id}")

            return token

        except Exception as e:
            logger.error(f"Failed to create access token: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to create access token",
            )

    def create_refresh_token(
        self,
        user: User,
        custom_expiration: Optional[timedelta] = None,
    ) -> str:
        """Create JWT refresh token for user (minimal payload)."""
        try:
            current_time = datetime.utcnow()
            expire = current_time + (custom_expiration or self.refresh_token_expire)

            payload = {
                "sub": str(user.id),
                "user_id": user.id,
                "exp": int(expire.timestamp()),
                "iat": int(current_time.timestamp()),
                "iss": self.issuer,
                "type": "refresh",
            }

            token = jwt.encode(payload, self.secret_key, algorithm=self.algorithm)
            logger.info(f"Refresh token created for user: {user.id}")

            return token

        except Exception as e:
            logger.error(f"Failed to create refresh token: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to create refresh token",
            )

    def create_token_pair(
        self, user: User, login_time: datetime = None
    ) -> Tuple[str, str]:
        """
        Create both access and refresh tokens

        Returns:
            Tuple of (access_token, refresh_token)
        """
        access_token = self.create_access_token(user=user, login_time=login_time)
        refresh_token = self.create_refresh_token(user)

        return access_token, refresh_token

    def verify_token(self, token: str, token_type: str = "access") -> Dict[str, Any]:
        """
        Verify and decode JWT token
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"verify_exp": True},
            )
        except JWTError as e:
            logger.warning(f"JWT verification failed: {e}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid or expired token",
                headers={"WWW-Authenticate": "Bearer"},
            )

        # Verify token type (check 'type' field, not 'role')
        if payload.get("type") != token_type:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=f"Invalid token type. Expected {token_type}",
            )

        if payload.get("iss") != self.issuer:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid token issuer",
            )

        return payload


# Global instance
jwt_manager = JWTManager()
