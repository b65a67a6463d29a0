# gallery/services/auth.py
import logging
from datetime import datetime, timezone

from fastapi import HTTPException, status
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from gallery.core.decorator import Conflict
from gallery.core.hasher import PasswordHelper
from gallery.core.security import jwt_manager
from gallery.models.user import USER_ROLE, User
from gallery.schemas.auth import LoginRequest, UserRegistrationRequest

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL_MESSAGE = "An account with this email already exists"
WELCOME_MESSAGE = "Account created successfully! Welcome to the cosmic community."


class AuthService:
    """Registration, password login and token refresh."""

    def get_user_by_email(self, email: str, db: Session):
        return db.query(User).filter(func.lower(User.email) == email.lower()).first()

    def register_user(self, request: UserRegistrationRequest, db: Session) -> User:
        """
        Create a USER account. Emails are compared case-insensitively; the
        unique index on users.email backs up the pre-check under concurrency.

        Raises:
            Conflict: the email is already registered
        """
        email = request.email.lower()
        if self.get_user_by_email(email, db):
            raise Conflict(DUPLICATE_EMAIL_MESSAGE)

        user = User(
            name=request.name,
            email=email,
            hashed_password=PasswordHelper.hash_password(request.password),
            role=USER_ROLE,
        )
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise Conflict(DUPLICATE_EMAIL_MESSAGE)

        db.refresh(user)
        logger.info(f"New user registered: {user.id} ({user.email})")
        return user

    def _auth_response(self, user: User, db: Session) -> dict:
        login_time = datetime.now(timezone.utc)
        user.last_login = login_time
        db.commit()
        db.refresh(user)

        access_token, refresh_token = jwt_manager.create_token_pair(
            user, login_time=login_time
        )
        return {
            "access_token": access_token,
            "refresh_token": refresh_token,
            "token_type": "bearer",
            "user": user,
        }

    def login(self, request: LoginRequest, db: Session) -> dict:
        user = self.get_user_by_email(request.email, db)

        if not user or not PasswordHelper.check_password(
            request.password, user.hashed_password
        ):
            logger.warning(f"Failed login attempt for {request.email}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid email or password",
                headers={"WWW-Authenticate": "Bearer"},
            )

        if not user.is_active:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN, detail="Account is disabled"
            )

        return self._auth_response(user, db)

    def refresh_token(self, refresh_token: str, db: Session) -> dict:
        payload = jwt_manager.verify_token(refresh_token, "refresh")

        user = db.query(User).filter(User.id == payload.get("user_id")).first()
        if not user or not user.is_active:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="User not found or inactive",
            )

        return self._auth_response(user, db)


auth_service = AuthService()
