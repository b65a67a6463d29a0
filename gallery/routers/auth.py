from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, Request, status
from sqlalchemy.orm import Session

from gallery.core.config import settings
from gallery.core.database import get_db
from gallery.core.dependencies import get_current_user
from gallery.core.limiter import limiter
from gallery.models.user import User
from gallery.schemas.auth import (
    AuthResponse,
    LoginRequest,
    RefreshTokenRequest,
    RegistrationResponse,
    UserRegistrationRequest,
    UserResponse,
)
from gallery.services.auth import WELCOME_MESSAGE, auth_service
from gallery.utils.mailer import send_welcome_email

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=RegistrationResponse,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit(settings.register_rate_limit)
async def register_user(
    request: Request,
    payload: UserRegistrationRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
):
    """Create an account; the welcome email is sent after the response."""
    user = auth_service.register_user(payload, db)
    background_tasks.add_task(send_welcome_email, user.email, user.name)
    return {"success": True, "message": WELCOME_MESSAGE, "user": user}


@router.post("/login", response_model=AuthResponse)
async def login(payload: LoginRequest, db: Session = Depends(get_db)):
    return auth_service.login(payload, db)


@router.post("/refresh", response_model=AuthResponse)
async def refresh_token(payload: RefreshTokenRequest, db: Session = Depends(get_db)):
    """Refresh access token using refresh token"""
    return auth_service.refresh_token(payload.refresh_token, db)


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    current_user: Annotated[User, Depends(get_current_user)],
):
    return current_user
