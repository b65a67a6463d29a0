from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field, field_validator

from gallery.schemas.common import CamelModel


class UserRegistrationRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        return value.strip().lower() if isinstance(value, str) else value


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        return value.strip().lower() if isinstance(value, str) else value


class RefreshTokenRequest(CamelModel):
    refresh_token: str


class UserResponse(CamelModel):
    id: int
    name: str
    email: str
    role: str
    created_at: Optional[datetime] = None


class RegistrationResponse(CamelModel):
    success: bool = True
    message: str
    user: UserResponse


class AuthResponse(CamelModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user: UserResponse
