"""Pydantic schemas for registration and authentication endpoints."""

from __future__ import annotations

from pydantic import BaseModel, EmailStr, Field

from portfolio_cms.api.schemas.users import UserResponse
from portfolio_cms.data.models import UserRole
from portfolio_cms.services.auth import MIN_PASSWORD_LENGTH


class RegisterRequest(BaseModel):
    """Request schema for self-service and SUPER_ADMIN registration."""

    email: EmailStr = Field(description="Login email address")
    password: str = Field(min_length=MIN_PASSWORD_LENGTH, description="Account password")
    name: str | None = Field(None, description="Display name")


class StaffRegisterRequest(RegisterRequest):
    """Request schema for creating a staff account."""

    role: UserRole = Field(description="Role to assign (anything but SUPER_ADMIN)")


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class RefreshRequest(BaseModel):
    refresh_token: str


class VerifyEmailRequest(BaseModel):
    token: str = Field(min_length=1, description="Token from the verification email")


class ResendVerificationRequest(BaseModel):
    email: EmailStr


class RegistrationResponse(BaseModel):
    """Response schema for account creation."""

    message: str
    user: UserResponse


class TokenResponse(BaseModel):
    """Response schema for login and refresh."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user: UserResponse
