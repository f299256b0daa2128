"""Registration, email verification and session routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, status

from portfolio_cms.api.dependencies import CurrentUser, OptionalUser, require_roles
from portfolio_cms.api.schemas.auth import (
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    RegistrationResponse,
    ResendVerificationRequest,
    StaffRegisterRequest,
    TokenResponse,
    VerifyEmailRequest,
)
from portfolio_cms.api.schemas.common import MessageResponse
from portfolio_cms.api.schemas.users import UserResponse
from portfolio_cms.constants.roles import STAFF_ROLES
from portfolio_cms.data.db import get_session
from portfolio_cms.data.models import User
from portfolio_cms.services import auth as auth_service
from portfolio_cms.services.auth import TokenPair

router = APIRouter(prefix="/auth", tags=["auth"])

StaffUser = Annotated[User, Depends(require_roles(*STAFF_ROLES))]

_VERIFY_MESSAGE = "Registration successful. Please check your email to verify your account."


def _token_response(pair: TokenPair) -> TokenResponse:
    return TokenResponse(
        access_token=pair.access_token,
        refresh_token=pair.refresh_token,
        token_type=pair.token_type,
        user=UserResponse.model_validate(pair.user),
    )


@router.post("/register", response_model=RegistrationResponse, status_code=status.HTTP_201_CREATED)
def register(request: RegisterRequest) -> RegistrationResponse:
    """Create a USER account; it must be verified before logging in."""
    with get_session() as session:
        user = auth_service.register_user(session, request.email, request.password, request.name)
        return RegistrationResponse(message=_VERIFY_MESSAGE, user=UserResponse.model_validate(user))


@router.post(
    "/register-super-admin",
    response_model=RegistrationResponse,
    status_code=status.HTTP_201_CREATED,
)
def register_super_admin(
    request: RegisterRequest, current_user: OptionalUser
) -> RegistrationResponse:
    """Bootstrap the first SUPER_ADMIN, or let a SUPER_ADMIN add another."""
    with get_session() as session:
        user = auth_service.register_super_admin(
            session,
            request.email,
            request.password,
            request.name,
            requesting_user=current_user,
        )
        return RegistrationResponse(message=_VERIFY_MESSAGE, user=UserResponse.model_validate(user))


@router.post(
    "/staff/register", response_model=RegistrationResponse, status_code=status.HTTP_201_CREATED
)
def register_staff(request: StaffRegisterRequest, current_user: StaffUser) -> RegistrationResponse:
    with get_session() as session:
        user = auth_service.register_staff(
            session, current_user, request.email, request.password, request.role, request.name
        )
        return RegistrationResponse(
            message="Staff account created. A verification email has been sent.",
            user=UserResponse.model_validate(user),
        )


@router.post("/verify-email", response_model=MessageResponse)
def verify_email(request: VerifyEmailRequest) -> MessageResponse:
    with get_session() as session:
        auth_service.verify_email(session, request.token)
    return MessageResponse(message="Email verified successfully.")


@router.post("/resend-verification", response_model=MessageResponse)
def resend_verification(request: ResendVerificationRequest) -> MessageResponse:
    with get_session() as session:
        auth_service.resend_verification(session, request.email)
    return MessageResponse(message="Verification email sent.")


@router.post("/login", response_model=TokenResponse)
def login(request: LoginRequest) -> TokenResponse:
    with get_session() as session:
        return _token_response(auth_service.login(session, request.email, request.password))


@router.post("/refresh", response_model=TokenResponse)
def refresh(request: RefreshRequest) -> TokenResponse:
    """Exchange a refresh token for a new pair; the old one stops working."""
    with get_session() as session:
        return _token_response(auth_service.refresh(session, request.refresh_token))


@router.post("/logout", response_model=MessageResponse)
def logout(current_user: CurrentUser) -> MessageResponse:
    with get_session() as session:
        auth_service.logout(session, current_user.id)
    return MessageResponse(message="Logged out.")


@router.get("/me", response_model=UserResponse)
def me(current_user: CurrentUser) -> UserResponse:
    return UserResponse.model_validate(current_user)
