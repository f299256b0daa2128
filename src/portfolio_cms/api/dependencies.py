"""Shared dependencies for API routes."""

from __future__ import annotations

from collections.abc import Callable
from typing import Annotated

from fastapi import Depends, HTTPException, Query, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from portfolio_cms.constants.roles import CONTENT_ROLES
from portfolio_cms.data.crud.delegates import UserDelegate
from portfolio_cms.data.db import get_session
from portfolio_cms.data.models import User, UserRole
from portfolio_cms.errors import AuthenticationError
from portfolio_cms.services.auth import decode_access_token
from portfolio_cms.services.pagination import DEFAULT_LIMIT, MAX_LIMIT, PageRequest

bearer_scheme = HTTPBearer(auto_error=False, description="JWT access token")

Credentials = Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)]


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _user_from_token(token: str) -> User:
    try:
        user_id = decode_access_token(token)
    except AuthenticationError as exc:
        raise _unauthorized(exc.message) from exc

    with get_session() as session:
        user = UserDelegate(session).find_unique(id=user_id)
    if user is None or not user.is_active:
        raise _unauthorized("User not found or deactivated.")
    return user


def get_current_user(credentials: Credentials) -> User:
    """Resolve the authenticated user from the bearer token.

    The returned instance is detached from any session; routes that modify
    the account load it again by id.

    Raises:
        HTTPException: If the token is missing or invalid, or the account
            no longer exists or is deactivated (401).
    """
    if credentials is None:
        raise _unauthorized("Missing authentication. Please provide a Bearer token.")
    return _user_from_token(credentials.credentials)


def get_optional_user(credentials: Credentials) -> User | None:
    """Like ``get_current_user`` but returns None for anonymous callers.

    A token that is present but invalid is still rejected with 401.
    """
    if credentials is None:
        return None
    return _user_from_token(credentials.credentials)


CurrentUser = Annotated[User, Depends(get_current_user)]
OptionalUser = Annotated[User | None, Depends(get_optional_user)]


def require_roles(*roles: UserRole) -> Callable[[User], User]:
    """Build a dependency that admits only users holding one of ``roles``."""
    allowed = frozenset(roles)

    def dependency(user: CurrentUser) -> User:
        if user.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You do not have permission to perform this action",
            )
        return user

    return dependency


def can_see_drafts(user: User | None) -> bool:
    """Whether ``user`` may see unpublished projects and their content."""
    return user is not None and user.role in CONTENT_ROLES


def get_page(
    page: Annotated[int, Query(ge=1, description="Page number (1-based)")] = 1,
    limit: Annotated[
        int, Query(ge=1, le=MAX_LIMIT, description="Maximum number of items per page")
    ] = DEFAULT_LIMIT,
) -> PageRequest:
    return PageRequest(page=page, limit=limit)


Pagination = Annotated[PageRequest, Depends(get_page)]
