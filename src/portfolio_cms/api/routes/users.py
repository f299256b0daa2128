"""User administration and employee profile routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status

from portfolio_cms.api.dependencies import CurrentUser, Pagination, require_roles
from portfolio_cms.api.schemas.common import PageMeta, PaginatedResponse
from portfolio_cms.api.schemas.users import (
    EmployeeProfileCreateRequest,
    EmployeeProfileResponse,
    EmployeeProfileUpdateRequest,
    RoleUpdateRequest,
    UserResponse,
    UserUpdateRequest,
)
from portfolio_cms.constants.roles import STAFF_ROLES
from portfolio_cms.data.db import get_session
from portfolio_cms.data.models import User, UserRole
from portfolio_cms.services import employee_profiles, users

router = APIRouter(prefix="/users", tags=["users"])

StaffUser = Annotated[User, Depends(require_roles(*STAFF_ROLES))]
UserId = Annotated[str, Path(description="Account id")]


def _verify_user_access(current_user: User, user_id: str) -> None:
    """Allow staff, or the account owner, to read ``user_id``'s profile.

    Raises:
        HTTPException: If the caller is neither (403 Forbidden).
    """
    if current_user.id != user_id and current_user.role not in STAFF_ROLES:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have permission to access this user's data",
        )


@router.get("", response_model=PaginatedResponse[UserResponse])
def list_users(
    _: StaffUser,
    pagination: Pagination,
    role: Annotated[UserRole | None, Query(description="Filter by role")] = None,
    search: Annotated[str | None, Query(description="Match email or name")] = None,
) -> PaginatedResponse[UserResponse]:
    with get_session() as session:
        page = users.list_users(session, role=role, search=search, page=pagination)
        return PaginatedResponse[UserResponse](
            data=[UserResponse.model_validate(user) for user in page.items],
            meta=PageMeta.from_page(page),
        )


@router.get("/stats/roles", response_model=dict[str, int])
def role_counts(_: StaffUser) -> dict[str, int]:
    """Return the number of accounts per role."""
    with get_session() as session:
        return users.user_role_counts(session)


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: UserId, _: StaffUser) -> UserResponse:
    with get_session() as session:
        return UserResponse.model_validate(users.get_user(session, user_id))


@router.patch("/{user_id}", response_model=UserResponse)
def update_user(user_id: UserId, request: UserUpdateRequest, _: StaffUser) -> UserResponse:
    with get_session() as session:
        user = users.update_user(session, user_id, request.model_dump(exclude_unset=True))
        return UserResponse.model_validate(user)


@router.patch("/{user_id}/role", response_model=UserResponse)
def set_role(user_id: UserId, request: RoleUpdateRequest, current_user: StaffUser) -> UserResponse:
    """Change an account's role; only SUPER_ADMIN may grant or revoke SUPER_ADMIN."""
    with get_session() as session:
        return UserResponse.model_validate(
            users.set_role(session, current_user, user_id, request.role)
        )


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: UserId, current_user: StaffUser) -> None:
    """Delete an account that owns no projects, comments or likes."""
    if user_id == current_user.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot delete your own account",
        )
    with get_session() as session:
        users.delete_user(session, user_id)


@router.get("/{user_id}/employee-profile", response_model=EmployeeProfileResponse)
def get_employee_profile(user_id: UserId, current_user: CurrentUser) -> EmployeeProfileResponse:
    _verify_user_access(current_user, user_id)
    with get_session() as session:
        profile = employee_profiles.get_profile(session, user_id)
        return EmployeeProfileResponse.model_validate(profile)


@router.post(
    "/{user_id}/employee-profile",
    response_model=EmployeeProfileResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_employee_profile(
    user_id: UserId, request: EmployeeProfileCreateRequest, _: StaffUser
) -> EmployeeProfileResponse:
    with get_session() as session:
        profile = employee_profiles.create_profile(
            session, user_id, request.model_dump(exclude_none=True)
        )
        return EmployeeProfileResponse.model_validate(profile)


@router.patch("/{user_id}/employee-profile", response_model=EmployeeProfileResponse)
def update_employee_profile(
    user_id: UserId, request: EmployeeProfileUpdateRequest, _: StaffUser
) -> EmployeeProfileResponse:
    with get_session() as session:
        profile = employee_profiles.update_profile(
            session, user_id, request.model_dump(exclude_unset=True)
        )
        return EmployeeProfileResponse.model_validate(profile)


@router.delete("/{user_id}/employee-profile", status_code=status.HTTP_204_NO_CONTENT)
def delete_employee_profile(user_id: UserId, _: StaffUser) -> None:
    with get_session() as session:
        employee_profiles.delete_profile(session, user_id)
