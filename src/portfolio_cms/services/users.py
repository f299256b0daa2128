"""User administration service.

Listing, lookup and maintenance of accounts for administrators. Deletion
respects the relation policy: accounts that still author projects or own
comments or likes cannot be removed and should be deactivated instead.
"""

from __future__ import annotations

import logging
from typing import Any, TypedDict

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from portfolio_cms.data.crud.delegates import (
    CommentDelegate,
    LikeDelegate,
    ProjectDelegate,
    UserDelegate,
)
from portfolio_cms.data.models import User, UserRole
from portfolio_cms.errors import ConflictError, PermissionDeniedError
from portfolio_cms.services.pagination import Page, PageRequest

logger = logging.getLogger(__name__)

__all__ = [
    "UserUpdateData",
    "list_users",
    "get_user",
    "update_user",
    "set_role",
    "deactivate_user",
    "delete_user",
    "user_role_counts",
]

_USER_FIELDS = ("name", "avatar", "is_active")


class UserUpdateData(TypedDict, total=False):
    """Fields an administrator may change on an account."""

    name: str | None
    avatar: str | None
    is_active: bool


def list_users(
    session: Session,
    *,
    role: UserRole | None = None,
    search: str | None = None,
    page: PageRequest | None = None,
) -> Page[User]:
    """List accounts newest first, optionally filtered by role and search text.

    The search matches email and name case-insensitively.
    """
    page = page or PageRequest()
    conditions: list[Any] = []
    if role is not None:
        conditions.append(User.role == role)
    if search and search.strip():
        pattern = f"%{search.strip().lower()}%"
        conditions.append(
            or_(func.lower(User.email).like(pattern), func.lower(User.name).like(pattern))
        )

    total = session.execute(
        select(func.count()).select_from(User).where(*conditions)
    ).scalar_one()
    items = (
        session.execute(
            select(User)
            .where(*conditions)
            .order_by(User.created_at.desc())
            .offset(page.skip)
            .limit(page.limit)
        )
        .scalars()
        .all()
    )
    return Page(items=list(items), total=int(total), request=page)


def get_user(session: Session, user_id: str) -> User:
    return UserDelegate(session).find_unique_or_raise(id=user_id)


def update_user(session: Session, user_id: str, data: UserUpdateData) -> User:
    changes = {key: data[key] for key in _USER_FIELDS if key in data}
    return UserDelegate(session).update({"id": user_id}, **changes)


def set_role(session: Session, acting_user: User, user_id: str, role: UserRole) -> User:
    """Change an account's role.

    Only a SUPER_ADMIN may grant or revoke SUPER_ADMIN.
    """
    users = UserDelegate(session)
    target = users.find_unique_or_raise(id=user_id)
    touches_super = UserRole.SUPER_ADMIN in (role, target.role)
    if touches_super and acting_user.role != UserRole.SUPER_ADMIN:
        raise PermissionDeniedError("Only SUPER_ADMIN can grant or revoke SUPER_ADMIN.")

    updated = users.update({"id": user_id}, role=role)
    logger.info("User %s role changed to %s by %s", user_id, role, acting_user.id)
    return updated


def deactivate_user(session: Session, user_id: str) -> User:
    """Disable login and drop the refresh token."""
    user = UserDelegate(session).update({"id": user_id}, is_active=False, refresh_token=None)
    logger.info("User %s deactivated", user_id)
    return user


def delete_user(session: Session, user_id: str) -> None:
    """Delete an account and its employee profile.

    Raises:
        NotFoundError: If the account does not exist.
        ConflictError: If the account still authors projects or owns
            comments or likes.
    """
    users = UserDelegate(session)
    users.find_unique_or_raise(id=user_id)

    blockers = {
        "projects": ProjectDelegate(session).count(author_id=user_id),
        "comments": CommentDelegate(session).count(user_id=user_id),
        "likes": LikeDelegate(session).count(user_id=user_id),
    }
    held = [f"{count} {name}" for name, count in blockers.items() if count]
    if held:
        raise ConflictError(f"User still owns {', '.join(held)}; deactivate instead.")

    users.delete(id=user_id)
    logger.info("User %s deleted", user_id)


def user_role_counts(session: Session) -> dict[str, int]:
    """Return the number of accounts per role (roles without accounts are 0)."""
    counts = {role.value: 0 for role in UserRole}
    for group in UserDelegate(session).group_by(["role"], count=True):
        counts[UserRole(group["role"]).value] = group["_count"]
    return counts
