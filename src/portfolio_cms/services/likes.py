"""Like service: one like per user and project."""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from portfolio_cms.data.crud.delegates import LikeDelegate, ProjectDelegate
from portfolio_cms.data.models import Like
from portfolio_cms.errors import ConflictError, NotFoundError


def like_project(session: Session, project_id: str, user_id: str) -> Like:
    """Record a like.

    Raises:
        NotFoundError: If the project does not exist.
        ConflictError: If the user already liked the project.
    """
    ProjectDelegate(session).find_unique_or_raise(id=project_id)
    likes = LikeDelegate(session)
    if likes.find_pair(project_id, user_id) is not None:
        raise ConflictError("Project already liked")
    return likes.create(project_id=project_id, user_id=user_id)


def unlike_project(session: Session, project_id: str, user_id: str) -> None:
    likes = LikeDelegate(session)
    if likes.find_pair(project_id, user_id) is None:
        raise NotFoundError("Like not found")
    likes.delete(project_id=project_id, user_id=user_id)


def toggle_like(session: Session, project_id: str, user_id: str) -> bool:
    """Like or unlike; returns whether the project is liked afterwards."""
    if has_liked(session, project_id, user_id):
        unlike_project(session, project_id, user_id)
        return False
    like_project(session, project_id, user_id)
    return True


def has_liked(session: Session, project_id: str, user_id: str) -> bool:
    return LikeDelegate(session).find_pair(project_id, user_id) is not None


def like_count(session: Session, project_id: str) -> int:
    return LikeDelegate(session).count(project_id=project_id)


def most_liked(session: Session, limit: int = 10) -> list[dict[str, Any]]:
    """Return ``{"project_id", "likes"}`` rows, most liked first."""
    groups = LikeDelegate(session).group_by(
        ["project_id"], order_by=["-_count", "project_id"], take=limit
    )
    return [{"project_id": g["project_id"], "likes": g["_count"]} for g in groups]
