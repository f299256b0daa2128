"""Like routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Path, status
from sqlalchemy.orm import Session

from portfolio_cms.api.dependencies import CurrentUser, OptionalUser, can_see_drafts
from portfolio_cms.api.schemas.engagement import LikeStatusResponse
from portfolio_cms.data.db import get_session
from portfolio_cms.data.models import User
from portfolio_cms.services import likes, projects

router = APIRouter(prefix="/projects/{project_id}/likes", tags=["likes"])

ProjectId = Annotated[str, Path(description="Project id")]


def _like_status(session: Session, project_id: str, user_id: str | None) -> LikeStatusResponse:
    return LikeStatusResponse(
        project_id=project_id,
        likes=likes.like_count(session, project_id),
        liked=user_id is not None and likes.has_liked(session, project_id, user_id),
    )


def _check_visible(session: Session, project_id: str, user: User | None) -> None:
    projects.get_visible_project(session, project_id, include_unpublished=can_see_drafts(user))


@router.get("", response_model=LikeStatusResponse)
def get_likes(project_id: ProjectId, current_user: OptionalUser) -> LikeStatusResponse:
    with get_session() as session:
        _check_visible(session, project_id, current_user)
        return _like_status(session, project_id, current_user.id if current_user else None)


@router.post("", response_model=LikeStatusResponse, status_code=status.HTTP_201_CREATED)
def like_project(project_id: ProjectId, current_user: CurrentUser) -> LikeStatusResponse:
    """Like a project; liking it twice answers 409."""
    with get_session() as session:
        _check_visible(session, project_id, current_user)
        likes.like_project(session, project_id, current_user.id)
        return _like_status(session, project_id, current_user.id)


@router.delete("", response_model=LikeStatusResponse)
def unlike_project(project_id: ProjectId, current_user: CurrentUser) -> LikeStatusResponse:
    with get_session() as session:
        _check_visible(session, project_id, current_user)
        likes.unlike_project(session, project_id, current_user.id)
        return _like_status(session, project_id, current_user.id)
