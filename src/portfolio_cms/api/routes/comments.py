"""Comment routes with moderation."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, status

from portfolio_cms.api.dependencies import (
    CurrentUser,
    OptionalUser,
    can_see_drafts,
    require_roles,
)
from portfolio_cms.api.schemas.engagement import (
    CommentCreateRequest,
    CommentResponse,
    PendingCountResponse,
)
from portfolio_cms.constants.roles import STAFF_ROLES
from portfolio_cms.data.db import get_session
from portfolio_cms.data.models import User
from portfolio_cms.services import comments, projects

router = APIRouter(tags=["comments"])

StaffUser = Annotated[User, Depends(require_roles(*STAFF_ROLES))]
ProjectId = Annotated[str, Path(description="Project id")]
CommentId = Annotated[str, Path(description="Comment id")]


@router.get("/projects/{project_id}/comments", response_model=list[CommentResponse])
def list_comments(project_id: ProjectId, current_user: OptionalUser) -> list[CommentResponse]:
    """Return the comment tree; staff also see comments awaiting approval."""
    approved_only = current_user is None or current_user.role not in STAFF_ROLES
    with get_session() as session:
        projects.get_visible_project(
            session, project_id, include_unpublished=can_see_drafts(current_user)
        )
        tree = comments.list_comments(session, project_id, approved_only=approved_only)
        return [CommentResponse.from_node(node) for node in tree]


@router.post(
    "/projects/{project_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_comment(
    project_id: ProjectId, request: CommentCreateRequest, current_user: CurrentUser
) -> CommentResponse:
    """Post a comment or reply; it stays hidden until approved."""
    with get_session() as session:
        projects.get_visible_project(
            session, project_id, include_unpublished=can_see_drafts(current_user)
        )
        comment = comments.add_comment(
            session, project_id, current_user.id, request.content, request.parent_id
        )
        return CommentResponse.model_validate(comment)


@router.get("/comments/pending/count", response_model=PendingCountResponse)
def pending_count(_: StaffUser) -> PendingCountResponse:
    with get_session() as session:
        return PendingCountResponse(pending=comments.count_pending(session))


@router.post("/comments/{comment_id}/approve", response_model=CommentResponse)
def approve_comment(comment_id: CommentId, _: StaffUser) -> CommentResponse:
    with get_session() as session:
        return CommentResponse.model_validate(comments.approve_comment(session, comment_id))


@router.delete("/comments/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_comment(comment_id: CommentId, current_user: CurrentUser) -> None:
    with get_session() as session:
        comment = comments.get_comment(session, comment_id)
        if comment.user_id != current_user.id and current_user.role not in STAFF_ROLES:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You can only delete your own comments",
            )
        comments.delete_comment(session, comment_id)
