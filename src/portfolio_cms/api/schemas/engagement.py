"""Pydantic schemas for comments and likes."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from portfolio_cms.services.comments import MAX_COMMENT_LENGTH, CommentNode


class CommentCreateRequest(BaseModel):
    content: str = Field(min_length=1, max_length=MAX_COMMENT_LENGTH)
    parent_id: str | None = None


class CommentResponse(BaseModel):
    """A comment and, for listings, its replies."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    content: str
    project_id: str
    user_id: str
    parent_id: str | None
    is_approved: bool
    created_at: datetime
    replies: list[CommentResponse] = []

    @classmethod
    def from_node(cls, node: CommentNode) -> CommentResponse:
        comment = node.comment
        return cls(
            id=comment.id,
            content=comment.content,
            project_id=comment.project_id,
            user_id=comment.user_id,
            parent_id=comment.parent_id,
            is_approved=comment.is_approved,
            created_at=comment.created_at,
            replies=[cls.from_node(child) for child in node.replies],
        )


class PendingCountResponse(BaseModel):
    pending: int


class LikeStatusResponse(BaseModel):
    project_id: str
    likes: int
    liked: bool
