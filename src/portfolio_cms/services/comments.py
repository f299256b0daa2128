"""Comment service: threaded project comments with moderation.

New comments wait for approval. Public listings only show approved
comments; moderators see everything.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sqlalchemy.orm import Session

from portfolio_cms.data.crud.delegates import CommentDelegate, ProjectDelegate
from portfolio_cms.data.models import Comment
from portfolio_cms.errors import ValidationError

logger = logging.getLogger(__name__)

MAX_COMMENT_LENGTH = 5000


@dataclass
class CommentNode:
    """A comment with its (visible) replies."""

    comment: Comment
    replies: list[CommentNode] = field(default_factory=list)


def add_comment(
    session: Session,
    project_id: str,
    user_id: str,
    content: str,
    parent_id: str | None = None,
) -> Comment:
    """Add a comment, optionally as a reply.

    Raises:
        NotFoundError: If the project or parent comment does not exist.
        ValidationError: If the content is empty or too long, or the parent
            belongs to another project.
    """
    text = content.strip()
    if not text:
        raise ValidationError("Comment cannot be empty")
    if len(text) > MAX_COMMENT_LENGTH:
        raise ValidationError(f"Comment cannot exceed {MAX_COMMENT_LENGTH} characters")

    ProjectDelegate(session).find_unique_or_raise(id=project_id)
    comments = CommentDelegate(session)
    if parent_id is not None:
        parent = comments.find_unique_or_raise(id=parent_id)
        if parent.project_id != project_id:
            raise ValidationError("Parent comment belongs to a different project")

    comment = comments.create(
        project_id=project_id, user_id=user_id, content=text, parent_id=parent_id
    )
    logger.info("Comment %s added to project %s", comment.id, project_id)
    return comment


def list_comments(
    session: Session, project_id: str, *, approved_only: bool = True
) -> list[CommentNode]:
    """Return the project's comment tree, oldest first at each level.

    Replies whose parent is hidden (unapproved) are not shown.
    """
    ProjectDelegate(session).find_unique_or_raise(id=project_id)
    where: dict[str, object] = {"project_id": project_id}
    if approved_only:
        where["is_approved"] = True
    rows = CommentDelegate(session).find_many(where, order_by=["created_at", "id"])

    nodes = {row.id: CommentNode(comment=row) for row in rows}
    roots: list[CommentNode] = []
    for row in rows:
        node = nodes[row.id]
        if row.parent_id is None:
            roots.append(node)
        elif row.parent_id in nodes:
            nodes[row.parent_id].replies.append(node)
    return roots


def approve_comment(session: Session, comment_id: str) -> Comment:
    return CommentDelegate(session).update({"id": comment_id}, is_approved=True)


def delete_comment(session: Session, comment_id: str) -> None:
    """Delete a comment; its replies become top-level comments."""
    CommentDelegate(session).delete(id=comment_id)


def get_comment(session: Session, comment_id: str) -> Comment:
    return CommentDelegate(session).find_unique_or_raise(id=comment_id)


def count_pending(session: Session) -> int:
    return CommentDelegate(session).count(is_approved=False)
