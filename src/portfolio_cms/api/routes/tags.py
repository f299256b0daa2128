"""Tag routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Path, status

from portfolio_cms.api.dependencies import require_roles
from portfolio_cms.api.schemas.projects import TagCreateRequest, TagResponse, TagWithCountResponse
from portfolio_cms.constants.roles import CONTENT_ROLES
from portfolio_cms.data.db import get_session
from portfolio_cms.data.models import User
from portfolio_cms.services import tags

router = APIRouter(prefix="/tags", tags=["tags"])

ContentUser = Annotated[User, Depends(require_roles(*CONTENT_ROLES))]


@router.get("", response_model=list[TagWithCountResponse])
def list_tags() -> list[TagWithCountResponse]:
    """List every tag with the number of projects using it."""
    with get_session() as session:
        return [
            TagWithCountResponse(
                id=row["tag"].id,
                name=row["tag"].name,
                slug=row["tag"].slug,
                project_count=row["project_count"],
            )
            for row in tags.list_tags(session)
        ]


@router.post("", response_model=TagResponse, status_code=status.HTTP_201_CREATED)
def create_tag(request: TagCreateRequest, _: ContentUser) -> TagResponse:
    with get_session() as session:
        return TagResponse.model_validate(tags.create_tag(session, request.name, request.slug))


@router.delete("/{tag_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_tag(tag_id: Annotated[str, Path(description="Tag id")], _: ContentUser) -> None:
    with get_session() as session:
        tags.delete_tag(session, tag_id)
