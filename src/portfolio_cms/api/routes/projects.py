"""Project routes: public browsing plus authoring and publication."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, status

from portfolio_cms.api.dependencies import (
    OptionalUser,
    Pagination,
    can_see_drafts,
    require_roles,
)
from portfolio_cms.api.schemas.common import PageMeta, PaginatedResponse
from portfolio_cms.api.schemas.projects import (
    ProjectCreateRequest,
    ProjectResponse,
    ProjectStatsResponse,
    ProjectTagsRequest,
    ProjectUpdateRequest,
)
from portfolio_cms.constants.roles import CONTENT_ROLES, PROJECT_MANAGEMENT_ROLES
from portfolio_cms.data.db import get_session
from portfolio_cms.data.models import ProjectCategory, ProjectStatus, User
from portfolio_cms.services import projects

router = APIRouter(prefix="/projects", tags=["projects"])

ContentUser = Annotated[User, Depends(require_roles(*CONTENT_ROLES))]
ManagerUser = Annotated[User, Depends(require_roles(*PROJECT_MANAGEMENT_ROLES))]
ProjectId = Annotated[str, Path(description="Project id")]


@router.get("", response_model=PaginatedResponse[ProjectResponse])
def list_projects(
    current_user: OptionalUser,
    pagination: Pagination,
    status_filter: Annotated[ProjectStatus | None, Query(alias="status")] = None,
    category: ProjectCategory | None = None,
    tag: Annotated[str | None, Query(description="Tag slug")] = None,
    author: Annotated[str | None, Query(description="Author id")] = None,
) -> PaginatedResponse[ProjectResponse]:
    """List projects newest first.

    Anonymous callers and accounts without a content role only see
    published projects, whatever ``status`` they ask for.
    """
    if not can_see_drafts(current_user):
        status_filter = ProjectStatus.PUBLISHED
    with get_session() as session:
        page = projects.list_projects(
            session,
            status=status_filter,
            category=category,
            author_id=author,
            tag=tag,
            page=pagination,
        )
        return PaginatedResponse[ProjectResponse](
            data=[ProjectResponse.model_validate(project) for project in page.items],
            meta=PageMeta.from_page(page),
        )


@router.get("/featured", response_model=list[ProjectResponse])
def featured_projects(
    limit: Annotated[int, Query(ge=1, le=50)] = 6,
) -> list[ProjectResponse]:
    with get_session() as session:
        return [
            ProjectResponse.model_validate(project)
            for project in projects.list_featured(session, limit)
        ]


@router.get("/stats/summary", response_model=ProjectStatsResponse)
def project_stats(_: ContentUser) -> ProjectStatsResponse:
    with get_session() as session:
        return ProjectStatsResponse(**projects.project_stats(session))


@router.get("/{slug}", response_model=ProjectResponse)
def get_project(
    slug: Annotated[str, Path(description="Project slug")], current_user: OptionalUser
) -> ProjectResponse:
    """Return one project by slug and count the view."""
    with get_session() as session:
        project = projects.get_project_by_slug(
            session,
            slug,
            increment_views=True,
            include_unpublished=can_see_drafts(current_user),
        )
        return ProjectResponse.model_validate(project)


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
def create_project(request: ProjectCreateRequest, current_user: ContentUser) -> ProjectResponse:
    with get_session() as session:
        project = projects.create_project(
            session, current_user.id, request.model_dump(exclude_none=True)
        )
        return ProjectResponse.model_validate(project)


@router.patch("/{project_id}", response_model=ProjectResponse)
def update_project(
    project_id: ProjectId, request: ProjectUpdateRequest, _: ContentUser
) -> ProjectResponse:
    with get_session() as session:
        project = projects.update_project(
            session, project_id, request.model_dump(exclude_unset=True)
        )
        return ProjectResponse.model_validate(project)


@router.post("/{project_id}/publish", response_model=ProjectResponse)
def publish_project(project_id: ProjectId, _: ContentUser) -> ProjectResponse:
    with get_session() as session:
        return ProjectResponse.model_validate(projects.publish_project(session, project_id))


@router.post("/{project_id}/archive", response_model=ProjectResponse)
def archive_project(project_id: ProjectId, _: ContentUser) -> ProjectResponse:
    with get_session() as session:
        return ProjectResponse.model_validate(projects.archive_project(session, project_id))


@router.put("/{project_id}/tags", response_model=ProjectResponse)
def set_project_tags(
    project_id: ProjectId, request: ProjectTagsRequest, _: ContentUser
) -> ProjectResponse:
    """Replace the project's tags; unknown names are created."""
    with get_session() as session:
        projects.set_project_tags(session, project_id, request.tags)
        return ProjectResponse.model_validate(projects.get_project(session, project_id))


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_project(project_id: ProjectId, _: ManagerUser) -> None:
    with get_session() as session:
        projects.delete_project(session, project_id)
