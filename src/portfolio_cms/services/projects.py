"""Project service for managing portfolio entries.

This service provides CRUD operations for projects plus the publication
workflow (draft, published, archived), featured ordering, tag assignment,
view counting and the summary statistics shown on the admin dashboard.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any, TypedDict

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from portfolio_cms.data.crud.delegates import ProjectDelegate, ProjectTagDelegate, UserDelegate
from portfolio_cms.data.models import Project, ProjectCategory, ProjectStatus, ProjectTag, Tag
from portfolio_cms.errors import ConflictError, NotFoundError, ValidationError
from portfolio_cms.services.pagination import Page, PageRequest
from portfolio_cms.services.slugs import slugify, unique_slug
from portfolio_cms.services.tags import get_or_create_tags

logger = logging.getLogger(__name__)

__all__ = [
    "ProjectData",
    "create_project",
    "get_project",
    "get_visible_project",
    "get_project_by_slug",
    "list_projects",
    "update_project",
    "publish_project",
    "archive_project",
    "delete_project",
    "set_featured_order",
    "list_featured",
    "set_project_tags",
    "project_stats",
]

# Fields that can be set directly on Project
_PROJECT_FIELDS = (
    "title",
    "description",
    "short_desc",
    "category",
    "status",
    "location",
    "area",
    "completion_year",
    "client_name",
    "meta_title",
    "meta_description",
    "meta_keywords",
    "cover_image",
    "featured_order",
)

SHORT_DESC_MAX = 300

# Columns that may be changed but never cleared
_NON_NULL_FIELDS = ("title", "description", "category", "meta_keywords")


class ProjectData(TypedDict, total=False):
    """TypedDict for project data."""

    title: str
    slug: str
    description: str
    short_desc: str | None
    category: ProjectCategory
    status: ProjectStatus
    location: str | None
    area: float | None
    completion_year: int | None
    client_name: str | None
    meta_title: str | None
    meta_description: str | None
    meta_keywords: list[str]
    cover_image: str | None
    featured_order: int | None
    tags: list[str]


def _validate_project_data(data: ProjectData, *, creating: bool) -> None:
    """Validate project fields.

    Raises:
        ValidationError: On a missing title/description/category when
            creating, a null required field, a blank title, a negative
            area, or an over-long short description.
    """
    if creating:
        for required in ("title", "description", "category"):
            if data.get(required) is None:
                raise ValidationError(f"Project {required} is required")
    for name in _NON_NULL_FIELDS:
        if name in data and data[name] is None:
            raise ValidationError(f"Project {name} cannot be null")
    if "title" in data and not data["title"].strip():
        raise ValidationError("Project title cannot be empty")
    short_desc = data.get("short_desc")
    if short_desc and len(short_desc) > SHORT_DESC_MAX:
        raise ValidationError(f"short_desc cannot exceed {SHORT_DESC_MAX} characters")
    area = data.get("area")
    if area is not None and area < 0:
        raise ValidationError("area cannot be negative")


def _apply_status(project: Project, status: ProjectStatus) -> None:
    project.status = status
    if status == ProjectStatus.PUBLISHED and project.published_at is None:
        project.published_at = datetime.now(UTC)


def create_project(session: Session, author_id: str, data: ProjectData) -> Project:
    """Create a project authored by ``author_id``.

    The slug is derived from the title unless given, and made unique by
    appending ``-2``, ``-3``... Tags are resolved by name or slug and created
    when missing.
    """
    _validate_project_data(data, creating=True)
    UserDelegate(session).find_unique_or_raise(id=author_id)

    projects = ProjectDelegate(session)
    base_slug = slugify(data.get("slug") or data["title"])
    if not base_slug:
        raise ValidationError("Project title must contain letters or digits")
    slug = unique_slug(base_slug, projects.slug_taken)

    fields = {key: data[key] for key in _PROJECT_FIELDS if key in data and key != "status"}
    fields["title"] = data["title"].strip()
    project = projects.create(author_id=author_id, slug=slug, **fields)
    _apply_status(project, data.get("status", ProjectStatus.DRAFT))

    if data.get("tags"):
        set_project_tags(session, project.id, data["tags"])
    session.flush()
    logger.info("Project %s created by %s", project.slug, author_id)
    return project


def get_project(session: Session, project_id: str) -> Project:
    return ProjectDelegate(session).find_unique_or_raise(id=project_id)


def get_visible_project(
    session: Session, project_id: str, *, include_unpublished: bool = False
) -> Project:
    """Look up a project by id, hiding unpublished ones unless asked.

    Raises:
        NotFoundError: If the project does not exist or is hidden.
    """
    project = ProjectDelegate(session).find_unique(id=project_id)
    if project is None or (
        not include_unpublished and project.status != ProjectStatus.PUBLISHED
    ):
        raise NotFoundError(f"Project '{project_id}' not found")
    return project


def get_project_by_slug(
    session: Session,
    slug: str,
    *,
    increment_views: bool = False,
    include_unpublished: bool = False,
) -> Project:
    """Look up a project by slug.

    Unpublished projects are hidden unless ``include_unpublished`` is set.
    With ``increment_views`` the view counter is bumped.
    """
    projects = ProjectDelegate(session)
    project = projects.find_by_slug(slug)
    if project is None or (
        not include_unpublished and project.status != ProjectStatus.PUBLISHED
    ):
        raise NotFoundError(f"Project '{slug}' not found")

    if increment_views:
        projects.increment_views(project.id)
        session.refresh(project)
    return project


def list_projects(
    session: Session,
    *,
    status: ProjectStatus | None = None,
    category: ProjectCategory | None = None,
    author_id: str | None = None,
    tag: str | None = None,
    page: PageRequest | None = None,
) -> Page[Project]:
    """List projects newest first with optional filters.

    ``tag`` filters by tag slug.
    """
    page = page or PageRequest()
    conditions: list[Any] = []
    if status is not None:
        conditions.append(Project.status == status)
    if category is not None:
        conditions.append(Project.category == category)
    if author_id is not None:
        conditions.append(Project.author_id == author_id)
    if tag:
        tagged = (
            select(ProjectTag.project_id)
            .join(Tag, Tag.id == ProjectTag.tag_id)
            .where(Tag.slug == slugify(tag))
        )
        conditions.append(Project.id.in_(tagged))

    total = session.execute(
        select(func.count()).select_from(Project).where(*conditions)
    ).scalar_one()
    items = (
        session.execute(
            select(Project)
            .where(*conditions)
            .order_by(Project.created_at.desc(), Project.id)
            .offset(page.skip)
            .limit(page.limit)
        )
        .scalars()
        .all()
    )
    return Page(items=list(items), total=int(total), request=page)


def update_project(session: Session, project_id: str, data: ProjectData) -> Project:
    """Update project fields, slug, status and tags.

    Raises:
        NotFoundError: If the project does not exist.
        ConflictError: If the requested slug belongs to another project.
        ValidationError: If a field value is not acceptable.
    """
    _validate_project_data(data, creating=False)
    projects = ProjectDelegate(session)
    project = projects.find_unique_or_raise(id=project_id)

    changes = {key: data[key] for key in _PROJECT_FIELDS if key in data and key != "status"}
    if "title" in changes:
        changes["title"] = changes["title"].strip()
    if data.get("slug"):
        new_slug = slugify(data["slug"])
        if not new_slug:
            raise ValidationError("Slug must contain letters or digits")
        if new_slug != project.slug and projects.slug_taken(new_slug, exclude_id=project_id):
            raise ConflictError(f"Slug '{new_slug}' is already in use")
        changes["slug"] = new_slug

    project = projects.update({"id": project_id}, **changes)
    if data.get("status") is not None:
        _apply_status(project, data["status"])
    if "tags" in data:
        set_project_tags(session, project_id, data["tags"] or [])
    session.flush()
    return project


def publish_project(session: Session, project_id: str) -> Project:
    """Publish a project; ``published_at`` keeps the first publication time."""
    project = get_project(session, project_id)
    _apply_status(project, ProjectStatus.PUBLISHED)
    session.flush()
    logger.info("Project %s published", project.slug)
    return project


def archive_project(session: Session, project_id: str) -> Project:
    project = get_project(session, project_id)
    project.status = ProjectStatus.ARCHIVED
    project.featured_order = None
    session.flush()
    logger.info("Project %s archived", project.slug)
    return project


def delete_project(session: Session, project_id: str) -> None:
    """Delete a project with its comments, likes and tag links.

    Assets are kept and detached from the project.
    """
    project = ProjectDelegate(session).delete(id=project_id)
    logger.info("Project %s deleted", project.slug)


def set_featured_order(session: Session, project_id: str, order: int | None) -> Project:
    if order is not None and order < 0:
        raise ValidationError("featured_order cannot be negative")
    return ProjectDelegate(session).update({"id": project_id}, featured_order=order)


def list_featured(session: Session, limit: int = 6) -> list[Project]:
    """Published projects with a featured position, in that order."""
    stmt = (
        select(Project)
        .where(Project.status == ProjectStatus.PUBLISHED, Project.featured_order.is_not(None))
        .order_by(Project.featured_order.asc(), Project.published_at.desc())
        .limit(limit)
    )
    return list(session.execute(stmt).scalars().all())


def set_project_tags(session: Session, project_id: str, names: Iterable[str]) -> list[Tag]:
    """Replace the project's tag set with ``names`` (names or slugs)."""
    project = get_project(session, project_id)
    tags = get_or_create_tags(session, names)

    links = ProjectTagDelegate(session)
    links.delete_many(project_id=project_id)
    if tags:
        links.create_many([{"project_id": project_id, "tag_id": tag.id} for tag in tags])
    session.expire(project, ["tag_links", "tags"])
    return tags


def project_stats(session: Session) -> dict[str, Any]:
    """Dashboard summary: counts by status and category, views and area."""
    projects = ProjectDelegate(session)
    totals = projects.aggregate(count=True, sum_of=["view_count"], avg_of=["area"])
    by_status = {status.value: 0 for status in ProjectStatus}
    for group in projects.group_by(["status"]):
        by_status[ProjectStatus(group["status"]).value] = group["_count"]
    by_category = {category.value: 0 for category in ProjectCategory}
    for group in projects.group_by(["category"]):
        by_category[ProjectCategory(group["category"]).value] = group["_count"]

    return {
        "total": totals["_count"],
        "total_views": int(totals["_sum"]["view_count"] or 0),
        "average_area": totals["_avg"]["area"],
        "by_status": by_status,
        "by_category": by_category,
    }
