"""Tag service: creation, lookup and usage counts."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from portfolio_cms.data.crud.delegates import TagDelegate
from portfolio_cms.data.models import ProjectTag, Tag
from portfolio_cms.errors import ConflictError, ValidationError
from portfolio_cms.services.slugs import slugify

logger = logging.getLogger(__name__)


def create_tag(session: Session, name: str, slug: str | None = None) -> Tag:
    """Create a tag; the slug defaults to the slugified name.

    Raises:
        ValidationError: If the name (or derived slug) is empty.
        ConflictError: If the name or slug already exists.
    """
    clean_name = name.strip()
    clean_slug = slugify(slug or clean_name)
    if not clean_name or not clean_slug:
        raise ValidationError("Tag name cannot be empty")

    tags = TagDelegate(session)
    if tags.find_by_name(clean_name) is not None or tags.find_by_slug(clean_slug) is not None:
        raise ConflictError(f"Tag '{clean_name}' already exists")
    return tags.create(name=clean_name, slug=clean_slug)


def get_or_create_tags(session: Session, names: Iterable[str]) -> list[Tag]:
    """Resolve tag names or slugs to tags, creating missing ones.

    Duplicates (by slug) are collapsed; order of first appearance is kept.
    """
    tags = TagDelegate(session)
    resolved: dict[str, Tag] = {}
    for raw in names:
        slug = slugify(raw)
        if not slug or slug in resolved:
            continue
        tag = tags.find_by_slug(slug) or tags.find_by_name(raw.strip())
        if tag is None:
            tag = tags.create(name=raw.strip(), slug=slug)
            logger.info("Created tag %s", slug)
        resolved[slug] = tag
    return list(resolved.values())


def list_tags(session: Session) -> list[dict[str, Any]]:
    """Return every tag with the number of projects using it, by name."""
    stmt = (
        select(Tag, func.count(ProjectTag.project_id))
        .outerjoin(ProjectTag, ProjectTag.tag_id == Tag.id)
        .group_by(Tag.id)
        .order_by(Tag.name)
    )
    return [
        {"tag": tag, "project_count": int(count)} for tag, count in session.execute(stmt).all()
    ]


def delete_tag(session: Session, tag_id: str) -> None:
    """Delete a tag; its project links go with it."""
    TagDelegate(session).delete(id=tag_id)
