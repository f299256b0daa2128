"""ORM models for tags and the project/tag association table."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from portfolio_cms.data.db import Base

if TYPE_CHECKING:
    from portfolio_cms.data.models.project import Project


class Tag(Base):
    """Free-form label shared across projects."""

    __tablename__ = "tags"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    name: Mapped[str] = mapped_column(String(128), unique=True, nullable=False)
    slug: Mapped[str] = mapped_column(String(128), unique=True, nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC)
    )

    project_links: Mapped[list[ProjectTag]] = relationship(
        "ProjectTag",
        back_populates="tag",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class ProjectTag(Base):
    """Join row linking one project to one tag (composite primary key)."""

    __tablename__ = "project_tags"

    project_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("projects.id", ondelete="CASCADE", onupdate="CASCADE"),
        primary_key=True,
    )
    tag_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("tags.id", ondelete="CASCADE", onupdate="CASCADE"),
        primary_key=True,
    )

    project: Mapped[Project] = relationship("Project", back_populates="tag_links")
    tag: Mapped[Tag] = relationship("Tag", back_populates="project_links")
