"""ORM model representing a published or draft portfolio project."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import JSON, DateTime, Enum, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from portfolio_cms.data.db import Base
from portfolio_cms.data.models.enums import ProjectCategory, ProjectStatus

if TYPE_CHECKING:
    from portfolio_cms.data.models.comment import Comment
    from portfolio_cms.data.models.like import Like
    from portfolio_cms.data.models.project_asset import ProjectAsset
    from portfolio_cms.data.models.tag import ProjectTag, Tag
    from portfolio_cms.data.models.user import User


class Project(Base):
    """Portfolio entry with SEO metadata and engagement counters.

    Attributes:
        id: UUID primary key.
        title: Display title (required).
        slug: Unique URL slug.
        description: Long-form description.
        short_desc: Teaser text, at most 300 characters.
        category: Architectural category.
        status: Publication state (DRAFT, PUBLISHED, ARCHIVED).
        meta_keywords: SEO keyword list.
        view_count: Number of public detail views.
        featured_order: Position on the featured list, None when not featured.
        author_id: Foreign key to the authoring user (RESTRICT on delete).
        published_at: Set the first time the project is published.
    """

    __tablename__ = "projects"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    short_desc: Mapped[str | None] = mapped_column(String(300), nullable=True)
    category: Mapped[ProjectCategory] = mapped_column(
        Enum(ProjectCategory, name="project_category"), nullable=False, index=True
    )
    status: Mapped[ProjectStatus] = mapped_column(
        Enum(ProjectStatus, name="project_status"),
        nullable=False,
        default=ProjectStatus.DRAFT,
        index=True,
    )
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    area: Mapped[float | None] = mapped_column(Float, nullable=True)
    completion_year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    client_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    meta_title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    meta_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    meta_keywords: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    cover_image: Mapped[str | None] = mapped_column(String, nullable=True)
    view_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    featured_order: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    author_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="RESTRICT", onupdate="CASCADE"),
        nullable=False,
        index=True,
    )
    published_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    author: Mapped[User] = relationship("User", back_populates="projects")
    assets: Mapped[list[ProjectAsset]] = relationship(
        "ProjectAsset",
        back_populates="project",
        order_by="ProjectAsset.order",
        passive_deletes=True,
    )
    tag_links: Mapped[list[ProjectTag]] = relationship(
        "ProjectTag",
        back_populates="project",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    tags: Mapped[list[Tag]] = relationship(
        "Tag",
        secondary="project_tags",
        order_by="Tag.name",
        viewonly=True,
    )
    comments: Mapped[list[Comment]] = relationship(
        "Comment",
        back_populates="project",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    likes: Mapped[list[Like]] = relationship(
        "Like",
        back_populates="project",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
