"""ORM model for media attached to a project.

A single table holds every asset type; the type-specific columns are left
empty for the types that do not use them.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import JSON, Boolean, DateTime, Enum, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from portfolio_cms.data.db import Base
from portfolio_cms.data.models.enums import AssetType

if TYPE_CHECKING:
    from portfolio_cms.data.models.project import Project
    from portfolio_cms.data.models.user import User


class ProjectAsset(Base):
    """Polymorphic media record (image, drawing, document, 3D model, tour, video)."""

    __tablename__ = "project_assets"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    project_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("projects.id", ondelete="SET NULL", onupdate="CASCADE"),
        nullable=True,
        index=True,
    )
    uploaded_by_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="SET NULL", onupdate="CASCADE"),
        nullable=True,
    )
    type: Mapped[AssetType] = mapped_column(
        Enum(AssetType, name="asset_type"), nullable=False, index=True
    )
    title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    caption: Mapped[str | None] = mapped_column(String, nullable=True)
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0, index=True)
    original_url: Mapped[str] = mapped_column(String, nullable=False)
    cdn_url: Mapped[str] = mapped_column(String, nullable=False)
    file_size: Mapped[int] = mapped_column(Integer, nullable=False)
    mime_type: Mapped[str] = mapped_column(String(128), nullable=False)

    # Images and drawings
    width: Mapped[int | None] = mapped_column(Integer, nullable=True)
    height: Mapped[int | None] = mapped_column(Integer, nullable=True)
    format: Mapped[str | None] = mapped_column(String(32), nullable=True)
    blur_hash: Mapped[str | None] = mapped_column(String(128), nullable=True)
    alt_text: Mapped[str | None] = mapped_column(String, nullable=True)
    sizes: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)

    # 3D models
    model_url: Mapped[str | None] = mapped_column(String, nullable=True)
    usdz_url: Mapped[str | None] = mapped_column(String, nullable=True)
    thumbnail_url: Mapped[str | None] = mapped_column(String, nullable=True)
    polygon_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    has_animations: Mapped[bool | None] = mapped_column(Boolean, nullable=True, default=False)

    # Video and 360 tours
    streaming_url: Mapped[str | None] = mapped_column(String, nullable=True)
    duration: Mapped[int | None] = mapped_column(Integer, nullable=True)
    resolution: Mapped[str | None] = mapped_column(String(32), nullable=True)

    # Documents
    page_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_searchable: Mapped[bool | None] = mapped_column(Boolean, nullable=True, default=False)

    is_processed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    process_status: Mapped[str | None] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    project: Mapped[Project | None] = relationship("Project", back_populates="assets")
    uploaded_by: Mapped[User | None] = relationship("User", back_populates="uploaded_assets")
