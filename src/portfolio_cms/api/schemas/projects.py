"""Pydantic schemas for project, tag and asset API responses."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from portfolio_cms.data.models import AssetType, ProjectCategory, ProjectStatus


class TagResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    slug: str


class TagWithCountResponse(TagResponse):
    project_count: int


class TagCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=128)
    slug: str | None = Field(None, max_length=128)


class ProjectResponse(BaseModel):
    """Public-facing project for API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: str
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
    view_count: int
    featured_order: int | None
    author_id: str
    published_at: datetime | None
    created_at: datetime
    updated_at: datetime
    tags: list[TagResponse] = []


class ProjectCreateRequest(BaseModel):
    """Request schema for creating a project."""

    title: str = Field(min_length=1, max_length=255)
    slug: str | None = Field(None, max_length=255, description="Derived from title if omitted")
    description: str
    short_desc: str | None = Field(None, max_length=300)
    category: ProjectCategory
    status: ProjectStatus = ProjectStatus.DRAFT
    location: str | None = None
    area: float | None = Field(None, ge=0)
    completion_year: int | None = Field(None, ge=1000, le=9999)
    client_name: str | None = None
    meta_title: str | None = None
    meta_description: str | None = None
    meta_keywords: list[str] = []
    cover_image: str | None = None
    featured_order: int | None = Field(None, ge=0)
    tags: list[str] = Field(default_factory=list, description="Tag names or slugs")


class ProjectUpdateRequest(BaseModel):
    """Fields allowed to be updated for a project."""

    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(None, min_length=1, max_length=255)
    slug: str | None = Field(None, max_length=255)
    description: str | None = None
    short_desc: str | None = Field(None, max_length=300)
    category: ProjectCategory | None = None
    status: ProjectStatus | None = None
    location: str | None = None
    area: float | None = Field(None, ge=0)
    completion_year: int | None = Field(None, ge=1000, le=9999)
    client_name: str | None = None
    meta_title: str | None = None
    meta_description: str | None = None
    meta_keywords: list[str] | None = None
    cover_image: str | None = None
    featured_order: int | None = Field(None, ge=0)
    tags: list[str] | None = None


class ProjectTagsRequest(BaseModel):
    tags: list[str]


class ProjectStatsResponse(BaseModel):
    total: int
    total_views: int
    average_area: float | None
    by_status: dict[str, int]
    by_category: dict[str, int]


class AssetResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    project_id: str | None
    uploaded_by_id: str | None
    type: AssetType
    title: str | None
    caption: str | None
    order: int
    original_url: str
    cdn_url: str
    file_size: int
    mime_type: str
    width: int | None
    height: int | None
    format: str | None
    blur_hash: str | None
    alt_text: str | None
    sizes: dict[str, Any] | None
    model_url: str | None
    usdz_url: str | None
    thumbnail_url: str | None
    polygon_count: int | None
    has_animations: bool | None
    streaming_url: str | None
    duration: int | None
    resolution: str | None
    page_count: int | None
    is_searchable: bool | None
    is_processed: bool
    process_status: str | None
    created_at: datetime


class AssetCreateRequest(BaseModel):
    """Request schema for attaching media; type-specific fields are optional."""

    type: AssetType
    title: str | None = None
    caption: str | None = None
    order: int | None = Field(None, ge=0)
    original_url: str
    cdn_url: str
    file_size: int = Field(ge=0)
    mime_type: str
    width: int | None = Field(None, ge=0)
    height: int | None = Field(None, ge=0)
    format: str | None = None
    blur_hash: str | None = None
    alt_text: str | None = None
    sizes: dict[str, Any] | None = None
    model_url: str | None = None
    usdz_url: str | None = None
    thumbnail_url: str | None = None
    polygon_count: int | None = Field(None, ge=0)
    has_animations: bool | None = None
    streaming_url: str | None = None
    duration: int | None = Field(None, ge=0)
    resolution: str | None = None
    page_count: int | None = Field(None, ge=0)
    is_searchable: bool | None = None


class AssetUpdateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str | None = None
    caption: str | None = None
    alt_text: str | None = None
    order: int | None = Field(None, ge=0)
    cdn_url: str | None = None
    thumbnail_url: str | None = None
    is_processed: bool | None = None
    process_status: str | None = None


class AssetReorderRequest(BaseModel):
    asset_ids: list[str]
