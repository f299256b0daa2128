"""Shared Pydantic schemas for API responses."""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

from portfolio_cms.services.pagination import Page

T = TypeVar("T")

__all__ = ["MessageResponse", "PageMeta", "PaginatedResponse"]


class PageMeta(BaseModel):
    """Pagination metadata for list responses."""

    total: int = Field(description="Total number of items available")
    page: int = Field(description="Current page (1-based)")
    limit: int = Field(description="Maximum number of items per page")
    pages: int = Field(description="Total number of pages")

    @classmethod
    def from_page(cls, page: Page) -> PageMeta:
        return cls(
            total=page.total,
            page=page.request.page,
            limit=page.request.limit,
            pages=page.pages,
        )


class PaginatedResponse(BaseModel, Generic[T]):
    """List payload with pagination metadata."""

    data: list[T]
    meta: PageMeta


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str
