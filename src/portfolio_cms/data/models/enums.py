"""Closed value sets shared by the ORM models and API schemas."""

from __future__ import annotations

from enum import StrEnum


class UserRole(StrEnum):
    """Access role of an account, from most to least privileged."""

    SUPER_ADMIN = "SUPER_ADMIN"
    ADMIN = "ADMIN"
    FINANCE = "FINANCE"
    HIGHER_MANAGER = "HIGHER_MANAGER"
    CRAFTER = "CRAFTER"
    EMPLOYEE = "EMPLOYEE"
    USER = "USER"


class ProjectStatus(StrEnum):
    """Publication state of a portfolio project."""

    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    ARCHIVED = "ARCHIVED"


class ProjectCategory(StrEnum):
    """Architectural category a project is filed under."""

    RESIDENTIAL = "RESIDENTIAL"
    COMMERCIAL = "COMMERCIAL"
    INSTITUTIONAL = "INSTITUTIONAL"
    LANDSCAPE = "LANDSCAPE"
    INTERIOR = "INTERIOR"
    URBAN_PLANNING = "URBAN_PLANNING"


class AssetType(StrEnum):
    """Kind of media stored in a project asset."""

    IMAGE_2D = "IMAGE_2D"
    DRAWING_2D = "DRAWING_2D"
    DOCUMENT_1D = "DOCUMENT_1D"
    MODEL_3D = "MODEL_3D"
    TOUR_360 = "TOUR_360"
    VIDEO = "VIDEO"
