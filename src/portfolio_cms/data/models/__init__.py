"""ORM models package for database tables.

This package provides SQLAlchemy ORM models representing database tables:
- User: Accounts with role and authentication state
- EmployeeProfile: HR data attached 1:1 to a staff user
- Project: Portfolio entries with SEO metadata and counters
- ProjectAsset: Media attached to a project
- Tag / ProjectTag: Labels and the project/tag association
- Comment: Threaded, moderated project comments
- Like: One like per (project, user)
- ContactInquiry, Newsletter, SiteSettings: Standalone site records

All models inherit from the shared Base declarative class defined in data.db.
"""

from portfolio_cms.data.db import Base
from portfolio_cms.data.models.comment import Comment
from portfolio_cms.data.models.contact_inquiry import ContactInquiry
from portfolio_cms.data.models.employee_profile import EmployeeProfile
from portfolio_cms.data.models.enums import AssetType, ProjectCategory, ProjectStatus, UserRole
from portfolio_cms.data.models.like import Like
from portfolio_cms.data.models.newsletter import Newsletter
from portfolio_cms.data.models.project import Project
from portfolio_cms.data.models.project_asset import ProjectAsset
from portfolio_cms.data.models.site_settings import SiteSettings
from portfolio_cms.data.models.tag import ProjectTag, Tag
from portfolio_cms.data.models.user import User

__all__ = [
    "AssetType",
    "Base",
    "Comment",
    "ContactInquiry",
    "EmployeeProfile",
    "Like",
    "Newsletter",
    "Project",
    "ProjectAsset",
    "ProjectCategory",
    "ProjectStatus",
    "ProjectTag",
    "SiteSettings",
    "Tag",
    "User",
    "UserRole",
]
