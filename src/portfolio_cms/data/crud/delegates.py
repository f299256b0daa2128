"""Concrete delegates, one per entity, with their unique-key lookups."""

from __future__ import annotations

from sqlalchemy import func, select, update

from portfolio_cms.data.crud.base import Delegate
from portfolio_cms.data.models import (
    Comment,
    ContactInquiry,
    EmployeeProfile,
    Like,
    Newsletter,
    Project,
    ProjectAsset,
    ProjectTag,
    SiteSettings,
    Tag,
    User,
)


class UserDelegate(Delegate[User]):
    model = User

    def find_by_email(self, email: str) -> User | None:
        return self.find_unique(email=email.strip().lower())

    def find_by_verify_token(self, token: str) -> User | None:
        return self.find_unique(email_verify_token=token)

    def find_by_google_id(self, google_id: str) -> User | None:
        return self.find_unique(google_id=google_id)


class EmployeeProfileDelegate(Delegate[EmployeeProfile]):
    model = EmployeeProfile

    def find_by_user(self, user_id: str) -> EmployeeProfile | None:
        return self.find_unique(user_id=user_id)

    def find_by_employee_id(self, employee_id: str) -> EmployeeProfile | None:
        return self.find_unique(employee_id=employee_id)


class ProjectDelegate(Delegate[Project]):
    model = Project

    def find_by_slug(self, slug: str) -> Project | None:
        return self.find_unique(slug=slug)

    def slug_taken(self, slug: str, exclude_id: str | None = None) -> bool:
        stmt = select(func.count()).select_from(Project).where(Project.slug == slug)
        if exclude_id is not None:
            stmt = stmt.where(Project.id != exclude_id)
        return self.session.execute(stmt).scalar_one() > 0

    def increment_views(self, project_id: str) -> None:
        """Bump ``view_count`` in SQL so concurrent readers do not lose updates."""
        self.session.execute(
            update(Project)
            .where(Project.id == project_id)
            .values(view_count=Project.view_count + 1)
            .execution_options(synchronize_session=False)
        )


class ProjectAssetDelegate(Delegate[ProjectAsset]):
    model = ProjectAsset

    def next_order(self, project_id: str) -> int:
        stmt = select(func.max(ProjectAsset.order)).where(ProjectAsset.project_id == project_id)
        current = self.session.execute(stmt).scalar_one()
        return 0 if current is None else current + 1


class TagDelegate(Delegate[Tag]):
    model = Tag

    def find_by_slug(self, slug: str) -> Tag | None:
        return self.find_unique(slug=slug)

    def find_by_name(self, name: str) -> Tag | None:
        return self.find_unique(name=name)


class ProjectTagDelegate(Delegate[ProjectTag]):
    model = ProjectTag


class CommentDelegate(Delegate[Comment]):
    model = Comment


class LikeDelegate(Delegate[Like]):
    model = Like

    def find_pair(self, project_id: str, user_id: str) -> Like | None:
        return self.find_unique(project_id=project_id, user_id=user_id)


class ContactInquiryDelegate(Delegate[ContactInquiry]):
    model = ContactInquiry


class NewsletterDelegate(Delegate[Newsletter]):
    model = Newsletter

    def find_by_email(self, email: str) -> Newsletter | None:
        return self.find_unique(email=email.strip().lower())


class SiteSettingsDelegate(Delegate[SiteSettings]):
    model = SiteSettings

    def find_by_key(self, key: str) -> SiteSettings | None:
        return self.find_unique(key=key)
