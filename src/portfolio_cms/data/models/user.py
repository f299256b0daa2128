"""User account model.

Accounts carry their role, login state and the credentials used by the auth
service. Passwords and refresh tokens are stored as hashes, never in
plaintext.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, Enum, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from portfolio_cms.data.db import Base
from portfolio_cms.data.models.enums import UserRole

if TYPE_CHECKING:
    from portfolio_cms.data.models.comment import Comment
    from portfolio_cms.data.models.employee_profile import EmployeeProfile
    from portfolio_cms.data.models.like import Like
    from portfolio_cms.data.models.project import Project
    from portfolio_cms.data.models.project_asset import ProjectAsset


class User(Base):
    """Application user account.

    Attributes:
        id: UUID primary key.
        email: Unique, lowercased login email.
        name: Display name.
        google_id: Unique Google account id for OAuth sign-in.
        role: Access role (defaults to USER).
        is_active: Inactive accounts cannot authenticate.
        password: Salted password hash, empty for OAuth-only accounts.
        refresh_token: Hash of the currently valid refresh token.
        email_verified: Whether the email verification flow completed.
        email_verify_token: Pending verification token (unique).
        email_verify_expiry: Expiry of the pending verification token.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    google_id: Mapped[str | None] = mapped_column(String(255), unique=True, nullable=True)
    avatar: Mapped[str | None] = mapped_column(String, nullable=True)
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, name="user_role"), nullable=False, default=UserRole.USER, index=True
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    last_login_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    password: Mapped[str | None] = mapped_column(String(256), nullable=True)
    refresh_token: Mapped[str | None] = mapped_column(String(256), nullable=True)
    email_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    email_verify_token: Mapped[str | None] = mapped_column(String(128), unique=True, nullable=True)
    email_verify_expiry: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    employee_profile: Mapped[EmployeeProfile | None] = relationship(
        "EmployeeProfile",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    # RESTRICT relations: the database refuses the delete, the ORM never nulls them.
    projects: Mapped[list[Project]] = relationship(
        "Project", back_populates="author", passive_deletes="all"
    )
    comments: Mapped[list[Comment]] = relationship(
        "Comment", back_populates="user", passive_deletes="all"
    )
    likes: Mapped[list[Like]] = relationship("Like", back_populates="user", passive_deletes="all")
    uploaded_assets: Mapped[list[ProjectAsset]] = relationship(
        "ProjectAsset", back_populates="uploaded_by", passive_deletes=True
    )
