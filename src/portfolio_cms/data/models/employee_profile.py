"""EmployeeProfile model holding HR data for staff accounts.

It has a 1:1 relationship with the User model and is removed together with
its user.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from portfolio_cms.data.db import Base

if TYPE_CHECKING:
    from portfolio_cms.data.models.user import User


class EmployeeProfile(Base):
    """HR extension of a user account.

    Attributes:
        id: UUID primary key.
        user_id: Foreign key to users table (unique, 1:1 relationship).
        employee_id: Unique company-assigned employee number.
        department: Department name.
        position: Job title.
        join_date: Date the employee joined (defaults to creation time).
        phone: Work phone number.
        address: Postal address.
        salary: Salary with two decimal places.
    """

    __tablename__ = "employee_profiles"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE", onupdate="CASCADE"),
        nullable=False,
        unique=True,
    )
    employee_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    department: Mapped[str | None] = mapped_column(String(128), nullable=True)
    position: Mapped[str | None] = mapped_column(String(128), nullable=True)
    join_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC)
    )
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    salary: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)

    user: Mapped[User] = relationship("User", back_populates="employee_profile")
