"""Employee profile service.

CRUD for the HR data attached to staff accounts, plus the salary and
headcount summaries used by the finance dashboard.
"""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, TypedDict

from sqlalchemy.orm import Session

from portfolio_cms.data.crud.delegates import EmployeeProfileDelegate, UserDelegate
from portfolio_cms.data.models import EmployeeProfile
from portfolio_cms.errors import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

__all__ = [
    "EmployeeProfileData",
    "create_profile",
    "get_profile",
    "update_profile",
    "delete_profile",
    "list_profiles",
    "salary_summary",
    "department_headcount",
]

# Fields that can be updated on EmployeeProfile
_PROFILE_FIELDS = (
    "employee_id",
    "department",
    "position",
    "join_date",
    "phone",
    "address",
    "salary",
)


class EmployeeProfileData(TypedDict, total=False):
    """TypedDict for employee profile data."""

    employee_id: str
    department: str | None
    position: str | None
    join_date: datetime
    phone: str | None
    address: str | None
    salary: Decimal | None


def _validate(data: EmployeeProfileData) -> None:
    salary = data.get("salary")
    if salary is not None and Decimal(salary) < 0:
        raise ValidationError("salary cannot be negative")
    if "employee_id" in data and not (data["employee_id"] or "").strip():
        raise ValidationError("employee_id cannot be empty")


def create_profile(session: Session, user_id: str, data: EmployeeProfileData) -> EmployeeProfile:
    """Attach an employee profile to a user.

    Raises:
        NotFoundError: If the user does not exist.
        ConflictError: If the user already has a profile or the employee id is taken.
        ValidationError: If ``employee_id`` is missing or the salary is negative.
    """
    UserDelegate(session).find_unique_or_raise(id=user_id)
    if not data.get("employee_id"):
        raise ValidationError("employee_id is required")
    _validate(data)

    profiles = EmployeeProfileDelegate(session)
    if profiles.find_by_user(user_id) is not None:
        raise ConflictError("User already has an employee profile.")
    if profiles.find_by_employee_id(data["employee_id"]) is not None:
        raise ConflictError(f"Employee id '{data['employee_id']}' is already assigned.")

    fields = {key: data[key] for key in _PROFILE_FIELDS if key in data and data[key] is not None}
    profile = profiles.create(user_id=user_id, **fields)
    logger.info("Employee profile %s created for user %s", profile.employee_id, user_id)
    return profile


def get_profile(session: Session, user_id: str) -> EmployeeProfile:
    profile = EmployeeProfileDelegate(session).find_by_user(user_id)
    if profile is None:
        raise NotFoundError("Employee profile not found")
    return profile


def update_profile(session: Session, user_id: str, data: EmployeeProfileData) -> EmployeeProfile:
    _validate(data)
    profile = get_profile(session, user_id)
    changes = {key: data[key] for key in _PROFILE_FIELDS if key in data}
    if changes.get("employee_id") is None:
        changes.pop("employee_id", None)
    return EmployeeProfileDelegate(session).update({"id": profile.id}, **changes)


def delete_profile(session: Session, user_id: str) -> None:
    profile = get_profile(session, user_id)
    EmployeeProfileDelegate(session).delete(id=profile.id)


def list_profiles(session: Session, department: str | None = None) -> list[EmployeeProfile]:
    where = {"department": department} if department else None
    return EmployeeProfileDelegate(session).find_many(where, order_by="employee_id")


def salary_summary(session: Session, department: str | None = None) -> dict[str, Any]:
    """Return headcount and salary total, average, min and max.

    Profiles without a salary count towards ``headcount`` only.
    """
    where = {"department": department} if department else None
    result = EmployeeProfileDelegate(session).aggregate(
        where,
        count=True,
        sum_of=["salary"],
        avg_of=["salary"],
        min_of=["salary"],
        max_of=["salary"],
    )
    return {
        "headcount": result["_count"],
        "total": result["_sum"]["salary"],
        "average": result["_avg"]["salary"],
        "minimum": result["_min"]["salary"],
        "maximum": result["_max"]["salary"],
    }


def department_headcount(session: Session) -> list[dict[str, Any]]:
    """Return ``{"department", "headcount"}`` rows, largest department first."""
    groups = EmployeeProfileDelegate(session).group_by(
        ["department"], count=True, order_by=["-_count", "department"]
    )
    return [{"department": g["department"], "headcount": g["_count"]} for g in groups]
