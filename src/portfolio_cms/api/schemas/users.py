"""Pydantic schemas for user and employee profile API responses."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from portfolio_cms.data.models import UserRole


class UserResponse(BaseModel):
    """Response schema for an account; credentials are never included."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    name: str | None = None
    avatar: str | None = None
    role: UserRole
    is_active: bool
    email_verified: bool
    last_login_at: datetime | None = None
    created_at: datetime


class UserUpdateRequest(BaseModel):
    """Fields an administrator may change on an account."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = None
    avatar: str | None = None
    is_active: bool | None = None


class RoleUpdateRequest(BaseModel):
    role: UserRole


class EmployeeProfileResponse(BaseModel):
    """Response schema for employee profile data."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    employee_id: str
    department: str | None = None
    position: str | None = None
    join_date: datetime
    phone: str | None = None
    address: str | None = None
    salary: Decimal | None = None


class EmployeeProfileCreateRequest(BaseModel):
    """Request schema for creating an employee profile."""

    employee_id: str = Field(min_length=1, description="Company employee number")
    department: str | None = Field(None, description="Department name")
    position: str | None = Field(None, description="Job title")
    join_date: datetime | None = Field(None, description="Defaults to now")
    phone: str | None = Field(None, description="Work phone number")
    address: str | None = Field(None, description="Postal address")
    salary: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)


class EmployeeProfileUpdateRequest(BaseModel):
    """Request schema for updating an employee profile."""

    model_config = ConfigDict(extra="forbid")

    employee_id: str | None = Field(None, min_length=1)
    department: str | None = None
    position: str | None = None
    join_date: datetime | None = None
    phone: str | None = None
    address: str | None = None
    salary: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)


class SalarySummaryResponse(BaseModel):
    headcount: int
    total: Decimal | None = None
    average: float | None = None
    minimum: Decimal | None = None
    maximum: Decimal | None = None


class DepartmentHeadcount(BaseModel):
    department: str | None
    headcount: int


class EmployeeStatsResponse(BaseModel):
    salaries: SalarySummaryResponse
    departments: list[DepartmentHeadcount]
