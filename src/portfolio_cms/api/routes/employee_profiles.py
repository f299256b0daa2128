"""Finance views over employee profiles."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from portfolio_cms.api.dependencies import require_roles
from portfolio_cms.api.schemas.users import (
    DepartmentHeadcount,
    EmployeeProfileResponse,
    EmployeeStatsResponse,
    SalarySummaryResponse,
)
from portfolio_cms.constants.roles import FINANCE_ROLES
from portfolio_cms.data.db import get_session
from portfolio_cms.data.models import User
from portfolio_cms.services import employee_profiles

router = APIRouter(prefix="/employee-profiles", tags=["employee-profiles"])

FinanceUser = Annotated[User, Depends(require_roles(*FINANCE_ROLES))]
Department = Annotated[str | None, Query(description="Filter by department")]


@router.get("", response_model=list[EmployeeProfileResponse])
def list_profiles(_: FinanceUser, department: Department = None) -> list[EmployeeProfileResponse]:
    with get_session() as session:
        return [
            EmployeeProfileResponse.model_validate(profile)
            for profile in employee_profiles.list_profiles(session, department)
        ]


@router.get("/stats", response_model=EmployeeStatsResponse)
def profile_stats(_: FinanceUser, department: Department = None) -> EmployeeStatsResponse:
    """Salary aggregates (optionally for one department) and headcount per department."""
    with get_session() as session:
        return EmployeeStatsResponse(
            salaries=SalarySummaryResponse(
                **employee_profiles.salary_summary(session, department)
            ),
            departments=[
                DepartmentHeadcount(**row)
                for row in employee_profiles.department_headcount(session)
            ],
        )
