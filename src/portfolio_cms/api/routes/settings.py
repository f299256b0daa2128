"""Site settings routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Path, status

from portfolio_cms.api.dependencies import require_roles
from portfolio_cms.api.schemas.site import SettingResponse, SettingUpdateRequest
from portfolio_cms.constants.roles import STAFF_ROLES
from portfolio_cms.data.db import get_session
from portfolio_cms.data.models import User
from portfolio_cms.services import site_settings

router = APIRouter(prefix="/settings", tags=["settings"])

StaffUser = Annotated[User, Depends(require_roles(*STAFF_ROLES))]
SettingKey = Annotated[str, Path(description="Setting key")]


@router.get("", response_model=dict[str, str])
def all_settings() -> dict[str, str]:
    """Return every setting as a ``key -> value`` mapping."""
    with get_session() as session:
        return site_settings.as_dict(session)


@router.get("/{key}", response_model=SettingResponse)
def get_setting(key: SettingKey) -> SettingResponse:
    with get_session() as session:
        return SettingResponse.model_validate(site_settings.get_setting(session, key))


@router.put("/{key}", response_model=SettingResponse)
def put_setting(key: SettingKey, request: SettingUpdateRequest, _: StaffUser) -> SettingResponse:
    with get_session() as session:
        setting = site_settings.set_setting(session, key, request.value, request.description)
        return SettingResponse.model_validate(setting)


@router.delete("/{key}", status_code=status.HTTP_204_NO_CONTENT)
def delete_setting(key: SettingKey, _: StaffUser) -> None:
    with get_session() as session:
        site_settings.delete_setting(session, key)
