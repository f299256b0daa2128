"""Site settings service: a small key/value store for site configuration."""

from __future__ import annotations

import re

from sqlalchemy.orm import Session

from portfolio_cms.data.crud.delegates import SiteSettingsDelegate
from portfolio_cms.data.models import SiteSettings
from portfolio_cms.errors import NotFoundError, ValidationError

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]{1,128}$")


def _check_key(key: str) -> str:
    if not _KEY_PATTERN.match(key):
        raise ValidationError("Setting keys use letters, digits, '.', '_' or '-' (max 128)")
    return key


def get_setting(session: Session, key: str) -> SiteSettings:
    setting = SiteSettingsDelegate(session).find_by_key(key)
    if setting is None:
        raise NotFoundError(f"Setting '{key}' not found")
    return setting


def get_value(session: Session, key: str, default: str | None = None) -> str | None:
    setting = SiteSettingsDelegate(session).find_by_key(key)
    return default if setting is None else setting.value


def set_setting(
    session: Session, key: str, value: str, description: str | None = None
) -> SiteSettings:
    """Create or replace a setting. A ``None`` description keeps the current one."""
    _check_key(key)
    update_data: dict[str, str] = {"value": value}
    if description is not None:
        update_data["description"] = description
    return SiteSettingsDelegate(session).upsert(
        {"key": key},
        create_data={"value": value, "description": description},
        update_data=update_data,
    )


def list_settings(session: Session) -> list[SiteSettings]:
    return SiteSettingsDelegate(session).find_many(order_by="key")


def as_dict(session: Session) -> dict[str, str]:
    return {setting.key: setting.value for setting in list_settings(session)}


def delete_setting(session: Session, key: str) -> None:
    SiteSettingsDelegate(session).delete(key=key)
