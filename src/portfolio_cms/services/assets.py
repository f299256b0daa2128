"""Project asset service: attach, order and track processing of media."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from sqlalchemy.orm import Session

from portfolio_cms.data.crud.delegates import ProjectAssetDelegate, ProjectDelegate
from portfolio_cms.data.models import AssetType, ProjectAsset
from portfolio_cms.errors import ValidationError

logger = logging.getLogger(__name__)

_ASSET_FIELDS = (
    "type",
    "title",
    "caption",
    "order",
    "original_url",
    "cdn_url",
    "file_size",
    "mime_type",
    "width",
    "height",
    "format",
    "blur_hash",
    "alt_text",
    "sizes",
    "model_url",
    "usdz_url",
    "thumbnail_url",
    "polygon_count",
    "has_animations",
    "streaming_url",
    "duration",
    "resolution",
    "page_count",
    "is_searchable",
    "process_status",
)

_REQUIRED_FIELDS = ("type", "original_url", "cdn_url", "file_size", "mime_type")


def add_asset(
    session: Session, project_id: str, data: dict[str, Any], uploaded_by_id: str | None = None
) -> ProjectAsset:
    """Attach a media record to a project.

    Without an explicit ``order`` the asset is appended after the existing ones.
    """
    ProjectDelegate(session).find_unique_or_raise(id=project_id)
    missing = [name for name in _REQUIRED_FIELDS if data.get(name) is None]
    if missing:
        raise ValidationError(f"Missing asset field(s): {', '.join(missing)}")
    if data["file_size"] < 0:
        raise ValidationError("file_size cannot be negative")

    assets = ProjectAssetDelegate(session)
    fields = {key: data[key] for key in _ASSET_FIELDS if data.get(key) is not None}
    fields.setdefault("order", assets.next_order(project_id))
    asset = assets.create(project_id=project_id, uploaded_by_id=uploaded_by_id, **fields)
    logger.info("Asset %s (%s) added to project %s", asset.id, asset.type, project_id)
    return asset


def list_assets(
    session: Session, project_id: str, asset_type: AssetType | None = None
) -> list[ProjectAsset]:
    ProjectDelegate(session).find_unique_or_raise(id=project_id)
    where: dict[str, Any] = {"project_id": project_id}
    if asset_type is not None:
        where["type"] = asset_type
    return ProjectAssetDelegate(session).find_many(where, order_by=["order", "created_at"])


def update_asset(session: Session, asset_id: str, data: dict[str, Any]) -> ProjectAsset:
    changes = {key: data[key] for key in _ASSET_FIELDS if key in data}
    for name in (*_REQUIRED_FIELDS, "order"):
        if name in changes and changes[name] is None:
            raise ValidationError(f"{name} cannot be empty")
    return ProjectAssetDelegate(session).update({"id": asset_id}, **changes)


def mark_processed(session: Session, asset_id: str, process_status: str = "done") -> ProjectAsset:
    """Flag an asset as processed by the media pipeline."""
    return ProjectAssetDelegate(session).update(
        {"id": asset_id}, is_processed=True, process_status=process_status
    )


def reorder_assets(session: Session, project_id: str, asset_ids: Sequence[str]) -> list[ProjectAsset]:
    """Set asset order to the position of each id in ``asset_ids``.

    Raises:
        ValidationError: If the ids are not exactly the project's assets.
    """
    current = list_assets(session, project_id)
    by_id = {asset.id: asset for asset in current}
    if len(asset_ids) != len(set(asset_ids)) or set(asset_ids) != set(by_id):
        raise ValidationError("Reorder must list every asset of the project exactly once")

    for position, asset_id in enumerate(asset_ids):
        by_id[asset_id].order = position
    session.flush()
    return [by_id[asset_id] for asset_id in asset_ids]


def delete_asset(session: Session, asset_id: str) -> None:
    ProjectAssetDelegate(session).delete(id=asset_id)
