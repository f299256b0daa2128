"""Project asset routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, status

from portfolio_cms.api.dependencies import OptionalUser, can_see_drafts, require_roles
from portfolio_cms.api.schemas.projects import (
    AssetCreateRequest,
    AssetReorderRequest,
    AssetResponse,
    AssetUpdateRequest,
)
from portfolio_cms.constants.roles import CONTENT_ROLES
from portfolio_cms.data.db import get_session
from portfolio_cms.data.models import AssetType, User
from portfolio_cms.services import assets, projects

router = APIRouter(tags=["assets"])

ContentUser = Annotated[User, Depends(require_roles(*CONTENT_ROLES))]
ProjectId = Annotated[str, Path(description="Project id")]
AssetId = Annotated[str, Path(description="Asset id")]


@router.get("/projects/{project_id}/assets", response_model=list[AssetResponse])
def list_assets(
    project_id: ProjectId,
    current_user: OptionalUser,
    asset_type: Annotated[AssetType | None, Query(alias="type")] = None,
) -> list[AssetResponse]:
    with get_session() as session:
        projects.get_visible_project(
            session, project_id, include_unpublished=can_see_drafts(current_user)
        )
        return [
            AssetResponse.model_validate(asset)
            for asset in assets.list_assets(session, project_id, asset_type)
        ]


@router.post(
    "/projects/{project_id}/assets",
    response_model=AssetResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_asset(
    project_id: ProjectId, request: AssetCreateRequest, current_user: ContentUser
) -> AssetResponse:
    """Attach an asset; without ``order`` it goes after the existing ones."""
    with get_session() as session:
        asset = assets.add_asset(
            session, project_id, request.model_dump(exclude_none=True), current_user.id
        )
        return AssetResponse.model_validate(asset)


@router.post("/projects/{project_id}/assets/reorder", response_model=list[AssetResponse])
def reorder_assets(
    project_id: ProjectId, request: AssetReorderRequest, _: ContentUser
) -> list[AssetResponse]:
    with get_session() as session:
        return [
            AssetResponse.model_validate(asset)
            for asset in assets.reorder_assets(session, project_id, request.asset_ids)
        ]


@router.patch("/assets/{asset_id}", response_model=AssetResponse)
def update_asset(asset_id: AssetId, request: AssetUpdateRequest, _: ContentUser) -> AssetResponse:
    with get_session() as session:
        asset = assets.update_asset(session, asset_id, request.model_dump(exclude_unset=True))
        return AssetResponse.model_validate(asset)


@router.delete("/assets/{asset_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_asset(asset_id: AssetId, _: ContentUser) -> None:
    with get_session() as session:
        assets.delete_asset(session, asset_id)
