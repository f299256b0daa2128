"""Newsletter subscription routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from portfolio_cms.api.dependencies import require_roles
from portfolio_cms.api.schemas.site import (
    NewsletterRequest,
    NewsletterResponse,
    NewsletterStatsResponse,
)
from portfolio_cms.constants.roles import STAFF_ROLES
from portfolio_cms.data.db import get_session
from portfolio_cms.data.models import User
from portfolio_cms.services import newsletter

router = APIRouter(prefix="/newsletter", tags=["newsletter"])

StaffUser = Annotated[User, Depends(require_roles(*STAFF_ROLES))]


@router.post("/subscribe", response_model=NewsletterResponse)
def subscribe(request: NewsletterRequest) -> NewsletterResponse:
    """Subscribe an address; subscribing again is a no-op."""
    with get_session() as session:
        return NewsletterResponse.model_validate(newsletter.subscribe(session, request.email))


@router.post("/unsubscribe", response_model=NewsletterResponse)
def unsubscribe(request: NewsletterRequest) -> NewsletterResponse:
    with get_session() as session:
        return NewsletterResponse.model_validate(newsletter.unsubscribe(session, request.email))


@router.get("", response_model=list[NewsletterResponse])
def list_subscribers(
    _: StaffUser,
    active_only: Annotated[bool, Query(description="Hide unsubscribed addresses")] = True,
) -> list[NewsletterResponse]:
    with get_session() as session:
        return [
            NewsletterResponse.model_validate(item)
            for item in newsletter.list_subscribers(session, active_only=active_only)
        ]


@router.get("/stats", response_model=NewsletterStatsResponse)
def subscriber_stats(_: StaffUser) -> NewsletterStatsResponse:
    with get_session() as session:
        return NewsletterStatsResponse(**newsletter.subscriber_counts(session))
