"""Liveness and database readiness check."""

from __future__ import annotations

from fastapi import APIRouter
from sqlalchemy import text

from portfolio_cms.data.db import get_session

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check() -> dict[str, str]:
    """Report that the API is up and the database answers queries."""
    with get_session() as session:
        session.execute(text("SELECT 1"))
    return {"status": "healthy", "database": "ok"}
