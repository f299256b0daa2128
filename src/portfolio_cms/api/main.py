"""FastAPI application entry point for the Portfolio CMS API."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from portfolio_cms.api.errors import setup_exception_handlers
from portfolio_cms.api.routes import (
    assets,
    auth,
    comments,
    contact,
    employee_profiles,
    health,
    likes,
    newsletter,
    projects,
    settings,
    tags,
    users,
)
from portfolio_cms.config import get_settings

if TYPE_CHECKING:
    from collections.abc import AsyncIterator


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Initialize resources on startup and clean up on shutdown."""
    from portfolio_cms.data.db import dispose_engine, init_db
    from portfolio_cms.logging_config import configure_logging

    configure_logging(get_settings().log_level)
    init_db()
    yield
    dispose_engine()


app = FastAPI(
    title="Portfolio CMS API",
    description="API for managing portfolio projects, their media and site content",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[get_settings().frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_exception_handlers(app)

app.include_router(health.router)
app.include_router(auth.router, prefix="/api")
app.include_router(users.router, prefix="/api")
app.include_router(employee_profiles.router, prefix="/api")
app.include_router(projects.router, prefix="/api")
app.include_router(assets.router, prefix="/api")
app.include_router(tags.router, prefix="/api")
app.include_router(comments.router, prefix="/api")
app.include_router(likes.router, prefix="/api")
app.include_router(contact.router, prefix="/api")
app.include_router(newsletter.router, prefix="/api")
app.include_router(settings.router, prefix="/api")


def main() -> None:
    """Start the development server."""
    import uvicorn

    uvicorn.run(
        "portfolio_cms.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )


if __name__ == "__main__":
    main()
