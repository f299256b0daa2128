"""Exception handlers that turn domain errors into JSON responses."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from portfolio_cms.errors import PortfolioError

logger = logging.getLogger(__name__)


def error_body(request: Request, status_code: int, message: str) -> dict[str, Any]:
    """Build the error envelope shared by every handler."""
    return {
        "success": False,
        "statusCode": status_code,
        "message": message,
        "path": request.url.path,
        "method": request.method,
        "timestamp": datetime.now(UTC).isoformat(),
    }


async def portfolio_error_handler(request: Request, exc: PortfolioError) -> JSONResponse:
    logger.warning(
        "%s %s failed with %d: %s", request.method, request.url.path, exc.status_code, exc.message
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(request, exc.status_code, exc.message),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(
            request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error"
        ),
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register the domain and catch-all exception handlers on ``app``."""
    app.add_exception_handler(PortfolioError, portfolio_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
