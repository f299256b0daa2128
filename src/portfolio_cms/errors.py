"""Domain exceptions raised by the persistence and service layers.

Each exception carries the HTTP status the API layer should answer with, so
route handlers can let them propagate.
"""

from __future__ import annotations


class PortfolioError(Exception):
    """Base class for all application errors."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(PortfolioError):
    """Raised when a requested record does not exist."""

    status_code = 404


class ConflictError(PortfolioError):
    """Raised when a write would violate a uniqueness or relation constraint."""

    status_code = 409


class ValidationError(PortfolioError):
    """Raised when input is well-formed but not acceptable."""

    status_code = 400


class AuthenticationError(PortfolioError):
    """Raised when credentials or tokens are missing, invalid or expired."""

    status_code = 401


class PermissionDeniedError(PortfolioError):
    """Raised when the caller is authenticated but not allowed to act."""

    status_code = 403
