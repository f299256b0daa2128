"""Process-wide logging setup for the API server."""

from __future__ import annotations

import logging

_LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

_configured = False


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger once.

    Args:
        level: Logging level name such as ``"DEBUG"`` or ``"INFO"``.
    """
    global _configured
    if _configured:
        logging.getLogger().setLevel(level)
        return

    logging.basicConfig(level=level, format=_LOG_FORMAT)
    # SQL echo stays off unless explicitly requested.
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    _configured = True
