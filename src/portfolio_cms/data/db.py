"""Engine, schema and session handling for the CMS database.

The engine is built lazily from ``DB_URL`` (falling back to a ``database.db``
SQLite file at the repository root) and the schema is created on first use.
SQLite connections get ``PRAGMA foreign_keys=ON`` so cascade, restrict and
set-null rules on relations behave as they do on a server database.

Work with the database through :func:`get_session`, which commits when the
block succeeds and rolls back when it raises.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from sqlalchemy import create_engine, event
from sqlalchemy.engine import URL, Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base shared by every CMS model."""


_engine: Engine | None = None
_SessionLocal: sessionmaker[Session] | None = None


def get_database_url() -> str:
    """Return ``DB_URL`` if set, else the default SQLite file URL."""
    configured = os.getenv("DB_URL")
    if configured:
        return configured

    default_file = Path(__file__).resolve().parents[3] / "database.db"
    return URL.create("sqlite", database=str(default_file)).render_as_string(
        hide_password=False
    )


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:  # noqa: ARG001
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _create_schema(engine: Engine) -> None:
    # Model modules must be imported so their tables exist on Base.metadata.
    from portfolio_cms.data.models import (  # noqa: F401
        comment,
        contact_inquiry,
        employee_profile,
        like,
        newsletter,
        project,
        project_asset,
        site_settings,
        tag,
        user,
    )

    Base.metadata.create_all(bind=engine)


def _get_engine() -> Engine:
    global _engine
    if _engine is None:
        engine = create_engine(get_database_url(), echo=False)
        if engine.dialect.name == "sqlite":
            event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        _create_schema(engine)
        logger.debug("Database engine ready (%s)", engine.url.render_as_string())
        _engine = engine
    return _engine


def _get_session_factory() -> sessionmaker[Session]:
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(bind=_get_engine(), autoflush=False, expire_on_commit=False)
    return _SessionLocal


def init_db() -> None:
    """Build the engine and create any missing tables.

    Both happen on first use anyway; call this to fail fast at startup.
    """
    _get_engine()


def dispose_engine() -> None:
    """Close pooled connections and forget the cached engine and factory."""
    global _engine, _SessionLocal
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionLocal = None


@contextmanager
def get_session() -> Iterator[Session]:
    """Yield a session inside a transaction that commits or rolls back."""
    session = _get_session_factory()()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
