"""Database engine setup.

PostgreSQL is the production store; SQLite is supported for local runs and
tests. SQLAlchemy Core (not ORM) is used: every repository call is one
short statement or transaction, so identity maps buy nothing.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url

from moving.infrastructure.database.schema import metadata


def create_db_engine(url: str, *, echo: bool = False, pool_size: int = 10) -> Engine:
    """Create an engine for *url*.

    SQLite connections are shared across the RPC worker threads, so
    ``check_same_thread`` is disabled and foreign keys are switched on.
    """
    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite":
        engine = create_engine(
            url,
            echo=echo,
            connect_args={"check_same_thread": False},
        )

        @event.listens_for(engine, "connect")
        def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    return create_engine(url, echo=echo, pool_size=pool_size, pool_pre_ping=True)


def init_database(url: str, *, echo: bool = False) -> Engine:
    """Create an engine and all tables from :data:`schema.metadata`.

    Idempotent and safe to call on an existing database. Production
    deployments run ``moving upgrade`` (Alembic) instead.
    """
    engine = create_db_engine(url, echo=echo)
    metadata.create_all(engine)
    return engine
