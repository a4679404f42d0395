"""Alembic runtime for ``moving upgrade``.

Online runs reuse a connection handed over through
``config.attributes["connection"]`` when the caller has one; otherwise a
throwaway engine is built the same way the service builds its own, so
SQLite gets the same pragmas. SQLite cannot ``ALTER`` most things in
place, hence batch mode there.
"""

from __future__ import annotations

from alembic import context
from sqlalchemy.engine import Connection, make_url

from moving.infrastructure.database.engine import create_db_engine
from moving.infrastructure.database.schema import metadata

config = context.config


def _url() -> str:
    url = config.get_main_option("sqlalchemy.url")
    if not url:
        raise RuntimeError("sqlalchemy.url is not set on the migration config")
    return url


def _configure(**kwargs: object) -> None:
    is_sqlite = make_url(_url()).get_backend_name() == "sqlite"
    context.configure(
        target_metadata=metadata,
        compare_type=True,
        render_as_batch=is_sqlite,
        **kwargs,
    )


def _migrate(connection: Connection) -> None:
    _configure(connection=connection)
    with context.begin_transaction():
        context.run_migrations()


if context.is_offline_mode():
    _configure(url=_url(), literal_binds=True, dialect_opts={"paramstyle": "named"})
    with context.begin_transaction():
        context.run_migrations()
else:
    shared = config.attributes.get("connection")
    if shared is not None:
        _migrate(shared)
    else:
        engine = create_db_engine(_url())
        try:
            with engine.connect() as connection:
                _migrate(connection)
        finally:
            engine.dispose()
