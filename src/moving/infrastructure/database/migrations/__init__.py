"""Schema migrations for the order and review tables.

Configured in code, so no ``alembic.ini`` ships with the package; the
revision scripts live in ``versions/`` beside this module.
"""

from __future__ import annotations

from pathlib import Path

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from sqlalchemy.engine import Connection

from moving.infrastructure.database.engine import create_db_engine

HEAD = "head"


def build_config(db_url: str, *, connection: Connection | None = None) -> Config:
    """Alembic config for *db_url*, optionally bound to an open *connection*."""
    cfg = Config()
    cfg.set_main_option("script_location", str(Path(__file__).parent))
    # ConfigParser interpolation treats '%' specially (URL-encoded passwords).
    cfg.set_main_option("sqlalchemy.url", db_url.replace("%", "%%"))
    if connection is not None:
        cfg.attributes["connection"] = connection
    return cfg


def upgrade_head(db_url: str) -> None:
    """Apply every pending migration to the database at *db_url*."""
    command.upgrade(build_config(db_url), HEAD)


def current_revision(db_url: str) -> str | None:
    """Revision the database is stamped at; None for an unmigrated database."""
    engine = create_db_engine(db_url)
    try:
        with engine.connect() as conn:
            return MigrationContext.configure(conn).get_current_revision()
    finally:
        engine.dispose()
