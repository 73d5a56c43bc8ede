"""Utilities to run Alembic migrations programmatically."""

from __future__ import annotations

from pathlib import Path

from alembic import command
from alembic.config import Config

BOARD_SCHEMA_HEAD = "20261017_0001"


def find_migrations_root(storage_dir: Path | None = None) -> Path:
    """Directory holding ``alembic.ini`` and ``alembic/``.

    Installed wheels carry them in ``task_board/migrations``; a source checkout
    keeps them at the repository root.
    """

    storage_dir = storage_dir or Path(__file__).resolve().parent
    bundled = storage_dir.parent / "migrations"
    if (bundled / "alembic.ini").is_file():
        return bundled
    return storage_dir.parents[2]


def upgrade_head(db_path: Path) -> None:
    """Apply Alembic migrations up to head for the given SQLite database."""

    root_dir = find_migrations_root()
    alembic_ini = root_dir / "alembic.ini"
    alembic_dir = root_dir / "alembic"

    config = Config(str(alembic_ini))
    config.attributes["configure_logger"] = False
    config.set_main_option("script_location", str(alembic_dir))
    config.set_main_option("sqlalchemy.url", f"sqlite:///{db_path}")
    command.upgrade(config, "head")
