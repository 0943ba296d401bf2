"""Database bootstrap and schema checks.

Alembic is the only way the schema is created or changed. At startup the
application makes sure the database exists, upgrades it to head and then
verifies every model table is present before serving requests.
"""

from __future__ import annotations

import os
import re
import subprocess
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import psycopg
import psycopg.sql
from sqlalchemy import inspect
from sqlmodel import SQLModel

from contextweaver.config import get_settings

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

_DB_NAME_RE = re.compile(r"^[a-zA-Z0-9_]+$")


def _split_db_url(url: str) -> tuple[str, str, str]:
    """Split a URL into (server part, database name, query suffix)."""
    base, _, query = url.partition("?")
    server, _, db_name = base.rpartition("/")
    return server, db_name, f"?{query}" if query else ""


def ensure_database_exists(url: str | None) -> bool:
    """Create the target database if it doesn't exist.

    Connects to the ``postgres`` maintenance database with sync psycopg in
    autocommit mode (CREATE DATABASE cannot run inside a transaction).

    Returns:
        True if a new database was created, False otherwise.

    Raises:
        ValueError: If the database name contains invalid characters.
    """
    if not url or "/" not in url.partition("?")[0]:
        return False

    server, db_name, query = _split_db_url(url)
    if not db_name:
        return False
    if not _DB_NAME_RE.match(db_name):
        msg = f"Invalid database name: {db_name!r}"
        raise ValueError(msg)

    maintenance_url = f"{server}/postgres{query}".replace(
        "postgresql+asyncpg://", "postgresql://"
    )
    with psycopg.connect(maintenance_url, autocommit=True) as conn:
        row = conn.execute(
            "SELECT 1 FROM pg_database WHERE datname = %s", (db_name,)
        ).fetchone()
        if row is None:
            stmt = psycopg.sql.SQL("CREATE DATABASE {}").format(
                psycopg.sql.Identifier(db_name)
            )
            conn.execute(stmt)
            return True
    return False


def is_db_configured() -> bool:
    """True if DATABASE__URL is set and non-empty."""
    return bool(get_settings().database.url)


def run_alembic_upgrade() -> None:
    """Run Alembic migrations to upgrade schema to head.

    Raises:
        RuntimeError: If DATABASE__URL is not configured or migrations fail.
    """
    if not is_db_configured():
        msg = "DATABASE__URL not configured: cannot run migrations"
        raise RuntimeError(msg)

    ensure_database_exists(get_settings().database.url)

    # src/contextweaver/db/bootstrap.py -> project root (where alembic.ini lives)
    project_root = Path(__file__).parent.parent.parent.parent

    result = subprocess.run(
        [sys.executable, "-m", "alembic", "upgrade", "head"],
        capture_output=True,
        encoding="utf-8",
        check=False,
        cwd=project_root,
        env=dict(os.environ),
    )
    if result.returncode != 0:
        raise RuntimeError(
            f"Alembic migrations failed:\n"
            f"stdout: {result.stdout}\n"
            f"stderr: {result.stderr}"
        )


def get_expected_tables() -> set[str]:
    """Table names registered by the SQLModel models."""
    import contextweaver.db.models  # noqa: F401, PLC0415

    return set(SQLModel.metadata.tables.keys())


async def verify_schema(engine: AsyncEngine | None) -> None:
    """Fail fast if any model table is missing from the database.

    Raises:
        RuntimeError: If engine is None or tables are missing.
    """
    if engine is None:
        raise RuntimeError("Database engine is not initialized")

    expected_tables = get_expected_tables()
    async with engine.begin() as connection:
        existing_tables = await connection.run_sync(
            lambda sync_conn: set(inspect(sync_conn).get_table_names())
        )

    missing_tables = expected_tables - existing_tables
    if missing_tables:
        masked_url = mask_password(get_settings().database.url or "<unset>")
        missing = ", ".join(sorted(missing_tables))
        raise RuntimeError(
            f"Database schema is missing required tables: {missing}. "
            f"DATABASE__URL={masked_url}. "
            f"Run 'alembic upgrade head' to create tables."
        )


def mask_password(url: str) -> str:
    """Mask the password in a database URL for safe logging."""
    protocol, sep, rest = url.partition("://")
    if not sep or "@" not in rest:
        return url
    creds, host_part = rest.rsplit("@", 1)
    if ":" not in creds:
        return url
    user = creds.split(":", 1)[0]
    return f"{protocol}://{user}:***@{host_part}"
