"""Database module for Context Weaver.

Provides async SQLModel operations with PostgreSQL. The per-entity CRUD
modules (``users``, ``documents``, ``annotations``, ``connections``,
``collections``) are imported directly by the database store.
"""

from __future__ import annotations

from contextweaver.db.bootstrap import (
    ensure_database_exists,
    get_expected_tables,
    is_db_configured,
    run_alembic_upgrade,
    verify_schema,
)
from contextweaver.db.engine import close_db, get_engine, get_session, init_db
from contextweaver.db.models import (
    Annotation,
    Collection,
    CollectionDocument,
    Connection,
    Document,
    User,
)

__all__ = [
    "Annotation",
    "Collection",
    "CollectionDocument",
    "Connection",
    "Document",
    "User",
    "close_db",
    "ensure_database_exists",
    "get_engine",
    "get_expected_tables",
    "get_session",
    "init_db",
    "is_db_configured",
    "run_alembic_upgrade",
    "verify_schema",
]
