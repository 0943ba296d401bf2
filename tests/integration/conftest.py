"""Integration test configuration.

Database tests point DATABASE__URL at DEV__TEST_DATABASE_URL, migrate the
schema once per session and open a fresh engine for every test. Rows are
isolated by random user emails; nothing is truncated.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING
from uuid import uuid4

import pytest

from contextweaver.config import get_settings
from contextweaver.db.bootstrap import run_alembic_upgrade
from contextweaver.db.engine import close_db, get_engine, init_db

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Generator

    from contextweaver.db.models import User
    from contextweaver.store.database import DatabaseStore


@pytest.fixture(scope="session")
def db_schema_guard() -> Generator[None]:
    """Point the app at the test database and migrate it to head."""
    test_url = get_settings().dev.test_database_url
    if not test_url:
        pytest.fail("DEV__TEST_DATABASE_URL is required for database tests")

    os.environ["DATABASE__URL"] = test_url
    get_settings.cache_clear()

    try:
        run_alembic_upgrade()
    except RuntimeError as e:
        pytest.fail(str(e))

    yield


@pytest.fixture
async def db_engine(db_schema_guard: None) -> AsyncIterator[None]:  # noqa: ARG001
    """Open the engine in this test's event loop and dispose it afterwards."""
    await init_db()
    assert get_engine() is not None, "Engine should be initialized after init_db()"

    yield

    await close_db()


@pytest.fixture
def db_store(db_engine: None) -> DatabaseStore:  # noqa: ARG001
    from contextweaver.store.database import DatabaseStore

    return DatabaseStore()


@pytest.fixture
async def db_user(db_store: DatabaseStore) -> User:
    return await db_store.get_or_create_user(f"reader-{uuid4()}@example.com", "Reader")


@pytest.fixture
async def db_other_user(db_store: DatabaseStore) -> User:
    return await db_store.get_or_create_user(f"other-{uuid4()}@example.com", "Other")
