"""Tests for engine setup that need no running database."""

from __future__ import annotations

import logging
import os

import pytest
from sqlalchemy.ext.asyncio import create_async_engine

from contextweaver.config import Settings
from contextweaver.db import engine as engine_module


@pytest.fixture
def no_database(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in list(os.environ):
        if key.startswith("DATABASE__"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr(
        engine_module,
        "get_settings",
        lambda: Settings(_env_file=None),  # type: ignore[call-arg]
    )


@pytest.mark.usefixtures("no_database")
def test_database_url_required() -> None:
    with pytest.raises(ValueError, match="DATABASE__URL"):
        engine_module.get_database_url()


async def test_close_without_engine_is_a_no_op() -> None:
    await engine_module.close_db()
    assert engine_module.get_engine() is None


async def test_dropped_connection_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    engine = create_async_engine("postgresql+asyncpg://u:p@localhost:1/none")
    engine_module._log_dropped_connections(engine)

    with caplog.at_level(logging.WARNING, logger="contextweaver.db.engine"):
        engine.sync_engine.pool.dispatch.invalidate(None, None, ConnectionError())

    assert "Dropped pooled connection (ConnectionError)" in caplog.text
    await engine.dispose()
