"""Tests that the SQLModel metadata matches the migrated schema."""

from __future__ import annotations

import re
from pathlib import Path

from sqlmodel import SQLModel

from contextweaver.db.models import Annotation, Connection, Document

VERSIONS_DIR = Path(__file__).parents[2] / "alembic" / "versions"


def _model_index_names() -> set[str]:
    return {
        index.name
        for table in SQLModel.metadata.tables.values()
        for index in table.indexes
        if index.name
    }


def test_foreign_key_lookups_are_indexed() -> None:
    assert {i.name for i in Document.__table__.indexes} == {"ix_document_user_id"}
    assert {i.name for i in Annotation.__table__.indexes} == {
        "ix_annotation_document_id"
    }
    assert {i.name for i in Connection.__table__.indexes} == {"ix_connection_user_id"}


def test_every_migrated_index_is_declared() -> None:
    """Autogenerate would drop indexes the models do not declare."""
    migrated = set()
    for path in VERSIONS_DIR.glob("*.py"):
        migrated |= set(
            re.findall(r'op\.create_index\(\s*"(\w+)"', path.read_text("utf-8"))
        )

    assert migrated
    assert migrated <= _model_index_names()
