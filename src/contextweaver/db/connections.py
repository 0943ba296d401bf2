"""CRUD operations for Connection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlmodel import col, select

from contextweaver.db.engine import get_session
from contextweaver.db.models import Annotation, Connection, Document
from contextweaver.store.validation import build_connection

if TYPE_CHECKING:
    from uuid import UUID

    from contextweaver.store.inserts import ConnectionInsert


async def list_connections(user_id: UUID) -> list[Connection]:
    """List a user's connections, newest first."""
    async with get_session() as session:
        result = await session.exec(
            select(Connection)
            .where(Connection.user_id == user_id)
            .order_by(col(Connection.created_at).desc())
        )
        return list(result.all())


async def create_connection(insert: ConnectionInsert) -> Connection:
    """Create a connection between two of the user's documents.

    Raises:
        NotFoundError: A document or anchoring annotation is missing.
        InvalidConnectionError: Same document twice, unknown type, or an
            annotation that is not on its document.
    """
    async with get_session() as session:
        source = await session.get(Document, insert.source_document_id)
        target = await session.get(Document, insert.target_document_id)
        source_ann = (
            await session.get(Annotation, insert.source_annotation_id)
            if insert.source_annotation_id
            else None
        )
        target_ann = (
            await session.get(Annotation, insert.target_annotation_id)
            if insert.target_annotation_id
            else None
        )
        connection = build_connection(insert, source, target, source_ann, target_ann)
        session.add(connection)
        await session.flush()
        await session.refresh(connection)
        return connection


async def delete_connection(connection_id: UUID, user_id: UUID) -> bool:
    """Delete a connection. Returns False if not found for this user."""
    async with get_session() as session:
        connection = await session.get(Connection, connection_id)
        if connection is None or connection.user_id != user_id:
            return False
        await session.delete(connection)
        return True
