"""CRUD operations for Document.

All functions are scoped to the owning user.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlmodel import col, select

from contextweaver.db.engine import get_session
from contextweaver.db.models import Document
from contextweaver.store.validation import build_document

if TYPE_CHECKING:
    from uuid import UUID

    from contextweaver.store.inserts import DocumentInsert


async def list_documents(user_id: UUID) -> list[Document]:
    """List a user's documents, newest first."""
    async with get_session() as session:
        result = await session.exec(
            select(Document)
            .where(Document.user_id == user_id)
            .order_by(col(Document.created_at).desc())
        )
        return list(result.all())


async def get_document(document_id: UUID, user_id: UUID) -> Document | None:
    """Get one of the user's documents, or None."""
    async with get_session() as session:
        doc = await session.get(Document, document_id)
        if doc is None or doc.user_id != user_id:
            return None
        return doc


async def create_document(insert: DocumentInsert) -> Document:
    """Create a document.

    Raises:
        InvalidDocumentError: Blank title or unsupported file type.
    """
    doc = build_document(insert)
    async with get_session() as session:
        session.add(doc)
        await session.flush()
        await session.refresh(doc)
        return doc


async def delete_document(document_id: UUID, user_id: UUID) -> bool:
    """Delete a document.

    Annotations, connections and collection memberships go with it via
    CASCADE foreign keys.

    Returns:
        True if deleted, False if not found for this user.
    """
    async with get_session() as session:
        doc = await session.get(Document, document_id)
        if doc is None or doc.user_id != user_id:
            return False
        await session.delete(doc)
        return True
