"""CRUD operations for Collection and CollectionDocument."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlmodel import col, select

from contextweaver.db.engine import get_session
from contextweaver.db.models import Collection, CollectionDocument, Document
from contextweaver.store.errors import NotFoundError
from contextweaver.store.validation import build_collection

if TYPE_CHECKING:
    from uuid import UUID

    from sqlmodel.ext.asyncio.session import AsyncSession

    from contextweaver.store.inserts import CollectionInsert


async def list_collections(user_id: UUID) -> list[Collection]:
    """List a user's collections by name."""
    async with get_session() as session:
        result = await session.exec(
            select(Collection)
            .where(Collection.user_id == user_id)
            .order_by(col(Collection.name))
        )
        return list(result.all())


async def create_collection(insert: CollectionInsert) -> Collection:
    """Create an empty collection."""
    collection = build_collection(insert)
    async with get_session() as session:
        session.add(collection)
        await session.flush()
        await session.refresh(collection)
        return collection


async def delete_collection(collection_id: UUID, user_id: UUID) -> bool:
    """Delete a collection; memberships cascade. False if not found."""
    async with get_session() as session:
        collection = await session.get(Collection, collection_id)
        if collection is None or collection.user_id != user_id:
            return False
        await session.delete(collection)
        return True


async def _require_owned(
    session: AsyncSession, collection_id: UUID, document_id: UUID, user_id: UUID
) -> None:
    collection = await session.get(Collection, collection_id)
    if collection is None or collection.user_id != user_id:
        msg = f"Collection {collection_id} not found"
        raise NotFoundError(msg)
    document = await session.get(Document, document_id)
    if document is None or document.user_id != user_id:
        msg = f"Document {document_id} not found"
        raise NotFoundError(msg)


async def _find_membership(
    session: AsyncSession, collection_id: UUID, document_id: UUID
) -> CollectionDocument | None:
    result = await session.exec(
        select(CollectionDocument)
        .where(CollectionDocument.collection_id == collection_id)
        .where(CollectionDocument.document_id == document_id)
    )
    return result.first()


async def add_to_collection(
    collection_id: UUID, document_id: UUID, user_id: UUID
) -> bool:
    """Add a document to a collection.

    Returns:
        True if added, False if it was already a member.

    Raises:
        NotFoundError: Collection or document missing for this user.
    """
    async with get_session() as session:
        await _require_owned(session, collection_id, document_id, user_id)
        if await _find_membership(session, collection_id, document_id):
            return False
        session.add(
            CollectionDocument(collection_id=collection_id, document_id=document_id)
        )
        return True


async def remove_from_collection(
    collection_id: UUID, document_id: UUID, user_id: UUID
) -> bool:
    """Remove a document from a collection. False if it was not a member."""
    async with get_session() as session:
        await _require_owned(session, collection_id, document_id, user_id)
        membership = await _find_membership(session, collection_id, document_id)
        if membership is None:
            return False
        await session.delete(membership)
        return True


async def list_collection_document_ids(
    collection_id: UUID, user_id: UUID
) -> set[UUID]:
    """Ids of the documents in one of the user's collections."""
    async with get_session() as session:
        collection = await session.get(Collection, collection_id)
        if collection is None or collection.user_id != user_id:
            return set()
        result = await session.exec(
            select(CollectionDocument.document_id).where(
                CollectionDocument.collection_id == collection_id
            )
        )
        return set(result.all())
