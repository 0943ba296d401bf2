"""CRUD operations for Annotation.

Provides async database functions for the document viewer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlmodel import col, select

from contextweaver.db.engine import get_session
from contextweaver.db.models import Annotation, Document
from contextweaver.store.validation import build_annotation

if TYPE_CHECKING:
    from collections.abc import Iterable
    from uuid import UUID

    from contextweaver.store.inserts import AnnotationInsert


async def list_annotations(
    document_ids: Iterable[UUID], user_id: UUID
) -> list[Annotation]:
    """Get the user's annotations on the given documents.

    Ordered by creation time, which is also the tie-break order the
    renderer uses for equal start offsets.
    """
    ids = list(document_ids)
    if not ids:
        return []
    async with get_session() as session:
        result = await session.exec(
            select(Annotation)
            .where(col(Annotation.document_id).in_(ids))
            .where(Annotation.user_id == user_id)
            .order_by(col(Annotation.created_at))
        )
        return list(result.all())


async def create_annotation(insert: AnnotationInsert) -> Annotation:
    """Create an annotation after checking it against its document.

    Raises:
        NotFoundError: The document does not exist for this user.
        InvalidAnnotationError: The range or text does not match the document.
    """
    async with get_session() as session:
        document = await session.get(Document, insert.document_id)
        annotation = build_annotation(insert, document)
        session.add(annotation)
        await session.flush()
        await session.refresh(annotation)
        return annotation


async def delete_annotation(annotation_id: UUID, user_id: UUID) -> bool:
    """Delete an annotation.

    Connections anchored to it keep existing with the reference set to
    NULL by the foreign key.

    Returns:
        True if deleted, False if not found for this user.
    """
    async with get_session() as session:
        ann = await session.get(Annotation, annotation_id)
        if ann is None or ann.user_id != user_id:
            return False
        await session.delete(ann)
        return True
