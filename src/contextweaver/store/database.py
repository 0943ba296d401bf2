"""PostgreSQL storage backend.

Delegates to the async CRUD modules under ``contextweaver.db``. Driver
and SQLAlchemy failures are logged and re-raised as StoreError so the
pages only have one exception family to handle.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError

from contextweaver.db import annotations as annotation_crud
from contextweaver.db import collections as collection_crud
from contextweaver.db import connections as connection_crud
from contextweaver.db import documents as document_crud
from contextweaver.db import users as user_crud
from contextweaver.store.errors import StoreError

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterable
    from uuid import UUID

    from contextweaver.db.models import (
        Annotation,
        Collection,
        Connection,
        Document,
        User,
    )
    from contextweaver.store.inserts import (
        AnnotationInsert,
        CollectionInsert,
        ConnectionInsert,
        DocumentInsert,
    )

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _wrap_errors(operation: str) -> AsyncIterator[None]:
    try:
        yield
    except (SQLAlchemyError, OSError) as exc:
        logger.exception("Database error during %s", operation)
        msg = f"Could not {operation}"
        raise StoreError(msg) from exc


class DatabaseStore:
    """StoreProtocol implementation backed by SQLModel and asyncpg."""

    async def get_or_create_user(self, email: str, full_name: str = "") -> User:
        async with _wrap_errors("sign in"):
            return await user_crud.get_or_create_user(email, full_name)

    async def get_user_by_email(self, email: str) -> User | None:
        async with _wrap_errors("load user"):
            return await user_crud.get_user_by_email(email)

    async def list_documents(self, user_id: UUID) -> list[Document]:
        async with _wrap_errors("load documents"):
            return await document_crud.list_documents(user_id)

    async def get_document(self, document_id: UUID, user_id: UUID) -> Document | None:
        async with _wrap_errors("load document"):
            return await document_crud.get_document(document_id, user_id)

    async def create_document(self, insert: DocumentInsert) -> Document:
        async with _wrap_errors("save document"):
            return await document_crud.create_document(insert)

    async def delete_document(self, document_id: UUID, user_id: UUID) -> bool:
        async with _wrap_errors("delete document"):
            return await document_crud.delete_document(document_id, user_id)

    async def list_annotations(
        self, document_ids: Iterable[UUID], user_id: UUID
    ) -> list[Annotation]:
        async with _wrap_errors("load annotations"):
            return await annotation_crud.list_annotations(document_ids, user_id)

    async def create_annotation(self, insert: AnnotationInsert) -> Annotation:
        async with _wrap_errors("save annotation"):
            return await annotation_crud.create_annotation(insert)

    async def delete_annotation(self, annotation_id: UUID, user_id: UUID) -> bool:
        async with _wrap_errors("delete annotation"):
            return await annotation_crud.delete_annotation(annotation_id, user_id)

    async def list_connections(self, user_id: UUID) -> list[Connection]:
        async with _wrap_errors("load connections"):
            return await connection_crud.list_connections(user_id)

    async def create_connection(self, insert: ConnectionInsert) -> Connection:
        async with _wrap_errors("save connection"):
            return await connection_crud.create_connection(insert)

    async def delete_connection(self, connection_id: UUID, user_id: UUID) -> bool:
        async with _wrap_errors("delete connection"):
            return await connection_crud.delete_connection(connection_id, user_id)

    async def list_collections(self, user_id: UUID) -> list[Collection]:
        async with _wrap_errors("load collections"):
            return await collection_crud.list_collections(user_id)

    async def create_collection(self, insert: CollectionInsert) -> Collection:
        async with _wrap_errors("save collection"):
            return await collection_crud.create_collection(insert)

    async def delete_collection(self, collection_id: UUID, user_id: UUID) -> bool:
        async with _wrap_errors("delete collection"):
            return await collection_crud.delete_collection(collection_id, user_id)

    async def add_to_collection(
        self, collection_id: UUID, document_id: UUID, user_id: UUID
    ) -> bool:
        async with _wrap_errors("add document to collection"):
            return await collection_crud.add_to_collection(
                collection_id, document_id, user_id
            )

    async def remove_from_collection(
        self, collection_id: UUID, document_id: UUID, user_id: UUID
    ) -> bool:
        async with _wrap_errors("remove document from collection"):
            return await collection_crud.remove_from_collection(
                collection_id, document_id, user_id
            )

    async def list_collection_document_ids(
        self, collection_id: UUID, user_id: UUID
    ) -> set[UUID]:
        async with _wrap_errors("load collection"):
            return await collection_crud.list_collection_document_ids(
                collection_id, user_id
            )
