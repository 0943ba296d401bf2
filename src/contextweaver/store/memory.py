"""In-process storage backend.

Implements StoreProtocol with plain dictionaries so the app and its tests
run without PostgreSQL. Validation is shared with the database backend;
the referential policy of the schema (CASCADE on documents and
collections, SET NULL on connection anchors) is applied by hand.

Data lives only as long as the process.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from contextweaver.db.models import (
    Annotation,
    Collection,
    CollectionDocument,
    Connection,
    Document,
    User,
)
from contextweaver.store.errors import NotFoundError
from contextweaver.store.validation import (
    build_annotation,
    build_collection,
    build_connection,
    build_document,
)

if TYPE_CHECKING:
    from collections.abc import Iterable
    from uuid import UUID

    from contextweaver.store.inserts import (
        AnnotationInsert,
        CollectionInsert,
        ConnectionInsert,
        DocumentInsert,
    )

logger = logging.getLogger(__name__)


class MemoryStore:
    """Dictionary-backed implementation of StoreProtocol.

    Tables are keyed by id and keep insertion order, which stands in for
    ``created_at`` ordering.
    """

    def __init__(self) -> None:
        self._users: dict[UUID, User] = {}
        self._documents: dict[UUID, Document] = {}
        self._annotations: dict[UUID, Annotation] = {}
        self._connections: dict[UUID, Connection] = {}
        self._collections: dict[UUID, Collection] = {}
        self._memberships: dict[UUID, CollectionDocument] = {}

    # -- users ---------------------------------------------------------

    async def get_or_create_user(self, email: str, full_name: str = "") -> User:
        email = email.strip().lower()
        for user in self._users.values():
            if user.email == email:
                if full_name.strip() and not user.full_name:
                    user.full_name = full_name.strip()
                return user
        user = User(email=email, full_name=full_name.strip())
        self._users[user.id] = user
        logger.debug("Created in-memory user %s", email)
        return user

    async def get_user_by_email(self, email: str) -> User | None:
        email = email.strip().lower()
        return next((u for u in self._users.values() if u.email == email), None)

    # -- documents -----------------------------------------------------

    def _owned_document(self, document_id: UUID, user_id: UUID) -> Document | None:
        doc = self._documents.get(document_id)
        if doc is None or doc.user_id != user_id:
            return None
        return doc

    async def list_documents(self, user_id: UUID) -> list[Document]:
        return [d for d in reversed(self._documents.values()) if d.user_id == user_id]

    async def get_document(self, document_id: UUID, user_id: UUID) -> Document | None:
        return self._owned_document(document_id, user_id)

    async def create_document(self, insert: DocumentInsert) -> Document:
        doc = build_document(insert)
        self._documents[doc.id] = doc
        return doc

    async def delete_document(self, document_id: UUID, user_id: UUID) -> bool:
        if self._owned_document(document_id, user_id) is None:
            return False
        del self._documents[document_id]

        for conn_id in [
            c.id
            for c in self._connections.values()
            if document_id in (c.source_document_id, c.target_document_id)
        ]:
            del self._connections[conn_id]
        for ann_id in [
            a.id for a in self._annotations.values() if a.document_id == document_id
        ]:
            self._drop_annotation(ann_id)
        for mem_id in [
            m.id for m in self._memberships.values() if m.document_id == document_id
        ]:
            del self._memberships[mem_id]
        return True

    # -- annotations ---------------------------------------------------

    async def list_annotations(
        self, document_ids: Iterable[UUID], user_id: UUID
    ) -> list[Annotation]:
        ids = set(document_ids)
        return [
            a
            for a in self._annotations.values()
            if a.document_id in ids and a.user_id == user_id
        ]

    async def create_annotation(self, insert: AnnotationInsert) -> Annotation:
        annotation = build_annotation(insert, self._documents.get(insert.document_id))
        self._annotations[annotation.id] = annotation
        return annotation

    def _drop_annotation(self, annotation_id: UUID) -> None:
        del self._annotations[annotation_id]
        for conn in self._connections.values():
            if conn.source_annotation_id == annotation_id:
                conn.source_annotation_id = None
            if conn.target_annotation_id == annotation_id:
                conn.target_annotation_id = None

    async def delete_annotation(self, annotation_id: UUID, user_id: UUID) -> bool:
        ann = self._annotations.get(annotation_id)
        if ann is None or ann.user_id != user_id:
            return False
        self._drop_annotation(annotation_id)
        return True

    # -- connections ---------------------------------------------------

    async def list_connections(self, user_id: UUID) -> list[Connection]:
        return [
            c for c in reversed(self._connections.values()) if c.user_id == user_id
        ]

    async def create_connection(self, insert: ConnectionInsert) -> Connection:
        connection = build_connection(
            insert,
            self._documents.get(insert.source_document_id),
            self._documents.get(insert.target_document_id),
            self._annotations.get(insert.source_annotation_id)
            if insert.source_annotation_id
            else None,
            self._annotations.get(insert.target_annotation_id)
            if insert.target_annotation_id
            else None,
        )
        self._connections[connection.id] = connection
        return connection

    async def delete_connection(self, connection_id: UUID, user_id: UUID) -> bool:
        conn = self._connections.get(connection_id)
        if conn is None or conn.user_id != user_id:
            return False
        del self._connections[connection_id]
        return True

    # -- collections ---------------------------------------------------

    def _require_owned(
        self, collection_id: UUID, document_id: UUID, user_id: UUID
    ) -> None:
        collection = self._collections.get(collection_id)
        if collection is None or collection.user_id != user_id:
            msg = f"Collection {collection_id} not found"
            raise NotFoundError(msg)
        if self._owned_document(document_id, user_id) is None:
            msg = f"Document {document_id} not found"
            raise NotFoundError(msg)

    def _find_membership(
        self, collection_id: UUID, document_id: UUID
    ) -> CollectionDocument | None:
        for m in self._memberships.values():
            if m.collection_id == collection_id and m.document_id == document_id:
                return m
        return None

    async def list_collections(self, user_id: UUID) -> list[Collection]:
        return sorted(
            (c for c in self._collections.values() if c.user_id == user_id),
            key=lambda c: c.name,
        )

    async def create_collection(self, insert: CollectionInsert) -> Collection:
        collection = build_collection(insert)
        self._collections[collection.id] = collection
        return collection

    async def delete_collection(self, collection_id: UUID, user_id: UUID) -> bool:
        collection = self._collections.get(collection_id)
        if collection is None or collection.user_id != user_id:
            return False
        del self._collections[collection_id]
        for mem_id in [
            m.id
            for m in self._memberships.values()
            if m.collection_id == collection_id
        ]:
            del self._memberships[mem_id]
        return True

    async def add_to_collection(
        self, collection_id: UUID, document_id: UUID, user_id: UUID
    ) -> bool:
        self._require_owned(collection_id, document_id, user_id)
        if self._find_membership(collection_id, document_id) is not None:
            return False
        membership = CollectionDocument(
            collection_id=collection_id, document_id=document_id
        )
        self._memberships[membership.id] = membership
        return True

    async def remove_from_collection(
        self, collection_id: UUID, document_id: UUID, user_id: UUID
    ) -> bool:
        self._require_owned(collection_id, document_id, user_id)
        membership = self._find_membership(collection_id, document_id)
        if membership is None:
            return False
        del self._memberships[membership.id]
        return True

    async def list_collection_document_ids(
        self, collection_id: UUID, user_id: UUID
    ) -> set[UUID]:
        collection = self._collections.get(collection_id)
        if collection is None or collection.user_id != user_id:
            return set()
        return {
            m.document_id
            for m in self._memberships.values()
            if m.collection_id == collection_id
        }
