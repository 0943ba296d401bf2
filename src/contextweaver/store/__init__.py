"""Storage for documents, annotations, connections and collections.

Usage:
    from contextweaver.store import AnnotationInsert, get_store

    store = get_store()
    annotation = await store.create_annotation(
        AnnotationInsert(
            user_id=user.id,
            document_id=doc.id,
            highlighted_text="quick",
            position_start=4,
            position_end=9,
        )
    )
"""

from __future__ import annotations

from contextweaver.store.errors import (
    InvalidAnnotationError,
    InvalidCollectionError,
    InvalidConnectionError,
    InvalidDocumentError,
    NotFoundError,
    StoreError,
)
from contextweaver.store.factory import clear_store_cache, get_store
from contextweaver.store.inserts import (
    AnnotationInsert,
    CollectionInsert,
    ConnectionInsert,
    DocumentInsert,
)
from contextweaver.store.protocol import StoreProtocol

__all__ = [
    "AnnotationInsert",
    "CollectionInsert",
    "ConnectionInsert",
    "DocumentInsert",
    "InvalidAnnotationError",
    "InvalidCollectionError",
    "InvalidConnectionError",
    "InvalidDocumentError",
    "NotFoundError",
    "StoreError",
    "StoreProtocol",
    "clear_store_cache",
    "get_store",
]
