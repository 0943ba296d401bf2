"""Creation-time checks shared by every storage backend.

Each ``build_*`` function validates an insert payload against the rows it
references and returns the model instance ready to persist. Annotation
offsets are checked here and only here; later reads treat them as
best-effort coordinates.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from contextweaver.db.models import Annotation, Collection, Connection, Document
from contextweaver.documents import FILE_TYPES, normalise_newlines, parse_tags
from contextweaver.highlights.colors import CONNECTION_TYPES, parse_highlight_color
from contextweaver.store.errors import (
    InvalidAnnotationError,
    InvalidCollectionError,
    InvalidConnectionError,
    InvalidDocumentError,
    NotFoundError,
)

if TYPE_CHECKING:
    from contextweaver.store.inserts import (
        AnnotationInsert,
        CollectionInsert,
        ConnectionInsert,
        DocumentInsert,
    )


def build_document(insert: DocumentInsert) -> Document:
    """Validate a document insert and normalise its content and tags."""
    title = insert.title.strip()
    if not title:
        msg = "Document title is required"
        raise InvalidDocumentError(msg)

    file_type = insert.file_type.strip().lower()
    if file_type not in FILE_TYPES:
        msg = f"Unsupported file type: {insert.file_type!r}"
        raise InvalidDocumentError(msg)

    content = normalise_newlines(insert.content)
    return Document(
        user_id=insert.user_id,
        title=title,
        content=content,
        file_type=file_type,
        file_size=len(content),
        tags=parse_tags(insert.tags),
    )


def build_annotation(insert: AnnotationInsert, document: Document | None) -> Annotation:
    """Validate an annotation against the document it anchors to.

    Raises:
        NotFoundError: The document is missing or owned by someone else.
        InvalidAnnotationError: Offsets out of range, text mismatch, blank
            selection or unknown colour.
    """
    if document is None or document.user_id != insert.user_id:
        msg = f"Document {insert.document_id} not found"
        raise NotFoundError(msg)

    start, end = insert.position_start, insert.position_end
    length = len(document.content)
    if not 0 <= start <= end <= length:
        msg = f"Range [{start}, {end}) is outside the document (length {length})"
        raise InvalidAnnotationError(msg)

    if insert.highlighted_text != document.content[start:end]:
        msg = "Highlighted text does not match the document at the given range"
        raise InvalidAnnotationError(msg)

    if not insert.highlighted_text.strip():
        msg = "Cannot annotate an empty selection"
        raise InvalidAnnotationError(msg)

    color = parse_highlight_color(insert.color)
    if color is None:
        msg = f"Unknown highlight colour: {insert.color!r}"
        raise InvalidAnnotationError(msg)

    return Annotation(
        user_id=insert.user_id,
        document_id=insert.document_id,
        content=insert.content,
        highlighted_text=insert.highlighted_text,
        position_start=start,
        position_end=end,
        color=color.value,
    )


def build_connection(
    insert: ConnectionInsert,
    source: Document | None,
    target: Document | None,
    source_annotation: Annotation | None = None,
    target_annotation: Annotation | None = None,
) -> Connection:
    """Validate a connection against its documents and optional anchors.

    The caller passes the annotation rows it found for the insert's
    annotation ids (None when the id was None or not found).
    """
    if insert.source_document_id == insert.target_document_id:
        msg = "Please select two different documents"
        raise InvalidConnectionError(msg)

    for doc_id, doc in (
        (insert.source_document_id, source),
        (insert.target_document_id, target),
    ):
        if doc is None or doc.user_id != insert.user_id:
            msg = f"Document {doc_id} not found"
            raise NotFoundError(msg)

    if insert.connection_type not in CONNECTION_TYPES:
        msg = f"Unknown connection type: {insert.connection_type!r}"
        raise InvalidConnectionError(msg)

    for ann_id, ann, doc_id in (
        (insert.source_annotation_id, source_annotation, insert.source_document_id),
        (insert.target_annotation_id, target_annotation, insert.target_document_id),
    ):
        if ann_id is None:
            continue
        if ann is None or ann.user_id != insert.user_id:
            msg = f"Annotation {ann_id} not found"
            raise NotFoundError(msg)
        if ann.document_id != doc_id:
            msg = f"Annotation {ann_id} does not belong to document {doc_id}"
            raise InvalidConnectionError(msg)

    return Connection(
        user_id=insert.user_id,
        source_document_id=insert.source_document_id,
        target_document_id=insert.target_document_id,
        source_annotation_id=insert.source_annotation_id,
        target_annotation_id=insert.target_annotation_id,
        connection_type=insert.connection_type,
        notes=insert.notes,
    )


def build_collection(insert: CollectionInsert) -> Collection:
    """Validate a collection insert."""
    name = insert.name.strip()
    if not name:
        msg = "Collection name is required"
        raise InvalidCollectionError(msg)
    return Collection(
        user_id=insert.user_id, name=name, description=insert.description
    )
