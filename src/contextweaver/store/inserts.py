"""Insert payloads accepted by the storage backends."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID


@dataclass(frozen=True)
class DocumentInsert:
    """A new document. ``file_size`` is derived from the content."""

    user_id: UUID
    title: str
    content: str = ""
    file_type: str = "txt"
    tags: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class AnnotationInsert:
    """A new annotation, usually built from a translated selection."""

    user_id: UUID
    document_id: UUID
    highlighted_text: str
    position_start: int
    position_end: int
    content: str = ""
    color: str = "yellow"


@dataclass(frozen=True)
class ConnectionInsert:
    """A new connection between two of the user's documents."""

    user_id: UUID
    source_document_id: UUID
    target_document_id: UUID
    connection_type: str = "related"
    notes: str = ""
    source_annotation_id: UUID | None = None
    target_annotation_id: UUID | None = None


@dataclass(frozen=True)
class CollectionInsert:
    """A new, empty collection."""

    user_id: UUID
    name: str
    description: str = ""
