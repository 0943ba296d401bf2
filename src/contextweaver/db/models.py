"""SQLModel database models for Context Weaver.

These models define the schema for users, documents, annotations,
connections and collections. Every user-owned row carries ``user_id`` and
all queries filter on it.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.dialects.postgresql import ARRAY
from sqlmodel import Field, SQLModel


def _utcnow() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(UTC)


def _timestamptz_column() -> Any:
    """Create a TIMESTAMP WITH TIME ZONE column for PostgreSQL."""
    return Column(DateTime(timezone=True), nullable=False)


def _updated_at_column() -> Any:
    """TIMESTAMPTZ column refreshed by SQLAlchemy on every UPDATE."""
    return Column(DateTime(timezone=True), nullable=False, onupdate=_utcnow)


def _cascade_fk_column(target: str) -> Any:
    """Create a UUID foreign key column with CASCADE DELETE."""
    return Column(Uuid(), ForeignKey(target, ondelete="CASCADE"), nullable=False)


def _set_null_fk_column(target: str) -> Any:
    """Create a UUID foreign key column with SET NULL on delete."""
    return Column(Uuid(), ForeignKey(target, ondelete="SET NULL"), nullable=True)


class User(SQLModel, table=True):
    """A signed-in user.

    Attributes:
        id: Primary key UUID, auto-generated.
        email: Unique, lower-cased email address.
        full_name: Display name, may be empty.
        created_at: Timestamp when user was created.
        updated_at: Timestamp of last profile change.
    """

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    full_name: str = Field(default="", max_length=200)
    created_at: datetime = Field(
        default_factory=_utcnow, sa_column=_timestamptz_column()
    )
    updated_at: datetime = Field(
        default_factory=_utcnow, sa_column=_updated_at_column()
    )


class Document(SQLModel, table=True):
    """An uploaded plain-text document.

    ``content`` is the coordinate space for every annotation offset. Line
    endings are normalised to ``\\n`` on upload.

    Attributes:
        id: Primary key UUID, auto-generated.
        user_id: Owner (CASCADE DELETE).
        title: Document title.
        content: Full text content.
        file_type: "txt" or "md".
        file_size: Length of content in characters.
        tags: Free-form tags for filtering.
        created_at: Upload timestamp.
        updated_at: Last modification timestamp.
    """

    __table_args__ = (Index("ix_document_user_id", "user_id"),)

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(sa_column=_cascade_fk_column("user.id"))
    title: str = Field(max_length=500)
    content: str = Field(default="", sa_column=Column(Text(), nullable=False))
    file_type: str = Field(default="txt", max_length=20)
    file_size: int = Field(default=0)
    tags: list[str] = Field(
        default_factory=list,
        sa_column=Column(ARRAY(String()), nullable=False, server_default="{}"),
    )
    created_at: datetime = Field(
        default_factory=_utcnow, sa_column=_timestamptz_column()
    )
    updated_at: datetime = Field(
        default_factory=_utcnow, sa_column=_updated_at_column()
    )


class Annotation(SQLModel, table=True):
    """A highlighted passage with an optional note.

    Offsets are half-open ``[position_start, position_end)`` character
    positions into ``Document.content``. ``highlighted_text`` is checked
    against the document only when the annotation is created.

    Attributes:
        id: Primary key UUID, auto-generated.
        user_id: Author (CASCADE DELETE).
        document_id: Annotated document (CASCADE DELETE).
        content: The user's note (may be empty).
        highlighted_text: The passage at creation time.
        position_start: Start offset (inclusive).
        position_end: End offset (exclusive).
        color: Highlight colour name (see HighlightColor).
        created_at: Creation timestamp.
        updated_at: Last modification timestamp.
    """

    __table_args__ = (
        CheckConstraint(
            "position_start >= 0 AND position_end >= position_start",
            name="ck_annotation_position_range",
        ),
        Index("ix_annotation_document_id", "document_id"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(sa_column=_cascade_fk_column("user.id"))
    document_id: UUID = Field(sa_column=_cascade_fk_column("document.id"))
    content: str = Field(default="", sa_column=Column(Text(), nullable=False))
    highlighted_text: str = Field(sa_column=Column(Text(), nullable=False))
    position_start: int
    position_end: int
    color: str = Field(default="yellow", max_length=20)
    created_at: datetime = Field(
        default_factory=_utcnow, sa_column=_timestamptz_column()
    )
    updated_at: datetime = Field(
        default_factory=_utcnow, sa_column=_updated_at_column()
    )


class Connection(SQLModel, table=True):
    """A typed, directed relationship between two documents.

    Deleting either document removes the connection; deleting an anchoring
    annotation only clears the reference.

    Attributes:
        id: Primary key UUID, auto-generated.
        user_id: Owner (CASCADE DELETE).
        source_document_id: Source document (CASCADE DELETE).
        target_document_id: Target document (CASCADE DELETE).
        source_annotation_id: Optional anchor in the source (SET NULL).
        target_annotation_id: Optional anchor in the target (SET NULL).
        connection_type: related, supports, contradicts, expands or cites.
        notes: Free-text notes.
        created_at: Creation timestamp.
        updated_at: Last modification timestamp.
    """

    __table_args__ = (
        CheckConstraint(
            "source_document_id <> target_document_id",
            name="ck_connection_distinct_documents",
        ),
        Index("ix_connection_user_id", "user_id"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(sa_column=_cascade_fk_column("user.id"))
    source_document_id: UUID = Field(sa_column=_cascade_fk_column("document.id"))
    target_document_id: UUID = Field(sa_column=_cascade_fk_column("document.id"))
    source_annotation_id: UUID | None = Field(
        default=None, sa_column=_set_null_fk_column("annotation.id")
    )
    target_annotation_id: UUID | None = Field(
        default=None, sa_column=_set_null_fk_column("annotation.id")
    )
    connection_type: str = Field(default="related", max_length=50)
    notes: str = Field(default="", sa_column=Column(Text(), nullable=False))
    created_at: datetime = Field(
        default_factory=_utcnow, sa_column=_timestamptz_column()
    )
    updated_at: datetime = Field(
        default_factory=_utcnow, sa_column=_updated_at_column()
    )


class Collection(SQLModel, table=True):
    """A named grouping of a user's documents."""

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(sa_column=_cascade_fk_column("user.id"))
    name: str = Field(max_length=200)
    description: str = Field(default="", sa_column=Column(Text(), nullable=False))
    created_at: datetime = Field(
        default_factory=_utcnow, sa_column=_timestamptz_column()
    )
    updated_at: datetime = Field(
        default_factory=_utcnow, sa_column=_updated_at_column()
    )


class CollectionDocument(SQLModel, table=True):
    """Membership of a document in a collection."""

    __tablename__ = "collection_document"
    __table_args__ = (
        UniqueConstraint(
            "collection_id", "document_id", name="uq_collection_document_pair"
        ),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    collection_id: UUID = Field(sa_column=_cascade_fk_column("collection.id"))
    document_id: UUID = Field(sa_column=_cascade_fk_column("document.id"))
    added_at: datetime = Field(default_factory=_utcnow, sa_column=_timestamptz_column())
