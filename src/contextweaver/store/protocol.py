"""Protocol defining the storage interface.

Both DatabaseStore and MemoryStore implement this protocol, allowing the
pages and CLI to use them interchangeably.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Iterable
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


class StoreProtocol(Protocol):
    """Protocol for storage backends.

    Every read and delete is scoped to ``user_id``; rows owned by other
    users behave as if they did not exist.
    """

    async def get_or_create_user(self, email: str, full_name: str = "") -> User:
        """Find a user by email, creating them on first sign-in."""
        ...

    async def get_user_by_email(self, email: str) -> User | None:
        """Find a user by email (case-insensitive) without creating one."""
        ...

    async def list_documents(self, user_id: UUID) -> list[Document]:
        """List the user's documents, newest first."""
        ...

    async def get_document(self, document_id: UUID, user_id: UUID) -> Document | None:
        """Get one of the user's documents, or None."""
        ...

    async def create_document(self, insert: DocumentInsert) -> Document:
        """Create a document.

        Raises:
            InvalidDocumentError: Blank title or unsupported file type.
        """
        ...

    async def delete_document(self, document_id: UUID, user_id: UUID) -> bool:
        """Delete a document with its annotations, connections and memberships."""
        ...

    async def list_annotations(
        self, document_ids: Iterable[UUID], user_id: UUID
    ) -> list[Annotation]:
        """Get the user's annotations on the given documents, oldest first.

        Args:
            document_ids: Documents currently open in the viewer.
            user_id: The signed-in user.

        Returns:
            Annotations in creation order. An empty id list yields [].
        """
        ...

    async def create_annotation(self, insert: AnnotationInsert) -> Annotation:
        """Create an annotation.

        Raises:
            NotFoundError: The document does not exist for this user.
            InvalidAnnotationError: Offsets, text or colour are invalid.
        """
        ...

    async def delete_annotation(self, annotation_id: UUID, user_id: UUID) -> bool:
        """Delete an annotation; anchoring connections lose the reference."""
        ...

    async def list_connections(self, user_id: UUID) -> list[Connection]:
        """List the user's connections, newest first."""
        ...

    async def create_connection(self, insert: ConnectionInsert) -> Connection:
        """Create a connection.

        Raises:
            NotFoundError: A referenced document or annotation is missing.
            InvalidConnectionError: Same document twice or unknown type.
        """
        ...

    async def delete_connection(self, connection_id: UUID, user_id: UUID) -> bool:
        """Delete a connection."""
        ...

    async def list_collections(self, user_id: UUID) -> list[Collection]:
        """List the user's collections by name."""
        ...

    async def create_collection(self, insert: CollectionInsert) -> Collection:
        """Create an empty collection."""
        ...

    async def delete_collection(self, collection_id: UUID, user_id: UUID) -> bool:
        """Delete a collection. Its documents are kept."""
        ...

    async def add_to_collection(
        self, collection_id: UUID, document_id: UUID, user_id: UUID
    ) -> bool:
        """Add a document to a collection. False if already a member."""
        ...

    async def remove_from_collection(
        self, collection_id: UUID, document_id: UUID, user_id: UUID
    ) -> bool:
        """Remove a document from a collection. False if not a member."""
        ...

    async def list_collection_document_ids(
        self, collection_id: UUID, user_id: UUID
    ) -> set[UUID]:
        """Ids of the documents in a collection."""
        ...
