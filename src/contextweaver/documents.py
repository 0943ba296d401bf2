"""Document upload helpers and list filtering.

Pure functions used by the documents page and the storage backends.
"""

from __future__ import annotations

from pathlib import PurePath
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from contextweaver.db.models import Document

FILE_TYPES = ("txt", "md")
UPLOAD_ACCEPT = ",".join(f".{t}" for t in FILE_TYPES)


def normalise_newlines(text: str) -> str:
    """Convert CRLF and lone CR line endings to LF."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


def parse_tags(raw: str | Iterable[str]) -> list[str]:
    """Split a comma-separated tag string (or clean a tag list).

    Tags are trimmed, blanks dropped and duplicates removed, keeping the
    first occurrence's position.
    """
    parts = raw.split(",") if isinstance(raw, str) else raw
    tags: list[str] = []
    for part in parts:
        tag = part.strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def title_from_filename(filename: str) -> str:
    """``"notes.final.md"`` -> ``"notes.final"``."""
    return PurePath(filename).stem


def file_type_from_filename(filename: str) -> str:
    """File type from the extension, defaulting to ``txt``."""
    suffix = PurePath(filename).suffix.lower().lstrip(".")
    return suffix if suffix in FILE_TYPES else "txt"


def decode_upload(data: bytes) -> str:
    """Decode uploaded bytes as UTF-8, falling back to latin-1."""
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        return data.decode("latin-1")


def preview(content: str, limit: int) -> str:
    """First *limit* characters of *content*, with an ellipsis if cut."""
    if len(content) <= limit:
        return content
    return content[:limit].rstrip() + "..."


def collect_tags(documents: Iterable[Document]) -> list[str]:
    """All tags used across *documents*, sorted."""
    return sorted({tag for doc in documents for tag in doc.tags})


def filter_documents(
    documents: Sequence[Document],
    query: str = "",
    tags: Iterable[str] = (),
    document_ids: set | None = None,
) -> list[Document]:
    """Filter documents by search text, tags and collection membership.

    Args:
        documents: Documents in display order.
        query: Case-insensitive substring matched against title or content.
        tags: Keep documents carrying any of these tags (empty = no filter).
        document_ids: Keep only these ids (None = no filter).
    """
    needle = query.strip().lower()
    wanted = set(tags)
    result = []
    for doc in documents:
        if needle and not (
            needle in doc.title.lower() or needle in doc.content.lower()
        ):
            continue
        if wanted and not wanted.intersection(doc.tags):
            continue
        if document_ids is not None and doc.id not in document_ids:
            continue
        result.append(doc)
    return result
