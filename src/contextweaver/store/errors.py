"""Exceptions raised by storage backends.

Pages catch ``StoreError`` and show the message to the user; nothing is
retried automatically.
"""

from __future__ import annotations


class StoreError(Exception):
    """Base class for storage failures (backend, validation, lookup)."""


class NotFoundError(StoreError):
    """A referenced row does not exist or is not owned by the user."""


class InvalidDocumentError(StoreError):
    """A document insert is missing required data."""


class InvalidAnnotationError(StoreError):
    """An annotation insert breaks an offset, text or colour invariant."""


class InvalidConnectionError(StoreError):
    """A connection insert is malformed (same document, unknown type...)."""


class InvalidCollectionError(StoreError):
    """A collection insert is missing required data."""
