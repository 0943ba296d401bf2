"""Store factory.

Provides a factory function to get the configured storage backend
(PostgreSQL or in-memory).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from contextweaver.config import get_settings

if TYPE_CHECKING:
    from contextweaver.store.protocol import StoreProtocol

logger = logging.getLogger(__name__)

# Cached instance so the memory backend keeps its data across requests
_store_instance: StoreProtocol | None = None


def get_store() -> StoreProtocol:
    """Get the storage backend selected by configuration.

    STORE__BACKEND picks explicitly; otherwise the database backend is
    used when DATABASE__URL is set and the memory backend when it is not.

    Returns:
        A store implementing StoreProtocol (singleton per process).
    """
    global _store_instance  # noqa: PLW0603
    if _store_instance is not None:
        return _store_instance

    backend = get_settings().store_backend
    if backend == "database":
        from contextweaver.store.database import DatabaseStore

        _store_instance = DatabaseStore()
    else:
        from contextweaver.store.memory import MemoryStore

        _store_instance = MemoryStore()
    logger.info("Using %s store backend", backend)
    return _store_instance


def clear_store_cache() -> None:
    """Clear the configuration and store caches.

    Useful for testing when you need to reload configuration or start
    with an empty memory store.
    """
    global _store_instance  # noqa: PLW0603
    get_settings.cache_clear()
    _store_instance = None
