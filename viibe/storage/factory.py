# viibe/storage/factory.py
"""
Factory function for creating the history store.
"""

import logging
from typing import Optional

from viibe.config import get_settings
from viibe.storage.base import KeyValueStore

logger = logging.getLogger(__name__)

# Global singleton instance
_history_store: Optional[KeyValueStore] = None


def get_history_store(
    provider_name: Optional[str] = None,
    **kwargs,
) -> KeyValueStore:
    """
    Get or create the history store instance.

    Args:
        provider_name: 'local', 'memory' or 'sql' (default from HISTORY_STORE_PROVIDER)
        **kwargs: Additional arguments for the provider

    Returns:
        KeyValueStore instance (singleton)
    """
    global _history_store

    if _history_store is not None:
        return _history_store

    settings = get_settings()
    name = (provider_name or settings.HISTORY_STORE_PROVIDER).lower().strip()

    if name == "local":
        from viibe.storage.local_provider import LocalKeyValueStore
        kwargs.setdefault("base_path", settings.LOCAL_STORAGE_PATH)
        _history_store = LocalKeyValueStore(**kwargs)
    elif name == "memory":
        from viibe.storage.memory_provider import InMemoryKeyValueStore
        _history_store = InMemoryKeyValueStore(**kwargs)
    elif name == "sql":
        from viibe.storage.sql_provider import SqlKeyValueStore
        kwargs.setdefault("database_url", settings.DATABASE_URL)
        _history_store = SqlKeyValueStore(**kwargs)
    else:
        raise ValueError(f"Unknown history store provider: {name}. Available: local, memory, sql")

    logger.info(f"History store initialized: {_history_store.name}")
    return _history_store


def set_history_store(store: KeyValueStore) -> None:
    """
    Set a custom history store (useful for testing).
    """
    global _history_store
    _history_store = store


def reset_history_store() -> None:
    """
    Reset the history store singleton (for testing).
    """
    global _history_store
    _history_store = None
