# viibe/storage/__init__.py
"""
Key-value storage abstraction for persisted pipeline state.

The duplicate detector keeps its history log behind this interface so
tests can use memory, local development can use files and shared
deployments can use a database table.
"""

from viibe.storage.base import KeyValueStore
from viibe.storage.factory import (
    get_history_store,
    reset_history_store,
    set_history_store,
)
from viibe.storage.local_provider import LocalKeyValueStore
from viibe.storage.memory_provider import InMemoryKeyValueStore

__all__ = [
    "KeyValueStore",
    "LocalKeyValueStore",
    "InMemoryKeyValueStore",
    "get_history_store",
    "set_history_store",
    "reset_history_store",
]
